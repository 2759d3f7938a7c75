"""Collapse correlation records for the same market pair."""

from .models import CorrelationRecord


def _wins(candidate: CorrelationRecord, existing: CorrelationRecord) -> bool:
    """More data points wins; on a tie, the stronger correlation."""
    if candidate.data_points != existing.data_points:
        return candidate.data_points > existing.data_points
    return abs(candidate.correlation) > abs(existing.correlation)


def merge(records: list[CorrelationRecord]) -> list[CorrelationRecord]:
    """
    Deduplicate correlations from multiple analysis windows or runs.

    Records are keyed by their unordered market pair. When a key repeats,
    the record backed by more data points is kept, then the one with the
    larger absolute correlation; on a full tie the first one seen stays.

    Returns:
        One record per pair, in no particular order
    """
    by_pair: dict[tuple[str, str], CorrelationRecord] = {}

    for record in records:
        key = record.pair_key()
        existing = by_pair.get(key)

        if existing is None or _wins(record, existing):
            by_pair[key] = record

    return list(by_pair.values())
