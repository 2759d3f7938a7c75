"""
Console reporting for correlation results.

Read-only views over a list of CorrelationRecord: ranking, filtering,
summary numbers and plain-text tables. Nothing here mutates its input.
"""

from .correlation.models import CorrelationRecord

DEFAULT_THRESHOLD = 0.3

# (minimum |r|, label), strongest first
STRENGTH_LEVELS = [
    (0.9, "Very Strong"),
    (0.7, "Strong"),
    (0.5, "Moderate"),
    (0.3, "Weak"),
]

# Column widths: market, event, market, event, correlation, strength, points
COLUMN_WIDTHS = [20, 30, 20, 30, 12, 12, 12]
TABLE_HEADER = [
    "Market 1", "Event 1", "Market 2", "Event 2",
    "Correlation", "Strength", "Data Points",
]


def correlation_strength(correlation: float) -> str:
    """Describe the strength of a correlation."""
    value = abs(correlation)
    for minimum, label in STRENGTH_LEVELS:
        if value >= minimum:
            return label
    return "Very Weak"


def _by_strength(records: list[CorrelationRecord]) -> list[CorrelationRecord]:
    return sorted(records, key=lambda r: abs(r.correlation), reverse=True)


def find_top_correlations(records: list[CorrelationRecord], top: int = 10) -> list[CorrelationRecord]:
    """Strongest correlations by absolute value."""
    return _by_strength(records)[:top]


def find_correlated_with(
    market_ticker: str,
    records: list[CorrelationRecord],
    threshold: float = DEFAULT_THRESHOLD,
) -> list[CorrelationRecord]:
    """Correlations involving one market, strongest first."""
    return _by_strength(
        [
            r for r in records
            if market_ticker in (r.market_a, r.market_b) and abs(r.correlation) >= threshold
        ]
    )


def summarize(records: list[CorrelationRecord], threshold: float = DEFAULT_THRESHOLD) -> dict:
    """
    Summary statistics over the records.

    Returns:
        Dict with total_pairs, significant, positive, negative and
        average_abs_correlation (over significant records, None if none)
    """
    significant = [r for r in records if abs(r.correlation) >= threshold]

    average = None
    if significant:
        average = sum(abs(r.correlation) for r in significant) / len(significant)

    return {
        "total_pairs": len(records),
        "significant": len(significant),
        "positive": sum(1 for r in significant if r.correlation > 0),
        "negative": sum(1 for r in significant if r.correlation < 0),
        "average_abs_correlation": average,
    }


def _cell(value: str, width: int) -> str:
    if len(value) > width - 1:
        value = value[:width - 4] + "..."
    return value.ljust(width)


def _row(values: list[str]) -> str:
    return "".join(_cell(v, w) for v, w in zip(values, COLUMN_WIDTHS)).rstrip()


def format_correlation_table(
    records: list[CorrelationRecord], threshold: float = DEFAULT_THRESHOLD
) -> str:
    """
    Table of correlations with |r| >= threshold, strongest first.

    Includes the summary statistics below the table.
    """
    significant = [r for r in _by_strength(records) if abs(r.correlation) >= threshold]
    if not significant:
        return f"No correlations found above threshold {threshold:.2f}"

    rule = "=" * sum(COLUMN_WIDTHS)
    lines = [
        "Cross-Event Correlation Analysis Results",
        "(Markets from the same event are excluded)",
        rule,
        _row(TABLE_HEADER),
        "-" * sum(COLUMN_WIDTHS),
    ]

    for r in significant:
        lines.append(
            _row([
                r.market_a,
                r.event_title_a or "N/A",
                r.market_b,
                r.event_title_b or "N/A",
                f"{r.correlation:.3f}",
                correlation_strength(r.correlation),
                str(r.data_points),
            ])
        )

    stats = summarize(records, threshold)
    lines += [
        "",
        "Summary Statistics",
        f"Total pairs analyzed: {stats['total_pairs']}",
        f"Significant correlations (|r| >= {threshold}): {stats['significant']}",
        f"Positive correlations: {stats['positive']}",
        f"Negative correlations: {stats['negative']}",
        f"Average absolute correlation: {stats['average_abs_correlation']:.3f}",
        rule,
    ]
    return "\n".join(lines)


def format_top_correlations(records: list[CorrelationRecord]) -> str:
    """Numbered list of records in the given order, one per line."""
    if not records:
        return "No significant correlations found"

    lines = []
    for index, r in enumerate(records, start=1):
        symbol = "+" if r.correlation > 0 else "-"
        lines.append(
            f"{index:>2}. {r.market_a:<25} <-> {r.market_b:<25} "
            f"{symbol} {r.correlation:.3f}"
        )
    return "\n".join(lines)
