"""
Tests for merging duplicate pair records.
"""

from kalshi_correlator.correlation.merge import merge
from kalshi_correlator.correlation.models import CorrelationRecord


class TestMerge:
    """Tests for deduplicating records across windows and runs."""

    def test_more_data_points_wins(self):
        small = CorrelationRecord("A", "B", 0.9, 12)
        large = CorrelationRecord("A", "B", 0.2, 20)
        assert merge([small, large]) == [large]
        assert merge([large, small]) == [large]

    def test_tie_goes_to_stronger_correlation(self):
        weak = CorrelationRecord("A", "B", 0.4, 20)
        strong = CorrelationRecord("A", "B", -0.7, 20)
        assert merge([weak, strong]) == [strong]
        assert merge([strong, weak]) == [strong]

    def test_full_tie_keeps_first(self):
        first = CorrelationRecord("A", "B", 0.5, 20, event_title_a="first")
        second = CorrelationRecord("A", "B", -0.5, 20, event_title_a="second")
        assert merge([first, second]) == [first]

    def test_pair_order_does_not_matter(self):
        """(A, B) and (B, A) are the same pair."""
        forward = CorrelationRecord("A", "B", 0.3, 12)
        reverse = CorrelationRecord("B", "A", 0.3, 15)
        assert merge([forward, reverse]) == [reverse]

    def test_distinct_pairs_untouched(self):
        records = [
            CorrelationRecord("A", "B", 0.3, 12),
            CorrelationRecord("A", "C", 0.4, 12),
            CorrelationRecord("B", "C", 0.5, 12),
        ]
        merged = merge(records)
        assert len(merged) == 3
        assert {r.pair_key() for r in merged} == {("A", "B"), ("A", "C"), ("B", "C")}

    def test_empty(self):
        assert merge([]) == []

    def test_input_not_modified(self):
        records = [CorrelationRecord("A", "B", 0.3, 12), CorrelationRecord("B", "A", 0.8, 30)]
        merge(records)
        assert len(records) == 2
