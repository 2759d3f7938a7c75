"""
Tests for correlation reporting helpers.
"""

import pytest
from kalshi_correlator.correlation.models import CorrelationRecord
from kalshi_correlator.report import (
    correlation_strength,
    find_correlated_with,
    find_top_correlations,
    format_correlation_table,
    format_top_correlations,
    summarize,
)


@pytest.fixture
def records():
    return [
        CorrelationRecord("A", "B", 0.35, 20, "Event A", "Event B"),
        CorrelationRecord("A", "C", -0.92, 25, "Event A", "Event C"),
        CorrelationRecord("B", "C", 0.10, 30, "Event B", "Event C"),
        CorrelationRecord("C", "D", 0.75, 15, "Event C", None),
    ]


class TestStrength:
    """Tests for strength labels."""

    @pytest.mark.parametrize(
        "value,label",
        [
            (0.95, "Very Strong"),
            (-0.9, "Very Strong"),
            (0.7, "Strong"),
            (-0.55, "Moderate"),
            (0.3, "Weak"),
            (0.29, "Very Weak"),
            (0.0, "Very Weak"),
        ],
    )
    def test_labels(self, value, label):
        assert correlation_strength(value) == label


class TestFilters:
    """Tests for ranking and filtering."""

    def test_top_by_absolute_value(self, records):
        top = find_top_correlations(records, top=2)
        assert [r.correlation for r in top] == [-0.92, 0.75]

    def test_top_does_not_reorder_input(self, records):
        before = list(records)
        find_top_correlations(records)
        assert records == before

    def test_correlated_with(self, records):
        result = find_correlated_with("C", records, threshold=0.3)
        assert [(r.market_a, r.market_b) for r in result] == [("A", "C"), ("C", "D")]

    def test_correlated_with_unknown_market(self, records):
        assert find_correlated_with("Z", records) == []


class TestSummary:
    """Tests for summary statistics."""

    def test_summary(self, records):
        stats = summarize(records, threshold=0.3)
        assert stats["total_pairs"] == 4
        assert stats["significant"] == 3
        assert stats["positive"] == 2
        assert stats["negative"] == 1
        assert stats["average_abs_correlation"] == pytest.approx((0.35 + 0.92 + 0.75) / 3)

    def test_summary_nothing_significant(self, records):
        stats = summarize(records, threshold=0.99)
        assert stats["significant"] == 0
        assert stats["average_abs_correlation"] is None


class TestFormatting:
    """Tests for plain-text output."""

    def test_table_lists_significant_rows(self, records):
        table = format_correlation_table(records, threshold=0.3)
        assert "-0.920" in table
        assert "Very Strong" in table
        assert "0.100" not in table
        assert "N/A" in table
        assert "Total pairs analyzed: 4" in table

    def test_table_strongest_first(self, records):
        table = format_correlation_table(records, threshold=0.3)
        assert table.index("-0.920") < table.index("0.750") < table.index("0.350")

    def test_table_nothing_above_threshold(self, records):
        assert format_correlation_table(records, threshold=0.99) == (
            "No correlations found above threshold 0.99"
        )

    def test_long_titles_truncated(self):
        record = CorrelationRecord("A", "B", 0.8, 12, "x" * 80, "Event B")
        table = format_correlation_table([record])
        assert "x" * 80 not in table
        assert "..." in table

    def test_top_list(self, records):
        text = format_top_correlations(find_top_correlations(records, 2))
        lines = text.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith(" 1. A")
        assert lines[0].endswith("- -0.920")

    def test_top_list_empty(self):
        assert format_top_correlations([]) == "No significant correlations found"
