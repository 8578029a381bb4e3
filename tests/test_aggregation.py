from datetime import datetime
from types import SimpleNamespace

import pytest

from aggregation import (
    category_breakdown,
    filter_by_category,
    monthly_breakdown,
    summarize,
    total,
)


def expense(amount, category="Food", created_at=datetime(2026, 10, 1, 12, 0)):
    return SimpleNamespace(amount=amount, category=category, created_at=created_at)


@pytest.fixture
def sample():
    return [
        expense(200, "Food", datetime(2026, 10, 5)),
        expense(50, "Travel", datetime(2026, 10, 2)),
        expense(19.99, "Shopping", datetime(2026, 9, 30, 23, 59)),
        expense(30, "Food", datetime(2025, 12, 31)),
        expense(120.5, "Bills", datetime(2026, 1, 15)),
    ]


class TestTotal:

    def test_empty(self):
        assert total([]) == 0

    def test_sum(self):
        assert total([expense(200), expense(50)]) == 250


class TestCategoryBreakdown:

    def test_groups_by_category(self):
        result = category_breakdown([expense(200, "Food"), expense(50, "Travel"), expense(25, "Food")])
        assert result == {"Food": 225, "Travel": 50}

    def test_keys_in_first_seen_order(self, sample):
        assert list(category_breakdown(sample)) == ["Food", "Travel", "Shopping", "Bills"]

    def test_sum_preserving(self, sample):
        assert sum(category_breakdown(sample).values()) == pytest.approx(total(sample))

    def test_empty(self):
        assert category_breakdown([]) == {}


class TestMonthlyBreakdown:

    def test_labels_and_chronological_order(self, sample):
        result = monthly_breakdown(sample)
        assert [label for label, _ in result] == ["Dec 2025", "Jan 2026", "Sep 2026", "Oct 2026"]
        assert dict(result)["Oct 2026"] == 250
        assert dict(result)["Sep 2026"] == pytest.approx(19.99)

    def test_same_month_different_year_kept_apart(self):
        result = monthly_breakdown([
            expense(1, created_at=datetime(2025, 3, 1)),
            expense(2, created_at=datetime(2026, 3, 1)),
        ])
        assert result == [("Mar 2025", 1), ("Mar 2026", 2)]


class TestFilterAndSummary:

    def test_filter_is_case_insensitive(self, sample):
        assert [e.amount for e in filter_by_category(sample, "food")] == [200, 30]

    @pytest.mark.parametrize("category", [None, "", "All", "all"])
    def test_no_filter(self, sample, category):
        assert len(filter_by_category(sample, category)) == len(sample)

    def test_summary_over_filtered_view(self, sample):
        result = summarize(sample, "Food")
        assert result["total"] == 230
        assert result["count"] == 2
        assert result["by_category"] == {"Food": 230}
        assert result["by_month"] == [
            {"month": "Dec 2025", "total": 30},
            {"month": "Oct 2026", "total": 200},
        ]

    def test_summary_recomputes_from_input(self, sample):
        before = summarize(sample)
        sample.append(expense(10, "Other"))
        after = summarize(sample)
        assert after["total"] == pytest.approx(before["total"] + 10)
        assert after["count"] == before["count"] + 1
