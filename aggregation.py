"""
Dashboard aggregation over a list of expenses.

Everything here is a pure function of its input: the views are recomputed
from the current list (and filter) every time, nothing is cached. Any object
with ``amount``, ``category`` and ``created_at`` attributes works, ORM rows
and ``ExpenseOut`` models alike.
"""

from typing import Dict, Iterable, List, Optional, Tuple

ALL_CATEGORIES = "All"


def filter_by_category(expenses: Iterable, category: Optional[str] = None) -> list:
    """Case-insensitive category filter; no category (or "All") keeps everything."""
    expenses = list(expenses)
    if not category or category.lower() == ALL_CATEGORIES.lower():
        return expenses
    wanted = category.lower()
    return [e for e in expenses if e.category.lower() == wanted]


def total(expenses: Iterable) -> float:
    return sum((float(e.amount) for e in expenses), 0.0)


def category_breakdown(expenses: Iterable) -> Dict[str, float]:
    """Sum of amounts per category, keyed in order of first appearance."""
    totals: Dict[str, float] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, 0.0) + float(e.amount)
    return totals


def monthly_breakdown(expenses: Iterable) -> List[Tuple[str, float]]:
    """Sum of amounts per calendar month of creation, oldest month first.

    Labels look like ``"Oct 2026"``.
    """
    totals: Dict[Tuple[int, int], float] = {}
    for e in expenses:
        key = (e.created_at.year, e.created_at.month)
        totals[key] = totals.get(key, 0.0) + float(e.amount)

    months = []
    for (year, month) in sorted(totals):
        label = _month_label(year, month)
        months.append((label, totals[(year, month)]))
    return months


def summarize(expenses: Iterable, category: Optional[str] = None) -> dict:
    visible = filter_by_category(expenses, category)
    return {
        "total": total(visible),
        "count": len(visible),
        "by_category": category_breakdown(visible),
        "by_month": [{"month": m, "total": t} for m, t in monthly_breakdown(visible)],
    }


def _month_label(year: int, month: int) -> str:
    # strftime's %b is locale dependent; the dashboard always shows English
    return "%s %04d" % (_MONTHS[month - 1], year)


_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
