"""Derived views over a snapshot of transactions.

Every function here is pure: same input, same output, no clock reads.
The reference month for the trailing series is always passed in by the
caller (see ``tracker.config.AggregationConfig``).
"""
from collections import defaultdict
from functools import reduce
from typing import Dict, Iterable, Optional, Tuple

from tracker.domain import (
    Budget,
    BudgetComparison,
    CategoryTotal,
    MonthlyTotals,
    SummaryTotals,
    Transaction,
    is_income,
    month_key,
    month_label,
    shift_month,
)

DEFAULT_WINDOW_SIZE = 6


def summarize(trans: Iterable[Transaction]) -> SummaryTotals:
    income, expenses = reduce(
        lambda acc, t: (acc[0] + t.amount, acc[1]) if is_income(t) else (acc[0], acc[1] + t.amount),
        trans,
        (0, 0),
    )
    return SummaryTotals(total_income=income, total_expenses=expenses, net_savings=income - expenses)


def _expenses_by_category(trans: Iterable[Transaction]) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(int)
    for t in trans:
        if not is_income(t):
            totals[t.category] += t.amount
    return totals


def _by_amount_desc(item: Tuple[str, float]):
    # highest first, ties by category name
    return (-item[1], item[0])


def category_breakdown(trans: Iterable[Transaction]) -> Tuple[CategoryTotal, ...]:
    totals = _expenses_by_category(trans)
    return tuple(
        CategoryTotal(category=cat, total_amount=total)
        for cat, total in sorted(totals.items(), key=_by_amount_desc)
    )


def monthly_series(
    trans: Iterable[Transaction],
    reference_month: str,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> Tuple[MonthlyTotals, ...]:
    """Income and expenses for the ``window_size`` months ending at ``reference_month``.

    Rows run oldest to newest and always number ``window_size``; months with
    no activity stay at zero and transactions outside the window are skipped.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")

    keys = [shift_month(reference_month, -i) for i in range(window_size - 1, -1, -1)]
    buckets: Dict[str, list] = {k: [0, 0] for k in keys}

    for t in trans:
        bucket = buckets.get(month_key(t.date))
        if bucket is None:
            continue
        if is_income(t):
            bucket[0] += t.amount
        else:
            bucket[1] += t.amount

    return tuple(
        MonthlyTotals(month_label=month_label(k), month_key=k, income=buckets[k][0], expenses=buckets[k][1])
        for k in keys
    )


def budget_vs_actual(
    trans: Iterable[Transaction], budget: Optional[Budget]
) -> Tuple[BudgetComparison, ...]:
    """Budgeted categories of ``budget.month`` next to what was actually spent.

    Categories with a zero or missing limit produce no row, even when money
    was spent in them. ``remaining`` never drops below zero; overspending
    shows up as ``actual > budgeted``.
    """
    if budget is None:
        return ()

    actual = _expenses_by_category(t for t in trans if month_key(t.date) == budget.month)

    rows = [
        BudgetComparison(
            category=cat,
            budgeted=limit,
            actual=actual.get(cat, 0),
            remaining=max(0, limit - actual.get(cat, 0)),
        )
        for cat, limit in budget.categories.items()
        if limit > 0
    ]
    return tuple(sorted(rows, key=lambda r: (-r.actual, r.category)))
