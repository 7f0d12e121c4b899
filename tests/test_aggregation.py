from datetime import date

import pytest

from tracker.aggregation import budget_vs_actual, category_breakdown, monthly_series, summarize
from tracker.domain import Budget, BudgetComparison, CategoryTotal, SummaryTotals, Transaction


def make_tx(id, amount, category, d, description="x"):
    return Transaction(id=id, amount=amount, date=date.fromisoformat(d), description=description, category=category)


@pytest.fixture
def march():
    return (
        make_tx("t1", 1000, "Income", "2024-03-01", "Salary"),
        make_tx("t2", 200, "Food", "2024-03-05", "Groceries"),
    )


def test_summary_scenario(march):
    assert summarize(march) == SummaryTotals(total_income=1000, total_expenses=200, net_savings=800)


def test_summary_empty():
    s = summarize(())
    assert s.total_income == 0
    assert s.total_expenses == 0
    assert s.net_savings == 0


def test_summary_splits_by_income_category():
    trans = (
        make_tx("t1", 50.5, "Income", "2024-01-01"),
        make_tx("t2", 20.25, "Housing", "2024-01-02"),
        make_tx("t3", 10, "Crypto", "2024-01-03"),
        make_tx("t4", 100, "Income", "2024-02-01"),
    )
    s = summarize(trans)
    assert s.total_income == 150.5
    assert s.total_expenses == 30.25
    assert s.total_income + s.total_expenses == sum(t.amount for t in trans)
    assert s.net_savings == s.total_income - s.total_expenses


def test_summary_sums_negative_amounts_as_given():
    trans = (
        make_tx("t1", 100, "Income", "2024-01-01"),
        make_tx("t2", -30, "Food", "2024-01-02"),
    )
    s = summarize(trans)
    assert s.total_expenses == -30
    assert s.net_savings == 130


def test_category_breakdown_scenario(march):
    assert category_breakdown(march) == (CategoryTotal(category="Food", total_amount=200),)


def test_category_breakdown_order_and_ties():
    trans = (
        make_tx("t1", 40, "Other", "2024-01-01"),
        make_tx("t2", 40, "Entertainment", "2024-01-02"),
        make_tx("t3", 25, "Food", "2024-01-03"),
        make_tx("t4", 50, "Food", "2024-01-04"),
        make_tx("t5", 500, "Income", "2024-01-05"),
    )
    result = category_breakdown(trans)
    assert [(r.category, r.total_amount) for r in result] == [
        ("Food", 75),
        ("Entertainment", 40),
        ("Other", 40),
    ]
    # input order does not matter
    assert category_breakdown(tuple(reversed(trans))) == result


def test_category_breakdown_matches_total_expenses():
    trans = (
        make_tx("t1", 12.5, "Food", "2024-01-01"),
        make_tx("t2", 7.5, "Pets", "2024-01-02"),
        make_tx("t3", 300, "Income", "2024-01-03"),
        make_tx("t4", 80, "Housing", "2024-01-04"),
    )
    assert sum(r.total_amount for r in category_breakdown(trans)) == summarize(trans).total_expenses
    assert "Pets" in [r.category for r in category_breakdown(trans)]


def test_category_breakdown_empty():
    assert category_breakdown(()) == ()
    assert category_breakdown((make_tx("t1", 10, "Income", "2024-01-01"),)) == ()


def test_monthly_series_empty_window():
    rows = monthly_series((), "2024-06", 6)
    assert [r.month_key for r in rows] == ["2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06"]
    assert [r.month_label for r in rows] == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
    assert all(r.income == 0 and r.expenses == 0 for r in rows)


def test_monthly_series_crosses_year_boundary():
    trans = (
        make_tx("t1", 300, "Income", "2023-11-15"),
        make_tx("t2", 40, "Food", "2024-02-01"),
        make_tx("t3", 60, "Food", "2024-02-28"),
        make_tx("t4", 999, "Food", "2023-10-31"),
        make_tx("t5", 999, "Food", "2024-03-01"),
    )
    rows = monthly_series(trans, "2024-02", 4)
    assert [r.month_key for r in rows] == ["2023-11", "2023-12", "2024-01", "2024-02"]
    assert rows[0].income == 300
    assert rows[0].expenses == 0
    assert rows[3].expenses == 100
    assert sum(r.expenses for r in rows) == 100


def test_monthly_series_length_is_window_size():
    trans = tuple(make_tx(str(i), 1, "Food", "2024-01-01") for i in range(10000))
    assert len(monthly_series(trans, "2024-06", 6)) == 6
    assert len(monthly_series((), "2024-06", 12)) == 12
    assert len(monthly_series(trans, "2024-06", 1)) == 1


def test_monthly_series_rejects_empty_window():
    with pytest.raises(ValueError):
        monthly_series((), "2024-06", 0)


def test_monthly_series_rejects_bad_reference_month():
    with pytest.raises(ValueError):
        monthly_series((), "2024-6", 6)


def test_budget_scenario(march):
    budget = Budget(month="2024-03", categories={"Food": 300})
    assert budget_vs_actual(march, budget) == (
        BudgetComparison(category="Food", budgeted=300, actual=200, remaining=100),
    )


def test_budget_excludes_zero_and_missing_limits():
    trans = (
        make_tx("t1", 80, "Entertainment", "2024-03-02"),
        make_tx("t2", 20, "Gifts", "2024-03-03"),
        make_tx("t3", 10, "Food", "2024-03-04"),
    )
    budget = Budget(month="2024-03", categories={"Entertainment": 0, "Food": 50})
    rows = budget_vs_actual(trans, budget)
    assert [r.category for r in rows] == ["Food"]


def test_budget_only_counts_expenses_in_month():
    trans = (
        make_tx("t1", 100, "Food", "2024-03-31"),
        make_tx("t2", 100, "Food", "2024-04-01"),
        make_tx("t3", 100, "Food", "2024-02-29"),
        make_tx("t4", 5000, "Income", "2024-03-01"),
    )
    budget = Budget(month="2024-03", categories={"Food": 150, "Income": 1000})
    rows = {r.category: r for r in budget_vs_actual(trans, budget)}
    assert rows["Food"].actual == 100
    assert rows["Income"].actual == 0
    assert rows["Income"].remaining == 1000


def test_budget_remaining_clamped_and_overspend_kept():
    trans = (make_tx("t1", 450, "Housing", "2024-03-10"),)
    budget = Budget(month="2024-03", categories={"Housing": 400})
    (row,) = budget_vs_actual(trans, budget)
    assert row.remaining == 0
    assert row.actual == 450
    assert row.over_budget
    assert row.usage == pytest.approx(112.5)


def test_budget_order_by_actual_then_name():
    trans = (
        make_tx("t1", 30, "Food", "2024-03-10"),
        make_tx("t2", 90, "Housing", "2024-03-10"),
    )
    budget = Budget(month="2024-03", categories={"Utilities": 10, "Food": 100, "Clothing": 10, "Housing": 100})
    rows = budget_vs_actual(trans, budget)
    assert [r.category for r in rows] == ["Housing", "Food", "Clothing", "Utilities"]


def test_budget_missing():
    assert budget_vs_actual((make_tx("t1", 1, "Food", "2024-03-01"),), None) == ()


def test_aggregators_are_repeatable(march):
    budget = Budget(month="2024-03", categories={"Food": 300})
    assert summarize(march) == summarize(march)
    assert category_breakdown(march) == category_breakdown(march)
    assert monthly_series(march, "2024-03") == monthly_series(march, "2024-03")
    assert budget_vs_actual(march, budget) == budget_vs_actual(march, budget)
