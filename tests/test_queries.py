from datetime import date, datetime, timezone

from tracker.domain import Transaction
from tracker.queries import (
    all_of, by_category, by_date_range, by_month, iter_transactions,
    matching_description, recent_transactions, sort_by_date_desc,
)


def make_tx(id, d, description="x", category="Food", created_at=None):
    return Transaction(id, 10, date.fromisoformat(d), description, category, created_at, created_at)


TRANS = (
    make_tx("t1", "2024-01-15", "Weekly groceries"),
    make_tx("t2", "2024-02-01", "Rent February", "Housing"),
    make_tx("t3", "2024-02-20", "GROCERIES top-up"),
    make_tx("t4", "2024-03-05", "Salary", "Income"),
)


def test_predicates():
    assert [t.id for t in iter_transactions(TRANS, by_category("Food"))] == ["t1", "t3"]
    assert [t.id for t in iter_transactions(TRANS, by_month("2024-02"))] == ["t2", "t3"]
    assert [t.id for t in iter_transactions(TRANS, by_date_range(date(2024, 2, 1), date(2024, 3, 5)))] == ["t2", "t3", "t4"]


def test_matching_description_is_case_insensitive():
    assert [t.id for t in iter_transactions(TRANS, matching_description(" groceries "))] == ["t1", "t3"]
    assert list(iter_transactions(TRANS, matching_description("nothing like this"))) == []


def test_iter_transactions_is_lazy():
    seen = []

    def pred(t):
        seen.append(t.id)
        return True

    it = iter_transactions(TRANS, pred)
    assert seen == []
    next(it)
    assert seen == ["t1"]


def test_sort_by_date_desc():
    assert [t.id for t in sort_by_date_desc(TRANS)] == ["t4", "t3", "t2", "t1"]


def test_sort_same_day_by_creation():
    early = make_tx("a", "2024-02-01", created_at=datetime(2024, 2, 1, 8, tzinfo=timezone.utc))
    late = make_tx("b", "2024-02-01", created_at=datetime(2024, 2, 1, 20, tzinfo=timezone.utc))
    assert [t.id for t in sort_by_date_desc((early, late))] == ["b", "a"]


def test_recent_transactions():
    many = tuple(make_tx(f"t{i}", f"2024-01-{i:02d}") for i in range(1, 11))
    assert [t.id for t in recent_transactions(many)] == ["t10", "t9", "t8", "t7", "t6"]
    assert [t.id for t in recent_transactions(many, 2)] == ["t10", "t9"]
    assert list(recent_transactions((), 5)) == []


def test_all_of_combines_filters():
    pred = all_of(by_category("Food"), by_month("2024-02"), matching_description("groceries"))
    assert [t.id for t in iter_transactions(TRANS, pred)] == ["t3"]
    assert [t.id for t in iter_transactions(TRANS, all_of())] == ["t1", "t2", "t3", "t4"]
