from datetime import date
from itertools import islice
from typing import Callable, Iterable, Iterator, Tuple

from tracker.domain import Transaction, month_key

RECENT_LIMIT = 5


def by_category(category: str):
    def _filter(t: Transaction) -> bool:
        return t.category == category

    return _filter


def by_month(key: str):
    def _filter(t: Transaction) -> bool:
        return month_key(t.date) == key

    return _filter


def by_date_range(start: date, end: date):
    def _filter(t: Transaction) -> bool:
        return start <= t.date <= end

    return _filter


def matching_description(text: str):
    needle = text.strip().lower()

    def _filter(t: Transaction) -> bool:
        return needle in t.description.lower()

    return _filter


def all_of(*preds: Callable[[Transaction], bool]):
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def iter_transactions(
    trans: Iterable[Transaction], pred: Callable[[Transaction], bool]
) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def sort_by_date_desc(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    # newest first; same-day entries keep the most recently created on top
    return tuple(sorted(
        trans,
        key=lambda t: (t.date, t.created_at.timestamp() if t.created_at else 0.0),
        reverse=True,
    ))


def recent_transactions(trans: Iterable[Transaction], k: int = RECENT_LIMIT) -> Iterator[Transaction]:
    yield from islice(sort_by_date_desc(trans), max(0, k))
