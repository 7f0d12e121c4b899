from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, TypeVar

from tracker.domain import Budget, Transaction, parse_month_key

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

MIN_AMOUNT = 0.01


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def to_either(self, error: E) -> 'Either[E, T]':
        pass

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def to_either(self, error: E) -> 'Either[E, T]':
        return Right(self._value)

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def to_either(self, error: E) -> 'Either[E, T]':
        return Left(error)

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def find_transaction(trans: Iterable[Transaction], tx_id: str) -> Maybe[Transaction]:
    for t in trans:
        if t.id == tx_id:
            return Some(t)
    return Nothing()


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if t.amount is None or t.amount < MIN_AMOUNT:
        return Left({
            "error": "invalid_amount",
            "message": f"Amount must be at least {MIN_AMOUNT}",
            "amount": t.amount,
        })

    if not (t.description or "").strip():
        return Left({
            "error": "missing_description",
            "message": "Description is required",
        })

    if not (t.category or "").strip():
        return Left({
            "error": "missing_category",
            "message": "Category is required",
        })

    return Right(t)


def validate_budget(b: Budget) -> Either[dict, Budget]:
    try:
        parse_month_key(b.month)
    except ValueError as e:
        return Left({
            "error": "invalid_month",
            "message": str(e),
            "month": b.month,
        })

    negative = sorted(cat for cat, limit in b.categories.items() if limit < 0)
    if negative:
        return Left({
            "error": "negative_limit",
            "message": f"Budget limits cannot be negative: {', '.join(negative)}",
            "categories": negative,
        })

    return Right(b)
