import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional, Tuple

INCOME_CATEGORY = "Income"

CATEGORIES: Tuple[str, ...] = (
    "Housing",
    "Transportation",
    "Food",
    "Utilities",
    "Insurance",
    "Healthcare",
    "Savings",
    "Personal",
    "Entertainment",
    "Clothing",
    "Education",
    "Gifts",
    INCOME_CATEGORY,
    "Other",
)

EXPENSE_CATEGORIES: Tuple[str, ...] = tuple(c for c in CATEGORIES if c != INCOME_CATEGORY)

_MONTH_KEY = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float        # magnitude, direction comes from category
    date: date
    description: str
    category: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# One document per month, limits keyed by category name
@dataclass(frozen=True)
class Budget:
    month: str  # "YYYY-MM"
    categories: Dict[str, float] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SummaryTotals:
    total_income: float
    total_expenses: float
    net_savings: float


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total_amount: float


@dataclass(frozen=True)
class MonthlyTotals:
    month_label: str
    month_key: str
    income: float
    expenses: float


@dataclass(frozen=True)
class BudgetComparison:
    category: str
    budgeted: float
    actual: float
    remaining: float

    @property
    def over_budget(self) -> bool:
        return self.actual > self.budgeted

    @property
    def usage(self) -> float:
        """Spent share of the limit, in percent."""
        if not self.budgeted:
            return 0.0
        return self.actual / self.budgeted * 100


def is_income(t: Transaction) -> bool:
    return t.category == INCOME_CATEGORY


def default_budget_categories() -> Dict[str, float]:
    return {c: 0 for c in EXPENSE_CATEGORIES}


def month_key(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def parse_month_key(key: str) -> Tuple[int, int]:
    m = _MONTH_KEY.match(key or "")
    if not m:
        raise ValueError(f"Invalid month key {key!r}, expected YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month key {key!r}, month out of range")
    return year, month


def shift_month(key: str, n: int) -> str:
    """Move a month key n calendar months forward (negative n goes back)."""
    year, month = parse_month_key(key)
    idx = year * 12 + (month - 1) + n
    return f"{idx // 12:04d}-{idx % 12 + 1:02d}"


def month_label(key: str) -> str:
    year, month = parse_month_key(key)
    return date(year, month, 1).strftime("%b")


def current_month_year(today: Optional[date] = None) -> str:
    return month_key(today or date.today())
