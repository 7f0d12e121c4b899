import json
import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from tracker.domain import Budget, Transaction

logger = logging.getLogger(__name__)

# Fields a caller may change on an existing transaction
EDITABLE_FIELDS = ("amount", "date", "description", "category")


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # accept full ISO timestamps like "2024-03-01T00:00:00.000Z"
    return date.fromisoformat(str(value)[:10])


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def transaction_from_dict(d: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=str(d["id"]),
        amount=float(d["amount"]),
        date=parse_date(d["date"]),
        description=d.get("description", ""),
        category=d.get("category", ""),
        created_at=_parse_timestamp(d.get("created_at")),
        updated_at=_parse_timestamp(d.get("updated_at")),
    )


def transaction_to_dict(t: Transaction) -> Dict[str, Any]:
    return {
        "id": t.id,
        "amount": t.amount,
        "date": t.date.isoformat(),
        "description": t.description,
        "category": t.category,
        "created_at": _format_timestamp(t.created_at),
        "updated_at": _format_timestamp(t.updated_at),
    }


def budget_from_dict(d: Mapping[str, Any]) -> Budget:
    return Budget(
        month=d["month"],
        categories={k: float(v) for k, v in (d.get("categories") or {}).items()},
        created_at=_parse_timestamp(d.get("created_at")),
        updated_at=_parse_timestamp(d.get("updated_at")),
    )


def budget_to_dict(b: Budget) -> Dict[str, Any]:
    return {
        "month": b.month,
        "categories": dict(b.categories),
        "created_at": _format_timestamp(b.created_at),
        "updated_at": _format_timestamp(b.updated_at),
    }


def load_seed(path) -> Tuple[Tuple[Transaction, ...], Tuple[Budget, ...]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    transactions = tuple(transaction_from_dict(t) for t in data.get("transactions", []))
    budgets = tuple(budget_from_dict(b) for b in data.get("budgets", []))
    logger.debug("Loaded %d transactions and %d budgets from %s", len(transactions), len(budgets), path)

    return transactions, budgets


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction
) -> Tuple[Transaction, ...]:
    return trans + (t,)


def edit_transaction(t: Transaction, changes: Mapping[str, Any], now: datetime) -> Transaction:
    """Apply a partial edit; ``id`` and ``created_at`` never change."""
    fields = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "date" in fields:
        fields["date"] = parse_date(fields["date"])
    return replace(t, **fields, updated_at=now)


def replace_transaction(
    trans: Tuple[Transaction, ...], edited: Transaction
) -> Tuple[Transaction, ...]:
    return tuple(edited if t.id == edited.id else t for t in trans)


def delete_transaction(
    trans: Tuple[Transaction, ...], tx_id: str
) -> Tuple[Transaction, ...]:
    return tuple(t for t in trans if t.id != tx_id)


def upsert_budget(
    budgets: Tuple[Budget, ...], month: str, categories: Mapping[str, float], now: datetime
) -> Tuple[Budget, ...]:
    """Create or replace the budget for ``month``; the categories mapping is overwritten, not merged."""
    existing = next((b for b in budgets if b.month == month), None)
    saved = Budget(
        month=month,
        categories=dict(categories),
        created_at=existing.created_at if existing else now,
        updated_at=now,
    )
    if existing is None:
        return budgets + (saved,)
    return tuple(saved if b.month == month else b for b in budgets)
