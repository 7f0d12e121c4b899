import json
import logging
import os
import tempfile
from dataclasses import replace
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple
from uuid import uuid4

from tracker import transforms
from tracker.domain import Budget, Transaction
from tracker.functional import (
    Either, Maybe, Right,
    find_transaction, validate_budget, validate_transaction,
)
from tracker.queries import sort_by_date_desc

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Storage:
    """Transactions and monthly budgets kept in a single JSON file.

    The whole snapshot is read on open and rewritten after each change.
    A missing file is treated as an empty store.
    """

    def __init__(self, path, clock=_utcnow):
        self.path = Path(path)
        self._clock = clock
        self._transactions: Tuple[Transaction, ...] = ()
        self._budgets: Tuple[Budget, ...] = ()
        self.reload()

    def reload(self) -> None:
        if self.path.exists():
            self._transactions, self._budgets = transforms.load_seed(self.path)
        else:
            logger.info("No store file at %s, starting empty", self.path)
            self._transactions, self._budgets = (), ()

    def _commit(
        self,
        transactions: Optional[Tuple[Transaction, ...]] = None,
        budgets: Optional[Tuple[Budget, ...]] = None,
    ) -> None:
        """Write the new snapshot, then adopt it in memory.

        The file is replaced atomically; on failure both disk and memory keep
        the previous snapshot.
        """
        transactions = self._transactions if transactions is None else transactions
        budgets = self._budgets if budgets is None else budgets
        data = {
            "transactions": [transforms.transaction_to_dict(t) for t in transactions],
            "budgets": [transforms.budget_to_dict(b) for b in budgets],
        }

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

        self._transactions, self._budgets = transactions, budgets

    # Transactions

    def list_transactions(self) -> Tuple[Transaction, ...]:
        return sort_by_date_desc(self._transactions)

    def get_transaction(self, tx_id: str) -> Maybe[Transaction]:
        return find_transaction(self._transactions, tx_id)

    def add_transaction(
        self, amount: float, date: date, description: str, category: str
    ) -> Either[dict, Transaction]:
        now = self._clock()
        result = validate_transaction(Transaction(
            id=uuid4().hex,
            amount=amount,
            date=transforms.parse_date(date),
            description=description,
            category=category,
        )).map(lambda t: replace(t, created_at=now, updated_at=now))

        if result.is_left():
            logger.warning("Rejected transaction: %s", result.get_error()["message"])
            return result

        t = result.get_or_else(None)
        self._commit(transactions=transforms.add_transaction(self._transactions, t))
        logger.info("Added transaction %s (%s %.2f)", t.id, t.category, t.amount)
        return result

    def update_transaction(self, tx_id: str, **changes: Any) -> Either[dict, Transaction]:
        now = self._clock()
        result = (
            self.get_transaction(tx_id)
            .map(lambda t: transforms.edit_transaction(t, changes, now))
            .to_either({
                "error": "not_found",
                "message": f"Transaction with ID {tx_id} does not exist",
                "id": tx_id,
            })
            .bind(validate_transaction)
        )

        if result.is_left():
            logger.warning("Rejected edit of %s: %s", tx_id, result.get_error()["message"])
            return result

        self._commit(transactions=transforms.replace_transaction(self._transactions, result.get_or_else(None)))
        logger.info("Updated transaction %s", tx_id)
        return result

    def delete_transaction(self, tx_id: str) -> bool:
        remaining = transforms.delete_transaction(self._transactions, tx_id)
        if len(remaining) == len(self._transactions):
            logger.warning("Transaction %s not found", tx_id)
            return False
        self._commit(transactions=remaining)
        logger.info("Deleted transaction %s", tx_id)
        return True

    # Budgets

    def get_budget(self, month: str) -> Optional[Budget]:
        return next((b for b in self._budgets if b.month == month), None)

    def save_budget(self, month: str, categories: Mapping[str, float]) -> Either[dict, Budget]:
        now = self._clock()
        result = (
            validate_budget(Budget(month=month, categories=dict(categories)))
            .map(lambda b: transforms.upsert_budget(self._budgets, b.month, b.categories, now))
        )

        if result.is_left():
            logger.warning("Rejected budget for %s: %s", month, result.get_error()["message"])
            return result

        self._commit(budgets=result.get_or_else(None))
        logger.info("Saved budget for %s", month)
        return Right(self.get_budget(month))
