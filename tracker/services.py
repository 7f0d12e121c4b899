import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence

from tracker import aggregation
from tracker.config import AggregationConfig
from tracker.domain import Budget, Transaction
from tracker.queries import recent_transactions

logger = logging.getLogger(__name__)

Validator = Callable[[str, Sequence[Transaction], Optional[Budget]], Sequence[str]]
Calculator = Callable[[str, Sequence[Transaction], Optional[Budget], Dict[str, Any]], Dict[str, Any]]


def check_budget_present(month, transactions, budget):
    if budget is None:
        return [f"No budget set for {month}"]
    if not any(limit > 0 for limit in budget.categories.values()):
        return [f"No categories with budgets found for {month}"]
    return []


def check_negative_amounts(month, transactions, budget):
    bad = [t.id for t in transactions if t.amount < 0]
    if bad:
        return [f"{len(bad)} transaction(s) have negative amounts and are summed as-is: {', '.join(bad)}"]
    return []


def calc_summary(month, transactions, budget, acc):
    return {"summary": aggregation.summarize(transactions)}


def calc_category_breakdown(month, transactions, budget, acc):
    return {"categories": aggregation.category_breakdown(transactions)}


def calc_budget_comparison(month, transactions, budget, acc):
    return {"budget": aggregation.budget_vs_actual(transactions, budget)}


def calc_transaction_count(month, transactions, budget, acc):
    return {"transaction_count": len(transactions)}


def calc_recent_transactions(month, transactions, budget, acc):
    return {"recent": tuple(recent_transactions(transactions))}


def monthly_series_calculator(window_size: int) -> Calculator:
    def calc_monthly_series(month, transactions, budget, acc):
        return {"monthly": aggregation.monthly_series(transactions, month, window_size)}

    return calc_monthly_series


def default_validators() -> Sequence[Validator]:
    return [check_budget_present, check_negative_amounts]


def default_calculators(config: AggregationConfig) -> Sequence[Calculator]:
    return [
        calc_summary,
        calc_category_breakdown,
        monthly_series_calculator(config.window_size),
        calc_budget_comparison,
        calc_transaction_count,
        calc_recent_transactions,
    ]


class DashboardService:
    """Facade that turns one snapshot into every view the dashboard shows.

    validators: functions taking (month, transactions, budget) -> Sequence[str]
    calculators: functions taking (month, transactions, budget, acc) -> dict (partial results)
    """

    def __init__(
        self,
        validators: Optional[Sequence[Validator]] = None,
        calculators: Optional[Sequence[Calculator]] = None,
        config: AggregationConfig = AggregationConfig(),
    ):
        self.config = config
        self.validators = default_validators() if validators is None else validators
        self.calculators = default_calculators(config) if calculators is None else calculators

    def dashboard(
        self,
        transactions: Sequence[Transaction],
        budget: Optional[Budget] = None,
        today: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Run validators and calculators and return the report with intermediate steps."""
        month = self.config.resolve_reference_month(today)
        transactions = tuple(transactions)
        report = {
            "month": month,
            "validation": [],
            "steps": [],
            "result": {},
        }

        for v in self.validators:
            name = getattr(v, "__name__", str(v))
            try:
                msgs = v(month, transactions, budget)
            except Exception as e:
                logger.exception("Validator %s failed", name)
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": name, "messages": list(msgs)})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            name = getattr(calc, "__name__", str(calc))
            out = calc(month, transactions, budget, acc)
            logger.debug("Calculator %s produced %s", name, sorted(out) if isinstance(out, dict) else type(out).__name__)
            report["steps"].append({"calculator": name, "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report
