from typing import Dict, Iterable, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from tracker.domain import BudgetComparison, CategoryTotal, MonthlyTotals, Transaction, is_income


def format_money(value: float) -> str:
    return f"${value:,.2f}"


def transactions_frame(trans: Iterable[Transaction]) -> pd.DataFrame:
    rows = [
        {
            "id": t.id,
            "date": pd.to_datetime(t.date),
            "description": t.description,
            "category": t.category,
            "amount": t.amount,
            "signed": t.amount if is_income(t) else -t.amount,
        }
        for t in trans
    ]
    return pd.DataFrame(rows, columns=["id", "date", "description", "category", "amount", "signed"])


def display_transactions(df: pd.DataFrame) -> pd.DataFrame:
    """Table-ready copy: formatted date, +/- amounts, no ids."""
    return (
        df.assign(
            date=lambda x: x["date"].dt.strftime("%b %d, %Y"),
            amount=lambda x: x["signed"].map(lambda v: f"+{format_money(v)}" if v >= 0 else f"-{format_money(-v)}"),
        )
        [["date", "description", "category", "amount"]]
        .rename(columns=str.capitalize)
        .reset_index(drop=True)
    )


def monthly_figure(rows: Sequence[MonthlyTotals]) -> go.Figure:
    labels = [r.month_label for r in rows]
    fig = go.Figure()
    fig.add_trace(go.Bar(x=labels, y=[r.expenses for r in rows], name="Expenses", marker_color="#ef4444"))
    fig.add_trace(go.Bar(x=labels, y=[r.income for r in rows], name="Income", marker_color="#22c55e"))
    fig.update_layout(
        barmode="group",
        yaxis_tickprefix="$",
        margin=dict(t=30, b=10, l=10, r=10),
    )
    return fig


def category_figure(rows: Sequence[CategoryTotal]) -> go.Figure:
    df = pd.DataFrame([{"Category": r.category, "Total": r.total_amount} for r in rows])
    fig = px.pie(df, values="Total", names="Category", title="Expenses by category")
    fig.update_traces(textinfo="label+percent")
    fig.update_layout(height=350)
    return fig


def budget_figure(rows: Sequence[BudgetComparison]) -> go.Figure:
    categories = [r.category for r in rows]
    fig = go.Figure()
    fig.add_trace(go.Bar(y=categories, x=[r.budgeted for r in rows], name="Budget", orientation="h", marker_color="#94a3b8"))
    fig.add_trace(go.Bar(
        y=categories,
        x=[r.actual for r in rows],
        name="Actual",
        orientation="h",
        marker_color=["#ef4444" if r.over_budget else "#3b82f6" for r in rows],
        customdata=[f"{r.usage:.0f}%" for r in rows],
        hovertemplate="%{y}: $%{x:,.2f} (%{customdata} of budget)<extra></extra>",
    ))
    fig.update_layout(
        barmode="group",
        xaxis_tickprefix="$",
        yaxis_autorange="reversed",
        margin=dict(t=30, b=10, l=10, r=10),
    )
    return fig


def transaction_label(t: Transaction) -> str:
    return f"{t.date:%b %d, %Y} · {t.description} · {format_money(t.amount)}"


def transaction_options(trans: Iterable[Transaction]) -> Dict[str, Transaction]:
    """Selectable transactions keyed by id; identical-looking entries stay distinct."""
    return {t.id: t for t in trans}
