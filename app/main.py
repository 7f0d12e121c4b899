import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

import streamlit as st

from app.charts import (
    budget_figure,
    category_figure,
    display_transactions,
    format_money,
    monthly_figure,
    transaction_label,
    transaction_options,
    transactions_frame,
)
from tracker.config import load_settings
from tracker.domain import CATEGORIES, EXPENSE_CATEGORIES, default_budget_categories, month_key, month_label
from tracker.log import configure_logging
from tracker.queries import (
    all_of,
    by_category,
    by_date_range,
    by_month,
    iter_transactions,
    matching_description,
)
from tracker.services import DashboardService
from tracker.storage import Storage

st.set_page_config(page_title="Finance Tracker", layout="wide")

settings = load_settings()
configure_logging(settings.log_level)


@st.cache_resource
def get_storage(path: str) -> Storage:
    return Storage(path)


storage = get_storage(str(settings.data_path))
service = DashboardService(config=settings.aggregation)
current_month = settings.aggregation.resolve_reference_month()


def show_errors(result) -> bool:
    if result.is_left():
        st.error(f"❌ {result.get_error()['message']}")
        return True
    return False


def render_budget_chart(rows, budget):
    if budget is None:
        st.info("No budget data available")
    elif not rows:
        st.info("No categories with budgets found")
    else:
        st.plotly_chart(budget_figure(rows), use_container_width=True)


menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "🧾 Transactions", "💰 Budget"])
if st.sidebar.button("🔄 Refresh"):
    storage.reload()
    st.rerun()

if menu == "🏠 Dashboard":
    transactions = storage.list_transactions()
    budget = storage.get_budget(current_month)
    report = service.dashboard(transactions, budget)
    result = report["result"]
    summary = result["summary"]

    st.title("🏠 Dashboard")
    st.caption(f"Overview of your finances as of {date.today():%B %d, %Y}")

    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Total Income", format_money(summary.total_income))
    with k2:
        st.metric("Total Expenses", format_money(summary.total_expenses))
    with k3:
        st.metric(
            "Net Savings",
            format_money(summary.net_savings),
            "You're saving money!" if summary.net_savings >= 0 else "You're spending more than you earn",
            delta_color="normal" if summary.net_savings >= 0 else "inverse",
        )
    with k4:
        st.metric("Transactions", result["transaction_count"])

    left, right = st.columns([3, 4])
    with left:
        st.subheader("Recent Transactions")
        if result["recent"]:
            st.table(display_transactions(transactions_frame(result["recent"])))
        else:
            st.info("No transactions yet.")
    with right:
        st.subheader("Monthly Overview")
        st.caption(f"Your income and expenses over the last {settings.aggregation.window_size} months")
        st.plotly_chart(monthly_figure(result["monthly"]), use_container_width=True)

    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Expense Categories")
        if result["categories"]:
            st.plotly_chart(category_figure(result["categories"]), use_container_width=True)
        else:
            st.info("No expense data available")
    with c2:
        st.subheader(f"Budget vs. Actual ({month_label(current_month)})")
        render_budget_chart(result["budget"], budget)

    messages = [m for v in report["validation"] for m in v["messages"]]
    if messages:
        with st.expander("Notes"):
            for m in messages:
                st.caption(m)

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    st.subheader("➕ Add New Transaction")
    with st.form("add_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            tx_date = st.date_input("Date", value=date.today())
            amount = st.number_input("Amount ($)", min_value=0.0, step=1.0, format="%.2f")
        with col2:
            category = st.selectbox("Category", CATEGORIES)
            description = st.text_input("Description")
        if st.form_submit_button("Add Transaction"):
            if not show_errors(storage.add_transaction(amount, tx_date, description, category)):
                st.success("Transaction added")
                st.rerun()

    st.divider()
    transactions = storage.list_transactions()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        search = st.text_input("Search transactions...")
    with col2:
        selected_category = st.selectbox("Category", ["All"] + list(CATEGORIES), key="filter_category")
    with col3:
        months = sorted({month_key(t.date) for t in transactions}, reverse=True)
        selected_month = st.selectbox("Month", ["All"] + months, key="filter_month")
    with col4:
        if transactions:
            min_date, max_date = transactions[-1].date, transactions[0].date
        else:
            min_date = max_date = date.today()
        date_range = st.date_input("Date Range", value=(min_date, max_date), key="filter_dates")

    filters = []
    if search:
        filters.append(matching_description(search))
    if selected_category != "All":
        filters.append(by_category(selected_category))
    if selected_month != "All":
        filters.append(by_month(selected_month))
    if len(date_range) == 2:
        filters.append(by_date_range(date_range[0], date_range[1]))
    transactions = tuple(iter_transactions(transactions, all_of(*filters)))

    if not transactions:
        st.info("No transactions found")
    else:
        st.dataframe(display_transactions(transactions_frame(transactions)), use_container_width=True)

        st.subheader("✏️ Edit or delete")
        by_id = transaction_options(transactions)
        selected = by_id[st.selectbox(
            "Transaction",
            list(by_id),
            format_func=lambda tx_id: transaction_label(by_id[tx_id]),
        )]
        with st.form("edit_form"):
            col1, col2 = st.columns(2)
            with col1:
                new_date = st.date_input("Date", value=selected.date, key=f"edit_date_{selected.id}")
                new_amount = st.number_input("Amount ($)", min_value=0.0, value=float(selected.amount), step=1.0, format="%.2f", key=f"edit_amount_{selected.id}")
            with col2:
                cat_index = CATEGORIES.index(selected.category) if selected.category in CATEGORIES else len(CATEGORIES) - 1
                new_category = st.selectbox("Category", CATEGORIES, index=cat_index, key=f"edit_category_{selected.id}")
                new_description = st.text_input("Description", value=selected.description, key=f"edit_description_{selected.id}")
            save_col, delete_col = st.columns(2)
            save = save_col.form_submit_button("Save changes")
            delete = delete_col.form_submit_button("Delete")

        if save:
            result = storage.update_transaction(
                selected.id,
                amount=new_amount,
                date=new_date,
                description=new_description,
                category=new_category,
            )
            if not show_errors(result):
                st.success("Transaction updated")
                st.rerun()
        if delete:
            if storage.delete_transaction(selected.id):
                st.success("Transaction deleted")
                st.rerun()
            else:
                st.error("❌ Transaction not found")

elif menu == "💰 Budget":
    st.title("💰 Budget Management")
    budget = storage.get_budget(current_month)
    limits = {**default_budget_categories(), **(budget.categories if budget else {})}

    form_col, chart_col = st.columns(2)
    with form_col:
        st.subheader(f"Monthly Budget: {date.fromisoformat(current_month + '-01'):%B %Y}")
        with st.form("budget_form"):
            cols = st.columns(3)
            values = {}
            for idx, category in enumerate(EXPENSE_CATEGORIES):
                with cols[idx % 3]:
                    values[category] = st.number_input(
                        category,
                        min_value=0.0,
                        value=float(limits.get(category, 0)),
                        step=10.0,
                        format="%.2f",
                        key=f"budget_{category}",
                    )
            if st.form_submit_button("Save Budget", use_container_width=True):
                if not show_errors(storage.save_budget(current_month, values)):
                    st.success("Your budget has been saved successfully.")
                    st.rerun()

    with chart_col:
        st.subheader("Budget vs. Actual")
        report = service.dashboard(storage.list_transactions(), budget)
        render_budget_chart(report["result"]["budget"], budget)
