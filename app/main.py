import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
from datetime import date, datetime, time, timedelta

import streamlit as st
import pandas as pd
import plotly.express as px

from fintrack.api import ApiClient
from fintrack.config import get_settings
from fintrack.dashboard import DashboardSession
from fintrack.errors import ApiError, user_message
from fintrack.formatting import format_currency, format_date, format_signed
from fintrack.logging_setup import configure_logging, get_logger
from fintrack.references import filter_by_prefix, load_references_or_empty
from fintrack.services import TransactionService
from fintrack.session import Session
from fintrack.domain import EXPENSE, INCOME
from fintrack.submission import TransactionForm, is_new, submit_transaction

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger("fintrack.app")

st.set_page_config(page_title="Finance Dashboard", layout="wide")


if "session" not in st.session_state:
    st.session_state.session = Session()
    st.session_state.client = ApiClient(settings.api_base_url, st.session_state.session, settings.timeout_secs)
    st.session_state.service = TransactionService(st.session_state.client)

client: ApiClient = st.session_state.client
service: TransactionService = st.session_state.service


def run(coro):
    """asyncio.run, then back to the login page if a request got a 401."""
    result = asyncio.run(coro)
    if not client.is_authenticated():
        st.rerun()
    return result


# ---------------- Login ----------------
if not client.is_authenticated():
    st.title("🔐 Sign in")
    # views of the previous user must not survive a sign-out
    st.session_state.pop("dashboard", None)
    st.session_state.pop("references", None)
    if st.session_state.session.pop_expired():
        st.warning("Your session has expired, please sign in again.")
    with st.form("login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        if st.form_submit_button("Sign in"):
            try:
                client.login(username, password)
                st.rerun()
            except ApiError as e:
                st.error(user_message(e, "Login failed"))
    st.stop()


if "dashboard" not in st.session_state:
    dash = DashboardSession(service, settings.page_size, range_days=settings.default_range_days)
    run(dash.refresh())
    st.session_state.dashboard = dash

dash: DashboardSession = st.session_state.dashboard

st.sidebar.markdown("### 👤 Account")
if st.sidebar.button("Log out"):
    client.logout()
    st.rerun()


# ---------------- Add transaction ----------------
def add_transaction_form():
    if "references" not in st.session_state:
        st.session_state.references = run(load_references_or_empty(service))
    refs = st.session_state.references

    tx_type = st.radio("Type", [EXPENSE, INCOME], horizontal=True, key="tx_type")
    product_label = "Income Source" if tx_type == INCOME else "Product"
    category_label = "Company" if tx_type == INCOME else "Category"

    c1, c2 = st.columns(2)
    with c1:
        product_input = st.text_input(product_label, key="tx_product")
        suggestions = [p.name for p in filter_by_prefix(product_input, refs.products)][:8]
        if suggestions:
            st.caption("Suggestions: " + ", ".join(suggestions))
        if is_new(product_input, refs.products):
            st.caption(f"➕ Add new {product_label.lower()}: \"{product_input.strip()}\"")
    with c2:
        category_input = st.text_input(category_label, key="tx_category")
        suggestions = [c.name for c in filter_by_prefix(category_input, refs.categories)][:8]
        if suggestions:
            st.caption("Suggestions: " + ", ".join(suggestions))
        if is_new(category_input, refs.categories):
            st.caption(f"➕ Add new {category_label.lower()}: \"{category_input.strip()}\"")

    c3, c4, c5 = st.columns(3)
    with c3:
        amount = st.text_input(f"Amount ({settings.currency})", key="tx_amount")
    with c4:
        quantity = st.number_input("Quantity", min_value=1, value=1, step=1, key="tx_quantity")
    with c5:
        purchase_date = st.date_input("Date", value=date.today(), key="tx_date")
    note = st.text_input("Note (optional)", key="tx_note")

    if st.button("Add Transaction", type="primary"):
        form = TransactionForm(
            amount=amount,
            product=product_input,
            category=category_input,
            type=tx_type,
            quantity=quantity,
            note=note,
            purchase_date=purchase_date.isoformat(),
        )
        try:
            result = submit_transaction(service, form, refs)
        except ApiError as e:
            if not client.is_authenticated():
                st.rerun()
            logger.exception("Error creating transaction")
            st.error(user_message(e, "Failed to create transaction"))
            return
        if result.is_left():
            st.error(result.get_error()["message"])
            return
        st.session_state.pop("references", None)
        run(dash.refresh())
        st.success("Transaction added")
        st.rerun()


# ---------------- Header ----------------
head_l, head_r = st.columns([6, 1])
with head_l:
    st.title("Dashboard")
with head_r:
    if st.button("🔄 Refresh"):
        run(dash.refresh())

with st.expander("➕ Add Transaction"):
    add_transaction_form()


# ---------------- Date range ----------------
p1, p2, p3, d1, d2 = st.columns([1, 1, 1, 2, 2])
preset = None
with p1:
    if st.button("Last 7 days"):
        preset = 7
with p2:
    if st.button("Last 30 days"):
        preset = 30
with p3:
    if st.button("Last 90 days"):
        preset = 90
with d1:
    start_input = st.date_input("From", value=dash.start.date(), max_value=dash.end.date())
with d2:
    end_input = st.date_input("To", value=dash.end.date(), min_value=start_input)

if preset is not None:
    now = datetime.now()
    run(dash.set_range(now - timedelta(days=preset), now))
    st.rerun()
elif (start_input, end_input) != (dash.start.date(), dash.end.date()):
    run(dash.set_range(datetime.combine(start_input, time.min), datetime.combine(end_input, time.max)))
    st.rerun()

if dash.error:
    st.error(dash.error)


# ---------------- Summary cards ----------------
summary = dash.summary
k1, k2, k3 = st.columns(3)
with k1:
    st.metric("Total Income", format_currency(summary.total_income if summary else 0, settings.currency))
with k2:
    st.metric("Total Expenses", format_currency(summary.total_expenses if summary else 0, settings.currency))
with k3:
    st.metric("Wallet Balance", format_currency(summary.wallet_balance if summary else 0, settings.currency))


# ---------------- Expense pie ----------------
st.subheader("Expense Distribution by Product")
if dash.expense_by_product:
    df_products = pd.DataFrame(
        [{"Product": e.name, "Total": e.total, "Share": round(e.percentage, 1)} for e in dash.expense_by_product]
    )
    fig = px.pie(df_products, values="Total", names="Product", hover_data=["Share"])
    fig.update_layout(height=360, margin=dict(t=10, b=10, l=10, r=10))
    st.plotly_chart(fig, use_container_width=True)
else:
    st.info("No expense data available")


# ---------------- Transactions ----------------
st.subheader("Recent Transactions")
st.caption(f"Showing {len(dash.displayed)} transactions")

if not dash.displayed:
    st.info("No transactions found in this period")
else:
    table = pd.DataFrame([
        {
            "Amount": format_signed(t.amount, t.type, settings.currency),
            "Product": t.product_name,
            "Date": format_date(t.purchase_date),
            "Category": t.category_name,
            "Note": t.note or "-",
            "Type": t.type,
        }
        for t in dash.displayed
    ])
    st.dataframe(table, hide_index=True, use_container_width=True)

    if dash.has_more and st.button("Load More"):
        run(dash.load_more())
        st.rerun()
