"""Streamlit app for SpendWise.

This module is the presentation layer only.  All state lives in a single
:class:`~spendwise.controller.BudgetController` kept in
``st.session_state``; every widget handler calls one controller method
and the page then re-renders from a fresh :class:`BudgetSnapshot`.

To run the dashboard from the command line::

    streamlit run spendwise/dashboard.py

or use ``run_dashboard.py`` at the project root.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import Optional

import streamlit as st

# Conditional imports to support both ``streamlit run spendwise/dashboard.py``
# and package execution.
if __package__:
    from . import config
    from . import visualization as viz
    from .categorization import suggest_categories
    from .controller import BudgetController
    from .errors import SpendWiseError
    from .formatting import format_currency
    from .models import CATEGORIES, month_key
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from spendwise import config  # type: ignore
    from spendwise import visualization as viz  # type: ignore
    from spendwise.categorization import suggest_categories  # type: ignore
    from spendwise.controller import BudgetController  # type: ignore
    from spendwise.errors import SpendWiseError  # type: ignore
    from spendwise.formatting import format_currency  # type: ignore
    from spendwise.models import CATEGORIES, month_key  # type: ignore


def get_controller() -> BudgetController:
    """Return the session's controller, loading persisted data on first use."""
    if "controller" not in st.session_state:
        config.configure_logging()
        controller = BudgetController(backend=config.build_backend())
        controller.load()
        st.session_state.controller = controller
    return st.session_state.controller


def _flash(kind: str, message: str) -> None:
    st.session_state.flash = (kind, message)


def _show_flash() -> None:
    flash = st.session_state.pop("flash", None)
    if flash is None:
        return
    kind, message = flash
    getattr(st, kind)(message)


# ----------------------------------------------------------------------
# Widget callbacks
# ----------------------------------------------------------------------

def _on_set_income() -> None:
    controller = get_controller()
    try:
        controller.set_income(st.session_state.income_input)
    except SpendWiseError as exc:
        _flash("error", str(exc))
    else:
        _flash("success", "Income updated")


def _on_reset_income() -> None:
    get_controller().reset_income()
    st.session_state.income_input = 0.0
    _flash("info", "Income reset")


def _on_add_expense() -> None:
    controller = get_controller()
    try:
        expense = controller.add_expense(
            st.session_state.add_name,
            st.session_state.add_amount,
            st.session_state.add_category,
        )
    except SpendWiseError as exc:
        _flash("error", str(exc))
        return
    st.session_state.add_name = ""
    st.session_state.add_amount = 0.0
    _flash("success", f"Added '{expense.name}'")


def _on_delete(expense_id: int) -> None:
    try:
        get_controller().delete_expense(expense_id)
    except SpendWiseError as exc:
        _flash("error", str(exc))


def _on_save_edit(expense_id: int) -> None:
    try:
        get_controller().edit_expense(
            expense_id,
            name=st.session_state[f"edit_name_{expense_id}"],
            amount=st.session_state[f"edit_amount_{expense_id}"],
            category=st.session_state[f"edit_category_{expense_id}"],
        )
    except SpendWiseError as exc:
        _flash("error", str(exc))
        return
    st.session_state.editing_id = None


def _on_undo() -> None:
    try:
        expense = get_controller().undo_delete()
    except SpendWiseError as exc:
        _flash("warning", str(exc))
    else:
        _flash("success", f"Restored '{expense.name}'")


# ----------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------

def render_sidebar(controller: BudgetController) -> None:
    st.sidebar.header("Income")
    st.session_state.setdefault("income_input", float(controller.store.income))
    st.sidebar.number_input("Monthly income", min_value=0.0, step=100.0, key="income_input")
    col1, col2 = st.sidebar.columns(2)
    col1.button("Set", on_click=_on_set_income, use_container_width=True)
    col2.button("Reset", on_click=_on_reset_income, use_container_width=True)

    st.sidebar.header("Month")
    show_all = st.sidebar.checkbox("All months", value=controller.month is None)
    if show_all:
        controller.clear_month_filter()
        return
    month_text = st.sidebar.text_input("Month (YYYY-MM)", value=controller.month or month_key(datetime.now()))
    try:
        controller.set_month_filter(month_text or None)
    except SpendWiseError as exc:
        st.sidebar.error(str(exc))


def render_save_status(controller: BudgetController) -> None:
    if controller.save_error is None:
        return
    col1, col2 = st.columns([4, 1])
    col1.error(f"Your changes are not saved yet: {controller.save_error}")
    if col2.button("Retry save"):
        if controller.retry_save():
            st.rerun()


def render_summary(controller: BudgetController) -> None:
    snapshot = controller.snapshot()
    col1, col2, col3 = st.columns(3)
    col1.metric("Income", format_currency(snapshot.income))
    col2.metric("Spent", format_currency(snapshot.total))
    col3.metric("Balance", format_currency(snapshot.balance))

    chart1, chart2 = st.columns(2)
    with chart1:
        st.plotly_chart(viz.create_category_pie_chart(snapshot.category_totals), use_container_width=True)
    with chart2:
        st.plotly_chart(
            viz.create_daily_spend_chart(snapshot.daily_totals, snapshot.year_month),
            use_container_width=True,
        )


def render_add_form() -> None:
    st.subheader("Add expense")
    name = st.text_input("Name", key="add_name")
    options = suggest_categories(name) or list(CATEGORIES)
    col1, col2 = st.columns(2)
    col1.number_input("Amount", min_value=0.0, step=10.0, key="add_amount")
    col2.selectbox("Category", options=options, key="add_category")
    st.button("Add expense", on_click=_on_add_expense, type="primary")


def render_undo_banner(controller: BudgetController) -> None:
    pending = controller.pending_undo
    if pending is None:
        return
    remaining = controller.undo.remaining()
    col1, col2, col3 = st.columns([4, 1, 1])
    col1.info(f"Deleted '{pending.record.name}'. You can undo this for {remaining:.0f}s.")
    col2.button("Undo", on_click=_on_undo)
    col3.button("Dismiss", on_click=controller.dismiss_undo)


def render_expense_list(controller: BudgetController) -> None:
    snapshot = controller.snapshot()
    st.subheader(f"Expenses ({snapshot.year_month})" if snapshot.year_month else "Expenses (all months)")
    if not snapshot.expenses:
        st.caption("No expenses recorded for this period.")
        return

    editing_id: Optional[int] = st.session_state.get("editing_id")
    for expense in snapshot.expenses:
        if expense.id == editing_id:
            col1, col2, col3, col4, col5 = st.columns([3, 2, 2, 1, 1])
            col1.text_input("Name", value=expense.name, key=f"edit_name_{expense.id}")
            col2.number_input("Amount", value=float(expense.amount), min_value=0.0, key=f"edit_amount_{expense.id}")
            col3.selectbox(
                "Category",
                options=list(CATEGORIES),
                index=CATEGORIES.index(expense.category),
                key=f"edit_category_{expense.id}",
            )
            col4.button("Save", key=f"save_{expense.id}", on_click=_on_save_edit, args=(expense.id,))
            if col5.button("Cancel", key=f"cancel_{expense.id}"):
                st.session_state.editing_id = None
                st.rerun()
            continue

        col1, col2, col3, col4, col5, col6 = st.columns([3, 2, 2, 2, 1, 1])
        col1.write(expense.name)
        col2.write(format_currency(expense.amount))
        col3.write(expense.category)
        col4.write(expense.timestamp.strftime("%d %b %Y"))
        if col5.button("Edit", key=f"edit_{expense.id}"):
            st.session_state.editing_id = expense.id
            st.rerun()
        col6.button("Delete", key=f"delete_{expense.id}", on_click=_on_delete, args=(expense.id,))


def render_planner(controller: BudgetController) -> None:
    st.subheader("Plan a purchase")
    with st.form("planner_form"):
        col1, col2 = st.columns(2)
        with col1:
            description = st.text_input("What do you want to buy?")
            amount = st.number_input("Amount", min_value=0.0, step=10.0)
        with col2:
            category = st.selectbox("Category", options=list(CATEGORIES))
            recurring = st.checkbox("Recurring every month")
        submitted = st.form_submit_button("Check affordability")

    if submitted:
        try:
            evaluation = controller.evaluate_plan(description, amount, category, recurring)
        except SpendWiseError as exc:
            st.error(str(exc))
            return
        if evaluation.approved:
            st.balloons()

    evaluation = controller.planner.evaluation
    if evaluation is None:
        return

    request = evaluation.request
    message = (
        f"'{request.description}' costs {format_currency(request.amount)} "
        f"({evaluation.percent_of_income:.1f}% of income). "
        f"Balance after buying: {format_currency(evaluation.balance_after_once)}."
    )
    if evaluation.balance_after_recurring is not None:
        message += f" As a monthly cost: {format_currency(evaluation.balance_after_recurring)} left."
    if evaluation.approved:
        st.success(f"Approved. {message}")
    else:
        st.warning(f"Caution: this would overdraw your budget. {message}")

    if st.button("Add planned expense", disabled=not controller.planner.can_commit):
        try:
            expense = controller.commit_plan()
        except SpendWiseError as exc:
            st.error(str(exc))
        else:
            _flash("success", f"Added '{expense.name}'")
            st.rerun()


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="SpendWise", layout="wide", initial_sidebar_state="expanded")
    st.title("SpendWise")
    st.markdown("Track your income and expenses and check a purchase before you make it.")

    controller = get_controller()
    render_sidebar(controller)
    _show_flash()
    render_save_status(controller)
    render_summary(controller)

    left, right = st.columns([3, 2])
    with left:
        render_add_form()
        render_undo_banner(controller)
        render_expense_list(controller)
    with right:
        render_planner(controller)


if __name__ == "__main__":
    main()
