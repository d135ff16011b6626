"""
Streamlit Frontend for QuickBill

The single page users interact with daily:
1. A short first-run walkthrough
2. Headline spending for the chosen period
3. The add / edit expense form
4. Filters, the expense table, CSV export and clear-all

The page only raises commands on the ExpenseTracker and renders the
DashboardView it gets back. Delete and clear-all ask for confirmation
here before the tracker is told the user agreed.
"""

from decimal import Decimal

import streamlit as st

from quickbill.audit import configure_logging
from quickbill.config import get_settings
from quickbill.errors import QuickBillError
from quickbill.export import NothingToExportError
from quickbill.models.expense import ALL_CATEGORIES, ExpenseCategory, PeriodFilter
from quickbill.orchestrator import ExpenseTracker, create_app_components
from quickbill.store import OnboardingState
from quickbill.validation import ValidationError


# Page configuration
st.set_page_config(
    page_title="QuickBill",
    page_icon="💸",
    layout="centered",
)


ONBOARDING_COPY = {
    1: ("Welcome to QuickBill",
        "Track your daily expenses effortlessly. "
        "Let's get you set up in 3 quick steps."),
    2: ("Add expenses",
        "Simply add a title, amount, and category for each expense. "
        "We'll automatically add the date for you."),
    3: ("Stay on top of spending",
        "View recent expenses, filter by category and time, and manage "
        "your spending. All your data stays safe on your device."),
}


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    settings = get_settings()
    configure_logging(settings.app.log_level, debug=settings.app.debug_mode)
    try:
        return create_app_components(settings, use_storage=True)
    except QuickBillError as e:
        st.error(f"Could not open local storage, using a temporary session: {e}")
        return create_app_components(settings, use_storage=False)


def format_money(value: Decimal) -> str:
    return f"{value:,.2f}"


def main():
    """Main application entry point."""
    tracker, onboarding, audit_logger = get_components()

    if onboarding.current_step is not None:
        render_onboarding(onboarding)
        return

    render_header(tracker)
    render_form(tracker)
    st.markdown("---")
    render_expenses(tracker)
    render_activity(audit_logger)


def render_onboarding(onboarding: OnboardingState):
    """Render the current walkthrough step."""
    step = onboarding.current_step
    heading, body = ONBOARDING_COPY[step]

    st.title(heading)
    st.markdown(body)
    st.progress(step / len(ONBOARDING_COPY))

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Skip"):
            onboarding.skip()
            st.rerun()
    with col2:
        label = "Next Step" if step < len(ONBOARDING_COPY) else "Start QuickBill"
        if st.button(label, type="primary"):
            onboarding.next_step()
            st.rerun()


def render_header(tracker: ExpenseTracker):
    """Headline total with the period selector."""
    st.title("💸 QuickBill")

    periods = list(PeriodFilter)
    period = st.selectbox(
        "Period",
        options=periods,
        index=periods.index(tracker.period_filter),
        format_func=lambda p: p.value,
    )
    if period != tracker.period_filter:
        tracker.set_period_filter(period)

    view = tracker.view()
    st.metric(view.headline_label, format_money(view.headline_total))

    breakdown = tracker.category_breakdown()
    if breakdown:
        with st.expander("Breakdown by category"):
            st.bar_chart({k: float(v) for k, v in breakdown.items()})


def render_form(tracker: ExpenseTracker):
    """The add / edit expense form."""
    editing = None
    if tracker.is_editing:
        try:
            editing = tracker.store.get(tracker.editing_id)
        except QuickBillError:
            tracker.cancel_edit()

    st.subheader("Edit Expense" if editing else "Add New Expense")

    categories = list(ExpenseCategory)
    default_category = ExpenseCategory(get_settings().app.default_category)

    form_key = f"expense_form_{tracker.editing_id or 'new'}"
    with st.form(form_key, clear_on_submit=True):
        title = st.text_input(
            "Expense Title",
            value=editing.title if editing else "",
            placeholder="e.g., Coffee, Groceries",
        )
        amount = st.text_input(
            "Amount",
            value=editing.amount if editing else "",
            placeholder="e.g., 500.00",
        )
        category = st.selectbox(
            "Category",
            options=categories,
            index=categories.index(editing.category if editing else default_category),
            format_func=lambda c: c.value,
        )
        submitted = st.form_submit_button(
            "Update Expense" if editing else "Add Expense",
            type="primary",
        )

    if editing and st.button("Cancel edit"):
        tracker.cancel_edit()
        st.rerun()

    if submitted:
        try:
            tracker.submit(title, amount, category)
            st.rerun()
        except ValidationError as e:
            for issue in e.issues:
                st.error(issue.message)
        except QuickBillError as e:
            st.error(f"Failed to save: {e}")


def render_expenses(tracker: ExpenseTracker):
    """Filters, the expense table and the bulk actions."""
    options = [ALL_CATEGORIES] + [c.value for c in ExpenseCategory]
    category = st.selectbox(
        "Filter by",
        options=options,
        index=options.index(tracker.category_filter),
    )
    if category != tracker.category_filter:
        tracker.set_category_filter(category)

    view = tracker.view()

    if view.is_empty:
        st.info("No expenses for this view yet.")
    else:
        st.caption(f"{len(view.visible)} expenses · {format_money(view.total)}")
        pending_delete = st.session_state.get("pending_delete")

        for expense in view.visible:
            col1, col2, col3, col4 = st.columns([4, 2, 1, 1])
            with col1:
                st.markdown(f"**{expense.title}**  \n{expense.category.value} · {expense.date.isoformat()}")
            with col2:
                st.markdown(format_money(expense.amount_value))
            with col3:
                if st.button("Edit", key=f"edit_{expense.id}"):
                    tracker.begin_edit(expense.id)
                    st.rerun()
            with col4:
                if st.button("Delete", key=f"delete_{expense.id}"):
                    st.session_state.pending_delete = expense.id
                    st.rerun()

            if pending_delete == expense.id:
                st.warning("Are you sure you want to delete this expense?")
                yes, no = st.columns(2)
                with yes:
                    if st.button("Yes, delete", key=f"confirm_delete_{expense.id}"):
                        st.session_state.pending_delete = None
                        try:
                            tracker.delete(expense.id, confirmed=True)
                        except QuickBillError as e:
                            st.error(f"Failed to delete: {e}")
                        else:
                            st.rerun()
                with no:
                    if st.button("Keep it", key=f"cancel_delete_{expense.id}"):
                        st.session_state.pending_delete = None
                        st.rerun()

    st.markdown("---")
    col1, col2 = st.columns(2)

    with col1:
        if view.is_empty:
            if st.button("Export CSV"):
                try:
                    tracker.export()
                except NothingToExportError as e:
                    st.warning(str(e))
        else:
            export = tracker.export()
            st.download_button(
                "Export CSV",
                data=export.to_bytes(),
                file_name=export.filename,
                mime=export.mime_type,
                on_click=tracker.mark_exported,
                args=(export,),
            )

    with col2:
        if st.button("Clear All Data"):
            st.session_state.confirm_clear = True
        if st.session_state.get("confirm_clear"):
            st.warning(
                "Are you sure you want to clear ALL your QuickBill data? "
                "This cannot be undone."
            )
            if st.button("Yes, clear everything", type="primary"):
                st.session_state.confirm_clear = False
                try:
                    tracker.clear_all(confirmed=True)
                except QuickBillError as e:
                    st.error(f"Failed to clear data: {e}")
                else:
                    st.rerun()
            if st.button("Cancel"):
                st.session_state.confirm_clear = False
                st.rerun()


def render_activity(audit_logger):
    """Recent audit events."""
    events = audit_logger.recent_events(limit=10)
    if not events:
        return
    with st.expander("Recent activity"):
        for event in events:
            st.markdown(f"`{event.timestamp:%H:%M:%S}` {event.description}")


if __name__ == "__main__":
    main()
