"""
Streamlit Frontend for Savings Tracker

The screens the user works with daily: goals, payments, wishlist,
a dashboard and a calendar.

DESIGN PRINCIPLES:
1. The UI only renders and forwards actions to the tracker
2. Every form is validated before anything is changed
3. Clear messages when a plan cannot be suggested
"""

from datetime import date

import streamlit as st

from savings_tracker.config import get_settings, validate_all_settings
from savings_tracker.core.money import format_currency
from savings_tracker.logs import configure_logging
from savings_tracker.models import (
    Frequency,
    Priority,
    UrgencyKind,
    ValidationResult,
)
from savings_tracker.orchestrator import FinanceTracker, create_tracker
from savings_tracker.storage import StorageWriteError


st.set_page_config(
    page_title="Savings Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Palette tag -> accent color, presentation only
ACCENTS = {
    "rose": "#f43f5e", "sky": "#0ea5e9", "amber": "#f59e0b",
    "emerald": "#10b981", "indigo": "#6366f1", "purple": "#a855f7",
    "teal": "#14b8a6", "cyan": "#06b6d4", "blue": "#3b82f6",
    "lime": "#84cc16", "fuchsia": "#d946ef", "pink": "#ec4899",
}

URGENCY_LABELS = {
    UrgencyKind.SETTLED: "✅ Covered",
    UrgencyKind.OVERDUE: "🔴 Overdue by {days} day(s)",
    UrgencyKind.DUE_TODAY: "🟠 Due today",
    UrgencyKind.DUE_SOON: "🟡 Due in {days} day(s)",
    UrgencyKind.NORMAL: "Due in {days} days",
}


@st.cache_resource
def get_tracker() -> FinanceTracker:
    """Get or create the tracker (cached)."""
    configure_logging(get_settings().app.log_level)
    try:
        return create_tracker(use_storage=True)
    except Exception as e:
        st.error(f"Failed to open local storage, changes will not be saved: {e}")
        return create_tracker(use_storage=False)


def money(amount) -> str:
    return format_currency(amount, get_settings().display.currency_symbol)


def show_issues(result: ValidationResult) -> bool:
    """Render validation messages. Returns True if the form may proceed."""
    for issue in result.issues:
        if issue.severity == "error":
            st.error(issue.message)
        elif issue.severity == "warning":
            st.warning(issue.message)
    return result.is_valid


def accent_bar(color: str) -> None:
    st.markdown(
        f'<div style="height:4px;border-radius:2px;background:{ACCENTS.get(color, "#3b82f6")}"></div>',
        unsafe_allow_html=True,
    )


def main():
    """Main application entry point."""
    tracker = get_tracker()

    st.sidebar.title("💰 Savings Tracker")
    page = st.sidebar.radio(
        "Navigate to:",
        ["🎯 Goals", "💳 Payments", "📝 Wishlist", "📊 Dashboard", "📅 Calendar"],
        index=0,
    )

    app_settings = get_settings().app
    if app_settings.debug_mode:
        st.sidebar.caption(f"Environment: {app_settings.app_environment}")
        st.sidebar.json(validate_all_settings())

    try:
        if page == "🎯 Goals":
            render_goals_page(tracker)
        elif page == "💳 Payments":
            render_payments_page(tracker)
        elif page == "📝 Wishlist":
            render_wishlist_page(tracker)
        elif page == "📊 Dashboard":
            render_dashboard_page(tracker)
        elif page == "📅 Calendar":
            render_calendar_page(tracker)
    except StorageWriteError as e:
        st.error(f"Your change is shown but could not be saved: {e}")


def render_goals_page(tracker: FinanceTracker):
    st.title("🎯 My Savings Goals")

    with st.expander("➕ New goal"):
        with st.form("new_goal", clear_on_submit=True):
            name = st.text_input("Name")
            target = st.number_input("Target amount", min_value=0.0, step=100.0)
            category = st.text_input("Category")
            priority = st.selectbox("Priority", list(Priority), index=1, format_func=lambda p: p.value)
            if st.form_submit_button("Save goal", type="primary"):
                if show_issues(tracker.validator.validate_goal_form(name, str(target))):
                    tracker.add_goal(name, str(target), category, priority)
                    st.rerun()

    goals = tracker.sorted_goals()
    if not goals:
        st.info("You have no savings goals yet. Create your first one to start saving!")
        return

    columns = st.columns(3)
    for position, goal in enumerate(goals):
        progress = tracker.goal_progress(goal)
        with columns[position % 3].container(border=True):
            accent_bar(goal.color)
            st.subheader(goal.name)
            st.caption(f"{goal.category or 'No category'} · {goal.priority.value}")
            st.progress(float(progress.percent) / 100)
            st.write(f"{money(goal.saved_amount)} of {money(goal.target_amount)}")
            st.caption(f"Remaining: {money(progress.remaining_amount)}")

            if progress.is_completed:
                st.success("Goal reached!")
            elif progress.plan_target_date is not None:
                st.info(
                    f"Saving {money(progress.plan_amount)} "
                    f"({progress.plan_frequency.value.lower()}) reaches the goal by "
                    f"{progress.plan_target_date.isoformat()}."
                )
            elif progress.periods_to_goal is not None:
                st.info(f"You will reach the goal in {progress.periods_to_goal} periods.")

            if not progress.is_completed:
                render_contribution_form(tracker, goal)
                render_projection_form(tracker, goal)

            if st.button("🗑️ Delete", key=f"delete-goal-{goal.id}"):
                tracker.delete_goal(goal.id)
                st.rerun()


def render_contribution_form(tracker: FinanceTracker, goal):
    with st.form(f"contribute-{goal.id}", clear_on_submit=True):
        amount = st.number_input("Contribute", min_value=0.0, step=50.0, key=f"amount-{goal.id}")
        if st.form_submit_button("Add contribution"):
            if show_issues(tracker.validator.validate_goal_contribution(goal, str(amount))):
                tracker.contribute_to_goal(goal.id, str(amount))
                st.rerun()


def render_projection_form(tracker: FinanceTracker, goal):
    default_date, default_frequency = tracker.default_plan(goal.id)
    frequencies = [f for f in Frequency if f.is_recurring]
    with st.expander("Plan your savings"):
        target_date = st.date_input(
            "Reach it by",
            value=default_date,
            key=f"plan-date-{goal.id}",
        )
        frequency = st.selectbox(
            "Contribute",
            frequencies,
            index=frequencies.index(default_frequency) if default_frequency in frequencies else 0,
            format_func=lambda f: f.value,
            key=f"plan-frequency-{goal.id}",
        )
        suggestion = tracker.suggest_plan(goal.id, target_date, frequency)
        if suggestion is None:
            st.caption("Pick a date after today to see a suggestion.")
        else:
            st.metric("Suggested contribution", money(suggestion))
        if st.button("Save plan", key=f"plan-save-{goal.id}"):
            result = tracker.validator.validate_projection_form(goal, target_date, frequency)
            if show_issues(result):
                tracker.save_projection(goal.id, target_date, frequency)
                st.rerun()


def render_payments_page(tracker: FinanceTracker):
    st.title("💳 My Scheduled Payments")

    with st.expander("➕ New payment"):
        with st.form("new_payment", clear_on_submit=True):
            name = st.text_input("Name")
            amount = st.number_input("Amount", min_value=0.0, step=100.0)
            due_date = st.date_input("Due date", value=date.today())
            category = st.text_input("Category")
            frequency = st.selectbox("Frequency", list(Frequency), index=3, format_func=lambda f: f.value)
            if st.form_submit_button("Save payment", type="primary"):
                if show_issues(tracker.validator.validate_payment_form(name, str(amount), due_date)):
                    tracker.add_payment(name, str(amount), due_date, category, frequency)
                    st.rerun()

    payments = tracker.sorted_payments()
    if not payments:
        st.info("No payments yet. Add your payments so you never miss a due date.")
        return

    for payment in payments:
        urgency = tracker.payment_urgency(payment, for_card=True)
        with st.container(border=True):
            accent_bar(payment.color)
            left, right = st.columns([3, 2])
            with left:
                st.subheader(payment.name)
                st.caption(f"{payment.category or 'No category'} · {payment.frequency.value}")
                st.write(URGENCY_LABELS[urgency.kind].format(days=urgency.days))
                st.caption(f"Due: {payment.due_date.isoformat()}")
            with right:
                st.write(f"{money(payment.paid_amount)} of {money(payment.amount)}")
                if not payment.is_covered:
                    with st.form(f"pay-{payment.id}", clear_on_submit=True):
                        amount = st.number_input("Pay", min_value=0.0, step=50.0, key=f"pay-amount-{payment.id}")
                        if st.form_submit_button("Add payment"):
                            result = tracker.validator.validate_payment_contribution(payment, str(amount))
                            if show_issues(result):
                                tracker.contribute_to_payment(payment.id, str(amount))
                                st.rerun()
                    if st.button("Mark as paid", key=f"paid-{payment.id}"):
                        tracker.mark_payment_paid(payment.id)
                        st.rerun()
                if st.button("🗑️ Delete", key=f"delete-payment-{payment.id}"):
                    tracker.delete_payment(payment.id)
                    st.rerun()


def render_wishlist_page(tracker: FinanceTracker):
    st.title("📝 Wishlist")

    with st.expander("➕ New item"):
        with st.form("new_wish", clear_on_submit=True):
            name = st.text_input("Name")
            category = st.text_input("Category")
            priority = st.selectbox("Priority", list(Priority), index=1, format_func=lambda p: p.value)
            estimate = st.number_input("Estimated amount", min_value=0.0, step=100.0)
            url = st.text_input("Link")
            if st.form_submit_button("Save item", type="primary"):
                if show_issues(tracker.validator.validate_wishlist_form(name, str(estimate))):
                    tracker.add_wishlist_item(name, category, priority, str(estimate) if estimate else None, url)
                    st.rerun()

    for item in tracker.wishlist:
        with st.container(border=True):
            st.subheader(item.name)
            st.caption(f"{item.category or 'No category'} · {item.priority.value}")
            if item.estimated_amount is not None:
                st.write(f"Estimated: {money(item.estimated_amount)}")
            if item.url:
                st.markdown(f"[Link]({item.url})")
            convert, delete = st.columns(2)
            if convert.button("🎯 Make it a goal", key=f"convert-{item.id}"):
                tracker.convert_wishlist_item(item.id)
                st.rerun()
            if delete.button("🗑️ Delete", key=f"delete-wish-{item.id}"):
                tracker.delete_wishlist_item(item.id)
                st.rerun()


def render_dashboard_page(tracker: FinanceTracker):
    st.title("📊 Dashboard")
    summary = tracker.dashboard()

    first, second, third, fourth = st.columns(4)
    first.metric("Still due", money(summary.total_due))
    second.metric("Paid", money(summary.total_paid))
    third.metric("Saved", money(summary.total_saved))
    fourth.metric("Goals reached", summary.completed_goals)

    st.subheader(f"Needs attention ({summary.urgent_count})")
    if not summary.urgent_payments:
        st.success("Nothing due in the next days.")
    for entry in summary.urgent_payments:
        label = URGENCY_LABELS[entry.urgency.kind].format(days=entry.urgency.days)
        st.write(f"**{entry.payment.name}** · {money(entry.payment.remaining_amount)} · {label}")


def render_calendar_page(tracker: FinanceTracker):
    st.title("📅 Calendar")
    today = date.today()
    picked = st.date_input("Month", value=today.replace(day=1))
    month = tracker.calendar_month(picked.year, picked.month)

    headers = st.columns(7)
    for column, name in zip(headers, ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]):
        column.markdown(f"**{name}**")

    for week_start in range(0, len(month.days), 7):
        columns = st.columns(7)
        for column, day in zip(columns, month.days[week_start:week_start + 7]):
            if day is None:
                continue
            marker = "🔵 " if day == today else ""
            column.markdown(f"{marker}**{day.day}**")
            for event in month.events_on(day):
                icon = "💳" if event.kind.value == "payment" else "🎯"
                column.markdown(
                    f'<span style="color:{ACCENTS.get(event.color, "#3b82f6")}">{icon} {event.title}</span>',
                    unsafe_allow_html=True,
                )


if __name__ == "__main__":
    main()
