import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from financely import config
from financely.context import budget_summary, build_financial_context
from financely.domain import Transaction
from financely.filters import by_amount_range, by_category, by_month, by_type
from financely.goals import goal_progress, sort_goals
from financely.llm import get_client
from financely.patterns import analyze_spending_patterns
from financely.recommendations import get_predictive_insights
from financely.services import AdviceService
from financely.transforms import (
    add_transaction,
    format_money,
    format_percent,
    load_snapshot,
    month_sort_key,
    UNKNOWN_MONTH,
    update_budget,
    update_goal_progress,
)
from financely.advice import quick_insights

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Financely", layout="wide")

if "snapshot" not in st.session_state:
    st.session_state.snapshot = load_snapshot(config.SNAPSHOT_PATH)
if "chat" not in st.session_state:
    st.session_state.chat = []
if "advisor" not in st.session_state:
    st.session_state.advisor = AdviceService(get_client())

snapshot = st.session_state.snapshot
context = build_financial_context(snapshot)
insight = get_predictive_insights(context)

RISK_COLORS = {"Low": "green", "Medium": "orange", "High": "red"}

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "🧾 Transactions", "📊 Analytics", "💰 Budgets & Goals", "🤖 Assistant"]
)

st.sidebar.markdown("### 💡 Quick Insights")
for line in quick_insights(context, insight):
    st.sidebar.caption(line)


def monthly_frame(monthly) -> pd.DataFrame:
    keys = sorted((k for k in monthly if k != UNKNOWN_MONTH), key=month_sort_key)
    return pd.DataFrame({
        "month": keys,
        "income": [monthly[k].income for k in keys],
        "expense": [monthly[k].expense for k in keys],
    })


if menu == "🏠 Overview":
    st.title("🏠 Overview")
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Income", format_money(context.total_income))
    with k2:
        st.metric("Expenses", format_money(context.total_expense))
    with k3:
        st.metric("Balance", format_money(context.current_balance))
    with k4:
        st.metric("Savings Rate", format_percent(context.savings_rate))

    color = RISK_COLORS[insight.risk_level]
    st.markdown(
        f"### Financial Health Score: :{color}[{insight.health_score}/100] ({insight.risk_level} Risk)"
    )
    st.progress(insight.health_score / 100)
    st.caption(f"Predicted next month expense: {format_money(insight.predicted_expense)}")

    df_month = monthly_frame(context.monthly_data)
    if not df_month.empty:
        fig_ts = go.Figure()
        fig_ts.add_trace(go.Scatter(x=df_month["month"], y=df_month["income"], mode="lines+markers", name="Income"))
        fig_ts.add_trace(go.Scatter(x=df_month["month"], y=df_month["expense"], mode="lines+markers", name="Expense"))
        fig_ts.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
        st.plotly_chart(fig_ts, use_container_width=True)
    else:
        st.info("No dated transactions to chart.")

    st.subheader("🔔 Recommendations")
    if insight.recommendations:
        for rec in insight.recommendations:
            box = st.error if rec.type in ("alert", "critical") else st.warning if rec.type == "warning" else st.info
            box(f"**{rec.title}**: {rec.message}")
    else:
        st.success("Nothing to flag. Keep it up!")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")

    with st.form("input_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            kind = st.selectbox("Type", ["expense", "income"])
            tx_date = st.date_input("Date", value=date.today())
        with col2:
            name = st.text_input("Name / Category")
            amount = st.number_input("Amount", min_value=0.0, step=100.0, format="%.2f")
        submitted = st.form_submit_button("Add Transaction")

        if submitted:
            t = Transaction(
                type=kind,
                amount=float(amount),
                name=name.strip(),
                date=tx_date.strftime("%d-%m-%Y"),
            )
            st.session_state.snapshot = add_transaction(snapshot, t)
            st.success(f"Added {kind} {format_money(t.amount)} ({t.category_key})")
            st.rerun()

    kind_filter = st.radio("Show", ["all", "income", "expense"], horizontal=True)
    f1, f2, f3 = st.columns(3)
    with f1:
        categories = sorted({t.category_key for t in snapshot.transactions})
        category_filter = st.selectbox("Category", ["all"] + categories)
    with f2:
        months = sorted((k for k in context.monthly_data if k != UNKNOWN_MONTH), key=month_sort_key)
        month_filter = st.selectbox("Month", ["all"] + months)
    with f3:
        amounts = [t.amount for t in snapshot.transactions]
        floor, ceiling = float(min(amounts + [0.0])), float(max(amounts + [1.0]))
        low, high = st.slider("Amount", floor, ceiling, (floor, ceiling))

    rows = tuple(filter(by_amount_range(low, high), snapshot.transactions))
    if kind_filter != "all":
        rows = tuple(filter(by_type(kind_filter), rows))
    if category_filter != "all":
        rows = tuple(filter(by_category(category_filter), rows))
    if month_filter != "all":
        rows = tuple(filter(by_month(month_filter), rows))

    if rows:
        df = pd.DataFrame([
            {"Date": t.date or "-", "Type": t.type, "Name": t.category_key, "Amount": t.amount}
            for t in rows
        ])
        st.dataframe(df.assign(Amount=df["Amount"].map(format_money)), use_container_width=True)
        st.download_button("⬇ Download CSV", df.to_csv(index=False), file_name="transactions.csv")
    else:
        st.info("No transactions to display.")

elif menu == "📊 Analytics":
    st.title("📊 Analytics")
    patterns = analyze_spending_patterns(snapshot.transactions)

    a1, a2, a3 = st.columns(3)
    a1.metric("Transactions", context.transaction_count)
    a2.metric("Avg. Expense", format_money(patterns.average_transaction))
    if patterns.most_expensive_day:
        a3.metric("Most Expensive Day", patterns.most_expensive_day[0], format_money(patterns.most_expensive_day[1]))

    col_left, col_right = st.columns(2)
    with col_left:
        if context.top_categories:
            df_top = pd.DataFrame([{"Category": c.name, "Amount": c.amount, "Count": c.count} for c in context.top_categories])
            fig_top = px.bar(df_top, x="Category", y="Amount", title="Top expense categories", template="plotly_dark")
            st.plotly_chart(fig_top, use_container_width=True)
        else:
            st.info("No expenses yet")
    with col_right:
        if patterns.by_category:
            df_cat = pd.DataFrame({"Category": list(patterns.by_category), "Total": list(patterns.by_category.values())})
            fig_cat = px.pie(df_cat, values="Total", names="Category", title="Category Distribution")
            st.plotly_chart(fig_cat, use_container_width=True)

    if patterns.by_day_of_week:
        days = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
        df_day = pd.DataFrame({"Day": days, "Spent": [patterns.by_day_of_week.get(d, 0.0) for d in days]})
        fig_day = px.bar(df_day, x="Day", y="Spent", title="Spending by day of week", template="plotly_dark")
        st.plotly_chart(fig_day, use_container_width=True)

    trend = context.expense_trend
    st.caption(f"Month-over-month expense change: {format_money(trend)}")

elif menu == "💰 Budgets & Goals":
    st.title("💰 Budgets & Goals")

    summary = budget_summary(context.budget_status)
    b1, b2, b3 = st.columns(3)
    b1.metric("Total Budget", format_money(summary.total_limit))
    b2.metric("Total Spent", format_money(summary.total_spent))
    b3.metric("Remaining", format_money(summary.remaining))

    if context.budget_status:
        for status in context.budget_status:
            label = "🚨 over limit" if status.over_limit else f"{format_money(status.remaining)} remaining"
            st.write(f"**{status.category}** ({status.period}): {format_money(status.spent)} / {format_money(status.limit)} · {label}")
            st.progress(status.display_percentage / 100)

        with st.form("budget_form"):
            category = st.selectbox("Budget", [b.category for b in snapshot.budgets])
            new_limit = st.number_input("New limit", min_value=0.0, step=500.0)
            if st.form_submit_button("Update limit"):
                result = update_budget(snapshot, category, new_limit)
                if result.is_right():
                    st.session_state.snapshot = result.get_or_else(snapshot)
                    st.rerun()
                else:
                    st.error(result.error["message"])
    else:
        st.info("No budgets defined")

    st.divider()
    st.subheader("🎯 Goals")
    goals = sort_goals(context.goals)
    if goals:
        for g in goals:
            progress = goal_progress(g)
            done = "✅" if progress.is_completed else ""
            due = f", {progress.days_remaining} days left" if progress.days_remaining is not None else ""
            st.write(f"**{g.name}** {done} [{g.priority}] {format_money(g.current_amount)} / {format_money(g.target_amount)}{due}")
            st.progress(progress.percentage / 100)

        with st.form("goal_form"):
            goal_name = st.selectbox("Goal", [g.name for g in goals])
            new_amount = st.number_input("Saved so far", min_value=0.0, step=1000.0)
            if st.form_submit_button("Update progress"):
                st.session_state.snapshot = update_goal_progress(snapshot, goal_name, new_amount)
                st.rerun()
    else:
        st.info("No goals defined")

elif menu == "🤖 Assistant":
    st.title("🤖 Finance Assistant")
    advisor = st.session_state.advisor
    if advisor.client is None:
        st.caption("AI is not configured; answers come from your data templates.")

    for role, text in st.session_state.chat:
        with st.chat_message(role):
            st.markdown(text)

    question = st.chat_input("Ask about your budget, savings, forecast or financial health")
    if question:
        st.session_state.chat.append(("user", question))
        result = advisor.ask_sync(question, st.session_state.snapshot)
        st.session_state.chat.append(("assistant", result.text))
        st.rerun()
