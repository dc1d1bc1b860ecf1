"""
advice.py

Chat answers for the finance assistant.

Every answer is built from the same snapshot-derived context and
predictive insight. When a text generator is available the full
profile is sent to it as a prompt; when there is no generator, or the
call fails for any reason, the message is matched against a fixed
keyword list and a templated answer is rendered instead. Both paths
return an AdviceResult so callers can tell which one produced the text.
"""

import asyncio
import logging
from typing import Callable, List, Optional, Sequence, Tuple

from financely.context import build_financial_context
from financely.domain import FinancialContext, PredictiveInsight, Snapshot
from financely.functional import AdviceResult, Fallback, Live
from financely.goals import active_goals
from financely.llm import TextGenerator
from financely.recommendations import get_predictive_insights
from financely.transforms import format_money, format_percent, format_share

logger = logging.getLogger(__name__)

Template = Callable[[FinancialContext, PredictiveInsight], str]


def _trend_label(trend: float) -> str:
    if trend > 0:
        return "Increasing"
    if trend < 0:
        return "Decreasing"
    return "Stable"


def _bullets(lines: Sequence[str], empty: str) -> str:
    return "\n".join(lines) if lines else empty


def _budget_lines(context: FinancialContext, suffix: str = "") -> List[str]:
    return [
        f"- {b.category}: {format_money(b.spent)}/{format_money(b.limit)} "
        f"({format_share(b.percentage)}{suffix})"
        for b in context.budget_status
    ]


def _goal_lines(context: FinancialContext) -> List[str]:
    return [
        f"- {g.name}: {format_money(g.current_amount)}/{format_money(g.target_amount)}"
        for g in context.goals
    ]


def build_prompt(message: str, context: FinancialContext, insight: PredictiveInsight) -> str:
    top = [
        f"{i}. {c.name}: {format_money(c.amount)}"
        for i, c in enumerate(context.top_categories, start=1)
    ]
    recent = [
        f"- {t.date or 'Unknown date'} {t.type} {t.category_key}: {format_money(t.amount)}"
        for t in context.recent_transactions
    ]
    recs = [f"- {r.title}: {r.message}" for r in insight.recommendations]

    return f"""You are an AI personal finance assistant. You provide data-driven, actionable financial advice.

User's Financial Profile:
- Total Income: {format_money(context.total_income)}
- Total Expenses: {format_money(context.total_expense)}
- Current Balance: {format_money(context.current_balance)}
- Savings Rate: {format_percent(context.savings_rate)}
- Financial Health Score: {insight.health_score}/100 ({insight.risk_level} Risk)
- Total Transactions: {context.transaction_count}

Top Spending Categories:
{_bullets(top, 'No expenses recorded yet')}

Budget Status:
{_bullets(_budget_lines(context), 'No budgets set yet')}

Financial Goals:
{_bullets(_goal_lines(context), 'No goals set yet')}

Recent Transactions:
{_bullets(recent, 'No transactions yet')}

Predictive Insights:
- Predicted Next Month Expense: {format_money(insight.predicted_expense)}
- Expense Trend: {_trend_label(context.expense_trend)}
{_bullets(recs, '- No open recommendations')}

Guidelines:
- Be specific and actionable, and reference categories, amounts and trends from the profile.
- Do NOT invent numbers that are not present in the profile.
- Consider the health score and risk level.
- For investment questions give general guidance and suggest consulting a certified financial advisor.
- Be encouraging but realistic, in a friendly and professional tone.

User Question: {message}"""


def _budget_reply(context: FinancialContext, insight: PredictiveInsight) -> str:
    if context.budget_status:
        budgets = "📊 Your Budget Status:\n" + "\n".join(_budget_lines(context, " used"))
    else:
        budgets = "💡 Tip: Set up budgets for different categories to better control your spending!"
    return f"""Based on your financial data, here's a budgeting analysis:

💰 Current Financial Status:
- Income: {format_money(context.total_income)}
- Expenses: {format_money(context.total_expense)}
- Balance: {format_money(context.current_balance)}
- Savings Rate: {format_percent(context.savings_rate)}

{budgets}

🎯 Recommendation: Follow the 50/30/20 rule - allocate 50% for needs, 30% for wants, and 20% for savings."""


def _savings_reply(context: FinancialContext, insight: PredictiveInsight) -> str:
    if context.savings_rate < 20:
        advice = (
            "⚠️ Your savings rate is below the recommended 20%. Here are some strategies:\n\n"
            "1. Automate your savings - set up automatic transfers\n"
            "2. Review your top spending categories and find areas to cut\n"
            "3. Use the 50/30/20 budgeting rule\n"
            "4. Track every expense to identify unnecessary spending"
        )
    else:
        advice = "✅ Great job! You're maintaining a healthy savings rate."
    goals = _bullets(
        _goal_lines(context),
        "💡 Set up financial goals to stay motivated and track your progress!",
    )
    return f"""Great question about saving! Here's your savings analysis:

📈 Current Savings Rate: {format_percent(context.savings_rate)}
{advice}

💰 Your Financial Goals:
{goals}"""


def _forecast_reply(context: FinancialContext, insight: PredictiveInsight) -> str:
    recs = _bullets(
        [f"- {r.title}: {r.message}" for r in insight.recommendations],
        "- Keep doing what you're doing!",
    )
    return f"""🔮 Financial Forecast Based on Your Data:

Predicted Next Month Expense: {format_money(insight.predicted_expense)}
Expense Trend: {_trend_label(context.expense_trend)}

📊 Financial Health Score: {insight.health_score}/100 ({insight.risk_level} Risk)

💡 Recommendations:
{recs}

Based on your spending patterns, I recommend focusing on maintaining or improving your current savings rate."""


def _health_reply(context: FinancialContext, insight: PredictiveInsight) -> str:
    if insight.health_score >= 80:
        verdict = "✅ Excellent! You're in great financial shape. Keep up the good work!"
    elif insight.health_score >= 60:
        verdict = "⚠️ Good, but there's room for improvement. Focus on increasing your savings rate."
    else:
        verdict = "🚨 Your financial health needs attention. Consider reducing expenses and increasing savings."
    actions = _bullets(
        [f"- {r.message}" for r in insight.recommendations[:3]],
        "- No action needed right now.",
    )
    return f"""🏥 Your Financial Health Report:

Score: {insight.health_score}/100 ({insight.risk_level} Risk Level)

📊 Breakdown:
- Income: {format_money(context.total_income)}
- Expenses: {format_money(context.total_expense)}
- Balance: {format_money(context.current_balance)}
- Savings Rate: {format_percent(context.savings_rate)}

{verdict}

💡 Action Items:
{actions}"""


def _overview_reply(context: FinancialContext, insight: PredictiveInsight) -> str:
    return f"""I'm here to help with your personal finance! Based on your data:

💰 Financial Overview:
- Income: {format_money(context.total_income)}
- Expenses: {format_money(context.total_expense)}
- Balance: {format_money(context.current_balance)}
- Health Score: {insight.health_score}/100

I can help you with budgeting, savings strategies, expense analysis, financial forecasting, goal setting, and more. What would you like to know?"""


# first match wins
FALLBACK_ROUTES: Tuple[Tuple[Tuple[str, ...], Template], ...] = (
    (("budget", "spending limit"), _budget_reply),
    (("save", "saving"), _savings_reply),
    (("predict", "forecast", "future"), _forecast_reply),
    (("health", "score", "status"), _health_reply),
)


def select_template(message: str) -> Template:
    text = (message or "").lower()
    for keywords, template in FALLBACK_ROUTES:
        if any(k in text for k in keywords):
            return template
    return _overview_reply


def fallback_response(message: str, context: FinancialContext, insight: PredictiveInsight) -> str:
    return select_template(message)(context, insight)


async def get_financial_advice(
    message: str,
    snapshot: Snapshot,
    client: Optional[TextGenerator] = None,
) -> AdviceResult:
    context = build_financial_context(snapshot)
    insight = get_predictive_insights(context)

    if client is None:
        logger.info("No text generator configured, answering from templates")
        return Fallback(fallback_response(message, context, insight))

    try:
        text = await client.generate(build_prompt(message, context, insight))
        if not isinstance(text, str) or not text.strip():
            raise ValueError("empty response from text generator")
    except Exception as e:
        logger.warning("Text generation failed, answering from templates: %s", e)
        return Fallback(fallback_response(message, context, insight))

    return Live(text)


def get_financial_advice_sync(
    message: str,
    snapshot: Snapshot,
    client: Optional[TextGenerator] = None,
) -> AdviceResult:
    return asyncio.run(get_financial_advice(message, snapshot, client))


def quick_insights(context: FinancialContext, insight: PredictiveInsight) -> List[str]:
    insights = []

    if insight.health_score >= 80:
        insights.append(f"✅ Excellent Financial Health Score: {insight.health_score}/100!")
    elif insight.health_score < 60:
        insights.append(
            f"⚠️ Financial Health Score: {insight.health_score}/100 - Focus on improving your savings rate"
        )

    if context.savings_rate >= 20:
        insights.append(f"💪 Great savings rate of {format_percent(context.savings_rate)}! You're on track.")
    elif context.savings_rate < 10:
        insights.append(
            f"⚠️ Your savings rate is {format_percent(context.savings_rate)}. Aim for at least 20% to build wealth."
        )

    over = len(context.over_budget)
    if over > 0:
        insights.append(f"🚨 You've exceeded budget in {over} categor{'ies' if over > 1 else 'y'}")

    if context.expense_trend > 0:
        insights.append("📈 Your expenses are trending upward. Consider reviewing your spending.")

    if context.top_categories:
        top = context.top_categories[0]
        insights.append(f"🎯 Top spending: {top.name} ({format_money(top.amount)})")

    active = active_goals(context.goals)
    if active:
        insights.append(f"🎯 {len(active)} active financial goal{'s' if len(active) > 1 else ''} to track")

    return insights or ["💡 Add more transactions and set up budgets to get personalized insights!"]
