from dataclasses import replace
from typing import Tuple

from financely import config
from financely.domain import FinancialContext, PredictiveInsight, Recommendation
from financely.scoring import predict
from financely.transforms import format_percent, format_share, round1


def generate_recommendations(context: FinancialContext, score: int) -> Tuple[Recommendation, ...]:
    # every matching rule fires, in this order
    recs = []

    if context.savings_rate < config.TARGET_SAVINGS_RATE:
        recs.append(Recommendation(
            type="warning",
            title="Low Savings Rate",
            message=(
                f"Your savings rate is {format_percent(context.savings_rate)}. Aim for at least "
                f"{format_percent(config.TARGET_SAVINGS_RATE)} to build a strong financial foundation."
            ),
        ))

    if context.expense_trend > 0:
        recs.append(Recommendation(
            type="info",
            title="Increasing Expenses",
            message="Your expenses are trending upward. Review your spending patterns "
                    "to identify areas for optimization.",
        ))

    if context.top_categories:
        top = context.top_categories[0]
        if top.amount > context.total_expense * 0.3:
            share = round1(top.amount / context.total_expense * 100)
            recs.append(Recommendation(
                type="suggestion",
                title="High Spending Category",
                message=f"{top.name} accounts for {format_share(share)} of your expenses. "
                        f"Consider reviewing this category.",
            ))

    if context.over_budget:
        recs.append(Recommendation(
            type="alert",
            title="Budget Overrun",
            message="You have exceeded budgets in some categories. "
                    "Review and adjust your spending.",
        ))

    if score < 60:
        recs.append(Recommendation(
            type="critical",
            title="Financial Health Alert",
            message="Your financial health score is below optimal. "
                    "Focus on reducing expenses and increasing savings.",
        ))

    return tuple(recs)


def get_predictive_insights(context: FinancialContext) -> PredictiveInsight:
    insight = predict(context)
    return replace(insight, recommendations=generate_recommendations(context, insight.health_score))
