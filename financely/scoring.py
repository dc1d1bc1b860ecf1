import logging

from financely import config
from financely.domain import FinancialContext, PredictiveInsight

logger = logging.getLogger(__name__)


def average_monthly_expense(context: FinancialContext) -> float:
    return context.total_expense / max(1, len(context.monthly_data))


def predicted_expense(context: FinancialContext, damping: float = config.TREND_DAMPING) -> float:
    return max(0.0, average_monthly_expense(context) + context.expense_trend * damping)


def health_score(context: FinancialContext) -> int:
    """Score financial stability from 100 down by fixed deductions, clamped to [0, 100].

    The deductions are independent, so a savings rate below 10 also pays
    the below-20 penalty.
    """
    score = 100
    if context.current_balance < 0:
        score -= 30
    if context.savings_rate < 10:
        score -= 20
    if context.savings_rate < 20:
        score -= 10
    trend = context.expense_trend
    if trend > 0 and trend > average_monthly_expense(context) * 0.1:
        score -= 15
    score -= 5 * len(context.over_budget)
    return int(round(max(0, min(100, score))))


def risk_level(score: int) -> str:
    if score >= 80:
        return "Low"
    if score >= 60:
        return "Medium"
    return "High"


def predict(context: FinancialContext) -> PredictiveInsight:
    """Forecast next month's expense and rate the snapshot; recommendations are added later."""
    score = health_score(context)
    insight = PredictiveInsight(
        predicted_expense=predicted_expense(context),
        health_score=score,
        risk_level=risk_level(score),
    )
    logger.debug("Health score %d (%s risk)", insight.health_score, insight.risk_level)
    return insight
