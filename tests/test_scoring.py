import pytest

from financely.domain import BudgetStatus, FinancialContext, MonthTotals
from financely.scoring import (
    average_monthly_expense,
    health_score,
    predict,
    predicted_expense,
    risk_level,
)


def make_status(category, limit, spent):
    return BudgetStatus(
        category=category,
        limit=limit,
        spent=spent,
        remaining=limit - spent,
        percentage=round(spent / limit * 100, 1),
    )


def make_context(**overrides):
    fields = dict(
        total_income=2000.0,
        total_expense=1000.0,
        current_balance=1000.0,
        savings_rate=50.0,
        transaction_count=4,
        top_categories=(),
        expense_trend=0.0,
        monthly_data={
            "01-2024": MonthTotals(income=1000, expense=500),
            "02-2024": MonthTotals(income=1000, expense=500),
        },
        categories={},
        budget_status=(),
        goals=(),
    )
    fields.update(overrides)
    return FinancialContext(**fields)


def test_healthy_context_scores_100():
    assert health_score(make_context()) == 100


def test_negative_balance_and_low_savings_example():
    ctx = make_context(current_balance=-500.0, savings_rate=5.0)
    score = health_score(ctx)

    assert score == 40
    assert risk_level(score) == "High"


def test_savings_below_ten_pays_both_rate_penalties():
    # the below-10 and below-20 deductions stack on purpose
    assert health_score(make_context(savings_rate=5.0)) == 70
    assert health_score(make_context(savings_rate=15.0)) == 90
    assert health_score(make_context(savings_rate=10.0)) == 90


def test_each_over_budget_costs_five_points():
    one = make_context(budget_status=(make_status("Food", 100, 150),))
    two = make_context(budget_status=(make_status("Food", 100, 150), make_status("Rent", 100, 101)))
    at_limit = make_context(budget_status=(make_status("Food", 100, 100),))

    assert health_score(one) == 95
    assert health_score(two) == 90
    assert health_score(at_limit) == 100


def test_trend_penalty_needs_more_than_ten_percent_of_average():
    # average monthly expense is 500
    assert health_score(make_context(expense_trend=100.0)) == 85
    assert health_score(make_context(expense_trend=50.0)) == 100
    assert health_score(make_context(expense_trend=-300.0)) == 100


def test_score_is_clamped_for_pathological_input():
    many = tuple(make_status(f"c{i}", 10, 1e12) for i in range(50))
    ctx = make_context(
        total_income=0.0,
        total_expense=1e15,
        current_balance=-1e15,
        savings_rate=0.0,
        expense_trend=1e15,
        budget_status=many,
    )
    score = health_score(ctx)

    assert score == 0
    assert isinstance(score, int)


@pytest.mark.parametrize("score,level", [(100, "Low"), (80, "Low"), (79, "Medium"), (60, "Medium"), (59, "High"), (0, "High")])
def test_risk_level_thresholds(score, level):
    assert risk_level(score) == level


def test_average_uses_at_least_one_month():
    assert average_monthly_expense(make_context(monthly_data={}, total_expense=900.0)) == 900.0
    assert average_monthly_expense(make_context()) == 500.0


def test_predicted_expense_applies_damped_trend():
    assert predicted_expense(make_context(expense_trend=100.0)) == pytest.approx(530.0)
    assert predicted_expense(make_context(expense_trend=-2000.0)) == 0.0


def test_predict_has_no_recommendations_yet():
    insight = predict(make_context(savings_rate=5.0))

    assert insight.health_score == 70
    assert insight.risk_level == "Medium"
    assert insight.recommendations == ()
