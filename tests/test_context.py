from financely.context import (
    budget_status,
    budget_summary,
    build_financial_context,
    expense_trend,
    group_by_category,
)
from financely.domain import Budget, CategoryTotals, Goal, MonthTotals, Snapshot, TopCategory, Transaction
from financely.transforms import snapshot_from_dict


def make_tx(type, amount, name="", date="", category=""):
    return Transaction(type=type, amount=amount, name=name, category=category, date=date)


def test_basic_totals_example():
    snap = Snapshot(transactions=(
        make_tx("income", 10000, date="01-01-2024"),
        make_tx("expense", 9000, "Rent", "05-01-2024"),
    ))
    ctx = build_financial_context(snap)

    assert ctx.total_income == 10000
    assert ctx.total_expense == 9000
    assert ctx.current_balance == 1000
    assert ctx.savings_rate == 10.0
    assert ctx.transaction_count == 2
    assert ctx.top_categories == (TopCategory(name="Rent", amount=9000, count=1),)
    assert ctx.monthly_data == {"01-2024": MonthTotals(income=10000, expense=9000)}


def test_balance_is_income_minus_expense():
    snap = Snapshot(transactions=(
        make_tx("income", 120.75, "Salary", "01-03-2024"),
        make_tx("expense", 300.5, "Rent", "02-03-2024"),
        make_tx("expense", 0.25, "Fee", "03-03-2024"),
    ))
    ctx = build_financial_context(snap)

    assert ctx.current_balance == ctx.total_income - ctx.total_expense
    assert ctx.current_balance < 0


def test_empty_snapshot():
    ctx = build_financial_context(Snapshot())

    assert ctx.total_income == 0
    assert ctx.total_expense == 0
    assert ctx.savings_rate == 0
    assert ctx.expense_trend == 0
    assert ctx.top_categories == ()
    assert ctx.monthly_data == {}
    assert ctx.budget_status == ()


def test_missing_date_goes_to_unknown_bucket():
    snap = Snapshot(transactions=(
        make_tx("expense", 100, "Food", "01-01-2024"),
        make_tx("expense", 1000, "Food"),
    ))
    ctx = build_financial_context(snap)

    assert ctx.monthly_data["Unknown"].expense == 1000
    # Unknown is not a month for trend purposes
    assert ctx.expense_trend == 0


def test_category_key_falls_back_to_category_then_uncategorized():
    cats = group_by_category((
        make_tx("expense", 10, "Coffee", category="food"),
        make_tx("expense", 20, category="food"),
        make_tx("expense", 30),
        make_tx("income", 40),
    ))

    assert cats["Coffee"] == CategoryTotals(income=0, expense=10, count=1)
    assert cats["food"] == CategoryTotals(income=0, expense=20, count=1)
    assert cats["Uncategorized"] == CategoryTotals(income=40, expense=30, count=2)


def test_expense_trend_orders_months_chronologically():
    monthly = {
        "01-2025": MonthTotals(expense=800),
        "12-2024": MonthTotals(expense=500),
        "11-2024": MonthTotals(expense=200),
    }
    assert expense_trend(monthly) == 300


def test_expense_trend_needs_two_months():
    assert expense_trend({"01-2025": MonthTotals(expense=800)}) == 0
    assert expense_trend({}) == 0


def test_non_ascii_digits_in_date_go_to_unknown_bucket():
    snap = snapshot_from_dict({"transactions": [
        {"type": "expense", "amount": 100, "name": "Food", "date": "05-01-2024"},
        {"type": "expense", "amount": 50, "name": "Food", "date": "05-²-2024"},
    ]})
    ctx = build_financial_context(snap)

    assert set(ctx.monthly_data) == {"01-2024", "Unknown"}
    assert ctx.monthly_data["Unknown"] == MonthTotals(income=0, expense=50)
    assert ctx.expense_trend == 0


def test_top_categories_limit_and_stable_ties():
    trans = tuple(
        make_tx("expense", amount, name, "01-01-2024")
        for name, amount in [("A", 50), ("B", 100), ("C", 50), ("D", 10), ("E", 70), ("F", 5)]
    ) + (make_tx("income", 1000, "Salary", "01-01-2024"),)
    ctx = build_financial_context(Snapshot(transactions=trans))

    assert [c.name for c in ctx.top_categories] == ["B", "E", "A", "C", "D"]


def test_budget_status():
    cats = {"Food": CategoryTotals(expense=1250, count=3)}
    statuses = budget_status((Budget("Food", 1000), Budget("Travel", 400, "weekly")), cats)

    food, travel = statuses
    assert food.spent == 1250
    assert food.remaining == -250
    assert food.percentage == 125.0
    assert food.over_limit
    assert food.display_percentage == 100.0
    assert travel.spent == 0
    assert travel.remaining == 400
    assert travel.percentage == 0.0
    assert travel.period == "weekly"
    assert not travel.over_limit


def test_budget_status_percentage_rounds_to_one_decimal():
    cats = {"Food": CategoryTotals(expense=100, count=1)}
    (status,) = budget_status((Budget("Food", 300),), cats)

    assert status.percentage == 33.3
    assert status.remaining == status.limit - status.spent


def test_budget_status_tolerates_zero_limit():
    (status,) = budget_status((Budget("Food", 0),), {"Food": CategoryTotals(expense=10)})
    assert status.percentage == 0.0


def test_budget_summary():
    cats = {"Food": CategoryTotals(expense=1250), "Rent": CategoryTotals(expense=500)}
    summary = budget_summary(budget_status((Budget("Food", 1000), Budget("Rent", 800)), cats))

    assert summary.total_limit == 1800
    assert summary.total_spent == 1750
    assert summary.remaining == 50


def test_recent_transactions_keeps_last_ten():
    trans = tuple(make_tx("expense", i, "X", "01-01-2024") for i in range(12))
    ctx = build_financial_context(Snapshot(transactions=trans))

    assert len(ctx.recent_transactions) == 10
    assert ctx.recent_transactions[0].amount == 2


def test_goals_pass_through():
    goals = (Goal("Car", 1000, 200),)
    ctx = build_financial_context(Snapshot(goals=goals))
    assert ctx.goals == goals


def test_context_builder_is_idempotent():
    snap = Snapshot(
        transactions=(
            make_tx("income", 500, "Salary", "01-02-2024"),
            make_tx("expense", 200, "Food", "03-02-2024"),
            make_tx("expense", 250, "Food", "03-03-2024"),
        ),
        budgets=(Budget("Food", 300),),
    )
    assert build_financial_context(snap) == build_financial_context(snap)
    assert repr(build_financial_context(snap)) == repr(build_financial_context(snap))
