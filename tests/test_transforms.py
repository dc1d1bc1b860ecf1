import os

from financely.domain import Budget, Goal, Snapshot, Transaction
from financely.transforms import (
    add_transaction,
    format_money,
    format_percent,
    format_share,
    load_snapshot,
    month_key,
    parse_amount,
    round1,
    snapshot_from_dict,
    update_budget,
    update_goal_progress,
)

SNAPSHOT_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "snapshot.json")


def test_parse_amount_is_permissive():
    assert parse_amount("12.5") == 12.5
    assert parse_amount(300) == 300.0
    assert parse_amount("abc") == 0.0
    assert parse_amount(None) == 0.0
    assert parse_amount("") == 0.0
    assert parse_amount(float("nan")) == 0.0
    assert parse_amount({"amount": 5}) == 0.0


def test_round1_rounds_half_up():
    assert round1(12.25) == 12.3
    assert round1(10.0) == 10.0
    assert round1(33.333) == 33.3
    assert round1(-2.25) == -2.3


def test_month_key():
    assert month_key("05-01-2024") == "01-2024"
    assert month_key("") == "Unknown"
    assert month_key("2024/01/05") == "Unknown"
    assert month_key("aa-bb-cccc") == "Unknown"
    assert month_key("05-²-2024") == "Unknown"
    assert month_key("05-01-²²") == "Unknown"


def test_format_money_and_percent():
    assert format_money(1000) == "₹1,000"
    assert format_money(1234.5) == "₹1,234.5"
    assert format_money(-500) == "-₹500"
    assert format_money(0) == "₹0"
    assert format_percent(10.0) == "10%"
    assert format_percent(12.5) == "12.5%"
    assert format_percent(-0.0) == "0%"
    assert format_share(90) == "90.0%"
    assert format_share(33.33) == "33.3%"


def test_snapshot_from_dict_coerces_records():
    data = {
        "transactions": [
            {"type": "income", "amount": "10000", "date": "01-01-2024"},
            {"type": "expense", "amount": "oops", "name": "Rent"},
        ],
        "income": 999999,
        "budgets": [
            {"category": "Rent", "limit": 5000},
            {"category": "Food", "limit": 0},
        ],
        "goals": [
            {"name": "Car", "targetAmount": 1000, "currentAmount": 200, "completed": True},
            {"name": "Broken", "targetAmount": 0},
        ],
    }
    snap = snapshot_from_dict(data)

    assert snap.transactions[0].amount == 10000.0
    assert snap.transactions[1].amount == 0.0
    assert snap.transactions[1].date == ""
    assert [b.category for b in snap.budgets] == ["Rent"]
    assert snap.budgets[0].period == "monthly"
    assert [g.name for g in snap.goals] == ["Car"]
    assert snap.goals[0].completed is False


def test_load_snapshot():
    snap = load_snapshot(SNAPSHOT_PATH)

    assert len(snap.transactions) == 16
    assert len(snap.budgets) == 3
    assert len(snap.goals) == 3


def test_add_transaction_immutability():
    t1 = Transaction("income", 100, "Salary", date="01-09-2025")
    snap = Snapshot(transactions=(t1,))
    new_snap = add_transaction(snap, Transaction("expense", 50, "Groceries", date="02-09-2025"))

    assert new_snap is not snap
    assert len(new_snap.transactions) == 2
    assert len(snap.transactions) == 1


def test_update_budget():
    snap = Snapshot(budgets=(Budget("Food", 300), Budget("Rent", 1500)))
    result = update_budget(snap, "Food", 500)

    assert result.is_right()
    assert result.get_or_else(None).budgets[0].limit == 500
    assert snap.budgets[0].limit == 300


def test_update_budget_rejects_non_positive_limit():
    snap = Snapshot(budgets=(Budget("Food", 300),))
    result = update_budget(snap, "Food", 0)

    assert result.is_left()
    assert result.error["error"] == "invalid_limit"


def test_update_goal_progress_derives_completion():
    snap = Snapshot(goals=(Goal("Laptop", 900, 100), Goal("Trip", 500, 0)))
    new_snap = update_goal_progress(snap, "Laptop", 950)

    assert new_snap.goals[0].current_amount == 950
    assert new_snap.goals[0].completed is True
    assert new_snap.goals[1] == snap.goals[1]
    assert snap.goals[0].current_amount == 100
