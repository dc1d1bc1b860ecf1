import json
import logging
import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Mapping, Tuple

from financely import config
from financely.domain import Budget, Goal, Snapshot, Transaction
from financely.functional import Either, Left, Right, validate_budget, validate_goal

logger = logging.getLogger(__name__)

UNKNOWN_MONTH = "Unknown"


def parse_amount(value: Any) -> float:
    """Parse a numeric field permissively; anything unusable becomes 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount):
        return 0.0
    return amount


def round1(value: float) -> float:
    # half-up, matching how percentages are shown to the user
    try:
        return float(Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))
    except InvalidOperation:
        # more digits than the decimal context holds
        return round(value, 1)


def month_key(date: str) -> str:
    """'05-01-2024' -> '01-2024'; missing or malformed dates -> 'Unknown'."""
    if not date:
        return UNKNOWN_MONTH
    parts = str(date).strip().split("-")
    if len(parts) != 3 or not (parts[1].isdecimal() and parts[2].isdecimal()):
        return UNKNOWN_MONTH
    return f"{parts[1]}-{parts[2]}"


def month_sort_key(key: str) -> Tuple[int, int]:
    month, year = key.split("-")
    return int(year), int(month)


def format_money(value: float, symbol: str = config.CURRENCY_SYMBOL) -> str:
    text = f"{abs(value):,.2f}".rstrip("0").rstrip(".")
    sign = "-" if value < 0 and text != "0" else ""
    return f"{sign}{symbol}{text}"


def format_percent(value: float) -> str:
    text = f"{value:,.1f}".rstrip("0").rstrip(".")
    return f"{'0' if text == '-0' else text}%"


def format_share(value: float) -> str:
    """Percentage of a whole, always with one decimal: 90 -> '90.0%'."""
    return f"{value:.1f}%"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def to_transaction(raw: Mapping[str, Any]) -> Transaction:
    return Transaction(
        type=_text(raw.get("type")) or "expense",
        amount=parse_amount(raw.get("amount")),
        name=_text(raw.get("name")),
        category=_text(raw.get("category")),
        date=_text(raw.get("date")),
    )


def to_budget(raw: Mapping[str, Any]) -> Budget:
    return Budget(
        category=_text(raw.get("category")) or "Uncategorized",
        limit=parse_amount(raw.get("limit")),
        period=_text(raw.get("period")) or "monthly",
    )


def to_goal(raw: Mapping[str, Any]) -> Goal:
    target = parse_amount(raw.get("targetAmount", raw.get("target_amount")))
    current = parse_amount(raw.get("currentAmount", raw.get("current_amount")))
    return Goal(
        name=_text(raw.get("name")) or "Goal",
        target_amount=target,
        current_amount=current,
        priority=_text(raw.get("priority")) or "medium",
        category=_text(raw.get("category")),
        completed=current >= target,
        target_date=raw.get("targetDate", raw.get("target_date")) or None,
    )


def snapshot_from_dict(data: Mapping[str, Any]) -> Snapshot:
    """Build a Snapshot from loosely-typed records, dropping invalid budgets and goals.

    Precomputed totals (income, expense, currentBalance) in the document are
    ignored; the context always derives them from the transactions.
    """
    transactions = tuple(to_transaction(t) for t in data.get("transactions") or ())

    budgets = []
    for raw in data.get("budgets") or ():
        result = validate_budget(to_budget(raw))
        if result.is_right():
            budgets.append(result.get_or_else(None))
        else:
            logger.warning("Skipping budget: %s", result.error["message"])

    goals = []
    for raw in data.get("goals") or ():
        result = validate_goal(to_goal(raw))
        if result.is_right():
            goals.append(result.get_or_else(None))
        else:
            logger.warning("Skipping goal: %s", result.error["message"])

    return Snapshot(transactions=transactions, budgets=tuple(budgets), goals=tuple(goals))


def load_snapshot(path: str) -> Snapshot:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    snapshot = snapshot_from_dict(data)
    logger.info(
        "Loaded %d transactions, %d budgets, %d goals from %s",
        len(snapshot.transactions), len(snapshot.budgets), len(snapshot.goals), path,
    )
    return snapshot


def add_transaction(snapshot: Snapshot, t: Transaction) -> Snapshot:
    return Snapshot(
        transactions=snapshot.transactions + (t,),
        budgets=snapshot.budgets,
        goals=snapshot.goals,
    )


def update_budget(snapshot: Snapshot, category: str, new_limit: float) -> Either[dict, Snapshot]:
    if new_limit <= 0:
        return Left({
            "error": "invalid_limit",
            "message": f"Budget for {category} must have a positive limit",
            "category": category,
            "limit": new_limit,
        })
    budgets = tuple(
        Budget(
            category=b.category,
            limit=new_limit if b.category == category else b.limit,
            period=b.period,
        )
        for b in snapshot.budgets
    )
    return Right(Snapshot(transactions=snapshot.transactions, budgets=budgets, goals=snapshot.goals))


def update_goal_progress(snapshot: Snapshot, name: str, new_amount: float) -> Snapshot:
    amount = max(0.0, parse_amount(new_amount))
    goals = tuple(
        Goal(
            name=g.name,
            target_amount=g.target_amount,
            current_amount=amount,
            priority=g.priority,
            category=g.category,
            completed=amount >= g.target_amount,
            target_date=g.target_date,
        ) if g.name == name else g
        for g in snapshot.goals
    )
    return Snapshot(transactions=snapshot.transactions, budgets=snapshot.budgets, goals=goals)


def income_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.is_income, trans))


def expense_transactions(trans: Tuple[Transaction, ...]) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: not t.is_income, trans))


def transaction_amounts(trans: Tuple[Transaction, ...]) -> Tuple[float, ...]:
    return tuple(map(lambda t: t.amount, trans))
