import logging
from collections import defaultdict
from typing import Dict, Iterable, Iterator, Mapping, Tuple

from financely import config
from financely.domain import (
    Budget,
    BudgetStatus,
    BudgetSummary,
    CategoryTotals,
    FinancialContext,
    MonthTotals,
    Snapshot,
    TopCategory,
    Transaction,
)
from financely.functional import compose
from financely.transforms import (
    UNKNOWN_MONTH,
    expense_transactions,
    income_transactions,
    month_key,
    month_sort_key,
    round1,
    transaction_amounts,
)

logger = logging.getLogger(__name__)

total_income = compose(sum, transaction_amounts, income_transactions)
total_expense = compose(sum, transaction_amounts, expense_transactions)


def group_by_month(trans: Iterable[Transaction]) -> Dict[str, MonthTotals]:
    income: Dict[str, float] = defaultdict(float)
    expense: Dict[str, float] = defaultdict(float)
    keys: Dict[str, None] = {}

    for t in trans:
        key = month_key(t.date)
        keys[key] = None
        if t.is_income:
            income[key] += t.amount
        else:
            expense[key] += t.amount

    return {k: MonthTotals(income=income[k], expense=expense[k]) for k in keys}


def group_by_category(trans: Iterable[Transaction]) -> Dict[str, CategoryTotals]:
    totals: Dict[str, Tuple[float, float, int]] = {}

    for t in trans:
        inc, exp, count = totals.get(t.category_key, (0.0, 0.0, 0))
        if t.is_income:
            inc += t.amount
        else:
            exp += t.amount
        totals[t.category_key] = (inc, exp, count + 1)

    return {
        name: CategoryTotals(income=inc, expense=exp, count=count)
        for name, (inc, exp, count) in totals.items()
    }


def iter_top_categories(
    categories: Mapping[str, CategoryTotals], k: int
) -> Iterator[TopCategory]:
    # sorted() is stable, so ties keep first-seen order
    ordered = sorted(
        ((name, data) for name, data in categories.items() if data.expense > 0),
        key=lambda item: item[1].expense,
        reverse=True,
    )

    for name, data in ordered[: max(0, k)]:
        yield TopCategory(name=name, amount=data.expense, count=data.count)


def expense_trend(monthly: Mapping[str, MonthTotals]) -> float:
    """Expense delta between the two latest months, 0 with fewer than two months."""
    months = sorted((k for k in monthly if k != UNKNOWN_MONTH), key=month_sort_key)
    if len(months) < 2:
        return 0.0
    return monthly[months[-1]].expense - monthly[months[-2]].expense


def savings_rate(income: float, expense: float) -> float:
    if income <= 0:
        return 0.0
    return round1((income - expense) / income * 100)


def budget_status(
    budgets: Iterable[Budget], categories: Mapping[str, CategoryTotals]
) -> Tuple[BudgetStatus, ...]:
    statuses = []
    for b in budgets:
        spent = categories[b.category].expense if b.category in categories else 0.0
        percentage = round1(spent / b.limit * 100) if b.limit > 0 else 0.0
        statuses.append(BudgetStatus(
            category=b.category,
            limit=b.limit,
            spent=spent,
            remaining=b.limit - spent,
            percentage=percentage,
            period=b.period,
        ))
    return tuple(statuses)


def budget_summary(statuses: Iterable[BudgetStatus]) -> BudgetSummary:
    statuses = tuple(statuses)
    limit = sum(s.limit for s in statuses)
    spent = sum(s.spent for s in statuses)
    return BudgetSummary(total_limit=limit, total_spent=spent, remaining=limit - spent)


def build_financial_context(
    snapshot: Snapshot,
    top_limit: int = config.TOP_CATEGORY_LIMIT,
    recent_limit: int = config.RECENT_TRANSACTION_LIMIT,
) -> FinancialContext:
    trans = snapshot.transactions
    income = total_income(trans)
    expense = total_expense(trans)
    monthly = group_by_month(trans)
    categories = group_by_category(trans)

    context = FinancialContext(
        total_income=income,
        total_expense=expense,
        current_balance=income - expense,
        savings_rate=savings_rate(income, expense),
        transaction_count=len(trans),
        top_categories=tuple(iter_top_categories(categories, top_limit)),
        expense_trend=expense_trend(monthly),
        monthly_data=monthly,
        categories=categories,
        budget_status=budget_status(snapshot.budgets, categories),
        goals=snapshot.goals,
        recent_transactions=trans[-recent_limit:] if recent_limit > 0 else (),
    )
    logger.debug(
        "Built context: %d transactions over %d months, balance %.2f",
        context.transaction_count, len(monthly), context.current_balance,
    )
    return context
