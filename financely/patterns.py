from datetime import date, datetime
from functools import lru_cache
from typing import Dict, Iterable, Optional, Tuple

from financely.domain import SpendingPatterns, Transaction
from financely.transforms import expense_transactions, transaction_amounts


@lru_cache(maxsize=None)
def parse_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value.strip(), "%d-%m-%Y").date()
    except (AttributeError, ValueError):
        return None


def _largest(totals: Dict[str, float]) -> Optional[Tuple[str, float]]:
    if not totals:
        return None
    return sorted(totals.items(), key=lambda item: item[1], reverse=True)[0]


def analyze_spending_patterns(trans: Iterable[Transaction]) -> SpendingPatterns:
    """Break expense transactions down by category, weekday and calendar month.

    Weekday and month use English names ("Monday", "January"); months of
    different years are merged. Transactions with an unparseable date only
    count towards the category totals and the average.
    """
    expenses = expense_transactions(tuple(trans))
    by_category: Dict[str, float] = {}
    by_day: Dict[str, float] = {}
    by_month: Dict[str, float] = {}

    for t in expenses:
        by_category[t.category_key] = by_category.get(t.category_key, 0.0) + t.amount
        d = parse_date(t.date)
        if d is None:
            continue
        day, month = d.strftime("%A"), d.strftime("%B")
        by_day[day] = by_day.get(day, 0.0) + t.amount
        by_month[month] = by_month.get(month, 0.0) + t.amount

    amounts = transaction_amounts(expenses)
    average = sum(amounts) / len(amounts) if amounts else 0.0

    return SpendingPatterns(
        by_category=by_category,
        by_day_of_week=by_day,
        by_month=by_month,
        average_transaction=average,
        most_expensive_category=_largest(by_category),
        most_expensive_day=_largest(by_day),
    )
