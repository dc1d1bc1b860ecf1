from financely.domain import Transaction
from financely.transforms import month_key


def by_type(kind: str):
    def _filter(t: Transaction) -> bool:
        if kind == "income":
            return t.is_income
        return not t.is_income

    return _filter


def by_category(category: str):
    def _filter(t: Transaction) -> bool:
        return t.category_key == category

    return _filter


def by_month(key: str):
    def _filter(t: Transaction) -> bool:
        return month_key(t.date) == key

    return _filter


def by_amount_range(low: float, high: float):
    def _filter(t: Transaction) -> bool:
        return low <= t.amount <= high

    return _filter
