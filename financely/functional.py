from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar

from financely.domain import Budget, Goal, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

TRANSACTION_TYPES = ("income", "expense")
BUDGET_PERIODS = ("weekly", "monthly", "yearly")
GOAL_PRIORITIES = ("low", "medium", "high")


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self.value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self.value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def is_right(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Right({self.value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self.value == other.value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self.error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Left({self.error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self.error == other.error


class AdviceResult(ABC):
    """Outcome of one advice request: generated text or the templated fallback."""

    def __init__(self, text: str):
        self.text = text

    @property
    @abstractmethod
    def is_live(self) -> bool:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.text!r})"

    def __eq__(self, other) -> bool:
        return type(self) is type(other) and self.text == other.text


class Live(AdviceResult):

    @property
    def is_live(self) -> bool:
        return True


class Fallback(AdviceResult):

    @property
    def is_live(self) -> bool:
        return False


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    if t.type not in TRANSACTION_TYPES:
        return Left({
            "error": "unknown_type",
            "message": f"Transaction type {t.type!r} is not income or expense",
            "type": t.type,
        })
    if t.amount < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Transaction {t.category_key} has a negative amount",
            "amount": t.amount,
        })
    if not t.date:
        return Left({
            "error": "missing_date",
            "message": f"Transaction {t.category_key} has no date",
        })
    return Right(t)


def validate_budget(b: Budget) -> Either[dict, Budget]:
    if b.limit <= 0:
        return Left({
            "error": "invalid_limit",
            "message": f"Budget for {b.category} must have a positive limit",
            "category": b.category,
            "limit": b.limit,
        })
    if b.period not in BUDGET_PERIODS:
        return Left({
            "error": "invalid_period",
            "message": f"Budget period {b.period!r} is not weekly, monthly or yearly",
            "category": b.category,
        })
    return Right(b)


def validate_goal(g: Goal) -> Either[dict, Goal]:
    if g.target_amount <= 0:
        return Left({
            "error": "invalid_target",
            "message": f"Goal {g.name} must have a positive target amount",
            "target_amount": g.target_amount,
        })
    if g.current_amount < 0:
        return Left({
            "error": "negative_progress",
            "message": f"Goal {g.name} cannot have negative progress",
            "current_amount": g.current_amount,
        })
    if g.priority not in GOAL_PRIORITIES:
        return Left({
            "error": "invalid_priority",
            "message": f"Goal priority {g.priority!r} is not low, medium or high",
        })
    return Right(g)


def compose(*funcs):
    """Return a function that's the composition of the given functions.

    compose(f, g, h)(x) == f(g(h(x)))
    """
    def _composed(x):
        res = x
        for f in reversed(funcs):
            res = f(res)
        return res
    return _composed


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
