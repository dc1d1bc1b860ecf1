from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class Transaction:
    type: str        # "income" or "expense"
    amount: float
    name: str = ""   # display name, also used as the category key
    category: str = ""
    date: str = ""   # "DD-MM-YYYY", empty when unknown

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    @property
    def category_key(self) -> str:
        return self.name or self.category or "Uncategorized"


@dataclass(frozen=True)
class Budget:
    category: str
    limit: float
    period: str = "monthly"  # "weekly", "monthly" or "yearly"


@dataclass(frozen=True)
class Goal:
    name: str
    target_amount: float
    current_amount: float = 0.0
    priority: str = "medium"  # "low", "medium" or "high"
    category: str = ""
    completed: bool = False
    target_date: Optional[str] = None  # "YYYY-MM-DD"

    @property
    def is_completed(self) -> bool:
        # stored flag is not trusted
        return self.current_amount >= self.target_amount


@dataclass(frozen=True)
class Snapshot:
    transactions: Tuple[Transaction, ...] = ()
    budgets: Tuple[Budget, ...] = ()
    goals: Tuple[Goal, ...] = ()


@dataclass(frozen=True)
class CategoryTotals:
    income: float = 0.0
    expense: float = 0.0
    count: int = 0


@dataclass(frozen=True)
class MonthTotals:
    income: float = 0.0
    expense: float = 0.0


@dataclass(frozen=True)
class TopCategory:
    name: str
    amount: float
    count: int


@dataclass(frozen=True)
class BudgetStatus:
    category: str
    limit: float
    spent: float
    remaining: float
    percentage: float
    period: str = "monthly"

    @property
    def over_limit(self) -> bool:
        return self.spent > self.limit

    @property
    def display_percentage(self) -> float:
        return min(100.0, max(0.0, self.percentage))


@dataclass(frozen=True)
class BudgetSummary:
    total_limit: float
    total_spent: float
    remaining: float


@dataclass(frozen=True)
class FinancialContext:
    total_income: float
    total_expense: float
    current_balance: float
    savings_rate: float
    transaction_count: int
    top_categories: Tuple[TopCategory, ...]
    expense_trend: float
    monthly_data: Dict[str, MonthTotals]
    categories: Dict[str, CategoryTotals]
    budget_status: Tuple[BudgetStatus, ...]
    goals: Tuple[Goal, ...]
    recent_transactions: Tuple[Transaction, ...] = ()

    @property
    def over_budget(self) -> Tuple[BudgetStatus, ...]:
        return tuple(b for b in self.budget_status if b.over_limit)


@dataclass(frozen=True)
class Recommendation:
    type: str  # "warning", "info", "suggestion", "alert" or "critical"
    title: str
    message: str


@dataclass(frozen=True)
class PredictiveInsight:
    predicted_expense: float
    health_score: int
    risk_level: str  # "Low", "Medium" or "High"
    recommendations: Tuple[Recommendation, ...] = ()


@dataclass(frozen=True)
class SpendingPatterns:
    by_category: Dict[str, float] = field(default_factory=dict)
    by_day_of_week: Dict[str, float] = field(default_factory=dict)
    by_month: Dict[str, float] = field(default_factory=dict)
    average_transaction: float = 0.0
    most_expensive_category: Optional[Tuple[str, float]] = None
    most_expensive_day: Optional[Tuple[str, float]] = None


@dataclass(frozen=True)
class GoalProgress:
    goal: Goal
    percentage: float
    remaining: float
    is_completed: bool
    days_remaining: Optional[int] = None
