from datetime import date
from typing import Iterable, Optional, Tuple

from financely.domain import Goal, GoalProgress
from financely.transforms import round1

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}


def _days_until(target: Optional[str], today: date) -> Optional[int]:
    if not target:
        return None
    try:
        return (date.fromisoformat(str(target)[:10]) - today).days
    except ValueError:
        return None


def goal_progress(goal: Goal, today: Optional[date] = None) -> GoalProgress:
    today = today or date.today()
    pct = goal.current_amount / goal.target_amount * 100 if goal.target_amount > 0 else 0.0
    return GoalProgress(
        goal=goal,
        percentage=round1(min(100.0, max(0.0, pct))),
        remaining=max(0.0, goal.target_amount - goal.current_amount),
        is_completed=goal.is_completed,
        days_remaining=_days_until(goal.target_date, today),
    )


def sort_goals(goals: Iterable[Goal]) -> Tuple[Goal, ...]:
    """Incomplete goals first, then by priority high -> low, otherwise input order."""
    return tuple(sorted(
        goals,
        key=lambda g: (g.is_completed, PRIORITY_RANK.get(g.priority, len(PRIORITY_RANK))),
    ))


def active_goals(goals: Iterable[Goal]) -> Tuple[Goal, ...]:
    return tuple(g for g in goals if not g.is_completed)
