import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from financely import advice
from financely.context import budget_summary, build_financial_context
from financely.domain import Snapshot
from financely.functional import AdviceResult, validate_budget, validate_goal, validate_transaction
from financely.llm import TextGenerator
from financely.patterns import analyze_spending_patterns
from financely.recommendations import get_predictive_insights

logger = logging.getLogger(__name__)


def transaction_messages(snapshot: Snapshot) -> List[str]:
    results = (validate_transaction(t) for t in snapshot.transactions)
    return [r.error["message"] for r in results if r.is_left()]


def budget_messages(snapshot: Snapshot) -> List[str]:
    results = (validate_budget(b) for b in snapshot.budgets)
    return [r.error["message"] for r in results if r.is_left()]


def goal_messages(snapshot: Snapshot) -> List[str]:
    results = (validate_goal(g) for g in snapshot.goals)
    return [r.error["message"] for r in results if r.is_left()]


def context_stage(snapshot: Snapshot, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"context": build_financial_context(snapshot)}


def patterns_stage(snapshot: Snapshot, acc: Dict[str, Any]) -> Dict[str, Any]:
    return {"patterns": analyze_spending_patterns(snapshot.transactions)}


def insight_stage(snapshot: Snapshot, acc: Dict[str, Any]) -> Dict[str, Any]:
    context = acc.get("context") or build_financial_context(snapshot)
    return {"insight": get_predictive_insights(context)}


def budget_summary_stage(snapshot: Snapshot, acc: Dict[str, Any]) -> Dict[str, Any]:
    context = acc.get("context") or build_financial_context(snapshot)
    return {"budget_summary": budget_summary(context.budget_status)}


def quick_insights_stage(snapshot: Snapshot, acc: Dict[str, Any]) -> Dict[str, Any]:
    context = acc.get("context") or build_financial_context(snapshot)
    insight = acc.get("insight") or get_predictive_insights(context)
    return {"quick_insights": advice.quick_insights(context, insight)}


DEFAULT_VALIDATORS = (transaction_messages, budget_messages, goal_messages)
DEFAULT_STAGES = (
    context_stage,
    patterns_stage,
    insight_stage,
    budget_summary_stage,
    quick_insights_stage,
)


class InsightService:
    """Facade running snapshot validators and pipeline stages in order.

    validators: functions taking (snapshot) -> Sequence[str]
    stages: functions taking (snapshot, acc) -> dict (partial results merged into acc)
    """

    def __init__(
        self,
        validators: Sequence[Callable[[Snapshot], Sequence[str]]] = DEFAULT_VALIDATORS,
        stages: Sequence[Callable[[Snapshot, Dict[str, Any]], Dict[str, Any]]] = DEFAULT_STAGES,
    ):
        self.validators = validators
        self.stages = stages

    def report(self, snapshot: Snapshot) -> Dict[str, Any]:
        """Return the merged stage results together with validation messages and per-stage outputs."""
        report = {"validation": [], "steps": [], "result": {}}

        for v in self.validators:
            try:
                msgs = v(snapshot)
            except Exception as e:
                logger.warning("Validator %s failed: %s", getattr(v, "__name__", v), e)
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": list(msgs)})

        acc: Dict[str, Any] = {}
        for stage in self.stages:
            out = stage(snapshot, acc)
            report["steps"].append({"stage": getattr(stage, "__name__", str(stage)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


class AdviceService:
    """Chat facade holding the (optional) text generator for a session."""

    def __init__(self, client: Optional[TextGenerator] = None):
        self.client = client

    async def ask(self, message: str, snapshot: Snapshot) -> AdviceResult:
        return await advice.get_financial_advice(message, snapshot, self.client)

    def ask_sync(self, message: str, snapshot: Snapshot) -> AdviceResult:
        return advice.get_financial_advice_sync(message, snapshot, self.client)
