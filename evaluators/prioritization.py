"""
Prioritization evaluator.

The model proposes an optimal ordering and a single score. Correct placements
are counted locally over the first three positions of the subject's order.
"""
from typing import Any, Dict, List

from evaluators.base import (
    MIN_SCORE,
    SHORT_FALLBACK_FEEDBACK,
    EvaluationOutcome,
    clamp_score,
    feedback_text,
    neutral_outcome,
    request_analysis,
    string_list,
)
from evaluators.text_evaluation import TextEvaluationService
from prompts import PRIORITIZATION_ANALYSIS_SYSTEM, build_prioritization_message
from scenes import PrioritizationTask
from utils import get_logger

logger = get_logger(__name__)

PRIORITIZATION_CRITERIA = ("prioritization",)
PRIORITIZATION_TEMPERATURE = 0.3
PLACEMENTS_CHECKED = 3


def count_correct_placements(user_order: List[str], optimal_order: List[str]) -> int:
    correct = 0
    for i in range(min(PLACEMENTS_CHECKED, len(user_order))):
        if i < len(optimal_order) and user_order[i] == optimal_order[i]:
            correct += 1
    return correct


def revealed_context(tasks: List[PrioritizationTask]) -> Dict[str, str]:
    return {task.id: task.hidden_context for task in tasks if task.hidden_context}


def _optimal_order(parsed: Dict[str, Any], user_order: List[str]) -> List[str]:
    value = parsed.get("optimal_order")
    if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
        return value
    return list(user_order)


async def evaluate_prioritization(
    service: TextEvaluationService,
    tasks: List[PrioritizationTask],
    user_order: List[str],
) -> EvaluationOutcome:
    user_order = list(user_order)
    if not tasks or not user_order:
        return EvaluationOutcome(
            scores={"prioritization": MIN_SCORE},
            feedback="No tasks were prioritized.",
            details={"optimal_order": [], "user_order": user_order, "correct_placements": 0},
        )

    try:
        parsed = await request_analysis(
            service,
            PRIORITIZATION_ANALYSIS_SYSTEM,
            build_prioritization_message(tasks, user_order),
            PRIORITIZATION_TEMPERATURE,
        )
    except Exception as e:
        logger.warning("Prioritization analysis failed: %s", e)
        return neutral_outcome(
            PRIORITIZATION_CRITERIA,
            feedback=SHORT_FALLBACK_FEEDBACK,
            optimal_order=user_order,
            user_order=user_order,
            correct_placements=0,
            critical_misses=[],
            good_choices=[],
            revealed_context=revealed_context(tasks),
        )

    optimal_order = _optimal_order(parsed, user_order)
    return EvaluationOutcome(
        scores={"prioritization": clamp_score(parsed.get("score"))},
        feedback=feedback_text(parsed, "Prioritization analyzed."),
        details={
            "optimal_order": optimal_order,
            "user_order": user_order,
            "correct_placements": count_correct_placements(user_order, optimal_order),
            "critical_misses": string_list(parsed, "critical_misses"),
            "good_choices": string_list(parsed, "good_choices"),
            "revealed_context": revealed_context(tasks),
        },
    )
