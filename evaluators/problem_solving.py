"""
Problem-solving path evaluator.

A path is the sequence of branch choices the subject made. Its total score is
normalized against `max_choice_score` per choice, and it counts as optimal when
it is a prefix of the scenario's optimal path.
"""
from typing import List

from evaluators.base import MAX_SCORE, MIN_SCORE, EvaluationOutcome
from state import BranchChoiceRecord
from utils import round_half_up


def path_feedback(was_optimal: bool, percentage: float) -> str:
    if was_optimal:
        return "Excellent decision-making! You followed the optimal path."
    if percentage >= 70:
        return "Good problem-solving approach with some room for optimization."
    if percentage >= 50:
        return "Reasonable decisions, but consider alternative approaches."
    return "Review the consequences of each decision for learning opportunities."


def evaluate_problem_solving(
    choices: List[BranchChoiceRecord],
    optimal_path: List[str],
    max_choice_score: float = 85,
) -> EvaluationOutcome:
    if not choices or max_choice_score <= 0:
        return EvaluationOutcome(
            scores={"decision_quality": MIN_SCORE},
            feedback="No decisions were made.",
            details={"total_score": 0, "max_possible_score": 0, "percentage": 0,
                     "was_optimal": False, "path": list(choices)},
        )

    total = sum(choice["score"] for choice in choices)
    max_possible = len(choices) * max_choice_score
    percentage = round_half_up(total / max_possible * 100)

    choice_ids = [choice["choice_id"] for choice in choices]
    was_optimal = choice_ids == list(optimal_path[:len(choice_ids)])

    # 100% of the per-choice ceiling maps to 5
    decision_quality = max(MIN_SCORE, min(MAX_SCORE, round_half_up(percentage / 20, 1)))

    return EvaluationOutcome(
        scores={"decision_quality": decision_quality},
        feedback=path_feedback(was_optimal, percentage),
        details={
            "total_score": total,
            "max_possible_score": max_possible,
            "percentage": percentage,
            "was_optimal": was_optimal,
            "path": list(choices),
        },
    )
