"""Active listening evaluator. Pure: compares answers with the known correct indices."""
from typing import List, Optional

from evaluators.base import MAX_SCORE, MIN_SCORE, EvaluationOutcome
from utils import round_half_up


def listening_feedback(percentage: float) -> str:
    if percentage >= 100:
        return "Perfect! Excellent attention to detail."
    if percentage >= 75:
        return "Good listening skills with minor misses."
    if percentage >= 50:
        return "Moderate comprehension. Practice active listening."
    return "Focus on capturing key details when listening."


def evaluate_listening(answers: List[Optional[int]], correct_indices: List[int]) -> EvaluationOutcome:
    total = len(correct_indices)
    if total == 0:
        return EvaluationOutcome(
            scores={"listening": MIN_SCORE},
            feedback="No comprehension questions to evaluate.",
            details={"correct_answers": 0, "total_questions": 0, "percentage": 0},
        )

    correct = sum(
        1 for i, expected in enumerate(correct_indices)
        if i < len(answers) and answers[i] == expected
    )
    percentage = round_half_up(correct / total * 100)
    score = max(MIN_SCORE, min(MAX_SCORE, round_half_up(correct / total * 5)))

    return EvaluationOutcome(
        scores={"listening": score},
        feedback=listening_feedback(percentage),
        details={
            "correct_answers": correct,
            "total_questions": total,
            "percentage": percentage,
        },
    )
