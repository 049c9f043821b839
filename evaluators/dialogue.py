"""
Role-play dialogue evaluator.

Each option in a dialogue carries a pre-authored quality label. The mean label
value becomes every role-play criterion.
"""
from typing import Dict, List

from evaluators.base import MIN_SCORE, EvaluationOutcome
from state import DialogueChoice
from utils import round_half_up

QUALITY_SCORES: Dict[str, float] = {
    "excellent": 5,
    "good": 4,
    "acceptable": 3,
    "poor": 1,
}

DIALOGUE_CRITERIA = ("empathy", "problem_solving", "communication", "outcome")


def dialogue_feedback(average: float) -> str:
    if average >= 4:
        return "Excellent handling of the conversation!"
    if average >= 3:
        return "Good effort with some room for improvement."
    return "Consider how to approach difficult conversations more effectively."


def evaluate_dialogue(choices: List[DialogueChoice]) -> EvaluationOutcome:
    if not choices:
        return EvaluationOutcome(
            scores={criterion: MIN_SCORE for criterion in DIALOGUE_CRITERIA},
            feedback="No dialogue choices were made.",
            details={"overall_score": MIN_SCORE, "effective_choices": [], "improvement_areas": []},
        )

    values = [QUALITY_SCORES.get(choice["quality"], MIN_SCORE) for choice in choices]
    average = sum(values) / len(values)

    return EvaluationOutcome(
        scores={criterion: average for criterion in DIALOGUE_CRITERIA},
        feedback=dialogue_feedback(average),
        details={
            "overall_score": round_half_up(average, 1),
            "effective_choices": [
                c["feedback"] for c in choices if c["quality"] in ("excellent", "good")
            ],
            "improvement_areas": [
                c["feedback"] for c in choices if c["quality"] in ("acceptable", "poor")
            ],
        },
    )
