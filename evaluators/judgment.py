"""Judgment evaluator: converts an option's authored 0-100 weights to the 0-5 scale."""
from typing import List

from evaluators.base import EvaluationOutcome
from scenes import JudgmentOption

ETHICAL_WEIGHT = 0.6
PRACTICAL_WEIGHT = 0.4


def evaluate_judgment(option: JudgmentOption, stakeholders: List[str]) -> EvaluationOutcome:
    combined = (option.ethical_score * ETHICAL_WEIGHT + option.practical_score * PRACTICAL_WEIGHT) / 20
    return EvaluationOutcome(
        scores={
            "ethical": option.ethical_score / 20,
            "practical": option.practical_score / 20,
        },
        feedback=option.feedback,
        details={
            "option_id": option.id,
            "combined_score": combined,
            "stakeholder_impact": f"This decision affects: {', '.join(stakeholders)}",
        },
    )
