"""
Shared pieces for challenge evaluators: the outcome model, score clamping and
JSON extraction from free-form model replies.
"""
import json
import math
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from evaluators.text_evaluation import EvaluationServiceError, TextEvaluationService

MIN_SCORE = 1.0
MAX_SCORE = 5.0
NEUTRAL_SCORE = 3.0

FALLBACK_FEEDBACK = "Analysis could not be completed. Response recorded for manual review."
SHORT_FALLBACK_FEEDBACK = "Analysis could not be completed."


class EvaluationOutcome(BaseModel):
    scores: Dict[str, float]
    feedback: str
    details: Dict[str, Any] = Field(default_factory=dict)
    fallback: bool = False

    @property
    def overall(self) -> float:
        if not self.scores:
            return 0.0
        return sum(self.scores.values()) / len(self.scores)


def clamp_score(value: Any, default: float = NEUTRAL_SCORE) -> float:
    """Coerce one reported score into [1, 5]. Missing or non-numeric values get the default."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return default
    if not isinstance(value, (int, float)) or math.isnan(value):
        return default
    return float(min(MAX_SCORE, max(MIN_SCORE, value)))


def clamp_scores(reported: Any, criteria: Iterable[str]) -> Dict[str, float]:
    """Clamp each criterion independently; a bad value never affects its neighbours."""
    if not isinstance(reported, dict):
        reported = {}
    return {criterion: clamp_score(reported.get(criterion)) for criterion in criteria}


def neutral_outcome(criteria: Iterable[str], feedback: str = FALLBACK_FEEDBACK, **details) -> EvaluationOutcome:
    return EvaluationOutcome(
        scores={criterion: NEUTRAL_SCORE for criterion in criteria},
        feedback=feedback,
        details=details,
        fallback=True,
    )


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """Return the first JSON object embedded in text, or None."""
    if not text:
        return None
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    return None


def string_list(parsed: Dict[str, Any], key: str) -> List[str]:
    value = parsed.get(key)
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None]


def feedback_text(parsed: Dict[str, Any], default: str = "Response analyzed.") -> str:
    value = parsed.get("feedback")
    return value.strip() if isinstance(value, str) and value.strip() else default


async def request_analysis(
    service: TextEvaluationService,
    system: str,
    user: str,
    temperature: float,
) -> Dict[str, Any]:
    """Call the evaluation service and return the JSON object from its reply."""
    reply = await service.complete(system, user, temperature)
    parsed = extract_json_object(reply)
    if parsed is None:
        raise EvaluationServiceError("Reply did not contain a JSON object")
    return parsed
