"""Quick response evaluator: scores initiative shown in a short timed answer."""
from evaluators.base import (
    SHORT_FALLBACK_FEEDBACK,
    EvaluationOutcome,
    clamp_score,
    feedback_text,
    neutral_outcome,
    request_analysis,
    string_list,
)
from evaluators.text_evaluation import TextEvaluationService
from prompts import QUICK_RESPONSE_ANALYSIS_SYSTEM, build_quick_response_message
from utils import get_logger

logger = get_logger(__name__)

QUICK_RESPONSE_CRITERIA = ("initiative",)
QUICK_RESPONSE_TEMPERATURE = 0.4
INITIATIVE_LEVELS = ("high", "medium", "low")


async def evaluate_quick_response(
    service: TextEvaluationService,
    scenario: str,
    response: str,
    seconds_spent: int,
) -> EvaluationOutcome:
    try:
        parsed = await request_analysis(
            service,
            QUICK_RESPONSE_ANALYSIS_SYSTEM,
            build_quick_response_message(scenario, response, seconds_spent),
            QUICK_RESPONSE_TEMPERATURE,
        )
    except Exception as e:
        logger.warning("Quick response analysis failed: %s", e)
        return neutral_outcome(
            QUICK_RESPONSE_CRITERIA,
            feedback=SHORT_FALLBACK_FEEDBACK,
            initiative_level="medium",
            identified_opportunities=[],
            missed_opportunities=[],
            seconds_spent=seconds_spent,
        )

    level = parsed.get("initiative_level")
    return EvaluationOutcome(
        scores={"initiative": clamp_score(parsed.get("score"))},
        feedback=feedback_text(parsed),
        details={
            "initiative_level": level if level in INITIATIVE_LEVELS else "medium",
            "identified_opportunities": string_list(parsed, "identified_opportunities"),
            "missed_opportunities": string_list(parsed, "missed_opportunities"),
            "seconds_spent": seconds_spent,
        },
    )
