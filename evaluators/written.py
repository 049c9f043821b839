"""
Written challenge evaluator.

Word-count constraints are enforced here rather than by the model: a response
outside the min/max range loses half a point on tone and clarity after the
reported scores are clamped.
"""
from evaluators.base import (
    MIN_SCORE,
    EvaluationOutcome,
    clamp_scores,
    feedback_text,
    neutral_outcome,
    request_analysis,
    string_list,
)
from evaluators.text_evaluation import TextEvaluationService
from prompts import WRITTEN_ANALYSIS_SYSTEM, build_written_message
from scenes import WrittenChallenge
from utils import get_logger

logger = get_logger(__name__)

WRITTEN_CRITERIA = ("tone", "clarity", "actionability", "professionalism")
WRITTEN_TEMPERATURE = 0.3
WORD_COUNT_PENALTY = 0.5
PENALIZED_CRITERIA = ("tone", "clarity")


def count_words(text: str) -> int:
    return len(text.split())


def violates_word_limits(challenge: WrittenChallenge, word_count: int) -> bool:
    constraints = challenge.constraints
    if constraints is None:
        return False
    if constraints.max_words and word_count > constraints.max_words:
        return True
    if constraints.min_words and word_count < constraints.min_words:
        return True
    return False


async def evaluate_written_response(
    service: TextEvaluationService,
    challenge: WrittenChallenge,
    response: str,
) -> EvaluationOutcome:
    word_count = count_words(response)

    try:
        parsed = await request_analysis(
            service,
            WRITTEN_ANALYSIS_SYSTEM,
            build_written_message(challenge, response, word_count),
            WRITTEN_TEMPERATURE,
        )
    except Exception as e:
        logger.warning("Written analysis failed for challenge '%s': %s", challenge.id, e)
        return neutral_outcome(WRITTEN_CRITERIA, word_count=word_count)

    scores = clamp_scores(parsed.get("scores"), WRITTEN_CRITERIA)
    penalty = WORD_COUNT_PENALTY if violates_word_limits(challenge, word_count) else 0.0
    if penalty:
        for criterion in PENALIZED_CRITERIA:
            scores[criterion] = max(MIN_SCORE, scores[criterion] - penalty)

    revision = parsed.get("suggested_revision")
    return EvaluationOutcome(
        scores=scores,
        feedback=feedback_text(parsed),
        details={
            "strengths": string_list(parsed, "strengths"),
            "improvements": string_list(parsed, "improvements"),
            "grammar_issues": string_list(parsed, "grammar_issues"),
            "suggested_revision": revision if isinstance(revision, str) else None,
            "word_count": word_count,
            "word_count_penalty": penalty,
        },
    )
