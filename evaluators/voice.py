"""
Voice response evaluator.

Scores a speech transcript on clarity, structure, professionalism and
completeness. Speech metrics computed locally are passed to the model as
extra context and returned in the outcome details.
"""
from capture.metrics import analyze_speech_metrics
from evaluators.base import (
    EvaluationOutcome,
    clamp_scores,
    feedback_text,
    neutral_outcome,
    request_analysis,
    string_list,
)
from evaluators.text_evaluation import TextEvaluationService
from prompts import VOICE_ANALYSIS_SYSTEM, build_voice_message
from scenes import VoicePrompt
from utils import get_logger

logger = get_logger(__name__)

VOICE_CRITERIA = ("clarity", "structure", "professionalism", "completeness")
VOICE_TEMPERATURE = 0.3


async def evaluate_voice_response(
    service: TextEvaluationService,
    prompt: VoicePrompt,
    transcript: str,
    duration_seconds: float,
) -> EvaluationOutcome:
    metrics = analyze_speech_metrics(transcript, duration_seconds)

    try:
        parsed = await request_analysis(
            service,
            VOICE_ANALYSIS_SYSTEM,
            build_voice_message(prompt, transcript, metrics),
            VOICE_TEMPERATURE,
        )
    except Exception as e:
        logger.warning("Voice analysis failed for prompt '%s': %s", prompt.id, e)
        return neutral_outcome(VOICE_CRITERIA, metrics=metrics.model_dump())

    scores = clamp_scores(parsed.get("scores"), VOICE_CRITERIA)
    return EvaluationOutcome(
        scores=scores,
        feedback=feedback_text(parsed),
        details={
            "strengths": string_list(parsed, "strengths"),
            "improvements": string_list(parsed, "improvements"),
            "key_points": string_list(parsed, "key_points"),
            "metrics": metrics.model_dump(),
        },
    )
