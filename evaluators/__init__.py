"""
Challenge evaluators.

Delegated (async, call the text-evaluation service, never raise):
- evaluate_voice_response
- evaluate_written_response
- evaluate_prioritization
- evaluate_quick_response

Local (pure functions):
- evaluate_listening
- evaluate_dialogue
- evaluate_problem_solving
- evaluate_judgment
"""
from .text_evaluation import AnthropicTextEvaluator, EvaluationServiceError, TextEvaluationService
from .base import (
    EvaluationOutcome,
    FALLBACK_FEEDBACK,
    NEUTRAL_SCORE,
    SHORT_FALLBACK_FEEDBACK,
    clamp_score,
    extract_json_object,
    neutral_outcome,
)
from .voice import VOICE_CRITERIA, evaluate_voice_response
from .written import WRITTEN_CRITERIA, count_words, evaluate_written_response
from .prioritization import PRIORITIZATION_CRITERIA, count_correct_placements, evaluate_prioritization
from .quick_response import QUICK_RESPONSE_CRITERIA, evaluate_quick_response
from .listening import evaluate_listening
from .dialogue import QUALITY_SCORES, evaluate_dialogue
from .problem_solving import evaluate_problem_solving
from .judgment import evaluate_judgment

__all__ = [
    # Service boundary
    "AnthropicTextEvaluator",
    "EvaluationServiceError",
    "TextEvaluationService",
    # Shared
    "EvaluationOutcome",
    "FALLBACK_FEEDBACK",
    "NEUTRAL_SCORE",
    "SHORT_FALLBACK_FEEDBACK",
    "clamp_score",
    "extract_json_object",
    "neutral_outcome",
    # Delegated
    "VOICE_CRITERIA",
    "evaluate_voice_response",
    "WRITTEN_CRITERIA",
    "count_words",
    "evaluate_written_response",
    "PRIORITIZATION_CRITERIA",
    "count_correct_placements",
    "evaluate_prioritization",
    "QUICK_RESPONSE_CRITERIA",
    "evaluate_quick_response",
    # Local
    "evaluate_listening",
    "QUALITY_SCORES",
    "evaluate_dialogue",
    "evaluate_problem_solving",
    "evaluate_judgment",
]
