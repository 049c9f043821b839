"""
Exception hierarchy for the assessment engine.

Evaluation failures never reach the subject: evaluators catch
EvaluationServiceError and fall back to neutral scores. Hosts translate
ActionDisabledError into a user message (CLI) or HTTP 409 (API).
"""


class AssessmentError(Exception):
    """Base class for engine errors."""


class ActionDisabledError(AssessmentError):
    """A command was issued while its control is disabled."""
