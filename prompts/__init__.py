"""
Prompt templates for the delegated evaluators.
"""
from .analysis_prompts import (
    VOICE_ANALYSIS_SYSTEM,
    WRITTEN_ANALYSIS_SYSTEM,
    PRIORITIZATION_ANALYSIS_SYSTEM,
    QUICK_RESPONSE_ANALYSIS_SYSTEM,
    build_voice_message,
    build_written_message,
    build_prioritization_message,
    build_quick_response_message,
)

__all__ = [
    "VOICE_ANALYSIS_SYSTEM",
    "WRITTEN_ANALYSIS_SYSTEM",
    "PRIORITIZATION_ANALYSIS_SYSTEM",
    "QUICK_RESPONSE_ANALYSIS_SYSTEM",
    "build_voice_message",
    "build_written_message",
    "build_prioritization_message",
    "build_quick_response_message",
]
