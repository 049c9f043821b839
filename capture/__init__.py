"""
Capture subsystem: speech-to-text recording and text-to-speech narration.

Usage:
    from capture import SpeechCapture, Narrator, PushRecognizer, SilentSynthesizer

    capture = SpeechCapture(PushRecognizer())
    narrator = Narrator(SilentSynthesizer())
"""

from capture.interfaces import (
    RecognitionCallbacks,
    RecognitionOptions,
    SpeechRecognizer,
    SpeechSynthesizer,
    Voice,
    RECOGNITION_ERROR_MESSAGES,
    recognition_error_message,
)
from capture.handles import ExclusiveHandle
from capture.speech_capture import CaptureState, SpeechCapture
from capture.narration import Narrator, clean_for_speech, select_voice
from capture.adapters import ConsoleSynthesizer, PushRecognizer, SilentSynthesizer
from capture.metrics import SpeechMetrics, analyze_speech_metrics, interpret_confidence

__all__ = [
    # Boundaries
    "RecognitionCallbacks",
    "RecognitionOptions",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "Voice",
    "RECOGNITION_ERROR_MESSAGES",
    "recognition_error_message",
    # Handles
    "ExclusiveHandle",
    "CaptureState",
    "SpeechCapture",
    "Narrator",
    "clean_for_speech",
    "select_voice",
    # Adapters
    "ConsoleSynthesizer",
    "PushRecognizer",
    "SilentSynthesizer",
    # Metrics
    "SpeechMetrics",
    "analyze_speech_metrics",
    "interpret_confidence",
]
