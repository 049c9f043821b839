"""
Platform boundaries for audio capture and narration.

The engine never talks to a microphone or a speaker directly. Hosts plug in an
implementation of these protocols (a browser bridge, a desktop adapter, or the
in-process ones in this package).
"""
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol


@dataclass
class RecognitionCallbacks:
    on_start: Callable[[], None] = lambda: None
    on_result: Callable[[str, bool], None] = lambda text, is_final: None
    on_end: Callable[[], None] = lambda: None
    on_error: Callable[[str], None] = lambda reason: None


@dataclass
class RecognitionOptions:
    continuous: bool = True
    interim_results: bool = True
    language: str = "en-US"


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


class SpeechRecognizer(Protocol):
    """Continuous speech-to-text."""

    def is_supported(self) -> bool:
        ...

    async def request_permission(self) -> bool:
        ...

    def start(self, callbacks: RecognitionCallbacks, options: RecognitionOptions) -> None:
        ...

    def stop(self) -> None:
        ...

    def abort(self) -> None:
        ...


class SpeechSynthesizer(Protocol):
    """Text-to-speech output with a voice list that may arrive late."""

    def get_voices(self) -> List[Voice]:
        ...

    def speak(
        self,
        text: str,
        voice: Optional[Voice],
        rate: float,
        on_start: Optional[Callable[[], None]] = None,
        on_end: Optional[Callable[[], None]] = None,
    ) -> None:
        ...

    def cancel(self) -> None:
        ...

    def set_voices_changed_handler(self, handler: Optional[Callable[[], None]]) -> None:
        ...


# Friendly text for recognizer error codes
RECOGNITION_ERROR_MESSAGES = {
    "no-speech": "No speech detected. Please try again.",
    "audio-capture": "Microphone not available. Please check permissions.",
    "not-allowed": "Microphone access denied. Please allow microphone access.",
    "network": "Network error. Please check your connection.",
    "aborted": "Recording stopped.",
}


def recognition_error_message(reason: str) -> str:
    return RECOGNITION_ERROR_MESSAGES.get(reason, f"Error: {reason}")

