"""
Continuous speech capture.

SpeechCapture drives a SpeechRecognizer through idle -> recording -> stopped.
Final recognition results are appended to the transcript and mirrored into
`latest_transcript` synchronously, so the value read after the grace period in
stop() already includes results the recognizer delivered late.
"""
import asyncio
from enum import Enum
from typing import Callable, Optional

from capture.handles import ExclusiveHandle
from capture.interfaces import (
    RecognitionCallbacks,
    RecognitionOptions,
    SpeechRecognizer,
    recognition_error_message,
)
from timers import run_ticker
from utils import get_logger

logger = get_logger(__name__)


class CaptureState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    STOPPED = "stopped"


class SpeechCapture(ExclusiveHandle):

    def __init__(
        self,
        recognizer: SpeechRecognizer,
        tick_seconds: float = 1.0,
        grace_seconds: float = 0.5,
        language: str = "en-US",
        on_update: Optional[Callable[[], None]] = None,
        on_ended: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[str, str], None]] = None,
    ):
        super().__init__(recognizer)
        self.recognizer = recognizer
        self.tick_seconds = tick_seconds
        self.grace_seconds = grace_seconds
        self.language = language
        self.on_update = on_update or (lambda: None)
        self.on_ended = on_ended or (lambda: None)
        self.on_error = on_error or (lambda reason, message: None)

        self.state = CaptureState.IDLE
        self.transcript = ""
        self.interim_transcript = ""
        self.latest_transcript = ""
        self.duration_seconds = 0
        self.last_error: Optional[str] = None
        self._accepting = False
        self._ticker: Optional[asyncio.Task] = None
        # Bumped by start() and abort() so a stale stop() leaves a newer recording alone
        self._recording = 0

    @property
    def is_recording(self) -> bool:
        return self.state == CaptureState.RECORDING

    def is_supported(self) -> bool:
        return self.recognizer.is_supported()

    async def request_permission(self) -> bool:
        if not self.is_supported():
            return False
        return await self.recognizer.request_permission()

    def start(self) -> None:
        if self.is_recording:
            return
        self.acquire()
        self._recording += 1

        self.transcript = ""
        self.interim_transcript = ""
        self.latest_transcript = ""
        self.duration_seconds = 0
        self.last_error = None
        self._accepting = True
        self.state = CaptureState.RECORDING

        callbacks = RecognitionCallbacks(
            on_start=lambda: logger.debug("Recognizer started"),
            on_result=self._handle_result,
            on_end=self._handle_end,
            on_error=self._handle_error,
        )
        self.recognizer.start(callbacks, RecognitionOptions(language=self.language))
        self._ticker = asyncio.get_running_loop().create_task(
            run_ticker(self._tick, self.tick_seconds), name="recording-duration"
        )
        self.on_update()

    async def stop(self) -> str:
        """Stop recording, wait for late results, and return the final transcript."""
        if self.state != CaptureState.RECORDING:
            return self.latest_transcript

        recording = self._recording
        self.state = CaptureState.STOPPED
        self._cancel_ticker()
        self.recognizer.stop()
        self.on_update()

        await asyncio.sleep(self.grace_seconds)
        if recording != self._recording:
            logger.debug("Recording was aborted or restarted during the grace period")
            return ""
        self._accepting = False
        self.release()
        return self.latest_transcript

    def abort(self) -> None:
        """Drop the recording without producing a transcript."""
        was_active = self.state == CaptureState.RECORDING or self._accepting
        self._recording += 1
        self._accepting = False
        self._cancel_ticker()
        if was_active:
            self.recognizer.abort()
        self.state = CaptureState.IDLE
        self.interim_transcript = ""
        self.release()
        self.on_update()

    def on_preempted(self) -> None:
        self.abort()

    # -------------------------------------------------------------------------
    # Recognizer callbacks
    # -------------------------------------------------------------------------

    def _handle_result(self, text: str, is_final: bool) -> None:
        if not self._accepting:
            return
        if is_final:
            self.transcript = f"{self.transcript} {text}".strip()
            self.latest_transcript = self.transcript
            self.interim_transcript = ""
        else:
            self.interim_transcript = text
        self.on_update()

    def _handle_end(self) -> None:
        # The recognizer ended on its own; treat it as the subject pressing stop
        if self.state == CaptureState.RECORDING:
            logger.info("Recognizer ended while recording")
            self.on_ended()

    def _handle_error(self, reason: str) -> None:
        message = recognition_error_message(reason)
        logger.warning("Speech recognition error (%s): %s", reason, message)
        self.last_error = message
        self._accepting = False
        self._cancel_ticker()
        self.state = CaptureState.STOPPED
        self.release()
        self.on_error(reason, message)

    def _tick(self) -> None:
        self.duration_seconds += 1
        self.on_update()

    def _cancel_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None
