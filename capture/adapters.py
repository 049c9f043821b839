"""
In-process platform adapters.

- PushRecognizer: recognition events are pushed in by a host (HTTP route, CLI)
- ConsoleSynthesizer: "speaks" by printing to a stream
- SilentSynthesizer: completes utterances immediately without output
"""
import sys
from typing import Callable, List, Optional, TextIO

from capture.interfaces import RecognitionCallbacks, RecognitionOptions, Voice

DEFAULT_VOICES = [Voice(name="Google US English", lang="en-US")]


class PushRecognizer:
    """A SpeechRecognizer whose results come from outside the process."""

    def __init__(self, supported: bool = True, permission_granted: bool = True):
        self.supported = supported
        self.permission_granted = permission_granted
        self.listening = False
        self.options: Optional[RecognitionOptions] = None
        self._callbacks: Optional[RecognitionCallbacks] = None

    def is_supported(self) -> bool:
        return self.supported

    async def request_permission(self) -> bool:
        return self.permission_granted

    def start(self, callbacks: RecognitionCallbacks, options: RecognitionOptions) -> None:
        if self.listening:
            return
        self._callbacks = callbacks
        self.options = options
        self.listening = True
        callbacks.on_start()

    def stop(self) -> None:
        # Callbacks stay attached so late final results still land
        if self.listening:
            self.listening = False
            if self._callbacks:
                self._callbacks.on_end()

    def abort(self) -> None:
        self.listening = False
        self._callbacks = None

    def push_result(self, text: str, is_final: bool = True) -> bool:
        if self._callbacks is None:
            return False
        self._callbacks.on_result(text, is_final)
        return True

    def push_error(self, reason: str) -> bool:
        if self._callbacks is None:
            return False
        self.listening = False
        callbacks, self._callbacks = self._callbacks, None
        callbacks.on_error(reason)
        return True

    def end(self) -> None:
        """Simulate the platform ending recognition on its own."""
        if self.listening and self._callbacks:
            self.listening = False
            self._callbacks.on_end()


class _ImmediateSynthesizer:
    """Utterances start and finish synchronously inside speak()."""

    def __init__(self, voices: Optional[List[Voice]] = None):
        self.voices = list(DEFAULT_VOICES if voices is None else voices)
        self.spoken: List[str] = []
        self._voices_changed: Optional[Callable[[], None]] = None

    def get_voices(self) -> List[Voice]:
        return list(self.voices)

    def speak(self, text, voice, rate, on_start=None, on_end=None) -> None:
        if on_start:
            on_start()
        self.spoken.append(text)
        self._emit(text, voice, rate)
        if on_end:
            on_end()

    def _emit(self, text: str, voice: Optional[Voice], rate: float) -> None:
        pass

    def cancel(self) -> None:
        pass

    def set_voices_changed_handler(self, handler: Optional[Callable[[], None]]) -> None:
        self._voices_changed = handler

    def add_voices(self, voices: List[Voice]) -> None:
        """Make voices available late, as browsers do."""
        self.voices.extend(voices)
        if self._voices_changed:
            self._voices_changed()


class SilentSynthesizer(_ImmediateSynthesizer):
    pass


class ConsoleSynthesizer(_ImmediateSynthesizer):

    def __init__(self, stream: TextIO = sys.stdout, voices: Optional[List[Voice]] = None):
        super().__init__(voices)
        self.stream = stream

    def _emit(self, text: str, voice: Optional[Voice], rate: float) -> None:
        self.stream.write(f"\n🔊 {text}\n")
        self.stream.flush()
