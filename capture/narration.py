"""
Scene narration over a SpeechSynthesizer.

Only one utterance plays at a time: speaking always cancels the current one.
"""
import re
from typing import Callable, List, Optional

from capture.handles import ExclusiveHandle
from capture.interfaces import SpeechSynthesizer, Voice
from utils import get_logger

logger = get_logger(__name__)

_MARKUP = re.compile(r"\*\*|\*|•")


def clean_for_speech(text: str) -> str:
    """Strip markdown emphasis and bullets so they are not read aloud."""
    return _MARKUP.sub("", text).strip()


def select_voice(voices: List[Voice], preferred_name: str, locale: str) -> Optional[Voice]:
    for voice in voices:
        if voice.name == preferred_name and voice.lang == locale:
            return voice
    for voice in voices:
        if voice.lang == locale:
            return voice
    return voices[0] if voices else None


class Narrator(ExclusiveHandle):

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        preferred_voice_name: str = "Google US English",
        locale: str = "en-US",
        narration_rate: float = 1.0,
        listening_rate: float = 0.9,
        on_voice_ready: Optional[Callable[[], None]] = None,
    ):
        super().__init__(synthesizer)
        self.synthesizer = synthesizer
        self.preferred_voice_name = preferred_voice_name
        self.locale = locale
        self.narration_rate = narration_rate
        self.listening_rate = listening_rate
        self.on_voice_ready = on_voice_ready or (lambda: None)

        self.muted = False
        self.is_speaking = False
        self._voice: Optional[Voice] = None
        self._voice_selected = False
        self._utterance = 0

    @property
    def voice(self) -> Optional[Voice]:
        return self._ensure_voice()

    def _ensure_voice(self) -> Optional[Voice]:
        """Pick a voice the first time any are available, then keep it."""
        if self._voice_selected:
            return self._voice
        voices = self.synthesizer.get_voices()
        if voices:
            self._select(voices)
        else:
            self.synthesizer.set_voices_changed_handler(self._on_voices_changed)
        return self._voice

    def _on_voices_changed(self) -> None:
        if self._voice_selected:
            return
        voices = self.synthesizer.get_voices()
        if voices:
            self._select(voices)
            self.synthesizer.set_voices_changed_handler(None)
            self.on_voice_ready()

    def _select(self, voices: List[Voice]) -> None:
        self._voice = select_voice(voices, self.preferred_voice_name, self.locale)
        self._voice_selected = True
        logger.info("Narration voice: %s", self._voice.name if self._voice else None)

    def set_muted(self, muted: bool) -> None:
        self.muted = muted
        if muted:
            self.cancel()

    def narrate(self, text: str) -> bool:
        """Speak scene narration. Returns False when muted or no voice exists."""
        if self.muted:
            return False
        return self._speak(text, self.narration_rate)

    def play_briefing(
        self,
        text: str,
        on_start: Optional[Callable[[], None]] = None,
        on_end: Optional[Callable[[], None]] = None,
    ) -> bool:
        """Speak a listening briefing at the slower listening rate, regardless of mute."""
        return self._speak(text, self.listening_rate, on_start, on_end)

    def _speak(
        self,
        text: str,
        rate: float,
        on_start: Optional[Callable[[], None]] = None,
        on_end: Optional[Callable[[], None]] = None,
    ) -> bool:
        voice = self._ensure_voice()
        if voice is None:
            return False
        cleaned = clean_for_speech(text)
        if not cleaned:
            return False

        self.acquire()
        self.synthesizer.cancel()
        self._utterance += 1
        utterance = self._utterance

        def started():
            if utterance == self._utterance:
                self.is_speaking = True
            if on_start:
                on_start()

        def ended():
            if utterance == self._utterance:
                self.is_speaking = False
                self.release()
            if on_end:
                on_end()

        self.synthesizer.speak(cleaned, voice, rate, on_start=started, on_end=ended)
        return True

    def cancel(self) -> None:
        if self.is_holder:
            self.synthesizer.cancel()
        self._utterance += 1
        self.is_speaking = False
        self.release()

    def on_preempted(self) -> None:
        self.cancel()
