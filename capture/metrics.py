"""Simple delivery metrics computed from a speech transcript."""
import re
from typing import Dict, List

from pydantic import BaseModel, Field

FILLER_PATTERNS = [
    "um", "uh", "er", "ah", "like", "you know", "basically",
    "actually", "literally", "right", "so yeah", "i mean",
]


class SpeechMetrics(BaseModel):
    word_count: int = 0
    average_word_length: float = 0.0
    filler_word_count: int = 0
    filler_words: List[str] = Field(default_factory=list)
    speaking_pace: float = 0.0  # words per minute
    sentence_count: int = 0
    unique_word_ratio: float = 0.0


def analyze_speech_metrics(transcript: str, duration_seconds: float) -> SpeechMetrics:
    words = [w for w in transcript.lower().split() if w]
    fillers: List[str] = []
    for filler in FILLER_PATTERNS:
        fillers.extend(re.findall(rf"\b{re.escape(filler)}\b", transcript, flags=re.IGNORECASE))
    sentences = [s for s in re.split(r"[.!?]+", transcript) if s.strip()]

    return SpeechMetrics(
        word_count=len(words),
        average_word_length=sum(len(w) for w in words) / max(len(words), 1),
        filler_word_count=len(fillers),
        filler_words=fillers,
        speaking_pace=(len(words) / duration_seconds) * 60 if duration_seconds > 0 else 0.0,
        sentence_count=len(sentences),
        unique_word_ratio=len(set(words)) / len(words) if words else 0.0,
    )


def interpret_confidence(confidence: float) -> Dict[str, str]:
    if confidence >= 0.9:
        return {"level": "high", "description": "Very clear speech detected"}
    if confidence >= 0.7:
        return {"level": "medium", "description": "Mostly clear, some parts uncertain"}
    return {"level": "low", "description": "Unclear speech, consider re-recording"}
