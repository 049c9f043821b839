"""
Shared fixtures: a scripted text-evaluation service, fast timer settings and a
controller factory wired to in-process capture adapters.
"""
import asyncio
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from capture import PushRecognizer, SilentSynthesizer
from controller import AssessmentController
from settings import AssessmentSettings


class FakeEvaluationService:
    """Returns scripted replies in order, or raises the configured error."""

    def __init__(self, replies=None, error=None, delay=0.0):
        self.replies = list(replies or [])
        self.error = error
        self.delay = delay
        self.calls = []

    async def complete(self, system, user, temperature):
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return json.dumps({"scores": {}, "score": 4, "feedback": "Solid answer."})


class RecordingSink:
    def __init__(self):
        self.saved = []

    async def save(self, session_id, profile, results):
        self.saved.append((session_id, profile, list(results)))


@pytest.fixture
def fake_service():
    return FakeEvaluationService()


@pytest.fixture
def fast_settings(tmp_path):
    return AssessmentSettings(
        tick_seconds=0.01,
        narration_delay_seconds=0.01,
        transcript_grace_seconds=0.01,
        results_dir=tmp_path,
    )


@pytest.fixture
def make_controller(fast_settings):
    def factory(service=None, catalog=None, recognizer=None, synthesizer=None, sink=None):
        return AssessmentController(
            catalog=catalog,
            evaluation_service=service or FakeEvaluationService(),
            recognizer=recognizer or PushRecognizer(),
            synthesizer=synthesizer or SilentSynthesizer(),
            result_sink=sink,
            config=fast_settings,
        )
    return factory


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def fake_service_class():
    return FakeEvaluationService
