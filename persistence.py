"""
Persistence boundary for finished assessments.

The controller hands the final profile and the result ledger to a ResultSink.
JsonFileResultSink writes one JSON document per assessment.
"""
import asyncio
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Sequence

from settings import settings
from skill_profile import SkillProfile, profile_to_dict, total_evidence
from state import ChallengeResult
from utils import get_logger

logger = get_logger(__name__)


class ResultSink(Protocol):

    async def save(
        self,
        session_id: str,
        profile: SkillProfile,
        results: Sequence[ChallengeResult],
    ) -> None:
        ...


def build_assessment_document(
    session_id: str,
    profile: SkillProfile,
    results: Sequence[ChallengeResult],
) -> Dict[str, Any]:
    return {
        "session_id": session_id,
        "completed_at": datetime.now(timezone.utc).isoformat(),
        "profile": profile_to_dict(profile),
        "total_evidence": total_evidence(profile),
        "results": [result.model_dump(mode="json") for result in results],
    }


class JsonFileResultSink:

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else settings.resolved_results_dir()

    def path_for(self, session_id: str) -> Path:
        return self.directory / f"assessment_{session_id}.json"

    async def save(
        self,
        session_id: str,
        profile: SkillProfile,
        results: Sequence[ChallengeResult],
    ) -> None:
        document = build_assessment_document(session_id, profile, results)
        path = self.path_for(session_id)
        await asyncio.to_thread(self._write, path, document)
        logger.info("Saved assessment %s to %s", session_id, path)

    def _write(self, path: Path, document: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(document, f, indent=2)
