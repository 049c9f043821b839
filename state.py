"""
State definitions for the Interactive Skill Assessment engine.

- SceneSession: ephemeral per-scene state, rebuilt from scratch on every entry
- ChallengeResult: immutable evidence record for one completed challenge
- ResultLedger: append-only list of ChallengeResults
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from errors import AssessmentError
from scenes import Scene


class DialogueChoice(TypedDict):
    option_id: str
    quality: str
    feedback: str


class BranchChoiceRecord(TypedDict):
    branch_id: str
    choice_id: str
    score: float
    consequence: str


class SceneSession(TypedDict):
    # Identity of this visit
    visit_id: int
    scene_id: str
    scene_type: str

    # Voice response
    transcript: str
    interim_transcript: str
    recording_seconds: int
    is_recording: bool
    voice_analysis: Optional[Dict[str, Any]]
    capture_error: Optional[str]
    abandoned: bool

    # Written challenge
    written_response: str
    written_analysis: Optional[Dict[str, Any]]

    # Prioritization
    task_order: List[str]
    prioritization_submitted: bool
    prioritization_analysis: Optional[Dict[str, Any]]

    # Role-play
    dialogue_position: int  # index into the scenario's subject turns
    dialogue_choices: List[DialogueChoice]

    # Problem-solving
    branch_id: Optional[str]  # None once the path is finished
    branch_choices: List[BranchChoiceRecord]

    # Active listening
    audio_playing: bool
    audio_played: bool
    listening_answers: List[Optional[int]]
    listening_submitted: bool
    listening_analysis: Optional[Dict[str, Any]]

    # Judgment
    judgment_choice: Optional[str]

    # Quick response
    quick_response: str
    quick_response_submitted: bool

    # Control
    is_analyzing: bool
    time_remaining: Optional[int]
    time_expired: bool
    narrated: bool
    local_result_recorded: bool


def new_scene_session(scene: Scene, visit_id: int) -> SceneSession:
    """Create a fresh session for a scene. Every field is explicitly reset."""
    first_branch = None
    if scene.problem_solving and scene.problem_solving.branches:
        first_branch = scene.problem_solving.branches[0].id

    return SceneSession(
        visit_id=visit_id,
        scene_id=scene.id,
        scene_type=scene.type.value,

        transcript="",
        interim_transcript="",
        recording_seconds=0,
        is_recording=False,
        voice_analysis=None,
        capture_error=None,
        abandoned=False,

        written_response="",
        written_analysis=None,

        task_order=[task.id for task in scene.prioritization_tasks],
        prioritization_submitted=False,
        prioritization_analysis=None,

        dialogue_position=0,
        dialogue_choices=[],

        branch_id=first_branch,
        branch_choices=[],

        audio_playing=False,
        audio_played=False,
        listening_answers=[None] * len(scene.comprehension_questions),
        listening_submitted=False,
        listening_analysis=None,

        judgment_choice=None,

        quick_response="",
        quick_response_submitted=False,

        is_analyzing=False,
        time_remaining=scene.time_limit,
        time_expired=False,
        narrated=False,
        local_result_recorded=False,
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChallengeResult(BaseModel):
    """Evidence for one completed challenge. Never edited once created."""
    model_config = ConfigDict(frozen=True)

    scene_id: str
    dimension: str
    scores: Dict[str, float]
    raw_response: str = ""
    feedback: str = ""
    created_at: datetime = Field(default_factory=_utcnow)

    def mean_score(self) -> float:
        if not self.scores:
            return 0.0
        return sum(self.scores.values()) / len(self.scores)


class DuplicateResultError(AssessmentError, ValueError):
    """Raised when a scene visit tries to record a second result."""


class ResultLedger:
    """
    Append-only store of ChallengeResults.

    Each result is keyed by the scene visit that produced it, so one visit can
    contribute at most one result. Revisiting a scene is a new visit.
    """

    def __init__(self):
        self._results: List[ChallengeResult] = []
        self._visits: Set[Tuple[str, int]] = set()

    def append(self, result: ChallengeResult, visit_id: int) -> ChallengeResult:
        key = (result.scene_id, visit_id)
        if key in self._visits:
            raise DuplicateResultError(
                f"Scene '{result.scene_id}' already recorded a result for visit {visit_id}"
            )
        self._visits.add(key)
        self._results.append(result)
        return result

    def has_result(self, scene_id: str, visit_id: int) -> bool:
        return (scene_id, visit_id) in self._visits

    @property
    def results(self) -> Tuple[ChallengeResult, ...]:
        return tuple(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ChallengeResult]:
        return iter(tuple(self._results))
