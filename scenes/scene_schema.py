"""
Scene Catalog Schema

Data structures for the scenes an assessment walks through.

Key concepts:
- Scene: one step of the assessment, tagged with a SceneType and carrying the
  payload that scene type needs (voice prompt, task list, dialogue, ...)
- SkillDimension: the fixed catalog of skills that results are grouped under
- DimensionIcon: tagged variant for the presentation layer's icon lookup

Scenes are read-only inputs. Every model here is frozen.
"""

from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from errors import AssessmentError


# =============================================================================
# ENUMS FOR TYPE SAFETY
# =============================================================================

class SceneType(str, Enum):
    WELCOME = "welcome"
    NARRATIVE = "narrative"
    VOICE_RESPONSE = "voice-response"
    WRITTEN_CHALLENGE = "written-challenge"
    PRIORITIZATION = "prioritization"
    ROLE_PLAY = "role-play"
    PROBLEM_SOLVING = "problem-solving"
    ACTIVE_LISTENING = "active-listening"
    JUDGMENT = "judgment"
    QUICK_RESPONSE = "quick-response"
    REVIEW = "review"
    COMPLETION = "completion"


NARRATED_SCENE_TYPES = frozenset({SceneType.WELCOME, SceneType.NARRATIVE})


class DimensionIcon(str, Enum):
    MESSAGE_CIRCLE = "MessageCircle"
    LIGHTBULB = "Lightbulb"
    REFRESH = "RefreshCw"
    USERS = "Users"
    ROCKET = "Rocket"
    CLOCK = "Clock"
    BRIEFCASE = "Briefcase"
    GRADUATION_CAP = "GraduationCap"


# Exhaustive icon table for text hosts. Every DimensionIcon must appear here.
ICON_GLYPHS: Dict[DimensionIcon, str] = {
    DimensionIcon.MESSAGE_CIRCLE: "💬",
    DimensionIcon.LIGHTBULB: "💡",
    DimensionIcon.REFRESH: "🔄",
    DimensionIcon.USERS: "👥",
    DimensionIcon.ROCKET: "🚀",
    DimensionIcon.CLOCK: "⏱️",
    DimensionIcon.BRIEFCASE: "💼",
    DimensionIcon.GRADUATION_CAP: "🎓",
}


def icon_glyph(icon: DimensionIcon) -> str:
    """Look up the glyph for a dimension icon."""
    return ICON_GLYPHS[icon]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# =============================================================================
# SKILL DIMENSIONS
# =============================================================================

class SkillDimension(_Frozen):
    """A skill that challenge results are grouped under for aggregation."""
    id: str
    title: str
    description: str
    test_methods: List[SceneType] = Field(default_factory=list)
    icon: DimensionIcon
    color: str


# =============================================================================
# SCENE PAYLOADS
# =============================================================================

class VoiceCriteria(_Frozen):
    clarity: str
    structure: str
    professionalism: str
    completeness: str


class VoicePrompt(_Frozen):
    id: str
    scenario: str
    prompt: str
    duration: int  # seconds for the response
    evaluation_criteria: VoiceCriteria


class WrittenConstraints(_Frozen):
    max_words: Optional[int] = None
    min_words: Optional[int] = None
    must_include: List[str] = Field(default_factory=list)
    must_avoid: List[str] = Field(default_factory=list)


class WrittenCriteria(_Frozen):
    tone: str
    clarity: str
    actionability: str
    professionalism: str


class WrittenChallenge(_Frozen):
    id: str
    kind: Literal["email", "message", "report", "feedback"]
    scenario: str
    context: str
    recipient: str
    constraints: Optional[WrittenConstraints] = None
    evaluation_criteria: WrittenCriteria


Level = Literal["critical", "high", "medium", "low"]


class PrioritizationTask(_Frozen):
    id: str
    title: str
    description: str
    deadline: str  # e.g. "Today 5pm", "Tomorrow", "This week"
    urgency: Level
    importance: Level
    estimated_time: str
    dependencies: List[str] = Field(default_factory=list)
    hidden_context: Optional[str] = None  # revealed after submission


DialogueQuality = Literal["excellent", "good", "acceptable", "poor"]


class DialogueOption(_Frozen):
    id: str
    text: str
    quality: DialogueQuality
    feedback: str
    next_turn_id: Optional[str] = None


class DialogueTurn(_Frozen):
    speaker: Literal["counterpart", "subject"]
    message: str = ""
    emotion: Optional[Literal["neutral", "frustrated", "confused", "happy", "defensive"]] = None
    options: List[DialogueOption] = Field(default_factory=list)


class RolePlayCriteria(_Frozen):
    empathy: str
    problem_solving: str
    communication: str
    outcome: str


class RolePlayScenario(_Frozen):
    id: str
    title: str
    context: str
    counterpart_role: str
    subject_role: str
    objective: str
    turns: List[DialogueTurn]
    evaluation_criteria: RolePlayCriteria

    def subject_turns(self) -> List[DialogueTurn]:
        """Turns where the subject picks an option, in conversation order."""
        return [t for t in self.turns if t.speaker == "subject" and t.options]


class BranchChoice(_Frozen):
    id: str
    text: str
    consequence: str
    score: float
    leads_to: Optional[str] = None


class ScenarioBranch(_Frozen):
    id: str
    situation: str
    choices: List[BranchChoice]


class ProblemSolvingCriteria(_Frozen):
    analysis: str
    creativity: str
    practicality: str
    risk_awareness: str


class ProblemSolvingScenario(_Frozen):
    id: str
    title: str
    initial_situation: str
    branches: List[ScenarioBranch]
    optimal_path: List[str]
    evaluation_criteria: ProblemSolvingCriteria
    # Per-choice ceiling used to normalize a path's total score
    max_choice_score: float = 85

    def branch_index(self, branch_id: str) -> Optional[int]:
        for i, branch in enumerate(self.branches):
            if branch.id == branch_id:
                return i
        return None


class ComprehensionQuestion(_Frozen):
    question: str
    options: List[str]
    correct_index: int


class JudgmentOption(_Frozen):
    id: str
    action: str
    reasoning: str
    ethical_score: float  # 0-100
    practical_score: float  # 0-100
    feedback: str


class JudgmentScenario(_Frozen):
    id: str
    situation: str
    stakeholders: List[str]
    options: List[JudgmentOption]


# =============================================================================
# SCENE
# =============================================================================

class Scene(_Frozen):
    """One step of the assessment workflow."""
    id: str
    type: SceneType
    title: str
    subtitle: Optional[str] = None
    dimension: str  # skill dimension id, or "all"
    content: str
    character: Optional[str] = None

    # Scene-specific payloads
    voice_prompt: Optional[VoicePrompt] = None
    written_challenge: Optional[WrittenChallenge] = None
    prioritization_tasks: List[PrioritizationTask] = Field(default_factory=list)
    role_play: Optional[RolePlayScenario] = None
    problem_solving: Optional[ProblemSolvingScenario] = None
    judgment_scenario: Optional[JudgmentScenario] = None
    audio_script: Optional[str] = None
    comprehension_questions: List[ComprehensionQuestion] = Field(default_factory=list)
    quick_prompt: Optional[str] = None

    # Timing
    time_limit: Optional[int] = None  # seconds

    @property
    def is_narrated(self) -> bool:
        return self.type in NARRATED_SCENE_TYPES


# Which payload each challenge type cannot run without
REQUIRED_PAYLOAD: Dict[SceneType, str] = {
    SceneType.VOICE_RESPONSE: "voice_prompt",
    SceneType.WRITTEN_CHALLENGE: "written_challenge",
    SceneType.PRIORITIZATION: "prioritization_tasks",
    SceneType.ROLE_PLAY: "role_play",
    SceneType.PROBLEM_SOLVING: "problem_solving",
    SceneType.ACTIVE_LISTENING: "audio_script",
    SceneType.JUDGMENT: "judgment_scenario",
    SceneType.QUICK_RESPONSE: "quick_prompt",
}


class SceneDataError(AssessmentError, ValueError):
    """Raised when a scene catalog is structurally invalid."""


def validate_catalog(scenes: List[Scene], dimensions: List[SkillDimension]) -> List[str]:
    """
    Check a catalog for structural problems.

    Returns a list of human-readable problems; an empty list means the
    catalog is usable. Content quality (e.g. an empty task list) is not an
    error here; evaluators degrade to minimum scores for those.
    """
    problems = []
    if not scenes:
        return ["Catalog must contain at least one scene"]

    seen = set()
    dimension_ids = {d.id for d in dimensions}
    for scene in scenes:
        if scene.id in seen:
            problems.append(f"Duplicate scene id: '{scene.id}'")
        seen.add(scene.id)

        if scene.dimension != "all" and scene.dimension not in dimension_ids:
            problems.append(f"Scene '{scene.id}' references unknown dimension '{scene.dimension}'")

        required = REQUIRED_PAYLOAD.get(scene.type)
        if required and getattr(scene, required) is None:
            problems.append(f"Scene '{scene.id}' ({scene.type.value}) is missing '{required}'")

        if scene.time_limit is not None and scene.time_limit <= 0:
            problems.append(f"Scene '{scene.id}' has a non-positive time limit")

        for q_index, question in enumerate(scene.comprehension_questions):
            if not 0 <= question.correct_index < len(question.options):
                problems.append(
                    f"Scene '{scene.id}' question #{q_index + 1} has an out-of-range correct index"
                )

    return problems
