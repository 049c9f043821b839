"""
Commands and events exchanged between hosts and the AssessmentController.

Hosts never call into scene internals. A button press becomes an
AssessmentCommand; the controller answers with transition and completion
events.
"""
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

from skill_profile import DimensionScore


class AssessmentAction(str, Enum):
    ADVANCE = "advance"
    RETREAT = "retreat"

    # Voice response
    START_RECORDING = "start_recording"
    STOP_RECORDING = "stop_recording"
    REQUEST_MICROPHONE = "request_microphone"
    ABANDON_CHALLENGE = "abandon_challenge"

    # Written challenge
    SET_WRITTEN_RESPONSE = "set_written_response"
    SUBMIT_WRITTEN_RESPONSE = "submit_written_response"

    # Prioritization
    MOVE_TASK = "move_task"
    SUBMIT_PRIORITIZATION = "submit_prioritization"

    # Role-play / problem-solving
    CHOOSE_DIALOGUE_OPTION = "choose_dialogue_option"
    CHOOSE_BRANCH = "choose_branch"

    # Active listening
    PLAY_LISTENING_AUDIO = "play_listening_audio"
    SELECT_LISTENING_ANSWER = "select_listening_answer"
    SUBMIT_LISTENING_ANSWERS = "submit_listening_answers"

    # Judgment / quick response
    CHOOSE_JUDGMENT = "choose_judgment"
    SET_QUICK_RESPONSE = "set_quick_response"
    SUBMIT_QUICK_RESPONSE = "submit_quick_response"

    # Narration
    SET_MUTED = "set_muted"
    REPLAY_NARRATION = "replay_narration"


class AssessmentCommand(BaseModel):
    """A UI trigger. Only the fields the action needs are read."""
    action: AssessmentAction
    text: Optional[str] = None
    option_id: Optional[str] = None
    from_index: Optional[int] = None
    to_index: Optional[int] = None
    question_index: Optional[int] = None
    option_index: Optional[int] = None
    muted: Optional[bool] = None


class Direction(str, Enum):
    START = "start"
    FORWARD = "forward"
    BACKWARD = "backward"


class SceneTransition(BaseModel):
    index: int
    total: int
    scene_id: str
    scene_type: str
    direction: Direction


class CompletionEvent(BaseModel):
    session_id: str
    profile: Dict[str, DimensionScore]
    result_count: int
