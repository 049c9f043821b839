"""
Assessment API routes.
Wraps the AssessmentController for a browser client. The browser owns the
microphone and speakers, so recognition events are pushed in over HTTP.
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import Optional, Dict, Any, List

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from capture import PushRecognizer, SilentSynthesizer, Voice
from commands import AssessmentCommand
from controller import AssessmentController
from errors import ActionDisabledError, AssessmentError
from persistence import JsonFileResultSink
from scenes import default_catalog, get_catalog_summary
from utils import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["assessment"])

# In-memory session storage (use Redis/DB in production)
sessions: Dict[str, AssessmentController] = {}


def build_controller(recognizer: PushRecognizer) -> AssessmentController:
    """Build the controller for a new session. Tests swap this out."""
    # The browser speaks; the server only tracks utterance state
    return AssessmentController(
        recognizer=recognizer,
        synthesizer=SilentSynthesizer(voices=[Voice(name="browser", lang="en-US")]),
        result_sink=JsonFileResultSink(),
    )


class StartAssessmentRequest(BaseModel):
    microphone_supported: bool = True
    microphone_granted: bool = True


class RecognitionEventRequest(BaseModel):
    text: Optional[str] = None
    is_final: bool = True
    error: Optional[str] = None
    ended: bool = False


class SceneInfo(BaseModel):
    id: str
    title: str
    type: str
    dimension: str


class CommandResponse(BaseModel):
    result: Any = None
    snapshot: Dict[str, Any]


def _get_controller(session_id: str) -> AssessmentController:
    if session_id not in sessions:
        raise HTTPException(status_code=404, detail="Session not found")
    return sessions[session_id]


def _serialize(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


@router.get("/scenes", response_model=List[SceneInfo])
async def list_scenes():
    """List the scenes of the default assessment."""
    return [SceneInfo(**row) for row in get_catalog_summary(default_catalog())]


@router.post("/assessments")
async def start_assessment(request: StartAssessmentRequest):
    """Start a new assessment session and enter the first scene."""
    recognizer = PushRecognizer(
        supported=request.microphone_supported,
        permission_granted=request.microphone_granted,
    )
    controller = build_controller(recognizer)
    await controller.start()
    sessions[controller.session_id] = controller
    logger.info("Started assessment %s", controller.session_id)
    return controller.snapshot()


@router.get("/assessments/{session_id}")
async def get_assessment(session_id: str):
    """Current state of an assessment."""
    return _get_controller(session_id).snapshot()


@router.post("/assessments/{session_id}/commands", response_model=CommandResponse)
async def send_command(session_id: str, command: AssessmentCommand):
    """Run one UI command against the assessment."""
    controller = _get_controller(session_id)
    try:
        result = await controller.dispatch(command)
    except ActionDisabledError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except AssessmentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CommandResponse(result=_serialize(result), snapshot=controller.snapshot())


@router.post("/assessments/{session_id}/recognition")
async def push_recognition_event(session_id: str, event: RecognitionEventRequest):
    """Forward a speech recognition event from the browser."""
    controller = _get_controller(session_id)
    recognizer = controller.recognizer
    if not isinstance(recognizer, PushRecognizer):
        raise HTTPException(status_code=400, detail="Session does not accept pushed recognition events")

    if event.error:
        accepted = recognizer.push_error(event.error)
    elif event.ended:
        recognizer.end()
        accepted = True
    elif event.text is not None:
        accepted = recognizer.push_result(event.text, event.is_final)
    else:
        raise HTTPException(status_code=400, detail="Event needs text, error or ended")

    return {"accepted": accepted, "snapshot": controller.snapshot()}


@router.delete("/assessments/{session_id}")
async def end_assessment(session_id: str):
    """Tear down an assessment session."""
    controller = _get_controller(session_id)
    controller.close()
    await controller.drain()
    del sessions[session_id]
    return {"status": "closed"}
