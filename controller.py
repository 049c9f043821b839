"""
Assessment Controller

Drives a subject through the scene catalog. Owns:
- the current scene index and its SceneSession (rebuilt on every entry)
- the scene's timers (countdown, delayed narration), cancelled on exit
- the capture handles (speech capture, narration)
- the ResultLedger and the derived SkillProfile

Every public operation must be called from inside a running asyncio event loop.
Disabled operations raise ActionDisabledError. Evaluation failures never
escape: a failed or crashing evaluator yields a neutral result instead.
"""
import asyncio
import uuid
from functools import partial
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set

from capture import (
    RECOGNITION_ERROR_MESSAGES,
    Narrator,
    PushRecognizer,
    SilentSynthesizer,
    SpeechCapture,
    SpeechRecognizer,
    SpeechSynthesizer,
)
from commands import AssessmentAction, AssessmentCommand, CompletionEvent, Direction, SceneTransition
from errors import ActionDisabledError, AssessmentError
from evaluators import (
    PRIORITIZATION_CRITERIA,
    QUICK_RESPONSE_CRITERIA,
    VOICE_CRITERIA,
    WRITTEN_CRITERIA,
    AnthropicTextEvaluator,
    EvaluationOutcome,
    TextEvaluationService,
    count_words,
    evaluate_dialogue,
    evaluate_judgment,
    evaluate_listening,
    evaluate_prioritization,
    evaluate_problem_solving,
    evaluate_quick_response,
    evaluate_voice_response,
    evaluate_written_response,
    neutral_outcome,
)
from persistence import ResultSink
from scenes import Scene, SceneCatalog, SceneType, default_catalog
from settings import AssessmentSettings, settings as default_settings
from skill_profile import SkillProfile, calculate_skill_profile, profile_to_dict, total_evidence
from state import (
    BranchChoiceRecord,
    ChallengeResult,
    DialogueChoice,
    ResultLedger,
    SceneSession,
    new_scene_session,
)
from timers import TimerGroup, run_after, run_countdown
from utils import get_logger

logger = get_logger(__name__)

DEFAULT_MIN_WRITTEN_WORDS = 10
MIN_QUICK_RESPONSE_CHARS = 10
REQUIRED_DIALOGUE_CHOICES = 2

# Recognizer errors that mean the microphone cannot be used at all
PERMISSION_ERRORS = ("not-allowed", "audio-capture")


class AssessmentController:

    def __init__(
        self,
        catalog: Optional[SceneCatalog] = None,
        evaluation_service: Optional[TextEvaluationService] = None,
        recognizer: Optional[SpeechRecognizer] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        result_sink: Optional[ResultSink] = None,
        config: Optional[AssessmentSettings] = None,
        session_id: Optional[str] = None,
    ):
        self.catalog = catalog or default_catalog()
        self.config = config or default_settings
        self.evaluation_service = evaluation_service or AnthropicTextEvaluator(
            model=self.config.anthropic_model,
            max_tokens=self.config.max_tokens,
            timeout_seconds=self.config.evaluation_timeout_seconds,
        )
        self.result_sink = result_sink
        self.session_id = session_id or uuid.uuid4().hex

        self.recognizer = recognizer or PushRecognizer()
        self.capture = SpeechCapture(
            self.recognizer,
            tick_seconds=self.config.tick_seconds,
            grace_seconds=self.config.transcript_grace_seconds,
            language=self.config.voice_locale,
            on_update=self._sync_capture,
            on_ended=self._on_capture_ended,
            on_error=self._on_capture_error,
        )
        self.narrator = Narrator(
            synthesizer or SilentSynthesizer(),
            preferred_voice_name=self.config.preferred_voice_name,
            locale=self.config.voice_locale,
            narration_rate=self.config.narration_rate,
            listening_rate=self.config.listening_rate,
            on_voice_ready=self._on_voice_ready,
        )

        self.ledger = ResultLedger()
        self.profile: SkillProfile = calculate_skill_profile([], self.catalog.dimensions)
        self.index = 0
        self.session: Optional[SceneSession] = None
        self.microphone_available: Optional[bool] = None
        self.completed = False
        self.completion_event: Optional[CompletionEvent] = None

        self._timers: Optional[TimerGroup] = None
        self._visits = 0
        self._background: Set[asyncio.Task] = set()
        self._transition_listeners: List[Callable[[SceneTransition], None]] = []
        self._completion_listeners: List[Callable[[CompletionEvent], None]] = []

    # =========================================================================
    # EVENTS
    # =========================================================================

    def on_transition(self, listener: Callable[[SceneTransition], None]) -> None:
        self._transition_listeners.append(listener)

    def on_completion(self, listener: Callable[[CompletionEvent], None]) -> None:
        self._completion_listeners.append(listener)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def scene(self) -> Scene:
        return self.catalog[self.index]

    @property
    def results(self) -> List[ChallengeResult]:
        return list(self.ledger)

    async def start(self) -> SceneTransition:
        """Check the microphone once, then enter the first scene."""
        await self.request_microphone()
        return self.enter_scene(0, Direction.START)

    def enter_scene(self, index: int, direction: Direction = Direction.START) -> SceneTransition:
        if not 0 <= index < len(self.catalog):
            raise AssessmentError(f"Scene index {index} is outside the catalog")

        self._exit_scene(finalize=False)

        self.index = index
        scene = self.catalog[index]
        self._visits += 1
        session = new_scene_session(scene, self._visits)
        self.session = session
        self._timers = TimerGroup(label=scene.id)

        if scene.time_limit:
            self._timers.spawn(
                run_countdown(
                    scene.time_limit,
                    partial(self._on_countdown_tick, session),
                    partial(self._on_countdown_expired, session),
                    self.config.tick_seconds,
                ),
                name=f"countdown-{scene.id}",
            )

        if scene.is_narrated and scene.content and not self.narrator.muted:
            self._schedule_narration(session)

        transition = SceneTransition(
            index=index,
            total=len(self.catalog),
            scene_id=scene.id,
            scene_type=scene.type.value,
            direction=direction,
        )
        logger.info("Entered scene %d/%d '%s' (%s)", index + 1, len(self.catalog), scene.id, direction.value)
        for listener in self._transition_listeners:
            listener(transition)

        if index == self.catalog.last_index:
            self._complete()
        return transition

    def _exit_scene(self, finalize: bool) -> None:
        if self.session is None:
            return
        if self._timers is not None:
            self._timers.cancel_all()
            self._timers = None
        self.narrator.cancel()
        self.capture.abort()
        if finalize:
            self._finalize_local_result()
        self.session = None

    def can_advance(self) -> bool:
        session = self.session
        if session is None or self.index >= self.catalog.last_index:
            return False

        scene_type = self.scene.type
        if scene_type == SceneType.VOICE_RESPONSE:
            return session["voice_analysis"] is not None or session["abandoned"]
        if scene_type == SceneType.WRITTEN_CHALLENGE:
            return session["written_analysis"] is not None
        if scene_type == SceneType.PRIORITIZATION:
            # Opens on submit; advancing before the analysis returns drops the result
            return session["prioritization_submitted"]
        if scene_type == SceneType.ROLE_PLAY:
            return len(session["dialogue_choices"]) >= REQUIRED_DIALOGUE_CHOICES
        if scene_type == SceneType.PROBLEM_SOLVING:
            return len(session["branch_choices"]) >= 1
        if scene_type == SceneType.ACTIVE_LISTENING:
            return session["listening_submitted"]
        if scene_type == SceneType.JUDGMENT:
            return session["judgment_choice"] is not None
        if scene_type == SceneType.QUICK_RESPONSE:
            return session["quick_response_submitted"]
        return True

    def can_retreat(self) -> bool:
        return self.index > 0

    def advance(self) -> SceneTransition:
        if not self.can_advance():
            raise ActionDisabledError(f"Cannot advance from scene '{self.scene.id}' yet")
        self._exit_scene(finalize=True)
        return self.enter_scene(self.index + 1, Direction.FORWARD)

    def retreat(self) -> SceneTransition:
        if not self.can_retreat():
            raise ActionDisabledError("Already at the first scene")
        self._exit_scene(finalize=False)
        return self.enter_scene(self.index - 1, Direction.BACKWARD)

    def close(self) -> None:
        """Tear down the current scene without recording anything and free the devices."""
        self._exit_scene(finalize=False)
        self.capture.release()
        self.narrator.release()

    async def drain(self) -> None:
        """Wait for background work (result persistence) to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # =========================================================================
    # RESULTS
    # =========================================================================

    def _record(
        self,
        session: SceneSession,
        scene: Scene,
        outcome: EvaluationOutcome,
        raw_response: str,
    ) -> Optional[ChallengeResult]:
        if session is not self.session:
            logger.info(
                "Dropping stale result for scene '%s' (visit %d)", scene.id, session["visit_id"]
            )
            return None

        result = ChallengeResult(
            scene_id=scene.id,
            dimension=scene.dimension,
            scores=outcome.scores,
            raw_response=raw_response,
            feedback=outcome.feedback,
        )
        self.ledger.append(result, session["visit_id"])
        self.profile = calculate_skill_profile(self.ledger, self.catalog.dimensions)
        logger.info("Recorded result for '%s': %s", scene.id, outcome.scores)
        return result

    async def _evaluate(
        self,
        evaluation: Awaitable[EvaluationOutcome],
        criteria: Iterable[str],
    ) -> EvaluationOutcome:
        try:
            return await evaluation
        except Exception as e:
            logger.error("Evaluator raised unexpectedly, using neutral scores: %s", e)
            return neutral_outcome(criteria)

    def _finalize_local_result(self) -> None:
        session = self.session
        if session is None or session["local_result_recorded"]:
            return
        scene = self.scene
        if scene.type == SceneType.ROLE_PLAY and session["dialogue_choices"]:
            self._record_dialogue(session, scene)
        elif scene.type == SceneType.PROBLEM_SOLVING and session["branch_choices"]:
            self._record_path(session, scene)

    def _complete(self) -> None:
        if self.completed:
            return
        self.completed = True
        self.profile = calculate_skill_profile(self.ledger, self.catalog.dimensions)
        event = CompletionEvent(
            session_id=self.session_id,
            profile=self.profile,
            result_count=len(self.ledger),
        )
        self.completion_event = event
        logger.info("Assessment %s complete with %d results", self.session_id, len(self.ledger))

        if self.result_sink is not None:
            task = asyncio.get_running_loop().create_task(self._persist())
            self._background.add(task)
            task.add_done_callback(self._background.discard)

        for listener in self._completion_listeners:
            listener(event)

    async def _persist(self) -> None:
        try:
            await self.result_sink.save(self.session_id, self.profile, self.ledger.results)
        except Exception as e:
            logger.error("Failed to persist assessment %s: %s", self.session_id, e)

    # =========================================================================
    # TIMERS AND NARRATION
    # =========================================================================

    def _on_countdown_tick(self, session: SceneSession, remaining: int) -> None:
        if session is self.session:
            session["time_remaining"] = remaining

    def _on_countdown_expired(self, session: SceneSession) -> None:
        if session is self.session:
            session["time_expired"] = True
            logger.info("Time expired on scene '%s'", session["scene_id"])

    def _schedule_narration(self, session: SceneSession) -> None:
        self._timers.spawn(
            run_after(self.config.narration_delay_seconds, partial(self._narrate_scene, session)),
            name=f"narration-{session['scene_id']}",
        )

    def _narrate_scene(self, session: SceneSession) -> None:
        if session is not self.session or session["narrated"]:
            return
        if self.narrator.narrate(self.scene.content):
            session["narrated"] = True

    def _on_voice_ready(self) -> None:
        # Voices can show up after the scene was entered; narrate the visit then
        session = self.session
        if session is None or self._timers is None or session["narrated"] or self.narrator.muted:
            return
        if self.scene.is_narrated and self.scene.content:
            self._schedule_narration(session)

    def set_muted(self, muted: bool) -> None:
        self.narrator.set_muted(muted)
        session = self.session
        if not muted and session is not None and self.scene.is_narrated and not session["narrated"]:
            self._schedule_narration(session)

    def replay_narration(self) -> bool:
        if self.narrator.muted:
            raise ActionDisabledError("Narration is muted")
        spoken = self.narrator.narrate(self.scene.content)
        if spoken and self.session is not None:
            self.session["narrated"] = True
        return spoken

    # =========================================================================
    # VOICE RESPONSE
    # =========================================================================

    def _require(self, scene_type: SceneType) -> SceneSession:
        if self.session is None or self.scene.type != scene_type:
            raise ActionDisabledError(f"Current scene is not a {scene_type.value} scene")
        return self.session

    async def request_microphone(self) -> bool:
        granted = await self.capture.request_permission()
        self.microphone_available = granted
        if self.session is not None:
            if granted:
                self.session["capture_error"] = None
            elif not self.capture.is_supported():
                self.session["capture_error"] = "Speech recognition is not supported on this device."
            else:
                self.session["capture_error"] = RECOGNITION_ERROR_MESSAGES["not-allowed"]
        return granted

    def can_start_recording(self) -> bool:
        session = self.session
        if session is None or self.scene.type != SceneType.VOICE_RESPONSE:
            return False
        return (
            bool(self.microphone_available)
            and not session["time_expired"]
            and not session["is_recording"]
            and not session["is_analyzing"]
            and not session["abandoned"]
            and session["voice_analysis"] is None
        )

    def start_recording(self) -> None:
        session = self._require(SceneType.VOICE_RESPONSE)
        if not self.can_start_recording():
            if not self.microphone_available:
                raise ActionDisabledError("Microphone is not available")
            if session["time_expired"]:
                raise ActionDisabledError("Time is up for this challenge")
            raise ActionDisabledError("Recording cannot be started now")

        session["capture_error"] = None
        self.capture.start()
        session["is_recording"] = True

    async def stop_recording(self) -> Optional[ChallengeResult]:
        session = self._require(SceneType.VOICE_RESPONSE)
        if not session["is_recording"]:
            raise ActionDisabledError("Not recording")
        scene = self.scene

        session["is_recording"] = False
        transcript = await self.capture.stop()
        if session is not self.session:
            logger.info("Scene changed while stopping; discarding transcript")
            return None

        session["transcript"] = transcript
        session["interim_transcript"] = ""
        if not transcript.strip():
            logger.info("Empty transcript on '%s'; nothing to analyze", scene.id)
            return None

        session["is_analyzing"] = True
        outcome = await self._evaluate(
            evaluate_voice_response(
                self.evaluation_service, scene.voice_prompt, transcript, session["recording_seconds"]
            ),
            VOICE_CRITERIA,
        )
        session["is_analyzing"] = False
        if session is self.session:
            session["voice_analysis"] = outcome.model_dump()
        return self._record(session, scene, outcome, transcript)

    def abandon_challenge(self) -> None:
        session = self._require(SceneType.VOICE_RESPONSE)
        if session["voice_analysis"] is not None or session["abandoned"] or session["is_analyzing"]:
            raise ActionDisabledError("Nothing to abandon")
        if self.microphone_available and not session["time_expired"]:
            raise ActionDisabledError(
                "The challenge can only be abandoned when the microphone is unavailable or time is up"
            )
        if session["is_recording"]:
            self.capture.abort()
            session["is_recording"] = False
        session["abandoned"] = True
        logger.info("Voice challenge '%s' abandoned; no result recorded", session["scene_id"])

    def _sync_capture(self) -> None:
        session = self.session
        if session is None or self.scene.type != SceneType.VOICE_RESPONSE:
            return
        session["transcript"] = self.capture.transcript
        session["interim_transcript"] = self.capture.interim_transcript
        session["recording_seconds"] = self.capture.duration_seconds
        if not self.capture.is_recording:
            session["is_recording"] = False

    def _on_capture_ended(self) -> None:
        if self._timers is None or self.session is None:
            return
        self._timers.spawn(self.stop_recording(), name="recognizer-ended")

    def _on_capture_error(self, reason: str, message: str) -> None:
        if reason in PERMISSION_ERRORS:
            self.microphone_available = False
        session = self.session
        if session is None or self.scene.type != SceneType.VOICE_RESPONSE:
            return
        session["is_recording"] = False
        session["capture_error"] = message

    # =========================================================================
    # WRITTEN CHALLENGE
    # =========================================================================

    def written_min_words(self) -> int:
        constraints = self.scene.written_challenge.constraints if self.scene.written_challenge else None
        if constraints and constraints.min_words:
            return constraints.min_words
        return DEFAULT_MIN_WRITTEN_WORDS

    def set_written_response(self, text: str) -> None:
        session = self._require(SceneType.WRITTEN_CHALLENGE)
        if session["is_analyzing"] or session["written_analysis"] is not None:
            raise ActionDisabledError("The response has already been submitted")
        session["written_response"] = text

    def can_submit_written(self) -> bool:
        session = self.session
        if session is None or self.scene.type != SceneType.WRITTEN_CHALLENGE:
            return False
        return (
            not session["is_analyzing"]
            and session["written_analysis"] is None
            and count_words(session["written_response"]) >= self.written_min_words()
        )

    async def submit_written_response(self) -> Optional[ChallengeResult]:
        session = self._require(SceneType.WRITTEN_CHALLENGE)
        if not self.can_submit_written():
            raise ActionDisabledError(
                f"Write at least {self.written_min_words()} words before submitting"
            )
        scene = self.scene
        response = session["written_response"]

        session["is_analyzing"] = True
        outcome = await self._evaluate(
            evaluate_written_response(self.evaluation_service, scene.written_challenge, response),
            WRITTEN_CRITERIA,
        )
        session["is_analyzing"] = False
        if session is self.session:
            session["written_analysis"] = outcome.model_dump()
        return self._record(session, scene, outcome, response)

    # =========================================================================
    # PRIORITIZATION
    # =========================================================================

    def move_task(self, from_index: int, to_index: int) -> bool:
        """Reorder one task. Ignored once the ranking is submitted."""
        session = self._require(SceneType.PRIORITIZATION)
        if session["prioritization_submitted"]:
            return False
        order = session["task_order"]
        if not (0 <= from_index < len(order) and 0 <= to_index < len(order)):
            raise AssessmentError(f"Task index out of range: {from_index} -> {to_index}")
        task_id = order.pop(from_index)
        order.insert(to_index, task_id)
        return True

    async def submit_prioritization(self) -> Optional[ChallengeResult]:
        session = self._require(SceneType.PRIORITIZATION)
        if session["prioritization_submitted"]:
            raise ActionDisabledError("The ranking has already been submitted")
        scene = self.scene
        user_order = list(session["task_order"])

        session["prioritization_submitted"] = True
        session["is_analyzing"] = True
        outcome = await self._evaluate(
            evaluate_prioritization(self.evaluation_service, scene.prioritization_tasks, user_order),
            PRIORITIZATION_CRITERIA,
        )
        session["is_analyzing"] = False
        if session is self.session:
            session["prioritization_analysis"] = outcome.model_dump()
        return self._record(session, scene, outcome, ", ".join(user_order))

    # =========================================================================
    # ROLE-PLAY
    # =========================================================================

    def choose_dialogue_option(self, option_id: str) -> DialogueChoice:
        session = self._require(SceneType.ROLE_PLAY)
        scenario = self.scene.role_play
        subject_turns = scenario.subject_turns()
        position = session["dialogue_position"]
        if position >= len(subject_turns):
            raise ActionDisabledError("The conversation is already over")

        option = next((o for o in subject_turns[position].options if o.id == option_id), None)
        if option is None:
            raise AssessmentError(f"Unknown dialogue option '{option_id}'")

        choice = DialogueChoice(option_id=option.id, quality=option.quality, feedback=option.feedback)
        session["dialogue_choices"].append(choice)
        session["dialogue_position"] = position + 1

        if session["dialogue_position"] >= len(subject_turns) and not session["local_result_recorded"]:
            self._record_dialogue(session, self.scene)
        return choice

    def _record_dialogue(self, session: SceneSession, scene: Scene) -> None:
        session["local_result_recorded"] = True
        choices = session["dialogue_choices"]
        outcome = evaluate_dialogue(choices)
        self._record(session, scene, outcome, ", ".join(c["option_id"] for c in choices))

    # =========================================================================
    # PROBLEM-SOLVING
    # =========================================================================

    def choose_branch(self, choice_id: str) -> BranchChoiceRecord:
        session = self._require(SceneType.PROBLEM_SOLVING)
        scenario = self.scene.problem_solving
        branch_id = session["branch_id"]
        if branch_id is None:
            raise ActionDisabledError("The scenario is already resolved")

        branch = scenario.branches[scenario.branch_index(branch_id)]
        choice = next((c for c in branch.choices if c.id == choice_id), None)
        if choice is None:
            raise AssessmentError(f"Unknown choice '{choice_id}'")

        record = BranchChoiceRecord(
            branch_id=branch.id,
            choice_id=choice.id,
            score=choice.score,
            consequence=choice.consequence,
        )
        session["branch_choices"].append(record)
        session["branch_id"] = self._next_branch(session, branch.id, choice.leads_to)

        if session["branch_id"] is None and not session["local_result_recorded"]:
            self._record_path(session, self.scene)
        return record

    def _next_branch(self, session: SceneSession, current_id: str, leads_to: Optional[str]) -> Optional[str]:
        scenario = self.scene.problem_solving
        visited = {c["branch_id"] for c in session["branch_choices"]}
        if leads_to and scenario.branch_index(leads_to) is not None:
            candidate = leads_to
        else:
            next_index = scenario.branch_index(current_id) + 1
            if next_index >= len(scenario.branches):
                return None
            candidate = scenario.branches[next_index].id
        return None if candidate in visited else candidate

    def _record_path(self, session: SceneSession, scene: Scene) -> None:
        session["local_result_recorded"] = True
        scenario = scene.problem_solving
        choices = session["branch_choices"]
        outcome = evaluate_problem_solving(choices, scenario.optimal_path, scenario.max_choice_score)
        self._record(session, scene, outcome, ", ".join(c["choice_id"] for c in choices))

    # =========================================================================
    # ACTIVE LISTENING
    # =========================================================================

    def play_listening_audio(self) -> bool:
        session = self._require(SceneType.ACTIVE_LISTENING)
        if session["audio_playing"]:
            raise ActionDisabledError("The briefing is already playing")
        if session["listening_submitted"]:
            raise ActionDisabledError("Answers have already been submitted")

        session["audio_playing"] = True
        started = self.narrator.play_briefing(
            self.scene.audio_script,
            on_end=partial(self._on_briefing_end, session),
        )
        if not started:
            logger.warning("No synthesis voice available; marking briefing for '%s' as played", session["scene_id"])
            self._on_briefing_end(session)
        return started

    def _on_briefing_end(self, session: SceneSession) -> None:
        session["audio_playing"] = False
        session["audio_played"] = True

    def select_listening_answer(self, question_index: int, option_index: int) -> None:
        session = self._require(SceneType.ACTIVE_LISTENING)
        if not session["audio_played"]:
            raise ActionDisabledError("Listen to the briefing before answering")
        if session["listening_submitted"]:
            raise ActionDisabledError("Answers have already been submitted")

        questions = self.scene.comprehension_questions
        if not 0 <= question_index < len(questions):
            raise AssessmentError(f"Unknown question {question_index}")
        if not 0 <= option_index < len(questions[question_index].options):
            raise AssessmentError(f"Unknown option {option_index} for question {question_index}")
        session["listening_answers"][question_index] = option_index

    def can_submit_listening(self) -> bool:
        session = self.session
        if session is None or self.scene.type != SceneType.ACTIVE_LISTENING:
            return False
        return (
            session["audio_played"]
            and not session["listening_submitted"]
            and all(answer is not None for answer in session["listening_answers"])
        )

    def submit_listening_answers(self) -> Optional[ChallengeResult]:
        session = self._require(SceneType.ACTIVE_LISTENING)
        if not self.can_submit_listening():
            raise ActionDisabledError("Answer every question before submitting")
        scene = self.scene
        answers = list(session["listening_answers"])

        session["listening_submitted"] = True
        outcome = evaluate_listening(answers, [q.correct_index for q in scene.comprehension_questions])
        session["listening_analysis"] = outcome.model_dump()
        return self._record(session, scene, outcome, ", ".join(str(a) for a in answers))

    # =========================================================================
    # JUDGMENT
    # =========================================================================

    def choose_judgment(self, option_id: str) -> Optional[ChallengeResult]:
        """Record the first choice immediately. Later choices are ignored."""
        session = self._require(SceneType.JUDGMENT)
        if session["judgment_choice"] is not None:
            return None
        scenario = self.scene.judgment_scenario
        option = next((o for o in scenario.options if o.id == option_id), None)
        if option is None:
            raise AssessmentError(f"Unknown judgment option '{option_id}'")

        session["judgment_choice"] = option.id
        outcome = evaluate_judgment(option, scenario.stakeholders)
        return self._record(session, self.scene, outcome, option.action)

    # =========================================================================
    # QUICK RESPONSE
    # =========================================================================

    def set_quick_response(self, text: str) -> None:
        session = self._require(SceneType.QUICK_RESPONSE)
        if session["quick_response_submitted"]:
            raise ActionDisabledError("The response has already been submitted")
        session["quick_response"] = text

    def can_submit_quick_response(self) -> bool:
        session = self.session
        if session is None or self.scene.type != SceneType.QUICK_RESPONSE:
            return False
        return (
            not session["quick_response_submitted"]
            and len(session["quick_response"].strip()) >= MIN_QUICK_RESPONSE_CHARS
        )

    async def submit_quick_response(self) -> Optional[ChallengeResult]:
        session = self._require(SceneType.QUICK_RESPONSE)
        if not self.can_submit_quick_response():
            raise ActionDisabledError(
                f"Write at least {MIN_QUICK_RESPONSE_CHARS} characters before submitting"
            )
        scene = self.scene
        response = session["quick_response"]
        seconds_spent = 0
        if scene.time_limit:
            seconds_spent = scene.time_limit - (session["time_remaining"] or 0)

        session["quick_response_submitted"] = True
        session["is_analyzing"] = True
        outcome = await self._evaluate(
            evaluate_quick_response(self.evaluation_service, scene.quick_prompt, response, seconds_spent),
            QUICK_RESPONSE_CRITERIA,
        )
        session["is_analyzing"] = False
        return self._record(session, scene, outcome, response)

    # =========================================================================
    # COMMANDS AND VIEWS
    # =========================================================================

    async def dispatch(self, command: AssessmentCommand) -> Any:
        """Route a host command to the matching operation."""
        action = command.action

        def need(value, field):
            if value is None:
                raise AssessmentError(f"'{action.value}' requires '{field}'")
            return value

        if action == AssessmentAction.ADVANCE:
            return self.advance()
        if action == AssessmentAction.RETREAT:
            return self.retreat()
        if action == AssessmentAction.START_RECORDING:
            return self.start_recording()
        if action == AssessmentAction.STOP_RECORDING:
            return await self.stop_recording()
        if action == AssessmentAction.REQUEST_MICROPHONE:
            return await self.request_microphone()
        if action == AssessmentAction.ABANDON_CHALLENGE:
            return self.abandon_challenge()
        if action == AssessmentAction.SET_WRITTEN_RESPONSE:
            return self.set_written_response(need(command.text, "text"))
        if action == AssessmentAction.SUBMIT_WRITTEN_RESPONSE:
            return await self.submit_written_response()
        if action == AssessmentAction.MOVE_TASK:
            return self.move_task(need(command.from_index, "from_index"), need(command.to_index, "to_index"))
        if action == AssessmentAction.SUBMIT_PRIORITIZATION:
            return await self.submit_prioritization()
        if action == AssessmentAction.CHOOSE_DIALOGUE_OPTION:
            return self.choose_dialogue_option(need(command.option_id, "option_id"))
        if action == AssessmentAction.CHOOSE_BRANCH:
            return self.choose_branch(need(command.option_id, "option_id"))
        if action == AssessmentAction.PLAY_LISTENING_AUDIO:
            return self.play_listening_audio()
        if action == AssessmentAction.SELECT_LISTENING_ANSWER:
            return self.select_listening_answer(
                need(command.question_index, "question_index"), need(command.option_index, "option_index")
            )
        if action == AssessmentAction.SUBMIT_LISTENING_ANSWERS:
            return self.submit_listening_answers()
        if action == AssessmentAction.CHOOSE_JUDGMENT:
            return self.choose_judgment(need(command.option_id, "option_id"))
        if action == AssessmentAction.SET_QUICK_RESPONSE:
            return self.set_quick_response(need(command.text, "text"))
        if action == AssessmentAction.SUBMIT_QUICK_RESPONSE:
            return await self.submit_quick_response()
        if action == AssessmentAction.SET_MUTED:
            return self.set_muted(need(command.muted, "muted"))
        if action == AssessmentAction.REPLAY_NARRATION:
            return self.replay_narration()
        raise AssessmentError(f"Unsupported action '{action.value}'")

    def _public_scene(self) -> Dict[str, Any]:
        """Scene payload with answer keys removed until the subject has answered."""
        scene = self.scene
        session = self.session or {}
        data = scene.model_dump(mode="json")

        if not session.get("prioritization_submitted"):
            for task in data["prioritization_tasks"]:
                task.pop("hidden_context", None)
        if not session.get("listening_submitted"):
            for question in data["comprehension_questions"]:
                question.pop("correct_index", None)
        if data.get("role_play"):
            for turn in data["role_play"]["turns"]:
                for option in turn["options"]:
                    option.pop("quality", None)
                    option.pop("feedback", None)
        if data.get("problem_solving"):
            data["problem_solving"].pop("optimal_path", None)
            for branch in data["problem_solving"]["branches"]:
                for choice in branch["choices"]:
                    choice.pop("score", None)
                    choice.pop("consequence", None)
                    choice.pop("leads_to", None)
        if data.get("judgment_scenario") and session.get("judgment_choice") is None:
            for option in data["judgment_scenario"]["options"]:
                option.pop("ethical_score", None)
                option.pop("practical_score", None)
                option.pop("feedback", None)
        return data

    def _interaction_view(self) -> Dict[str, Any]:
        session = self.session
        scene = self.scene
        view: Dict[str, Any] = {}
        if session is None:
            return view

        view["analysis_pending"] = session["is_analyzing"]
        if scene.type == SceneType.VOICE_RESPONSE:
            view["can_start_recording"] = self.can_start_recording()
            view["can_abandon"] = (
                session["voice_analysis"] is None
                and not session["abandoned"]
                and (not self.microphone_available or session["time_expired"])
            )
        elif scene.type == SceneType.WRITTEN_CHALLENGE:
            view["word_count"] = count_words(session["written_response"])
            view["min_words"] = self.written_min_words()
            view["can_submit"] = self.can_submit_written()
        elif scene.type == SceneType.ROLE_PLAY:
            view["current_turn"] = self._current_dialogue_turn()
        elif scene.type == SceneType.PROBLEM_SOLVING:
            branch_id = session["branch_id"]
            if branch_id is not None:
                scenario = scene.problem_solving
                branch = scenario.branches[scenario.branch_index(branch_id)]
                view["current_branch"] = {
                    "id": branch.id,
                    "situation": branch.situation,
                    "choices": [{"id": c.id, "text": c.text} for c in branch.choices],
                }
            else:
                view["current_branch"] = None
        elif scene.type == SceneType.ACTIVE_LISTENING:
            view["can_submit"] = self.can_submit_listening()
        elif scene.type == SceneType.QUICK_RESPONSE:
            view["can_submit"] = self.can_submit_quick_response()
        return view

    def _current_dialogue_turn(self) -> Optional[Dict[str, Any]]:
        scenario = self.scene.role_play
        position = self.session["dialogue_position"]
        subject_turns = scenario.subject_turns()
        if position >= len(subject_turns):
            return None
        turn = subject_turns[position]
        turn_index = scenario.turns.index(turn)
        previous = scenario.turns[turn_index - 1] if turn_index > 0 else None
        counterpart = previous if previous is not None and previous.speaker == "counterpart" else None
        return {
            "counterpart_message": counterpart.message if counterpart else None,
            "emotion": counterpart.emotion if counterpart else None,
            "options": [{"id": o.id, "text": o.text} for o in turn.options],
        }

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready view of everything a host needs to render the current state."""
        session = dict(self.session) if self.session is not None else None
        return {
            "session_id": self.session_id,
            "index": self.index,
            "total": len(self.catalog),
            "scene": self._public_scene(),
            "session": session,
            "interaction": self._interaction_view(),
            "can_advance": self.can_advance(),
            "can_retreat": self.can_retreat(),
            "time_remaining": session["time_remaining"] if session else None,
            "microphone_available": self.microphone_available,
            "muted": self.narrator.muted,
            "is_speaking": self.narrator.is_speaking,
            "profile": profile_to_dict(self.profile),
            "total_evidence": total_evidence(self.profile),
            "result_count": len(self.ledger),
            "completed": self.completed,
        }
