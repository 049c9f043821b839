"""
AssessmentController tests.

Each test drives a controller inside its own event loop with tiny timer
intervals, a scripted evaluation service and the in-process capture adapters.

Run with: pytest tests/test_controller.py -v
"""
import asyncio
import json

import pytest

from capture import ExclusiveHandle, PushRecognizer, SilentSynthesizer, Voice
from commands import AssessmentAction, AssessmentCommand, Direction, SceneTransition
from errors import ActionDisabledError, AssessmentError
from scenes import (
    ComprehensionQuestion,
    Scene,
    SceneType,
    VoiceCriteria,
    VoicePrompt,
    WrittenChallenge,
    WrittenCriteria,
    create_catalog,
    default_catalog,
)


def _scene(scene_id, scene_type, **kwargs):
    return Scene(
        id=scene_id,
        type=scene_type,
        title=scene_id.title(),
        dimension=kwargs.pop("dimension", "all"),
        content=kwargs.pop("content", f"{scene_id} content"),
        **kwargs,
    )


def _voice_scene(time_limit=None):
    return _scene(
        "voice",
        SceneType.VOICE_RESPONSE,
        dimension="communication",
        time_limit=time_limit,
        voice_prompt=VoicePrompt(
            id="v",
            scenario="Your deadline moved.",
            prompt="What do you say?",
            duration=60,
            evaluation_criteria=VoiceCriteria(
                clarity="c", structure="s", professionalism="p", completeness="c"
            ),
        ),
    )


def _catalog(*middle):
    return create_catalog([
        _scene("start", SceneType.WELCOME),
        *middle,
        _scene("end", SceneType.COMPLETION),
    ])


def _goto(controller, scene_id):
    controller.enter_scene(controller.catalog.index_of(scene_id), Direction.FORWARD)


async def _wait_for(predicate, timeout=1.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.005)


async def _shutdown(controller):
    controller.close()
    await controller.drain()


VOICE_REPLY = json.dumps({
    "scores": {"clarity": 4, "structure": 4, "professionalism": 4, "completeness": 4},
    "feedback": "Clear and structured.",
})


# =============================================================================
# NAVIGATION AND GATES
# =============================================================================

def test_start_enters_first_scene(make_controller):
    transitions = []

    async def scenario():
        controller = make_controller()
        controller.on_transition(transitions.append)
        transition = await controller.start()

        assert isinstance(transition, SceneTransition)
        assert controller.scene.id == "welcome"
        assert controller.microphone_available is True
        assert controller.can_advance() is True
        assert controller.can_retreat() is False
        with pytest.raises(ActionDisabledError):
            controller.retreat()
        await _shutdown(controller)

    asyncio.run(scenario())
    assert transitions[0].direction == Direction.START


def test_challenge_scenes_start_gated(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        for scene in controller.catalog:
            _goto(controller, scene.id)
            expected = scene.type in (SceneType.WELCOME, SceneType.NARRATIVE, SceneType.REVIEW)
            assert controller.can_advance() is expected, scene.id
        await _shutdown(controller)

    asyncio.run(scenario())


def test_advance_when_gated_raises(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        controller.advance()
        assert controller.scene.type == SceneType.VOICE_RESPONSE
        with pytest.raises(ActionDisabledError):
            controller.advance()
        assert controller.scene.type == SceneType.VOICE_RESPONSE
        await _shutdown(controller)

    asyncio.run(scenario())


def test_enter_scene_out_of_range(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        with pytest.raises(AssessmentError):
            controller.enter_scene(99)
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# VOICE RESPONSE
# =============================================================================

def test_voice_response_happy_path(make_controller, fake_service_class):
    service = fake_service_class(replies=[VOICE_REPLY])

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        controller.advance()

        assert controller.can_start_recording()
        controller.start_recording()
        assert controller.session["is_recording"]
        controller.recognizer.push_result("First I would acknowledge the change", is_final=True)
        controller.recognizer.push_result("and then list our options.", is_final=True)

        result = await controller.stop_recording()

        assert result.scene_id == "comm-voice-1"
        assert result.scores == {"clarity": 4, "structure": 4, "professionalism": 4, "completeness": 4}
        assert result.raw_response == "First I would acknowledge the change and then list our options."
        assert controller.session["voice_analysis"]["feedback"] == "Clear and structured."
        assert controller.can_advance()
        assert not controller.can_start_recording()
        assert controller.profile["communication"].score == 4.0
        await _shutdown(controller)

    asyncio.run(scenario())
    assert service.calls[0]["temperature"] == 0.3


def test_empty_transcript_records_nothing(make_controller, fake_service_class):
    service = fake_service_class()

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        controller.advance()

        controller.start_recording()
        result = await controller.stop_recording()

        assert result is None
        assert len(controller.ledger) == 0
        assert controller.can_advance() is False
        assert controller.can_start_recording() is True
        await _shutdown(controller)

    asyncio.run(scenario())
    assert service.calls == []


def test_failing_service_records_neutral_result(make_controller, fake_service_class):
    service = fake_service_class(error=RuntimeError("service down"))

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        controller.advance()

        controller.start_recording()
        controller.recognizer.push_result("Here is my answer", is_final=True)
        result = await controller.stop_recording()

        assert result is not None
        assert set(result.scores.values()) == {3.0}
        assert len(controller.ledger) == 1
        assert controller.can_advance()
        await _shutdown(controller)

    asyncio.run(scenario())


def test_recognizer_ending_on_its_own_stops_recording(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        controller.advance()

        controller.start_recording()
        controller.recognizer.push_result("Short answer", is_final=True)
        controller.recognizer.end()

        await _wait_for(lambda: controller.session["voice_analysis"] is not None)
        assert len(controller.ledger) == 1
        assert controller.session["is_recording"] is False
        await _shutdown(controller)

    asyncio.run(scenario())


def test_permission_error_marks_microphone_unavailable(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        controller.advance()

        controller.start_recording()
        controller.recognizer.push_error("not-allowed")

        assert controller.microphone_available is False
        assert controller.session["is_recording"] is False
        assert controller.session["capture_error"] == "Microphone access denied. Please allow microphone access."
        assert controller.snapshot()["interaction"]["can_abandon"] is True
        await _shutdown(controller)

    asyncio.run(scenario())


def test_abandon_requires_unavailable_microphone(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        controller.advance()
        with pytest.raises(ActionDisabledError):
            controller.abandon_challenge()
        await _shutdown(controller)

    asyncio.run(scenario())


def test_abandon_without_microphone(make_controller):
    async def scenario():
        controller = make_controller(recognizer=PushRecognizer(permission_granted=False))
        await controller.start()
        assert controller.microphone_available is False

        controller.advance()
        assert controller.can_start_recording() is False
        with pytest.raises(ActionDisabledError):
            controller.start_recording()

        controller.abandon_challenge()
        assert controller.session["abandoned"] is True
        assert controller.can_advance()
        assert len(controller.ledger) == 0
        with pytest.raises(ActionDisabledError):
            controller.abandon_challenge()
        await _shutdown(controller)

    asyncio.run(scenario())


def test_abandon_after_time_expires(make_controller):
    async def scenario():
        controller = make_controller(catalog=_catalog(_voice_scene(time_limit=2)))
        await controller.start()
        controller.advance()

        await _wait_for(lambda: controller.session["time_expired"])
        assert controller.session["time_remaining"] == 0
        assert controller.can_start_recording() is False

        controller.abandon_challenge()
        assert controller.can_advance()
        await _shutdown(controller)

    asyncio.run(scenario())


def test_stale_result_is_dropped(make_controller, fake_service_class):
    service = fake_service_class(replies=[VOICE_REPLY], delay=0.05)

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        controller.advance()

        controller.start_recording()
        controller.recognizer.push_result("An answer that will arrive late", is_final=True)
        stopping = asyncio.create_task(controller.stop_recording())
        await _wait_for(lambda: controller.session["is_analyzing"])

        old_session = controller.session
        controller.retreat()
        result = await stopping

        assert result is None
        assert len(controller.ledger) == 0
        assert old_session["voice_analysis"] is None
        assert controller.scene.id == "welcome"
        await _shutdown(controller)

    asyncio.run(scenario())
    assert len(service.calls) == 1


def test_earlier_grace_period_leaves_new_recording_alone(make_controller, fake_service_class):
    service = fake_service_class(replies=[VOICE_REPLY])

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        controller.advance()

        controller.start_recording()
        controller.recognizer.push_result("first visit words", is_final=True)
        stopping = asyncio.create_task(controller.stop_recording())
        await asyncio.sleep(0)

        controller.retreat()
        controller.advance()
        controller.start_recording()
        await asyncio.sleep(0.05)
        assert await stopping is None

        assert controller.recognizer.push_result("second visit answer", is_final=True) is True
        assert controller.session["transcript"] == "second visit answer"
        result = await controller.stop_recording()

        assert result is not None
        assert result.raw_response == "second visit answer"
        assert len(controller.ledger) == 1
        assert controller.can_advance()
        await _shutdown(controller)

    asyncio.run(scenario())
    assert len(service.calls) == 1


def test_close_releases_audio_devices(make_controller):
    async def scenario():
        before = len(ExclusiveHandle._holders)
        controllers = []
        for _ in range(5):
            controller = make_controller()
            await controller.start()
            await _wait_for(lambda: controller.session["narrated"])
            controller.advance()
            controller.start_recording()
            controllers.append(controller)

        for controller in controllers:
            await _shutdown(controller)

        assert len(ExclusiveHandle._holders) == before
        for controller in controllers:
            assert not controller.capture.is_holder
            assert not controller.narrator.is_holder

    asyncio.run(scenario())


# =============================================================================
# TIMERS
# =============================================================================

def test_exit_cancels_countdown_and_reentry_is_fresh(make_controller):
    catalog = _catalog(_scene("timed", SceneType.NARRATIVE, time_limit=5))

    async def scenario():
        controller = make_controller(catalog=catalog)
        await controller.start()
        controller.advance()
        first_visit = controller.session
        assert first_visit["time_remaining"] == 5

        await _wait_for(lambda: first_visit["time_remaining"] < 5)
        controller.retreat()
        frozen = first_visit["time_remaining"]

        await asyncio.sleep(0.08)
        assert first_visit["time_remaining"] == frozen
        assert first_visit["time_expired"] is False

        controller.advance()
        second_visit = controller.session
        assert second_visit is not first_visit
        assert second_visit["visit_id"] > first_visit["visit_id"]
        assert second_visit["time_remaining"] == 5

        await _wait_for(lambda: second_visit["time_expired"])
        assert second_visit["time_remaining"] == 0
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# WRITTEN CHALLENGE
# =============================================================================

def test_written_minimum_words(make_controller, fake_service_class):
    service = fake_service_class(replies=[json.dumps({
        "scores": {"tone": 4, "clarity": 4, "actionability": 4, "professionalism": 4},
        "feedback": "Well written.",
    })])
    catalog = _catalog(_scene(
        "email",
        SceneType.WRITTEN_CHALLENGE,
        dimension="communication",
        written_challenge=WrittenChallenge(
            id="w",
            kind="email",
            scenario="A client is upset.",
            context="The shipment is late.",
            recipient="Client",
            evaluation_criteria=WrittenCriteria(tone="t", clarity="c", actionability="a", professionalism="p"),
        ),
    ))

    async def scenario():
        controller = make_controller(service=service, catalog=catalog)
        await controller.start()
        controller.advance()

        assert controller.written_min_words() == 10
        controller.set_written_response("Sorry about the late shipment.")
        assert controller.snapshot()["interaction"]["word_count"] == 5
        assert controller.can_submit_written() is False
        with pytest.raises(ActionDisabledError):
            await controller.submit_written_response()
        assert service.calls == []

        controller.set_written_response(
            "Sorry about the late shipment. It will arrive on Friday and we will refund shipping."
        )
        result = await controller.submit_written_response()
        assert result.scores["tone"] == 4
        assert controller.can_advance()
        with pytest.raises(ActionDisabledError):
            controller.set_written_response("Edited afterwards")
        await _shutdown(controller)

    asyncio.run(scenario())


def test_written_uses_catalog_minimum(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        _goto(controller, "comm-written-1")
        assert controller.written_min_words() == 50
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# PRIORITIZATION
# =============================================================================

def test_prioritization_flow(make_controller, fake_service_class):
    service = fake_service_class()

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        _goto(controller, "time-priority-1")

        original = list(controller.session["task_order"])
        assert controller.move_task(0, 2) is True
        assert controller.session["task_order"][2] == original[0]
        with pytest.raises(AssessmentError):
            controller.move_task(0, 42)

        hidden = [t for t in controller.snapshot()["scene"]["prioritization_tasks"] if "hidden_context" in t]
        assert hidden == []

        result = await controller.submit_prioritization()
        assert result.scores == {"prioritization": 4}
        assert result.dimension == "time_management"
        assert controller.can_advance()
        assert controller.move_task(0, 1) is False
        with pytest.raises(ActionDisabledError):
            await controller.submit_prioritization()
        await _shutdown(controller)

    asyncio.run(scenario())


def test_pending_analysis_is_reported_while_gate_is_open(make_controller, fake_service_class):
    service = fake_service_class(delay=0.05)

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        _goto(controller, "time-priority-1")
        assert controller.snapshot()["interaction"]["analysis_pending"] is False

        submitting = asyncio.create_task(controller.submit_prioritization())
        await _wait_for(lambda: controller.session["is_analyzing"])
        snapshot = controller.snapshot()
        assert snapshot["interaction"]["analysis_pending"] is True
        assert snapshot["can_advance"] is True

        result = await submitting
        assert result.scores == {"prioritization": 4}
        assert controller.snapshot()["interaction"]["analysis_pending"] is False
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# ROLE-PLAY
# =============================================================================

def test_role_play_records_after_last_turn(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        _goto(controller, "collab-roleplay-1")

        turn = controller.snapshot()["interaction"]["current_turn"]
        assert [o["id"] for o in turn["options"]] == ["r1-o1", "r1-o2", "r1-o3", "r1-o4"]
        assert "quality" not in turn["options"][0]

        with pytest.raises(AssessmentError):
            controller.choose_dialogue_option("r2-o1")

        choice = controller.choose_dialogue_option("r1-o2")
        assert choice["quality"] == "excellent"
        assert len(controller.ledger) == 0
        assert controller.can_advance() is False

        controller.choose_dialogue_option("r2-o3")
        assert len(controller.ledger) == 1
        result = controller.ledger.results[0]
        assert result.dimension == "collaboration"
        assert result.scores["empathy"] == 4.5
        assert controller.can_advance()
        assert controller.snapshot()["interaction"]["current_turn"] is None

        with pytest.raises(ActionDisabledError):
            controller.choose_dialogue_option("r2-o1")
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# PROBLEM-SOLVING
# =============================================================================

def test_problem_solving_optimal_path(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        _goto(controller, "problem-scenario-1")

        controller.choose_branch("b1-c2")
        assert controller.session["branch_id"] == "branch-2b"
        controller.choose_branch("b2b-c1")

        assert controller.session["branch_id"] is None
        assert controller.snapshot()["interaction"]["current_branch"] is None
        result = controller.ledger.results[0]
        assert result.scores == {"decision_quality": 4.9}
        with pytest.raises(ActionDisabledError):
            controller.choose_branch("b2b-c2")
        await _shutdown(controller)

    asyncio.run(scenario())


def test_problem_solving_missing_branch_falls_through_and_finalizes_on_advance(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        _goto(controller, "problem-scenario-1")

        record = controller.choose_branch("b1-c1")
        assert record["score"] == 30
        # branch-2a does not exist, so the next declared branch follows
        assert controller.session["branch_id"] == "branch-2b"
        assert len(controller.ledger) == 0
        assert controller.can_advance()

        controller.advance()
        assert len(controller.ledger) == 1
        result = controller.ledger.results[0]
        assert result.scene_id == "problem-scenario-1"
        assert result.scores == {"decision_quality": 1.8}
        await _shutdown(controller)

    asyncio.run(scenario())


def test_problem_solving_hides_answer_key(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        _goto(controller, "problem-scenario-1")

        scene = controller.snapshot()["scene"]["problem_solving"]
        assert "optimal_path" not in scene
        assert "score" not in scene["branches"][0]["choices"][0]
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# ACTIVE LISTENING
# =============================================================================

def _listening_catalog():
    return _catalog(_scene(
        "listen",
        SceneType.ACTIVE_LISTENING,
        dimension="communication",
        audio_script="The meeting moved to **Thursday**.",
        comprehension_questions=[
            ComprehensionQuestion(question="Q1", options=["a", "b"], correct_index=1),
            ComprehensionQuestion(question="Q2", options=["a", "b"], correct_index=0),
            ComprehensionQuestion(question="Q3", options=["a", "b", "c"], correct_index=2),
        ],
    ))


def test_listening_flow(make_controller):
    synthesizer = SilentSynthesizer()

    async def scenario():
        controller = make_controller(catalog=_listening_catalog(), synthesizer=synthesizer)
        await controller.start()
        controller.advance()

        with pytest.raises(ActionDisabledError):
            controller.select_listening_answer(0, 1)

        assert controller.play_listening_audio() is True
        assert controller.session["audio_played"] is True
        assert controller.session["audio_playing"] is False

        questions = controller.snapshot()["scene"]["comprehension_questions"]
        assert all("correct_index" not in q for q in questions)

        controller.select_listening_answer(0, 1)
        controller.select_listening_answer(1, 1)
        assert controller.can_submit_listening() is False
        with pytest.raises(AssessmentError):
            controller.select_listening_answer(2, 7)
        controller.select_listening_answer(2, 2)

        result = controller.submit_listening_answers()
        assert result.scores == {"listening": 3}
        assert controller.session["listening_analysis"]["details"]["correct_answers"] == 2
        assert controller.can_advance()

        questions = controller.snapshot()["scene"]["comprehension_questions"]
        assert questions[0]["correct_index"] == 1
        with pytest.raises(ActionDisabledError):
            controller.play_listening_audio()
        await _shutdown(controller)

    asyncio.run(scenario())
    assert "The meeting moved to Thursday." in synthesizer.spoken


def test_listening_without_voice_still_unlocks_answers(make_controller):
    async def scenario():
        controller = make_controller(catalog=_listening_catalog(), synthesizer=SilentSynthesizer(voices=[]))
        await controller.start()
        controller.advance()

        assert controller.play_listening_audio() is False
        assert controller.session["audio_played"] is True
        controller.select_listening_answer(0, 1)
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# JUDGMENT
# =============================================================================

def test_judgment_first_choice_wins(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        _goto(controller, "prof-judgment-1")

        options = controller.snapshot()["scene"]["judgment_scenario"]["options"]
        assert "ethical_score" not in options[0]

        result = controller.choose_judgment("j1-o1")
        assert result.scores == {"ethical": 4.5, "practical": 3.5}
        assert controller.choose_judgment("j1-o3") is None
        assert len(controller.ledger) == 1
        assert controller.session["judgment_choice"] == "j1-o1"
        assert controller.can_advance()
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# QUICK RESPONSE
# =============================================================================

def test_quick_response_flow(make_controller, fake_service_class):
    service = fake_service_class()

    async def scenario():
        controller = make_controller(service=service)
        await controller.start()
        _goto(controller, "init-quick-1")
        session = controller.session

        controller.set_quick_response("  short  ")
        assert controller.can_submit_quick_response() is False
        with pytest.raises(ActionDisabledError):
            await controller.submit_quick_response()

        await _wait_for(lambda: session["time_remaining"] <= 27)
        controller.set_quick_response("Ask my manager what is blocked and help there.")
        expected_seconds = 30 - session["time_remaining"]
        result = await controller.submit_quick_response()

        assert result.scores == {"initiative": 4}
        assert result.dimension == "initiative"
        assert f"completed in {expected_seconds} seconds" in service.calls[0]["user"]
        assert controller.can_advance()
        await _shutdown(controller)

    asyncio.run(scenario())
    assert service.calls[0]["temperature"] == 0.4


# =============================================================================
# NARRATION
# =============================================================================

def test_narration_once_per_visit(make_controller):
    synthesizer = SilentSynthesizer()

    async def scenario():
        controller = make_controller(synthesizer=synthesizer)
        await controller.start()
        await _wait_for(lambda: controller.session["narrated"])
        await asyncio.sleep(0.05)
        assert len(synthesizer.spoken) == 1

        assert controller.replay_narration() is True
        assert len(synthesizer.spoken) == 2

        # Leaving and coming back is a new visit
        controller.advance()
        controller.retreat()
        await _wait_for(lambda: controller.session["narrated"])
        assert len(synthesizer.spoken) == 3
        await _shutdown(controller)

    asyncio.run(scenario())


def test_muted_narration(make_controller):
    synthesizer = SilentSynthesizer()

    async def scenario():
        controller = make_controller(synthesizer=synthesizer)
        controller.set_muted(True)
        await controller.start()
        await asyncio.sleep(0.05)
        assert synthesizer.spoken == []
        with pytest.raises(ActionDisabledError):
            controller.replay_narration()

        controller.set_muted(False)
        await _wait_for(lambda: controller.session["narrated"])
        assert len(synthesizer.spoken) == 1
        await _shutdown(controller)

    asyncio.run(scenario())


def test_narration_starts_when_voices_arrive_late(make_controller):
    synthesizer = SilentSynthesizer(voices=[])

    async def scenario():
        controller = make_controller(synthesizer=synthesizer)
        await controller.start()
        await asyncio.sleep(0.05)
        assert synthesizer.spoken == []
        assert controller.session["narrated"] is False

        synthesizer.add_voices([Voice(name="Google US English", lang="en-US")])
        await _wait_for(lambda: controller.session["narrated"])
        assert len(synthesizer.spoken) == 1
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# COMPLETION
# =============================================================================

def test_completion_fires_once(make_controller, recording_sink):
    events = []

    async def scenario():
        controller = make_controller(catalog=_catalog(), sink=recording_sink)
        controller.on_completion(events.append)
        await controller.start()

        controller.advance()
        assert controller.completed
        assert controller.can_advance() is False
        with pytest.raises(ActionDisabledError):
            controller.advance()

        controller.retreat()
        controller.advance()
        await controller.drain()
        await _shutdown(controller)
        return controller.session_id

    session_id = asyncio.run(scenario())
    assert len(events) == 1
    assert events[0].session_id == session_id
    assert events[0].result_count == 0
    assert len(recording_sink.saved) == 1


def test_sink_failure_is_contained(make_controller):
    class BrokenSink:
        async def save(self, session_id, profile, results):
            raise OSError("disk full")

    async def scenario():
        controller = make_controller(catalog=_catalog(), sink=BrokenSink())
        await controller.start()
        controller.advance()
        await controller.drain()
        assert controller.completed
        await _shutdown(controller)

    asyncio.run(scenario())


# =============================================================================
# COMMANDS AND SNAPSHOT
# =============================================================================

def test_dispatch_routes_commands(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()

        transition = await controller.dispatch(AssessmentCommand(action=AssessmentAction.ADVANCE))
        assert transition.scene_id == "comm-voice-1"

        await controller.dispatch(AssessmentCommand(action=AssessmentAction.RETREAT))
        _goto(controller, "comm-written-1")
        with pytest.raises(AssessmentError, match="requires 'text'"):
            await controller.dispatch(AssessmentCommand(action=AssessmentAction.SET_WRITTEN_RESPONSE))
        await controller.dispatch(AssessmentCommand(action=AssessmentAction.SET_WRITTEN_RESPONSE, text="Hello"))
        assert controller.session["written_response"] == "Hello"

        with pytest.raises(ActionDisabledError):
            await controller.dispatch(AssessmentCommand(action=AssessmentAction.CHOOSE_JUDGMENT, option_id="j1-o1"))

        await controller.dispatch(AssessmentCommand(action=AssessmentAction.SET_MUTED, muted=True))
        assert controller.narrator.muted
        await _shutdown(controller)

    asyncio.run(scenario())


def test_snapshot_is_json_ready(make_controller):
    async def scenario():
        controller = make_controller()
        await controller.start()
        snapshot = controller.snapshot()
        json.dumps(snapshot)

        assert snapshot["index"] == 0
        assert snapshot["total"] == 11
        assert snapshot["scene"]["id"] == "welcome"
        assert snapshot["total_evidence"] == 0
        assert snapshot["completed"] is False
        assert set(snapshot["profile"]) == {d.id for d in default_catalog().dimensions}
        await _shutdown(controller)

    asyncio.run(scenario())
