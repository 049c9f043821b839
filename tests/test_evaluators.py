"""
Evaluator tests.

Local evaluators are checked against hand-computed scores. Delegated
evaluators run against a scripted service so no network is touched.

Run with: pytest tests/test_evaluators.py -v
"""
import asyncio
import json

import pytest

from evaluators import (
    FALLBACK_FEEDBACK,
    NEUTRAL_SCORE,
    SHORT_FALLBACK_FEEDBACK,
    EvaluationServiceError,
    clamp_score,
    count_correct_placements,
    evaluate_dialogue,
    evaluate_judgment,
    evaluate_listening,
    evaluate_prioritization,
    evaluate_problem_solving,
    evaluate_quick_response,
    evaluate_voice_response,
    evaluate_written_response,
    extract_json_object,
)
from scenes import default_catalog
from state import BranchChoiceRecord, DialogueChoice


def _scene(scene_id):
    catalog = default_catalog()
    return catalog[catalog.index_of(scene_id)]


def _path(*pairs):
    return [
        BranchChoiceRecord(branch_id=branch, choice_id=choice, score=score, consequence="")
        for branch, choice, score in pairs
    ]


# =============================================================================
# SHARED HELPERS
# =============================================================================

def test_clamp_score():
    assert clamp_score(7) == 5.0
    assert clamp_score(0) == 1.0
    assert clamp_score(-3.5) == 1.0
    assert clamp_score(3.7) == 3.7
    assert clamp_score("4") == 4.0
    assert clamp_score("excellent") == NEUTRAL_SCORE
    assert clamp_score(None) == NEUTRAL_SCORE
    assert clamp_score(True) == NEUTRAL_SCORE
    assert clamp_score(float("nan")) == NEUTRAL_SCORE


def test_extract_json_object():
    assert extract_json_object('{"score": 4}') == {"score": 4}
    assert extract_json_object('Here you go:\n```json\n{"score": 4, "x": {"y": 1}}\n```') == {
        "score": 4,
        "x": {"y": 1},
    }
    assert extract_json_object("{not json} then {\"ok\": true}") == {"ok": True}
    assert extract_json_object("no braces at all") is None
    assert extract_json_object("") is None


# =============================================================================
# LOCAL EVALUATORS
# =============================================================================

def test_listening_all_correct():
    outcome = evaluate_listening([1, 0, 2], [1, 0, 2])
    assert outcome.scores == {"listening": 5}
    assert outcome.details["percentage"] == 100
    assert outcome.feedback.startswith("Perfect")


def test_listening_two_of_three():
    outcome = evaluate_listening([1, 1, 2], [1, 0, 2])
    assert outcome.scores == {"listening": 3}
    assert outcome.details["correct_answers"] == 2
    assert outcome.details["percentage"] == 67
    assert outcome.feedback.startswith("Moderate")


def test_listening_floor_is_one():
    outcome = evaluate_listening([0, 1, 0], [1, 0, 2])
    assert outcome.scores == {"listening": 1}
    assert outcome.feedback.startswith("Focus")

    missing = evaluate_listening([], [1, 0, 2])
    assert missing.scores == {"listening": 1}


def test_listening_without_questions():
    outcome = evaluate_listening([], [])
    assert outcome.scores == {"listening": 1}
    assert outcome.details["total_questions"] == 0


def test_dialogue_average():
    choices = [
        DialogueChoice(option_id="a", quality="excellent", feedback="Great opener"),
        DialogueChoice(option_id="b", quality="good", feedback="Constructive"),
    ]
    outcome = evaluate_dialogue(choices)

    assert set(outcome.scores) == {"empathy", "problem_solving", "communication", "outcome"}
    assert all(score == 4.5 for score in outcome.scores.values())
    assert outcome.feedback.startswith("Excellent handling")
    assert outcome.details["effective_choices"] == ["Great opener", "Constructive"]
    assert outcome.details["improvement_areas"] == []


def test_dialogue_poor_choices():
    choices = [
        DialogueChoice(option_id="a", quality="poor", feedback="Dismissive"),
        DialogueChoice(option_id="b", quality="acceptable", feedback="Rushed"),
    ]
    outcome = evaluate_dialogue(choices)
    assert outcome.scores["empathy"] == 2
    assert outcome.details["improvement_areas"] == ["Dismissive", "Rushed"]


def test_dialogue_without_choices():
    outcome = evaluate_dialogue([])
    assert all(score == 1 for score in outcome.scores.values())


def test_problem_solving_optimal_path():
    outcome = evaluate_problem_solving(
        _path(("branch-1", "b1-c2", 80), ("branch-2b", "b2b-c1", 85)),
        ["b1-c2", "b2b-c1"],
    )
    assert outcome.details["total_score"] == 165
    assert outcome.details["max_possible_score"] == 170
    assert outcome.details["percentage"] == 97
    assert outcome.details["was_optimal"] is True
    assert outcome.scores == {"decision_quality": 4.9}
    assert outcome.feedback.startswith("Excellent decision-making")


def test_problem_solving_suboptimal_path():
    outcome = evaluate_problem_solving(
        _path(("branch-1", "b1-c1", 30), ("branch-2b", "b2b-c1", 85)),
        ["b1-c2", "b2b-c1"],
    )
    assert outcome.details["percentage"] == 68
    assert outcome.details["was_optimal"] is False
    assert outcome.scores == {"decision_quality": 3.4}
    assert outcome.feedback.startswith("Reasonable decisions")


def test_problem_solving_partial_optimal_prefix():
    outcome = evaluate_problem_solving(_path(("branch-1", "b1-c2", 80)), ["b1-c2", "b2b-c1"])
    assert outcome.details["was_optimal"] is True
    assert outcome.details["max_possible_score"] == 85


def test_problem_solving_score_is_clamped():
    outcome = evaluate_problem_solving(_path(("branch-1", "x", 100)), [], max_choice_score=50)
    assert outcome.scores == {"decision_quality": 5}


def test_judgment_scores():
    scenario = _scene("prof-judgment-1").judgment_scenario
    option = next(o for o in scenario.options if o.id == "j1-o1")

    outcome = evaluate_judgment(option, scenario.stakeholders)

    assert outcome.scores == {"ethical": 4.5, "practical": 3.5}
    assert outcome.details["combined_score"] == pytest.approx(4.1)
    assert outcome.details["stakeholder_impact"].startswith("This decision affects: ")
    assert outcome.feedback == option.feedback


# =============================================================================
# DELEGATED EVALUATORS
# =============================================================================

def test_voice_evaluation_success(fake_service_class):
    service = fake_service_class(replies=[json.dumps({
        "scores": {"clarity": 4, "structure": 9, "professionalism": 3.5},
        "feedback": "Clear and calm.",
        "strengths": ["Acknowledged the change"],
        "improvements": [],
        "key_points": ["Options for stakeholders"],
    })])
    prompt = _scene("comm-voice-1").voice_prompt

    outcome = asyncio.run(evaluate_voice_response(
        service, prompt, "Um, I think we should basically re-plan the sprint.", 20
    ))

    assert outcome.fallback is False
    assert outcome.scores == {"clarity": 4, "structure": 5, "professionalism": 3.5, "completeness": 3}
    assert outcome.feedback == "Clear and calm."
    assert outcome.details["metrics"]["filler_word_count"] == 2
    assert service.calls[0]["temperature"] == 0.3
    assert "re-plan the sprint" in service.calls[0]["user"]


def test_voice_evaluation_malformed_reply(fake_service_class):
    service = fake_service_class(replies=["I'd rate this a solid four out of five."])
    prompt = _scene("comm-voice-1").voice_prompt

    outcome = asyncio.run(evaluate_voice_response(service, prompt, "Hello there", 5))

    assert outcome.fallback is True
    assert set(outcome.scores.values()) == {NEUTRAL_SCORE}
    assert outcome.feedback == FALLBACK_FEEDBACK


def test_voice_evaluation_service_error(fake_service_class):
    service = fake_service_class(error=EvaluationServiceError("timed out"))
    prompt = _scene("comm-voice-1").voice_prompt

    outcome = asyncio.run(evaluate_voice_response(service, prompt, "Hello there", 5))

    assert outcome.fallback is True
    assert outcome.overall == NEUTRAL_SCORE


def test_written_word_count_penalty(fake_service_class):
    service = fake_service_class(replies=[json.dumps({
        "scores": {"tone": 5, "clarity": 1.2, "actionability": 4, "professionalism": 4},
        "feedback": "Too short.",
    })])
    challenge = _scene("comm-written-1").written_challenge

    outcome = asyncio.run(evaluate_written_response(service, challenge, "Sorry, fixing it now."))

    assert outcome.scores["tone"] == 4.5
    assert outcome.scores["clarity"] == 1.0
    assert outcome.scores["actionability"] == 4
    assert outcome.details["word_count"] == 4
    assert outcome.details["word_count_penalty"] == 0.5


def test_written_fallback_has_no_penalty(fake_service_class):
    service = fake_service_class(error=RuntimeError("boom"))
    challenge = _scene("comm-written-1").written_challenge

    outcome = asyncio.run(evaluate_written_response(service, challenge, "Too short."))

    assert outcome.fallback is True
    assert outcome.scores == {"tone": 3, "clarity": 3, "actionability": 3, "professionalism": 3}


def test_prioritization_counts_placements(fake_service_class):
    tasks = _scene("time-priority-1").prioritization_tasks
    user_order = [task.id for task in tasks]
    optimal = user_order[:3] + list(reversed(user_order[3:]))
    service = fake_service_class(replies=[json.dumps({
        "optimal_order": optimal,
        "score": 4,
        "feedback": "Good triage.",
        "critical_misses": [],
        "good_choices": ["Started with the client presentation"],
    })])

    outcome = asyncio.run(evaluate_prioritization(service, tasks, user_order))

    assert outcome.scores == {"prioritization": 4}
    assert outcome.details["correct_placements"] == 3
    assert outcome.details["optimal_order"] == optimal
    assert outcome.details["revealed_context"]


def test_prioritization_fallback(fake_service_class):
    tasks = _scene("time-priority-1").prioritization_tasks
    user_order = [task.id for task in reversed(tasks)]
    service = fake_service_class(replies=["{broken"])

    outcome = asyncio.run(evaluate_prioritization(service, tasks, user_order))

    assert outcome.fallback is True
    assert outcome.scores == {"prioritization": 3}
    assert outcome.feedback == SHORT_FALLBACK_FEEDBACK
    assert outcome.details["optimal_order"] == user_order
    assert outcome.details["correct_placements"] == 0


def test_prioritization_without_tasks_skips_service(fake_service_class):
    service = fake_service_class()
    outcome = asyncio.run(evaluate_prioritization(service, [], []))
    assert outcome.scores == {"prioritization": 1}
    assert service.calls == []


def test_count_correct_placements_checks_first_three():
    assert count_correct_placements(["a", "b", "c", "d"], ["a", "x", "c", "d"]) == 2
    assert count_correct_placements(["a"], ["a", "b"]) == 1
    assert count_correct_placements([], ["a"]) == 0


def test_quick_response_evaluation(fake_service_class):
    service = fake_service_class(replies=[json.dumps({
        "score": 4.5,
        "initiative_level": "high",
        "feedback": "Proactive.",
        "identified_opportunities": ["Automate the report"],
        "missed_opportunities": [],
    })])

    outcome = asyncio.run(evaluate_quick_response(service, "The build is slow.", "I'd profile it first.", 12))

    assert outcome.scores == {"initiative": 4.5}
    assert outcome.details["initiative_level"] == "high"
    assert outcome.details["seconds_spent"] == 12
    assert service.calls[0]["temperature"] == 0.4
    assert "12 seconds" in service.calls[0]["user"]


def test_quick_response_unknown_level_defaults_to_medium(fake_service_class):
    service = fake_service_class(replies=['{"score": 2, "initiative_level": "extreme"}'])
    outcome = asyncio.run(evaluate_quick_response(service, "Scenario", "Answer text", 3))
    assert outcome.details["initiative_level"] == "medium"
