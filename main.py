"""
Main entry point for the Interactive Skill Assessment engine.
Provides a CLI interface for running an assessment in the terminal.

Typed lines stand in for speech: while recording, every line you enter is
treated as a final speech-recognition result.
"""
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv(Path(__file__).parent / ".env")

from capture import ConsoleSynthesizer, PushRecognizer
from controller import AssessmentController
from errors import ActionDisabledError, AssessmentError
from persistence import JsonFileResultSink
from scenes import (
    SceneType,
    default_catalog,
    get_catalog_summary,
    load_catalog_from_json,
    save_catalog_to_json,
)
from skill_profile import profile_summary_lines, total_evidence


def print_separator():
    print("=" * 60)


def print_scene(controller: AssessmentController):
    """Print the current scene and what the subject can do in it."""
    scene = controller.scene
    print_separator()
    print(f"[{controller.index + 1}/{len(controller.catalog)}] {scene.title}")
    if scene.subtitle:
        print(scene.subtitle)
    print_separator()
    print(scene.content)
    if scene.time_limit:
        print(f"\n⏱️  Time limit: {scene.time_limit}s")

    if scene.voice_prompt:
        print(f"\nSCENARIO: {scene.voice_prompt.scenario}")
        print(f"PROMPT: {scene.voice_prompt.prompt}")
        print("\nType 'rec' to start recording, then speak (type) and 'stop' when done.")
    elif scene.written_challenge:
        challenge = scene.written_challenge
        print(f"\nTO: {challenge.recipient}")
        print(f"SCENARIO: {challenge.scenario}")
        print(f"CONTEXT: {challenge.context}")
        print(f"\nWrite at least {controller.written_min_words()} words. Type 'submit' when done.")
    elif scene.type == SceneType.PRIORITIZATION:
        print_task_order(controller)
        print("\nReorder with 'move FROM TO' (1-based), then 'submit'.")
    elif scene.role_play:
        print(f"\nYou are: {scene.role_play.subject_role}")
        print(f"Objective: {scene.role_play.objective}")
        print_dialogue_turn(controller)
    elif scene.problem_solving:
        print(f"\n{scene.problem_solving.initial_situation}")
        print_branch(controller)
    elif scene.type == SceneType.ACTIVE_LISTENING:
        print("\nType 'play' to hear the briefing, then 'answer Q O' for each question and 'submit'.")
    elif scene.judgment_scenario:
        print(f"\n{scene.judgment_scenario.situation}\n")
        for i, option in enumerate(scene.judgment_scenario.options, 1):
            print(f"  {i}. {option.action}")
    elif scene.quick_prompt:
        print(f"\n{scene.quick_prompt}")
        print("Type your answer, then 'submit'.")
    print()


def print_task_order(controller: AssessmentController):
    tasks = {t.id: t for t in controller.scene.prioritization_tasks}
    for i, task_id in enumerate(controller.session["task_order"], 1):
        task = tasks[task_id]
        print(f"  {i}. {task.title} | {task.deadline} | urgency: {task.urgency} | importance: {task.importance}")


def print_dialogue_turn(controller: AssessmentController):
    turn = controller.snapshot()["interaction"].get("current_turn")
    if turn is None:
        return
    if turn["counterpart_message"]:
        print(f"\n{controller.scene.role_play.counterpart_role}: {turn['counterpart_message']}")
    for i, option in enumerate(turn["options"], 1):
        print(f"  {i}. {option['text']}")


def print_branch(controller: AssessmentController):
    branch = controller.snapshot()["interaction"].get("current_branch")
    if branch is None:
        return
    print(f"\n{branch['situation']}")
    for i, choice in enumerate(branch["choices"], 1):
        print(f"  {i}. {choice['text']}")


def print_result(result):
    if result is None:
        return
    print(f"\n📊 {result.feedback}")
    for criterion, score in result.scores.items():
        print(f"   {criterion}: {score:.1f}/5")
    print()


def print_profile(controller: AssessmentController):
    print("\nSkill Profile:")
    print("-" * 40)
    for line in profile_summary_lines(controller.profile, controller.catalog.dimensions):
        print(f"  {line}")
    print(f"\nEvidence: {total_evidence(controller.profile)} challenge results\n")


def _pick(items, raw: str):
    """Resolve a 1-based number typed by the subject to an item."""
    idx = int(raw) - 1
    if not 0 <= idx < len(items):
        raise ValueError(raw)
    return items[idx]


async def handle_line(controller: AssessmentController, line: str) -> bool:
    """Apply one typed line to the current scene. Returns False to quit."""
    scene = controller.scene
    session = controller.session
    command, _, rest = line.partition(" ")
    command = command.lower()

    if command in ("quit", "exit", "q"):
        return False
    if command in ("next", "n"):
        controller.advance()
        print_scene(controller)
        return True
    if command in ("back", "b"):
        controller.retreat()
        print_scene(controller)
        return True
    if command == "profile":
        print_profile(controller)
        return True
    if command in ("mute", "unmute"):
        controller.set_muted(command == "mute")
        return True
    if command == "replay":
        controller.replay_narration()
        return True

    if scene.type == SceneType.VOICE_RESPONSE:
        if command == "rec":
            controller.start_recording()
            print("🎙️  Recording...")
        elif command == "stop":
            print("Analyzing...")
            result = await controller.stop_recording()
            if result is None:
                print("No speech captured. Try recording again.")
            print_result(result)
        elif command == "mic":
            granted = await controller.request_microphone()
            print("Microphone ready." if granted else session["capture_error"])
        elif command == "abandon":
            controller.abandon_challenge()
            print("Challenge skipped. No result recorded.")
        elif session["is_recording"]:
            controller.recognizer.push_result(line, is_final=True)
        else:
            print("Type 'rec' to start recording.")

    elif scene.type == SceneType.WRITTEN_CHALLENGE:
        if command == "submit":
            print("Analyzing...")
            print_result(await controller.submit_written_response())
        else:
            controller.set_written_response(f"{session['written_response']}\n{line}".strip())

    elif scene.type == SceneType.PRIORITIZATION:
        if command == "move":
            src, dst = rest.split()
            controller.move_task(int(src) - 1, int(dst) - 1)
            print_task_order(controller)
        elif command == "submit":
            print("Analyzing...")
            result = await controller.submit_prioritization()
            print_result(result)
            for task_id, context in session["prioritization_analysis"]["details"].get("revealed_context", {}).items():
                print(f"  💡 {task_id}: {context}")

    elif scene.type == SceneType.ROLE_PLAY:
        turn = controller.snapshot()["interaction"]["current_turn"]
        if turn is not None:
            option = _pick(turn["options"], command)
            choice = controller.choose_dialogue_option(option["id"])
            print(f"\n{choice['feedback']}")
            print_dialogue_turn(controller)

    elif scene.type == SceneType.PROBLEM_SOLVING:
        branch = controller.snapshot()["interaction"]["current_branch"]
        if branch is not None:
            choice = _pick(branch["choices"], command)
            record = controller.choose_branch(choice["id"])
            print(f"\n{record['consequence']}")
            print_branch(controller)

    elif scene.type == SceneType.ACTIVE_LISTENING:
        if command == "play":
            controller.play_listening_audio()
            for i, question in enumerate(scene.comprehension_questions, 1):
                print(f"\nQ{i}. {question.question}")
                for j, option in enumerate(question.options, 1):
                    print(f"    {j}. {option}")
        elif command == "answer":
            q, o = rest.split()
            controller.select_listening_answer(int(q) - 1, int(o) - 1)
        elif command == "submit":
            print_result(controller.submit_listening_answers())

    elif scene.type == SceneType.JUDGMENT:
        option = _pick(scene.judgment_scenario.options, command)
        print_result(controller.choose_judgment(option.id))

    elif scene.type == SceneType.QUICK_RESPONSE:
        if command == "submit":
            print("Analyzing...")
            print_result(await controller.submit_quick_response())
        else:
            controller.set_quick_response(f"{session['quick_response']} {line}".strip())

    return True


async def run_assessment(catalog_path: str = None, muted: bool = False):
    """Run an interactive assessment session."""
    catalog = load_catalog_from_json(catalog_path) if catalog_path else default_catalog()
    controller = AssessmentController(
        catalog=catalog,
        recognizer=PushRecognizer(),
        synthesizer=ConsoleSynthesizer(),
        result_sink=JsonFileResultSink(),
    )
    controller.set_muted(muted)
    controller.on_completion(lambda event: print_profile(controller))

    print_separator()
    print("INTERACTIVE SKILL ASSESSMENT")
    print_separator()

    await controller.start()
    print_scene(controller)

    while True:
        try:
            line = (await asyncio.to_thread(input, "> ")).strip()
        except (KeyboardInterrupt, EOFError):
            print("\n\nEnding assessment...")
            break

        if not line:
            continue
        try:
            if not await handle_line(controller, line):
                print("\nEnding assessment early...")
                break
        except ActionDisabledError as e:
            print(f"⚠️  {e}")
        except (AssessmentError, ValueError) as e:
            print(f"Invalid input: {e}")

        if controller.completed and controller.index == controller.catalog.last_index:
            break

    controller.close()
    await controller.drain()


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Interactive Skill Assessment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands during the assessment:
  next, n / back, b  - Move between scenes
  profile            - Show the current skill profile
  mute, unmute       - Toggle narration
  replay             - Replay the scene narration
  quit, exit, q      - End the assessment early

Examples:
  python main.py                          # Run the built-in assessment
  python main.py --catalog my_scenes.json # Run a custom scene catalog
  python main.py --export-catalog out.json
        """,
    )
    parser.add_argument("--catalog", help="Path to a scene catalog JSON file")
    parser.add_argument("--muted", action="store_true", help="Start with narration muted")
    parser.add_argument("--list", action="store_true", help="List the scenes and exit")
    parser.add_argument("--export-catalog", metavar="PATH", help="Write the built-in catalog to JSON and exit")

    args = parser.parse_args()

    if args.export_catalog:
        save_catalog_to_json(default_catalog(), args.export_catalog)
        print(f"Catalog written to {args.export_catalog}")
        return

    if args.list:
        catalog = load_catalog_from_json(args.catalog) if args.catalog else default_catalog()
        print("\nScenes:")
        for row in get_catalog_summary(catalog):
            print(f"  - {row['id']} ({row['type']}): {row['title']}")
        return

    try:
        asyncio.run(run_assessment(args.catalog, muted=args.muted))
    except KeyboardInterrupt:
        print("\nGoodbye!")
        sys.exit(0)


if __name__ == "__main__":
    main()
