"""
Prompts for the delegated challenge evaluators.

Each evaluator sends a fixed system prompt describing the rubric and the exact
JSON shape to return, plus a user message built from the scene payload and the
subject's raw response.
"""
from typing import List

from capture.metrics import SpeechMetrics
from scenes import PrioritizationTask, VoicePrompt, WrittenChallenge


VOICE_ANALYSIS_SYSTEM = """You are an expert communication coach analyzing spoken responses to workplace scenarios.

Evaluate the transcribed speech response based on these criteria (score 1-5):
1. CLARITY: How clear and well-articulated is the response? Consider filler words, coherence, and ease of understanding.
2. STRUCTURE: Is there a logical flow? Beginning, middle, end? Are ideas organized?
3. PROFESSIONALISM: Is the tone appropriate for a workplace? Solution-focused rather than panicked?
4. COMPLETENESS: Does it address all aspects of the prompt?

IMPORTANT: Return ONLY valid JSON in this exact format:
{
  "scores": {
    "clarity": <1-5>,
    "structure": <1-5>,
    "professionalism": <1-5>,
    "completeness": <1-5>
  },
  "feedback": "<2-3 sentence overall assessment>",
  "strengths": ["<strength 1>", "<strength 2>"],
  "improvements": ["<improvement 1>", "<improvement 2>"],
  "key_points": ["<key point they made 1>", "<key point 2>"]
}"""


WRITTEN_ANALYSIS_SYSTEM = """You are an expert business writing coach analyzing professional communications.

Evaluate the written response based on these criteria (score 1-5):
1. TONE: Is it appropriate for the context and recipient?
2. CLARITY: Is the message clear and unambiguous?
3. ACTIONABILITY: Are there specific, clear next steps?
4. PROFESSIONALISM: Is it appropriate for workplace communication?

IMPORTANT: Return ONLY valid JSON in this exact format:
{
  "scores": {
    "tone": <1-5>,
    "clarity": <1-5>,
    "actionability": <1-5>,
    "professionalism": <1-5>
  },
  "feedback": "<2-3 sentence overall assessment>",
  "strengths": ["<strength 1>", "<strength 2>"],
  "improvements": ["<improvement 1>", "<improvement 2>"],
  "grammar_issues": ["<issue 1 if any>"],
  "suggested_revision": "<optional: improved version of key section>"
}"""


PRIORITIZATION_ANALYSIS_SYSTEM = """You are an expert time management coach analyzing task prioritization.

Consider these factors when evaluating:
1. Urgent + Important tasks should come first
2. Dependencies between tasks
3. Deadlines (hard vs soft)
4. Impact on others (blocking colleagues)
5. Business impact

IMPORTANT: Return ONLY valid JSON in this exact format:
{
  "optimal_order": ["task-id-1", "task-id-2", ...],
  "score": <1-5>,
  "feedback": "<2-3 sentence assessment>",
  "critical_misses": ["<any critical errors>"],
  "good_choices": ["<what they did well>"]
}"""


QUICK_RESPONSE_ANALYSIS_SYSTEM = """You are evaluating someone's initiative and proactiveness based on their response to an open-ended workplace scenario.

Look for:
1. Did they identify opportunities beyond the minimum?
2. Did they show ownership mentality?
3. Did they think about impact on others/the business?
4. Did they propose actionable improvements?

IMPORTANT: Return ONLY valid JSON in this exact format:
{
  "score": <1-5>,
  "initiative_level": "high" | "medium" | "low",
  "feedback": "<2-3 sentence assessment>",
  "identified_opportunities": ["<opportunity they identified>"],
  "missed_opportunities": ["<opportunity they could have mentioned>"]
}"""


def build_voice_message(prompt: VoicePrompt, transcript: str, metrics: SpeechMetrics) -> str:
    criteria = prompt.evaluation_criteria
    fillers = ", ".join(metrics.filler_words) or "none"
    return f"""SCENARIO: {prompt.scenario}

PROMPT: {prompt.prompt}

EVALUATION CRITERIA:
- Clarity: {criteria.clarity}
- Structure: {criteria.structure}
- Professionalism: {criteria.professionalism}
- Completeness: {criteria.completeness}

TRANSCRIBED RESPONSE:
"{transcript}"

SPEECH METRICS:
- Word count: {metrics.word_count}
- Speaking pace: {round(metrics.speaking_pace)} words/minute
- Filler words detected: {metrics.filler_word_count} ({fillers})
- Sentence count: {metrics.sentence_count}

Analyze this response and provide scores with feedback."""


def build_written_message(challenge: WrittenChallenge, response: str, word_count: int) -> str:
    constraint_lines = []
    constraints = challenge.constraints
    if constraints:
        if constraints.max_words:
            constraint_lines.append(f"- Maximum words: {constraints.max_words}")
        if constraints.min_words:
            constraint_lines.append(f"- Minimum words: {constraints.min_words}")
        if constraints.must_include:
            constraint_lines.append(f"- Must include: {', '.join(constraints.must_include)}")
        if constraints.must_avoid:
            constraint_lines.append(f"- Must avoid: {', '.join(constraints.must_avoid)}")
    constraints_text = "\n".join(constraint_lines) or "- None"

    criteria = challenge.evaluation_criteria
    return f"""CHALLENGE TYPE: {challenge.kind}

SCENARIO: {challenge.scenario}

CONTEXT: {challenge.context}

RECIPIENT: {challenge.recipient}

CONSTRAINTS:
{constraints_text}

EVALUATION CRITERIA:
- Tone: {criteria.tone}
- Clarity: {criteria.clarity}
- Actionability: {criteria.actionability}
- Professionalism: {criteria.professionalism}

USER'S RESPONSE ({word_count} words):
"{response}"

Analyze this response and provide scores with feedback."""


def build_prioritization_message(tasks: List[PrioritizationTask], user_order: List[str]) -> str:
    task_lines = []
    for task in tasks:
        line = (
            f'- {task.id}: "{task.title}" | Deadline: {task.deadline} '
            f"| Urgency: {task.urgency} | Importance: {task.importance}"
        )
        if task.dependencies:
            line += f" | Dependencies: {', '.join(task.dependencies)}"
        task_lines.append(line)
    order_lines = [f"{i + 1}. {task_id}" for i, task_id in enumerate(user_order)]

    return f"""TASKS TO PRIORITIZE:
{chr(10).join(task_lines)}

USER'S PRIORITIZATION ORDER:
{chr(10).join(order_lines)}

Analyze this prioritization and determine optimal order."""


def build_quick_response_message(scenario: str, response: str, seconds_spent: int) -> str:
    return f"""SCENARIO: {scenario}

USER'S RESPONSE (completed in {seconds_spent} seconds):
"{response}"

Evaluate the level of initiative and proactiveness demonstrated."""
