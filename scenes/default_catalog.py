"""
Default Scene Catalog

The built-in assessment: a welcome, one scene per challenge type, a review and
a completion scene, plus the eight skill dimensions results are grouped under.
Both are populated at module load time and never mutated.
"""
from typing import List

from .scene_schema import (
    BranchChoice,
    ComprehensionQuestion,
    DialogueOption,
    DialogueTurn,
    DimensionIcon,
    JudgmentOption,
    JudgmentScenario,
    PrioritizationTask,
    ProblemSolvingCriteria,
    ProblemSolvingScenario,
    RolePlayCriteria,
    RolePlayScenario,
    Scene,
    ScenarioBranch,
    SceneType,
    SkillDimension,
    VoiceCriteria,
    VoicePrompt,
    WrittenChallenge,
    WrittenConstraints,
    WrittenCriteria,
)


# =============================================================================
# SKILL DIMENSIONS
# =============================================================================

SKILL_DIMENSIONS: List[SkillDimension] = [
    SkillDimension(
        id="communication",
        title="Communication",
        description="Verbal and written clarity, active listening, professional tone",
        test_methods=[SceneType.VOICE_RESPONSE, SceneType.WRITTEN_CHALLENGE, SceneType.ACTIVE_LISTENING],
        icon=DimensionIcon.MESSAGE_CIRCLE,
        color="from-blue-500 to-blue-600",
    ),
    SkillDimension(
        id="problem_solving",
        title="Problem Solving",
        description="Analysis, creativity, structured thinking, practical solutions",
        test_methods=[SceneType.PROBLEM_SOLVING, SceneType.QUICK_RESPONSE],
        icon=DimensionIcon.LIGHTBULB,
        color="from-amber-500 to-orange-600",
    ),
    SkillDimension(
        id="adaptability",
        title="Adaptability",
        description="Flexibility, handling change, pivoting under pressure",
        test_methods=[SceneType.PROBLEM_SOLVING, SceneType.ROLE_PLAY],
        icon=DimensionIcon.REFRESH,
        color="from-emerald-500 to-teal-600",
    ),
    SkillDimension(
        id="collaboration",
        title="Collaboration",
        description="Teamwork, conflict resolution, building consensus",
        test_methods=[SceneType.ROLE_PLAY, SceneType.WRITTEN_CHALLENGE],
        icon=DimensionIcon.USERS,
        color="from-purple-500 to-violet-600",
    ),
    SkillDimension(
        id="initiative",
        title="Initiative",
        description="Proactiveness, identifying opportunities, taking ownership",
        test_methods=[SceneType.PROBLEM_SOLVING, SceneType.JUDGMENT],
        icon=DimensionIcon.ROCKET,
        color="from-pink-500 to-rose-600",
    ),
    SkillDimension(
        id="time_management",
        title="Time Management",
        description="Prioritization, deadline management, efficient execution",
        test_methods=[SceneType.PRIORITIZATION, SceneType.QUICK_RESPONSE],
        icon=DimensionIcon.CLOCK,
        color="from-cyan-500 to-sky-600",
    ),
    SkillDimension(
        id="professionalism",
        title="Professionalism",
        description="Ethics, judgment, workplace conduct, accountability",
        test_methods=[SceneType.JUDGMENT, SceneType.WRITTEN_CHALLENGE],
        icon=DimensionIcon.BRIEFCASE,
        color="from-slate-500 to-gray-600",
    ),
    SkillDimension(
        id="learning_agility",
        title="Learning Agility",
        description="Quick comprehension, applying new concepts, curiosity",
        test_methods=[SceneType.ACTIVE_LISTENING, SceneType.QUICK_RESPONSE],
        icon=DimensionIcon.GRADUATION_CAP,
        color="from-indigo-500 to-purple-600",
    ),
]


# =============================================================================
# SCENES
# =============================================================================

WELCOME_TEXT = """Welcome to the Interactive Skill Assessment.

Unlike traditional self-assessments where you rate yourself, this assessment will actually test your skills through real challenges:

• **Voice Responses** - Speak your answers and receive AI analysis
• **Written Challenges** - Compose professional communications
• **Prioritization Tests** - Organize tasks under time pressure
• **Role-Play Dialogues** - Navigate difficult conversations
• **Problem-Solving Scenarios** - Make decisions with consequences

Your responses will be analyzed to provide objective, evidence-based scores that mentors can validate.

Ready to demonstrate your actual abilities?"""

LISTENING_SCRIPT = """Good morning team. I wanted to brief you on the Henderson account situation.

Last Tuesday, Sarah from their procurement team called about the Q3 deliverables. They're concerned about three specific items: first, the API integration timeline - they need it moved from October 15th to September 28th. Second, the user training materials need to be available in Spanish, not just English. Third, they want to add 50 more user licenses, bringing the total from 200 to 250.

The budget impact is significant - approximately $34,000 additional for the accelerated timeline, plus $8,500 for translations. The license upgrade is already covered under their enterprise agreement.

Sarah needs our response by end of day Friday. She mentioned their CFO, Michael Torres, is reviewing all vendor contracts next Monday.

Any questions?"""

COMPLETION_TEXT = """Congratulations!

You've completed the Interactive Skill Assessment. Unlike self-reported ratings, your scores are based on actual demonstrated performance:

• Your voice responses were analyzed for clarity and professionalism
• Your written communications were evaluated for effectiveness
• Your prioritization choices were compared to optimal patterns
• Your dialogue choices were scored for empathy and resolution
• Your problem-solving path was evaluated for decision quality

This evidence-based assessment provides mentors with concrete data to validate and guide your development."""


def _build_default_scenes() -> List[Scene]:
    """Build the default assessment, one scene per challenge type."""

    scenes = []

    scenes.append(Scene(
        id="welcome",
        type=SceneType.WELCOME,
        title="Interactive Skill Assessment",
        dimension="all",
        content=WELCOME_TEXT,
        character="Assessment Guide",
    ))

    # =========================================================================
    # COMMUNICATION
    # =========================================================================

    scenes.append(Scene(
        id="comm-voice-1",
        type=SceneType.VOICE_RESPONSE,
        title="Communication Challenge",
        subtitle="Verbal Response Test",
        dimension="communication",
        content=(
            "You will be given a workplace scenario. Speak your response clearly and professionally. "
            "Your response will be analyzed for clarity, structure, and tone."
        ),
        voice_prompt=VoicePrompt(
            id="voice-1",
            scenario=(
                "Your manager just informed you that the project deadline has been moved up by two weeks. "
                "The team is already stretched thin. She asks you to present options to the stakeholders "
                "in an emergency meeting in 30 minutes."
            ),
            prompt="What do you say to your manager right now, and how would you structure your presentation to stakeholders?",
            duration=90,
            evaluation_criteria=VoiceCriteria(
                clarity="Clear articulation of immediate response and presentation structure",
                structure="Logical flow: acknowledgment, clarification questions, proposed approach",
                professionalism="Calm, solution-focused tone without panic or blame",
                completeness="Addresses both immediate response and presentation planning",
            ),
        ),
        time_limit=120,
    ))

    scenes.append(Scene(
        id="comm-written-1",
        type=SceneType.WRITTEN_CHALLENGE,
        title="Written Communication",
        subtitle="Professional Email Composition",
        dimension="communication",
        content=(
            "Compose a professional email based on the scenario below. "
            "Your writing will be analyzed for tone, clarity, and effectiveness."
        ),
        written_challenge=WrittenChallenge(
            id="written-1",
            kind="email",
            scenario=(
                "A colleague has missed an important deadline for the third time this quarter. "
                "This has impacted your ability to complete your own deliverables. You need to address "
                "this directly but maintain a positive working relationship."
            ),
            context="You and this colleague will need to continue working closely together on future projects.",
            recipient="Colleague (same level, different team)",
            constraints=WrittenConstraints(
                max_words=150,
                min_words=50,
                must_include=["specific impact", "path forward"],
                must_avoid=["accusations", "threats", "passive-aggressive language"],
            ),
            evaluation_criteria=WrittenCriteria(
                tone="Professional yet direct, maintains relationship",
                clarity="Specific about the issue and its impact",
                actionability="Clear next steps or request",
                professionalism="Appropriate for workplace communication",
            ),
        ),
        time_limit=300,
    ))

    scenes.append(Scene(
        id="comm-listening-1",
        type=SceneType.ACTIVE_LISTENING,
        title="Active Listening Test",
        subtitle="Comprehension Challenge",
        dimension="communication",
        content=(
            "Listen carefully to the following workplace scenario. "
            "You will be asked questions about the details afterward."
        ),
        audio_script=LISTENING_SCRIPT,
        comprehension_questions=[
            ComprehensionQuestion(
                question="What is the new requested deadline for the API integration?",
                options=["October 15th", "September 28th", "End of Friday", "Next Monday"],
                correct_index=1,
            ),
            ComprehensionQuestion(
                question="What is the total cost impact mentioned?",
                options=["$34,000", "$8,500", "$42,500", "$50,000"],
                correct_index=2,
            ),
            ComprehensionQuestion(
                question="How many total user licenses do they want?",
                options=["50", "200", "250", "300"],
                correct_index=2,
            ),
            ComprehensionQuestion(
                question="Who is reviewing vendor contracts on Monday?",
                options=["Sarah", "The procurement team", "Michael Torres", "The Henderson team"],
                correct_index=2,
            ),
        ],
        time_limit=60,
    ))

    # =========================================================================
    # PROBLEM SOLVING
    # =========================================================================

    scenes.append(Scene(
        id="problem-scenario-1",
        type=SceneType.PROBLEM_SOLVING,
        title="Problem Solving Challenge",
        subtitle="Critical Decision Making",
        dimension="problem_solving",
        content="Navigate this workplace crisis. Your decisions will have consequences.",
        problem_solving=ProblemSolvingScenario(
            id="problem-1",
            title="The Server Crisis",
            initial_situation=(
                "It's 4:45 PM on Friday. You're the on-call engineer. The main production server just went "
                "down. Customer complaints are flooding in. Your senior engineer is on a flight and "
                "unreachable for 3 hours. IT says it's \"not their issue.\" Your manager is in an executive "
                "meeting.\n\nWhat do you do first?"
            ),
            branches=[
                ScenarioBranch(
                    id="branch-1",
                    situation="Initial Response",
                    choices=[
                        BranchChoice(
                            id="b1-c1",
                            text="Immediately try to restart the server yourself",
                            consequence=(
                                "The server restarts but crashes again after 5 minutes. You've now lost "
                                "the error logs that could help diagnose the issue."
                            ),
                            score=30,
                            leads_to="branch-2a",
                        ),
                        BranchChoice(
                            id="b1-c2",
                            text="Check monitoring dashboards and recent deployment logs first",
                            consequence=(
                                "You discover a memory leak was introduced in a deployment 2 hours ago. "
                                "You now have actionable information."
                            ),
                            score=80,
                            leads_to="branch-2b",
                        ),
                        BranchChoice(
                            id="b1-c3",
                            text="Send an email to the team asking what to do",
                            consequence="No one responds immediately. Customers are still affected. 15 minutes pass.",
                            score=20,
                            leads_to="branch-2c",
                        ),
                        BranchChoice(
                            id="b1-c4",
                            text="Interrupt the executive meeting to get your manager",
                            consequence=(
                                "Your manager is annoyed but comes to help. However, they also don't know "
                                "the recent deployment history."
                            ),
                            score=50,
                            leads_to="branch-2d",
                        ),
                    ],
                ),
                ScenarioBranch(
                    id="branch-2b",
                    situation="You found the memory leak. The deployment was made by a contractor who left last week. What next?",
                    choices=[
                        BranchChoice(
                            id="b2b-c1",
                            text="Roll back to the previous stable version immediately",
                            consequence="Service is restored in 10 minutes. Some data from the last 2 hours may be inconsistent.",
                            score=85,
                        ),
                        BranchChoice(
                            id="b2b-c2",
                            text="Try to hot-fix the memory leak in production",
                            consequence="Risky. You make a mistake and the server goes down completely. Total outage time doubles.",
                            score=25,
                        ),
                        BranchChoice(
                            id="b2b-c3",
                            text="Document everything and wait for the senior engineer",
                            consequence="Thorough but slow. Customers experience 3+ hours of downtime.",
                            score=40,
                        ),
                    ],
                ),
            ],
            optimal_path=["b1-c2", "b2b-c1"],
            evaluation_criteria=ProblemSolvingCriteria(
                analysis="Gathered information before acting",
                creativity="Considered multiple approaches",
                practicality="Chose actionable solutions",
                risk_awareness="Balanced speed with caution",
            ),
            max_choice_score=85,
        ),
    ))

    # =========================================================================
    # TIME MANAGEMENT
    # =========================================================================

    scenes.append(Scene(
        id="time-priority-1",
        type=SceneType.PRIORITIZATION,
        title="Prioritization Challenge",
        subtitle="Task Management Under Pressure",
        dimension="time_management",
        content=(
            "It's Monday morning. You have these 8 tasks. Rank them in the order you would complete them. "
            "You have 90 seconds."
        ),
        prioritization_tasks=[
            PrioritizationTask(
                id="task-1", title="Client presentation",
                description="Final review of slides for major client pitch",
                deadline="Today 2pm", urgency="critical", importance="critical", estimated_time="1 hour",
                hidden_context="This is a $500K deal. CEO will be present.",
            ),
            PrioritizationTask(
                id="task-2", title="Team meeting prep",
                description="Prepare agenda for weekly team standup",
                deadline="Today 10am", urgency="high", importance="medium", estimated_time="15 min",
            ),
            PrioritizationTask(
                id="task-3", title="Expense report",
                description="Submit monthly expense report",
                deadline="Today (soft)", urgency="low", importance="low", estimated_time="30 min",
                hidden_context="Finance processes these weekly anyway.",
            ),
            PrioritizationTask(
                id="task-4", title="Email from VP",
                description="VP asked for your thoughts on new initiative",
                deadline="No specific deadline", urgency="medium", importance="high", estimated_time="20 min",
                hidden_context="VP is deciding promotions this quarter.",
            ),
            PrioritizationTask(
                id="task-5", title="Bug fix",
                description="Fix non-critical UI bug reported last week",
                deadline="This week", urgency="low", importance="medium", estimated_time="2 hours",
            ),
            PrioritizationTask(
                id="task-6", title="New hire onboarding",
                description="Meet with new team member starting today",
                deadline="Today 9am", urgency="high", importance="high", estimated_time="30 min",
                dependencies=["Team meeting happens at 10am"],
            ),
            PrioritizationTask(
                id="task-7", title="Code review",
                description="Review colleague's pull request",
                deadline="Today (blocking their work)", urgency="high", importance="medium",
                estimated_time="45 min",
                hidden_context="Colleague is waiting and can't proceed without this.",
            ),
            PrioritizationTask(
                id="task-8", title="Training video",
                description="Complete mandatory compliance training",
                deadline="End of month", urgency="low", importance="medium", estimated_time="1 hour",
            ),
        ],
        time_limit=90,
    ))

    # =========================================================================
    # COLLABORATION
    # =========================================================================

    scenes.append(Scene(
        id="collab-roleplay-1",
        type=SceneType.ROLE_PLAY,
        title="Collaboration Challenge",
        subtitle="Difficult Conversation Simulation",
        dimension="collaboration",
        content=(
            "Navigate this conversation with a frustrated teammate. Your goal is to resolve the conflict "
            "while maintaining the relationship."
        ),
        role_play=RolePlayScenario(
            id="roleplay-1",
            title="The Credit Dispute",
            context=(
                "You and Alex worked together on a project. In the team meeting, you presented the results "
                "and received praise from leadership. Alex feels they did most of the work and didn't get "
                "proper credit."
            ),
            counterpart_role="Alex - Your teammate who feels overlooked",
            subject_role="You - Trying to address the situation",
            objective=(
                "Acknowledge Alex's contributions, repair the relationship, and establish better "
                "collaboration practices going forward"
            ),
            turns=[
                DialogueTurn(
                    speaker="counterpart",
                    message=(
                        "Hey, do you have a minute? I need to talk to you about that presentation yesterday. "
                        "I'm honestly pretty frustrated."
                    ),
                    emotion="frustrated",
                ),
                DialogueTurn(
                    speaker="subject",
                    options=[
                        DialogueOption(
                            id="r1-o1", text="\"What's wrong? I thought it went great!\"", quality="poor",
                            feedback="This dismisses Alex's feelings and shows you're not aware of the issue.",
                            next_turn_id="turn-2a",
                        ),
                        DialogueOption(
                            id="r1-o2", text="\"I can see something's bothering you. What's on your mind?\"",
                            quality="excellent",
                            feedback="Great opening - shows empathy and invites them to share.",
                            next_turn_id="turn-2b",
                        ),
                        DialogueOption(
                            id="r1-o3",
                            text="\"If this is about the presentation, I had to present because you weren't ready.\"",
                            quality="poor",
                            feedback="Defensive and accusatory - will escalate the conflict.",
                            next_turn_id="turn-2c",
                        ),
                        DialogueOption(
                            id="r1-o4", text="\"Sure, let's talk. I have 5 minutes before my next meeting.\"",
                            quality="acceptable",
                            feedback="Willing to talk but setting a rushed boundary may not allow for resolution.",
                            next_turn_id="turn-2d",
                        ),
                    ],
                ),
                DialogueTurn(
                    speaker="counterpart",
                    message=(
                        "I did 70% of the analysis on that project. But when you presented, it sounded like "
                        "it was all your work. Leadership thinks you did everything."
                    ),
                    emotion="frustrated",
                ),
                DialogueTurn(
                    speaker="subject",
                    options=[
                        DialogueOption(
                            id="r2-o1",
                            text=(
                                "\"You're right, I should have been clearer about your contributions. "
                                "I'm sorry - that wasn't intentional.\""
                            ),
                            quality="excellent",
                            feedback="Acknowledges the issue, takes responsibility, and apologizes sincerely.",
                            next_turn_id="turn-3a",
                        ),
                        DialogueOption(
                            id="r2-o2", text="\"I mentioned 'we' several times. You're overreacting.\"",
                            quality="poor",
                            feedback="Minimizing their valid concern will damage the relationship further.",
                            next_turn_id="turn-3b",
                        ),
                        DialogueOption(
                            id="r2-o3", text="\"Let's talk to our manager together and clarify your role.\"",
                            quality="good",
                            feedback="Offers a solution, but doesn't first acknowledge the emotional impact.",
                            next_turn_id="turn-3c",
                        ),
                    ],
                ),
            ],
            evaluation_criteria=RolePlayCriteria(
                empathy="Acknowledged feelings before jumping to solutions",
                problem_solving="Offered concrete ways to address the issue",
                communication="Used \"I\" statements, avoided blame",
                outcome="Maintained relationship while addressing the problem",
            ),
        ),
    ))

    # =========================================================================
    # PROFESSIONALISM
    # =========================================================================

    scenes.append(Scene(
        id="prof-judgment-1",
        type=SceneType.JUDGMENT,
        title="Professional Judgment",
        subtitle="Ethical Decision Making",
        dimension="professionalism",
        content="Evaluate this situation and choose the most appropriate course of action.",
        judgment_scenario=JudgmentScenario(
            id="judgment-1",
            situation=(
                "You discover that a popular colleague has been padding their expense reports with personal "
                "items - roughly $200-300 per month. They're a top performer and well-liked by leadership. "
                "You're the only one who noticed because you accidentally saw their receipts while looking "
                "for a shared document.\n\nWhat do you do?"
            ),
            stakeholders=[
                "The colleague",
                "The company",
                "Your relationship with the colleague",
                "Your own integrity",
                "The team culture",
            ],
            options=[
                JudgmentOption(
                    id="j1-o1", action="Report it directly to HR or management",
                    reasoning="Policy violation should be reported through proper channels regardless of who commits it.",
                    ethical_score=90, practical_score=70,
                    feedback=(
                        "Ethically sound and follows company policy. May affect your relationship with the "
                        "colleague but maintains your integrity."
                    ),
                ),
                JudgmentOption(
                    id="j1-o2", action="Talk to the colleague privately first",
                    reasoning="Give them a chance to correct the behavior before escalating.",
                    ethical_score=75, practical_score=80,
                    feedback=(
                        "Shows empathy and gives them a chance, but you're now involved in covering up if "
                        "they don't stop."
                    ),
                ),
                JudgmentOption(
                    id="j1-o3", action="Ignore it - it's not your business",
                    reasoning="Not your job to police colleagues. Focus on your own work.",
                    ethical_score=30, practical_score=60,
                    feedback="Avoids conflict but makes you complicit in ongoing fraud. Could backfire if discovered later.",
                ),
                JudgmentOption(
                    id="j1-o4", action="Anonymously tip off the finance team",
                    reasoning="Let the right people handle it without directly involving yourself.",
                    ethical_score=70, practical_score=75,
                    feedback="Addresses the issue while protecting yourself, but lacks direct accountability.",
                ),
            ],
        ),
    ))

    # =========================================================================
    # INITIATIVE
    # =========================================================================

    scenes.append(Scene(
        id="init-quick-1",
        type=SceneType.QUICK_RESPONSE,
        title="Initiative Test",
        subtitle="Opportunity Identification",
        dimension="initiative",
        content=(
            "You'll see a scenario and have 30 seconds to type what you would do. Focus on identifying "
            "opportunities beyond the minimum requirement."
        ),
        quick_prompt="You finished your assigned task early. What do you do?",
        time_limit=30,
    ))

    # =========================================================================
    # WRAP-UP
    # =========================================================================

    scenes.append(Scene(
        id="review",
        type=SceneType.REVIEW,
        title="Assessment Review",
        subtitle="Your Performance Summary",
        dimension="all",
        content="Here's a summary of your demonstrated skills based on your actual performance in each challenge.",
    ))

    scenes.append(Scene(
        id="completion",
        type=SceneType.COMPLETION,
        title="Assessment Complete",
        dimension="all",
        content=COMPLETION_TEXT,
    ))

    return scenes


DEFAULT_SCENES: List[Scene] = _build_default_scenes()
