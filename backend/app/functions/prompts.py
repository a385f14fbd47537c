"""
Prompt builders for the AI functions.

Caller-provided context is interpolated as-is.
"""

from typing import Any, Optional

from app.schemas.ai import GoalSuggestionRequest, StudyPlanRequest


ASSISTANT_SYSTEM_PROMPT = """You are StudyBuddy AI, a friendly and encouraging study assistant. You:
- Give study tips and learning strategies
- Explain academic concepts briefly and clearly
- Help plan and organize study sessions
- Keep students motivated

Formatting:
- Always answer in well-structured Markdown with headers and bullet points
- Use emojis to mark sections (📚 study tips, 🎯 goals, ⚡ quick tips)
- Use Markdown tables for comparisons and code blocks for formulas
- Use a ```mermaid flowchart or mindmap when a process or hierarchy is easier to see than to read
- End with a "Related Questions:" section of 2-3 follow-ups, each starting with "🤔 "
"""

GOAL_SUGGESTIONS_SYSTEM_PROMPT = """You help students set SMART learning goals (Specific, Measurable, Achievable, Relevant, Time-bound).

For each goal give a realistic timeline, 3-5 actionable milestones, an estimate of the hours needed and trackable success metrics, matched to the student's level and available time.

Respond with a JSON object holding 3 suggestions:
{
  "goals": [
    {
      "title": "Goal title",
      "description": "What the goal involves",
      "category": "short-term|medium-term|long-term|exam-preparation|skill-development",
      "priority": "high|medium|low",
      "estimatedTimeHours": 40,
      "successMetrics": "How success is measured",
      "milestones": ["Milestone 1", "Milestone 2", "Milestone 3"],
      "timeline": "Recommended timeframe, e.g. 6 weeks",
      "difficulty": "beginner|intermediate|advanced"
    }
  ]
}"""

STUDY_PLAN_SYSTEM_PROMPT = (
    "You are an expert educational planner who builds personalized study plans. "
    "Always respond with valid JSON and rely on evidence-based learning techniques."
)

STUDY_PLAN_FORMAT = """{
  "title": "Study Plan Title",
  "duration": "X weeks",
  "weeklyBreakdown": [
    {
      "week": 1,
      "focus": "Topic Area",
      "topics": ["Topic 1", "Topic 2"],
      "dailyObjectives": ["Objective 1", "Objective 2"],
      "techniques": ["Technique 1", "Technique 2"],
      "assessment": "Assessment method"
    }
  ],
  "studyTechniques": {
    "primary": "Main technique for the learning style",
    "supporting": ["Supporting technique 1", "Supporting technique 2"]
  },
  "milestones": ["Milestone 1", "Milestone 2"],
  "reviewSchedule": "Review strategy"
}"""


def assistant_system_prompt(context: Optional[Any] = None) -> str:
    if context:
        return f"{ASSISTANT_SYSTEM_PROMPT}\nAdditional context: {context}"
    return ASSISTANT_SYSTEM_PROMPT


def goal_suggestions_prompt(request: GoalSuggestionRequest) -> str:
    return f"""Create goal suggestions for:
- Goal type: {request.goal_type}
- Subject: {request.subject or 'General'}
- Timeframe: {request.timeframe or 'Flexible'}
- User context: {request.user_context or 'Student looking to improve their learning'}

Give 3 different suggestions with varying difficulty levels and approaches."""


def study_plan_prompt(request: StudyPlanRequest) -> str:
    return f"""Create a personalized study plan for {request.subject}.

Study parameters:
- Target completion date: {request.target_date}
- Available daily study time: {request.daily_time} minutes
- Difficulty level: {request.difficulty_level}
- Learning style: {request.learning_style}
- Goals: {request.goals}

Include a weekly breakdown of topics, daily objectives, techniques suited to the learning style, progress milestones and a review schedule.

Format the response as JSON with this structure:
{STUDY_PLAN_FORMAT}"""
