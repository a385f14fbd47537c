"""
Parse-and-validate for model output.

Model replies are untrusted text. They become typed values here or an
Err(ParseError); nothing downstream sees raw JSON.
"""
import json
import logging
from typing import Any, Optional

from pydantic import ValidationError

from app.functions.result import Err, Ok, Result
from app.schemas.ai import GeneratedStudyPlan, GoalSuggestions
from app.services.exceptions import ParseError

logger = logging.getLogger(__name__)


def _load_json(content: Optional[str]) -> Any:
    if not content:
        raise ParseError("Model returned an empty response")
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Model response is not valid JSON: {e.msg}")


def parse_study_plan(content: Optional[str]) -> Result[GeneratedStudyPlan, ParseError]:
    try:
        data = _load_json(content)
        return Ok(GeneratedStudyPlan.model_validate(data))
    except ParseError as e:
        return Err(e)
    except ValidationError as e:
        return Err(ParseError(f"Study plan does not match the expected shape: {e.error_count()} errors"))


def parse_goal_suggestions(content: Optional[str]) -> Result[GoalSuggestions, ParseError]:
    try:
        data = _load_json(content)
        return Ok(GoalSuggestions.model_validate(data))
    except ParseError as e:
        return Err(e)
    except ValidationError as e:
        return Err(ParseError(f"Goal suggestions do not match the expected shape: {e.error_count()} errors"))


def fallback_study_plan(subject: str, learning_style: Optional[str] = None) -> GeneratedStudyPlan:
    """Static one-week plan served when the model's plan cannot be used."""
    return GeneratedStudyPlan.model_validate({
        "title": f"{subject} Study Plan",
        "duration": "4 weeks",
        "weeklyBreakdown": [
            {
                "week": 1,
                "focus": "Foundation",
                "topics": ["Basic concepts", "Terminology"],
                "dailyObjectives": ["Understand fundamentals", "Practice basic exercises"],
                "techniques": ["Active reading", "Note-taking"],
                "assessment": "Self-quiz",
            }
        ],
        "studyTechniques": {
            "primary": "Visual mapping" if learning_style == "visual" else "Active recall",
            "supporting": ["Spaced repetition", "Practice testing"],
        },
        "milestones": ["Complete foundation", "Master intermediate concepts"],
        "reviewSchedule": "Weekly reviews with spaced repetition",
    })
