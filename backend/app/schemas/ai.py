"""
Request and response shapes of the AI functions.

Field names on the wire are camelCase; the models accept and emit them via
aliases so the JSON produced by the model can be validated as-is.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# ASSISTANT
# =============================================================================

class AssistantRequest(BaseModel):
    message: Optional[str] = None
    context: Optional[Any] = None


class AssistantResponse(BaseModel):
    response: Optional[str] = None
    timestamp: str


# =============================================================================
# GOAL SUGGESTIONS
# =============================================================================

class GoalSuggestionRequest(CamelModel):
    user_context: Optional[str] = Field(None, alias="userContext")
    goal_type: Optional[str] = Field(None, alias="goalType")
    subject: Optional[str] = None
    timeframe: Optional[str] = None


class GoalSuggestion(CamelModel):
    title: str
    description: Optional[str] = None
    category: str = "short-term"
    priority: str = "medium"
    estimated_time_hours: Optional[float] = Field(None, alias="estimatedTimeHours")
    success_metrics: Optional[str] = Field(None, alias="successMetrics")
    milestones: List[str] = []
    timeline: str = ""
    difficulty: Optional[str] = None


class GoalSuggestions(BaseModel):
    """
    Model reply for the suggestions endpoint. Only the presence of a "goals"
    list is checked; its entries are passed through as the model wrote them
    and are validated as GoalSuggestion only when one is accepted.
    """
    goals: List[Any]


# =============================================================================
# STUDY PLAN GENERATION
# =============================================================================

class StudyPlanRequest(CamelModel):
    subject: Optional[str] = None
    target_date: Optional[str] = Field(None, alias="targetDate")
    daily_time: Optional[Union[int, str]] = Field(None, alias="dailyTime")
    difficulty_level: Optional[str] = Field(None, alias="difficultyLevel")
    learning_style: Optional[str] = Field(None, alias="learningStyle")
    goals: Optional[Any] = None


class PlanWeek(CamelModel):
    week: int
    focus: str
    topics: List[str] = []
    daily_objectives: List[str] = Field([], alias="dailyObjectives")
    techniques: List[str] = []
    assessment: Optional[str] = None


class StudyTechniques(BaseModel):
    primary: str
    supporting: List[str] = []


class GeneratedStudyPlan(CamelModel):
    title: str
    duration: str
    weekly_breakdown: List[PlanWeek] = Field(..., alias="weeklyBreakdown")
    study_techniques: StudyTechniques = Field(..., alias="studyTechniques")
    milestones: List[str] = []
    review_schedule: Optional[str] = Field(None, alias="reviewSchedule")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
