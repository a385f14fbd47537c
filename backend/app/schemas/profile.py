"""
Profile and preference schemas.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ProfileUpdate(BaseModel):
    # Personal info
    display_name: Optional[str] = Field(None, max_length=100)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = None
    timezone: Optional[str] = None
    language: Optional[str] = None

    # Onboarding
    goal: Optional[str] = None
    learning_style: Optional[str] = None
    study_time: Optional[str] = None
    onboarding_completed: Optional[bool] = None

    # Study preferences
    session_length: Optional[int] = Field(None, ge=1)
    break_length: Optional[int] = Field(None, ge=1)
    daily_goal: Optional[int] = Field(None, ge=0)
    reminder_time: Optional[str] = None  # "HH:MM"
    study_methods: Optional[List[str]] = None
    notifications: Optional[Any] = None
    calendar_integration: Optional[bool] = None
    auto_breaks: Optional[bool] = None
    sound_enabled: Optional[bool] = None
    dark_mode: Optional[bool] = None

    # AI configuration
    study_style: Optional[str] = None
    difficulty_preference: Optional[str] = None
    difficulty_level: Optional[int] = Field(None, ge=1, le=10)
    reminder_frequency: Optional[str] = None
    motivation_style: Optional[str] = None
    feedback_type: Optional[str] = None
    personality_type: Optional[str] = None
    adaptive_learning: Optional[bool] = None
    progress_tracking: Optional[bool] = None
    smart_suggestions: Optional[bool] = None

    # Privacy & security
    two_factor: Optional[bool] = None
    session_timeout: Optional[str] = None
    login_notifications: Optional[bool] = None
    data_export: Optional[bool] = None
    privacy_mode: Optional[bool] = None


class OnboardingRequest(BaseModel):
    display_name: Optional[str] = None
    goal: Optional[str] = None
    learning_style: Optional[str] = None
    study_time: Optional[str] = None
    study_methods: Optional[List[str]] = None


class Profile(BaseModel):
    id: str
    user_id: str
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    timezone: Optional[str] = "UTC"
    language: Optional[str] = "en"
    goal: Optional[str] = None
    learning_style: Optional[str] = None
    study_time: Optional[str] = None
    onboarding_completed: bool = False
    session_length: Optional[int] = 25
    break_length: Optional[int] = 5
    daily_goal: Optional[int] = 120
    reminder_time: Optional[str] = "09:00"
    study_methods: Optional[List[str]] = None
    notifications: Optional[Any] = None
    calendar_integration: Optional[bool] = False
    auto_breaks: Optional[bool] = True
    sound_enabled: Optional[bool] = True
    dark_mode: Optional[bool] = False
    study_style: Optional[str] = "balanced"
    difficulty_preference: Optional[str] = "adaptive"
    difficulty_level: Optional[int] = 5
    reminder_frequency: Optional[str] = "daily"
    motivation_style: Optional[str] = "encouraging"
    feedback_type: Optional[str] = "detailed"
    personality_type: Optional[str] = "friendly"
    adaptive_learning: Optional[bool] = True
    progress_tracking: Optional[bool] = True
    smart_suggestions: Optional[bool] = True
    two_factor: Optional[bool] = False
    session_timeout: Optional[str] = "30"
    login_notifications: Optional[bool] = True
    data_export: Optional[bool] = False
    privacy_mode: Optional[bool] = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
