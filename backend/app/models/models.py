from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, Date, JSON, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from app.database import Base


def generate_uuid():
    return str(uuid.uuid4())


class StudyPlan(Base):
    __tablename__ = "study_plans"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=True)  # "short-term", "medium-term", ...
    priority = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)
    learning_style = Column(String, nullable=True)
    daily_time_minutes = Column(Integer, nullable=True)
    target_date = Column(Date, nullable=True)
    status = Column(String, default="active")
    progress = Column(Integer, default=0)  # Percentage, not clamped
    ai_generated = Column(Boolean, default=False)
    extra_data = Column("metadata", JSON, nullable=True)  # e.g. {"aiPlan": {...}}
    estimated_time_hours = Column(Float, nullable=True)
    time_invested_hours = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    weeks = relationship(
        "StudyPlanWeek",
        back_populates="study_plan",
        order_by="StudyPlanWeek.week_number",
        passive_deletes=True,
    )


class StudyPlanWeek(Base):
    __tablename__ = "study_plan_weeks"

    id = Column(String, primary_key=True, default=generate_uuid)
    study_plan_id = Column(String, ForeignKey("study_plans.id", ondelete="CASCADE"), nullable=False, index=True)
    week_number = Column(Integer, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    study_plan = relationship("StudyPlan", back_populates="weeks")
    days = relationship(
        "StudyPlanDay",
        back_populates="week",
        order_by="StudyPlanDay.day_number",
        passive_deletes=True,
    )


class StudyPlanDay(Base):
    __tablename__ = "study_plan_days"

    id = Column(String, primary_key=True, default=generate_uuid)
    week_id = Column(String, ForeignKey("study_plan_weeks.id", ondelete="CASCADE"), nullable=False, index=True)
    day_number = Column(Integer, nullable=False)
    topic = Column(String, nullable=False)
    subtopic = Column(String, nullable=True)
    study_method = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)
    estimated_time_minutes = Column(Integer, nullable=True)
    completed = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    week = relationship("StudyPlanWeek", back_populates="days")


class StudySession(Base):
    __tablename__ = "study_sessions"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    study_plan_id = Column(String, ForeignKey("study_plans.id", ondelete="SET NULL"), nullable=True, index=True)
    day_id = Column(String, ForeignKey("study_plan_days.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    topic = Column(String, nullable=True)
    subtopic = Column(String, nullable=True)
    session_type = Column(String, nullable=True)
    study_method = Column(String, nullable=True)
    status = Column(String, default="planned")  # "planned", "active", "completed"

    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, nullable=True)

    # Self-reported ratings (1-5 / 1-10 scales set by the client)
    confidence_rating = Column(Integer, nullable=True)
    focus_level = Column(Integer, nullable=True)
    effectiveness_rating = Column(Integer, nullable=True)
    energy_level = Column(String, nullable=True)

    notes = Column(Text, nullable=True)
    objectives = Column(JSON, nullable=True)
    completed_objectives = Column(JSON, nullable=True)
    techniques_used = Column(JSON, nullable=True)
    breaks_taken = Column(Integer, nullable=True)
    distractions_count = Column(Integer, nullable=True)
    progress = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    study_plan = relationship("StudyPlan")
    materials = relationship("StudyMaterial", order_by="StudyMaterial.order_index", passive_deletes=True)


class StudyMaterial(Base):
    __tablename__ = "study_materials"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    study_plan_id = Column(String, ForeignKey("study_plans.id", ondelete="CASCADE"), nullable=True, index=True)
    session_id = Column(String, ForeignKey("study_sessions.id", ondelete="CASCADE"), nullable=True, index=True)
    title = Column(String, nullable=False)
    material_type = Column(String, nullable=False)  # "pdf", "video", "image", "link", ...
    file_path = Column(String, nullable=True)  # Object storage key
    url = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    author = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    page_start = Column(Integer, nullable=True)
    page_end = Column(Integer, nullable=True)
    file_size = Column(Integer, nullable=True)
    is_required = Column(Boolean, default=False)
    tags = Column(JSON, nullable=True)
    order_index = Column(Integer, default=0, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Goal(Base):
    __tablename__ = "goals"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, default="short-term")
    priority = Column(String, nullable=False, default="medium")
    status = Column(String, nullable=False, default="active", index=True)
    progress = Column(Integer, default=0)
    target_date = Column(Date, nullable=True)
    estimated_time_hours = Column(Float, nullable=True)
    time_invested_hours = Column(Float, default=0)
    success_metrics = Column(Text, nullable=True)
    related_study_plans = Column(JSON, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # passive_deletes: deleting a goal never touches its children from this side
    action_items = relationship(
        "GoalActionItem",
        back_populates="goal",
        order_by="GoalActionItem.order_index",
        passive_deletes=True,
    )
    notes = relationship(
        "GoalNote",
        back_populates="goal",
        order_by="GoalNote.created_at.desc()",
        passive_deletes=True,
    )


class GoalActionItem(Base):
    __tablename__ = "goal_action_items"

    id = Column(String, primary_key=True, default=generate_uuid)
    goal_id = Column(String, ForeignKey("goals.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True)
    order_index = Column(Integer, default=0)
    is_completed = Column(Boolean, default=False)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    goal = relationship("Goal", back_populates="action_items")


class GoalNote(Base):
    __tablename__ = "goal_notes"

    id = Column(String, primary_key=True, default=generate_uuid)
    goal_id = Column(String, ForeignKey("goals.id"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False)
    note_type = Column(String, default="reflection")
    created_at = Column(DateTime, default=datetime.utcnow)

    goal = relationship("Goal", back_populates="notes")


class GoalEvent(Base):
    """Append-only goal analytics events ("created", "completed", ...)"""
    __tablename__ = "goal_analytics"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    goal_id = Column(String, nullable=True, index=True)
    event_type = Column(String, nullable=False)
    event_data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class UserStreak(Base):
    __tablename__ = "user_streaks"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, index=True)
    streak_type = Column(String, nullable=False, default="study")
    current_streak = Column(Integer, default=0)
    longest_streak = Column(Integer, default=0)
    last_activity_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserProfile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, default=generate_uuid)
    user_id = Column(String, nullable=False, unique=True, index=True)

    # Personal info
    display_name = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    timezone = Column(String, default="UTC")
    language = Column(String, default="en")

    # Onboarding
    goal = Column(String, nullable=True)
    learning_style = Column(String, nullable=True)
    study_time = Column(String, nullable=True)
    onboarding_completed = Column(Boolean, default=False)

    # Study preferences
    session_length = Column(Integer, default=25)
    break_length = Column(Integer, default=5)
    daily_goal = Column(Integer, default=120)
    reminder_time = Column(String, default="09:00")
    study_methods = Column(JSON, nullable=True)
    notifications = Column(JSON, nullable=True)
    calendar_integration = Column(Boolean, default=False)
    auto_breaks = Column(Boolean, default=True)
    sound_enabled = Column(Boolean, default=True)
    dark_mode = Column(Boolean, default=False)

    # AI configuration
    study_style = Column(String, default="balanced")
    difficulty_preference = Column(String, default="adaptive")
    difficulty_level = Column(Integer, default=5)
    reminder_frequency = Column(String, default="daily")
    motivation_style = Column(String, default="encouraging")
    feedback_type = Column(String, default="detailed")
    personality_type = Column(String, default="friendly")
    adaptive_learning = Column(Boolean, default=True)
    progress_tracking = Column(Boolean, default=True)
    smart_suggestions = Column(Boolean, default=True)

    # Privacy & security
    two_factor = Column(Boolean, default=False)
    session_timeout = Column(String, default="30")
    login_notifications = Column(Boolean, default=True)
    data_export = Column(Boolean, default=False)
    privacy_mode = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
