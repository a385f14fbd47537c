"""
StudyBuddy Schemas Package

Pydantic models for request/response validation.

- study: study plans, sessions and materials
- goals: goals, action items, notes and analytics
- profile: user profile and onboarding
- ai: payloads for the AI proxy functions
"""
