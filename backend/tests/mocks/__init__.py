"""
Mock infrastructure for StudyBuddy testing.
Provides deterministic mocks for OpenAI.
"""

from .openai_mocks import (
    MOCK_ASSISTANT_REPLY,
    MOCK_GOAL_SUGGESTIONS,
    MOCK_STUDY_PLAN,
    MockOpenAIClient,
    MockChatCompletion,
    mock_openai_completion,
    set_openai_reply,
)

__all__ = [
    "MOCK_ASSISTANT_REPLY",
    "MOCK_GOAL_SUGGESTIONS",
    "MOCK_STUDY_PLAN",
    "MockOpenAIClient",
    "MockChatCompletion",
    "mock_openai_completion",
    "set_openai_reply",
]
