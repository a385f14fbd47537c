"""
StudyBuddy Utilities Package

Contains:
- cache: Redis-backed cache with an in-memory fallback
- openai_client: Lazy-initialized OpenAI client
"""

from app.utils.cache import HybridCache, cache
from app.utils.openai_client import get_openai_client, reset_client

__all__ = [
    "HybridCache",
    "cache",
    "get_openai_client",
    "reset_client"
]
