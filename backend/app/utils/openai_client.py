"""
Lazy-initialized OpenAI client for the AI functions.

The key is read on first use rather than at import, so the functions app
starts (and answers CORS preflights) without one. A missing key is not
rejected here: the upstream call fails and surfaces as an upstream error.
"""

import os
import logging
from typing import Optional
import httpx
from openai import OpenAI

logger = logging.getLogger(__name__)

_client: Optional[OpenAI] = None

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Timeout configuration: 60s total request, 10s connect
DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


def get_openai_client() -> OpenAI:
    """
    Get the shared OpenAI client, creating it on first call.

    Retries are disabled: each request makes exactly one upstream call.
    """
    global _client

    if _client is None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            logger.warning("OPENAI_API_KEY is not set; upstream calls will be rejected")
        _client = OpenAI(api_key=api_key or "", timeout=DEFAULT_TIMEOUT, max_retries=0)

    return _client


def reset_client() -> None:
    """
    Reset the client (useful for testing or when API key changes).
    """
    global _client
    _client = None
