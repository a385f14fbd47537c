"""
AI proxy endpoints.

Each endpoint formats a prompt, makes one chat-completion call and reshapes
the reply. Every response, preflight included, carries permissive CORS
headers. Any failure comes back as 500 {"error": message}.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import openai
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

from app.functions import prompts
from app.functions.parsing import fallback_study_plan, parse_goal_suggestions, parse_study_plan
from app.functions.result import Err
from app.schemas.ai import AssistantRequest, AssistantResponse, GoalSuggestionRequest, StudyPlanRequest
from app.services.exceptions import UpstreamError
from app.utils.openai_client import OPENAI_MODEL, get_openai_client

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def cors_json(content: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


async def read_body(request: Request, schema: type) -> BaseModel:
    """Request JSON -> schema instance. Malformed input raises ValueError."""
    try:
        payload = await request.json()
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON body: {e.msg}")
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValueError(str(e))


def call_llm(
    system_prompt: str,
    user_prompt: str,
    temperature: float,
    max_tokens: Optional[int] = None,
    response_format: Optional[Dict] = None,
) -> str:
    """One chat completion; provider failures become UpstreamError."""
    kwargs = {
        "model": OPENAI_MODEL,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ],
        "temperature": temperature
    }
    if max_tokens:
        kwargs["max_tokens"] = max_tokens
    if response_format:
        kwargs["response_format"] = response_format

    try:
        response = get_openai_client().chat.completions.create(**kwargs)
    except openai.APIStatusError as e:
        raise UpstreamError(f"OpenAI API error: {e.message}")
    except openai.OpenAIError as e:
        raise UpstreamError(f"OpenAI API error: {e}")

    if not response.choices:
        raise UpstreamError("OpenAI API error: no choices returned")
    return response.choices[0].message.content


# =============================================================================
# AI ASSISTANT
# =============================================================================

@router.options("/ai-assistant")
def ai_assistant_preflight():
    return preflight()


@router.post("/ai-assistant")
async def ai_assistant(request: Request):
    """Free-form study help. Body: {message, context?} -> {response, timestamp}."""
    try:
        body = await read_body(request, AssistantRequest)
        if not body.message:
            raise ValueError("Message is required")

        reply = await run_in_threadpool(
            call_llm,
            prompts.assistant_system_prompt(body.context),
            body.message,
            0.8,
            800,
        )
    except Exception as e:
        logger.error(f"Error in ai-assistant function: {e}")
        return cors_json({"error": str(e)}, status_code=500)

    return cors_json(AssistantResponse(
        response=reply,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    ).model_dump())


# =============================================================================
# GOAL SUGGESTIONS
# =============================================================================

@router.options("/ai-goal-suggestions")
def ai_goal_suggestions_preflight():
    return preflight()


@router.post("/ai-goal-suggestions")
async def ai_goal_suggestions(request: Request):
    """SMART goal suggestions. Body: {userContext?, goalType, subject?, timeframe?} -> {goals}."""
    try:
        body = await read_body(request, GoalSuggestionRequest)
        content = await run_in_threadpool(
            call_llm,
            prompts.GOAL_SUGGESTIONS_SYSTEM_PROMPT,
            prompts.goal_suggestions_prompt(body),
            0.7,
            None,
            {"type": "json_object"},
        )
        result = parse_goal_suggestions(content)
        if isinstance(result, Err):
            raise result.error
    except Exception as e:
        logger.error(f"Error in ai-goal-suggestions function: {e}")
        return cors_json({"error": str(e), "goals": []}, status_code=500)

    return cors_json(result.value.model_dump(by_alias=True))


# =============================================================================
# STUDY PLAN GENERATION
# =============================================================================

@router.options("/generate-study-plan")
def generate_study_plan_preflight():
    return preflight()


@router.post("/generate-study-plan")
async def generate_study_plan(request: Request):
    """
    Body: {subject, targetDate, dailyTime, difficultyLevel, learningStyle, goals}
    -> {studyPlan}.

    A reply that is not a valid plan is replaced by a static template, still
    answered with 200.
    """
    try:
        body = await read_body(request, StudyPlanRequest)
        if not body.subject:
            raise ValueError("Subject is required")

        content = await run_in_threadpool(
            call_llm,
            prompts.STUDY_PLAN_SYSTEM_PROMPT,
            prompts.study_plan_prompt(body),
            0.7,
            2000,
        )
    except Exception as e:
        logger.error(f"Error in generate-study-plan function: {e}")
        return cors_json({"error": str(e)}, status_code=500)

    result = parse_study_plan(content)
    if isinstance(result, Err):
        logger.warning(f"Using fallback plan for '{body.subject}': {result.error}")
        plan = fallback_study_plan(body.subject, body.learning_style)
    else:
        plan = result.value

    return cors_json({"studyPlan": plan.to_wire()})
