"""
LLM-driven query planning.

The model reads the conversation and returns a JSON intent; the server does
the actual lookups. Its output is validated into a Plan before anything
touches the listing table.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Dict, List

from pydantic import ValidationError

from app.llm import PlanParseError, chat_json
from app.prompts import PLANNER_SYSTEM_PROMPT
from core.models import Plan

logger = logging.getLogger("uvicorn.error")

_GREETING_RE = re.compile(r"^\s*(hi|hello|hey|hola)\s*[!.]*\s*$", re.IGNORECASE)


def is_greeting(text: str) -> bool:
    return bool(_GREETING_RE.match(text or ""))


def last_user_text(messages: List[Dict[str, str]]) -> str:
    for turn in reversed(messages):
        if turn.get("role") == "user":
            return (turn.get("content") or "").strip()
    return ""


async def plan_from_conversation(messages: List[Dict[str, str]]) -> Plan:
    """Ask the planner model for the current request. Raises LLMError subclasses."""
    raw = await chat_json(PLANNER_SYSTEM_PROMPT, messages)
    try:
        plan = Plan.model_validate(raw)
    except ValidationError as exc:
        raise PlanParseError(f"plan_invalid: {exc.error_count()} errors") from exc

    logger.info("Planner intent: %s", json.dumps(plan.model_dump(mode="json"), indent=2))
    return plan
