"""
Chat API routes, mounted as a sub-router on the main FastAPI app.

POST /api/chat  {messages: [{role, content}, ...]} -> {reply} | {error}
"""

from __future__ import annotations

import json
import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.chat_handler import handle_chat
from app.llm import LLMError, PlanParseError
from app.llm_loader import LLMConfigError, ensure_llm_configured
from app.models import ChatError, ChatReply, ChatRequest
from app.session_store import DEFAULT_SESSION_ID, get_session
from core.listing_store import ListingStore

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/api", tags=["chat"])


def _session_id(request: Request) -> str:
    return (request.headers.get("X-Session-Id") or "").strip() or DEFAULT_SESSION_ID


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ChatError(error=message).model_dump())


def _log_response(ctx: str, payload) -> None:
    """Pretty-print JSON-able payloads; fall back to str()."""
    try:
        logger.info("%s response: %s", ctx, json.dumps(payload, indent=2, default=str))
    except (TypeError, ValueError):
        logger.info("%s response (non-serializable): %s", ctx, str(payload))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/chat", response_model=ChatReply, responses={400: {"model": ChatError}, 500: {"model": ChatError}})
async def chat(request: Request):
    """Answer the latest user message using the planner and the listings table."""
    try:
        body = await request.json()
        payload = ChatRequest.model_validate(body)
    except (ValueError, ValidationError):
        return _error(400, "Invalid request body. Send JSON with a 'messages' array.")

    try:
        ensure_llm_configured()
    except LLMConfigError as exc:
        return _error(500, str(exc))

    store: ListingStore = request.app.state.store
    session = get_session(_session_id(request))
    messages = [m.model_dump() for m in payload.messages]

    t0 = time.perf_counter()
    try:
        reply = await handle_chat(messages, session, store)
    except LLMConfigError as exc:
        return _error(500, str(exc))
    except PlanParseError as exc:
        logger.error("Failed to parse planner output: %s", exc)
        return _error(500, "Failed to interpret query.")
    except LLMError as exc:
        logger.error("LLM planner error: %s", exc)
        return _error(500, str(exc) or "OpenAI API error")
    except Exception:
        logger.exception("Server error while executing plan")
        return _error(500, "Server error while answering your question.")

    dt_ms = int((time.perf_counter() - t0) * 1000)
    resp = ChatReply(reply=reply).model_dump()
    logger.info("CHAT meta: session=%s turns=%d duration_ms=%d", session.session_id, len(messages), dt_ms)
    _log_response("CHAT", resp)
    return resp
