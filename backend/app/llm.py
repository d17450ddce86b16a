import json
import re
from typing import Any, Dict, List

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from .llm_loader import LLMConfigError, get_chat_model
import logging

logger = logging.getLogger("uvicorn.error")


class LLMError(RuntimeError):
    pass


class PlanParseError(LLMError):
    """The model answered, but not with a usable JSON object."""


def _get_llm(temperature: float = 0.0):
    try:
        return get_chat_model(temperature=temperature)
    except LLMConfigError:
        raise
    except Exception as exc:
        raise LLMError(str(exc)) from exc


# ---------- helpers for message conversion ----------


def to_lc_messages(system_prompt: str, history: List[Dict[str, str]]) -> List[BaseMessage]:
    """System prompt followed by the browser history, as LangChain messages."""
    messages: List[BaseMessage] = [SystemMessage(system_prompt)]
    for turn in history:
        role = (turn.get("role") or "user").lower()
        content = turn.get("content") or ""
        if role == "system":
            messages.append(SystemMessage(content))
        elif role == "assistant":
            messages.append(AIMessage(content))
        else:
            messages.append(HumanMessage(content))
    return messages


def _as_text_from_content(content: Any) -> str:
    """Normalize LC content (str | list[chunk] | dict | AIMessage)."""
    if content is None:
        return ""
    if isinstance(content, AIMessage):
        return _as_text_from_content(content.content)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for p in content:
            if isinstance(p, str):
                parts.append(p)
            elif isinstance(p, dict) and isinstance(p.get("text"), str):
                parts.append(p["text"])
            else:
                parts.append(str(p))
        return "".join(parts)
    if isinstance(content, dict):
        if isinstance(content.get("text"), str):
            return content["text"]
        if isinstance(content.get("content"), str):
            return content["content"]
        return str(content)
    return str(content)


def _upstream_message(exc: Exception) -> str:
    """Best human-readable message from a provider exception."""
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        err = body.get("error") if isinstance(body.get("error"), dict) else body
        msg = err.get("message") if isinstance(err, dict) else None
        if isinstance(msg, str) and msg.strip():
            return msg.strip()
    msg = getattr(exc, "message", None)
    if isinstance(msg, str) and msg.strip():
        return msg.strip()
    return str(exc).strip() or "OpenAI API error"


# ---------- JSON extraction ----------


def _strip_code_fences(text: str) -> str:
    return re.sub(
        r"^```(?:json)?\s*|\s*```$",
        "",
        text.strip(),
        flags=re.IGNORECASE | re.MULTILINE,
    )


def _first_balanced_json(text: str) -> str:
    start = text.find("{")
    if start < 0:
        raise ValueError("no JSON object in response")
    depth = 0
    in_string = False
    escaped = False
    for j in range(start, len(text)):
        ch = text[j]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : j + 1]
    teaser = text[start : start + 400].replace("\n", "\\n")
    raise ValueError(f"unterminated JSON (teaser): {teaser}")


_re_trailing_commas = re.compile(r",(\s*[}\]])")
_re_bare_literals = re.compile(r"\b(?:None|True|False)\b")


def _try_repair_json(s: str) -> Any:
    t = _re_trailing_commas.sub(r"\1", s)
    t = _re_bare_literals.sub(lambda m: {"None": "null", "True": "true", "False": "false"}[m.group(0)], t)
    return json.loads(t)


def load_json_object(text: str) -> Dict[str, Any]:
    """Parse the model's text into a dict, tolerating fences and stray prose."""
    txt = _strip_code_fences(text or "")
    if not txt.strip():
        raise PlanParseError("empty LLM response text")
    try:
        obj = json.loads(txt)
    except ValueError:
        try:
            block = _first_balanced_json(txt)
        except ValueError as e:
            raise PlanParseError(str(e)) from e
        try:
            obj = json.loads(block)
        except ValueError:
            try:
                obj = _try_repair_json(block)
            except ValueError as e:
                teaser = block[:400].replace("\n", "\\n")
                raise PlanParseError(f"json_parse_failed after repair: {e}; teaser={teaser}") from e
    if not isinstance(obj, dict):
        raise PlanParseError(f"plan_not_object: got {type(obj).__name__}")
    return obj


async def chat_json(system_prompt: str, history: List[Dict[str, str]]) -> Dict[str, Any]:
    """Send system prompt + history in JSON mode and return the parsed object."""
    llm = _get_llm().bind(response_format={"type": "json_object"})
    messages = to_lc_messages(system_prompt, history)
    try:
        resp = await llm.ainvoke(messages)
    except Exception as exc:
        raise LLMError(_upstream_message(exc)) from exc

    text = _as_text_from_content(getattr(resp, "content", None))
    if not text or not text.strip():
        extras = getattr(resp, "additional_kwargs", None)
        raise PlanParseError(f"no_content: additional={extras}")
    logger.debug("LLM raw text teaser: %r", text[:200])
    return load_json_object(text)
