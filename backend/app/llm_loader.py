"""LLM provider loader.

Centralises construction of chat models so we can swap providers via env vars.
Supports OpenAI by default and Groq when `langchain-groq` is installed.
"""

from __future__ import annotations

from langchain_core.language_models.chat_models import BaseChatModel

from app.config import _env

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_GROQ_MODEL = "llama-3.1-8b-instant"


class LLMConfigError(RuntimeError):
    """Raised when the requested LLM provider cannot be initialised."""


def get_provider_name() -> str:
    return (_env("LLM_PROVIDER", "openai") or "openai").lower()


def _resolve_model(default: str) -> str:
    return _env("LLM_MODEL", default) or default


def _api_key_var(provider: str) -> str:
    return "GROQ_API_KEY" if provider == "groq" else "OPENAI_API_KEY"


def ensure_llm_configured() -> None:
    """Fail fast (per request) when the provider's API key is missing."""
    provider = get_provider_name()
    if provider not in {"openai", "oa", "groq"}:
        raise LLMConfigError(
            f"Unsupported LLM_PROVIDER '{provider}'. Expected 'openai' or 'groq'."
        )
    var = _api_key_var(provider)
    if not (_env("LLM_API_KEY") or _env(var)):
        raise LLMConfigError(f"{var} is missing in .env")


def create_chat_model(temperature: float = 0.0) -> BaseChatModel:
    """Return a LangChain chat model for the configured provider."""

    ensure_llm_configured()
    provider = get_provider_name()

    if provider == "groq":
        try:
            from langchain_groq import ChatGroq  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise LLMConfigError(
                "Groq provider selected but langchain-groq is not installed. "
                "Run `pip install langchain-groq` or switch LLM_PROVIDER."
            ) from exc

        return ChatGroq(
            model=_resolve_model(DEFAULT_GROQ_MODEL),
            temperature=temperature,
            groq_api_key=_env("LLM_API_KEY") or _env("GROQ_API_KEY"),
            max_retries=0,
        )

    from langchain_openai import ChatOpenAI

    kwargs = {
        "model": _resolve_model(DEFAULT_OPENAI_MODEL),
        "temperature": temperature,
        "api_key": _env("LLM_API_KEY") or _env("OPENAI_API_KEY"),
        "max_retries": 0,
    }
    base_url = _env("LLM_BASE_URL") or _env("OPENAI_BASE_URL")
    if base_url:
        kwargs["base_url"] = base_url.rstrip("/")
    return ChatOpenAI(**kwargs)


def get_chat_model(temperature: float = 0.0) -> BaseChatModel:
    """Public entry point used by the rest of the app."""

    return create_chat_model(temperature=temperature)
