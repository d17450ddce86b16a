from pydantic import BaseModel, Field, field_validator
from typing import List, Literal


class ChatMessage(BaseModel):
    """Single turn in the browser's conversation history."""
    role: Literal["system", "user", "assistant"] = "user"
    content: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v) -> str:
        role = str(v or "user").strip().lower()
        return role if role in {"system", "user", "assistant"} else "user"

    @field_validator("content", mode="before")
    @classmethod
    def content_text(cls, v) -> str:
        return "" if v is None else str(v)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)


class ChatReply(BaseModel):
    reply: str


class ChatError(BaseModel):
    error: str
