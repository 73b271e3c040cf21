"""Request/response shapes for the HTTP surface."""

from datetime import datetime

from pydantic import BaseModel, Field

from backend.app.models.conversation import Message

MAX_QUESTION_LENGTH = 500


class AskRequest(BaseModel):
    """POST /ask body."""

    question: str = ""
    conversation: list[Message] = Field(default_factory=list)


class AskResponse(BaseModel):
    ok: bool = True
    question: str
    answer: str
    timestamp: datetime


class CacheStats(BaseModel):
    hits: int
    misses: int
    total: int
    size: int
    hit_rate: float
