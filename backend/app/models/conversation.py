"""Conversation turn models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """One prior conversation turn."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    is_user: bool = Field(True, alias="isUser")
    timestamp: datetime | None = None


class ConversationState(BaseModel):
    """What the conversation so far tells us about the current question."""

    focus_spot: str | None = None
    last_assistant: str | None = None
    prior_recommendations: list[str] = Field(default_factory=list)


class IntentSignals(BaseModel):
    """Activity preferences inferred from the question and recent user turns."""

    wants_family: bool = False
    wants_surf: bool = False
    wants_snorkel: bool = False
    together_preference: bool = False
