"""Insight result models - cached insights, rankings and message suggestions."""

from typing import Optional
from datetime import datetime, timedelta
from pydantic import BaseModel, ConfigDict, Field
from habitus.models.property import Property

MAX_TOP_PICKS = 3
MAX_REASONS = 2
MAX_FOLLOW_UP_QUESTIONS = 2


class CachedInsight(BaseModel):
    """Generated insight text and when it was produced."""
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Insight text returned by the model")
    generated_at: datetime = Field(..., description="Generation time (UTC)")

    def age(self, now: datetime) -> timedelta:
        return now - self.generated_at

    def is_fresh(self, now: datetime, ttl_seconds: float) -> bool:
        return self.age(now).total_seconds() < ttl_seconds


class RankedProperty(BaseModel):
    """One pick from a ranking, always drawn from the caller's candidate set."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Source property ID")
    rank: int = Field(..., ge=1, le=MAX_TOP_PICKS, description="1-based rank")
    reasons: list[str] = Field(default_factory=list, max_length=MAX_REASONS, description="Why it fits")
    risk: str = Field("", description="Main risk to consider")
    candidate: Property = Field(..., description="Matched candidate property")


class RankedProperties(BaseModel):
    """Ranking result plus an optional clarifying question."""
    model_config = ConfigDict(frozen=True)

    top_picks: list[RankedProperty] = Field(default_factory=list, max_length=MAX_TOP_PICKS)
    clarifying_question: Optional[str] = Field(
        None,
        description="Asked when fewer than three picks could be produced"
    )


class MessageSuggestion(BaseModel):
    """Rewritten inquiry message and suggested follow-up questions."""
    model_config = ConfigDict(frozen=True)

    rewritten_message: str = Field(..., description="Rewritten message")
    follow_up_questions: list[str] = Field(
        default_factory=list,
        max_length=MAX_FOLLOW_UP_QUESTIONS,
        description="Follow-up questions for the buyer"
    )
