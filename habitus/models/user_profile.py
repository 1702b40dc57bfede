"""UserProfile model - buyer preferences collected during onboarding."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from habitus.models.property import PropertyType


class Timeline(str, Enum):
    """How soon the user plans to buy."""
    NOW = "now"
    THREE_TO_TWELVE = "3_12_months"
    BROWSING = "browsing"

    @property
    def display_name(self) -> str:
        return {
            Timeline.NOW: "Ready now",
            Timeline.THREE_TO_TWELVE: "3-12 months",
            Timeline.BROWSING: "Just browsing",
        }[self]


class Goal(str, Enum):
    """What the user intends to do with the property."""
    LIVE = "live"
    RENT = "rent"
    BOTH = "both"

    @property
    def display_name(self) -> str:
        return {
            Goal.LIVE: "Live in",
            Goal.RENT: "Rent out",
            Goal.BOTH: "Both",
        }[self]


class UserProfile(BaseModel):
    """Read-only buyer profile used for personalised prompts."""
    model_config = ConfigDict(frozen=True)

    goal: Goal = Field(..., description="Live in, rent out, or both")
    timeline: Timeline = Field(..., description="Purchase timeline")
    budget_min: Optional[float] = Field(None, ge=0, description="Minimum budget in USD")
    budget_max: Optional[float] = Field(None, ge=0, description="Maximum budget in USD")
    preferred_locations: list[str] = Field(default_factory=list, description="Preferred cities/areas")
    preferred_property_types: list[PropertyType] = Field(
        default_factory=list,
        description="Preferred property types"
    )

    def model_post_init(self, __context: object) -> None:
        """Validate that budget_min does not exceed budget_max."""
        if self.budget_min is not None and self.budget_max is not None:
            if self.budget_min > self.budget_max:
                raise ValueError("budget_min must be less than or equal to budget_max")
