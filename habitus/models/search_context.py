"""SearchContext model - per-question browsing context for Q&A."""

from pydantic import BaseModel, ConfigDict, Field


class SearchContext(BaseModel):
    """Ephemeral browsing context supplied with a question; never persisted."""
    model_config = ConfigDict(frozen=True)

    saved_property_count: int = Field(0, ge=0, description="Number of saved properties")
    recent_searches: list[str] = Field(default_factory=list, description="Recent search terms")
    preferred_locations: list[str] = Field(default_factory=list, description="Preferred cities/areas")
