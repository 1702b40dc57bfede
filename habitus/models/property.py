"""Property model - listing data supplied by the property-data provider."""

from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

MAX_BADGES = 2


class PropertyType(str, Enum):
    """Property type values."""
    SINGLE_FAMILY = "single_family"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    MULTI_FAMILY = "multi_family"
    LAND = "land"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return {
            PropertyType.SINGLE_FAMILY: "Single Family",
            PropertyType.CONDO: "Condo",
            PropertyType.TOWNHOUSE: "Townhouse",
            PropertyType.MULTI_FAMILY: "Multi-Family",
            PropertyType.LAND: "Land",
            PropertyType.OTHER: "Other",
        }[self]


class ListingStatus(str, Enum):
    """Listing status values."""
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    OFF_MARKET = "off_market"
    COMING_SOON = "coming_soon"


class RiskLevel(str, Enum):
    """Flood risk tiers."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class BadgeKind(str, Enum):
    DEAL_SCORE = "deal_score"
    PRICE_DROP = "price_drop"
    LOW_FLOOD_RISK = "low_flood_risk"
    HIGH_RENTAL_DEMAND = "high_rental_demand"
    NEW_CONSTRUCTION = "new_construction"


_BADGE_COLORS = {
    BadgeKind.DEAL_SCORE: "green",
    BadgeKind.PRICE_DROP: "red",
    BadgeKind.LOW_FLOOD_RISK: "blue",
    BadgeKind.HIGH_RENTAL_DEMAND: "purple",
    BadgeKind.NEW_CONSTRUCTION: "orange",
}


class PropertyBadge(BaseModel):
    """Highlight shown on a property card."""
    model_config = ConfigDict(frozen=True)

    kind: BadgeKind
    text: str

    @property
    def color(self) -> str:
        return _BADGE_COLORS[self.kind]


class Coordinates(BaseModel):
    """Map position of a property."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


def format_price(price: float) -> str:
    """Format a price as whole-dollar US currency, e.g. $450,000."""
    return f"${price:,.0f}"


class Property(BaseModel):
    """Real estate listing with market metrics and an optional cached AI insight."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable property ID")
    address: str = Field("", description="Street address")
    city: str = Field(..., description="City")
    state: str = Field("FL", description="State code")
    zip_code: str = Field("", description="ZIP code")
    price: float = Field(..., ge=0, description="List price in USD")
    bedrooms: int = Field(..., ge=0, description="Bedroom count")
    bathrooms: float = Field(..., ge=0, description="Bathroom count (half baths as .5)")
    square_feet: Optional[int] = Field(None, ge=0, description="Living area")
    lot_size: Optional[float] = Field(None, ge=0, description="Lot size in acres")
    year_built: Optional[int] = Field(None, description="Year built")
    property_type: PropertyType = Field(default=PropertyType.SINGLE_FAMILY, description="Property type")
    listing_status: ListingStatus = Field(default=ListingStatus.ACTIVE, description="Listing status")
    days_on_market: int = Field(0, ge=0, description="Days on market")
    description: Optional[str] = Field(None, description="Listing description")
    image_urls: list[str] = Field(default_factory=list, description="Photo URLs")
    coordinates: Optional[Coordinates] = Field(None, description="Map position")
    mls_number: Optional[str] = Field(None, description="MLS number")

    # Analytics & scoring
    deal_score: Optional[int] = Field(None, ge=0, le=100, description="Deal score (0-100)")
    price_drop_amount: Optional[float] = Field(None, description="Price reduction in USD")
    price_drop_percentage: Optional[float] = Field(None, description="Price reduction in percent")
    estimated_rent: Optional[float] = Field(None, ge=0, description="Estimated monthly rent")
    flood_risk: Optional[RiskLevel] = Field(None, description="Flood risk tier")
    neighborhood_score: Optional[int] = Field(None, description="Neighborhood score")

    # AI insight attached by the insight cache
    ai_insight: Optional[str] = Field(None, description="Cached AI insight text")
    insight_generated_at: Optional[datetime] = Field(None, description="When the insight was generated")

    @property
    def formatted_price(self) -> str:
        return format_price(self.price)

    @property
    def main_image_url(self) -> Optional[str]:
        return self.image_urls[0] if self.image_urls else None

    @property
    def badges(self) -> list[PropertyBadge]:
        """Card badges in priority order, at most two."""
        badges: list[PropertyBadge] = []

        if self.deal_score is not None and self.deal_score > 80:
            badges.append(PropertyBadge(kind=BadgeKind.DEAL_SCORE, text=f"Deal Score {self.deal_score}"))

        if self.price_drop_percentage is not None and self.price_drop_percentage > 5:
            badges.append(PropertyBadge(
                kind=BadgeKind.PRICE_DROP,
                text=f"Price Cut {int(self.price_drop_percentage)}%"
            ))

        if self.flood_risk == RiskLevel.LOW:
            badges.append(PropertyBadge(kind=BadgeKind.LOW_FLOOD_RISK, text="Low Flood Risk"))

        # Monthly rent above 0.7% of price
        if self.estimated_rent is not None and self.estimated_rent > self.price * 0.007:
            badges.append(PropertyBadge(kind=BadgeKind.HIGH_RENTAL_DEMAND, text="High Rental Demand"))

        return badges[:MAX_BADGES]

    def with_insight(self, content: str, generated_at: datetime) -> "Property":
        """Return a copy carrying the given insight; the original is left untouched."""
        return self.model_copy(update={"ai_insight": content, "insight_generated_at": generated_at})
