"""Shared pytest fixtures and configuration."""

import os
import pytest
from datetime import datetime, timezone
from freezegun import freeze_time

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("OPENAI_API_KEY", "sk-test-key-for-unit-tests")
os.environ.setdefault("HABITUS_LLM_MODEL", "gpt-5-nano")
os.environ.setdefault("LOG_FORMAT", "text")

from habitus.models.property import Property, RiskLevel
from habitus.models.search_context import SearchContext
from habitus.models.user_profile import Goal, Timeline, UserProfile
from habitus.services.insight_cache import InsightCache
from habitus.services.insight_service import InsightService
from tests.utils.helpers import FakeGateway, MutableClock


@pytest.fixture
def tampa_property():
    """Property from the fresh-insight scenario."""
    return Property(
        id="42",
        address="123 Bayshore Blvd",
        city="Tampa",
        zip_code="33606",
        price=450000,
        bedrooms=3,
        bathrooms=2,
        days_on_market=10,
        deal_score=88,
        flood_risk=RiskLevel.LOW,
    )


@pytest.fixture
def candidate_properties():
    """Three candidates with ids 1, 2, 3."""
    return [
        Property(id="1", city="Tampa", price=350000, bedrooms=3, bathrooms=2, days_on_market=5, deal_score=82),
        Property(id="2", city="Orlando", price=420000, bedrooms=4, bathrooms=3, days_on_market=21, deal_score=64),
        Property(id="3", city="Miami", price=610000, bedrooms=2, bathrooms=2, days_on_market=45),
    ]


@pytest.fixture
def sample_user_profile():
    return UserProfile(
        goal=Goal.RENT,
        timeline=Timeline.THREE_TO_TWELVE,
        budget_min=300000,
        budget_max=500000,
        preferred_locations=["Tampa", "St. Petersburg"],
    )


@pytest.fixture
def sample_search_context():
    return SearchContext(
        saved_property_count=4,
        recent_searches=["Tampa 3 bed", "waterfront condo"],
        preferred_locations=["Tampa"],
    )


@pytest.fixture
def clock():
    """Manually advanced UTC clock."""
    return MutableClock(datetime(2024, 12, 9, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def insight_service(fake_gateway, clock):
    """Service wired to a fake gateway and a cache on the manual clock."""
    return InsightService(gateway=fake_gateway, cache=InsightCache(clock=clock))


@pytest.fixture
def freeze_time_fixture():
    """Fixture for freezing time in tests."""
    with freeze_time("2024-12-09 12:00:00") as frozen_time:
        yield frozen_time
