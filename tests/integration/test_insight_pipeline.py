"""End-to-end tests: InsightService over a real ModelGateway and a mocked HTTP endpoint."""

import json
import httpx
import pytest
from habitus.services.credentials import StaticCredentialProvider
from habitus.services.insight_cache import InsightCache
from habitus.services.insight_service import InsightService
from habitus.services.model_gateway import ModelGateway
from habitus.services.prompt_builder import GROUNDING_DIRECTIVE
from habitus.utils.config import GatewayConfig
from habitus.utils.errors import InvalidCredential
from habitus.utils.logging import correlation_context
from tests.fixtures.model_responses import RANKING_FULL
from tests.utils.helpers import RecordingTransport, create_chat_completion


def build_service(handler, clock):
    transport = RecordingTransport(handler)
    gateway = ModelGateway(
        config=GatewayConfig(base_url="https://llm.test/v1"),
        credential_provider=StaticCredentialProvider("sk-integration-credential"),
        client=httpx.AsyncClient(transport=transport),
    )
    return InsightService(gateway=gateway, cache=InsightCache(clock=clock)), transport


@pytest.mark.integration
@pytest.mark.asyncio
async def test_insight_round_trip_uses_cache(tampa_property, clock):
    def handler(request):
        return httpx.Response(200, json=create_chat_completion("Below-market Tampa listing."))

    service, transport = build_service(handler, clock)
    async with service:
        with correlation_context("req_pipeline"):
            first = await service.generate_property_insight(tampa_property)
            second = await service.generate_property_insight(tampa_property)

    assert first == second == "Below-market Tampa listing."
    assert len(transport.requests) == 1

    body = json.loads(transport.requests[0].content)
    assert body["messages"][0] == {"role": "system", "content": GROUNDING_DIRECTIVE}
    assert "Price: $450,000" in body["messages"][1]["content"]


@pytest.mark.integration
@pytest.mark.asyncio
async def test_ranking_round_trip(candidate_properties, sample_user_profile, clock):
    def handler(request):
        return httpx.Response(200, json=create_chat_completion(RANKING_FULL))

    service, transport = build_service(handler, clock)
    async with service:
        ranked = await service.rank_properties(candidate_properties, sample_user_profile)

    assert [pick.id for pick in ranked.top_picks] == ["2", "1", "3"]
    assert ranked.clarifying_question is None
    assert transport.requests[0].headers["Authorization"] == "Bearer sk-integration-credential"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_rejected_credential_reaches_caller(tampa_property, clock):
    def handler(request):
        return httpx.Response(401, json={"error": {"message": "Incorrect API key"}})

    service, _ = build_service(handler, clock)
    async with service:
        with pytest.raises(InvalidCredential):
            await service.generate_property_insight(tampa_property)

    assert len(service.cache) == 0
