"""Insight service - public façade over prompts, gateway, parsers and cache.

Construct one instance at process start (`create_insight_service`) and pass it
to callers; the instance owns the shared insight cache for its lifetime.
Gateway errors propagate unchanged: no retries and no fallback text.
"""

from typing import Optional, Protocol, Sequence
from habitus.models.chat import ChatTurn
from habitus.models.insight import MessageSuggestion, RankedProperties
from habitus.models.property import Property
from habitus.models.search_context import SearchContext
from habitus.models.user_profile import UserProfile
from habitus.services import prompt_builder
from habitus.services.credentials import CredentialProvider
from habitus.services.insight_cache import InsightCache
from habitus.services.model_gateway import ModelGateway
from habitus.services.response_parsers import parse_message_suggestion, parse_ranked_properties
from habitus.utils.config import GatewayConfig
from habitus.utils.logging import (
    correlation_context,
    get_correlation_id,
    get_structured_logger,
    log_timing,
    sanitize_message_text,
)
from habitus.utils.logging_config import LoggingConfig

logger = get_structured_logger(__name__)


def _operation_context():
    """Join the caller's correlation id, or start one for this operation."""
    return correlation_context(get_correlation_id())


class CompletionGateway(Protocol):
    """Anything that turns chat turns into completion text."""

    async def complete(self, turns: Sequence[ChatTurn], stream: bool = False) -> str: ...


class InsightService:
    """Property insight, ranking, message rewrite and Q&A operations."""

    def __init__(self, gateway: CompletionGateway, cache: Optional[InsightCache] = None):
        self.gateway = gateway
        self.cache = cache if cache is not None else InsightCache()

    async def __aenter__(self) -> "InsightService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        aclose = getattr(self.gateway, "aclose", None)
        if aclose is not None:
            await aclose()

    async def generate_property_insight(self, property: Property) -> str:
        """
        Return a short insight for the property, served from cache when fresh.

        The cache is written only after a successful model call, so a failure
        leaves any earlier (possibly stale) entry in place.
        """
        with _operation_context():
            cached = self.cache.get_fresh(property.id)
            if cached is not None:
                logger.debug("Insight cache hit", property_id=property.id)
                return cached

            logger.info(
                "Insight cache miss",
                property_id=property.id,
                has_stale_entry=property.id in self.cache
            )

            turns = prompt_builder.build_insight_turns(property)
            with log_timing("generate_property_insight", logger=logger, property_id=property.id):
                content = await self.gateway.complete(turns)

            self.cache.store(property.id, content)
            return content

    async def attach_insight(self, property: Property) -> Property:
        """Return a copy of the property carrying its (cached or fresh) insight."""
        content = await self.generate_property_insight(property)
        entry = self.cache.peek(property.id)
        generated_at = entry.generated_at if entry is not None else self.cache.clock()
        return property.with_insight(content, generated_at)

    async def rank_properties(
        self,
        properties: Sequence[Property],
        user_profile: Optional[UserProfile] = None,
    ) -> RankedProperties:
        """
        Rank the top picks among `properties` for the user.

        The prompt shows only the first candidates, but ids are checked against
        the full list so the result never names a property the caller did not supply.
        """
        with _operation_context():
            turns = prompt_builder.build_ranking_turns(properties, user_profile)
            with log_timing(
                "rank_properties",
                logger=logger,
                candidate_count=len(properties),
                has_profile=user_profile is not None
            ):
                raw = await self.gateway.complete(turns)

            ranked = parse_ranked_properties(raw, properties)
            logger.info(
                "Properties ranked",
                candidate_count=len(properties),
                top_pick_ids=[pick.id for pick in ranked.top_picks],
                needs_clarification=ranked.clarifying_question is not None
            )
            return ranked

    async def rewrite_message(self, original_message: str, property: Property) -> MessageSuggestion:
        """Rewrite an inquiry message and suggest follow-up questions."""
        with _operation_context():
            turns = prompt_builder.build_rewrite_turns(original_message, property)
            logger.debug(
                "Rewriting message",
                property_id=property.id,
                message_preview=sanitize_message_text(original_message)
            )
            with log_timing("rewrite_message", logger=logger, property_id=property.id):
                raw = await self.gateway.complete(turns)
            return parse_message_suggestion(raw)

    async def ask_question(self, question: str, context: Optional[SearchContext] = None) -> str:
        """Answer a free-form question; the model text is returned unparsed."""
        with _operation_context():
            turns = prompt_builder.build_question_turns(question, context)
            with log_timing("ask_question", logger=logger, has_context=context is not None):
                return await self.gateway.complete(turns)


def create_insight_service(
    config: Optional[GatewayConfig] = None,
    credential_provider: Optional[CredentialProvider] = None,
    configure_logging: bool = True,
) -> InsightService:
    """
    Build the process-wide service with its gateway and cache.

    Pass `configure_logging=False` when the host application installs its own
    logging handlers.
    """
    if configure_logging:
        LoggingConfig.setup_logging()

    config = config or GatewayConfig.from_env()
    gateway = ModelGateway(config=config, credential_provider=credential_provider)
    cache = InsightCache(ttl_seconds=config.cache_ttl_seconds)
    logger.info(
        "InsightService created",
        llm_model=config.model,
        cache_ttl_seconds=config.cache_ttl_seconds
    )
    return InsightService(gateway=gateway, cache=cache)
