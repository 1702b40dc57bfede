"""Gateway and cache configuration with environment variable support."""

import os
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from habitus.utils.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-5-nano"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_CACHE_TTL_SECONDS = 86400  # 24 hours

# Fixed sampling parameters; short outputs keep the small model fast and cheap
TEMPERATURE = 0.7
MAX_TOKENS = 250


class GatewayConfig(BaseModel):
    """Static configuration for the model gateway and insight cache."""
    model_config = ConfigDict(frozen=True)

    base_url: str = Field(DEFAULT_BASE_URL, description="Chat-completions API base URL")
    model: str = Field(DEFAULT_MODEL, min_length=1, description="Model identifier")
    timeout_seconds: float = Field(
        DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        allow_inf_nan=False,
        description="Request timeout for a single model call"
    )
    cache_ttl_seconds: int = Field(
        DEFAULT_CACHE_TTL_SECONDS,
        gt=0,
        description="Freshness window for cached insights"
    )

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "GatewayConfig":
        """Build config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        try:
            return cls(
                base_url=env.get("OPENAI_BASE_URL", DEFAULT_BASE_URL),
                model=env.get("HABITUS_LLM_MODEL", DEFAULT_MODEL),
                timeout_seconds=float(env.get("HABITUS_LLM_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS)),
                cache_ttl_seconds=int(env.get("INSIGHT_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)),
            )
        except (ValueError, ValidationError) as e:
            raise ConfigurationError(f"Invalid gateway configuration: {e}") from e
