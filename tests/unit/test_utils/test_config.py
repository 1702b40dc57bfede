"""Tests for gateway configuration."""

import pytest
from habitus.utils.config import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_SECONDS,
    GatewayConfig,
)
from habitus.utils.errors import ConfigurationError, HabitusError


@pytest.mark.unit
def test_from_env_defaults():
    config = GatewayConfig.from_env({})

    assert config.base_url == DEFAULT_BASE_URL
    assert config.model == DEFAULT_MODEL
    assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert config.cache_ttl_seconds == DEFAULT_CACHE_TTL_SECONDS == 86400
    assert config.completions_url == "https://api.openai.com/v1/chat/completions"


@pytest.mark.unit
def test_from_env_overrides():
    config = GatewayConfig.from_env({
        "OPENAI_BASE_URL": "https://proxy.internal/v1/",
        "HABITUS_LLM_MODEL": "gpt-4o-mini",
        "HABITUS_LLM_TIMEOUT_SECONDS": "12.5",
        "INSIGHT_CACHE_TTL_SECONDS": "3600",
    })

    assert config.completions_url == "https://proxy.internal/v1/chat/completions"
    assert config.model == "gpt-4o-mini"
    assert config.timeout_seconds == 12.5
    assert config.cache_ttl_seconds == 3600


@pytest.mark.unit
@pytest.mark.parametrize("env", [
    {"HABITUS_LLM_TIMEOUT_SECONDS": "0"},
    {"HABITUS_LLM_TIMEOUT_SECONDS": "soon"},
    {"HABITUS_LLM_TIMEOUT_SECONDS": "inf"},
    {"HABITUS_LLM_TIMEOUT_SECONDS": "nan"},
    {"INSIGHT_CACHE_TTL_SECONDS": "inf"},
    {"INSIGHT_CACHE_TTL_SECONDS": "-5"},
    {"HABITUS_LLM_MODEL": ""},
])
def test_from_env_invalid_values(env):
    with pytest.raises(ConfigurationError):
        GatewayConfig.from_env(env)


@pytest.mark.unit
def test_configuration_error_is_habitus_error():
    assert issubclass(ConfigurationError, HabitusError)


@pytest.mark.unit
def test_timeout_must_be_finite():
    with pytest.raises(ValueError):
        GatewayConfig(timeout_seconds=float("inf"))
