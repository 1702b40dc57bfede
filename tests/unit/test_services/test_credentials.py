"""Tests for credential accessors."""

import pytest
from habitus.services.credentials import (
    EnvironmentCredentialProvider,
    SecretStoreCredentialProvider,
    StaticCredentialProvider,
)


class InMemorySecretStore:
    def __init__(self, secrets=None):
        self.secrets = secrets or {}

    def get_secret(self, name):
        return self.secrets.get(name)


@pytest.mark.unit
def test_environment_provider_reads_variable(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "  sk-from-env  ")
    assert EnvironmentCredentialProvider().get_api_key() == "sk-from-env"


@pytest.mark.unit
def test_environment_provider_missing_variable(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert EnvironmentCredentialProvider().get_api_key() == ""


@pytest.mark.unit
def test_environment_provider_custom_variable(monkeypatch):
    monkeypatch.setenv("HABITUS_TEST_KEY", "sk-custom")
    assert EnvironmentCredentialProvider("HABITUS_TEST_KEY").get_api_key() == "sk-custom"


@pytest.mark.unit
def test_secret_store_provider():
    store = InMemorySecretStore({"openai": "sk-from-keychain"})
    assert SecretStoreCredentialProvider(store).get_api_key() == "sk-from-keychain"


@pytest.mark.unit
def test_secret_store_provider_missing_secret():
    assert SecretStoreCredentialProvider(InMemorySecretStore()).get_api_key() == ""


@pytest.mark.unit
def test_static_provider():
    assert StaticCredentialProvider("sk-static").get_api_key() == "sk-static"
