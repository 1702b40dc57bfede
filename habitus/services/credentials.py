"""API credential accessors for the model gateway."""

import os
from typing import Optional, Protocol

OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
OPENAI_SECRET_NAME = "openai"


class CredentialProvider(Protocol):
    """Synchronous read of the current API credential."""

    def get_api_key(self) -> str: ...


class SecretStore(Protocol):
    """Key-value secret store (device keychain or equivalent)."""

    def get_secret(self, name: str) -> Optional[str]: ...


class EnvironmentCredentialProvider:
    """Reads the credential from an environment variable (development)."""

    def __init__(self, env_var: str = OPENAI_API_KEY_ENV):
        self.env_var = env_var

    def get_api_key(self) -> str:
        return os.environ.get(self.env_var, "").strip()


class SecretStoreCredentialProvider:
    """Reads the credential from a secret store (production)."""

    def __init__(self, store: SecretStore, name: str = OPENAI_SECRET_NAME):
        self.store = store
        self.name = name

    def get_api_key(self) -> str:
        return self.store.get_secret(self.name) or ""


class StaticCredentialProvider:
    """Fixed credential, mainly for tests and scripts."""

    def __init__(self, api_key: str):
        self._api_key = api_key

    def get_api_key(self) -> str:
        return self._api_key
