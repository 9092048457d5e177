"""Signing key loading from environment variables.

Parses a private key given either as ``nsec1...`` (bech32) or as 64 hex
characters through ``nostr_sdk.Keys.parse`` and exposes it in the hex form
the rest of the library works with.

Warning:
    Private keys must never be stored in configuration files or logged.
    Only the *name* of the environment variable is part of the config.

Examples:
    ```python
    import os

    os.environ["PRIVATE_KEY"] = "nsec1..."  # pragma: allowlist secret
    config = KeysConfig()
    signed = sign_event(event, config.private_key_hex)
    ```
"""

from __future__ import annotations

import os
from typing import Any

from nostr_sdk import Keys, NostrSdkError
from pydantic import BaseModel, Field, model_validator

from nostrcore.core.exceptions import ConfigurationError, ErrorCode


ENV_PRIVATE_KEY = "PRIVATE_KEY"  # pragma: allowlist secret  # Default env var name


def parse_keys(value: str) -> Keys:
    """Parse an ``nsec1`` or hex private key.

    Raises:
        ConfigurationError: ``INVALID_CONFIG`` if the value is not a valid key.
    """
    try:
        return Keys.parse(value.strip())
    except NostrSdkError as e:
        raise ConfigurationError(f"Invalid private key: {e}") from e


def load_keys_from_env(env_var: str) -> Keys:
    """Load Nostr keys from an environment variable.

    Args:
        env_var: Name of the environment variable containing the private key.

    Returns:
        A ``nostr_sdk.Keys`` instance holding the secret and derived public key.

    Raises:
        ConfigurationError: ``MISSING_KEY`` if the variable is unset or empty,
            ``INVALID_CONFIG`` if its value is not a valid key.
    """
    value = os.getenv(env_var)

    if not value or not value.strip():
        raise ConfigurationError(
            f"{env_var} environment variable is required. Generate one with: nostrcore keygen",
            code=ErrorCode.MISSING_KEY,
        )

    return parse_keys(value)


def keys_to_hex(keys: Keys) -> tuple[str, str]:
    """Return ``(private_key_hex, public_key_hex)`` for *keys*."""
    return keys.secret_key().to_hex(), keys.public_key().to_hex()


class KeysConfig(BaseModel):
    """Pydantic model that auto-loads a signing key from the environment.

    Attributes:
        keys_env: Environment variable name for the private key.
        keys: Loaded ``nostr_sdk.Keys`` instance.

    Warning:
        The ``keys`` field contains a live private key. Do not serialize this
        model. ``arbitrary_types_allowed`` is required because
        ``nostr_sdk.Keys`` is an FFI type.
    """

    model_config = {"arbitrary_types_allowed": True}

    keys_env: str = Field(
        default=ENV_PRIVATE_KEY,
        min_length=1,
        description="Environment variable name for private key",
    )
    keys: Keys = Field(description="Keys loaded from keys_env (required)")

    @model_validator(mode="before")
    @classmethod
    def _load_keys_from_env(cls, data: Any) -> Any:
        """Populate ``keys`` from the environment variable when not given."""
        if isinstance(data, dict) and "keys" not in data:
            env_var = data.get("keys_env", ENV_PRIVATE_KEY)
            data = {**data, "keys": load_keys_from_env(env_var)}
        return data

    @property
    def private_key_hex(self) -> str:
        return self.keys.secret_key().to_hex()

    @property
    def public_key_hex(self) -> str:
        return self.keys.public_key().to_hex()
