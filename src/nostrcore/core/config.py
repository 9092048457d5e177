"""
Pydantic configuration models for nostrcore.

The library works without any configuration: every model has defaults that
match the protocol limits. Applications that want to tighten or relax them
load a YAML file through [CoreConfig.from_yaml()][nostrcore.core.config.CoreConfig.from_yaml]
or build the models directly.

Examples:
    ```yaml
    validation:
      max_content_length: 32000
      max_timestamp_drift: 900
    nip19:
      max_relay_hints: 3
    ```

    ```python
    config = CoreConfig.from_yaml("nostrcore.yaml")
    result = validate_event(event, limits=config.validation)
    ```

See Also:
    [load_yaml()][nostrcore.core.yaml.load_yaml]: Safe YAML loading used by
        ``from_yaml()``.
    [KeysConfig][nostrcore.utils.keys.KeysConfig]: Signing key loading, kept
        separate because it touches the environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .yaml import load_yaml


class ValidationLimits(BaseModel):
    """Bounds enforced by the event validation engine.

    Attributes:
        max_content_length: Maximum length of ``content`` in UTF-16 code units.
        max_tags: Maximum number of tags on a single event.
        max_timestamp_drift: How many seconds ``created_at`` may lie in the
            future relative to the validating clock.

    See Also:
        [validate_event()][nostrcore.protocol.validation.validate_event]:
            Consumer of these limits.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_content_length: int = Field(
        default=64_000, ge=0, description="Maximum content length in UTF-16 code units"
    )
    max_tags: int = Field(default=2_000, ge=0, description="Maximum number of tags")
    max_timestamp_drift: int = Field(
        default=3_600, ge=0, description="Allowed future drift of created_at in seconds"
    )


class Nip19Config(BaseModel):
    """Bech32 entity codec settings.

    Attributes:
        max_length: Maximum accepted length of a bech32 string. NIP-19 TLV
            entities exceed the 90 character limit of BIP-173.
        max_relay_hints: Upper bound on relay hints written by the encoders.
            ``None`` writes every hint supplied.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_length: int = Field(default=1_000, ge=90, description="Maximum bech32 string length")
    max_relay_hints: int | None = Field(
        default=None, ge=0, description="Maximum relay hints emitted when encoding"
    )


class CoreConfig(BaseModel):
    """Top-level configuration grouping every tunable of the library."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    validation: ValidationLimits = Field(default_factory=ValidationLimits)
    nip19: Nip19Config = Field(default_factory=Nip19Config)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build and validate a configuration from a plain dictionary.

        Raises:
            ConfigurationError: If a field is unknown or out of range.
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Load a configuration file and validate it.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigurationError: If the YAML or its content is invalid.
        """
        return cls.from_dict(load_yaml(config_path))


DEFAULT_CONFIG = CoreConfig()
