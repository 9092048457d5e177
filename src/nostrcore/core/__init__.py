"""Core layer: exceptions, structured logging and configuration.

Every other layer imports from here; ``nostrcore.core`` itself depends only
on the standard library, pydantic and PyYAML.

Attributes:
    NostrCoreError: Base of the exception hierarchy, tagged with
        [ErrorKind][nostrcore.core.exceptions.ErrorKind] and
        [ErrorCode][nostrcore.core.exceptions.ErrorCode].
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][nostrcore.core.logger.Logger].
    CoreConfig: Pydantic configuration root with
        [ValidationLimits][nostrcore.core.config.ValidationLimits] and
        [Nip19Config][nostrcore.core.config.Nip19Config].
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
"""

from .config import DEFAULT_CONFIG, CoreConfig, Nip19Config, ValidationLimits
from .exceptions import (
    ConfigurationError,
    CryptoError,
    EncodingError,
    ErrorCode,
    ErrorKind,
    EventError,
    NostrCoreError,
    ProtocolError,
    ValidationError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs
from .yaml import load_yaml


__all__ = [
    "DEFAULT_CONFIG",
    "ConfigurationError",
    "CoreConfig",
    "CryptoError",
    "EncodingError",
    "ErrorCode",
    "ErrorKind",
    "EventError",
    "Logger",
    "Nip19Config",
    "NostrCoreError",
    "ProtocolError",
    "StructuredFormatter",
    "ValidationError",
    "ValidationLimits",
    "format_kv_pairs",
    "load_yaml",
]
