"""nostrcore exception hierarchy.

Every failure raised by the library is a subclass of
[NostrCoreError][nostrcore.core.exceptions.NostrCoreError] tagged with an
[ErrorKind][nostrcore.core.exceptions.ErrorKind] (the layer that failed) and
an [ErrorCode][nostrcore.core.exceptions.ErrorCode] (what went wrong). Both
are exposed through ``__match_args__`` so callers can dispatch with a
``match`` statement instead of ``isinstance`` chains.

Exception hierarchy:

```text
NostrCoreError (base -- never raised directly)
├── CryptoError          -- malformed keys, signing failures
├── ValidationError      -- events, filters, subscriptions that break the rules
├── EncodingError        -- hex, UTF-8, bech32 and TLV payloads
├── ProtocolError        -- relay wire messages
├── EventError           -- event construction and serialization
└── ConfigurationError   -- config validation, missing keys, bad YAML
```

Examples:
    ```python
    try:
        nip19.decode(value)
    except NostrCoreError as exc:
        match exc:
            case EncodingError(code=ErrorCode.UNKNOWN_PREFIX):
                ...
            case EncodingError():
                ...
    ```

See Also:
    [ValidationResult][nostrcore.protocol.validation.ValidationResult]:
        Collects validation messages without raising; its
        ``raise_for_errors()`` converts them into a
        [ValidationError][nostrcore.core.exceptions.ValidationError].
    [verify_event()][nostrcore.nips.nip01.verify_event]: Fails closed and
        never raises.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Layer in which an error originated."""

    CRYPTO = "crypto"
    VALIDATION = "validation"
    ENCODING = "encoding"
    PROTOCOL = "protocol"
    EVENT = "event"
    CONFIGURATION = "configuration"


class ErrorCode(StrEnum):
    """Machine-readable error codes carried by every exception.

    The string values are stable and safe to log or compare against.
    """

    # Crypto
    INVALID_KEY = "INVALID_KEY"
    SIGNING_FAILED = "SIGNING_FAILED"
    VERIFICATION_FAILED = "VERIFICATION_FAILED"

    # Validation
    INVALID_EVENT = "INVALID_EVENT"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INVALID_FILTER = "INVALID_FILTER"
    INVALID_SUBSCRIPTION = "INVALID_SUBSCRIPTION"

    # Encoding
    INVALID_HEX = "INVALID_HEX"
    INVALID_BECH32 = "INVALID_BECH32"
    UNKNOWN_PREFIX = "UNKNOWN_PREFIX"
    INVALID_TLV = "INVALID_TLV"
    ENCODING_FAILED = "ENCODING_FAILED"

    # Protocol
    INVALID_MESSAGE = "INVALID_MESSAGE"
    UNKNOWN_MESSAGE_TYPE = "UNKNOWN_MESSAGE_TYPE"

    # Event
    EVENT_CREATION_FAILED = "EVENT_CREATION_FAILED"
    EVENT_SERIALIZATION_FAILED = "EVENT_SERIALIZATION_FAILED"

    # Configuration
    INVALID_CONFIG = "INVALID_CONFIG"
    MISSING_KEY = "MISSING_KEY"


class NostrCoreError(Exception):
    """Base exception for all nostrcore errors.

    Never raised directly -- always use a specific subclass. Subclasses
    declare their ``kind`` and a ``default_code`` used when the caller does
    not pass one.

    Attributes:
        kind: Layer in which the error originated.
        code: Machine-readable error code.
        message: Human-readable description, also returned by ``str()``.

    See Also:
        [CryptoError][nostrcore.core.exceptions.CryptoError],
        [ValidationError][nostrcore.core.exceptions.ValidationError],
        [EncodingError][nostrcore.core.exceptions.EncodingError],
        [ProtocolError][nostrcore.core.exceptions.ProtocolError],
        [EventError][nostrcore.core.exceptions.EventError],
        [ConfigurationError][nostrcore.core.exceptions.ConfigurationError].
    """

    __match_args__ = ("kind", "code", "message")

    kind: ClassVar[ErrorKind]
    default_code: ClassVar[ErrorCode]

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else self.default_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, code={self.code.value})"


# ---------------------------------------------------------------------------
# Crypto
# ---------------------------------------------------------------------------


class CryptoError(NostrCoreError):
    """Malformed key material or a failure inside the schnorr primitive.

    See Also:
        [sign_event()][nostrcore.nips.nip01.sign_event]: Raises this on a
            malformed private key.
    """

    kind = ErrorKind.CRYPTO
    default_code = ErrorCode.INVALID_KEY


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class ValidationError(NostrCoreError):
    """An event, filter, or subscription violates the protocol rules.

    Carries every collected message in ``errors``; ``message`` is the
    first one.

    See Also:
        [ValidationResult.raise_for_errors()][nostrcore.protocol.validation.ValidationResult.raise_for_errors]:
            The usual way this exception is produced.
    """

    kind = ErrorKind.VALIDATION
    default_code = ErrorCode.INVALID_EVENT

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        errors: tuple[str, ...] = (),
    ) -> None:
        super().__init__(message, code=code)
        self.errors = errors or (message,)


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


class EncodingError(NostrCoreError):
    """Malformed hex, UTF-8, bech32 or TLV data.

    See Also:
        [nostrcore.utils.encoding][nostrcore.utils.encoding]: Hex and UTF-8
            primitives.
        [nostrcore.nips.nip19][nostrcore.nips.nip19]: Bech32 entity codec.
    """

    kind = ErrorKind.ENCODING
    default_code = ErrorCode.ENCODING_FAILED


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class ProtocolError(NostrCoreError):
    """A relay wire message that cannot be parsed.

    See Also:
        [parse_message()][nostrcore.protocol.messages.parse_message]: Raises
            this for malformed or unknown messages.
    """

    kind = ErrorKind.PROTOCOL
    default_code = ErrorCode.INVALID_MESSAGE


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


class EventError(NostrCoreError):
    """An event could not be built or serialized."""

    kind = ErrorKind.EVENT
    default_code = ErrorCode.EVENT_CREATION_FAILED


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(NostrCoreError):
    """Invalid or missing configuration (YAML, env vars, CLI flags).

    See Also:
        [load_yaml()][nostrcore.core.yaml.load_yaml]: YAML loading function
            whose output feeds the configuration models.
        [CoreConfig][nostrcore.core.config.CoreConfig]: Top-level
            configuration model.
    """

    kind = ErrorKind.CONFIGURATION
    default_code = ErrorCode.INVALID_CONFIG
