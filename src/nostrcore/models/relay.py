"""
Validated Nostr relay URL.

Relay URLs appear as hints inside NIP-19 entities and tags. Validation
follows RFC 3986 (via ``rfc3986``) and requires a ``ws://`` or ``wss://``
scheme with a host. The URL text is kept exactly as given: decoding a
relay hint and encoding it again must reproduce the same bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from ._validation import validate_instance


@dataclass(frozen=True, slots=True)
class Relay:
    """Immutable, validated relay URL.

    Attributes:
        url: The URL exactly as supplied.
        scheme: Lowercased scheme, ``ws`` or ``wss``.
        host: Hostname or IP address (brackets stripped for IPv6).
        port: Explicit port number, or ``None``.

    Raises:
        TypeError: If *url* is not a string.
        ValueError: If the URL is malformed, contains null bytes, or uses a
            scheme other than ``ws``/``wss``.

    Examples:
        ```python
        relay = Relay("wss://relay.damus.io")
        relay.scheme   # 'wss'
        relay.url      # 'wss://relay.damus.io'
        ```
    """

    url: str
    scheme: str = field(init=False)
    host: str = field(init=False)
    port: int | None = field(init=False)

    SCHEMES: ClassVar[tuple[str, ...]] = ("ws", "wss")

    def __post_init__(self) -> None:
        validate_instance(self.url, str, "url")
        if "\x00" in self.url:
            raise ValueError("Relay URL contains null bytes")

        scheme, host, port = self._parse(self.url)
        object.__setattr__(self, "scheme", scheme)
        object.__setattr__(self, "host", host)
        object.__setattr__(self, "port", port)

    @classmethod
    def _parse(cls, raw: str) -> tuple[str, str, int | None]:
        """Validate the URI structure and return ``(scheme, host, port)``.

        The normalized form is used only for validation; the caller keeps
        the original text.
        """
        if raw != raw.strip() or not raw:
            raise ValueError(f"Invalid relay URL: {raw!r}")

        uri = uri_reference(raw).normalize()
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes(*cls.SCHEMES)
            .check_validity_of("scheme", "host", "port", "path")
        )

        try:
            validator.validate(uri)
        except UnpermittedComponentError:
            raise ValueError(f"Invalid relay URL scheme: must be ws or wss, got {raw!r}") from None
        except ValidationError as e:
            raise ValueError(f"Invalid relay URL {raw!r}: {e}") from None

        port = int(uri.port) if uri.port else None
        return uri.scheme, uri.host.strip("[]"), port

    def __str__(self) -> str:
        return self.url


def is_relay_url(value: object) -> bool:
    """Return True when *value* is a valid ``ws``/``wss`` relay URL string."""
    if not isinstance(value, str):
        return False
    try:
        Relay(value)
    except ValueError:
        return False
    return True


def validate_relay_url(value: str) -> str:
    """Return *value* unchanged, raising ``ValueError`` if it is not a relay URL."""
    return Relay(value).url
