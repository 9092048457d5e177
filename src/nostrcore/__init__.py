r"""nostrcore -- data-integrity core of the Nostr protocol.

Canonical event serialization and id derivation, BIP-340 signing and
verification, the validation engine, the NIP-19 bech32 entity codec and the
relay wire message protocol. No network I/O.

Architecture follows a layered dependency structure where imports flow
strictly downward:

```text
             cli (__main__)
                  |
        protocol     nips          Validation, relay messages, NIP-01/19/26
             \      /
              utils                Hex/UTF-8, secp256k1 adapter, keys
                |
              core                 Exceptions, logging, configuration
                |
             models                Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Pure frozen dataclasses. Depends only on stdlib and rfc3986.
    core: Exceptions, structured logging, YAML and pydantic configuration.
    utils: Byte/hex primitives, schnorr adapter, key loading.
    nips: NIP-01 codec and signing, NIP-19 entities, NIP-26 delegation,
        event builders.
    protocol: Validation engine and relay message parse/format.

Note:
    For lightweight usage, import directly from subpackages::

        from nostrcore.models import Event
        from nostrcore.nips import sign_event

    Top-level imports (``from nostrcore import Event``) use lazy loading
    and resolve on first access.
"""

import importlib
import logging
from importlib.metadata import version as _get_version


__version__ = _get_version("nostrcore")

# Library logging stays silent until the host application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CoreConfig",
    "Event",
    "EventKind",
    "Filter",
    "Logger",
    "Nip19Entity",
    "NostrCoreError",
    "Relay",
    "Subscription",
    "ValidationResult",
    "compute_event_id",
    "create_event",
    "decode",
    "encode",
    "encode_message",
    "parse_message",
    "serialize_event",
    "sign_event",
    "validate_event",
    "validate_filter",
    "validate_message",
    "validate_signed_event",
    "validate_subscription",
    "verify_event",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "CoreConfig": ("nostrcore.core", "CoreConfig"),
    "Logger": ("nostrcore.core", "Logger"),
    "NostrCoreError": ("nostrcore.core", "NostrCoreError"),
    "Event": ("nostrcore.models", "Event"),
    "EventKind": ("nostrcore.models", "EventKind"),
    "Filter": ("nostrcore.models", "Filter"),
    "Relay": ("nostrcore.models", "Relay"),
    "Subscription": ("nostrcore.models", "Subscription"),
    "Nip19Entity": ("nostrcore.nips", "Nip19Entity"),
    "compute_event_id": ("nostrcore.nips", "compute_event_id"),
    "create_event": ("nostrcore.nips", "create_event"),
    "decode": ("nostrcore.nips", "decode"),
    "encode": ("nostrcore.nips", "encode"),
    "serialize_event": ("nostrcore.nips", "serialize_event"),
    "sign_event": ("nostrcore.nips", "sign_event"),
    "verify_event": ("nostrcore.nips", "verify_event"),
    "ValidationResult": ("nostrcore.protocol", "ValidationResult"),
    "encode_message": ("nostrcore.protocol", "encode_message"),
    "parse_message": ("nostrcore.protocol", "parse_message"),
    "validate_event": ("nostrcore.protocol", "validate_event"),
    "validate_filter": ("nostrcore.protocol", "validate_filter"),
    "validate_message": ("nostrcore.protocol", "validate_message"),
    "validate_signed_event": ("nostrcore.protocol", "validate_signed_event"),
    "validate_subscription": ("nostrcore.protocol", "validate_subscription"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'nostrcore' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
