"""Pure frozen dataclasses for Nostr events, filters, relays and wire messages.

The models layer is the foundation of the package. It has no dependencies
on any other nostrcore package and performs no I/O; apart from ``rfc3986``
for relay URL parsing it uses only the standard library. Every model uses
``@dataclass(frozen=True, slots=True)`` and checks field types in
``__post_init__`` so malformed instances never escape the constructor.

Attributes:
    Event: NIP-01 event with wire conversion, tag helpers and kind
        classification.
    Filter: Subscription filter with ``#x`` tag constraints.
    Subscription: Subscription id plus its ordered filters.
    Relay: Validated ``ws``/``wss`` relay URL.
    RelayMessage: Union of the seven wire message variants.

Note:
    Models use ``object.__setattr__`` in ``__post_init__`` to store
    converted values on frozen dataclasses; this runs during ``__init__``
    before the instance is visible to callers.
"""

from .constants import (
    EVENT_ID_BYTES,
    EVENT_KIND_MAX,
    PRIVATE_KEY_BYTES,
    PUBKEY_BYTES,
    SIGNATURE_BYTES,
    EventKind,
    KindRange,
    MessageType,
    TagName,
    TlvType,
    kind_range,
)
from .event import Event
from .filter import Filter, Subscription
from .message import (
    AuthMessage,
    CloseMessage,
    EoseMessage,
    EventMessage,
    NoticeMessage,
    OkMessage,
    RelayMessage,
    ReqMessage,
)
from .relay import Relay, is_relay_url, validate_relay_url


__all__ = [
    "EVENT_ID_BYTES",
    "EVENT_KIND_MAX",
    "PRIVATE_KEY_BYTES",
    "PUBKEY_BYTES",
    "SIGNATURE_BYTES",
    "AuthMessage",
    "CloseMessage",
    "EoseMessage",
    "Event",
    "EventKind",
    "EventMessage",
    "Filter",
    "KindRange",
    "MessageType",
    "NoticeMessage",
    "OkMessage",
    "Relay",
    "RelayMessage",
    "ReqMessage",
    "Subscription",
    "TagName",
    "TlvType",
    "is_relay_url",
    "kind_range",
    "validate_relay_url",
]
