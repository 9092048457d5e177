"""Shared constants for the models layer.

Enumerations and sizes used across model, codec and protocol modules.
Placing them here keeps the models layer free of upward imports.

See Also:
    [Event][nostrcore.models.event.Event]: Uses
        [kind_range()][nostrcore.models.constants.kind_range] for its
        classification properties.
    [nostrcore.nips.nip19][]: Uses [TlvType][nostrcore.models.constants.TlvType].
    [nostrcore.protocol.messages][]: Uses
        [MessageType][nostrcore.models.constants.MessageType].
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


PUBKEY_BYTES = 32
EVENT_ID_BYTES = 32
PRIVATE_KEY_BYTES = 32
SIGNATURE_BYTES = 64

EVENT_KIND_MAX = 65_535


class EventKind(IntEnum):
    """Well-known Nostr event kinds.

    Attributes:
        SET_METADATA: Kind 0 -- user profile metadata (NIP-01).
        TEXT_NOTE: Kind 1 -- short text note (NIP-01).
        RECOMMEND_RELAY: Kind 2 -- legacy relay recommendation (deprecated).
        CONTACTS: Kind 3 -- contact list with relay hints (NIP-02).
        ENCRYPTED_DIRECT_MESSAGE: Kind 4 -- encrypted direct message (NIP-04).
        DELETE: Kind 5 -- event deletion request (NIP-09).
        REPOST: Kind 6 -- repost of a text note (NIP-18).
        REACTION: Kind 7 -- reaction to an event (NIP-25).
        BADGE_AWARD: Kind 8 -- badge award (NIP-58).
        CHANNEL_CREATE: Kind 40 -- public chat channel creation (NIP-28).
        CHANNEL_METADATA: Kind 41 -- channel metadata update (NIP-28).
        CHANNEL_MESSAGE: Kind 42 -- channel message (NIP-28).
        CHANNEL_HIDE_MESSAGE: Kind 43 -- hide a channel message (NIP-28).
        CHANNEL_MUTE_USER: Kind 44 -- mute a channel user (NIP-28).
        CLIENT_AUTH: Kind 22242 -- relay authentication event (NIP-42).
        LONG_FORM_CONTENT: Kind 30023 -- long-form article (NIP-23).
    """

    SET_METADATA = 0
    TEXT_NOTE = 1
    RECOMMEND_RELAY = 2
    CONTACTS = 3
    ENCRYPTED_DIRECT_MESSAGE = 4
    DELETE = 5
    REPOST = 6
    REACTION = 7
    BADGE_AWARD = 8
    CHANNEL_CREATE = 40
    CHANNEL_METADATA = 41
    CHANNEL_MESSAGE = 42
    CHANNEL_HIDE_MESSAGE = 43
    CHANNEL_MUTE_USER = 44
    CLIENT_AUTH = 22_242
    LONG_FORM_CONTENT = 30_023


class KindRange(StrEnum):
    """Storage semantics of an event kind (NIP-01).

    Attributes:
        REGULAR: Stored by relays; every event is kept.
        REPLACEABLE: Only the latest event per (pubkey, kind) is kept.
        EPHEMERAL: Not stored by relays.
        PARAMETERIZED_REPLACEABLE: Only the latest event per
            (pubkey, kind, ``d`` tag) is kept.
        CUSTOM: Outside every range NIP-01 defines.
    """

    REGULAR = "regular"
    REPLACEABLE = "replaceable"
    EPHEMERAL = "ephemeral"
    PARAMETERIZED_REPLACEABLE = "parameterized_replaceable"
    CUSTOM = "custom"


def kind_range(kind: int) -> KindRange:
    """Classify an event kind into its NIP-01 range."""
    if kind in (EventKind.SET_METADATA, EventKind.CONTACTS) or 10_000 <= kind < 20_000:
        return KindRange.REPLACEABLE
    if 20_000 <= kind < 30_000:
        return KindRange.EPHEMERAL
    if 30_000 <= kind < 40_000:
        return KindRange.PARAMETERIZED_REPLACEABLE
    if 1_000 <= kind < 10_000 or 1 <= kind <= 44:
        return KindRange.REGULAR
    return KindRange.CUSTOM


class TagName(StrEnum):
    """Standard single- and multi-letter tag names."""

    EVENT = "e"
    PUBKEY = "p"
    ADDRESS = "a"
    IDENTIFIER = "d"
    KIND = "k"
    REFERENCE = "r"
    DELEGATION = "delegation"
    EXPIRATION = "expiration"
    SUBJECT = "subject"
    CONTENT_WARNING = "content-warning"
    NONCE = "nonce"


class MessageType(StrEnum):
    """Relay wire message type tags (first element of every message)."""

    EVENT = "EVENT"
    REQ = "REQ"
    CLOSE = "CLOSE"
    NOTICE = "NOTICE"
    EOSE = "EOSE"
    OK = "OK"
    AUTH = "AUTH"


class TlvType(IntEnum):
    """TLV record types inside NIP-19 bech32 payloads.

    Attributes:
        SPECIAL: Main value; its meaning depends on the entity prefix.
        RELAY: Relay URL hint, repeatable.
        AUTHOR: 32-byte author public key.
        KIND: Event kind as a big-endian unsigned integer.
        IDENTIFIER: ``d`` tag value of an addressable event (naddr).
    """

    SPECIAL = 0
    RELAY = 1
    AUTHOR = 2
    KIND = 3
    IDENTIFIER = 4
