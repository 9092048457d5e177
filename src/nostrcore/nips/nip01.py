"""NIP-01 canonical serialization, id derivation and the signature binding.

The event id is the SHA-256 of the UTF-8 JSON array::

    [0, <pubkey>, <created_at>, <kind>, <tags>, <content>]

rendered without whitespace and with non-ASCII characters emitted raw.
Python's ``json.dumps`` with ``separators=(",", ":")`` and
``ensure_ascii=False`` escapes ``"``, ``\\``, control characters and the
short escapes (``\\n``, ``\\t``...) the same way JavaScript's
``JSON.stringify`` does, so ids match other implementations byte for byte.

Signing returns a new [Event][nostrcore.models.event.Event]; verification
recomputes the id before checking the schnorr signature and never raises.

See Also:
    [nostrcore.utils.crypto][]: The BIP-340 primitive adapter.
    [validate_signed_event()][nostrcore.protocol.validation.validate_signed_event]:
        Full structural and cryptographic validation.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace
from time import time
from typing import Any

from nostrcore.core.exceptions import ErrorCode, EventError
from nostrcore.core.logger import Logger
from nostrcore.models.constants import EVENT_ID_BYTES, PUBKEY_BYTES, SIGNATURE_BYTES
from nostrcore.models.event import Event
from nostrcore.utils.crypto import derive_public_key, sha256, sign_schnorr, verify_schnorr
from nostrcore.utils.encoding import is_hex


logger = Logger(__name__)

EventLike = Event | Mapping[str, Any]

# Lone surrogates cannot be encoded as UTF-8; escape them like JSON.stringify does.
_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def _as_event(event: EventLike) -> Event:
    if isinstance(event, Event):
        return event
    try:
        return Event.from_dict(event)
    except (TypeError, ValueError) as e:
        raise EventError(
            f"Cannot serialize event: {e}", code=ErrorCode.EVENT_SERIALIZATION_FAILED
        ) from e


def serialize_event(event: EventLike) -> str:
    """Return the canonical NIP-01 serialization of *event*.

    Accepts an [Event][nostrcore.models.event.Event] or a wire-shaped
    mapping. ``id`` and ``sig`` are ignored.

    Raises:
        EventError: ``EVENT_SERIALIZATION_FAILED`` if a mapping is missing
            fields or has fields of the wrong type.
    """
    ev = _as_event(event)
    payload = [0, ev.pubkey, ev.created_at, ev.kind, [list(tag) for tag in ev.tags], ev.content]
    text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    return _LONE_SURROGATE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)


def compute_event_id(event: EventLike) -> str:
    """Return the event id: lowercase hex SHA-256 of the canonical serialization."""
    return sha256(serialize_event(event).encode("utf-8")).hex()


def create_event(
    kind: int,
    content: str,
    tags: Iterable[Sequence[str]] = (),
    created_at: int | None = None,
    pubkey: str = "",
) -> Event:
    """Build an unsigned event; ``created_at`` defaults to the current time.

    Raises:
        EventError: ``EVENT_CREATION_FAILED`` if a field has the wrong type.
    """
    try:
        return Event(
            kind=kind,
            content=content,
            tags=tuple(tags),
            created_at=int(time()) if created_at is None else created_at,
            pubkey=pubkey,
        )
    except TypeError as e:
        raise EventError(f"Cannot create event: {e}") from e


def sign_event(
    event: EventLike,
    private_key: str,
    *,
    aux_randomness: bytes | None = None,
) -> Event:
    """Sign *event* and return a new, signed event.

    The ``pubkey`` is derived from *private_key* and overrides any value
    already on the event; ``id`` is then computed over the updated fields
    and signed.

    Args:
        event: The event to sign; not modified.
        private_key: 64 hex character secp256k1 private key.
        aux_randomness: Optional fixed BIP-340 auxiliary randomness, for
            reproducible signatures in tests.

    Raises:
        CryptoError: ``INVALID_KEY`` for a malformed key, ``SIGNING_FAILED``
            if the primitive fails.
        EventError: If a mapping cannot be converted into an event.
    """
    ev = _as_event(event)
    pubkey = derive_public_key(private_key)
    ev = replace(ev, pubkey=pubkey, id=None, sig=None)
    event_id = compute_event_id(ev)
    sig = sign_schnorr(bytes.fromhex(event_id), private_key, aux_randomness)
    logger.debug("event_signed", id=event_id, kind=ev.kind)
    return replace(ev, id=event_id, sig=sig)


def verify_event(event: EventLike) -> bool:
    """Return True if *event*'s id matches its content and its signature verifies.

    Fails closed: malformed input of any kind yields False, never an
    exception.
    """
    try:
        ev = _as_event(event)
    except EventError:
        return False

    if not (
        is_hex(ev.id, EVENT_ID_BYTES)
        and is_hex(ev.sig, SIGNATURE_BYTES)
        and is_hex(ev.pubkey, PUBKEY_BYTES)
    ):
        logger.debug("event_verify_malformed", id=ev.id)
        return False

    assert ev.id is not None and ev.sig is not None  # noqa: S101  # narrowed by is_hex
    expected = compute_event_id(ev)
    if expected != ev.id.lower():
        logger.debug("event_id_mismatch", expected=expected, actual=ev.id)
        return False

    valid = verify_schnorr(ev.sig.lower(), bytes.fromhex(expected), ev.pubkey.lower())
    if not valid:
        logger.debug("schnorr_verify_failed", id=ev.id)
    return valid
