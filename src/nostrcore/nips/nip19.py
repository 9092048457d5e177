"""NIP-19 bech32 entity codec.

Converts keys, event ids and composite references to and from the
human-shareable ``npub1...``/``nevent1...`` forms.

Bare entities (``npub``, ``nsec``, ``note``) carry exactly 32 raw bytes.
TLV entities (``nprofile``, ``nevent``, ``naddr``, ``nrelay``) carry a flat
sequence of ``(type, length, value)`` records with single-byte type and
length fields:

| type | meaning | value |
|---|---|---|
| 0 | pubkey / event id / author pubkey / relay URL | raw bytes or UTF-8 |
| 1 | relay hint, repeatable | UTF-8 URL |
| 2 | author pubkey | 32 raw bytes |
| 3 | kind | 4-byte big-endian unsigned |
| 4 | identifier | UTF-8 |

Records are written in the order 0, 1..., 2, 3, 4. The decoder scans
linearly, skips record types it does not know, and fails when a declared
length runs past the end of the payload.

The bech32 checksum and 5-bit regrouping come from the ``bech32`` package;
strings up to [Nip19Config.max_length][nostrcore.core.config.Nip19Config]
characters (1000 by default) are accepted because TLV entities outgrow the
90 character BIP-173 limit.

Examples:
    ```python
    npub = npub_encode("7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e")
    entity = decode(npub)
    entity.type   # Nip19Type.NPUB
    entity.data   # '7e7e9c42...'
    ```
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from bech32 import CHARSET, bech32_encode, bech32_verify_checksum, convertbits

from nostrcore.core.config import DEFAULT_CONFIG, Nip19Config
from nostrcore.core.exceptions import EncodingError, ErrorCode
from nostrcore.core.logger import Logger
from nostrcore.models.constants import (
    EVENT_ID_BYTES,
    PRIVATE_KEY_BYTES,
    PUBKEY_BYTES,
    TlvType,
)
from nostrcore.models.relay import is_relay_url
from nostrcore.utils.encoding import bytes_to_hex, require_hex, utf8_decode, utf8_encode


logger = Logger(__name__)

_MAX_TLV_VALUE = 255
_KIND_WIDTH = 4
_KIND_MAX = 2 ** (8 * _KIND_WIDTH) - 1

_INVALID_BECH32 = "Invalid bech32 string"


class Nip19Type(StrEnum):
    """Human-readable prefixes of the seven NIP-19 entities."""

    NPUB = "npub"
    NSEC = "nsec"
    NOTE = "note"
    NPROFILE = "nprofile"
    NEVENT = "nevent"
    NADDR = "naddr"
    NRELAY = "nrelay"


_BARE_SIZES: dict[Nip19Type, int] = {
    Nip19Type.NPUB: PUBKEY_BYTES,
    Nip19Type.NSEC: PRIVATE_KEY_BYTES,
    Nip19Type.NOTE: EVENT_ID_BYTES,
}

# TLV record types each entity understands; anything else is skipped.
_ACCEPTED_TLV: dict[Nip19Type, frozenset[int]] = {
    Nip19Type.NPROFILE: frozenset({TlvType.SPECIAL, TlvType.RELAY}),
    Nip19Type.NEVENT: frozenset({TlvType.SPECIAL, TlvType.RELAY, TlvType.AUTHOR, TlvType.KIND}),
    Nip19Type.NADDR: frozenset(TlvType),
    Nip19Type.NRELAY: frozenset({TlvType.SPECIAL}),
}


@dataclass(frozen=True, slots=True)
class Nip19Entity:
    """A decoded NIP-19 entity.

    Attributes:
        type: Entity prefix.
        data: Main value: lowercase hex for every entity except ``nrelay``,
            where it is the relay URL. For ``naddr`` it is the author pubkey.
        relays: Relay hints in encoded order.
        author: Author pubkey hex (TLV type 2), if present.
        kind: Event kind (TLV type 3), if present.
        identifier: ``d`` tag value (``naddr`` only).
    """

    type: Nip19Type
    data: str
    relays: tuple[str, ...] = ()
    author: str | None = None
    kind: int | None = None
    identifier: str | None = None


# =============================================================================
# Bech32 layer
# =============================================================================


def _to_bech32(prefix: Nip19Type, payload: bytes, config: Nip19Config) -> str:
    words = convertbits(payload, 8, 5, True)
    if words is None:
        raise EncodingError("Cannot convert payload to 5-bit words")
    encoded = bech32_encode(prefix.value, words)
    if len(encoded) > config.max_length:
        raise EncodingError(
            f"Encoded {prefix.value} is {len(encoded)} characters, "
            f"exceeds limit of {config.max_length}",
            code=ErrorCode.INVALID_BECH32,
        )
    return encoded


def _from_bech32(value: str, config: Nip19Config) -> tuple[str, bytes]:
    if len(value) > config.max_length:
        raise EncodingError(
            f"{_INVALID_BECH32}: longer than {config.max_length} characters",
            code=ErrorCode.INVALID_BECH32,
        )
    # bech32_decode() caps input at 90 characters, so the checksum is checked here.
    if any(not 33 <= ord(c) <= 126 for c in value) or value not in (value.lower(), value.upper()):
        raise EncodingError(_INVALID_BECH32, code=ErrorCode.INVALID_BECH32)
    value = value.lower()
    pos = value.rfind("1")
    if pos < 1 or pos + 7 > len(value) or any(c not in CHARSET for c in value[pos + 1 :]):
        raise EncodingError(_INVALID_BECH32, code=ErrorCode.INVALID_BECH32)
    hrp = value[:pos]
    words = [CHARSET.find(c) for c in value[pos + 1 :]]
    if not bech32_verify_checksum(hrp, words):
        raise EncodingError(f"{_INVALID_BECH32}: bad checksum", code=ErrorCode.INVALID_BECH32)
    data = convertbits(words[:-6], 5, 8, False)
    if data is None:
        raise EncodingError(f"{_INVALID_BECH32}: bad padding", code=ErrorCode.INVALID_BECH32)
    return hrp, bytes(data)


# =============================================================================
# TLV layer
# =============================================================================


def _tlv(record_type: TlvType, value: bytes) -> bytes:
    if len(value) > _MAX_TLV_VALUE:
        raise EncodingError(
            f"TLV value for type {int(record_type)} is {len(value)} bytes, "
            f"exceeds {_MAX_TLV_VALUE}",
            code=ErrorCode.INVALID_TLV,
        )
    return bytes((record_type, len(value))) + value


def _relay_records(relays: Iterable[str], config: Nip19Config) -> bytes:
    hints = list(relays)
    if config.max_relay_hints is not None:
        hints = hints[: config.max_relay_hints]
    records = b""
    for url in hints:
        if not is_relay_url(url):
            raise EncodingError(f"Invalid relay hint: {url!r}", code=ErrorCode.INVALID_TLV)
        records += _tlv(TlvType.RELAY, utf8_encode(url))
    return records


def _kind_record(kind: int) -> bytes:
    if isinstance(kind, bool) or not isinstance(kind, int) or not 0 <= kind <= _KIND_MAX:
        raise EncodingError(f"Invalid kind: {kind!r}", code=ErrorCode.INVALID_TLV)
    return _tlv(TlvType.KIND, kind.to_bytes(_KIND_WIDTH, "big"))


def _parse_tlv(payload: bytes) -> list[tuple[int, bytes]]:
    """Split a TLV payload into ``(type, value)`` records."""
    records: list[tuple[int, bytes]] = []
    offset = 0
    while offset < len(payload):
        if offset + 2 > len(payload):
            raise EncodingError("Truncated TLV record header", code=ErrorCode.INVALID_TLV)
        record_type, length = payload[offset], payload[offset + 1]
        start = offset + 2
        end = start + length
        if end > len(payload):
            raise EncodingError(
                f"TLV record type {record_type} declares {length} bytes "
                f"but only {len(payload) - start} remain",
                code=ErrorCode.INVALID_TLV,
            )
        records.append((record_type, payload[start:end]))
        offset = end
    return records


def _hex_field(value: bytes, n_bytes: int, name: str) -> str:
    if len(value) != n_bytes:
        raise EncodingError(
            f"Invalid {name}: expected {n_bytes} bytes, got {len(value)}",
            code=ErrorCode.INVALID_TLV,
        )
    return bytes_to_hex(value)


def _relay_field(value: bytes) -> str:
    url = utf8_decode(value)
    if not is_relay_url(url):
        raise EncodingError(f"Invalid relay URL: {url!r}", code=ErrorCode.INVALID_TLV)
    return url


def _decode_tlv(entity_type: Nip19Type, payload: bytes) -> Nip19Entity:
    accepted = _ACCEPTED_TLV[entity_type]
    special: bytes | None = None
    relays: list[str] = []
    author: str | None = None
    kind: int | None = None
    identifier: str | None = None

    for record_type, value in _parse_tlv(payload):
        if record_type not in accepted:
            logger.debug("tlv_unknown_type_skipped", entity=entity_type.value, type=record_type)
            continue
        if record_type == TlvType.SPECIAL:
            if special is None:
                special = value
        elif record_type == TlvType.RELAY:
            relays.append(_relay_field(value))
        elif record_type == TlvType.AUTHOR:
            if author is None:
                author = _hex_field(value, PUBKEY_BYTES, "author")
        elif record_type == TlvType.KIND:
            if not 1 <= len(value) <= _KIND_WIDTH:
                raise EncodingError(
                    f"Invalid kind: expected 1 to {_KIND_WIDTH} bytes, got {len(value)}",
                    code=ErrorCode.INVALID_TLV,
                )
            if kind is None:
                kind = int.from_bytes(value, "big")
        elif record_type == TlvType.IDENTIFIER and identifier is None:
            identifier = utf8_decode(value)

    if special is None:
        raise EncodingError(
            f"{entity_type.value} is missing its TLV type 0 record", code=ErrorCode.INVALID_TLV
        )

    if entity_type is Nip19Type.NRELAY:
        data = _relay_field(special)
    elif entity_type is Nip19Type.NEVENT:
        data = _hex_field(special, EVENT_ID_BYTES, "event id")
    else:
        data = _hex_field(special, PUBKEY_BYTES, "pubkey")

    if entity_type is Nip19Type.NADDR:
        if kind is None:
            raise EncodingError("naddr is missing its kind", code=ErrorCode.INVALID_TLV)
        if identifier is None:
            raise EncodingError("naddr is missing its identifier", code=ErrorCode.INVALID_TLV)

    return Nip19Entity(
        type=entity_type,
        data=data,
        relays=tuple(relays),
        author=author,
        kind=kind,
        identifier=identifier,
    )


# =============================================================================
# Encoders
# =============================================================================


def _encode_bare(prefix: Nip19Type, value: str, config: Nip19Config | None) -> str:
    size = _BARE_SIZES[prefix]
    payload = bytes.fromhex(require_hex(value, size, prefix.value))
    return _to_bech32(prefix, payload, config or DEFAULT_CONFIG.nip19)


def npub_encode(pubkey: str, *, config: Nip19Config | None = None) -> str:
    """Encode a 32-byte public key as ``npub1...``."""
    return _encode_bare(Nip19Type.NPUB, pubkey, config)


def nsec_encode(private_key: str, *, config: Nip19Config | None = None) -> str:
    """Encode a 32-byte private key as ``nsec1...``."""
    return _encode_bare(Nip19Type.NSEC, private_key, config)


def note_encode(event_id: str, *, config: Nip19Config | None = None) -> str:
    """Encode a 32-byte event id as ``note1...``."""
    return _encode_bare(Nip19Type.NOTE, event_id, config)


def nprofile_encode(
    pubkey: str,
    relays: Iterable[str] = (),
    *,
    config: Nip19Config | None = None,
) -> str:
    """Encode a profile reference: pubkey plus relay hints."""
    config = config or DEFAULT_CONFIG.nip19
    payload = _tlv(TlvType.SPECIAL, bytes.fromhex(require_hex(pubkey, PUBKEY_BYTES, "pubkey")))
    payload += _relay_records(relays, config)
    return _to_bech32(Nip19Type.NPROFILE, payload, config)


def nevent_encode(
    event_id: str,
    relays: Iterable[str] = (),
    author: str | None = None,
    kind: int | None = None,
    *,
    config: Nip19Config | None = None,
) -> str:
    """Encode an event reference: id, relay hints, optional author and kind."""
    config = config or DEFAULT_CONFIG.nip19
    payload = _tlv(
        TlvType.SPECIAL, bytes.fromhex(require_hex(event_id, EVENT_ID_BYTES, "event id"))
    )
    payload += _relay_records(relays, config)
    if author is not None:
        payload += _tlv(
            TlvType.AUTHOR, bytes.fromhex(require_hex(author, PUBKEY_BYTES, "author"))
        )
    if kind is not None:
        payload += _kind_record(kind)
    return _to_bech32(Nip19Type.NEVENT, payload, config)


def naddr_encode(
    pubkey: str,
    kind: int,
    identifier: str,
    relays: Iterable[str] = (),
    *,
    config: Nip19Config | None = None,
) -> str:
    """Encode an addressable event reference: author pubkey, kind and ``d`` identifier."""
    config = config or DEFAULT_CONFIG.nip19
    payload = _tlv(TlvType.SPECIAL, bytes.fromhex(require_hex(pubkey, PUBKEY_BYTES, "pubkey")))
    payload += _relay_records(relays, config)
    payload += _kind_record(kind)
    payload += _tlv(TlvType.IDENTIFIER, utf8_encode(identifier))
    return _to_bech32(Nip19Type.NADDR, payload, config)


def nrelay_encode(url: str, *, config: Nip19Config | None = None) -> str:
    """Encode a relay URL as ``nrelay1...`` (TLV type 0, UTF-8)."""
    if not is_relay_url(url):
        raise EncodingError(f"Invalid relay URL: {url!r}", code=ErrorCode.INVALID_TLV)
    payload = _tlv(TlvType.SPECIAL, utf8_encode(url))
    return _to_bech32(Nip19Type.NRELAY, payload, config or DEFAULT_CONFIG.nip19)


def encode(entity: Nip19Entity, *, config: Nip19Config | None = None) -> str:
    """Encode any [Nip19Entity][nostrcore.nips.nip19.Nip19Entity].

    Raises:
        EncodingError: If a field is malformed or missing for the entity type.
    """
    match entity.type:
        case Nip19Type.NPUB | Nip19Type.NSEC | Nip19Type.NOTE:
            return _encode_bare(entity.type, entity.data, config)
        case Nip19Type.NPROFILE:
            return nprofile_encode(entity.data, entity.relays, config=config)
        case Nip19Type.NEVENT:
            return nevent_encode(
                entity.data, entity.relays, entity.author, entity.kind, config=config
            )
        case Nip19Type.NADDR:
            if entity.kind is None or entity.identifier is None:
                raise EncodingError(
                    "naddr requires kind and identifier", code=ErrorCode.INVALID_TLV
                )
            return naddr_encode(
                entity.data, entity.kind, entity.identifier, entity.relays, config=config
            )
        case Nip19Type.NRELAY:
            return nrelay_encode(entity.data, config=config)
    raise EncodingError(f"Unknown prefix: {entity.type}", code=ErrorCode.UNKNOWN_PREFIX)


# =============================================================================
# Decoder
# =============================================================================


def decode(value: str, *, config: Nip19Config | None = None) -> Nip19Entity:
    """Decode any NIP-19 string.

    Raises:
        EncodingError: ``INVALID_BECH32`` with message "Invalid bech32
            string" when there is no separator or the checksum/characters are
            bad; ``UNKNOWN_PREFIX`` with message "Unknown prefix: <prefix>"
            when the string is bech32-shaped but not a Nostr entity;
            ``INVALID_HEX``/``INVALID_TLV`` for malformed payloads.
    """
    config = config or DEFAULT_CONFIG.nip19
    if not isinstance(value, str) or "1" not in value:
        raise EncodingError(_INVALID_BECH32, code=ErrorCode.INVALID_BECH32)

    prefix = value[: value.rfind("1")].lower()
    try:
        entity_type = Nip19Type(prefix)
    except ValueError:
        raise EncodingError(f"Unknown prefix: {prefix}", code=ErrorCode.UNKNOWN_PREFIX) from None

    _, payload = _from_bech32(value, config)

    if entity_type in _BARE_SIZES:
        size = _BARE_SIZES[entity_type]
        if len(payload) != size:
            raise EncodingError(
                f"Invalid {entity_type.value}: expected {size} bytes, got {len(payload)}",
                code=ErrorCode.INVALID_HEX,
            )
        return Nip19Entity(type=entity_type, data=bytes_to_hex(payload))

    # Older encoders wrote the bare URL without a TLV wrapper.
    if entity_type is Nip19Type.NRELAY and payload and payload[0] != TlvType.SPECIAL:
        return Nip19Entity(type=entity_type, data=_relay_field(payload))

    return _decode_tlv(entity_type, payload)


def decode_as(
    value: str, expected: Nip19Type, *, config: Nip19Config | None = None
) -> Nip19Entity:
    """Decode *value* and check that it is an *expected* entity.

    Raises:
        EncodingError: ``UNKNOWN_PREFIX`` if the entity type differs.
    """
    entity = decode(value, config=config)
    if entity.type is not expected:
        raise EncodingError(
            f"Expected {expected.value}, got {entity.type.value}", code=ErrorCode.UNKNOWN_PREFIX
        )
    return entity
