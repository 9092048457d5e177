"""
Unit tests for nips.nip19 module.

Tests:
- Bare entities (npub, nsec, note) against published vectors
- TLV entities (nprofile, nevent, naddr, nrelay)
- decode() / decode_as() error reporting
- Nip19Config limits
- Malformed TLV payloads built by hand
"""

import pytest
from bech32 import bech32_encode, convertbits

from nostrcore.core.config import Nip19Config
from nostrcore.core.exceptions import EncodingError, ErrorCode
from nostrcore.nips.nip19 import (
    Nip19Entity,
    Nip19Type,
    decode,
    decode_as,
    encode,
    naddr_encode,
    nevent_encode,
    note_encode,
    nprofile_encode,
    npub_encode,
    nrelay_encode,
    nsec_encode,
)
from tests.conftest import HI_EVENT_ID, PUBLIC_KEY_ONE


# =============================================================================
# Test Vectors
# =============================================================================

NPUB_HEX = "7e7e9c42a91bfef19fa929e5fda1b72e0ebc1a4c1141673e2794234d86addf4e"
NPUB = "npub10elfcs4fr0l0r8af98jlmgdh9c8tcxjvz9qkw038js35mp4dma8qzvjptg"
NSEC_HEX = (
    "67dea2ed018072d675f5415ecfaed7d2597555e202d85b3d65ea4e58d2d92ffa"  # pragma: allowlist secret
)
NSEC = (
    "nsec1vl029mgpspedva04g90vltkh6fvh240zqtv9k0t9af8935ke9laqsnlfe5"  # pragma: allowlist secret
)
NPROFILE_HEX = "3bf0c63fcb93463407af97a5e5ee64fa883d107ef9e558472c4eb9aaaefa459d"
NPROFILE = (
    "nprofile1qqsrhuxx8l9ex335q7he0f09aej04zpazpl0ne2cgukyawd24mayt8gpp4mhxue69uhhytnc"
    "9e3k7mgpz4mhxue69uhkg6nzv9ejuumpv34kytnrdaksjlyr9p"
)
NPROFILE_RELAYS = ("wss://r.x.com", "wss://djbas.sadkb.com")

RELAY = "wss://relay.example.com"


def _bech32(prefix: str, payload: bytes) -> str:
    """Encode an arbitrary payload, bypassing the entity encoders."""
    return bech32_encode(prefix, convertbits(payload, 8, 5, True))


def _tlv(record_type: int, value: bytes) -> bytes:
    return bytes((record_type, len(value))) + value


# =============================================================================
# Bare Entity Tests
# =============================================================================


class TestBareEntities:
    """npub / nsec / note."""

    def test_npub_vector(self) -> None:
        assert npub_encode(NPUB_HEX) == NPUB
        entity = decode(NPUB)
        assert entity == Nip19Entity(type=Nip19Type.NPUB, data=NPUB_HEX)

    def test_nsec_vector(self) -> None:
        assert nsec_encode(NSEC_HEX) == NSEC
        assert decode(NSEC).data == NSEC_HEX

    def test_note_round_trip(self) -> None:
        note = note_encode(HI_EVENT_ID)
        assert note.startswith("note1")
        assert decode(note) == Nip19Entity(type=Nip19Type.NOTE, data=HI_EVENT_ID)

    def test_uppercase_input_encodes_lowercase(self) -> None:
        assert npub_encode(NPUB_HEX.upper()) == NPUB

    def test_uppercase_string_decodes(self) -> None:
        assert decode(NPUB.upper()).data == NPUB_HEX

    @pytest.mark.parametrize("value", ["ab" * 31, "zz" * 32, ""])
    def test_encode_invalid_hex(self, value: str) -> None:
        with pytest.raises(EncodingError, match="Invalid npub") as exc_info:
            npub_encode(value)
        assert exc_info.value.code is ErrorCode.INVALID_HEX

    def test_decode_wrong_payload_size(self) -> None:
        with pytest.raises(EncodingError, match="expected 32 bytes, got 31") as exc_info:
            decode(_bech32("npub", bytes(31)))
        assert exc_info.value.code is ErrorCode.INVALID_HEX


# =============================================================================
# TLV Entity Tests
# =============================================================================


class TestNprofile:
    """nprofile."""

    def test_published_vector(self) -> None:
        entity = decode(NPROFILE)
        assert entity.type is Nip19Type.NPROFILE
        assert entity.data == NPROFILE_HEX
        assert entity.relays == NPROFILE_RELAYS

    def test_encode_matches_vector(self) -> None:
        assert nprofile_encode(NPROFILE_HEX, NPROFILE_RELAYS) == NPROFILE

    def test_no_relays(self) -> None:
        entity = decode(nprofile_encode(PUBLIC_KEY_ONE))
        assert entity.relays == ()

    def test_invalid_relay_hint(self) -> None:
        with pytest.raises(EncodingError, match="Invalid relay hint") as exc_info:
            nprofile_encode(PUBLIC_KEY_ONE, ["https://relay.example.com"])
        assert exc_info.value.code is ErrorCode.INVALID_TLV

    def test_relay_hint_cap(self) -> None:
        config = Nip19Config(max_relay_hints=1)
        encoded = nprofile_encode(NPROFILE_HEX, NPROFILE_RELAYS, config=config)
        assert decode(encoded).relays == NPROFILE_RELAYS[:1]

    def test_unknown_tlv_type_skipped(self) -> None:
        payload = (
            _tlv(0, bytes.fromhex(PUBLIC_KEY_ONE))
            + _tlv(9, b"future")
            + _tlv(1, RELAY.encode())
        )
        entity = decode(_bech32("nprofile", payload))
        assert entity.data == PUBLIC_KEY_ONE
        assert entity.relays == (RELAY,)


class TestNevent:
    """nevent."""

    def test_round_trip_all_fields(self) -> None:
        encoded = nevent_encode(HI_EVENT_ID, [RELAY], author=PUBLIC_KEY_ONE, kind=1)
        entity = decode(encoded)
        assert entity == Nip19Entity(
            type=Nip19Type.NEVENT,
            data=HI_EVENT_ID,
            relays=(RELAY,),
            author=PUBLIC_KEY_ONE,
            kind=1,
        )

    def test_minimal(self) -> None:
        entity = decode(nevent_encode(HI_EVENT_ID))
        assert entity.author is None
        assert entity.kind is None

    def test_kind_written_as_four_bytes(self) -> None:
        encoded = nevent_encode(HI_EVENT_ID, kind=1)
        payload = _tlv(0, bytes.fromhex(HI_EVENT_ID)) + _tlv(3, b"\x00\x00\x00\x01")
        assert encoded == _bech32("nevent", payload)

    def test_short_kind_accepted(self) -> None:
        payload = _tlv(0, bytes.fromhex(HI_EVENT_ID)) + _tlv(3, b"\x07")
        assert decode(_bech32("nevent", payload)).kind == 7

    @pytest.mark.parametrize("kind", [-1, 2**32, True])
    def test_invalid_kind(self, kind: int) -> None:
        with pytest.raises(EncodingError, match="Invalid kind"):
            nevent_encode(HI_EVENT_ID, kind=kind)

    def test_author_wrong_size(self) -> None:
        payload = _tlv(0, bytes.fromhex(HI_EVENT_ID)) + _tlv(2, bytes(31))
        with pytest.raises(EncodingError, match="Invalid author: expected 32 bytes"):
            decode(_bech32("nevent", payload))


class TestNaddr:
    """naddr."""

    def test_round_trip(self) -> None:
        encoded = naddr_encode(PUBLIC_KEY_ONE, 30_023, "my-article", [RELAY])
        entity = decode(encoded)
        assert entity.type is Nip19Type.NADDR
        assert entity.data == PUBLIC_KEY_ONE
        assert entity.kind == 30_023
        assert entity.identifier == "my-article"
        assert entity.relays == (RELAY,)

    def test_empty_identifier(self) -> None:
        assert decode(naddr_encode(PUBLIC_KEY_ONE, 30_000, "")).identifier == ""

    def test_unicode_identifier(self) -> None:
        assert decode(naddr_encode(PUBLIC_KEY_ONE, 30_000, "café")).identifier == "café"

    def test_missing_kind(self) -> None:
        payload = _tlv(0, bytes.fromhex(PUBLIC_KEY_ONE)) + _tlv(4, b"x")
        with pytest.raises(EncodingError, match="naddr is missing its kind"):
            decode(_bech32("naddr", payload))

    def test_missing_identifier(self) -> None:
        payload = _tlv(0, bytes.fromhex(PUBLIC_KEY_ONE)) + _tlv(3, b"\x00\x00\x75\x27")
        with pytest.raises(EncodingError, match="naddr is missing its identifier"):
            decode(_bech32("naddr", payload))

    def test_identifier_too_long(self) -> None:
        with pytest.raises(EncodingError, match="exceeds 255") as exc_info:
            naddr_encode(PUBLIC_KEY_ONE, 30_000, "x" * 256)
        assert exc_info.value.code is ErrorCode.INVALID_TLV


class TestNrelay:
    """nrelay."""

    def test_round_trip(self) -> None:
        entity = decode(nrelay_encode(RELAY))
        assert entity == Nip19Entity(type=Nip19Type.NRELAY, data=RELAY)

    def test_bare_payload_accepted(self) -> None:
        assert decode(_bech32("nrelay", RELAY.encode())).data == RELAY

    def test_invalid_url(self) -> None:
        with pytest.raises(EncodingError, match="Invalid relay URL"):
            nrelay_encode("relay.example.com")


# =============================================================================
# Generic encode() / decode() Tests
# =============================================================================


class TestEncodeEntity:
    """encode() dispatch."""

    @pytest.mark.parametrize(
        "entity",
        [
            Nip19Entity(type=Nip19Type.NPUB, data=NPUB_HEX),
            Nip19Entity(type=Nip19Type.NPROFILE, data=NPROFILE_HEX, relays=NPROFILE_RELAYS),
            Nip19Entity(type=Nip19Type.NEVENT, data=HI_EVENT_ID, author=PUBLIC_KEY_ONE),
            Nip19Entity(type=Nip19Type.NADDR, data=PUBLIC_KEY_ONE, kind=30_000, identifier="d"),
            Nip19Entity(type=Nip19Type.NRELAY, data=RELAY),
        ],
    )
    def test_decode_inverts_encode(self, entity: Nip19Entity) -> None:
        assert decode(encode(entity)) == entity

    def test_naddr_requires_kind_and_identifier(self) -> None:
        with pytest.raises(EncodingError, match="naddr requires kind and identifier"):
            encode(Nip19Entity(type=Nip19Type.NADDR, data=PUBLIC_KEY_ONE))


class TestDecodeErrors:
    """decode() failure reporting."""

    @pytest.mark.parametrize("value", ["", "npub", "nonsense", 42])
    def test_no_separator(self, value: object) -> None:
        with pytest.raises(EncodingError, match="Invalid bech32 string") as exc_info:
            decode(value)  # type: ignore[arg-type]
        assert exc_info.value.code is ErrorCode.INVALID_BECH32

    def test_unknown_prefix(self) -> None:
        with pytest.raises(EncodingError, match="Unknown prefix: lnbc") as exc_info:
            decode(_bech32("lnbc", bytes(32)))
        assert exc_info.value.code is ErrorCode.UNKNOWN_PREFIX

    def test_bad_checksum(self) -> None:
        tampered = NPUB[:-1] + ("q" if NPUB[-1] != "q" else "p")
        with pytest.raises(EncodingError, match="Invalid bech32 string") as exc_info:
            decode(tampered)
        assert exc_info.value.code is ErrorCode.INVALID_BECH32

    def test_mixed_case(self) -> None:
        with pytest.raises(EncodingError, match="Invalid bech32 string"):
            decode(NPUB[:10] + NPUB[10:].upper())

    def test_character_outside_charset(self) -> None:
        with pytest.raises(EncodingError, match="Invalid bech32 string"):
            decode("npub1" + "b" * 58)

    def test_longer_than_limit(self) -> None:
        config = Nip19Config(max_length=90)
        with pytest.raises(EncodingError, match="longer than 90 characters"):
            decode(NPROFILE, config=config)

    def test_truncated_tlv_value(self) -> None:
        payload = bytes((0, 32)) + bytes(10)
        with pytest.raises(
            EncodingError, match="TLV record type 0 declares 32 bytes but only 10 remain"
        ) as exc_info:
            decode(_bech32("nprofile", payload))
        assert exc_info.value.code is ErrorCode.INVALID_TLV

    def test_truncated_tlv_header(self) -> None:
        payload = _tlv(0, bytes.fromhex(PUBLIC_KEY_ONE)) + b"\x01"
        with pytest.raises(EncodingError, match="Truncated TLV record header"):
            decode(_bech32("nprofile", payload))

    def test_missing_special_record(self) -> None:
        with pytest.raises(EncodingError, match="nprofile is missing its TLV type 0 record"):
            decode(_bech32("nprofile", _tlv(1, RELAY.encode())))


class TestConfigLimits:
    """Nip19Config applied to encoding."""

    def test_encoded_length_limit(self) -> None:
        config = Nip19Config(max_length=90)
        with pytest.raises(EncodingError, match="exceeds limit of 90") as exc_info:
            nprofile_encode(NPROFILE_HEX, NPROFILE_RELAYS, config=config)
        assert exc_info.value.code is ErrorCode.INVALID_BECH32

    def test_max_length_floor(self) -> None:
        with pytest.raises(ValueError):
            Nip19Config(max_length=10)


class TestDecodeAs:
    """decode_as()."""

    def test_matching_type(self) -> None:
        assert decode_as(NPUB, Nip19Type.NPUB).data == NPUB_HEX

    def test_mismatched_type(self) -> None:
        with pytest.raises(EncodingError, match="Expected npub, got nsec") as exc_info:
            decode_as(NSEC, Nip19Type.NPUB)
        assert exc_info.value.code is ErrorCode.UNKNOWN_PREFIX
