"""Unit tests for models.constants module."""

from enum import IntEnum, StrEnum

import pytest

from nostrcore.models.constants import (
    EVENT_ID_BYTES,
    EVENT_KIND_MAX,
    PUBKEY_BYTES,
    SIGNATURE_BYTES,
    EventKind,
    KindRange,
    MessageType,
    TagName,
    TlvType,
    kind_range,
)


class TestSizes:
    """Byte size constants."""

    def test_sizes(self) -> None:
        assert PUBKEY_BYTES == 32
        assert EVENT_ID_BYTES == 32
        assert SIGNATURE_BYTES == 64
        assert EVENT_KIND_MAX == 65_535


class TestEventKind:
    """Tests for EventKind IntEnum."""

    def test_is_int_enum(self) -> None:
        """EventKind values compare equal to plain ints."""
        assert isinstance(EventKind.TEXT_NOTE, IntEnum)
        assert EventKind.TEXT_NOTE == 1

    def test_selected_values(self) -> None:
        assert EventKind.SET_METADATA == 0
        assert EventKind.CONTACTS == 3
        assert EventKind.ENCRYPTED_DIRECT_MESSAGE == 4
        assert EventKind.CHANNEL_MESSAGE == 42
        assert EventKind.CLIENT_AUTH == 22_242
        assert EventKind.LONG_FORM_CONTENT == 30_023


class TestKindRange:
    """Tests for kind_range()."""

    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            (0, KindRange.REPLACEABLE),
            (3, KindRange.REPLACEABLE),
            (10_000, KindRange.REPLACEABLE),
            (19_999, KindRange.REPLACEABLE),
            (1, KindRange.REGULAR),
            (2, KindRange.REGULAR),
            (44, KindRange.REGULAR),
            (1_000, KindRange.REGULAR),
            (9_999, KindRange.REGULAR),
            (20_000, KindRange.EPHEMERAL),
            (29_999, KindRange.EPHEMERAL),
            (30_000, KindRange.PARAMETERIZED_REPLACEABLE),
            (39_999, KindRange.PARAMETERIZED_REPLACEABLE),
            (45, KindRange.CUSTOM),
            (999, KindRange.CUSTOM),
            (40_000, KindRange.CUSTOM),
            (65_535, KindRange.CUSTOM),
        ],
    )
    def test_boundaries(self, kind: int, expected: KindRange) -> None:
        assert kind_range(kind) is expected

    def test_is_str_enum(self) -> None:
        assert isinstance(KindRange.REGULAR, StrEnum)
        assert KindRange.PARAMETERIZED_REPLACEABLE == "parameterized_replaceable"


class TestTagName:
    """Tests for TagName StrEnum."""

    def test_values(self) -> None:
        assert TagName.EVENT == "e"
        assert TagName.PUBKEY == "p"
        assert TagName.IDENTIFIER == "d"
        assert TagName.DELEGATION == "delegation"


class TestMessageType:
    """Tests for MessageType StrEnum."""

    def test_all_values(self) -> None:
        expected = {"EVENT", "REQ", "CLOSE", "NOTICE", "EOSE", "OK", "AUTH"}
        assert {m.value for m in MessageType} == expected

    def test_construct_from_value(self) -> None:
        assert MessageType("EOSE") is MessageType.EOSE

    def test_unknown_value(self) -> None:
        with pytest.raises(ValueError):
            MessageType("COUNT")


class TestTlvType:
    """Tests for TlvType IntEnum."""

    def test_values(self) -> None:
        assert [t.value for t in TlvType] == [0, 1, 2, 3, 4]

    def test_reexported_from_models_init(self) -> None:
        from nostrcore.models import TlvType as ReexportedTlvType

        assert ReexportedTlvType is TlvType
