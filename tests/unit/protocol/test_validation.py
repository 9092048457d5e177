"""
Unit tests for protocol.validation module.

Tests:
- ValidationResult accessors and raise_for_errors()
- validate_event() structural checks and configurable limits
- validate_signed_event() id and signature checks
- validate_filter() / validate_subscription()
- validate_message() per message type
"""

from dataclasses import replace
from typing import Any

import pytest

from nostrcore.core.config import ValidationLimits
from nostrcore.core.exceptions import ErrorCode, ValidationError
from nostrcore.models.event import Event
from nostrcore.models.filter import Filter, Subscription
from nostrcore.nips.nip01 import compute_event_id, sign_event
from nostrcore.protocol.validation import (
    ValidationResult,
    validate_event,
    validate_filter,
    validate_message,
    validate_signed_event,
    validate_subscription,
)
from tests.conftest import FIXED_TIMESTAMP, HI_EVENT_ID, PRIVATE_KEY_ONE, PUBLIC_KEY_THREE


NOW = FIXED_TIMESTAMP


def _wire_event(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "pubkey": "",
        "created_at": FIXED_TIMESTAMP,
        "kind": 1,
        "tags": [],
        "content": "hi",
    }
    data.update(overrides)
    return data


# =============================================================================
# ValidationResult Tests
# =============================================================================


class TestValidationResult:
    """ValidationResult."""

    def test_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert result.error is None
        assert bool(result) is True
        result.raise_for_errors()

    def test_invalid(self) -> None:
        result = ValidationResult(("first", "second"))
        assert not result.is_valid
        assert result.error == "first"
        assert not result

    def test_raise_for_errors(self) -> None:
        result = ValidationResult(("first", "second"))
        with pytest.raises(ValidationError, match="first") as exc_info:
            result.raise_for_errors()
        assert exc_info.value.errors == ("first", "second")
        assert exc_info.value.code is ErrorCode.INVALID_EVENT

    def test_raise_with_code(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ValidationResult(("bad",)).raise_for_errors(ErrorCode.INVALID_FILTER)
        assert exc_info.value.code is ErrorCode.INVALID_FILTER


# =============================================================================
# validate_event() Tests
# =============================================================================


class TestValidateEvent:
    """validate_event() structural checks."""

    def test_unsigned_model_is_valid(self, unsigned_event: Event) -> None:
        assert validate_event(unsigned_event, now=NOW).is_valid

    def test_signed_model_is_valid(self, signed_event: Event) -> None:
        assert validate_event(signed_event, now=NOW).is_valid

    def test_wire_mapping(self) -> None:
        assert validate_event(_wire_event(), now=NOW).is_valid

    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"kind": -1}, "Invalid event kind"),
            ({"kind": "1"}, "Invalid event kind"),
            ({"kind": True}, "Invalid event kind"),
            ({"content": None}, "Invalid event content"),
            ({"tags": "e"}, "Invalid event tags"),
            ({"tags": [["e", 1]]}, "Invalid tag at index 0"),
            ({"tags": [[], "x"]}, "Invalid tag at index 1"),
            ({"created_at": -5}, "Invalid event timestamp"),
            ({"created_at": 1.5}, "Invalid event timestamp"),
            ({"pubkey": "abc"}, "Invalid public key format"),
            ({"pubkey": 0}, "Invalid public key format"),
            ({"pubkey": []}, "Invalid public key format"),
            ({"pubkey": False}, "Invalid public key format"),
            ({"pubkey": None}, "Invalid public key format"),
        ],
    )
    def test_field_errors(self, overrides: dict[str, Any], message: str) -> None:
        result = validate_event(_wire_event(**overrides), now=NOW)
        assert not result.is_valid
        assert result.error is not None
        assert result.error.startswith(message)

    def test_missing_fields_all_reported(self) -> None:
        result = validate_event({}, now=NOW)
        assert len(result.errors) == 4

    def test_content_length_limit(self) -> None:
        limits = ValidationLimits(max_content_length=3)
        assert validate_event(_wire_event(content="abc"), limits=limits, now=NOW).is_valid
        result = validate_event(_wire_event(content="abcd"), limits=limits, now=NOW)
        assert result.error == "Event content too long: 4 code units (max 3)"

    def test_content_length_counts_utf16_code_units(self) -> None:
        emoji = "\U0001F600"
        assert validate_event(_wire_event(content=emoji * 32_000), now=NOW).is_valid
        result = validate_event(_wire_event(content=emoji * 32_001), now=NOW)
        assert result.error == "Event content too long: 64002 code units (max 64000)"

    def test_content_length_bmp_characters_count_once(self) -> None:
        limits = ValidationLimits(max_content_length=2)
        assert validate_event(_wire_event(content="\u00e9\u4e2d"), limits=limits, now=NOW).is_valid
        result = validate_event(_wire_event(content="\U0001F600a"), limits=limits, now=NOW)
        assert result.error == "Event content too long: 3 code units (max 2)"

    def test_tag_count_limit(self) -> None:
        limits = ValidationLimits(max_tags=1)
        result = validate_event(_wire_event(tags=[["a"], ["b"]]), limits=limits, now=NOW)
        assert result.error == "Too many tags: 2 (max 1)"

    def test_future_drift(self) -> None:
        limits = ValidationLimits(max_timestamp_drift=60)
        assert validate_event(_wire_event(created_at=NOW + 60), limits=limits, now=NOW).is_valid
        result = validate_event(_wire_event(created_at=NOW + 61), limits=limits, now=NOW)
        assert result.error == "Event timestamp too far in the future: 61s ahead (max 60s)"

    def test_old_events_allowed(self) -> None:
        assert validate_event(_wire_event(created_at=0), now=NOW).is_valid

    def test_not_an_object(self) -> None:
        result = validate_event("event")  # type: ignore[arg-type]
        assert result.errors == ("Invalid event: must be an object",)

    def test_never_raises_on_odd_input(self) -> None:
        result = validate_event({"tags": [None], "kind": None, "created_at": "x"}, now=NOW)
        assert not result.is_valid


# =============================================================================
# validate_signed_event() Tests
# =============================================================================


class TestValidateSignedEvent:
    """validate_signed_event() adds id and signature checks."""

    def test_valid(self, signed_event: Event) -> None:
        assert validate_signed_event(signed_event, now=NOW).is_valid

    def test_valid_mapping(self, signed_event_dict: dict[str, Any]) -> None:
        assert validate_signed_event(signed_event_dict, now=NOW).is_valid

    def test_unsigned(self, unsigned_event: Event) -> None:
        result = validate_signed_event(unsigned_event, now=NOW)
        assert result.errors == (
            "Invalid public key format: expected 64 hex characters",
            "Invalid event ID format: expected 64 hex characters",
            "Invalid signature format: expected 128 hex characters",
        )

    def test_id_mismatch(self, signed_event: Event) -> None:
        result = validate_signed_event(replace(signed_event, content="changed"), now=NOW)
        assert result.errors == ("Invalid event ID: does not match event content",)

    def test_bad_signature(self, signed_event: Event) -> None:
        tampered = replace(signed_event, content="changed")
        tampered = replace(tampered, id=compute_event_id(tampered))
        assert validate_signed_event(tampered, now=NOW).errors == ("Invalid signature",)

    def test_signature_from_other_key(self, signed_event: Event) -> None:
        forged = replace(signed_event, pubkey=PUBLIC_KEY_THREE)
        forged = replace(forged, id=compute_event_id(forged))
        assert validate_signed_event(forged, now=NOW).error == "Invalid signature"

    def test_structure_reported_before_signature(self, signed_event: Event) -> None:
        result = validate_signed_event(replace(signed_event, kind=-1), now=NOW)
        assert result.errors == ("Invalid event kind: must be a non-negative integer",)

    def test_uppercase_hex_accepted(self, signed_event: Event) -> None:
        upper = replace(signed_event, id=HI_EVENT_ID.upper(), sig=signed_event.sig.upper())
        assert validate_signed_event(upper, now=NOW).is_valid

    def test_future_event_rejected_before_verification(self) -> None:
        event = sign_event(Event(kind=1, content="x", created_at=NOW + 10_000), PRIVATE_KEY_ONE)
        result = validate_signed_event(event, now=NOW)
        assert result.error is not None
        assert result.error.startswith("Event timestamp too far in the future")


# =============================================================================
# Filter and Subscription Tests
# =============================================================================


class TestValidateFilter:
    """validate_filter()."""

    def test_empty_filter_valid(self) -> None:
        assert validate_filter({}).is_valid
        assert validate_filter(Filter()).is_valid

    def test_full_filter_valid(self) -> None:
        data = {
            "ids": ["a" * 64],
            "authors": ["b" * 64],
            "kinds": [0, 1],
            "#e": ["c" * 64],
            "since": 1,
            "until": 2,
            "limit": 10,
            "search": "nostr",
        }
        assert validate_filter(data).is_valid

    @pytest.mark.parametrize(
        ("data", "message"),
        [
            ({"ids": "abc"}, "Filter ids must be an array of strings"),
            ({"authors": [1]}, "Filter authors must be an array of strings"),
            ({"kinds": [-1]}, "Filter kinds must be an array of non-negative integers"),
            ({"kinds": ["1"]}, "Filter kinds must be an array of non-negative integers"),
            ({"#": ["x"]}, "Filter tag constraint must name a tag"),
            ({"#p": "x"}, "Filter #p must be an array of strings"),
            ({"limit": -1}, "Filter limit must be a non-negative integer"),
            ({"since": "yesterday"}, "Filter since must be a non-negative integer"),
            ({"search": 5}, "Filter search must be a string"),
            ({"since": 10, "until": 5}, "Filter since must be less than or equal to until"),
        ],
    )
    def test_errors(self, data: dict[str, Any], message: str) -> None:
        assert validate_filter(data).errors == (message,)

    def test_since_equal_until(self) -> None:
        assert validate_filter(Filter(since=5, until=5)).is_valid

    def test_model_ordering_checked(self) -> None:
        assert not validate_filter(Filter(since=10, until=5)).is_valid

    def test_not_an_object(self) -> None:
        result = validate_filter([])  # type: ignore[arg-type]
        assert result.error == "Invalid filter: must be an object"


class TestValidateSubscription:
    """validate_subscription()."""

    def test_valid(self) -> None:
        assert validate_subscription(Subscription("sub", (Filter(kinds=(1,)),))).is_valid

    def test_valid_mapping(self) -> None:
        assert validate_subscription({"id": "sub", "filters": [{"kinds": [1]}]}).is_valid

    def test_empty_id(self) -> None:
        result = validate_subscription(Subscription("", (Filter(),)))
        assert result.errors == ("Subscription ID must be a non-empty string",)

    def test_no_filters(self) -> None:
        result = validate_subscription(Subscription("sub"))
        assert result.errors == ("Subscription must contain at least one filter",)

    def test_filter_errors_prefixed(self) -> None:
        result = validate_subscription({"id": "sub", "filters": [{}, {"limit": -1}]})
        assert result.errors == ("filters[1]: Filter limit must be a non-negative integer",)

    def test_not_an_object(self) -> None:
        assert not validate_subscription(None).is_valid  # type: ignore[arg-type]


# =============================================================================
# validate_message() Tests
# =============================================================================


class TestValidateMessage:
    """validate_message()."""

    def test_event_client_form(self, signed_event_dict: dict[str, Any]) -> None:
        assert validate_message(["EVENT", signed_event_dict], now=NOW).is_valid

    def test_event_relay_form(self, signed_event_dict: dict[str, Any]) -> None:
        assert validate_message(["EVENT", "sub", signed_event_dict], now=NOW).is_valid

    def test_event_with_bad_signature(self, signed_event_dict: dict[str, Any]) -> None:
        tampered = {**signed_event_dict, "content": "changed"}
        result = validate_message(["EVENT", tampered], now=NOW)
        assert result.error == "Invalid event ID: does not match event content"

    def test_event_missing(self) -> None:
        assert validate_message(["EVENT"]).error == "EVENT message must contain an event"

    def test_event_subscription_id_type(self, signed_event_dict: dict[str, Any]) -> None:
        result = validate_message(["EVENT", 1, signed_event_dict], now=NOW)
        assert result.errors == ("EVENT subscription ID must be a string",)

    @pytest.mark.parametrize(
        "message",
        [
            ["REQ", "sub", {"kinds": [1]}],
            ["REQ", "sub", {}, {"authors": ["a" * 64]}],
            ["CLOSE", "sub"],
            ["EOSE", "sub"],
            ["NOTICE", "rate limited"],
            ["OK", HI_EVENT_ID, True, ""],
            ["OK", HI_EVENT_ID, False, "blocked: spam"],
            ["AUTH", "challenge-string"],
        ],
    )
    def test_valid_messages(self, message: list[Any]) -> None:
        assert validate_message(message).is_valid

    def test_auth_event(self, signed_event_dict: dict[str, Any]) -> None:
        assert validate_message(["AUTH", signed_event_dict], now=NOW).is_valid

    @pytest.mark.parametrize(
        ("message", "error"),
        [
            ([], "Invalid message: must be a non-empty array"),
            ("EOSE", "Invalid message: must be a non-empty array"),
            (["COUNT", "sub", {}], "Unknown message type: COUNT"),
            (["REQ", "sub"], "REQ message missing subscription ID or filters"),
            (
                ["REQ", "sub", {"limit": "x"}],
                "filters[0]: Filter limit must be a non-negative integer",
            ),
            (["CLOSE"], "CLOSE message must contain exactly a subscription ID"),
            (["EOSE", 1], "EOSE message must contain exactly a subscription ID"),
            (["NOTICE"], "NOTICE message must contain a message string"),
            (["OK", HI_EVENT_ID, True], "OK message must contain event ID, status and message"),
            (["OK", "abc", True, ""], "OK event ID must be 64 hex characters"),
            (["OK", HI_EVENT_ID, "true", ""], "OK status must be a boolean"),
            (["OK", HI_EVENT_ID, True, None], "OK message must be a string"),
            (["AUTH"], "AUTH message must contain a challenge or an event"),
            (["AUTH", 5], "AUTH challenge must be a string"),
        ],
    )
    def test_invalid_messages(self, message: Any, error: str) -> None:
        assert validate_message(message).error == error
