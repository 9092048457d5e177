"""Event, filter, subscription and wire message validation.

Validators collect every violation they find into a
[ValidationResult][nostrcore.protocol.validation.ValidationResult] and
never raise. Callers that prefer exceptions call
[raise_for_errors()][nostrcore.protocol.validation.ValidationResult.raise_for_errors].

Every validator accepts either the model object or its wire-shaped
mapping, so raw relay input can be checked before it is converted into
models (whose constructors only enforce types).

Examples:
    ```python
    result = validate_signed_event(event)
    if not result.is_valid:
        logger.warning("rejected_event", reason=result.error)
    ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from time import time
from typing import Any

from nostrcore.core.config import DEFAULT_CONFIG, ValidationLimits
from nostrcore.core.exceptions import ErrorCode, ValidationError
from nostrcore.core.logger import Logger
from nostrcore.models.constants import (
    EVENT_ID_BYTES,
    PUBKEY_BYTES,
    SIGNATURE_BYTES,
    MessageType,
)
from nostrcore.models.event import Event
from nostrcore.models.filter import TAG_FILTER_PREFIX, Filter, Subscription
from nostrcore.nips.nip01 import compute_event_id
from nostrcore.utils.crypto import verify_schnorr
from nostrcore.utils.encoding import is_hex


logger = Logger(__name__)

_FILTER_LIST_FIELDS = ("ids", "authors")
_FILTER_INT_FIELDS = ("since", "until", "limit")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validation: valid when ``errors`` is empty.

    Attributes:
        errors: Every violation found, in check order.
    """

    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error(self) -> str | None:
        """The first violation, or None when valid."""
        return self.errors[0] if self.errors else None

    def __bool__(self) -> bool:
        return self.is_valid

    def raise_for_errors(self, code: ErrorCode = ErrorCode.INVALID_EVENT) -> None:
        """Raise [ValidationError][nostrcore.core.exceptions.ValidationError] if invalid."""
        if self.errors:
            raise ValidationError(self.errors[0], code=code, errors=self.errors)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)


def _utf16_length(text: str) -> int:
    # Wire clients bound content in UTF-16 code units; astral characters count twice.
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


def _event_fields(event: Event | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(event, Event):
        return event.to_dict()
    return event


# =============================================================================
# Events
# =============================================================================


def _event_errors(
    data: Mapping[str, Any],
    limits: ValidationLimits,
    now: int,
    *,
    require_pubkey: bool,
) -> list[str]:
    errors: list[str] = []

    kind = data.get("kind")
    if not _is_int(kind) or kind < 0:
        errors.append("Invalid event kind: must be a non-negative integer")

    content = data.get("content")
    if not isinstance(content, str):
        errors.append("Invalid event content: must be a string")
    elif (length := _utf16_length(content)) > limits.max_content_length:
        errors.append(
            f"Event content too long: {length} code units "
            f"(max {limits.max_content_length})"
        )

    tags = data.get("tags")
    if not _is_sequence(tags):
        errors.append("Invalid event tags: must be an array")
    else:
        if len(tags) > limits.max_tags:
            errors.append(f"Too many tags: {len(tags)} (max {limits.max_tags})")
        for i, tag in enumerate(tags):
            if not _is_sequence(tag) or not all(isinstance(v, str) for v in tag):
                errors.append(f"Invalid tag at index {i}: must be an array of strings")

    created_at = data.get("created_at")
    if not _is_int(created_at) or created_at < 0:
        errors.append("Invalid event timestamp: must be a non-negative integer")
    elif created_at > now + limits.max_timestamp_drift:
        errors.append(
            f"Event timestamp too far in the future: {created_at - now}s ahead "
            f"(max {limits.max_timestamp_drift}s)"
        )

    pubkey = data.get("pubkey", "")
    if require_pubkey or pubkey != "":
        if not is_hex(pubkey, PUBKEY_BYTES):
            errors.append("Invalid public key format: expected 64 hex characters")

    return errors


def validate_event(
    event: Event | Mapping[str, Any],
    *,
    limits: ValidationLimits | None = None,
    now: int | None = None,
) -> ValidationResult:
    """Validate the structure of an event (signed or not).

    Checks, all run independently:

    1. ``kind`` is a non-negative integer.
    2. ``content`` is a string within ``max_content_length`` UTF-16 code units.
    3. ``tags`` is an array of at most ``max_tags`` string arrays.
    4. ``created_at`` is not more than ``max_timestamp_drift`` seconds ahead
       of *now*.
    5. ``pubkey``, when present, is 64 hex characters.

    Args:
        event: Event model or wire mapping.
        limits: Bounds to enforce; protocol defaults when omitted.
        now: Reference Unix time; the current time when omitted.
    """
    limits = limits or DEFAULT_CONFIG.validation
    now = int(time()) if now is None else now
    if not isinstance(event, Event | Mapping):
        return ValidationResult(("Invalid event: must be an object",))
    return ValidationResult(
        tuple(_event_errors(_event_fields(event), limits, now, require_pubkey=False))
    )


def validate_signed_event(
    event: Event | Mapping[str, Any],
    *,
    limits: ValidationLimits | None = None,
    now: int | None = None,
) -> ValidationResult:
    """Validate structure, identifier and signature of a signed event.

    Runs every [validate_event()][nostrcore.protocol.validation.validate_event]
    check, requires ``pubkey``, and checks the ``id`` and ``sig`` formats.
    Only when all of those pass is the id recomputed and the signature
    verified, so a malformed event is never reported as merely having a bad
    signature.
    """
    limits = limits or DEFAULT_CONFIG.validation
    now = int(time()) if now is None else now
    if not isinstance(event, Event | Mapping):
        return ValidationResult(("Invalid event: must be an object",))

    data = _event_fields(event)
    errors = _event_errors(data, limits, now, require_pubkey=True)

    event_id = data.get("id")
    sig = data.get("sig")
    if not is_hex(event_id, EVENT_ID_BYTES):
        errors.append("Invalid event ID format: expected 64 hex characters")
    if not is_hex(sig, SIGNATURE_BYTES):
        errors.append("Invalid signature format: expected 128 hex characters")
    if errors:
        return ValidationResult(tuple(errors))

    expected = compute_event_id(data)
    if expected != event_id.lower():
        logger.debug("event_id_mismatch", expected=expected, actual=event_id)
        return ValidationResult(("Invalid event ID: does not match event content",))

    if not verify_schnorr(sig.lower(), bytes.fromhex(expected), data["pubkey"].lower()):
        return ValidationResult(("Invalid signature",))

    return ValidationResult()


# =============================================================================
# Filters and subscriptions
# =============================================================================


def _filter_errors(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    for name in _FILTER_LIST_FIELDS:
        value = data.get(name)
        if value is not None and (
            not _is_sequence(value) or not all(isinstance(v, str) for v in value)
        ):
            errors.append(f"Filter {name} must be an array of strings")

    kinds = data.get("kinds")
    if kinds is not None and (
        not _is_sequence(kinds) or not all(_is_int(k) and k >= 0 for k in kinds)
    ):
        errors.append("Filter kinds must be an array of non-negative integers")

    for key, value in data.items():
        if isinstance(key, str) and key.startswith(TAG_FILTER_PREFIX):
            if len(key) < 2:
                errors.append("Filter tag constraint must name a tag")
            elif not _is_sequence(value) or not all(isinstance(v, str) for v in value):
                errors.append(f"Filter {key} must be an array of strings")

    for name in _FILTER_INT_FIELDS:
        value = data.get(name)
        if value is not None and (not _is_int(value) or value < 0):
            errors.append(f"Filter {name} must be a non-negative integer")

    search = data.get("search")
    if search is not None and not isinstance(search, str):
        errors.append("Filter search must be a string")

    since, until = data.get("since"), data.get("until")
    if _is_int(since) and _is_int(until) and since > until:
        errors.append("Filter since must be less than or equal to until")

    return errors


def validate_filter(filter_: Filter | Mapping[str, Any]) -> ValidationResult:
    """Validate field types of a filter and the ``since <= until`` ordering."""
    if isinstance(filter_, Filter):
        return ValidationResult(tuple(_filter_errors(filter_.to_dict())))
    if not isinstance(filter_, Mapping):
        return ValidationResult(("Invalid filter: must be an object",))
    return ValidationResult(tuple(_filter_errors(filter_)))


def validate_subscription(
    subscription: Subscription | Mapping[str, Any],
) -> ValidationResult:
    """Validate a subscription id and every filter it carries.

    Filter violations are reported with a ``filters[i]: `` prefix.
    """
    if isinstance(subscription, Subscription):
        sub_id: Any = subscription.id
        filters: Any = subscription.filters
    elif isinstance(subscription, Mapping):
        sub_id = subscription.get("id")
        filters = subscription.get("filters")
    else:
        return ValidationResult(("Invalid subscription: must be an object",))

    errors: list[str] = []
    if not isinstance(sub_id, str) or not sub_id:
        errors.append("Subscription ID must be a non-empty string")
    if not _is_sequence(filters) or not filters:
        errors.append("Subscription must contain at least one filter")
    else:
        for i, item in enumerate(filters):
            errors.extend(f"filters[{i}]: {e}" for e in validate_filter(item).errors)
    return ValidationResult(tuple(errors))


# =============================================================================
# Wire messages
# =============================================================================


def validate_message(
    message: Sequence[Any],
    *,
    limits: ValidationLimits | None = None,
    now: int | None = None,
) -> ValidationResult:
    """Validate a deserialized wire message array.

    Checks the type tag and arity per message type; events inside ``EVENT``
    and client ``AUTH`` messages go through
    [validate_signed_event()][nostrcore.protocol.validation.validate_signed_event]
    and ``REQ`` filters through
    [validate_filter()][nostrcore.protocol.validation.validate_filter].
    """
    if not _is_sequence(message) or not message:
        return ValidationResult(("Invalid message: must be a non-empty array",))

    tag, payload = message[0], list(message[1:])
    try:
        msg_type = MessageType(tag)
    except ValueError:
        return ValidationResult((f"Unknown message type: {tag}",))

    errors: list[str] = []
    match msg_type:
        case MessageType.EVENT:
            if not payload or len(payload) > 2:
                errors.append("EVENT message must contain an event")
            else:
                if len(payload) == 2 and not isinstance(payload[0], str):
                    errors.append("EVENT subscription ID must be a string")
                errors.extend(
                    validate_signed_event(payload[-1], limits=limits, now=now).errors
                )
        case MessageType.REQ:
            if len(payload) < 2 or not isinstance(payload[0], str):
                errors.append("REQ message missing subscription ID or filters")
            else:
                for i, item in enumerate(payload[1:]):
                    errors.extend(f"filters[{i}]: {e}" for e in validate_filter(item).errors)
        case MessageType.CLOSE | MessageType.EOSE:
            if len(payload) != 1 or not isinstance(payload[0], str):
                errors.append(f"{msg_type} message must contain exactly a subscription ID")
        case MessageType.NOTICE:
            if len(payload) != 1 or not isinstance(payload[0], str):
                errors.append("NOTICE message must contain a message string")
        case MessageType.OK:
            if len(payload) != 3:
                errors.append("OK message must contain event ID, status and message")
            else:
                if not is_hex(payload[0], EVENT_ID_BYTES):
                    errors.append("OK event ID must be 64 hex characters")
                if not isinstance(payload[1], bool):
                    errors.append("OK status must be a boolean")
                if not isinstance(payload[2], str):
                    errors.append("OK message must be a string")
        case MessageType.AUTH:
            if len(payload) != 1:
                errors.append("AUTH message must contain a challenge or an event")
            elif isinstance(payload[0], Mapping):
                errors.extend(validate_signed_event(payload[0], limits=limits, now=now).errors)
            elif not isinstance(payload[0], str):
                errors.append("AUTH challenge must be a string")

    return ValidationResult(tuple(errors))
