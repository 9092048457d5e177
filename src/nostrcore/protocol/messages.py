"""Relay wire message parsing and formatting (NIP-01, NIP-20, NIP-42).

[parse_message()][nostrcore.protocol.messages.parse_message] turns an
incoming message, given as a deserialized array or as raw text, into one of
the [RelayMessage][nostrcore.models.message.RelayMessage] variants. The
``format_*`` functions build outgoing arrays without validating their
input; run [validate_message()][nostrcore.protocol.validation.validate_message]
first when the values come from untrusted sources.

Examples:
    ```python
    msg = parse_message('["OK","b1a6...",true,""]')
    msg.accepted      # True

    wire = encode_message(format_req("sub1", [{"kinds": [1], "limit": 10}]))
    # '["REQ","sub1",{"kinds":[1],"limit":10}]'
    ```
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from nostrcore.core.exceptions import ErrorCode, ProtocolError
from nostrcore.core.logger import Logger
from nostrcore.models.constants import MessageType
from nostrcore.models.event import Event
from nostrcore.models.filter import Filter, Subscription
from nostrcore.models.message import (
    AuthMessage,
    CloseMessage,
    EoseMessage,
    EventMessage,
    NoticeMessage,
    OkMessage,
    RelayMessage,
    ReqMessage,
)


logger = Logger(__name__)

_STRING_BOOLEANS = {"true": True, "false": False}


# =============================================================================
# Parsing
# =============================================================================


def _split_text(message: str, *, lenient: bool) -> list[Any]:
    try:
        parsed = json.loads(message)
    except json.JSONDecodeError:
        if not lenient:
            raise ProtocolError("Invalid relay message: not valid JSON") from None
        # Fallback for relays that send bare comma-separated values
        if "," not in message:
            raise ProtocolError("Invalid relay message: not an array") from None
        logger.debug("message_comma_fallback", length=len(message))
        return [part.strip() for part in message.split(",")]

    if not isinstance(parsed, list):
        raise ProtocolError("Invalid relay message: not an array")
    return parsed


def _maybe_json(value: Any) -> Any:
    """JSON-parse strings that look like objects, leave everything else alone."""
    if isinstance(value, str) and value.lstrip().startswith("{"):
        try:
            return json.loads(value)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Invalid relay message: malformed JSON object: {e}") from e
    return value


def _to_event(value: Any, msg_type: MessageType) -> Event:
    if isinstance(value, Event):
        return value
    try:
        return Event.from_dict(_maybe_json(value))
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"{msg_type} message has a malformed event: {e}") from e


def _to_filter(value: Any) -> Filter:
    if isinstance(value, Filter):
        return value
    try:
        return Filter.from_dict(_maybe_json(value))
    except TypeError as e:
        raise ProtocolError(f"REQ message has a malformed filter: {e}") from e


def _parse_event(payload: list[Any]) -> EventMessage:
    if not payload:
        raise ProtocolError("EVENT message missing event data")
    if len(payload) == 1:
        return EventMessage(event=_to_event(payload[0], MessageType.EVENT))
    sub_id, raw_event = payload[0], payload[1]
    if not isinstance(sub_id, str):
        raise ProtocolError("EVENT message subscription ID must be a string")
    return EventMessage(
        event=_to_event(raw_event, MessageType.EVENT), subscription_id=sub_id
    )


def _parse_ok(payload: list[Any]) -> OkMessage:
    if not payload:
        raise ProtocolError("OK message missing event ID")
    values = [_STRING_BOOLEANS.get(v, v) if isinstance(v, str) else v for v in payload]
    # The event id itself is never coerced
    values[0] = payload[0]
    return OkMessage(
        event_id=str(values[0]),
        accepted=values[1] if len(values) > 1 else None,
        message=values[2] if len(values) > 2 else None,
    )


def _parse_req(payload: list[Any]) -> ReqMessage:
    if len(payload) < 2 or not isinstance(payload[0], str):
        raise ProtocolError("REQ message missing subscription ID or filters")
    return ReqMessage(
        subscription_id=payload[0], filters=tuple(_to_filter(f) for f in payload[1:])
    )


def _parse_auth(payload: list[Any]) -> AuthMessage:
    if not payload:
        raise ProtocolError("AUTH message missing challenge")
    value = _maybe_json(payload[0])
    if isinstance(value, Mapping):
        return AuthMessage(event=_to_event(value, MessageType.AUTH))
    if not isinstance(value, str):
        raise ProtocolError("AUTH message challenge must be a string")
    return AuthMessage(challenge=value)


def parse_message(message: str | Sequence[Any], *, lenient: bool = True) -> RelayMessage:
    """Parse a wire message into a typed relay message.

    Args:
        message: The deserialized array, or raw text. Text is JSON-parsed
            first.
        lenient: When True, text that is not JSON but contains a comma is
            split on commas as a last resort. Set False to require JSON.

    Raises:
        ProtocolError: ``UNKNOWN_MESSAGE_TYPE`` for an unknown type tag,
            ``INVALID_MESSAGE`` for anything else that cannot be parsed.
    """
    if isinstance(message, str):
        values = _split_text(message, lenient=lenient)
    elif isinstance(message, Sequence) and not isinstance(message, bytes):
        values = list(message)
    else:
        raise ProtocolError("Invalid relay message: not an array")

    if not values:
        raise ProtocolError("Invalid relay message: empty array")

    tag, payload = values[0], values[1:]
    try:
        msg_type = MessageType(tag)
    except ValueError:
        raise ProtocolError(
            f"Unknown message type: {tag}", code=ErrorCode.UNKNOWN_MESSAGE_TYPE
        ) from None

    match msg_type:
        case MessageType.EVENT:
            return _parse_event(payload)
        case MessageType.NOTICE:
            if not payload:
                raise ProtocolError("NOTICE message missing message text")
            return NoticeMessage(message=str(payload[0]))
        case MessageType.OK:
            return _parse_ok(payload)
        case MessageType.REQ:
            return _parse_req(payload)
        case MessageType.CLOSE:
            if len(payload) != 1 or not isinstance(payload[0], str):
                raise ProtocolError("CLOSE message missing subscription ID")
            return CloseMessage(subscription_id=payload[0])
        case MessageType.EOSE:
            if not payload or not isinstance(payload[0], str):
                raise ProtocolError("EOSE message missing subscription ID")
            return EoseMessage(subscription_id=payload[0])
        case MessageType.AUTH:
            return _parse_auth(payload)
    raise ProtocolError(f"Unknown message type: {tag}", code=ErrorCode.UNKNOWN_MESSAGE_TYPE)


# =============================================================================
# Formatting
# =============================================================================


def _event_dict(event: Event | Mapping[str, Any]) -> dict[str, Any]:
    return event.to_dict() if isinstance(event, Event) else dict(event)


def _filter_dict(filter_: Filter | Mapping[str, Any]) -> dict[str, Any]:
    return filter_.to_dict() if isinstance(filter_, Filter) else dict(filter_)


def format_event(
    event: Event | Mapping[str, Any], subscription_id: str | None = None
) -> list[Any]:
    """``["EVENT", <event>]``, or the relay form with a subscription id."""
    if subscription_id is None:
        return [MessageType.EVENT.value, _event_dict(event)]
    return [MessageType.EVENT.value, subscription_id, _event_dict(event)]


def format_req(
    subscription_id: str, filters: Iterable[Filter | Mapping[str, Any]]
) -> list[Any]:
    """``["REQ", <subscription_id>, <filter>, ...]``."""
    return [MessageType.REQ.value, subscription_id, *(_filter_dict(f) for f in filters)]


def format_subscription(subscription: Subscription) -> list[Any]:
    """``REQ`` message for a [Subscription][nostrcore.models.filter.Subscription]."""
    return format_req(subscription.id, subscription.filters)


def format_close(subscription_id: str) -> list[Any]:
    return [MessageType.CLOSE.value, subscription_id]


def format_notice(message: str) -> list[Any]:
    return [MessageType.NOTICE.value, message]


def format_eose(subscription_id: str) -> list[Any]:
    return [MessageType.EOSE.value, subscription_id]


def format_ok(event_id: str, accepted: bool, message: str = "") -> list[Any]:
    """``["OK", <event_id>, <accepted>, <message>]`` (NIP-20)."""
    return [MessageType.OK.value, event_id, accepted, message]


def format_auth(challenge_or_event: str | Event | Mapping[str, Any]) -> list[Any]:
    """``["AUTH", <challenge>]`` from a relay or ``["AUTH", <event>]`` from a client."""
    if isinstance(challenge_or_event, str):
        return [MessageType.AUTH.value, challenge_or_event]
    return [MessageType.AUTH.value, _event_dict(challenge_or_event)]


def format_message(message: RelayMessage) -> list[Any]:
    """Wire array for a parsed or constructed relay message."""
    return message.to_list()


def encode_message(message: Sequence[Any] | RelayMessage) -> str:
    """Serialize a wire array (or message object) as compact JSON text."""
    values = message if isinstance(message, Sequence) else message.to_list()
    return json.dumps(list(values), separators=(",", ":"), ensure_ascii=False)
