"""
Relay wire message variants (NIP-01, NIP-20, NIP-42).

Each variant is a frozen dataclass with a class-level ``type`` tag and a
``to_list()`` method that renders the JSON array sent over the wire.
[parse_message()][nostrcore.protocol.messages.parse_message] produces these
from raw input; the ``format_*`` functions in the same module build wire
arrays directly from values.

Examples:
    ```python
    msg = parse_message('["EOSE","sub1"]')
    match msg:
        case EoseMessage(subscription_id=sub):
            ...
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from ._validation import validate_instance
from .constants import MessageType
from .event import Event
from .filter import Filter


@dataclass(frozen=True, slots=True)
class EventMessage:
    """``["EVENT", <event>]`` or ``["EVENT", <subscription_id>, <event>]``.

    The first form is sent by clients when publishing; the second by relays
    when delivering events for a subscription.
    """

    event: Event
    subscription_id: str | None = None

    type: ClassVar[MessageType] = MessageType.EVENT

    def __post_init__(self) -> None:
        validate_instance(self.event, Event, "event")

    def to_list(self) -> list[Any]:
        if self.subscription_id is None:
            return [self.type.value, self.event.to_dict()]
        return [self.type.value, self.subscription_id, self.event.to_dict()]


@dataclass(frozen=True, slots=True)
class ReqMessage:
    """``["REQ", <subscription_id>, <filter>, ...]``."""

    subscription_id: str
    filters: tuple[Filter, ...]

    type: ClassVar[MessageType] = MessageType.REQ

    def to_list(self) -> list[Any]:
        return [self.type.value, self.subscription_id, *(f.to_dict() for f in self.filters)]


@dataclass(frozen=True, slots=True)
class CloseMessage:
    """``["CLOSE", <subscription_id>]``."""

    subscription_id: str

    type: ClassVar[MessageType] = MessageType.CLOSE

    def to_list(self) -> list[Any]:
        return [self.type.value, self.subscription_id]


@dataclass(frozen=True, slots=True)
class NoticeMessage:
    """``["NOTICE", <message>]``: human-readable relay notice."""

    message: str

    type: ClassVar[MessageType] = MessageType.NOTICE

    def to_list(self) -> list[Any]:
        return [self.type.value, self.message]


@dataclass(frozen=True, slots=True)
class EoseMessage:
    """``["EOSE", <subscription_id>]``: end of stored events."""

    subscription_id: str

    type: ClassVar[MessageType] = MessageType.EOSE

    def to_list(self) -> list[Any]:
        return [self.type.value, self.subscription_id]


@dataclass(frozen=True, slots=True)
class OkMessage:
    """``["OK", <event_id>, <accepted>, <message>]`` (NIP-20).

    Values are kept as received apart from the string booleans
    ``"true"``/``"false"``, which the parser converts. Whether ``accepted``
    really is a ``bool`` is checked by
    [validate_message()][nostrcore.protocol.validation.validate_message].
    """

    event_id: str
    accepted: Any = None
    message: Any = None

    type: ClassVar[MessageType] = MessageType.OK

    def to_list(self) -> list[Any]:
        values: list[Any] = [self.type.value, self.event_id]
        if self.accepted is not None:
            values.append(self.accepted)
        if self.message is not None:
            values.append(self.message)
        return values


@dataclass(frozen=True, slots=True)
class AuthMessage:
    """``["AUTH", <challenge>]`` from relays or ``["AUTH", <event>]`` from clients (NIP-42).

    Exactly one of ``challenge`` and ``event`` is set.
    """

    challenge: str | None = None
    event: Event | None = None

    type: ClassVar[MessageType] = MessageType.AUTH

    def __post_init__(self) -> None:
        if (self.challenge is None) == (self.event is None):
            raise ValueError("AUTH message needs exactly one of challenge or event")

    def to_list(self) -> list[Any]:
        if self.event is not None:
            return [self.type.value, self.event.to_dict()]
        return [self.type.value, self.challenge]


RelayMessage = (
    EventMessage
    | ReqMessage
    | CloseMessage
    | NoticeMessage
    | EoseMessage
    | OkMessage
    | AuthMessage
)
