"""Relay protocol layer: validation engine and wire message codec.

Attributes:
    validation: Event, filter, subscription and wire message checks that
        collect every error into a
        [ValidationResult][nostrcore.protocol.validation.ValidationResult].
    messages: [parse_message()][nostrcore.protocol.messages.parse_message]
        and the ``format_*`` builders for outgoing arrays.
"""

from nostrcore.protocol.messages import (
    encode_message,
    format_auth,
    format_close,
    format_eose,
    format_event,
    format_message,
    format_notice,
    format_ok,
    format_req,
    format_subscription,
    parse_message,
)
from nostrcore.protocol.validation import (
    ValidationResult,
    validate_event,
    validate_filter,
    validate_message,
    validate_signed_event,
    validate_subscription,
)


__all__ = [
    "ValidationResult",
    "encode_message",
    "format_auth",
    "format_close",
    "format_eose",
    "format_event",
    "format_message",
    "format_notice",
    "format_ok",
    "format_req",
    "format_subscription",
    "parse_message",
    "validate_event",
    "validate_filter",
    "validate_message",
    "validate_signed_event",
    "validate_subscription",
]
