"""
Immutable Nostr event value object.

An [Event][nostrcore.models.event.Event] holds the seven NIP-01 fields. The
``id`` and ``sig`` fields stay ``None`` until the event is signed by
[sign_event()][nostrcore.nips.nip01.sign_event], which returns a new
instance rather than mutating this one.

Construction only checks field *types*; protocol rules (hex lengths,
content size, timestamp drift, signature validity) are the job of
[validate_event()][nostrcore.protocol.validation.validate_event] so that
a rule violation can be reported instead of raised.

See Also:
    [nostrcore.nips.nip01][]: Canonical serialization, id derivation and
        the signature binding.
    [nostrcore.nips.event_builders][]: Builders for common event kinds.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from time import time
from typing import Any

from ._validation import (
    freeze_tags,
    validate_instance,
    validate_int,
    validate_optional_str,
)
from .constants import KindRange, TagName, kind_range


_REQUIRED_FIELDS = ("kind", "content")


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable Nostr event.

    Attributes:
        kind: Integer event kind (see
            [EventKind][nostrcore.models.constants.EventKind]).
        content: Arbitrary text payload.
        tags: Ordered tags, each a tuple of strings. Lists passed to the
            constructor are converted to tuples.
        created_at: Unix timestamp in seconds. Defaults to now.
        pubkey: Author public key as 64 lowercase hex characters, or ``""``
            when not yet known.
        id: Event identifier (64 hex characters), ``None`` until derived.
        sig: Schnorr signature (128 hex characters), ``None`` until signed.

    Raises:
        TypeError: If a field has the wrong type.

    Examples:
        ```python
        event = Event(kind=1, content="hello", tags=[["t", "nostr"]])
        event.tags            # (('t', 'nostr'),)
        event.is_signed       # False
        event.to_dict()       # {'pubkey': '', 'created_at': ..., 'kind': 1, ...}
        ```
    """

    kind: int
    content: str
    tags: tuple[tuple[str, ...], ...] = ()
    created_at: int = field(default_factory=lambda: int(time()))
    pubkey: str = ""
    id: str | None = None
    sig: str | None = None

    def __post_init__(self) -> None:
        validate_int(self.kind, "kind")
        validate_instance(self.content, str, "content")
        validate_int(self.created_at, "created_at")
        validate_instance(self.pubkey, str, "pubkey")
        validate_optional_str(self.id, "id")
        validate_optional_str(self.sig, "sig")
        # Bypass frozen restriction to store the immutable tag form
        object.__setattr__(self, "tags", freeze_tags(self.tags))

    # -------------------------------------------------------------------------
    # Signing state
    # -------------------------------------------------------------------------

    @property
    def is_signed(self) -> bool:
        """True when both ``id`` and ``sig`` are populated.

        This does not verify the signature; use
        [verify_event()][nostrcore.nips.nip01.verify_event] for that.
        """
        return bool(self.id) and bool(self.sig)

    def unsigned(self) -> Event:
        """Return a copy with ``id`` and ``sig`` cleared."""
        return replace(self, id=None, sig=None)

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    def get_tags(self, name: str) -> tuple[tuple[str, ...], ...]:
        """Return every tag whose first element equals *name*, in order."""
        return tuple(tag for tag in self.tags if tag and tag[0] == name)

    def tag_values(self, name: str) -> tuple[str, ...]:
        """Return the second element of every *name* tag that has one."""
        return tuple(tag[1] for tag in self.get_tags(name) if len(tag) > 1)

    def first_tag_value(self, name: str) -> str | None:
        values = self.tag_values(name)
        return values[0] if values else None

    def referenced_events(self) -> tuple[str, ...]:
        """Event ids referenced through ``e`` tags."""
        return self.tag_values(TagName.EVENT)

    def mentioned_pubkeys(self) -> tuple[str, ...]:
        """Public keys mentioned through ``p`` tags."""
        return self.tag_values(TagName.PUBKEY)

    @property
    def identifier(self) -> str | None:
        """The ``d`` tag value addressing a parameterized replaceable event."""
        return self.first_tag_value(TagName.IDENTIFIER)

    # -------------------------------------------------------------------------
    # Kind classification
    # -------------------------------------------------------------------------

    @property
    def kind_range(self) -> KindRange:
        return kind_range(self.kind)

    @property
    def is_regular(self) -> bool:
        return self.kind_range is KindRange.REGULAR

    @property
    def is_replaceable(self) -> bool:
        return self.kind_range is KindRange.REPLACEABLE

    @property
    def is_ephemeral(self) -> bool:
        return self.kind_range is KindRange.EPHEMERAL

    @property
    def is_parameterized_replaceable(self) -> bool:
        return self.kind_range is KindRange.PARAMETERIZED_REPLACEABLE

    # -------------------------------------------------------------------------
    # Wire conversion
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return the NIP-01 wire object.

        ``id`` and ``sig`` are omitted while they are ``None``.
        """
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data["pubkey"] = self.pubkey
        data["created_at"] = self.created_at
        data["kind"] = self.kind
        data["tags"] = [list(tag) for tag in self.tags]
        data["content"] = self.content
        if self.sig is not None:
            data["sig"] = self.sig
        return data

    def to_json(self) -> str:
        """Return the wire object as compact JSON text."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Event:
        """Build an event from a NIP-01 wire object.

        Unknown keys are ignored. ``created_at`` defaults to now and
        ``pubkey`` to ``""`` when absent.

        Raises:
            TypeError: If *data* is not a mapping or a field has the wrong type.
            ValueError: If ``kind`` or ``content`` is missing.
        """
        validate_instance(data, Mapping, "event")
        missing = [name for name in _REQUIRED_FIELDS if name not in data]
        if missing:
            raise ValueError(f"Event is missing required field(s): {', '.join(missing)}")

        kwargs: dict[str, Any] = {
            "kind": data["kind"],
            "content": data["content"],
            "tags": data.get("tags", ()),
            "pubkey": data.get("pubkey", ""),
            "id": data.get("id"),
            "sig": data.get("sig"),
        }
        if "created_at" in data:
            kwargs["created_at"] = data["created_at"]
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> Event:
        """Parse JSON text and build an event from it.

        Raises:
            ValueError: If the text is not valid JSON or misses fields.
            TypeError: If a field has the wrong type.
        """
        return cls.from_dict(json.loads(text))
