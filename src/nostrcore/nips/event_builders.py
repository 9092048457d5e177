"""Builders for common Nostr event kinds and subscription filters.

Each event builder returns an unsigned [Event][nostrcore.models.event.Event];
pass it to [sign_event()][nostrcore.nips.nip01.sign_event] to publish it.
Filter builders return [Filter][nostrcore.models.filter.Filter] instances.

Examples:
    ```python
    note = build_text_note("gm", pubkey, reply_to=parent_id)
    signed = sign_event(note, private_key)
    wire = format_event(signed)
    ```
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from time import time
from typing import Any, NamedTuple

from nostrcore.models.constants import EventKind, TagName
from nostrcore.models.event import Event
from nostrcore.models.filter import Filter


# =============================================================================
# Types
# =============================================================================


class Contact(NamedTuple):
    """One entry of a NIP-02 contact list."""

    pubkey: str
    relay: str = ""
    petname: str = ""


def _now() -> int:
    return int(time())


def _metadata_json(metadata: Mapping[str, Any]) -> str:
    # Drop empty values so clients do not overwrite fields with blanks
    return json.dumps(
        {k: v for k, v in metadata.items() if v not in (None, "")},
        separators=(",", ":"),
        ensure_ascii=False,
    )


# =============================================================================
# Kind 0 (NIP-01)
# =============================================================================


def build_metadata_event(
    metadata: Mapping[str, Any], pubkey: str = "", *, created_at: int | None = None
) -> Event:
    """Build a Kind 0 profile metadata event; *metadata* becomes JSON content."""
    return Event(
        kind=EventKind.SET_METADATA,
        content=_metadata_json(metadata),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


# =============================================================================
# Kind 1 (NIP-01, NIP-10)
# =============================================================================


def build_text_note(
    content: str,
    pubkey: str = "",
    *,
    reply_to: str | None = None,
    mentions: Iterable[str] = (),
    created_at: int | None = None,
) -> Event:
    """Build a Kind 1 text note.

    Args:
        content: Note text.
        pubkey: Author pubkey; filled in by signing when empty.
        reply_to: Id of the event this note replies to (``e`` tag).
        mentions: Pubkeys to mention (``p`` tags), in order.
        created_at: Timestamp; now when omitted.
    """
    tags: list[tuple[str, ...]] = []
    if reply_to:
        tags.append((TagName.EVENT.value, reply_to))
    tags.extend((TagName.PUBKEY.value, pk) for pk in mentions)
    return Event(
        kind=EventKind.TEXT_NOTE,
        content=content,
        tags=tuple(tags),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


# =============================================================================
# Kind 3 (NIP-02)
# =============================================================================


def build_contact_list(
    contacts: Iterable[Contact | str], pubkey: str = "", *, created_at: int | None = None
) -> Event:
    """Build a Kind 3 contact list; bare strings are treated as pubkeys."""
    tags: list[tuple[str, ...]] = []
    for contact in contacts:
        entry = Contact(contact) if isinstance(contact, str) else contact
        tag: tuple[str, ...] = (TagName.PUBKEY.value, entry.pubkey)
        if entry.relay or entry.petname:
            tag += (entry.relay, entry.petname) if entry.petname else (entry.relay,)
        tags.append(tag)
    return Event(
        kind=EventKind.CONTACTS,
        content="",
        tags=tuple(tags),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


# =============================================================================
# Kind 4 (NIP-04)
# =============================================================================


def build_direct_message(
    recipient: str, ciphertext: str, pubkey: str = "", *, created_at: int | None = None
) -> Event:
    """Build a Kind 4 direct message envelope.

    *ciphertext* must already be NIP-04 encrypted; this library does not
    perform the encryption.
    """
    return Event(
        kind=EventKind.ENCRYPTED_DIRECT_MESSAGE,
        content=ciphertext,
        tags=((TagName.PUBKEY.value, recipient),),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


# =============================================================================
# Kinds 5, 6, 7 (NIP-09, NIP-18, NIP-25)
# =============================================================================


def build_deletion(
    event_ids: Iterable[str],
    pubkey: str = "",
    *,
    reason: str = "",
    created_at: int | None = None,
) -> Event:
    """Build a Kind 5 deletion request for *event_ids*."""
    return Event(
        kind=EventKind.DELETE,
        content=reason,
        tags=tuple((TagName.EVENT.value, event_id) for event_id in event_ids),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


def build_repost(
    event: Event, pubkey: str = "", *, relay_hint: str = "", created_at: int | None = None
) -> Event:
    """Build a Kind 6 repost embedding the reposted event as JSON content."""
    if event.id is None:
        raise ValueError("Cannot repost an event without an id")
    return Event(
        kind=EventKind.REPOST,
        content=event.to_json(),
        tags=(
            (TagName.EVENT.value, event.id, relay_hint),
            (TagName.PUBKEY.value, event.pubkey),
        ),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


def build_reaction(
    event: Event, pubkey: str = "", *, reaction: str = "+", created_at: int | None = None
) -> Event:
    """Build a Kind 7 reaction (``+`` like, ``-`` dislike, or an emoji)."""
    if event.id is None:
        raise ValueError("Cannot react to an event without an id")
    return Event(
        kind=EventKind.REACTION,
        content=reaction,
        tags=(
            (TagName.EVENT.value, event.id),
            (TagName.PUBKEY.value, event.pubkey),
        ),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


# =============================================================================
# Kinds 40, 42 (NIP-28)
# =============================================================================


def build_channel_create(
    metadata: Mapping[str, Any], pubkey: str = "", *, created_at: int | None = None
) -> Event:
    """Build a Kind 40 channel creation event (``name``, ``about``, ``picture``...)."""
    return Event(
        kind=EventKind.CHANNEL_CREATE,
        content=_metadata_json(metadata),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


def build_channel_message(
    channel_id: str,
    content: str,
    pubkey: str = "",
    *,
    reply_to: str | None = None,
    relay_hint: str = "",
    created_at: int | None = None,
) -> Event:
    """Build a Kind 42 channel message with NIP-10 ``root``/``reply`` markers."""
    tags: list[tuple[str, ...]] = [(TagName.EVENT.value, channel_id, relay_hint, "root")]
    if reply_to:
        tags.append((TagName.EVENT.value, reply_to, relay_hint, "reply"))
    return Event(
        kind=EventKind.CHANNEL_MESSAGE,
        content=content,
        tags=tuple(tags),
        created_at=_now() if created_at is None else created_at,
        pubkey=pubkey,
    )


# =============================================================================
# Filters
# =============================================================================


def kind_filter(kinds: int | Iterable[int], *, limit: int | None = None) -> Filter:
    """Filter events by one or more kinds."""
    return Filter(kinds=(kinds,) if isinstance(kinds, int) else tuple(kinds), limit=limit)


def author_filter(
    authors: str | Iterable[str],
    *,
    kinds: Iterable[int] | None = None,
    limit: int | None = None,
) -> Filter:
    """Filter events by author pubkey, optionally narrowed to some kinds."""
    return Filter(
        authors=(authors,) if isinstance(authors, str) else tuple(authors),
        kinds=tuple(kinds) if kinds is not None else None,
        limit=limit,
    )


def reply_filter(event_id: str, *, limit: int | None = None) -> Filter:
    """Filter text notes and channel messages that reference *event_id*."""
    return Filter(
        kinds=(EventKind.TEXT_NOTE, EventKind.CHANNEL_MESSAGE),
        tags={TagName.EVENT.value: (event_id,)},
        limit=limit,
    )
