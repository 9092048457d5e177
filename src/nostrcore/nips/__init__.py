"""Nostr Implementation Possibilities -- event codec, entity codec and delegation.

The NIPs layer depends on [nostrcore.models][nostrcore.models],
[nostrcore.core][nostrcore.core] and [nostrcore.utils][nostrcore.utils]. It
performs no I/O.

Warning:
    [verify_event()][nostrcore.nips.nip01.verify_event] and
    [verify_delegation()][nostrcore.nips.nip26.verify_delegation] **never
    raise exceptions**. Malformed input verifies as ``False``.

Attributes:
    nip01: Canonical serialization, id derivation, signing and verification.
    nip19: Bech32 entities (``npub``, ``nsec``, ``note``) and their TLV
        forms (``nprofile``, ``nevent``, ``naddr``, ``nrelay``).
    nip26: Delegation tokens, conditions strings and the delegation tag.
    event_builders: Unsigned events for common kinds and filter shortcuts.

See Also:
    [nostrcore.protocol.validation][nostrcore.protocol.validation]: Structural
        and cryptographic checks layered over ``nip01``.
"""

from nostrcore.nips.event_builders import (
    Contact,
    author_filter,
    build_channel_create,
    build_channel_message,
    build_contact_list,
    build_deletion,
    build_direct_message,
    build_metadata_event,
    build_reaction,
    build_repost,
    build_text_note,
    kind_filter,
    reply_filter,
)
from nostrcore.nips.nip01 import (
    compute_event_id,
    create_event,
    serialize_event,
    sign_event,
    verify_event,
)
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
from nostrcore.nips.nip26 import (
    Delegation,
    DelegationConditions,
    add_delegation_tag,
    check_delegation_conditions,
    create_delegation,
    extract_delegation,
    parse_conditions,
    serialize_conditions,
    verify_delegated_event,
    verify_delegation,
)


__all__ = [
    "Contact",
    "Delegation",
    "DelegationConditions",
    "Nip19Entity",
    "Nip19Type",
    "add_delegation_tag",
    "author_filter",
    "build_channel_create",
    "build_channel_message",
    "build_contact_list",
    "build_deletion",
    "build_direct_message",
    "build_metadata_event",
    "build_reaction",
    "build_repost",
    "build_text_note",
    "check_delegation_conditions",
    "compute_event_id",
    "create_delegation",
    "create_event",
    "decode",
    "decode_as",
    "encode",
    "extract_delegation",
    "kind_filter",
    "naddr_encode",
    "nevent_encode",
    "note_encode",
    "nprofile_encode",
    "npub_encode",
    "nrelay_encode",
    "nsec_encode",
    "parse_conditions",
    "reply_filter",
    "serialize_conditions",
    "serialize_event",
    "sign_event",
    "verify_delegated_event",
    "verify_delegation",
    "verify_event",
]
