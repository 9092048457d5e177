"""NIP-26 delegated event signing.

A delegator authorizes a delegatee key to publish events on its behalf,
restricted by a conditions string such as
``kind=1&created_at>1700000000&created_at<1800000000``. The delegation
token is a schnorr signature by the delegator over::

    sha256("nostr:delegation:<delegatee pubkey>:<conditions>")

and travels in the delegatee's event as the tag
``["delegation", <delegator pubkey>, <conditions>, <token>]``.

Time bounds are strict, as the ``>``/``<`` operators in the conditions
string say.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from nostrcore.core.exceptions import EncodingError
from nostrcore.core.logger import Logger
from nostrcore.models.constants import PUBKEY_BYTES, TagName
from nostrcore.models.event import Event
from nostrcore.utils.crypto import derive_public_key, sha256, sign_schnorr, verify_schnorr
from nostrcore.utils.encoding import require_hex


logger = Logger(__name__)

_KIND_CLAUSE = "kind="
_SINCE_CLAUSE = "created_at>"
_UNTIL_CLAUSE = "created_at<"
_DELEGATION_TAG_LENGTH = 4


@dataclass(frozen=True, slots=True)
class DelegationConditions:
    """Restrictions placed on delegated events; unset fields do not restrict."""

    kind: int | None = None
    since: int | None = None
    until: int | None = None


@dataclass(frozen=True, slots=True)
class Delegation:
    """A delegation token with the keys and conditions it covers.

    Attributes:
        delegator: Delegator public key (hex).
        delegatee: Delegatee public key (hex).
        conditions: Parsed conditions.
        token: Schnorr signature by the delegator (hex).
        conditions_text: Conditions string as carried on the wire, when the
            delegation was read from a tag. The token is checked against it
            so clause order written by other clients is preserved.
    """

    delegator: str
    delegatee: str
    conditions: DelegationConditions
    token: str
    conditions_text: str | None = field(default=None, compare=False)


def serialize_conditions(conditions: DelegationConditions) -> str:
    """Render conditions as ``kind=N&created_at>S&created_at<U``, skipping unset ones."""
    parts: list[str] = []
    if conditions.kind is not None:
        parts.append(f"{_KIND_CLAUSE}{conditions.kind}")
    if conditions.since is not None:
        parts.append(f"{_SINCE_CLAUSE}{conditions.since}")
    if conditions.until is not None:
        parts.append(f"{_UNTIL_CLAUSE}{conditions.until}")
    return "&".join(parts)


def parse_conditions(text: str) -> DelegationConditions:
    """Parse a conditions string. Unknown clauses are ignored.

    Raises:
        EncodingError: If a known clause carries a non-integer value.
    """
    values: dict[str, int] = {}
    for part in text.split("&"):
        for prefix, name in (
            (_KIND_CLAUSE, "kind"),
            (_SINCE_CLAUSE, "since"),
            (_UNTIL_CLAUSE, "until"),
        ):
            if part.startswith(prefix):
                raw = part[len(prefix) :]
                if not (raw.isascii() and raw.isdigit()):
                    raise EncodingError(f"Invalid delegation condition: {part!r}")
                values[name] = int(raw)
    return DelegationConditions(**values)


def _signed_conditions(delegation: Delegation) -> str | None:
    # The wire text must still describe the parsed conditions.
    if delegation.conditions_text is None:
        return serialize_conditions(delegation.conditions)
    try:
        if parse_conditions(delegation.conditions_text) != delegation.conditions:
            return None
    except EncodingError:
        return None
    return delegation.conditions_text


def _delegation_hash(delegatee: str, conditions: str) -> bytes:
    return sha256(f"nostr:delegation:{delegatee}:{conditions}".encode())


def create_delegation(
    delegator_private_key: str,
    delegatee_pubkey: str,
    conditions: DelegationConditions,
    *,
    aux_randomness: bytes | None = None,
) -> Delegation:
    """Sign a delegation of *delegatee_pubkey* under *conditions*.

    Raises:
        CryptoError: If the delegator key is malformed.
        EncodingError: If the delegatee pubkey is not 32 bytes of hex.
    """
    delegatee = require_hex(delegatee_pubkey, PUBKEY_BYTES, "delegatee pubkey")
    conditions_text = serialize_conditions(conditions)
    token = sign_schnorr(
        _delegation_hash(delegatee, conditions_text), delegator_private_key, aux_randomness
    )
    return Delegation(
        delegator=derive_public_key(delegator_private_key),
        delegatee=delegatee,
        conditions=conditions,
        token=token,
    )


def verify_delegation(delegation: Delegation) -> bool:
    """Return True if the token is the delegator's signature. Never raises."""
    conditions_text = _signed_conditions(delegation)
    if conditions_text is None:
        return False
    return verify_schnorr(
        delegation.token,
        _delegation_hash(delegation.delegatee, conditions_text),
        delegation.delegator,
    )


def check_delegation_conditions(event: Event, conditions: DelegationConditions) -> bool:
    """Return True if *event* satisfies *conditions*."""
    if conditions.kind is not None and event.kind != conditions.kind:
        return False
    if conditions.since is not None and event.created_at <= conditions.since:
        return False
    return not (conditions.until is not None and event.created_at >= conditions.until)


def add_delegation_tag(event: Event, delegation: Delegation) -> Event:
    """Return a copy of *event* with the delegation tag appended.

    Any signature on *event* is dropped because the tags changed.
    """
    tag = (
        TagName.DELEGATION.value,
        delegation.delegator,
        delegation.conditions_text or serialize_conditions(delegation.conditions),
        delegation.token,
    )
    return replace(event, tags=(*event.tags, tag), id=None, sig=None)


def extract_delegation(event: Event) -> Delegation | None:
    """Return the delegation carried by *event*, or None if absent or malformed."""
    for tag in event.get_tags(TagName.DELEGATION):
        if len(tag) != _DELEGATION_TAG_LENGTH:
            continue
        try:
            conditions = parse_conditions(tag[2])
        except EncodingError:
            logger.debug("delegation_conditions_malformed", conditions=tag[2])
            return None
        return Delegation(
            delegator=tag[1],
            delegatee=event.pubkey,
            conditions=conditions,
            token=tag[3],
            conditions_text=tag[2],
        )
    return None


def verify_delegated_event(event: Event) -> bool:
    """Return True if *event* carries a valid delegation whose conditions it meets."""
    delegation = extract_delegation(event)
    if delegation is None:
        return False
    return verify_delegation(delegation) and check_delegation_conditions(
        event, delegation.conditions
    )

