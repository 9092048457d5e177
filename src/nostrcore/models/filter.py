"""
Subscription filters and the subscriptions that group them.

A [Filter][nostrcore.models.filter.Filter] is a query descriptor sent to
relays inside a ``REQ`` message; a
[Subscription][nostrcore.models.filter.Subscription] pairs a client-chosen
id with one or more filters. Both are immutable and only type-check their
fields; the ``since <= until`` ordering and the non-empty filter list are
enforced by [nostrcore.protocol.validation][].
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ._validation import (
    deep_freeze,
    freeze_int_sequence,
    freeze_str_sequence,
    validate_instance,
    validate_mapping,
    validate_optional_int,
    validate_optional_str,
)


TAG_FILTER_PREFIX = "#"


@dataclass(frozen=True, slots=True)
class Filter:
    """Immutable NIP-01 subscription filter.

    Every field is optional; an unset field places no constraint.

    Attributes:
        ids: Event ids to match.
        authors: Author public keys to match.
        kinds: Event kinds to match.
        tags: Tag constraints keyed by tag name without the ``#`` prefix,
            e.g. ``{"e": ("abc...",)}`` renders as ``"#e": ["abc..."]``.
        since: Lower bound on ``created_at`` (inclusive).
        until: Upper bound on ``created_at`` (inclusive).
        limit: Maximum number of events for the initial query.
        search: Full-text search query (NIP-50).

    Raises:
        TypeError: If a field has the wrong type.
    """

    ids: tuple[str, ...] | None = None
    authors: tuple[str, ...] | None = None
    kinds: tuple[int, ...] | None = None
    tags: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    since: int | None = None
    until: int | None = None
    limit: int | None = None
    search: str | None = None

    def __post_init__(self) -> None:
        if self.ids is not None:
            object.__setattr__(self, "ids", freeze_str_sequence(self.ids, "ids"))
        if self.authors is not None:
            object.__setattr__(self, "authors", freeze_str_sequence(self.authors, "authors"))
        if self.kinds is not None:
            object.__setattr__(self, "kinds", freeze_int_sequence(self.kinds, "kinds"))
        validate_mapping(self.tags, "tags")
        frozen_tags: dict[str, tuple[str, ...]] = {}
        for name, values in self.tags.items():
            validate_instance(name, str, "tag name")
            key = name.removeprefix(TAG_FILTER_PREFIX)
            frozen_tags[key] = freeze_str_sequence(values, f"tags[{key!r}]")
        object.__setattr__(self, "tags", deep_freeze(frozen_tags))
        validate_optional_int(self.since, "since")
        validate_optional_int(self.until, "until")
        validate_optional_int(self.limit, "limit")
        validate_optional_str(self.search, "search")

    def to_dict(self) -> dict[str, Any]:
        """Return the wire object, emitting only populated fields."""
        data: dict[str, Any] = {}
        if self.ids is not None:
            data["ids"] = list(self.ids)
        if self.authors is not None:
            data["authors"] = list(self.authors)
        if self.kinds is not None:
            data["kinds"] = list(self.kinds)
        for name, values in self.tags.items():
            data[f"{TAG_FILTER_PREFIX}{name}"] = list(values)
        for key in ("since", "until", "limit", "search"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Filter:
        """Build a filter from its wire object.

        Keys starting with ``#`` become tag constraints; other unknown keys
        are ignored.

        Raises:
            TypeError: If *data* is not a mapping or a field has the wrong type.
        """
        validate_mapping(data, "filter")
        tags = {
            key[len(TAG_FILTER_PREFIX) :]: value
            for key, value in data.items()
            if isinstance(key, str) and key.startswith(TAG_FILTER_PREFIX)
        }
        return cls(
            ids=data.get("ids"),
            authors=data.get("authors"),
            kinds=data.get("kinds"),
            tags=tags,
            since=data.get("since"),
            until=data.get("until"),
            limit=data.get("limit"),
            search=data.get("search"),
        )


@dataclass(frozen=True, slots=True)
class Subscription:
    """A subscription id with its ordered filters.

    Attributes:
        id: Client-chosen subscription identifier.
        filters: Filters sent in the ``REQ`` message. Mappings are converted
            to [Filter][nostrcore.models.filter.Filter] instances.

    Raises:
        TypeError: If the id is not a string or a filter is malformed.
    """

    id: str
    filters: tuple[Filter, ...] = ()

    def __post_init__(self) -> None:
        validate_instance(self.id, str, "id")
        if isinstance(self.filters, Filter | Mapping | str):
            raise TypeError(
                f"filters must be a sequence of filters, got {type(self.filters).__name__}"
            )
        converted = tuple(
            item if isinstance(item, Filter) else Filter.from_dict(item) for item in self.filters
        )
        object.__setattr__(self, "filters", converted)

