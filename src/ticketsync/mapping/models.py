"""Lookup tables translating vocabulary between the platform and the helpdesk."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class MappingTable:
    """One-way lookup table with a derived reverse table.

    Lookups never raise: a miss returns None from ``get`` and the input value
    from ``translate``.
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._forward: dict[str, str] = {}
        for key, value in (entries or {}).items():
            if key is None or value is None:
                continue
            self._forward[str(key)] = str(value)

    def __len__(self) -> int:
        return len(self._forward)

    def __contains__(self, value: object) -> bool:
        return value in self._forward

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingTable):
            return NotImplemented
        return self._forward == other._forward

    def __repr__(self) -> str:
        return f"MappingTable({self._forward!r})"

    def get(self, value: str | None) -> str | None:
        """Return the mapped value, or None if there is no entry."""
        if value is None:
            return None
        return self._forward.get(value)

    def translate(self, value: str | None) -> str | None:
        """Return the mapped value, or the input unchanged if there is no entry."""
        if value is None:
            return None
        mapped = self._forward.get(value)
        return value if mapped is None else mapped

    def reverse(self) -> MappingTable:
        """Return the table mapping values back to keys.

        When several keys share a value the last one wins, matching the order
        entries were declared in.
        """
        return MappingTable({value: key for key, value in self._forward.items()})

    def to_dict(self) -> dict[str, str]:
        """Return the forward entries."""
        return dict(self._forward)


@dataclass
class MappingTables:
    """Status, priority and user tables, keyed by platform vocabulary.

    Attributes:
        status: Platform status → helpdesk status name.
        priority: Platform priority → helpdesk priority name.
        users: Platform user ID → helpdesk member identifier.
    """

    status: MappingTable = field(default_factory=MappingTable)
    priority: MappingTable = field(default_factory=MappingTable)
    users: MappingTable = field(default_factory=MappingTable)

    @property
    def reverse_status(self) -> MappingTable:
        """Helpdesk status → platform status."""
        return self.status.reverse()

    @property
    def reverse_priority(self) -> MappingTable:
        """Helpdesk priority → platform priority."""
        return self.priority.reverse()

    @property
    def reverse_users(self) -> MappingTable:
        """Helpdesk member identifier → platform user ID."""
        return self.users.reverse()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MappingTables:
        """Create tables from a configuration mapping.

        Missing sections fall back to the default tables; an explicitly empty
        section disables that mapping.
        """
        from ticketsync.mapping.defaults import (  # noqa: PLC0415
            DEFAULT_PRIORITY_MAPPING,
            DEFAULT_STATUS_MAPPING,
        )

        data = data or {}
        status = data.get("status")
        priority = data.get("priority")
        users = data.get("users")
        return cls(
            status=MappingTable(DEFAULT_STATUS_MAPPING if status is None else status),
            priority=MappingTable(DEFAULT_PRIORITY_MAPPING if priority is None else priority),
            users=MappingTable(users or {}),
        )
