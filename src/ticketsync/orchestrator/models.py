"""Data models for the Orchestrator module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ticketsync.tickets import CanonicalTicket  # noqa: TC001 - used at runtime by dataclasses


class SyncStage(StrEnum):
    """Stages a sync cycle passes through."""

    START = "start"
    MAPPED = "mapped"
    FETCHING = "fetching"
    FOUND = "found"
    NOT_FOUND = "not_found"
    RECONCILING = "reconciling"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of a successful sync cycle.

    Attributes:
        ticket: The updated canonical ticket.
        created: The remote ticket was created in this cycle.
        patch_issued: A ticket PATCH was sent in this cycle.
        stages: Stages visited, in order.
    """

    ticket: CanonicalTicket
    created: bool = False
    patch_issued: bool = False
    stages: list[SyncStage] = field(default_factory=list)
