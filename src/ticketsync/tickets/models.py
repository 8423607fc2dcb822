"""Data models for canonical and remote tickets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SUMMARY_MAX_LENGTH = 100

CONNECTION_FAILED_KEY = "connectionFailed"
SYNCED_KEY = "synced"


def as_utc(value: datetime | None) -> datetime | None:
    """Return a timestamp as aware UTC, taking naive values to be UTC already."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def cap_summary(summary: str | None) -> str | None:
    """Cap a summary to the helpdesk's field limit."""
    if summary is None:
        return None
    return summary[:SUMMARY_MAX_LENGTH]


@dataclass
class SyncState:
    """Per-ticket flags carried between reconciliation cycles.

    Attributes:
        connection_failed: The previous cycle could not reach or create the remote ticket.
        synced: The ticket has been synced to the helpdesk at least once.
        extra: Unrelated flags stored on the ticket, kept as-is.
    """

    connection_failed: bool = False
    synced: bool = False
    extra: dict[str, str] = field(default_factory=dict)

    def mark_synced(self) -> None:
        """Record a successful cycle."""
        self.synced = True
        self.connection_failed = False

    def mark_connection_failed(self) -> None:
        """Record that the remote side could not be reached."""
        self.connection_failed = True

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SyncState:
        """Build from the string map the platform stores on a ticket."""
        data = dict(data or {})
        connection_failed = str(data.pop(CONNECTION_FAILED_KEY, "false")).lower() == "true"
        synced = str(data.pop(SYNCED_KEY, "false")).lower() == "true"
        return cls(
            connection_failed=connection_failed,
            synced=synced,
            extra={str(k): str(v) for k, v in data.items()},
        )

    def to_dict(self) -> dict[str, str]:
        """Convert back to the platform's string map."""
        data = dict(self.extra)
        data[CONNECTION_FAILED_KEY] = "true" if self.connection_failed else "false"
        data[SYNCED_KEY] = "true" if self.synced else "false"
        return data


@dataclass(eq=False)
class Comment:
    """A ticket comment (note).

    Comments compare by identity: two comments with the same text are still
    distinct entries in a ticket's comment set.
    """

    text: str
    local_id: str | None = None
    remote_id: str | None = None
    creator: str | None = None
    last_modified: datetime | None = None
    is_description: bool = False
    is_internal: bool = False
    is_resolution_note: bool = False

    def __post_init__(self) -> None:
        self.last_modified = as_utc(self.last_modified)

    def copy(self, **changes: Any) -> Comment:
        """Return a copy with the given fields replaced."""
        values = {
            "text": self.text,
            "local_id": self.local_id,
            "remote_id": self.remote_id,
            "creator": self.creator,
            "last_modified": self.last_modified,
            "is_description": self.is_description,
            "is_internal": self.is_internal,
            "is_resolution_note": self.is_resolution_note,
        }
        values.update(changes)
        return Comment(**values)


@dataclass
class Attachment:
    """A ticket attachment. Carried through mapping, never synced."""

    name: str
    local_id: str | None = None
    remote_id: str | None = None
    creator: str | None = None
    link: str | None = None
    size: int | None = None
    last_modified: datetime | None = None

    def __post_init__(self) -> None:
        self.last_modified = as_utc(self.last_modified)


def _description_sort_key(comment: Comment) -> tuple[datetime | None, str, str]:
    return (
        comment.last_modified,
        comment.remote_id or "",
        comment.local_id or "",
    )


def select_description(comments: list[Comment] | None) -> Comment | None:
    """Pick the comment that acts as the ticket description.

    The earliest description-flagged comment wins. Ties on the timestamp fall
    back to the remote id and then the local id, and comments without a
    timestamp sort last, so the choice never depends on iteration order.

    Args:
        comments: Candidate comments.

    Returns:
        The description comment, or None if no comment is flagged.
    """
    candidates = [c for c in comments or [] if c.is_description]
    if not candidates:
        return None
    with_time = [c for c in candidates if c.last_modified is not None]
    if with_time:
        return min(with_time, key=_description_sort_key)
    return min(candidates, key=lambda c: (c.remote_id or "", c.local_id or ""))


@dataclass
class CanonicalTicket:
    """Ticket as owned by the collaboration platform.

    Attributes:
        local_id: Platform ticket ID.
        local_link: URL of the ticket on the platform.
        remote_id: Helpdesk ticket ID, once created.
        remote_link: Helpdesk API URL of the ticket, once created.
        summary: Short subject line.
        status: Status in platform vocabulary.
        priority: Priority in platform vocabulary.
        assignee: Platform user ID of the assignee.
        requester: Platform user ID of the requester.
        comments: Comment set, including the description comment.
        attachments: Attachments, passed through untouched.
        sync_state: Flags from previous cycles.
    """

    local_id: str | None = None
    local_link: str | None = None
    remote_id: str | None = None
    remote_link: str | None = None
    summary: str | None = None
    status: str | None = None
    priority: str | None = None
    assignee: str | None = None
    requester: str | None = None
    comments: list[Comment] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    sync_state: SyncState = field(default_factory=SyncState)

    @property
    def description(self) -> Comment | None:
        """The description comment, if any."""
        return select_description(self.comments)


@dataclass
class RemoteTicket:
    """Ticket in helpdesk vocabulary.

    Used both for the working copy mapped from a canonical ticket and for
    snapshots fetched from the helpdesk.
    """

    local_id: str | None = None
    local_link: str | None = None
    remote_id: str | None = None
    remote_link: str | None = None
    summary: str | None = None
    status: str | None = None
    priority: str | None = None
    priority_id: str | None = None
    assignee: str | None = None
    requester: str | None = None
    comments: list[Comment] = field(default_factory=list)
    attachments: list[Attachment] = field(default_factory=list)
    sync_state: SyncState = field(default_factory=SyncState)

    def __post_init__(self) -> None:
        self.summary = cap_summary(self.summary)

    @property
    def description(self) -> Comment | None:
        """The description comment, if any."""
        return select_description(self.comments)
