"""Tickets - Canonical and remote ticket value types."""

from ticketsync.tickets.models import (
    SUMMARY_MAX_LENGTH,
    Attachment,
    CanonicalTicket,
    Comment,
    RemoteTicket,
    SyncState,
    as_utc,
    cap_summary,
    select_description,
)

__all__ = [
    "SUMMARY_MAX_LENGTH",
    "Attachment",
    "CanonicalTicket",
    "Comment",
    "RemoteTicket",
    "SyncState",
    "as_utc",
    "cap_summary",
    "select_description",
]
