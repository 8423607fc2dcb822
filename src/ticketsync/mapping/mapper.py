"""TicketMapper - Translates tickets between platform and helpdesk vocabulary."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ticketsync.mapping.exceptions import MappingError
from ticketsync.tickets import Attachment, CanonicalTicket, Comment, RemoteTicket, cap_summary

if TYPE_CHECKING:
    from ticketsync.mapping.models import MappingTable, MappingTables

logger = logging.getLogger(__name__)


def _map_comment(comment: Comment, users: MappingTable) -> Comment:
    return comment.copy(creator=users.translate(comment.creator))


def _map_attachment(attachment: Attachment, users: MappingTable) -> Attachment:
    return Attachment(
        name=attachment.name,
        local_id=attachment.local_id,
        remote_id=attachment.remote_id,
        creator=users.translate(attachment.creator),
        link=attachment.link,
        size=attachment.size,
        last_modified=attachment.last_modified,
    )


class TicketMapper:
    """Converts canonical tickets into remote tickets and back.

    Status and priority go through the status and priority tables, user fields
    through the user table. A value with no table entry passes through
    unchanged.
    """

    def __init__(self, tables: MappingTables) -> None:
        """Initialize the mapper.

        Args:
            tables: Lookup tables keyed by platform vocabulary.
        """
        self.tables = tables

    def to_remote(self, ticket: CanonicalTicket | None) -> RemoteTicket:
        """Map a canonical ticket to the helpdesk representation.

        The returned ticket shares the canonical ticket's SyncState.

        Args:
            ticket: Canonical ticket.

        Returns:
            New RemoteTicket in helpdesk vocabulary.

        Raises:
            MappingError: If the ticket is missing or a field cannot be translated.
        """
        if ticket is None:
            raise MappingError("Cannot map a missing ticket")

        try:
            users = self.tables.users
            remote = RemoteTicket(
                local_id=ticket.local_id,
                local_link=ticket.local_link,
                remote_id=ticket.remote_id,
                remote_link=ticket.remote_link,
                summary=cap_summary(ticket.summary),
                status=self.tables.status.translate(ticket.status),
                priority=self.tables.priority.translate(ticket.priority),
                assignee=users.translate(ticket.assignee),
                requester=users.translate(ticket.requester),
                comments=[_map_comment(c, users) for c in ticket.comments or []],
                attachments=[_map_attachment(a, users) for a in ticket.attachments or []],
                sync_state=ticket.sync_state,
            )
        except Exception as e:
            logger.error("Failed to map ticket %s to helpdesk fields: %s", ticket.local_id, e)
            raise MappingError(f"Failed to map ticket {ticket.local_id}: {e}") from e

        logger.debug("Mapped ticket %s to helpdesk fields", ticket.local_id)
        return remote

    def to_local(
        self, ticket: CanonicalTicket | None, remote: RemoteTicket | None
    ) -> CanonicalTicket:
        """Apply a reconciled remote ticket back onto the canonical ticket.

        Remote fields with a value overwrite the canonical ones; remote fields
        that are None leave the canonical field as it was. Attachments are not
        touched.

        Args:
            ticket: Canonical ticket to update in place.
            remote: Reconciled remote ticket.

        Returns:
            The updated canonical ticket.

        Raises:
            MappingError: If either ticket is missing or a field cannot be translated.
        """
        if ticket is None or remote is None:
            raise MappingError("Cannot map a missing ticket")

        try:
            users = self.tables.reverse_users
            ticket.remote_id = remote.remote_id
            ticket.remote_link = remote.remote_link
            if remote.summary is not None:
                ticket.summary = remote.summary

            status = self.tables.reverse_status.translate(remote.status)
            if status is not None:
                ticket.status = status
            priority = self.tables.reverse_priority.translate(remote.priority)
            if priority is not None:
                ticket.priority = priority
            requester = users.translate(remote.requester)
            if requester is not None:
                ticket.requester = requester
            assignee = users.translate(remote.assignee)
            if assignee is not None:
                ticket.assignee = assignee

            ticket.comments = [_map_comment(c, users) for c in remote.comments]
            ticket.sync_state = remote.sync_state
        except Exception as e:
            logger.error("Failed to map helpdesk ticket %s back: %s", remote.remote_id, e)
            raise MappingError(f"Failed to map helpdesk ticket {remote.remote_id}: {e}") from e

        return ticket
