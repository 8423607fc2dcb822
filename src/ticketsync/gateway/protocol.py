"""Interface the sync engine expects from a helpdesk transport."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ticketsync.gateway.models import CommentPayload, PatchOperation, TicketCreatePayload
    from ticketsync.tickets import Comment, RemoteTicket


class RemoteTicketGateway(Protocol):
    """Operations on the helpdesk's tickets and notes.

    Every method raises TransportError when the call fails. Ticket references
    are the ticket's API URL.
    """

    def ticket_url(self, remote_id: str) -> str:
        """Build the canonical API URL of a ticket from its ID."""
        ...

    def fetch(self, ticket_ref: str) -> RemoteTicket | None:
        """Fetch a ticket, or None if it does not exist."""
        ...

    def fetch_comments(self, ticket_ref: str) -> list[Comment]:
        """Fetch all comments of a ticket."""
        ...

    def create(self, payload: TicketCreatePayload) -> RemoteTicket:
        """Create a ticket and return it with its ID and link."""
        ...

    def patch(self, ticket_ref: str, operations: list[PatchOperation]) -> None:
        """Apply field changes to a ticket."""
        ...

    def create_comment(self, ticket_ref: str, payload: CommentPayload) -> Comment:
        """Post a comment and return it with its remote ID."""
        ...

    def patch_comment(
        self, ticket_ref: str, comment_id: str, operations: list[PatchOperation]
    ) -> None:
        """Apply field changes to a comment."""
        ...

    def find_priority_id_by_name(self, name: str) -> str | None:
        """Look up a priority ID by its exact name."""
        ...
