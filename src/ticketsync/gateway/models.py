"""Typed request payloads for the remote ticket gateway."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class PatchOp(StrEnum):
    """JSON Patch operation."""

    ADD = "add"
    REPLACE = "replace"


@dataclass(frozen=True)
class PatchOperation:
    """One field change in a PATCH request.

    Attributes:
        op: Operation kind.
        path: Field path, e.g. "status/name".
        value: New value.
    """

    op: PatchOp
    path: str
    value: str


@dataclass(frozen=True)
class TicketCreatePayload:
    """Fields sent when creating a helpdesk ticket.

    Attributes:
        summary: Ticket summary.
        company_id: Helpdesk company record the ticket belongs to.
        board_id: Service board, if configured.
        status: Status name.
        owner: Member identifier of the assignee.
        priority_id: Helpdesk priority ID.
    """

    summary: str
    company_id: str
    board_id: str | None = None
    status: str | None = None
    owner: str | None = None
    priority_id: str | None = None


@dataclass(frozen=True)
class CommentPayload:
    """Fields sent when posting a comment (note).

    Attributes:
        text: Comment text.
        is_description: Detail description flag.
        is_internal: Internal analysis flag.
        is_resolution_note: Resolution flag.
        member: Member identifier of the author.
    """

    text: str
    is_description: bool = False
    is_internal: bool = False
    is_resolution_note: bool = False
    member: str | None = None


def replace_text(text: str) -> list[PatchOperation]:
    """Build the PATCH body that replaces a comment's text."""
    return [PatchOperation(op=PatchOp.REPLACE, path="text", value=text)]
