"""Pydantic models for REST API."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from ticketsync.tickets import Attachment, CanonicalTicket, Comment, SyncState

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


class CommentModel(BaseModel):
    """A ticket comment."""

    text: str
    local_id: str | None = None
    remote_id: str | None = None
    creator: str | None = None
    last_modified: datetime | None = None
    is_description: bool = False
    is_internal: bool = False
    is_resolution_note: bool = False

    def to_comment(self) -> Comment:
        """Convert to a Comment."""
        return Comment(**self.model_dump())

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentModel":
        """Build from a Comment."""
        return cls(
            text=comment.text,
            local_id=comment.local_id,
            remote_id=comment.remote_id,
            creator=comment.creator,
            last_modified=comment.last_modified,
            is_description=comment.is_description,
            is_internal=comment.is_internal,
            is_resolution_note=comment.is_resolution_note,
        )


class AttachmentModel(BaseModel):
    """A ticket attachment, passed through untouched."""

    name: str
    local_id: str | None = None
    remote_id: str | None = None
    creator: str | None = None
    link: str | None = None
    size: int | None = Field(default=None, ge=0)
    last_modified: datetime | None = None


class TicketPayload(BaseModel):
    """A canonical ticket as exchanged with the platform.

    The sync state is the platform's string map, e.g.
    ``{"connectionFailed": "false", "synced": "true"}``.
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
    comments: list[CommentModel] = Field(default_factory=list)
    attachments: list[AttachmentModel] = Field(default_factory=list)
    sync_state: dict[str, str] = Field(default_factory=dict)

    def to_ticket(self) -> CanonicalTicket:
        """Convert to a CanonicalTicket."""
        return CanonicalTicket(
            local_id=self.local_id,
            local_link=self.local_link,
            remote_id=self.remote_id,
            remote_link=self.remote_link,
            summary=self.summary,
            status=self.status,
            priority=self.priority,
            assignee=self.assignee,
            requester=self.requester,
            comments=[c.to_comment() for c in self.comments],
            attachments=[Attachment(**a.model_dump()) for a in self.attachments],
            sync_state=SyncState.from_dict(self.sync_state),
        )

    @classmethod
    def from_ticket(cls, ticket: CanonicalTicket) -> "TicketPayload":
        """Build from a CanonicalTicket."""
        return cls(
            local_id=ticket.local_id,
            local_link=ticket.local_link,
            remote_id=ticket.remote_id,
            remote_link=ticket.remote_link,
            summary=ticket.summary,
            status=ticket.status,
            priority=ticket.priority,
            assignee=ticket.assignee,
            requester=ticket.requester,
            comments=[CommentModel.from_comment(c) for c in ticket.comments],
            attachments=[
                AttachmentModel(
                    name=a.name,
                    local_id=a.local_id,
                    remote_id=a.remote_id,
                    creator=a.creator,
                    link=a.link,
                    size=a.size,
                    last_modified=a.last_modified,
                )
                for a in ticket.attachments
            ],
            sync_state=ticket.sync_state.to_dict(),
        )


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
    configured: bool
    missing: list[str] = Field(default_factory=list)
