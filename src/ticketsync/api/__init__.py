"""REST API for ticketsync."""

from ticketsync.api.app import app, create_app
from ticketsync.api.models import APIResponse, CommentModel, TicketPayload

__all__ = [
    "APIResponse",
    "CommentModel",
    "TicketPayload",
    "app",
    "create_app",
]
