"""Gateway - Transport to the helpdesk's ticket API."""

from ticketsync.gateway.connectwise import ConnectWiseGateway
from ticketsync.gateway.exceptions import DecodeError, GatewayError, TransportError
from ticketsync.gateway.models import (
    CommentPayload,
    PatchOp,
    PatchOperation,
    TicketCreatePayload,
    replace_text,
)
from ticketsync.gateway.protocol import RemoteTicketGateway

__all__ = [
    "CommentPayload",
    "ConnectWiseGateway",
    "DecodeError",
    "GatewayError",
    "PatchOp",
    "PatchOperation",
    "RemoteTicketGateway",
    "TicketCreatePayload",
    "TransportError",
    "replace_text",
]
