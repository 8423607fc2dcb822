"""Ticket sync endpoint."""

import logging

from fastapi import APIRouter

from ticketsync.api.dependencies import OrchestratorDep
from ticketsync.api.models import APIResponse, TicketPayload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sync"])


@router.post("/tickets/sync", response_model=APIResponse[TicketPayload])
def sync_ticket(
    payload: TicketPayload, orchestrator: OrchestratorDep
) -> APIResponse[TicketPayload]:
    """Run one sync cycle for a ticket update event and return the reconciled ticket.

    Failures are answered by the SyncError handlers, with the ticket's
    updated sync state in the response body.
    """
    logger.info("Sync requested for ticket %s", payload.local_id)
    result = orchestrator.sync(payload.to_ticket())
    return APIResponse(data=TicketPayload.from_ticket(result.ticket))
