"""ErrorClassifier - Sorts sync failures into recoverable and non-recoverable."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING

from ticketsync.orchestrator.exceptions import (
    NonRecoverableSyncError,
    RecoverableSyncError,
    SyncError,
)

if TYPE_CHECKING:
    from ticketsync.tickets import CanonicalTicket

logger = logging.getLogger(__name__)

# Timeout, throttling and gateway errors
RECOVERABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429, 502, 503})


class Recoverability(StrEnum):
    """Whether a failure is worth retrying."""

    RECOVERABLE = "recoverable"
    NON_RECOVERABLE = "non_recoverable"


def classify(status_code: int | None) -> Recoverability:
    """Classify an HTTP status.

    Args:
        status_code: Status of the failed call, or None if there was no response.

    Returns:
        RECOVERABLE for statuses in RECOVERABLE_STATUS_CODES, otherwise
        NON_RECOVERABLE.
    """
    if status_code is not None and status_code in RECOVERABLE_STATUS_CODES:
        return Recoverability.RECOVERABLE
    return Recoverability.NON_RECOVERABLE


def status_code_of(exc: BaseException) -> int | None:
    """Return the HTTP status an exception carries, if any."""
    status_code = getattr(exc, "status_code", None)
    return status_code if isinstance(status_code, int) else None


class ErrorClassifier:
    """Wraps failures escaping a sync cycle into SyncError subclasses."""

    def wrap(self, exc: BaseException, ticket: CanonicalTicket | None) -> SyncError:
        """Turn a failure into a classified sync error.

        Args:
            exc: The failure.
            ticket: Canonical ticket of the cycle.

        Returns:
            RecoverableSyncError or NonRecoverableSyncError with the cause,
            status code and ticket attached. A SyncError is returned unchanged.
        """
        if isinstance(exc, SyncError):
            return exc

        status_code = status_code_of(exc)
        ticket_id = ticket.local_id if ticket is not None else None
        message = f"Sync of ticket {ticket_id} failed: {exc}"
        if classify(status_code) == Recoverability.RECOVERABLE:
            error: SyncError = RecoverableSyncError(message, ticket, status_code, exc)
        else:
            error = NonRecoverableSyncError(message, ticket, status_code, exc)
        error.__cause__ = exc
        logger.debug(
            "Classified %s (status=%s) as %s",
            type(exc).__name__,
            status_code,
            "recoverable" if error.recoverable else "non-recoverable",
        )
        return error
