"""Exceptions for the Orchestrator module."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ticketsync.tickets import CanonicalTicket


class OrchestratorError(Exception):
    """Base exception for orchestrator errors."""


class RemoteTicketUnavailableError(OrchestratorError):
    """The remote ticket could not be found again after an earlier failure."""


class SyncError(OrchestratorError):
    """A sync cycle failed.

    Attributes:
        ticket: Canonical ticket of the failed cycle, with its sync state updated.
        status_code: HTTP status behind the failure, if any.
        cause: The underlying exception.
        recoverable: Whether retrying the same event later may succeed.
    """

    recoverable = False

    def __init__(
        self,
        message: str,
        ticket: CanonicalTicket | None = None,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.ticket = ticket
        self.status_code = status_code
        self.cause = cause


class RecoverableSyncError(SyncError):
    """A sync cycle failed on a transient condition; retry later."""

    recoverable = True


class NonRecoverableSyncError(SyncError):
    """A sync cycle failed in a way retrying will not fix."""

    recoverable = False
