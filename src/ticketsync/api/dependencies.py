"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import TYPE_CHECKING, Annotated, Protocol

from fastapi import Depends

if TYPE_CHECKING:
    from ticketsync.config import SyncConfig
    from ticketsync.orchestrator import SyncResult
    from ticketsync.tickets import CanonicalTicket


class Orchestrator(Protocol):
    """Interface for the SyncOrchestrator component."""

    config: SyncConfig

    def sync(self, ticket: CanonicalTicket) -> SyncResult:
        """Run one sync cycle."""
        ...


# Global orchestrator instance (initialized on app startup)
_orchestrator: Orchestrator | None = None


def init_orchestrator(orchestrator: Orchestrator) -> None:
    """Initialize the global orchestrator instance."""
    global _orchestrator  # noqa: PLW0603
    _orchestrator = orchestrator


def close_orchestrator() -> None:
    """Close the global orchestrator instance and its gateway."""
    global _orchestrator  # noqa: PLW0603
    if _orchestrator is not None:
        close = getattr(getattr(_orchestrator, "gateway", None), "close", None)
        if callable(close):
            close()
        _orchestrator = None


def get_orchestrator() -> Generator[Orchestrator, None, None]:
    """Dependency that provides the orchestrator instance."""
    if _orchestrator is None:
        raise RuntimeError("Orchestrator not initialized. Call init_orchestrator() first.")
    yield _orchestrator


# Type alias for dependency injection
OrchestratorDep = Annotated[Orchestrator, Depends(get_orchestrator)]
