"""Orchestrator - Drives one ticket through a sync cycle."""

from ticketsync.orchestrator.classifier import (
    RECOVERABLE_STATUS_CODES,
    ErrorClassifier,
    Recoverability,
    classify,
)
from ticketsync.orchestrator.exceptions import (
    NonRecoverableSyncError,
    OrchestratorError,
    RecoverableSyncError,
    RemoteTicketUnavailableError,
    SyncError,
)
from ticketsync.orchestrator.models import SyncResult, SyncStage
from ticketsync.orchestrator.orchestrator import SyncOrchestrator

__all__ = [
    "RECOVERABLE_STATUS_CODES",
    "ErrorClassifier",
    "NonRecoverableSyncError",
    "OrchestratorError",
    "Recoverability",
    "RecoverableSyncError",
    "RemoteTicketUnavailableError",
    "SyncError",
    "SyncOrchestrator",
    "SyncResult",
    "SyncStage",
    "classify",
]
