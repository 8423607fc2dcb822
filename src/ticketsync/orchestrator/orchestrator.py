"""SyncOrchestrator - Fetch-or-create state machine for one ticket sync cycle."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ticketsync.gateway import (
    GatewayError,
    PatchOp,
    PatchOperation,
    TicketCreatePayload,
    TransportError,
)
from ticketsync.mapping import TicketMapper
from ticketsync.orchestrator.classifier import ErrorClassifier
from ticketsync.orchestrator.exceptions import RemoteTicketUnavailableError
from ticketsync.orchestrator.models import SyncResult, SyncStage
from ticketsync.reconciler import AggregatedCommentError, CommentReconciler, ReconcilerError
from ticketsync.tickets import Comment, cap_summary

if TYPE_CHECKING:
    from ticketsync.config import SyncConfig
    from ticketsync.gateway import RemoteTicketGateway
    from ticketsync.tickets import CanonicalTicket, RemoteTicket

logger = logging.getLogger(__name__)

FAILED_TO_CONNECT_PREFIX = "Failed to connect - "
DEFAULT_SUMMARY = "New ticket"

# Failures that mean the helpdesk could not be reached or updated
_REMOTE_FAILURES = (GatewayError, ReconcilerError, RemoteTicketUnavailableError)


class SyncOrchestrator:
    """Reconciles a canonical ticket with its helpdesk counterpart.

    Each call to ``sync`` is one cycle: map the ticket, find the remote
    ticket (by stored link, then by rebuilt URL), update it or create it,
    reconcile comments, and map the result back. No state is kept between
    cycles and nothing is retried; callers retry on RecoverableSyncError.
    """

    def __init__(
        self,
        config: SyncConfig,
        gateway: RemoteTicketGateway,
        mapper: TicketMapper | None = None,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        """Initialize the SyncOrchestrator.

        Args:
            config: Sync configuration; validated at the start of every cycle.
            gateway: Transport to the helpdesk.
            mapper: Ticket mapper. Defaults to one built from config.mappings.
            classifier: Error classifier applied to failures.
        """
        self.config = config
        self.gateway = gateway
        self.mapper = mapper or TicketMapper(config.mappings)
        self.classifier = classifier or ErrorClassifier()
        self.reconciler = CommentReconciler(gateway)

    def sync(self, ticket: CanonicalTicket) -> SyncResult:
        """Run one sync cycle.

        Args:
            ticket: Canonical ticket; updated in place.

        Returns:
            SyncResult with the updated ticket.

        Raises:
            RecoverableSyncError: On a transient failure worth retrying.
            NonRecoverableSyncError: On any other failure.
        """
        stages = [SyncStage.START]
        try:
            return self._run(ticket, stages)
        except Exception as e:
            stages.append(SyncStage.FAILED)
            if ticket is not None and isinstance(e, _REMOTE_FAILURES):
                ticket.sync_state.mark_connection_failed()
            error = self.classifier.wrap(e, ticket)
            logger.error(
                "Sync of ticket %s failed after %s: %s",
                ticket.local_id if ticket is not None else None,
                " -> ".join(stages),
                e,
            )
            if error is e:
                raise
            raise error from e

    def _run(self, ticket: CanonicalTicket, stages: list[SyncStage]) -> SyncResult:
        self.config.validate()
        working = self.mapper.to_remote(ticket)
        stages.append(SyncStage.MAPPED)

        stages.append(SyncStage.FETCHING)
        snapshot, last_error = self._fetch(working)

        created = False
        patch_issued = False
        if snapshot is None:
            stages.append(SyncStage.NOT_FOUND)
            if working.sync_state.connection_failed:
                if last_error is not None:
                    raise last_error
                raise RemoteTicketUnavailableError(
                    f"Cannot sync ticket {working.local_id}: remote ticket "
                    f"{working.remote_id} was not found again"
                )
            working.sync_state.mark_connection_failed()
            stages.append(SyncStage.RECONCILING)
            try:
                self._create(working)
            except Exception:
                self._keep_remote_ids(ticket, working)
                raise
            created = True
        else:
            stages.append(SyncStage.FOUND)
            working.sync_state.mark_synced()
            stages.append(SyncStage.RECONCILING)
            try:
                patch_issued = self._update(working, snapshot)
            except Exception:
                self._keep_remote_ids(ticket, working)
                raise

        working.sync_state.mark_synced()
        self.mapper.to_local(ticket, working)
        stages.append(SyncStage.DONE)
        logger.info(
            "Synced ticket %s with remote ticket %s (created=%s, patched=%s)",
            ticket.local_id,
            ticket.remote_id,
            created,
            patch_issued,
        )
        return SyncResult(
            ticket=ticket, created=created, patch_issued=patch_issued, stages=stages
        )

    @staticmethod
    def _keep_remote_ids(ticket: CanonicalTicket, working: RemoteTicket) -> None:
        """Copy the remote ids of whatever was posted before a failure.

        Working comments are mapped copies of the canonical ones in the same
        order, followed by any comments the cycle added.
        """
        if working.remote_id is None:
            return
        ticket.remote_id = working.remote_id
        ticket.remote_link = working.remote_link
        for comment, posted in zip(ticket.comments, working.comments, strict=False):
            if posted.remote_id is not None:
                comment.remote_id = posted.remote_id
            if posted.last_modified is not None:
                comment.last_modified = posted.last_modified

    def _fetch(self, working: RemoteTicket) -> tuple[RemoteTicket | None, TransportError | None]:
        """Find the remote ticket by stored link, then by rebuilt URL.

        Returns:
            The snapshot with its comments, or None, and the last transport
            error seen while looking.
        """
        refs: list[str] = []
        if working.remote_link:
            refs.append(working.remote_link)
        if working.remote_id:
            rebuilt = self.gateway.ticket_url(working.remote_id)
            if rebuilt not in refs:
                refs.append(rebuilt)

        last_error: TransportError | None = None
        for ref in refs:
            try:
                snapshot = self.gateway.fetch(ref)
            except TransportError as e:
                logger.warning("Fetching %s failed: %s", ref, e)
                last_error = e
                continue
            if snapshot is None:
                logger.info("Remote ticket not found at %s", ref)
                continue

            working.remote_link = snapshot.remote_link or ref
            working.remote_id = snapshot.remote_id or working.remote_id
            snapshot.comments = self.gateway.fetch_comments(working.remote_link)
            snapshot.local_id = working.local_id
            snapshot.local_link = working.local_link
            logger.debug("Found remote ticket %s at %s", snapshot.remote_id, ref)
            return snapshot, None

        return None, last_error

    def _priority_id(self, name: str) -> str | None:
        try:
            priority_id = self.gateway.find_priority_id_by_name(name)
        except GatewayError as e:
            logger.warning("Priority lookup for %r failed: %s", name, e)
            return None
        if priority_id is None:
            logger.warning("No helpdesk priority named %r; skipping priority", name)
        return priority_id

    def _local_priority(self, priority: str | None) -> str | None:
        return self.mapper.tables.reverse_priority.translate(priority)

    def _update(self, working: RemoteTicket, snapshot: RemoteTicket) -> bool:
        """Bring the remote ticket in line with the working ticket.

        Returns:
            Whether a ticket PATCH was issued.
        """
        operations: list[PatchOperation] = []

        summary = working.summary
        if summary is None and working.description is not None:
            summary = cap_summary(working.description.text)
        if summary != snapshot.summary:
            if summary is not None:
                operations.append(PatchOperation(PatchOp.REPLACE, "summary", summary))
            working.summary = summary if summary is not None else snapshot.summary

        if working.status != snapshot.status:
            if working.status is not None:
                op = PatchOp.ADD if snapshot.status is None else PatchOp.REPLACE
                operations.append(PatchOperation(op, "status/name", working.status))
            else:
                working.status = snapshot.status

        if working.assignee != snapshot.assignee:
            if working.assignee is not None:
                op = PatchOp.ADD if snapshot.assignee is None else PatchOp.REPLACE
                operations.append(PatchOperation(op, "owner/identifier", working.assignee))
            else:
                working.assignee = snapshot.assignee

        if working.priority != snapshot.priority:
            if working.priority is None:
                working.priority = snapshot.priority
                working.priority_id = snapshot.priority_id
            else:
                priority_id = self._priority_id(working.priority)
                if priority_id is not None:
                    operations.append(PatchOperation(PatchOp.REPLACE, "priority/id", priority_id))
                    working.priority_id = priority_id
                    old = self._local_priority(snapshot.priority)
                    new = self._local_priority(working.priority)
                    working.comments.append(
                        Comment(text=f"Priority updated: {old} -> {new}", is_internal=True)
                    )

        ref = working.remote_link or self.gateway.ticket_url(working.remote_id or "")
        comment_error: AggregatedCommentError | None = None
        try:
            self.reconciler.reconcile(ref, working.comments, snapshot.comments)
        except AggregatedCommentError as e:
            comment_error = e

        if operations:
            logger.info(
                "Patching %s: %s", ref, ", ".join(o.path for o in operations)
            )
            try:
                self.gateway.patch(ref, operations)
            except GatewayError as e:
                if comment_error is not None:
                    raise e from comment_error
                raise
        if comment_error is not None:
            raise comment_error
        return bool(operations)

    def _create(self, working: RemoteTicket) -> None:
        """Create the remote ticket and post all comments to it."""
        sync_state = working.sync_state

        summary = working.summary
        if summary is None:
            description = working.description
            summary = description.text if description is not None else DEFAULT_SUMMARY
        if sync_state.synced and sync_state.connection_failed:
            summary = FAILED_TO_CONNECT_PREFIX + summary
        working.summary = cap_summary(summary)

        priority_id = None
        if working.priority is not None:
            working.comments.append(
                Comment(
                    text=f"Initial ticket priority: {self._local_priority(working.priority)}",
                    is_internal=True,
                )
            )
            priority_id = self._priority_id(working.priority)

        payload = TicketCreatePayload(
            summary=working.summary or DEFAULT_SUMMARY,
            company_id=self.config.company_rec_id or "",
            board_id=self.config.board_id,
            status=working.status,
            owner=working.assignee,
            priority_id=priority_id,
        )
        created = self.gateway.create(payload)
        working.remote_id = created.remote_id
        working.remote_link = created.remote_link or self.gateway.ticket_url(
            created.remote_id or ""
        )
        working.priority_id = priority_id
        logger.info("Created remote ticket %s for %s", working.remote_id, working.local_id)

        self.reconciler.reconcile(working.remote_link, working.comments, [])
