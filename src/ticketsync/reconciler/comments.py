"""CommentReconciler - Brings remote comments in line with the local comment set."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ticketsync.gateway import CommentPayload, GatewayError, replace_text
from ticketsync.reconciler.exceptions import AggregatedCommentError
from ticketsync.reconciler.models import (
    DESCRIPTION_PLACEHOLDER,
    CommentMergePlan,
    CommentUpdate,
    DescriptionAction,
    DescriptionPlan,
)
from ticketsync.tickets import Comment, select_description

if TYPE_CHECKING:
    from ticketsync.gateway import RemoteTicketGateway

logger = logging.getLogger(__name__)


def _payload_for(comment: Comment, *, is_description: bool | None = None) -> CommentPayload:
    return CommentPayload(
        text=comment.text,
        is_description=comment.is_description if is_description is None else is_description,
        is_internal=comment.is_internal,
        is_resolution_note=comment.is_resolution_note,
        member=comment.creator,
    )


class CommentReconciler:
    """Diffs local comments against remote ones and applies the result.

    Comments only flow from local to remote. Remote comments are never
    deleted; the only thing copied back is a remote description when the
    local side has none.
    """

    def __init__(self, gateway: RemoteTicketGateway) -> None:
        """Initialize the reconciler.

        Args:
            gateway: Transport used to post and update comments.
        """
        self.gateway = gateway

    def plan(self, local: list[Comment], remote: list[Comment]) -> CommentMergePlan:
        """Work out the calls needed to reconcile two comment sets.

        Neither list is modified.

        Args:
            local: Local comments in helpdesk vocabulary.
            remote: Comments currently on the remote ticket.

        Returns:
            The merge plan.
        """
        local_description = select_description(local)
        remote_description = select_description(remote)
        description = self._plan_description(local_description, remote_description)

        remote_by_id = {c.remote_id: c for c in remote if c.remote_id is not None}
        remote_description_id = remote_description.remote_id if remote_description else None

        merge_plan = CommentMergePlan(description=description)
        for comment in local:
            if comment is local_description:
                continue
            counterpart = remote_by_id.get(comment.remote_id) if comment.remote_id else None
            if counterpart is None or comment.remote_id == remote_description_id:
                merge_plan.creates.append(comment)
            elif counterpart.text != comment.text:
                merge_plan.updates.append(CommentUpdate(local=comment, remote=counterpart))

        logger.debug(
            "Comment plan: description=%s, %d update(s), %d create(s)",
            description.action,
            len(merge_plan.updates),
            len(merge_plan.creates),
        )
        return merge_plan

    @staticmethod
    def _plan_description(local: Comment | None, remote: Comment | None) -> DescriptionPlan:
        if remote is None:
            text = local.text if local is not None else DESCRIPTION_PLACEHOLDER
            return DescriptionPlan(DescriptionAction.CREATE, local, None, text)
        if local is None:
            return DescriptionPlan(DescriptionAction.ADOPT, None, remote, remote.text)
        if local.text != remote.text:
            return DescriptionPlan(DescriptionAction.UPDATE, local, remote, local.text)
        return DescriptionPlan(DescriptionAction.LINK, local, remote, remote.text)

    def apply(self, ticket_ref: str, plan: CommentMergePlan, local: list[Comment]) -> None:
        """Perform the calls of a merge plan.

        The description goes first, then updates, then creates. A failed call
        does not stop the rest of the plan.

        Args:
            ticket_ref: Remote ticket the comments belong to.
            plan: Plan built by ``plan``.
            local: Local comment list; posted comments get their remote id and
                adopted or placeholder descriptions are appended to it.

        Raises:
            AggregatedCommentError: If any call failed.
        """
        failures: list[Exception] = []

        self._apply_description(ticket_ref, plan.description, local, failures)
        for update in plan.updates:
            self._update(ticket_ref, update.local, update.remote, failures)
        for comment in plan.creates:
            self._create(ticket_ref, comment, failures)

        if failures:
            logger.error("%d comment operation(s) failed on %s", len(failures), ticket_ref)
            raise AggregatedCommentError(failures)

    def reconcile(
        self, ticket_ref: str, local: list[Comment], remote: list[Comment]
    ) -> CommentMergePlan:
        """Plan and apply in one step.

        Returns:
            The plan that was applied.

        Raises:
            AggregatedCommentError: If any call failed.
        """
        merge_plan = self.plan(local, remote)
        self.apply(ticket_ref, merge_plan, local)
        return merge_plan

    def _apply_description(
        self,
        ticket_ref: str,
        plan: DescriptionPlan,
        local: list[Comment],
        failures: list[Exception],
    ) -> None:
        if plan.action == DescriptionAction.CREATE:
            if plan.local is not None:
                self._create(ticket_ref, plan.local, failures, is_description=True)
                return
            placeholder = Comment(text=DESCRIPTION_PLACEHOLDER, is_description=True)
            if self._create(ticket_ref, placeholder, failures, is_description=True):
                local.append(placeholder)
            return

        if plan.remote is None:
            return
        if plan.local is None:
            # adopt
            local.append(plan.remote.copy(local_id=None))
        elif plan.action == DescriptionAction.UPDATE:
            self._update(ticket_ref, plan.local, plan.remote, failures)
        else:
            plan.local.remote_id = plan.remote.remote_id

    def _update(
        self,
        ticket_ref: str,
        comment: Comment,
        counterpart: Comment,
        failures: list[Exception],
    ) -> None:
        comment_id = counterpart.remote_id or ""
        comment.remote_id = counterpart.remote_id
        # Snapshot takes the local text first so a failed PATCH is not re-diffed
        counterpart.text = comment.text
        try:
            self.gateway.patch_comment(ticket_ref, comment_id, replace_text(comment.text))
        except GatewayError as e:
            logger.warning("Failed to update comment %s on %s: %s", comment_id, ticket_ref, e)
            failures.append(e)

    def _create(
        self,
        ticket_ref: str,
        comment: Comment,
        failures: list[Exception],
        is_description: bool | None = None,
    ) -> bool:
        try:
            created = self.gateway.create_comment(
                ticket_ref, _payload_for(comment, is_description=is_description)
            )
        except GatewayError as e:
            logger.warning(
                "Failed to post comment %s on %s: %s", comment.local_id, ticket_ref, e
            )
            failures.append(e)
            return False
        comment.remote_id = created.remote_id
        if created.last_modified is not None:
            comment.last_modified = created.last_modified
        return True
