"""Reconciler - Merges local comments into the remote ticket."""

from ticketsync.reconciler.comments import CommentReconciler
from ticketsync.reconciler.exceptions import AggregatedCommentError, ReconcilerError
from ticketsync.reconciler.models import (
    DESCRIPTION_PLACEHOLDER,
    CommentMergePlan,
    CommentUpdate,
    DescriptionAction,
    DescriptionPlan,
)

__all__ = [
    "DESCRIPTION_PLACEHOLDER",
    "AggregatedCommentError",
    "CommentMergePlan",
    "CommentReconciler",
    "CommentUpdate",
    "DescriptionAction",
    "DescriptionPlan",
    "ReconcilerError",
]
