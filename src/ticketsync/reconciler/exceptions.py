"""Custom exceptions for comment reconciliation."""

from __future__ import annotations


class ReconcilerError(Exception):
    """Base exception for reconciler errors."""


class AggregatedCommentError(ReconcilerError):
    """One or more comment calls failed while applying a merge plan.

    The remaining calls of the plan were still attempted.

    Attributes:
        failures: Every failure, in the order it happened.
        status_code: HTTP status of the last failure that carried one.
    """

    def __init__(self, failures: list[Exception]) -> None:
        self.failures = list(failures)
        self.status_code: int | None = None
        for failure in reversed(self.failures):
            status_code = getattr(failure, "status_code", None)
            if status_code is not None:
                self.status_code = status_code
                break
        details = "; ".join(str(f) for f in self.failures)
        super().__init__(f"{len(self.failures)} comment operation(s) failed: {details}")
