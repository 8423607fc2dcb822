"""Data models for comment reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ticketsync.tickets import Comment  # noqa: TC001 - used at runtime by dataclasses

DESCRIPTION_PLACEHOLDER = "New ticket: no description provided"


class DescriptionAction(StrEnum):
    """What to do with the description comment."""

    CREATE = "create"  # post a new description remotely
    UPDATE = "update"  # overwrite the remote description text
    ADOPT = "adopt"  # copy the remote description into the local set
    LINK = "link"  # texts match, only record the remote id


@dataclass
class DescriptionPlan:
    """Planned handling of the description comment.

    Attributes:
        action: What to do.
        local: Local description, if the local side has one.
        remote: Remote description, if the remote side has one.
        text: Text the remote description ends up with.
    """

    action: DescriptionAction
    local: Comment | None
    remote: Comment | None
    text: str


@dataclass
class CommentUpdate:
    """A local comment whose text differs from its remote counterpart."""

    local: Comment
    remote: Comment


@dataclass
class CommentMergePlan:
    """Every remote call needed to bring remote comments in line with local ones.

    Attributes:
        description: Handling of the description comment.
        updates: Text updates of already posted comments.
        creates: Local comments to post.
    """

    description: DescriptionPlan
    updates: list[CommentUpdate] = field(default_factory=list)
    creates: list[Comment] = field(default_factory=list)
