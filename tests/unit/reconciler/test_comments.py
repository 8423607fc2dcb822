"""Unit tests for CommentReconciler."""

import datetime as dt
from unittest.mock import MagicMock

import pytest

from ticketsync.gateway import CommentPayload, DecodeError, TransportError, replace_text
from ticketsync.reconciler import (
    DESCRIPTION_PLACEHOLDER,
    AggregatedCommentError,
    CommentReconciler,
    DescriptionAction,
)
from ticketsync.tickets import Comment

TICKET_REF = "https://cw.example.com/v4_6_release/apis/3.0/service/tickets/1001"


def _at(minute: int) -> dt.datetime:
    return dt.datetime(2024, 3, 1, 10, minute, tzinfo=dt.timezone.utc)


@pytest.fixture
def mock_gateway() -> MagicMock:
    """A gateway that hands out increasing note ids."""
    gateway = MagicMock()
    counter = iter(range(100, 200))

    def create_comment(ticket_ref: str, payload: CommentPayload) -> Comment:
        return Comment(text=payload.text, remote_id=str(next(counter)), last_modified=_at(30))

    gateway.create_comment.side_effect = create_comment
    return gateway


@pytest.fixture
def reconciler(mock_gateway: MagicMock) -> CommentReconciler:
    """Create a CommentReconciler."""
    return CommentReconciler(mock_gateway)


@pytest.mark.unit
class TestPlanDescription:
    """Tests for description planning."""

    def test_create_when_remote_has_none(self, reconciler: CommentReconciler) -> None:
        """A local description is created when the remote side has none."""
        local = [Comment(text="desc", local_id="C1", is_description=True)]

        plan = reconciler.plan(local, [])

        assert plan.description.action == DescriptionAction.CREATE
        assert plan.description.local is local[0]
        assert plan.creates == []

    def test_create_placeholder_when_neither_has_one(
        self, reconciler: CommentReconciler
    ) -> None:
        """Without any description the placeholder text is used."""
        plan = reconciler.plan([], [])

        assert plan.description.action == DescriptionAction.CREATE
        assert plan.description.text == DESCRIPTION_PLACEHOLDER

    def test_update_when_texts_differ(self, reconciler: CommentReconciler) -> None:
        """A changed local description updates the remote one."""
        local = [Comment(text="new", local_id="C1", remote_id="5", is_description=True)]
        remote = [Comment(text="old", remote_id="5", is_description=True)]

        plan = reconciler.plan(local, remote)

        assert plan.description.action == DescriptionAction.UPDATE
        assert plan.description.text == "new"

    def test_adopt_when_only_remote_has_one(self, reconciler: CommentReconciler) -> None:
        """A remote description is adopted when the local side has none."""
        remote = [Comment(text="remote desc", remote_id="5", is_description=True)]

        plan = reconciler.plan([], remote)

        assert plan.description.action == DescriptionAction.ADOPT

    def test_link_when_texts_match(self, reconciler: CommentReconciler) -> None:
        """Matching descriptions need no call."""
        local = [Comment(text="same", local_id="C1", is_description=True)]
        remote = [Comment(text="same", remote_id="5", is_description=True)]

        plan = reconciler.plan(local, remote)

        assert plan.description.action == DescriptionAction.LINK
        assert plan.updates == []
        assert plan.creates == []


@pytest.mark.unit
class TestPlanComments:
    """Tests for planning non-description comments."""

    def test_new_comment_is_created(self, reconciler: CommentReconciler) -> None:
        """Comments without a remote id are created."""
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="hello", local_id="C2"),
        ]
        remote = [Comment(text="same", remote_id="1", is_description=True)]

        plan = reconciler.plan(local, remote)

        assert [c.text for c in plan.creates] == ["hello"]
        assert plan.updates == []

    def test_changed_comment_is_updated(self, reconciler: CommentReconciler) -> None:
        """Comments whose text changed are updated."""
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="edited", local_id="C2", remote_id="2"),
        ]
        remote = [
            Comment(text="same", remote_id="1", is_description=True),
            Comment(text="original", remote_id="2"),
        ]

        plan = reconciler.plan(local, remote)

        assert len(plan.updates) == 1
        assert plan.updates[0].remote.remote_id == "2"
        assert plan.creates == []

    def test_unchanged_comment_is_left_alone(self, reconciler: CommentReconciler) -> None:
        """Matched comments with equal text need no call."""
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="note", remote_id="2"),
        ]
        remote = [
            Comment(text="same", remote_id="1", is_description=True),
            Comment(text="note", remote_id="2"),
        ]

        plan = reconciler.plan(local, remote)

        assert plan.updates == []
        assert plan.creates == []

    def test_unknown_remote_id_is_created(self, reconciler: CommentReconciler) -> None:
        """A comment pointing at a missing remote comment is posted again."""
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="lost", remote_id="99"),
        ]
        remote = [Comment(text="same", remote_id="1", is_description=True)]

        plan = reconciler.plan(local, remote)

        assert [c.text for c in plan.creates] == ["lost"]

    def test_comment_pointing_at_remote_description_is_created(
        self, reconciler: CommentReconciler
    ) -> None:
        """A regular comment never overwrites the remote description."""
        local = [
            Comment(text="desc", is_description=True, last_modified=_at(1)),
            Comment(text="regular", remote_id="1"),
        ]
        remote = [Comment(text="desc", remote_id="1", is_description=True)]

        plan = reconciler.plan(local, remote)

        assert [c.text for c in plan.creates] == ["regular"]
        assert plan.updates == []

    def test_plan_does_not_mutate(self, reconciler: CommentReconciler) -> None:
        """Planning leaves both lists untouched."""
        local = [Comment(text="hello")]
        remote = [Comment(text="remote desc", remote_id="5", is_description=True)]

        reconciler.plan(local, remote)

        assert len(local) == 1
        assert local[0].remote_id is None
        assert remote[0].text == "remote desc"

    def test_remote_only_comments_are_never_deleted(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """Remote comments missing locally are not touched."""
        local = [Comment(text="same", is_description=True, remote_id="1")]
        remote = [
            Comment(text="same", remote_id="1", is_description=True),
            Comment(text="posted by a technician", remote_id="2"),
        ]

        plan = reconciler.reconcile(TICKET_REF, local, remote)

        assert plan.updates == []
        assert plan.creates == []
        mock_gateway.create_comment.assert_not_called()
        mock_gateway.patch_comment.assert_not_called()


@pytest.mark.unit
class TestApply:
    """Tests for applying a plan."""

    def test_description_created_first(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """The description is posted before other comments."""
        local = [
            Comment(text="note", local_id="C2"),
            Comment(text="desc", local_id="C1", is_description=True),
        ]

        reconciler.reconcile(TICKET_REF, local, [])

        payloads = [c.args[1] for c in mock_gateway.create_comment.call_args_list]
        assert [p.text for p in payloads] == ["desc", "note"]
        assert payloads[0].is_description is True
        assert local[1].remote_id == "100"
        assert local[0].remote_id == "101"
        assert local[0].last_modified == _at(30)

    def test_placeholder_added_to_local_set(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """A posted placeholder description joins the local set."""
        local: list[Comment] = []

        reconciler.reconcile(TICKET_REF, local, [])

        assert len(local) == 1
        assert local[0].text == DESCRIPTION_PLACEHOLDER
        assert local[0].is_description is True
        assert local[0].remote_id == "100"

    def test_adopt_copies_remote_description(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """The remote description is copied into the local set."""
        local: list[Comment] = []
        remote = [Comment(text="remote desc", remote_id="5", is_description=True)]

        reconciler.reconcile(TICKET_REF, local, remote)

        assert [(c.text, c.remote_id) for c in local] == [("remote desc", "5")]
        mock_gateway.create_comment.assert_not_called()

    def test_update_patches_text_only(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """Updates send a text replacement to the remote comment."""
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="edited", remote_id="2"),
        ]
        remote = [
            Comment(text="same", remote_id="1", is_description=True),
            Comment(text="original", remote_id="2"),
        ]

        reconciler.reconcile(TICKET_REF, local, remote)

        mock_gateway.patch_comment.assert_called_once_with(
            TICKET_REF, "2", replace_text("edited")
        )
        assert remote[1].text == "edited"

    def test_failures_are_aggregated(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """All calls are attempted and failures reported together."""
        calls: list[str] = []

        def create_comment(ticket_ref: str, payload: CommentPayload) -> Comment:
            calls.append(payload.text)
            if payload.text == "first":
                raise TransportError("boom", status_code=500)
            if payload.text == "second":
                raise TransportError("slow down", status_code=429)
            return Comment(text=payload.text, remote_id="200")

        mock_gateway.create_comment.side_effect = create_comment
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="first"),
            Comment(text="second"),
            Comment(text="third"),
        ]
        remote = [Comment(text="same", remote_id="1", is_description=True)]

        with pytest.raises(AggregatedCommentError) as exc_info:
            reconciler.reconcile(TICKET_REF, local, remote)

        assert calls == ["first", "second", "third"]
        assert len(exc_info.value.failures) == 2
        assert exc_info.value.status_code == 429
        assert local[3].remote_id == "200"
        assert local[1].remote_id is None

    def test_failed_update_still_refreshes_snapshot(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """A failed update leaves the snapshot holding the local text."""
        mock_gateway.patch_comment.side_effect = TransportError("down", status_code=502)
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="edited", remote_id="2"),
        ]
        remote = [
            Comment(text="same", remote_id="1", is_description=True),
            Comment(text="original", remote_id="2"),
        ]

        with pytest.raises(AggregatedCommentError) as exc_info:
            reconciler.reconcile(TICKET_REF, local, remote)

        assert remote[1].text == "edited"
        assert exc_info.value.status_code == 502

    def test_status_taken_from_last_failure_with_one(
        self, reconciler: CommentReconciler, mock_gateway: MagicMock
    ) -> None:
        """A later failure without a status keeps the earlier retryable status."""
        mock_gateway.create_comment.side_effect = [
            TransportError("unavailable", status_code=503),
            DecodeError("Note record has no id"),
        ]
        local = [
            Comment(text="same", is_description=True, remote_id="1"),
            Comment(text="first"),
            Comment(text="second"),
        ]
        remote = [Comment(text="same", remote_id="1", is_description=True)]

        with pytest.raises(AggregatedCommentError) as exc_info:
            reconciler.reconcile(TICKET_REF, local, remote)

        assert len(exc_info.value.failures) == 2
        assert exc_info.value.status_code == 503
