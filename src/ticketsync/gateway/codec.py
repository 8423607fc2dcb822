"""JSON encoding and decoding for ConnectWise ticket and note payloads."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from ticketsync.gateway.exceptions import DecodeError
from ticketsync.gateway.models import CommentPayload, PatchOperation, TicketCreatePayload
from ticketsync.tickets import Comment, RemoteTicket, as_utc

logger = logging.getLogger(__name__)


def _reference(value: str) -> dict[str, Any]:
    """Encode a record reference, using a numeric ID where possible."""
    text = str(value).strip()
    return {"id": int(text)} if text.isdigit() else {"id": text}


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _nested(data: dict[str, Any], key: str, field: str) -> str | None:
    inner = data.get(key)
    if not isinstance(inner, dict):
        return None
    return _as_str(inner.get(field))


def parse_datetime(value: Any) -> dt.datetime | None:
    """Parse a ConnectWise timestamp into an aware UTC datetime.

    Args:
        value: Timestamp such as "2024-03-01T10:20:30Z".

    Returns:
        Parsed datetime, or None if the value is empty or unparseable.
    """
    if not value:
        return None
    normalized = str(value).strip()
    if not normalized:
        return None
    try:
        parsed = dt.datetime.fromisoformat(normalized.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Could not parse ConnectWise datetime: %s", value)
        return None
    return as_utc(parsed)


def encode_ticket_create(payload: TicketCreatePayload) -> dict[str, Any]:
    """Encode a ticket creation payload."""
    body: dict[str, Any] = {
        "summary": payload.summary,
        "company": _reference(payload.company_id),
    }
    if payload.board_id is not None:
        body["board"] = _reference(payload.board_id)
    if payload.status is not None:
        body["status"] = {"name": payload.status}
    if payload.owner is not None:
        body["owner"] = {"identifier": payload.owner}
    if payload.priority_id is not None:
        body["priority"] = _reference(payload.priority_id)
    return body


def encode_patch(operations: list[PatchOperation]) -> list[dict[str, Any]]:
    """Encode PATCH operations as a JSON Patch document."""
    return [{"op": str(o.op), "path": o.path, "value": o.value} for o in operations]


def encode_comment(payload: CommentPayload) -> dict[str, Any]:
    """Encode a note creation payload."""
    body: dict[str, Any] = {
        "text": payload.text,
        "detailDescriptionFlag": payload.is_description,
        "internalAnalysisFlag": payload.is_internal,
        "resolutionFlag": payload.is_resolution_note,
    }
    if payload.member is not None:
        body["member"] = {"identifier": payload.member}
    return body


def decode_ticket(data: Any) -> RemoteTicket:
    """Decode a ConnectWise ticket record.

    Args:
        data: Parsed JSON object.

    Returns:
        RemoteTicket without comments or links.

    Raises:
        DecodeError: If the record is not an object or has no ID.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a ticket object, got {type(data).__name__}")
    remote_id = _as_str(data.get("id"))
    if remote_id is None:
        raise DecodeError("Ticket record has no id")
    return RemoteTicket(
        remote_id=remote_id,
        summary=_as_str(data.get("summary")),
        status=_nested(data, "status", "name"),
        priority=_nested(data, "priority", "name"),
        priority_id=_nested(data, "priority", "id"),
        assignee=_nested(data, "owner", "identifier"),
    )


def decode_comment(data: Any) -> Comment:
    """Decode a ConnectWise note record.

    Raises:
        DecodeError: If the record is not an object or has no ID.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected a note object, got {type(data).__name__}")
    remote_id = _as_str(data.get("id"))
    if remote_id is None:
        raise DecodeError("Note record has no id")
    creator = _nested(data, "member", "identifier") or _as_str(data.get("createdBy"))
    return Comment(
        text=str(data.get("text") or ""),
        remote_id=remote_id,
        creator=creator,
        last_modified=parse_datetime(data.get("dateCreated")),
        is_description=bool(data.get("detailDescriptionFlag", False)),
        is_internal=bool(data.get("internalAnalysisFlag", False)),
        is_resolution_note=bool(data.get("resolutionFlag", False)),
    )


def decode_comments(data: Any) -> list[Comment]:
    """Decode a list of note records.

    Raises:
        DecodeError: If the payload is not a list.
    """
    if not isinstance(data, list):
        raise DecodeError(f"Expected a list of notes, got {type(data).__name__}")
    return [decode_comment(item) for item in data]
