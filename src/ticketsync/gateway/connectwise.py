"""ConnectWiseGateway - Talks to the ConnectWise Manage REST API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from ticketsync.gateway.codec import (
    decode_comment,
    decode_comments,
    decode_ticket,
    encode_comment,
    encode_patch,
    encode_ticket_create,
)
from ticketsync.gateway.exceptions import DecodeError, TransportError
from ticketsync.logging import sanitize_for_log, truncate_output

if TYPE_CHECKING:
    from ticketsync.config import SyncConfig
    from ticketsync.gateway.models import CommentPayload, PatchOperation, TicketCreatePayload
    from ticketsync.tickets import Comment, RemoteTicket

logger = logging.getLogger(__name__)

SUCCESS_STATUS_CODES = frozenset({200, 201, 204})
PRIORITIES_PATH = "/service/priorities"


class ConnectWiseGateway:
    """Gateway for ConnectWise Manage service tickets and notes.

    Tickets are referenced by their API URL. Every failed call raises
    TransportError with the HTTP status, or with no status when the request
    never got a response.
    """

    def __init__(
        self,
        base_url: str,
        api_path: str,
        company_id: str,
        public_key: str,
        private_key: str,
        client_id: str,
        ticket_path: str = "/service/tickets",
        comments_path: str = "/notes",
        api_version: str | None = None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize ConnectWise Gateway.

        Args:
            base_url: Site URL, e.g. "https://api-na.myconnectwise.net"
            api_path: API root below the site, e.g. "/v4_6_release/apis/3.0"
            company_id: ConnectWise company ID used for login
            public_key: API member public key
            private_key: API member private key
            client_id: Registered integration client ID
            ticket_path: Ticket collection path below the API root
            comments_path: Notes path below a ticket URL
            api_version: Optional API version pinned through the Accept header
            timeout: Request timeout in seconds
            transport: Custom httpx transport (for testing)
        """
        self.base_url = base_url.rstrip("/")
        self.api_path = api_path
        self.company_id = company_id
        self.public_key = public_key
        self.private_key = private_key
        self.client_id = client_id
        self.ticket_path = ticket_path
        self.comments_path = comments_path
        self.api_version = api_version
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None

    @classmethod
    def from_config(
        cls, config: SyncConfig, transport: httpx.BaseTransport | None = None
    ) -> ConnectWiseGateway:
        """Create a gateway from a sync configuration."""
        credentials = config.credentials
        return cls(
            base_url=config.base_url or "",
            api_path=config.api_path or "",
            company_id=credentials.company_id or "",
            public_key=credentials.public_key or "",
            private_key=credentials.private_key or "",
            client_id=credentials.client_id or "",
            ticket_path=config.ticket_path or "",
            comments_path=config.comments_path or "",
            api_version=config.api_version,
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def api_root(self) -> str:
        """Site URL joined with the API path."""
        return f"{self.base_url}{self.api_path}"

    @property
    def client(self) -> httpx.Client:
        """Get or create HTTP client for the REST API."""
        if self._client is None:
            headers = {"clientId": self.client_id, "Content-Type": "application/json"}
            if self.api_version:
                headers["Accept"] = (
                    f"application/vnd.connectwise.com+json; version={self.api_version}"
                )
            self._client = httpx.Client(
                auth=httpx.BasicAuth(f"{self.company_id}+{self.public_key}", self.private_key),
                headers=headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ConnectWiseGateway:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response:
        """Send a request and check its status.

        Returns:
            The response. A 404 is returned as-is when allow_not_found is set.

        Raises:
            TransportError: If the request fails or returns an unexpected status.
        """
        logger.debug("%s %s", method, url)
        try:
            response = self.client.request(method, url, json=json, params=params)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

        if response.status_code == 404 and allow_not_found:
            logger.debug("%s %s returned 404", method, url)
            return response
        if response.status_code not in SUCCESS_STATUS_CODES:
            logger.warning(
                "%s %s returned %d: %s",
                method,
                url,
                response.status_code,
                sanitize_for_log(truncate_output(response.text, 500)),
            )
            raise TransportError(f"{method} {url} failed", status_code=response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {response.request.url}: {e}") from e

    def ticket_url(self, remote_id: str) -> str:
        """Build the API URL of a ticket from its ID."""
        return f"{self.api_root}{self.ticket_path}/{remote_id}"

    def fetch(self, ticket_ref: str) -> RemoteTicket | None:
        """Fetch a ticket by its API URL.

        Args:
            ticket_ref: Ticket API URL.

        Returns:
            The ticket without comments, or None if it does not exist.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response is not a ticket record.
        """
        response = self._request("GET", ticket_ref, allow_not_found=True)
        if response.status_code == 404:
            return None
        ticket = decode_ticket(self._json(response))
        ticket.remote_link = self.ticket_url(ticket.remote_id or "")
        return ticket

    def fetch_comments(self, ticket_ref: str) -> list[Comment]:
        """Fetch all notes of a ticket."""
        response = self._request("GET", f"{ticket_ref}{self.comments_path}")
        return decode_comments(self._json(response))

    def create(self, payload: TicketCreatePayload) -> RemoteTicket:
        """Create a ticket.

        Args:
            payload: Ticket fields.

        Returns:
            The created ticket with its ID and API URL.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response has no ticket ID.
        """
        response = self._request(
            "POST", f"{self.api_root}{self.ticket_path}", json=encode_ticket_create(payload)
        )
        ticket = decode_ticket(self._json(response))
        ticket.remote_link = self.ticket_url(ticket.remote_id or "")
        logger.info("Created ConnectWise ticket %s", ticket.remote_id)
        return ticket

    def patch(self, ticket_ref: str, operations: list[PatchOperation]) -> None:
        """Apply field changes to a ticket."""
        self._request("PATCH", ticket_ref, json=encode_patch(operations))
        logger.info("Patched %d field(s) on %s", len(operations), ticket_ref)

    def create_comment(self, ticket_ref: str, payload: CommentPayload) -> Comment:
        """Post a note on a ticket and return it with its remote ID."""
        response = self._request(
            "POST", f"{ticket_ref}{self.comments_path}", json=encode_comment(payload)
        )
        return decode_comment(self._json(response))

    def patch_comment(
        self, ticket_ref: str, comment_id: str, operations: list[PatchOperation]
    ) -> None:
        """Apply field changes to a note."""
        self._request(
            "PATCH",
            f"{ticket_ref}{self.comments_path}/{comment_id}",
            json=encode_patch(operations),
        )

    def find_priority_id_by_name(self, name: str) -> str | None:
        """Look up a priority ID by exact name.

        Args:
            name: Priority name, e.g. "Priority 1".

        Returns:
            The priority ID, or None if no priority has that name.

        Raises:
            TransportError: If the request fails.
        """
        response = self._request(
            "GET",
            f"{self.api_root}{PRIORITIES_PATH}",
            params={"conditions": f'name="{name}"'},
        )
        data = self._json(response)
        if not isinstance(data, list) or not data:
            logger.debug("No ConnectWise priority named %r", name)
            return None
        first = data[0]
        if not isinstance(first, dict) or first.get("id") is None:
            return None
        return str(first["id"])
