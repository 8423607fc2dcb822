"""Configuration loading for ticketsync."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ticketsync.mapping import MappingTables, default_tables

DEFAULT_TICKET_PATH = "/service/tickets"
DEFAULT_COMMENTS_PATH = "/notes"
DEFAULT_TIMEOUT = 30.0


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


class ConfigurationMissingError(ConfigError):
    """Raised when required settings are empty.

    Attributes:
        missing: Names of every missing setting.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


@dataclass
class ConnectWiseCredentials:
    """API member credentials for ConnectWise Manage."""

    company_id: str | None = None
    public_key: str | None = None
    private_key: str | None = None
    client_id: str | None = None

    def __repr__(self) -> str:
        return (
            f"ConnectWiseCredentials(company_id={self.company_id!r}, "
            f"public_key={self.public_key!r}, private_key='***', client_id='***')"
        )


@dataclass
class SyncConfig:
    """Settings for syncing tickets with one ConnectWise site.

    Attributes:
        base_url: Site URL, e.g. "https://api-na.myconnectwise.net".
        api_path: API root below the site.
        ticket_path: Ticket collection path below the API root.
        comments_path: Notes path below a ticket URL.
        company_rec_id: Company record new tickets are filed under.
        board_id: Service board for new tickets, if any.
        api_version: API version pinned through the Accept header, if any.
        timeout: Request timeout in seconds.
        credentials: API member credentials.
        mappings: Status, priority and user tables.
    """

    base_url: str | None = None
    api_path: str | None = None
    ticket_path: str | None = DEFAULT_TICKET_PATH
    comments_path: str | None = DEFAULT_COMMENTS_PATH
    company_rec_id: str | None = None
    board_id: str | None = None
    api_version: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    credentials: ConnectWiseCredentials = field(default_factory=ConnectWiseCredentials)
    mappings: MappingTables = field(default_factory=default_tables)

    def missing_fields(self) -> list[str]:
        """Return the names of required settings that are empty."""
        required = {
            "base_url": self.base_url,
            "api_path": self.api_path,
            "ticket_path": self.ticket_path,
            "comments_path": self.comments_path,
            "company_rec_id": self.company_rec_id,
            "credentials.company_id": self.credentials.company_id,
            "credentials.public_key": self.credentials.public_key,
            "credentials.private_key": self.credentials.private_key,
            "credentials.client_id": self.credentials.client_id,
        }
        return [name for name, value in required.items() if not value]

    def validate(self) -> None:
        """Check that every required setting is present.

        Raises:
            ConfigurationMissingError: Listing all missing settings.
        """
        missing = self.missing_fields()
        if missing:
            raise ConfigurationMissingError(missing)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary from YAML, with a ``connectwise``
                section and an optional ``mappings`` section.

        Returns:
            Parsed configuration object. Presence of required settings is
            checked later by ``validate``.

        Raises:
            ConfigError: If a section has the wrong shape.
        """
        connectwise = data.get("connectwise") or {}
        if not isinstance(connectwise, dict):
            raise ConfigError("'connectwise' must be a mapping")
        credentials_data = connectwise.get("credentials") or {}
        if not isinstance(credentials_data, dict):
            raise ConfigError("'connectwise.credentials' must be a mapping")
        mappings_data = data.get("mappings")
        if mappings_data is not None and not isinstance(mappings_data, dict):
            raise ConfigError("'mappings' must be a mapping")

        try:
            timeout = float(connectwise.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid timeout: {connectwise.get('timeout')!r}") from e

        return cls(
            base_url=_optional_str(connectwise.get("base_url")),
            api_path=_optional_str(connectwise.get("api_path")),
            ticket_path=_optional_str(connectwise.get("ticket_path", DEFAULT_TICKET_PATH)),
            comments_path=_optional_str(connectwise.get("comments_path", DEFAULT_COMMENTS_PATH)),
            company_rec_id=_optional_str(connectwise.get("company_rec_id")),
            board_id=_optional_str(connectwise.get("board_id")),
            api_version=_optional_str(connectwise.get("api_version")),
            timeout=timeout,
            credentials=ConnectWiseCredentials(
                company_id=_optional_str(credentials_data.get("company_id")),
                public_key=_optional_str(credentials_data.get("public_key")),
                private_key=_optional_str(credentials_data.get("private_key")),
                client_id=_optional_str(credentials_data.get("client_id")),
            ),
            mappings=MappingTables.from_dict(mappings_data),
        )


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def load_config(config_path: Path | str) -> SyncConfig:
    """Load sync configuration from a YAML file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If the file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return SyncConfig.from_dict(data)
