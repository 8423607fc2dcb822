"""Shared pytest fixtures and configuration."""

import pytest
from fakes import FakeGateway

from ticketsync.config import ConnectWiseCredentials, SyncConfig
from ticketsync.mapping import MappingTable, MappingTables, default_tables


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")
    config.addinivalue_line("markers", "real: calls a real ConnectWise site (local only)")


@pytest.fixture
def sync_config() -> SyncConfig:
    """A fully populated sync configuration."""
    tables = default_tables()
    return SyncConfig(
        base_url="https://cw.example.com",
        api_path="/v4_6_release/apis/3.0",
        company_rec_id="250",
        board_id="1",
        credentials=ConnectWiseCredentials(
            company_id="acme",
            public_key="pub",
            private_key="secret",
            client_id="client-123",
        ),
        mappings=MappingTables(
            status=MappingTable({"Open": "New", "Closed": "Closed"}),
            priority=tables.priority,
            users=MappingTable({"user-1": "jdoe", "user-2": "asmith"}),
        ),
    )


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """An empty in-memory helpdesk."""
    return FakeGateway()
