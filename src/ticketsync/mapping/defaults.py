"""Default mappings between platform and ConnectWise vocabulary."""

from ticketsync.mapping.models import MappingTable, MappingTables

DEFAULT_PRIORITY_MAPPING = {
    "Critical": "Priority 1",
    "Major": "Priority 2",
    "Minor": "Priority 3",
    "Informational": "Priority 4",
}

DEFAULT_STATUS_MAPPING = {
    "Open": "Open",
    "ClosePending": "ClosePending",
    "Closed": "Closed",
}


def default_tables() -> MappingTables:
    """Build the default tables (no user mapping)."""
    return MappingTables(
        status=MappingTable(DEFAULT_STATUS_MAPPING),
        priority=MappingTable(DEFAULT_PRIORITY_MAPPING),
    )
