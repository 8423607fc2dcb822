"""Mapping - Vocabulary tables and the ticket mapper."""

from ticketsync.mapping.defaults import (
    DEFAULT_PRIORITY_MAPPING,
    DEFAULT_STATUS_MAPPING,
    default_tables,
)
from ticketsync.mapping.exceptions import MappingError
from ticketsync.mapping.mapper import TicketMapper
from ticketsync.mapping.models import MappingTable, MappingTables

__all__ = [
    "DEFAULT_PRIORITY_MAPPING",
    "DEFAULT_STATUS_MAPPING",
    "MappingError",
    "MappingTable",
    "MappingTables",
    "TicketMapper",
    "default_tables",
]
