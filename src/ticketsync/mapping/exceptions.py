"""Custom exceptions for ticket mapping."""


class MappingError(Exception):
    """A ticket could not be translated between the two representations."""
