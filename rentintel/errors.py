"""Errors raised at the boundary of the engine (input validation only)."""


class InvalidCriteriaError(ValueError):
    """Raised when a filter criteria payload names an unknown option or a malformed range."""
