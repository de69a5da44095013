#!/usr/bin/env python3
"""
Exceptions raised by the matching engine.

Degraded data (an unparseable salary, missing coordinates, an empty skill
list) is never an error; scorers resolve it to a neutral score. Only invalid
requests and invalid configuration surface as exceptions.
"""


class MatchingException(Exception):
    """Base exception for matching engine errors."""
    pass


class InvalidInputError(MatchingException, ValueError):
    """Raised when a ranking request cannot be served (missing worker, negative paging)."""
    pass


class UnknownProfileError(InvalidInputError):
    """Raised when a weighting profile name is not configured."""

    def __init__(self, name: str, available=None):
        self.name = name
        self.available = sorted(available or [])
        message = f"Unknown weighting profile '{name}'"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class ConfigurationError(MatchingException):
    """Raised when configuration is missing or invalid."""
    pass
