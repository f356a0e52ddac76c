"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions raised by the calculator
services and their adapters.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class RateFetchError(DomainError):
    """Raised when the AI rate lookup cannot be completed (network, auth, status)."""
    pass
