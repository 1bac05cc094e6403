"""Domain-level exception hierarchy for service and repository layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""


class NotFoundError(DomainError):
    """Raised when a requested report does not exist."""


class ValidationError(DomainError):
    """Raised when input validation fails before the store is touched."""
