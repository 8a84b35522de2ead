class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a transition guard is violated or input is invalid."""


class SessionConflictError(ValidationError):
    """Raised on clock-in while the user still has an open session."""


class StorageError(DomainError):
    """Raised when the record storage collaborator fails."""


class MalformedLocation(DomainError):
    """Raised when a ``"lat,lng"`` string cannot be parsed."""
