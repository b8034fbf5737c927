class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when the caller is not logged in."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced user or record does not exist."""


class StoreUnavailableError(DomainError):
    """Raised when the database cannot be reached.

    Callers treat this as transient: background sweeps retry on their next tick.
    """
