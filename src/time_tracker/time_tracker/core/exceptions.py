class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "authorization"


class ConflictError(DomainError):
    """Raised when an operation would break the single-active-session or single-active-break rule."""

    kind = "conflict"


class NotFoundError(DomainError):
    """Raised when a session or break does not exist or is not in the required state."""

    kind = "not_found"
