class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 500


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class AuthError(DomainError):
    """Raised when credentials or bearer tokens are missing or invalid."""

    status_code = 401


class ForbiddenError(DomainError):
    """Raised when an action is not allowed for the target or the caller."""

    status_code = 403


class NotFoundError(DomainError):
    """Raised when an entity id does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised when a write collides with a uniqueness or integrity constraint."""

    status_code = 409
