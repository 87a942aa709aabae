"""Domain exceptions raised by the sponsorship lifecycle."""

from typing import Optional


class DomainError(Exception):
    """
    Base exception for domain/business logic errors.

    Carries a stable, machine-readable code alongside the human message.
    """

    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code or self.default_code
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Raised when a request violates a lifecycle precondition."""

    default_code = "VALIDATION_ERROR"


class AuthorizationError(DomainError):
    """Raised when the caller lacks the required relationship to an entity."""

    default_code = "FORBIDDEN"


class NotFoundError(DomainError):
    """Raised when a referenced sponsorship, organization or member does not exist."""

    default_code = "NOT_FOUND"


class ConflictError(DomainError):
    """Raised when a uniqueness invariant would be violated."""

    default_code = "CONFLICT"


class TokenInvalidError(DomainError):
    """Raised for malformed, unsigned or tampered redemption tokens."""

    default_code = "TOKEN_INVALID"


class TokenExpiredError(DomainError):
    """Raised for well-formed redemption tokens past their expiry."""

    default_code = "TOKEN_EXPIRED"
