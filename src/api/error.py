from fastapi import status

from src.domain import errors

# Most specific class first; DomainError itself is the fallback
DOMAIN_ERROR_STATUS = (
    (errors.TokenExpiredError, status.HTTP_410_GONE),
    (errors.TokenInvalidError, status.HTTP_400_BAD_REQUEST),
    (errors.ValidationError, status.HTTP_400_BAD_REQUEST),
    (errors.AuthorizationError, status.HTTP_403_FORBIDDEN),
    (errors.NotFoundError, status.HTTP_404_NOT_FOUND),
    (errors.ConflictError, status.HTTP_409_CONFLICT),
)


def status_code_for(exc: errors.DomainError) -> int:
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST
