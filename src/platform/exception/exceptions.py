class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    code: str = 'INTERNAL_ERROR'

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    code = 'DOMAIN_ERROR'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(CustomBaseError):
    """Malformed or missing input detected by the domain (not by request parsing)."""

    code = 'VALIDATION_ERROR'

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class ForbiddenError(CustomBaseError):
    code = 'NOT_AUTHORIZED'

    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    code = 'NOT_FOUND'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    code = 'CONFLICT'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    code = 'AUTHENTICATION_ERROR'

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class ConcurrencyConflictError(CustomBaseError):
    """Retryable: the operation lost a race and gave up after bounded retries."""

    code = 'CONCURRENCY_CONFLICT'

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
