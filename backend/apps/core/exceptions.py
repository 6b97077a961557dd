"""
Ledger exceptions.

Every business rejection raised by a service is one of these. The API layer
turns them into `{"detail": ...}` responses with the attached status code;
anything else is an internal failure.
"""


class LedgerError(Exception):
    """Base exception for ledger errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(LedgerError):
    """Malformed input or a rejected business rule."""

    status_code = 400


class ForbiddenError(LedgerError):
    """Caller organization does not match the target resource's organization."""

    status_code = 403


class NotFoundError(LedgerError):
    """Referenced entity is absent or not visible in the caller's scope."""

    status_code = 404


class ConflictError(LedgerError):
    """Uniqueness or idempotency violation."""

    status_code = 409
