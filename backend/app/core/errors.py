"""
Service errors.

Every error carries the HTTP status it maps to and renders as
{"error": message}. Server-side errors always use a generic message —
the real cause is logged, never returned to the client.
"""

from fastapi import status

GENERIC_SERVER_ERROR = "Internal server error"


class PortfolioError(Exception):
    """Base exception for all errors surfaced as JSON responses."""

    def __init__(
        self,
        message: str,
        http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status

    def to_response(self) -> dict[str, str]:
        return {"error": self.message}


# ── Client errors (400-level) ───────────────────────────────
class UploadValidationError(PortfolioError):
    """Cover image rejected: wrong type, too large, or unexpected field."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


# ── Server errors (500-level) ───────────────────────────────
class StoreError(PortfolioError):
    """The record store rejected or failed a query."""

    def __init__(self) -> None:
        super().__init__(GENERIC_SERVER_ERROR)


class InternalServiceError(PortfolioError):
    """Any other failure while handling a request."""

    def __init__(self) -> None:
        super().__init__(GENERIC_SERVER_ERROR)
