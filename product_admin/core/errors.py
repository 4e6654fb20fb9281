# Error handling utilities

from typing import Optional

from product_admin.core.logger import logger
from product_admin.models.results import OperationResult


class ErrorResponse(Exception):
    def __init__(self, message: str, status_code: int = 400, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


def error_response_handler(
    exc: ErrorResponse,
    notifier=None,
    title: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> OperationResult:
    """
    Convert an ErrorResponse raised inside an operation into a failed result.

    The error is logged, surfaced to the user through the notifier (when given)
    and returned as an OperationResult so it never escapes the operation.
    """
    logger.error(
        f"Error: {exc.message}",
        correlation_id=correlation_id,
        metadata={
            "event": "error_response",
            "status_code": exc.status_code,
            **exc.details,
        },
    )
    if notifier is not None:
        notifier.show_error(title or exc.message, exc.message if title else None)
    return OperationResult.failure(exc.message, status_code=exc.status_code)
