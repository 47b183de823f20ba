"""
Middleware Package

Provides middleware and the exception hierarchy for the FastAPI application.
"""

from kanji_card.middleware.error_handling import (
    ErrorHandlingMiddleware,
    InvalidRequestError,
    InvalidTransitionError,
    NotFoundError,
    ServiceError,
    StorageError,
    UpstreamContentError,
    setup_error_handling,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "InvalidRequestError",
    "InvalidTransitionError",
    "NotFoundError",
    "ServiceError",
    "StorageError",
    "UpstreamContentError",
    "setup_error_handling",
]
