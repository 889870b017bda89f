"""Core utilities: exceptions, logging and middleware."""

from app.core.exceptions import (
    AppException,
    InvalidStateError,
    NotFoundError,
    NotificationError,
    ValidationError,
)
from app.core.logging_config import configure_logging

__all__ = [
    "AppException",
    "InvalidStateError",
    "NotFoundError",
    "NotificationError",
    "ValidationError",
    "configure_logging",
]
