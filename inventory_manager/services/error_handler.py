"""
Turns store failures into messages a user can be shown.

Storage engine errors reach callers unchanged; this module is the single place
that classifies them, keeps a short in-memory log for diagnostics, and hides
engine-specific text unless DEBUG is on.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from pydantic import ValidationError
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError

from inventory_manager.core.exceptions import (
    InvalidGstSlabError,
    InvalidImageUriError,
    NotFoundError,
    NotInitializedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_DATABASE_MESSAGE = "Database operation failed. Please try again."
CONSTRAINT_MESSAGE = "This record conflicts with an existing one."
NOT_FOUND_MESSAGE = "The requested item no longer exists."
VALIDATION_MESSAGE = "Some of the entered values are not valid."
UNKNOWN_MESSAGE = "Something went wrong. Please try again."


class ErrorType(Enum):
    DATABASE = "DATABASE"
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AppError(Exception):
    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: Optional[str] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.severity = severity
        self.user_message = user_message or message
        self.retryable = retryable


@dataclass
class ErrorLogEntry:
    error: AppError
    original: BaseException
    context: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.error.error_type.value,
            "severity": self.error.severity.value,
            "error_message": self.error.message,
            "exception_type": type(self.original).__name__,
            "retryable": self.error.retryable,
            "context": self.context,
            "timestamp": self.timestamp,
        }


def is_constraint_error(exc: BaseException) -> bool:
    if isinstance(exc, IntegrityError):
        return True
    text = str(exc)
    return "UNIQUE constraint" in text or "constraint failed" in text


def is_connection_error(exc: BaseException) -> bool:
    if isinstance(exc, (NotInitializedError, OperationalError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return False


def classify(exc: BaseException) -> AppError:
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, NotFoundError):
        return AppError(str(exc), ErrorType.NOT_FOUND, ErrorSeverity.LOW, NOT_FOUND_MESSAGE)
    if isinstance(exc, (ValidationError, InvalidGstSlabError, InvalidImageUriError)):
        return AppError(str(exc), ErrorType.VALIDATION, ErrorSeverity.LOW, VALIDATION_MESSAGE)
    if is_constraint_error(exc):
        return AppError(str(exc), ErrorType.DATABASE, ErrorSeverity.MEDIUM, CONSTRAINT_MESSAGE)
    if isinstance(exc, (SQLAlchemyError, NotInitializedError)):
        return AppError(str(exc), ErrorType.DATABASE, ErrorSeverity.HIGH, GENERIC_DATABASE_MESSAGE, retryable=True)
    return AppError(str(exc), ErrorType.UNKNOWN, ErrorSeverity.MEDIUM, UNKNOWN_MESSAGE)


class ErrorHandler:
    def __init__(self, debug: bool = False, max_entries: int = 100):
        self.debug = debug
        self.max_entries = max_entries
        self._log: List[ErrorLogEntry] = []

    def handle(self, exc: BaseException, context: Optional[str] = None) -> str:
        """Record the failure and return the text to show the user."""
        app_error = classify(exc)
        entry = ErrorLogEntry(error=app_error, original=exc, context=context)
        self._log.append(entry)
        if len(self._log) > self.max_entries:
            del self._log[0]

        logger.error("operation_failed", extra=entry.to_dict())

        if self.debug:
            return str(exc)
        return app_error.user_message

    async def run(self, operation: Callable[[], Awaitable[T]], context: Optional[str] = None) -> Optional[T]:
        try:
            return await operation()
        except Exception as exc:
            self.handle(exc, context)
            return None

    def get_error_logs(self) -> List[ErrorLogEntry]:
        return list(self._log)

    def clear_error_logs(self) -> None:
        self._log.clear()
