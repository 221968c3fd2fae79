import copy
from typing import Optional


class TaskError(Exception):
    """Base error for every task operation failure."""

    kind = "error"

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def wrap(self, context: str) -> "TaskError":
        """Return a copy of this error with one more layer of context."""
        wrapped = copy.copy(self)
        wrapped.message = f"{context}: {self.message}"
        wrapped.args = (wrapped.message,)
        wrapped.cause = self
        return wrapped


class ValidationError(TaskError):
    """A required field is missing or empty."""

    kind = "validation"


class NotFoundError(TaskError):
    kind = "not_found"

    def __init__(self, message: str = "task not found", *, cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)


class AlreadyExistsError(TaskError):
    kind = "already_exists"


class StorageError(TaskError):
    """Raised when the persistence layer fails (connection, query, row mapping)."""

    kind = "storage"

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause=cause)
        self.operation = operation


class DecodeError(TaskError):
    """Inbound payload could not be parsed into a request type."""

    kind = "decode"


class CancelledError(TaskError):
    kind = "cancelled"


class NotInitializedError(TaskError):
    kind = "not_initialized"

    def __init__(self, message: str = "database not initialized", *, cause: Optional[BaseException] = None):
        super().__init__(message, cause=cause)
