"""Error taxonomy shared by the data access and service layers."""

from enum import Enum


class ErrorKind(str, Enum):
    STORAGE = "storage"
    INVALID_INPUT = "invalid_input"
    OUT_OF_RANGE = "out_of_range"


class StorageError(Exception):
    """Raised by repositories when the underlying data store fails."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Database error while {operation}")


class ServiceError(Exception):
    """Domain-level failure carrying an error kind and the original cause."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        cause: Exception | None = None,
    ):
        self.kind = kind
        self.message = message
        self.cause = cause
        super().__init__(message)

    @property
    def detail(self) -> str | None:
        """Message of the original cause, if any."""
        return str(self.cause) if self.cause is not None else None

    def __repr__(self) -> str:
        return f"ServiceError(kind={self.kind.value!r}, message={self.message!r})"
