from enum import Enum


class ValidationKind(str, Enum):
    """Why a field assignment was rejected."""
    EMPTY_OR_INSECURE = "empty_or_insecure"
    TOO_LARGE = "too_large"
    INVALID_FORMAT = "invalid_format"
    INVALID_IDENTIFIER = "invalid_identifier"


class AuthorError(Exception):
    """Base class for author errors."""


class AuthorValidationError(AuthorError, ValueError):
    """
    A field value was rejected.
    Subclasses ValueError so pydantic validators can raise it directly.
    """

    def __init__(self, field: str, kind: ValidationKind, message: str):
        super().__init__(message)
        self.field: str = field
        self.kind: ValidationKind = kind
        self.message: str = message

    def to_dict(self) -> dict[str, object]:
        return {"field": self.field, "kind": self.kind.value}


class AuthorNotFoundError(AuthorError):
    def __init__(self, lookup: str, value: object):
        super().__init__(f"author not found for {lookup}={value}")
        self.lookup: str = lookup


class AuthorStorageError(AuthorError):
    """The database rejected or failed a statement."""

    def __init__(self, operation: str, message: str, conflict: bool = False):
        super().__init__(f"author {operation} failed: {message}")
        self.operation: str = operation
        self.conflict: bool = conflict
