"""Error taxonomy for the record store.

Every error carries enough structure (kind, offending field, batch index) for a
caller to act on it programmatically. ``status_code`` is the class of response
a transport layer should map the error to.
"""

from typing import Any
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError


class HourTrackerError(Exception):
    """Base class for all errors raised by the core."""

    status_code: int = 500
    kind: str = "error"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        index: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.index = index

    def at_index(self, index: int) -> "HourTrackerError":
        """Attach the 1-based batch position of the candidate that failed."""
        self.index = index
        return self

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        if self.index is not None:
            data["index"] = self.index
        return data

    def __str__(self) -> str:
        if self.index is not None:
            return f"Entry {self.index}: {self.message}"
        return self.message


class ValidationError(HourTrackerError):
    """Malformed or missing input."""

    status_code = 400
    kind = "validation"

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Convert a pydantic error into a domain error naming the first bad field."""
        errors = exc.errors()
        if not errors:
            return cls("Invalid input")
        first = errors[0]
        loc = first.get("loc") or ()
        field = ".".join(str(part) for part in loc) or None
        message = first.get("msg", "Invalid input")
        # Strip pydantic's "Value error, " prefix from custom validators
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        return cls(f"{field}: {message}" if field else message, field=field)


class ReferentialError(HourTrackerError):
    """A referenced row does not exist in the caller's tenant."""

    status_code = 400
    kind = "referential"


class ConflictError(HourTrackerError):
    """The interval overlaps another active interval of the same user."""

    status_code = 409
    kind = "conflict"

    def __init__(
        self,
        message: str = "This time entry overlaps with an existing entry.",
        *,
        field: str | None = None,
        index: int | None = None,
        conflicting_ids: list[UUID] | None = None,
        conflicting_index: int | None = None,
    ):
        super().__init__(message, field=field, index=index)
        self.conflicting_ids = conflicting_ids or []
        self.conflicting_index = conflicting_index

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.conflicting_index is not None:
            data["conflicting_index"] = self.conflicting_index
        return data


class NotFoundError(HourTrackerError):
    """Mutation target is missing, soft-deleted, or owned by another tenant.

    The three cases are deliberately indistinguishable.
    """

    status_code = 404
    kind = "not_found"


class StorageError(HourTrackerError):
    """Infrastructure failure (connection loss, timeout). Safe to retry as a whole."""

    status_code = 500
    kind = "storage"
