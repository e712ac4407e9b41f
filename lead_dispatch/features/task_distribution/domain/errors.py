"""
Error taxonomy for the task distribution pipeline.

Every error carries the HTTP status it maps to and renders its own
response payload, so the API layer needs a single exception handler.
"""

from typing import Any

from .models import Record


class TaskDistributionError(Exception):
    """Base class for expected failures of the distribution feature."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message}


class ParseError(TaskDistributionError):
    """The uploaded file could not be decoded in its declared format."""

    status_code = 400


class UnsupportedFileTypeError(ParseError):
    """The uploaded file has an extension that is not CSV or Excel."""


class EmptyInputError(TaskDistributionError):
    """The uploaded file contained no data rows."""

    status_code = 400

    def __init__(self, message: str = "Invalid file or empty data"):
        super().__init__(message)


class ValidationError(TaskDistributionError):
    """One or more rows are missing a required field."""

    status_code = 400

    def __init__(self, invalid_rows: list[Record], required_fields: tuple[str, ...]):
        fields = " and ".join(required_fields)
        super().__init__(f"Invalid data format. {fields} are required fields.")
        self.invalid_rows = invalid_rows
        self.required_fields = required_fields

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, "invalidRows": self.invalid_rows}


class RosterSizeError(TaskDistributionError):
    """The eligible roster does not have the required number of agents."""

    status_code = 400

    def __init__(self, actual: int, required: int):
        super().__init__(
            f"Exactly {required} agents are required for task distribution, found {actual}"
        )
        self.actual = actual
        self.required = required

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, "actual": self.actual, "required": self.required}


class UploadConflictError(TaskDistributionError):
    """Uploads are refused while tasks exist (reject policy)."""

    status_code = 409

    def __init__(self, existing_tasks: int):
        super().__init__(
            f"{existing_tasks} tasks are already distributed; clear them before uploading again"
        )
        self.existing_tasks = existing_tasks


class UploadTooLargeError(TaskDistributionError):
    status_code = 413

    def __init__(self, limit_bytes: int):
        super().__init__(f"Uploaded file exceeds the {limit_bytes} byte limit")
        self.limit_bytes = limit_bytes


class PersistenceError(TaskDistributionError):
    """A write to the task store failed; nothing was persisted."""

    status_code = 500


class NotFoundError(TaskDistributionError):
    status_code = 404
