"""Error taxonomy for the application tracker."""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of tracker failure, each with a fixed user-facing message."""

    INVALID_EMAIL = "invalid_email"
    EMPTY_FIELDS = "empty_fields"
    APPLICATION_NOT_FOUND = "application_not_found"
    SAVE_FAILED = "save_failed"
    INVALID_DATE = "invalid_date"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ErrorKind.INVALID_EMAIL: "Please enter a valid email address",
    ErrorKind.EMPTY_FIELDS: "Please fill in all required fields",
    ErrorKind.APPLICATION_NOT_FOUND: "Application not found",
    ErrorKind.SAVE_FAILED: "Failed to save application",
    ErrorKind.INVALID_DATE: "Please enter a valid date",
}


class TrackerError(Exception):
    """Exception raised when a tracker operation is rejected.

    The string form is always the kind's fixed message so callers can show it
    directly to the user.
    """

    def __init__(self, kind: ErrorKind, detail: str | None = None):
        super().__init__(kind.message)
        self.kind = kind
        self.detail = detail
