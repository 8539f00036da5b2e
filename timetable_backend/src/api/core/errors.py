"""Error taxonomy for the timetable document store.

Every error carries the HTTP status and the message reported to the caller as
``{"success": false, "error": message}``.
"""


class TimetableError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingPayload(TimetableError):
    status_code = 400
    default_message = "No data provided"


class MissingName(TimetableError):
    status_code = 400
    default_message = "Semester name required"


class Conflict(TimetableError):
    status_code = 400
    default_message = "Semester already exists"


class NotFound(TimetableError):
    status_code = 404
    default_message = "Semester not found"


class StorageReadFailure(TimetableError):
    status_code = 500
    default_message = "Failed to read database"


class StorageWriteFailure(TimetableError):
    status_code = 500
    default_message = "Failed to save database"


class InvalidPayload(TimetableError):
    status_code = 400
    default_message = "Invalid request body"
