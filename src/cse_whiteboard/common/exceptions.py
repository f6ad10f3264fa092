"""CSE Whiteboard exception hierarchy."""


class WhiteboardError(Exception):
    """Base exception for all Whiteboard errors."""

    status_code = 500

    def __init__(self, message: str = "", code: str = "WHITEBOARD_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UnauthorizedError(WhiteboardError):
    """Raised when the request carries no caller identity."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class ValidationError(WhiteboardError):
    """Raised when input fails its schema; reports the first failing constraint."""

    status_code = 422

    def __init__(self, message: str = "Invalid input", field: str | None = None):
        self.field = field
        detail = f"{field}: {message}" if field else message
        super().__init__(detail, code="VALIDATION_ERROR")
        self.reason = message


class NotFoundOrUnauthorizedError(WhiteboardError):
    """Raised when a row is missing or owned by another user.

    Both cases produce the same error so callers cannot probe for the
    existence of other users' records.
    """

    status_code = 404

    def __init__(self, entity: str = "Record"):
        super().__init__(f"{entity} not found or unauthorized", code="NOT_FOUND")


class SummaryUnavailableError(WhiteboardError):
    """Raised by the summary client when no executive summary could be produced."""

    status_code = 502

    def __init__(self, message: str = "Executive summary unavailable"):
        super().__init__(message, code="SUMMARY_UNAVAILABLE")
