"""
Board Errors

Failures a request can end with. Each carries the HTTP status it maps to
and the message key used to localize it.
"""


class BoardError(Exception):
    """Base class for request-terminating board failures."""

    status_code: int = 500
    message_key: str = "err_db"
    # Client errors never echo internal detail back
    show_detail: bool = True

    def __init__(self, detail: str | None = None, *, message_key: str | None = None):
        super().__init__(detail or self.message_key)
        self.detail = detail
        if message_key is not None:
            self.message_key = message_key

    def render(self, messages: dict[str, str]) -> str:
        """Localized body for the error response."""
        text = messages.get(self.message_key, self.message_key)
        if self.show_detail and self.detail:
            return f"{text}: {self.detail}"
        return text


class SubmissionValidationError(BoardError):
    """A required field is missing or a field is malformed."""

    status_code = 400
    message_key = "err_req"
    show_detail = False


class AuthorizationError(BoardError):
    """Admin token missing or not matching the configured secret."""

    status_code = 403
    message_key = "err_auth"
    show_detail = False


class MissingRecordIdError(BoardError):
    """Delete request without a usable record identifier."""

    status_code = 400
    message_key = "err_id"
    show_detail = False


class StoreUnavailableError(BoardError):
    """The database rejected or failed a write."""

    status_code = 500
