"""Errors raised by the dashboard services.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Details meant for the logs go in the regular exception
message.
"""
from typing import Optional


class WordboardError(Exception):
    """Base class for all dashboard errors."""
    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: str = "", public_message: Optional[str] = None):
        super().__init__(message or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class ValidationError(WordboardError):
    """A required request field is missing or malformed."""
    status_code = 400
    public_message = "Invalid request"

    def __init__(self, message: str):
        # Validation messages describe the caller's own input
        super().__init__(message, public_message=message)


class ConfigurationError(WordboardError):
    """The Notion credential or database id is not configured."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message, public_message=message)


class NotFoundError(WordboardError):
    """Name resolution found no matching record."""
    status_code = 404
    public_message = "Word not found"


class UpstreamError(WordboardError):
    """Any failure talking to Notion, including timeouts."""
    status_code = 500
    public_message = "Notion request failed"

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
