"""
Domain-level exceptions.

Hierarchical exceptions allow catching at different granularities.
"""


class WordStreamError(Exception):
    """Base exception for all wordstream errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "message": self.message,
            "details": self.details,
            "type": type(self).__name__
        }


class ValidationError(WordStreamError):
    """The requested count is missing, non-numeric or not positive.

    Raised before any network call is made.
    """

    def __init__(self, message: str, value: object = None, details: dict | None = None):
        super().__init__(message, details)
        self.value = value


class TransportError(WordStreamError):
    """Non-success status, connection failure, or a failed read mid-stream."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None
    ):
        super().__init__(message, details)
        self.status_code = status_code

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.status_code is not None:
            result["status_code"] = self.status_code
        return result


class MalformedStreamEndError(TransportError):
    """The body ended without the terminator line."""

    def __init__(self, message: str, received_chars: int = 0, details: dict | None = None):
        super().__init__(message, details=details)
        self.received_chars = received_chars
