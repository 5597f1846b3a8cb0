"""
Exception hierarchy for Tika extraction backends.

Every failure raised by a backend is a subclass of TikaExtractError so callers
can catch the whole family in one place, or a specific kind when they care
about the cause (e.g. MissingContentError for an empty document).
"""

from typing import Optional


class TikaExtractError(RuntimeError):
    """Base class for all tika_extract errors."""


class ParseError(TikaExtractError):
    """Raised for a malformed URL, MIME type, or JSON payload."""


class ProcessError(TikaExtractError):
    """Raised when the local engine process cannot be spawned or fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr

    def __str__(self) -> str:
        message = super().__str__()
        if self.stderr:
            return f"{message}\n{self.stderr.strip()}"
        return message


class TransportError(TikaExtractError):
    """Raised for non-UTF-8 engine output or a failed network exchange."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InputNotSetError(TikaExtractError):
    """Raised when a remote accessor is called before an input is set."""


class MissingContentError(TikaExtractError):
    """Raised when the expected field is absent or not a string."""


class IoError(TikaExtractError):
    """Raised when reading the input or staging scratch files fails."""
