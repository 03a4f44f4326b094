"""
Error types raised by the HTML to PDF converter.

Every failure surfaces to the caller as a single ``ConversionError`` (or subclass)
carrying a stable ``code`` and the HTTP status the web shell should answer with.
"""

from typing import Optional


class ConversionError(RuntimeError):
    """Generic render/print failure."""

    code = "CONVERSION_FAILED"
    http_status = 500

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code

    @property
    def message(self) -> str:
        return str(self)


class InvalidOption(ConversionError, ValueError):
    """A request option (format, margin, scale, brand...) could not be understood."""

    code = "INVALID_OPTION"
    http_status = 400


class UploadTooLarge(InvalidOption):
    """Uploaded file exceeds the configured size limit."""

    code = "SIZE_LIMIT"
    http_status = 413


class InputNotFound(ConversionError):
    """Missing input file, unreadable stdin or a URL that could not be loaded."""

    code = "INPUT_NOT_FOUND"
    http_status = 400


class AuthorizationFailure(ConversionError):
    """Letterhead requested without a valid access token."""

    code = "UNAUTHORIZED"
    http_status = 401


class RenderTimeout(ConversionError):
    """Navigation or print exceeded its time bound."""

    code = "RENDER_TIMEOUT"
    http_status = 504


class RenderEngineUnavailable(ConversionError):
    """The shared browser failed to start or died."""

    code = "ENGINE_UNAVAILABLE"
    http_status = 503


class IOFailure(ConversionError):
    """Writing the output or a temporary artifact failed."""

    code = "IO_FAILURE"
    http_status = 500


__all__ = [
    "ConversionError",
    "InvalidOption",
    "InputNotFound",
    "UploadTooLarge",
    "AuthorizationFailure",
    "RenderTimeout",
    "RenderEngineUnavailable",
    "IOFailure",
]
