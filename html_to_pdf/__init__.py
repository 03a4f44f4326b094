"""
HTML to PDF conversion with optional company letterhead, rendered by headless Chromium.
"""

__version__ = "1.0.0"

from .config import Config
from .converter import ConversionResult, HtmlSource, HtmlToPdfConverter
from .engine import BrowserEngine
from .errors import (
    AuthorizationFailure,
    ConversionError,
    InputNotFound,
    InvalidOption,
    IOFailure,
    RenderEngineUnavailable,
    RenderTimeout,
)
from .options import ConversionOptions, Orientation, PageFormat

__all__ = [
    "AuthorizationFailure",
    "BrowserEngine",
    "Config",
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "HtmlSource",
    "HtmlToPdfConverter",
    "InputNotFound",
    "InvalidOption",
    "IOFailure",
    "Orientation",
    "PageFormat",
    "RenderEngineUnavailable",
    "RenderTimeout",
    "__version__",
]
