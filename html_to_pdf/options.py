"""Request-scoped conversion options shared by the CLI and the HTTP service."""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .brands import DEFAULT_BRAND, get_brand
from .errors import InvalidOption
from .letterhead import LETTERHEAD_MODES
from .margins import MARGIN_PRESETS, Margin

SCALE_RECOMMENDED = (0.8, 1.2)
# Chromium rejects anything outside this range
SCALE_LIMITS = (0.1, 2.0)


class PageFormat(str, Enum):
    A4 = "A4"
    A3 = "A3"
    LETTER = "Letter"
    LEGAL = "Legal"
    TABLOID = "Tabloid"

    @classmethod
    def parse(cls, value: Any) -> "PageFormat":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        formats = ", ".join(member.value for member in cls)
        raise InvalidOption(f"Invalid page format '{value}'. Available formats: {formats}")


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


def parse_bool(value: Any) -> bool:
    """Interpret JSON booleans and form strings ('true', 'on', '1')."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def parse_margin(value: Any) -> Margin:
    """Accept a Margin, a preset name, CSS shorthand, a mapping, or a JSON-encoded mapping."""
    if value is None or value == "":
        return MARGIN_PRESETS["medium"]
    if isinstance(value, Margin):
        return value
    if isinstance(value, Mapping):
        return Margin.from_mapping(value)
    text = str(value).strip()
    if text.startswith("{"):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidOption(f"Invalid margin JSON: {e}")
        if not isinstance(data, dict):
            raise InvalidOption("Margin JSON must be an object")
        return Margin.from_mapping(data)
    return Margin.parse(text)


def parse_scale(value: Any) -> float:
    if value is None or value == "":
        return 1.0
    try:
        scale = float(value)
    except (TypeError, ValueError):
        raise InvalidOption(f"Invalid scale '{value}'. Use a number such as 1.0")
    if not SCALE_LIMITS[0] <= scale <= SCALE_LIMITS[1]:
        raise InvalidOption(f"Scale {scale} out of range {SCALE_LIMITS[0]}-{SCALE_LIMITS[1]}")
    return scale


@dataclass
class ConversionOptions:
    page_format: PageFormat = PageFormat.A4
    orientation: Orientation = Orientation.PORTRAIT
    margin: Margin = field(default_factory=lambda: MARGIN_PRESETS["medium"])
    scale: float = 1.0
    letterhead: bool = False
    letterhead_type: str = DEFAULT_BRAND
    letterhead_mode: str = "all"
    password: Optional[str] = None

    @property
    def landscape(self) -> bool:
        return self.orientation is Orientation.LANDSCAPE

    @property
    def scale_is_recommended(self) -> bool:
        return SCALE_RECOMMENDED[0] <= self.scale <= SCALE_RECOMMENDED[1]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ConversionOptions":
        """Normalise an HTTP body or form into options.

        Keys follow the public API (``format``, ``landscape``, ``letterheadType``...).
        """
        letterhead_type = str(payload.get("letterheadType") or DEFAULT_BRAND).strip().lower()
        get_brand(letterhead_type)
        letterhead_mode = str(payload.get("letterheadMode") or "all").strip().lower()
        if letterhead_mode not in LETTERHEAD_MODES:
            raise InvalidOption(f"Invalid letterhead mode '{letterhead_mode}'. Use one of: {', '.join(LETTERHEAD_MODES)}")
        password = payload.get("password")
        return cls(
            page_format=PageFormat.parse(payload.get("format") or PageFormat.A4.value),
            orientation=Orientation.LANDSCAPE if parse_bool(payload.get("landscape")) else Orientation.PORTRAIT,
            margin=parse_margin(payload.get("margin")),
            scale=parse_scale(payload.get("scale")),
            letterhead=parse_bool(payload.get("letterhead")),
            letterhead_type=letterhead_type,
            letterhead_mode=letterhead_mode,
            password=str(password) if password is not None else None,
        )

    def to_public_dict(self) -> Dict[str, Any]:
        """Echo of the options in API form, without the access token."""
        return {
            "format": self.page_format.value,
            "landscape": self.landscape,
            "margin": self.margin.as_dict(),
            "scale": self.scale,
            "letterhead": self.letterhead,
            "letterheadType": self.letterhead_type,
            "letterheadMode": self.letterhead_mode,
        }


__all__ = [
    "ConversionOptions",
    "Orientation",
    "PageFormat",
    "SCALE_LIMITS",
    "SCALE_RECOMMENDED",
    "parse_bool",
    "parse_margin",
    "parse_scale",
]
