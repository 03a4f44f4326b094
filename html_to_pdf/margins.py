"""
Page margin handling: dimension parsing, margin addition and the letterhead
margin reconciliation passed to Chromium's print API.
"""

import re
from dataclasses import dataclass, replace
from typing import Dict, Mapping, NamedTuple

from .errors import InvalidOption

DEFAULT_UNIT = "mm"

_DIMENSION_RE = re.compile(r'^(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\s*(cm|in|mm|pt|px)?$')

# Millimetres per unit
_MM_PER_UNIT = {
    "mm": 1.0,
    "cm": 10.0,
    "in": 25.4,
    "pt": 25.4 / 72,
    "px": 25.4 / 96,  # Assuming 96 DPI
}

# Extra space reserved for the letterhead bands, per mode and orientation.
# Tunable defaults; callers must not rely on the exact values.
LETTERHEAD_ALLOWANCES: Dict[str, Dict[str, Dict[str, str]]] = {
    "all": {
        "portrait": {"top": "30mm", "bottom": "10mm"},
        "landscape": {"top": "25mm", "bottom": "10mm"},
    },
    "first": {
        "portrait": {"top": "0mm", "bottom": "0mm"},
        "landscape": {"top": "0mm", "bottom": "0mm"},
    },
}


class Dimension(NamedTuple):
    value: float
    unit: str

    def to(self, unit: str) -> "Dimension":
        """Return this dimension expressed in another unit."""
        if unit == self.unit:
            return self
        millimetres = self.value * _MM_PER_UNIT[self.unit]
        return Dimension(millimetres / _MM_PER_UNIT[unit], unit)

    def __str__(self) -> str:
        return f"{format_number(self.value)}{self.unit}"


def format_number(value: float) -> str:
    """Format a float without trailing zeros (42.0 -> '42', 12.50 -> '12.5')."""
    rounded = round(value, 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.3f}".rstrip("0").rstrip(".")


def parse_dimension(value) -> Dimension:
    """Parse a dimension such as '12mm', '1.5in' or '12' (millimetres)."""
    match = _DIMENSION_RE.match(str(value).strip())
    if not match:
        raise InvalidOption(f"Invalid margin format: '{value}'. Use format like '1in', '2.5cm', '10mm', etc.")
    value_str, unit = match.groups()
    number = float(value_str)
    if number < 0:
        raise InvalidOption(f"Invalid margin '{value}': margins cannot be negative")
    return Dimension(number, unit or DEFAULT_UNIT)


def add_margin(base, additional) -> str:
    """Add ``additional`` to ``base`` and return the sum in the unit of ``base``.

    Mismatched units are normalised into the base unit before summing, so
    ``add_margin('1in', '25.4mm')`` is ``'2in'``.
    """
    base_dim = parse_dimension(base)
    extra = parse_dimension(additional).to(base_dim.unit)
    return str(Dimension(base_dim.value + extra.value, base_dim.unit))


@dataclass(frozen=True)
class Margin:
    """Four page margins as CSS dimension strings."""

    top: str = "12mm"
    right: str = "10mm"
    bottom: str = "14mm"
    left: str = "10mm"

    def as_dict(self) -> Dict[str, str]:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "Margin":
        """Build a margin from a ``{top, right, bottom, left}`` mapping; missing sides keep defaults."""
        defaults = cls()
        sides = {}
        for side in ("top", "right", "bottom", "left"):
            raw = data.get(side)
            sides[side] = str(parse_dimension(raw)) if raw is not None else getattr(defaults, side)
        return cls(**sides)

    @classmethod
    def parse(cls, text: str) -> "Margin":
        """Parse a preset name or 1, 2 or 4 CSS-style values."""
        text = text.strip()
        if text.lower() in MARGIN_PRESETS:
            return MARGIN_PRESETS[text.lower()]

        parts = [str(parse_dimension(part)) for part in text.split()]
        if len(parts) == 1:
            # All margins same
            return cls(parts[0], parts[0], parts[0], parts[0])
        elif len(parts) == 2:
            # Vertical and horizontal
            return cls(parts[0], parts[1], parts[0], parts[1])
        elif len(parts) == 4:
            return cls(*parts)
        raise InvalidOption(f"Invalid margin format: '{text}'. Use 1, 2, or 4 values or a preset name.")


MARGIN_PRESETS: Dict[str, Margin] = {
    "small": Margin("10mm", "8mm", "12mm", "8mm"),
    "medium": Margin("12mm", "10mm", "14mm", "10mm"),
    "large": Margin("20mm", "15mm", "20mm", "15mm"),
}


def reconcile_margins(margin: Margin, orientation: str, mode: str) -> Margin:
    """Grow the top and bottom margins to make room for the letterhead bands."""
    try:
        allowance = LETTERHEAD_ALLOWANCES[mode][orientation]
    except KeyError:
        raise InvalidOption(f"No letterhead allowance for mode '{mode}' and orientation '{orientation}'")
    return replace(
        margin,
        top=add_margin(margin.top, allowance["top"]),
        bottom=add_margin(margin.bottom, allowance["bottom"]),
    )


__all__ = [
    "Dimension",
    "LETTERHEAD_ALLOWANCES",
    "MARGIN_PRESETS",
    "Margin",
    "add_margin",
    "format_number",
    "parse_dimension",
    "reconcile_margins",
]
