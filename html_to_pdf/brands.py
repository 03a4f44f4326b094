"""
Letterhead brand profiles.

Each brand is plain data; the letterhead renderer is shared, so adding a brand means
adding a ``BrandProfile`` to ``BRANDS`` and dropping its logo into the assets directory.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

from .errors import InvalidOption


@dataclass(frozen=True)
class Typography:
    """Header font sizes for one orientation."""

    company_size: str
    tagline_size: str
    contact_size: str
    footer_size: str


@dataclass(frozen=True)
class BrandProfile:
    key: str
    display_name: str
    tagline: str
    contact_lines: Tuple[str, ...]
    accent_color: str
    logo_asset_key: str
    footer_text: str
    website: str
    text_color: str = "#333"
    tagline_color: str = "#666"
    portrait: Typography = field(default_factory=lambda: Typography("22px", "11px", "10px", "10px"))
    landscape: Typography = field(default_factory=lambda: Typography("18px", "9px", "8px", "9px"))

    def typography(self, orientation: str) -> Typography:
        return self.landscape if orientation == "landscape" else self.portrait

    def contact_info(self) -> Dict[str, object]:
        """Contact details grouped for the ``/options`` endpoint."""
        emails = [line.split(":", 1)[-1].strip() for line in self.contact_lines if "@" in line]
        phones = [line.split(":", 1)[-1].strip() for line in self.contact_lines if "+" in line]
        others = [
            line.split(":", 1)[-1].strip()
            for line in self.contact_lines
            if "@" not in line and "+" not in line
        ]
        return {
            "email": emails,
            "phone": phones[0] if phones else None,
            "location": others[-1] if others else None,
        }


BRANDS: Dict[str, BrandProfile] = {
    "trivanta": BrandProfile(
        key="trivanta",
        display_name="Trivanta Edge",
        tagline="From Land to Legacy – with Edge",
        contact_lines=(
            "sales@trivantaedge.com",
            "info@trivantaedge.com",
            "+91 9373015503",
            "Kalyan, Maharashtra",
        ),
        accent_color="#2c5282",
        text_color="#1a365d",
        tagline_color="#2c5282",
        logo_asset_key="trivanta",
        footer_text="© 2025 Trivanta Edge. All rights reserved.",
        website="www.trivantaedge.com",
        portrait=Typography("22px", "11px", "10px", "10px"),
        landscape=Typography("18px", "9px", "8px", "9px"),
    ),
    "dazzlo": BrandProfile(
        key="dazzlo",
        display_name="Dazzlo Enterprises Pvt Ltd",
        tagline="Redefining lifestyle with Innovations and Dreams",
        contact_lines=(
            "Tel: +91 9373015503",
            "Email: info@dazzlo.co.in",
            "Address: Kalyan, Maharashtra 421301",
        ),
        accent_color="#d4af37",
        text_color="#333",
        tagline_color="#666",
        logo_asset_key="logo",
        footer_text="info@dazzlo.co.in",
        website="www.dazzlo.co.in",
        portrait=Typography("24px", "13px", "12px", "10px"),
        landscape=Typography("20px", "11px", "10px", "9px"),
    ),
}

DEFAULT_BRAND = "trivanta"


def get_brand(key: str) -> BrandProfile:
    """Look up a brand by key (case-insensitive)."""
    try:
        return BRANDS[str(key).strip().lower()]
    except KeyError:
        available = ", ".join(BRANDS)
        raise InvalidOption(f"Invalid letterhead type '{key}'. Available types: {available}")


__all__ = ["BRANDS", "BrandProfile", "DEFAULT_BRAND", "Typography", "get_brand"]
