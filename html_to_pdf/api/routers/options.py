from typing import Any, Dict

from fastapi import APIRouter

from ... import __version__
from ...brands import BRANDS
from ...letterhead import LETTERHEAD_MODES
from ...margins import MARGIN_PRESETS
from ...options import Orientation, PageFormat

router = APIRouter(tags=["options"])

FEATURES = [
    "High-fidelity CSS rendering",
    "Perfect page breaks",
    "No overlapping content",
    "Image support (PNG, JPG, SVG, WebP)",
    "Table formatting",
    "Custom fonts",
    "Background support",
    "Professional letterhead support",
    "Portrait and landscape orientation",
    "Letterhead on all pages or first page only",
]


@router.get("/options", summary="Available conversion options")
def options() -> Dict[str, Any]:
    return {
        "formats": [page_format.value for page_format in PageFormat],
        "margins": {name: margin.as_dict() for name, margin in MARGIN_PRESETS.items()},
        "orientations": [orientation.value for orientation in Orientation],
        "features": FEATURES,
        "letterhead": {
            "enabled": True,
            "types": list(BRANDS),
            "modes": list(LETTERHEAD_MODES),
            "description": "Add professional letterhead to pages",
            "includes": ["Company logo", "Contact information", "Professional footer"],
            "companies": {
                key: {
                    "name": brand.display_name,
                    "tagline": brand.tagline,
                    "contact": brand.contact_info(),
                }
                for key, brand in BRANDS.items()
            },
        },
        "version": __version__,
    }


__all__ = ["router"]
