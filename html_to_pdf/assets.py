"""Brand logo loading: PNG files from the assets directory embedded as data URIs."""

import base64
import io
from pathlib import Path
from typing import Optional

from PIL import Image, ImageFilter, UnidentifiedImageError

from .logging_utils import get_logger

LOGO_MAX_SIZE = (120, 120)

logger = get_logger(__name__)


def load_logo_data_uri(assets_dir: Path, logo_key: str) -> Optional[str]:
    """Return ``data:image/png;base64,...`` for ``<assets_dir>/<logo_key>.png``.

    The image is converted to RGBA and shrunk to fit ``LOGO_MAX_SIZE`` so the
    per-page header template stays small. Returns None when the logo is missing
    or unreadable; letterheads then render without an image.
    """
    logo_path = Path(assets_dir) / f"{logo_key}.png"
    if not logo_path.is_file():
        logger.warning(f"Logo file not found: {logo_path}")
        return None

    try:
        with Image.open(logo_path) as img:
            img = img.convert("RGBA")
            original_size = img.size
            img.thumbnail(LOGO_MAX_SIZE, Image.Resampling.LANCZOS)
            if img.size != original_size:
                # Compensate for downscale blur
                img = img.filter(ImageFilter.UnsharpMask(radius=0.5, percent=150, threshold=3))
            buffer = io.BytesIO()
            img.save(buffer, format="PNG", optimize=True)
    except (OSError, UnidentifiedImageError) as e:
        logger.warning(f"Error loading logo {logo_path.name}: {e}")
        return None

    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    logger.debug(f"Loaded logo: {logo_path.name} ({img.size[0]}x{img.size[1]}px)")
    return f"data:image/png;base64,{encoded}"


__all__ = ["LOGO_MAX_SIZE", "load_logo_data_uri"]
