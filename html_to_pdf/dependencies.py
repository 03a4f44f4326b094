"""Runtime dependency checks for the Playwright/Chromium render engine."""

import importlib.util
import subprocess
import sys
from pathlib import Path
from typing import Optional

from .logging_utils import get_logger

INSTALL_BROWSER_CMD = [sys.executable, "-m", "playwright", "install", "chromium"]

logger = get_logger(__name__)


def check_playwright() -> bool:
    """Check that the Playwright package is importable."""
    if importlib.util.find_spec("playwright") is None:
        logger.error("Playwright is not installed. Install it with: pip install playwright")
        return False
    logger.debug("Playwright is available")
    return True


def check_chromium(executable: Optional[str] = None) -> bool:
    """Check that a Chromium build is available for Playwright."""
    if executable:
        if not Path(executable).is_file():
            logger.error(f"Configured Chromium executable not found: {executable}")
            return False
        logger.debug(f"Using Chromium at {executable}")
        return True

    try:
        result = subprocess.run(
            INSTALL_BROWSER_CMD + ["--dry-run"],
            check=True, capture_output=True, text=True,
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        logger.warning(f"Could not verify the Chromium install: {e}")
        # The launch itself will report a missing browser
        return True

    for line in result.stdout.splitlines():
        line = line.strip()
        if line.lower().startswith("install location:"):
            location = Path(line.split(":", 1)[1].strip())
            if not location.exists():
                logger.error("Playwright Chromium is not installed. Run: " + " ".join(INSTALL_BROWSER_CMD[1:]))
                return False
            logger.debug(f"Chromium installed at {location}")
            return True
    return True


def install_chromium() -> bool:
    """Install Playwright's Chromium build."""
    logger.info("Installing Playwright Chromium...")
    try:
        subprocess.run(INSTALL_BROWSER_CMD, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to install Playwright Chromium: {e.stderr}")
        return False
    logger.success("Playwright Chromium installed successfully")
    return True


def check_dependencies(executable: Optional[str] = None) -> bool:
    """Return True when the render engine can be started."""
    if not check_playwright():
        return False
    return check_chromium(executable)


__all__ = ["check_chromium", "check_dependencies", "check_playwright", "install_chromium"]
