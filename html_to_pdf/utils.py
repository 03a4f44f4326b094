"""Small helpers: artifact naming, path safety and the PDF page-count scan."""

import re
import time
import uuid
from pathlib import Path
from typing import Optional

SAFE_FILENAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

# Page tree nodes carry "/Count N"; the root node holds the document total
_PAGE_COUNT_RE = re.compile(rb"/Type\s*/Pages\b[^>]*?/Count\s+(\d+)|/Count\s+(\d+)[^>]*?/Type\s*/Pages\b", re.DOTALL)
_ANY_COUNT_RE = re.compile(rb"/Count\s+(\d+)")


def temp_artifact_name(prefix: str = "temp", suffix: str = ".html") -> str:
    """Collision-free file name for a per-request temporary artifact."""
    return f"{prefix}_{uuid.uuid4().hex}{suffix}"


def output_filename(prefix: str = "document") -> str:
    """Name for a server-side output PDF, unique across concurrent requests."""
    epoch_ms = int(time.time() * 1000)
    return f"{prefix}_{epoch_ms}_{uuid.uuid4().hex[:8]}.pdf"


def is_safe_filename(name: str) -> bool:
    """True if ``name`` is a bare file name (no separators, no parent references)."""
    return bool(SAFE_FILENAME_RE.match(name)) and ".." not in name


def resolve_within(base: Path, name: str) -> Optional[Path]:
    """Return ``base / name`` when it stays inside ``base``, else None."""
    if not is_safe_filename(name):
        return None
    base = base.resolve()
    candidate = (base / name).resolve()
    if candidate.parent != base:
        return None
    return candidate


def estimate_page_count(pdf_bytes: bytes) -> Optional[int]:
    """Best-effort page count from the raw PDF page tree.

    Scans for ``/Count`` entries of ``/Pages`` nodes and returns the largest, which
    is the root. Returns None when nothing matches (e.g. compressed object
    streams); callers should treat the number as advisory.
    """
    counts = [int(a or b) for a, b in _PAGE_COUNT_RE.findall(pdf_bytes)]
    if not counts:
        counts = [int(n) for n in _ANY_COUNT_RE.findall(pdf_bytes)]
    counts = [n for n in counts if n > 0]
    if not counts:
        return None
    return max(counts)


__all__ = [
    "estimate_page_count",
    "is_safe_filename",
    "output_filename",
    "resolve_within",
    "temp_artifact_name",
]
