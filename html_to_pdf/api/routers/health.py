import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from ... import __version__
from ...config import Config
from ..dependencies import get_config

router = APIRouter(tags=["health"])


@router.get("/health", summary="Health check")
def health(request: Request, config: Config = Depends(get_config)) -> Dict[str, Any]:
    engine = getattr(request.app.state, "engine", None)
    started = getattr(request.app.state, "started_at", time.monotonic())
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started, 3),
        "converter": "initialized" if engine is not None and engine.is_running else "not initialized",
        "chrome": config.get_chromium_executable() or "auto-detect",
        "version": __version__,
    }


__all__ = ["router"]
