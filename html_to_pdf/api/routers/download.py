import asyncio
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from ...config import Config
from ...logging_utils import get_logger
from ...utils import resolve_within
from ..dependencies import get_config

router = APIRouter(tags=["download"])

logger = get_logger(__name__)


@router.get("/download/{filename}", summary="Download a generated PDF")
async def download(filename: str, config: Config = Depends(get_config)) -> FileResponse:
    path = resolve_within(config.get_output_dir(), filename)
    if path is None or not path.is_file():
        raise HTTPException(status_code=404, detail="File not found")
    cleanup = BackgroundTask(_remove_later, path, config.get_download_ttl_s())
    return FileResponse(path, media_type="application/pdf", filename=filename, background=cleanup)


async def _remove_later(path: Path, delay_s: float) -> None:
    """Delete a served PDF once the client has had time to finish the download."""
    if delay_s > 0:
        await asyncio.sleep(delay_s)
    try:
        path.unlink(missing_ok=True)
        logger.debug(f"Removed downloaded file {path.name}")
    except OSError as e:
        logger.warning(f"Could not remove {path}: {e}")


__all__ = ["router"]
