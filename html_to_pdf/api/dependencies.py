"""FastAPI dependency providers for application services."""

from fastapi import HTTPException, Request

from ..config import Config
from ..converter import HtmlToPdfConverter
from ..errors import RenderEngineUnavailable


def get_config(request: Request) -> Config:
    config = getattr(request.app.state, "config", None)
    if config is None:
        raise HTTPException(status_code=503, detail="CONFIG_UNAVAILABLE")
    return config


def get_converter(request: Request) -> HtmlToPdfConverter:
    converter = getattr(request.app.state, "converter", None)
    if converter is None or not converter.engine.is_running:
        raise RenderEngineUnavailable("PDF converter not available. Please try again later.")
    return converter


__all__ = ["get_config", "get_converter"]
