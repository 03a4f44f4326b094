from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...config import Config
from ...converter import ConversionResult, HtmlToPdfConverter
from ...errors import InputNotFound, InvalidOption, UploadTooLarge
from ...logging_utils import get_logger
from ...options import ConversionOptions
from ...utils import output_filename
from ..dependencies import get_config, get_converter
from ..schemas import ConversionResponse, HtmlConvertRequest, UrlConvertRequest

router = APIRouter(prefix="/convert", tags=["conversion"])

logger = get_logger(__name__)

HTML_SUFFIXES = (".html", ".htm")


@router.post("/html", summary="Convert an HTML string", response_model=ConversionResponse)
async def convert_html(
    payload: HtmlConvertRequest,
    converter: HtmlToPdfConverter = Depends(get_converter),
    config: Config = Depends(get_config),
) -> Dict[str, Any]:
    if not payload.html.strip():
        raise InputNotFound("HTML content is required")
    options = ConversionOptions.from_payload(payload.option_fields())
    output_path = _output_path(config)
    logger.info(f"Converting HTML to PDF: {output_path.name}")
    result = await converter.convert_html(payload.html, output_path, options)
    return _conversion_response(result, options)


@router.post("/file", summary="Convert an uploaded HTML file", response_model=ConversionResponse)
async def convert_file(
    htmlFile: UploadFile = File(...),
    format: Optional[str] = Form(None),
    landscape: Optional[str] = Form(None),
    margin: Optional[str] = Form(None),
    scale: Optional[str] = Form(None),
    letterhead: Optional[str] = Form(None),
    letterheadType: Optional[str] = Form(None),
    letterheadMode: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    converter: HtmlToPdfConverter = Depends(get_converter),
    config: Config = Depends(get_config),
) -> Dict[str, Any]:
    _ensure_html_upload(htmlFile)
    content = await htmlFile.read()
    _enforce_size_limit(content, config)
    try:
        html = content.decode("utf-8")
    except UnicodeDecodeError:
        raise InvalidOption("Uploaded file is not valid UTF-8 HTML")

    options = ConversionOptions.from_payload({
        "format": format,
        "landscape": landscape,
        "margin": margin,
        "scale": scale,
        "letterhead": letterhead,
        "letterheadType": letterheadType,
        "letterheadMode": letterheadMode,
        "password": password,
    })
    output_path = _output_path(config)
    logger.info(f"Converting uploaded file {htmlFile.filename} to PDF: {output_path.name}")
    result = await converter.convert_html(html, output_path, options)
    return _conversion_response(result, options)


@router.post("/url", summary="Convert a web page", response_model=ConversionResponse)
async def convert_url(
    payload: UrlConvertRequest,
    converter: HtmlToPdfConverter = Depends(get_converter),
    config: Config = Depends(get_config),
) -> Dict[str, Any]:
    url = payload.url.strip()
    if not url:
        raise InputNotFound("URL is required")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidOption("Invalid URL format")
    options = ConversionOptions.from_payload(payload.option_fields())
    output_path = _output_path(config)
    logger.info(f"Converting URL to PDF: {url}")
    result = await converter.convert_url(url, output_path, options)
    return _conversion_response(result, options)


def _output_path(config: Config) -> Path:
    return config.get_output_dir() / output_filename()


def _ensure_html_upload(upload: UploadFile) -> None:
    name = (upload.filename or "").lower()
    if upload.content_type == "text/html" or name.endswith(HTML_SUFFIXES):
        return
    raise InvalidOption("Only HTML files are allowed!")


def _enforce_size_limit(payload: bytes, config: Config) -> None:
    max_bytes = config.get_max_upload_mb() * 1024 * 1024
    if len(payload) > max_bytes:
        raise UploadTooLarge(f"File exceeds the {config.get_max_upload_mb()} MB upload limit")


def _conversion_response(result: ConversionResult, options: ConversionOptions) -> Dict[str, Any]:
    filename = result.output_path.name
    return {
        "success": True,
        "filename": filename,
        "fileSize": result.file_size_bytes,
        "pageCount": result.page_count,
        "downloadUrl": f"/download/{filename}",
        "options": options.to_public_dict(),
    }


__all__ = ["router"]
