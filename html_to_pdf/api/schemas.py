"""Request bodies for the conversion endpoints."""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel


class ConversionPayload(BaseModel):
    """Options shared by every conversion endpoint, in public API spelling."""

    format: Optional[str] = None
    landscape: Optional[Union[bool, str]] = None
    margin: Optional[Union[str, Dict[str, str]]] = None
    scale: Optional[Union[float, str]] = None
    letterhead: Optional[Union[bool, str]] = None
    letterheadType: Optional[str] = None
    letterheadMode: Optional[str] = None
    password: Optional[str] = None

    def option_fields(self) -> Dict[str, Any]:
        return self.model_dump(include=set(ConversionPayload.model_fields))


class HtmlConvertRequest(ConversionPayload):
    html: str = ""


class UrlConvertRequest(ConversionPayload):
    url: str = ""


class ConversionResponse(BaseModel):
    success: bool
    filename: str
    fileSize: int
    pageCount: int
    downloadUrl: str
    options: Dict[str, Any]


__all__ = ["ConversionPayload", "ConversionResponse", "HtmlConvertRequest", "UrlConvertRequest"]
