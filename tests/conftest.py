from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable, List, Optional
from urllib.parse import unquote, urlparse

import pytest

from html_to_pdf.auth import SharedSecretAuthorizer
from html_to_pdf.config import Config
from html_to_pdf.converter import HtmlToPdfConverter
from html_to_pdf.errors import RenderEngineUnavailable

TOKEN = "102005"

# Minimal PDF with a two-page page tree
FAKE_PDF = (
    b"%PDF-1.4\n"
    b"1 0 obj << /Type /Catalog /Pages 2 0 R >> endobj\n"
    b"2 0 obj << /Type /Pages /Kids [3 0 R 4 0 R] /Count 2 >> endobj\n"
    b"3 0 obj << /Type /Page /Parent 2 0 R >> endobj\n"
    b"4 0 obj << /Type /Page /Parent 2 0 R >> endobj\n"
    b"%%EOF\n"
)


class FakePage:
    """Stands in for a Playwright page; records what the converter asked for."""

    def __init__(self, pdf_bytes: bytes = FAKE_PDF, pdf_error: Optional[BaseException] = None,
                 goto_error: Optional[BaseException] = None, content: str = "<html><head></head><body>remote</body></html>",
                 on_goto: Optional[Callable[[], None]] = None):
        self.pdf_bytes = pdf_bytes
        self.pdf_error = pdf_error
        self.goto_error = goto_error
        self.on_goto = on_goto
        self._content = content
        self.visited: List[str] = []
        self.pdf_kwargs: Optional[dict] = None
        self.loaded_html: Optional[str] = None
        self.closed = False

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if self.on_goto is not None:
            self.on_goto()
        if self.goto_error is not None:
            raise self.goto_error
        if url.startswith("file://"):
            self.loaded_html = Path(unquote(urlparse(url).path)).read_text(encoding="utf-8")

    async def wait_for_load_state(self, state=None, timeout=None):
        return None

    async def evaluate(self, script):
        return None

    async def wait_for_timeout(self, ms):
        return None

    async def content(self):
        return self._content

    async def pdf(self, **kwargs):
        self.pdf_kwargs = kwargs
        if self.pdf_error is not None:
            raise self.pdf_error
        return self.pdf_bytes

    def is_closed(self):
        return self.closed

    async def close(self):
        self.closed = True


class FakeEngine:
    """BrowserEngine double handing out scripted FakePages."""

    def __init__(self, pages: Optional[List[FakePage]] = None, running: bool = True, fail_start: bool = False):
        self._queue = list(pages or [])
        self.pages: List[FakePage] = []
        self.running = running
        self.fail_start = fail_start
        self.started = 0
        self.restarts = 0
        self.closed = 0

    @property
    def is_running(self) -> bool:
        return self.running

    async def start(self):
        self.started += 1
        if self.fail_start:
            raise RenderEngineUnavailable("Browser launch failed")
        self.running = True

    async def restart(self):
        self.restarts += 1
        self.running = True

    async def close(self):
        self.closed += 1
        self.running = False

    @asynccontextmanager
    async def new_page(self):
        page = self._queue.pop(0) if self._queue else FakePage()
        self.pages.append(page)
        try:
            yield page
        finally:
            await page.close()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(
        {
            "temp_dir": str(tmp_path / "tmp"),
            "output_dir": str(tmp_path / "outputs"),
            "assets_dir": str(tmp_path / "assets"),
            "settle_delay_ms": 0,
            "download_ttl_s": 0,
        },
        config_path=tmp_path / "missing.toml",
        environ={},
    )


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def converter(engine: FakeEngine, config: Config) -> HtmlToPdfConverter:
    return HtmlToPdfConverter(engine, SharedSecretAuthorizer(TOKEN), config)
