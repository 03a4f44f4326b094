"""
HTML to PDF conversion using Playwright (Puppeteer approach).

``HtmlToPdfConverter`` sequences one conversion: acquire the HTML, inject the print
CSS, optionally brand it with a letterhead, render it in a page of the shared browser
and write the PDF. The browser (``BrowserEngine``) and the letterhead access check
(``Authorizer``) are injected so the web server and the CLI share one implementation.
"""

import asyncio
import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from tqdm import tqdm

from .assets import load_logo_data_uri
from .auth import Authorizer
from .brands import get_brand
from .config import Config
from .engine import BrowserEngine, is_crash_error
from .errors import (
    AuthorizationFailure,
    ConversionError,
    InputNotFound,
    IOFailure,
    RenderEngineUnavailable,
    RenderTimeout,
)
from .letterhead import LetterheadAssets, build_letterhead_assets
from .logging_utils import get_logger
from .options import ConversionOptions
from .print_styles import inject_print_styles
from .utils import estimate_page_count, temp_artifact_name

T = TypeVar("T")

# Resolves once every <img> has loaded or failed
WAIT_FOR_IMAGES_JS = """
() => Promise.all(
    Array.from(document.images)
        .filter(img => !img.complete)
        .map(img => new Promise(resolve => { img.onload = img.onerror = resolve; }))
)
"""

_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_BASE_TAG_RE = re.compile(r"<base\b", re.IGNORECASE)


class ConversionState(str, Enum):
    IDLE = "idle"
    INPUT_ACQUIRED = "input_acquired"
    STYLES_INJECTED = "styles_injected"
    LETTERHEAD_PREPARED = "letterhead_prepared"
    RENDERED = "rendered"
    PERSISTED = "persisted"
    COUNT_OBTAINED = "count_obtained"
    DONE = "done"
    FAILED = "failed"


# Steps shown on the progress bar (letterhead preparation may be skipped)
_PROGRESS_STEPS = 6


@dataclass
class HtmlSource:
    """Where the HTML comes from: a literal string, a local file, or a URL."""

    kind: str
    value: str

    @classmethod
    def from_string(cls, html: str) -> "HtmlSource":
        return cls("string", html)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "HtmlSource":
        return cls("file", str(path))

    @classmethod
    def from_url(cls, url: str) -> "HtmlSource":
        return cls("url", url)

    @property
    def label(self) -> str:
        if self.kind == "string":
            return "<html>"
        return self.value


@dataclass
class ConversionResult:
    output_path: Path
    file_size_bytes: int
    page_count: int
    # False when the page count fell back to the default
    page_count_certain: bool = True


@dataclass
class ConversionJob:
    """State of one in-flight conversion."""

    source: HtmlSource
    output_path: Path
    options: ConversionOptions
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: ConversionState = ConversionState.IDLE
    history: List[ConversionState] = field(default_factory=list)
    temp_path: Optional[Path] = None
    progress: Optional[tqdm] = None

    def advance(self, state: ConversionState) -> None:
        self.history.append(self.state)
        self.state = state
        if self.progress is not None:
            self.progress.set_description(f"  {Path(self.source.label).name or 'html'} - {state.value}")
            self.progress.update(1)


def add_base_href(html: str, url: str) -> str:
    """Point relative links of a fetched page back at its origin."""
    if _BASE_TAG_RE.search(html):
        return html
    match = _HEAD_OPEN_RE.search(html)
    if not match:
        return html
    return f'{html[:match.end()]}<base href="{url}">{html[match.end():]}'


class HtmlToPdfConverter:
    """HTML to PDF converter driving a shared headless Chromium."""

    def __init__(self, engine: BrowserEngine, authorizer: Authorizer, config: Config, show_progress: bool = False):
        self.engine = engine
        self.authorizer = authorizer
        self.config = config
        self.show_progress = show_progress
        self.logger = get_logger(__name__)

    # --- input --------------------------------------------------------------

    async def load_html(self, source: HtmlSource) -> str:
        """Return the HTML for ``source``; URLs are loaded in the browser and serialised."""
        if source.kind == "string":
            return source.value
        if source.kind == "file":
            path = Path(source.value)
            if not path.is_file():
                raise InputNotFound(f"File not found: {path}")
            self.logger.info(f"Reading HTML file: {path}")
            try:
                return path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise InputNotFound(f"Could not read {path}: {e}") from e
        if source.kind == "url":
            return await self.fetch_url(source.value)
        raise InputNotFound(f"Unknown input kind: {source.kind}")

    async def fetch_url(self, url: str) -> str:
        """Navigate to ``url`` and return the fully loaded DOM."""
        self.logger.info(f"Fetching HTML from URL: {url}")

        async def attempt() -> str:
            async with self.engine.new_page() as page:
                await page.goto(url, wait_until="networkidle", timeout=self.config.get_navigation_timeout_ms())
                return await page.content()

        try:
            html = await self._with_retry(attempt, f"loading {url}")
        except (RenderTimeout, RenderEngineUnavailable):
            raise
        except ConversionError as e:
            raise InputNotFound(f"Could not load URL {url}: {e}") from e
        return add_base_href(html, url)

    # --- conversion ------------------------------------------------------------

    async def convert_html(self, html: str, output_path: Union[str, Path],
                           options: Optional[ConversionOptions] = None) -> ConversionResult:
        return await self.convert(HtmlSource.from_string(html), output_path, options)

    async def convert_file(self, input_path: Union[str, Path], output_path: Union[str, Path],
                           options: Optional[ConversionOptions] = None) -> ConversionResult:
        return await self.convert(HtmlSource.from_file(input_path), output_path, options)

    async def convert_url(self, url: str, output_path: Union[str, Path],
                          options: Optional[ConversionOptions] = None) -> ConversionResult:
        return await self.convert(HtmlSource.from_url(url), output_path, options)

    async def convert(self, source: HtmlSource, output_path: Union[str, Path],
                      options: Optional[ConversionOptions] = None) -> ConversionResult:
        """Run one conversion end to end.

        Any failure aborts the remaining steps and propagates as a single
        ``ConversionError``; the temporary artifact is removed either way.
        """
        options = options or ConversionOptions()
        job = ConversionJob(source=source, output_path=Path(output_path), options=options)

        # Checked before anything touches the browser
        if options.letterhead and not self.authorizer.authorize(options.password):
            job.advance(ConversionState.FAILED)
            raise AuthorizationFailure("Invalid password for letterhead access")

        if not options.scale_is_recommended:
            self.logger.warning(f"Scale {options.scale} is outside the recommended range 0.8-1.2")

        with tqdm(total=_PROGRESS_STEPS, desc=f"  {source.label}", unit="step", leave=False,
                  disable=not self.show_progress) as pbar:
            job.progress = pbar
            try:
                return await self._run(job)
            except ConversionError:
                job.advance(ConversionState.FAILED)
                raise
            except Exception as e:
                job.advance(ConversionState.FAILED)
                raise ConversionError(f"PDF conversion failed: {e}") from e
            finally:
                self._remove_temp_artifact(job)

    async def _run(self, job: ConversionJob) -> ConversionResult:
        options = job.options
        self.logger.debug(f"[{job.job_id}] Converting {job.source.label} -> {job.output_path}")

        html = await self.load_html(job.source)
        job.advance(ConversionState.INPUT_ACQUIRED)

        html = inject_print_styles(html)
        job.advance(ConversionState.STYLES_INJECTED)

        assets: Optional[LetterheadAssets] = None
        if options.letterhead:
            assets = self.prepare_letterhead(options)
            html = assets.apply(html)
            job.advance(ConversionState.LETTERHEAD_PREPARED)

        job.temp_path = self._write_temp_artifact(html)
        pdf_bytes = await self.render(job.temp_path, self.pdf_options(options, assets))
        job.advance(ConversionState.RENDERED)

        self._write_output(job.output_path, pdf_bytes)
        job.advance(ConversionState.PERSISTED)

        counted = estimate_page_count(pdf_bytes)
        job.advance(ConversionState.COUNT_OBTAINED)

        result = ConversionResult(
            output_path=job.output_path,
            file_size_bytes=len(pdf_bytes),
            page_count=counted or 1,
            page_count_certain=counted is not None,
        )
        job.advance(ConversionState.DONE)
        self.logger.success(
            f"PDF generated: {job.output_path} ({result.file_size_bytes} bytes, {result.page_count} pages)"
        )
        return result

    def prepare_letterhead(self, options: ConversionOptions) -> LetterheadAssets:
        """Build fresh letterhead assets and reconciled margins for ``options``."""
        brand = get_brand(options.letterhead_type)
        logo_uri = load_logo_data_uri(self.config.get_assets_dir(), brand.logo_asset_key)
        assets = build_letterhead_assets(
            brand,
            options.letterhead_mode,
            options.orientation.value,
            margin=options.margin,
            logo_uri=logo_uri,
        )
        self.logger.info(f"Letterhead: {brand.display_name} ({options.letterhead_mode} pages)")
        self.logger.debug(f"Letterhead margins: {assets.reconciled_margin.as_dict()}")
        return assets

    @staticmethod
    def pdf_options(options: ConversionOptions, assets: Optional[LetterheadAssets] = None) -> dict:
        """Keyword arguments for ``page.pdf``."""
        pdf_kwargs = {
            "format": options.page_format.value,
            "landscape": options.landscape,
            "scale": options.scale,
            "margin": options.margin.as_dict(),
            "print_background": True,
            "prefer_css_page_size": False,
            "display_header_footer": False,
        }
        if assets is not None:
            pdf_kwargs.update(assets.pdf_options())
        return pdf_kwargs

    async def render(self, html_file: Path, pdf_kwargs: dict) -> bytes:
        """Load ``html_file`` in a fresh page and print it to PDF bytes.

        Only page loading is retried; a print failure is final and never
        restarts the shared browser.
        """

        async def attempt() -> bytes:
            async with self.engine.new_page() as page:
                await self._navigate(page, html_file.absolute().as_uri())
                try:
                    return await self._print(page, pdf_kwargs)
                except PlaywrightTimeoutError as e:
                    raise RenderTimeout(f"Timed out printing PDF: {e}") from e
                except PlaywrightError as e:
                    raise ConversionError(f"PDF conversion failed while printing: {e}") from e

        return await self._with_retry(attempt, "loading document")

    async def _navigate(self, page, uri: str) -> None:
        timeout_ms = self.config.get_navigation_timeout_ms()
        await page.goto(uri, wait_until="networkidle", timeout=timeout_ms)
        await page.wait_for_load_state("domcontentloaded", timeout=timeout_ms)
        try:
            await asyncio.wait_for(page.evaluate(WAIT_FOR_IMAGES_JS), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            self.logger.warning("Timed out waiting for images; rendering what has loaded")
        # Additional wait for any dynamic content
        settle_ms = self.config.get_settle_delay_ms()
        if settle_ms > 0:
            await page.wait_for_timeout(settle_ms)

    async def _print(self, page, pdf_kwargs: dict) -> bytes:
        timeout_s = self.config.get_print_timeout_ms() / 1000
        try:
            return await asyncio.wait_for(page.pdf(**pdf_kwargs), timeout=timeout_s)
        except asyncio.TimeoutError:
            raise RenderTimeout(f"PDF generation exceeded {timeout_s:g}s")

    async def _with_retry(self, operation: Callable[[], Awaitable[T]], what: str) -> T:
        """Run ``operation``, retrying transient browser failures a bounded number of times."""
        max_attempts = self.config.get_navigation_attempts()
        for attempt in range(1, max_attempts + 1):
            try:
                return await operation()
            except PlaywrightTimeoutError as e:
                raise RenderTimeout(f"Timed out {what}: {e}") from e
            except PlaywrightError as e:
                crashed = is_crash_error(e)
                transient = crashed or "net::ERR_" in str(e)
                if transient and attempt < max_attempts:
                    self.logger.warning(f"Transient browser error while {what} (attempt {attempt}/{max_attempts}), retrying...")
                    if crashed and not self.engine.is_running:
                        await self.engine.restart()
                    continue
                raise ConversionError(f"PDF conversion failed while {what}: {e}") from e
        raise ConversionError(f"PDF conversion failed while {what}")  # pragma: no cover - loop always returns or raises

    # --- files -------------------------------------------------------------------

    def _write_temp_artifact(self, html: str) -> Path:
        temp_dir = self.config.get_temp_dir()
        path = temp_dir / temp_artifact_name()
        try:
            temp_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(html, encoding="utf-8")
        except OSError as e:
            raise IOFailure(f"Could not write temporary HTML {path}: {e}") from e
        self.logger.debug(f"Wrote temporary HTML to {path}")
        return path

    def _write_output(self, output_path: Path, pdf_bytes: bytes) -> None:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(pdf_bytes)
        except OSError as e:
            raise IOFailure(f"Could not write PDF to {output_path}: {e}") from e

    def _remove_temp_artifact(self, job: ConversionJob) -> None:
        if job.temp_path is None:
            return
        try:
            job.temp_path.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not clean up temporary file {job.temp_path}: {e}")


__all__ = [
    "ConversionJob",
    "ConversionResult",
    "ConversionState",
    "HtmlSource",
    "HtmlToPdfConverter",
    "WAIT_FOR_IMAGES_JS",
    "add_base_href",
]
