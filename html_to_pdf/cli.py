"""
Command line interface.

    html-to-pdf <input|-|url> <output> [options]

Exit status is 0 on success and 1 on any error.
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .auth import SharedSecretAuthorizer
from .brands import BRANDS
from .config import Config
from .converter import ConversionResult, HtmlSource, HtmlToPdfConverter
from .dependencies import check_dependencies, install_chromium
from .engine import BrowserEngine
from .errors import ConversionError, InputNotFound
from .letterhead import LETTERHEAD_MODES
from .logging_utils import get_logger, setup_logging
from .margins import MARGIN_PRESETS
from .options import ConversionOptions, PageFormat

logger = get_logger(__name__)

EPILOG = """
Examples:
  # Convert HTML file
  html-to-pdf input.html output.pdf

  # Convert with letterhead on all pages
  html-to-pdf input.html output.pdf --letterhead --password TOKEN

  # Convert with letterhead only on first page
  html-to-pdf input.html output.pdf --letterhead --letterhead-mode first --password TOKEN

  # Convert from URL in landscape
  html-to-pdf https://example.com output.pdf --landscape --format A3

  # Convert from stdin with Dazzlo letterhead
  echo "<html><body><h1>Hello</h1></body></html>" | html-to-pdf - output.pdf --letterhead --letterhead-type dazzlo --password TOKEN
"""


class _ArgumentParser(argparse.ArgumentParser):
    """Argument errors exit with status 1 like every other failure."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        logger.error(message)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="html-to-pdf",
        description="Convert HTML (file, URL or stdin) to PDF with optional letterhead branding",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="HTML file path, URL, or '-' for stdin")
    parser.add_argument("output", help="Output PDF file path")
    parser.add_argument("--format", default=PageFormat.A4.value, type=str,
                        help="Page format (A4, A3, Letter, Legal, Tabloid) [default: A4]")
    orientation = parser.add_mutually_exclusive_group()
    orientation.add_argument("--landscape", dest="landscape", action="store_true", help="Use landscape orientation")
    orientation.add_argument("--portrait", dest="landscape", action="store_false", help="Use portrait orientation [default]")
    parser.add_argument("--margin", default="medium",
                        help=f"Margin preset ({', '.join(MARGIN_PRESETS)}) or CSS values like '1in 0.75in' [default: medium]")
    parser.add_argument("--scale", default="1.0", help="Scale factor, recommended 0.8-1.2 [default: 1.0]")
    parser.add_argument("--letterhead", action="store_true", help="Add letterhead to pages [requires --password]")
    parser.add_argument("--letterhead-type", default="trivanta", choices=list(BRANDS),
                        help="Letterhead brand [default: trivanta]")
    parser.add_argument("--letterhead-mode", default="all", choices=list(LETTERHEAD_MODES),
                        help="Letterhead on all pages or the first page only [default: all]")
    parser.add_argument("--password", default=None, help="Access token for the letterhead feature")
    parser.add_argument("--config", default=None, help="Path to a TOML config file (default: html2pdf.toml)")
    parser.add_argument("--assets-dir", default=None, help="Directory holding brand logos (default: from config/env/public)")
    parser.add_argument("--temp-dir", default=None, help="Temporary files directory (default: from config/env)")
    parser.add_argument("--install-browser", action="store_true",
                        help="Install Playwright Chromium first if it is missing")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging for detailed output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.set_defaults(landscape=False)
    return parser


def resolve_source(input_arg: str, stdin=None) -> HtmlSource:
    """Map the positional input to a source: '-' is stdin, http(s) is a URL, anything else a file."""
    if input_arg == "-":
        stream = stdin or sys.stdin
        logger.info("Reading HTML from stdin...")
        html = stream.read()
        if not html.strip():
            raise InputNotFound("No HTML received on stdin")
        return HtmlSource.from_string(html)
    if input_arg.startswith(("http://", "https://")):
        return HtmlSource.from_url(input_arg)
    return HtmlSource.from_file(input_arg)


def options_from_args(args: argparse.Namespace) -> ConversionOptions:
    return ConversionOptions.from_payload({
        "format": args.format,
        "landscape": args.landscape,
        "margin": args.margin,
        "scale": args.scale,
        "letterhead": args.letterhead,
        "letterheadType": args.letterhead_type,
        "letterheadMode": args.letterhead_mode,
        "password": args.password,
    })


async def run_conversion(source: HtmlSource, output: Path, options: ConversionOptions, config: Config,
                         engine: Optional[BrowserEngine] = None) -> ConversionResult:
    """Start a browser, convert once, and always close the browser again."""
    engine = engine or BrowserEngine(executable_path=config.get_chromium_executable())
    converter = HtmlToPdfConverter(
        engine,
        SharedSecretAuthorizer(config.get_letterhead_password()),
        config,
        show_progress=True,
    )

    task = asyncio.current_task()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
    except (NotImplementedError, RuntimeError):
        pass  # Windows or not the main thread

    try:
        await engine.start()
        return await converter.convert(source, output, options)
    finally:
        await engine.close()
        try:
            loop.remove_signal_handler(signal.SIGTERM)
        except (NotImplementedError, RuntimeError):
            pass


def ensure_browser(config: Config, install: bool = False) -> bool:
    """Check the render engine, optionally installing Chromium when it is missing."""
    executable = config.get_chromium_executable()
    if check_dependencies(executable):
        return True
    if not install:
        return False
    return install_chromium() and check_dependencies(executable)


def print_summary(result: ConversionResult, options: ConversionOptions) -> None:
    logger.success("Conversion completed successfully!")
    logger.info(f"Output: {result.output_path.name}")
    logger.info(f"File size: {result.file_size_bytes / 1024:.2f} KB")
    pages = str(result.page_count) if result.page_count_certain else f"{result.page_count} (estimated)"
    logger.info(f"Pages: {pages}")
    if options.letterhead:
        brand = BRANDS[options.letterhead_type]
        logger.info(f"Letterhead: {brand.display_name} branding applied to {options.letterhead_mode} pages")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cli_config = {
        "assets_dir": args.assets_dir,
        "temp_dir": args.temp_dir,
        "debug": True if args.debug else None,
    }
    config = Config(cli_config, config_path=Path(args.config) if args.config else None)
    setup_logging(debug=config.is_debug())

    try:
        options = options_from_args(args)
        source = resolve_source(args.input)

        if not ensure_browser(config, install=args.install_browser):
            return 1

        logger.info(f"Format: {options.page_format.value}, Orientation: {options.orientation.value.title()}")
        result = asyncio.run(run_conversion(source, Path(args.output), options, config))
    except ConversionError as e:
        logger.error(f"Conversion failed: {e}")
        return 1
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.warning("Conversion cancelled.")
        return 1

    print_summary(result, options)
    return 0


if __name__ == "__main__":
    sys.exit(main())
