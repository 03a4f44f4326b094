"""
Configuration management for the HTML to PDF converter.

Each setting is resolved in this order:
1. CLI arguments (highest priority)
2. Environment variables (``HTML2PDF_*``)
3. Config file (``html2pdf.toml``, or the path in ``HTML2PDF_CONFIG``)
4. Built-in defaults (lowest priority)
"""

import os
import tempfile
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

ENV_PREFIX = "HTML2PDF_"
DEFAULT_CONFIG_FILE = Path("html2pdf.toml")

DEFAULTS: Dict[str, Any] = {
    "temp_dir": str(Path(tempfile.gettempdir()) / "html_to_pdf"),
    "output_dir": "outputs",
    "assets_dir": "public",
    "letterhead_password": "102005",
    "navigation_timeout_ms": 30000,
    "print_timeout_ms": 60000,
    "settle_delay_ms": 1000,
    "navigation_attempts": 2,
    "max_upload_mb": 50,
    "download_ttl_s": 5.0,
    "chromium_executable": None,
    "debug": False,
    "host": "0.0.0.0",
    "port": 5000,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def _read_toml(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    with path.open("rb") as handle:
        data = tomllib.load(handle)
    # Settings may live at the top level or under [html_to_pdf]
    section = data.get("html_to_pdf")
    return section if isinstance(section, Mapping) else data


class Config:
    """Resolved settings for one process (CLI run or server)."""

    def __init__(self, cli_config: Optional[Dict[str, Any]] = None, config_path: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self._cli = {k: v for k, v in (cli_config or {}).items() if v is not None}
        self._env = environ if environ is not None else os.environ
        if config_path is None:
            env_path = self._env.get(f"{ENV_PREFIX}CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_FILE
        self.config_path = Path(config_path)
        self._file = _read_toml(self.config_path)

    def get(self, key: str) -> Any:
        """Return the raw value for ``key`` following the precedence order."""
        if key in self._cli:
            return self._cli[key]
        env_value = self._env.get(f"{ENV_PREFIX}{key.upper()}")
        if env_value is not None:
            return env_value
        if key in self._file:
            return self._file[key]
        return DEFAULTS.get(key)

    def _get_int(self, key: str) -> int:
        value = self.get(key)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid integer for {key}: {value!r}")

    def _get_float(self, key: str) -> float:
        value = self.get(key)
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid number for {key}: {value!r}")

    def get_temp_dir(self) -> Path:
        return Path(self.get("temp_dir"))

    def get_output_dir(self) -> Path:
        return Path(self.get("output_dir"))

    def get_assets_dir(self) -> Path:
        return Path(self.get("assets_dir"))

    def get_letterhead_password(self) -> str:
        return str(self.get("letterhead_password"))

    def get_navigation_timeout_ms(self) -> int:
        return self._get_int("navigation_timeout_ms")

    def get_print_timeout_ms(self) -> int:
        return self._get_int("print_timeout_ms")

    def get_settle_delay_ms(self) -> int:
        return self._get_int("settle_delay_ms")

    def get_navigation_attempts(self) -> int:
        return max(1, self._get_int("navigation_attempts"))

    def get_max_upload_mb(self) -> int:
        return self._get_int("max_upload_mb")

    def get_download_ttl_s(self) -> float:
        return self._get_float("download_ttl_s")

    def get_chromium_executable(self) -> Optional[str]:
        value = self.get("chromium_executable")
        return str(value) if value else None

    def is_debug(self) -> bool:
        return bool(_parse_bool(self.get("debug")))

    def get_host(self) -> str:
        return str(self.get("host"))

    def get_port(self) -> int:
        return self._get_int("port")


__all__ = ["Config", "DEFAULTS", "ENV_PREFIX"]
