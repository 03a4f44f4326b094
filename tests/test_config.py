from pathlib import Path

import pytest

from html_to_pdf.config import DEFAULTS, Config


def write_toml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_apply_without_sources(tmp_path):
    config = Config(config_path=tmp_path / "none.toml", environ={})
    assert config.get_port() == DEFAULTS["port"]
    assert config.get_navigation_timeout_ms() == 30000
    assert config.get_letterhead_password() == "102005"
    assert config.get_chromium_executable() is None
    assert not config.is_debug()


def test_precedence_cli_over_env_over_file(tmp_path):
    path = write_toml(tmp_path / "html2pdf.toml", 'port = 7000\nhost = "127.0.0.1"\nprint_timeout_ms = 1000\n')
    environ = {"HTML2PDF_PORT": "8000", "HTML2PDF_PRINT_TIMEOUT_MS": "2000"}
    config = Config({"port": 9000}, config_path=path, environ=environ)
    assert config.get_port() == 9000
    assert config.get_print_timeout_ms() == 2000
    assert config.get_host() == "127.0.0.1"


def test_none_cli_values_fall_through(tmp_path):
    config = Config({"assets_dir": None}, config_path=tmp_path / "none.toml", environ={"HTML2PDF_ASSETS_DIR": "/srv/logos"})
    assert config.get_assets_dir() == Path("/srv/logos")


def test_section_table_in_file(tmp_path):
    path = write_toml(tmp_path / "c.toml", "[html_to_pdf]\nmax_upload_mb = 10\ndebug = true\n")
    config = Config(config_path=path, environ={})
    assert config.get_max_upload_mb() == 10
    assert config.is_debug()


def test_config_path_from_environment(tmp_path):
    path = write_toml(tmp_path / "elsewhere.toml", "download_ttl_s = 1.5\n")
    config = Config(environ={"HTML2PDF_CONFIG": str(path)})
    assert config.get_download_ttl_s() == 1.5


def test_navigation_attempts_has_a_floor(tmp_path):
    config = Config({"navigation_attempts": 0}, config_path=tmp_path / "none.toml", environ={})
    assert config.get_navigation_attempts() == 1


def test_bad_integer_raises(tmp_path):
    config = Config(config_path=tmp_path / "none.toml", environ={"HTML2PDF_PORT": "http"})
    with pytest.raises(ValueError):
        config.get_port()
