import io
from pathlib import Path

import pytest

from html_to_pdf import cli
from html_to_pdf.converter import ConversionResult, HtmlSource
from html_to_pdf.errors import AuthorizationFailure, InputNotFound
from html_to_pdf.options import ConversionOptions, Orientation, PageFormat

from conftest import TOKEN, FakeEngine


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda debug=False: None)
    monkeypatch.setattr(cli, "check_dependencies", lambda executable=None: True)


def test_parser_defaults():
    args = cli.build_parser().parse_args(["in.html", "out.pdf"])
    options = cli.options_from_args(args)
    assert options.page_format is PageFormat.A4
    assert options.orientation is Orientation.PORTRAIT
    assert not options.letterhead
    assert options.letterhead_mode == "all"


def test_parser_full_options():
    args = cli.build_parser().parse_args([
        "in.html", "out.pdf", "--format", "Letter", "--landscape", "--margin", "small",
        "--scale", "0.9", "--letterhead", "--letterhead-type", "dazzlo",
        "--letterhead-mode", "first", "--password", TOKEN,
    ])
    options = cli.options_from_args(args)
    assert options.page_format is PageFormat.LETTER
    assert options.landscape
    assert options.margin.top == "10mm"
    assert options.scale == 0.9
    assert options.letterhead_type == "dazzlo"
    assert options.letterhead_mode == "first"
    assert options.password == TOKEN


def test_unknown_brand_exits_with_one():
    with pytest.raises(SystemExit) as excinfo:
        cli.build_parser().parse_args(["in.html", "out.pdf", "--letterhead-type", "acme"])
    assert excinfo.value.code == 1


def test_resolve_source_kinds():
    assert cli.resolve_source("https://example.com").kind == "url"
    assert cli.resolve_source("report.html") == HtmlSource.from_file("report.html")
    stdin_source = cli.resolve_source("-", stdin=io.StringIO("<p>piped</p>"))
    assert stdin_source == HtmlSource.from_string("<p>piped</p>")


def test_empty_stdin_is_an_input_error():
    with pytest.raises(InputNotFound):
        cli.resolve_source("-", stdin=io.StringIO("   "))


def test_main_success(monkeypatch, tmp_path):
    calls = {}

    async def fake_run(source, output, options, config):
        calls["source"] = source
        calls["options"] = options
        return ConversionResult(output_path=output, file_size_bytes=2048, page_count=3)

    monkeypatch.setattr(cli, "run_conversion", fake_run)
    assert cli.main(["in.html", str(tmp_path / "out.pdf"), "--format", "A3"]) == 0
    assert calls["source"].kind == "file"
    assert calls["options"].page_format is PageFormat.A3


def test_main_conversion_failure_exits_one(monkeypatch, tmp_path):
    async def fake_run(source, output, options, config):
        raise AuthorizationFailure("Invalid password for letterhead access")

    monkeypatch.setattr(cli, "run_conversion", fake_run)
    assert cli.main(["in.html", str(tmp_path / "out.pdf"), "--letterhead"]) == 1


def test_main_bad_option_exits_one(tmp_path):
    assert cli.main(["in.html", str(tmp_path / "out.pdf"), "--format", "B5"]) == 1


def test_main_missing_dependencies_exits_one(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "check_dependencies", lambda executable=None: False)
    assert cli.main(["in.html", str(tmp_path / "out.pdf")]) == 1


@pytest.mark.asyncio
async def test_run_conversion_closes_engine(config, tmp_path):
    engine = FakeEngine(running=False)
    output = tmp_path / "out.pdf"
    result = await cli.run_conversion(HtmlSource.from_string("<p>x</p>"), output, ConversionOptions(), config, engine=engine)
    assert result.output_path == output
    assert engine.started == 1
    assert engine.closed == 1


@pytest.mark.asyncio
async def test_run_conversion_closes_engine_on_failure(config, tmp_path):
    engine = FakeEngine(running=False)
    with pytest.raises(InputNotFound):
        await cli.run_conversion(HtmlSource.from_file(tmp_path / "missing.html"), Path(tmp_path / "out.pdf"),
                                 ConversionOptions(), config, engine=engine)
    assert engine.closed == 1


def test_install_browser_flag_installs_missing_chromium(monkeypatch, tmp_path):
    checks = iter([False, True])
    installs = []

    async def fake_run(source, output, options, config):
        return ConversionResult(output_path=output, file_size_bytes=10, page_count=1)

    monkeypatch.setattr(cli, "check_dependencies", lambda executable=None: next(checks))
    monkeypatch.setattr(cli, "install_chromium", lambda: installs.append(True) or True)
    monkeypatch.setattr(cli, "run_conversion", fake_run)
    assert cli.main(["in.html", str(tmp_path / "out.pdf"), "--install-browser"]) == 0
    assert installs == [True]


def test_missing_chromium_is_not_installed_without_flag(monkeypatch, tmp_path):
    installs = []
    monkeypatch.setattr(cli, "check_dependencies", lambda executable=None: False)
    monkeypatch.setattr(cli, "install_chromium", lambda: installs.append(True) or True)
    assert cli.main(["in.html", str(tmp_path / "out.pdf")]) == 1
    assert installs == []


def test_failed_install_exits_one(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "check_dependencies", lambda executable=None: False)
    monkeypatch.setattr(cli, "install_chromium", lambda: False)
    assert cli.main(["in.html", str(tmp_path / "out.pdf"), "--install-browser"]) == 1
