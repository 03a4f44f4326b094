from pathlib import Path

from html_to_pdf.utils import (
    estimate_page_count,
    is_safe_filename,
    output_filename,
    resolve_within,
    temp_artifact_name,
)

from conftest import FAKE_PDF


def test_temp_artifact_names_are_unique():
    names = {temp_artifact_name() for _ in range(50)}
    assert len(names) == 50
    assert all(name.startswith("temp_") and name.endswith(".html") for name in names)


def test_output_filename_shape():
    name = output_filename()
    assert name.startswith("document_")
    assert name.endswith(".pdf")
    assert is_safe_filename(name)


def test_is_safe_filename():
    assert is_safe_filename("document_1.pdf")
    assert not is_safe_filename("../etc/passwd")
    assert not is_safe_filename("a/b.pdf")
    assert not is_safe_filename("..pdf")
    assert not is_safe_filename(".hidden")


def test_resolve_within(tmp_path: Path):
    assert resolve_within(tmp_path, "out.pdf") == (tmp_path / "out.pdf").resolve()
    assert resolve_within(tmp_path, "../out.pdf") is None


def test_page_count_from_page_tree():
    assert estimate_page_count(FAKE_PDF) == 2


def test_page_count_takes_root_of_nested_tree():
    pdf = (
        b"1 0 obj << /Type /Pages /Kids [2 0 R 3 0 R] /Count 12 >> endobj\n"
        b"2 0 obj << /Type /Pages /Parent 1 0 R /Count 5 >> endobj\n"
        b"3 0 obj << /Count 7 /Type /Pages /Parent 1 0 R >> endobj\n"
    )
    assert estimate_page_count(pdf) == 12


def test_page_count_unknown():
    assert estimate_page_count(b"%PDF-1.7\n%%EOF") is None
