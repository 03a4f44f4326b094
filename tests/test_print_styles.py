from html_to_pdf.print_styles import PRINT_CSS, inject_print_styles, inject_style


def test_style_goes_before_head_close():
    html = "<html><head><title>x</title></head><body>hi</body></html>"
    result = inject_style(html, "p { color: red; }")
    assert "<style>p { color: red; }</style></head>" in result
    assert result.endswith("<body>hi</body></html>")


def test_head_close_match_is_case_insensitive():
    result = inject_style("<HTML><HEAD></HEAD><BODY>x</BODY></HTML>", "a{}")
    assert "<style>a{}</style></HEAD>" in result


def test_fragment_is_wrapped_in_a_document():
    result = inject_style("<h1>Hello</h1>", "a{}")
    assert result.startswith("<html><head>")
    assert '<meta charset="utf-8">' in result
    assert result.endswith("<body><h1>Hello</h1></body></html>")


def test_only_first_head_gets_the_style():
    html = "<head></head><iframe srcdoc='<head></head>'></iframe>"
    assert inject_style(html, "a{}").count("<style>") == 1


def test_print_styles_cover_page_breaks_and_colours():
    result = inject_print_styles("<p>x</p>")
    assert PRINT_CSS in result
    assert "page-break-inside" in PRINT_CSS
    assert "print-color-adjust" in PRINT_CSS


def test_print_styles_are_not_idempotent():
    once = inject_print_styles("<html><head></head><body></body></html>")
    twice = inject_print_styles(once)
    assert twice.count("<style>") == 2
