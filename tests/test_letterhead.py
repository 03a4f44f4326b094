import re

import pytest

from html_to_pdf.brands import BRANDS, get_brand
from html_to_pdf import letterhead
from html_to_pdf.errors import InvalidOption
from html_to_pdf.letterhead import (
    AllPagesStrategy,
    FirstPageStrategy,
    build_letterhead_assets,
    get_strategy,
    inject_after_body,
    render_engine_header_template,
    render_header_markup,
)
from html_to_pdf.margins import Margin

DOC = "<html><head><title>t</title></head><body class='main'><p>Body</p></body></html>"


def test_get_brand_is_case_insensitive():
    assert get_brand("Dazzlo") is BRANDS["dazzlo"]
    with pytest.raises(InvalidOption):
        get_brand("acme")


def test_brand_contact_info_groups_lines():
    trivanta = BRANDS["trivanta"].contact_info()
    assert trivanta["email"] == ["sales@trivantaedge.com", "info@trivantaedge.com"]
    assert trivanta["phone"] == "+91 9373015503"
    assert trivanta["location"] == "Kalyan, Maharashtra"

    dazzlo = BRANDS["dazzlo"].contact_info()
    assert dazzlo["email"] == ["info@dazzlo.co.in"]
    assert dazzlo["location"] == "Kalyan, Maharashtra 421301"


def test_landscape_typography_is_smaller():
    brand = BRANDS["dazzlo"]
    assert brand.typography("landscape").company_size == "20px"
    assert brand.typography("portrait").company_size == "24px"


def test_header_markup_contains_brand_details():
    markup = render_header_markup(BRANDS["dazzlo"], "portrait")
    assert 'data-brand="dazzlo"' in markup
    assert "Dazzlo Enterprises Pvt Ltd" in markup
    assert "Tel: +91 9373015503<br>Email: info@dazzlo.co.in" in markup
    assert "<img" not in markup


def test_header_markup_embeds_logo_when_given():
    markup = render_header_markup(BRANDS["trivanta"], "landscape", logo_uri="data:image/png;base64,AAAA")
    assert 'src="data:image/png;base64,AAAA"' in markup
    assert "width: 50px" in markup


def test_engine_template_is_escaped_and_inline():
    template = render_engine_header_template(BRANDS["trivanta"], "portrait")
    assert "Trivanta Edge" in template
    assert "class=" not in template
    assert "font-size: 22px" in template


def test_inject_after_body_keeps_body_attributes():
    result = inject_after_body(DOC, "<div id='lh'></div>")
    assert "<body class='main'><div id='lh'></div><p>Body</p>" in result


def test_inject_after_body_without_body_prepends():
    assert inject_after_body("<p>x</p>", "<hr>") == "<hr><p>x</p>"


def test_all_pages_uses_engine_templates_and_grows_margins():
    assets = build_letterhead_assets(BRANDS["trivanta"], "all", "portrait", margin=Margin())
    assert assets.uses_engine_templates
    assert assets.injected_body_fragment is None
    assert assets.reconciled_margin.top == "42mm"
    assert assets.margin_delta == {"top": "30mm", "bottom": "10mm"}

    options = assets.pdf_options()
    assert options["display_header_footer"] is True
    assert "Trivanta Edge" in options["header_template"]
    assert "www.trivantaedge.com" in options["footer_template"]
    assert options["margin"]["top"] == "42mm"


def test_all_pages_style_block_mirrors_engine_margin():
    assets = AllPagesStrategy().build(BRANDS["dazzlo"], "landscape", margin=Margin())
    assert "margin: 37mm 10mm 24mm 10mm;" in assets.style_block
    assert "<style>" in assets.apply(DOC)


def test_first_page_injects_fragment_once():
    assets = build_letterhead_assets(BRANDS["dazzlo"], "first", "portrait")
    assert not assets.uses_engine_templates
    assert "display_header_footer" not in assets.pdf_options()
    assert assets.reconciled_margin == Margin()

    branded = assets.apply(DOC)
    assert branded.count('class="pdf-letterhead first-page-only"') == 1
    assert branded.index("pdf-letterhead first-page-only") < branded.index("<p>Body</p>")
    assert "Dazzlo Enterprises Pvt Ltd" in branded
    assert "position: static !important" in branded
    assert "@page :first {" in assets.style_block
    assert "margin-top: 12mm;" in assets.style_block
    assert "@page :first" in branded


def test_first_page_fragment_holds_header_and_footer():
    assets = FirstPageStrategy().build(BRANDS["trivanta"], "portrait")
    assert assets.header_markup in assets.injected_body_fragment
    assert assets.footer_markup in assets.injected_body_fragment


def test_assets_are_fresh_per_call():
    first = build_letterhead_assets(BRANDS["trivanta"], "all", "portrait")
    second = build_letterhead_assets(BRANDS["trivanta"], "all", "portrait")
    assert first is not second
    first.margin_delta["top"] = "99mm"
    assert second.margin_delta["top"] == "30mm"


def test_unknown_mode_rejected():
    with pytest.raises(InvalidOption):
        get_strategy("odd")


def test_first_page_reserves_page_one_in_the_callers_unit():
    assets = FirstPageStrategy().build(BRANDS["trivanta"], "landscape", margin=Margin("1in", "0.5in", "1in", "0.5in"))
    assert re.search(r"@page :first \{\s*margin-top: 1in;", assets.style_block)
    assert "margin: 1in 0.5in 1in 0.5in;" in assets.style_block


def test_first_page_renders_markup_once(monkeypatch):
    header_calls = []
    footer_calls = []
    render_header = letterhead.render_header_markup
    render_footer = letterhead.render_footer_markup
    monkeypatch.setattr(letterhead, "render_header_markup",
                        lambda *args, **kwargs: header_calls.append(args) or render_header(*args, **kwargs))
    monkeypatch.setattr(letterhead, "render_footer_markup",
                        lambda *args, **kwargs: footer_calls.append(args) or render_footer(*args, **kwargs))

    assets = FirstPageStrategy().build(BRANDS["dazzlo"], "portrait")
    assert len(header_calls) == 1
    assert len(footer_calls) == 1
    assert assets.header_markup in assets.injected_body_fragment
