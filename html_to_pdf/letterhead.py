"""
Letterhead generation.

A letterhead is built from a ``BrandProfile`` by one of two strategies:

* ``AllPagesStrategy`` ("all") hands Chromium native header/footer templates, which
  the print engine repeats on every physical page. Templates are rendered with inline
  styles only because Chromium evaluates them outside the document.
* ``FirstPageStrategy`` ("first") injects the letterhead once, right after ``<body>``,
  as ordinary flow content. Chromium has no first-page-only toggle for its templates,
  so this is the only way to brand page one alone.
"""

import html
import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from .brands import BrandProfile
from .errors import InvalidOption
from .margins import LETTERHEAD_ALLOWANCES, Margin, reconcile_margins
from .print_styles import inject_style

LETTERHEAD_MODES = ("all", "first")

_BODY_OPEN_RE = re.compile(r"<body\b[^>]*>", re.IGNORECASE)


@dataclass
class LetterheadAssets:
    """Everything a conversion needs to brand its pages."""

    mode: str
    brand: str
    orientation: str
    header_markup: str
    footer_markup: str
    style_block: str
    reconciled_margin: Margin
    margin_delta: Dict[str, str] = field(default_factory=dict)
    engine_header_template: Optional[str] = None
    engine_footer_template: Optional[str] = None
    injected_body_fragment: Optional[str] = None

    @property
    def uses_engine_templates(self) -> bool:
        return self.engine_header_template is not None

    def apply(self, document: str) -> str:
        """Add the letterhead CSS (and the first-page fragment, if any) to ``document``."""
        document = inject_style(document, self.style_block)
        if self.injected_body_fragment:
            document = inject_after_body(document, self.injected_body_fragment)
        return document

    def pdf_options(self) -> Dict[str, object]:
        """Keyword arguments for ``page.pdf`` contributed by the letterhead."""
        options: Dict[str, object] = {"margin": self.reconciled_margin.as_dict()}
        if self.uses_engine_templates:
            options.update(
                display_header_footer=True,
                header_template=self.engine_header_template,
                footer_template=self.engine_footer_template or "<div></div>",
            )
        return options


def inject_after_body(document: str, fragment: str) -> str:
    """Insert ``fragment`` immediately after the first opening ``<body>`` tag."""
    match = _BODY_OPEN_RE.search(document)
    if not match:
        return f"{fragment}{document}"
    return f"{document[:match.end()]}{fragment}{document[match.end():]}"


# --- shared brand rendering ---------------------------------------------------

def _contact_html(brand: BrandProfile) -> str:
    return "<br>".join(html.escape(line) for line in brand.contact_lines)


def _logo_html(brand: BrandProfile, logo_uri: Optional[str], size_px: int) -> str:
    if not logo_uri:
        return ""
    alt = html.escape(f"{brand.display_name} Logo")
    return (
        f'<img src="{logo_uri}" alt="{alt}" '
        f'style="width: {size_px}px; height: {size_px}px; display: block;">'
    )


def render_header_markup(brand: BrandProfile, orientation: str, logo_uri: Optional[str] = None) -> str:
    """Header band markup styled by ``render_letterhead_css`` classes."""
    logo_size = 50 if orientation == "landscape" else 60
    return (
        f'<div class="pdf-header" data-brand="{brand.key}">'
        '<table><tr>'
        f'<td class="logo-cell">{_logo_html(brand, logo_uri, logo_size)}</td>'
        '<td class="name-cell">'
        f'<div class="company-name">{html.escape(brand.display_name)}</div>'
        f'<div class="tagline">{html.escape(brand.tagline)}</div>'
        '</td>'
        f'<td class="contact-info">{_contact_html(brand)}</td>'
        '</tr></table>'
        '</div>'
    )


def render_footer_markup(brand: BrandProfile) -> str:
    return (
        f'<div class="pdf-footer">{html.escape(brand.footer_text)} | '
        f'<span class="website">{html.escape(brand.website)}</span></div>'
    )


def render_letterhead_css(brand: BrandProfile, orientation: str) -> str:
    """Brand typography for the in-document header/footer classes."""
    type_ = brand.typography(orientation)
    padding = "10px 20px" if orientation == "landscape" else "15px 25px"
    return f"""
        .pdf-header, .pdf-header *, .pdf-footer, .pdf-footer * {{
            -webkit-print-color-adjust: exact !important;
            print-color-adjust: exact !important;
            box-sizing: border-box;
        }}
        .pdf-header {{
            width: 100%;
            padding: {padding};
            background: #ffffff;
            font-family: 'Times New Roman', serif;
            border-bottom: 3px solid {brand.accent_color};
        }}
        .pdf-header table {{
            width: 100% !important;
            border-collapse: collapse !important;
            border: none !important;
            margin: 0 !important;
        }}
        .pdf-header td {{
            border: none !important;
            padding: 0 !important;
            vertical-align: middle !important;
            background: transparent !important;
        }}
        .pdf-header .logo-cell {{ width: 60px; }}
        .pdf-header .name-cell {{ padding-left: 20px !important; }}
        .pdf-header .company-name {{
            font-size: {type_.company_size};
            font-weight: bold;
            color: {brand.text_color};
            margin-bottom: 5px;
            line-height: 1.2;
        }}
        .pdf-header .tagline {{
            font-size: {type_.tagline_size};
            font-style: italic;
            color: {brand.tagline_color};
            line-height: 1.2;
        }}
        .pdf-header .contact-info {{
            font-size: {type_.contact_size};
            font-weight: bold;
            line-height: 1.4;
            color: {brand.text_color};
            text-align: right !important;
        }}
        .pdf-footer {{
            border-top: 1px solid #ddd;
            text-align: center;
            padding: 6px 0;
            font: italic {type_.footer_size} 'Times New Roman', serif;
            color: #666;
        }}
        .pdf-footer .website {{
            font-weight: bold;
            color: {brand.text_color};
        }}
    """


def render_engine_header_template(brand: BrandProfile, orientation: str, logo_uri: Optional[str] = None) -> str:
    """Self-contained header for Chromium's per-page ``header_template``."""
    type_ = brand.typography(orientation)
    logo = _logo_html(brand, logo_uri, 50)
    return (
        '<div style="-webkit-print-color-adjust: exact; width: 100%; margin: 0 10mm; '
        f"padding: 4px 0; font-family: 'Times New Roman', serif; font-size: 12px; "
        f'border-bottom: 3px solid {brand.accent_color};">'
        '<table style="width: 100%; border-collapse: collapse; margin: 0; padding: 0;"><tr>'
        f'<td style="width: 60px; vertical-align: middle; padding: 0;">{logo}</td>'
        '<td style="padding-left: 20px; vertical-align: middle;">'
        f'<div style="font-size: {type_.company_size}; font-weight: bold; color: {brand.text_color}; '
        f'margin-bottom: 5px;">{html.escape(brand.display_name)}</div>'
        f'<div style="font-size: {type_.tagline_size}; font-style: italic; color: {brand.tagline_color};">'
        f'{html.escape(brand.tagline)}</div>'
        '</td>'
        '<td style="text-align: right; vertical-align: middle; '
        f'font-size: {type_.contact_size}; font-weight: bold; color: {brand.text_color};">'
        f'{_contact_html(brand)}</td>'
        '</tr></table>'
        '</div>'
    )


def render_engine_footer_template(brand: BrandProfile, orientation: str) -> str:
    """Self-contained footer for Chromium's per-page ``footer_template``."""
    type_ = brand.typography(orientation)
    return (
        '<div style="-webkit-print-color-adjust: exact; width: 100%; margin: 0 10mm; '
        f"padding: 5px; text-align: center; font-family: 'Times New Roman', serif; "
        f'font-size: {type_.footer_size}; color: #666; border-top: 1px solid #ddd;">'
        f'{html.escape(brand.footer_text)} | '
        f'<strong style="color: {brand.text_color};">{html.escape(brand.website)}</strong>'
        '</div>'
    )


# --- strategies -----------------------------------------------------------------

class LetterheadStrategy:
    """Base class; subclasses decide how the letterhead reaches the page."""

    mode: str = ""

    def margin_delta(self, orientation: str) -> Dict[str, str]:
        return dict(LETTERHEAD_ALLOWANCES[self.mode][orientation])

    def build(
        self,
        brand: BrandProfile,
        orientation: str,
        margin: Optional[Margin] = None,
        logo_uri: Optional[str] = None,
    ) -> LetterheadAssets:
        raise NotImplementedError

    def _base_assets(self, brand, orientation, reconciled, logo_uri, style_block,
                     header_markup=None, footer_markup=None, **extra) -> LetterheadAssets:
        return LetterheadAssets(
            mode=self.mode,
            brand=brand.key,
            orientation=orientation,
            header_markup=header_markup or render_header_markup(brand, orientation, logo_uri),
            footer_markup=footer_markup or render_footer_markup(brand),
            style_block=style_block,
            reconciled_margin=reconciled,
            margin_delta=self.margin_delta(orientation),
            **extra,
        )


class AllPagesStrategy(LetterheadStrategy):
    """Letterhead on every page via Chromium's native header/footer templates."""

    mode = "all"

    def build(self, brand, orientation, margin=None, logo_uri=None) -> LetterheadAssets:
        margin = margin or Margin()
        reconciled = reconcile_margins(margin, orientation, self.mode)
        # The @page margin mirrors the engine margin so CSS cannot eat the header band
        style_block = f"""
            @page {{
                margin: {reconciled.top} {reconciled.right} {reconciled.bottom} {reconciled.left};
            }}
            html, body {{
                -webkit-print-color-adjust: exact !important;
                print-color-adjust: exact !important;
            }}
        """
        return self._base_assets(
            brand, orientation, reconciled, logo_uri, style_block,
            engine_header_template=render_engine_header_template(brand, orientation, logo_uri),
            engine_footer_template=render_engine_footer_template(brand, orientation),
        )


class FirstPageStrategy(LetterheadStrategy):
    """Letterhead injected once into the document flow, so only page one carries it."""

    mode = "first"

    def build(self, brand, orientation, margin=None, logo_uri=None) -> LetterheadAssets:
        header = render_header_markup(brand, orientation, logo_uri)
        footer = render_footer_markup(brand)
        fragment = f'<div class="pdf-letterhead first-page-only">{header}{footer}</div>'
        reconciled = reconcile_margins(margin or Margin(), orientation, self.mode)
        # Later pages get the plain margin; page one keeps its own box for the letterhead
        style_block = render_letterhead_css(brand, orientation) + f"""
            @page {{
                margin: {reconciled.top} {reconciled.right} {reconciled.bottom} {reconciled.left};
            }}
            @page :first {{
                margin-top: {reconciled.top};
                margin-bottom: {reconciled.bottom};
            }}
            .pdf-letterhead {{
                position: static !important;
                display: block;
                width: 100%;
                margin: 0 0 6mm 0;
                page-break-inside: avoid;
                break-inside: avoid;
                page-break-after: avoid;
            }}
            @media print {{
                .pdf-letterhead .pdf-header,
                .pdf-letterhead .pdf-footer {{
                    position: static !important;
                }}
            }}
        """
        return self._base_assets(
            brand, orientation, reconciled, logo_uri, style_block,
            header_markup=header, footer_markup=footer,
            injected_body_fragment=fragment,
        )


STRATEGIES: Dict[str, LetterheadStrategy] = {
    "all": AllPagesStrategy(),
    "first": FirstPageStrategy(),
}


def get_strategy(mode: str) -> LetterheadStrategy:
    try:
        return STRATEGIES[str(mode).strip().lower()]
    except KeyError:
        raise InvalidOption(f"Invalid letterhead mode '{mode}'. Use one of: {', '.join(LETTERHEAD_MODES)}")


def build_letterhead_assets(
    brand: BrandProfile,
    mode: str,
    orientation: str,
    margin: Optional[Margin] = None,
    logo_uri: Optional[str] = None,
) -> LetterheadAssets:
    """Build fresh letterhead assets for one conversion."""
    return get_strategy(mode).build(brand, orientation, margin=margin, logo_uri=logo_uri)


__all__ = [
    "AllPagesStrategy",
    "FirstPageStrategy",
    "LETTERHEAD_MODES",
    "LetterheadAssets",
    "LetterheadStrategy",
    "build_letterhead_assets",
    "get_strategy",
    "inject_after_body",
    "render_engine_footer_template",
    "render_engine_header_template",
    "render_footer_markup",
    "render_header_markup",
    "render_letterhead_css",
]
