"""Print-safe CSS injected into every document before it is rendered."""

import re

PRINT_CSS = """
    /* Print-friendly enhancements */
    * {
        box-sizing: border-box;
    }

    body {
        margin: 0;
        padding: 0;
        font-family: Arial, sans-serif;
        line-height: 1.6;
        color: #333;
    }

    /* Keep blocks together */
    div, p, h1, h2, h3, h4, h5, h6 {
        page-break-inside: avoid;
    }

    table {
        border-collapse: collapse;
        width: 100%;
        page-break-inside: avoid;
    }

    th, td {
        border: 1px solid #ddd;
        padding: 8px;
        text-align: left;
    }

    img {
        max-width: 100%;
        height: auto;
        page-break-inside: avoid;
    }

    ul, ol, li {
        page-break-inside: avoid;
    }

    pre, code {
        page-break-inside: avoid;
        white-space: pre-wrap;
        word-wrap: break-word;
    }

    @media print {
        * {
            -webkit-print-color-adjust: exact !important;
            print-color-adjust: exact !important;
        }

        h1, h2, h3, h4, h5, h6 {
            page-break-after: avoid;
            break-after: avoid;
        }

        img, table, pre, code {
            page-break-inside: avoid;
            break-inside: avoid;
        }

        p {
            orphans: 3;
            widows: 3;
        }
    }
"""

_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)


def inject_style(html: str, css: str) -> str:
    """Insert a ``<style>`` block before ``</head>``, wrapping bare fragments in a minimal document."""
    style_tag = f"<style>{css}</style>"
    if _HEAD_CLOSE_RE.search(html):
        return _HEAD_CLOSE_RE.sub(lambda m: f"{style_tag}{m.group(0)}", html, count=1)
    return f'<html><head><meta charset="utf-8">{style_tag}</head><body>{html}</body></html>'


def inject_print_styles(html: str) -> str:
    """Add the print CSS to ``html``.

    Not idempotent: every call inserts another copy of the block, so apply it
    exactly once per conversion.
    """
    return inject_style(html, PRINT_CSS)


__all__ = ["PRINT_CSS", "inject_print_styles", "inject_style"]
