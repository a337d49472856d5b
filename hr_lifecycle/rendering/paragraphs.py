"""
Paragraph rendering.

Produces the inline content and the inline CSS for a paragraph. Wrapping
the content in a block tag is left to the caller.
"""

import logging
from typing import Optional

from .document import Alignment, InlineImage, Paragraph, Text
from .escaping import escape_html
from .text_runs import DEFAULT_FONT_FAMILY, convert_text_to_html

logger = logging.getLogger(__name__)

EMPTY_PARAGRAPH = "&nbsp;"
IMAGE_PLACEHOLDER = "[Image]"
UNSUPPORTED_PLACEHOLDER = "[Unsupported content]"

HEADING_TAGS = {
    1: "h1",
    2: "h2",
    3: "h3",
    4: "h4",
    5: "h5",
    6: "h6",
}

_ALIGNMENT_CSS = {
    Alignment.CENTER: "text-align: center",
    Alignment.END: "text-align: right",
    Alignment.JUSTIFY: "text-align: justify",
}


def heading_tag(paragraph: Paragraph) -> Optional[str]:
    """Return ``h1``..``h6`` for a heading paragraph, otherwise ``None``."""
    return HEADING_TAGS.get(paragraph.heading)


def compute_paragraph_style(paragraph: Paragraph) -> str:
    """
    Build the inline style for a paragraph.

    Args:
        paragraph: Paragraph or list item

    Returns:
        CSS declarations joined with ``; ``
    """
    styles = ["margin: 0.5em 0", "padding: 0"]

    alignment = _ALIGNMENT_CSS.get(paragraph.alignment)
    if alignment:
        styles.append(alignment)

    if paragraph.heading:
        styles.append("font-weight: bold")

    if paragraph.line_spacing:
        styles.append(f"line-height: {paragraph.line_spacing:g}")

    if paragraph.indent_start:
        styles.append(f"padding-left: {paragraph.indent_start:g}pt")
    if paragraph.indent_end:
        styles.append(f"padding-right: {paragraph.indent_end:g}pt")
    if paragraph.indent_first_line:
        styles.append(f"text-indent: {paragraph.indent_first_line:g}pt")

    return "; ".join(styles)


def render_paragraph(paragraph: Paragraph, log: Optional[logging.Logger] = None,
                     default_font_family: str = DEFAULT_FONT_FAMILY) -> str:
    """
    Render the inline content of a paragraph.

    Args:
        paragraph: Paragraph or list item
        log: Logger receiving diagnostics about unsupported content
        default_font_family: Family name treated as unset

    Returns:
        HTML fragment; ``&nbsp;`` when the paragraph has no text
    """
    log = log or logger

    if paragraph.text == "":
        return EMPTY_PARAGRAPH

    parts = []
    for element in paragraph.elements:
        if isinstance(element, Text):
            parts.append(convert_text_to_html(element, default_font_family))
        elif isinstance(element, InlineImage):
            log.debug("Inline image replaced with placeholder")
            parts.append(escape_html(IMAGE_PLACEHOLDER))
        else:
            log.warning(f"Unsupported inline element: {element.kind}")
            parts.append(escape_html(UNSUPPORTED_PLACEHOLDER))

    return "".join(parts)
