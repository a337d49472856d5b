"""
Text run segmentation.

Splits a text node at its formatting boundaries and renders every segment
with inline tags and span styles.
"""

from typing import Iterable, List, Tuple

from .document import Text, TextStyle, VerticalOffset
from .escaping import escape_html

DEFAULT_FONT_FAMILY = "Arial"

_UNSET_FOREGROUND = "#000000"
_UNSET_BACKGROUND = "#ffffff"


def segment_text(length: int, boundaries: Iterable[int]) -> List[Tuple[int, int]]:
    """
    Compute the ``[start, end)`` ranges between formatting boundaries.

    Boundaries outside ``[0, length]`` are clamped and boundaries that do not
    advance are dropped, so the ranges always cover the whole string once.

    Args:
        length: Length of the text
        boundaries: Offsets where formatting changes

    Returns:
        Non-empty, contiguous ranges in order
    """
    ranges = []
    last = 0
    for boundary in boundaries:
        boundary = min(max(boundary, 0), length)
        if boundary <= last:
            continue
        ranges.append((last, boundary))
        last = boundary

    if last < length:
        ranges.append((last, length))

    return ranges


def convert_text_to_html(node: Text, default_font_family: str = DEFAULT_FONT_FAMILY) -> str:
    """Render a text node as HTML."""
    text = node.text
    return "".join(
        render_segment(text[start:end], node.attributes_at(start), default_font_family)
        for start, end in segment_text(len(text), node.attribute_indices())
    )


def render_segment(text: str, style: TextStyle,
                   default_font_family: str = DEFAULT_FONT_FAMILY) -> str:
    """
    Render one uniformly formatted segment.

    Inline tags wrap from the inside out in the order link, underline,
    strikethrough, italic, bold. Span styles wrap the inline tags and a
    superscript or subscript tag wraps everything.

    Args:
        text: Segment text, unescaped
        style: Formatting in effect at the start of the segment
        default_font_family: Family name treated as unset

    Returns:
        HTML fragment, empty for an empty segment
    """
    if not text:
        return ""

    html = escape_html(text)

    if style.link_url:
        html = f'<a href="{escape_html(style.link_url)}">{html}</a>'
    if style.underline:
        html = f"<u>{html}</u>"
    if style.strikethrough:
        html = f"<s>{html}</s>"
    if style.italic:
        html = f"<em>{html}</em>"
    if style.bold:
        html = f"<strong>{html}</strong>"

    span_styles = compute_span_styles(style, default_font_family)
    if span_styles:
        html = f'<span style="{"; ".join(span_styles)}">{html}</span>'

    if style.vertical_offset == VerticalOffset.SUPERSCRIPT:
        html = f"<sup>{html}</sup>"
    elif style.vertical_offset == VerticalOffset.SUBSCRIPT:
        html = f"<sub>{html}</sub>"

    return html


def compute_span_styles(style: TextStyle,
                        default_font_family: str = DEFAULT_FONT_FAMILY) -> List[str]:
    """CSS declarations for the ``<span>`` around a segment."""
    styles = []

    if style.foreground_color and style.foreground_color.lower() != _UNSET_FOREGROUND:
        styles.append(f"color: {escape_html(style.foreground_color)}")
    if style.background_color and style.background_color.lower() != _UNSET_BACKGROUND:
        styles.append(f"background-color: {escape_html(style.background_color)}")
    if style.font_size:
        styles.append(f"font-size: {style.font_size:g}pt")
    if style.font_family and style.font_family != default_font_family:
        styles.append(f"font-family: '{escape_html(style.font_family)}'")

    return styles
