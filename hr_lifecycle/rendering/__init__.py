"""
Rendering Package for the HR Lifecycle Engine.

Converts rich documents (paragraphs, headings, nested lists, tables and
styled text runs) into HTML for email bodies.
"""

from .converter import ConverterOptions, DocumentHtmlConverter, RecentTextGuard, convert_body_to_html
from .document import (
    Alignment,
    Body,
    GlyphType,
    InlineImage,
    ListItem,
    Paragraph,
    StyleSpan,
    Table,
    TableCell,
    TableRow,
    Text,
    TextStyle,
    UnsupportedElement,
    UnsupportedInline,
    VerticalOffset,
)
from .escaping import escape_html
from .google_docs import body_from_document, document_to_html
from .lists import ListRenderer, glyph_style, list_tag
from .paragraphs import EMPTY_PARAGRAPH, compute_paragraph_style, heading_tag, render_paragraph
from .tables import render_table
from .text_runs import convert_text_to_html, render_segment, segment_text

__all__ = [
    "Alignment",
    "Body",
    "ConverterOptions",
    "DocumentHtmlConverter",
    "EMPTY_PARAGRAPH",
    "GlyphType",
    "InlineImage",
    "ListItem",
    "ListRenderer",
    "Paragraph",
    "RecentTextGuard",
    "StyleSpan",
    "Table",
    "TableCell",
    "TableRow",
    "Text",
    "TextStyle",
    "UnsupportedElement",
    "UnsupportedInline",
    "VerticalOffset",
    "body_from_document",
    "compute_paragraph_style",
    "convert_body_to_html",
    "convert_text_to_html",
    "document_to_html",
    "escape_html",
    "glyph_style",
    "heading_tag",
    "list_tag",
    "render_paragraph",
    "render_segment",
    "render_table",
    "segment_text",
]
