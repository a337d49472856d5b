"""
Google Docs adapter.

Maps the JSON returned by the Docs API ``documents.get`` call onto the
document tree used by the converter.
"""

import logging
from typing import Any, Dict, List, Optional

from .converter import ConverterOptions, convert_body_to_html
from .document import (
    Alignment,
    Block,
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

logger = logging.getLogger(__name__)

NAMED_STYLE_HEADINGS = {
    "TITLE": 1,
    "SUBTITLE": 2,
    "HEADING_1": 1,
    "HEADING_2": 2,
    "HEADING_3": 3,
    "HEADING_4": 4,
    "HEADING_5": 5,
    "HEADING_6": 6,
}

ALIGNMENTS = {
    "START": Alignment.START,
    "CENTER": Alignment.CENTER,
    "END": Alignment.END,
    "JUSTIFIED": Alignment.JUSTIFY,
}

GLYPH_TYPES = {
    "DECIMAL": GlyphType.NUMBER,
    "ZERO_DECIMAL": GlyphType.NUMBER,
    "ALPHA": GlyphType.LATIN_LOWER,
    "UPPER_ALPHA": GlyphType.LATIN_UPPER,
    "ROMAN": GlyphType.ROMAN_LOWER,
    "UPPER_ROMAN": GlyphType.ROMAN_UPPER,
}

GLYPH_SYMBOLS = {
    "●": GlyphType.BULLET,
    "•": GlyphType.BULLET,
    "○": GlyphType.HOLLOW_BULLET,
    "■": GlyphType.SQUARE_BULLET,
    "▪": GlyphType.SQUARE_BULLET,
}

BASELINE_OFFSETS = {
    "NONE": VerticalOffset.NONE,
    "BASELINE_OFFSET_UNSPECIFIED": VerticalOffset.NONE,
    "SUPERSCRIPT": VerticalOffset.SUPERSCRIPT,
    "SUBSCRIPT": VerticalOffset.SUBSCRIPT,
}

# Layout-only elements that carry no content
_IGNORED_INLINES = {"pageBreak", "columnBreak", "horizontalRule"}
_IGNORED_BLOCKS = {"sectionBreak"}


def body_from_document(document: Dict[str, Any]) -> Body:
    """
    Build a document tree from a Docs API document resource.

    Args:
        document: Parsed JSON of ``documents.get``

    Returns:
        Body of the document tree
    """
    lists = document.get("lists", {})
    content = document.get("body", {}).get("content", [])
    return Body(blocks=_convert_content(content, lists))


def document_to_html(document: Dict[str, Any], options: Optional[ConverterOptions] = None,
                     log: Optional[logging.Logger] = None) -> str:
    """Convert a Docs API document resource straight to HTML."""
    return convert_body_to_html(body_from_document(document), options, log)


def _convert_content(content: List[Dict[str, Any]], lists: Dict[str, Any]) -> List[Block]:
    blocks = []
    for element in content:
        if "paragraph" in element:
            blocks.append(_convert_paragraph(element["paragraph"], lists))
        elif "table" in element:
            blocks.append(_convert_table(element["table"], lists))
        else:
            kind = _element_kind(element)
            if kind in _IGNORED_BLOCKS:
                continue
            blocks.append(UnsupportedElement(kind=kind))
    return blocks


def _convert_table(table: Dict[str, Any], lists: Dict[str, Any]) -> Table:
    rows = []
    for row in table.get("tableRows", []):
        cells = [
            TableCell(blocks=_convert_content(cell.get("content", []), lists))
            for cell in row.get("tableCells", [])
        ]
        rows.append(TableRow(cells=cells))
    return Table(rows=rows)


def _convert_paragraph(paragraph: Dict[str, Any], lists: Dict[str, Any]) -> Paragraph:
    style = paragraph.get("paragraphStyle", {})
    fields = {
        "heading": NAMED_STYLE_HEADINGS.get(style.get("namedStyleType")),
        "alignment": ALIGNMENTS.get(style.get("alignment"), Alignment.NONE),
        "line_spacing": style["lineSpacing"] / 100 if style.get("lineSpacing") else None,
        "indent_start": _magnitude(style.get("indentStart")),
        "indent_end": _magnitude(style.get("indentEnd")),
        "indent_first_line": _magnitude(style.get("indentFirstLine")),
        "elements": _convert_elements(paragraph.get("elements", [])),
    }

    bullet = paragraph.get("bullet")
    if bullet is None:
        return Paragraph(**fields)

    level = bullet.get("nestingLevel", 0)
    return ListItem(
        nesting_level=level,
        glyph_type=_glyph_for(lists, bullet.get("listId"), level),
        **fields,
    )


def _convert_elements(elements: List[Dict[str, Any]]) -> list:
    """Merge consecutive text-bearing elements into single text nodes."""
    inlines = []
    text_parts: List[str] = []
    spans: List[StyleSpan] = []

    def flush():
        if text_parts:
            inlines.append(Text(text="".join(text_parts), spans=spans.copy()))
            text_parts.clear()
            spans.clear()

    for element in elements:
        run = _text_of(element)
        if run is not None:
            text, style = run
            offset = sum(len(part) for part in text_parts)
            spans.append(StyleSpan(start=offset, style=style))
            text_parts.append(text)
            continue

        kind = _element_kind(element)
        if kind in _IGNORED_INLINES:
            continue
        flush()
        if kind == "inlineObjectElement":
            inlines.append(InlineImage())
        else:
            inlines.append(UnsupportedInline(kind=kind))

    flush()
    return _strip_paragraph_end(inlines)


def _text_of(element: Dict[str, Any]) -> Optional[tuple]:
    """Return ``(text, style)`` for elements that render as text."""
    if "textRun" in element:
        run = element["textRun"]
        return run.get("content", ""), _convert_text_style(run.get("textStyle", {}))

    if "richLink" in element:
        props = element["richLink"].get("richLinkProperties", {})
        text = props.get("title") or props.get("uri", "")
        style = _convert_text_style(element["richLink"].get("textStyle", {}))
        return text, style.model_copy(update={"link_url": props.get("uri")})

    if "person" in element:
        props = element["person"].get("personProperties", {})
        text = props.get("name") or props.get("email", "")
        return text, _convert_text_style(element["person"].get("textStyle", {}))

    return None


def _strip_paragraph_end(inlines: list) -> list:
    """Drop the newline that terminates every Docs paragraph."""
    if not inlines or not isinstance(inlines[-1], Text):
        return inlines

    last = inlines[-1]
    if not last.text.endswith("\n"):
        return inlines

    text = last.text[:-1]
    if not text:
        return inlines[:-1]
    spans = [span for span in last.spans if span.start < len(text)]
    return inlines[:-1] + [Text(text=text, spans=spans)]


def _convert_text_style(style: Dict[str, Any]) -> TextStyle:
    link = style.get("link") or {}
    font_family = (style.get("weightedFontFamily") or {}).get("fontFamily")
    baseline = style.get("baselineOffset")

    return TextStyle(
        bold=style.get("bold"),
        italic=style.get("italic"),
        underline=style.get("underline"),
        strikethrough=style.get("strikethrough"),
        link_url=link.get("url"),
        foreground_color=_hex_color(style.get("foregroundColor")),
        background_color=_hex_color(style.get("backgroundColor")),
        font_size=_magnitude(style.get("fontSize")),
        font_family=font_family,
        vertical_offset=BASELINE_OFFSETS.get(baseline) if baseline else None,
    )


def _glyph_for(lists: Dict[str, Any], list_id: Optional[str], level: int) -> GlyphType:
    levels = (
        lists.get(list_id, {})
        .get("listProperties", {})
        .get("nestingLevels", [])
    )
    if level >= len(levels):
        return GlyphType.BULLET

    nesting = levels[level]
    glyph_type = nesting.get("glyphType")
    if glyph_type in GLYPH_TYPES:
        return GLYPH_TYPES[glyph_type]
    return GLYPH_SYMBOLS.get(nesting.get("glyphSymbol"), GlyphType.BULLET)


def _hex_color(color: Optional[Dict[str, Any]]) -> Optional[str]:
    """Convert an ``OptionalColor`` to ``#rrggbb``."""
    rgb = ((color or {}).get("color") or {}).get("rgbColor")
    if rgb is None:
        return None
    channels = (round(rgb.get(name, 0.0) * 255) for name in ("red", "green", "blue"))
    return "#" + "".join(f"{value:02x}" for value in channels)


def _magnitude(dimension: Optional[Dict[str, Any]]) -> Optional[float]:
    if not dimension:
        return None
    return dimension.get("magnitude")


def _element_kind(element: Dict[str, Any]) -> str:
    for key in element:
        if key not in ("startIndex", "endIndex"):
            return key
    return "unknown"
