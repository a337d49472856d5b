"""
Document tree for the HTML converter.

This module defines the immutable Pydantic models that describe a rich
document: paragraphs, headings, list items, tables and styled text runs.
A tree is built once (usually by the Google Docs adapter) and then only
read by the converter.
"""

from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Alignment(str, Enum):
    """Horizontal paragraph alignment."""
    START = "START"
    CENTER = "CENTER"
    END = "END"
    JUSTIFY = "JUSTIFY"
    NONE = "NONE"


class GlyphType(str, Enum):
    """Marker drawn in front of a list item."""
    BULLET = "BULLET"
    HOLLOW_BULLET = "HOLLOW_BULLET"
    SQUARE_BULLET = "SQUARE_BULLET"
    NUMBER = "NUMBER"
    LATIN_LOWER = "LATIN_LOWER"
    LATIN_UPPER = "LATIN_UPPER"
    ROMAN_LOWER = "ROMAN_LOWER"
    ROMAN_UPPER = "ROMAN_UPPER"
    UNKNOWN = "UNKNOWN"


class VerticalOffset(str, Enum):
    """Baseline shift of a text run."""
    NONE = "NONE"
    SUPERSCRIPT = "SUPERSCRIPT"
    SUBSCRIPT = "SUBSCRIPT"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextStyle(_Node):
    """Formatting attributes in effect for a range of text.

    Every field is optional; ``None`` means the attribute is unset. A
    ``vertical_offset`` of ``None`` means the source platform has no
    baseline-offset concept at all.
    """
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    strikethrough: Optional[bool] = None
    link_url: Optional[str] = None
    foreground_color: Optional[str] = Field(None, description="Hex color, e.g. #1155cc")
    background_color: Optional[str] = Field(None, description="Hex color, e.g. #ffff00")
    font_size: Optional[float] = Field(None, description="Font size in points")
    font_family: Optional[str] = None
    vertical_offset: Optional[VerticalOffset] = None


class StyleSpan(_Node):
    """A formatting boundary: ``style`` applies from ``start`` up to the next span."""
    start: int = Field(..., description="Offset where the style starts; clamped to the text")
    style: TextStyle = Field(default_factory=TextStyle)


class Text(_Node):
    """A text node with its attribute-change boundaries."""
    text: str = ""
    spans: Tuple[StyleSpan, ...] = ()

    def attribute_indices(self) -> List[int]:
        """Offsets where formatting changes."""
        return [span.start for span in self.spans]

    def attributes_at(self, offset: int) -> TextStyle:
        """
        Return the style in effect at ``offset``.

        The span with the greatest start not past ``offset`` wins; spans need
        not be ordered. Later spans win ties.
        """
        style = DEFAULT_STYLE
        best = -1
        for span in self.spans:
            start = max(span.start, 0)
            if best <= start <= offset:
                best = start
                style = span.style
        return style


class InlineImage(_Node):
    """An embedded image; rendered as a placeholder token."""
    alt_text: Optional[str] = None


class UnsupportedInline(_Node):
    """An inline element the converter does not know how to render."""
    kind: str


Inline = Union[Text, InlineImage, UnsupportedInline]


class Paragraph(_Node):
    """A block of inline content with paragraph-level formatting."""
    heading: Optional[int] = Field(None, ge=1, le=6, description="Heading level 1-6")
    alignment: Alignment = Alignment.NONE
    line_spacing: Optional[float] = Field(None, description="Line height multiplier")
    indent_start: Optional[float] = Field(None, description="Start indent in points")
    indent_end: Optional[float] = Field(None, description="End indent in points")
    indent_first_line: Optional[float] = Field(None, description="First line indent in points")
    elements: Tuple[Inline, ...] = ()

    @property
    def text(self) -> str:
        return "".join(el.text for el in self.elements if isinstance(el, Text))


class ListItem(Paragraph):
    """A paragraph that belongs to a list."""
    nesting_level: int = Field(0, ge=0)
    glyph_type: GlyphType = GlyphType.BULLET


class UnsupportedElement(_Node):
    """A block element the converter does not know how to render."""
    kind: str
    text: str = ""


class TableCell(_Node):
    blocks: Tuple["Block", ...] = ()


class TableRow(_Node):
    cells: Tuple[TableCell, ...] = ()


class Table(_Node):
    rows: Tuple[TableRow, ...] = ()


# ListItem must precede Paragraph so list items keep their type.
Block = Union[ListItem, Paragraph, Table, UnsupportedElement]


class Body(_Node):
    """Root of a document tree."""
    blocks: Tuple[Block, ...] = ()


TableCell.model_rebuild()
Body.model_rebuild()

DEFAULT_STYLE = TextStyle()
