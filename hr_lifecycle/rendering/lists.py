"""
List rendering.

Turns a run of list items into nested ``<ul>``/``<ol>`` markup. Open
containers are tracked on an explicit stack keyed by nesting level, so
arbitrary jumps between levels close exactly the containers that were
opened.
"""

from typing import List

from .document import GlyphType, ListItem

_BULLET_GLYPHS = {GlyphType.BULLET, GlyphType.HOLLOW_BULLET, GlyphType.SQUARE_BULLET}

_GLYPH_CSS = {
    GlyphType.BULLET: "disc",
    GlyphType.HOLLOW_BULLET: "circle",
    GlyphType.SQUARE_BULLET: "square",
    GlyphType.NUMBER: "decimal",
    GlyphType.LATIN_LOWER: "lower-latin",
    GlyphType.LATIN_UPPER: "upper-latin",
    GlyphType.ROMAN_LOWER: "lower-roman",
    GlyphType.ROMAN_UPPER: "upper-roman",
}

INDENT_PER_LEVEL_PX = 20


def list_tag(glyph: GlyphType) -> str:
    """``ul`` for the bullet family, ``ol`` for everything else."""
    return "ul" if glyph in _BULLET_GLYPHS else "ol"


def glyph_style(glyph: GlyphType) -> str:
    """CSS ``list-style-type`` for a glyph; unknown glyphs fall back to ``disc``."""
    return _GLYPH_CSS.get(glyph, "disc")


class _OpenList:
    """An open container and whether its last ``<li>`` is still open."""

    def __init__(self, level: int, tag: str):
        self.level = level
        self.tag = tag
        self.item_open = False

    def close(self) -> str:
        html = "</li>" if self.item_open else ""
        return html + f"</{self.tag}>"


class ListRenderer:
    """
    Stateful renderer for one sequence of sibling blocks.

    Create one per block sequence (document body or table cell), feed it
    list items in order and call ``close_all`` when a non-list block
    follows or the sequence ends.
    """

    def __init__(self):
        self._stack: List[_OpenList] = []

    @property
    def depth(self) -> int:
        """Number of open containers."""
        return len(self._stack)

    def render_item(self, item: ListItem, content: str) -> str:
        """
        Render a list item, opening and closing containers as needed.

        Args:
            item: The list item
            content: Already rendered inline content of the item

        Returns:
            HTML fragment; the item's ``</li>`` is emitted later
        """
        level = item.nesting_level
        tag = list_tag(item.glyph_type)
        parts = []

        while self._stack and self._stack[-1].level > level:
            parts.append(self._stack.pop().close())

        top = self._stack[-1] if self._stack else None
        if top is not None and top.level == level:
            if top.tag != tag:
                parts.append(self._stack.pop().close())
                top = None
            elif top.item_open:
                parts.append("</li>")
                top.item_open = False

        if top is None or top.level < level:
            parts.append(
                f'<{tag} style="margin-left: {level * INDENT_PER_LEVEL_PX}px; '
                f'list-style-type: {glyph_style(item.glyph_type)};">'
            )
            top = _OpenList(level, tag)
            self._stack.append(top)

        parts.append(f'<li style="margin-bottom: 0.5em;">{content}')
        top.item_open = True

        return "".join(parts)

    def close_all(self) -> str:
        """Close every open item and container."""
        parts = []
        while self._stack:
            parts.append(self._stack.pop().close())
        return "".join(parts)
