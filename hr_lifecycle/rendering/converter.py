"""
Document to HTML converter.

Walks a document tree and produces styled HTML suitable for an email body.
Conversion is a pure read of the tree; every call keeps its own state, so
one converter may be used for many documents concurrently.
"""

import logging
from typing import Iterable, Optional, Set

from pydantic import BaseModel, Field

from .document import Block, Body, ListItem, Paragraph, Table, TableCell
from .escaping import escape_html
from .lists import ListRenderer
from .paragraphs import (
    UNSUPPORTED_PLACEHOLDER,
    compute_paragraph_style,
    heading_tag,
    render_paragraph,
)
from .tables import render_table
from .text_runs import DEFAULT_FONT_FAMILY

logger = logging.getLogger(__name__)


class ConverterOptions(BaseModel):
    """Tunable behaviour of the converter."""
    dedupe_list_items: bool = Field(
        False, description="Suppress list items whose text was rendered recently"
    )
    dedupe_capacity: int = Field(100, ge=1, description="Recent item texts remembered before reset")
    unsupported_placeholders: bool = Field(
        True, description="Emit a placeholder token for unsupported blocks instead of nothing"
    )
    default_font_family: str = Field(DEFAULT_FONT_FAMILY, description="Font family treated as unset")


class RecentTextGuard:
    """Bounded memory of recently rendered list item texts."""

    def __init__(self, capacity: int = 100):
        self.capacity = capacity
        self._seen: Set[str] = set()

    def seen(self, text: str) -> bool:
        """Return True if ``text`` was seen recently, otherwise remember it."""
        if text in self._seen:
            return True
        if len(self._seen) >= self.capacity:
            self._seen.clear()
        self._seen.add(text)
        return False


class DocumentHtmlConverter:
    """
    Converts a document body to HTML.

    Args:
        options: Converter options, defaults when omitted
        log: Diagnostic channel for unsupported content
    """

    def __init__(self, options: Optional[ConverterOptions] = None,
                 log: Optional[logging.Logger] = None):
        self.options = options or ConverterOptions()
        self.logger = log or logger

    def convert(self, body: Body) -> str:
        """Convert a whole document body."""
        guard = RecentTextGuard(self.options.dedupe_capacity) if self.options.dedupe_list_items else None
        return self._render_blocks(body.blocks, in_cell=False, guard=guard)

    def _render_blocks(self, blocks: Iterable[Block], in_cell: bool,
                       guard: Optional[RecentTextGuard]) -> str:
        lists = ListRenderer()
        parts = []

        for block in blocks:
            if isinstance(block, ListItem):
                if guard is not None and guard.seen(block.text.strip()):
                    self.logger.debug(f"Skipping repeated list item: {block.text.strip()!r}")
                    continue
                parts.append(lists.render_item(block, self._render_inline(block)))
                continue

            parts.append(lists.close_all())

            if isinstance(block, Paragraph):
                parts.append(self._render_paragraph_block(block, in_cell))
            elif isinstance(block, Table):
                self.logger.debug(f"Converting table with {len(block.rows)} rows")
                parts.append(render_table(
                    block, lambda cell: self._render_cell(cell, guard)
                ))
            else:
                parts.append(self._render_unsupported(block))

        parts.append(lists.close_all())
        return "".join(parts)

    def _render_cell(self, cell: TableCell, guard: Optional[RecentTextGuard]) -> str:
        return self._render_blocks(cell.blocks, in_cell=True, guard=guard)

    def _render_paragraph_block(self, paragraph: Paragraph, in_cell: bool) -> str:
        style = compute_paragraph_style(paragraph)
        content = self._render_inline(paragraph)

        if in_cell:
            return f'<div style="{style}">{content}</div>'

        tag = heading_tag(paragraph)
        if tag:
            return (
                '\n<div class="section" style="margin-left: 0 !important;">'
                f'<{tag} style="{style}">{content}</{tag}></div>\n'
            )
        return f'<p style="{style}">{content}</p>'

    def _render_inline(self, paragraph: Paragraph) -> str:
        return render_paragraph(paragraph, self.logger, self.options.default_font_family)

    def _render_unsupported(self, block) -> str:
        kind = getattr(block, "kind", type(block).__name__)
        self.logger.warning(f"Unsupported element type: {kind}")
        if not self.options.unsupported_placeholders:
            return ""
        return escape_html(UNSUPPORTED_PLACEHOLDER)


def convert_body_to_html(body: Body, options: Optional[ConverterOptions] = None,
                         log: Optional[logging.Logger] = None) -> str:
    """
    Convert a document body to HTML.

    Args:
        body: Document tree root
        options: Converter options
        log: Diagnostic channel, defaults to this module's logger

    Returns:
        HTML string
    """
    return DocumentHtmlConverter(options, log).convert(body)
