"""
Tests for the document to HTML converter.
"""

import logging
from unittest.mock import Mock

from hr_lifecycle.rendering import (
    Body,
    ConverterOptions,
    DocumentHtmlConverter,
    GlyphType,
    ListItem,
    Paragraph,
    RecentTextGuard,
    Table,
    TableCell,
    TableRow,
    Text,
    UnsupportedElement,
    convert_body_to_html,
)

P_STYLE = "margin: 0.5em 0; padding: 0"
LI = '<li style="margin-bottom: 0.5em;">'
UL0 = '<ul style="margin-left: 0px; list-style-type: disc;">'


def para(text, **kwargs):
    return Paragraph(elements=(Text(text=text),), **kwargs)


def bullet(text, level=0, glyph=GlyphType.BULLET):
    return ListItem(elements=(Text(text=text),), nesting_level=level, glyph_type=glyph)


class TestConvertBodyToHtml:
    """Test cases for convert_body_to_html."""

    def test_empty_body(self):
        assert convert_body_to_html(Body()) == ""

    def test_paragraphs(self):
        html = convert_body_to_html(Body(blocks=(para("Hello"), para(""))))
        assert html == f'<p style="{P_STYLE}">Hello</p><p style="{P_STYLE}">&nbsp;</p>'

    def test_heading_section(self):
        html = convert_body_to_html(Body(blocks=(para("Welcome", heading=1),)))
        assert html == (
            '\n<div class="section" style="margin-left: 0 !important;">'
            f'<h1 style="{P_STYLE}; font-weight: bold">Welcome</h1></div>\n'
        )

    def test_list_closed_before_paragraph(self):
        html = convert_body_to_html(Body(blocks=(bullet("One"), bullet("Two"), para("After"))))
        assert html == f'{UL0}{LI}One</li>{LI}Two</li></ul><p style="{P_STYLE}">After</p>'

    def test_list_closed_at_end(self):
        html = convert_body_to_html(Body(blocks=(bullet("Only"),)))
        assert html.endswith("</li></ul>")

    def test_table_cells_use_div(self):
        table = Table(rows=(
            TableRow(cells=(TableCell(blocks=(para("Name"),)),)),
            TableRow(cells=(TableCell(blocks=(para("Jane"),)),)),
        ))
        html = convert_body_to_html(Body(blocks=(table,)))

        assert html == (
            '<table border="1" style="border-collapse: collapse; width: 100%;">'
            f'<tr><th><div style="{P_STYLE}">Name</div></th></tr>'
            f'<tr><td><div style="{P_STYLE}">Jane</div></td></tr>'
            "</table>"
        )

    def test_list_inside_cell_is_closed_in_cell(self):
        table = Table(rows=(TableRow(cells=(TableCell(blocks=(bullet("a"),)),)),))
        html = convert_body_to_html(Body(blocks=(bullet("outer"), table)))

        assert html == (
            f"{UL0}{LI}outer</li></ul>"
            '<table border="1" style="border-collapse: collapse; width: 100%;">'
            f"<tr><th>{UL0}{LI}a</li></ul></th></tr></table>"
        )

    def test_nested_table(self):
        inner = Table(rows=(TableRow(cells=(TableCell(blocks=(para("deep"),)),)),))
        outer = Table(rows=(TableRow(cells=(TableCell(blocks=(inner,)),)),))
        html = convert_body_to_html(Body(blocks=(outer,)))

        assert html.count("<table") == 2
        assert "deep" in html

    def test_unsupported_block_placeholder(self):
        log = Mock(spec=logging.Logger)
        html = convert_body_to_html(Body(blocks=(UnsupportedElement(kind="tableOfContents"),)), log=log)

        assert html == "[Unsupported content]"
        log.warning.assert_called_once()

    def test_unsupported_block_dropped(self):
        options = ConverterOptions(unsupported_placeholders=False)
        html = convert_body_to_html(Body(blocks=(UnsupportedElement(kind="tableOfContents"),)), options)
        assert html == ""

    def test_repeated_list_items_kept_by_default(self):
        html = convert_body_to_html(Body(blocks=(bullet("Same"), bullet("Same"))))
        assert html.count("Same") == 2

    def test_repeated_list_items_deduplicated(self):
        options = ConverterOptions(dedupe_list_items=True)
        html = convert_body_to_html(Body(blocks=(bullet("Same"), bullet("Same"), bullet("Other"))), options)

        assert html.count("Same") == 1
        assert "Other" in html

    def test_converter_is_reusable(self):
        converter = DocumentHtmlConverter()
        body = Body(blocks=(bullet("a"),))
        assert converter.convert(body) == converter.convert(body)


class TestRecentTextGuard:

    def test_seen(self):
        guard = RecentTextGuard(capacity=10)
        assert guard.seen("a") is False
        assert guard.seen("a") is True

    def test_capacity_resets_memory(self):
        guard = RecentTextGuard(capacity=2)
        guard.seen("a")
        guard.seen("b")
        guard.seen("c")
        assert guard.seen("a") is False
