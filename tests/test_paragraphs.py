"""
Tests for paragraph styles and inline content.
"""

import logging
from unittest.mock import Mock

from hr_lifecycle.rendering import (
    Alignment,
    InlineImage,
    ListItem,
    Paragraph,
    StyleSpan,
    Text,
    TextStyle,
    UnsupportedInline,
    compute_paragraph_style,
    heading_tag,
    render_paragraph,
)


class TestComputeParagraphStyle:
    """Test cases for compute_paragraph_style."""

    def test_base_style(self):
        assert compute_paragraph_style(Paragraph()) == "margin: 0.5em 0; padding: 0"

    def test_alignment(self):
        assert compute_paragraph_style(Paragraph(alignment=Alignment.CENTER)).endswith("text-align: center")
        assert compute_paragraph_style(Paragraph(alignment=Alignment.END)).endswith("text-align: right")
        assert compute_paragraph_style(Paragraph(alignment=Alignment.JUSTIFY)).endswith("text-align: justify")
        assert "text-align" not in compute_paragraph_style(Paragraph(alignment=Alignment.START))

    def test_full_style_order(self):
        paragraph = Paragraph(heading=2, alignment=Alignment.CENTER, line_spacing=1.15,
                              indent_start=36, indent_end=18, indent_first_line=-18)
        assert compute_paragraph_style(paragraph) == (
            "margin: 0.5em 0; padding: 0; text-align: center; font-weight: bold; "
            "line-height: 1.15; padding-left: 36pt; padding-right: 18pt; text-indent: -18pt"
        )

    def test_zero_indents_are_omitted(self):
        paragraph = Paragraph(indent_start=0, indent_first_line=0)
        assert compute_paragraph_style(paragraph) == "margin: 0.5em 0; padding: 0"


class TestHeadingTag:

    def test_heading_levels(self):
        assert heading_tag(Paragraph(heading=1)) == "h1"
        assert heading_tag(Paragraph(heading=6)) == "h6"

    def test_normal_paragraph(self):
        assert heading_tag(Paragraph()) is None
        assert heading_tag(ListItem()) is None


class TestRenderParagraph:
    """Test cases for render_paragraph."""

    def test_empty_paragraph(self):
        assert render_paragraph(Paragraph()) == "&nbsp;"
        assert render_paragraph(Paragraph(elements=(Text(text=""),))) == "&nbsp;"

    def test_text_elements_are_concatenated(self):
        paragraph = Paragraph(elements=(
            Text(text="Dear "),
            Text(text="Jane", spans=(StyleSpan(start=0, style=TextStyle(bold=True)),)),
        ))
        assert render_paragraph(paragraph) == "Dear <strong>Jane</strong>"

    def test_inline_image_placeholder(self):
        paragraph = Paragraph(elements=(Text(text="Logo: "), InlineImage()))
        assert render_paragraph(paragraph) == "Logo: [Image]"

    def test_image_only_paragraph_is_empty(self):
        assert render_paragraph(Paragraph(elements=(InlineImage(),))) == "&nbsp;"

    def test_unsupported_inline_is_logged(self):
        log = Mock(spec=logging.Logger)
        paragraph = Paragraph(elements=(Text(text="See "), UnsupportedInline(kind="equation")))

        assert render_paragraph(paragraph, log) == "See [Unsupported content]"
        log.warning.assert_called_once()
        assert "equation" in log.warning.call_args[0][0]

    def test_text_property_ignores_non_text(self):
        paragraph = Paragraph(elements=(Text(text="a"), InlineImage(), Text(text="b")))
        assert paragraph.text == "ab"
