"""
Placeholder substitution requests for Google Docs templates.

Plain text placeholders become ``replaceAllText`` requests. Link
placeholders are replaced in place: the placeholder range is deleted, the
link text inserted and styled as a hyperlink. Docs API indices count UTF-16
code units, and edits are emitted from the end of the document backwards so
earlier ranges stay valid.
"""

from typing import Any, Dict, Iterator, List, Mapping, Tuple, Union

from ..models import LinkValue, PlaceholderValue


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units."""
    return len(text.encode("utf-16-le")) // 2


def as_link(value: Union[LinkValue, Dict[str, Any]]) -> LinkValue:
    return value if isinstance(value, LinkValue) else LinkValue(**value)


def is_link(value: Any) -> bool:
    return isinstance(value, LinkValue) or (
        isinstance(value, dict) and "text" in value and "url" in value
    )


def split_values(values: Mapping[str, PlaceholderValue]) -> Tuple[Dict[str, str], Dict[str, LinkValue]]:
    """Separate plain text placeholders from link placeholders."""
    texts: Dict[str, str] = {}
    links: Dict[str, LinkValue] = {}
    for placeholder, value in values.items():
        if is_link(value):
            links[placeholder] = as_link(value)
        else:
            texts[placeholder] = "" if value is None else str(value)
    return texts, links


def build_text_replacements(values: Mapping[str, PlaceholderValue]) -> List[Dict[str, Any]]:
    """``replaceAllText`` requests for every plain text placeholder."""
    texts, _ = split_values(values)
    return [
        {
            'replaceAllText': {
                'containsText': {'text': placeholder, 'matchCase': True},
                'replaceText': replacement,
            }
        }
        for placeholder, replacement in texts.items()
    ]


def find_placeholder_ranges(document: Dict[str, Any], placeholder: str) -> List[Tuple[int, int]]:
    """
    Locate every occurrence of ``placeholder`` in the document body.

    Only occurrences contained in a single text run are found; a placeholder
    whose characters carry mixed formatting is split across runs by Docs.

    Args:
        document: Docs API document resource
        placeholder: Literal text to find

    Returns:
        ``(start, end)`` index pairs in document order
    """
    ranges = []
    length = utf16_length(placeholder)
    for run_start, content in _text_runs(document.get("body", {}).get("content", [])):
        position = content.find(placeholder)
        while position != -1:
            start = run_start + utf16_length(content[:position])
            ranges.append((start, start + length))
            position = content.find(placeholder, position + len(placeholder))
    return ranges


def build_link_replacements(document: Dict[str, Any],
                            links: Mapping[str, Union[LinkValue, Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Requests replacing link placeholders with hyperlinked text.

    Args:
        document: Docs API document resource, fetched after text replacement
        links: Placeholder to link value

    Returns:
        Delete/insert/style requests ordered from the highest index down
    """
    occurrences = []
    for placeholder, value in links.items():
        link = as_link(value)
        for start, end in find_placeholder_ranges(document, placeholder):
            occurrences.append((start, end, link))

    requests = []
    for start, end, link in sorted(occurrences, key=lambda item: item[0], reverse=True):
        requests.append({'deleteContentRange': {'range': {'startIndex': start, 'endIndex': end}}})
        if not link.text:
            continue
        requests.extend([
            {'insertText': {'location': {'index': start}, 'text': link.text}},
            {
                'updateTextStyle': {
                    'range': {'startIndex': start, 'endIndex': start + utf16_length(link.text)},
                    'textStyle': {'link': {'url': link.url}},
                    'fields': 'link',
                }
            },
        ])
    return requests


def _text_runs(content: List[Dict[str, Any]]) -> Iterator[Tuple[int, str]]:
    for element in content:
        if "paragraph" in element:
            for inline in element["paragraph"].get("elements", []):
                if "textRun" in inline and "startIndex" in inline:
                    yield inline["startIndex"], inline["textRun"].get("content", "")
        elif "table" in element:
            for row in element["table"].get("tableRows", []):
                for cell in row.get("tableCells", []):
                    yield from _text_runs(cell.get("content", []))
