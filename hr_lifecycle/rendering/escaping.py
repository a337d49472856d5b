"""
HTML escaping for document text.
"""

_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def escape_html(text: str) -> str:
    """
    Escape reserved HTML characters.

    Ampersands are replaced first so entities produced by the later
    replacements are not escaped twice.

    Args:
        text: Raw text

    Returns:
        Text safe for use in element content and quoted attributes

    Raises:
        TypeError: If ``text`` is not a string
    """
    if not isinstance(text, str):
        raise TypeError(f"escape_html expects str, got {type(text).__name__}")

    for char, entity in _REPLACEMENTS:
        text = text.replace(char, entity)
    return text
