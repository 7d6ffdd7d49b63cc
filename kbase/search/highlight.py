"""Wrap query matches in <mark> tags for display."""

import html
import re

MARK_OPEN = '<mark class="highlight">'
MARK_CLOSE = "</mark>"


def highlight_text(text: str, query: str) -> str:
    """Highlight every case-insensitive occurrence of query in text.

    The query is matched literally. Text outside the marks is HTML-escaped
    so the marks are the only markup in the result; matched text keeps its
    original casing.

    Args:
        text: Text to highlight.
        query: Search query.

    Returns:
        Highlighted HTML, or text unchanged when the query is blank.
    """
    query = query.strip()
    if not query:
        return text

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    parts: list[str] = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(html.escape(text[last : match.start()]))
        parts.append(f"{MARK_OPEN}{html.escape(match.group(0))}{MARK_CLOSE}")
        last = match.end()
    parts.append(html.escape(text[last:]))
    return "".join(parts)
