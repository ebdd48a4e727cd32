"""Text sanitization and wrapping helpers."""

from __future__ import annotations

import re

_BLOCK_TAGS = frozenset(
    ["h1", "h2", "h3", "h4", "h5", "h6", "p", "div", "br", "/h1", "/h2", "/h3", "/h4", "/h5", "/h6", "/p", "/div"]
)
_WHITESPACE_RE = re.compile(r"\s+")
_ELEMENT_ID_RE = '<[^>]*\\bid="{id}"[^>]*>([^<]*)<'


def sanitize_html(text: str) -> str:
    """Strip markup from a product name or sale label.

    Tags are dropped, a block-level tag (``h1``-``h6``, ``p``, ``div``, ``br``
    and their closing forms) separates its neighbours with a space, whitespace
    runs collapse to one space, and an opening parenthesis glued to a word gets
    a space in front of it.
    """
    out: list[str] = []
    in_tag = False
    tag_content: list[str] = []

    for char in text:
        if char == "<":
            in_tag = True
            tag_content = []
        elif char == ">" and in_tag:
            in_tag = False
            parts = "".join(tag_content).split()
            tag_name = parts[0].lower().rstrip("/") if parts else ""
            if tag_name in _BLOCK_TAGS and out and not out[-1].isspace():
                out.append(" ")
        elif in_tag:
            tag_content.append(char)
        else:
            out.append(char)

    collapsed = _WHITESPACE_RE.sub(" ", "".join(out))

    spaced: list[str] = []
    for idx, char in enumerate(collapsed):
        if char == "(" and idx > 0 and collapsed[idx - 1].isalnum():
            spaced.append(" ")
        spaced.append(char)
    return "".join(spaced).strip()


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def wrap_words(message: str, max_width: int) -> list[str]:
    lines: list[str] = []
    current = ""
    for word in message.split():
        if current and len(current) + len(word) + 1 > max_width:
            lines.append(current)
            current = word
        elif not current:
            current = word
        else:
            current = f"{current} {word}"
    if current:
        lines.append(current)
    return lines


def format_error_message(message: str, max_width: int = 50, max_lines: int = 10) -> str:
    """Word-wrap an error for a modal, eliding anything past ``max_lines``."""
    lines = wrap_words(message, max_width)
    if len(lines) > max_lines:
        lines = lines[: max_lines - 1] + ["..."]
    return "\n".join(lines)


def extract_element_text(html: str, element_id: str) -> str | None:
    """Return the text directly inside the element with ``id=element_id``."""
    match = re.search(_ELEMENT_ID_RE.format(id=re.escape(element_id)), html)
    if match is None:
        return None
    content = match.group(1).strip()
    return content or None
