"""Plain-text views of markdown descriptions.

Descriptions are authored in markdown.  Search and previews work on the
rendered text: the markdown is converted with Python-Markdown and the text
content of the resulting HTML is kept, without image alt text.
"""

from __future__ import annotations

import locale
import re
from functools import lru_cache
from html.parser import HTMLParser

import markdown

ELLIPSIS = "…"
DEFAULT_PREVIEW_CHARS = 140

_WHITESPACE = re.compile(r"\s+")
_TRAILING_PUNCTUATION = re.compile(r"[\s.,;:\-]+$")
_BLOCK_TAGS = frozenset({
    "p", "div", "br", "hr", "li", "ul", "ol", "pre", "blockquote",
    "h1", "h2", "h3", "h4", "h5", "h6", "table", "thead", "tbody", "tr", "th", "td",
})  # fmt: skip
_SKIPPED_TAGS = frozenset({"script", "style"})


class _TextExtractor(HTMLParser):
    """Collect text nodes, separating block elements with a space."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in _BLOCK_TAGS:
            self.parts.append(" ")

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1
        elif tag in _BLOCK_TAGS:
            self.parts.append(" ")

    def handle_data(self, data: str) -> None:
        if not self._skip_depth:
            self.parts.append(data)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


@lru_cache(maxsize=2048)
def clean_markdown(text: str | None) -> str:
    """Strip markdown syntax and collapse whitespace to single spaces."""
    if not text:
        return ""
    html = markdown.markdown(text, extensions=["fenced_code", "tables"])
    extractor = _TextExtractor()
    extractor.feed(html)
    extractor.close()
    return collapse_whitespace("".join(extractor.parts))


def shorten_description(text: str | None, max_chars: int = DEFAULT_PREVIEW_CHARS) -> str:
    """Short plain-text preview of a markdown description.

    Cuts at the last word boundary when it falls within the trailing 40% of
    the budget, otherwise mid-word, then appends an ellipsis.
    """
    cleaned = clean_markdown(text)
    if len(cleaned) <= max_chars:
        return cleaned

    head = cleaned[:max_chars]
    last_space = head.rfind(" ")
    if last_space > max_chars * 0.6:
        head = head[:last_space]
    return _TRAILING_PUNCTUATION.sub("", head) + ELLIPSIS


def collation_key(text: str) -> tuple[str, str]:
    """Locale-aware, case-insensitive sort key with a stable tiebreak."""
    return locale.strxfrm(text.casefold()), text
