"""Helpers for the HTML fragment that forms an article body."""

from __future__ import annotations

import html
import re
from html.parser import HTMLParser
from typing import FrozenSet, List

from bs4 import BeautifulSoup

from .utils.logging import get_logger

_logger = get_logger("nbg.markup")

# libxml2 leaves "&name=" runs in attribute values alone, so query strings in
# media locators survive a parse and re-serialise unchanged
_PARSER = "lxml"

_whitespace_re = re.compile(r"\s+")
_fence_re = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n(?P<inner>[\s\S]*?)\n?\s*```\s*$")

# (tag, attribute) pairs that point at embedded media
_MEDIA_ATTRIBUTES = (
    ("img", "src"),
    ("video", "src"),
    ("audio", "src"),
    ("source", "src"),
    ("track", "src"),
    ("iframe", "src"),
    ("embed", "src"),
    ("object", "data"),
)

_VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input",
        "link", "meta", "param", "source", "track", "wbr",
    }
)


def extract_media_refs(markup: str | None) -> FrozenSet[str]:
    """Return the set of embedded media locators found in ``markup``."""
    if not markup:
        return frozenset()

    soup = BeautifulSoup(markup, _PARSER)
    refs = set()
    for tag_name, attr in _MEDIA_ATTRIBUTES:
        for tag in soup.find_all(tag_name):
            value = tag.get(attr)
            if isinstance(value, str) and value.strip():
                refs.add(value.strip())
    return frozenset(refs)


class _BalanceChecker(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.stack: List[str] = []
        self.balanced = True

    def handle_starttag(self, tag, attrs):
        if tag not in _VOID_ELEMENTS:
            self.stack.append(tag)

    def handle_startendtag(self, tag, attrs):
        pass

    def handle_endtag(self, tag):
        if tag in _VOID_ELEMENTS:
            return
        if not self.stack or self.stack[-1] != tag:
            self.balanced = False
            return
        self.stack.pop()


def is_well_formed(markup: str) -> bool:
    """True when every non-void element is closed, in order."""
    checker = _BalanceChecker()
    checker.feed(markup)
    checker.close()
    return checker.balanced and not checker.stack


def repair_markup(markup: str) -> str:
    """Close dangling elements and drop stray end tags.

    libxml2 also applies the implied-end rules, so ``<p>one<p>two`` becomes
    two sibling paragraphs. The parser wraps the fragment in a document;
    only the fragment is returned.
    """
    soup = BeautifulSoup(markup, _PARSER)
    # leading <object>/<meta>-like elements may be hoisted into <head>
    parts = [part.decode_contents() for part in (soup.head, soup.body) if part is not None]
    if not parts:
        return str(soup)
    return "".join(parts)


def strip_code_fences(text: str) -> str:
    """Remove a single Markdown code fence wrapped around a model reply."""
    match = _fence_re.match(text)
    if match:
        return match.group("inner").strip()
    return text.strip()


def unwrap_document(markup: str) -> str:
    """Keep only the body content when a full HTML document was returned."""
    if not re.search(r"<(html|body)[\s>]", markup, re.IGNORECASE):
        return markup
    soup = BeautifulSoup(markup, _PARSER)
    body = soup.body
    if body is None:
        return markup
    _logger.debug("Model returned a full document; keeping body content only")
    return body.decode_contents().strip()


def clean_html_to_text(raw_html: str | None) -> str:
    """Clean HTML to plain text, one block per line."""
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, _PARSER)
    text = soup.get_text("\n")
    text = html.unescape(text)
    lines = [_whitespace_re.sub(" ", ln).strip() for ln in text.splitlines()]
    return "\n".join(ln for ln in lines if ln)
