from __future__ import annotations

import logging
import re
import warnings
from typing import List, Optional

from bs4 import BeautifulSoup, Comment, Doctype, MarkupResemblesLocatorWarning, NavigableString

logger = logging.getLogger(__name__)

NON_VISIBLE_TAGS = {"script", "style", "noscript", "template"}
# Text inside these runs on with its neighbours; every other tag is a word break.
INLINE_TAGS = {
    "a", "abbr", "b", "bdi", "bdo", "cite", "code", "data", "del", "dfn", "em",
    "font", "i", "ins", "kbd", "label", "mark", "q", "s", "samp", "small",
    "span", "strong", "sub", "sup", "time", "u", "var",
}
WHITESPACE_RE = re.compile(r"\s+")


def parse_document(html: str) -> Optional[BeautifulSoup]:
    if not html or not html.strip():
        return None
    try:
        return BeautifulSoup(html, "lxml")
    except Exception as exc:  # lxml raises a variety of parser errors
        logger.warning("Could not parse HTML document: %s", exc)
        return None


def parse_xml(text: str) -> Optional[BeautifulSoup]:
    if not text or not text.strip():
        return None
    try:
        return BeautifulSoup(text, "xml")
    except Exception as exc:
        logger.warning("Could not parse XML document: %s", exc)
        return None


def collapse_ws(text: str) -> str:
    return WHITESPACE_RE.sub(" ", text or "").strip()


def _collect_text(node, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, (Comment, Doctype)):
            continue
        if isinstance(child, NavigableString):
            parts.append(str(child))
            continue
        if child.name in NON_VISIBLE_TAGS:
            continue
        inline = child.name in INLINE_TAGS
        if not inline:
            parts.append(" ")
        _collect_text(child, parts)
        if not inline:
            parts.append(" ")


def visible_text(soup: BeautifulSoup) -> str:
    """Body text without script/style contents. Leaves ``soup`` untouched."""
    parts: List[str] = []
    _collect_text(soup.body or soup, parts)
    return collapse_ws("".join(parts))


def element_text(tag) -> str:
    return collapse_ws(tag.get_text(" ", strip=True))


def html_to_text(markup: str) -> str:
    """Flatten report markup to one line of plain text."""
    if not markup or not markup.strip():
        return ""
    # Short fragments can look like bare URLs or file names to bs4.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(markup, "lxml")
    return collapse_ws(soup.get_text(" "))
