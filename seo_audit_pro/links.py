from __future__ import annotations

from typing import List, Optional, Tuple
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup, Tag

SKIPPED_PREFIXES = ("#", "mailto:", "tel:", "javascript:")


def host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()


def same_host(a: str, b: str) -> bool:
    return host(a) == host(b)


def resolve_href(href: str, base_url: str) -> Optional[str]:
    """Absolute, fragment-free http(s) URL for ``href``, or None if it is not a page link."""
    href = (href or "").strip()
    if not href or href.lower().startswith(SKIPPED_PREFIXES):
        return None
    absu, _ = urldefrag(urljoin(base_url, href))
    if urlparse(absu).scheme not in ("http", "https"):
        return None
    return absu


def page_links(soup: BeautifulSoup, base_url: str) -> List[Tuple[Tag, Optional[str]]]:
    """Every ``<a href>`` paired with its resolved URL (None when skipped)."""
    return [(a, resolve_href(a.get("href"), base_url)) for a in soup.find_all("a", href=True)]


def unique_links(soup: BeautifulSoup, base_url: str) -> List[str]:
    seen = set()
    out: List[str] = []
    for _, url in page_links(soup, base_url):
        if url and url not in seen:
            seen.add(url)
            out.append(url)
    return out


def rel_tokens(tag: Tag) -> List[str]:
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return [r.lower() for r in rel]
