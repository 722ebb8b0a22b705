"""
Pytest configuration and fixtures for SEO Audit Pro tests.
"""
import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from seo_audit_pro.errors import FetchError
from seo_audit_pro.fetcher import FetchResponse
from seo_audit_pro.models import FetchedDocument
from seo_audit_pro.parser import parse_document

PAGE_URL = "https://example.com/"

# Well-formed page that should pass most checks
GOOD_PAGE_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Example Domain - A Well Optimised Page</title>
    <meta name="description" content="A short, useful description of the example page for search results.">
    <link rel="canonical" href="https://example.com/">
    <link rel="icon" href="/favicon.ico">
    <meta property="og:title" content="Example">
    <meta property="og:description" content="Example page">
    <meta property="og:image" content="https://example.com/og.png">
    <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "WebSite", "name": "Example"}
    </script>
</head>
<body>
    <h1>Example Domain</h1>
    <h2>About</h2>
    <p>This domain is for use in illustrative examples in documents.</p>
    <ul><li>One</li><li>Two</li></ul>
    <img src="/logo.png" alt="Example logo">
    <a href="/about">About</a>
    <a href="https://www.iana.org/domains/example">More information</a>
</body>
</html>
"""


def build_page(head: str = "", body: str = "", lang: str = "en") -> str:
    lang_attr = f' lang="{lang}"' if lang else ""
    return f"<!DOCTYPE html><html{lang_attr}><head>{head}</head><body>{body}</body></html>"


class FakeFetcher:
    """In-memory stand-in for ProxyFetcher.

    ``pages`` maps URL to body; ``statuses`` forces an HTTP status for a URL;
    ``errors`` forces a network failure. Anything else answers 404.
    """

    def __init__(
        self,
        pages: Optional[Dict[str, str]] = None,
        statuses: Optional[Dict[str, int]] = None,
        errors: Optional[Dict[str, str]] = None,
        delay: float = 0.0,
    ):
        self.pages = pages or {}
        self.statuses = statuses or {}
        self.errors = errors or {}
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str, method: str = "GET") -> FetchResponse:
        self.calls.append((method, url))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.errors:
                raise FetchError(url, self.errors[url])
            status = self.statuses.get(url, 200 if url in self.pages else 404)
            if status >= 400:
                raise FetchError(url, f"HTTP {status}", status=status)
            body = self.pages.get(url, "") if method == "GET" else ""
            return FetchResponse(status=status, status_text="OK", final_url=url, body=body)
        finally:
            self.in_flight -= 1

    def urls(self, method: Optional[str] = None) -> List[str]:
        return [u for m, u in self.calls if method is None or m == method]


@pytest.fixture
def good_page_html():
    return GOOD_PAGE_HTML


@pytest.fixture
def make_doc():
    """Build a FetchedDocument from raw HTML."""

    def _make(html: str, url: str = PAGE_URL, status: int = 200, status_text: str = "OK") -> FetchedDocument:
        return FetchedDocument(
            input_url=url,
            final_url=url,
            status=status,
            status_text=status_text,
            html=html,
            soup=parse_document(html),
        )

    return _make


@pytest.fixture
def make_fetcher():
    return FakeFetcher


@pytest.fixture
def page():
    return build_page
