"""
Checks that need more than the page itself: robots.txt, the sitemaps it
declares, and HEAD probes for every link on the page.

Failures here only degrade the affected report item.
"""

from __future__ import annotations

import asyncio
import logging
from html import escape
from typing import List, Optional, Tuple
from urllib.parse import urlparse, urlunparse

from .config import STATUS_ERROR, STATUS_OK, STATUS_WARNING
from .errors import FetchError
from .evaluators import bullet_list, make_item, no_findings, para
from .links import same_host, unique_links
from .models import FetchedDocument, LinkProbe, ReportItem, RobotsResult
from .parser import parse_xml

logger = logging.getLogger(__name__)


# ----------------------------
# robots.txt
# ----------------------------

def robots_url(page_url: str) -> str:
    parsed = urlparse(page_url)
    return urlunparse((parsed.scheme, parsed.netloc, "/robots.txt", "", "", ""))


def extract_sitemap_urls(robots_txt: str) -> List[str]:
    urls: List[str] = []
    for line in (robots_txt or "").splitlines():
        line = line.strip()
        if line.lower().startswith("sitemap:"):
            url = line.split(":", 1)[1].strip()
            if url:
                urls.append(url)
    return urls


async def fetch_robots(fetcher, page_url: str) -> RobotsResult:
    url = robots_url(page_url)
    try:
        resp = await fetcher.fetch(url)
    except FetchError as exc:
        logger.info("robots.txt unavailable at %s: %s", url, exc.message)
        return RobotsResult(url=url, content=None, error=exc.message)
    return RobotsResult(url=url, content=resp.body, error=None, sitemap_urls=extract_sitemap_urls(resp.body))


def robots_report(robots: RobotsResult) -> ReportItem:
    if not robots.found:
        return make_item(
            "robots-txt-check",
            "Not found",
            para(f"No robots.txt at {escape(robots.url)} ({escape(robots.error or 'unknown error')}).")
            + para("Crawlers will assume everything may be crawled."),
            STATUS_WARNING,
        )
    return make_item(
        "robots-txt-check",
        "Found",
        para(f"robots.txt: {escape(robots.url)}") + f"<pre>{escape(robots.content)}</pre>",
        STATUS_OK,
    )


# ----------------------------
# Sitemaps
# ----------------------------

def describe_sitemap(body: str) -> str:
    soup = parse_xml(body)
    if soup is None:
        return "empty document"
    locs = len(soup.find_all("loc"))
    kind = "sitemap index" if soup.find("sitemapindex") is not None else "urlset"
    return f"{kind}, {locs} &lt;loc&gt; entries"


async def _fetch_sitemap(fetcher, url: str) -> Tuple[str, bool]:
    try:
        resp = await fetcher.fetch(url)
    except FetchError as exc:
        logger.info("Sitemap %s could not be fetched: %s", url, exc.message)
        return para(f"{escape(url)}: <strong>fetch failed</strong> ({escape(exc.message)})"), False
    return (
        para(f"{escape(url)}: {describe_sitemap(resp.body)}") + f"<pre>{escape(resp.body)}</pre>",
        True,
    )


async def check_sitemaps(fetcher, robots: RobotsResult) -> ReportItem:
    if not robots.found:
        return make_item(
            "sitemap-check",
            "Unknown",
            para("robots.txt is unavailable, so sitemap locations are unknown."),
            STATUS_WARNING,
        )
    if not robots.sitemap_urls:
        return make_item(
            "sitemap-check",
            "Not found",
            para("robots.txt does not declare any Sitemap: lines."),
            STATUS_WARNING,
        )

    results = await asyncio.gather(*(_fetch_sitemap(fetcher, u) for u in robots.sitemap_urls))
    fetched = sum(1 for _, ok in results if ok)
    total = len(results)
    details = "".join(block for block, _ in results)
    status = STATUS_OK if fetched == total else STATUS_WARNING
    return make_item("sitemap-check", f"Sitemaps fetched: {fetched}/{total}", details, status)


# ----------------------------
# Broken links
# ----------------------------

async def probe_link(fetcher, url: str, page_url: str, semaphore: Optional[asyncio.Semaphore] = None) -> LinkProbe:
    internal = same_host(page_url, url)
    try:
        if semaphore is None:
            resp = await fetcher.fetch(url, method="HEAD")
        else:
            async with semaphore:
                resp = await fetcher.fetch(url, method="HEAD")
    except FetchError as exc:
        return LinkProbe(url=url, status=exc.status, error=None if exc.status else exc.message, internal=internal)
    return LinkProbe(url=url, status=resp.status, internal=internal)


async def probe_links(fetcher, urls: List[str], page_url: str, limit: int = 0) -> List[LinkProbe]:
    """HEAD every URL concurrently; ``limit`` > 0 caps requests in flight."""
    semaphore = asyncio.Semaphore(limit) if limit > 0 else None
    return list(await asyncio.gather(*(probe_link(fetcher, u, page_url, semaphore) for u in urls)))


def _probe_row(probe: LinkProbe) -> str:
    status = str(probe.status) if probe.status else f"network error: {escape(probe.error or '')}"
    return f"[{status}] {escape(probe.url)}"


async def check_broken_links(fetcher, doc: FetchedDocument, limit: int = 0) -> ReportItem:
    if doc.soup is None:
        return no_findings("broken-links")
    urls = unique_links(doc.soup, doc.final_url)
    if not urls:
        return make_item("broken-links", "No links to check", para("The page has no HTTP links."), STATUS_OK)

    logger.debug("Probing %d links from %s", len(urls), doc.final_url)
    probes = await probe_links(fetcher, urls, doc.final_url, limit)
    broken = [p for p in probes if p.broken]
    internal = [p for p in broken if p.internal]
    external = [p for p in broken if not p.internal]

    summary = para(f"Checked {len(probes)} unique links, {len(broken)} broken.")
    if not broken:
        return make_item("broken-links", "Broken links: 0", summary, STATUS_OK)

    details = summary
    details += para(f"Internal broken links: {len(internal)}") + bullet_list(_probe_row(p) for p in internal)
    details += para(f"External broken links: {len(external)}") + bullet_list(_probe_row(p) for p in external)
    return make_item("broken-links", f"Broken links: {len(broken)}", details, STATUS_ERROR)
