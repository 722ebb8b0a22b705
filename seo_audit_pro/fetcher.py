from __future__ import annotations

import codecs
import gzip
import logging
import re
import zlib
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urldefrag, urlparse

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from .config import AuditConfig
from .errors import FetchError

logger = logging.getLogger(__name__)

CHARSET_RE = re.compile(r"charset\s*=\s*[\"']?([\w.:-]+)", re.I)
GZIP_MAGIC = b"\x1f\x8b"


# ----------------------------
# URL helpers
# ----------------------------

def normalize_url(url: str) -> str:
    url = (url or "").strip()
    url, _ = urldefrag(url)
    if url and "://" not in url:
        url = "https://" + url.lstrip("/")
    return url


def is_fetchable(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def relay_url(url: str, relay: str) -> str:
    """Route ``url`` through the relay, or return it untouched without one."""
    if not relay:
        return url
    return relay + quote(url, safe="")


# ----------------------------
# Body decoding
# ----------------------------

def header_charset(content_type: Optional[str]) -> Optional[str]:
    """Charset named in a Content-Type header, if Python knows it."""
    m = CHARSET_RE.search(content_type or "")
    if not m:
        return None
    try:
        return codecs.lookup(m.group(1)).name
    except LookupError:
        return None


def decode_body(raw: bytes, content_type: Optional[str] = None) -> str:
    """Bytes to text without ever raising on a bad encoding.

    Gzipped payloads (``sitemap.xml.gz``) are unpacked first. Text is decoded
    with the header charset, falling back to utf-8 with replacement.
    """
    if raw[:2] == GZIP_MAGIC:
        try:
            raw = gzip.decompress(raw)
        except (OSError, EOFError, zlib.error) as exc:
            logger.info("Could not gunzip response body: %s", exc)
    encoding = header_charset(content_type) or "utf-8"
    return raw.decode(encoding, errors="replace")


# ----------------------------
# Fetcher
# ----------------------------

@dataclass
class FetchResponse:
    status: int
    status_text: str
    final_url: str
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class ProxyFetcher:
    """GET/HEAD through the CORS relay using a Playwright request context.

    Use as an async context manager::

        async with ProxyFetcher(config) as fetcher:
            page = await fetcher.fetch("https://example.com")
    """

    def __init__(self, config: Optional[AuditConfig] = None):
        self.config = config or AuditConfig()
        self._playwright = None
        self._request = None

    async def __aenter__(self) -> "ProxyFetcher":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def start(self) -> None:
        if self._request is not None:
            return
        self._playwright = await async_playwright().start()
        self._request = await self._playwright.request.new_context(
            user_agent=self.config.user_agent,
            ignore_https_errors=self.config.ignore_https_errors,
        )

    async def close(self) -> None:
        if self._request is not None:
            await self._request.dispose()
            self._request = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def fetch(self, url: str, method: str = "GET") -> FetchResponse:
        if not is_fetchable(url):
            raise FetchError(url, "Malformed URL")
        if self._request is None:
            raise RuntimeError("ProxyFetcher used before start()")

        target = relay_url(url, self.config.relay)
        logger.debug("%s %s", method, target)
        try:
            resp = await self._request.fetch(
                target,
                method=method,
                timeout=self.config.timeout_ms,
                fail_on_status_code=False,
            )
        except PlaywrightError as exc:
            logger.info("%s %s failed: %s", method, url, exc.message)
            raise FetchError(url, exc.message) from exc

        try:
            if not resp.ok:
                raise FetchError(url, f"HTTP {resp.status} {resp.status_text}".strip(), status=resp.status)
            body = ""
            if method != "HEAD":
                try:
                    raw = await resp.body()
                except PlaywrightError as exc:
                    raise FetchError(url, exc.message) from exc
                body = decode_body(raw, resp.headers.get("content-type"))
            # Through the relay the reported URL is the relay's own, not the target.
            final_url = url if self.config.relay else resp.url
            return FetchResponse(status=resp.status, status_text=resp.status_text, final_url=final_url, body=body)
        finally:
            await resp.dispose()
