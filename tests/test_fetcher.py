"""
Unit tests for the relay fetcher.

The Playwright request context is replaced by mocks; no network is used.
"""
import gzip
from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError

from seo_audit_pro.config import AuditConfig
from seo_audit_pro.errors import FetchError
from seo_audit_pro.models import AuditRunContext
from seo_audit_pro.report import run_audit
from seo_audit_pro.fetcher import ProxyFetcher, decode_body, header_charset, is_fetchable, normalize_url, relay_url


def fake_response(status=200, status_text="OK", url="https://relay.test/", body=b"<html></html>", content_type="text/html"):
    resp = MagicMock()
    resp.status = status
    resp.status_text = status_text
    resp.ok = 200 <= status < 300
    resp.url = url
    resp.headers = {"content-type": content_type}
    resp.body = AsyncMock(return_value=body)
    resp.dispose = AsyncMock()
    return resp


def fetcher_with(response=None, side_effect=None, relay="https://corsproxy.io/?"):
    fetcher = ProxyFetcher(AuditConfig(relay=relay, timeout_sec=5))
    fetcher._request = MagicMock()
    fetcher._request.fetch = AsyncMock(return_value=response, side_effect=side_effect)
    return fetcher


class TestUrlHelpers:
    """Test URL normalisation and relay encoding."""

    def test_relay_url_encodes_target(self):
        assert relay_url("https://a.com/x?y=1&z=2", "https://corsproxy.io/?") == (
            "https://corsproxy.io/?https%3A%2F%2Fa.com%2Fx%3Fy%3D1%26z%3D2"
        )

    def test_no_relay(self):
        assert relay_url("https://a.com/", "") == "https://a.com/"

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("example.com", "https://example.com"),
            ("  https://example.com/page#top ", "https://example.com/page"),
            ("http://example.com/", "http://example.com/"),
            ("", ""),
        ],
    )
    def test_normalize_url(self, raw, expected):
        assert normalize_url(raw) == expected

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com/", True),
            ("http://example.com", True),
            ("ftp://example.com/", False),
            ("https://", False),
            ("not a url", False),
        ],
    )
    def test_is_fetchable(self, url, expected):
        assert is_fetchable(url) is expected


class TestProxyFetcher:
    """Test ProxyFetcher.fetch against a mocked request context."""

    @pytest.mark.asyncio
    async def test_get_through_relay(self):
        resp = fake_response(body=b"<p>hello</p>")
        fetcher = fetcher_with(resp)

        result = await fetcher.fetch("https://example.com/")

        target = fetcher._request.fetch.call_args.args[0]
        kwargs = fetcher._request.fetch.call_args.kwargs
        assert target == "https://corsproxy.io/?https%3A%2F%2Fexample.com%2F"
        assert kwargs["method"] == "GET"
        assert kwargs["timeout"] == 5000
        assert kwargs["fail_on_status_code"] is False
        assert result.body == "<p>hello</p>"
        assert result.final_url == "https://example.com/"
        assert result.ok
        resp.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_direct_fetch_reports_redirected_url(self):
        resp = fake_response(url="https://www.example.com/")
        fetcher = fetcher_with(resp, relay="")

        result = await fetcher.fetch("https://example.com/")

        assert fetcher._request.fetch.call_args.args[0] == "https://example.com/"
        assert result.final_url == "https://www.example.com/"

    @pytest.mark.asyncio
    async def test_head_has_no_body(self):
        resp = fake_response()
        fetcher = fetcher_with(resp)

        result = await fetcher.fetch("https://example.com/a", method="HEAD")

        assert result.body == ""
        resp.body.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_status(self):
        resp = fake_response(status=404, status_text="Not Found")
        fetcher = fetcher_with(resp)

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("https://example.com/missing")

        assert exc_info.value.status == 404
        assert exc_info.value.message == "HTTP 404 Not Found"
        resp.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_network_error(self):
        fetcher = fetcher_with(side_effect=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("https://nowhere.invalid/")

        assert exc_info.value.status == 0
        assert "ERR_NAME_NOT_RESOLVED" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_malformed_url(self):
        fetcher = fetcher_with(fake_response())

        with pytest.raises(FetchError) as exc_info:
            await fetcher.fetch("javascript:alert(1)")

        assert exc_info.value.message == "Malformed URL"
        fetcher._request.fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_before_start(self):
        with pytest.raises(RuntimeError):
            await ProxyFetcher().fetch("https://example.com/")


class TestBodyDecoding:
    """Test that response bytes always decode to text."""

    @pytest.mark.parametrize(
        "content_type,expected",
        [
            ("text/html; charset=ISO-8859-1", "iso8859-1"),
            ('text/html; charset="windows-1252"', "cp1252"),
            ("text/html; charset=not-a-codec", None),
            ("text/html", None),
            (None, None),
        ],
    )
    def test_header_charset(self, content_type, expected):
        assert header_charset(content_type) == expected

    def test_latin1_with_header(self):
        assert decode_body("café".encode("latin-1"), "text/html; charset=iso-8859-1") == "café"

    def test_latin1_without_header_is_replaced(self):
        assert decode_body("café".encode("latin-1"), "text/html") == "caf\ufffd"

    def test_gzipped_body(self):
        raw = gzip.compress(b"<urlset><url><loc>https://example.com/</loc></url></urlset>")

        assert decode_body(raw, "application/x-gzip").startswith("<urlset>")

    def test_truncated_gzip_does_not_raise(self):
        raw = gzip.compress(b"<urlset></urlset>")[:12]

        assert isinstance(decode_body(raw), str)


class TestNonUtf8Responses:
    """Non-UTF-8 bodies flow through fetch and a whole audit."""

    @pytest.mark.asyncio
    async def test_fetch_latin1_page(self):
        html = '<html><head><meta charset="iso-8859-1"></head><body>Caf\xe9</body></html>'
        resp = fake_response(body=html.encode("latin-1"), content_type="text/html; charset=ISO-8859-1")
        fetcher = fetcher_with(resp)

        result = await fetcher.fetch("https://example.com/")

        assert "Café" in result.body

    @pytest.mark.asyncio
    async def test_audit_of_latin1_page_warns_on_charset(self):
        html = '<html><head><meta charset="iso-8859-1"></head><body><p>Caf\xe9</p></body></html>'
        resp = fake_response(body=html.encode("latin-1"), content_type="text/html")
        fetcher = fetcher_with(resp, relay="")
        context = AuditRunContext(url="https://example.com/", checks=frozenset({"meta-charset"}))

        report = await run_audit(context, fetcher)

        assert not report.failed
        assert report.items[0].status == "warning"

    @pytest.mark.asyncio
    async def test_gzipped_and_plain_sitemaps(self):
        sitemap = b'<urlset><url><loc>https://example.com/</loc></url></urlset>'
        responses = {
            "https://example.com/": fake_response(url="https://example.com/", body=b"<html><body></body></html>"),
            "https://example.com/robots.txt": fake_response(
                body=b"Sitemap: https://example.com/sitemap.xml.gz\nSitemap: https://example.com/sitemap.xml\n",
                content_type="text/plain",
            ),
            "https://example.com/sitemap.xml.gz": fake_response(body=gzip.compress(sitemap), content_type="application/x-gzip"),
            "https://example.com/sitemap.xml": fake_response(body=sitemap, content_type="application/xml"),
        }
        fetcher = fetcher_with(relay="")
        fetcher._request.fetch = AsyncMock(side_effect=lambda target, **kwargs: responses[target])
        context = AuditRunContext(url="https://example.com/", checks=frozenset({"sitemap-check"}))

        report = await run_audit(context, fetcher)

        item = report.items[0]
        assert item.extra_info == "Sitemaps fetched: 2/2"
        assert item.details.count("urlset, 1 &lt;loc&gt; entries") == 2
