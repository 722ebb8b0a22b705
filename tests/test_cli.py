"""
Tests for the command line front end.
"""
import csv
import io
import json

import pytest

from seo_audit_pro import cli
from seo_audit_pro.report import AuditSession

PAGE = "https://example.com/"


def session_for(make_fetcher, **pages):
    return AuditSession(fetcher=make_fetcher(**pages))


class TestArgs:
    """Test argument handling."""

    def test_list_checks(self, capsys):
        assert cli.main(["--list-checks"]) == 0

        out = capsys.readouterr().out
        assert "Meta & Head" in out
        assert "robots-txt-check" in out

    def test_missing_url(self, capsys):
        assert cli.main([]) == 1
        assert "URL is required" in capsys.readouterr().err

    def test_build_config(self):
        args = cli.parse_args([PAGE, "--no-relay", "--timeout", "7", "--max-concurrency", "0", "--insecure"])

        config = cli.build_config(args)

        assert config.relay == ""
        assert config.timeout_sec == 7
        assert config.max_concurrent_probes == 0
        assert config.ignore_https_errors is True

    def test_default_relay(self):
        assert cli.build_config(cli.parse_args([PAGE])).relay == "https://corsproxy.io/?"

    def test_skip(self):
        args = cli.parse_args([PAGE, "--checks", "h1,h2, h3", "--skip", "h2"])

        assert cli.selected_checks(args) == ["h1", "h3"]


class TestMainAsync:
    """Test main_async with an injected session."""

    @pytest.mark.asyncio
    async def test_csv_output(self, make_fetcher, good_page_html, capsys):
        args = cli.parse_args([PAGE, "--checks", "meta-title,h1", "--format", "csv"])
        session = session_for(make_fetcher, pages={PAGE: good_page_html})

        code = await cli.main_async(args, session)

        rows = list(csv.reader(io.StringIO(capsys.readouterr().out.strip())))
        assert code == 0
        assert rows[0] == ["Test", "Extra Info", "Details"]
        assert [r[0] for r in rows[1:]] == ["Meta Title Tag", "H1 Headings"]

    @pytest.mark.asyncio
    async def test_json_output(self, make_fetcher, good_page_html, capsys):
        args = cli.parse_args([PAGE, "--checks", "h1", "--format", "json"])

        await cli.main_async(args, session_for(make_fetcher, pages={PAGE: good_page_html}))

        data = json.loads(capsys.readouterr().out)
        assert data["items"][0]["status"] == "ok"

    @pytest.mark.asyncio
    async def test_failed_audit_exit_code(self, make_fetcher, capsys):
        args = cli.parse_args([PAGE, "--checks", "h1"])

        code = await cli.main_async(args, session_for(make_fetcher, errors={PAGE: "refused"}))

        assert code == 2
        assert "Audit Failed" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_unknown_check(self, make_fetcher, capsys):
        args = cli.parse_args([PAGE, "--checks", "h1,bogus"])

        code = await cli.main_async(args, session_for(make_fetcher))

        assert code == 1
        assert "bogus" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_write_to_file(self, make_fetcher, good_page_html, tmp_path, capsys):
        out = tmp_path / "seo-audit-report.csv"
        args = cli.parse_args([PAGE, "--checks", "h1", "--format", "csv", "--out", str(out)])

        code = await cli.main_async(args, session_for(make_fetcher, pages={PAGE: good_page_html}))

        assert code == 0
        assert out.read_text(encoding="utf-8").startswith("Test,Extra Info,Details\n")
        assert "report written" in capsys.readouterr().out
