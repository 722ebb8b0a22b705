from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Iterable, List, Optional

from . import registry
from .config import DEFAULT_MAX_CONCURRENT_PROBES, DEFAULT_RELAY, DEFAULT_TIMEOUT_SEC, AuditConfig
from .errors import SeoAuditError
from .report import AuditReport, AuditSession


def split_ids(value: Optional[str]) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def parse_args(argv: Iterable[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live SEO audit of a single page.")
    parser.add_argument("url", nargs="?", help="Page to audit (e.g. https://example.com/)")
    parser.add_argument("--checks", help="Comma-separated check ids to run (default: all)")
    parser.add_argument("--skip", help="Comma-separated check ids to leave out")
    parser.add_argument("--list-checks", action="store_true", help="List the available checks and exit")
    parser.add_argument("--format", choices=["text", "csv", "json"], default="text", help="Output format (default: text)")
    parser.add_argument("--out", help="Write the report to this file instead of stdout")
    parser.add_argument("--relay", default=DEFAULT_RELAY, help=f"CORS relay prefix (default: {DEFAULT_RELAY})")
    parser.add_argument("--no-relay", action="store_true", help="Fetch pages directly instead of through the relay")
    parser.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_SEC, help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT_SEC})")
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=DEFAULT_MAX_CONCURRENT_PROBES,
        help=f"Broken-link probes in flight, 0 for no limit (default: {DEFAULT_MAX_CONCURRENT_PROBES})",
    )
    parser.add_argument("--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(list(argv))


def list_checks() -> str:
    lines: List[str] = []
    for category, checks in registry.grouped_checks().items():
        lines.append(category)
        lines.extend(f"  {c.id:<26} {c.label}" for c in checks)
    return "\n".join(lines)


def selected_checks(args: argparse.Namespace) -> List[str]:
    checks = split_ids(args.checks) or registry.check_ids()
    skip = set(registry.validate_selection(split_ids(args.skip)))
    return [c for c in checks if c not in skip]


def render(report: AuditReport, fmt: str) -> str:
    if fmt == "csv":
        return report.to_csv()
    if fmt == "json":
        return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
    return report.to_text()


def build_config(args: argparse.Namespace) -> AuditConfig:
    return AuditConfig(
        relay="" if args.no_relay else args.relay,
        timeout_sec=args.timeout,
        max_concurrent_probes=args.max_concurrency,
        ignore_https_errors=args.insecure,
    )


async def main_async(args: argparse.Namespace, session: Optional[AuditSession] = None) -> int:
    session = session or AuditSession(build_config(args))
    try:
        report = await session.run(args.url, selected_checks(args))
    except SeoAuditError as exc:
        print(exc, file=sys.stderr)
        return 1

    output = render(report, args.format)
    if args.out:
        try:
            with open(args.out, "w", encoding="utf-8", newline="") as f:
                f.write(output)
        except OSError as exc:
            print(f"Could not write report to {args.out}: {exc}", file=sys.stderr)
            return 1
        print(f"OK: report written to {args.out}")
    else:
        print(output)
    return 2 if report.failed else 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.list_checks:
        print(list_checks())
        return 0
    if not args.url:
        print("A URL is required.", file=sys.stderr)
        return 1
    return asyncio.run(main_async(args))


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
