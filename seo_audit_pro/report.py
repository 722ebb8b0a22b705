from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from html import escape
from typing import Iterable, List, Optional, Tuple

from . import registry
from .config import AuditConfig, STATUS_ERROR
from .errors import FetchError, SeoAuditError
from .evaluators import EVALUATORS, para
from .fetcher import ProxyFetcher, normalize_url
from .models import STATUS_ICONS, AuditRunContext, FetchedDocument, ReportItem
from .parser import html_to_text, parse_document
from .resolvers import check_broken_links, check_sitemaps, fetch_robots, robots_report

logger = logging.getLogger(__name__)

CSV_HEADER = ("Test", "Extra Info", "Details")

# Appended after the DOM checks, always in this order.
DEFERRED_CHECKS = ("robots-txt-check", "sitemap-check", "broken-links", "pagespeed-score")


# ----------------------------
# Report
# ----------------------------

@dataclass(frozen=True)
class AuditReport:
    url: str
    items: Tuple[ReportItem, ...]
    failed: bool = False
    generation: int = 0

    def to_rows(self) -> List[Tuple[str, str, str]]:
        return [(i.test, i.extra_info, html_to_text(i.details)) for i in self.items]

    def to_csv(self) -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        writer.writerows(self.to_rows())
        return out.getvalue()

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "failed": self.failed,
            "items": [i.to_dict() for i in self.items],
        }

    def to_text(self) -> str:
        lines = [f"SEO audit: {self.url}", ""]
        for item, (test, extra, details) in zip(self.items, self.to_rows()):
            lines.append(f"{STATUS_ICONS.get(item.status, '-')} {test}: {extra}")
            if details:
                lines.append(f"    {details}")
        return "\n".join(lines)


def failed_report(context: AuditRunContext, error: FetchError) -> AuditReport:
    item = ReportItem(
        test="Audit Failed",
        extra_info="Could not fetch the page",
        details=para(f"URL: {escape(context.url)}") + para(f"Error: {escape(error.message)}"),
        status=STATUS_ERROR,
        check_id="",
    )
    return AuditReport(url=context.url, items=(item,), failed=True, generation=context.generation)


# ----------------------------
# Assembler
# ----------------------------

def run_dom_checks(context: AuditRunContext, doc: FetchedDocument) -> List[ReportItem]:
    """Synchronous evaluators in registry order."""
    items: List[ReportItem] = []
    for check in registry.AUDIT_CHECKS:
        if check.id in DEFERRED_CHECKS or not context.wants(check.id):
            continue
        items.append(EVALUATORS[check.id](doc))
    return items


async def run_deferred_checks(context: AuditRunContext, doc: FetchedDocument, fetcher) -> List[ReportItem]:
    items: List[ReportItem] = []
    robots = None
    if context.wants("robots-txt-check") or context.wants("sitemap-check"):
        robots = await fetch_robots(fetcher, doc.final_url)
    if context.wants("robots-txt-check"):
        items.append(robots_report(robots))
    if context.wants("sitemap-check"):
        items.append(await check_sitemaps(fetcher, robots))
    if context.wants("broken-links"):
        items.append(await check_broken_links(fetcher, doc, context.config.max_concurrent_probes))
    if context.wants("pagespeed-score"):
        items.append(EVALUATORS["pagespeed-score"](doc))
    return items


async def run_audit(context: AuditRunContext, fetcher) -> AuditReport:
    """Fetch ``context.url`` and run every selected check against it.

    A page that cannot be fetched still yields a report, holding a single
    "Audit Failed" item. Exceptions raised by evaluators propagate.
    """
    logger.info("Auditing %s with %d checks", context.url, len(context.checks))
    try:
        resp = await fetcher.fetch(context.url)
    except FetchError as exc:
        logger.warning("Audit of %s failed: %s", context.url, exc.message)
        return failed_report(context, exc)

    doc = FetchedDocument(
        input_url=context.url,
        final_url=resp.final_url,
        status=resp.status,
        status_text=resp.status_text,
        html=resp.body,
        soup=parse_document(resp.body),
    )
    items = run_dom_checks(context, doc)
    items.extend(await run_deferred_checks(context, doc, fetcher))
    logger.info("Audit of %s produced %d items", context.url, len(items))
    return AuditReport(url=context.url, items=tuple(items), generation=context.generation)


# ----------------------------
# Session
# ----------------------------

class AuditSession:
    """Holds the latest report and drops results of superseded runs.

    Each ``run`` takes a new generation number; when a run finishes after a
    newer run started (or after ``reset``), its report is returned to the
    caller but never becomes ``self.report``.
    """

    def __init__(self, config: Optional[AuditConfig] = None, fetcher=None):
        self.config = config or AuditConfig()
        self.fetcher = fetcher
        self.report: Optional[AuditReport] = None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def new_context(self, url: str, checks: Optional[Iterable[str]] = None) -> AuditRunContext:
        url = normalize_url(url)
        if not url:
            raise SeoAuditError("A URL is required.")
        selected = registry.validate_selection(registry.check_ids() if checks is None else checks)
        if not selected:
            raise SeoAuditError("Please select at least one audit check.")
        self._generation += 1
        return AuditRunContext(url=url, checks=selected, generation=self._generation, config=self.config)

    async def run(self, url: str, checks: Optional[Iterable[str]] = None) -> AuditReport:
        context = self.new_context(url, checks)
        self.report = None
        if self.fetcher is not None:
            report = await run_audit(context, self.fetcher)
        else:
            async with ProxyFetcher(self.config) as fetcher:
                report = await run_audit(context, fetcher)

        if context.generation != self._generation:
            logger.info("Discarding stale audit of %s (run %d)", context.url, context.generation)
        else:
            self.report = report
        return report

    def reset(self) -> None:
        self._generation += 1
        self.report = None
