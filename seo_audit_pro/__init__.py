"""
SEO Audit Pro: live single-page SEO audit.

Fetches a page through a CORS relay (Playwright request context), parses it
with BeautifulSoup/lxml and runs a fixed battery of checks, producing a report
that can be exported as CSV.

Run:
  seo-audit-pro https://example.com/
  seo-audit-pro https://example.com/ --checks meta-title,h1 --format csv --out report.csv
"""

from .config import AuditConfig
from .errors import FetchError, SeoAuditError, UnknownCheckError
from .fetcher import ProxyFetcher
from .models import AuditCheck, AuditRunContext, FetchedDocument, ReportItem
from .registry import AUDIT_CHECKS
from .report import AuditReport, AuditSession, run_audit

__version__ = "0.1.0"

__all__ = [
    "AUDIT_CHECKS",
    "AuditCheck",
    "AuditConfig",
    "AuditReport",
    "AuditRunContext",
    "AuditSession",
    "FetchError",
    "FetchedDocument",
    "ProxyFetcher",
    "ReportItem",
    "SeoAuditError",
    "UnknownCheckError",
    "run_audit",
]
