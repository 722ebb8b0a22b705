from __future__ import annotations

from collections import OrderedDict
from typing import Dict, FrozenSet, Iterable, List, Tuple

from .errors import UnknownCheckError
from .models import AuditCheck

META_HEAD = "Meta & Head"
CONTENT = "Content & Keywords"
LINKS = "Links"
ADVANCED = "Advanced & Technical"

AUDIT_CHECKS: Tuple[AuditCheck, ...] = (
    # Meta & Head
    AuditCheck("header-status", "Header Status", META_HEAD),
    AuditCheck("meta-charset", "Meta Charset", META_HEAD),
    AuditCheck("html-lang", "HTML Lang", META_HEAD),
    AuditCheck("meta-viewport", "Meta Viewport", META_HEAD),
    AuditCheck("favicon-link", "Favicon Link", META_HEAD),
    AuditCheck("preconnect-google-fonts", "Preconnect Google Fonts", META_HEAD),
    AuditCheck("shortlink-link", "Shortlink Link", META_HEAD),
    AuditCheck("edituri-link", "EditURI Link", META_HEAD),
    AuditCheck("api-link", "API Link", META_HEAD),
    AuditCheck("hreflang-link", "Hreflang Link", META_HEAD),
    AuditCheck("rss-link", "RSS Link", META_HEAD),
    AuditCheck("empty-meta-tags", "Empty Meta Tags", META_HEAD),
    AuditCheck("meta-title", "Meta Title Tag", META_HEAD),
    AuditCheck("meta-description", "Meta Description", META_HEAD),
    AuditCheck("canonical-tag", "Canonical Tag", META_HEAD),
    AuditCheck("opengraph-meta", "OpenGraph Meta", META_HEAD),
    AuditCheck("robots-meta", "Robots Meta Tag", META_HEAD),
    # Content & Keywords
    AuditCheck("top-keywords", "Top Keywords", CONTENT),
    AuditCheck("h1", "H1 Headings", CONTENT),
    AuditCheck("h2", "H2 Headings", CONTENT),
    AuditCheck("h3", "H3 Headings", CONTENT),
    AuditCheck("h4", "H4 Headings", CONTENT),
    AuditCheck("h5", "H5 Headings", CONTENT),
    AuditCheck("h6", "H6 Headings", CONTENT),
    AuditCheck("paragraphs", "Paragraphs", CONTENT),
    AuditCheck("spans", "Spans", CONTENT),
    AuditCheck("ul-li-list", "Unordered UL/LI List", CONTENT),
    AuditCheck("image-alt", "Image ALT Attributes", CONTENT),
    # Links
    AuditCheck("link-profile", "Link Profile", LINKS),
    AuditCheck("internal-links", "Internal Links", LINKS),
    AuditCheck("external-links", "External Links", LINKS),
    AuditCheck("http-links", "HTTP Links", LINKS),
    AuditCheck("broken-links", "Broken Links", LINKS),
    # Advanced & Technical
    AuditCheck("js-type", "JavaScript Type", ADVANCED),
    AuditCheck("json-ld", "JSON-LD Schema Markup", ADVANCED),
    AuditCheck("technologies", "Technologies Detected", ADVANCED),
    AuditCheck("pagespeed-score", "Google PageSpeed Score", ADVANCED),
    AuditCheck("sitemap-check", "XML Sitemap Index and URLs", ADVANCED),
    AuditCheck("robots-txt-check", "robots.txt Check", ADVANCED),
)

_BY_ID: Dict[str, AuditCheck] = {c.id: c for c in AUDIT_CHECKS}


def check_ids() -> List[str]:
    return [c.id for c in AUDIT_CHECKS]


def get_check(check_id: str) -> AuditCheck:
    try:
        return _BY_ID[check_id]
    except KeyError:
        raise UnknownCheckError([check_id]) from None


def label(check_id: str) -> str:
    return get_check(check_id).label


def grouped_checks() -> "OrderedDict[str, List[AuditCheck]]":
    groups: "OrderedDict[str, List[AuditCheck]]" = OrderedDict()
    for check in AUDIT_CHECKS:
        groups.setdefault(check.category, []).append(check)
    return groups


def validate_selection(ids: Iterable[str]) -> FrozenSet[str]:
    selected = frozenset(ids)
    unknown = selected.difference(_BY_ID)
    if unknown:
        raise UnknownCheckError(unknown)
    return selected
