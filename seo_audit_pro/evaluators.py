"""
Per-check evaluators for the Live SEO Audit.

Every evaluator is a pure function of a FetchedDocument returning exactly one
ReportItem, registered in EVALUATORS under its check id. Evaluators that
inspect the DOM report "no findings" when the page could not be parsed.

The network-dependent checks (robots.txt, sitemap, broken links) live in
``resolvers``; the PageSpeed placeholder lives here because it needs nothing.
"""

from __future__ import annotations

import functools
import json
import re
from collections import Counter
from html import escape
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from bs4 import BeautifulSoup

from . import registry
from .config import (
    DESC_MAX,
    MIN_KEYWORD_LENGTH,
    STATUS_ERROR,
    STATUS_INFO,
    STATUS_OK,
    STATUS_WARNING,
    TITLE_MAX,
    TOP_KEYWORDS_LIMIT,
)
from .links import page_links, rel_tokens, same_host, unique_links
from .models import FetchedDocument, ReportItem
from .parser import element_text, visible_text

Evaluator = Callable[[FetchedDocument], ReportItem]

EVALUATORS: Dict[str, Evaluator] = {}


# ----------------------------
# Helpers
# ----------------------------

def make_item(check_id: str, extra_info: str, details: str, status: str) -> ReportItem:
    return ReportItem(
        test=registry.label(check_id),
        extra_info=extra_info,
        details=details,
        status=status,
        check_id=check_id,
    )


def found_count(check_id: str, n: int) -> str:
    return f"Number of {registry.label(check_id)} found: {n}"


def para(text: str) -> str:
    return f"<p>{text}</p>"


def bullet_list(rows: Iterable[str]) -> str:
    rows = list(rows)
    if not rows:
        return ""
    return "<ul>" + "".join(f"<li>{r}</li>" for r in rows) + "</ul>"


def no_findings(check_id: str) -> ReportItem:
    return make_item(
        check_id,
        "No document to inspect",
        para("The page returned no HTML that could be parsed, so nothing was found."),
        STATUS_INFO,
    )


def evaluator(check_id: str, needs_document: bool = True):
    def decorate(fn: Evaluator) -> Evaluator:
        @functools.wraps(fn)
        def run(doc: FetchedDocument) -> ReportItem:
            if needs_document and doc.soup is None:
                return no_findings(check_id)
            return fn(doc)

        EVALUATORS[check_id] = run
        return run

    return decorate


def attr(tag, name: str) -> str:
    value = tag.get(name) if tag is not None else None
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


# ----------------------------
# Meta & Head
# ----------------------------

@evaluator("header-status", needs_document=False)
def check_header_status(doc: FetchedDocument) -> ReportItem:
    ok = 200 <= doc.status < 300
    status_line = f"HTTP {doc.status} {doc.status_text}".strip()
    color = "green" if ok else "red"
    details = (
        para(f"Input URL: {escape(doc.input_url)}")
        + para(f"Final URL: {escape(doc.final_url)}")
        + f'<p>Final Status: <span style="color:{color}">{escape(status_line)}</span></p>'
    )
    return make_item("header-status", status_line, details, STATUS_OK if ok else STATUS_ERROR)


CHARSET_RE = re.compile(r"charset\s*=\s*['\"]?([\w.:-]+)", re.I)


def find_charset(soup: BeautifulSoup) -> Optional[str]:
    meta = soup.select_one("meta[charset]")
    if meta is not None:
        return attr(meta, "charset")
    equiv = soup.select_one('meta[http-equiv="content-type" i]')
    if equiv is not None:
        m = CHARSET_RE.search(attr(equiv, "content"))
        if m:
            return m.group(1)
    return None


@evaluator("meta-charset")
def check_meta_charset(doc: FetchedDocument) -> ReportItem:
    charset = find_charset(doc.soup)
    if charset is None:
        return make_item("meta-charset", "Missing", para("No meta charset declaration found."), STATUS_ERROR)
    if charset.lower() != "utf-8":
        return make_item(
            "meta-charset",
            charset,
            para(f"Charset is {escape(charset)}. UTF-8 is recommended."),
            STATUS_WARNING,
        )
    return make_item("meta-charset", charset, para(f"Charset: {escape(charset)}"), STATUS_OK)


@evaluator("html-lang")
def check_html_lang(doc: FetchedDocument) -> ReportItem:
    lang = attr(doc.soup.find("html"), "lang")
    if not lang:
        return make_item(
            "html-lang",
            "Missing",
            para("The &lt;html&gt; element has no lang attribute."),
            STATUS_WARNING,
        )
    return make_item("html-lang", lang, para(escape(lang)), STATUS_OK)


@evaluator("meta-viewport")
def check_meta_viewport(doc: FetchedDocument) -> ReportItem:
    meta = doc.soup.select_one('meta[name="viewport" i]')
    if meta is None:
        return make_item("meta-viewport", "Missing", para("No meta viewport tag found."), STATUS_ERROR)
    content = attr(meta, "content")
    compact = content.replace(" ", "").lower()
    has_width = "width=device-width" in compact
    has_scale = "initial-scale=1" in compact
    details = para(f"Content: {escape(content)}")
    if has_width and has_scale:
        return make_item("meta-viewport", "Responsive", details, STATUS_OK)
    if not has_width and not has_scale:
        return make_item(
            "meta-viewport",
            "Not responsive",
            details + para("Missing width=device-width and initial-scale=1."),
            STATUS_ERROR,
        )
    missing = "initial-scale=1" if has_width else "width=device-width"
    return make_item("meta-viewport", "Incomplete", details + para(f"Missing {missing}."), STATUS_WARNING)


@evaluator("favicon-link")
def check_favicon(doc: FetchedDocument) -> ReportItem:
    icons = doc.soup.select('link[rel~="icon" i]')
    if not icons:
        return make_item(
            "favicon-link",
            found_count("favicon-link", 0),
            para("No favicon link found. Browsers will fall back to /favicon.ico."),
            STATUS_WARNING,
        )
    rows = [escape(attr(link, "href")) for link in icons]
    return make_item("favicon-link", found_count("favicon-link", len(icons)), bullet_list(rows), STATUS_OK)


GOOGLE_FONT_HOSTS = ("fonts.googleapis.com", "fonts.gstatic.com")


@evaluator("preconnect-google-fonts")
def check_preconnect_fonts(doc: FetchedDocument) -> ReportItem:
    preconnects = [
        link for link in doc.soup.select('link[rel~="preconnect" i]')
        if any(h in attr(link, "href") for h in GOOGLE_FONT_HOSTS)
    ]
    if preconnects:
        rows = [escape(attr(link, "href")) for link in preconnects]
        return make_item(
            "preconnect-google-fonts",
            found_count("preconnect-google-fonts", len(preconnects)),
            bullet_list(rows),
            STATUS_OK,
        )
    if "fonts.googleapis.com" in doc.html:
        return make_item(
            "preconnect-google-fonts",
            "Missing",
            para("Google Fonts are loaded without a preconnect hint, which delays text rendering."),
            STATUS_WARNING,
        )
    return make_item(
        "preconnect-google-fonts",
        "Not needed",
        para("The page does not load Google Fonts."),
        STATUS_INFO,
    )


def _presence_check(
    doc: FetchedDocument,
    check_id: str,
    selector: str,
    present: Tuple[str, str],
    absent: Tuple[str, str],
) -> ReportItem:
    """Report a head link by selector. ``present``/``absent`` are (status, message)."""
    tags = doc.soup.select(selector)
    status, message = present if tags else absent
    details = para(message) + bullet_list(escape(attr(t, "href")) for t in tags)
    return make_item(check_id, found_count(check_id, len(tags)), details, status)


@evaluator("shortlink-link")
def check_shortlink(doc: FetchedDocument) -> ReportItem:
    return _presence_check(
        doc,
        "shortlink-link",
        'link[rel~="shortlink" i]',
        (STATUS_INFO, "A WordPress shortlink is exposed in the head."),
        (STATUS_OK, "No shortlink exposed."),
    )


@evaluator("edituri-link")
def check_edituri(doc: FetchedDocument) -> ReportItem:
    return _presence_check(
        doc,
        "edituri-link",
        'link[rel~="edituri" i]',
        (STATUS_WARNING, "The EditURI (RSD) link advertises the XML-RPC endpoint."),
        (STATUS_OK, "No EditURI link exposed."),
    )


@evaluator("api-link")
def check_api_link(doc: FetchedDocument) -> ReportItem:
    return _presence_check(
        doc,
        "api-link",
        'link[rel~="https://api.w.org/"]',
        (STATUS_INFO, "The WordPress REST API root is discoverable from the head."),
        (STATUS_OK, "No REST API discovery link exposed."),
    )


@evaluator("hreflang-link")
def check_hreflang(doc: FetchedDocument) -> ReportItem:
    links = doc.soup.select('link[rel~="alternate" i][hreflang]')
    rows = [f"{escape(attr(link, 'hreflang'))}: {escape(attr(link, 'href'))}" for link in links]
    if not links:
        return make_item(
            "hreflang-link",
            found_count("hreflang-link", 0),
            para("No hreflang alternates. The page is treated as single-language."),
            STATUS_INFO,
        )
    langs = {attr(link, "hreflang").lower() for link in links}
    if "x-default" not in langs:
        return make_item(
            "hreflang-link",
            found_count("hreflang-link", len(links)),
            bullet_list(rows) + para("No x-default alternate declared."),
            STATUS_WARNING,
        )
    return make_item("hreflang-link", found_count("hreflang-link", len(links)), bullet_list(rows), STATUS_OK)


@evaluator("rss-link")
def check_rss(doc: FetchedDocument) -> ReportItem:
    return _presence_check(
        doc,
        "rss-link",
        'link[rel~="alternate" i][type="application/rss+xml" i], '
        'link[rel~="alternate" i][type="application/atom+xml" i]',
        (STATUS_OK, "Feed discovery links found."),
        (STATUS_INFO, "No RSS or Atom feed advertised."),
    )


@evaluator("empty-meta-tags")
def check_empty_meta(doc: FetchedDocument) -> ReportItem:
    empty: List[str] = []
    for meta in doc.soup.find_all("meta"):
        name = attr(meta, "name") or attr(meta, "property") or attr(meta, "http-equiv")
        if name and not attr(meta, "content"):
            empty.append(name)
    if not empty:
        return make_item("empty-meta-tags", found_count("empty-meta-tags", 0), para("No empty meta tags."), STATUS_OK)
    return make_item(
        "empty-meta-tags",
        found_count("empty-meta-tags", len(empty)),
        bullet_list(escape(n) for n in empty),
        STATUS_WARNING,
    )


@evaluator("meta-title")
def check_meta_title(doc: FetchedDocument) -> ReportItem:
    tag = doc.soup.find("title")
    title = element_text(tag) if tag is not None else ""
    n = len(title)
    details = para(f"Title: {escape(title) or '-'}") + para(f"Length: {n} characters")
    if not title:
        return make_item("meta-title", "Missing", details + para("The page has no title."), STATUS_ERROR)
    if n > TITLE_MAX:
        return make_item(
            "meta-title",
            f"Length: {n}",
            details + para(f"Title is too long (limit: {TITLE_MAX} characters) and may be truncated."),
            STATUS_WARNING,
        )
    return make_item("meta-title", f"Length: {n}", details, STATUS_OK)


@evaluator("meta-description")
def check_meta_description(doc: FetchedDocument) -> ReportItem:
    desc = attr(doc.soup.select_one('meta[name="description" i]'), "content")
    n = len(desc)
    details = para(f"Meta Description: {escape(desc) or '-'}") + para(f"Length: {n} characters")
    if not desc:
        return make_item(
            "meta-description",
            "Missing",
            details + para("The page has no meta description."),
            STATUS_ERROR,
        )
    if n > DESC_MAX:
        return make_item(
            "meta-description",
            f"Length: {n}",
            details + para(f"Description is too long (limit: {DESC_MAX} characters)."),
            STATUS_WARNING,
        )
    return make_item("meta-description", f"Length: {n}", details, STATUS_OK)


@evaluator("canonical-tag")
def check_canonical(doc: FetchedDocument) -> ReportItem:
    href = attr(doc.soup.select_one('link[rel~="canonical" i]'), "href")
    if not href:
        return make_item(
            "canonical-tag",
            "Missing",
            para("No canonical URL. Duplicate versions of this page may compete."),
            STATUS_ERROR,
        )
    return make_item("canonical-tag", "Present", para(f"Canonical: {escape(href)}"), STATUS_OK)


OG_REQUIRED = ("og:title", "og:description", "og:image")


@evaluator("opengraph-meta")
def check_opengraph(doc: FetchedDocument) -> ReportItem:
    tags = doc.soup.select('meta[property^="og:"]')
    props = {attr(t, "property"): attr(t, "content") for t in tags}
    if not props:
        return make_item(
            "opengraph-meta",
            found_count("opengraph-meta", 0),
            para("No OpenGraph tags. Shared links will use generic previews."),
            STATUS_WARNING,
        )
    rows = [f"{escape(k)}: {escape(v)}" for k, v in props.items()]
    missing = [p for p in OG_REQUIRED if not props.get(p)]
    if missing:
        return make_item(
            "opengraph-meta",
            found_count("opengraph-meta", len(props)),
            bullet_list(rows) + para("Missing: " + ", ".join(missing)),
            STATUS_WARNING,
        )
    return make_item("opengraph-meta", found_count("opengraph-meta", len(props)), bullet_list(rows), STATUS_OK)


@evaluator("robots-meta")
def check_robots_meta(doc: FetchedDocument) -> ReportItem:
    meta = doc.soup.select_one('meta[name="robots" i]')
    if meta is None:
        return make_item(
            "robots-meta",
            "Not set",
            para("No robots meta tag. Search engines default to index, follow."),
            STATUS_OK,
        )
    content = attr(meta, "content")
    lowered = content.lower()
    details = para(f"Content: {escape(content)}")
    if "noindex" in lowered:
        return make_item(
            "robots-meta",
            "noindex",
            details + para("The page is not indexable."),
            STATUS_ERROR,
        )
    if "nofollow" in lowered:
        return make_item(
            "robots-meta",
            "nofollow",
            details + para("Links on this page will not be followed."),
            STATUS_WARNING,
        )
    return make_item("robots-meta", content or "Empty", details, STATUS_OK)


# ----------------------------
# Content & Keywords
# ----------------------------

STOP_WORDS = frozenset("""
a about above after again against all also am an and any are as at be because been before
being below between both but by can could did does doing down during each few for from
further had has have having her here hers herself him himself his how into its itself just
let more most must myself nor not now off once only other our ours ourselves out over own
same she should some such than that the their theirs them themselves then there these they
this those through too under until very was were what when where which while who whom why
will with would you your yours yourself yourselves
""".split())

WORD_RE = re.compile(r"\b[^\W\d_]{%d,}\b" % MIN_KEYWORD_LENGTH)


def top_keywords(text: str, limit: int = TOP_KEYWORDS_LIMIT) -> List[Tuple[str, int]]:
    """Most frequent non-stop words; ties keep first-seen order."""
    words = WORD_RE.findall((text or "").lower())
    counts = Counter(w for w in words if w not in STOP_WORDS)
    return counts.most_common(limit)


@evaluator("top-keywords")
def check_top_keywords(doc: FetchedDocument) -> ReportItem:
    ranked = top_keywords(visible_text(doc.soup))
    if not ranked:
        return make_item("top-keywords", "No keywords", para("No body text to analyse."), STATUS_WARNING)
    rows = [f"{escape(word)} ({count})" for word, count in ranked]
    return make_item("top-keywords", f"Top {len(ranked)} keywords", bullet_list(rows), STATUS_INFO)


@evaluator("h1")
def check_h1(doc: FetchedDocument) -> ReportItem:
    headings = [element_text(h) for h in doc.soup.find_all("h1")]
    n = len(headings)
    details = "".join(para(f"H1 {i}: {escape(t)}") for i, t in enumerate(headings, 1))
    details += para(f"Total H1 tags: {n}")
    if n == 0:
        return make_item("h1", found_count("h1", 0), details + para("The page has no H1."), STATUS_ERROR)
    if n > 1:
        return make_item("h1", found_count("h1", n), details + para("More than one H1 (1 is ideal)."), STATUS_WARNING)
    return make_item("h1", found_count("h1", 1), details, STATUS_OK)


def _heading_lister(level: int) -> Evaluator:
    check_id = f"h{level}"

    def check(doc: FetchedDocument) -> ReportItem:
        headings = [element_text(h) for h in doc.soup.find_all(check_id)]
        rows = [f"#{i}: {escape(t)} ({len(t)} chars)" for i, t in enumerate(headings, 1)]
        details = bullet_list(rows) + para(f"Total Headings: {len(headings)}")
        return make_item(check_id, found_count(check_id, len(headings)), details, STATUS_INFO)

    check.__name__ = f"check_h{level}"
    return evaluator(check_id)(check)


check_h2, check_h3, check_h4, check_h5, check_h6 = (_heading_lister(n) for n in range(2, 7))


@evaluator("paragraphs")
def check_paragraphs(doc: FetchedDocument) -> ReportItem:
    n = len(doc.soup.find_all("p"))
    if n == 0:
        return make_item("paragraphs", found_count("paragraphs", 0), para("No paragraphs. Content may be thin."), STATUS_WARNING)
    return make_item("paragraphs", found_count("paragraphs", n), para(f"Total paragraphs: {n}"), STATUS_INFO)


@evaluator("spans")
def check_spans(doc: FetchedDocument) -> ReportItem:
    n = len(doc.soup.find_all("span"))
    return make_item("spans", found_count("spans", n), para(f"Total spans: {n}"), STATUS_INFO)


@evaluator("ul-li-list")
def check_lists(doc: FetchedDocument) -> ReportItem:
    lists = doc.soup.find_all("ul")
    items = sum(len(ul.find_all("li", recursive=False)) for ul in lists)
    details = para(f"Unordered lists: {len(lists)}") + para(f"List items: {items}")
    return make_item("ul-li-list", found_count("ul-li-list", len(lists)), details, STATUS_INFO)


@evaluator("image-alt")
def check_image_alt(doc: FetchedDocument) -> ReportItem:
    images = doc.soup.find_all("img")
    missing = [img for img in images if not attr(img, "alt")]
    summary = para(f"Images: {len(images)}") + para(f"Missing ALT: {len(missing)}")
    if not missing:
        return make_item("image-alt", "Missing ALT: 0", summary, STATUS_OK)
    rows = [escape(attr(img, "src") or attr(img, "data-src") or "(no src)") for img in missing]
    return make_item("image-alt", f"Missing ALT: {len(missing)}", summary + bullet_list(rows), STATUS_WARNING)


# ----------------------------
# Links
# ----------------------------

def _split_links(doc: FetchedDocument) -> Tuple[List[str], List[str]]:
    internal: List[str] = []
    external: List[str] = []
    for url in unique_links(doc.soup, doc.final_url):
        (internal if same_host(doc.final_url, url) else external).append(url)
    return internal, external


@evaluator("link-profile")
def check_link_profile(doc: FetchedDocument) -> ReportItem:
    internal = external = nofollow = skipped = 0
    links = page_links(doc.soup, doc.final_url)
    for tag, url in links:
        if "nofollow" in rel_tokens(tag):
            nofollow += 1
        if url is None:
            skipped += 1
        elif same_host(doc.final_url, url):
            internal += 1
        else:
            external += 1
    details = bullet_list([
        f"Total links: {len(links)}",
        f"Internal: {internal}",
        f"External: {external}",
        f"Nofollow: {nofollow}",
        f"Anchors and non-HTTP links: {skipped}",
    ])
    return make_item("link-profile", found_count("link-profile", len(links)), details, STATUS_INFO)


@evaluator("internal-links")
def check_internal_links(doc: FetchedDocument) -> ReportItem:
    internal, _ = _split_links(doc)
    if not internal:
        return make_item(
            "internal-links",
            found_count("internal-links", 0),
            para("No internal links. Crawlers cannot discover other pages from here."),
            STATUS_WARNING,
        )
    return make_item(
        "internal-links",
        found_count("internal-links", len(internal)),
        bullet_list(escape(u) for u in internal),
        STATUS_OK,
    )


@evaluator("external-links")
def check_external_links(doc: FetchedDocument) -> ReportItem:
    _, external = _split_links(doc)
    return make_item(
        "external-links",
        found_count("external-links", len(external)),
        bullet_list(escape(u) for u in external) or para("No external links."),
        STATUS_INFO,
    )


@evaluator("http-links")
def check_http_links(doc: FetchedDocument) -> ReportItem:
    insecure = [attr(a, "href") for a in doc.soup.find_all("a", href=True) if attr(a, "href").lower().startswith("http://")]
    if not insecure:
        return make_item("http-links", found_count("http-links", 0), para("All absolute links use HTTPS."), STATUS_OK)
    return make_item(
        "http-links",
        found_count("http-links", len(insecure)),
        bullet_list(escape(h) for h in insecure),
        STATUS_WARNING,
    )


# ----------------------------
# Advanced & Technical
# ----------------------------

@evaluator("js-type")
def check_js_type(doc: FetchedDocument) -> ReportItem:
    n = len(doc.soup.select('script[type="text/javascript"]'))
    if n:
        return make_item(
            "js-type",
            found_count("js-type", n),
            para(f'{n} script(s) declare the redundant type="text/javascript".'),
            STATUS_WARNING,
        )
    return make_item("js-type", found_count("js-type", 0), para("No legacy script type attributes."), STATUS_OK)


def schema_types(data) -> List[str]:
    types: Set[str] = set()

    def walk(obj):
        if isinstance(obj, dict):
            t = obj.get("@type")
            if isinstance(t, str):
                types.add(t)
            elif isinstance(t, list):
                types.update(x for x in t if isinstance(x, str))
            for v in obj.values():
                walk(v)
        elif isinstance(obj, list):
            for it in obj:
                walk(it)

    walk(data)
    return sorted(types)


@evaluator("json-ld")
def check_json_ld(doc: FetchedDocument) -> ReportItem:
    scripts = doc.soup.select('script[type="application/ld+json"]')
    if not scripts:
        return make_item(
            "json-ld",
            found_count("json-ld", 0),
            para("No JSON-LD structured data found."),
            STATUS_WARNING,
        )
    blocks: List[str] = []
    types: Set[str] = set()
    invalid = 0
    for i, script in enumerate(scripts, 1):
        raw = (script.string or script.get_text() or "").strip()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            invalid += 1
            blocks.append(
                para(f"Block {i}: <strong>Invalid JSON-LD</strong> ({escape(str(exc))})")
                + f"<pre>{escape(raw)}</pre>"
            )
            continue
        types.update(schema_types(data))
        blocks.append(para(f"Block {i}: valid") + f"<pre>{escape(json.dumps(data, indent=2, ensure_ascii=False))}</pre>")

    details = para("Types: " + (escape(", ".join(sorted(types))) or "-")) + "".join(blocks)
    extra = found_count("json-ld", len(scripts))
    if invalid:
        return make_item("json-ld", f"{extra} ({invalid} invalid)", details, STATUS_ERROR)
    return make_item("json-ld", extra, details, STATUS_OK)


def _script_src_contains(soup: BeautifulSoup, needle: str) -> bool:
    return any(needle in attr(s, "src").lower() for s in soup.find_all("script", src=True))


def _stylesheet_href_contains(soup: BeautifulSoup, needle: str) -> bool:
    return any(needle in attr(link, "href").lower() for link in soup.select('link[rel~="stylesheet" i]'))


def _is_wordpress(soup: BeautifulSoup, raw: str) -> bool:
    return soup.select_one('meta[name="generator" i][content*="wordpress" i]') is not None or "wp-content" in raw


def _is_nextjs(soup: BeautifulSoup, raw: str) -> bool:
    return soup.select_one("#__next, script#__NEXT_DATA__") is not None


def _is_react(soup: BeautifulSoup, raw: str) -> bool:
    return soup.select_one("[data-reactroot]") is not None or _script_src_contains(soup, "react")


TECH_SIGNATURES: Tuple[Tuple[str, Callable[[BeautifulSoup, str], bool]], ...] = (
    ("WordPress", _is_wordpress),
    ("Shopify", lambda soup, raw: "cdn.shopify.com" in raw),
    ("Next.js", _is_nextjs),
    ("React", _is_react),
    ("Angular", lambda soup, raw: soup.select_one("[ng-version]") is not None),
    ("Nuxt.js", lambda soup, raw: soup.select_one("[data-n-head], #__nuxt") is not None),
    ("Vue.js", lambda soup, raw: soup.select_one("[data-v-app]") is not None),
    ("jQuery", lambda soup, raw: _script_src_contains(soup, "jquery")),
    ("Bootstrap", lambda soup, raw: _stylesheet_href_contains(soup, "bootstrap")),
    ("Google Tag Manager", lambda soup, raw: "googletagmanager.com" in raw),
)


def detect_technologies(soup: BeautifulSoup, raw: str) -> List[str]:
    detected: List[str] = []
    for name, matches in TECH_SIGNATURES:
        if name not in detected and matches(soup, raw):
            detected.append(name)
    # Next.js pages always ship React; report the framework only.
    if "Next.js" in detected and "React" in detected:
        detected.remove("React")
    return detected


@evaluator("technologies")
def check_technologies(doc: FetchedDocument) -> ReportItem:
    detected = detect_technologies(doc.soup, doc.html)
    if not detected:
        return make_item(
            "technologies",
            found_count("technologies", 0),
            para("No known technologies detected."),
            STATUS_INFO,
        )
    return make_item(
        "technologies",
        found_count("technologies", len(detected)),
        bullet_list(escape(t) for t in detected),
        STATUS_INFO,
    )


@evaluator("pagespeed-score", needs_document=False)
def check_pagespeed(doc: FetchedDocument) -> ReportItem:
    # No live measurement yet.
    return make_item(
        "pagespeed-score",
        "Coming Soon",
        para("Live PageSpeed and Core Web Vitals scoring is coming soon."),
        STATUS_INFO,
    )
