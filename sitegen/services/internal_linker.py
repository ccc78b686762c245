"""Post-generation pass that links keyword mentions between a site's pages.

The pass needs the full route list, so it runs once after every page has
been rendered.  Only text directly inside ``<p>`` and ``<li>`` elements is
considered; a match is skipped when the text before it already holds an
anchor.  This is a textual heuristic, not a DOM-aware check.
"""

import logging
import re
from typing import List, NamedTuple, Sequence, Set

from markupsafe import escape

from sitegen.config import MAX_LINKS_PER_PAGE, MIN_KEYWORD_LENGTH
from sitegen.models.files import GeneratedFile

logger = logging.getLogger(__name__)

_YEAR_RE = re.compile(r"\(\d{4}\)")
_PUNCT_RE = re.compile(r"[^a-zA-Z0-9\s]")


class LinkTarget(NamedTuple):
    route: str
    title: str


class PageKeywords(NamedTuple):
    route: str
    keywords: List[str]


def route_to_file_path(route: str) -> str:
    if route == "/":
        return "index.html"
    return f"{route.strip('/')}/index.html"


def extract_keywords(title: str, route: str) -> List[str]:
    """Phrases that should link to the page with *title* at *route*.

    The lowercased title, a variant without punctuation or ``(YYYY)`` year
    markers when that differs, and the last route segment with hyphens
    turned into spaces.
    """
    keywords = []
    if title:
        lowered = title.lower()
        keywords.append(lowered)
        cleaned = _PUNCT_RE.sub("", _YEAR_RE.sub("", title)).strip().lower()
        if len(cleaned) > 5 and cleaned != lowered:
            keywords.append(cleaned)
    segment = route.strip("/").split("/")[-1]
    from_slug = segment.replace("-", " ").lower()
    if len(from_slug) > 3:
        keywords.append(from_slug)
    return keywords


def _keyword_pattern(keyword: str) -> re.Pattern:
    return re.compile(
        r"(<(?:p|li)\b[^>]*>[^<]*?)\b(" + re.escape(keyword) + r")\b([^<]*?</(?:p|li)>)",
        re.IGNORECASE,
    )


def inject_links(html: str, current_route: str, pages: Sequence[PageKeywords]) -> str:
    """Link keyword mentions in *html* to other pages.

    At most one link per target and at most ``MAX_LINKS_PER_PAGE`` overall.
    """
    links_added = 0
    linked: Set[str] = set()
    for page in pages:
        if links_added >= MAX_LINKS_PER_PAGE:
            break
        if page.route == current_route or page.route in linked:
            continue
        for keyword in page.keywords:
            if len(keyword) < MIN_KEYWORD_LENGTH:
                continue
            match = _keyword_pattern(keyword).search(html)
            if match is None:
                continue
            before, text, after = match.groups()
            if "<a " in before or "href=" in before:
                continue
            link = f'<a href="{escape(page.route)}">{text}</a>'
            html = html[: match.start()] + before + link + after + html[match.end():]
            links_added += 1
            linked.add(page.route)
            break
    return html


def apply_internal_linking(files: List[GeneratedFile], targets: Sequence[LinkTarget]) -> None:
    """Rewrite the HTML of every file that maps to one of *targets*, in place."""
    pages = [PageKeywords(t.route, extract_keywords(t.title, t.route)) for t in targets]
    by_path = {route_to_file_path(t.route): t.route for t in targets}
    for file in files:
        if file.is_binary or not file.path.endswith(".html"):
            continue
        route = by_path.get(file.path)
        if route is None:
            continue
        file.content = inject_links(file.content, route, pages)
    logger.info("Internal linking pass – %d pages", len(by_path))
