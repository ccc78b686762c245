"""Preflight readiness checks over a domain's page definitions.

Each check appends a :class:`ValidationIssue`; the site is ready when no
issue has ``error`` severity.  The checks read the same block payloads the
renderers do, so a block that would render empty is reported here first.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from sitegen.models.page import BlockEnvelope, PageDefinition
from sitegen.models.validation import Severity, ValidationIssue, ValidationReport

logger = logging.getLogger(__name__)

SITE_ROUTE = "(site)"
PLACEHOLDER_MARKERS = ("Lorem ipsum", "TODO", "REPLACE", "[insert", "[your")
MIN_META_DESCRIPTION = 20
MIN_HERO_HEADING = 5

_TLD_RE = re.compile(r"\.[a-z]+$", re.IGNORECASE)


class _Collector:
    def __init__(self):
        self.issues: List[ValidationIssue] = []

    def add(self, severity: Severity, code: str, route: str, message: str, block_id: Optional[str] = None):
        self.issues.append(
            ValidationIssue(severity=severity, code=code, route=route, block_id=block_id, message=message)
        )


def _is_empty_list(value: Any) -> bool:
    return not isinstance(value, list) or len(value) == 0


def _check_header(block: BlockEnvelope, route: str, routes: set, raw_slug: str, out: _Collector):
    nav_links = block.content.get("navLinks")
    for link in nav_links if isinstance(nav_links, list) else []:
        if not isinstance(link, dict):
            continue
        href = link.get("href")
        if isinstance(href, str) and href.startswith("/") and href not in routes:
            out.add("error", "broken_nav", route, f'Nav "{link.get("label", "")}" → {href} (page doesn\'t exist)', block.id)
        children = link.get("children")
        for child in children if isinstance(children, list) else []:
            child_href = child.get("href") if isinstance(child, dict) else None
            if isinstance(child_href, str) and child_href.startswith("/") and child_href not in routes:
                out.add(
                    "error",
                    "broken_nav",
                    route,
                    f'Dropdown "{child.get("label", "")}" → {child_href} (page doesn\'t exist)',
                    block.id,
                )
    site_name = block.content.get("siteName")
    if isinstance(site_name, str) and (site_name == raw_slug or len(site_name) < 3):
        out.add("warning", "generic_name", route, f'Site name "{site_name}" looks unhumanized', block.id)


def _check_block(block: BlockEnvelope, route: str, routes: set, raw_slug: str, niche: str, out: _Collector):
    content: Dict[str, Any] = block.content
    content_text = json.dumps(content, ensure_ascii=False)

    if block.type == "Header":
        _check_header(block, route, routes, raw_slug, out)

    for field in ("ctaUrl", "buttonUrl"):
        url = content.get(field)
        if isinstance(url, str) and url.startswith("/") and url not in routes:
            out.add("error", "broken_link", route, f"{field} → {url} (page doesn't exist)", block.id)

    if block.type == "QuoteCalculator" and _is_empty_list(content.get("inputs")):
        out.add("error", "empty_calculator", route, "Calculator has no inputs defined", block.id)
    if block.type == "CostBreakdown" and _is_empty_list(content.get("ranges")):
        out.add("error", "empty_costs", route, "Cost breakdown has no ranges", block.id)
    if block.type == "FAQ" and _is_empty_list(content.get("items")):
        out.add("error", "empty_faq", route, "FAQ has no items", block.id)
    if block.type == "CitationBlock" and _is_empty_list(content.get("sources")):
        out.add("warning", "empty_citations", route, "Citation block has no sources", block.id)

    if block.type == "LeadForm" and block.config.get("endpoint", "") in ("", "#", None):
        if not _is_empty_list(content.get("fields")):
            out.add("warning", "no_endpoint", route, "LeadForm has fields but no endpoint; the form is disabled", block.id)

    lowered_niche = niche.lower()
    if "home services" not in lowered_niche and "home improvement" not in lowered_niche:
        if "Home Services" in content_text or "home services" in content_text:
            out.add("warning", "generic_niche", route, f'Block contains "Home Services" but niche is "{niche}"', block.id)

    for marker in PLACEHOLDER_MARKERS:
        if marker in content_text:
            out.add("warning", "placeholder", route, f'Contains "{marker}"', block.id)

    if block.type == "Hero":
        heading = content.get("heading")
        if not isinstance(heading, str) or len(heading) < MIN_HERO_HEADING:
            out.add("error", "empty_hero", route, "Hero has no heading", block.id)


def validate_pages(domain: str, pages: List[PageDefinition], niche: Optional[str] = None) -> ValidationReport:
    """Audit *pages* for *domain* and return the readiness report."""
    routes = {page.route for page in pages}
    raw_slug = _TLD_RE.sub("", domain)
    niche = niche or "general"
    out = _Collector()

    for page in pages:
        for block in page.blocks:
            _check_block(block, page.route, routes, raw_slug, niche, out)
        if not page.meta_description or len(page.meta_description) < MIN_META_DESCRIPTION:
            out.add("warning", "missing_meta", page.route, "Page has no/short meta description")

    if "/" not in routes:
        out.add("error", "no_homepage", SITE_ROUTE, "No homepage (/) found")
    if "/privacy-policy" not in routes and "/privacy" not in routes:
        out.add("error", "missing_compliance", SITE_ROUTE, "No privacy policy page")
    if "/terms" not in routes:
        out.add("error", "missing_compliance", SITE_ROUTE, "No terms of service page")

    error_count = sum(1 for issue in out.issues if issue.severity == "error")
    warning_count = len(out.issues) - error_count
    logger.info("Validated %s – %d pages, %d errors, %d warnings", domain, len(pages), error_count, warning_count)
    return ValidationReport(
        ready=error_count == 0,
        error_count=error_count,
        warning_count=warning_count,
        issues=out.issues,
    )
