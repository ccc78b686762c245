"""Trust affordances shared by every article page.

Disclaimers, disclosures, the numbered source list, reviewer attribution,
the freshness badge, the print button and the data-sources section.  The
source list and reviewer line are best-effort: if loading or rendering them
fails the section is dropped and the page still renders.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, NamedTuple, Optional, Sequence

from markupsafe import Markup

from sitegen.config import FRESH_ARTICLE_DAYS, PRINTABLE_CONTENT_TYPES, STALE_ARTICLE_DAYS
from sitegen.models.article import Article
from sitegen.models.domain import DisclosureSettings
from sitegen.models.evidence import ArticleDataset, Citation

logger = logging.getLogger(__name__)

CitationLoader = Callable[[str], Sequence[Citation]]


class TrustElements(NamedTuple):
    disclaimer_html: Markup
    trust_html: Markup


def utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_date(value: datetime) -> str:
    """``Mar 4, 2025`` style date used in visible copy."""
    return f"{value:%b} {value.day}, {value.year}"


def build_trust_elements(
    article: Article,
    disclosure: Optional[DisclosureSettings],
    load_citations: Optional[CitationLoader] = None,
) -> TrustElements:
    disclaimer_html = Markup("")
    if article.ymyl_level in ("high", "medium") and disclosure and disclosure.not_advice_disclaimer:
        disclaimer_html = Markup('<div class="disclaimer">{}</div>').format(disclosure.not_advice_disclaimer)

    sections: List[Markup] = []

    if disclosure and disclosure.affiliate_disclosure:
        sections.append(
            Markup('<div class="disclosure affiliate-disclosure"><small>{}</small></div>').format(
                disclosure.affiliate_disclosure
            )
        )

    if load_citations is not None:
        try:
            sources = _sources_section(load_citations(article.id))
        except Exception as exc:
            logger.error("Citations unavailable for article %s – omitting sources: %s", article.id, exc)
        else:
            if sources:
                sections.append(sources)

    if disclosure and disclosure.show_reviewed_by and article.reviewed_by:
        try:
            sections.append(
                Markup('<div class="reviewed-by"><small>Reviewed by {}</small></div>').format(
                    article.reviewed_by.strip()
                )
            )
        except Exception as exc:
            logger.error("Reviewer attribution failed for article %s: %s", article.id, exc)

    if disclosure and disclosure.show_last_updated and article.updated_at:
        sections.append(
            Markup('<div class="last-updated"><small>Last updated: {}</small></div>').format(
                format_date(article.updated_at)
            )
        )

    return TrustElements(disclaimer_html, Markup("\n").join(sections))


def _sources_section(citations: Sequence[Citation]) -> Markup:
    if not citations:
        return Markup("")
    ordered = sorted(citations, key=lambda c: c.position)
    items = []
    for index, citation in enumerate(ordered, start=1):
        retrieved = Markup("")
        if citation.retrieved_at:
            retrieved = Markup(" <small>(Retrieved {})</small>").format(format_date(citation.retrieved_at))
        items.append(
            Markup('<li>[{}] <a href="{}" rel="nofollow noopener" target="_blank">{}</a>{}</li>').format(
                index, citation.source_url, citation.source_title or citation.source_url, retrieved
            )
        )
    return Markup('<section class="sources"><h2>Sources</h2><ol>{}</ol></section>').format(
        Markup("\n").join(items)
    )


def build_freshness_badge(
    article: Article,
    datasets: Sequence[ArticleDataset],
    now: Optional[datetime] = None,
) -> Markup:
    """Traffic-light badge from dataset expiry and article age."""
    if not datasets and not article.updated_at:
        return Markup("")

    now = utc(now or datetime.now(timezone.utc))
    any_expired = any(ds.expires_at and utc(ds.expires_at) < now for ds in datasets)
    all_fresh = not any_expired

    age_days = None
    if article.updated_at:
        age_days = (now - utc(article.updated_at)).total_seconds() / 86400
    if age_days is None or age_days > STALE_ARTICLE_DAYS:
        all_fresh = False

    if any_expired:
        css_class, text = "freshness-red", "Needs update"
    elif all_fresh and age_days is not None and age_days < FRESH_ARTICLE_DAYS:
        css_class, text = "freshness-green", f"Verified {format_date(article.updated_at)}"
    else:
        css_class, text = "freshness-yellow", "Review pending"

    return Markup('<div class="freshness-badge {}"><span class="freshness-dot"></span>{}</div>').format(
        css_class, text
    )


def build_print_button(content_type: str) -> Markup:
    if content_type not in PRINTABLE_CONTENT_TYPES:
        return Markup("")
    return Markup('<button class="print-btn" onclick="window.print()" type="button">Save as PDF</button>')


def build_data_sources_section(datasets: Sequence[ArticleDataset]) -> Markup:
    if not datasets:
        return Markup("")

    items = []
    for ds in datasets:
        link_attrs = Markup("")
        if ds.source_url:
            link_attrs = Markup(' href="{}" rel="nofollow noopener" target="_blank"').format(ds.source_url)
        publisher = Markup(" — {}").format(ds.publisher) if ds.publisher else Markup("")
        retrieved = (
            Markup(" <small>(Retrieved {})</small>").format(format_date(ds.retrieved_at))
            if ds.retrieved_at
            else Markup("")
        )
        usage = Markup(' <span class="data-usage">{}</span>').format(ds.usage) if ds.usage else Markup("")
        items.append(
            Markup('<li class="data-source-item"><a{}>{}</a>{}{}{}</li>').format(
                link_attrs, ds.source_title or ds.name, publisher, retrieved, usage
            )
        )
    return Markup('<section class="data-sources"><h2>Data Sources</h2><ul>{}</ul></section>').format(
        Markup("\n").join(items)
    )
