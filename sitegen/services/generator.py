"""Site compilation: one domain's records in, its complete static file set out.

A domain is compiled either from its published page definitions (``v2``,
block pages) or, when it has none, from its published articles (``v1``,
one content-type page per article).  The two paths are never mixed.

Every article render is started at once and awaited together; the first
failure aborts the whole compilation so no partial site is produced.
"""

import asyncio
import logging
import re
from datetime import date, datetime, timezone
from typing import AbstractSet, Dict, List, Literal, NamedTuple, Optional, Sequence, Set

from markupsafe import Markup, escape

from sitegen.blocks.assembler import assemble_page
from sitegen.blocks.registry import BlockContext, register_block_renderers
from sitegen.config import (
    DEFAULT_FAVICON,
    LONG_CACHE,
    NICHE_FAVICONS,
    RESERVED_SLUGS,
    SAFE_SLUG_PATTERN,
    SHORT_CACHE,
)
from sitegen.errors import DomainNotFoundError
from sitegen.layouts.layouts import get_layout_config
from sitegen.layouts.stylesheet import build_article_stylesheet, build_block_stylesheet
from sitegen.layouts.themes import SKINS, THEMES, normalize_key, resolve_theme
from sitegen.models.article import Article
from sitegen.models.compile_request import CompileRequest
from sitegen.models.compile_response import CompileResponse
from sitegen.models.domain import DisclosureSettings, Domain
from sitegen.models.files import GeneratedFile
from sitegen.models.page import PageDefinition
from sitegen.services.html_env import render_template
from sitegen.services.internal_linker import LinkTarget, apply_internal_linking, route_to_file_path
from sitegen.services.markdown_renderer import HostnameCache, MarkdownRenderer
from sitegen.services.page_shell import NavLink, PageShell, build_page_shell, wrap_in_html_page
from sitegen.services.site_title import extract_site_title
from sitegen.services.structured_data import build_website_schema
from sitegen.templates.common import RenderContext
from sitegen.templates.dispatch import render_article
from sitegen.templates.embed import render_embed_page

logger = logging.getLogger(__name__)

Mode = Literal["v1", "v2"]

_ROUTE_RE = re.compile(r"^/(?:[a-z0-9][a-z0-9-]*/?)*$")


class TrustPage(NamedTuple):
    path: str
    title: str
    content: Optional[str]


# ── Input filtering ─────────────────────────────────────────────────────────

def is_safe_slug(slug: str) -> bool:
    return bool(slug) and ".." not in slug and SAFE_SLUG_PATTERN.match(slug) is not None


def is_safe_route(route: str) -> bool:
    return ".." not in route and _ROUTE_RE.match(route) is not None


def live_articles(articles: Sequence[Article]) -> List[Article]:
    """Published, not deleted, with a safe slug.

    Unsafe, reserved and repeated slugs are logged and dropped; the first
    article with a given slug wins.
    """
    live = []
    seen: Set[str] = set()
    for article in articles:
        if not article.is_live:
            continue
        if not is_safe_slug(article.slug):
            logger.warning("Skipping article %s – unsafe slug %r", article.id, article.slug)
            continue
        if article.slug in RESERVED_SLUGS or article.slug in seen:
            logger.warning("Skipping article %s – slug %r already taken", article.id, article.slug)
            continue
        seen.add(article.slug)
        live.append(article)
    return live


def _route_root(route: str) -> str:
    return route.strip("/").split("/")[0]


def published_pages(pages: Sequence[PageDefinition]) -> List[PageDefinition]:
    """Published pages with a safe route; the first page for an output path wins."""
    published = []
    seen: Set[str] = set()
    for page in pages:
        if not page.is_published:
            continue
        if not is_safe_route(page.route):
            logger.warning("Skipping page %s – unsafe route %r", page.id, page.route)
            continue
        path = route_to_file_path(page.route)
        if _route_root(page.route) in RESERVED_SLUGS or path in seen:
            logger.warning("Skipping page %s – route %r already taken", page.id, page.route)
            continue
        seen.add(path)
        published.append(page)
    return published


def choose_mode(request: CompileRequest) -> Mode:
    """``v2`` when at least one page definition would be compiled."""
    compilable = any(
        page.is_published and is_safe_route(page.route) and _route_root(page.route) not in RESERVED_SLUGS
        for page in request.page_definitions
    )
    return "v2" if compilable else "v1"


# ── Static site files ───────────────────────────────────────────────────────

def build_favicon(niche: Optional[str]) -> str:
    glyph = NICHE_FAVICONS.get(normalize_key(niche) or "", DEFAULT_FAVICON)
    return (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">'
        f'<text y=".9em" font-size="90">{glyph}</text></svg>'
    )


def build_robots(domain: str) -> str:
    return f"User-agent: *\nAllow: /\n\nSitemap: https://{domain}/sitemap.xml\n"


def build_headers() -> str:
    """Per-path response headers in the ``_headers`` format of static hosts."""
    return "\n".join(
        [
            "/*",
            "  X-Content-Type-Options: nosniff",
            "  X-Frame-Options: SAMEORIGIN",
            "  Referrer-Policy: strict-origin-when-cross-origin",
            "  Permissions-Policy: camera=(), microphone=(), geolocation=()",
            "",
            "/*.css",
            f"  Cache-Control: {LONG_CACHE}",
            "",
            "/favicon.svg",
            f"  Cache-Control: {LONG_CACHE}",
            "",
            "/*.html",
            f"  Cache-Control: {SHORT_CACHE}",
            "",
            "/",
            f"  Cache-Control: {SHORT_CACHE}",
            "",
            "/embed/*",
            "  ! X-Frame-Options",
            "  Content-Security-Policy: frame-ancestors *",
            "",
        ]
    )


class SitemapEntry(NamedTuple):
    path: str
    lastmod: date


def _day(value: Optional[datetime], default: date) -> date:
    return value.date() if value else default


def build_sitemap(domain: str, entries: Sequence[SitemapEntry]) -> str:
    urls = "\n".join(
        f"  <url><loc>{escape(f'https://{domain}{entry.path}')}</loc>"
        f"<lastmod>{entry.lastmod.isoformat()}</lastmod></url>"
        for entry in entries
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        f"{urls}\n</urlset>\n"
    )


def trust_pages(disclosure: Optional[DisclosureSettings], taken: AbstractSet[str] = frozenset()) -> List[TrustPage]:
    """Configured trust pages whose output path is not in *taken*."""
    if disclosure is None:
        return []
    pages = [
        TrustPage("about", "About Us", disclosure.about_content),
        TrustPage("editorial-policy", "Editorial Policy", disclosure.editorial_policy_content),
        TrustPage("how-we-make-money", "How We Make Money", disclosure.how_we_money_content),
    ]
    kept = []
    for page in pages:
        if not page.content:
            continue
        if f"{page.path}/index.html" in taken:
            logger.warning("Skipping trust page /%s/ – path already used by site content", page.path)
            continue
        kept.append(page)
    return kept


def render_trust_pages(pages: Sequence[TrustPage], shell: PageShell, markdown: MarkdownRenderer) -> List[GeneratedFile]:
    files = []
    for page in pages:
        body = Markup("<article>\n<h1>{}</h1>\n{}\n</article>").format(page.title, markdown.render(page.content))
        files.append(
            GeneratedFile(
                path=f"{page.path}/index.html",
                content=wrap_in_html_page(page.title, f"{page.title} – {shell.site_title}", body, shell),
            )
        )
    return files


def render_not_found(shell: PageShell) -> str:
    return wrap_in_html_page(
        "Page Not Found", "", render_template("not_found.html", site_title=shell.site_title), shell
    )


# ── Shared setup ────────────────────────────────────────────────────────────

def site_title_for(domain: Domain) -> str:
    return domain.site_title or extract_site_title(domain.domain)


def _markdown_for(request: CompileRequest, cache: Optional[HostnameCache]) -> MarkdownRenderer:
    hostnames = list(request.portfolio_hostnames)
    return MarkdownRenderer(
        current_domain=request.domain.domain,
        cache=cache,
        portfolio_loader=(lambda: hostnames) if hostnames else None,
        portfolio_key=tuple(hostnames),
    )


def _site_files(domain: Domain, stylesheet: str, shell: PageShell) -> List[GeneratedFile]:
    return [
        GeneratedFile(path="styles.css", content=stylesheet),
        GeneratedFile(path="404.html", content=render_not_found(shell)),
        GeneratedFile(path="robots.txt", content=build_robots(domain.domain)),
        GeneratedFile(path="favicon.svg", content=build_favicon(domain.niche)),
        GeneratedFile(path="_headers", content=build_headers()),
    ]


# ── v1: one page per article ────────────────────────────────────────────────

def build_home_page(domain: Domain, site_title: str, articles: Sequence[Article], shell: PageShell, hero: str) -> str:
    niche = (domain.niche or "various topics").replace("_", " ")
    tagline = f"Expert guides about {niche}"
    body = render_template(
        "home.html",
        hero=hero,
        site_title=site_title,
        tagline=tagline,
        schema=build_website_schema(domain.domain, site_title, tagline),
        links=[NavLink(a.title, f"/{a.slug}/") for a in articles],
    )
    return wrap_in_html_page(site_title, tagline, body, shell)


async def compile_articles(request: CompileRequest, cache: Optional[HostnameCache] = None) -> List[GeneratedFile]:
    domain = request.domain
    site_title = site_title_for(domain)
    layout = get_layout_config(domain.template)
    articles = live_articles(request.articles)
    shell = build_page_shell(
        site_title,
        layout,
        request.disclosure,
        [NavLink(a.title, f"/{a.slug}/") for a in articles],
        request.monetization,
        domain.niche,
    )
    markdown = _markdown_for(request, cache)

    def load_citations(article_id: str):
        return request.citations.get(article_id, [])

    def context_for(article: Article) -> RenderContext:
        return RenderContext(
            domain=domain.domain,
            shell=shell,
            disclosure=request.disclosure,
            datasets=request.datasets.get(article.id, ()),
            markdown=markdown,
            load_citations=load_citations,
        )

    pages = await asyncio.gather(
        *(asyncio.to_thread(render_article, article, context_for(article)) for article in articles)
    )

    files = [GeneratedFile(path="index.html", content=build_home_page(domain, site_title, articles, shell, layout.hero))]
    files.extend(
        GeneratedFile(path=f"{article.slug}/index.html", content=html) for article, html in zip(articles, pages)
    )
    apply_internal_linking(files, [LinkTarget(f"/{a.slug}/", a.title) for a in articles])

    for article in articles:
        embed = render_embed_page(article, domain.domain)
        if embed is not None:
            files.append(GeneratedFile(path=f"embed/{article.slug}.html", content=embed))

    files.extend(_site_files(domain, build_article_stylesheet(layout, domain.theme_style), shell))
    trust = trust_pages(request.disclosure, {f.path for f in files})
    files.extend(render_trust_pages(trust, shell, markdown))

    today = datetime.now(timezone.utc).date()
    entries = [SitemapEntry("/", today)]
    entries.extend(SitemapEntry(f"/{a.slug}", _day(a.updated_at or a.published_at, today)) for a in articles)
    entries.extend(SitemapEntry(f"/{p.path}/", today) for p in trust)
    files.append(GeneratedFile(path="sitemap.xml", content=build_sitemap(domain.domain, entries)))
    return files


# ── v2: one page per page definition ────────────────────────────────────────

def _pick(requested: Optional[str], known: Dict, default: str) -> str:
    return requested if requested in known else default


def compile_pages(request: CompileRequest, cache: Optional[HostnameCache] = None) -> List[GeneratedFile]:
    domain = request.domain
    site_title = site_title_for(domain)
    layout = get_layout_config(domain.template)
    pages = published_pages(request.page_definitions)
    register_block_renderers()

    home = next((p for p in pages if p.route == "/"), pages[0] if pages else None)
    resolved = resolve_theme(
        theme=(home.theme if home else None) or domain.theme,
        skin=(home.skin if home else None) or domain.skin,
        theme_style=domain.theme_style,
        vertical=domain.vertical,
        niche=domain.niche,
    )
    markdown = _markdown_for(request, cache)
    monetization = request.monetization
    head_scripts = Markup(monetization.head) if monetization else Markup("")
    body_scripts = Markup(monetization.body) if monetization else Markup("")

    files = []
    for page in pages:
        ctx = BlockContext(
            domain=domain.domain,
            site_title=site_title,
            route=page.route,
            theme=_pick(page.theme, THEMES, resolved.theme),
            skin=_pick(page.skin, SKINS, resolved.skin),
            page_title=page.title,
            page_description=page.meta_description,
            updated_at=page.updated_at,
            head_scripts=head_scripts,
            body_scripts=body_scripts,
            markdown=markdown,
        )
        files.append(GeneratedFile(path=route_to_file_path(page.route), content=assemble_page(page.blocks, ctx)))
    apply_internal_linking(files, [LinkTarget(p.route, p.title or "") for p in pages])

    shell = build_page_shell(site_title, layout, request.disclosure, (), monetization, domain.niche)
    files.extend(_site_files(domain, build_block_stylesheet(layout, resolved.theme, resolved.skin), shell))
    trust = trust_pages(request.disclosure, {f.path for f in files})
    files.extend(render_trust_pages(trust, shell, markdown))

    today = datetime.now(timezone.utc).date()
    entries = [SitemapEntry(p.route, _day(p.updated_at, today)) for p in pages]
    entries.extend(SitemapEntry(f"/{p.path}/", today) for p in trust)
    files.append(GeneratedFile(path="sitemap.xml", content=build_sitemap(domain.domain, entries)))
    return files


# ── Entry point ─────────────────────────────────────────────────────────────

async def compile_site(request: CompileRequest, cache: Optional[HostnameCache] = None) -> CompileResponse:
    """Compile *request* into the full file set for its domain.

    Raises:
        DomainNotFoundError: when the bundle carries no domain record.
    """
    if request.domain is None:
        raise DomainNotFoundError("Domain not found")

    mode = choose_mode(request)
    logger.info("Compiling %s – mode %s", request.domain.domain, mode)
    if mode == "v2":
        files = compile_pages(request, cache)
    else:
        files = await compile_articles(request, cache)

    logger.info("Compiled %s – %d files", request.domain.domain, len(files))
    return CompileResponse(domain=request.domain.domain, mode=mode, file_count=len(files), files=files)
