"""Turn an ordered block list into one complete HTML document."""

from typing import Any, Dict, List, Optional, Sequence

from markupsafe import Markup

from sitegen.blocks.registry import BlockContext, render_block
from sitegen.layouts.themes import THEME_FONT_URLS
from sitegen.models.page import BlockEnvelope
from sitegen.services.html_env import render_template
from sitegen.services.structured_data import build_breadcrumb, json_ld_script

_ENHANCEMENT_JS = r"""<script>
(function(){
  if ('IntersectionObserver' in window) {
    var io = new IntersectionObserver(function(entries) {
      entries.forEach(function(e) {
        if (e.isIntersecting) { e.target.classList.add('is-visible'); io.unobserve(e.target); }
      });
    }, { threshold: 0.08, rootMargin: '0px 0px -40px 0px' });
    document.querySelectorAll('section[data-animate]').forEach(function(s) { io.observe(s); });
  } else {
    document.querySelectorAll('section[data-animate]').forEach(function(s) { s.classList.add('is-visible'); });
  }

  var bar = document.querySelector('.reading-progress');
  if (bar) {
    window.addEventListener('scroll', function() {
      var h = document.documentElement;
      var pct = h.scrollTop / (h.scrollHeight - h.clientHeight) * 100;
      bar.style.width = Math.min(pct, 100) + '%';
    }, { passive: true });
  }

  var btn = document.querySelector('.back-to-top');
  if (btn) {
    window.addEventListener('scroll', function() {
      btn.classList.toggle('visible', window.scrollY > 400);
    }, { passive: true });
    btn.addEventListener('click', function() { window.scrollTo({ top: 0, behavior: 'smooth' }); });
  }

  if ('IntersectionObserver' in window) {
    var cio = new IntersectionObserver(function(entries) {
      entries.forEach(function(e) {
        if (!e.isIntersecting) return;
        cio.unobserve(e.target);
        var target = parseInt(e.target.getAttribute('data-count') || '0', 10);
        if (!target) return;
        var t0 = null;
        function step(ts) {
          if (!t0) t0 = ts;
          var p = Math.min((ts - t0) / 800, 1);
          var ease = 1 - Math.pow(1 - p, 3);
          e.target.textContent = Math.round(target * ease) + (e.target.getAttribute('data-suffix') || '');
          if (p < 1) requestAnimationFrame(step);
        }
        requestAnimationFrame(step);
      });
    }, { threshold: 0.3 });
    document.querySelectorAll('[data-count]').forEach(function(el) { cio.observe(el); });
  }
})();
</script>"""


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def build_page_meta(ctx: BlockContext, page_url: str) -> Markup:
    """Open Graph and Twitter tags for a block page."""
    title = ctx.page_title or ctx.site_title
    description = ctx.page_description or ""
    tags = [
        Markup('<meta property="og:title" content="{}">').format(title),
        Markup('<meta property="og:description" content="{}">').format(description),
        Markup('<meta property="og:url" content="{}">').format(page_url),
        Markup('<meta property="og:type" content="{}">').format("website" if ctx.route == "/" else "article"),
        Markup('<meta property="og:site_name" content="{}">').format(ctx.domain),
        Markup('<meta property="og:locale" content="en_US">'),
        Markup('<meta name="twitter:card" content="summary_large_image">'),
        Markup('<meta name="twitter:title" content="{}">').format(title),
        Markup('<meta name="twitter:description" content="{}">').format(description),
    ]
    if ctx.published_at:
        tags.append(Markup('<meta property="article:published_time" content="{}">').format(_iso(ctx.published_at)))
    if ctx.updated_at:
        tags.append(Markup('<meta property="article:modified_time" content="{}">').format(_iso(ctx.updated_at)))
    return Markup("\n  ").join(tags)


def build_page_structured_data(ctx: BlockContext, canonical_url: str) -> Markup:
    """WebPage (home) or Article JSON-LD followed by a BreadcrumbList."""
    is_home = ctx.route == "/"
    name = ctx.page_title or ctx.site_title
    schema: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "WebPage" if is_home else "Article",
        "name": name,
        "headline": name,
        "description": ctx.page_description or "",
        "url": canonical_url,
        "mainEntityOfPage": {"@type": "WebPage", "@id": canonical_url},
        "inLanguage": "en",
        "author": {"@type": "Organization", "name": ctx.domain},
        "publisher": {"@type": "Organization", "name": ctx.domain},
        "datePublished": _iso(ctx.published_at),
        "dateModified": _iso(ctx.updated_at),
    }
    breadcrumb = build_breadcrumb(ctx.domain) if is_home else build_breadcrumb(
        ctx.domain, ctx.page_title or ctx.route, canonical_url
    )
    return Markup("\n  ").join([json_ld_script(schema), breadcrumb])


def wrap_block(block: BlockEnvelope, html: Markup) -> Markup:
    if block.type in ("Header", "Footer"):
        return Markup('<div data-block-id="{}" data-block-type="{}">{}</div>').format(block.id, block.type, html)
    variant = Markup(' data-block-variant="{}"').format(block.variant) if block.variant else Markup("")
    return Markup('<section data-block-id="{}" data-block-type="{}"{} data-animate>{}</section>').format(
        block.id, block.type, variant, html
    )


def assemble_page(blocks: Sequence[BlockEnvelope], ctx: BlockContext, css_href: str = "/styles.css") -> str:
    """Render *blocks* in order and lay them out in a full document.

    Header and Footer blocks are lifted out of the content flow to frame
    ``<main>``; every other block becomes one ``<section>`` in order.
    """
    header = Markup("")
    footer = Markup("")
    content: List[Markup] = []
    for block in blocks:
        html = wrap_block(block, render_block(block, ctx))
        if block.type == "Header":
            header = html
        elif block.type == "Footer":
            footer = html
        else:
            content.append(html)

    title = ctx.page_title or ctx.site_title
    if ctx.page_title and ctx.page_title != ctx.site_title:
        full_title = f"{title} | {ctx.site_title}"
    else:
        full_title = title

    page_url = f"https://{ctx.domain}{'' if ctx.route == '/' else ctx.route}"
    canonical_url = f"https://{ctx.domain}{ctx.route}"

    return str(
        render_template(
            "block_page.html",
            description=ctx.page_description or "",
            full_title=full_title,
            canonical_url=canonical_url,
            og_meta=build_page_meta(ctx, page_url),
            font_url=THEME_FONT_URLS.get(ctx.theme, THEME_FONT_URLS["clean"]),
            css_href=css_href,
            structured_data=build_page_structured_data(ctx, canonical_url),
            head_scripts=ctx.head_scripts,
            theme=ctx.theme,
            skin=ctx.skin,
            header=header,
            content=Markup("\n").join(content),
            footer=footer,
            enhancement_script=Markup(_ENHANCEMENT_JS),
            body_scripts=ctx.body_scripts,
        )
    )
