"""Structural and editorial block renderers."""

import json
from datetime import datetime, timezone

from markupsafe import Markup

from sitegen.blocks.registry import BlockContext, flag, number, records, text
from sitegen.models.page import BlockEnvelope
from sitegen.services.sanitizer import json_for_script, sanitize_article_html
from sitegen.services.structured_data import json_ld_script
from sitegen.templates.common import script_tag
from sitegen.templates.lead_capture import secure_endpoint

DEFAULT_MEDICAL_DISCLAIMER = (
    "This content is for informational purposes only and is not a substitute for professional medical "
    "advice, diagnosis, or treatment. Always seek the advice of your physician or other qualified health "
    "provider."
)


def _variant(block: BlockEnvelope, default: str) -> str:
    return block.variant or text(block.config, "variant", default)


def _links(entries) -> Markup:
    return Markup(" ").join(
        Markup('<a href="{}">{}</a>').format(text(link, "href", "#"), text(link, "label"))
        for link in entries
        if isinstance(link, dict)
    )


# ── Header / Footer ─────────────────────────────────────────────────────────

def render_header(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    variant = _variant(block, "topbar")
    sticky = Markup(' style="position:sticky;top:0;z-index:50"') if flag(block.config, "sticky", False) else Markup("")
    nav_links = records(block.content, "navLinks")
    nav = Markup("<nav>{}</nav>").format(_links(nav_links)) if nav_links else Markup("")
    return Markup(
        '<header class="header header--{variant}"{sticky}>\n'
        '  <div class="site-container">\n'
        '    <a href="/" class="logo">{name}</a>\n    {nav}\n'
        "  </div>\n</header>"
    ).format(variant=variant, sticky=sticky, name=text(block.content, "siteName", ctx.site_title), nav=nav)


def render_footer(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    content = block.content
    variant = _variant(block, "minimal")
    year = number(content, "copyrightYear") or datetime.now(timezone.utc).year

    inner = Markup("")
    columns = records(content, "columns")
    if variant == "multi-column" and columns:
        inner = Markup('<div class="footer-columns">{}</div>').format(
            Markup("").join(
                Markup('<div class="footer-col"><h4>{}</h4><ul>{}</ul></div>').format(
                    text(col, "title"),
                    Markup("").join(
                        Markup('<li><a href="{}">{}</a></li>').format(text(link, "href", "#"), text(link, "label"))
                        for link in records(col, "links")
                    ),
                )
                for col in columns
            )
        )

    if variant == "newsletter":
        endpoint = secure_endpoint(text(content, "newsletterEndpoint"), f"footer block {block.id}")
        if endpoint:
            inner += Markup(
                '<div class="footer-newsletter">\n  <h4>{}</h4>\n'
                '  <form action="{}" method="POST" class="newsletter-form">\n'
                '    <input type="email" name="email" placeholder="your@email.com" required>\n'
                '    <button type="submit">Subscribe</button>\n  </form>\n</div>'
            ).format(text(content, "newsletterHeadline", "Stay updated"), endpoint)

    disclaimer = text(content, "disclaimerText")
    disclaimer_html = (
        Markup('<div class="footer-disclaimer">{}</div>').format(disclaimer) if disclaimer else Markup("")
    )
    return Markup(
        '<footer class="footer footer--{variant}">\n'
        '  <div class="site-container">\n    {inner}\n    {disclaimer}\n'
        "    <p>&copy; {year} {name}. All rights reserved.</p>\n"
        "  </div>\n</footer>"
    ).format(
        variant=variant,
        inner=inner,
        disclaimer=disclaimer_html,
        year=int(year),
        name=text(content, "siteName", ctx.site_title),
    )


# ── Page content ────────────────────────────────────────────────────────────

def render_hero(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    content = block.content
    badge = text(content, "badge")
    subheading = text(content, "subheading")
    cta_text = text(content, "ctaText")
    cta_url = text(content, "ctaUrl")
    return Markup(
        '<section class="hero hero--{variant}">\n'
        '  <div class="site-container">\n    {badge}\n    <h1>{heading}</h1>\n    {sub}\n    {cta}\n'
        "  </div>\n</section>"
    ).format(
        variant=_variant(block, "centered"),
        badge=Markup('<span class="hero-badge">{}</span>').format(badge) if badge else Markup(""),
        heading=text(content, "heading", ctx.site_title),
        sub=Markup('<p class="hero-sub">{}</p>').format(subheading) if subheading else Markup(""),
        cta=(
            Markup('<a href="{}" class="cta-button hero-cta">{}</a>').format(cta_url, cta_text)
            if cta_text and cta_url
            else Markup("")
        ),
    )


def render_article_body(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    title = text(block.content, "title")
    print_button = Markup("")
    if ctx.route != "/":
        print_button = Markup('<button type="button" class="print-btn" onclick="window.print()">Print</button>')
    return Markup('<article class="article-body">\n  {}\n  {}\n  {}\n</article>').format(
        Markup("<h1>{}</h1>").format(title) if title else Markup(""),
        print_button,
        ctx.render_markdown(text(block.content, "markdown")),
    )


def render_faq(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    entries = [e for e in records(block.content, "items") if text(e, "question")]
    if not entries:
        return Markup("")
    open_first = flag(block.config, "openFirst", False)
    faq_html = Markup("\n").join(
        Markup(
            '<details class="faq-item"{}>\n'
            '  <summary class="faq-question">{}</summary>\n'
            '  <div class="faq-answer">{}</div>\n</details>'
        ).format(
            Markup(" open") if i == 0 and open_first else Markup(""),
            text(entry, "question"),
            sanitize_article_html(text(entry, "answer")),
        )
        for i, entry in enumerate(entries)
    )
    json_ld = Markup("")
    if flag(block.config, "emitJsonLd", True):
        json_ld = json_ld_script(
            {
                "@context": "https://schema.org",
                "@type": "FAQPage",
                "mainEntity": [
                    {
                        "@type": "Question",
                        "name": text(entry, "question"),
                        "acceptedAnswer": {"@type": "Answer", "text": text(entry, "answer")},
                    }
                    for entry in entries
                ],
            }
        )
    return Markup(
        '<section class="faq-section">\n  <h2>Frequently Asked Questions</h2>\n'
        '  <div class="faq-list">\n{}\n  </div>\n  {}\n</section>'
    ).format(faq_html, json_ld)


_SCROLL_CTA_JS = r"""
  var cta = document.getElementById(%(cta_id)s);
  if (!cta) return;
  var sentinel = cta.previousElementSibling;
  if (!sentinel || !('IntersectionObserver' in window)) { cta.style.display = ''; return; }
  var observer = new IntersectionObserver(function(entries) {
    if (entries[0].isIntersecting) {
      cta.style.display = '';
      requestAnimationFrame(function() { cta.classList.add('scroll-cta-visible'); });
      observer.disconnect();
    }
  }, { threshold: 0.1 });
  observer.observe(sentinel);
  cta.querySelector('.scroll-cta-dismiss').addEventListener('click', function() {
    cta.classList.remove('scroll-cta-visible');
    setTimeout(function() { cta.style.display = 'none'; }, 300);
  });
"""


def _render_cta(block: BlockEnvelope, scroll: bool) -> Markup:
    content = block.content
    cta_text = text(content, "text")
    if not cta_text:
        return Markup("")
    label = text(content, "buttonLabel", "Learn More")
    url = text(content, "buttonUrl", "#")
    style = text(block.config, "style", "bar")

    if not scroll:
        return Markup(
            '<section class="cta-section cta-section--{style}">\n'
            '  <div class="site-container">\n'
            '    <p class="cta-text">{text}</p>\n'
            '    <a href="{url}" class="cta-button">{label}</a>\n'
            "  </div>\n</section>"
        ).format(style=style, text=cta_text, url=url, label=label)

    cta_id = f"scroll-cta-{block.id}"
    return Markup(
        '<div class="scroll-cta-sentinel" aria-hidden="true"></div>\n'
        '<div class="scroll-cta scroll-cta-{style}" id="{id}" role="complementary" '
        'aria-label="Call to action" style="display:none">\n'
        '  <div class="scroll-cta-inner">\n'
        '    <p class="scroll-cta-text">{text}</p>\n'
        '    <a href="{url}" class="scroll-cta-btn">{label}</a>\n'
        '    <button class="scroll-cta-dismiss" aria-label="Dismiss" type="button">&times;</button>\n'
        "  </div>\n</div>\n{script}"
    ).format(
        style=style,
        id=cta_id,
        text=cta_text,
        url=url,
        label=label,
        script=script_tag(_SCROLL_CTA_JS % {"cta_id": json_for_script(json.dumps(cta_id))}),
    )


def render_cta_banner(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    return _render_cta(block, scroll=text(block.config, "trigger", "immediate") == "scroll")


def render_scroll_cta(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    return _render_cta(block, scroll=True)


# ── Trust ───────────────────────────────────────────────────────────────────

def render_citations(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    sources = [s for s in records(block.content, "sources") if text(s, "title")]
    if not sources:
        return Markup("")

    def source_item(source) -> Markup:
        url = text(source, "url")
        href = (
            Markup(' href="{}" rel="nofollow noopener" target="_blank"').format(url) if url else Markup("")
        )
        publisher = text(source, "publisher")
        retrieved = text(source, "retrievedAt")
        usage = text(source, "usage")
        return Markup('<li class="data-source-item"><a{}>{}</a>{}{}{}</li>').format(
            href,
            text(source, "title"),
            Markup(" ({})").format(publisher) if publisher else Markup(""),
            Markup(" <small>(Retrieved {})</small>").format(retrieved) if retrieved else Markup(""),
            Markup(' <span class="data-usage">{}</span>').format(usage) if usage else Markup(""),
        )

    return Markup('<section class="data-sources">\n  <h2>Data Sources</h2>\n  <ul>{}</ul>\n</section>').format(
        Markup("\n").join(source_item(s) for s in sources)
    )


_FRESHNESS = {
    "stale": ("freshness-red", "Needs update"),
    "review-pending": ("freshness-yellow", "Review pending"),
}


def render_last_updated(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    date = text(block.content, "date")
    if not date:
        return Markup("")
    status = text(block.content, "status", "fresh")
    css_class, label = _FRESHNESS.get(status, ("freshness-green", f"Verified {date}"))
    reviewed_by = text(block.content, "reviewedBy")
    reviewer = (
        Markup('<span class="reviewed-by">Reviewed by {}</span>').format(reviewed_by) if reviewed_by else Markup("")
    )
    return Markup('<div class="freshness-badge {}"><span class="freshness-dot"></span>{}</div>{}').format(
        css_class, label, reviewer
    )


def render_trust_badges(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    badges = [b for b in records(block.content, "badges") if text(b, "label")]
    if not badges:
        return Markup("")
    cards = []
    for badge in badges:
        description = text(badge, "description")
        if description:
            cards.append(
                Markup('<div class="trust-badge" data-tooltip="{}"><strong>{}</strong><p>{}</p></div>').format(
                    description, text(badge, "label"), description
                )
            )
        else:
            cards.append(Markup('<div class="trust-badge"><strong>{}</strong></div>').format(text(badge, "label")))
    return Markup('<section class="trust-badges"><div class="trust-badges-row">{}</div></section>').format(
        Markup("").join(cards)
    )


def render_medical_disclaimer(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    html = Markup(
        '<div class="medical-disclaimer" role="alert">\n  <strong>Medical Disclaimer:</strong> {}\n</div>'
    ).format(text(block.content, "disclaimerText", DEFAULT_MEDICAL_DISCLAIMER))
    if flag(block.config, "showDoctorCta", True):
        html += Markup(
            '<div class="cta-doctor">\n  <h2>Talk to Your Doctor</h2>\n'
            "  <p>The information on this page is not a substitute for professional medical guidance. "
            "Please consult a qualified healthcare provider before making any health-related decisions.</p>\n"
            "</div>"
        )
    return html


# ── Lists ───────────────────────────────────────────────────────────────────

_CHECKLIST_JS = r"""
  var root = document.getElementById(%(root_id)s);
  if (!root) return;
  var checks = root.querySelectorAll('.checklist-checkbox');
  var progress = root.querySelector('.checklist-progress');
  function update() {
    var done = 0;
    checks.forEach(function(c) { if (c.checked) done++; });
    if (progress) progress.textContent = done + ' of ' + checks.length + ' completed';
  }
  checks.forEach(function(c) { c.addEventListener('change', update); });
"""


def render_checklist(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    steps = [s for s in records(block.content, "steps") if text(s, "heading")]
    if not steps:
        return Markup("")
    interactive = flag(block.config, "interactive", True)
    root_id = f"checklist-{block.id}"

    progress = Markup("")
    if flag(block.config, "showProgress", True):
        progress = Markup('<div class="checklist-progress">0 of {} completed</div>').format(len(steps))

    rows = []
    for i, step in enumerate(steps):
        checkbox_id = f"{root_id}-{i}"
        if interactive:
            marker = Markup('<input type="checkbox" id="{}" class="checklist-checkbox">').format(checkbox_id)
        else:
            marker = Markup('<span class="checklist-number">{}</span>').format(i + 1)
        rows.append(
            Markup(
                '<li class="checklist-item">\n  <label for="{}">\n    {}\n'
                '    <div class="checklist-content">\n      <h3>{}</h3>\n      <div>{}</div>\n    </div>\n'
                "  </label>\n</li>"
            ).format(checkbox_id, marker, text(step, "heading"), sanitize_article_html(text(step, "body")))
        )

    script = Markup("")
    if interactive:
        script = script_tag(_CHECKLIST_JS % {"root_id": json_for_script(json.dumps(root_id))})
    return Markup(
        '<section class="checklist-section" id="{}">\n  {}\n  <ol class="checklist-list">{}</ol>\n  {}\n</section>'
    ).format(root_id, progress, Markup("\n").join(rows), script)


def render_author_bio(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    name = text(block.content, "name")
    if not name:
        return Markup("")
    title = text(block.content, "title")
    return Markup('<aside class="author-bio">\n  <h3>{}</h3>\n  {}\n  <p>{}</p>\n</aside>').format(
        name,
        Markup('<span class="author-title">{}</span>').format(title) if title else Markup(""),
        text(block.content, "bio"),
    )


def render_sidebar(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    sections = records(block.content, "sections")
    if not sections:
        return Markup("")
    return Markup('<aside class="sidebar">{}</aside>').format(
        Markup("").join(
            Markup('<div class="sidebar-section"><h4>{}</h4>{}</div>').format(
                text(s, "title"), sanitize_article_html(text(s, "html"))
            )
            for s in sections
        )
    )


RENDERERS = {
    "Header": render_header,
    "Footer": render_footer,
    "Hero": render_hero,
    "ArticleBody": render_article_body,
    "FAQ": render_faq,
    "CTABanner": render_cta_banner,
    "ScrollCTA": render_scroll_cta,
    "CitationBlock": render_citations,
    "LastUpdated": render_last_updated,
    "TrustBadges": render_trust_badges,
    "MedicalDisclaimer": render_medical_disclaimer,
    "Checklist": render_checklist,
    "StepByStep": render_checklist,
    "AuthorBio": render_author_bio,
    "Sidebar": render_sidebar,
}
