"""Interactive and data-driven block renderers.

Blocks that carry the same payload as a content type (comparison, calculator,
cost guide, lead form, geo, map, wizard) validate it into the typed model and
reuse that content type's builders.  The rest read their loose payload with
the accessors from :mod:`sitegen.blocks.registry`.
"""

import json
import math
import re

from markupsafe import Markup

from sitegen.blocks.registry import BlockContext, flag, items, mapping, number, records, text
from sitegen.config import SAFE_SLUG_PATTERN
from sitegen.models.article import (
    CalculatorConfig,
    ComparisonData,
    CostGuideData,
    GeoData,
    LeadField,
    LeadGenConfig,
    WizardConfig,
)
from sitegen.models.page import BlockEnvelope
from sitegen.services.sanitizer import json_for_script, sanitize_article_html
from sitegen.services.scoring import round_half_up
from sitegen.templates.calculator import build_calculator_html, build_calculator_script
from sitegen.templates.common import number_attr, script_tag
from sitegen.templates.comparison import build_comparison_table, build_sort_script, star_string
from sitegen.templates.cost_guide import CostRangeView, build_cost_ranges, build_factors_grid, compute_average
from sitegen.templates.geo import build_geo_blocks
from sitegen.templates.interactive_map import MapEntry, build_map_section
from sitegen.templates.lead_capture import build_lead_form, build_lead_script, secure_endpoint
from sitegen.templates.wizard import build_wizard_html, build_wizard_script, wizard_mode

_SAFE_IMAGE_RE = re.compile(r"^(https?://|/)[^'\"()]+$")


def _heading(value: str) -> Markup:
    return Markup('<h2 class="section-heading">{}</h2>').format(value) if value else Markup("")


def _stars(rating: float) -> Markup:
    return Markup("{} {}/5").format(star_string(rating), number_attr(rating))


def _visit_link(url: str, css_class: str, label: str = "Visit") -> Markup:
    if not url:
        return Markup("")
    return Markup('<a href="{}" class="cta-button {}" rel="nofollow noopener sponsored" target="_blank">{}</a>').format(
        url, css_class, label
    )


# ── Reused content-type widgets ─────────────────────────────────────────────

def render_comparison_table(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    data = ComparisonData.model_validate(block.content)
    if not data.options or not data.columns:
        return Markup("")
    verdict = Markup("")
    if data.verdict:
        verdict = Markup('<div class="comparison-verdict"><strong>Our Verdict:</strong> {}</div>').format(data.verdict)
    return Markup('<section class="comparison-section">\n  {}\n  {}\n  {}\n  {}\n</section>').format(
        _heading(text(block.content, "title")),
        build_comparison_table(data),
        verdict,
        build_sort_script(data.default_sort),
    )


def render_quote_calculator(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    config = CalculatorConfig.model_validate(block.content)
    if not config.inputs:
        return Markup("")
    prefix = f"{block.id}-"
    heading = text(block.content, "heading") or text(block.config, "heading")
    return Markup("{}\n{}\n{}").format(
        _heading(heading),
        build_calculator_html(config, id_prefix=prefix),
        build_calculator_script(config, id_prefix=prefix, domain=ctx.domain),
    )


def render_cost_breakdown(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    data = CostGuideData.model_validate(block.content)
    if not data.ranges:
        return Markup("")
    ranges = [
        CostRangeView(
            r.low,
            r.average if r.average is not None else compute_average(r.data_points, r.low, r.high),
            r.high,
            r.label,
        )
        for r in data.ranges
    ]
    return Markup('<section class="cost-section">\n  {}\n  {}\n  {}\n</section>').format(
        _heading(text(block.content, "title")), build_cost_ranges(ranges), build_factors_grid(data.factors)
    )


def render_lead_form(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    content = block.content
    fields = [LeadField.model_validate(f) for f in records(content, "fields")]
    if not fields:
        return Markup("")
    raw_endpoint = text(block.config, "endpoint")
    config = LeadGenConfig(
        fields=fields,
        consent_text=text(content, "consentText"),
        endpoint=secure_endpoint(raw_endpoint if raw_endpoint != "#" else "", f"{ctx.route} block {block.id}"),
        success_message=text(content, "successMessage", "Thank you! We'll be in touch shortly."),
        privacy_policy_url=text(content, "privacyUrl") or text(content, "privacyPolicyUrl") or None,
    )
    disclosure = text(content, "disclosureAboveFold")
    subheading = text(content, "subheading")
    heading = text(content, "heading")
    return Markup('<section class="lead-section">\n  {}\n  {}\n  {}\n  {}\n  {}\n</section>').format(
        Markup('<div class="disclosure-above">{}</div>').format(disclosure) if disclosure else Markup(""),
        Markup('<h2 class="lead-heading">{}</h2>').format(heading) if heading else Markup(""),
        Markup('<p class="lead-subheading">{}</p>').format(subheading) if subheading else Markup(""),
        build_lead_form(config),
        build_lead_script(config),
    )


def render_geo_content(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    return build_geo_blocks(GeoData.model_validate(block.content))


def render_interactive_map(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    regions = mapping(block.content, "regions")
    entries = [
        MapEntry(key, text(region, "label", key.upper()), sanitize_article_html(text(region, "content")))
        for key, region in regions.items()
        if isinstance(region, dict)
    ]
    if not entries:
        return Markup("")
    return build_map_section(
        entries,
        fallback=text(block.content, "fallback"),
        default_key=text(block.content, "defaultRegion") or None,
        show_tiles=flag(block.config, "showTileGrid", True),
        show_dropdown=flag(block.config, "showDropdown", True),
    )


def render_wizard(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    config = WizardConfig.model_validate(block.content)
    if not config.steps:
        return Markup("")
    mode = wizard_mode(text(block.config, "mode", "wizard"))
    lead_endpoint = None
    if config.collect_lead is not None:
        lead_endpoint = secure_endpoint(config.collect_lead.endpoint, f"{ctx.route} block {block.id}")
    return Markup('<section class="wizard-section">\n{}\n{}\n</section>').format(
        build_wizard_html(config, mode, lead_endpoint), build_wizard_script(config, mode, domain=ctx.domain)
    )


# ── Data display ────────────────────────────────────────────────────────────

_CHIP_FILTER_JS = r"""
  var root = document.getElementById(%(root_id)s);
  if (!root) return;
  var chips = root.querySelectorAll('.infographic-chip');
  var cards = root.querySelectorAll('.infographic-card');
  chips.forEach(function(chip) {
    chip.addEventListener('click', function() {
      chips.forEach(function(c) { c.classList.remove('active'); });
      chip.classList.add('active');
      var group = chip.dataset.group;
      cards.forEach(function(card) {
        card.style.display = (group === 'all' || card.dataset.group === group) ? '' : 'none';
      });
    });
  });
"""

_TRENDS = {"up": ("↑", "stat-trend--up"), "down": ("↓", "stat-trend--down"), "flat": ("→", "stat-trend--flat")}
_RING_RADIUS = 36


def render_stat_grid(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    stats = [s for s in records(block.content, "items") if text(s, "title")]
    if not stats:
        return Markup("")
    root_id = f"stat-grid-{block.id}"
    groups = list(dict.fromkeys(text(s, "group", "General") for s in stats))
    filterable = flag(block.config, "filterable", True) and len(groups) > 1
    circumference = round_half_up(2 * math.pi * _RING_RADIUS)

    cards = []
    for stat in stats:
        value = number(stat, "metricValue") or 0
        pct = max(0, min(100, round_half_up(value))) if math.isfinite(value) else 0
        offset = round_half_up(circumference * (1 - pct / 100))
        icon = text(stat, "icon")
        trend = _TRENDS.get(text(stat, "trend"))
        cards.append(
            Markup(
                '<div class="infographic-card" data-group="{group}">\n  {icon}\n'
                '  <div class="stat-ring-wrap">\n'
                '    <svg class="stat-ring" viewBox="0 0 80 80" width="80" height="80">\n'
                '      <circle cx="40" cy="40" r="{r}" fill="none" stroke="var(--color-border,#e2e8f0)" stroke-width="6"/>\n'
                '      <circle class="stat-ring-fill" cx="40" cy="40" r="{r}" fill="none" '
                'stroke="var(--color-accent,#2563eb)" stroke-width="6" stroke-linecap="round" '
                'stroke-dasharray="{circ}" stroke-dashoffset="{offset}" transform="rotate(-90 40 40)"/>\n'
                "    </svg>\n"
                '    <span class="stat-ring-value" data-count="{pct}" data-suffix="%">{pct}%</span>\n'
                "  </div>\n"
                "  <h3>{title} {trend}</h3>\n"
                '  <p class="infographic-summary">{summary}</p>\n'
                '  <div class="infographic-meter">\n'
                '    <span class="infographic-meter-label">{label}</span>\n'
                '    <span data-count="{pct}" data-suffix="%">{pct}%</span>\n'
                "  </div>\n"
                '  <div class="infographic-bar"><span style="width:{pct}%"></span></div>\n'
                "</div>"
            ).format(
                group=text(stat, "group", "General"),
                icon=Markup('<span class="stat-icon">{}</span>').format(icon) if icon else Markup(""),
                r=_RING_RADIUS,
                circ=circumference,
                offset=offset,
                pct=pct,
                title=text(stat, "title"),
                trend=Markup('<span class="stat-trend {}">{}</span>').format(trend[1], trend[0]) if trend else Markup(""),
                summary=text(stat, "summary"),
                label=text(stat, "metricLabel"),
            )
        )

    chips = Markup("")
    script = Markup("")
    if filterable:
        chips = Markup('<div class="infographic-chips">\n  {}\n  {}\n</div>').format(
            Markup('<button type="button" class="infographic-chip active" data-group="all">All</button>'),
            Markup("\n  ").join(
                Markup('<button type="button" class="infographic-chip" data-group="{}">{}</button>').format(g, g)
                for g in groups
            ),
        )
        script = script_tag(_CHIP_FILTER_JS % {"root_id": json_for_script(json.dumps(root_id))})
    return Markup(
        '<section class="infographic-shell" id="{}">\n  {}\n'
        '  <div class="infographic-toolbar">{}</div>\n'
        '  <div class="infographic-grid">{}</div>\n  {}\n</section>'
    ).format(root_id, _heading(text(block.content, "title")), chips, Markup("\n").join(cards), script)


_TABLE_SORT_JS = r"""
  var table = document.getElementById(%(table_id)s);
  if (!table) return;
  table.querySelectorAll('th[data-sort-col]').forEach(function(th) {
    th.addEventListener('click', function() {
      var col = parseInt(th.dataset.sortCol, 10);
      var tbody = table.querySelector('tbody');
      var rows = Array.prototype.slice.call(tbody.querySelectorAll('tr'));
      var asc = th.dataset.sortDir !== 'asc';
      th.dataset.sortDir = asc ? 'asc' : 'desc';
      rows.sort(function(a, b) {
        var ac = a.children[col], bc = b.children[col];
        var av = ac ? (ac.dataset.value || ac.textContent || '') : '';
        var bv = bc ? (bc.dataset.value || bc.textContent || '') : '';
        var an = parseFloat(av), bn = parseFloat(bv);
        if (!isNaN(an) && !isNaN(bn)) return asc ? an - bn : bn - an;
        return asc ? av.localeCompare(bv) : bv.localeCompare(av);
      });
      rows.forEach(function(r) { tbody.appendChild(r); });
    });
  });
"""


def render_data_table(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    headers = [str(h) for h in items(block.content, "headers")]
    rows = [row for row in items(block.content, "rows") if isinstance(row, list)]
    if not headers or not rows:
        return Markup("")
    sortable = flag(block.config, "sortable", True)
    table_id = f"data-table-{block.id}"

    head_cells = []
    for index, header in enumerate(headers):
        if sortable:
            head_cells.append(
                Markup(
                    '<th scope="col" data-sort-col="{}" role="button" tabindex="0">{} '
                    '<span class="sort-indicator">↕</span></th>'
                ).format(index, header)
            )
        else:
            head_cells.append(Markup('<th scope="col">{}</th>').format(header))
    body_rows = Markup("\n").join(
        Markup("<tr>{}</tr>").format(
            Markup("").join(
                Markup('<td data-value="{}">{}</td>').format(cell, cell)
                for cell in (number_attr(c) if isinstance(c, (int, float)) and not isinstance(c, bool) else str(c) for c in row)
            )
        )
        for row in rows
    )
    caption = text(block.content, "caption")
    script = script_tag(_TABLE_SORT_JS % {"table_id": json_for_script(json.dumps(table_id))}) if sortable else Markup("")
    return Markup(
        '<section class="data-table-section">\n  {heading}\n'
        '  <div class="data-table-wrapper">\n'
        '    <table class="data-table" id="{id}">{caption}<thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>\n'
        "  </div>\n  {script}\n</section>"
    ).format(
        heading=_heading(text(block.content, "title")),
        id=table_id,
        caption=Markup("<caption>{}</caption>").format(caption) if caption else Markup(""),
        head=Markup("").join(head_cells),
        body=body_rows,
        script=script,
    )


# ── Reviews and rankings ────────────────────────────────────────────────────

def _string_list(data, key):
    return [str(entry) for entry in items(data, key) if isinstance(entry, (str, int, float))]


def _pros_cons(data, prefix: str) -> Markup:
    html = Markup("")
    for key, heading, icon in (("pros", "Pros", "✓"), ("cons", "Cons", "✗")):
        entries = _string_list(data, key)
        if not entries:
            continue
        css = key[:-1]
        html += Markup('<div class="{}{}"><h4 class="{}-heading">{} {}</h4><ul>{}</ul></div>').format(
            prefix,
            key,
            key,
            icon,
            heading,
            Markup("").join(
                Markup('<li><span class="{}-icon">{}</span> {}</li>').format(css, icon, entry) for entry in entries
            ),
        )
    return html


def render_pros_cons_card(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    content = block.content
    name = text(content, "name")
    if not name:
        return Markup("")
    rating = number(content, "rating")
    badge = text(content, "badge")
    summary = text(content, "summary")
    return Markup(
        '<div class="review-card">\n'
        '  <div class="review-card-header">\n    <h3>{name}</h3>\n    {badge}\n  </div>\n'
        "  {rating}\n  {summary}\n"
        '  <div class="pros-cons">{lists}</div>\n  {cta}\n</div>'
    ).format(
        name=name,
        badge=Markup('<span class="review-badge">{}</span>').format(badge) if badge else Markup(""),
        rating=Markup('<div class="review-rating">{}</div>').format(_stars(rating)) if rating is not None else Markup(""),
        summary=Markup('<p class="review-summary">{}</p>').format(summary) if summary else Markup(""),
        lists=_pros_cons(content, ""),
        cta=_visit_link(text(content, "url"), "review-cta", "Visit Site"),
    )


_MEDALS = {1: " ranking-gold", 2: " ranking-silver", 3: " ranking-bronze"}


def render_ranking_list(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    entries = [e for e in records(block.content, "items") if text(e, "name")]
    if not entries:
        return Markup("")
    rows = []
    for position, entry in enumerate(entries, start=1):
        rank = int(number(entry, "rank") or position)
        rating = number(entry, "rating")
        score = number(entry, "score")
        badge = text(entry, "badge")
        rows.append(
            Markup(
                '<li class="ranking-item{medal}">\n  <span class="ranking-number">{rank}</span>\n'
                '  <div class="ranking-content">\n'
                '    <div class="ranking-header">\n      <h3>{name}</h3>\n      {badge}\n    </div>\n'
                "    {rating}\n    {score}\n    <p>{description}</p>\n    {cta}\n"
                "  </div>\n</li>"
            ).format(
                medal=_MEDALS.get(rank, ""),
                rank=rank,
                name=text(entry, "name"),
                badge=Markup('<span class="ranking-badge">{}</span>').format(badge) if badge else Markup(""),
                rating=(
                    Markup('<div class="ranking-rating">{}</div>').format(_stars(rating))
                    if rating is not None
                    else Markup("")
                ),
                score=(
                    Markup(
                        '<div class="ranking-score-bar"><div class="ranking-score-fill" style="width:{}%"></div></div>'
                    ).format(number_attr(max(0, min(score, 100))))
                    if score is not None
                    else Markup("")
                ),
                description=text(entry, "description"),
                cta=_visit_link(text(entry, "url"), "ranking-cta"),
            )
        )
    return Markup('<section class="ranking-section">\n  {}\n  <ol class="ranking-list">{}</ol>\n</section>').format(
        _heading(text(block.content, "title")), Markup("\n").join(rows)
    )


def _vs_side(item, is_winner: bool) -> Markup:
    rating = number(item, "rating")
    return Markup(
        '<div class="vs-side{winner_class}">\n'
        '  <div class="vs-side-header">\n    <h3>{name}</h3>\n    {winner}\n  </div>\n'
        "  {rating}\n  <p>{description}</p>\n  {lists}\n  {cta}\n</div>"
    ).format(
        winner_class=" vs-side--winner" if is_winner else "",
        name=text(item, "name"),
        winner=Markup('<span class="vs-winner-badge">Winner</span>') if is_winner else Markup(""),
        rating=Markup('<div class="vs-rating">{}</div>').format(_stars(rating)) if rating is not None else Markup(""),
        description=text(item, "description"),
        lists=_pros_cons(item, "vs-"),
        cta=_visit_link(text(item, "url"), "vs-cta"),
    )


def render_vs_card(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    item_a = mapping(block.content, "itemA")
    item_b = mapping(block.content, "itemB")
    if not item_a or not item_b:
        return Markup("")
    a_rating = number(item_a, "rating") or 0
    b_rating = number(item_b, "rating") or 0
    verdict = text(block.content, "verdict")
    return Markup(
        '<section class="vs-card">\n  <div class="vs-grid">\n    {a}\n'
        '    <div class="vs-divider"><span>VS</span></div>\n    {b}\n  </div>\n  {verdict}\n</section>'
    ).format(
        a=_vs_side(item_a, a_rating > b_rating),
        b=_vs_side(item_b, b_rating > a_rating),
        verdict=(
            Markup('<div class="comparison-verdict"><strong>Verdict:</strong> {}</div>').format(verdict)
            if verdict
            else Markup("")
        ),
    )


def render_testimonial_grid(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    testimonials = [t for t in records(block.content, "testimonials") if text(t, "quote")]
    if not testimonials:
        return Markup("")
    cards = []
    for entry in testimonials:
        author = text(entry, "author", "Anonymous")
        initials = "".join(word[0].upper() for word in author.split()[:2])
        rating = number(entry, "rating")
        title = text(entry, "title")
        cards.append(
            Markup(
                '<div class="testimonial-card">\n  {rating}\n'
                '  <blockquote class="testimonial-quote"><span class="testimonial-mark">"</span>{quote}</blockquote>\n'
                '  <div class="testimonial-author">\n'
                '    <span class="testimonial-avatar">{initials}</span>\n'
                '    <div class="testimonial-info">\n      <cite>{author} {verified}</cite>\n      {title}\n    </div>\n'
                "  </div>\n</div>"
            ).format(
                rating=(
                    Markup('<div class="testimonial-rating">{}</div>').format(star_string(rating))
                    if rating is not None
                    else Markup("")
                ),
                quote=text(entry, "quote"),
                initials=initials,
                author=author,
                verified=(
                    Markup('<span class="testimonial-verified" title="Verified">✓</span>')
                    if flag(entry, "verified", False)
                    else Markup("")
                ),
                title=Markup('<span class="testimonial-title">{}</span>').format(title) if title else Markup(""),
            )
        )
    return Markup('<section class="testimonial-section">\n  {}\n  <div class="testimonial-grid">{}</div>\n</section>').format(
        _heading(text(block.content, "heading")), Markup("\n").join(cards)
    )


def render_pricing_table(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    plans = [p for p in records(block.content, "plans") if text(p, "name")]
    if not plans:
        return Markup("")
    cards = []
    for plan in plans:
        features = []
        for feature in _string_list(plan, "features"):
            excluded = feature.startswith("✗ ") or feature.startswith("x ")
            features.append(
                Markup('<li class="{}"><span class="pricing-check">{}</span> {}</li>').format(
                    "pricing-feature--excluded" if excluded else "",
                    "✗" if excluded else "✓",
                    feature[2:] if excluded else feature,
                )
            )
        badge = text(plan, "badge")
        period = text(plan, "period")
        description = text(plan, "description")
        cta_text = text(plan, "ctaText")
        cta_url = text(plan, "ctaUrl")
        cards.append(
            Markup(
                '<div class="pricing-card{highlight}">\n  {badge}\n  <h3>{name}</h3>\n'
                '  <div class="pricing-price">{price}{period}</div>\n  {description}\n'
                '  <ul class="pricing-features">{features}</ul>\n  {cta}\n</div>'
            ).format(
                highlight=" pricing-highlighted" if flag(plan, "highlighted", False) else "",
                badge=Markup('<span class="pricing-badge">{}</span>').format(badge) if badge else Markup(""),
                name=text(plan, "name"),
                price=text(plan, "price"),
                period=Markup('<span class="pricing-period">/{}</span>').format(period) if period else Markup(""),
                description=(
                    Markup('<p class="pricing-desc">{}</p>').format(description) if description else Markup("")
                ),
                features=Markup("").join(features),
                cta=(
                    Markup('<a href="{}" class="cta-button pricing-cta">{}</a>').format(cta_url, cta_text)
                    if cta_text and cta_url
                    else Markup("")
                ),
            )
        )
    subheading = text(block.content, "subheading")
    return Markup('<section class="pricing-section">\n  {}\n  {}\n  <div class="pricing-grid">{}</div>\n</section>').format(
        _heading(text(block.content, "heading")),
        Markup('<p class="section-subheading">{}</p>').format(subheading) if subheading else Markup(""),
        Markup("\n").join(cards),
    )


# ── Downloads, embeds and link grids ────────────────────────────────────────

_PDF_GATE_JS = r"""
  var root = document.getElementById(%(root_id)s);
  if (!root) return;
  var form = root.querySelector('.pdf-gate-form');
  var link = root.querySelector('.pdf-download-btn');
  if (!form || !link) return;
  form.addEventListener('submit', function(e) {
    e.preventDefault();
    form.style.display = 'none';
    link.style.display = '';
  });
"""


def render_pdf_download(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    article_id = text(block.content, "articleId")
    pdf_url = text(block.content, "url")
    if not pdf_url and article_id:
        pdf_url = f"/api/articles/{article_id}/pdf?type={text(block.config, 'type', 'article')}"
    if not pdf_url:
        return Markup("")
    button = text(block.content, "buttonText", "Download PDF")
    description = text(block.content, "description")
    desc_html = Markup('<p class="pdf-desc">{}</p>').format(description) if description else Markup("")

    if not flag(block.config, "gated", False):
        return Markup(
            '<div class="pdf-download">\n  <span class="pdf-icon">📄</span>\n'
            '  <div class="pdf-content">\n    {}\n'
            '    <a href="{}" class="pdf-download-btn" download>{}</a>\n  </div>\n</div>'
        ).format(desc_html, pdf_url, button)

    root_id = f"pdf-gate-{block.id}"
    return Markup(
        '<div class="pdf-download" id="{root}">\n  <span class="pdf-icon">📄</span>\n'
        '  <div class="pdf-content">\n    {desc}\n'
        '    <p class="pdf-gate-text">Enter your email to download:</p>\n'
        '    <form class="pdf-gate-form">\n'
        '      <input type="email" name="email" placeholder="your@email.com" required>\n'
        '      <button type="submit">{button}</button>\n    </form>\n'
        '    <a href="{url}" class="pdf-download-btn" style="display:none" download>{button}</a>\n'
        "  </div>\n</div>\n{script}"
    ).format(
        root=root_id,
        desc=desc_html,
        button=button,
        url=pdf_url,
        script=script_tag(_PDF_GATE_JS % {"root_id": json_for_script(json.dumps(root_id))}),
    )


def render_embed_widget(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    title = text(block.content, "title", "Widget")
    slug = text(block.content, "slug") or text(block.content, "sourceBlockId")
    title_html = Markup('<h3 class="embed-title">{}</h3>').format(title)
    if not slug or not SAFE_SLUG_PATTERN.match(slug):
        return Markup(
            '<div class="embed-widget">{}<p class="embed-placeholder">Embed widget: no source configured</p></div>'
        ).format(title_html)
    return Markup(
        '<div class="embed-widget">\n  {title}\n'
        '  <div class="embed-container" style="max-width:{width}">\n'
        '    <iframe src="/embed/{slug}.html" loading="lazy" title="{title_attr}" '
        'style="width:100%;height:{height};border:none" allowfullscreen '
        'sandbox="allow-scripts allow-same-origin allow-forms"></iframe>\n'
        "  </div>\n</div>"
    ).format(
        title=title_html,
        width=text(block.config, "width", "100%"),
        slug=slug,
        title_attr=title,
        height=text(block.config, "height", "600px"),
    )


def render_resource_grid(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    resources = [r for r in records(block.content, "items") if text(r, "title")]
    if not resources:
        return Markup("")
    cards = Markup("\n").join(
        Markup(
            '<a href="{}" class="resource-card">\n  <span class="resource-icon">{}</span>\n'
            '  <h3 class="resource-title">{}</h3>\n  <p class="resource-desc">{}</p>\n</a>'
        ).format(text(r, "href", "#"), text(r, "icon"), text(r, "title"), text(r, "description"))
        for r in resources
    )
    return Markup(
        '<section class="resource-grid-section">\n'
        '  <div class="resource-grid-banner">\n    <h2>{}</h2>\n  </div>\n'
        '  <div class="site-container">\n    <div class="resource-grid">{}</div>\n  </div>\n</section>'
    ).format(text(block.content, "heading", "More Resources"), cards)


def render_latest_articles(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    articles = [a for a in records(block.content, "articles") if text(a, "title")]
    if not articles:
        return Markup("")
    cards = []
    for article in articles:
        image = text(article, "image")
        if image and _SAFE_IMAGE_RE.match(image):
            image_html = Markup('<div class="article-card-img" style="background-image:url(\'{}\')"></div>').format(image)
        else:
            image_html = Markup('<div class="article-card-img article-card-img--placeholder"></div>')
        cards.append(
            Markup(
                '<a href="{}" class="article-card">\n  {}\n  <div class="article-card-body">\n'
                '    <h3 class="article-card-title">{}</h3>\n    <p class="article-card-excerpt">{}</p>\n'
                "  </div>\n</a>"
            ).format(text(article, "href", "#"), image_html, text(article, "title"), text(article, "excerpt"))
        )
    return Markup(
        '<section class="latest-articles-section">\n  <div class="site-container">\n'
        '    <div class="latest-articles-banner">\n      <h2>{}</h2>\n    </div>\n'
        '    <div class="latest-articles-grid">{}</div>\n  </div>\n</section>'
    ).format(text(block.content, "heading", "Latest Articles"), Markup("\n").join(cards))


RENDERERS = {
    "ComparisonTable": render_comparison_table,
    "QuoteCalculator": render_quote_calculator,
    "CostBreakdown": render_cost_breakdown,
    "LeadForm": render_lead_form,
    "StatGrid": render_stat_grid,
    "DataTable": render_data_table,
    "InteractiveMap": render_interactive_map,
    "GeoContent": render_geo_content,
    "ProsConsCard": render_pros_cons_card,
    "RankingList": render_ranking_list,
    "VsCard": render_vs_card,
    "TestimonialGrid": render_testimonial_grid,
    "PricingTable": render_pricing_table,
    "PdfDownload": render_pdf_download,
    "Wizard": render_wizard,
    "EmbedWidget": render_embed_widget,
    "ResourceGrid": render_resource_grid,
    "LatestArticles": render_latest_articles,
}
