"""Interactive infographic: a filterable, sortable grid of metric cards.

Cards come from comparison data (mean of numeric column scores, 1–5 ratings
scaled to 0–100) or, failing that, from cost ranges (average as a share of
the high end).  Without either, the page falls back to plain markdown.
"""

import math
import re
from typing import List, NamedTuple

from markupsafe import Markup

from sitegen.models.article import Article
from sitegen.services.scoring import round_half_up
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, number_attr, script_tag

_SLUG_RE = re.compile(r"[^a-z0-9]+")

_INFOGRAPHIC_JS = r"""
  var shell = document.querySelector('.infographic-shell');
  if (!shell) return;
  var cards = Array.prototype.slice.call(shell.querySelectorAll('.infographic-card'));
  var chips = Array.prototype.slice.call(shell.querySelectorAll('[data-infographic-filter]'));
  var sort = shell.querySelector('#infographic-sort');
  var grid = shell.querySelector('.infographic-grid');
  function applyFilter(group) {
    cards.forEach(function(card) {
      card.style.display = (group === 'all' || card.dataset.group === group) ? '' : 'none';
    });
  }
  function applySort(mode) {
    cards.slice().sort(function(a, b) {
      var av = Number(a.dataset.metric || 0), bv = Number(b.dataset.metric || 0);
      return mode === 'asc' ? av - bv : bv - av;
    }).forEach(function(card) { grid.appendChild(card); });
  }
  chips.forEach(function(chip) {
    chip.addEventListener('click', function() {
      chips.forEach(function(c) { c.classList.remove('active'); });
      chip.classList.add('active');
      applyFilter(chip.dataset.infographicFilter || 'all');
      applySort(sort && sort.value ? sort.value : 'desc');
    });
  });
  if (sort) sort.addEventListener('change', function() { applySort(sort.value || 'desc'); });
"""


class InfographicItem(NamedTuple):
    id: str
    title: str
    metric_label: str
    metric_value: int
    summary: str
    group: str


def clamp_metric(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return max(0, min(100, round_half_up(value)))


def _unique(base: str, seen: set) -> str:
    candidate = base
    suffix = 1
    while candidate in seen:
        candidate = f"{base}-{suffix}"
        suffix += 1
    seen.add(candidate)
    return candidate


def parse_infographic_items(article: Article) -> List[InfographicItem]:
    items: List[InfographicItem] = []
    seen: set = set()

    comparison = article.comparison_data
    if comparison and comparison.options and comparison.columns:
        for option in comparison.options:
            numbers = [
                v
                for v in (option.scores.get(c.key) for c in comparison.columns)
                if isinstance(v, (int, float)) and math.isfinite(v)
            ]
            metric = clamp_metric(sum(numbers) / len(numbers) * 20) if numbers else 0
            items.append(
                InfographicItem(
                    id=_unique(_SLUG_RE.sub("-", option.name.lower()) or "option", seen),
                    title=option.name,
                    metric_label="Composite Score",
                    metric_value=metric,
                    summary=option.badge or comparison.verdict or "Comparison data point",
                    group=option.badge or "General",
                )
            )

    cost = article.cost_guide_data
    if not items and cost and cost.ranges:
        for r in cost.ranges:
            average = r.average if r.average is not None else ((r.low + r.high) / 2 if r.high > 0 else 0)
            spread = clamp_metric(average / r.high * 100) if r.high > 0 else 0
            items.append(
                InfographicItem(
                    id=_unique(_SLUG_RE.sub("-", (r.label or "range").lower()), seen),
                    title=r.label or "Cost Range",
                    metric_label="Relative Cost Position",
                    metric_value=spread,
                    summary=f"${r.low:,.0f} - ${r.high:,.0f}",
                    group="Cost",
                )
            )
    return items


def render_infographic_page(article: Article, ctx: RenderContext) -> str:
    items = parse_infographic_items(article)
    extra = {}
    if items:
        extra = {
            "numberOfItems": len(items),
            "itemListElement": [
                {"@type": "ListItem", "position": i, "name": item.title} for i, item in enumerate(items, start=1)
            ],
        }
    schema_ld = build_schema_json_ld(article, ctx.domain, "ItemList", extra)

    if not items:
        return compose_article_page(article, ctx, schema_ld, ctx.render_markdown(article.content_markdown))

    groups = list(dict.fromkeys(item.group for item in items if item.group))
    chips = [Markup('<button type="button" class="infographic-chip active" data-infographic-filter="all">All</button>')]
    chips += [
        Markup('<button type="button" class="infographic-chip" data-infographic-filter="{}">{}</button>').format(g, g)
        for g in groups
    ]
    cards = [
        Markup(
            '<div class="infographic-card" id="ig-{id}" data-group="{group}" data-metric="{metric}">\n'
            "  <h3>{title}</h3>\n"
            '  <p class="infographic-summary">{summary}</p>\n'
            '  <div class="infographic-meter">\n'
            '    <span class="infographic-meter-label">{label}</span>\n'
            "    <strong>{metric}</strong>\n"
            "  </div>\n"
            '  <div class="infographic-bar"><span style="width:{metric}%"></span></div>\n'
            "</div>"
        ).format(
            id=item.id,
            group=item.group,
            metric=number_attr(item.metric_value),
            title=item.title,
            summary=item.summary,
            label=item.metric_label,
        )
        for item in items
    ]
    inner = Markup(
        '<section class="infographic-shell">\n'
        '  <div class="infographic-toolbar">\n'
        '    <div class="infographic-chips">{chips}</div>\n'
        '    <label for="infographic-sort">Sort\n'
        '      <select id="infographic-sort">\n'
        '        <option value="desc">Highest score first</option>\n'
        '        <option value="asc">Lowest score first</option>\n'
        "      </select>\n    </label>\n  </div>\n"
        '  <div class="infographic-grid">{cards}</div>\n'
        "</section>"
    ).format(chips=Markup("\n").join(chips), cards=Markup("\n").join(cards))
    return compose_article_page(article, ctx, schema_ld, inner, script=script_tag(_INFOGRAPHIC_JS))
