"""Comparison tables and review cards.

Both content types read the same "options with per-column scores" payload.
Comparisons render a client-side sortable table; reviews render one card per
option with a star rating and pros/cons lists.
"""

import json
from typing import List, Optional, Union

from markupsafe import Markup

from sitegen.models.article import Article, ComparisonData, ComparisonOption
from sitegen.services.sanitizer import json_for_script
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, number_attr, script_tag

_SORT_JS = r"""
  var table = document.getElementById('comparison-table');
  if (!table) return;
  var headers = table.querySelectorAll('th[data-sort-key]');
  var currentSort = null;
  var ascending = true;
  function cellValue(row, index) {
    var cell = row.children[index];
    return cell ? (cell.getAttribute('data-value') || cell.textContent || '') : '';
  }
  function sortBy(th) {
    var key = th.getAttribute('data-sort-key');
    if (currentSort === key) { ascending = !ascending; } else { currentSort = key; ascending = true; }
    var index = Array.prototype.indexOf.call(th.parentNode.children, th);
    var tbody = table.querySelector('tbody');
    var rows = Array.prototype.slice.call(tbody.querySelectorAll('tr')).map(function(row, pos) {
      return { row: row, pos: pos, value: cellValue(row, index) };
    });
    rows.sort(function(a, b) {
      var an = parseFloat(a.value), bn = parseFloat(b.value), diff;
      if (!isNaN(an) && !isNaN(bn)) diff = an - bn;
      else diff = a.value.localeCompare(b.value);
      if (!ascending) diff = -diff;
      return diff !== 0 ? diff : a.pos - b.pos;
    });
    rows.forEach(function(r) { tbody.appendChild(r.row); });
    headers.forEach(function(h) {
      var ind = h.querySelector('.sort-indicator');
      if (ind) ind.textContent = h === th ? (ascending ? '↑' : '↓') : '↕';
    });
  }
  headers.forEach(function(th) {
    th.addEventListener('click', function() { sortBy(th); });
    th.addEventListener('keydown', function(e) {
      if (e.key === 'Enter' || e.key === ' ') { e.preventDefault(); sortBy(th); }
    });
  });
  var defaultKey = %(default_sort)s;
  if (defaultKey) {
    headers.forEach(function(th) { if (th.getAttribute('data-sort-key') === defaultKey) sortBy(th); });
  }
"""


def star_string(rating: float) -> str:
    clamped = max(0, min(5, int(rating)))
    return "★" * clamped + "☆" * (5 - clamped)


def _cell(column_type: str, value) -> Markup:
    if value is None:
        return Markup("<td>—</td>")
    if column_type == "rating" and isinstance(value, (int, float)):
        return Markup('<td data-value="{}">{} {}/5</td>').format(
            number_attr(value), star_string(value), number_attr(value)
        )
    if isinstance(value, list):
        value = ", ".join(value)
    text = number_attr(value) if isinstance(value, (int, float)) else str(value)
    return Markup('<td data-value="{}">{}</td>').format(text, text)


def build_comparison_table(data: ComparisonData) -> Markup:
    header_cells = [Markup('<th scope="col">Name</th>')]
    for column in data.columns:
        if column.sortable:
            header_cells.append(
                Markup(
                    '<th scope="col" data-sort-key="{}" role="button" tabindex="0">{} '
                    '<span class="sort-indicator">↕</span></th>'
                ).format(column.key, column.label)
            )
        else:
            header_cells.append(Markup('<th scope="col">{}</th>').format(column.label))
    header_cells.append(Markup('<th scope="col"></th>'))

    rows = []
    for option in data.options:
        badge = Markup('<span class="comparison-badge">{}</span> ').format(option.badge) if option.badge else Markup("")
        cells = [Markup("<td>{}{}</td>").format(badge, option.name)]
        cells.extend(_cell(column.type, option.scores.get(column.key)) for column in data.columns)
        if option.url:
            cells.append(
                Markup(
                    '<td><a href="{}" class="cta-button" rel="nofollow noopener sponsored" target="_blank">Visit</a></td>'
                ).format(option.url)
            )
        else:
            cells.append(Markup("<td></td>"))
        rows.append(Markup("<tr>{}</tr>").format(Markup("").join(cells)))

    return Markup(
        '<div class="comparison-table-wrapper">\n'
        '<table class="comparison-table" id="comparison-table">\n'
        "  <thead><tr>{}</tr></thead>\n"
        "  <tbody>{}</tbody>\n"
        "</table>\n"
        "</div>"
    ).format(Markup("").join(header_cells), Markup("\n").join(rows))


def build_sort_script(default_sort: Optional[str]) -> Markup:
    return script_tag(_SORT_JS % {"default_sort": json_for_script(json.dumps(default_sort or ""))})


def render_comparison_page(article: Article, ctx: RenderContext) -> str:
    data = article.comparison_data
    elements = [
        {"@type": "ListItem", "position": index, "name": option.name, **({"url": option.url} if option.url else {})}
        for index, option in enumerate(data.options if data else [], start=1)
    ]
    schema_ld = build_schema_json_ld(
        article, ctx.domain, "ItemList", {"itemListElement": elements, "numberOfItems": len(elements)}
    )

    parts = []
    if data and data.verdict:
        parts.append(
            Markup('<div class="comparison-verdict"><strong>Our Verdict:</strong> {}</div>').format(data.verdict)
        )
    if data and data.options:
        parts.append(build_comparison_table(data))
    parts.append(ctx.render_markdown(article.content_markdown))

    script = build_sort_script(data.default_sort) if data and data.options else Markup("")
    return compose_article_page(article, ctx, schema_ld, Markup("\n").join(parts), script=script)


# ── Reviews ────────────────────────────────────────────────────────────────

def parse_list_value(value: Union[float, str, List[str], None]) -> List[str]:
    """Pros/cons arrive either as a list or as one comma-separated string."""
    if isinstance(value, list):
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return []


def _rating(option: ComparisonOption) -> Optional[float]:
    value = option.scores.get("rating", option.scores.get("overall"))
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def build_review_card(option: ComparisonOption) -> Markup:
    badge = Markup('<span class="review-badge">{}</span>').format(option.badge) if option.badge else Markup("")

    rating_html = Markup("")
    rating = _rating(option)
    if rating is not None:
        clamped = max(0.0, min(5.0, rating))
        rating_html = Markup('<span class="review-stars" aria-label="{} out of 5 stars">{} {}/5</span>').format(
            number_attr(clamped), star_string(clamped), number_attr(clamped)
        )

    lists = Markup("")
    for key, heading in (("pros", "Pros"), ("cons", "Cons")):
        entries = parse_list_value(option.scores.get(key))
        if entries:
            lists += Markup('<div class="review-{}"><h3>{}</h3><ul>{}</ul></div>').format(
                key, heading, Markup("\n").join(Markup("<li>{}</li>").format(e) for e in entries)
            )

    cta = Markup("")
    if option.url:
        cta = Markup(
            '<a href="{}" class="cta-button review-cta" rel="nofollow noopener sponsored" target="_blank">Learn More</a>'
        ).format(option.url)

    return Markup(
        '<div class="review-card">\n'
        '  <div class="review-card-header">\n    <h2>{badge}{name}</h2>\n    {rating}\n  </div>\n'
        '  <div class="review-card-body">\n    {lists}\n  </div>\n'
        '  <div class="review-card-footer">\n    {cta}\n  </div>\n'
        "</div>"
    ).format(badge=badge, name=option.name, rating=rating_html, lists=lists, cta=cta)


def render_review_page(article: Article, ctx: RenderContext) -> str:
    data = article.comparison_data
    schema_ld = build_schema_json_ld(article, ctx.domain, "Article")

    parts = []
    if data and data.options:
        parts.append(
            Markup('<section class="review-cards">{}</section>').format(
                Markup("\n").join(build_review_card(o) for o in data.options)
            )
        )
    if data and data.verdict:
        parts.append(Markup('<div class="review-verdict">\n  <strong>Verdict:</strong> {}\n</div>').format(data.verdict))
    parts.append(ctx.render_markdown(article.content_markdown))
    return compose_article_page(article, ctx, schema_ld, Markup("\n").join(parts))
