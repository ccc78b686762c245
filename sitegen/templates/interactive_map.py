"""Interactive map: region buttons, a select, state tiles and one panel per region."""

import json
from typing import List, NamedTuple, Optional

from markupsafe import Markup

from sitegen.models.article import Article
from sitegen.services.sanitizer import json_for_script, sanitize_article_html
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, script_tag

# Below this many regions the tile grid adds nothing over the buttons.
MIN_TILE_REGIONS = 8

_MAP_JS = r"""
  var defaultKey = %(default_key)s;
  var root = document.querySelector('.imap-shell');
  if (!root) return;
  var select = root.querySelector('#imap-select');
  var buttons = Array.prototype.slice.call(root.querySelectorAll('[data-region-key]:not(.imap-panel)'));
  var panels = Array.prototype.slice.call(root.querySelectorAll('.imap-panel'));
  var fallback = root.querySelector('.imap-fallback');
  function setActive(key) {
    var matched = false;
    buttons.forEach(function(btn) { btn.classList.toggle('active', btn.dataset.regionKey === key); });
    panels.forEach(function(panel) {
      var show = panel.dataset.regionKey === key;
      panel.style.display = show ? '' : 'none';
      if (show) matched = true;
    });
    if (fallback) fallback.style.display = matched ? 'none' : '';
    if (select && select.value !== key) select.value = key;
  }
  buttons.forEach(function(btn) {
    btn.addEventListener('click', function() { setActive(btn.dataset.regionKey || defaultKey); });
  });
  if (select) select.addEventListener('change', function() { setActive(select.value || defaultKey); });
  setActive(defaultKey);
"""


class MapEntry(NamedTuple):
    key: str
    label: str
    content: Markup


def parse_map_entries(article: Article) -> List[MapEntry]:
    geo = article.geo_data
    if geo is None:
        return []
    return [
        MapEntry(key, region.label or key.upper(), sanitize_article_html(region.content))
        for key, region in geo.regions.items()
    ]


def build_map_tiles(entries: List[MapEntry]) -> Markup:
    if len(entries) < MIN_TILE_REGIONS:
        return Markup("")
    tiles = [
        Markup(
            '<button type="button" class="imap-state-tile" data-region-key="{}" aria-label="{}">{}</button>'
        ).format(e.key, e.label, e.key.upper())
        for e in entries
    ]
    return Markup('<div class="imap-map-grid" aria-label="Interactive region map">\n{}\n</div>').format(
        Markup("\n").join(tiles)
    )


def build_map_section(
    entries: List[MapEntry],
    fallback: str = "",
    default_key: Optional[str] = None,
    show_tiles: bool = True,
    show_dropdown: bool = True,
) -> Markup:
    """Controls, tiles, region panels, fallback panel and the switching script."""
    keys = [e.key for e in entries]
    default_key = default_key if default_key in keys else keys[0]
    buttons = Markup("\n").join(
        Markup('<button type="button" data-region-key="{}">{}</button>').format(e.key, e.label) for e in entries
    )
    dropdown = Markup("")
    if show_dropdown:
        options = Markup("\n").join(
            Markup('<option value="{}">{}</option>').format(e.key, e.label) for e in entries
        )
        dropdown = Markup(
            '<label for="imap-select">Region\n      <select id="imap-select">{}</select>\n    </label>'
        ).format(options)
    panels = Markup("\n").join(
        Markup(
            '<div class="imap-panel" data-region-key="{}" style="display:none">\n'
            '  <h3>{}</h3>\n  <div class="imap-panel-content">{}</div>\n</div>'
        ).format(e.key, e.label, e.content)
        for e in entries
    )
    hidden = Markup("") if fallback else Markup(' style="display:none"')
    script = script_tag(_MAP_JS % {"default_key": json_for_script(json.dumps(default_key))})
    return Markup(
        '<section class="imap-shell">\n'
        '  <div class="imap-controls">\n'
        '    <div class="imap-region-buttons">{buttons}</div>\n'
        "    {dropdown}\n"
        "  </div>\n  {tiles}\n"
        '  <div class="imap-panels">\n{panels}\n'
        '    <div class="imap-fallback"{hidden}>\n      <h3>National View</h3>\n'
        '      <div class="imap-panel-content">{fallback}</div>\n    </div>\n'
        "  </div>\n</section>\n{script}"
    ).format(
        buttons=buttons,
        dropdown=dropdown,
        tiles=build_map_tiles(entries) if show_tiles else Markup(""),
        panels=panels,
        hidden=hidden,
        fallback=sanitize_article_html(fallback),
        script=script,
    )


def render_interactive_map_page(article: Article, ctx: RenderContext) -> str:
    entries = parse_map_entries(article)
    schema_ld = build_schema_json_ld(
        article, ctx.domain, "Article", {"about": [e.label for e in entries]} if entries else None
    )
    if not entries:
        return compose_article_page(article, ctx, schema_ld, ctx.render_markdown(article.content_markdown))

    fallback = article.geo_data.fallback if article.geo_data else ""
    inner = build_map_section(entries, fallback) + Markup("\n") + ctx.render_markdown(article.content_markdown)
    return compose_article_page(article, ctx, schema_ld, inner)
