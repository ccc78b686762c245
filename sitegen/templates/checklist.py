"""Checklist pages: one tickable step per level-2 heading, with a counter."""

from markupsafe import Markup

from sitegen.models.article import Article
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, extract_h2_sections, script_tag

_CHECKLIST_JS = r"""
  var boxes = document.querySelectorAll('.checklist-item input[type="checkbox"]');
  var countEl = document.getElementById('checklist-completed-count');
  if (!boxes.length || !countEl) return;
  function updateCount() {
    var checked = 0;
    boxes.forEach(function(cb) { if (cb.checked) checked++; });
    countEl.textContent = String(checked);
  }
  boxes.forEach(function(cb) { cb.addEventListener('change', updateCount); });
"""


def render_checklist_page(article: Article, ctx: RenderContext) -> str:
    steps = extract_h2_sections(article.content_markdown)
    schema_ld = build_schema_json_ld(article, ctx.domain, "Article")

    if not steps:
        return compose_article_page(article, ctx, schema_ld, ctx.render_markdown(article.content_markdown))

    items = []
    for index, step in enumerate(steps):
        body = ctx.render_markdown(step.body) if step.body else Markup("")
        items.append(
            Markup(
                '<div class="checklist-item">\n'
                '  <label for="checklist-step-{index}">\n'
                '    <input type="checkbox" id="checklist-step-{index}">\n'
                '    <span class="checklist-check"></span>\n'
                "    <strong>{number}. {heading}</strong>\n"
                "  </label>\n"
                '  <div class="checklist-content">{body}</div>\n'
                "</div>"
            ).format(index=index, number=index + 1, heading=step.heading, body=body)
        )

    inner = Markup(
        '<div class="checklist-progress" id="checklist-progress">\n'
        '  <span id="checklist-completed-count">0</span> of <span>{total}</span> completed\n'
        "</div>\n"
        '<div class="checklist-list">{items}</div>'
    ).format(total=len(steps), items=Markup("\n").join(items))

    return compose_article_page(article, ctx, schema_ld, inner, script=script_tag(_CHECKLIST_JS))
