from typing import List

from markupsafe import Markup

from sitegen.models.article import Article
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, Section, compose_article_page, extract_h2_sections

MAX_ANSWER_SCHEMA_LENGTH = 500


def truncate_at_sentence(text: str, max_length: int) -> str:
    """Cut *text* at the last sentence end (or space) before *max_length*."""
    if len(text) <= max_length:
        return text
    cut = text[:max_length]
    last_period = cut.rfind(".")
    if last_period > max_length * 0.3:
        return cut[: last_period + 1] + "..."
    last_space = cut.rfind(" ")
    if last_space > 0:
        return cut[:last_space] + "..."
    return cut + "..."


def extract_faq_items(markdown_text: str) -> List[Section]:
    """Questions are level-2 headings; answers run until the next one."""
    return extract_h2_sections(markdown_text)


def render_faq_page(article: Article, ctx: RenderContext) -> str:
    items = extract_faq_items(article.content_markdown)
    main_entity = [
        {
            "@type": "Question",
            "name": item.heading,
            "acceptedAnswer": {
                "@type": "Answer",
                "text": truncate_at_sentence(item.body.replace("\n", " "), MAX_ANSWER_SCHEMA_LENGTH),
            },
        }
        for item in items
    ]
    schema_ld = build_schema_json_ld(article, ctx.domain, "FAQPage", {"mainEntity": main_entity})

    if items:
        entries = [
            Markup(
                '<details class="faq-item">\n'
                '  <summary class="faq-question">{}</summary>\n'
                '  <div class="faq-answer">{}</div>\n'
                "</details>"
            ).format(item.heading, ctx.render_markdown(item.body))
            for item in items
        ]
        inner = Markup('<div class="faq-list">{}</div>').format(Markup("\n").join(entries))
    else:
        inner = ctx.render_markdown(article.content_markdown)

    return compose_article_page(article, ctx, schema_ld, inner)
