from typing import Optional

from markupsafe import Markup

from sitegen.models.article import Article, CtaConfig
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page
from sitegen.templates.geo import build_geo_blocks

MEDICAL_DISCLAIMER = (
    "This content is for informational purposes only and is not a substitute for professional "
    "medical advice, diagnosis, or treatment. Always consult a qualified healthcare provider "
    "about your specific situation."
)


def build_cta(cta: Optional[CtaConfig]) -> Markup:
    if cta is None:
        return Markup("")
    return Markup(
        '<aside class="cta cta-{style}">\n  <p>{text}</p>\n'
        '  <a href="{url}" class="cta-button" rel="nofollow noopener sponsored">{label}</a>\n</aside>'
    ).format(style=cta.style, text=cta.text, url=cta.button_url, label=cta.button_label)


def render_article_page(article: Article, ctx: RenderContext, extra_notice: Markup = Markup("")) -> str:
    """The standard long-form page; every unknown content type lands here too."""
    schema_ld = build_schema_json_ld(article, ctx.domain, "Article")
    inner = Markup("\n").join(
        part
        for part in (
            extra_notice,
            ctx.render_markdown(article.content_markdown),
            build_geo_blocks(article.geo_data),
            build_cta(article.cta_config),
        )
        if part
    )
    return compose_article_page(article, ctx, schema_ld, inner)


def render_health_decision_page(article: Article, ctx: RenderContext) -> str:
    notice = Markup('<div class="medical-disclaimer" role="note"><strong>Medical Disclaimer:</strong> {}</div>').format(
        MEDICAL_DISCLAIMER
    )
    return render_article_page(article, ctx, extra_notice=notice)
