"""Content type → page renderer."""

from typing import Callable

from sitegen.models.article import Article, ContentType
from sitegen.templates.article import render_article_page, render_health_decision_page
from sitegen.templates.calculator import render_calculator_page
from sitegen.templates.checklist import render_checklist_page
from sitegen.templates.common import RenderContext
from sitegen.templates.comparison import render_comparison_page, render_review_page
from sitegen.templates.cost_guide import render_cost_guide_page
from sitegen.templates.faq import render_faq_page
from sitegen.templates.infographic import render_infographic_page
from sitegen.templates.interactive_map import render_interactive_map_page
from sitegen.templates.lead_capture import render_lead_capture_page
from sitegen.templates.wizard import render_wizard_page

Renderer = Callable[[Article, RenderContext], str]


def renderer_for(content_type: ContentType) -> Renderer:
    match content_type:
        case ContentType.COMPARISON:
            return render_comparison_page
        case ContentType.CALCULATOR:
            return render_calculator_page
        case ContentType.COST_GUIDE:
            return render_cost_guide_page
        case ContentType.LEAD_CAPTURE:
            return render_lead_capture_page
        case ContentType.HEALTH_DECISION:
            return render_health_decision_page
        case ContentType.CHECKLIST:
            return render_checklist_page
        case ContentType.FAQ:
            return render_faq_page
        case ContentType.REVIEW:
            return render_review_page
        case (
            ContentType.WIZARD
            | ContentType.CONFIGURATOR
            | ContentType.QUIZ
            | ContentType.SURVEY
            | ContentType.ASSESSMENT
        ):
            return render_wizard_page
        case ContentType.INTERACTIVE_INFOGRAPHIC:
            return render_infographic_page
        case ContentType.INTERACTIVE_MAP:
            return render_interactive_map_page
        case ContentType.ARTICLE:
            return render_article_page
    raise AssertionError(f"unhandled content type: {content_type!r}")


def render_article(article: Article, ctx: RenderContext) -> str:
    """Render *article* to a full HTML document with its type's renderer."""
    return renderer_for(article.content_type)(article, ctx)
