"""Standalone iframe pages for calculators and wizard-family articles.

``embed/{slug}.html`` carries its own CSS and reuses the regular widget
builders with an ``e-`` id prefix.  It reports its height to the parent
page (``embed-resize``) and posts ``embed-result`` whenever a result is
produced.
"""

from typing import Optional

from markupsafe import Markup

from sitegen.config import EMBEDDABLE_CONTENT_TYPES
from sitegen.models.article import Article
from sitegen.services.html_env import render_template
from sitegen.templates.calculator import build_calculator_html, build_calculator_script
from sitegen.templates.wizard import build_wizard_html, build_wizard_script, lead_endpoint_for, wizard_mode

EMBED_ID_PREFIX = "e-"
UNAVAILABLE_NOTICE = "Widget content not available for embedding."


def render_embed_page(article: Article, domain: str) -> Optional[str]:
    """Return the embed document, or ``None`` for types that cannot be embedded."""
    content_type = article.content_type.value
    if content_type not in EMBEDDABLE_CONTENT_TYPES:
        return None

    widget = Markup("")
    script = Markup("")
    if content_type == "calculator":
        config = article.calculator_config
        if config and config.inputs:
            widget = build_calculator_html(config, id_prefix=EMBED_ID_PREFIX)
            script = build_calculator_script(config, id_prefix=EMBED_ID_PREFIX, embed=True, domain=domain)
    else:
        config = article.wizard_config
        if config and config.steps:
            mode = wizard_mode(content_type)
            widget = build_wizard_html(config, mode, lead_endpoint_for(article))
            script = build_wizard_script(config, mode, embed=True, domain=domain)

    if not widget:
        widget = Markup("<p>{}</p>").format(UNAVAILABLE_NOTICE)
    return str(render_template("embed.html", title=article.title, widget=widget, script=script))
