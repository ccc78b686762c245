"""Pieces shared by every content-type renderer."""

import re
from typing import List, NamedTuple, Optional, Sequence

from markupsafe import Markup

from sitegen.models.article import Article
from sitegen.models.domain import DisclosureSettings
from sitegen.models.evidence import ArticleDataset
from sitegen.services.markdown_renderer import MarkdownRenderer
from sitegen.services.page_shell import PageShell, wrap_in_html_page
from sitegen.services.structured_data import build_open_graph_tags
from sitegen.services.trust import (
    CitationLoader,
    build_data_sources_section,
    build_freshness_badge,
    build_print_button,
    build_trust_elements,
)


class RenderContext(NamedTuple):
    """Everything a renderer needs besides the article itself."""

    domain: str
    shell: Optional[PageShell]
    disclosure: Optional[DisclosureSettings] = None
    datasets: Sequence[ArticleDataset] = ()
    markdown: Optional[MarkdownRenderer] = None
    load_citations: Optional[CitationLoader] = None

    def render_markdown(self, text: Optional[str]) -> Markup:
        renderer = self.markdown or MarkdownRenderer(current_domain=self.domain)
        return renderer.render(text or "")


def compose_article_page(
    article: Article,
    ctx: RenderContext,
    schema_ld: Markup,
    inner_html: Markup,
    script: Markup = Markup(""),
    above_fold: Markup = Markup(""),
) -> str:
    """Lay out one content page and wrap it in the domain shell.

    Order: disclaimer, above-fold notice, JSON-LD, freshness badge and print
    button, the ``<article>`` itself, data sources, trust block, script.
    """
    trust = build_trust_elements(article, ctx.disclosure, ctx.load_citations)
    badge = build_freshness_badge(article, ctx.datasets)
    print_button = build_print_button(article.content_type.value)

    parts = [
        trust.disclaimer_html,
        above_fold,
        schema_ld,
        badge + print_button,
        Markup("<article>\n<h1>{}</h1>\n{}\n</article>").format(article.title, inner_html),
        build_data_sources_section(ctx.datasets),
        trust.trust_html,
        script,
    ]
    body = Markup("\n").join(part for part in parts if part)
    return wrap_in_html_page(
        article.title,
        article.meta_description or "",
        body,
        ctx.shell,
        build_open_graph_tags(article, ctx.domain),
    )


def script_tag(js: str) -> Markup:
    """Inline script from trusted generator code."""
    return Markup("<script>\n(function(){\n%s\n})();\n</script>" % js)


def number_attr(value: Optional[float]) -> str:
    """Render a number the way a browser would print it (``5`` not ``5.0``)."""
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


class Section(NamedTuple):
    heading: str
    body: str


_H2_RE = re.compile(r"^##\s+(.+)$")


def extract_h2_sections(markdown_text: str) -> List[Section]:
    """Split markdown on level-2 headings.

    Each section's body is the text between its heading and the next one
    (or the end of input), stripped.  Anything before the first heading is
    ignored.
    """
    sections: List[Section] = []
    heading: Optional[str] = None
    body: List[str] = []
    for line in (markdown_text or "").splitlines():
        match = _H2_RE.match(line)
        if match:
            if heading is not None:
                sections.append(Section(heading, "\n".join(body).strip()))
            heading = match.group(1)
            body = []
        elif heading is not None:
            body.append(line)
    if heading is not None:
        sections.append(Section(heading, "\n".join(body).strip()))
    return sections
