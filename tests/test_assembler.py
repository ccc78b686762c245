"""Tests for block page assembly."""

from datetime import datetime, timezone

import pytest

from sitegen.blocks.assembler import assemble_page, build_page_meta, build_page_structured_data, wrap_block
from sitegen.blocks.registry import BlockContext, register_block_renderers
from sitegen.models.page import BlockEnvelope


@pytest.fixture(autouse=True)
def renderers():
    register_block_renderers()
    yield


def _ctx(**overrides) -> BlockContext:
    fields = {"domain": "bestlawyers.com", "site_title": "Best Lawyers", "route": "/injury/", "page_title": "Injury Guide"}
    fields.update(overrides)
    return BlockContext(**fields)


def _blocks():
    return [
        BlockEnvelope(id="f", type="Footer", content={"copyrightYear": 2030}),
        BlockEnvelope(id="h", type="Header"),
        BlockEnvelope(id="hero", type="Hero", variant="split", content={"heading": "Hurt at work?"}),
        BlockEnvelope(id="body", type="ArticleBody", content={"markdown": "Paragraph"}),
    ]


class TestAssemblePage:
    def test_header_and_footer_frame_main(self):
        html = assemble_page(_blocks(), _ctx())
        assert html.index('data-block-type="Header"') < html.index("<main>")
        assert html.index("</main>") < html.index('data-block-type="Footer"')

    def test_content_blocks_in_order(self):
        html = assemble_page(_blocks(), _ctx())
        assert html.index('data-block-id="hero"') < html.index('data-block-id="body"')
        assert 'data-block-variant="split"' in html
        assert "data-animate" in html

    def test_title_combines_page_and_site(self):
        assert "<title>Injury Guide | Best Lawyers</title>" in assemble_page(_blocks(), _ctx())

    def test_title_not_duplicated(self):
        html = assemble_page(_blocks(), _ctx(page_title="Best Lawyers", route="/"))
        assert "<title>Best Lawyers</title>" in html

    def test_canonical_url(self):
        html = assemble_page(_blocks(), _ctx())
        assert '<link rel="canonical" href="https://bestlawyers.com/injury/">' in html

    def test_theme_and_skin_on_body(self):
        html = assemble_page(_blocks(), _ctx(theme="bold", skin="coral"))
        assert '<body data-theme="bold" data-skin="coral">' in html
        assert "fonts.googleapis.com" in html

    def test_system_font_theme_skips_font_link(self):
        html = assemble_page(_blocks(), _ctx(theme="minimal"))
        assert "fonts.googleapis.com" not in html

    def test_unknown_block_leaves_comment(self):
        blocks = _blocks() + [BlockEnvelope(id="z", type="Teleporter")]
        html = assemble_page(blocks, _ctx())
        assert "<!-- unknown block: Teleporter -->" in html

    def test_custom_stylesheet_href(self):
        html = assemble_page(_blocks(), _ctx(), css_href="/assets/site.css")
        assert 'href="/assets/site.css"' in html

    def test_page_title_is_escaped(self):
        html = assemble_page(_blocks(), _ctx(page_title="<script>alert(1)</script>"))
        assert "<script>alert(1)</script>" not in html


class TestMetaAndStructuredData:
    def test_home_is_website(self):
        meta = build_page_meta(_ctx(route="/"), "https://bestlawyers.com")
        assert 'property="og:type" content="website"' in meta

    def test_inner_page_is_article(self):
        ctx = _ctx(published_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
        meta = build_page_meta(ctx, "https://bestlawyers.com/injury/")
        assert 'property="og:type" content="article"' in meta
        assert "article:published_time" in meta

    def test_structured_data_types(self):
        assert '"@type": "WebPage"' in build_page_structured_data(_ctx(route="/"), "https://bestlawyers.com/")
        inner = build_page_structured_data(_ctx(), "https://bestlawyers.com/injury/")
        assert '"@type": "Article"' in inner
        assert '"@type": "BreadcrumbList"' in inner

    def test_wrap_block_header_is_div(self):
        html = wrap_block(BlockEnvelope(id="h", type="Header"), "<header></header>")
        assert html.startswith('<div data-block-id="h"')
