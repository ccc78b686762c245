"""Tests for the block registry and the individual block renderers."""

import pytest

from sitegen.blocks.registry import (
    BlockContext,
    flag,
    number,
    register_block_renderer,
    register_block_renderers,
    registered_block_types,
    render_block,
    text,
)
from sitegen.models.page import BlockEnvelope


@pytest.fixture(autouse=True)
def renderers():
    register_block_renderers()
    yield


@pytest.fixture
def ctx():
    return BlockContext(domain="bestlawyers.com", site_title="Best Lawyers", route="/guide/")


def _block(block_type: str, content=None, config=None, variant=None, block_id="b1") -> BlockEnvelope:
    return BlockEnvelope(id=block_id, type=block_type, variant=variant, content=content or {}, config=config or {})


class TestRegistry:
    def test_unknown_type_renders_comment(self, ctx):
        assert render_block(_block("Hologram"), ctx) == "<!-- unknown block: Hologram -->"

    def test_renderer_failure_renders_comment(self, ctx):
        def explode(block, context):
            raise ValueError("bad payload")

        register_block_renderer("Exploding", explode)
        assert render_block(_block("Exploding"), ctx) == "<!-- render error: Exploding -->"

    def test_comment_cannot_be_closed_early(self, ctx):
        html = render_block(_block("x--><script>"), ctx)
        assert "--><script>" not in html

    def test_registration_is_idempotent(self):
        before = registered_block_types()
        register_block_renderers()
        assert registered_block_types() == before

    def test_all_builtin_types_registered(self):
        types = set(registered_block_types())
        for name in ("Header", "Footer", "Hero", "FAQ", "Checklist", "ComparisonTable", "Wizard", "LatestArticles"):
            assert name in types

    def test_invalid_payload_does_not_raise(self, ctx):
        block = _block("ComparisonTable", {"options": "not-a-list"})
        assert render_block(block, ctx) == "<!-- render error: ComparisonTable -->"


class TestAccessors:
    def test_text(self):
        assert text({"a": "x"}, "a") == "x"
        assert text({"a": 3}, "a") == "3"
        assert text({"a": None}, "a", "d") == "d"
        assert text({"a": True}, "a", "d") == "d"
        assert text({"a": ""}, "a", "d") == "d"

    def test_number(self):
        assert number({"n": 2.5}, "n") == 2.5
        assert number({"n": "2"}, "n") is None
        assert number({"n": True}, "n") is None

    def test_flag(self):
        assert flag({"f": False}, "f", True) is False
        assert flag({"f": "yes"}, "f", True) is True


class TestBasicBlocks:
    def test_header_falls_back_to_site_title(self, ctx):
        html = render_block(_block("Header", {"navLinks": [{"label": "Guides", "href": "/guides/"}]}), ctx)
        assert "Best Lawyers" in html
        assert '<a href="/guides/">Guides</a>' in html

    def test_hero_escapes_heading(self, ctx):
        html = render_block(_block("Hero", {"heading": "<script>x</script>"}), ctx)
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_hero_cta_needs_text_and_url(self, ctx):
        assert "hero-cta" not in render_block(_block("Hero", {"heading": "Hi", "ctaText": "Go"}), ctx)
        assert "hero-cta" in render_block(_block("Hero", {"heading": "Hi", "ctaText": "Go", "ctaUrl": "/go/"}), ctx)

    def test_article_body_renders_markdown(self, ctx):
        html = render_block(_block("ArticleBody", {"title": "T", "markdown": "## Sub\n\nText"}), ctx)
        assert "<h2>Sub</h2>" in html
        assert "print-btn" in html

    def test_faq_emits_json_ld(self, ctx):
        content = {"items": [{"question": "Why?", "answer": "<b>Because</b><script>x</script>"}]}
        html = render_block(_block("FAQ", content), ctx)
        assert '<summary class="faq-question">Why?</summary>' in html
        assert '"@type": "FAQPage"' in html
        assert "<script>x</script>" not in html

    def test_faq_without_items_is_empty(self, ctx):
        assert render_block(_block("FAQ", {"items": []}), ctx) == ""

    def test_scroll_cta(self, ctx):
        html = render_block(_block("ScrollCTA", {"text": "Get help", "buttonUrl": "/contact/"}, block_id="c9"), ctx)
        assert 'id="scroll-cta-c9"' in html
        assert "IntersectionObserver" in html

    def test_cta_banner_immediate(self, ctx):
        html = render_block(_block("CTABanner", {"text": "Call now", "buttonLabel": "Call"}), ctx)
        assert "cta-section--bar" in html
        assert 'href="#"' in html

    def test_footer_newsletter_requires_https(self, ctx):
        insecure = _block("Footer", {"newsletterEndpoint": "http://x.com/sub"}, variant="newsletter")
        secure = _block("Footer", {"newsletterEndpoint": "https://x.com/sub"}, variant="newsletter")
        assert "newsletter-form" not in render_block(insecure, ctx)
        assert 'action="https://x.com/sub"' in render_block(secure, ctx)

    def test_checklist_progress(self, ctx):
        content = {"steps": [{"heading": "One"}, {"heading": "Two"}, {"body": "no heading"}]}
        html = render_block(_block("Checklist", content), ctx)
        assert "0 of 2 completed" in html
        assert html.count('class="checklist-checkbox"') == 2

    def test_last_updated_status(self, ctx):
        html = render_block(_block("LastUpdated", {"date": "Jan 1, 2025", "status": "stale"}), ctx)
        assert "freshness-red" in html

    def test_medical_disclaimer_default_text(self, ctx):
        html = render_block(_block("MedicalDisclaimer"), ctx)
        assert "Medical Disclaimer:" in html
        assert "Talk to Your Doctor" in html


class TestInteractiveBlocks:
    def test_comparison_table(self, ctx):
        content = {
            "title": "Top Picks",
            "options": [{"name": "Acme", "scores": {"price": 9}}],
            "columns": [{"key": "price", "label": "Price", "type": "number"}],
            "defaultSort": "price",
        }
        html = render_block(_block("ComparisonTable", content), ctx)
        assert "Top Picks" in html
        assert 'data-sort-key="price"' in html

    def test_quote_calculator_prefixes_ids(self, ctx):
        content = {"inputs": [{"id": "sqft", "label": "Square feet"}], "outputs": [{"id": "total", "label": "Total"}]}
        html = render_block(_block("QuoteCalculator", content, block_id="q1"), ctx)
        assert 'id="q1-sqft"' in html
        assert 'id="q1-total"' in html

    def test_cost_breakdown_average(self, ctx):
        content = {"ranges": [{"label": "Basic", "low": 100, "high": 300}]}
        html = render_block(_block("CostBreakdown", content), ctx)
        assert "$200" in html

    def test_lead_form_blocks_insecure_endpoint(self, ctx):
        content = {"fields": [{"name": "email", "label": "Email", "type": "email"}]}
        html = render_block(_block("LeadForm", content, {"endpoint": "http://leads.example.com"}), ctx)
        assert "leads.example.com" not in html
        assert 'action="#"' in html

    def test_lead_form_https_endpoint(self, ctx):
        content = {"fields": [{"name": "email", "label": "Email"}], "heading": "Get quotes"}
        html = render_block(_block("LeadForm", content, {"endpoint": "https://leads.example.com"}), ctx)
        assert 'action="https://leads.example.com"' in html
        assert "Get quotes" in html

    def test_stat_grid_clamps_percentages(self, ctx):
        content = {"items": [{"title": "A", "metricValue": 140, "group": "x"}, {"title": "B", "metricValue": -5, "group": "y"}]}
        html = render_block(_block("StatGrid", content, block_id="s1"), ctx)
        assert 'data-count="100"' in html
        assert 'data-count="0"' in html
        assert 'id="stat-grid-s1"' in html
        assert "infographic-chip" in html

    def test_data_table(self, ctx):
        content = {"headers": ["State", "Cost"], "rows": [["TX", 1200.0], ["CA", 2500]]}
        html = render_block(_block("DataTable", content, block_id="t1"), ctx)
        assert 'id="data-table-t1"' in html
        assert '<td data-value="1200">1200</td>' in html
        assert 'data-sort-col="1"' in html

    def test_vs_card_winner(self, ctx):
        content = {"itemA": {"name": "Acme", "rating": 4.5}, "itemB": {"name": "Zed", "rating": 3}}
        html = str(render_block(_block("VsCard", content), ctx))
        assert html.count("vs-side--winner") == 1
        assert html.index("vs-side--winner") < html.index("Zed")

    def test_ranking_medals(self, ctx):
        content = {"items": [{"name": "A"}, {"name": "B"}, {"name": "C"}, {"name": "D"}]}
        html = render_block(_block("RankingList", content), ctx)
        assert "ranking-gold" in html and "ranking-silver" in html and "ranking-bronze" in html
        assert html.count("ranking-item ") == 3

    def test_pricing_excluded_feature(self, ctx):
        content = {"plans": [{"name": "Basic", "price": "$9", "features": ["Email support", "✗ Phone support"]}]}
        html = render_block(_block("PricingTable", content), ctx)
        assert 'class="pricing-feature--excluded"' in html
        assert "✗ Phone support" not in html

    def test_testimonial_initials(self, ctx):
        content = {"testimonials": [{"quote": "Great", "author": "jane roe smith"}]}
        assert '<span class="testimonial-avatar">JR</span>' in render_block(_block("TestimonialGrid", content), ctx)

    def test_pdf_download_from_article_id(self, ctx):
        html = render_block(_block("PdfDownload", {"articleId": "a1"}, {"type": "checklist"}), ctx)
        assert 'href="/api/articles/a1/pdf?type=checklist"' in html

    def test_gated_pdf_download(self, ctx):
        html = render_block(_block("PdfDownload", {"url": "/files/guide.pdf"}, {"gated": True}, block_id="p1"), ctx)
        assert "pdf-gate-form" in html
        assert 'id="pdf-gate-p1"' in html

    def test_embed_widget_rejects_unsafe_slug(self, ctx):
        html = render_block(_block("EmbedWidget", {"slug": "../secrets"}), ctx)
        assert "<iframe" not in html
        assert "no source configured" in html

    def test_embed_widget_safe_slug(self, ctx):
        html = render_block(_block("EmbedWidget", {"slug": "loan-calculator"}), ctx)
        assert 'src="/embed/loan-calculator.html"' in html

    def test_latest_articles_rejects_unsafe_image(self, ctx):
        content = {"articles": [{"title": "A", "image": "javascript:alert(1)"}, {"title": "B", "image": "/img/b.png"}]}
        html = render_block(_block("LatestArticles", content), ctx)
        assert "javascript:" not in html
        assert "url('/img/b.png')" in html

    def test_wizard_block(self, ctx):
        content = {"steps": [{"id": "s1", "title": "Start", "fields": [{"id": "f", "label": "F", "type": "text"}]}]}
        html = render_block(_block("Wizard", content, {"mode": "quiz"}), ctx)
        assert 'data-wizard-mode="quiz"' in html
        assert "wizard-section" in html

    def test_empty_payloads_render_nothing(self, ctx):
        for block_type in ("ComparisonTable", "QuoteCalculator", "CostBreakdown", "LeadForm", "StatGrid", "Wizard"):
            assert render_block(_block(block_type), ctx) == ""
