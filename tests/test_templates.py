"""Tests for content-type page renderers and their dispatch."""

from datetime import datetime, timezone

import pytest

from sitegen.errors import PageShellMissingError
from sitegen.layouts.layouts import get_layout_config
from sitegen.models.article import (
    Article,
    CalculatorConfig,
    CalculatorInput,
    CalculatorOutput,
    ComparisonColumn,
    ComparisonData,
    ComparisonOption,
    ContentType,
    CostGuideData,
    CostRange,
    LeadField,
    LeadGenConfig,
    WizardConfig,
    WizardField,
    WizardStep,
)
from sitegen.services.page_shell import build_page_shell
from sitegen.templates.calculator import NOT_CONFIGURED_NOTICE, formula_key
from sitegen.templates.common import RenderContext, extract_h2_sections, number_attr
from sitegen.templates.cost_guide import compute_average, parse_cost_range
from sitegen.templates.dispatch import render_article, renderer_for
from sitegen.templates.embed import UNAVAILABLE_NOTICE, render_embed_page
from sitegen.templates.faq import extract_faq_items, truncate_at_sentence
from sitegen.templates.wizard import NOT_AVAILABLE_NOTICE

XSS_TITLE = "<script>alert(1)</script>"


@pytest.fixture
def ctx():
    shell = build_page_shell("Best Lawyers", get_layout_config("authority"), year=2025)
    return RenderContext(domain="bestlawyers.com", shell=shell)


def _article(**overrides) -> Article:
    fields = {
        "id": "a1",
        "slug": "guide",
        "title": "Guide",
        "status": "published",
        "content_markdown": "Intro text.",
    }
    fields.update(overrides)
    return Article(**fields)


class TestH2Extraction:
    def test_n_headings_yield_n_sections(self):
        md = "Preamble\n\n## One\nFirst body\n\n## Two\nSecond\nbody\n\n## Three\n"
        sections = extract_h2_sections(md)
        assert [s.heading for s in sections] == ["One", "Two", "Three"]
        assert sections[0].body == "First body"
        assert sections[1].body == "Second\nbody"
        assert sections[2].body == ""

    def test_level_three_headings_stay_in_body(self):
        sections = extract_h2_sections("## Q\n### Detail\ntext")
        assert len(sections) == 1
        assert sections[0].body == "### Detail\ntext"

    def test_no_headings(self):
        assert extract_h2_sections("Just text") == []

    def test_crlf_line_endings(self):
        sections = extract_h2_sections("## First step\r\nDo this\r\n## Second step\r\nThen that\r\n")
        assert [s.heading for s in sections] == ["First step", "Second step"]
        assert sections[0].body == "Do this"

    def test_faq_items_match_headings(self):
        md = "## What is it?\nA thing.\n## Why?\nBecause."
        assert len(extract_faq_items(md)) == 2


class TestTruncateAtSentence:
    def test_short_text_unchanged(self):
        assert truncate_at_sentence("Short.", 500) == "Short."

    def test_cuts_at_sentence_end(self):
        text = "First sentence here. Second sentence that runs on and on."
        assert truncate_at_sentence(text, 30) == "First sentence here...."

    def test_cuts_at_space_without_period(self):
        assert truncate_at_sentence("aaa bbb ccc ddd", 10) == "aaa bbb..."


class TestDispatch:
    def test_every_content_type_has_a_renderer(self):
        for content_type in ContentType:
            assert callable(renderer_for(content_type))

    def test_unknown_content_type_falls_back_to_article(self):
        article = _article(content_type="mystery_type")
        assert article.content_type is ContentType.ARTICLE

    @pytest.mark.parametrize("content_type", [c.value for c in ContentType])
    def test_title_is_escaped_for_every_type(self, ctx, content_type):
        html = render_article(_article(title=XSS_TITLE, content_type=content_type), ctx)
        assert XSS_TITLE not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html

    def test_missing_shell_raises(self):
        with pytest.raises(PageShellMissingError):
            render_article(_article(), RenderContext(domain="x.com", shell=None))


class TestArticlePage:
    def test_document_structure(self, ctx):
        html = render_article(_article(meta_description="A useful guide"), ctx)
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Guide | Best Lawyers</title>" in html
        assert 'href="https://bestlawyers.com/guide"' in html
        assert '"@type": "Article"' in html
        assert "<p>Intro text.</p>" in html

    def test_health_decision_has_medical_disclaimer(self, ctx):
        html = render_article(_article(content_type="health_decision"), ctx)
        assert "Medical Disclaimer" in html

    def test_freshness_badge_when_recently_updated(self, ctx):
        html = render_article(_article(updated_at=datetime.now(timezone.utc)), ctx)
        assert "freshness-green" in html


class TestFaqPage:
    def test_details_per_question(self, ctx):
        md = "## Q1\nA1\n## Q2\nA2\n## Q3\nA3"
        html = render_article(_article(content_type="faq", content_markdown=md), ctx)
        assert html.count('<details class="faq-item">') == 3
        assert '"@type": "FAQPage"' in html


class TestChecklistPage:
    def test_checkbox_per_step(self, ctx):
        md = "## Gather documents\nIDs\n## File claim\nOnline"
        html = render_article(_article(content_type="checklist", content_markdown=md), ctx)
        assert html.count('<input type="checkbox" id="checklist-step-') == 2
        assert "1. Gather documents" in html
        assert "<span>2</span> completed" in html


class TestCalculatorPage:
    def test_inputs_and_outputs(self, ctx):
        config = CalculatorConfig(
            inputs=[CalculatorInput(id="loan_amount", label="Loan", default=200000, min=0)],
            outputs=[CalculatorOutput(id="monthly", label="Monthly", format="currency")],
            formula="Mortgage Payment",
        )
        html = render_article(_article(content_type="calculator", calculator_config=config), ctx)
        assert 'id="loan_amount"' in html
        assert 'value="200000"' in html
        assert 'id="monthly"' in html
        assert '"formula": "mortgage_payment"' in html

    def test_not_configured_notice_is_present(self, ctx):
        config = CalculatorConfig(inputs=[CalculatorInput(id="x", label="X")])
        html = render_article(_article(content_type="calculator", calculator_config=config), ctx)
        assert NOT_CONFIGURED_NOTICE.replace("'", "&#39;") in html

    def test_formula_key(self):
        assert formula_key("Compound-Interest") == "compound_interest"
        assert formula_key(None) == ""

    def test_number_attr(self):
        assert number_attr(5.0) == "5"
        assert number_attr(2.5) == "2.5"
        assert number_attr(None) == ""


class TestComparisonPage:
    def test_table_and_verdict(self, ctx):
        data = ComparisonData(
            options=[
                ComparisonOption(name="Acme", scores={"price": 10, "rating": 4.5}),
                ComparisonOption(name="Zed", scores={"price": 20, "rating": 3}),
            ],
            columns=[
                ComparisonColumn(key="price", label="Price", type="number"),
                ComparisonColumn(key="rating", label="Rating", type="rating"),
            ],
            verdict="Acme wins",
        )
        html = render_article(_article(content_type="comparison", comparison_data=data), ctx)
        assert "Acme wins" in html
        assert "Acme" in html and "Zed" in html
        assert '"@type": "ItemList"' in html


class TestCostGuide:
    def test_structured_ranges(self, ctx):
        data = CostGuideData(ranges=[CostRange(label="Basic", low=100, high=300)])
        html = render_article(_article(content_type="cost_guide", cost_guide_data=data), ctx)
        assert "Basic" in html
        assert "$100" in html

    def test_average_of_data_points(self):
        assert compute_average([100, 200, 300], 100, 300) == 200

    def test_parse_cost_range(self):
        parsed = parse_cost_range("Costs run $1,000 to $3,000 nationally")
        assert parsed.low == 1000
        assert parsed.high == 3000

    def test_parse_cost_range_needs_two_amounts(self):
        assert parse_cost_range("About $500") is None


class TestLeadCapture:
    def test_https_endpoint_kept(self, ctx):
        config = LeadGenConfig(
            fields=[LeadField(name="email", label="Email", type="email", required=True)],
            endpoint="https://leads.example.com/submit",
        )
        html = render_article(_article(content_type="lead_capture", lead_gen_config=config), ctx)
        assert "https://leads.example.com/submit" in html
        assert 'name="email"' in html

    def test_http_endpoint_blocked(self, ctx):
        config = LeadGenConfig(fields=[LeadField(name="email", label="Email")], endpoint="http://insecure.example.com")
        html = render_article(_article(content_type="lead_capture", lead_gen_config=config), ctx)
        assert "insecure.example.com" not in html


class TestWizardPage:
    def test_unconfigured_wizard_notice(self, ctx):
        html = render_article(_article(content_type="quiz"), ctx)
        assert NOT_AVAILABLE_NOTICE in html

    def test_steps_rendered(self, ctx):
        config = WizardConfig(
            steps=[
                WizardStep(id="s1", title="First", fields=[WizardField(id="f1", label="Pick", type="text")]),
                WizardStep(id="s2", title="Second"),
            ]
        )
        html = render_article(_article(content_type="wizard", wizard_config=config), ctx)
        assert 'data-wizard-mode="wizard"' in html
        assert "First" in html and "Second" in html
        assert "eval(" not in html


class TestEmbedPage:
    def test_article_is_not_embeddable(self):
        assert render_embed_page(_article(), "x.com") is None

    def test_calculator_without_inputs_shows_notice(self):
        html = render_embed_page(_article(content_type="calculator"), "x.com")
        assert UNAVAILABLE_NOTICE in html

    def test_calculator_embed_uses_prefixed_ids(self):
        config = CalculatorConfig(inputs=[CalculatorInput(id="amount", label="Amount")])
        html = render_embed_page(_article(content_type="calculator", calculator_config=config), "x.com")
        assert 'id="e-amount"' in html
