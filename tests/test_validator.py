"""Tests for the page definition readiness checks."""

from sitegen.models.page import BlockEnvelope, PageDefinition
from sitegen.services.validator import SITE_ROUTE, validate_pages

META = "A description that is long enough for search results."


def _page(route: str, *blocks: BlockEnvelope, meta: str = META) -> PageDefinition:
    return PageDefinition(id=route, route=route, meta_description=meta, blocks=list(blocks))


def _compliant(*extra: PageDefinition):
    return [_page("/"), _page("/privacy-policy"), _page("/terms"), *extra]


def _codes(report):
    return [issue.code for issue in report.issues]


class TestSiteChecks:
    def test_ready_site(self):
        report = validate_pages("bestlawyers.com", _compliant())
        assert report.ready is True
        assert report.error_count == 0
        assert report.issues == []

    def test_empty_site(self):
        report = validate_pages("bestlawyers.com", [])
        assert report.ready is False
        assert _codes(report) == ["no_homepage", "missing_compliance", "missing_compliance"]
        assert all(issue.route == SITE_ROUTE for issue in report.issues)

    def test_privacy_alias_accepted(self):
        report = validate_pages("x.com", [_page("/"), _page("/privacy"), _page("/terms")])
        assert report.ready is True

    def test_short_meta_is_warning(self):
        report = validate_pages("x.com", _compliant(_page("/about", meta="short")))
        assert report.ready is True
        assert report.warning_count == 1
        assert _codes(report) == ["missing_meta"]


class TestBlockChecks:
    def test_broken_nav_and_dropdown(self):
        header = BlockEnvelope(
            id="h",
            type="Header",
            content={
                "siteName": "Best Lawyers",
                "navLinks": [
                    {"label": "Home", "href": "/"},
                    {"label": "Missing", "href": "/missing"},
                    {"label": "More", "href": "/terms", "children": [{"label": "Gone", "href": "/gone"}]},
                    {"label": "External", "href": "https://example.com"},
                ],
            },
        )
        report = validate_pages("bestlawyers.com", _compliant(_page("/nav", header)))
        broken = [issue for issue in report.issues if issue.code == "broken_nav"]
        assert len(broken) == 2
        assert broken[0].block_id == "h"
        assert "/missing" in broken[0].message
        assert broken[1].message.startswith('Dropdown "Gone"')
        assert report.ready is False

    def test_unhumanized_site_name(self):
        header = BlockEnvelope(id="h", type="Header", content={"siteName": "bestlawyers"})
        report = validate_pages("bestlawyers.com", _compliant(_page("/n", header)))
        assert "generic_name" in _codes(report)

    def test_broken_cta(self):
        hero = BlockEnvelope(id="hero", type="Hero", content={"heading": "Injured at work?", "ctaUrl": "/contact"})
        report = validate_pages("x.com", _compliant(_page("/guide", hero)))
        assert _codes(report) == ["broken_link"]

    def test_empty_hero(self):
        hero = BlockEnvelope(id="hero", type="Hero", content={"heading": "Hi"})
        assert "empty_hero" in _codes(validate_pages("x.com", _compliant(_page("/g", hero))))

    def test_empty_interactive_blocks(self):
        blocks = [
            BlockEnvelope(id="q", type="QuoteCalculator"),
            BlockEnvelope(id="c", type="CostBreakdown", content={"ranges": []}),
            BlockEnvelope(id="f", type="FAQ", content={"items": "none"}),
            BlockEnvelope(id="s", type="CitationBlock"),
        ]
        report = validate_pages("x.com", _compliant(_page("/tools", *blocks)))
        assert _codes(report) == ["empty_calculator", "empty_costs", "empty_faq", "empty_citations"]
        assert report.error_count == 3
        assert report.warning_count == 1

    def test_lead_form_without_endpoint(self):
        form = BlockEnvelope(id="l", type="LeadForm", content={"fields": [{"name": "email"}]}, config={"endpoint": "#"})
        assert _codes(validate_pages("x.com", _compliant(_page("/quote", form)))) == ["no_endpoint"]

    def test_placeholder_text(self):
        body = BlockEnvelope(id="b", type="ArticleBody", content={"markdown": "Lorem ipsum dolor"})
        report = validate_pages("x.com", _compliant(_page("/p", body)))
        assert _codes(report) == ["placeholder"]
        assert report.ready is True

    def test_generic_niche_copy(self):
        body = BlockEnvelope(id="b", type="ArticleBody", content={"markdown": "Trusted home services pros"})
        assert "generic_niche" in _codes(validate_pages("x.com", _compliant(_page("/p", body)), niche="legal"))
        assert "generic_niche" not in _codes(
            validate_pages("x.com", _compliant(_page("/p", body)), niche="Home Services")
        )
