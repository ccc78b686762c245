"""Tests for the shared header/footer/sidebar frame."""

import pytest
from markupsafe import Markup

from sitegen.errors import PageShellMissingError
from sitegen.layouts.layouts import LAYOUTS
from sitegen.models.domain import DisclosureSettings, MonetizationScripts
from sitegen.services.page_shell import (
    MAX_SIDEBAR_LINKS,
    NavLink,
    build_page_shell,
    trust_page_links,
    wrap_in_html_page,
)


class TestTrustPageLinks:
    def test_only_pages_with_content(self):
        disclosure = DisclosureSettings(about_content="About us", how_we_money_content="Ads")
        assert trust_page_links(disclosure) == [
            NavLink("About", "/about/"),
            NavLink("How We Make Money", "/how-we-make-money/"),
        ]

    def test_no_disclosure(self):
        assert trust_page_links(None) == []


class TestBuildPageShell:
    def test_header_has_home_and_trust_links(self):
        shell = build_page_shell(
            "Best Lawyers", LAYOUTS["hub"], DisclosureSettings(editorial_policy_content="Policy"), year=2025
        )
        assert 'href="/"' in shell.header_html
        assert 'href="/editorial-policy/"' in shell.header_html
        assert "header--topbar" in shell.header_html

    def test_minimal_header_hides_nav(self):
        shell = build_page_shell("Site", LAYOUTS["minimal"], year=2025)
        assert "<nav>" not in shell.header_html

    def test_footer_copyright_and_disclaimer(self):
        disclosure = DisclosureSettings(advertising_disclosure="Ad-supported site.")
        shell = build_page_shell("Site", LAYOUTS["authority"], disclosure, year=2031)
        assert "2031 Site" in shell.footer_html
        assert "Ad-supported site." in shell.footer_html
        assert "footer--multi-column" in shell.footer_html

    def test_newsletter_footer(self):
        shell = build_page_shell("Site", LAYOUTS["newsletter"], year=2025)
        assert "newsletter-form" in shell.footer_html

    def test_sidebar_caps_links(self):
        links = [NavLink(f"Guide {i}", f"/guide-{i}/") for i in range(10)]
        shell = build_page_shell("Site", LAYOUTS["authority"], nav_links=links, niche="personal_injury", year=2025)
        assert shell.has_sidebar is True
        assert shell.sidebar_html.count("<li>") == MAX_SIDEBAR_LINKS
        assert "personal injury" in shell.sidebar_html

    def test_no_sidebar_for_single_column(self):
        shell = build_page_shell("Site", LAYOUTS["landing"], year=2025)
        assert shell.sidebar_html == ""

    def test_site_title_is_escaped(self):
        shell = build_page_shell("<b>Site</b>", LAYOUTS["hub"], year=2025)
        assert "<b>Site</b>" not in shell.header_html

    def test_monetization_inserted_verbatim(self):
        scripts = MonetizationScripts(head='<script src="https://ads.example/a.js"></script>', body="<!-- body -->")
        shell = build_page_shell("Site", LAYOUTS["hub"], monetization=scripts, year=2025)
        assert shell.head_scripts == scripts.head
        assert shell.body_scripts == scripts.body


class TestWrapInHtmlPage:
    def test_full_document(self):
        shell = build_page_shell("Site", LAYOUTS["authority"], year=2025)
        html = wrap_in_html_page("Title", "Description", Markup("<p>Body</p>"), shell)
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Title | Site</title>" in html
        assert '<div class="layout-wrap"><main><p>Body</p></main>' in html

    def test_missing_shell(self):
        with pytest.raises(PageShellMissingError):
            wrap_in_html_page("Title", "", Markup(""), None)
