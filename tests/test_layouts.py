"""Tests for layout presets, theme tokens and stylesheet composition."""

import pytest

from sitegen.config import DEFAULT_LAYOUT
from sitegen.layouts.layouts import LAYOUTS, get_layout_config, get_layout_styles
from sitegen.layouts.stylesheet import build_article_stylesheet, build_block_stylesheet
from sitegen.layouts.themes import (
    LEGACY_THEME_STYLES,
    SKINS,
    THEMES,
    build_token_stylesheet,
    darken,
    get_legacy_theme_styles,
    lighten,
    normalize_key,
    resolve_theme,
)


def _markers(layout):
    grid = "single column" if layout.grid == "single" else layout.grid
    return [
        f"/* Max width: {layout.max_width} */",
        f"/* Grid: {grid} */",
        f"/* Header: {layout.header} */",
        f"/* Hero: {layout.hero} */",
        f"/* Listing: {layout.listing} */",
        f"/* Footer: {layout.footer} */",
    ]


class TestLayoutComposition:
    def test_twenty_layouts(self):
        assert len(LAYOUTS) == 20

    @pytest.mark.parametrize("name", sorted(LAYOUTS))
    def test_each_axis_marker_appears_exactly_once(self, name):
        layout = LAYOUTS[name]
        css = get_layout_styles(layout)
        for marker in _markers(layout):
            assert css.count(marker) == 1, marker

    @pytest.mark.parametrize("name", sorted(LAYOUTS))
    def test_full_stylesheet_keeps_markers_unique(self, name):
        layout = LAYOUTS[name]
        css = build_article_stylesheet(layout, None)
        for marker in _markers(layout):
            assert css.count(marker) == 1, marker

    def test_axes_are_composed_in_order(self):
        css = get_layout_styles(LAYOUTS["authority"])
        positions = [css.index(m) for m in _markers(LAYOUTS["authority"])]
        assert positions == sorted(positions)

    def test_sidebar_css_only_with_sidebar(self):
        assert ".sidebar-section" in get_layout_styles(LAYOUTS["authority"])
        assert ".sidebar-section" not in get_layout_styles(LAYOUTS["minimal"])

    def test_has_sidebar(self):
        assert LAYOUTS["docs"].has_sidebar is True
        assert LAYOUTS["landing"].has_sidebar is False


class TestGetLayoutConfig:
    def test_known_layout(self):
        assert get_layout_config("hub") == LAYOUTS["hub"]

    def test_missing_layout_uses_default(self):
        assert get_layout_config(None) == LAYOUTS[DEFAULT_LAYOUT]

    def test_unknown_layout_uses_default(self):
        assert get_layout_config("spaceship") == LAYOUTS[DEFAULT_LAYOUT]


class TestThemeResolution:
    def test_explicit_valid_pair(self):
        result = resolve_theme(theme="bold", skin="coral")
        assert (result.theme, result.skin, result.source) == ("bold", "coral", "explicit")

    def test_legacy_theme_style_mapping(self):
        result = resolve_theme(theme_style="tech-modern")
        assert (result.theme, result.skin) == ("bold", "midnight")

    def test_invalid_pair_falls_to_policy(self):
        result = resolve_theme(theme="nope", skin="slate", vertical="Real Estate")
        assert (result.theme, result.skin, result.source) == ("editorial", "ember", "policy_fallback")

    def test_niche_used_when_vertical_unknown(self):
        result = resolve_theme(vertical="underwater basket weaving", niche="health")
        assert result.source == "policy_fallback"
        assert result.theme == "clean"

    def test_global_fallback(self):
        result = resolve_theme()
        assert (result.theme, result.skin, result.source) == ("clean", "slate", "global_fallback")

    def test_normalize_key(self):
        assert normalize_key(" Real-Estate ") == "real_estate"
        assert normalize_key("") is None


class TestTokenStylesheet:
    def test_every_theme_and_skin_renders(self):
        for theme in THEMES:
            for skin in SKINS:
                css = build_token_stylesheet(theme, skin)
                assert "--font-heading:" in css
                assert "--color-primary:" in css

    def test_dark_skin_has_no_dark_mode_override(self):
        assert "prefers-color-scheme" not in build_token_stylesheet("clean", "midnight")
        assert "prefers-color-scheme" in build_token_stylesheet("clean", "slate")

    def test_block_stylesheet_starts_with_tokens(self):
        css = build_block_stylesheet(LAYOUTS["hub"], "clean", "slate")
        assert css.startswith(":root{")
        assert "/* Hero: centered-text */" in css

    def test_lighten_and_darken(self):
        assert lighten("#000000", 1.0) == "#ffffff"
        assert darken("#ffffff", 1.0) == "#000000"
        assert lighten("linear-gradient(red,blue)", 0.5) == "linear-gradient(red,blue)"


class TestLegacyStyles:
    def test_known_style(self):
        assert get_legacy_theme_styles("navy-serif") == LEGACY_THEME_STYLES["navy-serif"]

    def test_unknown_style_uses_default(self):
        assert get_legacy_theme_styles("mystery") == get_legacy_theme_styles(None)
