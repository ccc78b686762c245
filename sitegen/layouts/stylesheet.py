"""The one ``styles.css`` each compiled site ships."""

from typing import Optional

from sitegen.layouts.layouts import LayoutConfig, get_layout_styles
from sitegen.layouts.themes import build_token_stylesheet, get_legacy_theme_styles
from sitegen.services.html_env import render_template


def base_styles() -> str:
    return str(render_template("base.css"))


def build_article_stylesheet(layout: LayoutConfig, theme_style: Optional[str]) -> str:
    """Article sites: shared components, the layout fragments, then literal theme colours."""
    return "\n".join([base_styles(), get_layout_styles(layout), get_legacy_theme_styles(theme_style)])


def build_block_stylesheet(layout: LayoutConfig, theme: str, skin: str) -> str:
    """Block sites: theme/skin custom properties first so every later rule can use them."""
    return "\n".join([build_token_stylesheet(theme, skin), base_styles(), get_layout_styles(layout)])
