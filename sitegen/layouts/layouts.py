"""Structural layout presets and their CSS.

A layout is nothing more than six independent structural choices.  Each
axis has its own CSS function and a layout's stylesheet fragment is the
ordered concatenation of the six fragments, which is how twenty distinct
site structures come out of a handful of small CSS snippets.

Every fragment opens with a marker comment naming its axis and choice
(``/* Header: topbar */``), so the composed CSS can be inspected without a
browser.
"""

import logging
from typing import Dict, Literal, NamedTuple, Optional

from sitegen.config import DEFAULT_LAYOUT

logger = logging.getLogger(__name__)

MaxWidth = Literal["narrow", "medium", "wide", "full"]
Grid = Literal["single", "sidebar-right", "sidebar-left"]
HeaderStyle = Literal["simple", "centered", "topbar", "minimal"]
HeroStyle = Literal["none", "centered-text", "gradient-split", "full-width-dark", "card"]
ListingStyle = Literal["list", "card-grid-2col", "card-grid-3col", "magazine-mixed", "compact-table", "none"]
FooterStyle = Literal["minimal", "multi-column", "cta-bar", "newsletter"]


class LayoutConfig(NamedTuple):
    max_width: MaxWidth
    grid: Grid
    header: HeaderStyle
    hero: HeroStyle
    listing: ListingStyle
    footer: FooterStyle

    @property
    def has_sidebar(self) -> bool:
        return self.grid != "single"


LAYOUTS: Dict[str, LayoutConfig] = {
    "authority": LayoutConfig("wide", "sidebar-right", "topbar", "full-width-dark", "magazine-mixed", "multi-column"),
    "comparison": LayoutConfig("wide", "single", "simple", "gradient-split", "card-grid-3col", "cta-bar"),
    "calculator": LayoutConfig("medium", "single", "minimal", "card", "list", "minimal"),
    "review": LayoutConfig("wide", "sidebar-right", "topbar", "none", "card-grid-2col", "multi-column"),
    "tool": LayoutConfig("full", "single", "minimal", "none", "compact-table", "minimal"),
    "hub": LayoutConfig("wide", "single", "topbar", "centered-text", "card-grid-3col", "multi-column"),
    "decision": LayoutConfig("narrow", "single", "centered", "centered-text", "list", "minimal"),
    "cost_guide": LayoutConfig("wide", "sidebar-left", "simple", "gradient-split", "card-grid-2col", "cta-bar"),
    "niche": LayoutConfig("narrow", "single", "centered", "none", "list", "minimal"),
    "info": LayoutConfig("wide", "sidebar-left", "topbar", "none", "compact-table", "multi-column"),
    "consumer": LayoutConfig("wide", "single", "topbar", "gradient-split", "card-grid-3col", "newsletter"),
    "brand": LayoutConfig("medium", "single", "centered", "full-width-dark", "card-grid-2col", "minimal"),
    "magazine": LayoutConfig("wide", "single", "topbar", "full-width-dark", "magazine-mixed", "multi-column"),
    "landing": LayoutConfig("full", "single", "minimal", "gradient-split", "none", "cta-bar"),
    "docs": LayoutConfig("wide", "sidebar-left", "topbar", "none", "list", "minimal"),
    "storefront": LayoutConfig("wide", "single", "topbar", "card", "card-grid-3col", "multi-column"),
    "minimal": LayoutConfig("narrow", "single", "minimal", "none", "list", "minimal"),
    "dashboard": LayoutConfig("full", "sidebar-left", "topbar", "none", "compact-table", "minimal"),
    "newsletter": LayoutConfig("narrow", "single", "centered", "centered-text", "list", "newsletter"),
    "community": LayoutConfig("wide", "sidebar-right", "topbar", "centered-text", "card-grid-2col", "multi-column"),
}


def get_layout_config(template: Optional[str]) -> LayoutConfig:
    """Return the preset named *template*, falling back to the default layout."""
    if not template:
        return LAYOUTS[DEFAULT_LAYOUT]
    layout = LAYOUTS.get(template)
    if layout is None:
        logger.warning("Unknown layout %r – falling back to %s", template, DEFAULT_LAYOUT)
        return LAYOUTS[DEFAULT_LAYOUT]
    return layout


# ── Max width ────────────────────────────────────────────────────────────────

_MAX_WIDTHS = {"narrow": "640px", "medium": "800px", "wide": "1100px", "full": "100%"}


def max_width_css(width: MaxWidth) -> str:
    padding = "0 1.5rem" if width == "full" else "0 1rem"
    return (
        f"/* Max width: {width} */\n"
        f".site-container{{max-width:{_MAX_WIDTHS[width]};margin:0 auto;padding:{padding}}}\n"
    )


# ── Grid ─────────────────────────────────────────────────────────────────────

_SIDEBAR_CSS = """.sidebar{position:sticky;top:1.5rem}
.sidebar-section{background:var(--color-bg-surface,#f8fafc);border:var(--border-width,1px) solid var(--color-border);border-radius:var(--radius-lg,.75rem);padding:1.25rem;margin-bottom:1rem}
.sidebar-section h3{font-size:0.9rem;font-weight:700;text-transform:uppercase;letter-spacing:0.05em;color:var(--color-text-muted);margin-bottom:0.75rem}
.sidebar-section ul{list-style:none;padding:0;margin:0}
.sidebar-section li{padding:0.375rem 0;border-bottom:1px solid var(--color-border)}
.sidebar-section li:last-child{border-bottom:none}
.sidebar-section a{color:var(--color-link);text-decoration:none;font-size:0.875rem}
@media(max-width:768px){
  .layout-wrap{grid-template-columns:1fr}
  .sidebar{position:static;order:99}
}
"""


def grid_css(grid: Grid) -> str:
    if grid == "single":
        return "/* Grid: single column */\n.layout-wrap{display:block}\n.sidebar{display:none}\n"

    columns = "1fr 280px" if grid == "sidebar-right" else "280px 1fr"
    order = "" if grid == "sidebar-right" else ".sidebar{order:-1}\n"
    return (
        f"/* Grid: {grid} */\n"
        f".layout-wrap{{display:grid;grid-template-columns:{columns};gap:2rem;align-items:start}}\n"
        f"{order}{_SIDEBAR_CSS}"
    )


# ── Header ───────────────────────────────────────────────────────────────────

_HEADER_CSS = {
    "minimal": """header{padding:1rem 0;border-bottom:var(--border-width,1px) solid var(--color-border,#e2e8f0)}
header .site-container{display:flex;align-items:center;justify-content:space-between}
header .logo{font-family:var(--font-heading);font-size:1.125rem;font-weight:700;color:var(--color-text);text-decoration:none}
header nav{display:none}
""",
    "centered": """header{padding:1.5rem 0;text-align:center;border-bottom:var(--border-width,1px) solid var(--color-border,#e2e8f0);background:var(--color-bg)}
header .site-container{display:flex;flex-direction:column;align-items:center;gap:0.75rem}
header .logo{font-family:var(--font-heading);font-size:1.5rem;font-weight:800;color:var(--color-text);text-decoration:none;letter-spacing:-0.025em}
header nav{display:flex;gap:1.5rem;flex-wrap:wrap;justify-content:center}
header nav a{color:var(--color-text-muted);text-decoration:none;font-size:0.875rem;font-weight:500}
header nav a:hover{color:var(--color-text)}
""",
    "topbar": """header{background:var(--color-primary,#1e293b);color:var(--color-badge-text,#f8fafc);padding:0;border-bottom:2px solid var(--color-header-border,transparent)}
header .site-container{display:flex;align-items:center;justify-content:space-between;padding-top:0.875rem;padding-bottom:0.875rem;max-width:1200px}
header .logo{font-family:var(--font-heading);font-size:1.25rem;font-weight:700;color:var(--color-badge-text,#f8fafc);text-decoration:none}
header nav{display:flex;gap:1.25rem}
header nav a{color:rgba(255,255,255,.7);text-decoration:none;font-size:0.875rem;font-weight:500}
header nav a:hover{color:#fff}
@media(max-width:640px){
  header .site-container{flex-direction:column;gap:0.5rem;text-align:center}
  header nav{flex-wrap:wrap;justify-content:center}
}
""",
    "simple": """header{padding:1.25rem 0;border-bottom:2px solid var(--color-border,#e2e8f0);background:var(--color-bg)}
header .site-container{display:flex;align-items:center;justify-content:space-between}
header .logo{font-family:var(--font-heading);font-size:1.25rem;font-weight:700;color:var(--color-text);text-decoration:none}
header nav{display:flex;gap:1.25rem}
header nav a{color:var(--color-text-muted);text-decoration:none;font-size:0.9rem}
header nav a:hover{color:var(--color-text);text-decoration:underline}
""",
}


def header_css(header: HeaderStyle) -> str:
    return f"/* Header: {header} */\n" + _HEADER_CSS.get(header, _HEADER_CSS["simple"])


# ── Hero ─────────────────────────────────────────────────────────────────────

_HERO_CSS = {
    "none": """.hero{padding:2.5rem 0 1.5rem}
.hero h1{font-size:clamp(1.75rem,4vw,2.25rem);margin-bottom:0.75rem}
.hero-sub{color:var(--color-text-muted);font-size:1.1rem;max-width:600px}
.hero-badge{display:inline-block;background:var(--color-badge-bg);color:var(--color-badge-text);padding:0.25rem 0.75rem;border-radius:var(--radius-full,999px);font-size:0.78rem;font-weight:600;margin-bottom:1rem}
.hero-cta{display:inline-block;margin-top:1.25rem}
""",
    "centered-text": """.hero{text-align:center;padding:4rem 1.5rem;border-bottom:var(--border-width,1px) solid var(--color-border);background:var(--color-hero-bg,var(--color-bg-surface))}
.hero h1{font-size:clamp(2rem,5vw,2.75rem);font-weight:800;letter-spacing:-0.03em;margin-bottom:0.75rem;color:var(--color-hero-text,var(--color-text))}
.hero-sub{color:var(--color-text-muted);font-size:1.15rem;max-width:600px;margin:0 auto;line-height:1.65}
.hero-badge{display:inline-block;background:var(--color-badge-bg);color:var(--color-badge-text);padding:0.3rem 0.9rem;border-radius:var(--radius-full,999px);font-size:0.8rem;font-weight:600;margin-bottom:1.25rem}
.hero-cta{display:inline-block;margin-top:1.5rem;background:var(--color-accent);color:#fff;padding:0.75rem 2rem;border-radius:var(--radius-md,.5rem);font-weight:600}
""",
    "gradient-split": """.hero{background:var(--color-hero-bg,linear-gradient(135deg,var(--color-primary),var(--color-primary-hover)));color:var(--color-hero-text,#f8fafc);padding:3.5rem 2rem;border-radius:var(--radius-lg,.75rem);margin:1.5rem 0}
.hero h1{font-size:clamp(2rem,5vw,2.5rem);font-weight:800;margin-bottom:0.75rem;color:inherit}
.hero-sub{color:rgba(255,255,255,.75);font-size:1.1rem;max-width:640px;line-height:1.65}
.hero-badge{display:inline-block;background:rgba(255,255,255,.15);color:#fff;padding:0.3rem 0.9rem;border-radius:var(--radius-full,999px);font-size:0.8rem;font-weight:600;margin-bottom:1.25rem}
.hero-cta{display:inline-block;margin-top:1.5rem;background:#fff;color:var(--color-primary);padding:0.75rem 2rem;border-radius:var(--radius-md,.5rem);font-weight:600}
""",
    "full-width-dark": """.hero{background:var(--color-primary,#0f172a);color:var(--color-hero-text,#f8fafc);padding:4rem 2rem;text-align:center}
.hero h1{font-size:clamp(2rem,5vw,2.75rem);font-weight:800;letter-spacing:-0.03em;margin-bottom:0.75rem;color:inherit}
.hero-sub{color:rgba(255,255,255,.65);font-size:1.15rem;max-width:640px;margin:0 auto;line-height:1.65}
.hero-badge{display:inline-block;background:rgba(255,255,255,.1);color:#fff;padding:0.3rem 0.9rem;border-radius:var(--radius-full,999px);font-size:0.8rem;font-weight:600;margin-bottom:1.25rem}
.hero-cta{display:inline-block;margin-top:1.5rem;background:#fff;color:var(--color-primary);padding:0.75rem 2rem;border-radius:var(--radius-md,.5rem);font-weight:600}
""",
    "card": """.hero{background:var(--color-bg-surface,#f8fafc);border:var(--border-width,1px) solid var(--color-border);border-radius:var(--radius-lg,1rem);padding:3rem 2rem;margin:1.5rem 0;text-align:center}
.hero h1{font-size:clamp(1.75rem,4vw,2.25rem);font-weight:700;margin-bottom:0.5rem}
.hero-sub{color:var(--color-text-muted);font-size:1.05rem;max-width:560px;margin:0 auto}
.hero-badge{display:inline-block;background:var(--color-badge-bg);color:var(--color-badge-text);padding:0.25rem 0.75rem;border-radius:var(--radius-full,999px);font-size:0.78rem;font-weight:600;margin-bottom:1rem}
.hero-cta{display:inline-block;margin-top:1.25rem;background:var(--color-accent);color:#fff;padding:0.625rem 1.5rem;border-radius:var(--radius-md,.5rem);font-weight:600}
""",
}


def hero_css(hero: HeroStyle) -> str:
    return f"/* Hero: {hero} */\n" + _HERO_CSS.get(hero, "")


# ── Article listing ──────────────────────────────────────────────────────────

_LISTING_CSS = {
    "list": """.articles ul{list-style:none;padding:0}
.articles li{padding:0.875rem 0;border-bottom:1px solid var(--color-border)}
.articles li:last-child{border-bottom:none}
.articles a{color:var(--color-text);text-decoration:none;font-weight:500;font-size:1.05rem}
.articles a:hover{color:var(--color-link)}
""",
    "card-grid-2col": """.articles ul{list-style:none;padding:0;display:grid;grid-template-columns:repeat(2,1fr);gap:1.25rem}
.articles li{background:var(--color-bg-surface);border:var(--border-width,1px) solid var(--color-border);border-radius:var(--radius-lg,.75rem);padding:1.25rem}
.articles li:hover{box-shadow:var(--shadow-md);transform:translateY(-2px)}
.articles a{color:var(--color-text);text-decoration:none;font-weight:600;font-size:1rem;display:block}
@media(max-width:640px){.articles ul{grid-template-columns:1fr}}
""",
    "card-grid-3col": """.articles ul{list-style:none;padding:0;display:grid;grid-template-columns:repeat(3,1fr);gap:1.25rem}
.articles li{background:var(--color-bg);border:var(--border-width,1px) solid var(--color-border);border-radius:var(--radius-lg,.75rem);padding:1.25rem}
.articles li:hover{box-shadow:var(--shadow-md);transform:translateY(-2px)}
.articles a{color:var(--color-text);text-decoration:none;font-weight:600;font-size:0.95rem;display:block}
@media(max-width:900px){.articles ul{grid-template-columns:repeat(2,1fr)}}
@media(max-width:640px){.articles ul{grid-template-columns:1fr}}
""",
    "magazine-mixed": """.articles ul{list-style:none;padding:0;display:grid;grid-template-columns:repeat(3,1fr);gap:1.25rem}
.articles li:first-child{grid-column:1/-1;background:linear-gradient(135deg,var(--color-primary),var(--color-primary-hover));border-radius:var(--radius-lg,1rem);padding:2rem}
.articles li:first-child a{color:#fff;font-size:1.5rem;font-weight:800}
.articles li:not(:first-child){background:var(--color-bg-surface);border:var(--border-width,1px) solid var(--color-border);border-radius:var(--radius-lg,.75rem);padding:1.25rem}
.articles a{color:var(--color-text);text-decoration:none;font-weight:600;display:block}
@media(max-width:768px){.articles ul{grid-template-columns:1fr}.articles li:first-child{padding:1.5rem}}
""",
    "compact-table": """.articles ul{list-style:none;padding:0;border:var(--border-width,1px) solid var(--color-border,#e2e8f0);border-radius:var(--radius-md,.5rem);overflow:hidden}
.articles li{padding:0.75rem 1rem;border-bottom:1px solid var(--color-border,#f1f5f9);display:flex;align-items:center;justify-content:space-between}
.articles li:last-child{border-bottom:none}
.articles li:hover{background:var(--color-bg-surface,#f8fafc)}
.articles a{color:var(--color-text,#1e293b);text-decoration:none;font-weight:500;font-size:0.95rem}
""",
    "none": ".articles{display:none}\n",
}


def listing_css(listing: ListingStyle) -> str:
    return f"/* Listing: {listing} */\n" + _LISTING_CSS.get(listing, "")


# ── Footer ───────────────────────────────────────────────────────────────────

_FOOTER_COLUMNS_CSS = """.footer-columns{display:flex;gap:2rem;justify-content:center;margin-bottom:1rem;flex-wrap:wrap}
.footer-col h4{font-size:0.8rem;text-transform:uppercase;letter-spacing:0.05em;margin-bottom:0.5rem}
.footer-col ul{list-style:none}
.footer-disclaimer{font-size:0.8rem;max-width:600px;margin:0 auto 1rem;text-align:center;line-height:1.5}
"""

_FOOTER_CSS = {
    "minimal": """footer{padding:2.5rem 0;border-top:var(--border-width,1px) solid var(--color-border);text-align:center;color:var(--color-text-muted);font-size:0.85rem;margin-top:3rem}
footer a{color:var(--color-text-muted);text-decoration:none;font-size:0.85rem}
footer a:hover{color:var(--color-text);text-decoration:underline}
""" + _FOOTER_COLUMNS_CSS,
    "multi-column": """footer{background:var(--color-footer-bg,#1e293b);color:var(--color-footer-text,#cbd5e1);padding:3rem 0 1.5rem;margin-top:3rem}
footer p{text-align:center;font-size:0.8rem;opacity:.7}
footer a{color:var(--color-footer-text,#94a3b8);text-decoration:none}
footer a:hover{color:#fff}
.footer-columns{display:grid;grid-template-columns:repeat(auto-fit,minmax(160px,1fr));gap:2rem;margin-bottom:2rem;padding-bottom:2rem;border-bottom:1px solid rgba(255,255,255,.1)}
.footer-col h4{font-size:0.8rem;text-transform:uppercase;letter-spacing:0.06em;margin-bottom:0.75rem;color:rgba(255,255,255,.5)}
.footer-col ul{list-style:none}
.footer-col li{margin-bottom:0.375rem}
.footer-disclaimer{font-size:0.8rem;opacity:.6;max-width:600px;margin:0 auto 1.5rem;text-align:center;line-height:1.5}
""",
    "cta-bar": """footer{padding:0;margin-top:3rem}
.footer-cta{background:linear-gradient(135deg,var(--color-primary),var(--color-accent));color:#fff;padding:2.5rem;text-align:center;border-radius:var(--radius-lg) var(--radius-lg) 0 0}
.footer-cta h3{font-size:1.25rem;font-weight:700;margin-bottom:0.5rem}
.footer-cta a{display:inline-block;background:#fff;color:var(--color-primary);padding:0.75rem 1.75rem;border-radius:var(--radius-md);font-weight:600;text-decoration:none}
.footer-bottom{background:var(--color-footer-bg,#1e293b);color:var(--color-footer-text,#94a3b8);padding:1.25rem 1.5rem;text-align:center;font-size:0.8rem}
footer .footer-bottom a{color:var(--color-footer-text,#94a3b8);text-decoration:none}
""" + _FOOTER_COLUMNS_CSS,
    "newsletter": """footer{padding:0;margin-top:3rem}
.footer-newsletter{background:var(--color-bg-surface,#f8fafc);border-top:2px solid var(--color-border);padding:2.5rem;text-align:center}
.footer-newsletter h4{font-size:1.125rem;font-weight:700;margin-bottom:0.25rem}
.newsletter-form{display:flex;gap:0.5rem;max-width:420px;margin:0 auto}
.newsletter-form input[type="email"]{flex:1;padding:0.625rem 0.875rem;border:var(--border-width,1px) solid var(--color-border-strong);border-radius:var(--radius-md,.375rem)}
.newsletter-form button{background:var(--color-accent,#2563eb);color:#fff;padding:0.625rem 1.5rem;border:none;border-radius:var(--radius-md,.375rem);font-weight:600;cursor:pointer}
.footer-bottom{padding:1.5rem;text-align:center;color:var(--color-text-muted);font-size:0.8rem}
footer a{color:var(--color-text-muted);text-decoration:none}
@media(max-width:480px){.newsletter-form{flex-direction:column}.newsletter-form button{width:100%}}
""" + _FOOTER_COLUMNS_CSS,
}


def footer_css(footer: FooterStyle) -> str:
    return f"/* Footer: {footer} */\n" + _FOOTER_CSS.get(footer, "")


def get_layout_styles(layout: LayoutConfig) -> str:
    """Compose the six axis fragments, in axis order."""
    return "\n".join(
        [
            max_width_css(layout.max_width),
            grid_css(layout.grid),
            header_css(layout.header),
            hero_css(layout.hero),
            listing_css(layout.listing),
            footer_css(layout.footer),
        ]
    )
