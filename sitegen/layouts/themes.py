"""Theme tokens, colour skins and the policy that picks them per domain.

A *theme* controls structure (fonts, radii, shadows, spacing) and a *skin*
controls colour.  Both compile to CSS custom properties on ``:root`` and are
used by block-based pages.  Article pages instead ship one of the legacy
``theme_style`` stylesheets, which carry literal colour values.
"""

import logging
import re
from typing import Dict, NamedTuple, Optional

from sitegen.config import DEFAULT_SKIN, DEFAULT_THEME

logger = logging.getLogger(__name__)


class ThemeTokens(NamedTuple):
    font_heading: str
    font_body: str
    font_mono: str
    font_size_base: str
    line_height: float
    radius_sm: str
    radius_md: str
    radius_lg: str
    radius_full: str
    shadow_sm: str
    shadow_md: str
    shadow_lg: str
    spacing_unit: str
    container_max: str
    border_width: str
    transition_speed: str


THEMES: Dict[str, ThemeTokens] = {
    "clean": ThemeTokens(
        "Public Sans, system-ui, sans-serif", "Public Sans, system-ui, sans-serif", "ui-monospace, monospace",
        "1rem", 1.72, "0.375rem", "0.5rem", "0.75rem", "999px",
        "0 1px 3px rgba(0,0,0,0.08)", "0 4px 12px rgba(0,0,0,0.1)", "0 10px 28px rgba(0,0,0,0.12)",
        "1.6rem", "1100px", "1px", "0.2s",
    ),
    "editorial": ThemeTokens(
        "Merriweather, Georgia, serif", "Source Sans Pro, system-ui, sans-serif", "ui-monospace, monospace",
        "1.05rem", 1.78, "0.25rem", "0.375rem", "0.5rem", "999px",
        "0 2px 4px rgba(0,0,0,0.06)", "0 4px 12px rgba(0,0,0,0.08)", "0 8px 24px rgba(0,0,0,0.1)",
        "1.75rem", "900px", "1px", "0.2s",
    ),
    "bold": ThemeTokens(
        "DM Sans, system-ui, sans-serif", "Inter, system-ui, sans-serif", "JetBrains Mono, ui-monospace, monospace",
        "1rem", 1.7, "0.5rem", "0.75rem", "1.25rem", "999px",
        "0 2px 8px rgba(0,0,0,0.1)", "0 6px 18px rgba(0,0,0,0.12)", "0 12px 36px rgba(0,0,0,0.15)",
        "1.5rem", "1200px", "2px", "0.15s",
    ),
    "minimal": ThemeTokens(
        "system-ui, -apple-system, sans-serif", "system-ui, -apple-system, sans-serif", "ui-monospace, monospace",
        "1.05rem", 1.8, "0.25rem", "0.375rem", "0.5rem", "999px",
        "none", "0 2px 6px rgba(0,0,0,0.06)", "0 4px 12px rgba(0,0,0,0.08)",
        "1.45rem", "680px", "1px", "0.2s",
    ),
}

THEME_FONT_URLS = {
    "clean": "https://fonts.googleapis.com/css2?family=Public+Sans:ital,wght@0,400;0,500;0,600;0,700;0,800;1,400&display=swap",
    "editorial": "https://fonts.googleapis.com/css2?family=Merriweather:ital,wght@0,400;0,700;0,900;1,400&family=Source+Sans+3:ital,wght@0,400;0,500;0,600;0,700;1,400&display=swap",
    "bold": "https://fonts.googleapis.com/css2?family=DM+Sans:ital,wght@0,400;0,500;0,600;0,700;0,800;1,400&family=Inter:wght@400;500;600;700&display=swap",
    # system fonts only
    "minimal": "",
}


class SkinTokens(NamedTuple):
    primary: str
    primary_hover: str
    secondary: str
    bg: str
    bg_surface: str
    text: str
    text_muted: str
    accent: str
    border: str
    border_strong: str
    success: str
    warning: str
    error: str
    hero_bg: str
    hero_text: str
    header_border: str
    footer_bg: str
    footer_text: str
    badge_bg: str
    badge_text: str
    link_color: str
    link_hover: str


SKINS: Dict[str, SkinTokens] = {
    "slate": SkinTokens(
        "#1e293b", "#334155", "#475569", "#ffffff", "#f8fafc", "#1e293b", "#64748b", "#2563eb",
        "#e2e8f0", "#cbd5e1", "#16a34a", "#f59e0b", "#dc2626", "#f9fafb", "#111827", "#e5e7eb",
        "#1e293b", "#94a3b8", "#1e293b", "#ffffff", "#2563eb", "#1d4ed8",
    ),
    "ocean": SkinTokens(
        "#1e3a5f", "#0f2541", "#2563eb", "#f8fbff", "#eff6ff", "#1e293b", "#64748b", "#2563eb",
        "#bfdbfe", "#93c5fd", "#16a34a", "#f59e0b", "#dc2626", "#1e3a5f", "#ffffff", "#1e3a5f",
        "#1e3a5f", "#94a3b8", "#1d4ed8", "#ffffff", "#2563eb", "#1d4ed8",
    ),
    "forest": SkinTokens(
        "#047857", "#065f46", "#059669", "#f0fdf4", "#f7fef9", "#14532d", "#4b7a5c", "#10b981",
        "#bbf7d0", "#86efac", "#16a34a", "#f59e0b", "#dc2626", "#f0fdf4", "#065f46", "#10b981",
        "#14532d", "#86efac", "#22c55e", "#ffffff", "#059669", "#047857",
    ),
    "ember": SkinTokens(
        "#b45309", "#92400e", "#d97706", "#fffbf5", "#fef3c7", "#292524", "#78716c", "#f59e0b",
        "#fed7aa", "#fdba74", "#16a34a", "#f59e0b", "#dc2626", "linear-gradient(135deg,#fef3c7,#fed7aa)",
        "#78350f", "#f59e0b", "#78350f", "#fde68a", "#f59e0b", "#78350f", "#d97706", "#b45309",
    ),
    "midnight": SkinTokens(
        "#38bdf8", "#7dd3fc", "#f59e0b", "#0f172a", "#1e293b", "#e2e8f0", "#94a3b8", "#38bdf8",
        "#334155", "#475569", "#22c55e", "#fbbf24", "#f87171", "#1e293b", "#f1f5f9", "#334155",
        "#020617", "#64748b", "#38bdf8", "#0f172a", "#38bdf8", "#7dd3fc",
    ),
    "coral": SkinTokens(
        "#7c3aed", "#6d28d9", "#fb923c", "#fffaf2", "#fef7ee", "#2d1f45", "#6b5a83", "#fb7185",
        "#fed7aa", "#fdba74", "#16a34a", "#f59e0b", "#dc2626", "linear-gradient(135deg,#fde68a,#fca5a5,#c4b5fd)",
        "#3b0764", "#fb923c", "#3b0764", "#c4b5fd", "#fb7185", "#ffffff", "#7c3aed", "#6d28d9",
    ),
}

# Skins that are already dark get no prefers-color-scheme override.
_DARK_SKINS = {"midnight"}


# ── Colour helpers ───────────────────────────────────────────────────────────

def _parse_hex(value: str):
    h = value.lstrip("#")
    if len(h) != 6:
        return None
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    except ValueError:
        return None


def lighten(value: str, amount: float) -> str:
    """Mix *value* with white.  Non-hex inputs (gradients) are returned as-is."""
    rgb = _parse_hex(value)
    if rgb is None:
        return value
    return "#" + "".join(f"{round(c + (255 - c) * amount):02x}" for c in rgb)


def darken(value: str, amount: float) -> str:
    rgb = _parse_hex(value)
    if rgb is None:
        return value
    return "#" + "".join(f"{round(c * (1 - amount)):02x}" for c in rgb)


# ── CSS generation ───────────────────────────────────────────────────────────

def generate_theme_css(theme_name: str) -> str:
    t = THEMES.get(theme_name, THEMES[DEFAULT_THEME])
    return (
        ":root{\n"
        f"  --font-heading:{t.font_heading};\n"
        f"  --font-body:{t.font_body};\n"
        f"  --font-mono:{t.font_mono};\n"
        f"  --font-size-base:{t.font_size_base};\n"
        f"  --line-height:{t.line_height};\n"
        f"  --radius-sm:{t.radius_sm};\n"
        f"  --radius-md:{t.radius_md};\n"
        f"  --radius-lg:{t.radius_lg};\n"
        f"  --radius-full:{t.radius_full};\n"
        f"  --shadow-sm:{t.shadow_sm};\n"
        f"  --shadow-md:{t.shadow_md};\n"
        f"  --shadow-lg:{t.shadow_lg};\n"
        f"  --spacing-unit:{t.spacing_unit};\n"
        f"  --container-max:{t.container_max};\n"
        f"  --border-width:{t.border_width};\n"
        f"  --transition-speed:{t.transition_speed};\n"
        "}"
    )


def generate_skin_css(skin_name: str) -> str:
    s = SKINS.get(skin_name, SKINS[DEFAULT_SKIN])
    props = [
        ("primary", s.primary),
        ("primary-hover", s.primary_hover),
        ("secondary", s.secondary),
        ("bg", s.bg),
        ("bg-surface", s.bg_surface),
        ("text", s.text),
        ("text-muted", s.text_muted),
        ("accent", s.accent),
        ("accent-hover", darken(s.accent, 0.15)),
        ("border", s.border),
        ("border-strong", s.border_strong),
    ]
    for name, value in (("success", s.success), ("warning", s.warning), ("error", s.error)):
        props += [
            (name, value),
            (f"{name}-light", lighten(value, 0.88)),
            (f"{name}-hover", darken(value, 0.15)),
        ]
    props += [
        ("hero-bg", s.hero_bg),
        ("hero-text", s.hero_text),
        ("header-border", s.header_border),
        ("footer-bg", s.footer_bg),
        ("footer-text", s.footer_text),
        ("badge-bg", s.badge_bg),
        ("badge-text", s.badge_text),
        ("link", s.link_color),
        ("link-hover", s.link_hover),
    ]
    body = "".join(f"  --color-{name}:{value};\n" for name, value in props)
    return ":root{\n" + body + "}"


def generate_dark_mode_css(skin_name: str) -> str:
    if skin_name in _DARK_SKINS:
        return ""
    return """
@media(prefers-color-scheme:dark){
  :root{
    --color-bg:#0f172a;
    --color-bg-surface:#1e293b;
    --color-text:#e2e8f0;
    --color-text-muted:#94a3b8;
    --color-border:#334155;
    --color-border-strong:#475569;
    --color-hero-bg:#1e293b;
    --color-hero-text:#f1f5f9;
    --color-footer-bg:#020617;
    --color-footer-text:#64748b;
    --color-header-border:#334155;
    --color-badge-bg:#38bdf8;
    --color-badge-text:#0f172a;
    --color-success-light:#064e3b;
    --color-warning-light:#78350f;
    --color-error-light:#7f1d1d;
  }
  img{opacity:0.9}
}"""


# ── Legacy article-page styles (literal colours) ─────────────────────────────

LEGACY_THEME_STYLES = {
    "navy-serif": "body{font-family:Georgia,serif;background-color:#f4f4f9;color:#0a1929}header{border-bottom:2px solid #0a1929}.logo{color:#0a1929}.hero{background-color:#0a1929;color:white;padding:5rem 0}footer{background-color:#0a1929;color:white;margin-top:0}",
    "green-modern": "body{font-family:Inter,system-ui,sans-serif;background-color:#f0fdf4;color:#14532d}.logo{color:#15803d}a{color:#16a34a}",
    "medical-clean": "body{font-family:system-ui,sans-serif;background-color:#ffffff;color:#334155}.hero{color:#0ea5e9}",
    "professional-blue": "body{font-family:Merriweather,Georgia,serif;background:#f8fafc;color:#1e293b;line-height:1.75}header{border-bottom:3px solid #1e3a5f}.logo{color:#1e3a5f}.hero{background:#1e3a5f;color:white;padding:5rem 2rem}a{color:#2563eb}footer{background:#1e3a5f;color:#94a3b8;padding:2rem 1rem}footer a{color:#93c5fd}.disclaimer{background:#fef9c3;border-color:#ca8a04}.cta-button{background:#1e3a5f}",
    "health-clean": "body{font-family:system-ui,-apple-system,sans-serif;background:#ffffff;color:#334155;line-height:1.8}header{border-bottom:2px solid #10b981}.logo{color:#047857}a{color:#059669}.hero{background:#f0fdf4;color:#065f46}.disclaimer{background:#fef3c7;border:2px solid #f59e0b}.reviewed-by{background:#f0fdf4;padding:0.5rem 0.75rem;border-left:3px solid #10b981}",
    "consumer-friendly": "body{font-family:Inter,system-ui,sans-serif;background:#fffbf5;color:#292524;line-height:1.7}header{border-bottom:2px solid #f59e0b}.logo{color:#b45309}a{color:#d97706}.hero{background:linear-gradient(135deg,#fef3c7,#fed7aa);color:#78350f;padding:4rem 2rem;border-radius:1rem}.cta-button{background:#d97706;border-radius:0.5rem}",
    "tech-modern": "body{font-family:JetBrains Mono,SF Mono,monospace;background:#0f172a;color:#e2e8f0;line-height:1.65}header{border-bottom:1px solid #334155}.logo{color:#38bdf8}a{color:#38bdf8}.hero{background:#1e293b;color:#f1f5f9;border:1px solid #334155;border-radius:0.5rem;padding:3rem 2rem}article{background:#1e293b;padding:2rem;border-radius:0.5rem}.calc-form,.lead-form{background:#1e293b;border-color:#334155;color:#e2e8f0}.comparison-table th{background:#1e293b;color:#94a3b8}",
    "trust-minimal": "body{font-family:system-ui,-apple-system,sans-serif;background:#ffffff;color:#1f2937;line-height:1.7}header{border:none;margin-bottom:3rem}.logo{color:#374151;font-size:1.125rem}a{color:#4b5563;text-decoration:underline}.sources{font-size:0.8rem;color:#6b7280}footer{font-size:0.75rem;color:#9ca3af}",
    "hobby-vibrant": "body{font-family:Nunito,system-ui,sans-serif;background:#fefce8;color:#422006;line-height:1.7}header{border-bottom:3px solid #eab308}.logo{color:#a16207;font-weight:800}a{color:#ca8a04}.hero{background:linear-gradient(135deg,#fef08a,#fde68a);color:#713f12;padding:4rem 2rem;border-radius:1.5rem}.cta-button{background:#ca8a04;border-radius:0.75rem}.faq-question{background:#fef9c3}",
}

_DEFAULT_LEGACY_STYLE = "body{font-family:system-ui,sans-serif}"


def get_legacy_theme_styles(theme_style: Optional[str]) -> str:
    if not theme_style:
        return _DEFAULT_LEGACY_STYLE
    style = LEGACY_THEME_STYLES.get(theme_style)
    if style is None:
        logger.warning("Unknown theme style %r – using default styles", theme_style)
        return _DEFAULT_LEGACY_STYLE
    return style


# ── Policy ───────────────────────────────────────────────────────────────────

V1_THEME_TO_V2_THEME = {
    "navy-serif": "editorial",
    "green-modern": "clean",
    "medical-clean": "minimal",
    "professional-blue": "editorial",
    "health-clean": "minimal",
    "consumer-friendly": "bold",
    "tech-modern": "bold",
    "trust-minimal": "minimal",
    "hobby-vibrant": "bold",
    "minimal-blue": "clean",
    "earth-inviting": "editorial",
    "high-contrast-accessible": "bold",
    "playful-modern": "bold",
    "masculine-dark": "bold",
    "enthusiast-community": "clean",
    "clean-general": "clean",
}

V1_THEME_TO_SKIN = {
    "navy-serif": "slate",
    "green-modern": "forest",
    "medical-clean": "slate",
    "professional-blue": "ocean",
    "health-clean": "forest",
    "consumer-friendly": "ember",
    "tech-modern": "midnight",
    "trust-minimal": "slate",
    "hobby-vibrant": "ember",
    "minimal-blue": "ocean",
    "earth-inviting": "ember",
    "high-contrast-accessible": "slate",
    "playful-modern": "coral",
    "masculine-dark": "midnight",
    "enthusiast-community": "ocean",
    "clean-general": "slate",
}

# vertical / niche → (theme, skin)
CATEGORY_POLICY = {
    "legal": ("editorial", "slate"),
    "insurance": ("bold", "ocean"),
    "health": ("clean", "forest"),
    "medicare": ("clean", "forest"),
    "finance": ("bold", "ocean"),
    "real_estate": ("editorial", "ember"),
    "technology": ("minimal", "midnight"),
    "auto": ("bold", "midnight"),
    "home": ("clean", "ember"),
    "education": ("editorial", "slate"),
    "travel": ("bold", "coral"),
    "pets": ("bold", "ember"),
    "relationships": ("bold", "coral"),
    "business": ("editorial", "ocean"),
    "general": ("clean", "slate"),
    "other": ("clean", "slate"),
}

_KEY_SEPARATORS_RE = re.compile(r"[\s-]+")


class ThemeResolution(NamedTuple):
    theme: str
    skin: str
    source: str  # explicit | policy_fallback | global_fallback


def normalize_key(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    normalized = _KEY_SEPARATORS_RE.sub("_", value.strip().lower())
    return normalized or None


def resolve_theme(
    theme: Optional[str] = None,
    skin: Optional[str] = None,
    theme_style: Optional[str] = None,
    vertical: Optional[str] = None,
    niche: Optional[str] = None,
) -> ThemeResolution:
    """Pick the token theme and skin for a domain.

    Priority: explicit valid pair, then the legacy *theme_style* mapping,
    then the vertical/niche policy, then ``clean``/``slate``.
    """
    requested_theme = (theme or "").strip() or None
    requested_skin = (skin or "").strip() or None

    if requested_theme in THEMES and requested_skin in SKINS:
        return ThemeResolution(requested_theme, requested_skin, "explicit")

    if requested_theme and requested_theme not in THEMES:
        logger.warning("Requested theme %r not found – resolving by policy", requested_theme)
    if requested_skin and requested_skin not in SKINS:
        logger.warning("Requested skin %r not found – resolving by policy", requested_skin)

    legacy = (theme_style or "").strip()
    if legacy in V1_THEME_TO_V2_THEME:
        return ThemeResolution(V1_THEME_TO_V2_THEME[legacy], V1_THEME_TO_SKIN.get(legacy, DEFAULT_SKIN), "explicit")

    for key in (normalize_key(vertical), normalize_key(niche)):
        if key and key in CATEGORY_POLICY:
            policy_theme, policy_skin = CATEGORY_POLICY[key]
            return ThemeResolution(policy_theme, policy_skin, "policy_fallback")

    return ThemeResolution(DEFAULT_THEME, DEFAULT_SKIN, "global_fallback")


def build_token_stylesheet(theme_name: str, skin_name: str) -> str:
    """``:root`` custom properties for a theme/skin pair, dark mode included."""
    return "\n".join(
        [generate_theme_css(theme_name), generate_skin_css(skin_name), generate_dark_mode_css(skin_name)]
    )
