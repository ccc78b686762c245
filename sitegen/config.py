"""Static settings for the site compiler.

Everything here is a plain module-level constant; the compiler has no
environment-driven configuration of its own.
"""

import re

# Cross-domain link stripping keeps the portfolio hostname list this long.
PORTFOLIO_CACHE_TTL_SECONDS = 300

# Internal linking
MAX_LINKS_PER_PAGE = 8
MIN_KEYWORD_LENGTH = 4

SAFE_SLUG_PATTERN = re.compile(r"^[a-z0-9][a-z0-9-]*$")
# Top-level paths generated pages may not claim
RESERVED_SLUGS = frozenset({"embed"})

DEFAULT_LAYOUT = "authority"
DEFAULT_THEME = "clean"
DEFAULT_SKIN = "slate"

# Freshness badge thresholds (days)
FRESH_ARTICLE_DAYS = 30
STALE_ARTICLE_DAYS = 90

PRINTABLE_CONTENT_TYPES = frozenset(
    {
        "cost_guide",
        "comparison",
        "checklist",
        "faq",
        "review",
        "interactive_infographic",
        "interactive_map",
    }
)

WIZARD_CONTENT_TYPES = frozenset({"wizard", "configurator", "quiz", "survey", "assessment"})

EMBEDDABLE_CONTENT_TYPES = frozenset({"calculator"}) | WIZARD_CONTENT_TYPES

NICHE_FAVICONS = {
    "legal": "⚖️",
    "insurance": "🛡️",
    "health": "🩺",
    "finance": "💰",
    "real_estate": "🏠",
    "technology": "💻",
    "auto": "🚗",
    "home": "🔨",
    "education": "🎓",
    "travel": "✈️",
    "pets": "🐾",
    "relationships": "💬",
    "business": "📈",
}
DEFAULT_FAVICON = "📘"

# Cache-Control values written to _headers
LONG_CACHE = "public, max-age=31536000, immutable"
SHORT_CACHE = "public, max-age=300, must-revalidate"
