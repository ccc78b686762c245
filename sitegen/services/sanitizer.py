"""Escaping and allow-list sanitization for every generated page.

All text interpolated into markup passes through :func:`escape_html` or
:func:`escape_attr`, both of which return :class:`markupsafe.Markup`.  Once a
string is ``Markup`` it is trusted and is not escaped again, so renderers
build fragments with ``Markup("<h1>{}</h1>").format(title)`` and the
escaping obligation travels with the type instead of with convention.

HTML that originates from user-authored markdown is never trusted as-is:
:func:`sanitize_article_html` runs it through ``bleach`` with an extended
allow-list that keeps the form controls used by calculator and lead-gen
content while dropping scripts, styles and event handlers.
"""

import re

import bleach
from markupsafe import Markup, escape

# Unresolved placeholder markers left behind by the content pipeline
_PLACEHOLDER_RE = re.compile(r"\[(?:INTERNAL_LINK|EXTERNAL_LINK|IMAGE).*?\]")

_BASE_TAGS = {
    "address", "article", "aside", "footer", "header", "hgroup", "main", "nav", "section",
    "blockquote", "dd", "div", "dl", "dt", "hr", "li", "ol", "p", "pre", "ul",
    "a", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn", "em", "i", "kbd", "q",
    "rb", "rp", "rt", "rtc", "ruby", "s", "samp", "small", "span", "strong", "sub", "sup",
    "u", "var", "wbr", "table", "tr",
}

ALLOWED_TAGS = _BASE_TAGS | {
    "h1", "h2", "h3", "h4", "h5", "h6",
    "img", "figure", "figcaption",
    "details", "summary", "mark", "abbr", "time", "del", "ins",
    # Form controls used by calculator and lead-gen content
    "form", "input", "select", "button", "label", "textarea",
    "output", "fieldset", "legend", "option", "optgroup",
    "th", "td", "thead", "tbody", "tfoot", "caption", "colgroup", "col",
}

ALLOWED_ATTRIBUTES = {
    "img": ["src", "alt", "title", "width", "height", "loading"],
    "a": ["href", "title", "rel", "target"],
    "time": ["datetime"],
    "abbr": ["title"],
    "input": ["type", "name", "id", "value", "placeholder", "min", "max", "step", "required", "class", "aria-label"],
    "select": ["name", "id", "class", "required", "aria-label"],
    "option": ["value", "selected"],
    "button": ["type", "class", "id", "disabled"],
    "label": ["for", "class"],
    "textarea": ["name", "id", "rows", "cols", "placeholder", "class"],
    "output": ["name", "id", "for", "class"],
    "form": ["id", "class", "action", "method"],
    "fieldset": ["class"],
    "legend": ["class"],
    "th": ["scope", "data-sort-key", "class"],
    "td": ["data-value", "class"],
    "details": ["open", "class"],
    "summary": ["class"],
    "div": ["class", "id", "role"],
    "span": ["class", "id"],
    "section": ["class", "id"],
}

ALLOWED_PROTOCOLS = ["http", "https", "mailto"]


def escape_html(value) -> Markup:
    """Escape *value* for a text or quoted-attribute position.

    ``None`` becomes ``""`` and ``Markup`` passes through unchanged.
    """
    if value is None:
        return Markup("")
    return escape(value)


escape_attr = escape_html


def strip_placeholders(markdown_text: str) -> str:
    """Remove ``[INTERNAL_LINK ...]``, ``[EXTERNAL_LINK ...]`` and ``[IMAGE ...]`` markers."""
    return _PLACEHOLDER_RE.sub("", markdown_text)


def sanitize_article_html(html: str) -> Markup:
    """Allow-list sanitize *html* and mark the result as safe."""
    cleaned = bleach.clean(
        html,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
    return Markup(cleaned)


def json_for_script(payload: str) -> Markup:
    """Make serialized JSON safe to inline inside a ``<script>`` element."""
    return Markup(
        payload.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")
    )
