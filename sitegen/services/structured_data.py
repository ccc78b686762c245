import json
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from markupsafe import Markup

from sitegen.models.article import Article
from sitegen.services.sanitizer import escape_attr, json_for_script

SchemaType = Literal["Article", "WebApplication", "ItemList", "FAQPage"]


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def json_ld_script(payload: Dict[str, Any]) -> Markup:
    """Serialize *payload* into a ``<script type="application/ld+json">`` tag."""
    data = {k: v for k, v in payload.items() if v is not None}
    return Markup('<script type="application/ld+json">{}</script>').format(
        json_for_script(json.dumps(data, ensure_ascii=False))
    )


def article_url(domain: str, slug: str) -> str:
    return f"https://{domain}/{slug}"


def build_schema_json_ld(
    article: Article,
    domain: str,
    schema_type: SchemaType,
    extra: Optional[Dict[str, Any]] = None,
) -> Markup:
    """Build the one JSON-LD block a content-type page carries."""
    url = article_url(domain, article.slug)
    base: Dict[str, Any] = {"@context": "https://schema.org", "@type": schema_type}

    if schema_type == "Article":
        base.update(
            {
                "headline": article.title,
                "description": article.meta_description or "",
                "url": url,
                "mainEntityOfPage": {"@type": "WebPage", "@id": url},
                "dateModified": _iso(article.updated_at) or _iso(article.published_at),
                "datePublished": _iso(article.published_at),
                "inLanguage": "en",
                "wordCount": len(article.content_markdown.split()) if article.content_markdown else None,
                "author": {"@type": "Organization", "name": domain},
                "publisher": {"@type": "Organization", "name": domain},
            }
        )
    elif schema_type == "WebApplication":
        base.update(
            {
                "name": article.title,
                "description": article.meta_description or "",
                "url": url,
                "applicationCategory": "FinanceApplication",
                "operatingSystem": "Any",
            }
        )
    elif schema_type == "ItemList":
        base.update({"name": article.title, "description": article.meta_description or "", "url": url})
    elif schema_type == "FAQPage":
        base.update({"name": article.title, "url": url})

    if extra and schema_type != "Article":
        base.update(extra)
    return json_ld_script(base)


def build_website_schema(domain: str, site_title: str, description: str) -> Markup:
    return json_ld_script(
        {
            "@context": "https://schema.org",
            "@type": "WebSite",
            "name": site_title,
            "url": f"https://{domain}/",
            "description": description,
            "publisher": {"@type": "Organization", "name": site_title},
        }
    )


def build_breadcrumb(domain: str, title: Optional[str] = None, url: Optional[str] = None) -> Markup:
    items = [{"@type": "ListItem", "position": 1, "name": "Home", "item": f"https://{domain}/"}]
    if title and url:
        items.append({"@type": "ListItem", "position": 2, "name": title, "item": url})
    return json_ld_script(
        {"@context": "https://schema.org", "@type": "BreadcrumbList", "itemListElement": items}
    )


def build_open_graph_tags(article: Article, domain: str) -> Markup:
    """Canonical link, Open Graph / Twitter tags and a breadcrumb for *article*."""
    url = article_url(domain, article.slug)
    title = article.title
    description = article.meta_description or ""
    tags = [
        Markup('<link rel="canonical" href="{}">').format(url),
        Markup('<meta property="og:title" content="{}">').format(escape_attr(title)),
        Markup('<meta property="og:description" content="{}">').format(escape_attr(description)),
        Markup('<meta property="og:url" content="{}">').format(url),
        Markup('<meta property="og:type" content="article">'),
        Markup('<meta property="og:site_name" content="{}">').format(domain),
        Markup('<meta property="og:locale" content="en_US">'),
        Markup('<meta name="twitter:card" content="summary">'),
        Markup('<meta name="twitter:title" content="{}">').format(escape_attr(title)),
        Markup('<meta name="twitter:description" content="{}">').format(escape_attr(description)),
    ]
    if article.published_at:
        tags.append(
            Markup('<meta property="article:published_time" content="{}">').format(_iso(article.published_at))
        )
    if article.updated_at:
        tags.append(
            Markup('<meta property="article:modified_time" content="{}">').format(_iso(article.updated_at))
        )
    tags.append(build_breadcrumb(domain, title, url))
    return Markup("\n  ").join(tags)
