"""The header/footer/sidebar frame shared by every article page of a domain."""

import logging
from datetime import datetime, timezone
from typing import List, NamedTuple, Optional, Sequence

from markupsafe import Markup

from sitegen.errors import PageShellMissingError
from sitegen.layouts.layouts import LayoutConfig
from sitegen.models.domain import DisclosureSettings, MonetizationScripts
from sitegen.services.html_env import render_template

logger = logging.getLogger(__name__)

MAX_SIDEBAR_LINKS = 6


class NavLink(NamedTuple):
    label: str
    href: str


class PageShell(NamedTuple):
    site_title: str
    head_scripts: Markup
    body_scripts: Markup
    header_html: Markup
    footer_html: Markup
    sidebar_html: Markup
    has_sidebar: bool


def trust_page_links(disclosure: Optional[DisclosureSettings]) -> List[NavLink]:
    """Links to the trust pages that will actually be generated."""
    if disclosure is None:
        return []
    links = []
    if disclosure.about_content:
        links.append(NavLink("About", "/about/"))
    if disclosure.editorial_policy_content:
        links.append(NavLink("Editorial Policy", "/editorial-policy/"))
    if disclosure.how_we_money_content:
        links.append(NavLink("How We Make Money", "/how-we-make-money/"))
    return links


def build_page_shell(
    site_title: str,
    layout: LayoutConfig,
    disclosure: Optional[DisclosureSettings] = None,
    nav_links: Sequence[NavLink] = (),
    monetization: Optional[MonetizationScripts] = None,
    niche: Optional[str] = None,
    year: Optional[int] = None,
) -> PageShell:
    """Render the shared frame for one domain.

    *nav_links* doubles as the sidebar's link list.  Monetization fragments
    come from a trusted provider and are inserted verbatim.
    """
    trust_links = trust_page_links(disclosure)
    header_links = [NavLink("Home", "/")] + trust_links

    header_html = render_template(
        "header.html", style=layout.header, site_title=site_title, nav_links=header_links
    )

    disclaimer = None
    if disclosure is not None:
        disclaimer = disclosure.advertising_disclosure or disclosure.affiliate_disclosure
    footer_html = render_template(
        "footer.html",
        style=layout.footer,
        site_title=site_title,
        year=year or datetime.now(timezone.utc).year,
        site_links=[NavLink("Home", "/"), NavLink("Sitemap", "/sitemap.xml")],
        trust_links=trust_links,
        disclaimer=disclaimer,
    )

    sidebar_html = Markup("")
    if layout.has_sidebar:
        about = f"Independent guides and tools about {niche.replace('_', ' ')}." if niche else "Independent guides and tools."
        sidebar_html = render_template(
            "sidebar.html",
            site_title=site_title,
            recent=list(nav_links)[:MAX_SIDEBAR_LINKS],
            about=about,
        )

    head_scripts = Markup(monetization.head) if monetization else Markup("")
    body_scripts = Markup(monetization.body) if monetization else Markup("")

    return PageShell(
        site_title=site_title,
        head_scripts=head_scripts,
        body_scripts=body_scripts,
        header_html=header_html,
        footer_html=footer_html,
        sidebar_html=sidebar_html,
        has_sidebar=layout.has_sidebar,
    )


def wrap_in_html_page(
    page_title: str,
    page_description: str,
    body_html: Markup,
    shell: Optional[PageShell],
    extra_head: Markup = Markup(""),
) -> str:
    """Wrap *body_html* in a complete document using *shell*.

    Raises:
        PageShellMissingError: when *shell* is ``None``.
    """
    if shell is None:
        raise PageShellMissingError("Page shell missing")
    return str(
        render_template(
            "page.html",
            page_title=page_title,
            description=page_description,
            body=Markup(body_html),
            shell=shell,
            extra_head=extra_head,
        )
    )
