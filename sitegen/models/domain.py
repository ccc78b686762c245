from typing import Optional

from pydantic import BaseModel, Field


class Domain(BaseModel):
    """One mini-site in the portfolio."""

    id: str
    domain: str = Field(..., description="Hostname the site is served from, e.g. ``bestlawyers.com``")
    niche: Optional[str] = None
    sub_niche: Optional[str] = None
    vertical: Optional[str] = None
    template: Optional[str] = Field(None, description="Layout preset name (authority, hub, docs, ...)")
    theme_style: Optional[str] = Field(None, description="Legacy colour/typography style name")
    theme: Optional[str] = Field(None, description="Token theme for block-based pages")
    skin: Optional[str] = None
    site_title: Optional[str] = None


class DisclosureSettings(BaseModel):
    affiliate_disclosure: Optional[str] = None
    advertising_disclosure: Optional[str] = None
    not_advice_disclaimer: Optional[str] = None
    how_we_money_content: Optional[str] = None
    editorial_policy_content: Optional[str] = None
    about_content: Optional[str] = None
    show_reviewed_by: bool = True
    show_last_updated: bool = True


class MonetizationScripts(BaseModel):
    """Head/body script fragments supplied by the ad and analytics provider."""

    head: str = ""
    body: str = ""
