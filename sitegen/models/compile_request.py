from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from sitegen.models.article import Article
from sitegen.models.domain import DisclosureSettings, Domain, MonetizationScripts
from sitegen.models.evidence import ArticleDataset, Citation
from sitegen.models.page import PageDefinition


class CompileRequest(BaseModel):
    """Everything the compiler needs to build one domain's site.

    The records are read-only inputs supplied by the editorial layer.
    """

    domain: Optional[Domain] = None
    articles: List[Article] = []
    page_definitions: List[PageDefinition] = []
    datasets: Dict[str, List[ArticleDataset]] = Field(
        default_factory=dict, description="Linked datasets keyed by article id"
    )
    citations: Dict[str, List[Citation]] = Field(
        default_factory=dict, description="Ordered citations keyed by article id"
    )
    disclosure: Optional[DisclosureSettings] = None
    monetization: Optional[MonetizationScripts] = None
    portfolio_hostnames: List[str] = Field(
        default_factory=list,
        description="Hostnames of every site in the portfolio; links to them are stripped",
    )


class SiteTitleRequest(BaseModel):
    hostname: str = Field(..., min_length=1, max_length=253)
