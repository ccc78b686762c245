import logging
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class ContentType(str, Enum):
    """Closed set of content types; each selects one template renderer."""

    ARTICLE = "article"
    COMPARISON = "comparison"
    CALCULATOR = "calculator"
    COST_GUIDE = "cost_guide"
    LEAD_CAPTURE = "lead_capture"
    HEALTH_DECISION = "health_decision"
    CHECKLIST = "checklist"
    FAQ = "faq"
    REVIEW = "review"
    WIZARD = "wizard"
    CONFIGURATOR = "configurator"
    QUIZ = "quiz"
    SURVEY = "survey"
    ASSESSMENT = "assessment"
    INTERACTIVE_INFOGRAPHIC = "interactive_infographic"
    INTERACTIVE_MAP = "interactive_map"


class Payload(BaseModel):
    """Base for typed content payloads, stored with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


ArticleStatus = Literal["generating", "draft", "review", "approved", "published", "archived"]
YmylLevel = Literal["none", "low", "medium", "high"]


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------

class CalculatorOption(Payload):
    label: str
    value: float


class CalculatorInput(Payload):
    id: str
    label: str
    type: Literal["number", "select", "range"] = "number"
    default: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: List[CalculatorOption] = []


class CalculatorOutput(Payload):
    id: str
    label: str
    format: Literal["currency", "percent", "number"] = "number"
    decimals: int = Field(2, ge=0, le=10)


class CalculatorConfig(Payload):
    inputs: List[CalculatorInput] = []
    outputs: List[CalculatorOutput] = []
    formula: Optional[str] = None
    assumptions: List[str] = []
    methodology: Optional[str] = None


# ---------------------------------------------------------------------------
# Wizard family
# ---------------------------------------------------------------------------

class WizardOption(Payload):
    value: str
    label: str


class WizardField(Payload):
    id: str
    type: Literal["radio", "checkbox", "select", "number", "text"] = "radio"
    label: str
    options: List[WizardOption] = []
    required: bool = False


class WizardBranch(Payload):
    condition: str
    go_to: str


class WizardStep(Payload):
    id: str
    title: str
    description: Optional[str] = None
    fields: List[WizardField] = []
    next_step: Optional[str] = None
    branches: List[WizardBranch] = []


class CtaLink(Payload):
    text: str
    url: str


class WizardResultRule(Payload):
    condition: str
    title: str
    body: str
    cta: Optional[CtaLink] = None


class WizardLeadCapture(Payload):
    fields: List[str] = []
    consent_text: str = ""
    endpoint: str = ""


class ScoreBand(Payload):
    min: float
    max: float
    label: str
    description: Optional[str] = None


class ScoreOutcome(Payload):
    min: float
    max: float
    title: str
    body: str
    cta: Optional[CtaLink] = None


class WizardScoring(Payload):
    method: Optional[Literal["completion", "weighted"]] = None
    weights: Dict[str, float] = {}
    value_map: Dict[str, Dict[str, float]] = {}
    bands: List[ScoreBand] = []
    outcomes: List[ScoreOutcome] = []


class WizardConfig(Payload):
    steps: List[WizardStep] = []
    result_rules: List[WizardResultRule] = []
    result_template: Literal["summary", "recommendation", "score", "eligibility"] = "recommendation"
    collect_lead: Optional[WizardLeadCapture] = None
    scoring: Optional[WizardScoring] = None


# ---------------------------------------------------------------------------
# Comparison / review
# ---------------------------------------------------------------------------

class ComparisonOption(Payload):
    name: str
    url: Optional[str] = None
    badge: Optional[str] = None
    scores: Dict[str, Union[float, str, List[str]]] = {}


class ComparisonColumn(Payload):
    key: str
    label: str
    type: Literal["number", "text", "rating"] = "text"
    sortable: bool = True


class ComparisonData(Payload):
    options: List[ComparisonOption] = []
    columns: List[ComparisonColumn] = []
    default_sort: Optional[str] = None
    verdict: Optional[str] = None


# ---------------------------------------------------------------------------
# Cost guide
# ---------------------------------------------------------------------------

class CostRange(Payload):
    label: Optional[str] = None
    low: float
    high: float
    average: Optional[float] = None
    data_points: List[float] = []


class CostFactor(Payload):
    name: str
    impact: Literal["low", "medium", "high"] = "medium"
    description: str = ""


class CostGuideData(Payload):
    ranges: List[CostRange] = []
    factors: List[CostFactor] = []


class ResearchStatistic(Payload):
    stat: str = ""
    source: str = ""
    date: str = ""


class ResearchData(Payload):
    statistics: List[ResearchStatistic] = []
    factors: List[Dict[str, Any]] = []


# ---------------------------------------------------------------------------
# Geo / CTA / lead capture
# ---------------------------------------------------------------------------

class GeoRegion(Payload):
    content: str
    label: Optional[str] = None


class GeoData(Payload):
    regions: Dict[str, GeoRegion] = {}
    fallback: str = ""


class CtaConfig(Payload):
    text: str
    button_label: str
    button_url: str
    style: Literal["bar", "card", "banner"] = "bar"


class LeadField(Payload):
    name: str
    label: str
    type: Literal["text", "email", "tel", "select", "number"] = "text"
    required: bool = False
    options: List[str] = []


class LeadGenConfig(Payload):
    fields: List[LeadField] = []
    consent_text: str = ""
    endpoint: Optional[str] = None
    success_message: str = "Thanks! We'll be in touch shortly."
    disclosure_above_fold: Optional[str] = None
    privacy_policy_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------

class Article(BaseModel):
    """One content record of a domain, compiled into ``{slug}/index.html``."""

    id: str
    domain_id: Optional[str] = None
    slug: str
    title: str
    meta_description: Optional[str] = None
    content_markdown: str = ""
    content_type: ContentType = ContentType.ARTICLE
    status: ArticleStatus = "draft"
    ymyl_level: YmylLevel = "none"
    reviewed_by: Optional[str] = Field(None, description="Display name of the last reviewer")
    last_reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    calculator_config: Optional[CalculatorConfig] = None
    wizard_config: Optional[WizardConfig] = None
    comparison_data: Optional[ComparisonData] = None
    cost_guide_data: Optional[CostGuideData] = None
    research_data: Optional[ResearchData] = None
    geo_data: Optional[GeoData] = None
    cta_config: Optional[CtaConfig] = None
    lead_gen_config: Optional[LeadGenConfig] = None

    @field_validator("content_type", mode="before")
    @classmethod
    def _coerce_content_type(cls, value):
        if value is None or value == "":
            return ContentType.ARTICLE
        if isinstance(value, ContentType):
            return value
        try:
            return ContentType(value)
        except ValueError:
            logger.warning("Unknown content type %r – rendering as article", value)
            return ContentType.ARTICLE

    @field_validator("ymyl_level", mode="before")
    @classmethod
    def _coerce_ymyl_level(cls, value):
        if value is None or value in get_args(YmylLevel):
            return value or "none"
        logger.warning("Unknown YMYL level %r – treating as none", value)
        return "none"

    @field_validator(
        "calculator_config",
        "wizard_config",
        "comparison_data",
        "cost_guide_data",
        "research_data",
        "geo_data",
        "cta_config",
        "lead_gen_config",
        mode="wrap",
    )
    @classmethod
    def _drop_malformed_payload(cls, value, handler: ValidatorFunctionWrapHandler, info: ValidationInfo):
        # A malformed payload renders as if it were absent.
        try:
            return handler(value)
        except ValidationError as exc:
            logger.warning("Dropping malformed %s – %d validation errors", info.field_name, exc.error_count())
            return None

    @property
    def is_live(self) -> bool:
        return self.status == "published" and self.deleted_at is None
