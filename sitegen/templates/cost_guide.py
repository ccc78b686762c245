"""Cost guide pages: low/average/high range cards and an impact-rated factor grid.

Structured ``cost_guide_data`` wins.  Without it, dollar-amount pairs are
pulled out of the research statistics with a regex.
"""

import re
from typing import List, NamedTuple, Optional, Sequence, Tuple

from markupsafe import Markup

from sitegen.models.article import Article, CostFactor
from sitegen.services.scoring import round_half_up
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page

_DOLLAR_RE = re.compile(r"\$[\d,]+")


class CostRangeView(NamedTuple):
    low: float
    average: float
    high: float
    label: Optional[str] = None


def compute_average(data_points: Sequence[float], low: float, high: float) -> float:
    """Mean of *data_points*, or the midpoint of the range when there are none."""
    if data_points:
        return round_half_up(sum(data_points) / len(data_points))
    return round_half_up((low + high) / 2)


def parse_cost_range(text: str) -> Optional[CostRangeView]:
    """Range spanned by the dollar amounts in *text*; needs at least two."""
    numbers = []
    for match in _DOLLAR_RE.findall(text):
        digits = match.replace("$", "").replace(",", "")
        if digits:
            numbers.append(float(digits))
    if len(numbers) < 2:
        return None
    numbers.sort()
    low, high = numbers[0], numbers[-1]
    return CostRangeView(low, compute_average(numbers if len(numbers) > 2 else [], low, high), high)


def extract_cost_data(article: Article) -> Tuple[List[CostRangeView], List[CostFactor]]:
    structured = article.cost_guide_data
    if structured is not None:
        ranges = [
            CostRangeView(
                r.low,
                r.average if r.average is not None else compute_average(r.data_points, r.low, r.high),
                r.high,
                r.label,
            )
            for r in structured.ranges
        ]
        return ranges, list(structured.factors)

    ranges: List[CostRangeView] = []
    factors: List[CostFactor] = []
    research = article.research_data
    if research is None:
        return ranges, factors

    for statistic in research.statistics:
        if not statistic.stat:
            continue
        parsed = parse_cost_range(statistic.stat)
        if parsed:
            ranges.append(parsed)

    for raw in research.factors:
        if not raw.get("name"):
            continue
        impact = raw.get("impact") if raw.get("impact") in ("low", "medium", "high") else "medium"
        factors.append(CostFactor(name=str(raw["name"]), impact=impact, description=str(raw.get("description") or "")))
    return ranges, factors


def format_currency(amount: float) -> str:
    """Whole-dollar US currency, e.g. ``$12,500``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def build_cost_ranges(ranges: Sequence[CostRangeView]) -> Markup:
    if not ranges:
        return Markup("")
    cards = []
    for r in ranges:
        label = Markup("<h3>{}</h3>").format(r.label) if r.label else Markup("")
        cards.append(
            Markup(
                '<div class="cost-range">\n  {label}\n  <div class="cost-range-bar">\n'
                '    <div class="cost-low"><span class="cost-label">Low</span><span class="cost-value">{low}</span></div>\n'
                '    <div class="cost-avg"><span class="cost-label">Average</span><span class="cost-value">{avg}</span></div>\n'
                '    <div class="cost-high"><span class="cost-label">High</span><span class="cost-value">{high}</span></div>\n'
                "  </div>\n</div>"
            ).format(
                label=label,
                low=format_currency(r.low),
                avg=format_currency(r.average),
                high=format_currency(r.high),
            )
        )
    return Markup('<section class="cost-ranges">{}</section>').format(Markup("\n").join(cards))


def build_factors_grid(factors: Sequence[CostFactor]) -> Markup:
    if not factors:
        return Markup("")
    cards = [
        Markup(
            '<div class="factor-card impact-{impact}">\n  <h4>{name}</h4>\n'
            '  <span class="factor-impact">{impact} impact</span>\n  <p>{description}</p>\n</div>'
        ).format(impact=f.impact, name=f.name, description=f.description)
        for f in factors
    ]
    return Markup(
        '<section class="factors-grid"><h2>Cost Factors</h2><div class="factors-cards">{}</div></section>'
    ).format(Markup("\n").join(cards))


def render_cost_guide_page(article: Article, ctx: RenderContext) -> str:
    ranges, factors = extract_cost_data(article)
    schema_ld = build_schema_json_ld(article, ctx.domain, "Article")
    inner = Markup("\n").join(
        [build_cost_ranges(ranges), build_factors_grid(factors), ctx.render_markdown(article.content_markdown)]
    )
    return compose_article_page(article, ctx, schema_ld, inner)
