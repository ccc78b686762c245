"""Calculator pages: typed inputs, live outputs and a fixed formula library.

Formulas are never taken from content.  The configured ``formula`` name
selects one of the built-in functions in the generated script; when it names
nothing known, the input ids are inspected instead, and when that fails too a
visible "not configured" notice is shown.
"""

import json

from markupsafe import Markup

from sitegen.models.article import Article, CalculatorConfig, CalculatorInput, CalculatorOutput
from sitegen.services.sanitizer import json_for_script
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, number_attr, script_tag

NOT_CONFIGURED_NOTICE = "This calculator's formula is not yet configured. Results may not display correctly."


def build_input_html(field: CalculatorInput, id_prefix: str = "") -> Markup:
    input_id = id_prefix + field.id
    if field.type == "select" and field.options:
        options = Markup("").join(
            Markup('<option value="{}">{}</option>').format(number_attr(o.value), o.label) for o in field.options
        )
        return Markup(
            '<div class="calc-field">\n'
            '  <label for="{id}">{label}</label>\n'
            '  <select id="{id}" name="{name}" class="calc-input">{options}</select>\n'
            "</div>"
        ).format(id=input_id, name=field.id, label=field.label, options=options)

    if field.type == "range":
        low = field.min if field.min is not None else 0
        high = field.max if field.max is not None else 100
        step = field.step if field.step is not None else 1
        default = field.default if field.default is not None else low
        return Markup(
            '<div class="calc-field">\n'
            '  <label for="{id}">{label}: <output id="{id}_display">{default}</output></label>\n'
            '  <input type="range" id="{id}" name="{name}" class="calc-input" min="{min}" max="{max}" '
            'step="{step}" value="{default}">\n'
            "</div>"
        ).format(
            id=input_id,
            name=field.id,
            label=field.label,
            min=number_attr(low),
            max=number_attr(high),
            step=number_attr(step),
            default=number_attr(default),
        )

    attrs = Markup("")
    for name, value in (("min", field.min), ("max", field.max), ("step", field.step), ("value", field.default)):
        if value is not None:
            attrs += Markup(' {}="{}"').format(name, number_attr(value))
    return Markup(
        '<div class="calc-field">\n'
        '  <label for="{id}">{label}</label>\n'
        '  <input type="number" id="{id}" name="{name}" class="calc-input"{attrs}>\n'
        "</div>"
    ).format(id=input_id, name=field.id, label=field.label, attrs=attrs)


def build_output_html(output: CalculatorOutput, id_prefix: str = "") -> Markup:
    return Markup(
        '<div class="calc-result-item">\n'
        '  <span class="calc-result-label">{}</span>\n'
        '  <output id="{}" class="calc-result-value">—</output>\n'
        "</div>"
    ).format(output.label, id_prefix + output.id)


def build_calculator_html(config: CalculatorConfig, id_prefix: str = "") -> Markup:
    if not config.inputs:
        return Markup("")
    inputs = Markup("\n").join(build_input_html(i, id_prefix) for i in config.inputs)
    outputs = Markup("\n").join(build_output_html(o, id_prefix) for o in config.outputs)
    html = Markup(
        '<section class="calc-form" id="calculator">\n'
        "  <h2>Calculator</h2>\n"
        '  <form onsubmit="return false;">\n{inputs}\n  </form>\n'
        '  <div id="calc-error-msg" class="calc-error" style="display:none">{notice}</div>\n'
        '  <div class="calc-results">\n{outputs}\n  </div>\n'
        "</section>"
    ).format(inputs=inputs, outputs=outputs, notice=NOT_CONFIGURED_NOTICE)

    if config.methodology or config.assumptions:
        method = Markup("<p>{}</p>").format(config.methodology) if config.methodology else Markup("")
        assumptions = Markup("")
        if config.assumptions:
            assumptions = Markup("<ul>{}</ul>").format(
                Markup("").join(Markup("<li>{}</li>").format(a) for a in config.assumptions)
            )
        html += Markup(
            '\n<details class="calc-methodology">\n'
            "  <summary>Methodology &amp; Assumptions</summary>\n"
            "  {}\n  {}\n"
            "</details>"
        ).format(method, assumptions)
    return html


def formula_key(formula) -> str:
    """Normalized lookup key for a configured formula name."""
    return "".join(ch if "a" <= ch <= "z" or ch == "_" else "_" for ch in (formula or "").lower())


_CALCULATOR_JS = r"""
  var cfg = %(config)s;
  var prefix = cfg.prefix;
  function pmt(rate, nper, pv) {
    if (rate === 0) return pv / nper;
    var x = Math.pow(1 + rate, nper);
    return (pv * rate * x) / (x - 1);
  }
  function fv(rate, nper, pmtVal, pv) {
    if (rate === 0) return -(pv + pmtVal * nper);
    var x = Math.pow(1 + rate, nper);
    return -(pv * x + pmtVal * ((x - 1) / rate));
  }
  var FORMULAS = {
    mortgage_payment: function(v) {
      var monthlyRate = (v.interest_rate / 100) / 12;
      var months = (v.loan_term || 30) * 12;
      var mp = pmt(monthlyRate, months, v.loan_amount || 0);
      return { monthly_payment: mp, total_paid: mp * months, total_interest: mp * months - (v.loan_amount || 0) };
    },
    compound_interest: function(v) {
      var principal = v.principal || v.initial_investment || 0;
      var rate = (v.interest_rate || v.annual_rate || 0) / 100;
      var years = v.years || v.time_period || 10;
      var n = v.compounds_per_year || 12;
      var contribution = v.monthly_contribution || 0;
      var total = fv(rate / n, n * years, -contribution, -principal);
      return { future_value: total, total_contributions: principal + contribution * n * years, total_interest: total - principal - contribution * n * years };
    },
    savings_goal: function(v) {
      var goal = v.savings_goal || v.target || 0;
      var r = ((v.interest_rate || v.annual_rate || 0) / 100) / 12;
      var periods = 12 * (v.years || v.time_period || 10);
      var monthly = r === 0 ? goal / periods : (goal * r) / (Math.pow(1 + r, periods) - 1);
      return { monthly_savings: monthly, total_contributed: monthly * periods, interest_earned: goal - monthly * periods };
    },
    loan_amortization: function(v) {
      var principal = v.loan_amount || v.principal || 0;
      var rate = (v.interest_rate || 0) / 100 / 12;
      var months = (v.loan_term || 30) * 12;
      var mp = pmt(rate, months, principal);
      var firstInterest = principal * rate;
      return { monthly_payment: mp, first_interest: firstInterest, first_principal: mp - firstInterest, total_paid: mp * months, total_interest: mp * months - principal };
    },
    roi: function(v) {
      var initial = v.initial_investment || 0;
      var gain = (v.final_value || 0) - initial;
      var roiVal = initial !== 0 ? gain / initial : 0;
      return { net_gain: gain, roi_percent: roiVal, annualized_roi: v.years ? Math.pow(1 + roiVal, 1 / v.years) - 1 : roiVal };
    }
  };
  var computeFn = FORMULAS.hasOwnProperty(cfg.formula) ? FORMULAS[cfg.formula] : null;
  if (!computeFn) {
    var ids = cfg.inputs.join(',');
    if (ids.indexOf('loan_amount') >= 0 && ids.indexOf('interest_rate') >= 0) computeFn = FORMULAS.mortgage_payment;
    else if (ids.indexOf('principal') >= 0 || ids.indexOf('initial_investment') >= 0) computeFn = FORMULAS.compound_interest;
    else if (ids.indexOf('savings_goal') >= 0 || ids.indexOf('target') >= 0) computeFn = FORMULAS.savings_goal;
  }
  if (!computeFn) {
    var msg = document.getElementById('calc-error-msg');
    if (msg) msg.style.display = 'block';
    computeFn = function() { return {}; };
  }
  function getVal(id) {
    var el = document.getElementById(prefix + id);
    return el ? parseFloat(el.value) || 0 : 0;
  }
  function formatValue(val, fmt, dec) {
    if (isNaN(val) || !isFinite(val)) return '—';
    if (fmt === 'currency') return new Intl.NumberFormat('en-US', { style: 'currency', currency: 'USD', minimumFractionDigits: dec, maximumFractionDigits: dec }).format(val);
    if (fmt === 'percent') return (val * 100).toFixed(dec) + '%%';
    return new Intl.NumberFormat('en-US', { minimumFractionDigits: dec, maximumFractionDigits: dec }).format(val);
  }
  function calculate() {
    var vals = {};
    cfg.inputs.forEach(function(id) { vals[id] = getVal(id); });
    var results;
    try {
      results = computeFn(vals);
    } catch (e) {
      cfg.outputs.forEach(function(o) {
        var el = document.getElementById(prefix + o.id);
        if (el) { el.textContent = 'Error'; el.title = 'Calculation failed'; }
      });
      return;
    }
    cfg.outputs.forEach(function(o) {
      var el = document.getElementById(prefix + o.id);
      if (el && results[o.id] !== undefined) el.textContent = formatValue(results[o.id], o.format, o.decimals);
    });
    if (cfg.embed && window.parent !== window) {
      window.parent.postMessage({ type: 'embed-result', source: cfg.domain, values: vals, results: results }, '*');
    }
  }
  cfg.inputs.forEach(function(id) {
    var el = document.getElementById(prefix + id);
    if (!el) return;
    el.addEventListener('input', function() {
      var display = document.getElementById(prefix + id + '_display');
      if (display) display.textContent = el.value;
      calculate();
    });
  });
  calculate();
"""


def build_calculator_script(
    config: CalculatorConfig, id_prefix: str = "", embed: bool = False, domain: str = ""
) -> Markup:
    payload = {
        "prefix": id_prefix,
        "formula": formula_key(config.formula),
        "inputs": [i.id for i in config.inputs],
        "outputs": [{"id": o.id, "format": o.format, "decimals": o.decimals} for o in config.outputs],
        "embed": embed,
        "domain": domain,
    }
    return script_tag(_CALCULATOR_JS % {"config": json_for_script(json.dumps(payload))})


def render_calculator_page(article: Article, ctx: RenderContext) -> str:
    config = article.calculator_config
    schema_ld = build_schema_json_ld(
        article, ctx.domain, "WebApplication", {"applicationCategory": "FinanceApplication"}
    )
    calculator_html = build_calculator_html(config) if config else Markup("")
    inner = calculator_html + Markup("\n") + ctx.render_markdown(article.content_markdown)
    script = build_calculator_script(config, domain=ctx.domain) if config and config.inputs else Markup("")
    return compose_article_page(article, ctx, schema_ld, inner, script=script)
