"""Wizard family pages: wizard, configurator, quiz, survey and assessment.

All five share one multi-step engine and differ only in their copy (see
:data:`sitegen.services.scoring.MODE_COPY`).  The page ships a progress bar,
one panel per step (all but the first hidden) and a hidden results panel.
Navigation, validation, branching, result matching and scoring run in the
browser with the generated script, which embeds the safe condition
evaluator; no condition text is ever executed as code.
"""

import json
from typing import Optional

from markupsafe import Markup

from sitegen.models.article import Article, WizardConfig, WizardField, WizardStep
from sitegen.services.conditions import EVALUATOR_JS
from sitegen.services.sanitizer import json_for_script
from sitegen.services.scoring import WIZARD_ENGINE_JS, ModeCopy, mode_copy
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, script_tag
from sitegen.templates.lead_capture import secure_endpoint

NOT_AVAILABLE_NOTICE = "Wizard configuration is not yet available."

_CONTROLLER_JS = r"""
  var cfg = __WIZARD_CONFIG__;
  var container = document.querySelector('.wizard-container');
  if (!container) return;
  var steps = cfg.steps;
  var rules = cfg.rules;
  var scoring = cfg.scoring;
  var copy = cfg.copy;
  var answers = {};
  var history = [0];

  function stepEls() { return container.querySelectorAll('.wizard-step'); }
  function showStep(idx) {
    stepEls().forEach(function(el, i) { el.style.display = i === idx ? '' : 'none'; });
    container.querySelectorAll('.wizard-progress-segment').forEach(function(el, i) {
      el.classList.toggle('active', i <= idx);
      el.classList.toggle('current', i === idx);
    });
  }
  function collectAnswers(stepEl) {
    stepEl.querySelectorAll('[name]').forEach(function(el) {
      var name = el.name;
      if (el.type === 'radio') {
        if (el.checked) answers[name] = el.value;
      } else if (el.type === 'checkbox') {
        if (!Array.isArray(answers[name])) answers[name] = [];
        var pos = answers[name].indexOf(el.value);
        if (el.checked && pos === -1) answers[name].push(el.value);
        else if (!el.checked && pos !== -1) answers[name].splice(pos, 1);
      } else {
        answers[name] = el.value;
      }
    });
  }
  function safeUrl(url) { return /^(https?:\/\/|\/)/.test(String(url || '')) ? String(url) : '#'; }
  function addCard(cardsEl, title, body, cta, extraClass) {
    var card = document.createElement('div');
    card.className = 'wizard-result-card' + (extraClass ? ' ' + extraClass : '');
    var h = document.createElement('h4'); h.textContent = title; card.appendChild(h);
    var p = document.createElement('p'); p.textContent = body; card.appendChild(p);
    if (cta && cta.url) {
      var a = document.createElement('a');
      a.className = 'cta-button'; a.href = safeUrl(cta.url); a.textContent = cta.text || '';
      card.appendChild(a);
    }
    cardsEl.appendChild(card);
  }
  function fieldLabel(fieldId) {
    for (var s = 0; s < steps.length; s++) {
      for (var f = 0; f < steps[s].fields.length; f++) {
        if (steps[s].fields[f].id === fieldId) return steps[s].fields[f].label || fieldId;
      }
    }
    return fieldId;
  }
  function showResults() {
    stepEls().forEach(function(el) { el.style.display = 'none'; });
    container.querySelectorAll('.wizard-progress-segment').forEach(function(el) { el.classList.add('active'); });
    var resultsEl = container.querySelector('.wizard-results');
    var cardsEl = resultsEl.querySelector('.wizard-results-cards');
    cardsEl.textContent = '';
    var matched = [];
    rules.forEach(function(rule) {
      if (evalCondition(rule.condition, answers)) {
        matched.push(rule.title);
        addCard(cardsEl, rule.title, rule.body, rule.cta, 'result-' + cfg.resultTemplate);
      }
    });
    var score = computeScore();
    if (!matched.length) {
      var outcome = scoring ? findInRange(scoring.outcomes, score) : null;
      if (outcome) addCard(cardsEl, outcome.title, outcome.body, outcome.cta, 'result-' + cfg.resultTemplate);
      else addCard(cardsEl, copy.emptyTitle, copy.emptyBody, null, '');
    }
    var summaryEl = container.querySelector('.wizard-answer-summary');
    if (summaryEl) {
      var listEl = summaryEl.querySelector('.wizard-answer-list');
      listEl.textContent = '';
      Object.keys(answers).forEach(function(key) {
        var value = answers[key];
        var item = document.createElement('li');
        item.textContent = fieldLabel(key) + ': ' + (Array.isArray(value) ? value.join(', ') : String(value || '(none)'));
        listEl.appendChild(item);
      });
      summaryEl.style.display = '';
    }
    var scoreEl = container.querySelector('.wizard-quiz-score');
    if (scoreEl) {
      var band = scoring ? findInRange(scoring.bands, score) : null;
      var prefix = cfg.mode === 'quiz' ? 'Quiz Score: ' : 'Assessment Score: ';
      scoreEl.textContent = '';
      var line = document.createElement('span');
      line.textContent = prefix + score + '%' + (band && band.label ? ' - ' + band.label : '');
      scoreEl.appendChild(line);
      if (band && band.description) {
        var detail = document.createElement('div');
        detail.className = 'wizard-score-detail';
        detail.textContent = band.description;
        scoreEl.appendChild(detail);
      }
      scoreEl.style.display = '';
    }
    resultsEl.style.display = '';
    var leadForm = container.querySelector('.wizard-lead-form');
    if (leadForm) leadForm.style.display = '';
    if (cfg.embed && window.parent !== window) {
      window.parent.postMessage({ type: 'embed-result', source: cfg.domain, score: score, results: matched }, '*');
    }
  }
  function restart() {
    answers = {};
    history = [0];
    container.querySelector('.wizard-results').style.display = 'none';
    ['.wizard-answer-summary', '.wizard-quiz-score', '.wizard-lead-form'].forEach(function(sel) {
      var el = container.querySelector(sel);
      if (el) el.style.display = 'none';
    });
    container.querySelectorAll('.wizard-step input, .wizard-step select').forEach(function(el) {
      if (el.type === 'checkbox' || el.type === 'radio') el.checked = false;
      else el.value = '';
    });
    showStep(0);
  }
  container.addEventListener('click', function(e) {
    var btn = e.target.closest('button');
    if (!btn) return;
    if (btn.classList.contains('wizard-next')) {
      var idx = history[history.length - 1];
      var stepEl = stepEls()[idx];
      collectAnswers(stepEl);
      if (!stepIsValid(steps[idx])) {
        stepEl.classList.add('wizard-shake');
        setTimeout(function() { stepEl.classList.remove('wizard-shake'); }, 400);
        return;
      }
      var next = nextStepIndex(idx);
      if (next >= steps.length) showResults();
      else { history.push(next); showStep(next); }
    } else if (btn.classList.contains('wizard-back')) {
      if (history.length > 1) { history.pop(); showStep(history[history.length - 1]); }
    } else if (btn.classList.contains('wizard-restart')) {
      restart();
    }
  });
"""


def wizard_mode(content_type: str) -> str:
    if content_type in ("configurator", "quiz", "survey", "assessment"):
        return content_type
    return "wizard"


def render_field(field: WizardField) -> Markup:
    required = Markup(" required") if field.required else Markup("")

    if field.type in ("radio", "checkbox"):
        if not field.options:
            return Markup("")
        label_class = "wizard-radio" if field.type == "radio" else "wizard-checkbox"
        choices = Markup("\n  ").join(
            Markup('<label class="{}"><input type="{}" name="{}" value="{}"{}><span>{}</span></label>').format(
                label_class,
                field.type,
                field.id,
                option.value,
                required if field.type == "radio" else Markup(""),
                option.label,
            )
            for option in field.options
        )
        return Markup(
            '<fieldset class="wizard-field" data-field-id="{}">\n  <legend>{}</legend>\n  {}\n</fieldset>'
        ).format(field.id, field.label, choices)

    if field.type == "select":
        options = Markup("\n    ").join(
            Markup('<option value="{}">{}</option>').format(o.value, o.label) for o in field.options
        )
        control = Markup(
            '<select id="wf-{id}" name="{id}"{required}>\n    <option value="">Select...</option>\n    {options}\n  </select>'
        ).format(id=field.id, required=required, options=options)
    elif field.type == "number":
        control = Markup('<input type="number" id="wf-{id}" name="{id}" inputmode="numeric"{required}>').format(
            id=field.id, required=required
        )
    else:
        control = Markup('<input type="text" id="wf-{id}" name="{id}"{required}>').format(
            id=field.id, required=required
        )
    return Markup(
        '<div class="wizard-field" data-field-id="{id}">\n  <label for="wf-{id}">{label}</label>\n  {control}\n</div>'
    ).format(id=field.id, label=field.label, control=control)


def render_step(step: WizardStep, index: int, total: int, copy: ModeCopy) -> Markup:
    description = (
        Markup('<p class="wizard-step-desc">{}</p>').format(step.description) if step.description else Markup("")
    )
    back = Markup('<button type="button" class="wizard-back">Back</button>') if index > 0 else Markup("<span></span>")
    next_label = copy.final_step_label if index == total - 1 else "Next"
    style = Markup("") if index == 0 else Markup(' style="display:none"')
    return Markup(
        '<div class="wizard-step" data-step-id="{id}" data-step-index="{index}"{style}>\n'
        '  <h3 class="wizard-step-title">{title}</h3>\n  {description}\n  {fields}\n'
        '  <div class="wizard-nav">\n    {back}\n    <button type="button" class="wizard-next">{next}</button>\n  </div>\n'
        "</div>"
    ).format(
        id=step.id,
        index=index,
        style=style,
        title=step.title,
        description=description,
        fields=Markup("\n").join(render_field(f) for f in step.fields),
        back=back,
        next=next_label,
    )


def build_progress_bar(steps) -> Markup:
    segments = Markup("\n  ").join(
        Markup(
            '<div class="wizard-progress-segment{}" data-index="{}">'
            '<span class="wizard-progress-dot">{}</span>'
            '<span class="wizard-progress-label">{}</span></div>'
        ).format(" active" if i == 0 else "", i, i + 1, step.title)
        for i, step in enumerate(steps)
    )
    return Markup('<div class="wizard-progress">\n  {}\n</div>').format(segments)


def build_results_panel(config: WizardConfig, copy: ModeCopy, lead_endpoint: Optional[str]) -> Markup:
    score = Markup('<div class="wizard-quiz-score" style="display:none"></div>') if copy.show_score else Markup("")
    summary = Markup("")
    if copy.show_answer_summary:
        summary = Markup(
            '<div class="wizard-answer-summary" style="display:none">\n'
            '  <h4>Selection Summary</h4>\n  <ul class="wizard-answer-list"></ul>\n</div>'
        )

    lead = Markup("")
    if config.collect_lead is not None:
        fields = Markup("\n    ").join(
            Markup(
                '<div class="wizard-field"><label for="lead-{name}">{label}</label>'
                '<input type="{type}" id="lead-{name}" name="{name}" required></div>'
            ).format(
                name=name,
                label=name[:1].upper() + name[1:],
                type="email" if name == "email" else "tel" if name == "phone" else "text",
            )
            for name in config.collect_lead.fields
        )
        disabled = Markup("") if lead_endpoint else Markup(" disabled")
        lead = Markup(
            '<div class="wizard-lead-form" style="display:none">\n'
            "  <h4>{title}</h4>\n"
            '  <form id="wizard-lead-form" action="{action}" method="POST">\n    {fields}\n'
            '    <div class="consent"><label><input type="checkbox" required> {consent}</label></div>\n'
            '    <button type="submit"{disabled}>{button}</button>\n'
            "  </form>\n</div>"
        ).format(
            title=copy.lead_title,
            action=lead_endpoint or "#",
            fields=fields,
            consent=config.collect_lead.consent_text,
            disabled=disabled,
            button=copy.lead_button,
        )

    return Markup(
        '<div class="wizard-results" style="display:none">\n'
        '  <h3 class="wizard-results-title">{title}</h3>\n  {score}\n'
        '  <div class="wizard-results-cards"></div>\n  {summary}\n  {lead}\n'
        '  <button type="button" class="wizard-restart">{restart}</button>\n'
        "</div>"
    ).format(title=copy.results_title, score=score, summary=summary, lead=lead, restart=copy.restart_label)


def build_wizard_html(config: WizardConfig, mode: str, lead_endpoint: Optional[str]) -> Markup:
    copy = mode_copy(mode)
    steps = Markup("\n").join(render_step(s, i, len(config.steps), copy) for i, s in enumerate(config.steps))
    return Markup(
        '<div class="wizard-container wizard-mode-{mode}" data-wizard-mode="{mode}">\n{progress}\n{steps}\n{results}\n</div>'
    ).format(
        mode=mode,
        progress=build_progress_bar(config.steps),
        steps=steps,
        results=build_results_panel(config, copy, lead_endpoint),
    )


def build_wizard_script(config: WizardConfig, mode: str, embed: bool = False, domain: str = "") -> Markup:
    copy = mode_copy(mode)
    payload = {
        "mode": mode,
        "resultTemplate": config.result_template,
        "steps": [
            {
                "id": s.id,
                "nextStep": s.next_step,
                "branches": [b.model_dump(by_alias=True) for b in s.branches],
                "fields": [{"id": f.id, "label": f.label, "required": f.required} for f in s.fields],
            }
            for s in config.steps
        ],
        "rules": [r.model_dump(by_alias=True) for r in config.result_rules],
        "scoring": config.scoring.model_dump(by_alias=True) if config.scoring else None,
        "copy": {"emptyTitle": copy.empty_title, "emptyBody": copy.empty_body},
        "embed": embed,
        "domain": domain,
    }
    controller = _CONTROLLER_JS.replace("__WIZARD_CONFIG__", str(json_for_script(json.dumps(payload))))
    return script_tag(EVALUATOR_JS + WIZARD_ENGINE_JS + controller)


def lead_endpoint_for(article: Article) -> Optional[str]:
    config = article.wizard_config
    if config is None or config.collect_lead is None:
        return None
    return secure_endpoint(config.collect_lead.endpoint, article.slug)


def render_wizard_page(article: Article, ctx: RenderContext) -> str:
    config = article.wizard_config
    mode = wizard_mode(article.content_type.value)
    schema_ld = build_schema_json_ld(article, ctx.domain, "WebApplication")

    if config is None or not config.steps:
        inner = Markup("<p>{}</p>").format(NOT_AVAILABLE_NOTICE)
        return compose_article_page(article, ctx, schema_ld, inner)

    inner = build_wizard_html(config, mode, lead_endpoint_for(article)) + Markup("\n") + ctx.render_markdown(
        article.content_markdown
    )
    return compose_article_page(article, ctx, schema_ld, inner, script=build_wizard_script(config, mode))
