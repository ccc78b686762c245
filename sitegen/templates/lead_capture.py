"""Lead capture pages.

The form posts JSON to the configured endpoint from the browser.  Personal
data only ever travels over HTTPS: an endpoint with any other scheme is
dropped at generation time and the form is shipped without a target.
"""

import json
import logging
from typing import Optional

from markupsafe import Markup

from sitegen.models.article import Article, LeadField, LeadGenConfig
from sitegen.services.sanitizer import json_for_script
from sitegen.services.structured_data import build_schema_json_ld
from sitegen.templates.common import RenderContext, compose_article_page, script_tag

logger = logging.getLogger(__name__)

_LEAD_FORM_JS = r"""
  var cfg = %(config)s;
  var form = document.getElementById('lead-form');
  if (!form) return;
  var consent = document.getElementById('lead-consent');
  var submitBtn = form.querySelector('button[type="submit"]');
  var msgEl = document.getElementById('lead-form-message');
  function refresh() { submitBtn.disabled = !cfg.endpoint || (consent && !consent.checked); }
  if (submitBtn) {
    refresh();
    if (consent) consent.addEventListener('change', refresh);
  }
  form.addEventListener('submit', function(e) {
    e.preventDefault();
    if (!cfg.endpoint || (consent && !consent.checked)) return;
    var hp = document.getElementById('lead_hp_field');
    if (hp && hp.value) { msgEl.textContent = 'Thank you!'; msgEl.className = 'success-msg'; return; }
    submitBtn.disabled = true;
    submitBtn.textContent = 'Submitting...';
    msgEl.textContent = '';
    msgEl.className = '';
    var body = {};
    new FormData(form).forEach(function(val, key) { if (key !== 'lead_hp_field') body[key] = val; });
    fetch(cfg.endpoint, {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify(body)
    }).then(function(res) {
      if (!res.ok) throw new Error('Submission failed');
      msgEl.textContent = cfg.successMessage;
      msgEl.className = 'success-msg';
      form.reset();
      submitBtn.textContent = 'Submitted';
    }).catch(function() {
      msgEl.textContent = 'Something went wrong. Please try again.';
      msgEl.className = 'error-msg';
      submitBtn.disabled = false;
      submitBtn.textContent = 'Submit';
    });
  });
"""


def secure_endpoint(endpoint: Optional[str], context: str) -> Optional[str]:
    """Return *endpoint* if it is HTTPS, otherwise log and return ``None``."""
    if not endpoint:
        return None
    if not endpoint.startswith("https://"):
        logger.error("Blocked non-HTTPS lead endpoint %r for %s – form disabled", endpoint, context)
        return None
    return endpoint


def build_lead_field(field: LeadField) -> Markup:
    required = Markup(" required") if field.required else Markup("")
    if field.type == "select" and field.options:
        options = Markup("").join(Markup('<option value="{}">{}</option>').format(o, o) for o in field.options)
        return Markup(
            '<div class="lead-field">\n  <label for="{name}">{label}</label>\n'
            '  <select id="{name}" name="{name}"{required}>\n    <option value="">Select...</option>\n'
            "    {options}\n  </select>\n</div>"
        ).format(name=field.name, label=field.label, required=required, options=options)
    return Markup(
        '<div class="lead-field">\n  <label for="{name}">{label}</label>\n'
        '  <input type="{type}" id="{name}" name="{name}" placeholder="{label}"{required}>\n</div>'
    ).format(name=field.name, label=field.label, type=field.type, required=required)


def build_lead_form(config: LeadGenConfig) -> Markup:
    if not config.fields:
        return Markup("")
    consent = Markup("")
    if config.consent_text:
        consent = Markup(
            '<div class="consent">\n  <label><input type="checkbox" id="lead-consent" required> {}</label>\n</div>'
        ).format(config.consent_text)
    privacy = Markup("")
    if config.privacy_policy_url:
        privacy = Markup(
            '<p class="privacy-link"><a href="{}" target="_blank" rel="noopener">Privacy Policy</a></p>'
        ).format(config.privacy_policy_url)
    honeypot = Markup(
        '<div style="position:absolute;left:-9999px" aria-hidden="true">\n'
        '  <label for="lead_hp_field">Leave blank</label>\n'
        '  <input type="text" id="lead_hp_field" name="lead_hp_field" tabindex="-1" autocomplete="off">\n'
        "</div>"
    )
    return Markup(
        '<section class="lead-form-section">\n'
        '  <form id="lead-form" class="lead-form" action="{action}" method="POST">\n'
        "    {honeypot}\n    {fields}\n    {consent}\n    {privacy}\n"
        '    <button type="submit" disabled>Submit</button>\n'
        '    <div id="lead-form-message" role="status"></div>\n'
        "  </form>\n</section>"
    ).format(
        action=config.endpoint or "#",
        honeypot=honeypot,
        fields=Markup("\n").join(build_lead_field(f) for f in config.fields),
        consent=consent,
        privacy=privacy,
    )


def build_lead_script(config: LeadGenConfig) -> Markup:
    if not config.fields:
        return Markup("")
    payload = {"endpoint": config.endpoint or "", "successMessage": config.success_message}
    return script_tag(_LEAD_FORM_JS % {"config": json_for_script(json.dumps(payload))})


def render_lead_capture_page(article: Article, ctx: RenderContext) -> str:
    config = article.lead_gen_config
    if config is not None:
        config = config.model_copy(update={"endpoint": secure_endpoint(config.endpoint, article.slug)})

    schema_ld = build_schema_json_ld(article, ctx.domain, "Article")
    above_fold = Markup("")
    if config and config.disclosure_above_fold:
        above_fold = Markup('<div class="disclosure-above">{}</div>').format(config.disclosure_above_fold)

    form_html = build_lead_form(config) if config else Markup("")
    inner = Markup("\n").join([form_html, ctx.render_markdown(article.content_markdown)])
    script = build_lead_script(config) if config else Markup("")
    return compose_article_page(article, ctx, schema_ld, inner, script=script, above_fold=above_fold)
