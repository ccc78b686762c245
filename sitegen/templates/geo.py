"""Region-specific content picked in the browser from the visitor's time zone.

No lookup service is involved: the IANA zone reported by ``Intl`` maps to a
US state and a broad region, and the first matching block is shown.
"""

from typing import Optional

from markupsafe import Markup

from sitegen.models.article import GeoData
from sitegen.services.sanitizer import sanitize_article_html
from sitegen.templates.common import script_tag

_GEO_JS = r"""
  var stateByZone = {
    'America/New_York':'NY','America/Chicago':'IL','America/Denver':'CO','America/Los_Angeles':'CA',
    'America/Phoenix':'AZ','America/Detroit':'MI','America/Boise':'ID','America/Juneau':'AK',
    'America/Anchorage':'AK','America/Sitka':'AK','America/Yakutat':'AK','America/Nome':'AK',
    'America/Metlakatla':'AK','America/Adak':'AK','Pacific/Honolulu':'HI',
    'America/Indiana/Indianapolis':'IN','America/Indiana/Knox':'IN','America/Indiana/Marengo':'IN',
    'America/Indiana/Petersburg':'IN','America/Indiana/Tell_City':'IN','America/Indiana/Vevay':'IN',
    'America/Indiana/Vincennes':'IN','America/Indiana/Winamac':'IN',
    'America/Kentucky/Louisville':'KY','America/Kentucky/Monticello':'KY','America/Menominee':'WI',
    'America/North_Dakota/Beulah':'ND','America/North_Dakota/Center':'ND','America/North_Dakota/New_Salem':'ND'
  };
  var regionByState = {
    AL:'southeast',AK:'west',AZ:'southwest',AR:'southeast',CA:'west',CO:'mountain',CT:'northeast',
    DE:'northeast',FL:'southeast',GA:'southeast',HI:'west',ID:'mountain',IL:'midwest',IN:'midwest',
    IA:'midwest',KS:'midwest',KY:'southeast',LA:'southeast',ME:'northeast',MD:'northeast',
    MA:'northeast',MI:'midwest',MN:'midwest',MS:'southeast',MO:'midwest',MT:'mountain',NE:'midwest',
    NV:'west',NH:'northeast',NJ:'northeast',NM:'southwest',NY:'northeast',NC:'southeast',
    ND:'midwest',OH:'midwest',OK:'southwest',OR:'west',PA:'northeast',RI:'northeast',
    SC:'southeast',SD:'midwest',TN:'southeast',TX:'southwest',UT:'mountain',VT:'northeast',
    VA:'southeast',WA:'west',WV:'southeast',WI:'midwest',WY:'mountain',DC:'northeast'
  };
  try {
    var zone = Intl.DateTimeFormat().resolvedOptions().timeZone;
    var state = stateByZone[zone] || null;
    var region = state ? regionByState[state] : null;
    var candidates = [state, region].filter(Boolean);
    if (!candidates.length) return;
    var matched = false;
    document.querySelectorAll('.geo-block[data-region]').forEach(function(block) {
      if (candidates.indexOf(block.dataset.region) !== -1) { block.style.display = ''; matched = true; }
    });
    if (matched) {
      var fallback = document.querySelector('.geo-fallback');
      if (fallback) fallback.style.display = 'none';
    }
  } catch (e) {}
"""


def build_geo_blocks(geo: Optional[GeoData]) -> Markup:
    """Hidden per-region blocks plus a visible fallback; empty without regions."""
    if geo is None or not geo.regions:
        return Markup("")
    blocks = []
    for key, region in geo.regions.items():
        label = Markup('<span class="geo-label">{}</span>').format(region.label) if region.label else Markup("")
        blocks.append(
            Markup(
                '<div class="geo-block" data-region="{}" style="display:none">\n  {}\n'
                '  <div class="geo-content">{}</div>\n</div>'
            ).format(key, label, sanitize_article_html(region.content))
        )
    fallback = Markup(
        '<div class="geo-block geo-fallback">\n  <div class="geo-content">{}</div>\n</div>'
    ).format(sanitize_article_html(geo.fallback))
    return Markup('<div class="geo-adaptive">\n{}\n{}\n</div>\n{}').format(
        Markup("\n").join(blocks), fallback, script_tag(_GEO_JS)
    )
