"""Hostname → human-readable site title.

``bestlawyersnearme.co.uk`` becomes ``Best Lawyers Near Me``.  Steps, in
order: drop a compound or plain TLD, turn hyphens and underscores into
spaces, split camelCase and letter/digit boundaries, and when the name is
still one run of letters, segment it against a built-in dictionary.
"""

import logging
import re
from functools import lru_cache
from typing import FrozenSet, List, Optional

logger = logging.getLogger(__name__)

COMPOUND_TLDS = (
    ".co.uk", ".org.uk", ".me.uk", ".ltd.uk", ".com.au", ".net.au", ".org.au",
    ".co.nz", ".co.za", ".com.br", ".co.in", ".com.mx", ".com.sg", ".co.jp",
)

BRAND_CASING = {
    "ai": "AI",
    "seo": "SEO",
    "usa": "USA",
    "uk": "UK",
    "hvac": "HVAC",
    "diy": "DIY",
    "llc": "LLC",
    "faq": "FAQ",
    "ev": "EV",
    "tv": "TV",
    "pc": "PC",
    "vpn": "VPN",
    "crm": "CRM",
    "saas": "SaaS",
    "401k": "401k",
    "iphone": "iPhone",
    "ipad": "iPad",
    "youtube": "YouTube",
    "linkedin": "LinkedIn",
    "wordpress": "WordPress",
    "paypal": "PayPal",
    "ebay": "eBay",
    "github": "GitHub",
    "tiktok": "TikTok",
    "and": "and",
    "of": "of",
    "for": "for",
    "the": "the",
}

# Kept lowercase unless they open the title.
_MINOR_WORDS = {"and", "of", "for", "the"}

_WORDS = """
able about above accident accidents accountant accountants action active adult advice advisor advisors
after age agency agent agents aid air airline airport alarm all alliance alpha alternative america american
analysis animal animals annuity answer answers anti apartment apartments app apps arena army art arts
asset assets assist assistance attorney attorneys audio auto autos award away baby back bad bag bags bank
bankruptcy banks bar base basic bath bathroom battery bay beach bear beauty bed bedroom bee before being
benefit benefits best bet better bike bikes bill bills bio bird birth black blog blue board boat boats body
bond bonds book books boost boss box boy brain brand bridge bright budget build builder builders building
bulk bus business buy buyer buyers buzz cafe calculator calculators call camp camping cancer capital car
card cards care career careers cars case cash cat cats center central centre chain change channel charge
cheap check checker chef child children choice choose church city claim claims class classic clean cleaner
cleaning clear clinic clinics cloud club coach coaching code coffee coin coins cold college colleges color
comfort compare comparison compass complete computer condo connect construction consult consumer control
cook cooking cool core corner cost costs country county coupon coupons course courses cover coverage craft
credit crowd cruise custom cyber daily damage data date dating day days deal dealer deals debt decision
decor defense dental dentist dentists design designs desk detox diabetes diet digital direct discount
divorce doctor doctors dog dogs dollar dollars door doors drive driver drivers driving drone dry dui eagle
earn earth easy eat eco edge education elder electric electrician elite email emergency energy engine
estate estimate estimates event events every exchange expert experts express eye eyes face fact facts family
fan farm fast father fee fees field file finance financial find finder fire first fish fit fitness fix flat
fleet flight flights floor flooring flow fly food foods for force forest form fort forum forward free
fresh friend friends front fuel fund funding funds future game games garage garden gas gear general get
gift gifts girl glass global go gold golf good grade grand grant grants green grid ground group grow growth
guard guide guides gun guru gym habit hair half hand happy hard health healthy heart heat heating help
helper hero high hike hill hire history hit hobby hold holiday home homes honest hope horse hospital host
hot hotel hotels hour house housing how hub hunt hunter idea ideas income index info injury inside insight
insights insurance insure invest investing investment investor iron island job jobs join journal junk just
keep key kid kids kit kitchen know knowledge lab labs land laptop law lawn laws lawyer lawyers lead leader
leads learn lease legal lender lenders lens level liberty life light limit line link list live living load
loan loans local lock locksmith logic long look loss lot love low luxury mac made magic mail main make
maker mall man manager map market marketing mart master match mate meal meals media medical medicare
medicine meet mega men mental menu method metro mind mini mint mobile modern mold money monitor month more
mortgage mortgages mother motor move mover movers moving much music my name nation national native natural
nature near need needs net network new news next nice night nurse nursing nutrition office offer official
oil old one online only open option options order organic outdoor owner pack page pain paint painter pal
parent parents park part parts party pass path pay payday pet pets phone photo physio pick pilot pipe pizza
place plan planet planner planning plans plant play plumber plumbing plus point policy pool portal post
power prep price prices pricing prime pro process product products profit project proof property protect
pure quick quote quotes race radio rank rate rates rating ratings read ready real realty record recovery
red rehab relief remodel remodeling rent rental rentals repair repairs report rescue research resource
resources rest result results retire retirement review reviews rich ride right ring rise risk road robot
rock roof roofer roofing room rooms root route rule safe safety sale sales salon save saver savings
scan school schools score search secure security seed select sell seller senior seniors service services
settlement shield ship shop shopping shore short show side sign simple site size skin sky sleep smart smile
social soft solar solution solutions sound source space spark spot sport sports spring square staff star
start state states station step stock stop storage store story strategy street strong student study style
success summer sun super supply support sure surgery swift system systems tag talk tax taxes team tech
technology test tests therapy thing things think tips today tool tools top total tour tours town track
trade trader trading trail train training travel tree trend trial truck trucks true trust truth tutor
tv type ultra union unit united up urban used user valley value van vault vehicle vet view villa vision
visit vital voice wall wallet want war warranty wash watch water way ways wealth weather web wedding week
weight well wellness west wheel white wide wild will win wind window windows wine wise woman women wood
word work worker workers works world worth yard year years yes yoga you young your zen zone
"""


@lru_cache(maxsize=1)
def dictionary() -> FrozenSet[str]:
    words = set(_WORDS.split())
    words.update(k for k in BRAND_CASING if k.isalpha() and len(k) > 1)
    return frozenset(words)


def strip_tld(hostname: str) -> str:
    host = hostname.strip()
    if host.lower().startswith("www."):
        host = host[4:]
    lowered = host.lower()
    for tld in COMPOUND_TLDS:
        if lowered.endswith(tld) and len(host) > len(tld):
            return host[: -len(tld)]
    last_dot = host.rfind(".")
    return host[:last_dot] if last_dot > 0 else host


def split_boundaries(name: str) -> str:
    """Insert spaces at camelCase and letter/digit boundaries."""
    spaced = re.sub(r"(?<=[a-z])(?=[A-Z])", " ", name)
    spaced = re.sub(r"(?<=[A-Za-z])(?=\d)|(?<=\d)(?=[A-Za-z])", " ", spaced)
    return spaced


def word_break(text: str, words: Optional[FrozenSet[str]] = None) -> Optional[List[str]]:
    """Fewest-words segmentation of *text*, or ``None`` if there is none.

    ``best[i]`` holds the shortest segmentation found for ``text[:i]``; a
    later candidate only replaces it when strictly shorter, so ties keep
    the first one discovered.
    """
    words = words or dictionary()
    lowered = text.lower()
    n = len(lowered)
    longest = max((len(w) for w in words), default=0)
    best: List[Optional[List[str]]] = [None] * (n + 1)
    best[0] = []
    for end in range(1, n + 1):
        for start in range(max(0, end - longest), end):
            prefix = best[start]
            if prefix is None or lowered[start:end] not in words:
                continue
            if best[end] is None or len(prefix) + 1 < len(best[end]):
                best[end] = prefix + [text[start:end]]
    return best[n]


def greedy_segment(text: str, words: Optional[FrozenSet[str]] = None) -> List[str]:
    """Longest-match-first split that always terminates.

    Characters no dictionary word starts with are appended to the previous
    token when it is short or itself unmatched, otherwise they open a new
    token.
    """
    words = words or dictionary()
    lowered = text.lower()
    longest = max((len(w) for w in words), default=0)
    tokens: List[str] = []
    unmatched_tail = False
    i = 0
    while i < len(text):
        match_end = 0
        for end in range(min(len(text), i + longest), i, -1):
            if lowered[i:end] in words:
                match_end = end
                break
        if match_end:
            tokens.append(text[i:match_end])
            unmatched_tail = False
            i = match_end
            continue
        if tokens and (unmatched_tail or len(tokens[-1]) <= 3):
            tokens[-1] += text[i]
        else:
            tokens.append(text[i])
        unmatched_tail = True
        i += 1
    return tokens


def segment(text: str) -> List[str]:
    words = word_break(text)
    if words is None:
        logger.debug("No dictionary segmentation for %r – using greedy split", text)
        words = greedy_segment(text)
    return words


def _case_word(word: str, first: bool) -> str:
    lowered = word.lower()
    if lowered in _MINOR_WORDS and first:
        return word[:1].upper() + word[1:]
    if lowered in BRAND_CASING:
        return BRAND_CASING[lowered]
    return word[:1].upper() + word[1:]


def extract_site_title(hostname: str) -> str:
    """Readable title for *hostname*; never empty for a non-empty name."""
    name = strip_tld(hostname) or hostname.strip()
    name = re.sub(r"[-_]+", " ", name).strip()
    if " " not in name:
        name = split_boundaries(name)
    if " " not in name and name.isalpha():
        name = " ".join(segment(name))
    words = name.split()
    if not words:
        return hostname.strip()
    return " ".join(_case_word(word, index == 0) for index, word in enumerate(words))
