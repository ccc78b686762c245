"""Markdown → sanitized HTML.

Steps, in order:

1. Strip unresolved placeholder markers left by the content pipeline.
2. Convert with Python-Markdown (``fenced_code`` and ``tables``).
3. Allow-list sanitize the result.
4. Post-process links with BeautifulSoup:

   * absolute ``http(s)`` links to other sites get
     ``rel="noopener noreferrer"`` and ``target="_blank"``;
   * absolute links to *other* domains of the same portfolio are replaced
     by a ``<span class="portfolio-link-blocked">`` carrying the link text.

The portfolio hostname list comes from an injected :class:`HostnameCache`,
refreshed at most once per TTL window.  A stale list is acceptable.
"""

import logging
import threading
import time
from typing import Callable, Hashable, Iterable, List, Optional
from urllib.parse import urlparse

import markdown
from bs4 import BeautifulSoup
from markupsafe import Markup

from sitegen.config import PORTFOLIO_CACHE_TTL_SECONDS
from sitegen.services.sanitizer import sanitize_article_html, strip_placeholders

logger = logging.getLogger(__name__)

_MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


def normalize_host(host: str) -> str:
    host = host.strip().lower()
    if host.startswith("www."):
        host = host[4:]
    return host


class HostnameCache:
    """Time-boxed cache of portfolio hostnames.

    ``get_or_refresh(loader, key)`` returns the cached list while it is
    younger than *ttl* seconds and was loaded under the same *key*; otherwise
    it calls *loader* to rebuild it.  A loader failure is logged and yields an
    empty list (cross-domain stripping is best-effort).
    """

    def __init__(self, ttl: float = PORTFOLIO_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._fetched_at: Optional[float] = None
        self._hosts: List[str] = []
        self._key: Hashable = None

    def get_or_refresh(self, loader: Callable[[], Iterable[str]], key: Hashable = None) -> List[str]:
        with self._lock:
            now = self._clock()
            fresh = self._fetched_at is not None and now - self._fetched_at < self.ttl
            if fresh and key == self._key:
                return self._hosts
            try:
                hosts = list(dict.fromkeys(normalize_host(h) for h in loader() if h and h.strip()))
            except Exception as exc:
                logger.warning("Portfolio hostname list unavailable for cross-link policy: %s", exc)
                return []
            self._hosts = hosts
            self._key = key
            self._fetched_at = now
            return hosts

    def invalidate(self) -> None:
        with self._lock:
            self._fetched_at = None
            self._hosts = []
            self._key = None


class MarkdownRenderer:
    """Renders article markdown for one domain.

    *portfolio_loader* returns every hostname in the portfolio; when omitted
    no cross-domain stripping takes place.  *portfolio_key* identifies the
    list the loader returns, so a shared cache never serves another list.
    """

    def __init__(
        self,
        current_domain: Optional[str] = None,
        cache: Optional[HostnameCache] = None,
        portfolio_loader: Optional[Callable[[], Iterable[str]]] = None,
        portfolio_key: Hashable = None,
    ):
        self.current_domain = normalize_host(current_domain) if current_domain else None
        self.cache = cache or HostnameCache()
        self.portfolio_loader = portfolio_loader
        self.portfolio_key = portfolio_key

    def render(self, markdown_text: str) -> Markup:
        cleaned = strip_placeholders(markdown_text or "")
        html = markdown.markdown(cleaned, extensions=_MARKDOWN_EXTENSIONS)
        sanitized = sanitize_article_html(html)
        return self._rewrite_links(str(sanitized))

    # ------------------------------------------------------------------

    def _blocked_hosts(self) -> set:
        if self.portfolio_loader is None:
            return set()
        blocked = set(self.cache.get_or_refresh(self.portfolio_loader, self.portfolio_key))
        if self.current_domain:
            blocked.discard(self.current_domain)
        return blocked

    def _rewrite_links(self, html: str) -> Markup:
        if "<a" not in html:
            return Markup(html)

        blocked = self._blocked_hosts()
        soup = BeautifulSoup(html, "lxml")
        for link in soup.find_all("a", href=True):
            parsed = urlparse(link["href"])
            if parsed.scheme not in ("http", "https") or not parsed.hostname:
                # relative, anchor or mailto link: leave unchanged
                continue
            host = normalize_host(parsed.hostname)
            if host in blocked:
                span = soup.new_tag("span", attrs={"class": "portfolio-link-blocked"})
                span.extend(list(link.contents))
                link.replace_with(span)
                continue
            if host != self.current_domain:
                link["rel"] = "noopener noreferrer"
                link["target"] = "_blank"

        body = soup.body
        if body is None:
            return Markup(html)
        return Markup(body.decode_contents())
