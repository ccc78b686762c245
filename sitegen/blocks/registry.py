"""Block renderer registry.

Renderers are plain callables ``(block, ctx) -> Markup`` stored by block
type.  Nothing registers itself on import: :func:`register_block_renderers`
installs the basic and interactive sets explicitly and may be called any
number of times.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from markupsafe import Markup

from sitegen.models.page import BlockEnvelope
from sitegen.services.markdown_renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


class BlockContext(NamedTuple):
    """Page-level data every block renderer may read."""

    domain: str
    site_title: str
    route: str = "/"
    theme: str = "clean"
    skin: str = "slate"
    page_title: Optional[str] = None
    page_description: Optional[str] = None
    published_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    head_scripts: Markup = Markup("")
    body_scripts: Markup = Markup("")
    markdown: Optional[MarkdownRenderer] = None

    def render_markdown(self, text: Optional[str]) -> Markup:
        renderer = self.markdown or MarkdownRenderer(current_domain=self.domain)
        return renderer.render(text or "")


BlockRenderer = Callable[[BlockEnvelope, BlockContext], Markup]

_renderers: Dict[str, BlockRenderer] = {}


def register_block_renderer(block_type: str, renderer: BlockRenderer) -> None:
    _renderers[block_type] = renderer


def registered_block_types() -> List[str]:
    return sorted(_renderers)


def register_block_renderers() -> None:
    """Install every built-in block renderer."""
    from sitegen.blocks import basic, interactive

    for renderers in (basic.RENDERERS, interactive.RENDERERS):
        for block_type, renderer in renderers.items():
            register_block_renderer(block_type, renderer)


def render_block(block: BlockEnvelope, ctx: BlockContext) -> Markup:
    """Render one block; never raises.

    An unregistered type yields ``<!-- unknown block: TYPE -->`` and a
    renderer failure yields ``<!-- render error: TYPE -->``, both logged.
    """
    renderer = _renderers.get(block.type)
    if renderer is None:
        logger.warning("No renderer registered for block type %r (block %s)", block.type, block.id)
        return Markup("<!-- unknown block: {} -->").format(_comment_safe(block.type))
    try:
        return Markup(renderer(block, ctx))
    except Exception as exc:
        logger.warning("Error rendering block %s (%s) – %s", block.id, block.type, exc)
        return Markup("<!-- render error: {} -->").format(_comment_safe(block.type))


def _comment_safe(value: str) -> str:
    return value.replace("--", "")


# ── Content accessors ───────────────────────────────────────────────────────
# Block payloads are stored as loose JSON; these read one key and fall back
# to a neutral value when it is missing or of the wrong type.

def text(data: Dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return str(value)
    return value if isinstance(value, str) and value else default


def items(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key)
    return value if isinstance(value, list) else []


def records(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    return [entry for entry in items(data, key) if isinstance(entry, dict)]


def mapping(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def number(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def flag(data: Dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else default
