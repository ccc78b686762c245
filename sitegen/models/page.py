from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BlockEnvelope(BaseModel):
    """One typed unit of a block-based page.

    ``content`` and ``config`` are block-specific payloads kept as stored
    (camelCase keys); each renderer reads what it needs and falls back to
    neutral output when a key is missing or mistyped.
    """

    id: str
    type: str
    variant: Optional[str] = None
    content: Dict[str, Any] = {}
    config: Dict[str, Any] = {}


class PageDefinition(BaseModel):
    id: str
    route: str = Field("/", description="Site-relative route, ``/`` for the home page")
    title: Optional[str] = None
    meta_description: Optional[str] = None
    theme: Optional[str] = None
    skin: Optional[str] = None
    blocks: List[BlockEnvelope] = []
    is_published: bool = False
    updated_at: Optional[datetime] = None
