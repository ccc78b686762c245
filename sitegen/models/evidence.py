from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ArticleDataset(BaseModel):
    """A reusable evidence source as linked to one article."""

    id: str
    name: str
    source_url: Optional[str] = None
    source_title: Optional[str] = None
    publisher: Optional[str] = None
    retrieved_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    usage: Optional[str] = None


class Citation(BaseModel):
    position: int = 0
    source_url: str
    source_title: Optional[str] = None
    retrieved_at: Optional[datetime] = None
    claim_text: Optional[str] = None
