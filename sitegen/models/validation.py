from typing import List, Literal, Optional

from pydantic import BaseModel

from sitegen.models.page import PageDefinition

Severity = Literal["error", "warning"]


class ValidationIssue(BaseModel):
    severity: Severity
    code: str
    route: str
    block_id: Optional[str] = None
    message: str


class ValidationReport(BaseModel):
    ready: bool
    error_count: int
    warning_count: int
    issues: List[ValidationIssue]


class ValidateRequest(BaseModel):
    domain: str
    niche: Optional[str] = None
    pages: List[PageDefinition] = []
