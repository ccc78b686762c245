from typing import List, Literal

from pydantic import BaseModel

from sitegen.models.files import GeneratedFile


class CompileResponse(BaseModel):
    domain: str
    mode: Literal["v1", "v2"]
    file_count: int
    files: List[GeneratedFile]


class SiteTitleResponse(BaseModel):
    hostname: str
    title: str
