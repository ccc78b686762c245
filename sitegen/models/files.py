from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """One output file of a compilation run, relative to the site root."""

    path: str
    content: str
    is_binary: bool = False
