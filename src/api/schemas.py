"""Response Pydantic models."""

from typing import Literal

from pydantic import BaseModel


class IconCandidateOut(BaseModel):
    href: str
    sizes: str


class IconListResponse(BaseModel):
    domain: str
    source_url: str
    host: str
    status_code: int
    status_text: str
    outcome: Literal["found", "empty", "failed"]
    icons: list[IconCandidateOut] = []
    favicon_url: str
