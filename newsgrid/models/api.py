from typing import Literal

from pydantic import BaseModel, Field

from newsgrid.models.domain import Article, CamelModel


class NewsResponse(CamelModel):
    """Uniform envelope returned for every news query"""
    status: Literal["ok", "error"] = "ok"
    total_results: int = Field(default=0, ge=0)
    articles: list[Article] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "NewsResponse":
        return cls(status="ok", total_results=0, articles=[])


class CategoryInfo(BaseModel):
    """Response model for /categories entries"""
    slug: str
    name: str
