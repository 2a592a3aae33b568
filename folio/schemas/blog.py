from typing import List, Optional

from pydantic import BaseModel, Field


class PostSummary(BaseModel):
    slug: str
    title: str
    publishedAt: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    readingTime: Optional[str] = None
    draft: bool = False
    sourcePath: str


class PostDetail(PostSummary):
    content: str


class TagCount(BaseModel):
    tag: str
    count: int
