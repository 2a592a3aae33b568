import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Post(BaseModel):
    """One front-matter/body unit loaded from a content file."""

    kind: Literal["post"] = "post"
    title: str
    date: Optional[datetime.datetime] = None
    date_source: Optional[Literal["front_matter", "filename"]] = None
    draft: bool = False
    tags: List[str] = Field(default_factory=list)
    slug: str
    body: str = ""
    source_path: str
    index: Optional[int] = None
    reading_time: str = "1 min"
    warnings: List[str] = Field(default_factory=list)


class ParseError(BaseModel):
    kind: Literal["error"] = "error"
    source_path: str
    index: Optional[int] = None
    reason: str


Entry = Union[Post, ParseError]


class LoadResult(BaseModel):
    """Everything one pass over a content directory produced, in file order."""

    entries: List[Entry] = Field(default_factory=list)

    @property
    def posts(self) -> List[Post]:
        return [e for e in self.entries if isinstance(e, Post)]

    @property
    def errors(self) -> List[ParseError]:
        return [e for e in self.entries if isinstance(e, ParseError)]
