"""Data models for TagWiki."""

from typing import Literal

from pydantic import BaseModel, Field


class Page(BaseModel):
    """Represents a wiki page."""

    slug: str
    body: str


class PageWrite(BaseModel):
    """Request body for writing a page."""

    body: str


class OkResponse(BaseModel):
    status: Literal["ok"] = "ok"


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str


class PageBodyResponse(OkResponse):
    body: str


class PageListResponse(OkResponse):
    pages: list[str] = Field(default_factory=list)


class TagListResponse(OkResponse):
    tags: list[str] = Field(default_factory=list)


class TagPages(BaseModel):
    """Pages whose body matches a tag query."""

    tag: str
    pages: list[str] = Field(default_factory=list)


class TagPagesResponse(OkResponse, TagPages):
    pass


class TagCountsResponse(OkResponse):
    counts: dict[str, int] = Field(default_factory=dict)
