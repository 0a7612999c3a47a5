"""Blog post models."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.models.base import CamelModel, Pagination
from src.models.validators import require_text


class Author(CamelModel):
    name: str
    avatar: str


class BlogPost(CamelModel):
    """A blog post. ``content`` is omitted from list views."""

    id: UUID
    title: str
    slug: str
    content: Optional[str] = None
    excerpt: str
    cover_image: str
    author: Author
    category: str
    tags: list[str] = Field(default_factory=list)
    published: bool = False
    published_at: Optional[datetime] = None
    read_time: int = 5
    views: int = 0
    created_at: datetime
    updated_at: datetime


class BlogPostCreate(CamelModel):
    title: str = Field(..., max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    content: str
    excerpt: str = Field(..., max_length=300)
    cover_image: str
    category: str = Field(..., max_length=100)
    tags: list[str] = Field(default_factory=list)
    published: bool = False
    read_time: int = Field(default=5, ge=1)

    @field_validator("title", "content", "excerpt", "cover_image", "category")
    @classmethod
    def text_required(cls, v: str) -> str:
        return require_text(v)


class BlogPostUpdate(CamelModel):
    title: Optional[str] = Field(default=None, max_length=255)
    slug: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    excerpt: Optional[str] = Field(default=None, max_length=300)
    cover_image: Optional[str] = None
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[list[str]] = None
    published: Optional[bool] = None
    published_at: Optional[datetime] = None
    read_time: Optional[int] = Field(default=None, ge=1)

    @field_validator("title", "content", "excerpt", "cover_image", "category")
    @classmethod
    def text_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return require_text(v)


class BlogListResponse(CamelModel):
    posts: list[BlogPost]
    pagination: Pagination
