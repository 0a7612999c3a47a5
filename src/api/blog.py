"""Blog API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import require_admin
from src.models.base import MAX_PAGE, MessageResponse, Pagination
from src.models.blog import Author, BlogListResponse, BlogPost, BlogPostCreate, BlogPostUpdate
from src.models.user import User
from src.services.blog_service import BlogService
from src.services.exceptions import NotFound

router = APIRouter(prefix="/blog", tags=["Blog"])

POST_NOT_FOUND = "Post not found"
DEFAULT_AVATAR = "https://via.placeholder.com/100"


@router.get("")
async def list_posts(
    category: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=10, ge=1, le=100),
) -> BlogListResponse:
    """Published posts, newest first, without their content."""
    posts, total = await BlogService().list_posts(
        published_only=True, category=category, page=page, limit=limit
    )
    return BlogListResponse(posts=posts, pagination=Pagination.build(page, limit, total))


@router.get("/categories")
async def list_categories() -> list[str]:
    return await BlogService().categories()


@router.get("/slug/{slug}")
async def get_post_by_slug(slug: str) -> BlogPost:
    """Fetch a published post. Each call counts as a view."""
    post = await BlogService().view_by_slug(slug)
    if post is None:
        raise NotFound(POST_NOT_FOUND)
    return post


@router.get("/admin/all")
async def list_all_posts(
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    limit: int = Query(default=10, ge=1, le=100),
    _: User = Depends(require_admin),
) -> BlogListResponse:
    posts, total = await BlogService().list_posts(published_only=False, page=page, limit=limit)
    return BlogListResponse(posts=posts, pagination=Pagination.build(page, limit, total))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    request: BlogPostCreate,
    current_user: User = Depends(require_admin),
) -> BlogPost:
    author = Author(
        name=current_user.name or "Admin",
        avatar=current_user.avatar or DEFAULT_AVATAR,
    )
    return await BlogService().create_post(request, author)


@router.put("/{post_id}")
async def update_post(
    post_id: UUID,
    request: BlogPostUpdate,
    _: User = Depends(require_admin),
) -> BlogPost:
    post = await BlogService().update_post(post_id, request)
    if post is None:
        raise NotFound(POST_NOT_FOUND)
    return post


@router.delete("/{post_id}")
async def delete_post(
    post_id: UUID,
    _: User = Depends(require_admin),
) -> MessageResponse:
    if not await BlogService().delete_post(post_id):
        raise NotFound(POST_NOT_FOUND)
    return MessageResponse(message="Post deleted successfully")
