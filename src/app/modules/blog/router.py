"""
Blog Router (public)

Only published posts whose publication time has arrived are visible here.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.pagination import Pagination, get_pagination
from app.modules.blog import repository, service
from app.modules.blog.helpers import build_sitemap
from app.modules.blog.repository import PostFilters
from app.modules.blog.schemas import (
    CategoryResponse,
    PostDetail,
    PostListResponse,
    PostSearchResponse,
    PostSummary,
    TagResponse,
)
from app.modules.shared import ApiResponse

router = APIRouter()


@router.get("/posts", response_model=ApiResponse[PostListResponse])
async def list_posts(
    category: str | None = Query(default=None, max_length=120, description="Category slug"),
    tag: str | None = Query(default=None, max_length=120, description="Tag slug"),
    q: str | None = Query(default=None, max_length=100),
    pagination: Pagination = Depends(get_pagination),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PostListResponse]:
    filters = PostFilters(category=category, tag=tag, q=q)
    return ApiResponse(data=await service.list_posts(db, filters, pagination))


@router.get("/posts/{slug}", response_model=ApiResponse[PostDetail])
async def get_post(slug: str, db: AsyncSession = Depends(get_db)) -> ApiResponse[PostDetail]:
    """
    Raises:
        404 POST_NOT_FOUND: Unknown slug, or not published
    """
    return ApiResponse(data=await service.get_post_by_slug(db, slug))


@router.get("/categories", response_model=ApiResponse[list[CategoryResponse]])
async def list_categories(db: AsyncSession = Depends(get_db)) -> ApiResponse[list[CategoryResponse]]:
    return ApiResponse(data=await service.list_categories(db))


@router.get("/tags", response_model=ApiResponse[list[TagResponse]])
async def list_tags(db: AsyncSession = Depends(get_db)) -> ApiResponse[list[TagResponse]]:
    """The 20 most used tags."""
    return ApiResponse(data=await service.list_tags(db))


@router.get("/search", response_model=ApiResponse[PostSearchResponse])
async def search_posts(
    q: str = Query(..., min_length=2, max_length=100),
    db: AsyncSession = Depends(get_db),
) -> ApiResponse[PostSearchResponse]:
    posts = await repository.search_published(db, q.strip())
    return ApiResponse(
        data=PostSearchResponse(posts=[PostSummary.from_post(p) for p in posts], query=q.strip())
    )


@router.get("/sitemap.xml", response_class=Response)
async def sitemap(db: AsyncSession = Depends(get_db)) -> Response:
    entries = await repository.sitemap_entries(db)
    return Response(content=build_sitemap(settings.site_url, entries), media_type="application/xml")
