"""
Atomsmiths Backend — Blog Route Handlers
==========================================

What:  Resource-style endpoints for blogs under /api/blogs.
       `?author=<member id>` lists one member's blogs instead of the feed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from app.schemas.common import DataResponse, DeleteResult, ErrorResponse
from app.services.blog_service import blog_service

router = APIRouter(prefix="/api/blogs", tags=["Blogs"])


@router.get("", response_model=DataResponse[List[BlogResponse]], summary="List blogs, newest first")
async def list_blogs(
    limit: int = Query(default=50, ge=1, le=1000),
    skip: int = Query(default=0, ge=0),
    author: Optional[str] = Query(default=None, description="Member id of the author"),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[List[BlogResponse]]:
    if author:
        return DataResponse(data=await blog_service.list_blogs_by_author(db, author))
    return DataResponse(data=await blog_service.list_blogs(db, limit=limit, skip=skip))


@router.post(
    "",
    status_code=201,
    response_model=DataResponse[BlogResponse],
    responses={
        400: {"description": "Missing fields", "model": ErrorResponse},
        404: {"description": "Author not found", "model": ErrorResponse},
    },
    summary="Publish a blog",
)
async def add_blog(
    payload: BlogCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[BlogResponse]:
    return DataResponse(data=await blog_service.add_blog(db, payload))


@router.get(
    "/{blog_id}",
    response_model=DataResponse[BlogResponse],
    responses={404: {"description": "Blog not found", "model": ErrorResponse}},
)
async def get_blog(
    blog_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[BlogResponse]:
    return DataResponse(data=await blog_service.get_blog(db, blog_id))


@router.put(
    "/{blog_id}",
    response_model=DataResponse[BlogResponse],
    responses={404: {"description": "Blog not found", "model": ErrorResponse}},
)
async def update_blog(
    blog_id: str,
    payload: BlogUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[BlogResponse]:
    return DataResponse(data=await blog_service.update_blog(db, blog_id, payload))


@router.delete(
    "/{blog_id}",
    response_model=DataResponse[DeleteResult],
    responses={404: {"description": "Blog not found", "model": ErrorResponse}},
)
async def delete_blog(
    blog_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[DeleteResult]:
    return DataResponse(data=await blog_service.delete_blog(db, blog_id))
