"""
Atomsmiths Backend — Member Route Handlers
============================================

What:  Resource-style endpoints for members:
           GET    /api/members                 list (limit, skip)
           POST   /api/members                 register
           GET    /api/members/{id}            detail
           PUT    /api/members/{id}            partial update
           DELETE /api/members/{id}            delete (and the member's blogs)
           GET    /api/members/{id}/blogs      blogs written by the member
How:   Thin wrappers over MemberService/BlogService, same envelope as the
       dispatch route.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.schemas.blog import BlogResponse
from app.schemas.common import DataResponse, ErrorResponse, MemberDeleteResult
from app.schemas.member import MemberCreate, MemberResponse, MemberUpdate
from app.services.blog_service import blog_service
from app.services.member_service import member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/members", tags=["Members"])


@router.get(
    "",
    response_model=DataResponse[List[MemberResponse]],
    summary="List members, newest first",
)
async def list_members(
    limit: int = Query(default=100, ge=1, le=1000),
    skip: int = Query(default=0, ge=0),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[List[MemberResponse]]:
    members = await member_service.list_members(db, limit=limit, skip=skip)
    return DataResponse(data=members)


@router.post(
    "",
    status_code=201,
    response_model=DataResponse[MemberResponse],
    responses={
        400: {"description": "Missing name/email or invalid email", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a new member",
)
async def register_member(
    payload: MemberCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[MemberResponse]:
    member = await member_service.register_member(db, payload)
    return DataResponse(data=member)


@router.get(
    "/{member_id}",
    response_model=DataResponse[MemberResponse],
    responses={404: {"description": "Member not found", "model": ErrorResponse}},
)
async def get_member(
    member_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[MemberResponse]:
    return DataResponse(data=await member_service.get_member(db, member_id))


@router.put(
    "/{member_id}",
    response_model=DataResponse[MemberResponse],
    responses={
        404: {"description": "Member not found", "model": ErrorResponse},
        409: {"description": "Email taken by another member", "model": ErrorResponse},
    },
)
async def update_member(
    member_id: str,
    payload: MemberUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[MemberResponse]:
    return DataResponse(data=await member_service.update_member(db, member_id, payload))


@router.delete(
    "/{member_id}",
    response_model=DataResponse[MemberDeleteResult],
    responses={404: {"description": "Member not found", "model": ErrorResponse}},
)
async def delete_member(
    member_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[MemberDeleteResult]:
    return DataResponse(data=await member_service.delete_member(db, member_id))


@router.get(
    "/{member_id}/blogs",
    response_model=DataResponse[List[BlogResponse]],
    summary="Blogs written by a member, newest first",
)
async def list_member_blogs(
    member_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[List[BlogResponse]]:
    return DataResponse(data=await blog_service.list_blogs_by_author(db, member_id))
