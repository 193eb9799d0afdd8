"""
Atomsmiths Backend — Dashboard Route Handlers
===============================================

What:  Read-only aggregate endpoints:
           GET /api/dashboard            counters
           GET /api/dashboard/activity   recent activity feed (limit)
           GET /api/dashboard/stats      members by department and year
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.schemas.common import DataResponse
from app.schemas.dashboard import ActivityItem, DashboardStats, MemberStats
from app.services.dashboard_service import dashboard_service

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("", response_model=DataResponse[DashboardStats])
async def get_dashboard_stats(
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[DashboardStats]:
    return DataResponse(data=await dashboard_service.get_dashboard_stats(db))


@router.get("/activity", response_model=DataResponse[List[ActivityItem]])
async def get_recent_activity(
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[List[ActivityItem]]:
    return DataResponse(data=await dashboard_service.get_recent_activity(db, limit=limit))


@router.get("/stats", response_model=DataResponse[MemberStats])
async def get_member_stats(
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[MemberStats]:
    return DataResponse(data=await dashboard_service.get_member_stats(db))
