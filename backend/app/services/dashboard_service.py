"""
Atomsmiths Backend — Dashboard Service
========================================

What:  Read-only aggregates over all three collections for the admin dashboard.
How:   Independent counts run concurrently with asyncio.gather on the shared
       client; member statistics use aggregation pipelines.

Aggregates:
    get_dashboard_stats()   six counters (members, events, blogs, today's activity)
    get_recent_activity()   merged feed of the latest joins, blogs and events
    get_member_stats()      member distribution by department and by year

"Today" starts at midnight UTC.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from app.models.collections import BLOGS, EVENTS, MEMBERS
from app.schemas.dashboard import (
    ActivityItem,
    DashboardStats,
    DepartmentStat,
    MemberStats,
    YearStat,
)
from app.services.helpers import as_utc, translate_db_errors, utcnow

logger = logging.getLogger(__name__)

# Documents pulled from each collection for the activity feed
ACTIVITY_SOURCE_SIZE = 5

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _when(value: Any) -> Optional[datetime]:
    # Legacy records may hold strings or nothing at all here
    return as_utc(value) if isinstance(value, datetime) else None


class DashboardService:
    """Aggregate queries backing the dashboard endpoints."""

    async def get_dashboard_stats(self, db: AsyncIOMotorDatabase) -> DashboardStats:
        now = utcnow()
        today = start_of_day(now)

        async with translate_db_errors("compute dashboard statistics"):
            (
                total_members,
                upcoming_events,
                past_events,
                total_blogs,
                new_members_today,
                new_blogs_today,
            ) = await asyncio.gather(
                db[MEMBERS].count_documents({}),
                db[EVENTS].count_documents({"eventDate": {"$gt": now}}),
                db[EVENTS].count_documents({"eventDate": {"$lte": now}}),
                db[BLOGS].count_documents({}),
                db[MEMBERS].count_documents({"joinedAt": {"$gte": today}}),
                db[BLOGS].count_documents({"createdAt": {"$gte": today}}),
            )

        return DashboardStats(
            total_members=total_members,
            upcoming_events=upcoming_events,
            past_events=past_events,
            total_blogs=total_blogs,
            new_members_today=new_members_today,
            new_blogs_today=new_blogs_today,
        )

    async def get_recent_activity(
        self, db: AsyncIOMotorDatabase, limit: int = 10
    ) -> List[ActivityItem]:
        """
        Latest member joins, blog posts and event creations, newest first.

        At most ACTIVITY_SOURCE_SIZE documents are read from each collection,
        so the feed never holds more than 3 * ACTIVITY_SOURCE_SIZE entries.
        """
        async with translate_db_errors("retrieve recent activity"):
            members, blogs, events = await asyncio.gather(
                self._latest(db, MEMBERS, "joinedAt"),
                self._latest(db, BLOGS, "createdAt"),
                self._latest(db, EVENTS, "createdAt"),
            )

        activities = (
            [
                ActivityItem(
                    activity_type="member_joined",
                    description=f"{m.get('name')} joined the club",
                    activity_date=_when(m.get("joinedAt")),
                )
                for m in members
            ]
            + [
                ActivityItem(
                    activity_type="blog_published",
                    description=f"New blog: {b.get('title')}",
                    activity_date=_when(b.get("createdAt")),
                )
                for b in blogs
            ]
            + [
                ActivityItem(
                    activity_type="event_created",
                    description=f"Event scheduled: {e.get('title')}",
                    activity_date=_when(e.get("createdAt")),
                )
                for e in events
            ]
        )
        activities.sort(key=lambda a: a.activity_date or _EPOCH, reverse=True)
        return activities[:limit]

    async def get_member_stats(self, db: AsyncIOMotorDatabase) -> MemberStats:
        """Member counts per department (with percentage) and per year."""
        department_pipeline: List[Dict[str, Any]] = [
            {"$group": {"_id": "$department", "memberCount": {"$sum": 1}}},
            {"$project": {"department": "$_id", "memberCount": 1, "_id": 0}},
            {"$sort": {"memberCount": -1}},
        ]
        year_pipeline: List[Dict[str, Any]] = [
            {"$group": {"_id": "$year", "memberCount": {"$sum": 1}}},
            {"$project": {"year": "$_id", "memberCount": 1, "_id": 0}},
        ]

        async with translate_db_errors("compute member statistics"):
            department_rows, year_rows, total = await asyncio.gather(
                db[MEMBERS].aggregate(department_pipeline).to_list(length=None),
                db[MEMBERS].aggregate(year_pipeline).to_list(length=None),
                db[MEMBERS].count_documents({}),
            )

        department_stats = [
            DepartmentStat(
                department=row.get("department"),
                member_count=row["memberCount"],
                percentage=round(row["memberCount"] * 100 / total, 2) if total else 0.0,
            )
            for row in department_rows
        ]
        year_stats = [
            YearStat(year=row.get("year"), member_count=row["memberCount"])
            for row in year_rows
        ]
        return MemberStats(department_stats=department_stats, year_stats=year_stats)

    @staticmethod
    async def _latest(
        db: AsyncIOMotorDatabase, collection: str, date_field: str
    ) -> List[Dict[str, Any]]:
        return await (
            db[collection]
            .find({})
            .sort(date_field, DESCENDING)
            .limit(ACTIVITY_SOURCE_SIZE)
            .to_list(length=None)
        )


dashboard_service = DashboardService()
