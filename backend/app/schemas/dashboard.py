"""
Atomsmiths Backend — Dashboard Schemas
========================================

What:  Aggregate shapes returned by the dashboard endpoints.
Who:   Built by DashboardService; nothing here is stored.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class DashboardStats(CamelModel):
    """Headline counters for the admin dashboard."""

    total_members: int
    upcoming_events: int
    past_events: int
    total_blogs: int
    new_members_today: int
    new_blogs_today: int


class ActivityItem(CamelModel):
    """One entry of the recent activity feed."""

    activity_type: str = Field(description="member_joined, blog_published or event_created")
    description: str
    activity_date: Optional[datetime] = None


class DepartmentStat(CamelModel):
    department: Any = None
    member_count: int
    percentage: float = Field(description="Share of all members, rounded to 2 decimals")


class YearStat(CamelModel):
    year: Any = None
    member_count: int


class MemberStats(CamelModel):
    department_stats: List[DepartmentStat]
    year_stats: List[YearStat]
