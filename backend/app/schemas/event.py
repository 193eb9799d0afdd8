"""
Atomsmiths Backend — Event Schemas
====================================

What:  Request and response models for club events.

eventDate accepts an ISO-8601 string ("2026-11-01T18:00:00Z") or an epoch
number; Pydantic treats large numbers as milliseconds, matching what browser
clients send from Date.getTime(). Values without an offset are read as UTC
by EventService.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from app.schemas.common import CamelModel, DocumentModel


class EventCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None


class EventUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None


class EventResponse(DocumentModel):
    """A stored event."""

    title: Optional[str] = None
    description: Any = None
    event_date: Optional[datetime] = Field(
        default=None, description="When the event takes place (UTC)"
    )
    location: Any = None
