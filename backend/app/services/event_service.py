"""
Atomsmiths Backend — Event Service
====================================

What:  Scheduling, listing, updating and cancelling club events.
Who:   Called by the dispatch route and the REST event routes.

Rules:
    - title and eventDate are required on creation
    - a new event must be strictly in the future; updates may move it anywhere
    - listings are ordered by eventDate, soonest first
"""

import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, ReturnDocument

from app.exceptions import NotFoundError, ValidationError
from app.models.collections import EVENTS
from app.schemas.common import DeleteResult
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.services.helpers import (
    as_utc,
    clean_str,
    to_object_id,
    translate_db_errors,
    utcnow,
    validate_documents,
)

logger = logging.getLogger(__name__)


class EventService:
    """Business logic layer for event operations."""

    async def add_event(self, db: AsyncIOMotorDatabase, data: EventCreate) -> EventResponse:
        """
        Create an event.

        Raises:
            ValidationError: title/eventDate missing, or eventDate not in the future
        """
        title = clean_str(data.title)
        if not title or data.event_date is None:
            raise ValidationError(message="Title and event date are required")

        now = utcnow()
        event_date = as_utc(data.event_date)
        if event_date <= now:
            raise ValidationError(
                message="Event date must be in the future",
                field="eventDate",
                context={"eventDate": event_date.isoformat()},
            )

        event: Dict[str, Any] = {
            "title": title,
            "description": clean_str(data.description),
            "eventDate": event_date,
            "location": clean_str(data.location),
            "createdAt": now,
            "updatedAt": now,
        }
        async with translate_db_errors("create the event"):
            result = await db[EVENTS].insert_one(event)

        event["_id"] = result.inserted_id
        logger.info("Event created: %s on %s", result.inserted_id, event_date.isoformat())
        return EventResponse.model_validate(event)

    async def list_events(
        self, db: AsyncIOMotorDatabase, upcoming_only: bool = False
    ) -> List[EventResponse]:
        query: Dict[str, Any] = {"eventDate": {"$gt": utcnow()}} if upcoming_only else {}
        async with translate_db_errors("retrieve events"):
            docs = await db[EVENTS].find(query).sort("eventDate", ASCENDING).to_list(length=None)
        return validate_documents(EventResponse, docs, EVENTS)

    async def get_event(self, db: AsyncIOMotorDatabase, event_id: str) -> EventResponse:
        oid = to_object_id(event_id, "event")
        async with translate_db_errors("retrieve the event"):
            doc = await db[EVENTS].find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(resource="event", resource_id=event_id)
        return EventResponse.model_validate(doc)

    async def update_event(
        self, db: AsyncIOMotorDatabase, event_id: str, data: EventUpdate
    ) -> EventResponse:
        """Partial update; empty values leave a field unchanged."""
        oid = to_object_id(event_id, "event")
        fields: Dict[str, Any] = {}
        for key, value in (
            ("title", data.title),
            ("description", data.description),
            ("location", data.location),
        ):
            cleaned = clean_str(value)
            if cleaned:
                fields[key] = cleaned
        if data.event_date is not None:
            fields["eventDate"] = as_utc(data.event_date)
        fields["updatedAt"] = utcnow()

        async with translate_db_errors("update the event"):
            doc = await db[EVENTS].find_one_and_update(
                {"_id": oid},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotFoundError(resource="event", resource_id=event_id)
        logger.info("Event updated: %s (%s)", event_id, ", ".join(sorted(fields)))
        return EventResponse.model_validate(doc)

    async def delete_event(self, db: AsyncIOMotorDatabase, event_id: str) -> DeleteResult:
        oid = to_object_id(event_id, "event")
        async with translate_db_errors("delete the event"):
            result = await db[EVENTS].delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(resource="event", resource_id=event_id)
        logger.info("Event deleted: %s", event_id)
        return DeleteResult(message="Event deleted successfully")


event_service = EventService()
