"""
Atomsmiths Backend — Event Route Handlers
===========================================

What:  Resource-style endpoints for events under /api/events.
       `?upcoming=true` restricts the listing to events that have not started.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.schemas.common import DataResponse, DeleteResult, ErrorResponse
from app.schemas.event import EventCreate, EventResponse, EventUpdate
from app.services.event_service import event_service

router = APIRouter(prefix="/api/events", tags=["Events"])


@router.get("", response_model=DataResponse[List[EventResponse]], summary="List events, soonest first")
async def list_events(
    upcoming: bool = Query(default=False, description="Only events after now"),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[List[EventResponse]]:
    return DataResponse(data=await event_service.list_events(db, upcoming_only=upcoming))


@router.post(
    "",
    status_code=201,
    response_model=DataResponse[EventResponse],
    responses={400: {"description": "Missing fields or past date", "model": ErrorResponse}},
    summary="Schedule an event",
)
async def add_event(
    payload: EventCreate,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[EventResponse]:
    return DataResponse(data=await event_service.add_event(db, payload))


@router.get(
    "/{event_id}",
    response_model=DataResponse[EventResponse],
    responses={404: {"description": "Event not found", "model": ErrorResponse}},
)
async def get_event(
    event_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[EventResponse]:
    return DataResponse(data=await event_service.get_event(db, event_id))


@router.put(
    "/{event_id}",
    response_model=DataResponse[EventResponse],
    responses={404: {"description": "Event not found", "model": ErrorResponse}},
)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[EventResponse]:
    return DataResponse(data=await event_service.update_event(db, event_id, payload))


@router.delete(
    "/{event_id}",
    response_model=DataResponse[DeleteResult],
    responses={404: {"description": "Event not found", "model": ErrorResponse}},
)
async def delete_event(
    event_id: str,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> DataResponse[DeleteResult]:
    return DataResponse(data=await event_service.delete_event(db, event_id))
