"""
Atomsmiths Backend — Join Route
=================================

What:  POST /api/join, the public "join the club" form target.
How:   Same validation and duplicate check as member registration; answers
       with {"success": true, "id": "<member id>"} for the landing page.
"""

import logging

from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.exceptions import MethodNotAllowedError
from app.routes.dispatch import read_json_body
from app.schemas.common import ErrorResponse, JoinResponse, parse_payload
from app.schemas.member import MemberCreate
from app.services.member_service import member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Join"])


@router.api_route(
    "/join",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_model=JoinResponse,
    responses={
        400: {"description": "Missing name/email or invalid email", "model": ErrorResponse},
        405: {"description": "Only POST allowed", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Join the club",
)
async def join(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> JoinResponse:
    if request.method != "POST":
        raise MethodNotAllowedError(
            method=request.method,
            message="Only POST allowed",
            allowed=["POST"],
        )

    payload = parse_payload(MemberCreate, await read_json_body(request))
    member = await member_service.register_member(db, payload)
    logger.info("New member joined via form: %s", member.id)
    return JoinResponse(id=member.id)
