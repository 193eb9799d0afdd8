"""
Atomsmiths Backend — Action Dispatch Route
============================================

What:  Single endpoint that maps `?action=<name>` + HTTP method onto the
       member, event, blog and dashboard operations.
How:   ACTIONS is a table of action → {method → (handler, status)}. The route
       looks up the pair, reads the JSON body for writes, runs the handler and
       wraps the result in the {"ok": true, "data": ...} envelope.
Who:   The club website's frontend, which talks to this one URL.

Action Table:
    action      GET                           POST      PUT       DELETE
    members     by id, or list(limit, skip)   register  update    delete
    events      by id, or list(upcoming)      add       update    delete
    blogs       by id, by author, or list     add       update    delete
    dashboard   counters
    activity    recent feed(limit)
    stats       member statistics

    PUT and DELETE require `id`. Unknown actions → 400, unsupported
    methods → 405, OPTIONS → 200 with an empty body.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_db
from app.exceptions import InvalidActionError, MethodNotAllowedError, ValidationError
from app.schemas.blog import BlogCreate, BlogUpdate
from app.schemas.common import ErrorResponse, parse_payload
from app.schemas.event import EventCreate, EventUpdate
from app.schemas.member import MemberCreate, MemberUpdate
from app.services.blog_service import blog_service
from app.services.dashboard_service import dashboard_service
from app.services.event_service import event_service
from app.services.member_service import member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Dispatch"])

DISPATCH_PATH = "/atomsmiths_db_api"

DEFAULT_MEMBER_LIMIT = 100
DEFAULT_BLOG_LIMIT = 50
DEFAULT_ACTIVITY_LIMIT = 10


@dataclass
class ActionContext:
    """Everything an action handler may need from the request."""

    db: AsyncIOMotorDatabase
    item_id: Optional[str]
    limit: Optional[int]
    skip: int
    upcoming: bool
    author: Optional[str]
    body: Any = None

    def require_id(self, resource: str) -> str:
        if not self.item_id:
            raise ValidationError(message=f"{resource} ID required", field="id")
        return self.item_id


ActionHandler = Callable[[ActionContext], Awaitable[Any]]


async def read_json_body(request: Request) -> Any:
    """
    Decode the request body as JSON.

    Empty or undecodable bodies become {}. A JSON string is decoded once more,
    for clients that send JSON.stringify'd payloads as text/plain.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        logger.debug("Undecodable request body (%d bytes) treated as empty", len(raw))
        return {}
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError:
            return {}
    return body


# ── Members ───────────────────────────────────────────────────────────────

async def _get_members(ctx: ActionContext) -> Any:
    if ctx.item_id:
        return await member_service.get_member(ctx.db, ctx.item_id)
    limit = ctx.limit or DEFAULT_MEMBER_LIMIT
    return await member_service.list_members(ctx.db, limit=limit, skip=ctx.skip)


async def _create_member(ctx: ActionContext) -> Any:
    return await member_service.register_member(ctx.db, parse_payload(MemberCreate, ctx.body))


async def _update_member(ctx: ActionContext) -> Any:
    member_id = ctx.require_id("Member")
    return await member_service.update_member(
        ctx.db, member_id, parse_payload(MemberUpdate, ctx.body)
    )


async def _delete_member(ctx: ActionContext) -> Any:
    return await member_service.delete_member(ctx.db, ctx.require_id("Member"))


# ── Events ────────────────────────────────────────────────────────────────

async def _get_events(ctx: ActionContext) -> Any:
    if ctx.item_id:
        return await event_service.get_event(ctx.db, ctx.item_id)
    return await event_service.list_events(ctx.db, upcoming_only=ctx.upcoming)


async def _create_event(ctx: ActionContext) -> Any:
    return await event_service.add_event(ctx.db, parse_payload(EventCreate, ctx.body))


async def _update_event(ctx: ActionContext) -> Any:
    event_id = ctx.require_id("Event")
    return await event_service.update_event(
        ctx.db, event_id, parse_payload(EventUpdate, ctx.body)
    )


async def _delete_event(ctx: ActionContext) -> Any:
    return await event_service.delete_event(ctx.db, ctx.require_id("Event"))


# ── Blogs ─────────────────────────────────────────────────────────────────

async def _get_blogs(ctx: ActionContext) -> Any:
    if ctx.item_id:
        return await blog_service.get_blog(ctx.db, ctx.item_id)
    if ctx.author:
        return await blog_service.list_blogs_by_author(ctx.db, ctx.author)
    limit = ctx.limit or DEFAULT_BLOG_LIMIT
    return await blog_service.list_blogs(ctx.db, limit=limit, skip=ctx.skip)


async def _create_blog(ctx: ActionContext) -> Any:
    return await blog_service.add_blog(ctx.db, parse_payload(BlogCreate, ctx.body))


async def _update_blog(ctx: ActionContext) -> Any:
    blog_id = ctx.require_id("Blog")
    return await blog_service.update_blog(ctx.db, blog_id, parse_payload(BlogUpdate, ctx.body))


async def _delete_blog(ctx: ActionContext) -> Any:
    return await blog_service.delete_blog(ctx.db, ctx.require_id("Blog"))


# ── Dashboard ─────────────────────────────────────────────────────────────

async def _get_dashboard(ctx: ActionContext) -> Any:
    return await dashboard_service.get_dashboard_stats(ctx.db)


async def _get_activity(ctx: ActionContext) -> Any:
    limit = ctx.limit or DEFAULT_ACTIVITY_LIMIT
    return await dashboard_service.get_recent_activity(ctx.db, limit=limit)


async def _get_stats(ctx: ActionContext) -> Any:
    return await dashboard_service.get_member_stats(ctx.db)


# action → method → (handler, success status)
ACTIONS: Dict[str, Dict[str, Tuple[ActionHandler, int]]] = {
    "members": {
        "GET": (_get_members, 200),
        "POST": (_create_member, 201),
        "PUT": (_update_member, 200),
        "DELETE": (_delete_member, 200),
    },
    "events": {
        "GET": (_get_events, 200),
        "POST": (_create_event, 201),
        "PUT": (_update_event, 200),
        "DELETE": (_delete_event, 200),
    },
    "blogs": {
        "GET": (_get_blogs, 200),
        "POST": (_create_blog, 201),
        "PUT": (_update_blog, 200),
        "DELETE": (_delete_blog, 200),
    },
    "dashboard": {"GET": (_get_dashboard, 200)},
    "activity": {"GET": (_get_activity, 200)},
    "stats": {"GET": (_get_stats, 200)},
}

BODY_METHODS = {"POST", "PUT"}


def resolve_action(action: Optional[str], method: str) -> Tuple[ActionHandler, int]:
    """
    Look up the handler for an action/method pair.

    Raises:
        InvalidActionError:    action missing or unknown (→ 400)
        MethodNotAllowedError: action exists but not for this method (→ 405)
    """
    methods = ACTIONS.get(action or "")
    if methods is None:
        raise InvalidActionError(action)
    if method not in methods:
        raise MethodNotAllowedError(method=method, allowed=sorted(methods))
    return methods[method]


@router.api_route(
    DISPATCH_PATH,
    methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    responses={
        200: {"description": "{ok: true, data: ...}"},
        201: {"description": "Created; {ok: true, data: ...}"},
        400: {"description": "Invalid action or input", "model": ErrorResponse},
        404: {"description": "Document not found", "model": ErrorResponse},
        405: {"description": "Method not allowed for action", "model": ErrorResponse},
        409: {"description": "Duplicate email", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Dispatch a CRUD or dashboard action",
)
async def dispatch(
    request: Request,
    action: Optional[str] = Query(default=None, description="members, events, blogs, dashboard, activity, stats"),
    item_id: Optional[str] = Query(default=None, alias="id", description="Document id for single-item operations"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000, description="Page size (members, blogs, activity)"),
    skip: int = Query(default=0, ge=0, description="Offset (members, blogs)"),
    upcoming: Optional[str] = Query(default=None, description="'true' lists only future events"),
    author: Optional[str] = Query(default=None, description="Member id; lists that member's blogs"),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> Response:
    method = request.method.upper()
    if method == "OPTIONS":
        return Response(status_code=200)

    handler, status_code = resolve_action(action, method)
    ctx = ActionContext(
        db=db,
        item_id=item_id.strip() if item_id else None,
        limit=limit,
        skip=skip,
        upcoming=upcoming == "true",
        author=author,
    )
    if method in BODY_METHODS:
        ctx.body = await read_json_body(request)

    result = await handler(ctx)
    return JSONResponse(
        status_code=status_code,
        content={"ok": True, "data": jsonable_encoder(result)},
    )
