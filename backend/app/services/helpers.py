"""
Atomsmiths Backend — Service Helpers
======================================

What:  Small building blocks shared by every service: id parsing, string
       cleanup, UTC clock, and driver-error translation.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo.errors import PyMongoError

from app.exceptions import DatabaseError, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_object_id(value: Any, resource: str) -> ObjectId:
    """
    Parse a client-supplied id into an ObjectId.

    Raises:
        ValidationError: The value is not a 24-character hex ObjectId (→ 400)
    """
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value).strip())
    except (InvalidId, TypeError):
        raise ValidationError(
            message=f"Invalid {resource} ID",
            field="id",
            context={"value": str(value)},
        )


def clean_str(value: Any) -> Optional[str]:
    """Trim a string; blank or missing values become None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@asynccontextmanager
async def translate_db_errors(operation: str) -> AsyncIterator[None]:
    """
    Wrap driver errors raised inside the block in DatabaseError.

    Application exceptions (ValidationError, NotFoundError, ...) pass through
    unchanged; only PyMongoError is translated, with details kept in the log.

    Example:
        async with translate_db_errors("list members"):
            docs = await db[MEMBERS].find({}).to_list(length=None)
    """
    try:
        yield
    except PyMongoError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            message=f"Could not {operation}. Please try again.",
            context={"operation": operation, "error_type": type(e).__name__},
        )


def validate_documents(
    model: Type[M], docs: Iterable[Dict[str, Any]], collection: str
) -> List[M]:
    """
    Build response models from stored documents, skipping any that do not fit.

    Records written before input validation existed may have unexpected
    shapes; one such record must not fail a whole listing.
    """
    valid: List[M] = []
    for doc in docs:
        try:
            valid.append(model.model_validate(doc))
        except PydanticValidationError as e:
            first = e.errors()[0]
            logger.warning(
                "Skipping malformed %s document %s: %s (%s)",
                collection,
                doc.get("_id"),
                first.get("msg"),
                ".".join(str(part) for part in first.get("loc", ())),
            )
    return valid
