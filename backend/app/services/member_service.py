"""
Atomsmiths Backend — Member Service
=====================================

What:  Registration, lookup, update and deletion of club members.
How:   Validates input best-effort, then runs one or two queries against the
       `members` collection (and `blogs` for the delete cascade).
Who:   Called by the dispatch route, the REST member routes and /api/join.

Rules:
    - name and email are required on registration
    - email must look like an address and is stored trimmed + lowercased
    - email is unique; a unique index backs the handler-side check
    - deleting a member deletes the blogs they authored
"""

import logging
import re
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.collections import BLOGS, MEMBERS
from app.schemas.common import MemberDeleteResult
from app.schemas.member import MemberCreate, MemberResponse, MemberUpdate, Year
from app.services.helpers import (
    clean_str,
    to_object_id,
    translate_db_errors,
    utcnow,
    validate_documents,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def normalize_email(email: str) -> str:
    """Validate and normalize an email address (trim + lowercase)."""
    normalized = email.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError(message="Invalid email format", field="email")
    return normalized


def clean_year(year: Optional[Year]) -> Optional[Year]:
    """Numbers are kept as-is (0 counts as unset); strings are trimmed."""
    if isinstance(year, str):
        return clean_str(year)
    return year or None


class MemberService:
    """Business logic layer for member operations."""

    async def register_member(
        self, db: AsyncIOMotorDatabase, data: MemberCreate
    ) -> MemberResponse:
        """
        Register a new member.

        Raises:
            ValidationError: name/email missing or email malformed (→ 400)
            ConflictError:   email already registered (→ 409)
            DatabaseError:   driver failure (→ 500)
        """
        name = clean_str(data.name)
        if not name or not clean_str(data.email):
            raise ValidationError(message="Name and email are required")
        email = normalize_email(data.email)

        async with translate_db_errors("register member"):
            if await db[MEMBERS].find_one({"email": email}) is not None:
                raise ConflictError(
                    message="Email already registered",
                    context={"email": email},
                )

            now = utcnow()
            member: Dict[str, Any] = {
                "name": name,
                "email": email,
                "department": clean_str(data.department),
                "year": clean_year(data.year),
                "interests": clean_str(data.interests),
                "joinedAt": now,
                "createdAt": now,
                "updatedAt": now,
            }
            try:
                result = await db[MEMBERS].insert_one(member)
            except DuplicateKeyError:
                # Another request registered the same email between the check and insert
                raise ConflictError(
                    message="Email already registered",
                    context={"email": email},
                )

        member["_id"] = result.inserted_id
        logger.info("Member registered: %s", result.inserted_id)
        return MemberResponse.model_validate(member)

    async def list_members(
        self, db: AsyncIOMotorDatabase, limit: int = 100, skip: int = 0
    ) -> List[MemberResponse]:
        """Members newest first, offset/limit paginated."""
        async with translate_db_errors("retrieve members"):
            cursor = (
                db[MEMBERS]
                .find({})
                .sort("joinedAt", DESCENDING)
                .skip(skip)
                .limit(limit)
            )
            docs = await cursor.to_list(length=None)
        return validate_documents(MemberResponse, docs, MEMBERS)

    async def get_member(self, db: AsyncIOMotorDatabase, member_id: str) -> MemberResponse:
        oid = to_object_id(member_id, "member")
        async with translate_db_errors("retrieve the member"):
            doc = await db[MEMBERS].find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(resource="member", resource_id=member_id)
        return MemberResponse.model_validate(doc)

    async def update_member(
        self, db: AsyncIOMotorDatabase, member_id: str, data: MemberUpdate
    ) -> MemberResponse:
        """
        Apply a partial update.

        Only fields with a non-empty value are written; updatedAt is always
        refreshed. A changed email must not belong to another member.
        """
        oid = to_object_id(member_id, "member")
        fields: Dict[str, Any] = {}

        name = clean_str(data.name)
        if name:
            fields["name"] = name
        if clean_str(data.email):
            fields["email"] = normalize_email(data.email)
        department = clean_str(data.department)
        if department:
            fields["department"] = department
        year = clean_year(data.year)
        if year is not None:
            fields["year"] = year
        interests = clean_str(data.interests)
        if interests:
            fields["interests"] = interests
        fields["updatedAt"] = utcnow()

        async with translate_db_errors("update the member"):
            if "email" in fields:
                taken = await db[MEMBERS].find_one(
                    {"email": fields["email"], "_id": {"$ne": oid}}
                )
                if taken is not None:
                    raise ConflictError(
                        message="Email already taken by another member",
                        context={"email": fields["email"]},
                    )
            try:
                doc = await db[MEMBERS].find_one_and_update(
                    {"_id": oid},
                    {"$set": fields},
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                raise ConflictError(message="Email already taken by another member")

        if doc is None:
            raise NotFoundError(resource="member", resource_id=member_id)
        logger.info("Member updated: %s (%s)", member_id, ", ".join(sorted(fields)))
        return MemberResponse.model_validate(doc)

    async def delete_member(
        self, db: AsyncIOMotorDatabase, member_id: str
    ) -> MemberDeleteResult:
        """Delete a member and every blog they authored."""
        oid = to_object_id(member_id, "member")
        async with translate_db_errors("delete the member"):
            result = await db[MEMBERS].delete_one({"_id": oid})
            if result.deleted_count == 0:
                raise NotFoundError(resource="member", resource_id=member_id)
            # Blogs reference their author by the string form of the id
            blogs = await db[BLOGS].delete_many({"authorId": str(oid)})

        logger.info("Member deleted: %s (%d blogs removed)", member_id, blogs.deleted_count)
        return MemberDeleteResult(
            message="Member deleted successfully",
            deleted_blogs=blogs.deleted_count,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
member_service = MemberService()
