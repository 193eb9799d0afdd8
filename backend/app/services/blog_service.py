"""
Atomsmiths Backend — Blog Service
===================================

What:  Publishing, listing, editing and removing member blogs.
Who:   Called by the dispatch route and the REST blog routes.

Author snapshot:
    On creation the author's name, email and department are copied into the
    blog. Later edits to the member are not propagated; deleting the member
    deletes the blog (see MemberService.delete_member).
"""

import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from app.exceptions import NotFoundError, ValidationError
from app.models.collections import BLOGS, MEMBERS
from app.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from app.schemas.common import DeleteResult
from app.services.helpers import (
    clean_str,
    to_object_id,
    translate_db_errors,
    utcnow,
    validate_documents,
)

logger = logging.getLogger(__name__)


class BlogService:
    """Business logic layer for blog operations."""

    async def add_blog(self, db: AsyncIOMotorDatabase, data: BlogCreate) -> BlogResponse:
        """
        Publish a blog on behalf of an existing member.

        Raises:
            ValidationError: title, content or authorId missing; malformed authorId
            NotFoundError:   no member with that id (→ 404)
        """
        title = clean_str(data.title)
        content = clean_str(data.content)
        author_id = clean_str(data.author_id)
        if not title or not content or not author_id:
            raise ValidationError(message="Title, content, and author ID are required")

        author_oid = to_object_id(author_id, "author")
        async with translate_db_errors("create the blog"):
            author = await db[MEMBERS].find_one({"_id": author_oid})
            if author is None:
                raise NotFoundError(resource="author", resource_id=author_id)

            now = utcnow()
            blog: Dict[str, Any] = {
                "title": title,
                "content": content,
                "authorId": str(author_oid),
                "authorName": author.get("name"),
                "authorEmail": author.get("email"),
                "authorDepartment": author.get("department"),
                "createdAt": now,
                "updatedAt": now,
            }
            result = await db[BLOGS].insert_one(blog)

        blog["_id"] = result.inserted_id
        logger.info("Blog published: %s by %s", result.inserted_id, author_id)
        return BlogResponse.model_validate(blog)

    async def list_blogs(
        self, db: AsyncIOMotorDatabase, limit: int = 50, skip: int = 0
    ) -> List[BlogResponse]:
        """Blogs newest first, offset/limit paginated."""
        async with translate_db_errors("retrieve blogs"):
            cursor = (
                db[BLOGS]
                .find({})
                .sort("createdAt", DESCENDING)
                .skip(skip)
                .limit(limit)
            )
            docs = await cursor.to_list(length=None)
        return validate_documents(BlogResponse, docs, BLOGS)

    async def get_blog(self, db: AsyncIOMotorDatabase, blog_id: str) -> BlogResponse:
        oid = to_object_id(blog_id, "blog")
        async with translate_db_errors("retrieve the blog"):
            doc = await db[BLOGS].find_one({"_id": oid})
        if doc is None:
            raise NotFoundError(resource="blog", resource_id=blog_id)
        return BlogResponse.model_validate(doc)

    async def list_blogs_by_author(
        self, db: AsyncIOMotorDatabase, author_id: str
    ) -> List[BlogResponse]:
        """All blogs of one author, newest first. Unknown authors yield []."""
        async with translate_db_errors("retrieve the author's blogs"):
            docs = await (
                db[BLOGS]
                .find({"authorId": author_id.strip()})
                .sort("createdAt", DESCENDING)
                .to_list(length=None)
            )
        return validate_documents(BlogResponse, docs, BLOGS)

    async def update_blog(
        self, db: AsyncIOMotorDatabase, blog_id: str, data: BlogUpdate
    ) -> BlogResponse:
        oid = to_object_id(blog_id, "blog")
        fields: Dict[str, Any] = {}
        title = clean_str(data.title)
        if title:
            fields["title"] = title
        content = clean_str(data.content)
        if content:
            fields["content"] = content
        fields["updatedAt"] = utcnow()

        async with translate_db_errors("update the blog"):
            doc = await db[BLOGS].find_one_and_update(
                {"_id": oid},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotFoundError(resource="blog", resource_id=blog_id)
        logger.info("Blog updated: %s", blog_id)
        return BlogResponse.model_validate(doc)

    async def delete_blog(self, db: AsyncIOMotorDatabase, blog_id: str) -> DeleteResult:
        oid = to_object_id(blog_id, "blog")
        async with translate_db_errors("delete the blog"):
            result = await db[BLOGS].delete_one({"_id": oid})
        if result.deleted_count == 0:
            raise NotFoundError(resource="blog", resource_id=blog_id)
        logger.info("Blog deleted: %s", blog_id)
        return DeleteResult(message="Blog deleted successfully")


blog_service = BlogService()
