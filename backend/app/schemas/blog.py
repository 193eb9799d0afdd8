"""
Atomsmiths Backend — Blog Schemas
===================================

What:  Request and response models for member blogs.

The author snapshot (name, email, department) is copied from the member at
creation time and is not refreshed when the member later changes.
"""

from typing import Any, Optional

from pydantic import Field

from app.schemas.common import CamelModel, DocumentModel


class BlogCreate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    author_id: Optional[str] = None


class BlogUpdate(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None


class BlogResponse(DocumentModel):
    """A stored blog post with its author snapshot."""

    title: Optional[str] = None
    content: Any = None
    author_id: Optional[str] = Field(default=None, description="Member id of the author")
    author_name: Any = None
    author_email: Any = None
    author_department: Any = None
