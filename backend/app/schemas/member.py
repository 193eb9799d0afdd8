"""
Atomsmiths Backend — Member Schemas
=====================================

What:  Request and response models for club members.
Who:   MemberCreate/MemberUpdate parse request bodies; MemberResponse is what
       every member endpoint returns.

Input models accept every field as optional: required-field and format rules
live in MemberService so that both the dispatch route and the REST routes
report them with the same messages.
"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import Field

from app.schemas.common import CamelModel, DocumentModel

# A year may be a number (2) or free text ("Second", "Alumni")
Year = Union[int, str]


class MemberCreate(CamelModel):
    """Body of a member registration."""

    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    year: Optional[Year] = None
    interests: Optional[str] = None


class MemberUpdate(CamelModel):
    """Body of a partial member update. Empty values leave a field unchanged."""

    name: Optional[str] = None
    email: Optional[str] = None
    department: Optional[str] = None
    year: Optional[Year] = None
    interests: Optional[str] = None


class MemberResponse(DocumentModel):
    """
    A stored member.

    Older records were inserted without validation, so only identity is
    guaranteed; free-form fields are passed through as stored.
    """

    name: Optional[str] = Field(default=None, description="Display name")
    email: Optional[str] = Field(default=None, description="Lowercased, unique email address")
    department: Any = None
    year: Any = None
    interests: Any = None
    joined_at: Optional[datetime] = Field(default=None, description="Registration time (UTC)")
