"""
Atomsmiths Backend — Collection Definitions
=============================================

What:  Names and index layout of the three MongoDB collections.
Who:   Services use the names; database.ensure_indexes() applies the indexes.

Documents are flat and schemaless in the store; the shape of each record kind
is documented here and enforced (best-effort) by the services.

    members: name, email, department, year, interests,
             joinedAt, createdAt, updatedAt
    events:  title, description, eventDate, location, createdAt, updatedAt
    blogs:   title, content, authorId, authorName, authorEmail,
             authorDepartment, createdAt, updatedAt

Query Patterns:
    - Newest members first:    find().sort(joinedAt, -1)      → joinedAt index
    - Upcoming events:         find(eventDate > now)          → eventDate index
    - Blogs by author:         find(authorId).sort(createdAt) → authorId index
    - Duplicate email check:   find_one(email)                → unique email index
"""

from typing import List, Tuple

from pymongo import ASCENDING, DESCENDING, IndexModel

MEMBERS = "members"
EVENTS = "events"
BLOGS = "blogs"


INDEXES: List[Tuple[str, List[IndexModel]]] = [
    (
        MEMBERS,
        [
            # The only store-level invariant of the data model
            IndexModel([("email", ASCENDING)], name="uniq_members_email", unique=True),
            IndexModel([("joinedAt", DESCENDING)], name="idx_members_joined_at"),
        ],
    ),
    (
        EVENTS,
        [
            IndexModel([("eventDate", ASCENDING)], name="idx_events_event_date"),
            IndexModel([("createdAt", DESCENDING)], name="idx_events_created_at"),
        ],
    ),
    (
        BLOGS,
        [
            IndexModel([("authorId", ASCENDING)], name="idx_blogs_author_id"),
            IndexModel([("createdAt", DESCENDING)], name="idx_blogs_created_at"),
        ],
    ),
]
