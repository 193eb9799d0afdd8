"""
Atomsmiths Backend — Resource Route Tests
===========================================

What:  Tests for /api/members, /api/events, /api/blogs, /api/dashboard,
       /api/join and /health through the full app.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError


class TestMemberRoutes:

    @pytest.mark.asyncio
    async def test_register_member(self, test_client):
        response = await test_client.post(
            "/api/members", json={"name": "Ada", "email": "ada@atomsmiths.org", "department": "CSE"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["ok"] is True
        assert body["data"]["department"] == "CSE"
        assert ObjectId.is_valid(body["data"]["_id"])

    @pytest.mark.asyncio
    async def test_register_member_bad_email(self, test_client):
        response = await test_client.post("/api/members", json={"name": "Ada", "email": "ada"})

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "email"}

    @pytest.mark.asyncio
    async def test_get_update_delete_member(self, test_client, mock_db, member_doc):
        member_id = str(member_doc["_id"])
        mock_db["members"].find_one.return_value = member_doc
        mock_db["members"].find_one_and_update.return_value = dict(member_doc, name="Ada L.")

        fetched = await test_client.get(f"/api/members/{member_id}")
        updated = await test_client.put(f"/api/members/{member_id}", json={"name": "Ada L."})
        deleted = await test_client.delete(f"/api/members/{member_id}")

        assert fetched.json()["data"]["name"] == "Ada Lovelace"
        assert updated.json()["data"]["name"] == "Ada L."
        assert deleted.json()["data"]["message"] == "Member deleted successfully"

    @pytest.mark.asyncio
    async def test_member_blogs(self, test_client, mock_db, make_cursor, blog_doc):
        mock_db["blogs"].find.return_value = make_cursor([blog_doc])

        response = await test_client.get(f"/api/members/{blog_doc['authorId']}/blogs")

        assert response.status_code == 200
        assert response.json()["data"][0]["title"] == blog_doc["title"]

    @pytest.mark.asyncio
    async def test_unknown_member(self, test_client):
        response = await test_client.get(f"/api/members/{ObjectId()}")

        assert response.status_code == 404


class TestEventAndBlogRoutes:

    @pytest.mark.asyncio
    async def test_upcoming_events(self, test_client, mock_db, make_cursor, event_doc):
        mock_db["events"].find.return_value = make_cursor([event_doc])

        response = await test_client.get("/api/events", params={"upcoming": "true"})

        assert response.status_code == 200
        assert response.json()["data"][0]["title"] == event_doc["title"]
        assert "eventDate" in mock_db["events"].find.call_args.args[0]

    @pytest.mark.asyncio
    async def test_add_event_missing_date(self, test_client):
        response = await test_client.post("/api/events", json={"title": "Talk"})

        assert response.status_code == 400
        assert response.json()["message"] == "Title and event date are required"

    @pytest.mark.asyncio
    async def test_add_event_unparseable_date(self, test_client):
        response = await test_client.post(
            "/api/events", json={"title": "Talk", "eventDate": "next tuesday"}
        )

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "eventDate"}

    @pytest.mark.asyncio
    async def test_add_event(self, test_client):
        when = datetime.now(timezone.utc) + timedelta(days=2)

        response = await test_client.post(
            "/api/events", json={"title": "Talk", "eventDate": when.isoformat()}
        )

        assert response.status_code == 201
        assert response.json()["data"]["title"] == "Talk"

    @pytest.mark.asyncio
    async def test_blogs_paginated(self, test_client, mock_db, make_cursor):
        cursor = make_cursor([])
        mock_db["blogs"].find.return_value = cursor

        response = await test_client.get("/api/blogs", params={"limit": 5, "skip": 5})

        assert response.json() == {"ok": True, "data": []}
        cursor.limit.assert_called_once_with(5)
        cursor.skip.assert_called_once_with(5)

    @pytest.mark.asyncio
    async def test_add_blog(self, test_client, mock_db, member_doc):
        mock_db["members"].find_one.return_value = member_doc

        response = await test_client.post(
            "/api/blogs",
            json={"title": "Hi", "content": "Body", "authorId": str(member_doc["_id"])},
        )

        assert response.status_code == 201
        assert response.json()["data"]["authorEmail"] == member_doc["email"]

    @pytest.mark.asyncio
    async def test_delete_missing_blog(self, test_client, mock_db):
        mock_db["blogs"].delete_one.return_value.deleted_count = 0

        response = await test_client.delete(f"/api/blogs/{ObjectId()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_event_body(self, test_client):
        response = await test_client.delete(f"/api/events/{ObjectId()}")

        assert response.json() == {"ok": True, "data": {"message": "Event deleted successfully"}}

    @pytest.mark.asyncio
    async def test_delete_member_reports_removed_blogs(self, test_client, mock_db):
        mock_db["blogs"].delete_many.return_value.deleted_count = 1

        response = await test_client.delete(f"/api/members/{ObjectId()}")

        assert response.json()["data"] == {
            "message": "Member deleted successfully",
            "deletedBlogs": 1,
        }


class TestDashboardRoutes:

    @pytest.mark.asyncio
    async def test_dashboard(self, test_client, mock_db):
        mock_db["blogs"].count_documents.return_value = 9

        response = await test_client.get("/api/dashboard")

        assert response.status_code == 200
        assert response.json()["data"]["totalBlogs"] == 9

    @pytest.mark.asyncio
    async def test_activity_limit_bounds(self, test_client):
        response = await test_client.get("/api/dashboard/activity", params={"limit": 500})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_stats(self, test_client):
        response = await test_client.get("/api/dashboard/stats")

        assert response.json()["data"] == {"departmentStats": [], "yearStats": []}


class TestJoinRoute:

    @pytest.mark.asyncio
    async def test_join(self, test_client, mock_db):
        new_id = ObjectId()
        mock_db["members"].insert_one.return_value.inserted_id = new_id

        response = await test_client.post(
            "/api/join", json={"name": "Lin", "email": "lin@atomsmiths.org", "interests": "Rockets"}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "id": str(new_id)}

    @pytest.mark.asyncio
    async def test_join_duplicate(self, test_client, mock_db, member_doc):
        mock_db["members"].find_one.return_value = member_doc

        response = await test_client.post(
            "/api/join", json={"name": "Ada", "email": member_doc["email"]}
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def test_join_only_post(self, test_client, method):
        response = await test_client.request(method, "/api/join")

        assert response.status_code == 405
        assert response.json()["message"] == "Only POST allowed"
        assert response.headers["Allow"] == "POST"

    @pytest.mark.asyncio
    async def test_join_head(self, test_client):
        response = await test_client.head("/api/join")

        assert response.status_code == 405
        assert response.headers["Allow"] == "POST"


class TestHealthRoute:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        with patch("app.routes.health.ping_database", new=AsyncMock(return_value=None)):
            response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_unhealthy(self, test_client):
        failing = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        with patch("app.routes.health.ping_database", new=failing):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"

    @pytest.mark.asyncio
    async def test_unknown_path(self, test_client):
        response = await test_client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json()["error"] == "http_error"
