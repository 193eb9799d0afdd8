"""
Atomsmiths Backend — Member Service Unit Tests
================================================

What:  Tests for MemberService (register, list, get, update, delete).
How:   Uses the FakeDatabase fixture (no real MongoDB).

What we test:
    ✅ Registration normalizes input and stamps timestamps
    ✅ Required fields, email format and duplicate email are rejected
    ✅ A racing duplicate caught by the unique index becomes a conflict
    ✅ Listing sorts newest first and applies skip/limit
    ✅ Partial update only writes supplied fields
    ✅ Delete cascades to the member's blogs
    ✅ Driver failures surface as DatabaseError
"""

import pytest
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from app.exceptions import ConflictError, DatabaseError, NotFoundError, ValidationError
from app.schemas.member import MemberCreate, MemberUpdate
from app.services.member_service import MemberService, clean_year, normalize_email


class TestEmailRules:

    def test_normalize_email_trims_and_lowercases(self):
        assert normalize_email("  Ada@Atomsmiths.ORG ") == "ada@atomsmiths.org"

    @pytest.mark.parametrize("email", ["ada", "ada@atomsmiths", "ada @x.org", "@x.org", "a@b@c.org"])
    def test_normalize_email_rejects_malformed(self, email):
        with pytest.raises(ValidationError, match="Invalid email format"):
            normalize_email(email)

    def test_clean_year(self):
        assert clean_year(3) == 3
        assert clean_year(" Final ") == "Final"
        assert clean_year("") is None
        assert clean_year(0) is None
        assert clean_year(None) is None


class TestRegisterMember:

    def setup_method(self):
        self.service = MemberService()

    @pytest.mark.asyncio
    async def test_register_member_success(self, mock_db):
        new_id = ObjectId()
        mock_db["members"].insert_one.return_value.inserted_id = new_id

        result = await self.service.register_member(
            mock_db,
            MemberCreate(
                name="  Ada Lovelace ",
                email=" ADA@Atomsmiths.org",
                department=" CSE ",
                year=2,
                interests="   ",
            ),
        )

        assert result.id == str(new_id)
        assert result.name == "Ada Lovelace"
        assert result.email == "ada@atomsmiths.org"
        assert result.department == "CSE"
        assert result.interests is None
        assert result.joined_at is not None
        assert result.joined_at == result.created_at == result.updated_at

        # Duplicate check uses the normalized email
        mock_db["members"].find_one.assert_awaited_once_with({"email": "ada@atomsmiths.org"})
        stored = mock_db["members"].insert_one.await_args.args[0]
        assert stored["email"] == "ada@atomsmiths.org"
        assert stored["year"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"email": "a@b.co"}, {"name": "Ada"}, {"name": " ", "email": "a@b.co"}])
    async def test_register_member_requires_name_and_email(self, mock_db, payload):
        with pytest.raises(ValidationError, match="Name and email are required"):
            await self.service.register_member(mock_db, MemberCreate(**payload))
        mock_db["members"].insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register_member_invalid_email(self, mock_db):
        with pytest.raises(ValidationError, match="Invalid email format"):
            await self.service.register_member(mock_db, MemberCreate(name="Ada", email="not-an-email"))

    @pytest.mark.asyncio
    async def test_register_member_duplicate_email(self, mock_db, member_doc):
        mock_db["members"].find_one.return_value = member_doc

        with pytest.raises(ConflictError, match="Email already registered"):
            await self.service.register_member(
                mock_db, MemberCreate(name="Ada", email="ADA@atomsmiths.org")
            )
        mock_db["members"].insert_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_register_member_unique_index_race(self, mock_db):
        mock_db["members"].insert_one.side_effect = DuplicateKeyError("E11000 duplicate key")

        with pytest.raises(ConflictError):
            await self.service.register_member(mock_db, MemberCreate(name="Ada", email="a@b.co"))

    @pytest.mark.asyncio
    async def test_register_member_database_down(self, mock_db):
        mock_db["members"].find_one.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(DatabaseError):
            await self.service.register_member(mock_db, MemberCreate(name="Ada", email="a@b.co"))


class TestListAndGetMembers:

    def setup_method(self):
        self.service = MemberService()

    @pytest.mark.asyncio
    async def test_list_members_sorted_and_paginated(self, mock_db, make_cursor, member_doc):
        cursor = make_cursor([member_doc])
        mock_db["members"].find.return_value = cursor

        result = await self.service.list_members(mock_db, limit=10, skip=20)

        assert [m.id for m in result] == [str(member_doc["_id"])]
        cursor.sort.assert_called_once_with("joinedAt", DESCENDING)
        cursor.skip.assert_called_once_with(20)
        cursor.limit.assert_called_once_with(10)

    @pytest.mark.asyncio
    async def test_list_members_tolerates_legacy_documents(self, mock_db, make_cursor, member_doc):
        # Inserted by the old join form without validation
        legacy = {
            "_id": ObjectId(),
            "email": "raw@x.org",
            "interests": ["ai", "robots"],
            "department": 4,
        }
        unreadable = {"_id": ObjectId(), "name": {"first": "No"}, "email": "no@x.org"}
        mock_db["members"].find.return_value = make_cursor([member_doc, legacy, unreadable])

        result = await self.service.list_members(mock_db)

        assert [m.id for m in result] == [str(member_doc["_id"]), str(legacy["_id"])]
        assert result[1].name is None
        assert result[1].interests == ["ai", "robots"]
        assert result[1].department == 4

    @pytest.mark.asyncio
    async def test_get_member_found(self, mock_db, member_doc):
        mock_db["members"].find_one.return_value = member_doc

        result = await self.service.get_member(mock_db, str(member_doc["_id"]))

        assert result.email == member_doc["email"]
        mock_db["members"].find_one.assert_awaited_once_with({"_id": member_doc["_id"]})

    @pytest.mark.asyncio
    async def test_get_member_not_found(self, mock_db):
        with pytest.raises(NotFoundError):
            await self.service.get_member(mock_db, str(ObjectId()))

    @pytest.mark.asyncio
    async def test_get_member_invalid_id(self, mock_db):
        with pytest.raises(ValidationError, match="Invalid member ID"):
            await self.service.get_member(mock_db, "not-an-object-id")
        mock_db["members"].find_one.assert_not_awaited()


class TestUpdateMember:

    def setup_method(self):
        self.service = MemberService()

    @pytest.mark.asyncio
    async def test_update_member_sets_only_supplied_fields(self, mock_db, member_doc):
        updated = dict(member_doc, department="ECE")
        mock_db["members"].find_one_and_update.return_value = updated

        result = await self.service.update_member(
            mock_db,
            str(member_doc["_id"]),
            MemberUpdate(name="", department=" ECE ", interests=None),
        )

        assert result.department == "ECE"
        filter_, update = mock_db["members"].find_one_and_update.await_args.args
        assert filter_ == {"_id": member_doc["_id"]}
        assert set(update["$set"]) == {"department", "updatedAt"}
        # No email change → no uniqueness lookup
        mock_db["members"].find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_member_email_taken(self, mock_db, member_doc):
        mock_db["members"].find_one.return_value = {"_id": ObjectId(), "email": "grace@x.org"}

        with pytest.raises(ConflictError, match="already taken"):
            await self.service.update_member(
                mock_db, str(member_doc["_id"]), MemberUpdate(email="Grace@X.org")
            )

        lookup = mock_db["members"].find_one.await_args.args[0]
        assert lookup == {"email": "grace@x.org", "_id": {"$ne": member_doc["_id"]}}
        mock_db["members"].find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_member_invalid_email(self, mock_db, member_doc):
        with pytest.raises(ValidationError, match="Invalid email format") as exc_info:
            await self.service.update_member(
                mock_db, str(member_doc["_id"]), MemberUpdate(email="grace at x dot org")
            )

        assert exc_info.value.field == "email"
        mock_db["members"].find_one.assert_not_awaited()
        mock_db["members"].find_one_and_update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_member_not_found(self, mock_db):
        with pytest.raises(NotFoundError):
            await self.service.update_member(mock_db, str(ObjectId()), MemberUpdate(name="Ada"))


class TestDeleteMember:

    def setup_method(self):
        self.service = MemberService()

    @pytest.mark.asyncio
    async def test_delete_member_cascades_blogs(self, mock_db):
        member_id = ObjectId()
        mock_db["blogs"].delete_many.return_value.deleted_count = 3

        result = await self.service.delete_member(mock_db, str(member_id))

        assert result.message == "Member deleted successfully"
        assert result.deleted_blogs == 3
        mock_db["members"].delete_one.assert_awaited_once_with({"_id": member_id})
        mock_db["blogs"].delete_many.assert_awaited_once_with({"authorId": str(member_id)})

    @pytest.mark.asyncio
    async def test_delete_member_not_found_keeps_blogs(self, mock_db):
        mock_db["members"].delete_one.return_value.deleted_count = 0

        with pytest.raises(NotFoundError):
            await self.service.delete_member(mock_db, str(ObjectId()))
        mock_db["blogs"].delete_many.assert_not_awaited()
