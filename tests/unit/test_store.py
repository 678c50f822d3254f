"""Unit tests for MongoRecordStore against a mocked async collection."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo import ReturnDocument
from pymongo.errors import AutoReconnect, DuplicateKeyError, OperationFailure

from infrastructure.store.mongo import MongoRecordStore
from infrastructure.store.protocol import (
    Condition,
    ConditionFailedError,
    LimitReachedError,
    StoreError,
)


def _collection():
    c = MagicMock()
    c.name = "users"
    c.insert_one = AsyncMock()
    c.replace_one = AsyncMock(return_value=MagicMock(matched_count=1))
    c.find_one = AsyncMock(return_value=None)
    c.find_one_and_update = AsyncMock(return_value=None)
    return c


@pytest.fixture(autouse=True)
def no_sleep(mocker):
    return mocker.patch("infrastructure.store.mongo.asyncio.sleep", new=AsyncMock())


class TestPut:
    async def test_not_exists_inserts_with_key_as_id(self):
        c = _collection()
        store = MongoRecordStore(c)
        await store.put("u1", {"userId": "u1"}, Condition.NOT_EXISTS)
        c.insert_one.assert_awaited_once_with({"userId": "u1", "_id": "u1"})

    async def test_duplicate_key_is_condition_failure(self):
        c = _collection()
        c.insert_one.side_effect = DuplicateKeyError("dup")
        store = MongoRecordStore(c)
        with pytest.raises(ConditionFailedError) as exc_info:
            await store.put("u1", {"userId": "u1"}, Condition.NOT_EXISTS)
        assert exc_info.value.condition is Condition.NOT_EXISTS

    async def test_conditional_insert_not_retried(self):
        c = _collection()
        c.insert_one.side_effect = AutoReconnect("flap")
        store = MongoRecordStore(c, max_retries=3)
        with pytest.raises(StoreError):
            await store.put("u1", {}, Condition.NOT_EXISTS)
        assert c.insert_one.await_count == 1

    async def test_unconditional_upserts(self):
        c = _collection()
        store = MongoRecordStore(c)
        await store.put("o1", {"otpId": "o1"})
        c.replace_one.assert_awaited_once_with(
            {"_id": "o1"}, {"otpId": "o1", "_id": "o1"}, upsert=True
        )

    async def test_unconditional_duplicate_is_store_error(self):
        c = _collection()
        c.replace_one.side_effect = DuplicateKeyError("dup")
        store = MongoRecordStore(c)
        with pytest.raises(StoreError):
            await store.put("o1", {"otpId": "o1"})

    async def test_exists_condition_without_match(self):
        c = _collection()
        c.replace_one.return_value = MagicMock(matched_count=0)
        store = MongoRecordStore(c)
        with pytest.raises(ConditionFailedError):
            await store.put("o1", {}, Condition.EXISTS)


class TestGet:
    async def test_strips_id(self):
        c = _collection()
        c.find_one.return_value = {"_id": "u1", "userId": "u1"}
        store = MongoRecordStore(c)
        assert await store.get("u1") == {"userId": "u1"}

    async def test_missing_returns_none(self):
        store = MongoRecordStore(_collection())
        assert await store.get("nope") is None

    async def test_retries_transient_errors(self, no_sleep):
        c = _collection()
        c.find_one.side_effect = [AutoReconnect("flap"), {"_id": "u1", "userId": "u1"}]
        store = MongoRecordStore(c, max_retries=2)
        assert await store.get("u1") == {"userId": "u1"}
        assert c.find_one.await_count == 2
        no_sleep.assert_awaited_once()

    async def test_gives_up_after_max_retries(self):
        c = _collection()
        c.find_one.side_effect = AutoReconnect("down")
        store = MongoRecordStore(c, max_retries=2)
        with pytest.raises(StoreError):
            await store.get("u1")
        assert c.find_one.await_count == 3

    async def test_non_transient_error_not_retried(self):
        c = _collection()
        c.find_one.side_effect = OperationFailure("bad")
        store = MongoRecordStore(c, max_retries=2)
        with pytest.raises(StoreError):
            await store.get("u1")
        assert c.find_one.await_count == 1


class TestUpdate:
    async def test_exists_condition_sets_fields(self):
        c = _collection()
        c.find_one_and_update.return_value = {"_id": "u1", "userId": "u1", "city": "Pune"}
        store = MongoRecordStore(c)
        result = await store.update("u1", {"city": "Pune"})
        assert result == {"userId": "u1", "city": "Pune"}
        c.find_one_and_update.assert_awaited_once_with(
            {"_id": "u1"},
            {"$set": {"city": "Pune"}},
            upsert=False,
            return_document=ReturnDocument.AFTER,
        )

    async def test_missing_record_is_condition_failure(self):
        store = MongoRecordStore(_collection())
        with pytest.raises(ConditionFailedError):
            await store.update("ghost", {"city": "Pune"})

    async def test_increments(self):
        c = _collection()
        c.find_one_and_update.return_value = {"_id": "o1", "attempts": 1}
        store = MongoRecordStore(c)
        await store.update("o1", {}, increments={"attempts": 1})
        assert c.find_one_and_update.await_args.args[1] == {"$inc": {"attempts": 1}}

    async def test_unconditional_upserts(self):
        c = _collection()
        c.find_one_and_update.return_value = {"_id": "o1", "a": 1}
        store = MongoRecordStore(c)
        await store.update("o1", {"a": 1}, condition=None)
        assert c.find_one_and_update.await_args.kwargs["upsert"] is True

    async def test_empty_update_rejected(self):
        store = MongoRecordStore(_collection())
        with pytest.raises(ValueError):
            await store.update("o1", {})

    async def test_not_exists_condition_rejected(self):
        store = MongoRecordStore(_collection())
        with pytest.raises(ValueError):
            await store.update("o1", {"a": 1}, condition=Condition.NOT_EXISTS)

    async def test_increment_not_retried(self):
        c = _collection()
        c.find_one_and_update.side_effect = AutoReconnect("flap")
        store = MongoRecordStore(c, max_retries=3)
        with pytest.raises(StoreError):
            await store.update("o1", {}, increments={"attempts": 1})
        assert c.find_one_and_update.await_count == 1

    async def test_set_only_update_retried(self):
        c = _collection()
        c.find_one_and_update.side_effect = [
            AutoReconnect("flap"),
            {"_id": "u1", "city": "Pune"},
        ]
        store = MongoRecordStore(c, max_retries=2)
        assert await store.update("u1", {"city": "Pune"}) == {"city": "Pune"}
        assert c.find_one_and_update.await_count == 2


class TestUpdateCeilings:
    async def test_ceiling_joins_filter(self):
        c = _collection()
        c.find_one_and_update.return_value = {"_id": "o1", "attempts": 3}
        store = MongoRecordStore(c)
        result = await store.update(
            "o1", {}, increments={"attempts": 1}, below={"attempts": 5}
        )
        assert result == {"attempts": 3}
        assert c.find_one_and_update.await_args.args[0] == {
            "_id": "o1",
            "attempts": {"$not": {"$gte": 5}},
        }

    async def test_existing_record_at_ceiling(self):
        c = _collection()
        c.find_one.return_value = {"_id": "o1", "attempts": 5}
        store = MongoRecordStore(c)
        with pytest.raises(LimitReachedError) as exc_info:
            await store.update(
                "o1", {}, increments={"attempts": 1}, below={"attempts": 5}
            )
        assert exc_info.value.field == "attempts"
        c.find_one.assert_awaited_once_with({"_id": "o1"}, {"attempts": 1})

    async def test_missing_record_with_ceiling(self):
        store = MongoRecordStore(_collection())
        with pytest.raises(ConditionFailedError):
            await store.update("ghost", {"verified": True}, below={"attempts": 5})

    async def test_ceiling_with_upsert_rejected(self):
        store = MongoRecordStore(_collection())
        with pytest.raises(ValueError):
            await store.update("o1", {"a": 1}, condition=None, below={"attempts": 5})
