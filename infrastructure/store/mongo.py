"""MongoDB implementation of RecordStore.

The record key is stored as the document ``_id`` so key uniqueness and
single-document atomicity come from MongoDB itself:

- put(NOT_EXISTS)   → insert_one; DuplicateKeyError means the key is taken
- update(EXISTS)    → find_one_and_update without upsert; None means missing
- update(None)      → find_one_and_update with upsert
- update(below=…)   → ceilings join the filter; None on an existing record
                      means a ceiling was reached

Transient network errors on idempotent operations are retried a bounded
number of times with jittered exponential backoff. Precondition failures
are business outcomes and are raised immediately.
"""

from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from pymongo import ReturnDocument
from pymongo.errors import ConnectionFailure, DuplicateKeyError, PyMongoError

from infrastructure.store.protocol import (
    Condition,
    ConditionFailedError,
    LimitReachedError,
    StoreError,
)
from shared.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")


def _strip_id(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


class MongoRecordStore:
    def __init__(
        self,
        collection,
        *,
        max_retries: int = 2,
        retry_base_delay: float = 0.05,
    ) -> None:
        self._collection = collection
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay

    @property
    def name(self) -> str:
        return self._collection.name

    async def _run(
        self,
        operation: str,
        key: str,
        call: Callable[[], Awaitable[T]],
        retryable: bool = True,
        raise_duplicate: bool = False,
    ) -> T:
        attempt = 0
        while True:
            try:
                return await call()
            except DuplicateKeyError as e:
                if raise_duplicate:
                    raise
                raise StoreError(f"{operation} failed for {key!r}") from e
            except ConnectionFailure as e:
                if not retryable or attempt >= self._max_retries:
                    raise StoreError(f"{operation} failed for {key!r}") from e
                delay = self._retry_base_delay * (2**attempt)
                delay += random.uniform(0, delay)
                attempt += 1
                log.warning(
                    "store_retry",
                    collection=self.name,
                    operation=operation,
                    attempt=attempt,
                    delay=round(delay, 3),
                    error_type=type(e).__name__,
                )
                await asyncio.sleep(delay)
            except PyMongoError as e:
                raise StoreError(f"{operation} failed for {key!r}") from e

    async def put(
        self,
        key: str,
        item: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        doc = {**item, "_id": key}

        if condition is Condition.NOT_EXISTS:
            try:
                # A retried insert that already landed would report a
                # duplicate, so leave retries to the driver here.
                await self._run(
                    "put",
                    key,
                    lambda: self._collection.insert_one(doc),
                    retryable=False,
                    raise_duplicate=True,
                )
            except DuplicateKeyError:
                raise ConditionFailedError(key, condition) from None
            return

        upsert = condition is None
        result = await self._run(
            "put",
            key,
            lambda: self._collection.replace_one({"_id": key}, doc, upsert=upsert),
        )
        if condition is Condition.EXISTS and result.matched_count == 0:
            raise ConditionFailedError(key, condition)

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        doc = await self._run(
            "get", key, lambda: self._collection.find_one({"_id": key})
        )
        return _strip_id(doc)

    async def update(
        self,
        key: str,
        fields: Mapping[str, Any],
        condition: Optional[Condition] = Condition.EXISTS,
        increments: Optional[Mapping[str, int]] = None,
        below: Optional[Mapping[str, int]] = None,
    ) -> dict[str, Any]:
        if condition is Condition.NOT_EXISTS:
            raise ValueError("update does not support the NOT_EXISTS condition")
        if below and condition is None:
            raise ValueError("below ceilings cannot be combined with upsert")

        ops: dict[str, Any] = {}
        if fields:
            ops["$set"] = dict(fields)
        if increments:
            ops["$inc"] = dict(increments)
        if not ops:
            raise ValueError("update requires at least one field or increment")

        query: dict[str, Any] = {"_id": key}
        for field, limit in (below or {}).items():
            # $not/$gte also matches documents where the field is absent
            query[field] = {"$not": {"$gte": limit}}

        doc = await self._run(
            "update",
            key,
            lambda: self._collection.find_one_and_update(
                query,
                ops,
                upsert=condition is None,
                return_document=ReturnDocument.AFTER,
            ),
            # A replayed $inc would count twice
            retryable=not increments,
        )
        if doc is None:
            if below:
                await self._raise_limit_if_present(key, below)
            raise ConditionFailedError(key, Condition.EXISTS)
        return _strip_id(doc)

    async def _raise_limit_if_present(
        self, key: str, below: Mapping[str, int]
    ) -> None:
        current = await self._run(
            "get",
            key,
            lambda: self._collection.find_one({"_id": key}, dict.fromkeys(below, 1)),
        )
        if current is None:
            return
        for field, limit in below.items():
            if current.get(field, 0) >= limit:
                raise LimitReachedError(key, field)
