"""
Shared test fixtures.

FakeRecordStore mirrors the RecordStore contract in memory (conditional
writes included) so services and routes can be exercised without MongoDB.
"""

import copy
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import pytest

from infrastructure.store.protocol import (
    Condition,
    ConditionFailedError,
    LimitReachedError,
)

# AppSettings requires a MONGODB_URI
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/")


class FakeRecordStore:
    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.fail_with: Optional[Exception] = None

    def _check_failure(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def put(
        self,
        key: str,
        item: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> None:
        self._check_failure()
        exists = key in self.items
        if condition is Condition.NOT_EXISTS and exists:
            raise ConditionFailedError(key, condition)
        if condition is Condition.EXISTS and not exists:
            raise ConditionFailedError(key, condition)
        self.items[key] = copy.deepcopy(dict(item))

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        self._check_failure()
        item = self.items.get(key)
        return copy.deepcopy(item) if item is not None else None

    async def update(
        self,
        key: str,
        fields: Mapping[str, Any],
        condition: Optional[Condition] = Condition.EXISTS,
        increments: Optional[Mapping[str, int]] = None,
        below: Optional[Mapping[str, int]] = None,
    ) -> dict[str, Any]:
        self._check_failure()
        if key not in self.items:
            if condition is Condition.EXISTS:
                raise ConditionFailedError(key, condition)
            self.items[key] = {}
        item = self.items[key]
        for field, limit in (below or {}).items():
            if item.get(field, 0) >= limit:
                raise LimitReachedError(key, field)
        item.update(copy.deepcopy(dict(fields)))
        for field, amount in (increments or {}).items():
            item[field] = item.get(field, 0) + amount
        return copy.deepcopy(item)


class FakeGateway:
    def __init__(self, delivered: bool = True, configured: bool = True) -> None:
        self.delivered = delivered
        self.configured = configured
        self.sent: list[tuple[str, str, str]] = []

    def is_configured(self, otp_type: str) -> bool:
        return self.configured

    async def send(self, target: str, otp_type: str, code: str) -> bool:
        self.sent.append((target, otp_type, code))
        return self.delivered


class MutableClock:
    """Deterministic clock; advance() moves time forward."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def clock():
    return MutableClock()
