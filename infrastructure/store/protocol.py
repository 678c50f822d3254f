"""RecordStore protocol — services depend on this, not the concrete implementation.

A record store is a keyed collection of documents supporting single-key
atomic operations, each optionally guarded by a precondition on key existence.
Updates may also carry numeric ceilings (``below``) checked in the same atomic
step as the write.
"""

from enum import Enum
from typing import Any, Mapping, Optional, Protocol


class Condition(str, Enum):
    """Precondition on the existence of the record's key."""

    EXISTS = "exists"
    NOT_EXISTS = "not_exists"


class ConditionFailedError(Exception):
    """The write's precondition did not hold. Never retried."""

    def __init__(self, key: str, condition: Condition) -> None:
        super().__init__(f"condition {condition.value} failed for key {key!r}")
        self.key = key
        self.condition = condition


class LimitReachedError(Exception):
    """The record exists but a ``below`` ceiling was already reached."""

    def __init__(self, key: str, field: str) -> None:
        super().__init__(f"{field} limit reached for key {key!r}")
        self.key = key
        self.field = field


class StoreError(Exception):
    """The store could not complete the operation (network, server, timeout)."""


class RecordStore(Protocol):
    async def put(
        self,
        key: str,
        item: Mapping[str, Any],
        condition: Optional[Condition] = None,
    ) -> None: ...

    async def get(self, key: str) -> Optional[dict[str, Any]]: ...

    async def update(
        self,
        key: str,
        fields: Mapping[str, Any],
        condition: Optional[Condition] = Condition.EXISTS,
        increments: Optional[Mapping[str, int]] = None,
        below: Optional[Mapping[str, int]] = None,
    ) -> dict[str, Any]: ...
