"""
Base model for all stored records.

Records are persisted with camelCase keys (``userId``, ``createdAt``) while
Python code uses snake_case attributes; the alias generator bridges the two.
The primary key is stored as the document ``_id`` by the record store, so
models never see it.

to_record()   — model → dict suitable for RecordStore.put()
from_record() — raw store dict → model instance (None passes through)
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for all record models. Subclasses name their key field."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    key_field: ClassVar[str]

    @property
    def key(self) -> str:
        return getattr(self, self.key_field)

    def to_record(self) -> dict[str, Any]:
        """Return a JSON-compatible, camelCase dict for the store."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_record(cls, data: Optional[dict]) -> Optional["RecordModel"]:
        """Build a model from a raw store dict; returns None for None."""
        if data is None:
            return None
        return cls.model_validate(data)
