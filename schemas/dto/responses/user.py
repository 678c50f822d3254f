"""
Response DTOs for user endpoints.

UserCreatedResponse    — POST /users
ProfileResponse        — GET /users/profile
ProfileUpdateResponse  — PUT /users/profile

Profile views always carry every key: unset scalars render as null, the
subject maps as {}, flags as false and counters as 0, so clients never branch
on key presence.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

_VIEW_CONFIG = ConfigDict(
    populate_by_name=True, alias_generator=to_camel, extra="ignore"
)

_FALSY_DEFAULTS: dict[str, Any] = {
    "subjectPerformance": {},
    "subjectRatings": {},
    "testCompleted": False,
    "paymentDone": False,
    "reportReady": False,
    "aiMessagesUsed": 0,
}

_NULLABLE_STRINGS = (
    "firstName",
    "lastName",
    "email",
    "mobile",
    "city",
    "state",
    "studentClass",
    "testGroup",
    "stream",
)


def _fill_defaults(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key, default in _FALSY_DEFAULTS.items():
        if data.get(key) is None:
            data[key] = default
    for key in _NULLABLE_STRINGS:
        if data.get(key) == "":
            data[key] = None
    return data


class UserCreatedResponse(BaseModel):
    model_config = _VIEW_CONFIG

    user_id: str
    created_at: str


class ProfileUpdateResponse(BaseModel):
    """Post-update view: profile fields only, no flags or counters."""

    model_config = _VIEW_CONFIG

    user_id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    student_class: Optional[str] = None
    test_group: Optional[str] = None
    stream: Optional[str] = None
    subject_performance: dict[str, str] = {}
    subject_ratings: dict[str, Union[int, float]] = {}
    updated_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill(cls, data: Any) -> Any:
        return _fill_defaults(data)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "ProfileUpdateResponse":
        return cls.model_validate(record)


class ProfileResponse(ProfileUpdateResponse):
    """Full public profile view."""

    email: Optional[str] = None
    mobile: Optional[str] = None
    test_completed: bool = False
    payment_done: bool = False
    report_ready: bool = False
    ai_messages_used: int = 0
    created_at: Optional[str] = None
