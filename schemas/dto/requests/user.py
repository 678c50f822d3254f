"""
Request DTOs for user endpoints.

CreateUserRequest     — POST /users
UpdateProfileRequest  — PUT /users/profile
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from schemas.models.user import Stream, StudentClass

VALID_CLASSES = [c.value for c in StudentClass]
VALID_STREAMS = [s.value for s in Stream]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class CreateUserRequest(BaseModel):
    """Request body for POST /users.

    At least one of ``mobile`` / ``email`` must be present; empty strings
    count as absent.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    mobile: Optional[str] = None
    email: Optional[str] = None
    auth_provider: str

    @field_validator("mobile", "email", mode="before")
    @classmethod
    def _normalise_identity(cls, v):
        v = _blank_to_none(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("auth_provider")
    @classmethod
    def _check_auth_provider(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("authProvider is required")
        return v

    @model_validator(mode="after")
    def _require_identity(self) -> "CreateUserRequest":
        if not self.mobile and not self.email:
            raise ValueError("mobile or email is required")
        return self


class UpdateProfileRequest(BaseModel):
    """Request body for PUT /users/profile.

    Only the fields declared here can be changed; anything else in the body
    is dropped silently. A field counts as submitted when its key is present,
    so an explicit ``null`` clears it.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    student_class: Optional[str] = None
    stream: Optional[str] = None
    subject_performance: Optional[dict[str, str]] = None
    subject_ratings: Optional[dict[str, Union[int, float]]] = None

    @field_validator("student_class", mode="before")
    @classmethod
    def _check_class(cls, v):
        v = _blank_to_none(v)
        if v is not None and v not in VALID_CLASSES:
            raise ValueError(f"studentClass must be one of: {', '.join(VALID_CLASSES)}")
        return v

    @field_validator("stream", mode="before")
    @classmethod
    def _check_stream(cls, v):
        v = _blank_to_none(v)
        if v is not None and v not in VALID_STREAMS:
            raise ValueError(f"stream must be one of: {', '.join(VALID_STREAMS)}")
        return v

    def to_updates(self) -> dict[str, Any]:
        """Return the submitted allow-listed fields keyed by their stored names."""
        return self.model_dump(
            by_alias=True, include=set(self.model_fields_set), mode="json"
        )
