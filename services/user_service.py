"""
User lifecycle: creation, profile reads and allow-listed partial updates.

All writes are single conditional store operations:
- create → put guarded by "key must not exist" (a userId collision is a 409)
- update → $set guarded by "key must exist" (no implicit upsert)

Concurrent updates to the same user are last-writer-wins per submitted field.
"""

from __future__ import annotations

from typing import Optional

from errors import ConflictError, NotFoundError, ServerError, ValidationError
from infrastructure.store.protocol import (
    Condition,
    ConditionFailedError,
    RecordStore,
    StoreError,
)
from schemas.dto.requests.user import CreateUserRequest, UpdateProfileRequest
from schemas.dto.responses.user import (
    ProfileResponse,
    ProfileUpdateResponse,
    UserCreatedResponse,
)
from schemas.models.user import UserDoc, derive_test_group
from shared.datetime_utils import Clock, to_iso, utc_now
from shared.generators import generate_id
from shared.logging import get_logger, log_with_context

log = get_logger(__name__)


class UserService:
    def __init__(self, store: RecordStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    async def create_user(self, request: CreateUserRequest) -> UserCreatedResponse:
        user_id = generate_id()
        now = to_iso(self._clock())
        doc = UserDoc(
            user_id=user_id,
            mobile=request.mobile,
            email=request.email,
            auth_provider=request.auth_provider,
            created_at=now,
            updated_at=now,
        )

        user_log = log_with_context(log, user_id=user_id)
        try:
            await self._store.put(doc.key, doc.to_record(), Condition.NOT_EXISTS)
        except ConditionFailedError:
            user_log.warning("user_create_failed", reason="already_exists")
            raise ConflictError("User already exists")
        except StoreError:
            user_log.error("user_create_failed", reason="store_error", exc_info=True)
            raise ServerError("Failed to create user")

        user_log.info(
            "user_created",
            auth_provider=request.auth_provider,
            has_mobile=bool(request.mobile),
            has_email=bool(request.email),
        )
        return UserCreatedResponse(user_id=user_id, created_at=now)

    async def get_profile(self, user_id: Optional[str]) -> ProfileResponse:
        if not user_id:
            raise ValidationError("userId is required", field="userId")

        try:
            record = await self._store.get(user_id)
        except StoreError:
            log.error("user_fetch_failed", user_id=user_id, exc_info=True)
            raise ServerError("Failed to fetch user profile")

        if record is None:
            raise NotFoundError("User not found")
        return ProfileResponse.from_record(record)

    async def update_profile(
        self, user_id: Optional[str], request: Optional[UpdateProfileRequest]
    ) -> ProfileUpdateResponse:
        if not user_id:
            raise ValidationError("userId is required", field="userId")

        updates = request.to_updates() if request is not None else {}
        if not updates:
            raise ValidationError("No valid fields to update")

        if "studentClass" in updates:
            updates["testGroup"] = derive_test_group(updates["studentClass"])
        updates["updatedAt"] = to_iso(self._clock())

        user_log = log_with_context(log, user_id=user_id)
        try:
            record = await self._store.update(
                user_id, updates, condition=Condition.EXISTS
            )
        except ConditionFailedError:
            user_log.warning("user_update_failed", reason="not_found")
            raise NotFoundError("User not found")
        except StoreError:
            user_log.error("user_update_failed", reason="store_error", exc_info=True)
            raise ServerError("Failed to update user profile")

        user_log.info("user_profile_updated", fields=sorted(updates))
        return ProfileUpdateResponse.from_record(record)
