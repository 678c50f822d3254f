"""
User endpoints.

POST /users           — create a user (201)
GET  /users/profile   — public profile view
PUT  /users/profile   — allow-listed partial update
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from dependencies import get_user_id, get_user_service
from schemas.dto.requests.user import CreateUserRequest, UpdateProfileRequest
from schemas.dto.responses.common import error_responses, success_body
from services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=201, responses=error_responses(400, 409, 500))
async def create_user(
    body: CreateUserRequest,
    user_service: UserService = Depends(get_user_service),
) -> JSONResponse:
    created = await user_service.create_user(body)
    return JSONResponse(status_code=201, content=success_body(created))


@router.get("/profile", responses=error_responses(400, 404, 500))
async def get_profile(
    user_id: Optional[str] = Depends(get_user_id),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    profile = await user_service.get_profile(user_id)
    return success_body(profile)


@router.put("/profile", responses=error_responses(400, 404, 500))
async def update_profile(
    body: Optional[UpdateProfileRequest] = Body(default=None),
    user_id: Optional[str] = Depends(get_user_id),
    user_service: UserService = Depends(get_user_service),
) -> dict:
    updated = await user_service.update_profile(user_id, body)
    return success_body(updated)
