"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Long-lived objects (database, services)
are built once in the app lifespan and read back from app.state.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Query, Request

from services.otp_service import OtpService
from services.user_service import UserService


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_otp_service(request: Request) -> OtpService:
    return request.app.state.otp_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_user_id(
    user_id: Optional[str] = Query(default=None, alias="userId"),
) -> Optional[str]:
    """Resolve the calling user's id.

    Taken from the ``userId`` query parameter until bearer tokens are issued;
    services validate presence, so swapping this for a token verifier does
    not change them.
    """
    return user_id
