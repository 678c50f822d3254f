"""
Common response DTOs shared across endpoints.

ErrorResponse    — standard error shape from AppError.to_dict()
HealthResponse   — GET /health
success_body()   — wraps a payload in the {success: true, data} envelope
error_responses() — OpenAPI `responses=` entries documenting ErrorResponse
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    error: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    checks: dict[str, str]


def success_body(data: BaseModel) -> dict[str, Any]:
    """Return the success envelope with *data* dumped by its camelCase aliases."""
    return {"success": True, "data": data.model_dump(by_alias=True, mode="json")}


def error_responses(*status_codes: int) -> dict[int, dict[str, Any]]:
    """Document the error envelope for each status code a route can return."""
    return {code: {"model": ErrorResponse} for code in status_codes}
