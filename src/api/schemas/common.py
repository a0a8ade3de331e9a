# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so error payloads stay consistent across resources.
# The resource routers document these error statuses in the OpenAPI schema.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation, reference, or uniqueness failure"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}
