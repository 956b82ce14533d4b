"""
Standard API response helpers for consistent response formatting.

The mint API uses a flat envelope shared with the wallet page script:
- Success: { "success": true, ...payload }
- Error:   { "success": false, "message": "...", "error": "..." }
"""
from typing import Any

from pydantic import BaseModel, Field


class StandardErrorResponse(BaseModel):
    """Standard error response envelope."""
    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable, client-safe message")
    error: str | None = Field(default=None, description="Underlying failure detail, when safe to expose")


def success_response(**payload: Any) -> dict[str, Any]:
    """
    Create a standardized success response.

    Keys whose value is None are dropped so check-only answers stay minimal.
    """
    response = {"success": True}
    response.update({key: value for key, value in payload.items() if value is not None})
    return response


def error_response(message: str, error: str | None = None) -> dict[str, Any]:
    """
    Create a standardized error response.

    Returns:
        dict: { "success": false, "message": <message>, "error": <error>? }
    """
    response: dict[str, Any] = {"success": False, "message": message}
    if error is not None:
        response["error"] = error
    return response
