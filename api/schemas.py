"""Response envelope shared by all endpoints."""
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiResponse(BaseModel):
    """``{success, data?, error?}`` envelope, plus optional extras."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    has_more: Optional[bool] = None
    pagination: Optional[Dict[str, Any]] = None
    tms_response: Optional[Dict[str, Any]] = None


def envelope(status_code: int = 200, **fields: Any) -> JSONResponse:
    """
    Render an ApiResponse as JSON.

    Args:
        status_code: HTTP status code
        **fields: ApiResponse fields

    Returns:
        JSONResponse
    """
    body = ApiResponse(**fields).model_dump(by_alias=True, exclude_none=True, mode="json")
    return JSONResponse(status_code=status_code, content=body)


def error_envelope(status_code: int, message: str) -> JSONResponse:
    """Render a failure envelope."""
    return envelope(status_code=status_code, success=False, error=message)
