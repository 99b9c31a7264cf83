"""Response envelopes shared by every endpoint"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def format_api_response(data: Any, status_code: int = 200) -> JSONResponse:
    """Wrap a payload as {"data": ..., "success": true}"""
    return JSONResponse(
        status_code=status_code,
        content={"data": jsonable_encoder(data), "success": True},
    )


def format_api_success(message: str, status_code: int = 200) -> JSONResponse:
    """Success envelope for operations that return no data"""
    return JSONResponse(status_code=status_code, content={"message": message, "success": True})


def format_api_error(
    message: str,
    status_code: int = 400,
    details: Optional[Any] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {"error": message, "success": False}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)
