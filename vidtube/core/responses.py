"""
Uniform response envelope shared by every endpoint
"""

from typing import Any, List, Optional
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def build_envelope(
    status_code: int,
    data: Any = None,
    message: str = "successful",
    errors: Optional[List[Any]] = None,
) -> dict:
    """
    Build the envelope dictionary

    Error envelopes (status >= 400) always carry an ``errors`` list and null data.
    """
    envelope = {
        "statusCode": status_code,
        "data": data,
        "message": message,
        "success": status_code < status.HTTP_400_BAD_REQUEST,
    }
    if status_code >= status.HTTP_400_BAD_REQUEST:
        envelope["data"] = None
        envelope["errors"] = errors or []
    return envelope


def api_response(
    data: Any = None,
    message: str = "successful",
    status_code: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Wrap a successful result in the envelope"""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(build_envelope(status_code, data if data is not None else {}, message)),
    )


def error_response(status_code: int, message: str, errors: Optional[List[Any]] = None) -> JSONResponse:
    """Wrap an error in the envelope"""
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(build_envelope(status_code, None, message, errors)),
    )
