"""
Liveness probe
"""

from fastapi import APIRouter

from vidtube.core.responses import api_response

router = APIRouter()


@router.get("")
async def healthcheck():
    return api_response({}, "OK")
