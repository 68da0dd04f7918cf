from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/.well-known", tags=["well-known"])

MATRIX_SERVER = "matrix.robswebhub.net:443"
MATRIX_BASE_URL = "https://matrix.robswebhub.net"

_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


@router.get("/matrix/server")
def matrix_server() -> JSONResponse:
    return JSONResponse({"m.server": MATRIX_SERVER}, headers=_CORS_HEADERS)


@router.get("/matrix/client")
def matrix_client() -> JSONResponse:
    return JSONResponse(
        {"m.homeserver": {"base_url": MATRIX_BASE_URL}}, headers=_CORS_HEADERS
    )
