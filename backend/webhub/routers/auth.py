import logging
import os
import secrets

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from ..config import APP_ENVIRONMENT
from ..services.auth0 import (
    Authenticator,
    IdTokenError,
    TokenExchangeError,
    get_authenticator,
)
from ..sessions import SessionState, clear_session, get_session_state, write_session

logger = logging.getLogger(__name__)

STATE_BYTES = 32


def _rate_limits_disabled() -> bool:
    return (os.getenv("DISABLE_AUTH_RATE_LIMITS") or "").lower() == "true"


def _get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        parts = [ip.strip() for ip in forwarded.split(",") if ip.strip()]
        if parts:
            return parts[-1]
    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip
    return request.client.host if request.client else ""


def login_rate_limit() -> str:
    if _rate_limits_disabled():
        return "1000/second"
    return "10/minute"


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    detail = exc.detail if isinstance(exc.detail, str) else ""
    if detail:
        message = f"rate limit exceeded: {detail}"
    else:
        message = "rate limit exceeded: please wait before trying to log in again."
    return JSONResponse(
        status_code=429,
        content={
            "detail": message,
            "code": "rate_limit_exceeded",
        },
    )


limiter = Limiter(key_func=_get_client_ip)
router = APIRouter(tags=["auth"])


def generate_state() -> str:
    return secrets.token_urlsafe(STATE_BYTES)


@router.get("/login")
@limiter.limit(login_rate_limit)
async def login(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
):
    state = generate_state()
    response = RedirectResponse(authenticator.authorize_url(state), status_code=307)
    # A fresh session: any previous profile is dropped on a new login.
    write_session(response, {"state": state})
    return response


@router.get("/callback")
async def callback(
    request: Request,
    state: str = Query(""),
    code: str = Query(""),
    session_state: SessionState = Depends(get_session_state),
    authenticator: Authenticator = Depends(get_authenticator),
):
    expected_state = session_state.data.get("state")
    if not state or not expected_state or not secrets.compare_digest(
        state.encode(), str(expected_state).encode()
    ):
        return PlainTextResponse("Invalid state parameter.", status_code=400)

    try:
        token = await authenticator.exchange(code)
    except TokenExchangeError:
        return PlainTextResponse(
            "Failed to convert an authorization code into a token.", status_code=401
        )

    try:
        claims = await run_in_threadpool(authenticator.verify_id_token, token["id_token"])
    except IdTokenError:
        return PlainTextResponse("Failed to verify ID Token.", status_code=500)

    logger.info("User %s logged in", claims.get("sub"))
    response = RedirectResponse("/", status_code=307)
    write_session(response, {"profile": claims})
    return response


def _return_to(request: Request) -> str:
    scheme = "http" if APP_ENVIRONMENT == "dev" else "https"
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"


@router.get("/logout")
async def logout(
    request: Request,
    authenticator: Authenticator = Depends(get_authenticator),
):
    response = RedirectResponse(
        authenticator.logout_url(_return_to(request)), status_code=307
    )
    clear_session(response)
    return response
