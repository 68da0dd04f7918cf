"""Cookie-backed session state.

The session is a single cookie holding a PyJWT-signed payload. Reading it
always yields one of three states: an authenticated profile, an anonymous
visitor, or a corrupt cookie (bad signature, expired, or a profile that
does not validate). A corrupt cookie is never treated as logged in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import jwt
import sentry_sdk
from fastapi import Depends, Request, Response
from pydantic import ValidationError

from .config import (
    SESSION_COOKIE,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_SECONDS,
    get_session_secret,
)
from .exceptions import http_problem
from .schemas import UserProfile

logger = logging.getLogger(__name__)

SESSION_ALG = "HS256"
LOGIN_PATH = "/login"


class SessionStatus(str, Enum):
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus
    profile: UserProfile | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def is_logged_in(self) -> bool:
        return self.status is SessionStatus.AUTHENTICATED


ANONYMOUS = SessionState(SessionStatus.ANONYMOUS)
CORRUPT = SessionState(SessionStatus.CORRUPT)


def encode_session(data: dict[str, Any], *, now: datetime | None = None) -> str:
    issued = now or datetime.now(timezone.utc)
    payload = {
        "data": data,
        "iat": issued,
        "exp": issued + timedelta(seconds=SESSION_MAX_AGE_SECONDS),
    }
    return jwt.encode(payload, get_session_secret(), algorithm=SESSION_ALG)


def decode_session(token: str | None) -> SessionState:
    if not token:
        return ANONYMOUS

    try:
        payload = jwt.decode(token, get_session_secret(), algorithms=[SESSION_ALG])
    except jwt.InvalidTokenError as exc:
        logger.warning("Discarding unreadable session cookie: %s", exc)
        return CORRUPT

    data = payload.get("data")
    if not isinstance(data, dict):
        logger.warning("Discarding session cookie without a data object")
        return CORRUPT

    raw_profile = data.get("profile")
    if raw_profile is None:
        return SessionState(SessionStatus.ANONYMOUS, data=data)

    try:
        profile = UserProfile.model_validate(raw_profile)
    except ValidationError as exc:
        logger.warning("Discarding session cookie with invalid profile: %s", exc)
        return CORRUPT

    return SessionState(SessionStatus.AUTHENTICATED, profile=profile, data=data)


def read_session(request: Request) -> SessionState:
    return decode_session(request.cookies.get(SESSION_COOKIE))


def write_session(response: Response, data: dict[str, Any]) -> None:
    response.set_cookie(
        SESSION_COOKIE,
        encode_session(data),
        max_age=SESSION_MAX_AGE_SECONDS,
        path="/",
        secure=SESSION_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def clear_session(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE, path="/")


def get_session_state(request: Request) -> SessionState:
    """Request-scoped session dependency."""

    state = read_session(request)
    if state.profile is not None:
        sentry_sdk.set_user({"id": state.profile.name or state.profile.sub})
    return state


def _cookie_deletion_header() -> str:
    response = Response()
    clear_session(response)
    return response.headers["set-cookie"]


def require_profile(state: SessionState = Depends(get_session_state)) -> UserProfile:
    if state.profile is None:
        headers = {"Location": LOGIN_PATH}
        if state.status is SessionStatus.CORRUPT:
            headers["Set-Cookie"] = _cookie_deletion_header()
        raise http_problem(303, "Login required", "login_required", headers=headers)
    return state.profile
