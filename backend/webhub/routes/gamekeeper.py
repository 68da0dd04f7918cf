import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db import get_session
from ..exceptions import http_problem
from ..models import GamekeeperPlayer
from ..schemas import UserProfile
from ..sessions import SessionState, get_session_state, require_profile
from ..templating import render_page
from ..time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/gamekeeper", tags=["gamekeeper"])


async def _get_player(session: AsyncSession, player_id: str) -> GamekeeperPlayer | None:
    try:
        return await session.get(GamekeeperPlayer, player_id)
    except SQLAlchemyError:
        logger.exception("Failed to read player %s", player_id)
        raise http_problem(500, "Failed to read players", "player_read_failed")


@router.get("")
async def gamekeeper_index(
    request: Request,
    profile: UserProfile = Depends(require_profile),
    session_state: SessionState = Depends(get_session_state),
    session: AsyncSession = Depends(get_session),
):
    player = await _get_player(session, profile.sub)
    if player is None:
        return RedirectResponse("/gamekeeper/signup", status_code=303)
    return render_page(request, "gamekeeper.html", session_state, {"player": player})


@router.get("/signup")
async def signup_page(
    request: Request,
    profile: UserProfile = Depends(require_profile),
    session_state: SessionState = Depends(get_session_state),
    session: AsyncSession = Depends(get_session),
):
    if await _get_player(session, profile.sub) is not None:
        return RedirectResponse("/gamekeeper", status_code=303)
    return render_page(request, "gamekeeper_signup.html", session_state, {"error": ""})


@router.post("/signup")
async def signup(
    profile: UserProfile = Depends(require_profile),
    session: AsyncSession = Depends(get_session),
):
    session.add(GamekeeperPlayer(player_id=profile.sub, created_at=utcnow()))
    try:
        await session.commit()
    except IntegrityError:
        # Already signed up; send them on to their page all the same.
        await session.rollback()
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Failed to create player %s", profile.sub)
        raise http_problem(500, "Could not sign up", "signup_failed")
    else:
        logger.info("Signed up gamekeeper player %s", profile.sub)

    return PlainTextResponse(
        "Signup successful",
        status_code=201,
        headers={"HX-Redirect": "/gamekeeper"},
    )
