"""Server-rendered scorekeeping pages and their form endpoints.

Form submissions always answer ``303 See Other`` back to ``/scores``. The
query string carries the match to redisplay and, on failure, the error
message to show next to the forms.
"""

import logging
import uuid
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import RECENT_SCORES_LIMIT, SCORE_WINDOW_MONTHS
from ..db import get_session
from ..exceptions import MatchNotFound, ScoringError, StorageUnavailable
from ..models import Match, Score
from ..services import match_store
from ..services.stats import (
    cumulative_win_series,
    render_win_chart_svg,
    summarize_match,
    window_start,
)
from ..services.submissions import submit_batch, submit_single_score
from ..sessions import SessionState, get_session_state
from ..templating import render_page
from ..time_utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scores", tags=["scores"])

INVALID_MATCHUP_ID = "Invalid matchup ID"


def parse_match_id(raw: str | None) -> str | None:
    """Return the canonical form of a UUID match id, or ``None``."""
    if not raw:
        return None
    try:
        return str(uuid.UUID(raw.strip()))
    except ValueError:
        return None


def scores_url(match_id: str | None = None, error: str | None = None) -> str:
    params = {}
    if match_id:
        params["matchup_id"] = match_id
    if error:
        params["error"] = error
    if not params:
        return "/scores"
    return f"/scores?{urlencode(params)}"


def _redirect(match_id: str | None = None, error: str | None = None) -> RedirectResponse:
    return RedirectResponse(scores_url(match_id, error), status_code=303)


def _error_redirect(exc: ScoringError, match_id: str) -> RedirectResponse:
    if isinstance(exc, MatchNotFound):
        return _redirect(error=exc.title)
    return _redirect(exc.match_id or match_id, exc.title)


def _missing_fields(**fields: str) -> list[str]:
    return [name for name, value in fields.items() if not value.strip()]


async def load_scores_in_window(session: AsyncSession, match_id: str) -> list[Score]:
    since = window_start(utcnow().date(), SCORE_WINDOW_MONTHS)
    return await match_store.get_match_scores(session, match_id, since)


async def _load_match_views(session: AsyncSession, match: Match) -> dict:
    try:
        scores = await load_scores_in_window(session, match.id)
    except StorageUnavailable:
        scores = []
    try:
        recent = await match_store.get_recent_scores(
            session, match.id, RECENT_SCORES_LIMIT
        )
    except StorageUnavailable:
        recent = []

    return {
        "summary": summarize_match(match, scores, recent),
        "series": cumulative_win_series(match, scores),
    }


@router.get("")
async def scores_index(
    request: Request,
    matchup_id: str = Query(""),
    error: str = Query(""),
    session: AsyncSession = Depends(get_session),
    session_state: SessionState = Depends(get_session_state),
):
    context = {"match": None, "summary": None, "series": None, "error": error}

    if matchup_id:
        match_id = parse_match_id(matchup_id)
        if match_id is None:
            context["error"] = INVALID_MATCHUP_ID
        else:
            try:
                match = await match_store.get_match(session, match_id)
            except ScoringError as exc:
                context["error"] = exc.title
            else:
                context["match"] = match
                context.update(await _load_match_views(session, match))

    return render_page(request, "scores.html", session_state, context)


@router.post("/single")
async def scores_single(
    matchup_id: str = Form(""),
    winner_initials: str = Form(""),
    score: str = Form(""),
    played_at: str = Form(""),
    session: AsyncSession = Depends(get_session),
):
    match_id = parse_match_id(matchup_id)
    if match_id is None:
        return _redirect(error=INVALID_MATCHUP_ID)

    missing = _missing_fields(
        winner_initials=winner_initials, score=score, played_at=played_at
    )
    if missing:
        return _redirect(match_id, f"Missing required field: {', '.join(missing)}")

    try:
        await submit_single_score(
            session,
            match_id,
            winner_initials.strip(),
            score.strip(),
            played_at.strip(),
        )
    except ScoringError as exc:
        return _error_redirect(exc, match_id)

    return _redirect(match_id)


@router.post("/batch")
async def scores_batch(
    matchup_id: str = Form(""),
    raw_matches_list: str = Form(""),
    session: AsyncSession = Depends(get_session),
):
    match_id = parse_match_id(matchup_id)
    if match_id is None:
        return _redirect(error=INVALID_MATCHUP_ID)
    if not raw_matches_list.strip():
        return _redirect(match_id, "Missing required field: raw_matches_list")

    try:
        await submit_batch(session, match_id, raw_matches_list)
    except ScoringError as exc:
        return _error_redirect(exc, match_id)

    return _redirect(match_id)


@router.get("/single-form")
async def single_score_form(
    request: Request,
    matchup_id: str = Query(""),
    session_state: SessionState = Depends(get_session_state),
):
    return render_page(
        request,
        "partials/single_score_form.html",
        session_state,
        {"matchup_id": parse_match_id(matchup_id)},
    )


@router.get("/batch-form")
async def batch_score_form(
    request: Request,
    matchup_id: str = Query(""),
    session_state: SessionState = Depends(get_session_state),
):
    return render_page(
        request,
        "partials/batch_score_form.html",
        session_state,
        {"matchup_id": parse_match_id(matchup_id)},
    )


@router.get("/chart/{match_id}")
async def scores_chart(match_id: str, session: AsyncSession = Depends(get_session)):
    canonical_id = parse_match_id(match_id)
    if canonical_id is None:
        return PlainTextResponse("Invalid match ID", status_code=400)

    try:
        match = await match_store.get_match(session, canonical_id)
    except MatchNotFound:
        return PlainTextResponse("Match not found", status_code=404)
    except StorageUnavailable:
        return PlainTextResponse("Failed to get match", status_code=500)

    try:
        scores = await load_scores_in_window(session, canonical_id)
    except StorageUnavailable:
        return PlainTextResponse("Failed to get scores", status_code=500)

    series = cumulative_win_series(match, scores)
    svg = await run_in_threadpool(render_win_chart_svg, match, series)
    return Response(content=svg, media_type="image/svg+xml")
