# backend/webhub/routers/matches.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import RECENT_SCORES_LIMIT, SCORE_WINDOW_MONTHS
from ..db import get_session
from ..exceptions import MatchNotFound
from ..schemas import (
    BatchCreate,
    BatchOutcomeOut,
    MatchCreate,
    MatchOut,
    MatchSummaryOut,
    ScoreCreate,
    ScoreOut,
    WinSeriesOut,
)
from ..services import match_store
from ..services.stats import cumulative_win_series, summarize_match, window_start
from ..services.submissions import submit_batch, submit_single_score
from ..time_utils import utcnow
from .scores import parse_match_id

# Resource-only prefix; versioning is added in main.py
router = APIRouter(prefix="/matches", tags=["matches"])


def _match_id_or_404(match_id: str) -> str:
    canonical = parse_match_id(match_id)
    if canonical is None:
        raise MatchNotFound(match_id)
    return canonical


def _since_or_default(since: Optional[date]) -> date:
    if since is not None:
        return since
    return window_start(utcnow().date(), SCORE_WINDOW_MONTHS)


# POST /api/v0/matches
@router.post("", response_model=MatchOut, status_code=201)
async def create_match(body: MatchCreate, session: AsyncSession = Depends(get_session)):
    match = await match_store.create_match(session, body.player1, body.player2)
    return MatchOut.model_validate(match)


@router.get("/{match_id}", response_model=MatchSummaryOut)
async def get_match_summary(match_id: str, session: AsyncSession = Depends(get_session)):
    match_id = _match_id_or_404(match_id)
    match = await match_store.get_match(session, match_id)
    scores = await match_store.get_match_scores(
        session, match_id, _since_or_default(None)
    )
    recent = await match_store.get_recent_scores(session, match_id, RECENT_SCORES_LIMIT)
    summary = summarize_match(match, scores, recent)
    return MatchSummaryOut(
        match=MatchOut.model_validate(match),
        total_games=summary.total_games,
        player1_wins=summary.player1_wins,
        player2_wins=summary.player2_wins,
        recent_scores=[ScoreOut.model_validate(s) for s in summary.recent_scores],
    )


@router.get("/{match_id}/scores", response_model=list[ScoreOut])
async def list_scores(
    match_id: str,
    since: Optional[date] = Query(None, description="Include results played on or after this date"),
    session: AsyncSession = Depends(get_session),
):
    match_id = _match_id_or_404(match_id)
    await match_store.get_match(session, match_id)
    scores = await match_store.get_match_scores(session, match_id, _since_or_default(since))
    return [ScoreOut.model_validate(s) for s in scores]


@router.post("/{match_id}/scores", response_model=ScoreOut, status_code=201)
async def record_score(
    match_id: str, body: ScoreCreate, session: AsyncSession = Depends(get_session)
):
    match_id = _match_id_or_404(match_id)
    score = await submit_single_score(
        session, match_id, body.winner, body.score, body.played_at
    )
    return ScoreOut.model_validate(score)


@router.post("/{match_id}/scores/batch", response_model=BatchOutcomeOut)
async def record_batch(
    match_id: str, body: BatchCreate, session: AsyncSession = Depends(get_session)
):
    match_id = _match_id_or_404(match_id)
    outcome = await submit_batch(session, match_id, body.raw)
    return BatchOutcomeOut(persisted=outcome.persisted, skipped=outcome.skipped)


@router.get("/{match_id}/series", response_model=WinSeriesOut)
async def win_series(
    match_id: str,
    since: Optional[date] = Query(None),
    session: AsyncSession = Depends(get_session),
):
    match_id = _match_id_or_404(match_id)
    match = await match_store.get_match(session, match_id)
    scores = await match_store.get_match_scores(session, match_id, _since_or_default(since))
    series = cumulative_win_series(match, scores)
    return WinSeriesOut(
        dates=series.dates,
        player1=match.player1,
        player2=match.player2,
        player1_wins=series.player1_wins,
        player2_wins=series.player2_wins,
    )
