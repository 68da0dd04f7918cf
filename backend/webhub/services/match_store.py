"""Persistence of matches and their game results.

Every write commits on its own. Integrity errors are translated into the
scoring error taxonomy; any other database failure surfaces as
``StorageUnavailable``. Nothing here retries.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..db_errors import is_foreign_key_violation, is_unique_violation
from ..exceptions import (
    DuplicateGameID,
    DuplicateMatchID,
    MatchNotFound,
    StorageUnavailable,
)
from ..models import Match, Score
from ..time_utils import utcnow

logger = logging.getLogger(__name__)


async def create_match(
    session: AsyncSession,
    player1: str,
    player2: str,
    *,
    match_id: str | None = None,
    created_at: datetime | None = None,
) -> Match:
    match = Match(
        id=match_id or str(uuid.uuid4()),
        player1=player1,
        player2=player2,
        created_at=created_at or utcnow(),
    )
    session.add(match)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_unique_violation(exc):
            raise DuplicateMatchID(match.id) from exc
        logger.exception("Failed to create match %s", match.id)
        raise StorageUnavailable() from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to create match %s", match.id)
        raise StorageUnavailable() from exc

    logger.info("Created match %s (%s vs %s)", match.id, player1, player2)
    return match


async def get_match(session: AsyncSession, match_id: str) -> Match:
    try:
        match = await session.get(Match, match_id)
    except SQLAlchemyError as exc:
        logger.exception("Failed to load match %s", match_id)
        raise StorageUnavailable(match_id=match_id) from exc
    if match is None:
        raise MatchNotFound(match_id)
    return match


async def create_score(
    session: AsyncSession,
    *,
    match_id: str,
    game_id: str,
    winner: str,
    winner_score: int,
    loser_score: int,
    played_at: date,
    created_at: datetime,
) -> Score:
    score = Score(
        match_id=match_id,
        game_id=game_id,
        winner=winner,
        winner_score=winner_score,
        loser_score=loser_score,
        played_at=played_at,
        created_at=created_at,
    )
    session.add(score)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_foreign_key_violation(exc):
            raise MatchNotFound(match_id) from exc
        if is_unique_violation(exc):
            raise DuplicateGameID(match_id, game_id) from exc
        logger.exception("Failed to store score %s for match %s", game_id, match_id)
        raise StorageUnavailable(match_id=match_id) from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Failed to store score %s for match %s", game_id, match_id)
        raise StorageUnavailable(match_id=match_id) from exc

    return score


async def get_match_scores(
    session: AsyncSession, match_id: str, since: date
) -> list[Score]:
    """Return the match's scores played on or after ``since``, newest first."""

    stmt = (
        select(Score)
        .where(Score.match_id == match_id, Score.played_at >= since)
        .order_by(Score.played_at.desc(), Score.created_at.desc())
    )
    try:
        rows = (await session.execute(stmt)).scalars().all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load scores of match %s", match_id)
        raise StorageUnavailable(match_id=match_id) from exc
    return list(rows)


async def get_recent_scores(
    session: AsyncSession, match_id: str, limit: int
) -> list[Score]:
    stmt = (
        select(Score)
        .where(Score.match_id == match_id)
        .order_by(Score.played_at.desc(), Score.created_at.desc())
        .limit(limit)
    )
    try:
        rows = (await session.execute(stmt)).scalars().all()
    except SQLAlchemyError as exc:
        logger.exception("Failed to load recent scores of match %s", match_id)
        raise StorageUnavailable(match_id=match_id) from exc
    return list(rows)
