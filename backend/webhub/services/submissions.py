"""Recording game results, one at a time or from a pasted score sheet."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import (
    MalformedDate,
    MalformedScore,
    PlayerNotInMatch,
    ScoringError,
    with_match_context,
)
from ..models import Match, Score
from ..time_utils import utcnow
from . import match_store
from .validation import NormalizedScore, normalize_result

logger = logging.getLogger(__name__)


def new_game_id() -> str:
    return str(uuid.uuid4())


async def _store_result(
    session: AsyncSession, match_id: str, winner: str, result: NormalizedScore
) -> Score:
    return await match_store.create_score(
        session,
        match_id=match_id,
        game_id=new_game_id(),
        winner=winner,
        winner_score=result.winner_score,
        loser_score=result.loser_score,
        played_at=result.played_at,
        created_at=utcnow(),
    )


async def submit_single_score(
    session: AsyncSession,
    match_id: str,
    winner: str,
    score: str,
    played_at: str,
) -> Score:
    """Validate one result against its match and store it.

    Raises ``MatchNotFound``, ``PlayerNotInMatch``, ``MalformedScore``,
    ``MalformedDate``, ``DuplicateGameID`` or ``StorageUnavailable``. Every
    error other than ``MatchNotFound`` carries ``match_id``.
    """

    match = await match_store.get_match(session, match_id)
    if not match.has_player(winner):
        raise PlayerNotInMatch(match_id, winner)

    try:
        result = normalize_result(score, played_at)
        stored = await _store_result(session, match_id, winner, result)
    except ScoringError as exc:
        raise with_match_context(exc, match_id)

    logger.info(
        "Recorded %s %d:%d on %s in match %s",
        winner,
        stored.winner_score,
        stored.loser_score,
        stored.played_at.isoformat(),
        match_id,
    )
    return stored


@dataclass(frozen=True)
class BatchLine:
    line_number: int
    text: str
    winner: Optional[str] = None
    result: Optional[NormalizedScore] = None
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.result is not None


@dataclass
class BatchOutcome:
    persisted: int = 0
    skipped: int = 0
    lines: list[BatchLine] = field(default_factory=list)


def _split_lines(raw: str) -> list[str]:
    return raw.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_batch(raw: str, match: Match) -> list[BatchLine]:
    """Parse a score sheet of ``<date> <winner> <score>`` lines.

    Blank lines are dropped. Every other line is returned, either carrying
    its normalized result or the reason it is skipped.
    """

    lines: list[BatchLine] = []
    for number, raw_line in enumerate(_split_lines(raw), start=1):
        text = raw_line.strip()
        if not text:
            continue

        tokens = text.split()
        if len(tokens) != 3:
            lines.append(BatchLine(number, text, reason="expected 3 fields"))
            continue

        date_token, winner, score_token = tokens
        if not match.has_player(winner):
            lines.append(BatchLine(number, text, reason="player not in match"))
            continue

        try:
            result = normalize_result(score_token, date_token)
        except (MalformedScore, MalformedDate) as exc:
            lines.append(BatchLine(number, text, reason=exc.title.lower()))
            continue

        lines.append(BatchLine(number, text, winner=winner, result=result))
    return lines


async def submit_batch(session: AsyncSession, match_id: str, raw: str) -> BatchOutcome:
    """Store every valid line of ``raw`` independently.

    Only ``MatchNotFound`` aborts the batch. Malformed lines and lines the
    store rejects are counted as skipped.
    """

    match = await match_store.get_match(session, match_id)
    outcome = BatchOutcome(lines=parse_batch(raw, match))

    for line in outcome.lines:
        if not line.accepted:
            outcome.skipped += 1
            logger.debug(
                "Skipping line %d of batch for match %s: %s",
                line.line_number,
                match_id,
                line.reason,
            )
            continue
        try:
            await _store_result(session, match_id, line.winner, line.result)
        except ScoringError as exc:
            outcome.skipped += 1
            logger.warning(
                "Could not store line %d of batch for match %s: %s",
                line.line_number,
                match_id,
                exc.title,
            )
            continue
        outcome.persisted += 1

    logger.info(
        "Batch for match %s: %d stored, %d skipped",
        match_id,
        outcome.persisted,
        outcome.skipped,
    )
    return outcome
