import asyncio
import logging
import os
import sys
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

sys.path.append(os.path.dirname(__file__))

from webhub.db import normalize_database_url
from webhub.models import Match
from webhub.services import match_store
from webhub.services.submissions import submit_batch
from webhub.time_utils import utcnow

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required")
DATABASE_URL = normalize_database_url(DATABASE_URL)

logger = logging.getLogger(__name__)

DEMO_MATCH_ID = "00000000-0000-4000-8000-000000000001"
DEMO_PLAYERS = ("RB", "JS")

engine = create_async_engine(DATABASE_URL, echo=False, pool_pre_ping=True)
Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _demo_sheet() -> str:
    today = utcnow().date()
    winners = [DEMO_PLAYERS[0], DEMO_PLAYERS[1], DEMO_PLAYERS[0], DEMO_PLAYERS[0], DEMO_PLAYERS[1]]
    results = ["3:1", "3:2", "2:0", "3:1", "2:1"]
    lines = []
    for offset, (winner, result) in enumerate(zip(winners, results)):
        played_at = today - timedelta(days=len(winners) - offset)
        lines.append(f"{played_at.isoformat()} {winner} {result}")
    return "\n".join(lines)


async def main():
    async with Session() as s:
        existing = (
            await s.execute(select(Match).where(Match.id == DEMO_MATCH_ID))
        ).scalar_one_or_none()
        if existing is None:
            await match_store.create_match(
                s, DEMO_PLAYERS[0], DEMO_PLAYERS[1], match_id=DEMO_MATCH_ID
            )
            outcome = await submit_batch(s, DEMO_MATCH_ID, _demo_sheet())
            logger.info("Seeded match %s with %d results", DEMO_MATCH_ID, outcome.persisted)
        else:
            logger.info("Match %s already present; nothing to do", DEMO_MATCH_ID)
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
