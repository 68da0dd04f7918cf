from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    SmallInteger,
    String,
)
from sqlalchemy.sql import func
from .db import Base


class Match(Base):
    """Two players that accumulate game results over time.

    Player identifiers are fixed at creation; there is no rename path.
    """

    __tablename__ = "match"
    id = Column(String, primary_key=True)
    player1 = Column("player_1", String, nullable=False)
    player2 = Column("player_2", String, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    def has_player(self, player: str) -> bool:
        return player == self.player1 or player == self.player2


class Score(Base):
    """One game result. Rows are append-only facts."""

    __tablename__ = "score"
    match_id = Column(String, ForeignKey("match.id"), primary_key=True)
    game_id = Column(String, primary_key=True)
    winner = Column(String, nullable=False)
    winner_score = Column(SmallInteger, nullable=False)
    loser_score = Column(SmallInteger, nullable=False)
    played_at = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            "winner_score >= loser_score",
            name="ck_score_winner_score_gte_loser_score",
        ),
        CheckConstraint("loser_score >= 0", name="ck_score_loser_score_non_negative"),
        Index("ix_score_match_id_played_at", "match_id", "played_at"),
    )


class GamekeeperPlayer(Base):
    __tablename__ = "gamekeeper_player"
    player_id = Column(String, primary_key=True)  # identity provider "sub"
    created_at = Column(DateTime, nullable=False, server_default=func.now())
