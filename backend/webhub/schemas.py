from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _strip_required(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{field_name} must not be empty")
    return trimmed


class MatchCreate(BaseModel):
    player1: str = Field(..., min_length=1, max_length=100)
    player2: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(extra="forbid")

    @field_validator("player1", "player2", mode="before")
    @classmethod
    def _validate_player(cls, value, info):
        trimmed = _strip_required(value, info.field_name)
        # Batch lines are whitespace separated, so identifiers cannot contain any.
        if any(ch.isspace() for ch in trimmed):
            raise ValueError(f"{info.field_name} must not contain whitespace")
        return trimmed


class MatchOut(BaseModel):
    id: str
    player1: str
    player2: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ScoreCreate(BaseModel):
    winner: str
    score: str = Field(..., description="Result as '<a>:<b>'")
    played_at: str = Field(..., description="Calendar date as YYYY-MM-DD")

    model_config = ConfigDict(extra="forbid")


class BatchCreate(BaseModel):
    raw: str = Field(..., description="One '<date> <winner> <score>' result per line")

    model_config = ConfigDict(extra="forbid")


class ScoreOut(BaseModel):
    match_id: str
    game_id: str
    winner: str
    winner_score: int
    loser_score: int
    played_at: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BatchOutcomeOut(BaseModel):
    persisted: int
    skipped: int


class MatchSummaryOut(BaseModel):
    match: MatchOut
    total_games: int
    player1_wins: int
    player2_wins: int
    recent_scores: List[ScoreOut]


class WinSeriesOut(BaseModel):
    dates: List[date]
    player1: str
    player2: str
    player1_wins: List[int]
    player2_wins: List[int]


class UserProfile(BaseModel):
    """Claims of the identity provider's ID token that the site uses."""

    sub: str
    name: Optional[str] = None
    nickname: Optional[str] = None
    picture: Optional[str] = None
    sid: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @property
    def display_name(self) -> str:
        return self.nickname or self.name or self.sub
