import re
from datetime import date
from typing import NamedTuple, Tuple

from ..exceptions import MalformedDate, MalformedScore

# Scores are stored as SMALLINT.
MAX_SCORE = 32767

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


class NormalizedScore(NamedTuple):
    winner_score: int
    loser_score: int
    played_at: date


def parse_score(token: str) -> Tuple[int, int]:
    """Parse a ``"<a>:<b>"`` score token into ``(winner_score, loser_score)``.

    Rules:
    - Exactly two ``:`` separated parts
    - Each part is a decimal integer (an optional sign is parsed, but
      negative values are rejected)
    - Values must fit in a SMALLINT column
    - The higher value always lands in the winner slot
    """

    parts = token.split(":")
    if len(parts) != 2:
        raise MalformedScore(token, "expected exactly two ':' separated values")

    values = []
    for part in parts:
        if not _INTEGER_RE.fullmatch(part):
            raise MalformedScore(token, f"{part!r} is not an integer")
        value = int(part)
        if value < 0:
            raise MalformedScore(token, "scores must be >= 0")
        if value > MAX_SCORE:
            raise MalformedScore(token, f"scores must be <= {MAX_SCORE}")
        values.append(value)

    first, second = values
    if first < second:
        first, second = second, first
    return first, second


def parse_played_at(token: str) -> date:
    """Parse a ``YYYY-MM-DD`` token into a calendar date."""

    if not _DATE_RE.fullmatch(token):
        raise MalformedDate(token)
    try:
        return date.fromisoformat(token)
    except ValueError:
        raise MalformedDate(token)


def normalize_result(score_token: str, date_token: str) -> NormalizedScore:
    winner_score, loser_score = parse_score(score_token)
    played_at = parse_played_at(date_token)
    return NormalizedScore(winner_score, loser_score, played_at)
