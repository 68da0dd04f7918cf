from fastapi import HTTPException
from pydantic import BaseModel
from typing import Optional


class ProblemDetail(BaseModel):
    """RFC 7807 compliant error response."""

    type: str = "about:blank"
    title: str
    detail: Optional[str] = None
    status: int
    instance: Optional[str] = None
    code: str


class DomainException(Exception):
    """Base class for domain-specific exceptions."""

    def __init__(
        self,
        status_code: int,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        type_: str = "about:blank",
    ) -> None:
        super().__init__(detail or title)
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type = type_
        self.code = code


class ScoringError(DomainException):
    """Base class for failures of the match scoring pipeline.

    ``title`` doubles as the short, human-readable message shown next to
    the score forms; ``match_id`` is set whenever the failing request
    referenced a known match so the caller can redisplay it.
    """

    status_code_default = 400

    def __init__(
        self,
        title: str,
        *,
        code: str,
        detail: str | None = None,
        match_id: str | None = None,
    ) -> None:
        super().__init__(
            self.status_code_default,
            title,
            code=code,
            detail=detail,
        )
        self.match_id = match_id


class MatchNotFound(ScoringError):
    status_code_default = 404

    def __init__(self, match_id: str) -> None:
        super().__init__(
            "Match not found",
            code="match_not_found",
            detail=f"match '{match_id}' not found",
        )
        # match_id stays unset: there is no match to redisplay.
        self.missing_match_id = match_id


class PlayerNotInMatch(ScoringError):
    def __init__(self, match_id: str, player: str) -> None:
        super().__init__(
            "Player not in match",
            code="player_not_in_match",
            detail=f"player '{player}' does not play in match '{match_id}'",
            match_id=match_id,
        )


class MalformedScore(ScoringError):
    def __init__(self, token: str, reason: str, *, match_id: str | None = None) -> None:
        super().__init__(
            "Invalid score format",
            code="malformed_score",
            detail=f"score {token!r}: {reason}",
            match_id=match_id,
        )
        self.token = token


class MalformedDate(ScoringError):
    def __init__(self, token: str, *, match_id: str | None = None) -> None:
        super().__init__(
            "Invalid date format",
            code="malformed_date",
            detail=f"date {token!r} must use the YYYY-MM-DD format",
            match_id=match_id,
        )
        self.token = token


class DuplicateGameID(ScoringError):
    status_code_default = 409

    def __init__(self, match_id: str, game_id: str) -> None:
        super().__init__(
            "Score already recorded",
            code="duplicate_game_id",
            detail=f"game '{game_id}' already exists in match '{match_id}'",
            match_id=match_id,
        )


class DuplicateMatchID(ScoringError):
    status_code_default = 409

    def __init__(self, match_id: str) -> None:
        super().__init__(
            "Match already exists",
            code="duplicate_match_id",
            detail=f"match '{match_id}' already exists",
        )


class StorageUnavailable(ScoringError):
    status_code_default = 503

    def __init__(self, *, match_id: str | None = None) -> None:
        super().__init__(
            "Storage unavailable",
            code="storage_unavailable",
            detail="the score store could not complete the request",
            match_id=match_id,
        )


def with_match_context(exc: ScoringError, match_id: str) -> ScoringError:
    """Attach ``match_id`` to ``exc`` unless the error already carries one."""

    if exc.match_id is None and not isinstance(exc, (MatchNotFound, DuplicateMatchID)):
        exc.match_id = match_id
    return exc


def http_problem(
    status_code: int,
    detail: str,
    code: str,
    *,
    headers: Optional[dict[str, str]] = None,
) -> HTTPException:
    """Create an HTTPException with an attached problem code."""

    exc = HTTPException(status_code=status_code, detail=detail, headers=headers)
    setattr(exc, "code", code)
    return exc
