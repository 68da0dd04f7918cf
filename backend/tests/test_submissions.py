from datetime import date

import pytest

from webhub.exceptions import (
    MalformedDate,
    MalformedScore,
    MatchNotFound,
    PlayerNotInMatch,
)
from webhub.models import Match
from webhub.services import match_store, submissions
from webhub.services.submissions import parse_batch, submit_batch, submit_single_score


def _match() -> Match:
    return Match(id="m-1", player1="Alice", player2="Bob")


def test_parse_batch_accepts_well_formed_lines() -> None:
    lines = parse_batch("2024-05-01 Alice 3:1\n2024-05-02 Bob 1:2\n", _match())

    assert [line.accepted for line in lines] == [True, True]
    assert lines[1].winner == "Bob"
    assert lines[1].result.winner_score == 2
    assert lines[1].result.loser_score == 1
    assert lines[1].result.played_at == date(2024, 5, 2)


def test_parse_batch_normalizes_line_endings_and_skips_blank_lines() -> None:
    raw = "2024-05-01 Alice 3:1\r\n\r\n   \r2024-05-02   Bob\t2:0  \n"

    lines = parse_batch(raw, _match())

    assert [line.text for line in lines] == [
        "2024-05-01 Alice 3:1",
        "2024-05-02   Bob\t2:0",
    ]
    assert all(line.accepted for line in lines)


@pytest.mark.parametrize(
    "line, reason",
    [
        ("2024-05-01 Alice", "expected 3 fields"),
        ("2024-05-01 Alice 3:1 extra", "expected 3 fields"),
        ("2024-05-01 Carol 3:1", "player not in match"),
        ("2024-05-01 Alice 3-1", "invalid score format"),
        ("2024-05-01 Alice -1:2", "invalid score format"),
        ("01.05.2024 Alice 3:1", "invalid date format"),
    ],
)
def test_parse_batch_reports_skip_reason(line, reason) -> None:
    (parsed,) = parse_batch(line, _match())
    assert not parsed.accepted
    assert parsed.reason == reason


@pytest.mark.anyio
async def test_submit_single_score_persists_normalized_result(db_session):
    match = await match_store.create_match(db_session, "Alice", "Bob")

    stored = await submit_single_score(db_session, match.id, "Alice", "1:3", "2024-05-01")

    assert stored.match_id == match.id
    assert stored.winner == "Alice"
    assert (stored.winner_score, stored.loser_score) == (3, 1)
    assert stored.played_at == date(2024, 5, 1)
    assert stored.game_id
    assert stored.created_at is not None


@pytest.mark.anyio
async def test_submit_single_score_generates_unique_game_ids(db_session):
    match = await match_store.create_match(db_session, "Alice", "Bob")

    first = await submit_single_score(db_session, match.id, "Alice", "3:1", "2024-05-01")
    second = await submit_single_score(db_session, match.id, "Alice", "3:1", "2024-05-01")

    assert first.game_id != second.game_id


@pytest.mark.anyio
async def test_submit_single_score_rejects_unknown_match(db_session):
    with pytest.raises(MatchNotFound) as exc:
        await submit_single_score(db_session, "missing", "Alice", "3:1", "2024-05-01")
    assert exc.value.match_id is None


@pytest.mark.anyio
async def test_submit_single_score_rejects_outsider_without_persisting(db_session):
    match = await match_store.create_match(db_session, "Alice", "Bob")

    with pytest.raises(PlayerNotInMatch) as exc:
        await submit_single_score(db_session, match.id, "Carol", "3:1", "2024-05-01")

    assert exc.value.match_id == match.id
    assert await match_store.get_recent_scores(db_session, match.id, 10) == []


@pytest.mark.anyio
@pytest.mark.parametrize(
    "score, played_at, error",
    [
        ("3", "2024-05-01", MalformedScore),
        ("-1:2", "2024-05-01", MalformedScore),
        ("3:1", "not-a-date", MalformedDate),
    ],
)
async def test_submit_single_score_attaches_match_to_parse_errors(
    db_session, score, played_at, error
):
    match = await match_store.create_match(db_session, "Alice", "Bob")

    with pytest.raises(error) as exc:
        await submit_single_score(db_session, match.id, "Alice", score, played_at)

    assert exc.value.match_id == match.id
    assert await match_store.get_recent_scores(db_session, match.id, 10) == []


@pytest.mark.anyio
async def test_submit_batch_persists_only_valid_lines(db_session):
    match = await match_store.create_match(db_session, "Alice", "Bob")
    raw = "\n".join(
        [
            "2024-05-01 Alice 2:1",
            "this line is broken",
            "2024-05-02 Bob 3:2",
            "2024-05-03 Carol 2:0",
            "",
            "2024-13-01 Alice 2:0",
            "2024-05-04 Alice 1:1",
            "2024-05-05 Bob two:one",
        ]
    )

    outcome = await submit_batch(db_session, match.id, raw)

    assert outcome.persisted == 3
    assert outcome.skipped == 4
    stored = await match_store.get_match_scores(db_session, match.id, date(2024, 1, 1))
    assert sorted((s.played_at.day, s.winner) for s in stored) == [
        (1, "Alice"),
        (2, "Bob"),
        (4, "Alice"),
    ]


@pytest.mark.anyio
async def test_submit_batch_rejects_unknown_match(db_session):
    with pytest.raises(MatchNotFound):
        await submit_batch(db_session, "missing", "2024-05-01 Alice 2:1")


@pytest.mark.anyio
async def test_submit_batch_skips_line_the_store_rejects_and_continues(
    db_session, monkeypatch
):
    match = await match_store.create_match(db_session, "Alice", "Bob")
    match_id = match.id
    game_ids = iter(["g-1", "g-1", "g-2"])
    monkeypatch.setattr(submissions, "new_game_id", lambda: next(game_ids))
    raw = "\n".join(
        [
            "2024-05-01 Alice 2:1",
            "2024-05-02 Bob 3:2",
            "2024-05-03 Alice 2:0",
        ]
    )

    outcome = await submit_batch(db_session, match_id, raw)

    assert outcome.persisted == 2
    assert outcome.skipped == 1
    stored = await match_store.get_match_scores(db_session, match_id, date(2024, 1, 1))
    assert sorted((s.game_id, s.played_at.day) for s in stored) == [
        ("g-1", 1),
        ("g-2", 3),
    ]
