from datetime import timedelta

import pytest

from webhub.config import API_PREFIX
from webhub.time_utils import utcnow

pytestmark = pytest.mark.anyio

BASE = f"{API_PREFIX}/v0/matches"
UNKNOWN_ID = "3f2504e0-4f89-41d3-9a0c-0305e82c3301"


def _days_ago(days: int) -> str:
    return (utcnow().date() - timedelta(days=days)).isoformat()


async def _create(client, p1="Alice", p2="Bob"):
    resp = await client.post(BASE, json={"player1": p1, "player2": p2})
    assert resp.status_code == 201
    return resp.json()


async def test_create_match(client):
    body = await _create(client, " Alice ", "Bob")
    assert body["player1"] == "Alice"
    assert body["player2"] == "Bob"
    assert body["id"]
    assert body["created_at"]


@pytest.mark.parametrize(
    "payload",
    [
        {"player1": "Alice"},
        {"player1": "", "player2": "Bob"},
        {"player1": "Al ice", "player2": "Bob"},
        {"player1": "Alice", "player2": "Bob", "extra": 1},
    ],
)
async def test_create_match_validation(client, payload):
    resp = await client.post(BASE, json=payload)
    assert resp.status_code == 422


async def test_record_and_summarize(client):
    match = await _create(client)
    url = f"{BASE}/{match['id']}"

    resp = await client.post(
        f"{url}/scores",
        json={"winner": "Bob", "score": "2:5", "played_at": _days_ago(1)},
    )
    assert resp.status_code == 201
    score = resp.json()
    assert score["winner"] == "Bob"
    assert (score["winner_score"], score["loser_score"]) == (5, 2)

    summary = (await client.get(url)).json()
    assert summary["match"]["id"] == match["id"]
    assert summary["total_games"] == 1
    assert summary["player1_wins"] == 0
    assert summary["player2_wins"] == 1
    assert [s["game_id"] for s in summary["recent_scores"]] == [score["game_id"]]


async def test_record_score_errors_are_problem_details(client):
    match = await _create(client)

    resp = await client.post(
        f"{BASE}/{match['id']}/scores",
        json={"winner": "Carol", "score": "3:1", "played_at": _days_ago(1)},
    )

    assert resp.status_code == 400
    assert resp.headers["content-type"].startswith("application/problem+json")
    assert resp.json()["title"] == "Player not in match"


async def test_record_score_rejects_trailing_newline(client):
    match = await _create(client)

    resp = await client.post(
        f"{BASE}/{match['id']}/scores",
        json={"winner": "Alice", "score": "3:1\n", "played_at": _days_ago(1)},
    )

    assert resp.status_code == 400
    assert resp.json()["title"] == "Invalid score format"


async def test_unknown_match_is_404(client):
    for url in (f"{BASE}/{UNKNOWN_ID}", f"{BASE}/not-a-uuid", f"{BASE}/{UNKNOWN_ID}/scores"):
        resp = await client.get(url)
        assert resp.status_code == 404, url
        assert resp.json()["title"] == "Match not found"


async def test_batch_and_series(client):
    match = await _create(client)
    url = f"{BASE}/{match['id']}"
    raw = "\n".join(
        [
            f"{_days_ago(5)} Alice 3:1",
            f"{_days_ago(4)} Bob 3:2",
            f"{_days_ago(3)} Bob 2:0",
            "not a result",
        ]
    )

    resp = await client.post(f"{url}/scores/batch", json={"raw": raw})
    assert resp.json() == {"persisted": 3, "skipped": 1}

    series = (await client.get(f"{url}/series")).json()
    assert series["dates"] == [_days_ago(5), _days_ago(4), _days_ago(3)]
    assert series["player1_wins"] == [1, 1, 1]
    assert series["player2_wins"] == [0, 1, 2]


async def test_list_scores_since(client):
    match = await _create(client)
    url = f"{BASE}/{match['id']}"
    raw = f"{_days_ago(10)} Alice 3:1\n{_days_ago(2)} Bob 3:2"
    await client.post(f"{url}/scores/batch", json={"raw": raw})

    everything = (await client.get(f"{url}/scores")).json()
    recent = (await client.get(f"{url}/scores", params={"since": _days_ago(5)})).json()

    assert [s["winner"] for s in everything] == ["Bob", "Alice"]
    assert [s["winner"] for s in recent] == ["Bob"]
