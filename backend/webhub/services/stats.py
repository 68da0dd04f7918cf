from __future__ import annotations

import io
from collections import defaultdict
from datetime import date
from typing import Iterable, NamedTuple, Sequence

from matplotlib.figure import Figure

from ..models import Match, Score
from ..time_utils import months_before

CHART_TITLE = "Summary of Wins"
CHART_SIZE_INCHES = (6.4, 4.8)


class WinSeries(NamedTuple):
    dates: list[date]
    player1_wins: list[int]
    player2_wins: list[int]


class MatchSummary(NamedTuple):
    total_games: int
    player1_wins: int
    player2_wins: int
    recent_scores: list[Score]


def window_start(today: date, months: int) -> date:
    """First played-at date included in the aggregation window."""
    return months_before(today, months)


def cumulative_win_series(match: Match, scores: Iterable[Score]) -> WinSeries:
    """Running win totals per player, one point per distinct played-at date.

    Dates are processed in ascending order. All results of one date are
    applied before the point for that date is emitted, so same-day order
    never changes the totals. A winner that is not ``player1`` counts for
    ``player2``.
    """
    by_date: dict[date, list[Score]] = defaultdict(list)
    for score in scores:
        by_date[score.played_at].append(score)

    series = WinSeries([], [], [])
    p1_count = p2_count = 0
    for played_at in sorted(by_date):
        for score in by_date[played_at]:
            if score.winner == match.player1:
                p1_count += 1
            else:
                p2_count += 1
        series.dates.append(played_at)
        series.player1_wins.append(p1_count)
        series.player2_wins.append(p2_count)
    return series


def summarize_match(
    match: Match, scores: Sequence[Score], recent: Sequence[Score]
) -> MatchSummary:
    p1_wins = sum(1 for s in scores if s.winner == match.player1)
    return MatchSummary(
        total_games=len(scores),
        player1_wins=p1_wins,
        player2_wins=len(scores) - p1_wins,
        recent_scores=list(recent),
    )


def plot_cumulative_wins(match: Match, series: WinSeries) -> Figure:
    """Create a matplotlib line chart of the cumulative win series.

    Builds a bare ``Figure`` instead of going through ``pyplot`` so charts
    can be rendered from worker threads."""
    fig = Figure(figsize=CHART_SIZE_INCHES)
    ax = fig.subplots()
    labels = [d.isoformat() for d in series.dates]
    ax.plot(labels, series.player1_wins, marker="o", label=f"Wins of {match.player1}")
    ax.plot(labels, series.player2_wins, marker="o", label=f"Wins of {match.player2}")
    ax.set_title(CHART_TITLE)
    ax.set_ylabel("Wins")
    ax.set_ylim(bottom=0)
    ax.legend(loc="upper left")
    ax.tick_params(axis="x", labelrotation=45)
    fig.tight_layout()
    return fig


def render_win_chart_svg(match: Match, series: WinSeries) -> bytes:
    fig = plot_cumulative_wins(match, series)
    buffer = io.BytesIO()
    fig.savefig(buffer, format="svg")
    return buffer.getvalue()
