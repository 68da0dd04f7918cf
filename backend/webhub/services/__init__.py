"""Match scoring services: parsing, persistence and aggregation."""

from .validation import NormalizedScore, normalize_result, parse_played_at, parse_score
from .submissions import (
    BatchLine,
    BatchOutcome,
    parse_batch,
    submit_batch,
    submit_single_score,
)
from .stats import (
    MatchSummary,
    WinSeries,
    cumulative_win_series,
    render_win_chart_svg,
    summarize_match,
    window_start,
)

__all__ = [
    "NormalizedScore",
    "normalize_result",
    "parse_played_at",
    "parse_score",
    "BatchLine",
    "BatchOutcome",
    "parse_batch",
    "submit_batch",
    "submit_single_score",
    "MatchSummary",
    "WinSeries",
    "cumulative_win_series",
    "render_win_chart_svg",
    "summarize_match",
    "window_start",
]
