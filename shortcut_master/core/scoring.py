from __future__ import annotations

from shortcut_master.core.session import GameResult

POINTS_PER_QUESTION = 1000
MS_PER_PENALTY_POINT = 10
MISTAKE_PENALTY = 500


def score(result: GameResult) -> int:
    """Base points per question minus time and mistake penalties, floored at 0."""
    base = result.total_questions * POINTS_PER_QUESTION
    time_penalty = result.elapsed_ms // MS_PER_PENALTY_POINT
    mistake_penalty = result.mistake_count * MISTAKE_PENALTY
    return max(0, base - time_penalty - mistake_penalty)


def format_elapsed(elapsed_ms: int) -> str:
    """Render milliseconds as ``seconds.centiseconds`` (5230 -> ``"5.23"``)."""
    elapsed_ms = max(0, int(elapsed_ms))
    seconds, rest = divmod(elapsed_ms, 1000)
    return f"{seconds}.{rest // 10:02d}"
