"""Traffic-light pacing against a target duration."""

from __future__ import annotations

from .errors import ConfigurationError
from .models import PacingLevel

YELLOW_PERCENT = 80.0
RED_PERCENT = 100.0


def pacing_percent(elapsed_ms: float, target_ms: float) -> float:
    if target_ms <= 0:
        raise ConfigurationError("target_duration_ms must be > 0.")
    return min(max(elapsed_ms / target_ms * 100.0, 0.0), 100.0)


def level_for_percent(percent: float) -> PacingLevel:
    if percent >= RED_PERCENT:
        return PacingLevel.RED
    if percent >= YELLOW_PERCENT:
        return PacingLevel.YELLOW
    return PacingLevel.GREEN


def level(elapsed_ms: float, target_ms: float) -> PacingLevel:
    return level_for_percent(pacing_percent(elapsed_ms, target_ms))


def format_elapsed(elapsed_ms: float) -> str:
    seconds = int(max(elapsed_ms, 0) // 1000)
    mins, secs = divmod(seconds, 60)
    return f"{mins}:{secs:02d}"
