"""Data models for Succinct."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PacingLevel(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


@dataclass
class Session:
    active: bool = False
    start_time: Optional[float] = None
    silence_start_time: Optional[float] = None
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class MonitorSnapshot:
    """State published to the host after every tick."""

    level: float
    speaking: bool
    active: bool
    elapsed_ms: float
    pacing_percent: float
    pacing: PacingLevel
