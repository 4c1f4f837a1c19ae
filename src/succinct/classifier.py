"""Debounced speaking / silent classification of energy samples."""

from __future__ import annotations

import logging
from typing import Callable, Optional

logger = logging.getLogger("succinct")


def clamp_sample(sample: float) -> float:
    return min(max(float(sample), 0.0), 1.0)


class SignalClassifier:
    """Turn one energy sample per tick into a debounced speaking flag.

    A sample strictly above ``threshold`` marks speech and reloads the hold
    counter. Each quiet tick spends one unit of the counter; only once it is
    empty does the next quiet tick end the speaking state. ``hold_frames=0``
    therefore classifies every tick on its own.

    ``on_change`` is called with the new flag once per transition.
    """

    def __init__(
        self,
        threshold: float = 0.1,
        hold_frames: int = 10,
        on_change: Optional[Callable[[bool], None]] = None,
    ) -> None:
        self.threshold = threshold
        self.on_change = on_change
        self._speaking = False
        self._hold_counter = 0
        self._hold_frames = hold_frames

    @property
    def speaking(self) -> bool:
        return self._speaking

    @property
    def hold_counter(self) -> int:
        return self._hold_counter

    @property
    def hold_frames(self) -> int:
        return self._hold_frames

    @hold_frames.setter
    def hold_frames(self, value: int) -> None:
        self._hold_frames = value
        # a shorter hold applies to the quiet run already in progress
        self._hold_counter = min(self._hold_counter, value)

    def tick(self, sample: float) -> bool:
        value = clamp_sample(sample)
        if value > self.threshold:
            self._hold_counter = self._hold_frames
            if not self._speaking:
                self._set_speaking(True, value)
        elif self._hold_counter > 0:
            self._hold_counter -= 1
        elif self._speaking:
            self._set_speaking(False, value)
        return self._speaking

    def reset(self) -> None:
        self._speaking = False
        self._hold_counter = 0

    def _set_speaking(self, speaking: bool, value: float) -> None:
        self._speaking = speaking
        logger.debug("Speaking=%s level=%.3f", speaking, value)
        if self.on_change is not None:
            self.on_change(speaking)
