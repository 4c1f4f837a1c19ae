"""Tick loop tying energy source, classifier, timer and pacing together."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from .classifier import SignalClassifier, clamp_sample
from .config import Config, validate_config
from .models import MonitorSnapshot
from .pacing import level_for_percent, pacing_percent
from .timer import SessionTimer, monotonic_ms

logger = logging.getLogger("succinct")


class LevelSource(Protocol):
    def start(self) -> None: ...

    def read(self) -> float: ...

    def stop(self) -> None: ...


class Scheduler(Protocol):
    """Anything with tkinter-style ``after`` / ``after_cancel``."""

    def after(self, ms: int, func: Callable[[], None]) -> Any: ...

    def after_cancel(self, handle: Any) -> None: ...


class SpeechMonitor:
    """Single owner of one classifier, one session timer and one source.

    ``tick`` runs one classification / timing step synchronously. ``start``
    opens the source and, when a scheduler is given, keeps re-arming ``tick``
    every ``config.tick_ms``; ``stop`` cancels the pending tick and releases
    the source.
    """

    def __init__(
        self,
        config: Config,
        source: LevelSource,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], float] = monotonic_ms,
        on_speaking_change: Optional[Callable[[bool], None]] = None,
        on_update: Optional[Callable[[MonitorSnapshot], None]] = None,
    ) -> None:
        self.config = validate_config(config)
        self.source = source
        self.scheduler = scheduler
        self.on_update = on_update
        self.classifier = SignalClassifier(
            threshold=config.threshold,
            hold_frames=config.hold_frames,
            on_change=on_speaking_change,
        )
        self.timer = SessionTimer(
            silence_timeout_ms=config.silence_timeout_ms,
            clock=clock,
        )
        self._job = None
        self._running = False
        self._last: Optional[MonitorSnapshot] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_snapshot(self) -> Optional[MonitorSnapshot]:
        return self._last

    def apply_config(self, config: Config) -> None:
        validate_config(config)
        self.config = config
        self.classifier.threshold = config.threshold
        self.classifier.hold_frames = config.hold_frames
        self.timer.silence_timeout_ms = config.silence_timeout_ms
        logger.debug(
            "Config applied: threshold=%s hold_frames=%s silence_timeout_ms=%s target_ms=%s",
            config.threshold,
            config.hold_frames,
            config.silence_timeout_ms,
            config.target_duration_ms,
        )

    def tick(self) -> MonitorSnapshot:
        sample = clamp_sample(self.source.read())
        speaking = self.classifier.tick(sample)
        elapsed = self.timer.update(speaking)
        percent = pacing_percent(elapsed, self.config.target_duration_ms)
        snapshot = MonitorSnapshot(
            level=sample,
            speaking=speaking,
            active=self.timer.active,
            elapsed_ms=elapsed,
            pacing_percent=percent,
            pacing=level_for_percent(percent),
        )
        self._last = snapshot
        if self.on_update is not None:
            self.on_update(snapshot)
        return snapshot

    def reset_session(self) -> None:
        self.timer.reset_session()

    def start(self) -> None:
        if self._running:
            return
        # SourceUnavailable propagates; nothing is scheduled and the session stays idle.
        self.source.start()
        self._running = True
        logger.info("Monitor started")
        if self.scheduler is not None:
            self._job = self.scheduler.after(self.config.tick_ms, self._scheduled_tick)

    def stop(self) -> None:
        if self._job is not None and self.scheduler is not None:
            self.scheduler.after_cancel(self._job)
        self._job = None
        if not self._running:
            return
        self._running = False
        try:
            self.source.stop()
        finally:
            self.classifier.reset()
            self.timer.reset_session()
            logger.info("Monitor stopped")

    def _scheduled_tick(self) -> None:
        self._job = None
        if not self._running:
            return
        try:
            self.tick()
        finally:
            if self._running and self.scheduler is not None:
                self._job = self.scheduler.after(self.config.tick_ms, self._scheduled_tick)
