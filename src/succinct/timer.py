"""Session timing with auto-reset after sustained silence."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .errors import ConfigurationError
from .models import Session

logger = logging.getLogger("succinct")


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class SessionTimer:
    """Track one continuous speaking session.

    Elapsed time is always ``now - start_time`` so delayed or skipped ticks
    never lose time. It keeps advancing through silence until the silence
    has lasted longer than ``silence_timeout_ms``, at which point the session
    drops back to idle.
    """

    def __init__(
        self,
        silence_timeout_ms: float = 2000,
        clock: Callable[[], float] = monotonic_ms,
        on_session_change: Optional[Callable[[bool], None]] = None,
    ) -> None:
        if not callable(clock):
            raise ConfigurationError("Session timer clock must be callable.")
        self.silence_timeout_ms = silence_timeout_ms
        self.on_session_change = on_session_change
        self._clock = clock
        self._session = Session()

    @property
    def active(self) -> bool:
        return self._session.active

    @property
    def elapsed_ms(self) -> float:
        return self._session.elapsed_ms

    @property
    def start_time(self) -> Optional[float]:
        return self._session.start_time

    @property
    def silence_start_time(self) -> Optional[float]:
        return self._session.silence_start_time

    def update(self, speaking: bool) -> float:
        now = self._clock()

        if speaking:
            if not self._session.active:
                self._start(now)
            self._session.silence_start_time = None
            self._advance(now)
            return self._session.elapsed_ms

        session = self._session
        if not session.active:
            return session.elapsed_ms

        if session.silence_start_time is None:
            session.silence_start_time = now
        elif now - session.silence_start_time > self.silence_timeout_ms:
            logger.info(
                "Session ended after %.0f ms of silence", now - session.silence_start_time
            )
            self._end()
            return self._session.elapsed_ms

        self._advance(now)
        return session.elapsed_ms

    def reset_session(self) -> None:
        if not self._session.active:
            return
        logger.info("Session reset")
        self._end()

    def _start(self, now: float) -> None:
        self._session = Session(active=True, start_time=now)
        logger.info("Session started")
        if self.on_session_change is not None:
            self.on_session_change(True)

    def _advance(self, now: float) -> None:
        session = self._session
        # monotonic clock, but never report time going backwards
        session.elapsed_ms = max(session.elapsed_ms, now - session.start_time)

    def _end(self) -> None:
        self._session = Session()
        if self.on_session_change is not None:
            self.on_session_change(False)
