import pytest

from succinct.config import Config
from succinct.errors import ConfigurationError, SourceUnavailable
from succinct.models import PacingLevel
from succinct.monitor import SpeechMonitor


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeSource:
    def __init__(self, fail: bool = False) -> None:
        self.level = 0.0
        self.fail = fail
        self.started = 0
        self.stopped = 0

    def start(self) -> None:
        if self.fail:
            raise SourceUnavailable("no microphone")
        self.started += 1

    def read(self) -> float:
        return self.level

    def stop(self) -> None:
        self.stopped += 1


class FakeScheduler:
    def __init__(self) -> None:
        self.jobs = {}
        self.cancelled = []
        self._next = 0

    def after(self, ms, func):
        self._next += 1
        self.jobs[self._next] = (ms, func)
        return self._next

    def after_cancel(self, handle):
        self.cancelled.append(handle)
        self.jobs.pop(handle, None)

    def run_pending(self):
        pending = list(self.jobs.items())
        self.jobs.clear()
        for _handle, (_ms, func) in pending:
            func()


def _monitor(**overrides):
    cfg = Config(threshold=0.1, hold_frames=2, silence_timeout_ms=1000, tick_ms=100)
    for key, value in overrides.items():
        setattr(cfg, key, value)
    clock = FakeClock()
    source = FakeSource()
    events = []
    monitor = SpeechMonitor(cfg, source, clock=clock, on_speaking_change=events.append)
    return monitor, source, clock, events


def _tick_at(monitor, source, clock, t, level):
    clock.now = t
    source.level = level
    return monitor.tick()


def test_speaking_and_silence_scenario():
    monitor, source, clock, events = _monitor()
    samples = [0.2, 0.2, 0.0, 0.0, 0.0]

    snapshots = [
        _tick_at(monitor, source, clock, idx * 100, level)
        for idx, level in enumerate(samples)
    ]

    assert [s.speaking for s in snapshots] == [True, True, True, True, False]
    assert events == [True, False]
    last = snapshots[-1]
    assert last.active is True
    assert last.elapsed_ms == 400
    assert monitor.timer.silence_start_time == 400


def test_silence_timeout_returns_to_idle():
    monitor, source, clock, _events = _monitor()
    for idx, level in enumerate([0.2, 0.2, 0.0, 0.0, 0.0]):
        _tick_at(monitor, source, clock, idx * 100, level)

    snapshot = _tick_at(monitor, source, clock, 1400, 0.0)
    assert snapshot.active is True

    snapshot = _tick_at(monitor, source, clock, 1500, 0.0)
    assert snapshot.active is False
    assert snapshot.elapsed_ms == 0
    assert snapshot.pacing is PacingLevel.GREEN


def test_snapshot_carries_pacing():
    monitor, source, clock, _events = _monitor(target_duration_ms=1000)
    _tick_at(monitor, source, clock, 0, 0.5)

    snapshot = _tick_at(monitor, source, clock, 850, 0.5)

    assert snapshot.pacing_percent == pytest.approx(85.0)
    assert snapshot.pacing is PacingLevel.YELLOW
    assert monitor.last_snapshot == snapshot


def test_reset_session_forces_idle():
    monitor, source, clock, _events = _monitor()
    _tick_at(monitor, source, clock, 0, 0.5)
    _tick_at(monitor, source, clock, 300, 0.5)

    monitor.reset_session()
    monitor.reset_session()

    assert monitor.timer.active is False
    snapshot = _tick_at(monitor, source, clock, 400, 0.5)
    assert snapshot.active is True
    assert snapshot.elapsed_ms == 0


def test_apply_config_takes_effect_next_tick():
    monitor, source, clock, _events = _monitor()
    assert _tick_at(monitor, source, clock, 0, 0.2).speaking is True

    cfg = Config(threshold=0.3, hold_frames=0, silence_timeout_ms=1000, tick_ms=100)
    monitor.apply_config(cfg)

    assert _tick_at(monitor, source, clock, 100, 0.2).speaking is False


def test_apply_config_rejects_invalid_values():
    monitor, *_ = _monitor()

    with pytest.raises(ConfigurationError):
        monitor.apply_config(Config(target_duration_ms=0))

    assert monitor.config.target_duration_ms == 60000


def test_invalid_config_rejected_at_construction():
    with pytest.raises(ConfigurationError):
        SpeechMonitor(Config(threshold=1.5), FakeSource())


def test_scheduled_ticks_and_stop_cancel_pending_job():
    cfg = Config(threshold=0.1, hold_frames=2, silence_timeout_ms=1000, tick_ms=50)
    source = FakeSource()
    scheduler = FakeScheduler()
    updates = []
    monitor = SpeechMonitor(
        cfg, source, scheduler=scheduler, clock=FakeClock(), on_update=updates.append
    )

    monitor.start()
    monitor.start()
    assert source.started == 1
    assert [ms for ms, _ in scheduler.jobs.values()] == [50]

    source.level = 0.5
    scheduler.run_pending()
    scheduler.run_pending()
    assert len(updates) == 2
    assert updates[-1].speaking is True
    assert len(scheduler.jobs) == 1

    pending = next(iter(scheduler.jobs))
    monitor.stop()
    assert scheduler.cancelled == [pending]
    assert scheduler.jobs == {}
    assert source.stopped == 1
    assert monitor.running is False
    assert monitor.timer.active is False
    assert monitor.classifier.speaking is False


def test_source_failure_leaves_session_idle():
    cfg = Config()
    scheduler = FakeScheduler()
    monitor = SpeechMonitor(cfg, FakeSource(fail=True), scheduler=scheduler, clock=FakeClock())

    with pytest.raises(SourceUnavailable):
        monitor.start()

    assert monitor.running is False
    assert scheduler.jobs == {}
    assert monitor.timer.active is False


def test_snapshot_level_is_clamped():
    monitor, source, clock, _events = _monitor()

    high = _tick_at(monitor, source, clock, 0, 7.0)
    low = _tick_at(monitor, source, clock, 100, -2.0)

    assert high.level == 1.0
    assert high.speaking is True
    assert low.level == 0.0


def test_timeout_snapshot_has_zero_elapsed():
    monitor, source, clock, _events = _monitor(silence_timeout_ms=100, hold_frames=0)
    _tick_at(monitor, source, clock, 0, 0.5)
    _tick_at(monitor, source, clock, 500, 0.0)

    snapshot = _tick_at(monitor, source, clock, 601, 0.0)

    assert snapshot.active is False
    assert snapshot.elapsed_ms == 0
    assert snapshot.pacing_percent == 0
