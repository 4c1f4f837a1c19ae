"""Microphone capture producing one energy level per analysis block."""

from __future__ import annotations

import logging
import threading
from typing import Optional, List, Dict, Any

from .audio_utils import compute_energy, smooth_level
from .config import Config
from .errors import SourceUnavailable

logger = logging.getLogger("succinct")


def _import_sounddevice():
    try:
        import sounddevice as sd
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise SourceUnavailable("sounddevice is required for audio capture.") from exc
    return sd


def list_input_devices() -> List[Dict[str, Any]]:
    sd = _import_sounddevice()
    try:
        devices = sd.query_devices()
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise SourceUnavailable(f"Could not query audio devices: {exc}") from exc
    return [d for d in devices if d.get("max_input_channels", 0) > 0]


def select_preferred_device(
    candidates: List[Dict[str, Any]],
    prefer_name: Optional[str] = None,
) -> Dict[str, Any]:
    if not candidates:
        raise SourceUnavailable("No input devices found.")
    if prefer_name:
        preferred = [
            d for d in candidates if prefer_name.lower() in d.get("name", "").lower()
        ]
        if preferred:
            return preferred[0]
        logger.info("Input device %r not found, using %s", prefer_name, candidates[0].get("name"))
    return candidates[0]


def find_input_device(prefer_name: Optional[str] = None) -> Dict[str, Any]:
    return select_preferred_device(list_input_devices(), prefer_name=prefer_name)


class EnergySource:
    """Live microphone level, read once per tick.

    The sounddevice callback runs on the audio thread and only stores the
    latest smoothed level; ``read`` hands that value to the ticking thread.
    """

    def __init__(
        self,
        device_name: Optional[str] = None,
        sample_rate_hz: int = 44100,
        channels: int = 1,
        block_size: int = 1024,
        smoothing: float = 0.5,
    ) -> None:
        self.device_name = device_name
        self.sample_rate_hz = sample_rate_hz
        self.channels = channels
        self.block_size = block_size
        self.smoothing = smoothing
        self._lock = threading.Lock()
        self._level = 0.0
        self._stream = None

    @classmethod
    def from_config(cls, config: Config) -> "EnergySource":
        return cls(
            device_name=config.device_name,
            sample_rate_hz=config.audio.sample_rate_hz,
            channels=config.audio.channels,
            block_size=config.audio.block_size,
            smoothing=config.audio.smoothing,
        )

    @property
    def running(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        if self._stream is not None:
            return
        sd = _import_sounddevice()
        device = find_input_device(self.device_name)
        max_in = device.get("max_input_channels", 0)
        channels = min(self.channels, max_in) if max_in else self.channels
        if channels != self.channels:
            logger.info("Adjusting channels to %s (max %s)", channels, max_in)

        def _callback(indata, _frames, _time, status):
            if status:
                logger.debug("Input status: %s", status)
                return
            energy = compute_energy(indata)
            with self._lock:
                self._level = smooth_level(self._level, energy, self.smoothing)

        try:
            stream = sd.InputStream(
                samplerate=self.sample_rate_hz,
                channels=channels,
                dtype="int16",
                device=device.get("index"),
                blocksize=self.block_size,
                callback=_callback,
            )
            stream.start()
        except Exception as exc:
            raise SourceUnavailable(
                f"Could not open input device {device.get('name')!r}: {exc}"
            ) from exc
        self._stream = stream
        logger.info("Capturing from %s", device.get("name"))

    def read(self) -> float:
        with self._lock:
            return self._level

    def stop(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()
        with self._lock:
            self._level = 0.0
        logger.info("Capture stopped")

    def __enter__(self) -> "EnergySource":
        self.start()
        return self

    def __exit__(self, *_exc) -> None:
        self.stop()
