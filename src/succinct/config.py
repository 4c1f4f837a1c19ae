"""Configuration handling."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional
import yaml

from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = "succinct_config.yml"


@dataclass
class AudioConfig:
    sample_rate_hz: int = 44100
    channels: int = 1
    block_size: int = 1024
    smoothing: float = 0.5


@dataclass
class Config:
    device_name: Optional[str] = None
    threshold: float = 0.1
    hold_frames: int = 10
    silence_timeout_ms: int = 2000
    target_duration_ms: int = 60000
    tick_ms: int = 16
    log_dir: str = "logs"
    debug_logging: bool = False
    audio: AudioConfig = field(default_factory=AudioConfig)


def validate_config(config: Config) -> Config:
    problems: List[str] = []
    if not 0.0 < config.threshold < 1.0:
        problems.append("threshold must be between 0 and 1 (exclusive)")
    if config.hold_frames < 0:
        problems.append("hold_frames must be >= 0")
    if config.silence_timeout_ms < 0:
        problems.append("silence_timeout_ms must be >= 0")
    if config.target_duration_ms <= 0:
        problems.append("target_duration_ms must be > 0")
    if config.tick_ms <= 0:
        problems.append("tick_ms must be > 0")
    if config.audio.sample_rate_hz <= 0:
        problems.append("audio.sample_rate_hz must be > 0")
    if config.audio.channels <= 0:
        problems.append("audio.channels must be > 0")
    if config.audio.block_size <= 0:
        problems.append("audio.block_size must be > 0")
    if not 0.0 <= config.audio.smoothing < 1.0:
        problems.append("audio.smoothing must be in [0, 1)")
    if problems:
        raise ConfigurationError("Invalid configuration: " + "; ".join(problems))
    return config


def _int_field(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a whole number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ConfigurationError(f"{key} must be a whole number, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a whole number, got {value!r}") from exc


def _float_field(data: dict, key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from exc


def _mapping(value, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigurationError(f"{where} must be a mapping, got {type(value).__name__}")
    return value


def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    if not os.path.exists(path):
        return Config()
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Could not parse {path}: {exc}") from exc

    data = _mapping(data, path)
    audio_data = _mapping(data.get("audio"), "audio")
    unknown = set(audio_data) - {"sample_rate_hz", "channels", "block_size", "smoothing"}
    if unknown:
        raise ConfigurationError(f"Unknown audio settings: {', '.join(sorted(unknown))}")

    audio = AudioConfig(
        sample_rate_hz=_int_field(audio_data, "sample_rate_hz", 44100),
        channels=_int_field(audio_data, "channels", 1),
        block_size=_int_field(audio_data, "block_size", 1024),
        smoothing=_float_field(audio_data, "smoothing", 0.5),
    )
    config = Config(
        device_name=data.get("device_name"),
        threshold=_float_field(data, "threshold", 0.1),
        hold_frames=_int_field(data, "hold_frames", 10),
        silence_timeout_ms=_int_field(data, "silence_timeout_ms", 2000),
        target_duration_ms=_int_field(data, "target_duration_ms", 60000),
        tick_ms=_int_field(data, "tick_ms", 16),
        log_dir=data.get("log_dir", "logs"),
        debug_logging=bool(data.get("debug_logging", False)),
        audio=audio,
    )
    return validate_config(config)


def save_config(path: str, config: Config) -> None:
    validate_config(config)
    data = {
        "device_name": config.device_name,
        "threshold": config.threshold,
        "hold_frames": config.hold_frames,
        "silence_timeout_ms": config.silence_timeout_ms,
        "target_duration_ms": config.target_duration_ms,
        "tick_ms": config.tick_ms,
        "log_dir": config.log_dir,
        "debug_logging": config.debug_logging,
        "audio": {
            "sample_rate_hz": config.audio.sample_rate_hz,
            "channels": config.audio.channels,
            "block_size": config.audio.block_size,
            "smoothing": config.audio.smoothing,
        },
    }
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=False)
