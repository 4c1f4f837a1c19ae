"""CLI entry point."""

from __future__ import annotations

import argparse
import time
from dataclasses import asdict

import yaml

from .config import DEFAULT_CONFIG_PATH, Config, load_config, save_config
from .errors import ConfigurationError, SourceUnavailable
from .logging_utils import setup_logging_for
from .monitor import SpeechMonitor
from .pacing import format_elapsed
from .recorder import EnergySource, list_input_devices


def _apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    if getattr(args, "device", None):
        config.device_name = args.device
    if getattr(args, "threshold", None) is not None:
        config.threshold = args.threshold
    if getattr(args, "hold_frames", None) is not None:
        config.hold_frames = args.hold_frames
    if getattr(args, "silence_ms", None) is not None:
        config.silence_timeout_ms = args.silence_ms
    if getattr(args, "target", None) is not None:
        config.target_duration_ms = int(args.target * 1000)
    return config


def _watch(config: Config, seconds: float | None) -> int:
    monitor = SpeechMonitor(
        config,
        EnergySource.from_config(config),
        on_speaking_change=lambda speaking: print(
            "Speaking" if speaking else "Silent", flush=True
        ),
    )
    monitor.timer.on_session_change = lambda active: print(
        "Session started" if active else "Session reset", flush=True
    )
    try:
        monitor.start()
    except SourceUnavailable as exc:
        print(f"Microphone unavailable: {exc}")
        return 1

    print("Listening... press Ctrl+C to stop.")
    end = time.monotonic() + seconds if seconds else None
    last_print = 0.0
    try:
        while end is None or time.monotonic() < end:
            snapshot = monitor.tick()
            now = time.monotonic()
            if snapshot.active and now - last_print >= 1.0:
                print(
                    f"{format_elapsed(snapshot.elapsed_ms)} "
                    f"[{snapshot.pacing.value}] level={snapshot.level:.3f}",
                    flush=True,
                )
                last_print = now
            time.sleep(config.tick_ms / 1000.0)
    except KeyboardInterrupt:
        pass
    finally:
        monitor.stop()
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(prog="succinct")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Config file.")
    parser.add_argument("--debug", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command")

    devices_cmd = sub.add_parser("devices")
    devices_cmd.add_argument("--match", help="Filter device names by substring.")

    watch_cmd = sub.add_parser("watch")
    watch_cmd.add_argument("--device", help="Preferred device name substring.")
    watch_cmd.add_argument("--threshold", type=float, help="Speech threshold (0-1).")
    watch_cmd.add_argument("--hold-frames", type=int, help="Quiet ticks tolerated.")
    watch_cmd.add_argument("--silence-ms", type=int, help="Silence before reset.")
    watch_cmd.add_argument("--target", type=float, help="Target time in seconds.")
    watch_cmd.add_argument("--seconds", type=float, help="Stop after N seconds.")

    config_cmd = sub.add_parser("config")
    config_cmd.add_argument(
        "--init",
        action="store_true",
        help="Write the effective config to the config path.",
    )

    sub.add_parser("gui")

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigurationError as exc:
        print(f"Config error: {exc}")
        return 2
    setup_logging_for(config, debug=args.debug)

    if args.command == "devices":
        try:
            devices = list_input_devices()
        except SourceUnavailable as exc:
            print(f"Device listing failed: {exc}")
            return 1
        if args.match:
            devices = [
                d for d in devices if args.match.lower() in d.get("name", "").lower()
            ]
        for device in devices:
            name = device.get("name", "Unknown")
            index = device.get("index", "?")
            channels = device.get("max_input_channels", 0)
            print(f"[{index}] {name} (inputs: {channels})")
        return 0

    if args.command == "watch":
        try:
            config = _apply_overrides(config, args)
            return _watch(config, args.seconds)
        except ConfigurationError as exc:
            print(f"Config error: {exc}")
            return 2

    if args.command == "config":
        if args.init:
            save_config(args.config, config)
            print(f"Wrote {args.config}")
            return 0
        print(yaml.safe_dump(asdict(config), sort_keys=False), end="")
        return 0

    if args.command == "gui":
        from .gui import launch_gui

        launch_gui(args.config)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
