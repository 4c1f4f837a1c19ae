import argparse
import os
import sys
import time

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from succinct.classifier import SignalClassifier
from succinct.errors import SourceUnavailable
from succinct.recorder import EnergySource, find_input_device


def _describe_device(info: dict) -> None:
    print(f"Input device: {info.get('name', '')}")
    print(f"Index: {info.get('index', '')}")
    print(f"Host API: {info.get('hostapi', '')}")
    print(f"Max input channels: {info.get('max_input_channels', 0)}")
    print(f"Default sample rate: {info.get('default_samplerate', '')}")


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--device", help="Device name substring.")
    parser.add_argument("--seconds", type=float, default=6.0, help="Test duration.")
    parser.add_argument("--rate", type=int, default=44100, help="Sample rate.")
    parser.add_argument("--threshold", type=float, default=0.1, help="Speech threshold.")
    parser.add_argument("--hold-frames", type=int, default=10, help="Hold frames.")
    parser.add_argument("--interval-ms", type=int, default=100, help="Print interval.")
    args = parser.parse_args()

    try:
        _describe_device(find_input_device(args.device))
    except SourceUnavailable as exc:
        print(f"Microphone unavailable: {exc}")
        return 1

    classifier = SignalClassifier(threshold=args.threshold, hold_frames=args.hold_frames)
    peak = 0.0
    end = time.monotonic() + args.seconds
    print("Streaming... press Ctrl+C to stop early.")
    source = EnergySource(device_name=args.device, sample_rate_hz=args.rate)
    try:
        source.start()
    except SourceUnavailable as exc:
        print(f"Could not start capture: {exc}")
        return 1
    with source:
        try:
            while time.monotonic() < end:
                level = source.read()
                peak = max(peak, level)
                speaking = classifier.tick(level)
                bar = "#" * int(min(level * 500, 100) / 2)
                print(
                    f"level={level:.4f} peak={peak:.4f} "
                    f"{'SPEAKING' if speaking else 'silent  '} {bar}"
                )
                time.sleep(args.interval_ms / 1000.0)
        except KeyboardInterrupt:
            pass

    print(f"Peak level: {peak:.4f} (threshold {args.threshold})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
