"""
Console entry point: live microphone features as text bars.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from micanalyzer.analysis.pipeline import FeaturePipeline
from micanalyzer.audio_capture.capture_manager import CaptureManager
from micanalyzer.config import Config
from micanalyzer.logging_utils import configure_logging
from micanalyzer.models.features import AnalyzerSettings, FeatureSnapshot

logger = logging.getLogger(__name__)

BAR_WIDTH = 20

CHANNEL_LABELS = (
    ("RMS", "normalized_rms"),
    ("Peak", "normalized_peak"),
    ("Low", "low_band_energy"),
    ("Mid", "mid_band_energy"),
    ("High", "high_band_energy"),
)


def format_bar(value: float, width: int = BAR_WIDTH) -> str:
    filled = int(round(value * width))
    return "#" * filled + "-" * (width - filled)


def format_snapshot(features: FeatureSnapshot) -> str:
    """One status line with a bar per channel."""
    parts = []
    for label, name in CHANNEL_LABELS:
        value = getattr(features, name)
        parts.append(f"{label} {format_bar(value, BAR_WIDTH // 2)} {value:.2f}")
    return " | ".join(parts)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="micanalyzer",
        description="Show live loudness and band energy of a microphone.",
    )
    parser.add_argument("--list-devices", action="store_true", help="List input devices and exit")
    parser.add_argument("--device", type=int, default=None, help="Input device number (see --list-devices)")
    parser.add_argument("--fps", type=float, default=30.0, help="Analysis frames per second")
    parser.add_argument("--sample-rate", type=int, default=None)
    parser.add_argument("--fft-size", type=int, default=None, help="Rounded up to a power of two")
    parser.add_argument("--rms-window", type=float, default=None, help="Loudness window in seconds")
    parser.add_argument("--silence-threshold", type=float, default=None)
    parser.add_argument("--smoothing", type=float, default=None, help="Smoothing factor in (0, 1)")
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--save", action="store_true", help="Remember these options as defaults")
    return parser


def resolve_settings(args: argparse.Namespace, stored: AnalyzerSettings) -> AnalyzerSettings:
    """Command-line options over stored settings."""
    overrides = {
        "sample_rate": args.sample_rate,
        "fft_size_hint": args.fft_size,
        "rms_window_seconds": args.rms_window,
        "silence_threshold": args.silence_threshold,
        "smoothing_coefficient": args.smoothing,
    }
    values = stored.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return AnalyzerSettings(**values)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    config = Config()
    configure_logging(args.log_level or config.log_level)

    try:
        settings = resolve_settings(args, config.analyzer_settings)
    except ValueError as e:
        print(f"Invalid analyzer settings: {e}", file=sys.stderr)
        return 2

    manager = CaptureManager(
        sample_rate=settings.sample_rate,
        max_record_seconds=config.max_record_seconds,
    )
    devices = manager.refresh_devices()

    if args.list_devices:
        for i, device in enumerate(devices):
            marker = "*" if device.is_default else " "
            print(f"{marker} [{i}] {device}")
        return 0

    if not devices:
        print("No microphone detected.", file=sys.stderr)
        return 1

    manager.select_device(args.device if args.device is not None else config.microphone_index)
    if args.save:
        config.analyzer_settings = settings
        config.microphone_index = manager.selected_index

    if not manager.start_capture():
        print(f"Could not open {manager.selected_device}.", file=sys.stderr)
        return 1

    pipeline = FeaturePipeline(source=manager, settings=settings)
    frame_time = 1.0 / max(args.fps, 1.0)

    print(f"Listening on {manager.selected_device} (Ctrl+C to stop)")
    try:
        while True:
            started = time.perf_counter()
            features = pipeline.tick()
            sys.stdout.write("\r" + format_snapshot(features))
            sys.stdout.flush()
            elapsed = time.perf_counter() - started
            time.sleep(max(0.0, frame_time - elapsed))
    except KeyboardInterrupt:
        print()
    finally:
        manager.stop_capture()
        stats = manager.buffer.get_stats()
        logger.debug(
            "Capture ring: %d samples written, %d overruns, %d underruns",
            stats.total_samples, stats.overruns, stats.underruns,
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
