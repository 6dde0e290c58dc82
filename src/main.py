#!/usr/bin/env python3
"""
Command-line audio-stream status check for hydrophone recordings.

Classifies one or more WAV/FLAC samples as Silent, Unintelligible or
Online. Files are processed in order and each result seeds the
hysteresis of the next, the same way successive live samples of one
node would be.
"""

import argparse
import logging
import math
import sys
import os
from typing import List, Optional

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import ClassifierConfig, ConfigError
from audio_source import AudioLoadError, list_audio_files, load_audio_sample
from frequency_info import ClassificationResult, classify_audio_sample
from spectral_analyzer import InvalidInput
from status import ChannelStatus, previous_status_from
from status_log import StatusLogger, last_logged_status, log_classification


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Classify hydrophone audio samples as Silent, Unintelligible or Online.",
    )
    parser.add_argument("paths", nargs="+",
                        help="Audio files or directories (processed in sorted order)")
    parser.add_argument("--previous-status", default=None,
                        help="Status of the previous sample (default: last logged, else Absent)")
    parser.add_argument("--status-log", default=None,
                        help="NDJSON status log to append results to and seed hysteresis from")
    parser.add_argument("--node", default="local", help="Node name recorded in the status log")
    parser.add_argument("--max-seconds", type=float, default=None,
                        help="Only analyze the first N seconds of each file")
    parser.add_argument("--sample-rate", type=int, default=None,
                        help="Resample to this rate before analysis")
    parser.add_argument("--table", action="store_true",
                        help="Print the bucketed frequency / dB table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def format_db(value: Optional[float]) -> str:
    if value is None:
        return "-"
    if not math.isfinite(value):
        return "-inf"
    return f"{value:.1f}"


def print_result_summary(name: str, result: ClassificationResult,
                         previous: ChannelStatus) -> None:
    """Print the per-sample report."""
    print("=" * 60)
    print(f"Sample             : {name}")
    print(f"Status             : {result.status} (previous {previous})")
    print(f"Channels           : {result.channel_count} @ {result.sample_rate} Hz")
    print(f"Max Level          : {format_db(result.max_decibels())} dB")
    print(f"Signal Ratio       : {result.signal_ratio_percent()}%")
    print(f"Avg Non-Hum Level  : {format_db(result.average_non_hum_decibels())} dB")
    print(f"Avg Hum Level      : {format_db(result.average_hum_decibels())} dB")
    if result.channel_count > 1:
        print()
        print("CHANNELS:")
        for ch in range(result.channel_count):
            print(f"  [{ch}] {str(result.get_status(ch)):<15} "
                  f"max {format_db(result.max_decibels(ch)):>7} dB, "
                  f"ratio {result.signal_ratio_percent(ch)}%")


def print_frequency_table(result: ClassificationResult) -> None:
    """Print the aligned chart series as a text table."""
    header = f"{'Frequency (Hz)':<15} {'Summary (dB)':<14}"
    for ch in range(result.channel_count):
        header += f" {'Ch' + str(ch) + ' (dB)':<12}"
    print(header)
    for label in result.labels:
        row = f"{label:<15} {format_db(result.summary_series[label]):<14}"
        for ch in range(result.channel_count):
            row += f" {format_db(result.channel_series[ch][label]):<12}"
        print(row)


def resolve_previous_status(args: argparse.Namespace) -> ChannelStatus:
    if args.previous_status is not None:
        return previous_status_from(args.previous_status)
    if args.status_log:
        logged = last_logged_status(args.status_log, args.node)
        if logged is not None:
            return logged
    return ChannelStatus.ABSENT


def run(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        0 if every sample was classified, 1 otherwise
    """
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ClassifierConfig.from_env()
        previous = resolve_previous_status(args)
        files = [f for path in args.paths for f in list_audio_files(path)]
    except (ConfigError, FileNotFoundError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        # Unknown --previous-status label
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    status_logger = StatusLogger(args.status_log) if args.status_log else None
    failures = 0
    try:
        for path in files:
            try:
                sample = load_audio_sample(path, args.sample_rate, args.max_seconds)
                result = classify_audio_sample(sample, previous, config)
            except (InvalidInput, AudioLoadError, FileNotFoundError) as e:
                # Indeterminate: keep the previous status
                print(f"ERROR: {path}: {e}", file=sys.stderr)
                failures += 1
                continue

            print_result_summary(path.name, result, previous)
            if args.table:
                print()
                print_frequency_table(result)
            if status_logger is not None:
                log_classification(status_logger, args.node, result, previous)
            previous = result.status
    finally:
        if status_logger is not None:
            status_logger.close()

    print("=" * 60)
    return 1 if failures else 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
