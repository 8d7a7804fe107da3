"""Command-line runner for IMU event detection.

Reads samples from a recorded session or a mock sensor, runs the
detector pipeline and prints JSON lines to stdout.

Usage:
    imu-events --replay session.csv          # Events from a recording
    imu-events --mock --samples 2000         # Synthetic stationary sensor
    imu-events --replay session.csv --output minimal
"""

import argparse
import json
import logging
import signal
import sys
from typing import Optional

from .core import Config, SampleValidator, load_config
from .communication import CsvReplaySource, MockSampleSource, ReadStatus, SourceError
from .monitoring import LoopMonitor
from .pipeline import DetectorPipeline, PipelineResult

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

SHUTDOWN_REQUESTED = False


def signal_handler(signum, frame):
    """Stop the loop after the current sample."""
    global SHUTDOWN_REQUESTED
    SHUTDOWN_REQUESTED = True
    logger.info("Signal %d received, stopping", signum)


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr, keeping stdout for results."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _emit(detection: PipelineResult, output: str, stream) -> None:
    if output == "minimal":
        o = detection.orientation
        if o is not None:
            print(f"{detection.seq} pitch={o.pitch:.2f} roll={o.roll:.2f} "
                  f"yaw={o.yaw:.2f}", file=stream, flush=True)
    elif detection.events:
        print(json.dumps(detection.to_dict()), file=stream, flush=True)


def run_detection_loop(
    config: Config,
    source,
    output: str = "json",
    max_samples: Optional[int] = None,
    stream=None,
) -> int:
    """Run the detection loop until the source is exhausted.

    Args:
        config: System configuration.
        source: Opened sample source with a ``read()`` method.
        output: ``json`` prints one line per event, ``minimal`` one line
            per orientation update.
        max_samples: Stop after this many processed samples.
        stream: Output stream, stdout if None.

    Returns:
        Exit code, 0 once the source is drained or the limit reached.
    """
    stream = stream or sys.stdout
    validator = SampleValidator(config)
    pipeline = DetectorPipeline(config)
    monitor = LoopMonitor(config)
    rejected = 0

    while not SHUTDOWN_REQUESTED:
        if max_samples is not None and pipeline.update_count >= max_samples:
            break

        result = source.read()
        if result.status is ReadStatus.EXHAUSTED:
            break
        if not result.ok:
            continue

        sample = result.sample
        check = validator.validate(sample)
        if not check.is_valid:
            rejected += 1
            logger.warning("Sample %d rejected: %s", sample.seq, "; ".join(check.errors))
            continue
        if check.warnings:
            logger.debug("Sample %d: %s", sample.seq, "; ".join(check.warnings))

        monitor.start_iteration()
        detection = pipeline.process(sample)
        monitor.end_iteration(sample.timestamp, detection.events)

        _emit(detection, output, stream)

    stats = monitor.get_stats()
    source_stats = source.stats
    logger.info(
        "Processed %d samples at %.1f Hz (%.3f ms per pass), %d dropped",
        stats.total_iterations, stats.effective_rate_hz,
        stats.pass_mean_ms, stats.dropped_samples,
    )
    logger.info(
        "Source: %d reads, %d malformed; %d samples rejected",
        source_stats.total_reads, source_stats.read_errors, rejected,
    )
    for name, count in sorted(stats.events.items()):
        logger.info("Events %s: %d", name, count)

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Command-line interface definition."""
    parser = argparse.ArgumentParser(
        prog="imu-events",
        description="Motion, distortion, orientation, incline and fall "
                    "detection from accelerometer/magnetometer samples",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--replay", metavar="PATH",
                        help="replay a recorded CSV session")
    source.add_argument("--mock", action="store_true",
                        help="use a synthetic stationary sensor")
    parser.add_argument("-c", "--config", metavar="PATH",
                        help="YAML configuration file")
    parser.add_argument("--samples", type=int, metavar="N",
                        help="stop after N processed samples")
    parser.add_argument("--output", choices=("json", "minimal"), default="json",
                        help="json: one line per event; minimal: one line "
                             "per orientation update")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log detector diagnostics")
    return parser


def main(argv=None) -> int:
    """Console script entry point.

    Returns:
        Exit code; 1 on configuration or source errors.
    """
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    for signum in (signal.SIGINT, signal.SIGTERM):
        signal.signal(signum, signal_handler)

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except (ValueError, TypeError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if args.mock:
        source = MockSampleSource(config)
    else:
        source = CsvReplaySource(args.replay)

    try:
        with source:
            return run_detection_loop(
                config, source, output=args.output, max_samples=args.samples
            )
    except SourceError as e:
        logger.error("Source error: %s", e)
        return 1
    except ValueError as e:
        logger.error("Invalid detector settings: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
