"""
Command-line interface for Balancer.

Balances a track list across sides and prints the result, or compares two
previously balanced track lists structurally.
"""

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from .balance import InvalidConfiguration, ShuffleSearch, SizingPolicy, balance, compare_files
from .config import Config, ConfigError
from .load import TrackListError, read_tracks, scan_directory
from .render import format_album, format_summary
from .timecode import time_string_to_seconds

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

EXIT_OK = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130


def _duration(value: str) -> int:
    try:
        return time_string_to_seconds(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="balancer",
        description="Balance tracks across sides of (nearly) equal length.",
    )

    source = parser.add_mutually_exclusive_group()
    source.add_argument("-i", "--input", help="Track list file (time|title per line)")
    source.add_argument("--scan", metavar="DIR", help="Directory of audio files to read durations from")
    source.add_argument(
        "--compare", nargs=2, metavar=("FILE_A", "FILE_B"),
        help="Compare two balanced track lists; exit 0 if equivalent, 1 if not",
    )
    parser.add_argument("--recursive", action="store_true", help="Scan subdirectories too")

    sizing = parser.add_argument_group("sizing")
    sizing.add_argument("-b", "--sides", type=int, help="Number of sides to fill")
    sizing.add_argument("-d", "--duration", type=_duration, help="Target side length (H:M:S, M:S or S)")
    sizing.add_argument("-e", "--even", action="store_true", default=None,
                        help="With --duration, pick the side count closest to the target length")

    search = parser.add_argument_group("shuffle search")
    search.add_argument("-s", "--shuffle", action="store_true", default=None, help="Enable randomized search")
    search.add_argument("--trials", type=int, help="Number of shuffle trials")
    search.add_argument("--seed", type=int, help="Random seed for reproducible shuffles")
    search.add_argument("--workers", type=int, help="Threads used to evaluate trials")
    search.add_argument("--swaps", type=int, help="Random swaps tried after each trial")

    output = parser.add_argument_group("output")
    output.add_argument("-p", "--plain", action="store_true", default=None, help="Times in plain seconds")
    output.add_argument("-c", "--csv", action="store_true", default=None, help="Delimiter-separated records")
    output.add_argument("-a", "--separator", help="Output field separator")
    output.add_argument("--input-separator", help="Input field separator")
    output.add_argument("--summary", action="store_true", default=None, help="Print one line per side")
    output.add_argument("-t", "--title", help="Album title (defaults to the input name)")

    parser.add_argument("--config", help="Path to balancer.toml")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug")
    return parser


def _pick(cli_value, config_value):
    return config_value if cli_value is None else cli_value


def resolve_policy(args: argparse.Namespace, config: Config) -> SizingPolicy:
    """
    Sizing policy from the command line, falling back to the config file.

    A side count wins over a duration when both are given.
    """
    even = bool(_pick(args.even, config.get("sizing", "even", False)))

    if args.sides is None and args.duration is None:
        policy = config.sizing_policy()
        return SizingPolicy(policy.side_count, policy.side_seconds, even)

    if args.sides is not None and args.duration is not None:
        logger.warning(f"Both --sides={args.sides} and --duration={args.duration}s given; using --sides")
        return SizingPolicy(side_count=args.sides, even=even)

    if args.sides is not None:
        return SizingPolicy(side_count=args.sides, even=even)
    return SizingPolicy(side_seconds=args.duration, even=even)


def run(args: argparse.Namespace) -> int:
    config = Config.load(args.config)
    input_separator = _pick(args.input_separator, config.get("input", "separator", "|"))

    if args.compare:
        equal = compare_files(args.compare[0], args.compare[1], separator=input_separator)
        print("equal" if equal else "different")
        return EXIT_OK if equal else EXIT_DIFFERENT

    if args.scan:
        tracks = scan_directory(args.scan, recursive=args.recursive)
        default_title = Path(args.scan).name
    else:
        tracks = read_tracks(args.input, separator=input_separator)
        default_title = Path(args.input).stem
    title = args.title or default_title

    policy = resolve_policy(args, config)

    if _pick(args.shuffle, config.get("shuffle", "enabled", False)):
        seed = _pick(args.seed, config.get("shuffle", "seed"))
        search = ShuffleSearch(
            trials=_pick(args.trials, config.get("shuffle", "trials")),
            rng=random.Random(seed),
            workers=_pick(args.workers, config.get("shuffle", "workers")),
            swap_attempts=_pick(args.swaps, config.get("shuffle", "swap_attempts")),
        )
        album = search.search(tracks, policy, title=title)
        report = search.last_report
        logger.info(
            f"Shuffle: best of {report.trials_run} trials is #{report.best_trial} "
            f"(spread {report.best_spread}s, unshuffled {report.baseline_spread}s)"
        )
    else:
        album = balance(tracks, policy, title=title)

    logger.info(f"Balanced {len(tracks)} tracks onto {len(album)} sides, spread {album.spread}s")

    plain = bool(_pick(args.plain, config.get("output", "format") == "plain"))
    if _pick(args.summary, config.get("output", "summary", False)):
        sys.stdout.write(format_summary(album, plain=plain))
    else:
        sys.stdout.write(
            format_album(
                album,
                plain=plain,
                csv=bool(_pick(args.csv, config.get("output", "csv", False))),
                separator=_pick(args.separator, config.get("output", "separator", "|")),
            )
        )
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.input or args.scan or args.compare):
        parser.error("one of -i/--input, --scan or --compare is required")

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)

    try:
        return run(args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return EXIT_INTERRUPTED
    except (InvalidConfiguration, ConfigError, TrackListError, ValueError) as e:
        logger.error(f"{e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
