"""
Command line entry point.

    feed-aggregator compile page.yml --output _data/feed_aggregator.json

Reads the aggregator options of a page from a YAML file, compiles the feeds
and writes the template data as JSON for the site renderer.
"""

import argparse
import json
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from feed_aggregator import __version__
from feed_aggregator.config import get_config, load_config_from_yaml, set_config
from feed_aggregator.core import create_aggregator, normalize_sources
from feed_aggregator.exceptions import AggregationCancelled, ConfigurationError
from feed_aggregator.logger import get_logger, setup_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feed-aggregator",
        description="Merge RSS/Atom feeds into one aggregate for a site build",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Application config YAML (default: environment)")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Compile the feeds of a page")
    compile_parser.add_argument("page", type=Path, help="YAML file with the page options")
    compile_parser.add_argument("-o", "--output", type=Path, help="Write JSON here instead of stdout")
    compile_parser.add_argument("--date-format", help="Site date format ('ordinal' or strftime)")
    compile_parser.add_argument("--workers", type=positive_int, help="Maximum concurrent fetches")
    compile_parser.add_argument("--timeout", type=positive_float, help="Per-feed request timeout in seconds")

    return parser


def load_page_options(path: Path) -> Any:
    """Load page options from YAML.

    Raises:
        ConfigurationError: If the file is missing or not valid YAML
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read page options {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e


def compile_page(args: argparse.Namespace) -> dict[str, Any]:
    """Run one aggregation for the page given on the command line."""
    options = load_page_options(args.page)
    params = normalize_sources(options)

    aggregator = create_aggregator(
        timeout_seconds=args.timeout,
        max_workers=args.workers,
        date_format=args.date_format,
    )

    cancel_event = threading.Event()
    previous_handler = signal.getsignal(signal.SIGTERM)
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGTERM, lambda signum, frame: cancel_event.set())
    try:
        result = aggregator.aggregate(params, cancel_event=cancel_event)
    except KeyboardInterrupt:
        cancel_event.set()
        raise
    finally:
        if threading.current_thread() is threading.main_thread():
            signal.signal(signal.SIGTERM, previous_handler)

    data = result.to_template_data()
    data["meta_feed"] = params.meta_feed_path()
    return data


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI main; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config:
        try:
            set_config(load_config_from_yaml(args.config))
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Cannot load config {args.config}: {e}")
            return EXIT_CONFIG_ERROR
    setup_logger(level=args.log_level or get_config().logging.level)

    try:
        data = compile_page(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG_ERROR
    except (AggregationCancelled, KeyboardInterrupt):
        logger.warning("Interrupted, no output written")
        return EXIT_INTERRUPTED

    payload = json.dumps(data, indent=2, ensure_ascii=False, default=_json_default)
    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote {len(data['posts'])} posts to {args.output}")
    else:
        sys.stdout.write(payload + "\n")
    return EXIT_OK


def _json_default(value: Any) -> str:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


if __name__ == "__main__":
    sys.exit(main())
