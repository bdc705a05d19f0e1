"""
Beacon indexer CLI entry point.

Poll a beacon chain explorer for new slots, store per-slot participation
statistics, and serve the network participation rate over HTTP.

Usage::

    python -m beacon_indexer
    python -m beacon_indexer --config indexer.yaml
    python -m beacon_indexer --database ./indexer.db --port 8000 -v

Options:
    --config         Path to YAML configuration file
    --explorer-url   Explorer API base URL (default: https://beaconcha.in/api/v1)
    --database       SQLite database file (default: beacon_indexer.db)
    --host           Address the HTTP API binds to
    --port           Port the HTTP API listens on
    --poll-interval  Seconds between ingestion cycles
    --bitfield-mode  Bitfield decoding: natural or fixed_width

The explorer API key is read from BEACON_INDEXER_API_KEY.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any

from beacon_indexer.bitfield import BitfieldMode
from beacon_indexer.config import IndexerConfig
from beacon_indexer.node import IndexerNode

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"

        return f"{colored_time} {levelname} {name}: {message}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the indexer with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # httpx logs every request at INFO; one per slot is too chatty.
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Beacon chain participation indexer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--explorer-url",
        default=None,
        help="Explorer API base URL",
    )
    parser.add_argument(
        "--database",
        dest="database_path",
        default=None,
        help="SQLite database file (use :memory: for a throwaway store)",
    )
    parser.add_argument(
        "--host",
        dest="api_host",
        default=None,
        help="Address the HTTP API binds to",
    )
    parser.add_argument(
        "--port",
        dest="api_port",
        type=int,
        default=None,
        help="Port the HTTP API listens on",
    )
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between ingestion cycles",
    )
    parser.add_argument(
        "--bitfield-mode",
        choices=[mode.value for mode in BitfieldMode],
        default=None,
        help="How missed attestations are counted",
    )
    parser.add_argument(
        "--no-api",
        action="store_true",
        help="Run ingestion only, without the HTTP API",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> IndexerConfig:
    """
    Merge the config file, environment and command-line flags.

    Flags that were not given leave the file or default value in place.
    The merged result is validated again.
    """
    config = IndexerConfig.load(args.config)

    overrides: dict[str, Any] = {
        key: value
        for key, value in {
            "explorer_url": args.explorer_url,
            "database_path": args.database_path,
            "api_host": args.api_host,
            "api_port": args.api_port,
            "poll_interval": args.poll_interval,
            "bitfield_mode": args.bitfield_mode,
        }.items()
        if value is not None
    }
    if args.no_api:
        overrides["api_enabled"] = False

    if not overrides:
        return config
    return IndexerConfig.model_validate(config.model_dump() | overrides)


async def run_indexer(config: IndexerConfig) -> None:
    """
    Run the indexer until interrupted.

    Args:
        config: Validated indexer configuration.
    """
    logger.info(
        "Starting indexer: explorer=%s database=%s poll=%.1fs mode=%s",
        config.explorer_url,
        config.database_path,
        config.poll_interval,
        config.bitfield_mode.value,
    )

    node = IndexerNode.from_config(config)
    await node.run()


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.verbose, args.no_color)

    config = resolve_config(args)

    try:
        asyncio.run(run_indexer(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
