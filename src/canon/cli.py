"""Command-line interface: extract a basis from a file, or inspect an archive."""

import argparse
import dataclasses
import json
import logging
import time
from pathlib import Path

from rich.console import Console

from canon import __version__, archive
from canon.config import CanonConfig
from canon.errors import CanonError
from canon.report import basis_table, compute_stats, render_stats, stats_to_dict
from canon.space import SUPPORTED_WIDTHS

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "output.canon"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _load_config(args: argparse.Namespace) -> CanonConfig:
    config = CanonConfig.load_or_default(args.config)
    if args.width is not None:
        config = dataclasses.replace(config, width=args.width)
    return config


def _extract(args: argparse.Namespace, console: Console) -> int:
    config = _load_config(args)
    data = archive.read_input(args.input)
    logger.info("Read %d bytes from %s", len(data), args.input)

    processor = config.processor()
    start = time.perf_counter()
    if config.shard_size is not None:
        values = config.space.unpack(data)
        store = processor.run_sharded(
            values, config.shard_size, max_workers=config.max_workers
        )
    else:
        store = processor.run_bytes(data)
    elapsed = time.perf_counter() - start

    archive.save(args.output, store)
    stats = compute_stats(len(data), store, elapsed)
    if args.json:
        console.print_json(
            json.dumps({**stats_to_dict(stats), "output": str(args.output)})
        )
    else:
        render_stats(stats, console)
        console.print(f"Basis saved: {args.output}")
    return 0


def _inspect(args: argparse.Namespace, console: Console) -> int:
    config = _load_config(args)
    store = archive.load(args.archive, config.space)
    if args.json:
        console.print_json(
            json.dumps(
                {
                    "width": store.space.width,
                    "rank": store.rank,
                    "elements": list(store.elements),
                    "positions": list(store.positions),
                }
            )
        )
    else:
        console.print(basis_table(store))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canon",
        description="Extract the GF(2) basis spanned by the values of a byte stream.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", "-c", type=Path, help="Path to a YAML configuration file"
    )
    common.add_argument(
        "--width",
        "-w",
        type=int,
        choices=SUPPORTED_WIDTHS,
        help="Bits per value (overrides the configuration)",
    )
    common.add_argument("--json", action="store_true", help="Output results as JSON")
    common.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command", required=True)
    extract = sub.add_parser(
        "extract", parents=[common], help="Build the basis of a file and save it."
    )
    extract.add_argument("input", type=Path, help="File to read")
    extract.add_argument(
        "--output",
        "-o",
        type=Path,
        default=Path(DEFAULT_OUTPUT),
        help=f"Archive to write (default: {DEFAULT_OUTPUT})",
    )

    inspect = sub.add_parser(
        "inspect", parents=[common], help="Show the basis stored in an archive."
    )
    inspect.add_argument("archive", type=Path, help="Archive to read")
    return parser


def main(argv: list[str] | None = None, console: Console | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    console = console or Console()

    try:
        if args.command == "extract":
            return _extract(args, console)
        return _inspect(args, console)
    except CanonError as exc:
        logger.error("%s", exc.message)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
