"""pyptree - Command line entry point."""

import argparse
import logging
import os
import sys

from pyptree.harvester import DEFAULT_PROC_ROOT, SOURCES, ProcRootUnavailableError, harvest
from pyptree.render import DEFAULT_INDENT, render_tree
from pyptree.tree import build_tree

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def create_argument_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pyptree",
        description="Print the tree of running processes",
    )
    parser.add_argument(
        "--proc-root",
        default=DEFAULT_PROC_ROOT,
        help=f"process-information root (default: {DEFAULT_PROC_ROOT})",
    )
    parser.add_argument(
        "--source",
        choices=SOURCES,
        default="procfs",
        help="where to read process records from",
    )
    parser.add_argument(
        "--indent",
        type=_non_negative_int,
        default=DEFAULT_INDENT,
        help="spaces per tree level",
    )
    parser.add_argument(
        "--log-level",
        "-l",
        dest="log_level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="set the logging level",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for pyptree. Returns the process exit status."""
    args = create_argument_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        records = harvest(args.source, args.proc_root)
        tree = build_tree(records)
        logger.info("%d of %d records placed in the tree", len(tree) - 1, len(records))
        render_tree(tree, sys.stdout, args.indent)
    except ProcRootUnavailableError as err:
        print(f"pyptree: error: {err}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except BrokenPipeError:
        # The reader went away. Send the rest to devnull so the interpreter's
        # final flush of stdout does not fail again.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        os.close(devnull)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
