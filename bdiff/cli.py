"""
bdiff command line

Usage:
    bdiff [options] <file1> <file2>

Examples:
    bdiff old.bin new.bin               # first 4 differing blocks
    bdiff -c -l 0 old.bin new.bin       # every differing block, in color
    bdiff -g 4 firmware_a.img firmware_b.img
"""

import argparse
import logging
import re
import sys
from typing import List, Optional

from . import __version__
from .errors import BdiffError, BdiffIOError
from .log_setup import reset_logging, setup_logging
from .renderer import DEFAULT_GROUP, DEFAULT_LIMIT, RenderConfig
from .scanner import compare_files

PROG = "bdiff"

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_INTEGER = re.compile(r"\s*[+-]?\d+\Z")

logger = logging.getLogger(__name__)


class UsageError(BdiffError):
    """Bad command line. ``message`` may be empty (help text only)."""


class BdiffArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with status 2."""

    def error(self, message):
        raise UsageError(_friendly_message(message))


def _friendly_message(message: str) -> str:
    missing = re.match(r"argument (-\w)(?:/\S+)?: expected one argument", message)
    if missing:
        return f"Option {missing.group(1)} requires an argument."
    unknown = re.match(r"unrecognized arguments: (\S+)", message)
    if unknown:
        token = unknown.group(1)
        if token.startswith("-") and len(token) > 1:
            return f"Unknown option {token}."
        return ""
    return message


def integer(value: str) -> int:
    """Whole-string decimal integer, as strtol with a full-match check."""
    if not _INTEGER.match(value):
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}")
    return int(value)


def group_size(value: str) -> int:
    n = integer(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"group must be non-negative, got {n}")
    return n


def build_parser() -> BdiffArgumentParser:
    parser = BdiffArgumentParser(
        prog=PROG,
        usage="%(prog)s [options] <file1> <file2>",
        description="Compare two binary files byte by byte.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("files", nargs="*", metavar="file",
                        help="the two files to compare")
    parser.add_argument("-c", dest="color", action="store_true",
                        help="show coloured output")
    parser.add_argument("-g", dest="group", type=group_size, default=DEFAULT_GROUP,
                        metavar="n",
                        help=f"num. bytes per output group (default {DEFAULT_GROUP})")
    parser.add_argument("-h", dest="help", action="store_true",
                        help="print this help message")
    parser.add_argument("-l", dest="limit", type=integer, default=DEFAULT_LIMIT,
                        metavar="n",
                        help="set number of blocks to output, or < 1 for infinite "
                             f"(default {DEFAULT_LIMIT})")
    parser.add_argument("-v", dest="version", action="store_true",
                        help="print the program version")
    parser.add_argument("--debug", action="store_true",
                        help="log diagnostics to stderr")
    parser.add_argument("--log-file", metavar="PATH",
                        help="also write a debug log to PATH")
    return parser


def usage(parser: argparse.ArgumentParser, message: str = "") -> int:
    """Print an optional message and the help text to stderr."""
    if message:
        print(message, file=sys.stderr)
    parser.print_help(file=sys.stderr)
    return EXIT_FAILURE


def early_exit_flag(argv: List[str]) -> Optional[str]:
    """
    Walk short options in command-line order, as getopt does, and return
    "h" or "v" if one shows up before anything that would be a usage
    error. Returns None otherwise.
    """
    args = iter(argv)
    for token in args:
        if token == "--":
            return None
        if token.startswith("--"):
            if token == "--log-file":
                next(args, None)
            continue
        if not token.startswith("-") or token == "-":
            continue
        cluster = token[1:]
        for pos, flag in enumerate(cluster):
            if flag in "hv":
                return flag
            if flag == "c":
                continue
            if flag in "gl":
                value = cluster[pos + 1:] or next(args, None)
                if value is None:
                    return None
                try:
                    (group_size if flag == "g" else integer)(value)
                except argparse.ArgumentTypeError:
                    return None
                break
            return None
    return None


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    flag = early_exit_flag(argv)
    if flag == "h":
        usage(parser)
        return EXIT_SUCCESS
    if flag == "v":
        print(f"{PROG} - version {__version__}", file=sys.stderr)
        return EXIT_SUCCESS

    try:
        args = parser.parse_intermixed_args(argv)
    except UsageError as e:
        return usage(parser, str(e))

    if len(args.files) != 2:
        return usage(parser)

    reset_logging()
    try:
        setup_logging(
            console_level=logging.DEBUG if args.debug else logging.WARNING,
            log_file=args.log_file,
        )
    except OSError as e:
        reset_logging()
        print(f"{PROG}: {BdiffIOError.from_os_error('log', e, args.log_file)}",
              file=sys.stderr)
        return EXIT_FAILURE

    config = RenderConfig(group=args.group, color=args.color, limit=args.limit)
    file_a, file_b = args.files
    try:
        compare_files(file_a, file_b, config, sys.stdout)
    except BdiffIOError as e:
        sys.stdout.flush()
        print(f"{PROG}: {e}", file=sys.stderr)
        logger.debug("I/O failure", exc_info=True)
        return EXIT_FAILURE
    finally:
        reset_logging()
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
