"""
Toi Command-Line Interface.

Runs the parser's entry productions on text given on the command line.

Usage:
    toi parse "1*2+3*4"                 # Print the canonical rendering
    toi parse --rule decl "var x = 2"   # Parse with another production
    toi check --rule numeral 3 00 0.5   # Accept/reject a batch of inputs
    toi parse -- "-1*-2"                # "--" before input starting with "-"
"""

import argparse
import logging
import os
import sys
from typing import Optional

from toi import __version__
from toi.compiler.ast_nodes import render, render_parse_result
from toi.compiler.parser import ENTRY_POINTS
from toi.utils.errors import ToiError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""


def _init_colors(force_off: bool = False) -> None:
    """Initialize colors based on terminal capabilities."""
    if force_off or not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="toi",
        description="Toi - parse let/function arithmetic expressions",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="warning",
        help="Logging level (default: warning)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser(
        "parse",
        aliases=["p"],
        help="Parse text and print its canonical form",
    )
    parse_parser.add_argument(
        "text",
        help="Text to parse",
    )
    parse_parser.add_argument(
        "-r",
        "--rule",
        choices=sorted(ENTRY_POINTS),
        default="expr",
        help="Grammar production to parse with (default: expr)",
    )

    # Check command
    check_parser = subparsers.add_parser(
        "check",
        help="Report which inputs a production accepts",
    )
    check_parser.add_argument(
        "texts",
        nargs="+",
        metavar="text",
        help="Inputs to try",
    )
    check_parser.add_argument(
        "-r",
        "--rule",
        choices=sorted(ENTRY_POINTS),
        default="expr",
        help="Grammar production to parse with (default: expr)",
    )

    return parser


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle the parse command."""
    parse = ENTRY_POINTS[args.rule]

    try:
        result = parse(args.text)
    except ToiError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return 1

    print(render(result))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    parse = ENTRY_POINTS[args.rule]
    accepted = 0

    for text in args.texts:
        rendered = render_parse_result(parse, text)
        if rendered == "err":
            print(f"{Colors.RED}err{Colors.RESET} {text}")
        else:
            accepted += 1
            print(f"{Colors.GREEN}ok{Colors.RESET}  {text} {Colors.GRAY}=> {rendered}{Colors.RESET}")

    print(f"{Colors.BOLD}{accepted}/{len(args.texts)} accepted{Colors.RESET}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format=LOG_FORMAT,
    )
    _init_colors(force_off=args.no_color)

    if args.command is None:
        parser.print_help()
        return 0

    command_handlers = {
        "parse": cmd_parse,
        "p": cmd_parse,
        "check": cmd_check,
    }

    handler = command_handlers.get(args.command)
    if handler:
        logger.debug("Running %s with rule %s", args.command, args.rule)
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
