"""Command-line front door for textselect.

Parses CLI options, merges them with stored preferences, and configures
logging. Then dispatches into the interactive picker runtime.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import load_preferences
from .delivery import PLACEHOLDER, DeliveryMode, DeliveryOptions
from .errors import diagnostic
from .line_index import STDIN_SOURCE
from .runtime import run_textselect
from .ui_theme import available_theme_names, resolve_theme

LOG_FILE_ENV = "TEXTSELECT_LOG_FILE"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
INTERRUPTED_STATUS = 130

KEYS_HELP = f"""\
keys:
  Up, Left, k       move the cursor up
  Down, Right, j    move the cursor down
  PageUp/PageDown   move by one screen
  Home/g, End/G     jump to the first/last line
  Space             select or deselect the current line
  v                 invert the selection of all lines
  Enter, q          finish and deliver the selection
  Ctrl-C            abort without delivering

examples:
  textselect -o picked.txt input.txt
  textselect input.txt sort
  git ls-files | textselect -x - rm --
  textselect -I hosts.txt ssh {PLACEHOLDER} uptime
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textselect",
        description=(
            "Interactively select lines from a text file and optionally run a "
            "command with the selected lines."
        ),
        epilog=KEYS_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", dest="invert", action="store_true", help="Start with the selection inverted.")
    parser.add_argument(
        "-n",
        dest="keep_empty",
        action="store_true",
        help="Keep empty lines as independently selectable lines.",
    )
    parser.add_argument("-0", dest="null_delimited", action="store_true", help="Delimit output lines with NUL.")
    parser.add_argument("-o", dest="output", metavar="OUTPUT", help="Also write the selected lines to OUTPUT.")

    modes = parser.add_mutually_exclusive_group()
    modes.add_argument(
        "-x",
        dest="mode",
        action="store_const",
        const=DeliveryMode.BATCH,
        help="Run the command once with all selected lines as trailing arguments.",
    )
    modes.add_argument(
        "-l",
        dest="mode",
        action="store_const",
        const=DeliveryMode.PER_LINE,
        help="Run the command once per selected line, line as last argument.",
    )
    modes.add_argument(
        "-I",
        dest="mode",
        action="store_const",
        const=DeliveryMode.PLACEHOLDER,
        help=f"Run the command once per selected line, replacing {PLACEHOLDER} arguments.",
    )
    parser.set_defaults(mode=DeliveryMode.PIPE)

    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Use attributes only, no colors.")
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        default=None,
        help=f"Write debug logs to PATH (default: ${LOG_FILE_ENV}).",
    )
    parser.add_argument("input", help=f"Input file, or {STDIN_SOURCE} for standard input.")
    parser.add_argument(
        "command",
        nargs=argparse.REMAINDER,
        help="Command to receive the selected lines (default: print them).",
    )
    return parser


def configure_logging(log_file: str | None) -> None:
    """Send debug logs to a file; the screen belongs to the picker."""
    target = log_file or os.environ.get(LOG_FILE_ENV)
    if not target:
        return
    logging.basicConfig(filename=target, level=logging.DEBUG, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the picker.

    Flags can only switch stored preferences on; ``--theme`` overrides the
    stored theme. Fatal errors exit through ``SystemExit`` with a diagnostic.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.mode is not DeliveryMode.PIPE and not args.command:
        parser.error("-x, -l and -I require a command")

    configure_logging(args.log_file)
    preferences = load_preferences()
    theme = resolve_theme(args.theme or preferences.theme, no_color=args.no_color)
    options = DeliveryOptions(
        output_path=Path(args.output) if args.output else None,
        null_delimited=args.null_delimited or preferences.null_delimited,
        command=tuple(args.command),
        mode=args.mode,
    )

    try:
        run_textselect(
            args.input,
            options,
            keep_empty=args.keep_empty or preferences.keep_empty,
            invert=args.invert,
            theme=theme,
        )
    except KeyboardInterrupt:
        print(diagnostic("interrupted"), file=sys.stderr)
        raise SystemExit(INTERRUPTED_STATUS) from None


if __name__ == "__main__":
    main()
