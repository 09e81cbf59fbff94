"""Command line entry point: `fairdice 2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3`."""

import argparse
import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

import fairdice.config as config
from .dice import EXAMPLE, parse_dice_set
from .exceptions import CryptoError, InputValidationError
from .session import GameSession

LOGGER = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="fairdice",
        description="Non-transitive dice game with provably fair rolls.",
        epilog=f"Example: fairdice {EXAMPLE}",
    )
    parser.add_argument("dice", nargs="*", metavar="DICE",
                        help="six comma separated faces, e.g. 2,2,4,4,9,9")
    parser.add_argument("--traceback", action="store_true", default=config.traceback,
                        help="re-raise errors during the game instead of printing them")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log debugging information to stderr")
    return parser


def setup_logging(level):
    console = Console(stderr=True)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(markup=True, show_time=False, console=console)])


def report_error(console, prefix, exc):
    console.print(f"[bold red]{prefix}:[/bold red] {escape(str(exc))}", soft_wrap=True)
    LOGGER.debug("%s: %r", prefix, exc)


def main(argv=None, console=None, error_console=None, read_line=None, rng=None):
    """
    Run one game.

    Returns:
        The process exit status: 0 after a finished or cancelled game, 1
        if the dice are invalid or the game failed.
    """
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else config.log_level)
    error_console = error_console if error_console is not None else Console(stderr=True)

    try:
        dice = parse_dice_set(args.dice)
    except InputValidationError as exc:
        report_error(error_console, "Error", exc)
        return 1

    session = GameSession(dice, rng=rng, console=console, read_line=read_line)
    try:
        session.run()
    except CryptoError as exc:
        if args.traceback:
            raise
        report_error(error_console, "Error in game", exc)
        return 1
    return 0
