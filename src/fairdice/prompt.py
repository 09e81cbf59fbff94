"""Parsing of one line of interactive input into a tagged result."""

import dataclasses
import enum

QUIT = "X"
HELP = "?"


class Command(enum.Enum):
    QUIT = "quit"
    HELP = "help"


@dataclasses.dataclass(frozen=True)
class Choice:
    value: int


@dataclasses.dataclass(frozen=True)
class Rejected:
    text: str


def parse_choice(text, upper):
    """
    Interpret `text` as an answer to a prompt offering `0..upper`.

    Returns:
        `Command.QUIT`, `Command.HELP`, a `Choice` in range, or `Rejected`
        for anything else. Never raises.
    """
    text = text.strip()
    if text.upper() == QUIT:
        return Command.QUIT
    if text == HELP:
        return Command.HELP
    if text.isascii() and text.isdigit():
        value = int(text)
        if value <= upper:
            return Choice(value)
    return Rejected(text)
