# common.py

import io

from rich.console import Console

import fairdice as fd
from fairdice.fair_random import Commitment, commit

CANONICAL = ["2,2,4,4,9,9", "6,8,1,1,8,6", "7,5,3,7,5,3"]


def canonical_dice():
    return fd.parse_dice_set(CANONICAL)


def make_console():
    return Console(file=io.StringIO(), width=200, color_system=None)


def output(console):
    return console.file.getvalue()


class ScriptedInput:
    """Stands in for `input`, answering prompts from a fixed list of lines."""

    def __init__(self, *lines):
        self.lines = list(lines)
        self.prompts = []

    def __call__(self, prompt=""):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


class RiggedRandom(fd.FairRandom):
    """Commits to scripted numbers and picks scripted dice indices."""

    def __init__(self, numbers=(), picks=()):
        super().__init__()
        self.numbers = list(numbers)
        self.picks = list(picks)
        self.bundles = []
        self.uniform_bounds = []

    def uniform(self, upper):
        self.uniform_bounds.append(upper)
        return self.picks.pop(0)

    def bundle(self, upper):
        number = self.numbers.pop(0)
        assert 0 <= number <= upper
        key = self.generate_key()
        commitment = Commitment(number, key, commit(key, number))
        self.bundles.append(commitment)
        return commitment


class TamperedRandom(RiggedRandom):
    """Publishes a hash for a different number than the one it discloses."""

    def bundle(self, upper):
        commitment = super().bundle(upper)
        forged = commit(commitment.key, (commitment.number + 1) % (upper + 1))
        return commitment._replace(hash=forged)
