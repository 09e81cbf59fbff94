"""Dice and the probability of one die beating another."""

import logging
from fractions import Fraction

import numpy as np

from .exceptions import InputValidationError

NUM_FACES = 6
MIN_DICE = 3
EXAMPLE = "2,2,4,4,9,9 6,8,1,1,8,6 7,5,3,7,5,3"


class Dice:

    """
    A die with six fixed faces.

    Dice compare by identity: two dice with the same faces are still
    different choices in a game.
    """

    __slots__ = ("_faces",)

    def __init__(self, faces):
        faces = tuple(faces)
        if len(faces) != NUM_FACES:
            raise InputValidationError(
                f"A die needs exactly {NUM_FACES} faces, got {len(faces)}.")
        for face in faces:
            if isinstance(face, bool) or not isinstance(face, (int, np.integer)):
                raise InputValidationError(f"Face {face!r} is not an integer.")
            if face < 0:
                raise InputValidationError(f"Face {face} is negative.")
        self._faces = tuple(int(face) for face in faces)

    def faces(self):
        return self._faces

    def __str__(self):
        return ",".join(str(face) for face in self._faces)

    def __repr__(self):
        return f"Dice<{self}>"


def parse_dice(text):
    """
    Parse a die written as comma separated faces, e.g. `2,2,4,4,9,9`.

    Raises:
        InputValidationError: if a face is not a non-negative integer or
          the number of faces is wrong.
    """
    faces = []
    for token in text.split(","):
        token = token.strip()
        if not (token.isascii() and token.isdigit()):
            raise InputValidationError(f"Invalid number: {token!r} in {text!r}.")
        faces.append(int(token))
    if len(faces) != NUM_FACES:
        raise InputValidationError(
            f"Need {NUM_FACES} numbers for a die, got {len(faces)} in {text!r}.")
    return Dice(faces)


def parse_dice_set(specs):
    specs = list(specs)
    if len(specs) < MIN_DICE:
        raise InputValidationError(
            f"Need {MIN_DICE} or more dice, got {len(specs)}. "
            f"Example: fairdice {EXAMPLE}")
    dice = [parse_dice(spec) for spec in specs]
    logging.debug("Parsed %s dice: %s.", len(dice), dice)
    return dice


def win_chance(a, b):
    """
    Probability that a roll of `a` is strictly greater than a roll of `b`.

    Every ordered pair of faces is equally likely, so this is the number
    of winning pairs over the number of pairs. Ties count as neither a
    win nor a loss, so `win_chance(a, b) + win_chance(b, a)` can be less
    than one.

    Args:
        a: A `Dice`.
        b: A `Dice`.

    Returns:
        A `Fraction` in `[0, 1]`.
    """
    fa = np.asarray(a.faces())
    fb = np.asarray(b.faces())
    wins = np.count_nonzero(np.greater.outer(fa, fb))
    return Fraction(int(wins), fa.size * fb.size)


def win_matrix(dice):
    """Table of `win_chance(row, column)` over every pair in `dice`."""
    return [[win_chance(a, b) for b in dice] for a in dice]
