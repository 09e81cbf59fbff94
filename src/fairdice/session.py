"""
The game itself: a state machine that decides who moves first, lets both
sides pick a die and then rolls both dice.

Every random number the computer contributes is committed to with
`FairRandom.bundle` before the user answers and disclosed afterwards, so
the user can check that the computer did not change its number after
seeing theirs.
"""

import dataclasses
import enum
import logging

from rich.console import Console
from rich.markup import escape

from .dice import MIN_DICE, NUM_FACES, Dice
from .exceptions import InputValidationError, VerificationError
from .fair_random import Commitment, FairRandom, combine
from .prompt import Choice, Command, Rejected, parse_choice
from .table import show_help

LOGGER = logging.getLogger(__name__)


class State(enum.Enum):
    DECIDING_FIRST_PLAYER = "deciding_first_player"
    SELECTING_DICE = "selecting_dice"
    ROLLING_HOST = "rolling_host"
    ROLLING_GUEST = "rolling_guest"
    FINISHED = "finished"


class Player(enum.Enum):
    COMPUTER = "computer"
    USER = "user"


@dataclasses.dataclass(frozen=True)
class Disclosure:
    """A commitment that has been revealed, with what the user added to it."""
    purpose: str
    commitment: Commitment
    contribution: int
    result: int

    def verify(self):
        return self.commitment.verify()


@dataclasses.dataclass(frozen=True)
class RollOutcome:
    roller: Player
    dice: Dice
    commitment: Commitment
    contribution: int
    index: int

    @property
    def value(self):
        return self.dice.faces()[self.index]


@dataclasses.dataclass(frozen=True)
class GameResult:
    computer: RollOutcome
    user: RollOutcome

    @property
    def winner(self):
        if self.computer.index > self.user.index:
            return Player.COMPUTER
        if self.user.index > self.computer.index:
            return Player.USER
        return None


class GameSession:

    """
    One game between the computer and the user.

    Input is read one line at a time through `read_line(prompt)` and all
    output goes to a `rich` console, so a session can be driven entirely
    from tests. Answering `X` at any prompt cancels the session: `run`
    returns `None` and `cancelled` is set. Answering `?` shows the help
    screen and repeats the prompt without touching any commitment.
    """

    def __init__(self, dice, rng=None, console=None, read_line=None):
        dice = list(dice)
        if len(dice) < MIN_DICE:
            raise InputValidationError(f"Need {MIN_DICE} or more dice, got {len(dice)}.")
        if len({id(d) for d in dice}) != len(dice):
            raise InputValidationError("The same die was given more than once.")
        self.dice = dice
        self.rng = rng if rng is not None else FairRandom()
        self.console = console if console is not None else Console()
        self._read_line = read_line if read_line is not None else self.console.input

        self.state = State.DECIDING_FIRST_PLAYER
        self.cancelled = False
        self.first_player = None
        self.computer_dice = None
        self.user_dice = None
        self.computer_roll = None
        self.result = None
        self.history = []

    def run(self):
        """
        Play until the game is over or the user quits.

        Returns:
            The `GameResult`, or `None` if the session was cancelled.
        """
        while self.state is not State.FINISHED:
            if not self.step():
                return None
        return self.result

    def step(self):
        """Run the current state to completion. Returns `False` on quit."""
        if self.cancelled or self.state is State.FINISHED:
            raise RuntimeError(f"Session is over (state={self.state.name}).")

        handlers = {
            State.DECIDING_FIRST_PLAYER: self._decide_first_player,
            State.SELECTING_DICE: self._select_dice,
            State.ROLLING_HOST: self._roll_host,
            State.ROLLING_GUEST: self._roll_guest,
        }
        next_state = handlers[self.state]()
        if next_state is None:
            LOGGER.info("Session cancelled in state %s.", self.state.name)
            self.cancelled = True
            return False

        logging.debug("Transition %s -> %s.", self.state.name, next_state.name)
        self.state = next_state
        return True

    def _say(self, message):
        self.console.print(message, soft_wrap=True, highlight=False)

    def _ask(self, question, options):
        """
        Ask until the user picks one of `options` by index.

        Returns:
            The chosen index, or `None` if the user quit.
        """
        upper = len(options) - 1
        while True:
            self._say(question)
            for i, label in enumerate(options):
                self._say(f"{i} - {escape(str(label))}")
            self._say("X - exit")
            self._say("? - help")
            try:
                text = self._read_line("Your selection: ")
            except EOFError:
                return None

            match parse_choice(text, upper):
                case Command.QUIT:
                    return None
                case Command.HELP:
                    show_help(self.console, self.dice)
                case Choice(value=value):
                    return value
                case Rejected(text=rejected):
                    self._say(f"{escape(repr(rejected))} is not an option. "
                              f"Pick a number from 0 to {upper}, X or ?.")

    def _commit(self, upper):
        commitment = self.rng.bundle(upper)
        self._say(f"I selected a random value in the range 0..{upper} (HMAC={commitment.hash}).")
        return commitment

    def _disclose(self, purpose, commitment, contribution, result):
        self._say(f"My selection: {commitment.number} (KEY={commitment.key_hex}).")
        if not commitment.verify():
            raise VerificationError(
                f"Disclosed number does not match HMAC={commitment.hash}.", commitment)
        self.history.append(Disclosure(purpose, commitment, contribution, result))

    def _decide_first_player(self):
        self._say("Let's determine who makes the first move.")
        commitment = self._commit(1)
        guess = self._ask("Try to guess my selection.", ["0", "1"])
        if guess is None:
            return None

        outcome = combine(commitment.number, guess, 2)
        self._disclose("first move", commitment, guess, outcome)
        self.first_player = Player.COMPUTER if outcome == 1 else Player.USER
        logging.debug("First move: %s.", self.first_player.value)
        if self.first_player is Player.COMPUTER:
            self._say("I make the first move.")
        else:
            self._say("You make the first move.")
        return State.SELECTING_DICE

    def _remaining(self, taken):
        return [d for d in self.dice if d is not taken]

    def _computer_pick(self, choices):
        picked = choices[self.rng.uniform(len(choices) - 1)]
        self._say(f"I choose the {escape(f'[{picked}]')} dice.")
        return picked

    def _user_pick(self, choices):
        index = self._ask("Choose your dice:", choices)
        if index is None:
            return None
        picked = choices[index]
        self._say(f"You choose the {escape(f'[{picked}]')} dice.")
        return picked

    def _select_dice(self):
        if self.first_player is Player.COMPUTER:
            self.computer_dice = self._computer_pick(self.dice)
            self.user_dice = self._user_pick(self._remaining(self.computer_dice))
            if self.user_dice is None:
                return None
        else:
            self.user_dice = self._user_pick(self.dice)
            if self.user_dice is None:
                return None
            self.computer_dice = self._computer_pick(self._remaining(self.user_dice))
        return State.ROLLING_HOST

    def _roll(self, roller, dice):
        """
        Roll `dice` for `roller`. Both rolls use this same exchange: the
        computer commits to a number, the user adds theirs, and the sum
        modulo the number of faces is the roll result. The face it lands
        on is shown for information only.
        """
        whose = "my" if roller is Player.COMPUTER else "your"
        self._say(f"It's time for {whose} roll.")
        commitment = self._commit(NUM_FACES - 1)
        contribution = self._ask(f"Add your number modulo {NUM_FACES}.",
                                 [str(i) for i in range(NUM_FACES)])
        if contribution is None:
            return None

        index = combine(commitment.number, contribution, NUM_FACES)
        self._disclose(f"{roller.value} roll", commitment, contribution, index)
        outcome = RollOutcome(roller, dice, commitment, contribution, index)
        self._say(f"The fair number generation result is "
                  f"{commitment.number} + {contribution} = {index} (mod {NUM_FACES}).")
        self._say(f"{whose.capitalize()} roll result is {index} "
                  f"(face {outcome.value} of {escape(f'[{dice}]')}).")
        return outcome

    def _roll_host(self):
        self.computer_roll = self._roll(Player.COMPUTER, self.computer_dice)
        if self.computer_roll is None:
            return None
        return State.ROLLING_GUEST

    def _roll_guest(self):
        user_roll = self._roll(Player.USER, self.user_dice)
        if user_roll is None:
            return None

        self.result = GameResult(self.computer_roll, user_roll)
        mine, yours = self.computer_roll.index, user_roll.index
        match self.result.winner:
            case Player.COMPUTER:
                self._say(f"I win ({mine} > {yours})!")
            case Player.USER:
                self._say(f"You win ({yours} > {mine})!")
            case _:
                self._say(f"It's a tie ({mine} = {yours}).")
        return State.FINISHED
