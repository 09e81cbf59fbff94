from .dice import Dice, parse_dice, parse_dice_set, win_chance, win_matrix
from .exceptions import (
    FairDiceError,
    InputValidationError,
    CryptoError,
    InvalidRange,
    MalformedKey,
    EntropyError,
    VerificationError,
)
from .fair_random import FairRandom, Commitment, commit, verify, combine
from .prompt import Choice, Command, Rejected, parse_choice
from .session import GameSession, GameResult, RollOutcome, Disclosure, Player, State

__all__ = [
    "Dice", "parse_dice", "parse_dice_set", "win_chance", "win_matrix",
    "FairDiceError", "InputValidationError", "CryptoError", "InvalidRange",
    "MalformedKey", "EntropyError", "VerificationError",
    "FairRandom", "Commitment", "commit", "verify", "combine",
    "Choice", "Command", "Rejected", "parse_choice",
    "GameSession", "GameResult", "RollOutcome", "Disclosure", "Player", "State",
]
