"""Exceptions used by the fairdice game"""


class FairDiceError(Exception):
    """Base class for all fairdice errors"""


class InputValidationError(FairDiceError, ValueError):
    """Dice specifications given at startup are unusable"""


class CryptoError(FairDiceError):
    """The commit-reveal protocol cannot be carried out safely"""


class InvalidRange(CryptoError, ValueError):
    """Requested a random number from an empty range"""

    def __init__(self, upper):
        super().__init__(f"Upper bound must be >= 0, got {upper}.")
        self.upper = upper


class MalformedKey(CryptoError):
    """A secret key could not be decoded or has the wrong length"""


class EntropyError(CryptoError):
    """The secure random source is unavailable"""


class VerificationError(CryptoError):
    """A disclosed key and number do not match the published commitment"""

    def __init__(self, message, commitment=None):
        super().__init__(message)
        if commitment:
            self.commitment = commitment
