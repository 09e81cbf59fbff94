"""Provably fair random numbers.

The computer commits to a number by publishing an HMAC of it before the
user makes a move. Once the user has answered, the secret key and the
number are disclosed, and anyone can recompute the HMAC to check that the
number was not changed in between.
"""

import hashlib
import hmac
import logging
import secrets
from typing import NamedTuple

import numpy as np

from .exceptions import EntropyError, InvalidRange, MalformedKey

LOGGER = logging.getLogger(__name__)

KEY_LENGTH = 32
HASH = hashlib.sha3_256


def _decode_key(key) -> bytes:
    if isinstance(key, str):
        try:
            key = bytes.fromhex(key)
        except ValueError:
            raise MalformedKey("Secret key is not a hex string.") from None
    if not isinstance(key, (bytes, bytearray)):
        raise MalformedKey(f"Secret key must be bytes, got {type(key).__name__}.")
    if len(key) != KEY_LENGTH:
        raise MalformedKey(f"Secret key must be {KEY_LENGTH} bytes, got {len(key)}.")
    return bytes(key)


def commit(key, number) -> str:
    """
    Compute the commitment to `number` under `key`.

    Args:
        key: the secret key, as bytes or as its hex string.
        number: the committed integer.

    Raises:
        MalformedKey: if `key` is not a valid secret key.
        TypeError: if `number` is not an integer.

    Returns:
        HMAC-SHA3-256 of the decimal form of `number`, as uppercase hex.
    """
    if isinstance(number, bool) or not isinstance(number, (int, np.integer)):
        raise TypeError(f"Committed number must be an integer, got {number!r}.")
    message = str(int(number)).encode("ascii")
    return hmac.new(_decode_key(key), message, HASH).hexdigest().upper()


def verify(key, number, hash) -> bool:
    """Check a disclosed key and number against a published commitment."""
    expected = commit(key, number)
    if not isinstance(hash, str) or not hash.isascii():
        return False
    return hmac.compare_digest(expected, hash.upper())


def combine(a, b, modulus):
    return (a + b) % modulus


class Commitment(NamedTuple):
    """A committed number together with the key that hides it."""

    number: int
    key: bytes
    hash: str

    @property
    def key_hex(self):
        return self.key.hex()

    def verify(self):
        return verify(self.key, self.number, self.hash)


class FairRandom:

    """
    Source of committed random numbers.

    All randomness comes from `token_bytes`, which must be a
    cryptographically secure byte source. There is no fallback: if the
    source fails the error is raised as `EntropyError`.
    """

    def __init__(self, token_bytes=secrets.token_bytes):
        self._token_bytes = token_bytes

    def random_bytes(self, n):
        try:
            data = self._token_bytes(n)
        except (OSError, NotImplementedError) as exc:
            raise EntropyError(f"Secure random source unavailable: {exc}") from exc
        if len(data) != n:
            raise EntropyError(f"Secure random source returned {len(data)} bytes, wanted {n}.")
        return data

    def generate_key(self):
        return self.random_bytes(KEY_LENGTH)

    def uniform(self, upper):
        """
        Draw an integer uniformly from `[0, upper]`.

        Samples use just enough bits to cover `upper`; samples above
        `upper` are rejected and drawn again, so fewer than two draws are
        needed on average.
        """
        if upper < 0:
            raise InvalidRange(upper)
        bits = max(int(upper).bit_length(), 1)
        num_bytes = (bits + 7) // 8
        mask = (1 << bits) - 1
        draws = 0
        while True:
            draws += 1
            value = int.from_bytes(self.random_bytes(num_bytes), "big") & mask
            if value <= upper:
                logging.debug("Uniform draw in [0, %s] took %s sample(s).", upper, draws)
                return value

    def bundle(self, upper):
        """Pick a number in `[0, upper]` and commit to it under a fresh key."""
        key = self.generate_key()
        number = self.uniform(upper)
        commitment = Commitment(number, key, commit(key, number))
        LOGGER.debug("Committed to a number in [0, %s] with HMAC=%s.", upper, commitment.hash)
        return commitment
