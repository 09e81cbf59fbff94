import hashlib
import hmac

import numpy as np
import pytest

import fairdice as fd
from fairdice.fair_random import KEY_LENGTH


def scripted_bytes(*chunks):
    chunks = list(chunks)
    requested = []

    def token_bytes(n):
        requested.append(n)
        return chunks.pop(0)

    token_bytes.requested = requested
    return token_bytes


def flip_hex_char(text, i=0):
    c = text[i]
    replacement = "0" if c != "0" else "1"
    return text[:i] + replacement + text[i + 1:]


class TestUniform:

    @pytest.mark.parametrize("upper", [0, 1, 2, 5, 7, 8, 255, 256, 1000])
    def test_in_range(self, upper):
        rng = fd.FairRandom()
        values = [rng.uniform(upper) for _ in range(2000)]
        assert min(values) >= 0
        assert max(values) <= upper

    def test_zero(self):
        assert fd.FairRandom().uniform(0) == 0

    def test_chi_square(self):
        rng = fd.FairRandom()
        upper = 5
        n = 12000
        counts = np.bincount([rng.uniform(upper) for _ in range(n)], minlength=upper + 1)
        assert len(counts) == upper + 1
        expected = n / (upper + 1)
        chi2 = float(np.sum((counts - expected) ** 2 / expected))
        # df = 5; P(chi2 > 30) is about 1.5e-5.
        assert chi2 < 30

    def test_rejection_sampling(self):
        source = scripted_bytes(b"\x07", b"\x06", b"\x04")
        rng = fd.FairRandom(token_bytes=source)
        assert rng.uniform(5) == 4
        assert source.requested == [1, 1, 1]

    def test_mask_uses_minimal_bits(self):
        # 0xff masked to 3 bits is 7, rejected; 0xfb masked is 3.
        rng = fd.FairRandom(token_bytes=scripted_bytes(b"\xff", b"\xfb"))
        assert rng.uniform(5) == 3

    def test_two_bytes(self):
        source = scripted_bytes(b"\x01\xff", b"\x01\x00")
        rng = fd.FairRandom(token_bytes=source)
        assert rng.uniform(256) == 256
        assert source.requested == [2, 2]

    def test_negative(self):
        with pytest.raises(fd.InvalidRange, match=r".*>= 0.*"):
            fd.FairRandom().uniform(-1)

    def test_invalid_range_is_value_error(self):
        with pytest.raises(ValueError):
            fd.FairRandom().uniform(-5)


class TestEntropy:

    def test_key(self):
        rng = fd.FairRandom()
        k1 = rng.generate_key()
        k2 = rng.generate_key()
        assert isinstance(k1, bytes)
        assert len(k1) == KEY_LENGTH == 32
        assert k1 != k2

    def test_source_unavailable(self):
        def broken(n):
            raise OSError("no entropy")

        rng = fd.FairRandom(token_bytes=broken)
        with pytest.raises(fd.EntropyError, match=r".*unavailable.*"):
            rng.generate_key()
        with pytest.raises(fd.CryptoError):
            rng.uniform(5)

    def test_short_read(self):
        rng = fd.FairRandom(token_bytes=lambda n: b"\x00")
        with pytest.raises(fd.EntropyError):
            rng.generate_key()


class TestCommit:

    def test_matches_hmac_sha3(self):
        key = bytes(range(32))
        expected = hmac.new(key, b"3", hashlib.sha3_256).hexdigest().upper()
        assert fd.commit(key, 3) == expected

    def test_deterministic(self):
        key = fd.FairRandom().generate_key()
        assert fd.commit(key, 4) == fd.commit(key, 4)
        assert fd.commit(key, 4) != fd.commit(key, 5)

    def test_format(self):
        h = fd.commit(fd.FairRandom().generate_key(), 0)
        assert len(h) == 64
        assert h == h.upper()
        int(h, 16)

    def test_hex_key(self):
        key = fd.FairRandom().generate_key()
        assert fd.commit(key.hex(), 2) == fd.commit(key, 2)
        assert fd.commit(key.hex().upper(), 2) == fd.commit(key, 2)

    @pytest.mark.parametrize("key", [b"short", "zz" * 32, "ab" * 31, 12345, None])
    def test_malformed_key(self, key):
        with pytest.raises(fd.MalformedKey):
            fd.commit(key, 1)

    @pytest.mark.parametrize("number", [3.7, 3.0, True, "3", None])
    def test_non_integer_number(self, number):
        key = fd.FairRandom().generate_key()
        with pytest.raises(TypeError, match=r".*must be an integer.*"):
            fd.commit(key, number)
        with pytest.raises(TypeError):
            fd.verify(key, number, fd.commit(key, 3))

    def test_numpy_integer(self):
        key = fd.FairRandom().generate_key()
        assert fd.commit(key, np.int64(3)) == fd.commit(key, 3)

    def test_verify_malformed_key(self):
        with pytest.raises(fd.MalformedKey):
            fd.verify("not hex", 1, "00" * 32)


class TestVerify:

    def setup_method(self):
        self.key = fd.FairRandom().generate_key()
        self.number = 3
        self.hash = fd.commit(self.key, self.number)

    def test_round_trip(self):
        assert fd.verify(self.key, self.number, self.hash)
        assert fd.verify(self.key.hex(), self.number, self.hash)

    def test_hash_case_insensitive(self):
        assert fd.verify(self.key, self.number, self.hash.lower())

    @pytest.mark.parametrize("i", [0, 17, 63])
    def test_hash_flip(self, i):
        assert not fd.verify(self.key, self.number, flip_hex_char(self.hash, i))

    @pytest.mark.parametrize("bit", [0, 7, 255])
    def test_key_flip(self, bit):
        flipped = bytearray(self.key)
        flipped[bit // 8] ^= 1 << (bit % 8)
        assert not fd.verify(bytes(flipped), self.number, self.hash)

    def test_number_changed(self):
        assert not fd.verify(self.key, self.number + 1, self.hash)
        assert not fd.verify(self.key, self.number - 1, self.hash)

    def test_bad_hash_types(self):
        assert not fd.verify(self.key, self.number, None)
        assert not fd.verify(self.key, self.number, "é" * 64)
        assert not fd.verify(self.key, self.number, self.hash[:-1])


class TestBundle:

    def test_bundle(self):
        rng = fd.FairRandom()
        for upper in (1, 5):
            number, key, hash = rng.bundle(upper)
            assert 0 <= number <= upper
            assert len(key) == 32
            assert fd.verify(key, number, hash)

    def test_commitment(self):
        c = fd.FairRandom().bundle(5)
        assert isinstance(c, fd.Commitment)
        assert c.verify()
        assert c.key_hex == c.key.hex()
        assert not c._replace(number=(c.number + 1) % 6).verify()

    def test_fresh_keys(self):
        rng = fd.FairRandom()
        assert rng.bundle(5).key != rng.bundle(5).key


class TestCombine:

    def test_first_move(self):
        assert fd.combine(1, 0, 2) == 1
        assert fd.combine(1, 1, 2) == 0

    def test_roll(self):
        assert fd.combine(3, 4, 6) == 1
        assert fd.combine(5, 5, 6) == 4
        assert fd.combine(0, 0, 6) == 0
