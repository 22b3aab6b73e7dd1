"""Unit tests for the base-62 big number codec."""

import pytest

from core import base62
from core.errors import InvalidFormatError, InvalidOverflowError


def to_int(words):
    number = 0
    for word in words:
        number = (number << 32) | word
    return number


def to_words(number):
    return [(number >> (32 * i)) & 0xFFFFFFFF for i in range(4, -1, -1)]


class TestRemainder:
    """Tests for word-by-word division."""

    def test_matches_integer_division(self, rng):
        """Quotient and remainder agree with Python integers."""
        for _ in range(200):
            number = rng.getrandbits(160)
            divisor = rng.randrange(1, 1 << 31)
            quotient, remainder = base62.remainder(to_words(number), divisor)
            assert to_int(quotient) == number // divisor
            assert remainder == number % divisor

    def test_does_not_modify_input(self):
        """Division leaves the input words untouched."""
        words = [1, 2, 3, 4, 5]
        base62.remainder(words, 62)
        assert words == [1, 2, 3, 4, 5]


class TestMultiply:
    """Tests for word-by-word multiplication."""

    def test_matches_truncated_product(self, rng):
        """Unvalidated product is truncated to 160 bits."""
        for _ in range(200):
            number = rng.getrandbits(160)
            multiplier = rng.randrange(0, 1 << 31)
            addend = rng.randrange(0, 1 << 31)
            product = base62.multiply(to_words(number), multiplier, addend, validate=False)
            assert to_int(product) == (number * multiplier + addend) % (1 << 160)

    def test_overflow_raises_when_validating(self):
        """Carry out of the top word is rejected."""
        words = [0xFFFFFFFF] * 5
        with pytest.raises(InvalidOverflowError):
            base62.multiply(words, 62, 0)

    def test_words_stay_unsigned(self):
        """Every product word is within 32 bits."""
        product = base62.multiply([0x7FFFFFFF, 0xFFFFFFFF, 0xFFFFFFFF, 0xFFFFFFFF, 0xFFFFFFFF], 2, 1)
        assert all(0 <= word <= 0xFFFFFFFF for word in product)
        assert product == [0xFFFFFFFF] * 5


class TestEncodeDecode:
    """Tests for string conversion."""

    def test_zero_encodes_to_padding(self):
        """Zero is 27 zero digits."""
        assert base62.encode([0, 0, 0, 0, 0]) == "0" * 27

    def test_max_value(self):
        """All ones is the largest valid string."""
        assert base62.encode([0xFFFFFFFF] * 5) == "aWgEPTl1tmebfsQzFP4bxwgy80V"
        assert base62.decode("aWgEPTl1tmebfsQzFP4bxwgy80V") == [0xFFFFFFFF] * 5

    def test_small_value_is_left_padded(self):
        """Short encodings are padded on the left."""
        assert base62.encode([0, 0, 0, 0, 61]) == "0" * 26 + "z"
        assert base62.encode([0, 0, 0, 0, 62]) == "0" * 25 + "10"

    def test_matches_integer_conversion(self, rng):
        """Encoding agrees with a plain integer base conversion."""
        for _ in range(100):
            number = rng.getrandbits(160)
            expected = []
            n = number
            while n:
                n, digit = divmod(n, 62)
                expected.append(base62.ALPHABET[digit])
            assert base62.encode(to_words(number)) == "".join(reversed(expected)).rjust(27, "0")

    def test_decode_round_trip(self, rng):
        """Strings below the maximum decode and re-encode unchanged."""
        for _ in range(100):
            string = "0" + "".join(rng.choice(base62.ALPHABET) for _ in range(26))
            assert base62.encode(base62.decode(string)) == string

    def test_decode_overflow(self):
        """A string above the maximum overflows."""
        with pytest.raises(InvalidOverflowError):
            base62.decode("zWgEPTl1tmebfsQzFP4bxwgy80V")

    def test_decode_one_past_max_overflows(self):
        """The first string past the maximum overflows."""
        with pytest.raises(InvalidOverflowError):
            base62.decode("aWgEPTl1tmebfsQzFP4bxwgy80W")

    @pytest.mark.parametrize("value", ["", "0" * 26, "0" * 28, "0" * 26 + "-", "0" * 26 + "é", None])
    def test_decode_invalid_format(self, value):
        """Wrong length or characters are format errors."""
        with pytest.raises(InvalidFormatError):
            base62.decode(value)


class TestIsValid:
    """Tests for string validation."""

    def test_valid_strings(self):
        """Upper, lower and digit strings of 27 chars are valid."""
        assert base62.is_valid("0ujtsYcgvSTl8PAuAdqWYSMnLOv")
        assert base62.is_valid("ABCDEFGHIJKLMNOPQRSTUVWXYZ0")
        assert base62.is_valid("abcdefghijklmnopqrstuvwxyz0")

    def test_invalid_strings(self):
        """Wrong sizes, symbols and non-strings are invalid."""
        assert not base62.is_valid(None)
        assert not base62.is_valid("")
        assert not base62.is_valid("0ujtsYcgvSTl8PAuAdqWYSMnLO")
        assert not base62.is_valid("0ujtsYcgvSTl8PAuAdqWYSMnLOvv")
        assert not base62.is_valid("0ujtsYcgvSTl8PAuAdqWYSMnLO!")
        assert not base62.is_valid(b"0ujtsYcgvSTl8PAuAdqWYSMnLOv")

    def test_overflow_is_not_checked(self):
        """Values above the maximum still pass validation."""
        assert base62.is_valid("z" * 27)
