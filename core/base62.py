"""
Base-62 codec for 160-bit unsigned numbers.

A KSUID is handled here as five 32-bit words, most significant first.
Division and multiplication run word by word with an explicit carry so the
number always stays exactly five words wide and overflow is detected instead
of silently growing the value.
"""

from core.errors import InvalidFormatError, InvalidOverflowError

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
RADIX = 62

KSUID_CHARS = 27
KSUID_WORDS = 5

WORD_BITS = 32
WORD_MASK = 0xFFFFFFFF

_DIGITS = {char: index for index, char in enumerate(ALPHABET)}


def is_valid(string):
    """True if string has 27 chars, all from the base-62 alphabet."""
    if not isinstance(string, str) or len(string) != KSUID_CHARS:
        return False
    return all(char in _DIGITS for char in string)


def is_zero(words):
    return not any(words)


def remainder(words, divisor):
    """Divide words by divisor. Returns (quotient words, remainder)."""
    quotient = [0] * len(words)
    carry = 0
    for i, word in enumerate(words):
        temporary = (carry << WORD_BITS) | (word & WORD_MASK)
        quotient[i] = temporary // divisor
        carry = temporary % divisor
    return quotient, carry


def multiply(words, multiplier, addend=0, validate=True):
    """Compute words * multiplier + addend, truncated to the word count.

    With validate, a carry out of the most significant word raises
    InvalidOverflowError instead of being dropped.
    """
    product = [0] * len(words)
    carry = addend
    for i in range(len(words) - 1, -1, -1):
        temporary = (words[i] & WORD_MASK) * multiplier + carry
        product[i] = temporary & WORD_MASK
        carry = temporary >> WORD_BITS

    if validate and carry != 0:
        raise InvalidOverflowError("Invalid KSUID (overflow)")

    return product


def encode(words):
    """Encode five words as a 27 char base-62 string."""
    number = list(words)
    buffer = []

    while not is_zero(number):
        number, digit = remainder(number, RADIX)
        buffer.append(ALPHABET[digit])

    # least significant digit first
    return "".join(reversed(buffer)).rjust(KSUID_CHARS, ALPHABET[0])


def decode(string):
    """Decode a 27 char base-62 string into five words."""
    if not is_valid(string):
        raise InvalidFormatError(f"Invalid KSUID: {string!r}", value=string)

    number = [0] * KSUID_WORDS
    for char in string:
        try:
            number = multiply(number, RADIX, _DIGITS[char])
        except InvalidOverflowError as exc:
            raise InvalidOverflowError(f"Invalid KSUID (overflow): {string!r}", value=string, cause=exc) from exc

    return number
