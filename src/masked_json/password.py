"""Random password generation, used as the salt source for hash masking."""

from __future__ import annotations

import secrets

DEFAULT_MIN_LENGTH = 8
DEFAULT_MAX_LENGTH = 12

# Ambiguous characters such as I, l, 1, 0 and O are left out.
LOWERCASE_CHARS = "abcdefgijkmnopqrstwxyz"
UPPERCASE_CHARS = "ABCDEFGHJKLMNPQRSTWXYZ"
NUMERIC_CHARS = "23456789"
SPECIAL_CHARS = "*$-+?_&=!%{}/[].,':;~()"

CHAR_GROUPS = (LOWERCASE_CHARS, UPPERCASE_CHARS, NUMERIC_CHARS, SPECIAL_CHARS)
ALPHABET = "".join(CHAR_GROUPS)


class _Pool:
    """A set of items drawn without replacement, refilled once exhausted."""

    def __init__(self, items, rng: secrets.SystemRandom):
        self._items = list(items)
        self._left = len(self._items)
        self._rng = rng

    def draw(self, exclude_last: bool = False):
        """Draw one unused item.

        With ``exclude_last`` the item in the last unused slot is skipped
        unless it is the only one left.
        """
        last = self._left - 1
        if last == 0:
            index = 0
        else:
            index = self._rng.randrange(last if exclude_last else last + 1)

        item = self._items[index]
        if last == 0:
            self._left = len(self._items)
        else:
            self._items[index], self._items[last] = self._items[last], self._items[index]
            self._left -= 1
        return item


def generate_password(min_length: int | None = None, max_length: int | None = None) -> str:
    """Generate a random password.

    Each block of four characters contains one lower-case letter, one
    upper-case letter, one digit and one symbol, in random order. The first
    character is never a symbol. Without either bound the length is picked between 8 and 12.

    Args:
        min_length: Minimum password length (exact length if ``max_length`` is omitted)
        max_length: Maximum password length

    Returns:
        The generated password
    """
    if min_length is None:
        min_length = DEFAULT_MIN_LENGTH
        if max_length is None:
            max_length = DEFAULT_MAX_LENGTH
    if max_length is None:
        max_length = min_length
    if min_length <= 0 or max_length <= 0 or min_length > max_length:
        raise ValueError(
            "Min and max length values must be greater than zero, and max must not be less than min."
        )

    rng = secrets.SystemRandom()
    length = rng.randint(min_length, max_length)

    groups = _Pool(range(len(CHAR_GROUPS)), rng)
    chars = [_Pool(group, rng) for group in CHAR_GROUPS]

    # The symbol group starts in the last slot, so it is never picked first.
    return "".join(chars[groups.draw(exclude_last=(i == 0))].draw() for i in range(length))
