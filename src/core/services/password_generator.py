"""Password generation.

Passwords are drawn character by character, with replacement, from a single
alphabet made of four classes (lowercase, uppercase, a few symbols, digits)
and then shuffled. Nothing guarantees that every class shows up in a given
password.
"""

from __future__ import annotations

import random
import string

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
SPECIAL = "!@#$%&*"
DIGITS = string.digits
ALPHABET = LOWERCASE + UPPERCASE + SPECIAL + DIGITS


class PasswordGenerator:
    """Generates random passwords from `ALPHABET`.

    The randomness source is injected so tests can pass a seeded
    `random.Random`. By default each generator owns one `SystemRandom`
    (OS entropy) for its whole lifetime; nothing is reseeded per call.
    """

    def __init__(self, rng: random.Random | None = None, *, alphabet: str = ALPHABET) -> None:
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self._rng = rng or random.SystemRandom()
        self._alphabet = alphabet

    @property
    def alphabet(self) -> str:
        return self._alphabet

    def generate(self, length: int) -> str:
        if isinstance(length, bool) or not isinstance(length, int):
            raise TypeError(f"length must be an int, got {type(length).__name__}")
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")

        chars = self._rng.choices(self._alphabet, k=length)
        self._rng.shuffle(chars)
        return "".join(chars)
