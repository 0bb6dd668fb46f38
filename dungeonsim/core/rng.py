"""
Seeded pseudo-random source for the simulation core.

Every random decision taken by the generator, the catalogs, the combat engine
and the crafting manager goes through a ``SeededRandom``, so a given seed
always replays the same sequence of outcomes.
"""

import math
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class SeededRandom:
    """
    Linear congruential generator.

    The constants and the update rule are part of the reproducibility
    contract: changing them changes every dungeon ever generated.

    Attributes:
        seed (int):
            The current internal state, updated on every draw.

    """

    def __init__(self, seed: int) -> None:
        """
        Initialize the generator.

        Args:
            seed (int):
                The starting state. Must be a non-negative integer.

        """
        if seed < 0:
            raise ValueError(f"Seed must be non-negative, got {seed}.")
        self.seed: int = seed

    def random(self) -> float:
        """Returns the next value in [0, 1)."""
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS

    def randint(self, minimum: int, maximum: int) -> int:
        """Returns an integer in [minimum, maximum], both inclusive."""
        return math.floor(self.random() * (maximum - minimum + 1)) + minimum

    def choice(self, items: Sequence[T]) -> T:
        """Picks one element of a non-empty sequence."""
        if not items:
            raise ValueError("Cannot choose from an empty sequence.")
        return items[self.randint(0, len(items) - 1)]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Returns a shuffled copy of the sequence (Fisher-Yates)."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def chance(self, probability: float) -> bool:
        """Returns True with the given probability."""
        return self.random() < probability

    def weighted_choice(self, weighted: Sequence[tuple[T, float]]) -> T:
        """
        Picks an element from a list of (element, weight) pairs.

        The weights are walked cumulatively against a single draw; if rounding
        leaves the draw above the total, the last element is returned.

        Args:
            weighted (Sequence[tuple[T, float]]):
                The candidates with their weights, in a fixed order.

        Returns:
            T:
                The selected element.

        """
        if not weighted:
            raise ValueError("Cannot choose from an empty weight table.")
        roll = self.random()
        cumulative = 0.0
        for item, weight in weighted:
            cumulative += weight
            if roll <= cumulative:
                return item
        return weighted[-1][0]


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def hash_seed(text: str) -> int:
    """
    Turns a string into a non-negative integer seed.

    Rolling ``hash * 31 + code_unit`` with wrap-around to a signed 32-bit
    integer after every character, then the absolute value. Characters are
    consumed as UTF-16 code units so strings outside the BMP hash the same way
    everywhere.

    Args:
        text (str):
            The text to hash.

    Returns:
        int:
            The seed, in [0, 2**31].

    """
    value = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        value = _to_int32((_to_int32(value << 5) - value) + code_unit)
    return abs(value)


def to_base36(number: int) -> str:
    """Formats a non-negative integer in base 36 (digits then lowercase)."""
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number < 0:
        raise ValueError(f"Cannot encode negative number {number}.")
    if number == 0:
        return "0"
    out = []
    while number:
        number, remainder = divmod(number, 36)
        out.append(digits[remainder])
    return "".join(reversed(out))
