"""Small text and number commands: hello, echo, reverse, random."""

from __future__ import annotations

import random

from order.exceptions import UsageError


def greet(name: str | None = None) -> str:
    return f"Hello, {name or 'World'}!"


def echo_text(words: list[str]) -> str:
    return " ".join(words)


def reverse_text(words: list[str]) -> str:
    """Reverse the joined words character by character."""
    return " ".join(words)[::-1]


def random_integer(low: int, high: int, rng: random.Random | None = None) -> int:
    """Random integer in the inclusive range [low, high].

    Raises:
        UsageError: If low is greater than high
    """
    if low > high:
        raise UsageError(f"min ({low}) must not be greater than max ({high})", command="random")
    return (rng or random).randint(low, high)
