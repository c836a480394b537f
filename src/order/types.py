"""
Type definitions for the order CLI.

Provides enums and dataclasses shared between the command handlers
and the pong engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Difficulty(str, Enum):
    """Bot difficulty for the pong game."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    IMPOSSIBLE = "impossible"


@dataclass(frozen=True)
class DifficultyProfile:
    """Bot behaviour and pacing derived from a difficulty.

    Attributes:
        bot_speed: Cells per frame the bot moves (fractional, rounded when applied)
        mistake_chance: Per-frame probability the bot does not react
        frame_delay_ms: Interval between simulation steps in milliseconds
    """

    bot_speed: float
    mistake_chance: float
    frame_delay_ms: int

    @property
    def frame_delay(self) -> float:
        """Frame delay in seconds."""
        return self.frame_delay_ms / 1000.0


DIFFICULTY_PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(bot_speed=0.5, mistake_chance=0.35, frame_delay_ms=140),
    Difficulty.MEDIUM: DifficultyProfile(bot_speed=0.75, mistake_chance=0.2, frame_delay_ms=110),
    Difficulty.HARD: DifficultyProfile(bot_speed=1.0, mistake_chance=0.08, frame_delay_ms=90),
    Difficulty.IMPOSSIBLE: DifficultyProfile(bot_speed=1.5, mistake_chance=0.0, frame_delay_ms=70),
}


class GameOutcome(str, Enum):
    """How a pong game ended."""

    PLAYER_WON = "player_won"
    BOT_WON = "bot_won"
    QUIT = "quit"


@dataclass
class PingResult:
    """Result of a single ping.

    Attributes:
        host: Host that was pinged
        time_ms: Round-trip time as printed by ping, None if not found
        output: Raw stdout of the ping binary
    """

    host: str
    time_ms: str | None
    output: str = ""
