"""
order - a command-line grab bag

Weather lookups, ping, a terminal pong game against a bot, a live
clock, a calculator, a calendar and a few other small commands.

Example:
    >>> from order import PongEngine, Difficulty, render
    >>> engine = PongEngine(Difficulty.HARD)
    >>> engine.step()
    >>> print(render(engine.state))

Weather:
    >>> from order import fetch_weather, format_weather
    >>> current = await fetch_weather("Paris")
    >>> print("\\n".join(format_weather("Paris", current)))
"""

__version__ = "1.0.0"

from order.calc import evaluate, format_number
from order.config import OrderSettings, configure_logging, get_settings
from order.exceptions import (
    ExpressionError,
    OrderError,
    PingError,
    TerminalNotInteractiveError,
    UsageError,
    UsageStoreError,
    WeatherError,
)
from order.ping import ping
from order.pong import GameState, PongEngine, Side, parse_difficulty, play, render
from order.terminal import Key, KeyDecoder, Terminal
from order.types import DIFFICULTY_PROFILES, Difficulty, DifficultyProfile, GameOutcome, PingResult
from order.usage import UsageStore
from order.weather import CurrentCondition, fetch_weather, format_weather

__all__ = [
    "__version__",
    # Calculator
    "evaluate",
    "format_number",
    # Config
    "OrderSettings",
    "configure_logging",
    "get_settings",
    # Exceptions
    "ExpressionError",
    "OrderError",
    "PingError",
    "TerminalNotInteractiveError",
    "UsageError",
    "UsageStoreError",
    "WeatherError",
    # Ping
    "ping",
    "PingResult",
    # Pong
    "DIFFICULTY_PROFILES",
    "Difficulty",
    "DifficultyProfile",
    "GameOutcome",
    "GameState",
    "PongEngine",
    "Side",
    "parse_difficulty",
    "play",
    "render",
    # Terminal
    "Key",
    "KeyDecoder",
    "Terminal",
    # Usage
    "UsageStore",
    # Weather
    "CurrentCondition",
    "fetch_weather",
    "format_weather",
]
