"""
Terminal Pong - single player versus bot on a character grid.

The engine owns one GameState and advances it a frame at a time.
Rendering is a pure function of the state, and the game loop
multiplexes the frame timer and raw keystrokes on one asyncio loop,
so state mutations never overlap.

Example:
    >>> engine = PongEngine(Difficulty.MEDIUM, rng=random.Random(7))
    >>> engine.step()
    >>> print(render(engine.state))
"""

from __future__ import annotations

import asyncio
import math
import os
import random
import signal
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

import structlog

from order.exceptions import TerminalNotInteractiveError, UsageError
from order.terminal import Key, KeyDecoder
from order.types import DIFFICULTY_PROFILES, Difficulty, DifficultyProfile, GameOutcome

if TYPE_CHECKING:
    from order.terminal import Terminal

logger = structlog.get_logger(__name__)

PADDLE_HEIGHT = 3
PLAYER_COLUMN = 2
WIN_SCORE = 5

MAX_DEFLECTION = 45.0
MIN_DEFLECTION = 15.0

WALL_CHAR = "|"
PADDLE_CHAR = "█"
BALL_CHAR = "O"


class Side(str, Enum):
    """Which side scored a point."""

    PLAYER = "player"
    BOT = "bot"


def parse_difficulty(value: str | None) -> Difficulty:
    """Validate a difficulty selector.

    Raises:
        UsageError: If the value is missing or not a known difficulty
    """
    choices = ", ".join(d.value for d in Difficulty)
    if value is None or not value.strip():
        raise UsageError(f"missing difficulty (choose from {choices})", command="pong")
    try:
        return Difficulty(value.strip().lower())
    except ValueError:
        raise UsageError(
            f"unknown difficulty '{value}' (choose from {choices})", command="pong"
        ) from None


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _round_cells(value: float) -> int:
    """Round to the nearest cell, halves away from zero."""
    return _sign(value) * math.floor(abs(value) + 0.5)


def deflection_angle(offset: float, paddle_height: int, rng: random.Random) -> float:
    """Angle in degrees from horizontal for a ball leaving a paddle.

    Off-centre hits deflect more. The result is within
    [MIN_DEFLECTION, MAX_DEFLECTION] in magnitude.

    Args:
        offset: Ball row minus the paddle's centre row
        paddle_height: Paddle height in cells
        rng: Random source for the jitter component
    """
    half = paddle_height / 2
    angle = (offset / half) * MAX_DEFLECTION + rng.uniform(-MIN_DEFLECTION, MIN_DEFLECTION)
    angle = _clamp(angle, -MAX_DEFLECTION, MAX_DEFLECTION)
    if abs(angle) < MIN_DEFLECTION:
        direction = _sign(angle) or rng.choice((-1, 1))
        angle = direction * MIN_DEFLECTION
    return angle


@dataclass
class GameState:
    """Mutable state of one game.

    Attributes:
        width: Arena width in cells
        height: Arena height in cells
        difficulty: Bot difficulty, fixed for the game
        player_y: Top row of the player paddle
        bot_y: Top row of the bot paddle
        ball_x: Ball column
        ball_y: Ball row
        ball_vx: Horizontal velocity in cells per frame
        ball_vy: Vertical velocity in cells per frame
        player_score: Points scored by the player
        bot_score: Points scored by the bot
        running: False once the game has ended; never reset
    """

    width: int
    height: int
    difficulty: Difficulty
    paddle_height: int = PADDLE_HEIGHT
    player_y: int = 0
    bot_y: int = 0
    ball_x: int = 0
    ball_y: int = 0
    ball_vx: int = 1
    ball_vy: int = 1
    player_score: int = 0
    bot_score: int = 0
    running: bool = True

    @classmethod
    def new(
        cls,
        difficulty: Difficulty,
        width: int = 40,
        height: int = 15,
        rng: random.Random | None = None,
    ) -> GameState:
        """Create a state with paddles and ball centred."""
        if width <= PADDLE_HEIGHT or height <= PADDLE_HEIGHT:
            raise ValueError(f"Arena {width}x{height} is too small for a {PADDLE_HEIGHT}-cell paddle")
        if width < 2 * PLAYER_COLUMN + 4:
            raise ValueError(f"Arena width {width} leaves no room between the paddles")
        rng = rng or random.Random()
        paddle_y = (height - PADDLE_HEIGHT) // 2
        return cls(
            width=width,
            height=height,
            difficulty=difficulty,
            player_y=paddle_y,
            bot_y=paddle_y,
            ball_x=width // 2,
            ball_y=height // 2,
            ball_vx=rng.choice((-1, 1)),
            ball_vy=rng.choice((-1, 1)),
        )

    @property
    def max_paddle_y(self) -> int:
        return self.height - self.paddle_height

    @property
    def bot_column(self) -> int:
        return self.width - 3


class PongEngine:
    """Advances a GameState one frame at a time.

    All randomness comes from ``rng`` so a seeded Random makes a game
    fully reproducible.
    """

    def __init__(
        self,
        difficulty: Difficulty,
        width: int = 40,
        height: int = 15,
        win_score: int = WIN_SCORE,
        rng: random.Random | None = None,
        profile: DifficultyProfile | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.profile = profile or DIFFICULTY_PROFILES[difficulty]
        self.win_score = win_score
        self.state = GameState.new(difficulty, width, height, self.rng)

    # Input

    def move_player(self, delta: int) -> None:
        """Move the player paddle, clamped to the arena."""
        state = self.state
        if not state.running:
            return
        state.player_y = int(_clamp(state.player_y + delta, 0, state.max_paddle_y))

    def quit(self) -> None:
        """Stop the game; observed by the next scheduled frame."""
        if self.state.running:
            self.state.running = False
            logger.debug("pong_quit", player=self.state.player_score, bot=self.state.bot_score)

    def handle_key(self, key: Key) -> None:
        if key is Key.UP:
            self.move_player(-1)
        elif key is Key.DOWN:
            self.move_player(1)
        elif key is Key.QUIT:
            self.quit()

    # Simulation

    def step(self) -> Side | None:
        """Run one frame of physics.

        Returns:
            The side that scored this frame, or None
        """
        state = self.state
        if not state.running:
            return None

        # Collisions are resolved from the position the ball occupies at
        # the start of the frame, including any paddle column it would skip.
        self._collide(PLAYER_COLUMN, state.player_y, toward=-1)
        self._collide(state.bot_column, state.bot_y, toward=1)

        state.ball_x += state.ball_vx
        state.ball_y += state.ball_vy

        self.update_bot()
        self._bounce_walls()

        scorer = self._check_score()
        if state.player_score >= self.win_score or state.bot_score >= self.win_score:
            state.running = False
            logger.debug("pong_finished", player=state.player_score, bot=state.bot_score)
        return scorer

    def update_bot(self) -> None:
        """Move the bot paddle toward the ball's row."""
        state = self.state
        target = state.ball_y - state.paddle_height / 2
        distance = target - state.bot_y
        if self.rng.random() < self.profile.mistake_chance:
            return
        if abs(distance) < 1:
            return
        step = _round_cells(_sign(distance) * self.profile.bot_speed)
        state.bot_y = int(_clamp(state.bot_y + step, 0, state.max_paddle_y))

    def _collide(self, column: int, paddle_y: int, toward: int) -> None:
        state = self.state
        if _sign(state.ball_vx) != toward:
            return
        if not paddle_y <= state.ball_y < paddle_y + state.paddle_height:
            return
        next_x = state.ball_x + state.ball_vx
        reaches = state.ball_x == column or (
            (state.ball_x - column) * toward < 0 < (next_x - column) * toward
        )
        if not reaches:
            return

        centre = paddle_y + (state.paddle_height - 1) / 2
        angle = deflection_angle(state.ball_y - centre, state.paddle_height, self.rng)
        speed = self.rng.uniform(1.0, 2.0)
        radians = math.radians(angle)

        state.ball_x = column
        state.ball_vx = -toward * max(1, _round_cells(abs(speed * math.cos(radians))))
        state.ball_vy = _sign(angle) * max(1, _round_cells(abs(speed * math.sin(radians))))

    def _bounce_walls(self) -> None:
        state = self.state
        bottom = state.height - 1
        if state.ball_y <= 0:
            state.ball_y = 0
            state.ball_vy = abs(state.ball_vy)
        elif state.ball_y >= bottom:
            state.ball_y = bottom
            state.ball_vy = -abs(state.ball_vy)

    def _check_score(self) -> Side | None:
        state = self.state
        if state.ball_x >= state.width - 1:
            state.player_score += 1
            scorer = Side.PLAYER
        elif state.ball_x <= 0:
            state.bot_score += 1
            scorer = Side.BOT
        else:
            return None

        state.ball_x = state.width // 2
        state.ball_y = state.height // 2
        state.ball_vx = -_sign(state.ball_vx)
        state.ball_vy = self.rng.choice((-1, 1))
        logger.debug(
            "pong_point",
            scorer=scorer.value,
            player=state.player_score,
            bot=state.bot_score,
        )
        return scorer

    # Results

    @property
    def outcome(self) -> GameOutcome:
        if self.state.player_score >= self.win_score:
            return GameOutcome.PLAYER_WON
        if self.state.bot_score >= self.win_score:
            return GameOutcome.BOT_WON
        return GameOutcome.QUIT

    def summary(self) -> str:
        """One-line end-of-game message with the final score."""
        score = f"{self.state.player_score} - {self.state.bot_score}"
        outcome = self.outcome
        if outcome is GameOutcome.PLAYER_WON:
            return f"You win! Final score: {score}"
        if outcome is GameOutcome.BOT_WON:
            return f"The bot wins! Final score: {score}"
        return f"Game over. Final score: {score}"


def render(state: GameState) -> str:
    """Draw the whole arena followed by the score line."""
    rows = []
    bot_column = state.bot_column
    for y in range(state.height):
        cells = []
        for x in range(state.width):
            if x == 0 or x == state.width - 1:
                cells.append(WALL_CHAR)
            elif x == PLAYER_COLUMN and state.player_y <= y < state.player_y + state.paddle_height:
                cells.append(PADDLE_CHAR)
            elif x == bot_column and state.bot_y <= y < state.bot_y + state.paddle_height:
                cells.append(PADDLE_CHAR)
            elif x == state.ball_x and y == state.ball_y:
                cells.append(BALL_CHAR)
            else:
                cells.append(" ")
        rows.append("".join(cells))
    rows.append(
        f"You: {state.player_score}  Bot: {state.bot_score}  "
        f"[{state.difficulty.value}]  arrows to move, q to quit"
    )
    return "\n".join(rows)


async def play(engine: PongEngine, terminal: Terminal, handle_interrupt: bool = True) -> GameOutcome:
    """Run the game loop until the game stops.

    Keystrokes are delivered by the event loop's selector between
    frames; the frame task only suspends while sleeping between frames.

    Raises:
        TerminalNotInteractiveError: If the terminal has no TTY
    """
    if not terminal.is_interactive():
        raise TerminalNotInteractiveError("Pong needs an interactive terminal (stdin and stdout must be a TTY)")

    loop = asyncio.get_running_loop()
    fd = terminal.fileno()
    decoder = KeyDecoder()

    def on_input() -> None:
        data = os.read(fd, 64)
        if not data:
            loop.remove_reader(fd)
            engine.quit()
            return
        for key in decoder.feed(data.decode("utf-8", errors="ignore")):
            engine.handle_key(key)

    logger.debug("pong_started", difficulty=engine.state.difficulty.value)
    with terminal.raw_mode():
        loop.add_reader(fd, on_input)
        if handle_interrupt:
            loop.add_signal_handler(signal.SIGINT, engine.quit)
        try:
            while engine.state.running:
                engine.step()
                terminal.repaint(render(engine.state))
                await asyncio.sleep(engine.profile.frame_delay)
        finally:
            loop.remove_reader(fd)
            if handle_interrupt:
                loop.remove_signal_handler(signal.SIGINT)
    return engine.outcome


def wants_clear(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


def finish_game(
    engine: PongEngine,
    terminal: Terminal,
    ask: Callable[[str], str] = input,
) -> bool:
    """Print the summary and offer to clear the terminal.

    Returns:
        True if the terminal was cleared
    """
    terminal.write(engine.summary() + "\n")
    try:
        answer = ask("Clear the terminal? (y/N) ")
    except EOFError:
        answer = ""
    if wants_clear(answer):
        terminal.clear()
        return True
    return False
