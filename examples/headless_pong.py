#!/usr/bin/env python3
"""
Headless Pong Example

Runs the pong engine without a terminal: a scripted player chases the
ball while the bot plays at each difficulty. Useful for watching how
the difficulty profiles change the outcome.
"""

import random

from order import PongEngine, render
from order.types import Difficulty


def scripted_player(engine: PongEngine) -> None:
    """Move the player paddle one cell toward the ball."""
    state = engine.state
    centre = state.player_y + state.paddle_height // 2
    if state.ball_y < centre:
        engine.move_player(-1)
    elif state.ball_y > centre:
        engine.move_player(1)


def simulate(difficulty: Difficulty, seed: int, max_frames: int = 5000) -> PongEngine:
    """Play one game to completion (or until max_frames)."""
    engine = PongEngine(difficulty, rng=random.Random(seed))
    for _ in range(max_frames):
        if not engine.state.running:
            break
        scripted_player(engine)
        engine.step()
    return engine


def main():
    for difficulty in Difficulty:
        engine = simulate(difficulty, seed=7)
        print(f"=== {difficulty.value} ===")
        print(render(engine.state))
        print(engine.summary())
        print()


if __name__ == "__main__":
    main()
