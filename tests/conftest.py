"""
Pytest configuration and fixtures for order tests.

Provides seeded engines, a fake terminal backed by a pipe, and
isolated settings.
"""

from __future__ import annotations

import os
import random
from contextlib import contextmanager

import pytest
import structlog

from order.config import get_settings
from order.pong import PongEngine
from order.types import Difficulty, DifficultyProfile


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point the usage file at a temp dir and reset settings and logging."""
    monkeypatch.setenv("ORDER_DATA_DIR", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def rng() -> random.Random:
    """Return a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def engine(rng: random.Random) -> PongEngine:
    """Return a medium engine on the default 40x15 arena."""
    return PongEngine(Difficulty.MEDIUM, rng=rng)


@pytest.fixture
def idle_bot_profile() -> DifficultyProfile:
    """Profile whose bot never reacts and whose frames do not wait."""
    return DifficultyProfile(bot_speed=1.0, mistake_chance=1.0, frame_delay_ms=0)


class FakeTerminal:
    """Terminal double reading keystrokes from a pipe."""

    def __init__(self, interactive: bool = True) -> None:
        self.read_fd, self.write_fd = os.pipe()
        self.interactive = interactive
        self.frames: list[str] = []
        self.output: list[str] = []
        self.raw_entered = False
        self.restored = False
        self.cleared = False

    def is_interactive(self) -> bool:
        return self.interactive

    def fileno(self) -> int:
        return self.read_fd

    @contextmanager
    def raw_mode(self):
        self.raw_entered = True
        try:
            yield
        finally:
            self.restored = True

    def press(self, data: bytes) -> None:
        os.write(self.write_fd, data)

    def write(self, text: str) -> None:
        self.output.append(text)

    def repaint(self, frame: str) -> None:
        self.frames.append(frame)

    def clear(self) -> None:
        self.cleared = True

    def close(self) -> None:
        for fd in (self.read_fd, self.write_fd):
            try:
                os.close(fd)
            except OSError:
                pass


@pytest.fixture
def fake_terminal():
    """Return a pipe-backed fake terminal."""
    terminal = FakeTerminal()
    yield terminal
    terminal.close()
