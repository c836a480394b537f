"""
Terminal access for full-screen commands.

Wraps the TTY the game draws on: interactivity check, cbreak mode as
a context manager, full-screen repaint, and decoding of raw keystrokes
(including arrow-key escape sequences) into keys.
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, TextIO

import structlog

WINDOWS = os.name == "nt"

if not WINDOWS:
    import termios
    import tty

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = structlog.get_logger(__name__)

CLEAR_SCREEN = "\033[2J\033[H"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"


class Key(str, Enum):
    """Keys the game reacts to."""

    UP = "up"
    DOWN = "down"
    QUIT = "quit"


_KEYMAP: dict[str, Key] = {
    "\x1b[A": Key.UP,
    "\x1bOA": Key.UP,
    "\x1b[B": Key.DOWN,
    "\x1bOB": Key.DOWN,
    "w": Key.UP,
    "W": Key.UP,
    "s": Key.DOWN,
    "S": Key.DOWN,
    "q": Key.QUIT,
    "Q": Key.QUIT,
    "\x03": Key.QUIT,
}

_ESCAPE_PREFIXES = ("\x1b", "\x1b[", "\x1bO")


class KeyDecoder:
    """Turns raw terminal input into keys.

    Escape sequences may arrive split across reads, so an incomplete
    trailing sequence is held until the next ``feed``.

    Example:
        >>> decoder = KeyDecoder()
        >>> decoder.feed("\\x1b[")
        []
        >>> decoder.feed("Aq")
        [<Key.UP: 'up'>, <Key.QUIT: 'quit'>]
    """

    def __init__(self) -> None:
        self._pending = ""

    def feed(self, data: str) -> list[Key]:
        buffer = self._pending + data
        self._pending = ""
        keys: list[Key] = []
        index = 0
        while index < len(buffer):
            char = buffer[index]
            if char != "\x1b":
                key = _KEYMAP.get(char)
                if key is not None:
                    keys.append(key)
                index += 1
                continue

            sequence = buffer[index : index + 3]
            if len(sequence) < 3 and sequence in _ESCAPE_PREFIXES:
                self._pending = sequence
                break
            key = _KEYMAP.get(sequence)
            if key is not None:
                keys.append(key)
                index += 3
            else:
                # Unknown sequence: drop the escape byte
                index += 1
        return keys


class Terminal:
    """The TTY a full-screen command reads keys from and draws on."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout

    def is_interactive(self) -> bool:
        """True when raw keyboard input and full-screen output are possible."""
        if WINDOWS:
            return False
        try:
            return self._stdin.isatty() and self._stdout.isatty()
        except (AttributeError, ValueError):
            return False

    def fileno(self) -> int:
        return self._stdin.fileno()

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Switch the input to cbreak mode for the duration of the block.

        The saved terminal attributes and the cursor are restored on
        every exit path.
        """
        fd = self.fileno()
        saved = termios.tcgetattr(fd)
        try:
            tty.setcbreak(fd)
            self.write(HIDE_CURSOR)
            logger.debug("terminal_raw_mode", fd=fd)
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, saved)
            self.write(SHOW_CURSOR)
            logger.debug("terminal_restored", fd=fd)

    def write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def repaint(self, frame: str) -> None:
        """Clear the screen and draw a full frame."""
        self.write(CLEAR_SCREEN + frame + "\n")

    def clear(self) -> None:
        self.write(CLEAR_SCREEN)
