"""Live clock for ``order clock``."""

from __future__ import annotations

import asyncio
import sys
from datetime import datetime
from typing import Callable, TextIO

CLOCK_FORMAT = "%a %d %b %Y  %H:%M:%S"


def format_clock(now: datetime) -> str:
    return now.strftime(CLOCK_FORMAT)


async def run_clock(
    once: bool = False,
    out: TextIO | None = None,
    now: Callable[[], datetime] = datetime.now,
    ticks: int | None = None,
) -> None:
    """Print the time, redrawing the same line once a second.

    Runs until cancelled (Ctrl-C) unless ``once`` is set or ``ticks``
    limits the number of redraws.
    """
    out = out or sys.stdout
    if once:
        out.write(format_clock(now()) + "\n")
        out.flush()
        return

    drawn = 0
    try:
        while ticks is None or drawn < ticks:
            current = now()
            out.write("\r" + format_clock(current))
            out.flush()
            drawn += 1
            # Wake up on the next second boundary
            await asyncio.sleep(1 - current.microsecond / 1_000_000)
    finally:
        out.write("\n")
        out.flush()
