"""
Ping - wraps the operating system's ping binary.

Sends a single echo request and pulls the round-trip time out of the
binary's output.
"""

from __future__ import annotations

import asyncio
import contextlib
import re
import sys

import structlog

from order.exceptions import PingError, UsageError
from order.types import PingResult

logger = structlog.get_logger(__name__)

_POSIX_TIME = re.compile(r"time=([0-9.]+) ?ms")
_WINDOWS_TIME = re.compile(r"time[=<]([0-9]+) ?ms", re.IGNORECASE)

BOLD_GREEN = "\033[1;32m"
RESET = "\033[0m"


def build_command(host: str, platform: str | None = None) -> list[str]:
    """Arguments for a single ping of ``host``."""
    if not host or host.startswith("-"):
        raise UsageError(f"invalid host '{host}'", command="ping")
    platform = platform or sys.platform
    count_flag = "-n" if platform == "win32" else "-c"
    return ["ping", count_flag, "1", host]


def parse_ping_time(output: str, platform: str | None = None) -> str | None:
    """Round-trip time in milliseconds as printed by ping, or None."""
    platform = platform or sys.platform
    pattern = _WINDOWS_TIME if platform == "win32" else _POSIX_TIME
    match = pattern.search(output)
    return match.group(1) if match else None


async def ping(host: str, timeout: float = 10.0, platform: str | None = None) -> PingResult:
    """Ping a host once.

    Raises:
        UsageError: If the host looks like an option
        PingError: If ping is missing, times out, or exits non-zero
    """
    args = build_command(host, platform)
    logger.debug("ping_start", args=args)

    try:
        process = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as e:
        raise PingError("Ping failed", stderr="ping executable not found") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
        raise PingError(f"Ping timed out after {timeout}s") from e

    output = stdout.decode(errors="replace")
    if process.returncode != 0:
        error_text = stderr.decode(errors="replace") or output
        logger.debug("ping_failed", host=host, exit_code=process.returncode)
        raise PingError("Ping failed", stderr=error_text, exit_code=process.returncode)

    result = PingResult(host=host, time_ms=parse_ping_time(output, platform), output=output)
    logger.debug("ping_done", host=host, time_ms=result.time_ms)
    return result


def format_pong(result: PingResult, color: bool = True) -> str:
    label = f"{BOLD_GREEN}🏓 PONG!{RESET}" if color else "🏓 PONG!"
    if result.time_ms is None:
        return f"{label} (time not found)"
    return f"{label} {result.time_ms} ms"
