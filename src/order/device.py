"""
Device introspection for ``order device``.

Reports the operating system, hardware and memory of the machine the
CLI runs on, using :mod:`platform` and psutil.
"""

from __future__ import annotations

import os
import platform
import socket
from dataclasses import dataclass

import psutil
import structlog

logger = structlog.get_logger(__name__)


@dataclass
class DeviceInfo:
    """Snapshot of the current machine."""

    system: str
    release: str
    machine: str
    hostname: str
    python_version: str
    cpu_count: int | None
    memory_total: int
    memory_available: int


def collect_device_info() -> DeviceInfo:
    memory = psutil.virtual_memory()
    info = DeviceInfo(
        system=platform.system() or "unknown",
        release=platform.release() or "unknown",
        machine=platform.machine() or "unknown",
        hostname=socket.gethostname(),
        python_version=platform.python_version(),
        cpu_count=os.cpu_count(),
        memory_total=memory.total,
        memory_available=memory.available,
    )
    logger.debug("device_info_collected", system=info.system, machine=info.machine)
    return info


def format_bytes(size: float) -> str:
    """Human readable size using binary units."""
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if abs(size) < 1024 or unit == "TiB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TiB"


def format_device_info(info: DeviceInfo) -> list[str]:
    return [
        f"OS:           {info.system} {info.release}",
        f"Architecture: {info.machine}",
        f"Hostname:     {info.hostname}",
        f"Python:       {info.python_version}",
        f"CPUs:         {info.cpu_count if info.cpu_count is not None else 'unknown'}",
        f"Memory:       {format_bytes(info.memory_available)} free of {format_bytes(info.memory_total)}",
    ]
