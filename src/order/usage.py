"""
Usage Counter Store - Per-command invocation counts.

Persists a single JSON object mapping command names to how many times
they have been run. Writes go through a temporary file and an atomic
rename so a crash never leaves a half-written counter file.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from pathlib import Path

import structlog

from order.exceptions import UsageStoreError

logger = structlog.get_logger(__name__)


class UsageStore:
    """JSON file of command counters.

    Example:
        >>> store = UsageStore(Path("~/.order/usage.json").expanduser())
        >>> store.record("weather")
        1
        >>> store.load()
        {'weather': 1}
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, int]:
        """Read all counters; a missing file means no usage yet."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise UsageStoreError(f"Cannot read {self.path}: {e}", operation="load") from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise UsageStoreError(f"Corrupt usage file {self.path}: {e}", operation="load") from e
        if not isinstance(data, dict):
            raise UsageStoreError(f"Corrupt usage file {self.path}: expected an object", operation="load")
        return {str(k): int(v) for k, v in data.items() if isinstance(v, int) and not isinstance(v, bool)}

    def save(self, counts: dict[str, int]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".usage-", suffix=".json")
        except OSError as e:
            raise UsageStoreError(f"Cannot write {self.path}: {e}", operation="save") from e

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(counts, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise UsageStoreError(f"Cannot write {self.path}: {e}", operation="save") from e
        logger.debug("usage_saved", path=str(self.path), commands=len(counts))

    def record(self, command: str) -> int:
        """Increment a command's counter.

        Returns:
            The new count
        """
        counts = self.load()
        counts[command] = counts.get(command, 0) + 1
        self.save(counts)
        return counts[command]

    def reset(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise UsageStoreError(f"Cannot remove {self.path}: {e}", operation="reset") from e
        logger.debug("usage_reset", path=str(self.path))


def format_usage(counts: dict[str, int]) -> list[str]:
    if not counts:
        return ["No usage recorded yet."]
    width = max(len(name) for name in counts)
    lines = [f"{name:<{width}}  {count}" for name, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))]
    lines.append(f"{'total':<{width}}  {sum(counts.values())}")
    return lines
