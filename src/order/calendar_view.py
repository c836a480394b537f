"""Month calendar rendering for ``order calendar``."""

from __future__ import annotations

import calendar
from datetime import date

from order.exceptions import UsageError

REVERSE = "\033[7m"
RESET = "\033[0m"


def resolve_month(month: int | None, year: int | None, today: date | None = None) -> tuple[int, int]:
    """Fill in missing month/year from today and validate them.

    Raises:
        UsageError: If month is outside 1..12 or year outside 1..9999
    """
    today = today or date.today()
    month = today.month if month is None else month
    year = today.year if year is None else year
    if not 1 <= month <= 12:
        raise UsageError(f"month must be between 1 and 12, got {month}", command="calendar")
    if not 1 <= year <= 9999:
        raise UsageError(f"year must be between 1 and 9999, got {year}", command="calendar")
    return month, year


def render_month(year: int, month: int, today: date | None = None, highlight: bool = False) -> str:
    """Render a month with Sunday as the first weekday.

    When ``highlight`` is set and ``today`` falls in the month, its day
    number is shown in reverse video.
    """
    text = calendar.TextCalendar(firstweekday=calendar.SUNDAY).formatmonth(year, month)
    if not highlight or today is None or (today.year, today.month) != (year, month):
        return text

    lines = text.splitlines()
    day = f"{today.day:>2}"
    # Skip the title and weekday header rows
    for index in range(2, len(lines)):
        cells = [lines[index][i : i + 2] for i in range(0, len(lines[index]), 3)]
        if day in cells:
            position = cells.index(day) * 3
            line = lines[index]
            lines[index] = f"{line[:position]}{REVERSE}{day}{RESET}{line[position + 2:]}"
            break
    return "\n".join(lines) + "\n"
