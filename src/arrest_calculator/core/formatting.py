"""Display helpers for minute and day totals."""

from __future__ import annotations

from .types import MINUTES_PER_DAY, Duration

NONE_LABEL = "None"


def half_up(value: float) -> int:
    """Round halves away from zero for display (22.5 minutes shows as 23)."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def split_minutes(total_minutes: float) -> Duration:
    rounded = max(half_up(total_minutes), 0)
    return Duration(
        days=rounded // MINUTES_PER_DAY,
        hours=(rounded % MINUTES_PER_DAY) // 60,
        min=rounded % 60,
    )


def _unit(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def format_minutes(total_minutes: float) -> str:
    duration = split_minutes(total_minutes)
    parts: list[str] = []
    if duration.days:
        parts.append(_unit(duration.days, "day", "days"))
    if duration.hours:
        parts.append(_unit(duration.hours, "hour", "hours"))
    if duration.min:
        parts.append(_unit(duration.min, "minute", "minutes"))
    return " ".join(parts) or NONE_LABEL


def format_days(days: float) -> str:
    rounded = half_up(days)
    if rounded <= 0:
        return NONE_LABEL
    return _unit(rounded, "day", "days")


def format_currency(amount: float) -> str:
    return f"${half_up(amount):,}"
