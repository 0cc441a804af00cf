"""
Cron schedule calculator.

Computes the next run time of a standard 5-field cron expression
(minute hour day-of-month month weekday) by a bounded minute-by-minute
search, and renders human-readable descriptions of common schedules.

Supported field syntax:
- ``*``        any value
- ``*/n``      values where ``value % n == 0``
- ``a/n``      values >= a where ``(value - a) % n == 0`` (``a-b/n`` uses a)
- ``a-b``      inclusive range (``*-b`` starts at the field minimum)
- ``a,b,c``    any listed value
- ``a``        exactly a
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from compliance_engine.config import get_settings

logger = logging.getLogger(__name__)

# (name, minimum, maximum) in expression order
FIELD_SPECS: list[tuple[str, int, int]] = [
    ("minute", 0, 59),
    ("hour", 0, 23),
    ("day", 1, 31),
    ("month", 1, 12),
    ("weekday", 0, 6),
]

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


class CronExpressionError(ValueError):
    """Raised when a cron expression is malformed."""

    def __init__(self, message: str, expression: str):
        self.expression = expression
        super().__init__(message)


class CronSearchExhaustedError(RuntimeError):
    """Raised when no matching minute is found within the search bound."""

    def __init__(self, expression: str, iterations: int):
        self.expression = expression
        self.iterations = iterations
        super().__init__(f"Could not calculate next run time for: {expression}")


def _parse_int(token: str, expression: str) -> int:
    token = token.strip()
    if not re.fullmatch(r"[0-9]+", token):
        raise CronExpressionError(
            f"Invalid cron expression: {expression}. Non-numeric value '{token}'.",
            expression,
        )
    return int(token)


def _parse_range(token: str, minimum: int, maximum: int, expression: str) -> tuple[int, int]:
    parts = token.split("-")
    start = minimum if parts[0] == "*" else _parse_int(parts[0], expression)
    end = _parse_int(parts[1], expression) if len(parts) > 1 else maximum
    return start, end


@dataclass(frozen=True)
class CronField:
    """A single parsed cron field."""

    name: str
    expression: str
    kind: str  # any | step | range | list | value
    values: tuple[int, ...] = ()
    step: Optional[int] = None

    @classmethod
    def parse(
        cls,
        name: str,
        token: str,
        minimum: int,
        maximum: int,
        expression: str,
    ) -> "CronField":
        if token == "*":
            return cls(name=name, expression=token, kind="any")

        if "/" in token:
            range_part, step_part = token.split("/", 1)
            step = _parse_int(step_part, expression)
            if step <= 0:
                raise CronExpressionError(
                    f"Invalid cron expression: {expression}. Step must be positive.",
                    expression,
                )
            if range_part == "*":
                return cls(name=name, expression=token, kind="step", step=step)
            start, _ = _parse_range(range_part, minimum, maximum, expression)
            return cls(name=name, expression=token, kind="step", values=(start,), step=step)

        if "-" in token:
            start, end = _parse_range(token, minimum, maximum, expression)
            return cls(name=name, expression=token, kind="range", values=(start, end))

        if "," in token:
            values = tuple(_parse_int(v, expression) for v in token.split(","))
            return cls(name=name, expression=token, kind="list", values=values)

        return cls(
            name=name,
            expression=token,
            kind="value",
            values=(_parse_int(token, expression),),
        )

    def matches(self, value: int) -> bool:
        if self.kind == "any":
            return True
        if self.kind == "step":
            if not self.values:
                return value % self.step == 0
            start = self.values[0]
            return value >= start and (value - start) % self.step == 0
        if self.kind == "range":
            start, end = self.values
            return start <= value <= end
        return value in self.values


@dataclass(frozen=True)
class CronSchedule:
    """A validated 5-field cron expression."""

    expression: str
    minute: CronField
    hour: CronField
    day: CronField
    month: CronField
    weekday: CronField

    @classmethod
    def parse(cls, expression: str) -> "CronSchedule":
        """
        Parse and validate a cron expression.

        Raises:
            CronExpressionError: On a field count other than 5, a non-numeric
                value, or a zero/negative step
        """
        parts = expression.split()
        if len(parts) != len(FIELD_SPECS):
            raise CronExpressionError(
                f"Invalid cron expression: {expression}. Expected 5 fields.",
                expression,
            )

        fields = {
            name: CronField.parse(name, token, minimum, maximum, expression)
            for (name, minimum, maximum), token in zip(FIELD_SPECS, parts)
        }
        return cls(expression=expression, **fields)

    def matches(self, dt: datetime) -> bool:
        """Check whether all five fields match ``dt`` (weekday 0 = Sunday)."""
        return (
            self.minute.matches(dt.minute)
            and self.hour.matches(dt.hour)
            and self.day.matches(dt.day)
            and self.month.matches(dt.month)
            and self.weekday.matches(dt.isoweekday() % 7)
        )

    def next_after(
        self,
        from_date: datetime,
        max_iterations: Optional[int] = None,
    ) -> datetime:
        """
        Find the first matching minute strictly after ``from_date``.

        Aware references are stepped in UTC and matched on their local wall
        clock, so repeated and skipped hours around DST changes are handled.
        Naive references are stepped as wall-clock time.
        """
        if max_iterations is None:
            max_iterations = get_settings().scheduler.max_search_minutes

        tz = from_date.tzinfo if from_date.utcoffset() is not None else None
        if tz is not None:
            from_date = from_date.astimezone(timezone.utc)

        candidate = from_date.replace(second=0, microsecond=0) + timedelta(minutes=1)
        for _ in range(max_iterations):
            local = candidate.astimezone(tz) if tz is not None else candidate
            if self.matches(local):
                return local
            candidate += timedelta(minutes=1)

        logger.warning(
            f"Cron search exhausted after {max_iterations} minutes: {self.expression}"
        )
        raise CronSearchExhaustedError(self.expression, max_iterations)


def matches_cron_field(value: int, token: str, minimum: int, maximum: int) -> bool:
    """Check a single value against one cron field."""
    return CronField.parse("field", token, minimum, maximum, token).matches(value)


def get_next_run_time(
    expression: str,
    from_date: Optional[datetime] = None,
    max_iterations: Optional[int] = None,
) -> datetime:
    """
    Calculate the next run time for a cron expression.

    Args:
        expression: 5-field cron expression
        from_date: Reference instant (defaults to now, UTC)
        max_iterations: Candidate minutes to try (defaults to
            SCHEDULER_MAX_SEARCH_MINUTES)

    Returns:
        First matching minute strictly after ``from_date``

    Raises:
        CronExpressionError: If the expression is malformed
        CronSearchExhaustedError: If nothing matches within the bound
    """
    schedule = CronSchedule.parse(expression)
    if from_date is None:
        from_date = datetime.now(timezone.utc)
    return schedule.next_after(from_date, max_iterations)


def describe_cron_schedule(expression: str) -> str:
    """Get a human-readable description of a cron schedule."""
    parts = expression.split()
    if len(parts) != 5:
        return expression

    minute, hour, day, month, weekday = parts

    if minute == "0" and hour == "0" and month == "*" and weekday == "*":
        if day == "1":
            return "Monthly on the 1st at midnight"
        if day == "*":
            return "Daily at midnight"
    if (minute, hour, day, month, weekday) == ("0", "9", "*", "*", "1"):
        return "Weekly on Monday at 9:00 AM"
    if (minute, hour, day, weekday) == ("0", "0", "1", "*"):
        if month == "1,4,7,10":
            return "Quarterly on the 1st at midnight"
        if month == "1":
            return "Annually on January 1st at midnight"

    hour_str = "every hour" if hour == "*" else f"at {hour}:{minute.zfill(2)}"
    day_str = "every day" if day == "*" else f"on day {day}"
    month_str = "" if month == "*" else f" of month {month}"
    if weekday == "*":
        weekday_str = ""
    elif weekday.isdigit() and int(weekday) < len(WEEKDAY_NAMES):
        weekday_str = f" ({WEEKDAY_NAMES[int(weekday)]})"
    else:
        weekday_str = f" ({weekday})"

    return f"{day_str}{month_str}{weekday_str} {hour_str}"
