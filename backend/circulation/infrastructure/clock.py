"""Clocks — sources of "today" for the lifecycle engine."""

from dataclasses import dataclass
from datetime import date


class SystemClock:
    """Local calendar date of the running process."""

    def today(self) -> date:
        return date.today()


@dataclass
class FixedClock:
    """Always returns the same day. Used by tests and replays."""
    current: date

    def today(self) -> date:
        return self.current
