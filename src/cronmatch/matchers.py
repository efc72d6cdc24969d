"""Compiled per-field predicates.

A value matcher decides whether one calendar field value satisfies one cron
field. Ordinary matchers only look at the value; the ``L`` matchers also need
the month and year being tested, so every matcher receives the full
``MatchContext`` for the instant under evaluation.

All matchers are immutable once built.
"""

from __future__ import annotations

import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from typing import FrozenSet, Iterable


# =============================================================================
# Match Context
# =============================================================================


@dataclass(frozen=True)
class MatchContext:
    """Calendar decomposition of one instant.

    ``weekday`` uses cron numbering (0 = Sunday ... 6 = Saturday). ``second``
    is None when seconds are not being matched.
    """

    second: int | None
    minute: int
    hour: int
    day: int
    month: int
    weekday: int
    year: int

    @classmethod
    def from_datetime(cls, dt: datetime, match_seconds: bool = False) -> "MatchContext":
        # Python weekday: Monday=0, Sunday=6
        # Cron weekday: Sunday=0, Saturday=6
        return cls(
            second=dt.second if match_seconds else None,
            minute=dt.minute,
            hour=dt.hour,
            day=dt.day,
            month=dt.month,
            weekday=(dt.weekday() + 1) % 7,
            year=dt.year,
        )

    @cached_property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]


# =============================================================================
# Matchers
# =============================================================================


class ValueMatcher(ABC):
    """Predicate over one field value."""

    __slots__ = ()

    @property
    def is_any(self) -> bool:
        """True if the matcher places no restriction on its field."""
        return False

    @abstractmethod
    def matches(self, value: int, context: MatchContext) -> bool:
        """Check if ``value`` satisfies this matcher for ``context``."""


class AlwaysMatcher(ValueMatcher):
    """Accepts every value (``*`` and ``?``)."""

    __slots__ = ()

    @property
    def is_any(self) -> bool:
        return True

    def matches(self, value: int, context: MatchContext) -> bool:
        return True

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AlwaysMatcher)

    def __hash__(self) -> int:
        return hash(AlwaysMatcher)

    def __repr__(self) -> str:
        return "AlwaysMatcher()"


ALWAYS = AlwaysMatcher()


class ValueSetMatcher(ValueMatcher):
    """Accepts values from a fixed set."""

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[int]) -> None:
        self._values: FrozenSet[int] = frozenset(values)

    @property
    def values(self) -> FrozenSet[int]:
        return self._values

    def matches(self, value: int, context: MatchContext) -> bool:
        return value in self._values

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValueSetMatcher):
            return self._values == other._values
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"ValueSetMatcher({sorted(self._values)})"


class LastDayOfMonthMatcher(ValueMatcher):
    """Accepts only the last calendar day of the tested month."""

    __slots__ = ()

    def matches(self, value: int, context: MatchContext) -> bool:
        return value == context.days_in_month

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LastDayOfMonthMatcher)

    def __hash__(self) -> int:
        return hash(LastDayOfMonthMatcher)

    def __repr__(self) -> str:
        return "LastDayOfMonthMatcher()"


class LastWeekdayOfMonthMatcher(ValueMatcher):
    """Accepts the final occurrence of a weekday within the tested month.

    The candidate is the last one when a week later falls in the next month.
    """

    __slots__ = ("_weekday",)

    def __init__(self, weekday: int) -> None:
        self._weekday = weekday

    @property
    def weekday(self) -> int:
        return self._weekday

    def matches(self, value: int, context: MatchContext) -> bool:
        return value == self._weekday and context.day + 7 > context.days_in_month

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LastWeekdayOfMonthMatcher):
            return self._weekday == other._weekday
        return NotImplemented

    def __hash__(self) -> int:
        return hash((LastWeekdayOfMonthMatcher, self._weekday))

    def __repr__(self) -> str:
        return f"LastWeekdayOfMonthMatcher({self._weekday})"


class AnyOfMatcher(ValueMatcher):
    """Union of several matchers, e.g. ``1,15,L`` in day-of-month."""

    __slots__ = ("_matchers",)

    def __init__(self, matchers: Iterable[ValueMatcher]) -> None:
        self._matchers = tuple(matchers)

    @property
    def matchers(self) -> tuple[ValueMatcher, ...]:
        return self._matchers

    def matches(self, value: int, context: MatchContext) -> bool:
        return any(m.matches(value, context) for m in self._matchers)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AnyOfMatcher):
            return set(self._matchers) == set(other._matchers)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._matchers))

    def __repr__(self) -> str:
        return f"AnyOfMatcher({list(self._matchers)!r})"
