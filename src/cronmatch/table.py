"""Seven-slot matcher aggregate for one cron alternative."""

from __future__ import annotations

from typing import Mapping

from cronmatch.fields import CronFieldType, FieldLayout
from cronmatch.matchers import ALWAYS, MatchContext, ValueMatcher


class MatcherTable:
    """Compiled matchers for every field of one alternative.

    Fields the written expression does not mention hold ``ALWAYS``. An
    instant is accepted when second (if checked), minute, hour, month and
    year all accept and the day constraint accepts. The day constraint
    follows classic crontab: when both day-of-month and day-of-week are
    restricted either one may accept.
    """

    __slots__ = (
        "_second",
        "_minute",
        "_hour",
        "_day_of_month",
        "_month",
        "_day_of_week",
        "_year",
        "_layout",
    )

    def __init__(
        self,
        matchers: Mapping[CronFieldType, ValueMatcher],
        layout: FieldLayout = FieldLayout.STANDARD,
    ) -> None:
        self._second = matchers.get(CronFieldType.SECOND, ALWAYS)
        self._minute = matchers.get(CronFieldType.MINUTE, ALWAYS)
        self._hour = matchers.get(CronFieldType.HOUR, ALWAYS)
        self._day_of_month = matchers.get(CronFieldType.DAY_OF_MONTH, ALWAYS)
        self._month = matchers.get(CronFieldType.MONTH, ALWAYS)
        self._day_of_week = matchers.get(CronFieldType.DAY_OF_WEEK, ALWAYS)
        self._year = matchers.get(CronFieldType.YEAR, ALWAYS)
        self._layout = layout

    @property
    def layout(self) -> FieldLayout:
        return self._layout

    def get(self, field_type: CronFieldType) -> ValueMatcher:
        """Get the matcher held in a slot."""
        return {
            CronFieldType.SECOND: self._second,
            CronFieldType.MINUTE: self._minute,
            CronFieldType.HOUR: self._hour,
            CronFieldType.DAY_OF_MONTH: self._day_of_month,
            CronFieldType.MONTH: self._month,
            CronFieldType.DAY_OF_WEEK: self._day_of_week,
            CronFieldType.YEAR: self._year,
        }[field_type]

    def match(self, context: MatchContext) -> bool:
        """Check if the decomposed instant satisfies every field."""
        if context.second is not None and not self._second.matches(context.second, context):
            return False
        return (
            self._minute.matches(context.minute, context)
            and self._hour.matches(context.hour, context)
            and self.match_date(context)
        )

    def match_date(self, context: MatchContext) -> bool:
        """Check only the calendar date fields (month, year, day constraint)."""
        return (
            self._month.matches(context.month, context)
            and self._year.matches(context.year, context)
            and self.match_day(context)
        )

    def match_day(self, context: MatchContext) -> bool:
        """Evaluate the combined day-of-month / day-of-week constraint."""
        dom_any = self._day_of_month.is_any
        dow_any = self._day_of_week.is_any

        if dom_any and dow_any:
            return True
        if dow_any:
            return self._day_of_month.matches(context.day, context)
        if dom_any:
            return self._day_of_week.matches(context.weekday, context)

        return (
            self._day_of_month.matches(context.day, context)
            or self._day_of_week.matches(context.weekday, context)
        )

    def __repr__(self) -> str:
        return f"MatcherTable({self._layout.name})"
