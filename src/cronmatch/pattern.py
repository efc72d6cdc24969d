"""Compiled cron patterns, matching and enumeration.

Design Principles:
    1. Immutable patterns, shared freely between threads
    2. Parse once, evaluate many times
    3. Enumeration is a forward scan in fixed ticks (one second or one
       minute), so every grammar edge case is handled by ``match`` alone.
       Days whose date cannot match are skipped whole, which never changes
       the result of the scan.

Example:
    >>> pattern = CronPattern("0 9 * * 1-5 | 0 18 * * 1-5")
    >>> pattern.match(datetime(2024, 1, 15, 9, 0))  # Monday
    True
    >>> matched_dates(pattern, datetime(2024, 1, 15), datetime(2024, 1, 16), 5)
    [datetime(2024, 1, 15, 9, 0), datetime(2024, 1, 15, 18, 0)]
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone as dt_timezone, tzinfo
from typing import Iterator, Sequence, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cronmatch.config import get_settings
from cronmatch.errors import CronArgumentError, CronParseError
from cronmatch.fields import CronFieldType
from cronmatch.matchers import MatchContext, ValueMatcher
from cronmatch.parser import CronParser
from cronmatch.table import MatcherTable

logger = logging.getLogger(__name__)

Instant = Union[datetime, int, float]
TimezoneLike = Union[tzinfo, str, None]

SECOND = timedelta(seconds=1)
MINUTE = timedelta(minutes=1)


# =============================================================================
# Time Helpers
# =============================================================================


def resolve_timezone(tz: TimezoneLike) -> tzinfo | None:
    """Resolve a timezone argument.

    Args:
        tz: A tzinfo, an IANA zone name, or None for the configured default
            (None again when no default is configured, meaning local time).

    Raises:
        CronArgumentError: If a zone name is unknown.
    """
    if tz is None:
        tz = get_settings().default_timezone
        if tz is None:
            return None

    if isinstance(tz, str):
        try:
            return ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise CronArgumentError(f"Unknown timezone: {tz!r}") from e

    return tz


def to_wall_clock(instant: Instant, timezone: TimezoneLike = None) -> datetime:
    """Express an instant as wall-clock time.

    Naive datetimes are already wall-clock time and are returned unchanged.
    Aware datetimes are converted into ``timezone`` when one is given and
    otherwise read in their own tzinfo. POSIX timestamps are converted into
    ``timezone``, the configured default, or the system local zone.
    """
    if isinstance(instant, datetime):
        zone = resolve_timezone(timezone) if timezone is not None else None
        if instant.tzinfo is None or zone is None:
            return instant
        return instant.astimezone(zone)

    if isinstance(instant, (int, float)) and not isinstance(instant, bool):
        return datetime.fromtimestamp(instant, resolve_timezone(timezone))

    raise CronArgumentError(
        f"Instant must be a datetime or a POSIX timestamp, got {type(instant).__name__}"
    )


def end_of_year(dt: datetime) -> datetime:
    """First instant of the year after ``dt``'s, in ``dt``'s tzinfo."""
    return datetime(dt.year + 1, 1, 1, tzinfo=dt.tzinfo)


# =============================================================================
# Cron Pattern
# =============================================================================


class CronPattern:
    """Compiled cron pattern.

    A pattern holds its original text verbatim and one ``MatcherTable`` per
    ``|`` separated alternative. An instant matches when any alternative
    matches it.

    Example:
        >>> pattern = CronPattern.parse("*/5 * * * *")
        >>> pattern.match(datetime(2024, 1, 15, 9, 10))
        True
        >>> str(pattern)
        '*/5 * * * *'
    """

    __slots__ = ("_expression", "_tables")

    def __init__(
        self,
        expression: str,
        tables: Sequence[MatcherTable] | None = None,
    ) -> None:
        """Compile (or wrap already compiled) pattern.

        Args:
            expression: Original expression string.
            tables: Precompiled alternatives; compiled from ``expression``
                when None.

        Raises:
            CronParseError: If expression is invalid.
        """
        if tables is None:
            tables = CronParser(expression).parse()
        self._expression = expression
        self._tables = tuple(tables)

    @classmethod
    def parse(cls, expression: str) -> "CronPattern":
        """Parse a cron expression."""
        return cls(expression)

    @property
    def expression(self) -> str:
        """Get original expression string."""
        return self._expression

    @property
    def tables(self) -> tuple[MatcherTable, ...]:
        """Compiled alternatives, in declaration order."""
        return self._tables

    @property
    def has_seconds(self) -> bool:
        """Check if any alternative includes a seconds field."""
        return any(t.layout.has_seconds for t in self._tables)

    @property
    def has_years(self) -> bool:
        return any(t.layout.has_years for t in self._tables)

    def get_matcher(self, field_type: CronFieldType, alternative: int = 0) -> ValueMatcher:
        """Get the matcher for one field of one alternative."""
        return self._tables[alternative].get(field_type)

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def match(
        self,
        instant: Instant,
        timezone: TimezoneLike = None,
        match_seconds: bool | None = None,
    ) -> bool:
        """Check if an instant satisfies this pattern.

        Args:
            instant: Datetime or POSIX timestamp.
            timezone: Zone the instant is decomposed in (tzinfo or name).
                Aware datetimes default to their own tzinfo; timestamps
                default to the configured zone, then local time.
            match_seconds: Check the seconds field. Defaults to the
                configured value. When false a seconds restriction is
                simply not checked.

        Returns:
            True if any alternative accepts the instant.
        """
        if match_seconds is None:
            match_seconds = get_settings().match_seconds

        wall = to_wall_clock(instant, timezone)
        return self.match_context(MatchContext.from_datetime(wall, match_seconds))

    def matches(self, dt: datetime) -> bool:
        """Check a datetime, matching seconds only if the pattern has them."""
        return self.match(dt, match_seconds=self.has_seconds)

    def match_context(self, context: MatchContext) -> bool:
        """Evaluate an already decomposed instant."""
        return any(table.match(context) for table in self._tables)

    def match_date(self, context: MatchContext) -> bool:
        """Check whether any alternative can match on the context's date."""
        return any(table.match_date(context) for table in self._tables)

    # -------------------------------------------------------------------------
    # Enumeration
    # -------------------------------------------------------------------------

    def enumerate(
        self,
        start: datetime,
        end: datetime | None = None,
        count: int = 1,
        match_seconds: bool | None = None,
        timezone: TimezoneLike = None,
    ) -> list[datetime]:
        """List matching instants in ``[start, end)``; see ``matched_dates``."""
        return matched_dates(self, start, end, count, match_seconds, timezone)

    def next(
        self,
        after: datetime | None = None,
        match_seconds: bool | None = None,
    ) -> datetime | None:
        """Get next matching datetime strictly after ``after``.

        Args:
            after: Start searching after this datetime (default: now).
            match_seconds: Defaults to whether the pattern has seconds.

        Returns:
            Next matching datetime, or None if none is found within the
            configured search horizon.
        """
        if after is None:
            after = datetime.now()
        if match_seconds is None:
            match_seconds = self.has_seconds

        # Start from next second/minute
        if match_seconds:
            current = after.replace(microsecond=0) + SECOND
        else:
            current = after.replace(second=0, microsecond=0) + MINUTE

        end = current + timedelta(days=get_settings().search_horizon_days)
        found = matched_dates(self, current, end, 1, match_seconds)
        return found[0] if found else None

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
        match_seconds: bool | None = None,
    ) -> "CronIterator":
        """Create iterator over matching datetimes."""
        return CronIterator(self, after, limit, match_seconds)

    def __repr__(self) -> str:
        return f"CronPattern({self._expression!r})"

    def __str__(self) -> str:
        return self._expression

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CronPattern):
            return self._expression == other._expression
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._expression)


# =============================================================================
# Cron Iterator
# =============================================================================


class CronIterator(Iterator[datetime]):
    """Lazy iterator over the instants a pattern matches.

    Each step searches forward from the previous result with
    ``CronPattern.next``, so nothing beyond the current instant is held in
    memory. Iteration ends after ``limit`` results or once a search finds
    nothing within the configured horizon.

    Example:
        >>> it = CronPattern("0 * * * *").iter(datetime(2024, 1, 15, 9, 30), limit=2)
        >>> list(it)
        [datetime(2024, 1, 15, 10, 0), datetime(2024, 1, 15, 11, 0)]
    """

    def __init__(
        self,
        pattern: CronPattern,
        after: datetime | None = None,
        limit: int | None = None,
        match_seconds: bool | None = None,
    ) -> None:
        """Initialize iterator.

        Args:
            pattern: Pattern whose matches are produced.
            after: Results are strictly later than this (default: now,
                taken when the iterator is created).
            limit: Maximum number of results; unbounded when None.
            match_seconds: Passed to ``CronPattern.next``.

        Raises:
            CronArgumentError: If limit is negative.
        """
        if limit is not None and limit < 0:
            raise CronArgumentError(f"limit must not be negative: {limit}")

        self._pattern = pattern
        self._cursor = after if after is not None else datetime.now()
        self._remaining = limit
        self._match_seconds = match_seconds
        self._exhausted = False

    @property
    def remaining(self) -> int | None:
        """Results still allowed by the limit, None when unbounded."""
        return self._remaining

    def __iter__(self) -> "CronIterator":
        return self

    def __next__(self) -> datetime:
        if self._exhausted or self._remaining == 0:
            raise StopIteration

        found = self._pattern.next(self._cursor, self._match_seconds)
        if found is None:
            self._exhausted = True
            raise StopIteration

        self._cursor = found
        if self._remaining is not None:
            self._remaining -= 1
        return found


# =============================================================================
# Enumeration Functions
# =============================================================================


def compile_pattern(expression: str) -> CronPattern:
    """Compile a cron expression into a ``CronPattern``."""
    return CronPattern(expression)


def matched_dates(
    pattern: CronPattern | str,
    start: datetime,
    end: datetime | None = None,
    count: int = 1,
    match_seconds: bool | None = None,
    timezone: TimezoneLike = None,
) -> list[datetime]:
    """List up to ``count`` matching instants in ``[start, end)``.

    The scan starts at ``start`` itself and advances one second (when
    matching seconds) or one minute at a time; ticks keep ``start``'s
    sub-minute offset.

    Args:
        pattern: Compiled pattern or expression text.
        start: First instant tested.
        end: Exclusive bound; defaults to the end of ``start``'s year.
        count: Maximum number of results.
        match_seconds: Check the seconds field and scan per second.
            Defaults to the configured value.
        timezone: Zone for aware datetimes; defaults to ``start``'s tzinfo.
            Naive datetimes are scanned as wall-clock time.

    Returns:
        Matching instants in ascending order, possibly empty.

    Raises:
        CronArgumentError: If ``start >= end`` or ``count <= 0``.
    """
    if isinstance(pattern, str):
        pattern = CronPattern(pattern)
    if not isinstance(start, datetime):
        raise CronArgumentError(f"start must be a datetime, got {type(start).__name__}")
    if end is None:
        end = end_of_year(start)
    if not isinstance(end, datetime):
        raise CronArgumentError(f"end must be a datetime, got {type(end).__name__}")
    if (start.tzinfo is None) != (end.tzinfo is None):
        raise CronArgumentError("start and end must both be naive or both be aware")
    if count <= 0:
        raise CronArgumentError(f"count must be positive: {count}")
    if start >= end:
        raise CronArgumentError("Start date is later than end")

    settings = get_settings()
    if match_seconds is None:
        match_seconds = settings.match_seconds

    step = SECOND if match_seconds else MINUTE
    limit = settings.max_scan_ticks

    aware = start.tzinfo is not None
    if aware:
        zone = resolve_timezone(timezone) if timezone is not None else start.tzinfo
        tick = start.astimezone(dt_timezone.utc)
        stop = end.astimezone(dt_timezone.utc)
    else:
        zone = None
        tick, stop = start, end

    results: list[datetime] = []
    scanned = 0

    while tick < stop:
        if limit is not None and scanned >= limit:
            logger.warning(
                "Scan for %r stopped after %d ticks at %s",
                pattern.expression,
                scanned,
                tick.isoformat(),
            )
            break
        scanned += 1

        wall = tick.astimezone(zone) if aware else tick
        context = MatchContext.from_datetime(wall, match_seconds)

        if not pattern.match_date(context):
            tick = _skip_day(tick, wall, step, aware)
            continue

        if pattern.match_context(context):
            results.append(tick.astimezone(start.tzinfo) if aware else tick)
            if len(results) >= count:
                break

        tick += step

    logger.debug(
        "Enumerated %d match(es) for %r in %d tick(s)",
        len(results),
        pattern.expression,
        scanned,
    )
    return results


def _skip_day(tick: datetime, wall: datetime, step: timedelta, aware: bool) -> datetime:
    """Advance ``tick`` by whole steps to the first tick of the next day."""
    next_day: date = wall.date() + timedelta(days=1)
    midnight = datetime.combine(next_day, time(), tzinfo=wall.tzinfo)
    if aware:
        midnight = midnight.astimezone(dt_timezone.utc)

    steps = -(-(midnight - tick) // step)
    return tick + step * max(steps, 1)


def next_date_after(
    pattern: CronPattern | str,
    start: datetime,
    match_seconds: bool | None = None,
) -> datetime | None:
    """First match at or after ``start`` up to the end of ``start``'s year."""
    found = matched_dates(pattern, start, None, 1, match_seconds)
    return found[0] if found else None


# =============================================================================
# Validation Functions
# =============================================================================


def validate_expression(expression: str) -> list[str]:
    """Validate a cron expression.

    Args:
        expression: Cron expression to validate.

    Returns:
        List of validation errors (empty if valid).
    """
    errors = []

    try:
        CronPattern.parse(expression)
    except CronParseError as e:
        errors.append(str(e))

    return errors


def is_valid_expression(expression: str) -> bool:
    """Check if a cron expression is valid."""
    try:
        CronPattern.parse(expression)
        return True
    except CronParseError:
        return False
