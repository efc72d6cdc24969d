"""cronmatch: cron-style schedule matching and enumeration.

Compiles crontab-like expressions into immutable patterns that answer
"does this instant match?" and "which instants match next?".

Features:
    - Standard 5-field cron (minute, hour, day, month, weekday)
    - Extended 6-field cron with seconds
    - Extended 7-field cron with years
    - Alternatives joined with ``|`` (any of them may match)
    - Named months and weekdays, case-insensitive
    - ``L`` for the last day of the month and the last weekday of the month
    - Classic cron day-of-month OR day-of-week semantics
    - Timezone-aware matching via ``zoneinfo``

Syntax Reference:
    Field         Values          Special Characters
    ─────────────────────────────────────────────────
    Second        0-59            * ? / , -
    Minute        0-59            * ? / , -
    Hour          0-23            * ? / , -
    Day of Month  1-31            * ? / , - L
    Month         1-12 or JAN-DEC * ? / , -
    Day of Week   0-7 or SUN-SAT  * ? / , - L   (7 is Sunday)
    Year          1970-2099       * ? / , -

Usage:
    >>> from cronmatch import CronPattern, matched_dates
    >>>
    >>> pattern = CronPattern("0 9 * * MON-FRI | 0 18 * * MON-FRI")
    >>> pattern.match(datetime(2024, 1, 15, 9, 0))
    True
    >>> matched_dates(pattern, datetime(2024, 1, 15), count=3)
"""

from cronmatch.config import (
    CronSettings,
    configure,
    get_settings,
    load_settings,
    reset_settings,
)
from cronmatch.errors import (
    ConfigError,
    CronArgumentError,
    CronError,
    CronFieldError,
    CronParseError,
    CronStructureError,
)
from cronmatch.fields import (
    FIELD_CONSTRAINTS,
    CronFieldType,
    FieldConstraints,
    FieldLayout,
)
from cronmatch.matchers import (
    ALWAYS,
    AlwaysMatcher,
    AnyOfMatcher,
    LastDayOfMonthMatcher,
    LastWeekdayOfMonthMatcher,
    MatchContext,
    ValueMatcher,
    ValueSetMatcher,
)
from cronmatch.parser import CronParser, FieldParser
from cronmatch.pattern import (
    CronIterator,
    CronPattern,
    compile_pattern,
    is_valid_expression,
    matched_dates,
    next_date_after,
    validate_expression,
)
from cronmatch.presets import get_preset, list_presets
from cronmatch.table import MatcherTable

__version__ = "0.1.0"

__all__ = [
    # Core
    "CronPattern",
    "CronIterator",
    "compile_pattern",
    "matched_dates",
    "next_date_after",
    # Compiler
    "CronParser",
    "FieldParser",
    "MatcherTable",
    # Fields
    "CronFieldType",
    "FieldConstraints",
    "FieldLayout",
    "FIELD_CONSTRAINTS",
    # Matchers
    "ValueMatcher",
    "AlwaysMatcher",
    "ValueSetMatcher",
    "LastDayOfMonthMatcher",
    "LastWeekdayOfMonthMatcher",
    "AnyOfMatcher",
    "MatchContext",
    "ALWAYS",
    # Errors
    "CronError",
    "CronParseError",
    "CronStructureError",
    "CronFieldError",
    "CronArgumentError",
    "ConfigError",
    # Validation
    "validate_expression",
    "is_valid_expression",
    # Presets
    "get_preset",
    "list_presets",
    # Settings
    "CronSettings",
    "configure",
    "get_settings",
    "load_settings",
    "reset_settings",
]
