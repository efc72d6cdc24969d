"""Precompiled cron patterns for common schedules.

Usage:
    >>> from cronmatch.presets import DAILY, WEEKDAYS_9AM
    >>>
    >>> DAILY.match(datetime(2024, 1, 15, 0, 0))
    True
    >>> get_preset("last-friday")
    CronPattern('0 17 * * 5L')
"""

from __future__ import annotations

from cronmatch.pattern import CronPattern


# =============================================================================
# Standard Intervals
# =============================================================================

# Every year on January 1st at midnight
YEARLY = CronPattern("0 0 1 1 *")
ANNUALLY = YEARLY

# First day of every month at midnight
MONTHLY = CronPattern("0 0 1 * *")

# Every Sunday at midnight
WEEKLY = CronPattern("0 0 * * 0")

# Every day at midnight
DAILY = CronPattern("0 0 * * *")
MIDNIGHT = DAILY

HOURLY = CronPattern("0 * * * *")
EVERY_MINUTE = CronPattern("* * * * *")

# 6-field, only meaningful when seconds are matched
EVERY_SECOND = CronPattern("* * * * * *")


# =============================================================================
# Business Schedule Presets
# =============================================================================

WEEKDAYS_9AM = CronPattern("0 9 * * MON-FRI")
WEEKDAYS_6PM = CronPattern("0 18 * * MON-FRI")

# Start and end of the working day
BUSINESS_OPEN_CLOSE = CronPattern("0 9 * * 1-5 | 0 18 * * 1-5")

# Every 15 minutes during business hours (9 AM - 5 PM, weekdays)
BUSINESS_HOURS_15MIN = CronPattern("*/15 9-17 * * 1-5")


# =============================================================================
# Month Boundary Presets
# =============================================================================

FIRST_OF_MONTH = CronPattern("0 6 1 * *")
LAST_OF_MONTH = CronPattern("0 6 L * *")
LAST_FRIDAY = CronPattern("0 17 * * 5L")
QUARTERLY = CronPattern("0 0 1 JAN,APR,JUL,OCT *")
END_OF_QUARTER = CronPattern("0 0 L 3,6,9,12 *")


# =============================================================================
# Preset Registry
# =============================================================================

PRESETS: dict[str, CronPattern] = {
    "yearly": YEARLY,
    "annually": ANNUALLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "midnight": MIDNIGHT,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    "every_second": EVERY_SECOND,
    "weekdays_9am": WEEKDAYS_9AM,
    "weekdays_6pm": WEEKDAYS_6PM,
    "business_open_close": BUSINESS_OPEN_CLOSE,
    "business_hours_15min": BUSINESS_HOURS_15MIN,
    "first_of_month": FIRST_OF_MONTH,
    "last_of_month": LAST_OF_MONTH,
    "last_friday": LAST_FRIDAY,
    "quarterly": QUARTERLY,
    "end_of_quarter": END_OF_QUARTER,
}


def get_preset(name: str) -> CronPattern | None:
    """Get a preset pattern by name (case-insensitive, dashes allowed)."""
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    return list(PRESETS.keys())
