"""Field types, domains and field layouts.

Every cron field has a fixed integer domain and, for month and day-of-week,
a table of case-insensitive names. The tables here are module-level constants
built once at import time and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Mapping


# =============================================================================
# Field Types
# =============================================================================


class CronFieldType(Enum):
    """Types of cron fields, in matcher table slot order."""

    SECOND = auto()
    MINUTE = auto()
    HOUR = auto()
    DAY_OF_MONTH = auto()
    MONTH = auto()
    DAY_OF_WEEK = auto()
    YEAR = auto()

    @property
    def label(self) -> str:
        """Human readable field name used in error messages."""
        return self.name.lower().replace("_", "-")


@dataclass(frozen=True)
class FieldConstraints:
    """Legal domain and syntax options for a cron field.

    Attributes:
        min_value: Smallest accepted value.
        max_value: Largest accepted value (before folding).
        names: Upper-case aliases mapped to their numeric value.
        supports_l: Whether ``L`` is meaningful in this field.
        fold: Optional ``(from, to)`` pair applied after range expansion,
            e.g. day-of-week 7 becomes 0.
    """

    min_value: int
    max_value: int
    names: Mapping[str, int] = field(default_factory=dict)
    supports_l: bool = False
    fold: tuple[int, int] | None = None

    def contains(self, value: int) -> bool:
        return self.min_value <= value <= self.max_value

    def normalize(self, value: int) -> int:
        if self.fold is not None and value == self.fold[0]:
            return self.fold[1]
        return value

    @property
    def range_text(self) -> str:
        return f"[{self.min_value}-{self.max_value}]"


_MONTH_NAMES = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)

_WEEKDAY_NAMES = (
    "SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY",
)


def _name_table(names: tuple[str, ...], first: int) -> Mapping[str, int]:
    table: dict[str, int] = {}
    for offset, name in enumerate(names):
        table[name] = first + offset
        table[name[:3]] = first + offset
    return MappingProxyType(table)


MONTH_NAMES: Mapping[str, int] = _name_table(_MONTH_NAMES, 1)
WEEKDAY_NAMES: Mapping[str, int] = _name_table(_WEEKDAY_NAMES, 0)

# Saturday, the value bare ``L`` stands for in the day-of-week field
LAST_DAY_OF_WEEK = 6


# Field constraint definitions
FIELD_CONSTRAINTS: Mapping[CronFieldType, FieldConstraints] = MappingProxyType({
    CronFieldType.SECOND: FieldConstraints(0, 59),
    CronFieldType.MINUTE: FieldConstraints(0, 59),
    CronFieldType.HOUR: FieldConstraints(0, 23),
    CronFieldType.DAY_OF_MONTH: FieldConstraints(1, 31, supports_l=True),
    CronFieldType.MONTH: FieldConstraints(1, 12, names=MONTH_NAMES),
    CronFieldType.DAY_OF_WEEK: FieldConstraints(
        0, 7,
        names=WEEKDAY_NAMES,
        supports_l=True,
        fold=(7, 0),
    ),
    CronFieldType.YEAR: FieldConstraints(1970, 2099),
})


# =============================================================================
# Field Layouts
# =============================================================================


class FieldLayout(Enum):
    """Positional meaning of the fields, selected by field count.

    Each layout maps the written fields onto the same seven matcher slots;
    slots a layout does not mention are left unrestricted.
    """

    STANDARD = (
        CronFieldType.MINUTE,
        CronFieldType.HOUR,
        CronFieldType.DAY_OF_MONTH,
        CronFieldType.MONTH,
        CronFieldType.DAY_OF_WEEK,
    )
    WITH_SECONDS = (
        CronFieldType.SECOND,
        CronFieldType.MINUTE,
        CronFieldType.HOUR,
        CronFieldType.DAY_OF_MONTH,
        CronFieldType.MONTH,
        CronFieldType.DAY_OF_WEEK,
    )
    WITH_SECONDS_AND_YEAR = (
        CronFieldType.SECOND,
        CronFieldType.MINUTE,
        CronFieldType.HOUR,
        CronFieldType.DAY_OF_MONTH,
        CronFieldType.MONTH,
        CronFieldType.DAY_OF_WEEK,
        CronFieldType.YEAR,
    )

    @property
    def field_types(self) -> tuple[CronFieldType, ...]:
        return self.value

    @property
    def has_seconds(self) -> bool:
        return CronFieldType.SECOND in self.value

    @property
    def has_years(self) -> bool:
        return CronFieldType.YEAR in self.value

    @classmethod
    def for_count(cls, count: int) -> "FieldLayout | None":
        """Return the layout for ``count`` fields, or None if unsupported."""
        for layout in cls:
            if len(layout.value) == count:
                return layout
        return None
