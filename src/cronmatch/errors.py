"""Exception hierarchy for cronmatch.

Compile-time problems are reported as ``CronParseError`` subclasses, call-time
problems as ``CronArgumentError``. Both derive from ``ValueError`` so callers
that only care about "bad input" can catch the builtin.

Hierarchy:
    CronError
     +- CronParseError        (also ValueError)
     |   +- CronStructureError
     |   +- CronFieldError
     +- CronArgumentError     (also ValueError)
     +- ConfigError
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cronmatch.fields import CronFieldType


class CronError(Exception):
    """Base class for all cronmatch errors."""

    pass


class CronParseError(CronError, ValueError):
    """Raised when cron expression parsing fails."""

    def __init__(self, message: str, expression: str = "", position: int = -1) -> None:
        self.expression = expression
        self.position = position
        super().__init__(message)


class CronStructureError(CronParseError):
    """Wrong number of fields or an empty ``|`` alternative."""

    pass


class CronFieldError(CronParseError):
    """A single field contains a bad token or an out-of-range value."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        *,
        field_type: "CronFieldType | None" = None,
        token: str = "",
        position: int = -1,
    ) -> None:
        self.field_type = field_type
        self.token = token
        super().__init__(message, expression, position)

    @property
    def field_name(self) -> str:
        if self.field_type is None:
            return ""
        return self.field_type.label


class CronArgumentError(CronError, ValueError):
    """Invalid arguments passed to a matching or enumeration call."""

    pass


class ConfigError(CronError):
    """Invalid settings value or unreadable settings file."""

    pass
