"""Cron expression compiler.

``FieldParser`` turns the text of one field into a value matcher.
``CronParser`` splits a full expression into ``|`` alternatives and fields,
picks the field layout from the field count and builds one ``MatcherTable``
per alternative.

Operator precedence inside a field, highest first::

    /   step      3-18/5   -> 3, 8, 13, 18
    -   range     2-5      -> 2, 3, 4, 5
    ,   list      2,3,6/3  -> 2, 3, (6/3) == 2, 3, 6
"""

from __future__ import annotations

import logging

from cronmatch.errors import CronFieldError, CronStructureError
from cronmatch.fields import (
    FIELD_CONSTRAINTS,
    LAST_DAY_OF_WEEK,
    CronFieldType,
    FieldConstraints,
    FieldLayout,
)
from cronmatch.matchers import (
    ALWAYS,
    AnyOfMatcher,
    LastDayOfMonthMatcher,
    LastWeekdayOfMonthMatcher,
    ValueMatcher,
    ValueSetMatcher,
)
from cronmatch.table import MatcherTable

logger = logging.getLogger(__name__)


# =============================================================================
# Field Parser
# =============================================================================


class FieldParser:
    """Parser for the text of a single cron field.

    Example:
        >>> FieldParser(CronFieldType.MINUTE).parse("3-18/5")
        ValueSetMatcher([3, 8, 13, 18])
    """

    def __init__(
        self,
        field_type: CronFieldType,
        expression: str = "",
        position: int = -1,
    ) -> None:
        """Initialize field parser.

        Args:
            field_type: Field the text belongs to.
            expression: Full expression, used for error reporting.
            position: Index of the field within its alternative.
        """
        self._field_type = field_type
        self._constraints: FieldConstraints = FIELD_CONSTRAINTS[field_type]
        self._expression = expression
        self._position = position

    @property
    def field_type(self) -> CronFieldType:
        return self._field_type

    def parse(self, text: str) -> ValueMatcher:
        """Parse field text.

        Args:
            text: Field text such as ``*``, ``1-5``, ``*/15`` or ``MON,FRI``.

        Returns:
            Compiled value matcher.

        Raises:
            CronFieldError: If the text is malformed or out of range.
        """
        text = text.strip()

        if text in ("*", "?"):
            return ALWAYS
        if not text:
            raise self._error("Empty field", text)

        values: set[int] = set()
        specials: list[ValueMatcher] = []

        for atom in text.split(","):
            atom = atom.strip()
            if not atom:
                raise self._error(f"Empty list item in {text!r}", text)

            if self._constraints.supports_l and "L" in atom.upper():
                special = self._parse_last(atom)
                if special is None:
                    values.add(LAST_DAY_OF_WEEK)
                else:
                    specials.append(special)
                continue

            values.update(self._parse_atom(atom))

        matchers = list(specials)
        if values:
            matchers.append(ValueSetMatcher(values))

        if len(matchers) == 1:
            return matchers[0]
        return AnyOfMatcher(matchers)

    def _parse_last(self, atom: str) -> ValueMatcher | None:
        """Parse an atom containing ``L``.

        Returns None for bare ``L`` in day-of-week, which is a plain
        value (Saturday) rather than a calendar dependent matcher.
        """
        upper = atom.upper()

        if self._field_type == CronFieldType.DAY_OF_MONTH:
            if upper != "L":
                raise self._error(f"Invalid L expression: {atom}", atom)
            return LastDayOfMonthMatcher()

        if upper == "L":
            return None

        # Last weekday of month, written as 5L, FRIL, L5 or LFRI
        if upper.endswith("L"):
            weekday_text = upper[:-1]
        elif upper.startswith("L"):
            weekday_text = upper[1:]
        else:
            raise self._error(f"Invalid L expression: {atom}", atom)

        if not weekday_text or any(c in weekday_text for c in "L-/*"):
            raise self._error(f"Invalid L expression: {atom}", atom)

        weekday = self._constraints.normalize(self._resolve_value(weekday_text))
        return LastWeekdayOfMonthMatcher(weekday)

    def _parse_atom(self, atom: str) -> set[int]:
        """Parse one list item: value, range, or step."""
        constraints = self._constraints

        if "/" in atom:
            base, _, step_text = atom.partition("/")
            step = self._parse_step(step_text, atom)

            if base == "*":
                start, end = constraints.min_value, constraints.max_value
            elif "-" in base:
                start, end = self._parse_range(base)
            else:
                start = end = self._resolve_value(base)

            raw = range(start, end + 1, step)
        elif atom == "*":
            raw = range(constraints.min_value, constraints.max_value + 1)
        elif "-" in atom:
            start, end = self._parse_range(atom)
            raw = range(start, end + 1)
        else:
            value = self._resolve_value(atom)
            raw = range(value, value + 1)

        return {constraints.normalize(v) for v in raw}

    def _parse_step(self, step_text: str, atom: str) -> int:
        digits = step_text[1:] if step_text.startswith("-") else step_text
        if not digits.isascii() or not digits.isdigit():
            raise self._error(f"Invalid step: {atom}", atom)

        step = int(step_text)
        if step <= 0:
            raise self._error(f"Step must be positive: {step}", atom)
        return step

    def _parse_range(self, text: str) -> tuple[int, int]:
        parts = text.split("-")
        if len(parts) != 2:
            raise self._error(f"Invalid range: {text}", text)

        start = self._resolve_value(parts[0])
        end = self._resolve_value(parts[1])

        if start > end:
            raise self._error(
                f"Invalid range {text}: start {start} is greater than end {end}",
                text,
            )
        return start, end

    def _resolve_value(self, token: str) -> int:
        """Resolve a value (number or name) to integer."""
        value = token.strip().upper()
        constraints = self._constraints

        # Check named values
        if value in constraints.names:
            return constraints.names[value]

        if not value.isascii() or not value.isdigit():
            raise self._error(f"Invalid value: {token!r}", token)

        num = int(value)
        if not constraints.contains(num):
            raise self._error(
                f"Value {num} out of range {constraints.range_text}",
                token,
            )
        return num

    def _error(self, detail: str, token: str) -> CronFieldError:
        return CronFieldError(
            f"Invalid {self._field_type.label} field: {detail} "
            f"(token {token!r}, valid range {self._constraints.range_text})",
            self._expression,
            field_type=self._field_type,
            token=token,
            position=self._position,
        )


# =============================================================================
# Cron Parser
# =============================================================================


class CronParser:
    """Compiler for full cron expressions.

    Supports:
        - Standard 5-field cron (minute hour day month weekday)
        - Extended 6-field cron (second minute hour day month weekday)
        - Extended 7-field cron (second minute hour day month weekday year)
        - Alternatives joined with ``|``, any of which may match
        - Predefined expressions (@yearly, @daily, etc.)
    """

    # Predefined expression aliases
    ALIASES: dict[str, str] = {
        "@yearly": "0 0 1 1 *",
        "@annually": "0 0 1 1 *",
        "@monthly": "0 0 1 * *",
        "@weekly": "0 0 * * 0",
        "@daily": "0 0 * * *",
        "@midnight": "0 0 * * *",
        "@hourly": "0 * * * *",
    }

    SEPARATOR = "|"

    def __init__(self, expression: str) -> None:
        """Initialize parser with expression.

        Args:
            expression: Cron expression string.
        """
        self._original = expression

    def parse(self) -> list[MatcherTable]:
        """Compile every alternative of the expression.

        Returns:
            One MatcherTable per ``|`` separated alternative, in order.

        Raises:
            CronStructureError: Wrong field count or empty alternative.
            CronFieldError: A field is malformed or out of range.
        """
        text = self._original.strip()
        if not text:
            raise CronStructureError("Empty cron expression", self._original)

        tables = [
            self._parse_alternative(segment, index)
            for index, segment in enumerate(text.split(self.SEPARATOR))
        ]

        logger.debug(
            "Compiled cron expression %r into %d alternative(s): %s",
            self._original,
            len(tables),
            ", ".join(t.layout.name for t in tables),
        )
        return tables

    def _resolve_alias(self, segment: str) -> str:
        """Resolve predefined aliases."""
        return self.ALIASES.get(segment.lower(), segment)

    def _parse_alternative(self, segment: str, index: int) -> MatcherTable:
        segment = segment.strip()
        if not segment:
            raise CronStructureError(
                f"Empty alternative at index {index}",
                self._original,
                index,
            )

        parts = self._resolve_alias(segment).split()
        layout = FieldLayout.for_count(len(parts))
        if layout is None:
            raise CronStructureError(
                f"Invalid number of fields: {len(parts)} in {segment!r}. "
                "Expected 5, 6, or 7 fields.",
                self._original,
                index,
            )

        matchers = {
            field_type: FieldParser(field_type, self._original, position).parse(part)
            for position, (part, field_type) in enumerate(zip(parts, layout.field_types))
        }
        return MatcherTable(matchers, layout)
