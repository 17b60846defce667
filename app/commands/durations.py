"""Human-readable durations such as `3d`, `1w2d` or `6mo`.

A duration is kept as calendar components rather than a number of seconds so
that `1mo` added to January 31st lands on the last day of February, not on a
fixed 30-day offset.

An absent duration is represented by ``None`` by callers (permanent), which
is distinct from a parsed zero-length ``Duration`` (expires immediately).
"""

import re
from dataclasses import dataclass, fields
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional

from dateutil.relativedelta import relativedelta

from commands.errors import DurationError

DEFAULT_UNITS: Dict[str, str] = {
    "y": "years",
    "mo": "months",
    "w": "weeks",
    "d": "days",
    "h": "hours",
    "m": "minutes",
    "s": "seconds",
}


@dataclass(frozen=True)
class Duration:
    """Normalized duration made of calendar components."""

    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def is_zero(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def to_relativedelta(self) -> relativedelta:
        return relativedelta(
            years=self.years,
            months=self.months,
            weeks=self.weeks,
            days=self.days,
            hours=self.hours,
            minutes=self.minutes,
            seconds=self.seconds,
        )

    def add_to(self, moment: datetime) -> datetime:
        """Return `moment` shifted forward by this duration."""
        return moment + self.to_relativedelta()

    def until(self, now: Optional[datetime] = None) -> datetime:
        """Expiry time of a restriction of this length starting now (UTC)."""
        return self.add_to(now or datetime.now(timezone.utc))

    def __str__(self) -> str:
        suffixes = {component: unit for unit, component in DEFAULT_UNITS.items()}
        parts = [
            f"{getattr(self, f.name)}{suffixes[f.name]}"
            for f in fields(self)
            if getattr(self, f.name)
        ]
        return "".join(parts) or "0s"


_COMPONENTS = frozenset(f.name for f in fields(Duration))


class DurationParser:
    """Parse `<integer><unit>` sequences into a :class:`Duration`.

    Pairs are concatenated without separators (`1w3d12h`). A bare `0` is
    accepted as an explicit zero-length duration. Matching is case-insensitive
    and tries longer unit suffixes first, so `mo` wins over `m`.

    Args:
        units: Extra unit suffixes mapped to component names. They extend the
            defaults and may override them.

    Raises:
        ValueError: If a unit maps to an unknown component
    """

    def __init__(self, units: Optional[Mapping[str, str]] = None):
        merged = dict(DEFAULT_UNITS)
        for unit, component in (units or {}).items():
            if component not in _COMPONENTS:
                raise ValueError(
                    f"Unknown duration component for unit '{unit}': {component}"
                )
            if not unit or not unit.isalpha():
                raise ValueError(f"Duration units must be letters: {unit!r}")
            merged[unit.lower()] = component
        self.units = merged

        alternatives = "|".join(
            re.escape(unit) for unit in sorted(merged, key=len, reverse=True)
        )
        self._pair = re.compile(rf"([0-9]+)({alternatives})")

    def parse(self, text: str) -> Duration:
        """Parse duration text.

        Raises:
            DurationError: If the text is empty, does not match the grammar or
                is too long to add to the current time
        """
        value = text.strip().lower()
        if not value:
            raise DurationError("empty duration")
        if value == "0":
            return Duration()

        totals = dict.fromkeys(_COMPONENTS, 0)
        pos = 0
        while pos < len(value):
            match = self._pair.match(value, pos)
            if match is None:
                raise DurationError(f"invalid duration {text!r} at position {pos}")
            count, unit = match.groups()
            try:
                totals[self.units[unit]] += int(count)
            except ValueError as e:
                raise DurationError(f"duration out of range: {text!r}") from e
            pos = match.end()

        duration = Duration(**totals)
        # must be usable as an expiry from now
        try:
            duration.until()
        except (OverflowError, ValueError) as e:
            raise DurationError(f"duration out of range: {text!r}") from e
        return duration


def parse_duration(text: str) -> Duration:
    """Parse `text` with the default units."""
    return _default_parser.parse(text)


_default_parser = DurationParser()
