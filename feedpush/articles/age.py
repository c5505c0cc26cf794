"""Elapsed-time breakdown attached to every article row.

An article's age is reported as a two-stage cascade: minutes roll over into
hours at 60, and hours roll over into days at 24. Units that were never
reached are absent (None) rather than zero, so ``{"minutes": 45}`` and
``{"hours": 0, "minutes": 45}`` stay distinguishable.
"""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class RelativeAge:
    minutes: int
    hours: int | None = None
    days: int | None = None

    def as_dict(self) -> dict[str, int]:
        """Only the units that are present."""
        out = {"minutes": self.minutes}
        if self.hours is not None:
            out["hours"] = self.hours
        if self.days is not None:
            out["days"] = self.days
        return out

    def as_response_fields(self) -> dict[str, int]:
        """Age under the diffMinutes/diffHours/diffDays keys clients read."""
        return {f"diff{unit.capitalize()}": value for unit, value in self.as_dict().items()}


def normalize_age(elapsed_minutes: int) -> RelativeAge:
    """Break a whole number of elapsed minutes into minutes/hours/days."""
    if elapsed_minutes < 0:
        raise ValueError(f"elapsed_minutes must be non-negative, got {elapsed_minutes}")

    if elapsed_minutes < 60:
        return RelativeAge(minutes=elapsed_minutes)

    hours, minutes = divmod(elapsed_minutes, 60)
    if hours < 24:
        return RelativeAge(minutes=minutes, hours=hours)

    days, hours = divmod(hours, 24)
    return RelativeAge(minutes=minutes, hours=hours, days=days)


def elapsed_minutes(created: datetime, now: datetime) -> int:
    """Whole minutes between `created` and `now`, floored and clamped at 0.

    Naive datetimes are treated as UTC (SQLite drops tzinfo on the way in).
    """
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max(int((now - created).total_seconds() // 60), 0)


def age_of(created: datetime, now: datetime) -> RelativeAge:
    return normalize_age(elapsed_minutes(created, now))
