"""Maintenance window models.

Maintenance windows describe when disruptive maintenance may run. Two
windows exist per cluster: one for Kubernetes auto-upgrades and one for
node OS patching. They share a model; the auto-upgrade window does not
accept Daily frequency.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MaintenanceFrequency(str, Enum):
    """Recurrence frequency of a maintenance window."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    ABSOLUTE_MONTHLY = "AbsoluteMonthly"
    RELATIVE_MONTHLY = "RelativeMonthly"


class DayOfWeek(str, Enum):
    """Day of week for weekly and relative-monthly schedules."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class WeekIndex(str, Enum):
    """Week of the month for relative-monthly schedules."""

    FIRST = "First"
    SECOND = "Second"
    THIRD = "Third"
    FOURTH = "Fourth"
    LAST = "Last"


AUTO_UPGRADE_FREQUENCIES: tuple[MaintenanceFrequency, ...] = (
    MaintenanceFrequency.WEEKLY,
    MaintenanceFrequency.ABSOLUTE_MONTHLY,
    MaintenanceFrequency.RELATIVE_MONTHLY,
)
"""Frequencies accepted by the auto-upgrade window (no Daily)."""

NODE_OS_FREQUENCIES: tuple[MaintenanceFrequency, ...] = tuple(MaintenanceFrequency)
"""Frequencies accepted by the node OS window."""


class BlackoutPeriod(BaseModel):
    """A time range during which maintenance must not run.

    Attributes:
        start: Start of the range (timezone-aware).
        end: End of the range (timezone-aware), strictly after start.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    start: datetime = Field(..., description="Blackout start (with UTC offset)")
    end: datetime = Field(..., description="Blackout end (with UTC offset)")


class MaintenanceWindow(BaseModel):
    """A recurring maintenance schedule.

    Attributes:
        frequency: Recurrence frequency (None when unspecified).
        interval: Recurrence interval in frequency units.
        duration: Window length in hours (4-24).
        day_of_month: Day for AbsoluteMonthly schedules.
        day_of_week: Day for Weekly and RelativeMonthly schedules.
        start_date: First date the schedule becomes effective.
        start_time: Window start time (HH:mm).
        utc_offset: Offset applied to start_time (+HH:MM / -HH:MM).
        week_index: Week for RelativeMonthly schedules.
        blackout_periods: Blackout ranges, sorted by start then end.

    Example:
        >>> window = MaintenanceWindow(
        ...     frequency=MaintenanceFrequency.WEEKLY,
        ...     day_of_week=DayOfWeek.SUNDAY,
        ...     start_time="02:00",
        ... )
        >>> window.duration
        4
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    frequency: MaintenanceFrequency | None = Field(default=None, description="Frequency")
    interval: int = Field(default=1, description="Recurrence interval")
    duration: int = Field(default=4, description="Window length in hours")
    day_of_month: int | None = Field(default=None, description="Day of month")
    day_of_week: DayOfWeek | None = Field(default=None, description="Day of week")
    start_date: date | None = Field(default=None, description="Effective start date")
    start_time: str | None = Field(default=None, description="Start time (HH:mm)")
    utc_offset: str | None = Field(default=None, description="UTC offset (+HH:MM)")
    week_index: WeekIndex | None = Field(default=None, description="Week of month")
    blackout_periods: tuple[BlackoutPeriod, ...] = Field(
        default=(),
        description="Blackout periods",
    )
