"""Input rows and per-release rollups used by the advisor."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date


def growth_rate(current: float, prior: float) -> float:
    """Week-over-week growth of ``current`` against ``prior``.

    A zero prior counts as 100% growth when there is current activity,
    otherwise as no growth at all.
    """
    if prior > 0:
        return (current - prior) / prior
    return 1.0 if current > 0 else 0.0


@dataclass(frozen=True, slots=True)
class DailyMetricRow:
    """One work's performance on one platform on one calendar day."""

    work_id: str | None
    analytics_date: date | str | None
    plays: int = 0
    revenue: float = 0.0
    listeners: int = 0
    skip_rate: float | None = None
    completion_rate: float | None = None
    platform_name: str | None = None


@dataclass(frozen=True, slots=True)
class WorkRecord:
    """A released work owned by the caller."""

    work_id: str
    title: str
    genre: str | None = None


@dataclass(frozen=True, slots=True)
class PlatformTotals:
    """Accumulated totals for a single distribution platform."""

    name: str
    plays: int
    revenue: float
    avg_skip_rate: float | None = None


@dataclass(frozen=True, slots=True)
class ReleaseSummary:
    """Rolling performance summary for one work."""

    work_id: str
    title: str
    genre: str | None
    total_plays: int = 0
    total_revenue: float = 0.0
    total_listeners: int = 0
    current_plays: int = 0
    current_revenue: float = 0.0
    current_listeners: int = 0
    prior_plays: int = 0
    prior_revenue: float = 0.0
    avg_skip_rate: float | None = None
    avg_completion_rate: float | None = None
    leading_platform: PlatformTotals | None = None
    latest_date: date | None = None
    rows_observed: int = 0

    @property
    def growth_rate(self) -> float:
        return growth_rate(self.current_plays, self.prior_plays)
