"""Per-release rolling aggregation over sorted daily metric rows."""
from datetime import timedelta
from typing import Iterable, Optional, Sequence

from release_advisor.advisor.grouping import group_rows_by_work, parse_metric_date
from release_advisor.advisor.types import (
    DailyMetricRow,
    PlatformTotals,
    ReleaseSummary,
    WorkRecord,
)

UNKNOWN_PLATFORM = "Unknown platform"
WINDOW_DAYS = 7


def _mean(values: list[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def _leading_platform(platforms: dict[str, dict]) -> Optional[PlatformTotals]:
    """Pick the platform with the most plays, ties broken by name."""
    if not platforms:
        return None
    name, totals = min(
        platforms.items(),
        key=lambda item: (-item[1]["plays"], item[0]),
    )
    return PlatformTotals(
        name=name,
        plays=totals["plays"],
        revenue=totals["revenue"],
        avg_skip_rate=_mean(totals["skip_rates"]),
    )


def summarize_release(work: WorkRecord, rows: Sequence[DailyMetricRow]) -> ReleaseSummary:
    """Roll one work's chronologically sorted rows into a ReleaseSummary.

    The current window is the 7 days ending on the latest observed date and
    the prior window is the 7 days before that. Rows with an unparseable date
    still count toward lifetime totals.
    """
    if not rows:
        return ReleaseSummary(work_id=work.work_id, title=work.title, genre=work.genre)

    latest_date = parse_metric_date(rows[-1].analytics_date)
    current_start = prior_start = prior_end = None
    if latest_date:
        current_start = latest_date - timedelta(days=WINDOW_DAYS - 1)
        prior_end = current_start - timedelta(days=1)
        prior_start = current_start - timedelta(days=WINDOW_DAYS)

    total_plays = total_listeners = 0
    total_revenue = 0.0
    current_plays = current_listeners = 0
    current_revenue = 0.0
    prior_plays = 0
    prior_revenue = 0.0
    skip_rates: list[float] = []
    completion_rates: list[float] = []
    platforms: dict[str, dict] = {}

    for row in rows:
        plays = row.plays or 0
        revenue = row.revenue or 0.0
        listeners = row.listeners or 0

        total_plays += plays
        total_revenue += revenue
        total_listeners += listeners

        row_date = parse_metric_date(row.analytics_date)
        if row_date and current_start and current_start <= row_date <= latest_date:
            current_plays += plays
            current_revenue += revenue
            current_listeners += listeners
        elif row_date and prior_start and prior_start <= row_date <= prior_end:
            prior_plays += plays
            prior_revenue += revenue

        if row.skip_rate is not None:
            skip_rates.append(row.skip_rate)
        if row.completion_rate is not None:
            completion_rates.append(row.completion_rate)

        platform = platforms.setdefault(
            row.platform_name or UNKNOWN_PLATFORM,
            {"plays": 0, "revenue": 0.0, "skip_rates": []},
        )
        platform["plays"] += plays
        platform["revenue"] += revenue
        if row.skip_rate is not None:
            platform["skip_rates"].append(row.skip_rate)

    return ReleaseSummary(
        work_id=work.work_id,
        title=work.title,
        genre=work.genre,
        total_plays=total_plays,
        total_revenue=total_revenue,
        total_listeners=total_listeners,
        current_plays=current_plays,
        current_revenue=current_revenue,
        current_listeners=current_listeners,
        prior_plays=prior_plays,
        prior_revenue=prior_revenue,
        avg_skip_rate=_mean(skip_rates),
        avg_completion_rate=_mean(completion_rates),
        leading_platform=_leading_platform(platforms),
        latest_date=latest_date,
        rows_observed=len(rows),
    )


def calculate_release_summaries(
    works: Iterable[WorkRecord],
    rows: Iterable[DailyMetricRow],
) -> list[ReleaseSummary]:
    """Build one ReleaseSummary per work, in the order the works were given."""
    grouped = group_rows_by_work(rows)
    return [summarize_release(work, grouped.get(work.work_id, ())) for work in works]
