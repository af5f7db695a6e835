"""Group raw daily metric rows by the release they belong to."""
import logging
from collections import defaultdict
from datetime import date, datetime
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from release_advisor.advisor.types import DailyMetricRow

logger = logging.getLogger(__name__)


def parse_metric_date(value) -> Optional[date]:
    """Parse a row's calendar date, returning None when it is missing or malformed."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _chronological_key(row: DailyMetricRow) -> tuple[bool, date]:
    # Undated rows sort ahead of dated ones so the last row carries the latest date
    parsed = parse_metric_date(row.analytics_date)
    return (parsed is not None, parsed or date.min)


def group_rows_by_work(
    rows: Iterable[DailyMetricRow],
) -> Mapping[str, tuple[DailyMetricRow, ...]]:
    """Partition rows by work id, each group sorted ascending by date.

    Rows without a work reference are dropped. The returned mapping and its
    groups are read-only.
    """
    buckets: dict[str, list[DailyMetricRow]] = defaultdict(list)
    dropped = 0

    for row in rows:
        if not row.work_id:
            dropped += 1
            continue
        buckets[row.work_id].append(row)

    if dropped:
        logger.debug(f"Dropped {dropped} metric rows with no release reference")

    return MappingProxyType({
        work_id: tuple(sorted(group, key=_chronological_key))
        for work_id, group in buckets.items()
    })
