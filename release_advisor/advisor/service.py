"""Advisor orchestration: fetch, aggregate, and generate insights for an owner."""
import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from release_advisor.advisor.aggregator import calculate_release_summaries
from release_advisor.advisor.insights import generate_insights
from release_advisor.advisor.schemas import AdvisorInsights
from release_advisor.advisor.source import AdvisorDataSource
from release_advisor.advisor.types import ReleaseSummary
from release_advisor.config import Settings, get_settings

logger = logging.getLogger(__name__)


def lookback_start(now: datetime, lookback_days: int) -> date:
    """First calendar day of an inclusive lookback window ending today."""
    return now.date() - timedelta(days=max(lookback_days, 1) - 1)


async def generate_release_summaries(
    owner_id: str,
    source: AdvisorDataSource,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> list[ReleaseSummary]:
    """Fetch an owner's releases and recent metrics and roll them up per release.

    Both reads are issued concurrently. Fetch errors propagate to the caller.
    """
    settings = settings or get_settings()
    now = now or datetime.now(timezone.utc)
    since = lookback_start(now, settings.lookback_days)

    works, rows = await asyncio.gather(
        source.fetch_works(owner_id),
        source.fetch_daily_metrics(owner_id, since),
    )
    logger.info(f"Loaded {len(works)} releases and {len(rows)} metric rows for owner {owner_id} since {since}")

    return calculate_release_summaries(works, rows)


async def generate_advisor_insights(
    owner_id: str,
    source: AdvisorDataSource,
    settings: Optional[Settings] = None,
    now: Optional[datetime] = None,
) -> AdvisorInsights:
    """Build the advisor payload (summary + ranked suggestions) for an owner."""
    settings = settings or get_settings()
    summaries = await generate_release_summaries(owner_id, source, settings=settings, now=now)

    insights = generate_insights(
        summaries,
        momentum_threshold=settings.momentum_threshold,
        decline_threshold=settings.decline_threshold,
        skip_rate_threshold=settings.skip_rate_threshold,
    )
    logger.info(f"Generated {len(insights.suggestions)} suggestions for owner {owner_id}")
    return insights
