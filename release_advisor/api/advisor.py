"""Release advisor API endpoints."""
import logging
import uuid
from datetime import date
from typing import Optional, Union

from cachetools import TTLCache
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from release_advisor.advisor import (
    AdvisorDataError,
    AdvisorDataSource,
    AdvisorInsights,
    SqlAdvisorDataSource,
    generate_advisor_insights,
    generate_release_summaries,
)
from release_advisor.api.auth import verify_api_key
from release_advisor.config import get_settings
from release_advisor.database import async_session_maker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/advisor", tags=["advisor"])

settings = get_settings()

# Computed payloads per owner
insights_cache: TTLCache = TTLCache(
    maxsize=max(settings.insights_cache_size, 1),
    ttl=max(settings.insights_cache_ttl_seconds, 1),
)

ACTIVE_HEADLINE = "Here's what I'm seeing in your numbers right now."
QUIET_HEADLINE = "No red alerts in the data. Stay consistent and check back after your next update."


class InsightsResponse(AdvisorInsights):
    """Advisor payload with a one-line headline for the chat view."""
    headline: str


class PlatformResponse(BaseModel):
    """Leading platform for a release."""
    name: str
    plays: Union[int, float]
    revenue: float
    avg_skip_rate: Optional[float]


class ReleaseSummaryResponse(BaseModel):
    """Rolling summary for one release."""
    release_id: str
    title: str
    genre: Optional[str]
    total_plays: Union[int, float]
    total_revenue: float
    total_listeners: Union[int, float]
    current_plays: Union[int, float]
    current_revenue: float
    current_listeners: Union[int, float]
    prior_plays: Union[int, float]
    prior_revenue: float
    growth_rate: float
    avg_skip_rate: Optional[float]
    avg_completion_rate: Optional[float]
    leading_platform: Optional[PlatformResponse]
    latest_date: Optional[date]


def get_data_source() -> AdvisorDataSource:
    """Dependency for the advisor's data source."""
    return SqlAdvisorDataSource(async_session_maker)


def _headline(insights: AdvisorInsights) -> str:
    if insights.suggestions:
        return ACTIVE_HEADLINE
    return QUIET_HEADLINE


@router.get("/{owner_id}/insights", response_model=InsightsResponse)
async def get_insights(
    owner_id: uuid.UUID,
    refresh: bool = Query(False, description="Recompute instead of serving a cached payload"),
    source: AdvisorDataSource = Depends(get_data_source),
    _: str = Depends(verify_api_key),
):
    """Get the performance summary and ranked suggestions for an owner."""
    cache_key = str(owner_id)
    caching = settings.insights_cache_ttl_seconds > 0

    if caching and not refresh and cache_key in insights_cache:
        logger.debug(f"Cache hit for advisor insights owner={cache_key}")
        return insights_cache[cache_key]

    try:
        insights = await generate_advisor_insights(cache_key, source, settings=settings)
    except AdvisorDataError as e:
        raise HTTPException(status_code=503, detail=str(e))

    response = InsightsResponse(
        summary=insights.summary,
        suggestions=insights.suggestions,
        headline=_headline(insights),
    )
    if caching:
        insights_cache[cache_key] = response

    return response


@router.get("/{owner_id}/releases", response_model=list[ReleaseSummaryResponse])
async def get_release_summaries(
    owner_id: uuid.UUID,
    source: AdvisorDataSource = Depends(get_data_source),
    _: str = Depends(verify_api_key),
):
    """Get the rolling summary for each of an owner's active releases."""
    try:
        summaries = await generate_release_summaries(str(owner_id), source, settings=settings)
    except AdvisorDataError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return [
        ReleaseSummaryResponse(
            release_id=s.work_id,
            title=s.title,
            genre=s.genre,
            total_plays=s.total_plays,
            total_revenue=s.total_revenue,
            total_listeners=s.total_listeners,
            current_plays=s.current_plays,
            current_revenue=s.current_revenue,
            current_listeners=s.current_listeners,
            prior_plays=s.prior_plays,
            prior_revenue=s.prior_revenue,
            growth_rate=s.growth_rate,
            avg_skip_rate=s.avg_skip_rate,
            avg_completion_rate=s.avg_completion_rate,
            leading_platform=PlatformResponse(
                name=s.leading_platform.name,
                plays=s.leading_platform.plays,
                revenue=s.leading_platform.revenue,
                avg_skip_rate=s.leading_platform.avg_skip_rate,
            ) if s.leading_platform else None,
            latest_date=s.latest_date,
        )
        for s in summaries
    ]
