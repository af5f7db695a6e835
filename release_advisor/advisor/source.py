"""Data sources that supply releases and their daily metric rows."""
import logging
import uuid
from datetime import date
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from release_advisor.advisor.types import DailyMetricRow, WorkRecord
from release_advisor.models import Song, SongRelease, StreamingAnalyticsDaily

logger = logging.getLogger(__name__)

UNTITLED_TRACK = "Untitled track"


class AdvisorDataError(Exception):
    """Raised when releases or analytics cannot be read."""


class AdvisorDataSource(Protocol):
    """Read access to an owner's active releases and recent daily metrics."""

    async def fetch_works(self, owner_id: str) -> list[WorkRecord]:
        ...

    async def fetch_daily_metrics(self, owner_id: str, since: date) -> list[DailyMetricRow]:
        ...


class SqlAdvisorDataSource:
    """Reads releases and analytics from the database.

    Each read opens its own session so both can run concurrently.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def fetch_works(self, owner_id: str) -> list[WorkRecord]:
        """Get the owner's active releases, oldest first."""
        try:
            async with self.session_maker() as session:
                result = await session.execute(
                    select(SongRelease.id, Song.title, Song.genre)
                    .outerjoin(Song, SongRelease.song_id == Song.id)
                    .where(SongRelease.user_id == uuid.UUID(owner_id))
                    .where(SongRelease.is_active == True)
                    .order_by(SongRelease.created_at.asc(), SongRelease.id.asc())
                )
                rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading releases for owner {owner_id}: {e}")
            raise AdvisorDataError("Failed to load releases") from e

        return [
            WorkRecord(
                work_id=str(row.id),
                title=row.title or UNTITLED_TRACK,
                genre=row.genre,
            )
            for row in rows
        ]

    async def fetch_daily_metrics(self, owner_id: str, since: date) -> list[DailyMetricRow]:
        """Get daily rows for the owner's active releases on or after ``since``."""
        try:
            async with self.session_maker() as session:
                result = await session.execute(
                    select(StreamingAnalyticsDaily)
                    .join(SongRelease, StreamingAnalyticsDaily.song_release_id == SongRelease.id)
                    .where(SongRelease.user_id == uuid.UUID(owner_id))
                    .where(SongRelease.is_active == True)
                    .where(StreamingAnalyticsDaily.analytics_date >= since)
                )
                records = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Error loading analytics for owner {owner_id}: {e}")
            raise AdvisorDataError("Failed to load analytics") from e

        return [
            DailyMetricRow(
                work_id=str(record.song_release_id) if record.song_release_id else None,
                analytics_date=record.analytics_date,
                plays=record.daily_streams or 0,
                revenue=record.daily_revenue or 0.0,
                listeners=record.unique_listeners or 0,
                skip_rate=record.skip_rate,
                completion_rate=record.completion_rate,
                platform_name=record.platform_name,
            )
            for record in records
        ]
