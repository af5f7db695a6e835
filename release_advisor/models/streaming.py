"""Streaming analytics models."""
import uuid
from sqlalchemy import Column, String, Integer, Float, Date, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from release_advisor.database import Base


class StreamingAnalyticsDaily(Base):
    """One release's performance on one platform for one day."""

    __tablename__ = "streaming_analytics_daily"
    __table_args__ = (
        UniqueConstraint(
            "song_release_id", "platform_name", "analytics_date",
            name="uq_streaming_analytics_day",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    song_release_id = Column(
        UUID(as_uuid=True), ForeignKey("song_releases.id", ondelete="CASCADE"), index=True
    )
    analytics_date = Column(Date, nullable=False, index=True)

    # Counters
    daily_streams = Column(Integer)
    daily_revenue = Column(Float)
    unique_listeners = Column(Integer)

    # Rates (0-1)
    skip_rate = Column(Float)
    completion_rate = Column(Float)

    platform_name = Column(String(100))

    # Relationships
    release = relationship("SongRelease", back_populates="daily_analytics")
