"""Song and release models."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from release_advisor.database import Base


class Song(Base):
    """A written and recorded song."""

    __tablename__ = "songs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255))
    genre = Column(String(100))
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    # Relationships
    releases = relationship("SongRelease", back_populates="song")


class SongRelease(Base):
    """A song released to streaming platforms by a user."""

    __tablename__ = "song_releases"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    song_id = Column(UUID(as_uuid=True), ForeignKey("songs.id", ondelete="CASCADE"))
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)

    # Relationships
    song = relationship("Song", back_populates="releases")
    daily_analytics = relationship(
        "StreamingAnalyticsDaily", back_populates="release", cascade="all, delete-orphan"
    )
