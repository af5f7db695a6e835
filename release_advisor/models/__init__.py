"""SQLAlchemy models."""
from release_advisor.models.release import Song, SongRelease
from release_advisor.models.streaming import StreamingAnalyticsDaily

__all__ = [
    "Song",
    "SongRelease",
    "StreamingAnalyticsDaily",
]
