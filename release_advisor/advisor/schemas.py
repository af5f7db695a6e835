"""Advisor output models."""
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SuggestionCategory(str, Enum):
    """Groups suggestions for ordering and display."""
    MOMENTUM = "momentum"
    RETENTION = "retention"
    ENGAGEMENT = "engagement"
    MONETIZATION = "monetization"
    SETUP = "setup"


class Trend(str, Enum):
    """Direction a metric is moving."""
    UP = "up"
    DOWN = "down"
    NEUTRAL = "neutral"


class SuggestionMetric(BaseModel):
    """A labeled, pre-formatted number shown on a suggestion card."""
    label: str
    value: str
    trend: Trend = Trend.NEUTRAL

    model_config = ConfigDict(frozen=True)


class SuggestionAction(BaseModel):
    """A follow-up the owner can take; href is opaque to the advisor."""
    label: str
    href: str

    model_config = ConfigDict(frozen=True)


class AdvisorSuggestion(BaseModel):
    """One ranked, user-facing recommendation."""
    id: str = Field(..., description="Stable id built from the rule and its subject")
    title: str
    message: str
    category: SuggestionCategory
    metrics: list[SuggestionMetric] = Field(default_factory=list)
    actions: list[SuggestionAction] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class MomentumTrack(BaseModel):
    """The release with the strongest week-over-week lift."""
    title: str
    growth_rate: float
    current_plays: Union[int, float]


class AdvisorSummary(BaseModel):
    """Top-line numbers for the current 7-day window."""
    total_plays_7_days: Union[int, float] = 0
    total_revenue_7_days: float = 0.0
    listener_reach_7_days: Union[int, float] = 0
    updated_at: Optional[datetime] = None
    top_momentum_track: Optional[MomentumTrack] = None


class AdvisorInsights(BaseModel):
    """Summary plus the ordered suggestion list."""
    summary: AdvisorSummary
    suggestions: list[AdvisorSuggestion]
