"""Rule-based suggestions and dashboard summary built from release rollups.

Rules run in a fixed order (momentum, retention, engagement, platform
leadership) and each emits at most one suggestion. Candidate selection uses
explicit sort keys so identical input always yields identical output.
"""
import logging
import re
from datetime import datetime, time, timezone
from typing import Optional, Sequence

from release_advisor.advisor.schemas import (
    AdvisorInsights,
    AdvisorSuggestion,
    AdvisorSummary,
    MomentumTrack,
    SuggestionAction,
    SuggestionCategory,
    SuggestionMetric,
    Trend,
)
from release_advisor.advisor.types import PlatformTotals, ReleaseSummary

logger = logging.getLogger(__name__)

MOMENTUM_THRESHOLD = 0.10
DECLINE_THRESHOLD = 0.10
SKIP_RATE_THRESHOLD = 0.35
HEALTHY_SKIP_RATE = 0.25


def first_release_suggestion() -> AdvisorSuggestion:
    """Setup suggestion for an owner with no releases."""
    return AdvisorSuggestion(
        id="setup-first-release",
        title="Ship your first release",
        message=(
            "Publish a track to unlock tailored insights. Once we detect analytics "
            "activity we can guide your promotion strategy."
        ),
        category=SuggestionCategory.SETUP,
        metrics=[SuggestionMetric(label="Releases with data", value="0")],
        actions=[
            SuggestionAction(label="Open Music Hub", href="/music"),
            SuggestionAction(label="Plan a release", href="/release-manager"),
        ],
    )


def sync_analytics_suggestion() -> AdvisorSuggestion:
    """Setup suggestion for releases with no analytics rows."""
    return AdvisorSuggestion(
        id="sync-analytics",
        title="Sync recent streaming data",
        message=(
            "We didn't detect fresh analytics for your releases. Trigger a metrics "
            "sync to power real-time recommendations."
        ),
        category=SuggestionCategory.SETUP,
        metrics=[SuggestionMetric(label="Last sync", value="No recent data")],
        actions=[
            SuggestionAction(label="Open streaming dashboard", href="/streaming-platforms"),
            SuggestionAction(label="Plan promo", href="/pr"),
        ],
    )


def format_number(value: float) -> str:
    """Whole number with thousands separators."""
    return f"{round(value):,}"


def format_percent(value: float) -> str:
    """Ratio as a whole percentage, e.g. 0.4 -> '40%'."""
    return f"{value * 100:.0f}%"


def _platform_slug(name: str) -> str:
    return re.sub(r"\s+", "-", name.lower())


# ============================================================
# Candidate selection
# ============================================================

def select_momentum_candidate(summaries: Sequence[ReleaseSummary]) -> Optional[ReleaseSummary]:
    """Release with current plays and the highest growth rate."""
    candidates = [s for s in summaries if s.current_plays > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda s: (-s.growth_rate, s.work_id))


def select_decline_candidate(summaries: Sequence[ReleaseSummary]) -> Optional[ReleaseSummary]:
    """Release with prior plays and the lowest growth rate."""
    candidates = [s for s in summaries if s.prior_plays > 0]
    if not candidates:
        return None
    return min(candidates, key=lambda s: (s.growth_rate, s.work_id))


def select_skip_risk_candidate(
    summaries: Sequence[ReleaseSummary],
    threshold: float = SKIP_RATE_THRESHOLD,
) -> Optional[ReleaseSummary]:
    """Release with the highest average skip rate at or above threshold."""
    candidates = [
        s for s in summaries
        if s.avg_skip_rate is not None and s.avg_skip_rate >= threshold
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda s: (-s.avg_skip_rate, s.work_id))


def select_leading_platform(summaries: Sequence[ReleaseSummary]) -> Optional[PlatformTotals]:
    """Combine each release's leading platform and return the one with most plays."""
    totals: dict[str, dict] = {}
    for summary in summaries:
        platform = summary.leading_platform
        if platform is None:
            continue
        entry = totals.setdefault(platform.name, {"plays": 0, "revenue": 0.0, "skip_rates": []})
        entry["plays"] += platform.plays
        entry["revenue"] += platform.revenue
        if platform.avg_skip_rate is not None:
            entry["skip_rates"].append(platform.avg_skip_rate)

    if not totals:
        return None

    name, entry = min(totals.items(), key=lambda item: (-item[1]["plays"], item[0]))
    skip_rates = entry["skip_rates"]
    return PlatformTotals(
        name=name,
        plays=entry["plays"],
        revenue=entry["revenue"],
        avg_skip_rate=sum(skip_rates) / len(skip_rates) if skip_rates else None,
    )


# ============================================================
# Suggestion builders
# ============================================================

def _momentum_suggestion(summary: ReleaseSummary) -> AdvisorSuggestion:
    metrics = [
        SuggestionMetric(label="7-day streams", value=format_number(summary.current_plays), trend=Trend.UP),
        SuggestionMetric(label="Week-over-week", value=format_percent(summary.growth_rate), trend=Trend.UP),
    ]
    if summary.leading_platform:
        share = summary.leading_platform.plays / max(summary.total_plays, 1)
        metrics.append(SuggestionMetric(
            label=f"{summary.leading_platform.name} share",
            value=format_percent(share),
            trend=Trend.NEUTRAL,
        ))

    return AdvisorSuggestion(
        id=f"momentum-{summary.work_id}",
        title=f"Momentum spike: {summary.title}",
        message=(
            "Your streaming momentum is accelerating. Double down with a coordinated "
            "push while the track is trending upward."
        ),
        category=SuggestionCategory.MOMENTUM,
        metrics=metrics,
        actions=[
            SuggestionAction(label="Open streaming dashboard", href="/streaming-platforms"),
            SuggestionAction(label="Plan a hype post", href="/social"),
        ],
    )


def _retention_suggestion(summary: ReleaseSummary) -> AdvisorSuggestion:
    return AdvisorSuggestion(
        id=f"retention-{summary.work_id}",
        title=f"Regain listeners for {summary.title}",
        message=(
            "Streaming velocity dipped compared to last week. Re-engage fans with a "
            "live moment or exclusive drop to rebound quickly."
        ),
        category=SuggestionCategory.RETENTION,
        metrics=[
            SuggestionMetric(label="7-day streams", value=format_number(summary.current_plays), trend=Trend.DOWN),
            SuggestionMetric(label="Change vs. last week", value=format_percent(summary.growth_rate), trend=Trend.DOWN),
        ],
        actions=[
            SuggestionAction(label="Book a spotlight gig", href="/gigs"),
            SuggestionAction(label="Run a fan campaign", href="/pr"),
        ],
    )


def _engagement_suggestion(summary: ReleaseSummary) -> AdvisorSuggestion:
    metrics = [
        SuggestionMetric(label="Average skip rate", value=format_percent(summary.avg_skip_rate), trend=Trend.DOWN),
    ]
    if summary.avg_completion_rate is not None:
        metrics.append(SuggestionMetric(
            label="Completion",
            value=format_percent(summary.avg_completion_rate),
            trend=Trend.NEUTRAL,
        ))

    return AdvisorSuggestion(
        id=f"skip-{summary.work_id}",
        title=f"Tackle skip rate on {summary.title}",
        message=(
            "Listeners are dropping early. Tighten the intro, update the arrangement, "
            "or tease a new version to boost completion."
        ),
        category=SuggestionCategory.ENGAGEMENT,
        metrics=metrics,
        actions=[
            SuggestionAction(label="Open recording studio", href="/recording-studio"),
            SuggestionAction(label="Workshop songwriting", href="/songwriting"),
        ],
    )


def _platform_suggestion(platform: PlatformTotals) -> AdvisorSuggestion:
    metrics = [
        SuggestionMetric(label="Platform streams", value=format_number(platform.plays), trend=Trend.UP),
    ]
    if platform.avg_skip_rate is not None:
        metrics.append(SuggestionMetric(
            label="Skip rate",
            value=format_percent(platform.avg_skip_rate),
            trend=Trend.UP if platform.avg_skip_rate < HEALTHY_SKIP_RATE else Trend.NEUTRAL,
        ))

    return AdvisorSuggestion(
        id=f"platform-{_platform_slug(platform.name)}",
        title=f"{platform.name} is your conversion engine",
        message=(
            "This platform is carrying the release cycle. Use platform-specific promos "
            "and pinned content to amplify the streak."
        ),
        category=SuggestionCategory.MONETIZATION,
        metrics=metrics,
        actions=[
            SuggestionAction(label="Optimize platform strategy", href="/streaming-platforms"),
            SuggestionAction(label="Sync social spotlight", href="/social"),
        ],
    )


# ============================================================
# Entry points
# ============================================================

def build_suggestions(
    summaries: Sequence[ReleaseSummary],
    momentum_candidate: Optional[ReleaseSummary] = None,
    momentum_threshold: float = MOMENTUM_THRESHOLD,
    decline_threshold: float = DECLINE_THRESHOLD,
    skip_rate_threshold: float = SKIP_RATE_THRESHOLD,
) -> list[AdvisorSuggestion]:
    """Run the detection rules over releases that have any lifetime plays.

    ``momentum_candidate`` lets the caller share a ranking it already computed;
    it is derived from ``summaries`` when omitted.
    """
    with_data = [s for s in summaries if s.total_plays > 0]
    if not with_data:
        return []

    suggestions: list[AdvisorSuggestion] = []

    if momentum_candidate is None:
        momentum_candidate = select_momentum_candidate(with_data)
    if momentum_candidate and momentum_candidate.growth_rate >= momentum_threshold:
        suggestions.append(_momentum_suggestion(momentum_candidate))

    declining = select_decline_candidate(with_data)
    if declining and declining.growth_rate <= -decline_threshold:
        suggestions.append(_retention_suggestion(declining))

    skip_risk = select_skip_risk_candidate(with_data, skip_rate_threshold)
    if skip_risk:
        suggestions.append(_engagement_suggestion(skip_risk))

    platform = select_leading_platform(with_data)
    if platform:
        suggestions.append(_platform_suggestion(platform))

    return suggestions


def build_summary(
    summaries: Sequence[ReleaseSummary],
    momentum_candidate: Optional[ReleaseSummary] = None,
) -> AdvisorSummary:
    """Sum current-window totals across every release."""
    latest_dates = [s.latest_date for s in summaries if s.latest_date is not None]
    updated_at = None
    if latest_dates:
        updated_at = datetime.combine(max(latest_dates), time.min, tzinfo=timezone.utc)

    top_track = None
    if momentum_candidate:
        top_track = MomentumTrack(
            title=momentum_candidate.title,
            growth_rate=momentum_candidate.growth_rate,
            current_plays=momentum_candidate.current_plays,
        )

    return AdvisorSummary(
        total_plays_7_days=sum(s.current_plays for s in summaries),
        total_revenue_7_days=sum(s.current_revenue for s in summaries),
        listener_reach_7_days=sum(s.current_listeners for s in summaries),
        updated_at=updated_at,
        top_momentum_track=top_track,
    )


def generate_insights(
    summaries: Sequence[ReleaseSummary],
    momentum_threshold: float = MOMENTUM_THRESHOLD,
    decline_threshold: float = DECLINE_THRESHOLD,
    skip_rate_threshold: float = SKIP_RATE_THRESHOLD,
) -> AdvisorInsights:
    """Turn release rollups into the dashboard summary and ranked suggestions.

    Never raises on empty input: no releases yields the first-release setup
    suggestion, releases without any analytics rows yield the sync suggestion.
    """
    if not summaries:
        return AdvisorInsights(summary=AdvisorSummary(), suggestions=[first_release_suggestion()])

    if all(s.rows_observed == 0 for s in summaries):
        return AdvisorInsights(summary=AdvisorSummary(), suggestions=[sync_analytics_suggestion()])

    momentum_candidate = select_momentum_candidate(summaries)
    suggestions = build_suggestions(
        summaries,
        momentum_candidate=momentum_candidate,
        momentum_threshold=momentum_threshold,
        decline_threshold=decline_threshold,
        skip_rate_threshold=skip_rate_threshold,
    )
    logger.debug(f"Generated {len(suggestions)} suggestions from {len(summaries)} releases")

    return AdvisorInsights(
        summary=build_summary(summaries, momentum_candidate),
        suggestions=suggestions,
    )
