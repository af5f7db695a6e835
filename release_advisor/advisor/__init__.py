"""Release performance advisor."""
from release_advisor.advisor.aggregator import calculate_release_summaries, summarize_release
from release_advisor.advisor.grouping import group_rows_by_work
from release_advisor.advisor.insights import generate_insights
from release_advisor.advisor.schemas import AdvisorInsights, AdvisorSuggestion, AdvisorSummary
from release_advisor.advisor.service import generate_advisor_insights, generate_release_summaries
from release_advisor.advisor.source import AdvisorDataError, AdvisorDataSource, SqlAdvisorDataSource
from release_advisor.advisor.types import DailyMetricRow, ReleaseSummary, WorkRecord

__all__ = [
    "calculate_release_summaries",
    "summarize_release",
    "group_rows_by_work",
    "generate_insights",
    "AdvisorInsights",
    "AdvisorSuggestion",
    "AdvisorSummary",
    "generate_advisor_insights",
    "generate_release_summaries",
    "AdvisorDataError",
    "AdvisorDataSource",
    "SqlAdvisorDataSource",
    "DailyMetricRow",
    "ReleaseSummary",
    "WorkRecord",
]
