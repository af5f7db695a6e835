"""API routes."""
from release_advisor.api.advisor import router as advisor_router

__all__ = [
    "advisor_router",
]
