"""Release Performance Advisor service."""
