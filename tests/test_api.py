"""API endpoint tests."""
import uuid

import pytest
from fastapi.testclient import TestClient

from conftest import FakeDataSource, daily_rows, split_week
from release_advisor.advisor.types import WorkRecord
from release_advisor.api.advisor import get_data_source, insights_cache
from release_advisor.main import app

OWNER_ID = str(uuid.UUID("6f1c2d3e-4a5b-4c6d-8e7f-90a1b2c3d4e5"))
HEADERS = {"X-API-Key": "test-secret-key"}


@pytest.fixture
def source():
    works = [WorkRecord(work_id="rel-1", title="Neon", genre="Synthwave")]
    rows = daily_rows("rel-1", split_week(1000) + split_week(1100), skip_rate=0.2)
    return FakeDataSource(works=works, rows=rows, honor_since=False)


@pytest.fixture
def client(source):
    app.dependency_overrides[get_data_source] = lambda: source
    insights_cache.clear()
    yield TestClient(app)
    app.dependency_overrides.clear()
    insights_cache.clear()


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint should return 200 without auth."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuth:
    """Advisor endpoints require an API key."""

    def test_missing_key_returns_401(self, client):
        response = client.get(f"/api/v1/advisor/{OWNER_ID}/insights")

        assert response.status_code == 401

    def test_wrong_key_returns_403(self, client):
        response = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers={"X-API-Key": "nope"})

        assert response.status_code == 403


class TestInsightsEndpoint:
    """GET /advisor/{owner_id}/insights."""

    def test_returns_summary_and_suggestions(self, client):
        response = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["summary"]["total_plays_7_days"] == 1100
        assert body["summary"]["top_momentum_track"]["title"] == "Neon"
        assert body["suggestions"][0]["id"] == "momentum-rel-1"
        assert body["suggestions"][0]["category"] == "momentum"
        assert body["suggestions"][0]["metrics"][0] == {"label": "7-day streams", "value": "1,100", "trend": "up"}
        assert body["headline"] == "Here's what I'm seeing in your numbers right now."

    def test_setup_payload_keeps_active_headline(self, client, source):
        source.works = []

        body = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers=HEADERS).json()

        assert [s["category"] for s in body["suggestions"]] == ["setup"]
        assert body["summary"]["updated_at"] is None
        assert body["headline"] == "Here's what I'm seeing in your numbers right now."

    def test_empty_suggestion_list_uses_quiet_headline(self, client, source):
        source.rows = daily_rows("rel-1", [0] * 7)

        body = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers=HEADERS).json()

        assert body["suggestions"] == []
        assert body["headline"].startswith("No red alerts")

    def test_cached_until_refresh(self, client, source):
        first = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers=HEADERS).json()
        source.works = []

        cached = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers=HEADERS).json()
        refreshed = client.get(
            f"/api/v1/advisor/{OWNER_ID}/insights", params={"refresh": "true"}, headers=HEADERS
        ).json()

        assert cached == first
        assert refreshed["suggestions"][0]["id"] == "setup-first-release"

    def test_fetch_failure_returns_503(self, client, source):
        source.fail_on = "metrics"

        response = client.get(f"/api/v1/advisor/{OWNER_ID}/insights", headers=HEADERS)

        assert response.status_code == 503
        assert response.json()["detail"] == "Failed to load analytics"

    def test_invalid_owner_id_returns_422(self, client):
        response = client.get("/api/v1/advisor/not-a-uuid/insights", headers=HEADERS)

        assert response.status_code == 422


class TestReleasesEndpoint:
    """GET /advisor/{owner_id}/releases."""

    def test_returns_release_rollups(self, client):
        response = client.get(f"/api/v1/advisor/{OWNER_ID}/releases", headers=HEADERS)

        assert response.status_code == 200
        releases = response.json()
        assert len(releases) == 1
        release = releases[0]
        assert release["release_id"] == "rel-1"
        assert release["current_plays"] == 1100
        assert release["prior_plays"] == 1000
        assert release["growth_rate"] == pytest.approx(0.1)
        assert release["avg_skip_rate"] == pytest.approx(0.2)
        assert release["avg_completion_rate"] is None
        assert release["leading_platform"]["name"] == "Spotify"
        assert release["latest_date"] == "2025-03-14"

    def test_fetch_failure_returns_503(self, client, source):
        source.fail_on = "works"

        response = client.get(f"/api/v1/advisor/{OWNER_ID}/releases", headers=HEADERS)

        assert response.status_code == 503
        assert response.json()["detail"] == "Failed to load releases"
