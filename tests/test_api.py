"""
Tests for the pattern API.

Tests REST endpoints and Pydantic schemas.
"""

from __future__ import annotations

import json

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from pydantic import ValidationError

from usagecontrol import __version__
from usagecontrol.api import PatternRequest, PatternResponse, create_app
from usagecontrol.policy.engine import example_document
from usagecontrol.policy.models import Pattern


# ============================================================================
# Test Fixtures
# ============================================================================


@pytest.fixture
def test_app():
    """Create test FastAPI application."""
    return create_app(debug=True, cors_origins=["http://localhost:3000"])


@pytest.fixture
def client(test_app):
    """Create test client."""
    return TestClient(test_app)


# ============================================================================
# Schema Tests
# ============================================================================


class TestSchemas:
    """Tests for request/response schemas."""

    def test_pattern_request_requires_text(self) -> None:
        """Test empty policy text is rejected."""
        with pytest.raises(ValidationError):
            PatternRequest(policy="")

    def test_pattern_response_serializes_name(self) -> None:
        """Test patterns serialize to their canonical name."""
        response = PatternResponse(pattern=Pattern.USAGE_LOGGING, recognized=True)
        assert response.model_dump(mode="json")["pattern"] == "USAGE_LOGGING"


# ============================================================================
# Endpoint Tests
# ============================================================================


class TestHealthEndpoint:
    """Tests for health check."""

    def test_health(self, client: TestClient) -> None:
        """Test health endpoint."""
        response = client.get("/api/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
        assert data["uptime_seconds"] >= 0


class TestPolicyPatternEndpoint:
    """Tests for policy classification endpoint."""

    def test_classify(self, client: TestClient, n_times_document: dict) -> None:
        """Test classifying a valid policy."""
        response = client.post(
            "/api/examples/policy-pattern",
            json={"policy": json.dumps(n_times_document)},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"pattern": "N_TIMES_USAGE", "recognized": True}

    def test_not_recognized(self, client: TestClient) -> None:
        """Test unmatched policies return NOT_RECOGNIZED, not an error."""
        response = client.post(
            "/api/examples/policy-pattern",
            json={"policy": '{"@type": "ids:ContractOffer"}'},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"pattern": "NOT_RECOGNIZED", "recognized": False}

    def test_parse_error(self, client: TestClient) -> None:
        """Test malformed policy text returns 400."""
        response = client.post(
            "/api/examples/policy-pattern",
            json={"policy": '{"ids:permission": ['},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        data = response.json()
        assert data["error"] == "Bad Request"
        assert "Invalid policy document" in data["detail"]

    def test_missing_policy(self, client: TestClient) -> None:
        """Test missing body field fails validation."""
        response = client.post("/api/examples/policy-pattern", json={})
        assert response.status_code == 422

    @pytest.mark.parametrize("pattern", Pattern.concrete())
    def test_classify_examples(self, client: TestClient, pattern: Pattern) -> None:
        """Test every example document classifies to its pattern."""
        response = client.post(
            "/api/examples/policy-pattern",
            json={"policy": example_document(pattern)},
        )
        assert response.json()["pattern"] == pattern.value


class TestUsagePolicyEndpoint:
    """Tests for example policy endpoint."""

    def test_example(self, client: TestClient) -> None:
        """Test fetching an example policy."""
        response = client.post(
            "/api/examples/usage-policy",
            params={"pattern": "USAGE_NOTIFICATION"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["@type"] == "ids:ContractOffer"
        duty = data["ids:permission"][0]["ids:postDuty"][0]
        assert duty["ids:action"] == [{"@id": "idsc:NOTIFY"}]

    def test_example_by_slug(self, client: TestClient) -> None:
        """Test slugs are accepted."""
        response = client.post(
            "/api/examples/usage-policy",
            params={"pattern": "prohibit-access"},
        )

        assert response.status_code == status.HTTP_200_OK
        assert "ids:prohibition" in response.json()

    def test_unknown_pattern(self, client: TestClient) -> None:
        """Test unknown pattern returns 400."""
        response = client.post(
            "/api/examples/usage-policy",
            params={"pattern": "USAGE_FOREVER"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {
            "error": "Bad Request",
            "detail": "Unknown pattern: USAGE_FOREVER",
        }

    def test_not_recognized_pattern(self, client: TestClient) -> None:
        """Test NOT_RECOGNIZED has no example."""
        response = client.post(
            "/api/examples/usage-policy",
            params={"pattern": "NOT_RECOGNIZED"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_missing_pattern(self, client: TestClient) -> None:
        """Test pattern parameter is required."""
        response = client.post("/api/examples/usage-policy")
        assert response.status_code == 422

    def test_round_trip_through_api(self, client: TestClient) -> None:
        """Test an example fetched from the API classifies back."""
        example = client.post(
            "/api/examples/usage-policy",
            params={"pattern": "USAGE_UNTIL_DELETION"},
        ).json()
        response = client.post(
            "/api/examples/policy-pattern",
            json={"policy": json.dumps(example)},
        )
        assert response.json()["pattern"] == "USAGE_UNTIL_DELETION"


class TestPatternListEndpoint:
    """Tests for the pattern catalog endpoint."""

    def test_list_patterns(self, client: TestClient) -> None:
        """Test listing concrete patterns."""
        response = client.get("/api/examples/patterns")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 8
        names = [item["name"] for item in data["items"]]
        assert "NOT_RECOGNIZED" not in names
        assert {"name": "N_TIMES_USAGE", "slug": "n-times-usage"} in data["items"]


class TestApplication:
    """Tests for application setup."""

    def test_openapi(self, client: TestClient) -> None:
        """Test OpenAPI schema is served under /api."""
        response = client.get("/api/openapi.json")

        assert response.status_code == status.HTTP_200_OK
        assert "/api/examples/policy-pattern" in response.json()["paths"]

    def test_cors_headers(self, client: TestClient) -> None:
        """Test CORS is applied for configured origins."""
        response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"

    def test_not_found_error_shape(self, client: TestClient) -> None:
        """Test routing errors use the error response body."""
        response = client.get("/api/missing")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Not Found", "detail": "Not Found"}

    def test_without_cors(self) -> None:
        """Test CORS can be disabled."""
        client = TestClient(create_app())
        response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})
        assert "access-control-allow-origin" not in response.headers
