from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from lead_router.api.deps import get_routing_rule_repo, get_routing_service
from lead_router.core.exceptions import (
    AssigneeNotFoundError,
    LeadNotFoundError,
    MalformedConditionsError,
)
from lead_router.main import app

TENANT = {"X-Company-Id": "1"}


def _routed_lead(**overrides):
    data = dict(
        id=10,
        company_id=1,
        name="Aisha Khan",
        activity_source_id=2,
        property_type="apartment",
        interest_type="buy",
        min_price=None,
        max_price=None,
        status_id=None,
        assigned_to=7,
        assigned_user=SimpleNamespace(id=7, name="Omar", email="omar@example.com"),
    )
    data.update(overrides)
    return SimpleNamespace(**data)


def _override_service(route_lead: AsyncMock) -> MagicMock:
    service = MagicMock()
    service.route_lead = route_lead
    app.dependency_overrides[get_routing_service] = lambda: service
    return service


class TestCORSMiddleware:
    """Verify that CORS headers are present on responses."""

    @pytest.mark.asyncio
    async def test_cors_headers_on_preflight(self, async_client):
        response = await async_client.options(
            "/api/v1/health",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "GET",
            },
        )
        assert "access-control-allow-origin" in response.headers

    @pytest.mark.asyncio
    async def test_unknown_origin_is_not_echoed(self, async_client):
        response = await async_client.get(
            "/api/v1/health", headers={"Origin": "http://evil.example"}
        )
        assert response.status_code == 200
        assert "access-control-allow-origin" not in response.headers


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_returns_ok(self, async_client):
        response = await async_client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestRouteLeadEndpoint:
    """POST /api/v1/routing/leads/{lead_id}/route"""

    @pytest.mark.asyncio
    async def test_returns_routed_lead(self, async_client):
        service = _override_service(AsyncMock(return_value=_routed_lead()))

        response = await async_client.post(
            "/api/v1/routing/leads/10/route", headers=TENANT
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Lead routed successfully"
        assert body["data"]["assigned_to"] == 7
        assert body["data"]["assigned_user"]["name"] == "Omar"
        service.route_lead.assert_awaited_once_with(10, 1)

    @pytest.mark.asyncio
    async def test_unassigned_lead_is_still_200(self, async_client):
        _override_service(
            AsyncMock(return_value=_routed_lead(assigned_to=None, assigned_user=None))
        )

        response = await async_client.post(
            "/api/v1/routing/leads/10/route", headers=TENANT
        )

        assert response.status_code == 200
        assert response.json()["data"]["assigned_to"] is None

    @pytest.mark.asyncio
    async def test_missing_company_header_returns_422(self, async_client):
        _override_service(AsyncMock())

        response = await async_client.post("/api/v1/routing/leads/10/route")

        assert response.status_code == 422
        assert response.json()["type"] == "validation_error"

    @pytest.mark.asyncio
    async def test_non_positive_lead_id_returns_422(self, async_client):
        _override_service(AsyncMock())

        response = await async_client.post(
            "/api/v1/routing/leads/0/route", headers=TENANT
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_lead_returns_404(self, async_client):
        _override_service(AsyncMock(side_effect=LeadNotFoundError("Lead 10 not found")))

        response = await async_client.post(
            "/api/v1/routing/leads/10/route", headers=TENANT
        )

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Lead 10 not found",
            "type": "lead_not_found",
        }

    @pytest.mark.asyncio
    async def test_assignee_outside_company_returns_422(self, async_client):
        _override_service(
            AsyncMock(side_effect=AssigneeNotFoundError("User 99 not found in company 1"))
        )

        response = await async_client.post(
            "/api/v1/routing/leads/10/route", headers=TENANT
        )

        assert response.status_code == 422
        assert response.json()["type"] == "assignee_not_found"

    @pytest.mark.asyncio
    async def test_other_routing_error_returns_400(self, async_client):
        _override_service(AsyncMock(side_effect=MalformedConditionsError()))

        response = await async_client.post(
            "/api/v1/routing/leads/10/route", headers=TENANT
        )

        assert response.status_code == 400
        assert response.json()["type"] == "routing_error"

    @pytest.mark.asyncio
    async def test_database_failure_returns_500(self):
        _override_service(
            AsyncMock(side_effect=OperationalError("UPDATE leads", {}, Exception("gone")))
        )
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post(
                    "/api/v1/routing/leads/10/route", headers=TENANT
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["type"] == "internal_server_error"


class TestListRoutingRulesEndpoint:
    """GET /api/v1/routing/rules"""

    @staticmethod
    def _rule(rule_id, priority):
        return SimpleNamespace(
            id=rule_id,
            rule_name=f"Dubai buyers {rule_id}",
            priority=priority,
            is_active=True,
            conditions='{"city": "Dubai"}',
            assignment_type="round_robin",
            assigned_user_id=None,
            assigned_role_id=3,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    @pytest.mark.asyncio
    async def test_lists_rules_with_pagination(self, async_client):
        repo = AsyncMock()
        repo.list_rules = AsyncMock(
            return_value=([self._rule(4, 10), self._rule(2, 5)], 12)
        )
        app.dependency_overrides[get_routing_rule_repo] = lambda: repo

        response = await async_client.get(
            "/api/v1/routing/rules",
            params={"page": 2, "limit": 2, "is_active": "true", "search": "Dubai"},
            headers=TENANT,
        )

        assert response.status_code == 200
        body = response.json()
        assert [r["id"] for r in body["items"]] == [4, 2]
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 12}
        repo.list_rules.assert_awaited_once_with(
            1, offset=2, limit=2, is_active=True, search="Dubai"
        )

    @pytest.mark.asyncio
    async def test_limit_above_maximum_returns_422(self, async_client):
        app.dependency_overrides[get_routing_rule_repo] = lambda: AsyncMock()

        response = await async_client.get(
            "/api/v1/routing/rules", params={"limit": 1000}, headers=TENANT
        )

        assert response.status_code == 422


class TestGetRoutingRuleEndpoint:
    """GET /api/v1/routing/rules/{rule_id}"""

    @pytest.mark.asyncio
    async def test_returns_rule(self, async_client):
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=TestListRoutingRulesEndpoint._rule(4, 10))
        app.dependency_overrides[get_routing_rule_repo] = lambda: repo

        response = await async_client.get("/api/v1/routing/rules/4", headers=TENANT)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == 4
        assert body["data"]["assignment_type"] == "round_robin"
        repo.get_by_id.assert_awaited_once_with(4, 1)

    @pytest.mark.asyncio
    async def test_unknown_rule_returns_404(self, async_client):
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=None)
        app.dependency_overrides[get_routing_rule_repo] = lambda: repo

        response = await async_client.get("/api/v1/routing/rules/77", headers=TENANT)

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Routing Rule 77 not found",
            "type": "routing_rule_not_found",
        }

    @pytest.mark.asyncio
    async def test_missing_company_header_returns_422(self, async_client):
        app.dependency_overrides[get_routing_rule_repo] = lambda: AsyncMock()

        response = await async_client.get("/api/v1/routing/rules/4")

        assert response.status_code == 422
