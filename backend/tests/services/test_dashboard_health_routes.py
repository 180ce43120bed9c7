"""Dashboard and Health Routes — verifies the overview counts and the health endpoints."""

from unittest.mock import AsyncMock, patch

import backoffice.infrastructure.database as db_module


async def test_dashboard_overview(client, make_book, member, make_member, make_loan):
    await make_member("M-0002", "Grace", "Hopper", status="Suspended")
    late = await make_book("9780000000001", copies=2)
    await make_book("9780000000002", copies=3)
    await make_loan(late, member, due_in=-1)
    await client.post("/api/v1/categories", json={"name": "Poetry"})

    overview = (await client.get("/api/v1/dashboard/overview")).json()
    assert overview["totalBooks"] == 5
    assert overview["availableBooks"] == 4
    assert overview["borrowedBooks"] == 1
    assert overview["overdueBooks"] == 1
    assert overview["totalMembers"] == 2
    assert overview["activeMembers"] == 1
    assert overview["totalTransactions"] == 1
    assert overview["overdueTransactions"] == 1
    assert overview["totalFines"] == 0
    assert overview["activeReservations"] == 0
    activity = overview["recentActivities"]
    assert len(activity) == 1
    assert activity[0]["type"] == "Create"
    assert activity[0]["description"].startswith("Create Category #")


async def test_health_root_and_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.json()["status"] == "healthy"
    assert res.json()["service"] == "library-backoffice-api"

    res = await client.get("/api/v1/health/live")
    assert res.json()["status"] == "alive"
    assert "timestamp" in res.json()


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["status"] == "ready"

    res = await client.get("/api/v1/health/database")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_without_database(client):
    with patch.object(
        db_module.db_manager, "health_check", AsyncMock(return_value=False),
    ):
        res = await client.get("/api/v1/health/ready")
        assert res.status_code == 503
        assert res.json() == {"status": "not_ready", "reason": "database_unavailable"}

        res = await client.get("/api/v1/health/database")
        assert res.status_code == 503

        res = await client.get("/api/v1/health/detailed")
        assert res.status_code == 503


async def test_detailed_health(client):
    res = await client.get("/api/v1/health/detailed")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
