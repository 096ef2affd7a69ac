"""
Integration tests for the health check endpoints.
"""

from unittest.mock import MagicMock

import pytest
from aiohttp import test_utils

from jobs.health import create_health_app, set_task_scheduler


@pytest.fixture
def registered_scheduler():
    task_scheduler = MagicMock()
    task_scheduler.scheduler.running = True
    task_scheduler.status.return_value = {
        "deposit": {"running": True, "busy": False, "has_handler": True,
                    "interval_seconds": 60, "next_run_time": None},
        "mining": {"running": False, "busy": False, "has_handler": False,
                   "interval_seconds": None, "next_run_time": None},
    }
    set_task_scheduler(task_scheduler)
    yield task_scheduler
    set_task_scheduler(None)


class TestHealthEndpoints:
    @pytest.mark.asyncio
    async def test_unhealthy_without_scheduler(self):
        set_task_scheduler(None)
        async with test_utils.TestClient(test_utils.TestServer(create_health_app())) as client:
            health = await client.get("/health")
            readiness = await client.get("/readiness")

            assert health.status == 503
            assert readiness.status == 503

    @pytest.mark.asyncio
    async def test_reports_task_status(self, registered_scheduler):
        async with test_utils.TestClient(test_utils.TestServer(create_health_app())) as client:
            response = await client.get("/health")
            body = await response.json()

        assert response.status == 200
        assert body["status"] == "healthy"
        assert body["running_tasks"] == 1
        assert body["tasks"]["deposit"]["interval_seconds"] == 60

    @pytest.mark.asyncio
    async def test_ready_and_alive(self, registered_scheduler):
        async with test_utils.TestClient(test_utils.TestServer(create_health_app())) as client:
            readiness = await client.get("/readiness")
            liveness = await client.get("/liveness")

            assert readiness.status == 200
            assert liveness.status == 200
            assert (await liveness.json())["alive"] is True
