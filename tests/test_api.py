"""Tests for the HTTP status surface."""

import pytest
from fastapi.testclient import TestClient

from varuna.main import create_app
from varuna.queue import InMemoryMessageQueue
from varuna.system import MonitorSystem


@pytest.fixture
def client(settings, scripted_tool):
    system = MonitorSystem(settings, queue=InMemoryMessageQueue(0.01), rss_tool=scripted_tool())
    with TestClient(create_app(system=system, autostart=False)) as test_client:
        yield test_client


class TestStatusRoutes:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["service"] == "Varuna Status Monitor"

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["config"]["max_retries"] == 3

    def test_status(self, client):
        body = client.get("/status").json()
        assert body["system"]["isRunning"] is False
        assert body["agents"]["collector"]["supportedSources"] == ["aws", "gcp"]
        assert body["agents"]["analyzer"]["keywordCategories"] == [
            "critical", "warning", "informational",
        ]

    def test_sources(self, client):
        body = client.get("/sources").json()
        assert body["sources"]["aws"] == "https://aws.test/rss"
        assert body["channels"] == ["rss_tasks", "analysis_tasks", "orchestrator_results"]

    def test_start_and_stop_scheduling(self, client):
        started = client.post("/scheduling/start").json()
        assert started["orchestrator"]["isRunning"] is True
        assert started["orchestrator"]["activeTasks"] == ["rss_collection"]

        assert client.get("/status").json()["system"]["isRunning"] is True

        stopped = client.post("/scheduling/stop").json()
        assert stopped["orchestrator"]["isRunning"] is False
        assert stopped["orchestrator"]["activeTasks"] == []
