"""Tests for logging helpers."""

import json
import logging
import uuid

from varuna.observability import (
    JsonFormatter, log_agent_action, log_agent_handoff, new_correlation_id,
)


class TestCorrelationIds:

    def test_new_correlation_id_is_uuid(self):
        value = new_correlation_id()
        assert str(uuid.UUID(value)) == value
        assert new_correlation_id() != value

    def test_log_agent_action_keeps_given_id(self, caplog):
        with caplog.at_level(logging.INFO, logger="varuna.agents"):
            returned = log_agent_action("collector", "collection_started", "corr-1", sources=2)

        assert returned == "corr-1"
        record = caplog.records[-1]
        assert record.correlation_id == "corr-1"
        assert record.agent == "collector"
        assert "sources=2" in record.getMessage()

    def test_log_agent_action_generates_id(self, caplog):
        with caplog.at_level(logging.INFO, logger="varuna.agents"):
            returned = log_agent_action("system", "initialized")
        assert returned
        assert caplog.records[-1].correlation_id == returned


class TestJsonFormatter:

    def test_includes_extra_fields(self, caplog):
        with caplog.at_level(logging.INFO, logger="varuna.agents"):
            log_agent_handoff("orchestrator", "analyzer", "corr-1", providers=2)

        payload = json.loads(JsonFormatter().format(caplog.records[-1]))
        assert payload["level"] == "info"
        assert payload["correlation_id"] == "corr-1"
        assert payload["to_agent"] == "analyzer"
        assert payload["data"] == {"providers": 2}
