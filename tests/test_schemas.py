"""Tests for message and collection models."""

import json

import pytest
from pydantic import ValidationError

from varuna.schemas import (
    AgentResult, AnalysisCompletePayload, AnalyzeTask, CollectedPayload,
    CollectionFailure, CollectionSuccess, CollectTask, FeedItem, SourceDescriptor,
    parse_message,
)


class TestCollectionOutcome:

    def test_item_count_defaults_to_items(self, feed_item):
        outcome = CollectionSuccess(name="aws", url="u", items=[feed_item("a"), feed_item("b")])
        assert outcome.item_count == 2

    def test_item_count_mismatch_rejected(self, feed_item):
        with pytest.raises(ValidationError):
            CollectionSuccess(name="aws", url="u", items=[feed_item("a")], item_count=3)

    def test_failure_carries_no_items(self):
        failure = CollectionFailure(name="gcp", url="u", error="boom")
        assert failure.item_count == 0
        with pytest.raises(ValidationError):
            CollectionFailure(name="gcp", url="u", error="boom", item_count=1)

    def test_collected_payload_totals_items(self, feed_item):
        payload = CollectedPayload(data=[
            CollectionSuccess(name="aws", url="u", items=[feed_item("a"), feed_item("b")]),
            CollectionFailure(name="gcp", url="u", error="boom"),
        ])
        assert payload.total_items == 2

    def test_collected_payload_total_mismatch_rejected(self, feed_item):
        success = CollectionSuccess(name="aws", url="u", items=[feed_item("a"), feed_item("b")])
        with pytest.raises(ValidationError):
            CollectedPayload(data=[success], total_items=5)
        with pytest.raises(ValidationError):
            CollectedPayload.model_validate({"data": [success.model_dump(by_alias=True)], "totalItems": 0})

    def test_collected_payload_matching_total_accepted(self, feed_item):
        success = CollectionSuccess(name="aws", url="u", items=[feed_item("a")])
        payload = CollectedPayload.model_validate(
            {"data": [success.model_dump(by_alias=True)], "totalItems": 1}
        )
        assert payload.total_items == 1


class TestSourceDescriptor:

    def test_from_mapping_keeps_order(self):
        sources = SourceDescriptor.from_mapping({"aws": "https://a", "gcp": "https://g"})
        assert [s.name for s in sources] == ["aws", "gcp"]

    def test_is_immutable(self):
        source = SourceDescriptor(name="aws", url="https://a")
        with pytest.raises(ValidationError):
            source.url = "https://other"


class TestMessages:

    def test_correlation_id_required_and_non_empty(self):
        with pytest.raises(ValidationError):
            CollectTask(sources={})
        with pytest.raises(ValidationError):
            CollectTask(correlation_id="", sources={})

    def test_correlation_id_is_frozen(self):
        task = CollectTask(correlation_id="abc", sources={})
        with pytest.raises(ValidationError):
            task.correlation_id = "other"

    def test_wire_form_is_camel_case(self):
        task = CollectTask(correlation_id="abc", sources={"aws": "https://a"})
        wire = task.to_wire()
        assert wire["kind"] == "collect_feeds"
        assert wire["correlationId"] == "abc"
        assert wire["scheduledBy"] == "orchestrator"
        assert "scheduledAt" in wire

    def test_parse_message_dispatches_on_kind(self, feed_item):
        result = AgentResult(
            correlation_id="abc",
            from_agent="collector",
            result=CollectedPayload(data=[
                CollectionSuccess(name="aws", url="u", items=[feed_item("EC2 outage")]),
            ]),
        )
        parsed = parse_message(result.model_dump_json(by_alias=True))

        assert isinstance(parsed, AgentResult)
        assert isinstance(parsed.result, CollectedPayload)
        assert parsed.result.total_items == 1
        assert isinstance(parsed.result.data[0], CollectionSuccess)
        assert parsed.result.data[0].items[0].title == "EC2 outage"

    def test_parse_message_accepts_dicts(self):
        parsed = parse_message({
            "kind": "analyze_rss_data",
            "correlationId": "abc",
            "data": [{"status": "failure", "name": "gcp", "url": "u", "error": "boom"}],
            "originalSource": "collector",
        })
        assert isinstance(parsed, AnalyzeTask)
        assert isinstance(parsed.data[0], CollectionFailure)
        assert parsed.forwarded_by == "orchestrator"

    def test_parse_message_parses_analysis_result(self):
        raw = json.dumps({
            "kind": "result",
            "fromAgent": "analyzer",
            "correlationId": "abc",
            "result": {"type": "analysis_complete", "data": []},
        })
        parsed = parse_message(raw)
        assert isinstance(parsed.result, AnalysisCompletePayload)
        assert parsed.result.summary.overall_risk_score == 0

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            parse_message({"kind": "reboot", "correlationId": "abc"})

    def test_unknown_result_type_rejected(self):
        with pytest.raises(ValidationError):
            parse_message({
                "kind": "result", "fromAgent": "x", "correlationId": "abc",
                "result": {"type": "mystery"},
            })

    def test_feed_item_defaults(self):
        item = FeedItem()
        assert item.title == ""
        assert item.published_at.tzinfo is not None
