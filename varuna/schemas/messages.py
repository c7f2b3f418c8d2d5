"""
Queue message models.

Every message is a member of one closed tagged union discriminated by
``kind``; agent results carry a second union discriminated by
``result.type``. A correlation ID is assigned once per cycle when the
collect task is created and copied onto every message of that cycle.

Wire shapes (camelCase):
  collect_feeds     {kind, sources, correlationId, scheduledBy, scheduledAt}
  analyze_rss_data  {kind, data, correlationId, forwardedBy, originalSource}
  result            {kind, fromAgent, result: {type, ...}, correlationId, completedAt}
"""

from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field, TypeAdapter, model_validator

from .analysis import OverallSummary, ProviderAnalysis
from .base import WireModel, utcnow
from .feeds import CollectionOutcome, SourceDescriptor, total_item_count

# result.type values
RSS_DATA_COLLECTED = "rss_data_collected"
ANALYSIS_COMPLETE = "analysis_complete"


class BaseMessage(WireModel):
    correlation_id: str = Field(min_length=1, frozen=True)
    # Stamped by the queue on publish
    emitted_at: Optional[datetime] = None


class CollectTask(BaseMessage):
    kind: Literal["collect_feeds"] = "collect_feeds"
    sources: Dict[str, str]
    scheduled_by: str = "orchestrator"
    scheduled_at: datetime = Field(default_factory=utcnow)

    def source_descriptors(self) -> List[SourceDescriptor]:
        return SourceDescriptor.from_mapping(self.sources)


class AnalyzeTask(BaseMessage):
    kind: Literal["analyze_rss_data"] = "analyze_rss_data"
    data: List[CollectionOutcome] = Field(default_factory=list)
    forwarded_by: str = "orchestrator"
    original_source: str = ""


class CollectedPayload(WireModel):
    type: Literal["rss_data_collected"] = RSS_DATA_COLLECTED
    data: List[CollectionOutcome] = Field(default_factory=list)
    total_items: int

    @model_validator(mode="before")
    @classmethod
    def _default_total(cls, data: Any) -> Any:
        if isinstance(data, dict) and "total_items" not in data and "totalItems" not in data:
            outcomes = TypeAdapter(List[CollectionOutcome]).validate_python(data.get("data") or [])
            data = {**data, "data": outcomes, "total_items": total_item_count(outcomes)}
        return data

    @model_validator(mode="after")
    def _check_total(self) -> "CollectedPayload":
        expected = total_item_count(self.data)
        if self.total_items != expected:
            raise ValueError(f"total_items={self.total_items} does not match {expected} collected items")
        return self


class AnalysisCompletePayload(WireModel):
    type: Literal["analysis_complete"] = ANALYSIS_COMPLETE
    data: List[ProviderAnalysis] = Field(default_factory=list)
    summary: OverallSummary = Field(default_factory=OverallSummary)


ResultPayload = Annotated[
    Union[CollectedPayload, AnalysisCompletePayload],
    Field(discriminator="type"),
]


class AgentResult(BaseMessage):
    kind: Literal["result"] = "result"
    from_agent: str
    result: ResultPayload
    completed_at: datetime = Field(default_factory=utcnow)


QueueMessage = Annotated[
    Union[CollectTask, AnalyzeTask, AgentResult],
    Field(discriminator="kind"),
]

_message_adapter: TypeAdapter = TypeAdapter(QueueMessage)


def parse_message(raw: Union[str, bytes, Dict[str, Any]]) -> BaseMessage:
    """Decode a wire payload into its message model.

    Raises pydantic.ValidationError for unknown kinds or malformed payloads.
    """
    if isinstance(raw, (str, bytes)):
        return _message_adapter.validate_json(raw)
    return _message_adapter.validate_python(raw)
