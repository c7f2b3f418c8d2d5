"""
Schemas package - all data models for the Varuna status monitor.

Models are organized by domain in submodules:
  - base.py: Common enums and the camelCase wire-model base
  - feeds.py: SourceDescriptor, FeedItem, CollectionSuccess/Failure
  - analysis.py: ClassifiedItem, ProviderSummary, ProviderAnalysis, OverallSummary
  - messages.py: Queue messages (CollectTask, AnalyzeTask, AgentResult)
  - status.py: Agent and system status snapshots
"""

# base.py - enums and wire base
from varuna.schemas.base import StatusLevel, AnalysisStatus, WireModel, utcnow

# feeds.py - collection models
from varuna.schemas.feeds import (
    SourceDescriptor, FeedItem, CollectionSuccess, CollectionFailure,
    CollectionOutcome, total_item_count,
)

# analysis.py - analysis models
from varuna.schemas.analysis import (
    ClassifiedItem, ProviderSummary, ProviderAnalysis, OverallSummary,
)

# messages.py - queue messages
from varuna.schemas.messages import (
    BaseMessage, CollectTask, AnalyzeTask, AgentResult,
    CollectedPayload, AnalysisCompletePayload, QueueMessage, parse_message,
    RSS_DATA_COLLECTED, ANALYSIS_COMPLETE,
)

# status.py - agent and system snapshots
from varuna.schemas.status import (
    OrchestratorStatus, CollectorStatus, AnalyzerStatus,
    SystemInfo, AgentStatuses, SystemStatus,
)

__all__ = [
    # base
    "StatusLevel", "AnalysisStatus", "WireModel", "utcnow",
    # feeds
    "SourceDescriptor", "FeedItem", "CollectionSuccess", "CollectionFailure",
    "CollectionOutcome", "total_item_count",
    # analysis
    "ClassifiedItem", "ProviderSummary", "ProviderAnalysis", "OverallSummary",
    # messages
    "BaseMessage", "CollectTask", "AnalyzeTask", "AgentResult",
    "CollectedPayload", "AnalysisCompletePayload", "QueueMessage", "parse_message",
    "RSS_DATA_COLLECTED", "ANALYSIS_COMPLETE",
    # status
    "OrchestratorStatus", "CollectorStatus", "AnalyzerStatus",
    "SystemInfo", "AgentStatuses", "SystemStatus",
]
