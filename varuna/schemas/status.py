"""
Status snapshots reported by agents and the system runner.

Read-only views: building one never changes the state it describes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .analysis import OverallSummary
from .base import WireModel


class OrchestratorStatus(WireModel):
    is_running: bool = False
    active_tasks: List[str] = Field(default_factory=list)
    cycle_count: int = 0


class CollectorStatus(WireModel):
    name: str = "collector"
    status: str = "idle"          # idle | active
    supported_sources: List[str] = Field(default_factory=list)


class AnalyzerStatus(WireModel):
    name: str = "analyzer"
    status: str = "idle"          # idle | active
    supported_analysis: List[str] = Field(default_factory=list)
    keyword_categories: List[str] = Field(default_factory=list)


class SystemInfo(WireModel):
    is_running: bool = False
    start_time: Optional[datetime] = None
    cycle_count: int = 0
    uptime_ms: int = 0
    target_cycles: int = 0
    last_summary: Optional[OverallSummary] = None


class AgentStatuses(WireModel):
    orchestrator: OrchestratorStatus
    collector: CollectorStatus
    analyzer: AnalyzerStatus


class SystemStatus(WireModel):
    system: SystemInfo
    agents: AgentStatuses
