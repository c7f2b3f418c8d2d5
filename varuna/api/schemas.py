"""API response schemas."""

from datetime import datetime
from typing import Any, Dict, List

from varuna.schemas import OrchestratorStatus, WireModel


class ServiceInfo(WireModel):
    service: str
    version: str


class HealthResponse(WireModel):
    status: str
    timestamp: datetime
    config: Dict[str, Any]


class SchedulingResponse(WireModel):
    message: str
    orchestrator: OrchestratorStatus


class SourcesResponse(WireModel):
    sources: Dict[str, str]
    channels: List[str]
