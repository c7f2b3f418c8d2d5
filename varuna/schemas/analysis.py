"""
Analysis result models.

ClassifiedItem is one-to-one with FeedItem. ProviderSummary aggregates one
provider's classified items; OverallSummary aggregates across the providers
of a single cycle.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from .base import AnalysisStatus, StatusLevel, WireModel, utcnow


class ClassifiedItem(WireModel):
    id: str = ""
    title: str = ""
    link: str = ""
    timestamp: datetime
    status_level: StatusLevel
    services: List[str] = Field(default_factory=list)
    has_service_names: bool = False
    word_count: int = 0
    matched_keywords: List[str] = Field(default_factory=list)


class ProviderSummary(WireModel):
    provider: str
    total_items: int = 0
    critical_count: int = 0
    warning_count: int = 0
    informational_count: int = 0
    unique_services: List[str] = Field(default_factory=list)
    risk_score: int = Field(default=0, ge=0)
    # Timestamp of the most recent item, None for an empty feed
    last_update: Optional[datetime] = None


class ProviderAnalysis(WireModel):
    provider: str
    status: AnalysisStatus
    summary: Optional[ProviderSummary] = None
    items: List[ClassifiedItem] = Field(default_factory=list)
    error: Optional[str] = None
    analyzed_at: datetime = Field(default_factory=utcnow)


class OverallSummary(WireModel):
    total_providers: int = 0
    total_critical: int = 0
    total_warning: int = 0
    total_informational: int = 0
    all_services: List[str] = Field(default_factory=list)
    overall_risk_score: int = 0
