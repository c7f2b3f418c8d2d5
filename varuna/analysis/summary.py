"""
Risk scoring and summary aggregation.

Risk score (per provider):
    min(cap, critical*w_critical + warning*w_warning + informational*w_informational)
with defaults 50 / 20 / 5 and cap 100. Monotonic in every count.

Overall summary: only providers with status == success contribute counts,
services and risk. The overall risk is their mean, rounded half-up; with no
successful provider it is 0.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

from ..config import Settings
from ..schemas import (
    AnalysisStatus, ClassifiedItem, OverallSummary, ProviderAnalysis,
    ProviderSummary, StatusLevel,
)


@dataclass(frozen=True)
class RiskWeights:
    critical: int = 50
    warning: int = 20
    informational: int = 5
    cap: int = 100

    @classmethod
    def from_settings(cls, settings: Settings) -> "RiskWeights":
        return cls(
            critical=settings.risk_weight_critical,
            warning=settings.risk_weight_warning,
            informational=settings.risk_weight_informational,
            cap=settings.risk_score_cap,
        )


DEFAULT_WEIGHTS = RiskWeights()


def calculate_risk_score(
    counts: Mapping[str, int],
    weights: RiskWeights = DEFAULT_WEIGHTS,
) -> int:
    """Capped weighted sum. ``counts`` is keyed by critical / warning / informational."""
    score = (
        counts.get("critical", 0) * weights.critical
        + counts.get("warning", 0) * weights.warning
        + counts.get("informational", 0) * weights.informational
    )
    return min(score, weights.cap)


def summarize_provider(
    provider: str,
    items: List[ClassifiedItem],
    weights: RiskWeights = DEFAULT_WEIGHTS,
) -> ProviderSummary:
    counts: Dict[str, int] = {level.value: 0 for level in StatusLevel}
    services: Dict[str, None] = {}  # insertion-ordered set

    for item in items:
        counts[StatusLevel(item.status_level).value] += 1
        for service in item.services:
            services.setdefault(service, None)

    return ProviderSummary(
        provider=provider,
        total_items=len(items),
        critical_count=counts["critical"],
        warning_count=counts["warning"],
        informational_count=counts["informational"],
        unique_services=list(services),
        risk_score=calculate_risk_score(counts, weights),
        last_update=max((item.timestamp for item in items), default=None),
    )


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def summarize_overall(results: List[ProviderAnalysis]) -> OverallSummary:
    summary = OverallSummary(total_providers=len(results))
    services: Dict[str, None] = {}
    risk_scores: List[int] = []

    for result in results:
        provider_summary: Optional[ProviderSummary] = result.summary
        if result.status != AnalysisStatus.SUCCESS or provider_summary is None:
            continue
        summary.total_critical += provider_summary.critical_count
        summary.total_warning += provider_summary.warning_count
        summary.total_informational += provider_summary.informational_count
        for service in provider_summary.unique_services:
            services.setdefault(service, None)
        risk_scores.append(provider_summary.risk_score)

    summary.all_services = list(services)
    # No successful provider -> 0 rather than a division by zero
    if risk_scores:
        summary.overall_risk_score = _round_half_up(sum(risk_scores) / len(risk_scores))
    return summary
