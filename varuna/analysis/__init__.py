from .classifier import KeywordClassifier, STATUS_KEYWORDS, KNOWN_SERVICES
from .summary import (
    RiskWeights, DEFAULT_WEIGHTS, calculate_risk_score,
    summarize_provider, summarize_overall,
)

__all__ = [
    "KeywordClassifier", "STATUS_KEYWORDS", "KNOWN_SERVICES",
    "RiskWeights", "DEFAULT_WEIGHTS", "calculate_risk_score",
    "summarize_provider", "summarize_overall",
]
