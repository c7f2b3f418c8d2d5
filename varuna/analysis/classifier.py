"""
Keyword-based status classification for feed items.

HOW IT WORKS:
  1. Title and description are joined and lowercased.
  2. Keyword sets are tried in fixed priority order (critical, warning);
     the first set with any substring hit decides the level. No hit means
     informational. This is a priority order, not a score.
  3. Known service names are substring-matched in list order.

Pure: the same item and tables always give the same ClassifiedItem.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..schemas import ClassifiedItem, FeedItem, StatusLevel

logger = logging.getLogger(__name__)

# Ordered by priority: the first level whose keywords match wins.
STATUS_KEYWORDS: Dict[StatusLevel, List[str]] = {
    StatusLevel.CRITICAL: ["outage", "down", "unavailable", "failed", "critical"],
    StatusLevel.WARNING: ["investigating", "degraded", "issues", "problems", "delayed"],
    StatusLevel.INFORMATIONAL: ["resolved", "completed", "update", "maintenance", "scheduled"],
}

KNOWN_SERVICES: List[str] = [
    # AWS
    "ec2", "rds", "s3", "lambda", "cloudfront", "route53", "elb",
    # GCP
    "compute engine", "cloud storage", "kubernetes", "app engine",
    "cloud sql", "cloud cdn", "cloud dns",
]


class KeywordClassifier:
    """Assigns a status level, services and matched keywords to feed items."""

    def __init__(
        self,
        status_keywords: Optional[Dict[StatusLevel, List[str]]] = None,
        services: Optional[Sequence[str]] = None,
    ):
        self.status_keywords = status_keywords or STATUS_KEYWORDS
        self.services = list(services or KNOWN_SERVICES)

    @property
    def keyword_categories(self) -> List[str]:
        return [level.value for level in self.status_keywords]

    def classify(self, item: FeedItem) -> ClassifiedItem:
        text = f"{item.title} {item.description}".lower()
        level = self.determine_status_level(text)
        services = self.extract_services(text)

        return ClassifiedItem(
            id=item.guid,
            title=item.title,
            link=item.link,
            timestamp=item.published_at,
            status_level=level,
            services=services,
            has_service_names=bool(services),
            word_count=len(text.split()),
            matched_keywords=self.matched_keywords(text, level),
        )

    def determine_status_level(self, text: str) -> StatusLevel:
        for level in (StatusLevel.CRITICAL, StatusLevel.WARNING):
            if any(kw in text for kw in self.status_keywords.get(level, [])):
                return level
        return StatusLevel.INFORMATIONAL

    def extract_services(self, text: str) -> List[str]:
        return [service for service in self.services if service in text]

    def matched_keywords(self, text: str, level: StatusLevel) -> List[str]:
        return [kw for kw in self.status_keywords.get(level, []) if kw in text]
