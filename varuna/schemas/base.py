"""
Common enums and the wire-model base class used across the application.

Python attributes are snake_case; on the wire (queue payloads, HTTP responses)
every model speaks camelCase. Parsing accepts either spelling.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ══════════════════════════════════════════════════════════════════════════════
# ENUMS - Classification Types
# ══════════════════════════════════════════════════════════════════════════════

class StatusLevel(str, Enum):
    """Severity of a status-feed item. Declaration order is match priority."""
    CRITICAL = "critical"
    WARNING = "warning"
    INFORMATIONAL = "informational"


class AnalysisStatus(str, Enum):
    """Outcome of analyzing one provider's collection result."""
    SUCCESS = "success"
    ERROR = "error"                    # collection failed upstream
    ANALYSIS_ERROR = "analysis_error"  # classification blew up


class WireModel(BaseModel):
    """Base for everything that crosses a queue or HTTP boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """JSON-safe dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
