from .orchestrator import Orchestrator
from .collector import CollectorAgent
from .analyzer import AnalyzerAgent

__all__ = ["Orchestrator", "CollectorAgent", "AnalyzerAgent"]
