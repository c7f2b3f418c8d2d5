"""
Analyzer Agent - classifies collected items and scores provider risk.

Consumes ``analyze_rss_data`` from analysis_tasks, publishes one
``analysis_complete`` result on orchestrator_results.
"""

import logging
from typing import List, Optional, Union

from ..analysis import KeywordClassifier, RiskWeights, summarize_overall, summarize_provider
from ..config import Settings, get_settings
from ..observability import log_agent_action, log_agent_error, log_agent_handoff
from ..queue import MessageQueue, QueueTransportError, channels
from ..schemas import (
    AgentResult, AnalysisCompletePayload, AnalysisStatus, AnalyzerStatus,
    AnalyzeTask, BaseMessage, CollectionFailure, CollectionSuccess, ProviderAnalysis,
)

logger = logging.getLogger(__name__)

AGENT_NAME = "analyzer"

SUPPORTED_ANALYSIS = ["status_classification", "service_extraction", "risk_scoring"]


class AnalyzerAgent:
    """Per-provider classification and summary, plus a cross-provider rollup."""

    def __init__(
        self,
        queue: MessageQueue,
        settings: Optional[Settings] = None,
        classifier: Optional[KeywordClassifier] = None,
    ):
        self.queue = queue
        self.settings = settings or get_settings()
        self.classifier = classifier or KeywordClassifier()
        self.weights = RiskWeights.from_settings(self.settings)
        self._active = 0

    async def initialize(self) -> None:
        await self.queue.subscribe(channels.ANALYSIS_TASKS, self.handle_task)
        log_agent_action(AGENT_NAME, "initialized", channel=channels.ANALYSIS_TASKS)

    async def handle_task(self, message: BaseMessage) -> None:
        if not isinstance(message, AnalyzeTask):
            logger.warning(
                f"Analyzer ignoring unexpected message kind "
                f"'{getattr(message, 'kind', '?')}' [{message.correlation_id}]"
            )
            return
        await self.analyze(message.data, message.correlation_id)

    async def analyze(
        self,
        outcomes: List[Union[CollectionSuccess, CollectionFailure]],
        correlation_id: str,
    ) -> Optional[AgentResult]:
        """Analyze every outcome and publish the result.

        Returns the published result, or None when the publish itself failed.
        """
        log_agent_action(AGENT_NAME, "analysis_started", correlation_id, providers=len(outcomes))
        self._active += 1
        try:
            analyses = [self.analyze_outcome(o, correlation_id) for o in outcomes]
        finally:
            self._active -= 1

        summary = summarize_overall(analyses)
        log_agent_action(
            AGENT_NAME, "analysis_completed", correlation_id,
            providers=summary.total_providers,
            critical=summary.total_critical,
            overall_risk=summary.overall_risk_score,
        )

        result = AgentResult(
            correlation_id=correlation_id,
            from_agent=AGENT_NAME,
            result=AnalysisCompletePayload(data=analyses, summary=summary),
        )
        try:
            published = await self.queue.publish(channels.ORCHESTRATOR_RESULTS, result)
        except QueueTransportError as e:
            log_agent_error(AGENT_NAME, e, correlation_id)
            return None

        log_agent_handoff(AGENT_NAME, "orchestrator", correlation_id, risk=summary.overall_risk_score)
        return published

    def analyze_outcome(
        self,
        outcome: Union[CollectionSuccess, CollectionFailure],
        correlation_id: str,
    ) -> ProviderAnalysis:
        if isinstance(outcome, CollectionFailure):
            return ProviderAnalysis(
                provider=outcome.name,
                status=AnalysisStatus.ERROR,
                error=outcome.error,
            )

        try:
            items = [self.classifier.classify(item) for item in outcome.items]
            summary = summarize_provider(outcome.name, items, self.weights)
        except Exception as e:
            log_agent_error(AGENT_NAME, e, correlation_id)
            return ProviderAnalysis(
                provider=outcome.name,
                status=AnalysisStatus.ANALYSIS_ERROR,
                error=str(e),
            )

        return ProviderAnalysis(
            provider=outcome.name,
            status=AnalysisStatus.SUCCESS,
            summary=summary,
            items=items,
        )

    def get_status(self) -> AnalyzerStatus:
        return AnalyzerStatus(
            name=AGENT_NAME,
            status="active" if self._active else "idle",
            supported_analysis=list(SUPPORTED_ANALYSIS),
            keyword_categories=self.classifier.keyword_categories,
        )
