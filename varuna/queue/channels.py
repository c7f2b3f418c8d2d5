"""Queue channel names. Publishers and subscribers must agree on these exactly."""

# orchestrator -> collector
RSS_TASKS = "rss_tasks"
# orchestrator -> analyzer
ANALYSIS_TASKS = "analysis_tasks"
# collector, analyzer -> orchestrator
ORCHESTRATOR_RESULTS = "orchestrator_results"

ALL_CHANNELS = (RSS_TASKS, ANALYSIS_TASKS, ORCHESTRATOR_RESULTS)
