"""Status router -- health, system status and scheduling control."""

from fastapi import APIRouter

from varuna import __version__
from varuna.queue import channels
from varuna.schemas import SystemStatus, utcnow

from .dependencies import AppSettings, System
from .schemas import HealthResponse, SchedulingResponse, ServiceInfo, SourcesResponse

router = APIRouter()


@router.get("/", response_model=ServiceInfo)
async def root():
    return ServiceInfo(service="Varuna Status Monitor", version=__version__)


@router.get("/health", response_model=HealthResponse)
async def health(settings: AppSettings):
    return HealthResponse(
        status="healthy",
        timestamp=utcnow(),
        config={
            "environment": settings.environment.value if settings.environment else None,
            "queue_backend": settings.queue_backend.value,
            "rss_collection_interval_ms": settings.rss_collection_interval_ms,
            "max_retries": settings.max_retries,
            "retry_delay_ms": settings.retry_delay_ms,
            "fetch_timeout_ms": settings.fetch_timeout_ms,
            "target_cycles": settings.target_cycles,
        },
    )


@router.get("/status", response_model=SystemStatus)
async def status(system: System):
    return system.get_system_status()


@router.get("/sources", response_model=SourcesResponse)
async def sources(settings: AppSettings):
    return SourcesResponse(sources=dict(settings.rss_sources), channels=list(channels.ALL_CHANNELS))


@router.post("/scheduling/start", response_model=SchedulingResponse)
async def start_scheduling(system: System):
    await system.start()
    return SchedulingResponse(
        message="Scheduling started",
        orchestrator=system.orchestrator.get_status(),
    )


@router.post("/scheduling/stop", response_model=SchedulingResponse)
async def stop_scheduling(system: System):
    await system.stop()
    return SchedulingResponse(
        message="Scheduling stopped",
        orchestrator=system.orchestrator.get_status(),
    )
