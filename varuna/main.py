"""
Varuna Status Monitor - Main Entry Point.
FastAPI server and CLI interface.
"""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import status_router
from .config import get_settings
from .observability import configure_logging
from .system import MonitorSystem

logger = logging.getLogger(__name__)


def create_app(system: Optional[MonitorSystem] = None, autostart: bool = True) -> FastAPI:
    """Build the HTTP app. The monitor is created on startup unless one is passed in."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        monitor = system or MonitorSystem()
        app.state.system = monitor
        await monitor.initialize()
        if autostart:
            await monitor.start()
        logger.info("Varuna API ready")
        try:
            yield
        finally:
            await monitor.shutdown()

    app = FastAPI(
        title="Varuna Status Monitor",
        description="Cloud provider status feed monitoring and risk scoring",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(status_router)
    return app


app = create_app()


async def run_monitor() -> None:
    """Run cycles until the target count is reached or the process is interrupted."""
    system = MonitorSystem()
    print("\n" + "=" * 60)
    print("VARUNA STATUS MONITOR")
    print("=" * 60 + "\n")
    try:
        await system.start()
        await system.wait_until_stopped()
    finally:
        await system.shutdown()

    status = system.get_system_status()
    print("\n" + "=" * 60)
    print("FINAL STATUS")
    print("=" * 60)
    print(f"Cycles completed: {status.system.cycle_count}")
    if status.system.last_summary is not None:
        summary = status.system.last_summary
        print(f"Providers: {summary.total_providers}")
        print(f"Critical / warning / informational: "
              f"{summary.total_critical} / {summary.total_warning} / {summary.total_informational}")
        print(f"Overall risk: {summary.overall_risk_score}")
    print("=" * 60 + "\n")


def print_status() -> None:
    system = MonitorSystem()
    print(json.dumps(system.get_system_status().to_wire(), indent=2))


def cli_main(argv: Optional[list] = None) -> None:
    """Command-line interface."""
    import argparse

    parser = argparse.ArgumentParser(description="Varuna Status Monitor")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["start", "status"],
        default="start",
        help="start: run the monitor (default); status: print system status",
    )
    parser.add_argument(
        "--server",
        action="store_true",
        help="Start the FastAPI server",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Server port (default: API_PORT)",
    )

    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    if args.server:
        import uvicorn
        port = args.port or settings.api_port
        logger.info(f"Starting server on port {port}...")
        uvicorn.run(app, host=settings.api_host, port=port)
    elif args.command == "status":
        print_status()
    else:
        asyncio.run(run_monitor())


def main():
    """Entry point for CLI."""
    try:
        cli_main()
    except KeyboardInterrupt:
        logger.info("Interrupted, shut down")


if __name__ == "__main__":
    main()
