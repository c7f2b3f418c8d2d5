"""Request-scoped access to the MonitorSystem and its settings held on app.state."""

from typing import Annotated

from fastapi import Depends, Request

from varuna.config import Settings
from varuna.system import MonitorSystem


def get_system(request: Request) -> MonitorSystem:
    return request.app.state.system


def get_app_settings(request: Request) -> Settings:
    return request.app.state.system.settings


# Type aliases for cleaner route signatures
System = Annotated[MonitorSystem, Depends(get_system)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
