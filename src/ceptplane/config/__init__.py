"""Config module exports."""

from ceptplane.config.loader import load_config
from ceptplane.config.models import (
    CeptPlaneConfig,
    LoggingConfig,
    RunnerConfig,
    WatcherConfig,
    WorkspaceConfig,
)

__all__ = [
    "load_config",
    "CeptPlaneConfig",
    "LoggingConfig",
    "RunnerConfig",
    "WatcherConfig",
    "WorkspaceConfig",
]
