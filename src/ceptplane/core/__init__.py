"""Core module exports."""

from ceptplane.core.errors import (
    CeptPlaneError,
    ConfigError,
    ErrorCode,
    InternalError,
    ReportError,
    TreeError,
)
from ceptplane.core.logging import (
    clear_run_id,
    configure_logging,
    get_run_id,
    set_run_id,
)

__all__ = [
    # Errors
    "CeptPlaneError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ReportError",
    "TreeError",
    # Logging
    "clear_run_id",
    "configure_logging",
    "get_run_id",
    "set_run_id",
]
