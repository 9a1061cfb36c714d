"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (CEPTPLANE__SECTION__KEY)
3. Workspace YAML (<workspace>/.ceptplane/config.yaml)
4. Global YAML (~/.config/ceptplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    CEPTPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    CEPTPLANE__LOGGING__LEVEL=DEBUG
    CEPTPLANE__WORKSPACE__CODECEPT_PATH=tools/codecept
    CEPTPLANE__WORKSPACE__REPORT_FORMATS='["junit", "html"]'
    CEPTPLANE__WATCHER__DEBOUNCE_SEC=2
"""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from ceptplane.config.constants import DEFAULT_KILL_GRACE_SEC

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ReportFormat = Literal["junit", "phpunit", "html"]

MACHINE_READABLE_FORMATS: frozenset[str] = frozenset({"junit", "phpunit"})


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v == "stderr":
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        CEPTPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Runner output is shown regardless of this setting.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class WorkspaceConfig(BaseModel):
    """Per workspace folder settings.

    Env vars:
        CEPTPLANE__WORKSPACE__CODECEPT_PATH: Executable override
        CEPTPLANE__WORKSPACE__REPORT_PATH: Result file override
        CEPTPLANE__WORKSPACE__REPORT_FORMATS: JSON list of report formats
    """

    codecept_path: str = Field(
        default="",
        description="Path to the codecept executable. Relative paths are joined to "
        "the workspace folder. Empty: vendor/bin/codecept, then codecept on PATH.",
    )
    report_path: str = Field(
        default="",
        description="Path of the XML result file to read after a run. "
        "Empty: derived from codeception.yml paths.output.",
    )
    report_formats: set[ReportFormat] = Field(
        default_factory=lambda: {"junit"},
        description="Reports requested from codecept. Only junit and phpunit are parsed; "
        "without either, results come from the exit code alone.",
    )

    @field_validator("report_formats", mode="before")
    @classmethod
    def split_report_formats(cls, v: Any) -> Any:
        if isinstance(v, str):
            return {part.strip().lower() for part in v.split(",") if part.strip()}
        return v

    @property
    def parses_report(self) -> bool:
        return bool(self.report_formats & MACHINE_READABLE_FORMATS)


class RunnerConfig(BaseModel):
    """External process handling.

    Env vars:
        CEPTPLANE__RUNNER__KILL_GRACE_SEC: Wait between SIGTERM and SIGKILL
    """

    kill_grace_sec: float = Field(
        default=DEFAULT_KILL_GRACE_SEC,
        description="Seconds between the graceful termination signal and the forceful kill "
        "when a run is cancelled.",
    )

    @field_validator("kill_grace_sec")
    @classmethod
    def validate_grace(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Grace period must be >= 0, got {v}")
        return v


class WatcherConfig(BaseModel):
    """Tree refresh on file system changes.

    Env vars:
        CEPTPLANE__WATCHER__ENABLED: Watch suite and test files
        CEPTPLANE__WATCHER__DEBOUNCE_SEC: Quiet period before rebuilding
    """

    enabled: bool = Field(default=True, description="Rebuild the tree when tests change.")
    debounce_sec: float = Field(
        default=10.0,
        description="Quiet period before a rebuild. Every new change restarts the wait, "
        "so a save-all of many files causes one rebuild.",
    )


class CeptPlaneConfig(BaseModel):
    """Root configuration for CeptPlane.

    All settings can be configured via:
    1. Environment variables: CEPTPLANE__SECTION__KEY
    2. YAML config files (workspace or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
