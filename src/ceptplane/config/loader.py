"""Configuration loading with pydantic-settings.

Supports loading configuration from multiple sources with precedence:
1. Direct kwargs (highest priority)
2. Environment variables (CEPTPLANE__SECTION__KEY)
3. Workspace config (<workspace>/.ceptplane/config.yaml)
4. Global config (~/.config/ceptplane/config.yaml)
5. Built-in defaults (lowest priority)

The workspace file may use the nested layout of CeptPlaneConfig or the flat
editor-style keys codeceptPath, reportPath and reportFormats, which are
mapped into the ``workspace`` section.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ceptplane.config.models import (
    CeptPlaneConfig,
    LoggingConfig,
    RunnerConfig,
    WatcherConfig,
    WorkspaceConfig,
)
from ceptplane.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/ceptplane/config.yaml").expanduser()

WORKSPACE_CONFIG_DIR = ".ceptplane"
WORKSPACE_CONFIG_FILE = "config.yaml"

_FLAT_WORKSPACE_KEYS = {
    "codeceptPath": "codecept_path",
    "reportPath": "report_path",
    "reportFormats": "report_formats",
}


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _lift_flat_keys(data: dict[str, Any]) -> dict[str, Any]:
    """Move editor-style top level keys into the workspace section."""
    result = {k: v for k, v in data.items() if k not in _FLAT_WORKSPACE_KEYS}
    lifted = {
        _FLAT_WORKSPACE_KEYS[k]: v for k, v in data.items() if k in _FLAT_WORKSPACE_KEYS
    }
    if lifted:
        section = result.get("workspace")
        result["workspace"] = {**(section if isinstance(section, dict) else {}), **lifted}
    return result


class _YamlSource(PydanticBaseSettingsSource):
    """Settings source that reads from pre-loaded YAML config."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_config: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._yaml_config = yaml_config

    def get_field_value(
        self,
        field: Any,  # noqa: ARG002
        field_name: str,
    ) -> tuple[Any, str, bool]:
        val = self._yaml_config.get(field_name)
        return val, field_name, val is not None

    def __call__(self) -> dict[str, Any]:
        return self._yaml_config


def _make_settings_class(yaml_config: dict[str, Any]) -> type[BaseSettings]:
    """Create a Settings class with instance-based YAML source."""

    class CeptPlaneSettings(BaseSettings):
        """Root config. Env vars: CEPTPLANE__LOGGING__LEVEL, CEPTPLANE__WORKSPACE__REPORT_PATH, etc."""

        model_config = SettingsConfigDict(
            env_prefix="CEPTPLANE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        workspace: WorkspaceConfig = WorkspaceConfig()
        runner: RunnerConfig = RunnerConfig()
        watcher: WatcherConfig = WatcherConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            # Precedence (first wins): init kwargs > env vars > yaml files
            return (init_settings, env_settings, _YamlSource(settings_cls, yaml_config))

    return CeptPlaneSettings


def load_config(workspace_root: Path | None = None, **kwargs: Any) -> CeptPlaneConfig:
    """Load config: defaults < global yaml < workspace yaml < env vars < kwargs.

    Args:
        workspace_root: Workspace folder to load config for.
                        Defaults to current working directory.
        **kwargs: Override values (highest precedence).

    Returns:
        Fully resolved configuration object.

    Raises:
        ConfigError: On invalid YAML syntax or validation errors.
    """
    workspace_root = workspace_root or Path.cwd()

    yaml_config = _lift_flat_keys(_load_yaml(GLOBAL_CONFIG_PATH))
    workspace_yaml = _lift_flat_keys(
        _load_yaml(workspace_root / WORKSPACE_CONFIG_DIR / WORKSPACE_CONFIG_FILE)
    )
    yaml_config = _deep_merge(yaml_config, workspace_yaml)

    settings_cls = _make_settings_class(yaml_config)
    try:
        settings = settings_cls(**kwargs)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e
    return CeptPlaneConfig.model_validate(settings.model_dump())
