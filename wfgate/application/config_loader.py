from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from wfgate.application.config_models import EngineConfig, WorkflowDefinition
from wfgate.domain.constants import (
    DEFAULT_APPROVAL_ROOT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_STORE_ROOT,
)


class ConfigLoadError(Exception):
    def __init__(self, message: str, *, path: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message}: {self.path}"


def _defaults() -> dict[str, Any]:
    return {
        "store_root": str(DEFAULT_STORE_ROOT),
        "approval_root": str(DEFAULT_APPROVAL_ROOT),
        "poll_interval": DEFAULT_POLL_INTERVAL,
        "email": {
            "enabled": False,
            "host": "localhost",
            "port": 25,
            "enable_ssl": False,
            "user": None,
            "password": None,
            "from_address": None,
        },
    }


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge mapping keys. For non-dict values, overlay wins.
    """
    merged: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = _deep_merge(merged[k], v)  # type: ignore[arg-type]
        else:
            merged[k] = v
    return merged


def _load_yaml_mapping(path: Path, *, required: bool = False) -> dict[str, Any]:
    """
    Load YAML file and ensure root is a mapping.
    """
    # Protect against TOCTOU race conditions.
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if required:
            raise ConfigLoadError("Config file not found", path=path) from None
        return {}
    except Exception as e:  # pragma: no cover
        raise ConfigLoadError("Failed to read config file", path=path, cause=e) from e

    try:
        data = yaml.safe_load(raw)
    except Exception as e:
        raise ConfigLoadError("Malformed YAML", path=path, cause=e) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigLoadError("YAML root must be a mapping", path=path)

    return data


def load_config(*, project_root: Path | None = None, user_home: Path | None = None) -> dict[str, Any]:
    """
    Load and merge engine config with precedence (highest wins):
    CLI args (handled in CLI) > project > user > defaults.

    Files:
      - user:    user_home/.wfgate/config.yml
      - project: project_root/.wfgate/config.yml
    """
    project_root = project_root or Path.cwd()
    user_home = user_home or Path.home()

    cfg: dict[str, Any] = _defaults()
    cfg = _deep_merge(cfg, _load_yaml_mapping(user_home / ".wfgate" / "config.yml"))
    cfg = _deep_merge(cfg, _load_yaml_mapping(project_root / ".wfgate" / "config.yml"))
    return cfg


def load_engine_config(cfg: dict[str, Any]) -> EngineConfig:
    """Validate a merged config mapping."""
    try:
        return EngineConfig.model_validate(cfg)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid engine config: {e}", cause=e) from e


def load_workflow(path: Path) -> WorkflowDefinition:
    """Load a workflow definition file."""
    data = _load_yaml_mapping(path, required=True)
    try:
        return WorkflowDefinition.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(f"Invalid workflow definition: {e}", path=path, cause=e) from e
