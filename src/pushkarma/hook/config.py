"""Load and validate the hook configuration file."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from pushkarma.hook.identity import DEFAULT_PROXY_USER_HEADER

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "pushkarma.yaml"
DEFAULT_ACL_FILENAME = "karma.acl"
LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")

CONFIG_REASON_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_REASON_SCHEMA_INVALID = "CONFIG_SCHEMA_INVALID"


class ConfigError(ValueError):
    """Hook configuration validation error."""

    reason_code: str

    def __init__(self, message: str, reason_code: str = CONFIG_REASON_SCHEMA_INVALID) -> None:
        super().__init__(message)
        self.reason_code = reason_code


@dataclass(frozen=True)
class HookConfig:
    """Normalized hook configuration."""

    acl_path: Path
    proxy_user_header: str = DEFAULT_PROXY_USER_HEADER
    log_level: str = "WARNING"
    source: Path | None = None


def _config_path(explicit: Path | None, git_dir: Path, environ: Mapping[str, str]) -> Path | None:
    if explicit is not None:
        return explicit
    from_env = environ.get("PUSHKARMA_CONFIG", "").strip()
    if from_env:
        return Path(from_env)
    candidate = git_dir / CONFIG_FILENAME
    return candidate if candidate.exists() else None


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read config at {path}: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Malformed YAML config at {path}: {exc}", CONFIG_REASON_PARSE_ERROR) from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config at {path} must be a mapping")
    return raw


def _require_str(payload: Mapping[str, Any], key: str, path: Path) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config key '{key}' in {path} must be a non-empty string")
    return value.strip()


def load_config(
    git_dir: Path,
    *,
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> HookConfig:
    """Resolve hook configuration for the repository at ``git_dir``.

    Lookup order is the explicit ``path``, ``$PUSHKARMA_CONFIG``, then
    ``<git_dir>/pushkarma.yaml``; without any file, defaults apply.
    ``$PUSHKARMA_ACL`` always overrides the configured ACL location.
    """
    environ = environ if environ is not None else {}
    config_path = _config_path(path, git_dir, environ)

    acl_path = git_dir / DEFAULT_ACL_FILENAME
    proxy_header = DEFAULT_PROXY_USER_HEADER
    log_level = "WARNING"

    if config_path is not None:
        payload = _read_mapping(config_path)
        base = config_path.parent

        acl_value = _require_str(payload, "acl_path", config_path)
        if acl_value is not None:
            acl_path = Path(acl_value).expanduser()
            if not acl_path.is_absolute():
                acl_path = base / acl_path

        proxy_header = _require_str(payload, "proxy_user_header", config_path) or proxy_header

        level_value = _require_str(payload, "log_level", config_path)
        if level_value is not None:
            log_level = level_value.upper()
            if log_level not in LOG_LEVELS:
                raise ConfigError(f"Config key 'log_level' in {config_path} must be one of {list(LOG_LEVELS)}")

    acl_override = environ.get("PUSHKARMA_ACL", "").strip()
    if acl_override:
        acl_path = Path(acl_override).expanduser()

    logger.debug("config source=%s acl=%s", config_path, acl_path)
    return HookConfig(
        acl_path=acl_path,
        proxy_user_header=proxy_header,
        log_level=log_level,
        source=config_path,
    )
