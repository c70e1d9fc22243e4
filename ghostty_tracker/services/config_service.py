"""Tracker configuration: YAML on disk, validated by the AppConfig schema.

The launcher that shares this config file describes its projects as
``workstreams`` (name, directory, theme, launch options). Those entries are
folded into ``projects`` at load time so windows opened by the launcher are
attributed the same way as hand-configured projects.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ghostty_tracker.models.config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.config/ghostty-tracker/config.yaml"


def migrate_workstreams(raw: dict[str, Any]) -> dict[str, Any]:
    """Fold launcher ``workstreams`` into ``projects``.

    A workstream needs a name and a ``directory`` (or ``path``) to be
    attributable. Explicit ``projects`` win over a workstream of the same
    name. The input mapping is not modified.
    """
    if "workstreams" not in raw:
        return raw

    result = {key: value for key, value in raw.items() if key != "workstreams"}
    projects = list(result.get("projects") or [])
    seen = {entry.get("name") for entry in projects if isinstance(entry, dict)}

    for entry in raw.get("workstreams") or []:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        directory = entry.get("directory") or entry.get("path")
        if not name or not directory:
            logger.info(f"Ignoring workstream without directory: {name or 'unnamed'}")
            continue
        if name not in seen:
            projects.append({"name": name, "path": directory})
            seen.add(name)

    result["projects"] = projects
    return result


class ConfigService:
    """Loads, caches and saves the tracker's AppConfig.

    A missing, unreadable or invalid file never stops the tracker: the
    problem is logged and defaults are used.
    """

    def __init__(self, config_path: str | Path = DEFAULT_CONFIG_PATH):
        self.config_path = Path(config_path).expanduser()
        self._config: AppConfig | None = None

    def _read_raw(self) -> dict[str, Any] | None:
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, using defaults")
            return None
        try:
            raw = yaml.safe_load(self.config_path.read_text())
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Cannot read {self.config_path}: {e}, using defaults")
            return None
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"{self.config_path} is not a mapping, using defaults")
            return None
        return raw

    def load(self) -> AppConfig:
        """Read the config file and cache the validated result."""
        raw = self._read_raw()
        config = AppConfig()
        if raw:
            try:
                config = AppConfig.model_validate(migrate_workstreams(raw))
            except ValidationError as e:
                logger.warning(f"Invalid config in {self.config_path}: {e}, using defaults")
        self._config = config
        logger.debug(f"Loaded config with {len(config.projects)} projects")
        return config

    def get_config(self) -> AppConfig:
        """Return the cached config, loading it on first use."""
        return self._config if self._config is not None else self.load()

    def reload(self) -> AppConfig:
        self._config = None
        return self.load()

    def save(self, config: AppConfig | None = None) -> bool:
        """Write ``config`` (or the cached config) back as YAML.

        Returns:
            True on success, False if there is nothing to save or the write
            failed.
        """
        config = config or self._config
        if config is None:
            return False

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            self.config_path.write_text(
                yaml.safe_dump(
                    config.model_dump(mode="json"),
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            )
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error saving config to {self.config_path}: {e}")
            return False
        self._config = config
        return True


_config_service: ConfigService | None = None


def get_config_service(config_path: str | Path = DEFAULT_CONFIG_PATH) -> ConfigService:
    """Return the process-wide ConfigService, creating it on first call.

    ``config_path`` is only honoured on the first call.
    """
    global _config_service
    if _config_service is None:
        _config_service = ConfigService(config_path)
    return _config_service


def reset_config_service() -> None:
    """Drop the process-wide ConfigService (for testing)."""
    global _config_service
    _config_service = None
