"""Locate and load monoscope.yaml."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from monoscope.config.schema import MonoscopeConfig
from monoscope.errors import ConfigurationError, WorkspaceNotFoundError

CONFIG_FILENAME = "monoscope.yaml"

logger = logging.getLogger(__name__)


def find_config_file(start: Path | None = None) -> Path:
    """Find monoscope.yaml in start or any parent directory.

    Raises:
        WorkspaceNotFoundError: If no config file is found.
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    raise WorkspaceNotFoundError(str(start))


def load_config(path: Path) -> MonoscopeConfig:
    """Load and validate a config file.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML: {e}", path=str(path)) from e
    except OSError as e:
        raise ConfigurationError(f"cannot read file: {e}", path=str(path)) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigurationError("top level must be a mapping", path=str(path))

    try:
        config = MonoscopeConfig.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(errors, path=str(path)) from e

    logger.debug("loaded config %s from %s", config.name, path)
    return config
