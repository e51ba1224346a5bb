"""
Settings Module

Per-run options, loaded from config/settings.yaml.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .constants import MERGE_ROLES, VERY_SMALL_SPAN_DEG

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).parent.parent / "config" / "settings.yaml"


class SettingsError(Exception):
    """Raised when a settings file cannot be used."""
    pass


@dataclass
class PipelineConfig:
    """Configuration for shape extraction."""
    very_small_span_deg: float = VERY_SMALL_SPAN_DEG
    merge_roles: Tuple[str, ...] = MERGE_ROLES
    infer_closed_from_geometry: bool = False
    relation_bounds_fallback: bool = True
    include_relations: bool = True


def _coerce(name: str, value: Any) -> Any:
    if name == "merge_roles":
        if isinstance(value, str):
            return (value,)
        if not isinstance(value, (list, tuple)):
            raise SettingsError(f"merge_roles must be a list, got {value!r}")
        return tuple(str(role) for role in value)
    if name == "very_small_span_deg":
        try:
            span = float(value)
        except (TypeError, ValueError) as e:
            raise SettingsError(f"very_small_span_deg must be a number: {value!r}") from e
        if span < 0:
            raise SettingsError(f"very_small_span_deg must not be negative: {span}")
        return span
    if not isinstance(value, bool):
        raise SettingsError(f"{name} must be true or false, got {value!r}")
    return value


def config_from_dict(data: Dict[str, Any]) -> PipelineConfig:
    """
    Build a PipelineConfig from a settings mapping.

    Unknown keys are logged and ignored.

    Raises:
        SettingsError: If a known key has an unusable value
    """
    known = {f.name for f in fields(PipelineConfig)}
    kwargs = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting: {key}")
            continue
        kwargs[key] = _coerce(key, value)
    return PipelineConfig(**kwargs)


def load_settings(path: Optional[str] = None) -> PipelineConfig:
    """
    Load settings from YAML.

    Args:
        path: Settings file; the bundled config/settings.yaml when None

    Returns:
        PipelineConfig (defaults when no file exists)

    Raises:
        SettingsError: If the file is not valid YAML or not a mapping
    """
    settings_path = Path(path) if path else DEFAULT_SETTINGS_PATH

    if not settings_path.exists():
        if path:
            raise SettingsError(f"Settings file not found: {path}")
        logger.debug("No settings file, using defaults")
        return PipelineConfig()

    try:
        with open(settings_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {settings_path}: {e}") from e

    if data is None:
        return PipelineConfig()
    if not isinstance(data, dict):
        raise SettingsError(f"Settings must be a mapping: {settings_path}")

    # Settings may be grouped under a top-level 'shapes' section
    section = data.get("shapes", data)
    if not isinstance(section, dict):
        raise SettingsError(f"'shapes' section must be a mapping: {settings_path}")

    return config_from_dict(section)
