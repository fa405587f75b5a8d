"""Configuration helpers for batch scoring jobs."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

LOGGER = logging.getLogger(__name__)


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Configuration file '{file_path}' is not valid JSON: {exc}") from exc
    else:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - dependency optional
            raise ConfigurationError(
                "YAML configuration requires the 'pyyaml' package to be installed"
            ) from exc
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Configuration file '{file_path}' is not valid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping at the top level")
    return data


def get_section(config: Mapping[str, Any], name: str) -> Dict[str, Any]:
    """Return a named top-level section, or an empty dict when it is absent."""

    section = config.get(name)
    if section is None:
        LOGGER.debug("Configuration has no '%s' section", name)
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Configuration section '{name}' must be a mapping")
    return section


def get_column_mapping(config: Mapping[str, Any]) -> Dict[str, Union[str, List[str]]]:
    """Return the ``column_mapping`` section with values as column names or lists of names."""

    mapping = get_section(config, "column_mapping")
    for field_name, columns in mapping.items():
        if isinstance(columns, str):
            continue
        if not isinstance(columns, list) or not all(isinstance(column, str) for column in columns):
            raise ConfigurationError(
                f"Column mapping for '{field_name}' must be a column name or a list of column names"
            )
    return mapping
