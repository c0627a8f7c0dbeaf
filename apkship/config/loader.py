# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader for apkship release settings.

A release config is one YAML file, usually checked in next to the Android
project. Loading it is a straight line: read, parse, validate against the
frozen schema, check the schema version. The first step that fails raises,
and the run never starts. A file that was asked for by --config is never
silently replaced by defaults.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from apkship.config.exceptions import ConfigLoadError, ConfigValidationError
from apkship.config.schema import AppConfig

CURRENT_CONFIG_VERSION = "1.0.0"


def _parse_release_yaml(config_path: Path) -> dict[str, Any]:
    """
    Parse the YAML file at `config_path` into a mapping.

    Raises:
        ConfigLoadError: Missing path, directory instead of file, unreadable
            file, malformed YAML, or a top level that is not a mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")
    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        document = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(document, dict):
        raise ConfigLoadError(
            f"Config file {config_path} must hold a mapping of sections, "
            f"got {type(document).__name__}"
        )
    return document


def _major(version: str) -> str:
    return version.split(".", 1)[0]


def _check_config_version(config: AppConfig, config_path: Path) -> None:
    """Only configs written for the current major schema version are accepted."""
    declared = config.global_config.config_version
    if _major(declared) != _major(CURRENT_CONFIG_VERSION):
        raise ConfigValidationError(
            f"{config_path} declares config_version '{declared}', but this apkship "
            f"reads version {CURRENT_CONFIG_VERSION} configs"
        )


def load_config(config_path: Path) -> AppConfig:
    """
    Load a release config file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        The frozen AppConfig, with every omitted field at its default.

    Raises:
        ConfigLoadError: The file could not be read or parsed.
        ConfigValidationError: The content breaks the schema (missing
            config_version, unknown keys, wrong types) or targets another
            major schema version.
    """
    document = _parse_release_yaml(config_path)

    try:
        config = AppConfig.model_validate(document)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err

    _check_config_version(config, config_path)
    return config


def default_config() -> AppConfig:
    """The config used when no --config is given: every section at its defaults."""
    return AppConfig.model_validate({"global": {"config_version": CURRENT_CONFIG_VERSION}})
