# Copyright 2025 icecake0141
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# This file was created or modified with the assistance of an AI (Large Language Model).
# Review required for correctness, security, and licensing.

"""
Config file support for cxn.

This module loads the host list and timing settings from a YAML file.

Lookup order: --config PATH > $XDG_CONFIG_HOME/cxn/cxn.yml > ./cxn.yml > defaults
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from cxn.models import HostSpec

logger = logging.getLogger(__name__)

PROJECT_NAME = "cxn"
CONFIG_FILENAME = f"{PROJECT_NAME}.yml"

DEFAULT_TIMEOUT_MS = 1000
DEFAULT_WATCH_INTERVAL = 5

# Mapping of config field names to their expected Python types
_CONFIG_FIELD_TYPES: Dict[str, type] = {
    "timeout": int,
    "interval": int,
}

_HOST_BOOL_FIELDS = ("ping", "dns")
_HOST_FIELDS = frozenset(("name", "address") + _HOST_BOOL_FIELDS)

_BOOL_TRUE_VALUES = frozenset(("true", "yes", "1", "on"))
_BOOL_FALSE_VALUES = frozenset(("false", "no", "0", "off"))


@dataclass(frozen=True)
class Config:
    """Settings consumed by the check engine. Read once, never reloaded mid-run."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    interval: int = DEFAULT_WATCH_INTERVAL
    hosts: Tuple[HostSpec, ...] = ()
    source: Optional[str] = None

    @property
    def timeout(self) -> float:
        """Per-probe timeout in seconds."""
        return self.timeout_ms / 1000.0


def default_config_path() -> str:
    """Primary config location, honoring XDG_CONFIG_HOME."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.expanduser("~/.config")
    return os.path.join(config_home, PROJECT_NAME, CONFIG_FILENAME)


def _parse_bool(value: str) -> bool:
    """Parse a boolean value from a string representation."""
    lower = value.lower()
    if lower in _BOOL_TRUE_VALUES:
        return True
    if lower in _BOOL_FALSE_VALUES:
        return False
    raise ValueError(f"Cannot parse '{value}' as a boolean. Use true/false, yes/no, 1/0, or on/off.")


def _coerce_bool(key: str, raw_value: Any) -> bool:
    if isinstance(raw_value, bool):
        return raw_value
    try:
        return _parse_bool(str(raw_value))
    except ValueError as exc:
        raise ValueError(f"Invalid value for host field '{key}': {exc}") from exc


def _coerce_field(key: str, raw_value: Any) -> Any:
    """Coerce a raw config value to the expected type for the given field name."""
    if key not in _CONFIG_FIELD_TYPES:
        return raw_value
    field_type = _CONFIG_FIELD_TYPES[key]
    if isinstance(raw_value, field_type) and not isinstance(raw_value, bool):
        return raw_value
    try:
        if isinstance(raw_value, bool):
            raise TypeError("booleans are not numbers")
        return field_type(raw_value)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Invalid value for config field '{key}': expected {field_type.__name__}, got {raw_value!r}") from exc


def parse_host_entry(entry: Any, index: int, path: str) -> HostSpec:
    """
    Build a HostSpec from one item of the ``hosts`` list.

    Raises:
        ValueError: If the entry is not a mapping or lacks a name or address.
    """
    if not isinstance(entry, dict):
        raise ValueError(f"Host #{index + 1} in '{path}' must be a mapping, got {type(entry).__name__}.")

    for key in entry:
        if key not in _HOST_FIELDS:
            logger.warning("Unknown key '%s' for host #%d in '%s'; ignoring.", key, index + 1, path)

    name = str(entry.get("name") or "").strip()
    address = str(entry.get("address") or "").strip()
    if not name:
        raise ValueError(f"Host #{index + 1} in '{path}' is missing a 'name'.")
    if not address:
        raise ValueError(f"Host '{name}' in '{path}' is missing an 'address'.")

    flags = {key: _coerce_bool(key, entry[key]) if entry.get(key) is not None else False for key in _HOST_BOOL_FIELDS}
    return HostSpec(name=name, address=address, want_ping=flags["ping"], want_dns=flags["dns"])


def parse_config_data(data: Any, path: str) -> Config:
    """
    Validate the parsed YAML document and build a Config.

    Raises:
        ValueError: On invalid structure or field values.
    """
    if data is None:
        return Config(source=path)
    if not isinstance(data, dict):
        raise ValueError(f"Config file '{path}' must contain a YAML mapping at the top level, got {type(data).__name__}.")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key == "hosts":
            continue
        if key not in _CONFIG_FIELD_TYPES:
            logger.warning("Unknown config key '%s' in '%s'; ignoring.", key, path)
            continue
        if value is None:
            continue
        coerced = _coerce_field(key, value)
        if coerced <= 0:
            raise ValueError(f"Config field '{key}' in '{path}' must be positive, got {coerced}.")
        values[key] = coerced

    hosts_section = data.get("hosts")
    hosts: List[HostSpec] = []
    if hosts_section is not None:
        if not isinstance(hosts_section, list):
            raise ValueError(f"The 'hosts' section in '{path}' must be a YAML list.")
        hosts = [parse_host_entry(entry, index, path) for index, entry in enumerate(hosts_section)]

    return Config(
        timeout_ms=values.get("timeout", DEFAULT_TIMEOUT_MS),
        interval=values.get("interval", DEFAULT_WATCH_INTERVAL),
        hosts=tuple(hosts),
        source=path,
    )


def load_config_file(path: str) -> Config:
    """
    Load and parse a YAML config file.

    Uses ``yaml.safe_load`` to prevent arbitrary code execution.

    Raises:
        ValueError: On read errors, parse errors or invalid file content.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in config file '{path}': {exc}") from exc
    except OSError as exc:
        raise ValueError(f"Cannot read config file '{path}': {exc}") from exc

    config = parse_config_data(data, path)
    logger.info("Loaded config from: %s", path)
    return config


def load_config(path: Optional[str] = None) -> Config:
    """
    Load settings, walking the fallback chain when no path is given.

    An explicit ``path`` must load successfully. The implicit locations are
    tried in order; a broken file there is logged and skipped.

    Args:
        path: Explicit config file path (``--config``)

    Returns:
        The loaded Config, or defaults with no hosts when nothing was found

    Raises:
        ValueError: If an explicit config file cannot be loaded.
    """
    if path is not None:
        return load_config_file(os.path.expanduser(path))

    for candidate in (default_config_path(), CONFIG_FILENAME):
        if not os.path.exists(candidate):
            continue
        try:
            return load_config_file(candidate)
        except ValueError as exc:
            logger.warning("Failed to load config from %s: %s", candidate, exc)

    logger.info("No config file found, using defaults")
    return Config()
