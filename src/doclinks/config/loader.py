# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration discovery and loading for doclinks.

Configuration lives in ``doclinks.toml`` / ``.doclinks.toml`` (top-level keys)
or in the ``[tool.doclinks]`` table of ``pyproject.toml``. Files are looked up
in the current working directory unless an explicit path is given.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from pydantic import ValidationError

from doclinks.compat import tomllib
from doclinks.core.model_types import LogComponent
from doclinks.logging import structured_extra

from .constants import CONFIG_FILENAMES
from .models import (
    CheckerConfig,
    ConfigModel,
    ConfigReadError,
    InvalidConfigFileError,
    model_to_config,
)

logger: logging.Logger = logging.getLogger("doclinks.config")


@dataclass(slots=True, frozen=True)
class LoadedConfig:
    """Container for a loaded configuration and its source path.

    Attributes:
        config: Parsed configuration instance.
        path: Filesystem path the configuration was loaded from, or None when
            defaults are used.
    """

    config: CheckerConfig
    path: Path | None


def load_config(explicit_path: Path | None = None) -> CheckerConfig:
    """Load doclinks configuration from a TOML file or use defaults.

    Args:
        explicit_path: Optional explicit configuration file.

    Returns:
        The resolved ``CheckerConfig``.
    """
    return load_config_with_metadata(explicit_path).config


def load_config_with_metadata(
    explicit_path: Path | None = None,
    *,
    search_dir: Path | None = None,
) -> LoadedConfig:
    """Load doclinks configuration along with the file it came from.

    When ``explicit_path`` is given only that file is consulted and it must
    contain doclinks settings. Otherwise ``doclinks.toml``, ``.doclinks.toml``
    and ``pyproject.toml`` are tried in order inside ``search_dir`` (default:
    the current working directory); the first one carrying doclinks data wins.
    A ``pyproject.toml`` without a ``[tool.doclinks]`` table is skipped.

    Args:
        explicit_path: Optional explicit configuration file.
        search_dir: Directory searched when no explicit path is given.

    Returns:
        LoadedConfig: Parsed configuration and the path it originated from.

    Raises:
        ConfigReadError: If a candidate file cannot be read or parsed as TOML.
        InvalidConfigFileError: If a candidate file fails validation.
    """
    if explicit_path is not None:
        candidate = explicit_path if explicit_path.is_absolute() else (Path.cwd() / explicit_path)
        if not candidate.is_file():
            raise ConfigReadError(candidate, FileNotFoundError("no such file"))
        loaded = _load_candidate(candidate.resolve(), explicit=True)
        if loaded is not None:
            return loaded

    base_dir = (search_dir or Path.cwd()).resolve()
    for name in CONFIG_FILENAMES:
        candidate = base_dir / name
        if not candidate.is_file():
            continue
        loaded = _load_candidate(candidate, explicit=False)
        if loaded is not None:
            return loaded

    logger.debug(
        "No doclinks configuration found in %s; using defaults",
        base_dir,
        extra=structured_extra(LogComponent.CONFIG, path=base_dir),
    )
    return LoadedConfig(config=CheckerConfig(), path=None)


def _load_candidate(candidate: Path, *, explicit: bool) -> LoadedConfig | None:
    try:
        raw_map: dict[str, object] = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        raise ConfigReadError(candidate, exc) from exc

    payload = _extract_payload(candidate, raw_map)
    if payload is None:
        if explicit:
            message = f"{candidate.name} does not define a [tool.doclinks] table"
            raise InvalidConfigFileError(candidate, ValueError(message))
        return None

    try:
        model = ConfigModel.model_validate(payload)
    except ValidationError as exc:
        raise InvalidConfigFileError(candidate, exc) from exc

    logger.debug(
        "Loaded doclinks configuration from %s",
        candidate,
        extra=structured_extra(LogComponent.CONFIG, path=candidate),
    )
    return LoadedConfig(config=model_to_config(model), path=candidate)


def _extract_payload(candidate: Path, raw_map: dict[str, object]) -> dict[str, object] | None:
    """Return the doclinks table of a parsed TOML document.

    Args:
        candidate: Source configuration path.
        raw_map: Data parsed from the TOML document.

    Returns:
        Mapping to validate, or None when a ``pyproject.toml`` has no doclinks table.

    Raises:
        InvalidConfigFileError: If ``[tool.doclinks]`` exists but is not a table.
    """
    if candidate.name != "pyproject.toml":
        return raw_map
    tool_section = raw_map.get("tool")
    if not isinstance(tool_section, dict):
        return None
    section = cast("dict[str, object]", tool_section).get("doclinks")
    if section is None:
        return None
    if not isinstance(section, dict):
        message = "[tool.doclinks] must be a TOML table"
        raise InvalidConfigFileError(candidate, ValueError(message))
    return cast("dict[str, object]", section)


__all__ = ["LoadedConfig", "load_config", "load_config_with_metadata"]
