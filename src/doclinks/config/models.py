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

"""Configuration models for doclinks.

TOML payloads are validated by the pydantic ``ConfigModel`` and then
converted into the slotted ``CheckerConfig`` dataclass consumed by the
checker, so the rest of the code never touches pydantic objects.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from doclinks._internal.exceptions import DoclinksValidationError
from doclinks.compat import Self

from .constants import (
    CONFIG_VERSION,
    DEFAULT_EXTENSIONS,
    DEFAULT_EXTERNAL_SCHEMES,
    DEFAULT_MAX_REDIRECT_DEPTH,
)

if TYPE_CHECKING:
    from pathlib import Path


class ConfigValidationError(DoclinksValidationError):
    """Raised when configuration data contains invalid values."""


class ConfigFieldTypeError(ConfigValidationError):
    """Raised when a configuration field has an invalid type."""

    def __init__(self, field: str, expected: str = "a list of strings") -> None:
        """Initialize the exception with the offending field name.

        Args:
            field: The name of the configuration field with an invalid type.
            expected: Human readable description of the accepted type.
        """
        self.field = field
        super().__init__(f"{field} must be {expected}")


class UnsupportedConfigVersionError(ConfigValidationError):
    """Raised when a configuration file declares an unsupported schema version."""

    def __init__(self, provided: int, expected: int) -> None:
        """Initialize the exception with version information.

        Args:
            provided: The config_version value provided in the configuration file.
            expected: The config_version value expected by this version of doclinks.
        """
        self.provided = provided
        self.expected = expected
        super().__init__(f"Unsupported config_version {provided}; expected {expected}")


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with file path and underlying error.

        Args:
            path: The path to the configuration file that could not be read.
            error: The underlying exception that caused the read failure.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class InvalidConfigFileError(ConfigValidationError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with configuration file path and validation error.

        Args:
            path: The path to the configuration file that failed validation.
            error: The underlying validation exception.
        """
        self.path = path
        self.error = error
        super().__init__(f"Invalid doclinks configuration in {path}: {error}")


def _default_exclude() -> list[str]:
    return []


def _default_extensions() -> list[str]:
    return list(DEFAULT_EXTENSIONS)


def _default_external_schemes() -> list[str]:
    return list(DEFAULT_EXTERNAL_SCHEMES)


@dataclass(slots=True)
class CheckerConfig:
    """Runtime settings for a link-checking run.

    Attributes:
        exclude: Corpus-relative path suffixes whose files are skipped entirely
            (known-broken pages).
        extensions: File extensions treated as documents, with leading dot.
        external_schemes: URL prefixes that are never resolved on disk.
        max_redirect_depth: Longest soft-redirect chain followed before the
            link is reported as a broken redirect.
    """

    exclude: list[str] = field(default_factory=_default_exclude)
    extensions: list[str] = field(default_factory=_default_extensions)
    external_schemes: list[str] = field(default_factory=_default_external_schemes)
    max_redirect_depth: int = DEFAULT_MAX_REDIRECT_DEPTH

    def with_exclusions(self, extra: Iterable[str]) -> CheckerConfig:
        """Return a copy whose exclusion list also contains ``extra``."""
        return CheckerConfig(
            exclude=dedupe_preserve([*self.exclude, *normalise_suffixes(extra)]),
            extensions=list(self.extensions),
            external_schemes=list(self.external_schemes),
            max_redirect_depth=self.max_redirect_depth,
        )


def dedupe_preserve(values: Iterable[str]) -> list[str]:
    """Drop repeated values while keeping first-seen order."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def normalise_suffixes(values: Iterable[str]) -> list[str]:
    """Strip whitespace and surrounding slashes from exclusion suffixes."""
    result: list[str] = []
    for value in values:
        stripped = value.strip().replace("\\", "/").strip("/")
        if stripped:
            result.append(stripped)
    return result


def ensure_list(value: object, *, field: str) -> list[str]:
    """Convert a scalar or iterable TOML value to a list of stripped strings.

    Args:
        value: Raw TOML value.
        field: Field name used in error messages.

    Returns:
        List of non-empty strings.

    Raises:
        ConfigFieldTypeError: If the value (or one of its items) is not a string.
    """
    if value is None:
        return []
    if isinstance(value, str):
        stripped = value.strip()
        return [stripped] if stripped else []
    if not isinstance(value, Iterable):
        raise ConfigFieldTypeError(field)
    result: list[str] = []
    for item in cast("Iterable[object]", value):
        if not isinstance(item, str):
            raise ConfigFieldTypeError(field)
        stripped = item.strip()
        if stripped:
            result.append(stripped)
    return result


class ConfigModel(BaseModel):
    """Pydantic model validating the doclinks TOML table.

    Attributes:
        config_version: Schema version; only ``0`` is accepted.
        exclude: Path suffixes to skip.
        extensions: Document extensions (a leading dot is added if missing).
        external_schemes: URL prefixes to ignore.
        max_redirect_depth: Non-negative redirect chain bound.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="forbid")

    config_version: int = CONFIG_VERSION
    exclude: list[str] = Field(default_factory=_default_exclude)
    extensions: list[str] = Field(default_factory=_default_extensions)
    external_schemes: list[str] = Field(default_factory=_default_external_schemes)
    max_redirect_depth: int = DEFAULT_MAX_REDIRECT_DEPTH

    @field_validator("exclude", mode="before")
    @classmethod
    def _coerce_exclude(cls, value: object) -> list[str]:
        return normalise_suffixes(ensure_list(value, field="exclude"))

    @field_validator("extensions", mode="before")
    @classmethod
    def _coerce_extensions(cls, value: object) -> list[str]:
        items = ensure_list(value, field="extensions")
        return [item.lower() if item.startswith(".") else f".{item.lower()}" for item in items]

    @field_validator("external_schemes", mode="before")
    @classmethod
    def _coerce_schemes(cls, value: object) -> list[str]:
        items = ensure_list(value, field="external_schemes")
        return [item if item.endswith(":") else f"{item}:" for item in items]

    @field_validator("max_redirect_depth", mode="before")
    @classmethod
    def _validate_depth(cls, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            msg = "max_redirect_depth"
            raise ConfigFieldTypeError(msg, "a non-negative integer")
        return value

    @model_validator(mode="after")
    def _normalise(self) -> Self:
        if self.config_version != CONFIG_VERSION:
            raise UnsupportedConfigVersionError(self.config_version, CONFIG_VERSION)
        self.exclude = dedupe_preserve(self.exclude)
        self.extensions = dedupe_preserve(self.extensions)
        self.external_schemes = dedupe_preserve(self.external_schemes)
        return self


def model_to_config(model: ConfigModel) -> CheckerConfig:
    """Convert a validated ``ConfigModel`` into the runtime dataclass."""
    return CheckerConfig(
        exclude=list(model.exclude),
        extensions=list(model.extensions),
        external_schemes=list(model.external_schemes),
        max_redirect_depth=model.max_redirect_depth,
    )


__all__ = [
    "CheckerConfig",
    "ConfigFieldTypeError",
    "ConfigModel",
    "ConfigReadError",
    "ConfigValidationError",
    "InvalidConfigFileError",
    "UnsupportedConfigVersionError",
    "dedupe_preserve",
    "ensure_list",
    "model_to_config",
    "normalise_suffixes",
]
