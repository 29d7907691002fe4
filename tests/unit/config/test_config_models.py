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

"""Unit tests for configuration models and coercion helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from doclinks.config.constants import DEFAULT_EXTERNAL_SCHEMES, DEFAULT_MAX_REDIRECT_DEPTH
from doclinks.config.models import (
    CheckerConfig,
    ConfigFieldTypeError,
    ConfigModel,
    UnsupportedConfigVersionError,
    dedupe_preserve,
    ensure_list,
    model_to_config,
    normalise_suffixes,
)

pytestmark = pytest.mark.unit


def test_checker_config_defaults() -> None:
    config = CheckerConfig()

    assert config.exclude == []
    assert config.extensions == [".html"]
    assert config.external_schemes == list(DEFAULT_EXTERNAL_SCHEMES)
    assert config.max_redirect_depth == DEFAULT_MAX_REDIRECT_DEPTH


def test_with_exclusions_returns_new_config() -> None:
    config = CheckerConfig(exclude=["a/b.html"])

    updated = config.with_exclusions(["/c/d.html/", "a/b.html", "  "])

    assert updated.exclude == ["a/b.html", "c/d.html"]
    assert config.exclude == ["a/b.html"]
    assert updated.extensions == config.extensions
    assert updated.extensions is not config.extensions


def test_dedupe_preserve_keeps_first_seen_order() -> None:
    assert dedupe_preserve(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


def test_normalise_suffixes_strips_slashes_and_blanks() -> None:
    assert normalise_suffixes([" std/x.html ", "/y.html", "z\\w.html", "", "/"]) == [
        "std/x.html",
        "y.html",
        "z/w.html",
    ]


def test_ensure_list_accepts_scalars_and_sequences() -> None:
    assert ensure_list(None, field="exclude") == []
    assert ensure_list(" one ", field="exclude") == ["one"]
    assert ensure_list("   ", field="exclude") == []
    assert ensure_list(["a", " b ", ""], field="exclude") == ["a", "b"]


def test_ensure_list_rejects_non_strings() -> None:
    with pytest.raises(ConfigFieldTypeError, match="exclude must be a list of strings"):
        _ = ensure_list(["a", 1], field="exclude")
    with pytest.raises(ConfigFieldTypeError):
        _ = ensure_list(3, field="exclude")


def test_config_model_normalises_values() -> None:
    model = ConfigModel.model_validate(
        {
            "exclude": ["/std/a.html", "std/a.html"],
            "extensions": ["HTML", ".htm", "html"],
            "external_schemes": ["mailto", "https:"],
            "max_redirect_depth": 4,
        },
    )

    assert model.exclude == ["std/a.html"]
    assert model.extensions == [".html", ".htm"]
    assert model.external_schemes == ["mailto:", "https:"]
    assert model.max_redirect_depth == 4


def test_config_model_accepts_single_string_exclude() -> None:
    model = ConfigModel.model_validate({"exclude": "std/a.html"})

    assert model.exclude == ["std/a.html"]


def test_config_model_rejects_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        _ = ConfigModel.model_validate({"excludes": ["typo.html"]})


@pytest.mark.parametrize("depth", [-1, "3", True, 1.5])
def test_config_model_rejects_bad_redirect_depth(depth: object) -> None:
    with pytest.raises(ValidationError, match="max_redirect_depth must be a non-negative integer"):
        _ = ConfigModel.model_validate({"max_redirect_depth": depth})


def test_config_model_rejects_non_string_lists() -> None:
    with pytest.raises(ValidationError, match="extensions must be a list of strings"):
        _ = ConfigModel.model_validate({"extensions": [1, 2]})


def test_config_model_rejects_unsupported_version() -> None:
    with pytest.raises(ValidationError, match="Unsupported config_version 3; expected 0"):
        _ = ConfigModel.model_validate({"config_version": 3})


def test_unsupported_version_error_carries_versions() -> None:
    error = UnsupportedConfigVersionError(2, 0)

    assert (error.provided, error.expected) == (2, 0)
    assert isinstance(error, ValueError)


def test_model_to_config_copies_lists() -> None:
    model = ConfigModel.model_validate({"exclude": ["x.html"], "max_redirect_depth": 0})

    config = model_to_config(model)

    assert config == CheckerConfig(exclude=["x.html"], max_redirect_depth=0)
    assert config.exclude is not model.exclude
