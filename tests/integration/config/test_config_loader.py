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

"""Integration tests for configuration discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from doclinks.config import load_config, load_config_with_metadata
from doclinks.config.models import CheckerConfig, ConfigReadError, InvalidConfigFileError

pytestmark = pytest.mark.integration


def test_defaults_when_nothing_is_found(tmp_path: Path) -> None:
    loaded = load_config_with_metadata(search_dir=tmp_path)

    assert loaded.path is None
    assert loaded.config == CheckerConfig()


def test_dedicated_file_wins_over_pyproject(tmp_path: Path) -> None:
    _ = (tmp_path / "doclinks.toml").write_text('exclude = ["a.html"]\n', encoding="utf-8")
    _ = (tmp_path / "pyproject.toml").write_text('[tool.doclinks]\nexclude = ["b.html"]\n', encoding="utf-8")

    loaded = load_config_with_metadata(search_dir=tmp_path)

    assert loaded.path == (tmp_path / "doclinks.toml").resolve()
    assert loaded.config.exclude == ["a.html"]


def test_hidden_file_is_discovered(tmp_path: Path) -> None:
    _ = (tmp_path / ".doclinks.toml").write_text("max_redirect_depth = 2\n", encoding="utf-8")

    loaded = load_config_with_metadata(search_dir=tmp_path)

    assert loaded.config.max_redirect_depth == 2


def test_pyproject_table_is_used(tmp_path: Path) -> None:
    _ = (tmp_path / "pyproject.toml").write_text(
        '[project]\nname = "x"\n\n[tool.doclinks]\nextensions = ["htm"]\n',
        encoding="utf-8",
    )

    loaded = load_config_with_metadata(search_dir=tmp_path)

    assert loaded.path == (tmp_path / "pyproject.toml").resolve()
    assert loaded.config.extensions == [".htm"]


def test_pyproject_without_table_falls_back_to_defaults(tmp_path: Path) -> None:
    _ = (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")

    loaded = load_config_with_metadata(search_dir=tmp_path)

    assert loaded.path is None


def test_pyproject_section_must_be_a_table(tmp_path: Path) -> None:
    _ = (tmp_path / "pyproject.toml").write_text('[tool]\ndoclinks = "yes"\n', encoding="utf-8")

    with pytest.raises(InvalidConfigFileError, match="must be a TOML table"):
        _ = load_config_with_metadata(search_dir=tmp_path)


def test_explicit_path_is_used(tmp_path: Path) -> None:
    config_path = tmp_path / "custom.toml"
    _ = config_path.write_text('exclude = ["std/x.html"]\n', encoding="utf-8")

    config = load_config(config_path)

    assert config.exclude == ["std/x.html"]


def test_explicit_relative_path_uses_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ = (tmp_path / "custom.toml").write_text("max_redirect_depth = 1\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    loaded = load_config_with_metadata(Path("custom.toml"))

    assert loaded.config.max_redirect_depth == 1
    assert loaded.path == (tmp_path / "custom.toml").resolve()


def test_explicit_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigReadError, match="Unable to read"):
        _ = load_config(tmp_path / "absent.toml")


def test_explicit_pyproject_without_table_raises(tmp_path: Path) -> None:
    config_path = tmp_path / "pyproject.toml"
    _ = config_path.write_text('[project]\nname = "x"\n', encoding="utf-8")

    with pytest.raises(InvalidConfigFileError, match=r"does not define a \[tool.doclinks\] table"):
        _ = load_config(config_path)


def test_malformed_toml_raises_read_error(tmp_path: Path) -> None:
    _ = (tmp_path / "doclinks.toml").write_text("exclude = [\n", encoding="utf-8")

    with pytest.raises(ConfigReadError):
        _ = load_config_with_metadata(search_dir=tmp_path)


def test_invalid_values_raise_invalid_config(tmp_path: Path) -> None:
    config_path = tmp_path / "doclinks.toml"
    _ = config_path.write_text("max_redirect_depth = -3\n", encoding="utf-8")

    with pytest.raises(InvalidConfigFileError) as excinfo:
        _ = load_config(config_path)

    assert excinfo.value.path == config_path.resolve()


def test_search_uses_cwd_by_default(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _ = (tmp_path / "doclinks.toml").write_text('exclude = ["z.html"]\n', encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    assert load_config().exclude == ["z.html"]
