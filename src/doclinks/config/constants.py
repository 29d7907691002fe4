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

"""Shared configuration defaults for doclinks."""

from __future__ import annotations

from typing import Final

CONFIG_VERSION: Final[int] = 0
CONFIG_FILENAMES: Final[tuple[str, ...]] = ("doclinks.toml", ".doclinks.toml", "pyproject.toml")
DEFAULT_EXTENSIONS: Final[tuple[str, ...]] = (".html",)
DEFAULT_EXTERNAL_SCHEMES: Final[tuple[str, ...]] = (
    "http:",
    "https:",
    "javascript:",
    "ftp:",
    "irc:",
    "data:",
)
DEFAULT_MAX_REDIRECT_DEPTH: Final[int] = 16

__all__ = [
    "CONFIG_FILENAMES",
    "CONFIG_VERSION",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_EXTERNAL_SCHEMES",
    "DEFAULT_MAX_REDIRECT_DEPTH",
]
