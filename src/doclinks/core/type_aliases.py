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

"""Domain-specific type aliases used across doclinks."""

from __future__ import annotations

from typing import NewType

RelPath = NewType("RelPath", str)
"""POSIX path of a document relative to the corpus root."""

AnchorId = NewType("AnchorId", str)
"""Identifier that a URL fragment may address inside a document."""

__all__ = ["AnchorId", "RelPath"]
