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

"""Shared Hypothesis strategies for property-based tests."""

from __future__ import annotations

from hypothesis import strategies as st

_SAFE_TEXT = st.characters(
    exclude_categories=("Cs", "Cc", "Zl", "Zp"),
    exclude_characters="\"'\n\r",
)


def path_segments() -> st.SearchStrategy[str]:
    """Return a strategy yielding single file or directory names."""
    return st.from_regex(r"[a-zA-Z0-9_][a-zA-Z0-9_.-]{0,11}", fullmatch=True).filter(
        lambda segment: segment not in {".", ".."},
    )


def relative_paths(max_depth: int = 4) -> st.SearchStrategy[list[str]]:
    """Return a strategy yielding lists of segments forming a relative path."""
    return st.lists(path_segments(), min_size=1, max_size=max_depth)


def attribute_values(max_size: int = 30) -> st.SearchStrategy[str]:
    """Return a strategy yielding text that may sit between double quotes on one line."""
    return st.text(alphabet=_SAFE_TEXT, max_size=max_size)


def anchor_ids(max_size: int = 20) -> st.SearchStrategy[str]:
    """Return a strategy yielding non-empty anchor ids, including characters that need escaping."""
    return st.text(alphabet=_SAFE_TEXT, min_size=1, max_size=max_size).filter(lambda value: not value.startswith("#"))


def fragments() -> st.SearchStrategy[str]:
    """Return a strategy yielding arbitrary fragment text, digits-only values included."""
    return st.one_of(st.from_regex(r"[0-9]{1,5}(-[0-9]{1,5})?", fullmatch=True), st.text(max_size=12))
