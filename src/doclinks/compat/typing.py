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

"""Typing constructs that moved into ``typing`` after Python 3.10.

Type checkers always see the ``typing_extensions`` versions; at runtime the
stdlib object is used when the interpreter provides it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing_extensions import Self, override
else:
    import typing as _typing

    import typing_extensions as _typing_extensions

    Self = getattr(_typing, "Self", _typing_extensions.Self)
    override = getattr(_typing, "override", _typing_extensions.override)

__all__ = ["Self", "override"]
