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

"""Quote-aware attribute scanner for raw HTML text.

This is deliberately not an HTML parser. Each line is searched for an
attribute token such as ``" href"``; a hit only counts when it is followed by
optional spaces, ``=``, optional spaces and a quoted value. Anything else is
skipped silently, so malformed markup never aborts a scan.

A ``<base href="...">`` tag does not produce a value; it replaces the base URL
reported alongside every following value of the same document. Generated
corpora always emit ``<base>`` before the first link it applies to, which is
what makes a single forward pass sufficient.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, NamedTuple

if TYPE_CHECKING:
    from collections.abc import Iterator

ID_ATTR: Final[str] = " id"
HREF_ATTR: Final[str] = " href"
_BASE_TAG: Final[str] = "<base"
_QUOTES: Final[str] = "\"'"


class Attribute(NamedTuple):
    """An attribute value located in a document.

    Attributes:
        value: Text between the quotes.
        line: 1-based line number of the attribute.
        base: ``<base>`` URL in effect at that point ("" when none).
    """

    value: str
    line: int
    base: str


def iter_lines(contents: str) -> Iterator[str]:
    """Yield the lines of ``contents`` split on ``\\n`` only.

    A trailing ``\\r`` is dropped from every line and a final empty line (text
    ending in a newline) is not yielded. ``str.splitlines`` is avoided because it
    also breaks on form feeds and Unicode separators, which would shift line
    numbers relative to what editors display.
    """
    if not contents:
        return
    lines = contents.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line.removesuffix("\r")


def _first_quote(text: str) -> int:
    positions = [pos for pos in (text.find(quote) for quote in _QUOTES) if pos >= 0]
    return min(positions) if positions else -1


def iter_attributes(contents: str, attr: str) -> Iterator[Attribute]:
    """Yield every quoted value of ``attr`` found in ``contents``.

    Args:
        contents: Raw document text.
        attr: Attribute token including its leading space, e.g. ``" href"``.

    Yields:
        ``Attribute`` tuples in document order.
    """
    base = ""
    for index, line in enumerate(iter_lines(contents)):
        rest_of_line = line
        while (start := rest_of_line.find(attr)) >= 0:
            is_base = rest_of_line[:start].endswith(_BASE_TAG)
            rest = rest_of_line[start + len(attr) :]
            rest_of_line = rest

            pos_equals = rest.find("=")
            if pos_equals < 0 or rest[:pos_equals].lstrip(" "):
                continue
            rest = rest[pos_equals + 1 :]

            pos_quote = _first_quote(rest)
            if pos_quote < 0 or rest[:pos_quote].lstrip(" "):
                continue
            delimiter = rest[pos_quote]
            rest = rest[pos_quote + 1 :]

            pos_close = rest.find(delimiter)
            if pos_close < 0:
                continue
            value = rest[:pos_close]
            if is_base:
                base = value
                continue
            yield Attribute(value=value, line=index + 1, base=base)


__all__ = ["HREF_ATTR", "ID_ATTR", "Attribute", "iter_attributes", "iter_lines"]
