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

"""Translate extracted ``href`` values into candidate corpus paths."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from doclinks._internal.exceptions import DoclinksError
from doclinks.config.constants import DEFAULT_EXTERNAL_SCHEMES
from doclinks.core.type_aliases import RelPath

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

LINE_NUMBER_FRAGMENT: Final[re.Pattern[str]] = re.compile(r"[0-9]+(-[0-9]+)?")


class PathEscapeError(DoclinksError):
    """Raised when a link cannot be expressed as a path inside the corpus root.

    Covers absolute paths and ``..`` segments that climb above the root. Both
    mean the corpus is not self-contained, so the run is aborted.
    """

    def __init__(self, source: Path, href: str, reason: str) -> None:
        """Initialize the exception.

        Args:
            source: Document containing the link.
            href: Offending link value (including its ``<base>`` prefix).
            reason: Short explanation of the violation.
        """
        self.source = source
        self.href = href
        self.reason = reason
        super().__init__(f"{source}: cannot resolve `{href}`: {reason}")


@dataclass(slots=True, frozen=True)
class ResolvedLink:
    """On-disk candidate for a link, not yet checked for existence.

    Attributes:
        path: Absolute candidate path under the corpus root.
        fragment: Fragment without ``#``; ``None`` when absent or empty.
    """

    path: Path
    fragment: str | None = None


def is_external(href: str, schemes: Sequence[str] = DEFAULT_EXTERNAL_SCHEMES) -> bool:
    """Return True when ``href`` starts with one of the external scheme prefixes."""
    return href.startswith(tuple(schemes))


def is_line_number_fragment(fragment: str) -> bool:
    """Return True for ``#12`` / ``#12-20`` style fragments.

    Such fragments are highlighted by client-side script in source views and
    never correspond to an ``id`` in the page.
    """
    return LINE_NUMBER_FRAGMENT.fullmatch(fragment) is not None


def split_href(href: str) -> tuple[str, str | None]:
    """Split ``href`` into its path portion and fragment.

    The query string is discarded. An empty fragment (``page.html#``) is
    reported as ``None``.
    """
    url, hash_sign, fragment = href.partition("#")
    url = url.partition("?")[0]
    return url, (fragment if hash_sign and fragment else None)


def relative_to_root(path: Path, root: Path) -> RelPath:
    """Return ``path`` as a POSIX string relative to ``root``.

    Paths outside the root are returned unchanged (as POSIX text) so they can
    still be shown in diagnostics.
    """
    try:
        return RelPath(path.relative_to(root).as_posix())
    except ValueError:
        return RelPath(path.as_posix())


def join_url(source: Path, url: str, *, root: Path, href: str | None = None) -> Path:
    """Resolve ``url`` against the directory of ``source``.

    ``.`` segments are ignored, ``..`` drops the previous segment and anything
    else is appended.

    Args:
        source: Document the URL appears in (must live under ``root``).
        url: Relative URL path, already stripped of query and fragment.
        root: Corpus root.
        href: Original link text, used in error messages.

    Returns:
        Absolute candidate path.

    Raises:
        PathEscapeError: For absolute URLs or ``..`` above the root.
    """
    shown = href if href is not None else url
    if url.startswith("/"):
        raise PathEscapeError(source, shown, "absolute paths are not supported")
    try:
        segments = list(source.parent.relative_to(root).parts)
    except ValueError as exc:
        raise PathEscapeError(source, shown, "document lies outside the corpus root") from exc
    for part in url.split("/"):
        if part in {"", "."}:
            continue
        if part == "..":
            if not segments:
                raise PathEscapeError(source, shown, "`..` climbs above the corpus root")
            segments.pop()
            continue
        segments.append(part)
    return root.joinpath(*segments)


def resolve_href(
    source: Path,
    href: str,
    base: str = "",
    *,
    root: Path,
    external_schemes: Sequence[str] = DEFAULT_EXTERNAL_SCHEMES,
) -> ResolvedLink | None:
    """Resolve a link found in ``source`` to a candidate path and fragment.

    Args:
        source: Absolute path of the document containing the link.
        href: Raw attribute value.
        base: ``<base>`` URL in effect for the link ("" when none).
        root: Absolute corpus root.
        external_schemes: URL prefixes that are ignored.

    Returns:
        The resolved link, or ``None`` when ``href`` is external.

    Raises:
        PathEscapeError: If the link leaves the corpus root.
    """
    if is_external(href, external_schemes):
        return None
    url, fragment = split_href(href)
    if not base and not url:
        return ResolvedLink(path=source, fragment=fragment)
    combined = f"{base.rstrip('/')}/{url}" if base and not url.startswith("/") else (url or base)
    return ResolvedLink(path=join_url(source, combined, root=root, href=href), fragment=fragment)


__all__ = [
    "LINE_NUMBER_FRAGMENT",
    "PathEscapeError",
    "ResolvedLink",
    "is_external",
    "is_line_number_fragment",
    "join_url",
    "relative_to_root",
    "resolve_href",
    "split_href",
]
