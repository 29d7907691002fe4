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

"""Detection and bounded following of soft-redirect pages.

Generated documentation replaces moved pages with a small stub whose seventh
line reads ``<p>Redirecting to <a href="new/location.html">...``. Only that
line is inspected; the layout is fixed by the generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import islice
from typing import TYPE_CHECKING, Final

from doclinks._internal.exceptions import DoclinksError
from doclinks.config.constants import DEFAULT_MAX_REDIRECT_DEPTH

from .extract import iter_lines
from .resolve import join_url, split_href

if TYPE_CHECKING:
    from pathlib import Path

    from doclinks.core.type_aliases import RelPath

REDIRECT_MARKER: Final[str] = "Redirecting to <a href="
REDIRECT_LINE_INDEX: Final[int] = 6


class BrokenRedirectError(DoclinksError):
    """Raised when a followed redirect does not lead to a readable document."""

    def __init__(self, target: RelPath, reason: str = "target does not exist") -> None:
        """Initialize the exception.

        Args:
            target: Corpus-relative path the redirect pointed at.
            reason: Short explanation used in logs.
        """
        self.target = target
        self.reason = reason
        super().__init__(f"broken redirect to {target}: {reason}")


class RedirectLoopError(BrokenRedirectError):
    """Raised when a redirect chain revisits a page or grows past its bound."""

    def __init__(self, target: RelPath, chain: tuple[RelPath, ...]) -> None:
        """Initialize the exception.

        Args:
            target: Page at which the chain was cut.
            chain: Redirect pages followed before ``target``.
        """
        self.chain = chain
        hops = " -> ".join((*chain, target))
        super().__init__(target, f"redirect chain does not terminate ({hops})")


def find_redirect(contents: str) -> str | None:
    """Return the redirect URL of a soft-redirect page, or None.

    Args:
        contents: Raw document text.

    Returns:
        The quoted URL following the redirect marker on line seven, or ``None``
        when the document is not a redirect (or the quote is never closed).
    """
    line = next(islice(iter_lines(contents), REDIRECT_LINE_INDEX, None), None)
    if line is None:
        return None
    marker_at = line.find(REDIRECT_MARKER)
    if marker_at < 0:
        return None
    rest = line[marker_at + len(REDIRECT_MARKER) :]
    opening = rest.find('"')
    if opening < 0:
        return None
    closing = rest.find('"', opening + 1)
    if closing < 0:
        return None
    return rest[opening + 1 : closing]


def redirect_target(redirect_file: Path, url: str, *, root: Path) -> Path:
    """Resolve a redirect URL against the directory of the redirect page.

    Query string and fragment of ``url`` are discarded; an empty URL points
    back at the redirect page itself (and is then caught as a loop).
    """
    path_part, _ = split_href(url)
    if not path_part:
        return redirect_file
    return join_url(redirect_file, path_part, root=root, href=url)


def _empty_chain() -> list[RelPath]:
    return []


@dataclass(slots=True)
class RedirectChain:
    """Visited-set and depth guard for one redirect resolution.

    Attributes:
        max_depth: Maximum number of redirect pages that may be followed.
        visited: Redirect pages followed so far, in order.
    """

    max_depth: int = DEFAULT_MAX_REDIRECT_DEPTH
    visited: list[RelPath] = field(default_factory=_empty_chain)

    def enter(self, page: RelPath) -> None:
        """Record that ``page`` (a redirect) is being followed.

        Raises:
            RedirectLoopError: If ``page`` was already followed in this chain or
                the chain already holds ``max_depth`` pages.
        """
        if page in self.visited or len(self.visited) >= self.max_depth:
            raise RedirectLoopError(page, tuple(self.visited))
        self.visited.append(page)


__all__ = [
    "REDIRECT_LINE_INDEX",
    "REDIRECT_MARKER",
    "BrokenRedirectError",
    "RedirectChain",
    "RedirectLoopError",
    "find_redirect",
    "redirect_target",
]
