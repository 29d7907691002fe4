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

"""Parse-once cache of corpus documents and their anchor identifiers.

Every document that is scanned or linked to gets a ``FileEntry`` keyed by its
corpus-relative path. The raw text is kept only until the walker has finished
with the file; the anchor set stays for the rest of the run because later
documents may still link into it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final, NamedTuple

from doclinks._internal.exceptions import DoclinksError
from doclinks.config.constants import DEFAULT_MAX_REDIRECT_DEPTH
from doclinks.core.model_types import DefectKind, LoadMode, LogComponent
from doclinks.core.type_aliases import AnchorId, RelPath
from doclinks.logging import structured_extra

from .extract import ID_ATTR, iter_attributes
from .redirects import BrokenRedirectError, RedirectChain, find_redirect, redirect_target
from .report import Defect
from .resolve import PathEscapeError, relative_to_root

if TYPE_CHECKING:
    from pathlib import Path

logger: logging.Logger = logging.getLogger("doclinks.cache")

_ANCHOR_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("<", "%3C"),
    (">", "%3E"),
    (" ", "%20"),
    ("?", "%3F"),
    ("'", "%27"),
    ("&", "%26"),
    (",", "%2C"),
    (":", "%3A"),
    (";", "%3B"),
    ("[", "%5B"),
    ("]", "%5D"),
    ('"', "%22"),
)

DefectSink = Callable[[Defect], None]


class CorpusReadError(DoclinksError):
    """Raised when a corpus file or directory cannot be read. Always fatal."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with the path and the underlying error.

        Args:
            path: File or directory that failed to load.
            error: The original ``OSError`` or decoding error.
        """
        self.path = path
        self.error = error
        super().__init__(f"error loading {path}: {error}")


class IsRedirectError(DoclinksError):
    """Raised by ``LoadMode.SKIP_REDIRECT`` loads that hit a soft-redirect page."""

    def __init__(self, path: RelPath) -> None:
        """Initialize the exception with the redirect page path."""
        self.path = path
        super().__init__(f"{path} is a redirect page")


def encode_anchor(value: str) -> str:
    """Percent-encode the characters documentation generators escape in fragment URLs."""
    for raw, escaped in _ANCHOR_ESCAPES:
        value = value.replace(raw, escaped)
    return value


def _empty_ids() -> set[AnchorId]:
    return set()


@dataclass(slots=True)
class FileEntry:
    """A document known to the cache.

    Attributes:
        source: Raw text; emptied by ``release`` once the walker is done with it.
        ids: Anchor ids in raw and percent-encoded form.
        parsed: Whether ``ids`` has been populated.
    """

    source: str
    ids: set[AnchorId] = field(default_factory=_empty_ids)
    parsed: bool = False

    def parse_ids(self, file: RelPath, contents: str, report: DefectSink) -> None:
        """Populate ``ids`` from ``contents`` the first time it is called.

        Repeated raw ids are reported as ``DUPLICATE_ID`` defects against
        ``file``; the id stays in the set.
        """
        if self.parsed:
            return
        self.parsed = True
        seen: set[str] = set()
        for attribute in iter_attributes(contents, ID_ATTR):
            anchor = attribute.value.lstrip("#")
            if anchor in seen:
                report(Defect(DefectKind.DUPLICATE_ID, file, attribute.line, attribute.value))
            seen.add(anchor)
            self.ids.add(AnchorId(anchor))
            self.ids.add(AnchorId(encode_anchor(anchor)))

    def release(self) -> None:
        """Drop the raw text, keeping the anchor set.

        An entry released before ``parse_ids`` ran is read again on its next load.
        """
        self.source = ""


class LoadedDocument(NamedTuple):
    """Result of a cache load: where the document lives and its text."""

    rel_path: RelPath
    contents: str


def _empty_entries() -> dict[RelPath, FileEntry]:
    return {}


def _empty_redirects() -> dict[RelPath, str]:
    return {}


@dataclass(slots=True)
class DocumentCache:
    """Corpus-relative path to ``FileEntry`` mapping with redirect following.

    The cache is owned by a single checker run and is never shared between
    threads.

    Attributes:
        root: Absolute corpus root.
        report: Callback receiving duplicate-id defects.
        max_redirect_depth: Bound passed to each ``RedirectChain``.
    """

    root: Path
    report: DefectSink
    max_redirect_depth: int = DEFAULT_MAX_REDIRECT_DEPTH
    _entries: dict[RelPath, FileEntry] = field(default_factory=_empty_entries, init=False, repr=False)
    _redirects: dict[RelPath, str] = field(default_factory=_empty_redirects, init=False, repr=False)

    def __contains__(self, rel_path: object) -> bool:
        return rel_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def entry(self, rel_path: RelPath) -> FileEntry:
        """Return the entry for a previously loaded document.

        Raises:
            KeyError: If ``rel_path`` has not been loaded.
        """
        return self._entries[rel_path]

    def load(
        self,
        path: Path,
        mode: LoadMode,
        *,
        chain: RedirectChain | None = None,
    ) -> LoadedDocument:
        """Return the text of ``path``, reading it only on first use.

        Soft-redirect pages are never cached as entries; their target URL is
        memoised instead. In ``SKIP_REDIRECT`` mode such a page raises
        ``IsRedirectError``; otherwise the redirect is followed and the
        returned document is the final, non-redirect page.

        Args:
            path: Absolute document path.
            mode: Caller context, see ``LoadMode``.
            chain: Redirect chain being followed (internal use).

        Returns:
            ``LoadedDocument`` naming the document actually loaded.

        Raises:
            IsRedirectError: ``path`` is a redirect and ``mode`` is ``SKIP_REDIRECT``.
            BrokenRedirectError: A followed redirect target is missing, loops or
                lies outside the corpus root.
            CorpusReadError: Any other read failure.
        """
        rel_path = relative_to_root(path, self.root)
        entry = self._entries.get(rel_path)
        if entry is not None:
            if not entry.parsed and not entry.source:
                # released before its ids were needed
                entry.source = self._read(path, rel_path, mode)
            return LoadedDocument(rel_path, entry.source)

        url = self._redirects.get(rel_path)
        if url is None:
            contents = self._read(path, rel_path, mode)
            url = find_redirect(contents)
            if url is None:
                self._entries[rel_path] = FileEntry(source=contents)
                return LoadedDocument(rel_path, contents)
            self._redirects[rel_path] = url

        if mode is LoadMode.SKIP_REDIRECT:
            raise IsRedirectError(rel_path)
        chain = chain if chain is not None else RedirectChain(self.max_redirect_depth)
        chain.enter(rel_path)
        try:
            target = redirect_target(path, url, root=self.root)
        except PathEscapeError as exc:
            raise BrokenRedirectError(RelPath(url), exc.reason) from exc
        logger.debug(
            "Following redirect %s -> %s",
            rel_path,
            relative_to_root(target, self.root),
            extra=structured_extra(LogComponent.CACHE, path=rel_path),
        )
        return self.load(target, LoadMode.FROM_REDIRECT, chain=chain)

    def parse_ids(self, rel_path: RelPath, contents: str) -> set[AnchorId]:
        """Parse anchor ids of a loaded document (once) and return them."""
        entry = self._entries[rel_path]
        entry.parse_ids(rel_path, contents, self.report)
        return entry.ids

    def release(self, rel_path: RelPath) -> None:
        """Drop the cached text of ``rel_path``; a no-op for unknown paths."""
        entry = self._entries.get(rel_path)
        if entry is not None:
            entry.release()

    def _read(self, path: Path, rel_path: RelPath, mode: LoadMode) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            if mode is LoadMode.FROM_REDIRECT:
                raise BrokenRedirectError(rel_path, str(exc)) from exc
            raise CorpusReadError(path, exc) from exc
        except UnicodeDecodeError as exc:
            raise CorpusReadError(path, exc) from exc


__all__ = [
    "CorpusReadError",
    "DocumentCache",
    "FileEntry",
    "IsRedirectError",
    "LoadedDocument",
    "encode_anchor",
]
