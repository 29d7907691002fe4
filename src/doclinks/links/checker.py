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

"""Depth-first walk over a document corpus that validates every local link."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from doclinks.config.models import CheckerConfig
from doclinks.core.model_types import DefectKind, LoadMode, LogComponent
from doclinks.logging import structured_extra

from .cache import CorpusReadError, DocumentCache, IsRedirectError
from .extract import HREF_ATTR, Attribute, iter_attributes
from .redirects import BrokenRedirectError
from .report import Defect, DefectReporter
from .resolve import is_line_number_fragment, relative_to_root, resolve_href

if TYPE_CHECKING:
    from collections.abc import Iterable

    from doclinks.core.type_aliases import RelPath

logger: logging.Logger = logging.getLogger("doclinks.checker")


def is_excluded(rel_path: str, suffixes: Iterable[str]) -> bool:
    """Return True when ``rel_path`` ends with one of ``suffixes``.

    Matching is per path component, so ``string/struct.String.html`` matches
    ``std/string/struct.String.html`` but not ``bytestring/struct.String.html``.
    """
    parts = PurePosixPath(rel_path).parts
    for suffix in suffixes:
        suffix_parts = PurePosixPath(suffix).parts
        if suffix_parts and parts[-len(suffix_parts) :] == suffix_parts:
            return True
    return False



def _stat_target(path: Path) -> tuple[bool, bool]:
    """Return ``(exists, is_dir)`` for a link target.

    Any ``OSError`` from the stat (a name longer than the filesystem allows,
    permission problems) counts as a missing target.
    """
    try:
        return path.exists(), path.is_dir()
    except OSError:
        return False, False

@dataclass(slots=True, frozen=True)
class CheckResult:
    """Outcome of a full corpus check.

    Attributes:
        files_checked: Documents whose links were scanned.
        links_checked: Local (non-external) links resolved.
        defects: Every reported defect in discovery order.
    """

    files_checked: int
    links_checked: int
    defects: tuple[Defect, ...]

    @property
    def ok(self) -> bool:
        """Return True when no defect was reported."""
        return not self.defects


class LinkChecker:
    """Walk a corpus and report broken links, fragments and redirects.

    One instance performs one run; the document cache it owns lives exactly as
    long as the checker.
    """

    def __init__(
        self,
        root: Path,
        config: CheckerConfig | None = None,
        reporter: DefectReporter | None = None,
    ) -> None:
        self.root = root.resolve()
        self.config = config if config is not None else CheckerConfig()
        self.reporter = reporter if reporter is not None else DefectReporter()
        self.cache = DocumentCache(
            self.root,
            self.reporter.report,
            max_redirect_depth=self.config.max_redirect_depth,
        )
        self.files_checked = 0
        self.links_checked = 0

    def run(self) -> CheckResult:
        """Check the whole corpus.

        Raises:
            CorpusReadError: If the root is not a readable directory or any
                document cannot be read.
            PathEscapeError: If a link leaves the corpus root.
        """
        if not self.root.is_dir():
            raise CorpusReadError(self.root, NotADirectoryError("corpus root is not a directory"))
        started = time.perf_counter()
        self.walk()
        result = CheckResult(
            files_checked=self.files_checked,
            links_checked=self.links_checked,
            defects=tuple(self.reporter.defects),
        )
        logger.info(
            "Checked %d documents (%d links): %d defects",
            result.files_checked,
            result.links_checked,
            len(result.defects),
            extra=structured_extra(
                LogComponent.CHECKER,
                path=self.root,
                counts={
                    "files": result.files_checked,
                    "links": result.links_checked,
                    "cached": len(self.cache),
                    **self.reporter.counts(),
                },
                duration_ms=(time.perf_counter() - started) * 1000,
            ),
        )
        return result

    def walk(self, directory: Path | None = None) -> None:
        """Visit ``directory`` (default: the root) recursively, checking every regular file."""
        directory = directory if directory is not None else self.root
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            raise CorpusReadError(directory, exc) from exc
        for entry in entries:
            if entry.is_dir() and not entry.is_symlink():
                self.walk(entry)
                continue
            rel_path = self.check(entry)
            if rel_path is not None:
                self.cache.release(rel_path)

    def check(self, path: Path) -> RelPath | None:
        """Validate the links of one file.

        Returns:
            The corpus-relative path of the scanned document, or ``None`` when the
            file was skipped (not a document, excluded, or a redirect page).
        """
        if not self._is_document(path):
            return None
        rel_path = relative_to_root(path, self.root)
        if is_excluded(rel_path, self.config.exclude):
            logger.debug(
                "Skipping excluded document %s",
                rel_path,
                extra=structured_extra(LogComponent.CHECKER, path=rel_path),
            )
            return None
        try:
            document = self.cache.load(path, LoadMode.SKIP_REDIRECT)
        except IsRedirectError:
            return None

        self.files_checked += 1
        _ = self.cache.parse_ids(document.rel_path, document.contents)
        for attribute in iter_attributes(document.contents, HREF_ATTR):
            self._check_link(path, document.rel_path, attribute)
        return document.rel_path

    def _is_document(self, path: Path) -> bool:
        return path.suffix in self.config.extensions

    def _is_scanned(self, rel_path: RelPath) -> bool:
        return self._is_document(Path(rel_path)) and not is_excluded(rel_path, self.config.exclude)

    def _check_link(self, source: Path, source_rel: RelPath, attribute: Attribute) -> None:
        resolved = resolve_href(
            source,
            attribute.value,
            attribute.base,
            root=self.root,
            external_schemes=self.config.external_schemes,
        )
        if resolved is None:
            return
        self.links_checked += 1
        target = resolved.path

        exists, is_dir = _stat_target(target)
        if not exists:
            self._report(DefectKind.BROKEN_LINK, source_rel, attribute, relative_to_root(target, self.root))
            return
        if is_dir:
            # directory links render as listings when browsing the files offline
            self._report(DefectKind.DIRECTORY_LINK, source_rel, attribute, relative_to_root(target, self.root))
            return
        if target.suffix and not self._is_document(target):
            return

        try:
            document = self.cache.load(target, LoadMode.FOLLOW)
        except BrokenRedirectError as exc:
            self._report(DefectKind.BROKEN_REDIRECT, source_rel, attribute, exc.target)
            return

        fragment = resolved.fragment
        if fragment is not None and not is_line_number_fragment(fragment):
            anchors = self.cache.parse_ids(document.rel_path, document.contents)
            if fragment not in anchors:
                self._report(
                    DefectKind.BROKEN_FRAGMENT,
                    source_rel,
                    attribute,
                    document.rel_path,
                    fragment=fragment,
                )
        if not self._is_scanned(document.rel_path):
            # the walk never visits this file, so nothing else drops its text
            self.cache.release(document.rel_path)

    def _report(
        self,
        kind: DefectKind,
        source_rel: RelPath,
        attribute: Attribute,
        target: str,
        *,
        fragment: str | None = None,
    ) -> None:
        self.reporter.report(Defect(kind, source_rel, attribute.line, target, fragment))


def check_links(
    root: Path | str,
    config: CheckerConfig | None = None,
    *,
    reporter: DefectReporter | None = None,
) -> CheckResult:
    """Check every document under ``root`` and return the result.

    Args:
        root: Corpus root, relative paths are taken from the current directory.
        config: Checker settings; defaults apply when omitted.
        reporter: Destination for defects; prints text lines to stdout by default.

    Returns:
        CheckResult: Counters and the list of defects found.
    """
    return LinkChecker(Path(root), config, reporter).run()


__all__ = ["CheckResult", "LinkChecker", "check_links", "is_excluded"]
