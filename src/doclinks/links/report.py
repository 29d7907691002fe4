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

"""Defect records and the streaming reporter that prints them."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from doclinks.core.model_types import DefectKind, LogComponent, OutputFormat
from doclinks.logging import structured_extra

if TYPE_CHECKING:
    from typing import TextIO

    from doclinks.core.type_aliases import RelPath

logger: logging.Logger = logging.getLogger("doclinks.checker")


@dataclass(slots=True, frozen=True)
class Defect:
    """A located, non-fatal problem in the corpus.

    Attributes:
        kind: Defect category.
        file: Corpus-relative path of the document containing the problem.
        line: 1-based line number.
        target: Offending id (for duplicates) or the relative target path.
        fragment: Missing fragment, for ``BROKEN_FRAGMENT`` only.
    """

    kind: DefectKind
    file: RelPath
    line: int
    target: str
    fragment: str | None = None

    def message(self) -> str:
        """Return the human-readable description without the location prefix."""
        match self.kind:
            case DefectKind.DUPLICATE_ID:
                return f"id is not unique: `{self.target}`"
            case DefectKind.DIRECTORY_LINK:
                return f"directory link - {self.target}"
            case DefectKind.BROKEN_REDIRECT:
                return f"broken redirect to {self.target}"
            case DefectKind.BROKEN_FRAGMENT:
                return f"broken link fragment `#{self.fragment}` pointing to `{self.target}`"
            case _:
                return f"broken link - {self.target}"

    def render(self) -> str:
        """Return the full ``<file>:<line>: <message>`` diagnostic line."""
        return f"{self.file}:{self.line}: {self.message()}"

    def to_json(self) -> dict[str, object]:
        """Return a JSON-serialisable mapping of the defect."""
        payload: dict[str, object] = {
            "kind": str(self.kind),
            "file": self.file,
            "line": self.line,
            "target": self.target,
            "message": self.message(),
        }
        if self.fragment is not None:
            payload["fragment"] = self.fragment
        return payload


def _empty_defects() -> list[Defect]:
    return []


@dataclass(slots=True)
class DefectReporter:
    """Collect defects and print each one as soon as it is found.

    Attributes:
        output_format: ``text`` prints diagnostic lines, ``json`` prints one JSON
            object per line.
        stream: Destination; ``None`` writes to the current ``sys.stdout``.
        defects: Every defect reported so far, in discovery order.
    """

    output_format: OutputFormat = OutputFormat.TEXT
    stream: TextIO | None = None
    defects: list[Defect] = field(default_factory=_empty_defects)

    @property
    def errors_found(self) -> bool:
        """Return True once any defect has been reported."""
        return bool(self.defects)

    def report(self, defect: Defect) -> None:
        """Record ``defect`` and write it out immediately."""
        self.defects.append(defect)
        if self.output_format is OutputFormat.JSON:
            line = json.dumps(defect.to_json(), ensure_ascii=False)
        else:
            line = defect.render()
        stream = self.stream if self.stream is not None else sys.stdout
        _ = stream.write(f"{line}\n")
        logger.debug(
            "Reported %s in %s",
            defect.kind,
            defect.file,
            extra=structured_extra(LogComponent.CHECKER, path=defect.file),
        )

    def counts(self) -> dict[str, int]:
        """Return the number of defects per kind (kinds with no defects omitted)."""
        totals: dict[str, int] = {}
        for defect in self.defects:
            key = str(defect.kind)
            totals[key] = totals.get(key, 0) + 1
        return totals


__all__ = ["Defect", "DefectReporter"]
