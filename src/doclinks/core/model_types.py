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

"""Enumerations shared across doclinks.

- ``DefectKind``: the reported (non-fatal) defect categories
- ``LoadMode``: how the document cache treats soft-redirect pages
- ``OutputFormat``: how defects are written to stdout
- ``LogFormat`` / ``LogComponent``: logging configuration and tagging
"""

from __future__ import annotations

from doclinks.compat import StrEnum


class DefectKind(StrEnum):
    """Categories of defects reported while scanning a corpus.

    Attributes:
        DUPLICATE_ID: The same ``id`` appears more than once in a document.
        DIRECTORY_LINK: A link points at a directory rather than a document.
        BROKEN_REDIRECT: A soft redirect leads nowhere (or loops).
        BROKEN_FRAGMENT: The target exists but has no matching anchor.
        BROKEN_LINK: The target path does not exist.
    """

    DUPLICATE_ID = "duplicate_id"
    DIRECTORY_LINK = "directory_link"
    BROKEN_REDIRECT = "broken_redirect"
    BROKEN_FRAGMENT = "broken_fragment"
    BROKEN_LINK = "broken_link"


class LoadMode(StrEnum):
    """Caller context for a document cache load.

    Attributes:
        SKIP_REDIRECT: Scanning a file of the corpus itself; a redirect page is
            reported back to the caller so it can be skipped.
        FOLLOW: Loading a link target; redirects are followed transparently.
        FROM_REDIRECT: Loading a document named by a redirect; a missing file is
            a broken redirect rather than a fatal read failure.
    """

    SKIP_REDIRECT = "skip_redirect"
    FOLLOW = "follow"
    FROM_REDIRECT = "from_redirect"


class OutputFormat(StrEnum):
    """Stdout rendering for reported defects."""

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> OutputFormat:
        """Create an OutputFormat from a string value.

        Args:
            raw: String representation of the output format.

        Returns:
            OutputFormat enum value.

        Raises:
            ValueError: If the string does not match any OutputFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown output format '{raw}'"
            raise ValueError(msg) from exc


class LogFormat(StrEnum):
    """Log record rendering.

    Attributes:
        TEXT: ``[LEVEL] message`` lines.
        JSON: One JSON object per record.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Logical component attached to structured log records."""

    CLI = "cli"
    CHECKER = "checker"
    CACHE = "cache"
    CONFIG = "config"


__all__ = [
    "DefectKind",
    "LoadMode",
    "LogComponent",
    "LogFormat",
    "OutputFormat",
]
