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

"""Link-resolution engine: extraction, resolution, caching and checking."""

from __future__ import annotations

from .cache import CorpusReadError, DocumentCache, FileEntry, IsRedirectError, LoadedDocument, encode_anchor
from .checker import CheckResult, LinkChecker, check_links, is_excluded
from .extract import HREF_ATTR, ID_ATTR, Attribute, iter_attributes
from .redirects import BrokenRedirectError, RedirectChain, RedirectLoopError, find_redirect
from .report import Defect, DefectReporter
from .resolve import PathEscapeError, ResolvedLink, is_line_number_fragment, resolve_href

__all__ = [
    "HREF_ATTR",
    "ID_ATTR",
    "Attribute",
    "BrokenRedirectError",
    "CheckResult",
    "CorpusReadError",
    "Defect",
    "DefectReporter",
    "DocumentCache",
    "FileEntry",
    "IsRedirectError",
    "LinkChecker",
    "LoadedDocument",
    "PathEscapeError",
    "RedirectChain",
    "RedirectLoopError",
    "ResolvedLink",
    "check_links",
    "encode_anchor",
    "find_redirect",
    "is_excluded",
    "is_line_number_fragment",
    "iter_attributes",
    "resolve_href",
]
