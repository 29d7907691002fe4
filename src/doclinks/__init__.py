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

"""doclinks - internal hyperlink checker for generated HTML documentation.

Walks a directory tree of HTML documents and verifies that every relative
``href`` points at an existing file, that fragments name a real ``id`` in
the target, and that soft-redirect pages lead to a real document.
"""

from __future__ import annotations

__version__ = "0.1.0"

from doclinks.exceptions import DoclinksError, DoclinksValidationError

from .config import CheckerConfig, load_config
from .core.model_types import DefectKind, OutputFormat
from .links import (
    CheckResult,
    Defect,
    DefectReporter,
    LinkChecker,
    check_links,
)

__all__ = [
    "CheckResult",
    "CheckerConfig",
    "Defect",
    "DefectKind",
    "DefectReporter",
    "DoclinksError",
    "DoclinksValidationError",
    "LinkChecker",
    "OutputFormat",
    "__version__",
    "check_links",
    "load_config",
]
