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

"""Fixtures shared across all unit tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from doclinks._internal.logging_utils import CHILD_LOGGERS, ROOT_LOGGER_NAME

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def reset_doclinks_logging(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Restore the ``doclinks`` loggers after tests that configure logging."""
    monkeypatch.delenv("DOCLINKS_LOG_FORMAT", raising=False)
    monkeypatch.delenv("DOCLINKS_LOG_LEVEL", raising=False)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    children = {name: logging.getLogger(name).level for name in CHILD_LOGGERS}
    yield
    logger.handlers.clear()
    logger.handlers.extend(handlers)
    logger.setLevel(level)
    logger.propagate = propagate
    for name, child_level in children.items():
        logging.getLogger(name).setLevel(child_level)
