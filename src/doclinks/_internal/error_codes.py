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

"""Stable error code registry used across doclinks."""

from __future__ import annotations

from typing import TYPE_CHECKING, NewType

from doclinks.config import (
    ConfigFieldTypeError,
    ConfigReadError,
    ConfigValidationError,
    InvalidConfigFileError,
    UnsupportedConfigVersionError,
)
from doclinks.links.cache import CorpusReadError, IsRedirectError
from doclinks.links.redirects import BrokenRedirectError, RedirectLoopError
from doclinks.links.resolve import PathEscapeError

from .exceptions import DoclinksError, DoclinksValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping

ErrorCode = NewType("ErrorCode", str)

_ERROR_CODES: dict[type[BaseException], ErrorCode] = {
    DoclinksError: ErrorCode("DL000"),
    DoclinksValidationError: ErrorCode("DL100"),
    ConfigValidationError: ErrorCode("DL110"),
    ConfigFieldTypeError: ErrorCode("DL111"),
    UnsupportedConfigVersionError: ErrorCode("DL112"),
    ConfigReadError: ErrorCode("DL113"),
    InvalidConfigFileError: ErrorCode("DL114"),
    CorpusReadError: ErrorCode("DL200"),
    PathEscapeError: ErrorCode("DL201"),
    IsRedirectError: ErrorCode("DL300"),
    BrokenRedirectError: ErrorCode("DL301"),
    RedirectLoopError: ErrorCode("DL302"),
}


def error_code_for(exc: BaseException) -> ErrorCode:
    """Return a stable error code for a structured doclinks exception.

    Args:
        exc: Exception instance raised by doclinks code paths.

    Returns:
        Error code mapped from the exception's class hierarchy.
    """
    for cls in type(exc).__mro__:
        code = _ERROR_CODES.get(cls)
        if code:
            return code
    return ErrorCode("DL000")


def error_code_catalog() -> Mapping[str, ErrorCode]:
    """Return a mapping of fully-qualified exception names to error codes.

    Returns:
        Mapping of ``<module>.<ExceptionName>`` strings to error codes.
    """
    result: dict[str, ErrorCode] = {}
    for exc_type, code in _ERROR_CODES.items():
        key = f"{exc_type.__module__}.{exc_type.__name__}"
        result[key] = code
    return result


__all__ = ["ErrorCode", "error_code_catalog", "error_code_for"]
