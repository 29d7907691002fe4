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

"""CLI entry point for doclinks."""

from __future__ import annotations

import argparse
import logging
import pathlib
from contextlib import suppress
from typing import TYPE_CHECKING, Final

from doclinks import __version__
from doclinks._internal.error_codes import error_code_for
from doclinks._internal.exceptions import DoclinksError
from doclinks.cli.helpers import echo, register_argument
from doclinks.config import load_config_with_metadata
from doclinks.core.model_types import LogComponent, LogFormat, OutputFormat
from doclinks.links.checker import LinkChecker
from doclinks.links.report import DefectReporter
from doclinks.logging import LOG_FORMATS, LOG_LEVELS, configure_logging, structured_extra

if TYPE_CHECKING:
    from collections.abc import Sequence

logger: logging.Logger = logging.getLogger("doclinks.cli")

DOCLINKS_VERSION: Final[str] = __version__

EXIT_OK: Final[int] = 0
EXIT_DEFECTS: Final[int] = 1
EXIT_FATAL: Final[int] = 2


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point for the doclinks command-line interface.

    Parses arguments, configures logging, loads configuration and runs the
    checker over the requested corpus.

    Args:
        argv: Command-line arguments to parse. If None, uses sys.argv.

    Returns:
        int: ``0`` when the corpus is clean, ``1`` when defects were reported and
            ``2`` when the run aborted on a fatal error.
    """
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.version:
        echo(f"doclinks {DOCLINKS_VERSION}")
        return EXIT_OK
    if args.root is None:
        parser.error("the corpus root directory is required")
    _initialize_logging(args.log_format, args.log_level)
    try:
        return _run(args)
    except DoclinksError as exc:
        code = error_code_for(exc)
        logger.error(  # noqa: TRY400
            "[%s] %s",
            code,
            exc,
            extra=structured_extra(LogComponent.CLI, exit_code=EXIT_FATAL, error_code=code),
        )
        return EXIT_FATAL


def _run(args: argparse.Namespace) -> int:
    loaded = load_config_with_metadata(args.config)
    config = loaded.config.with_exclusions(args.exclude or ())
    root = pathlib.Path.cwd() / args.root
    reporter = DefectReporter(output_format=OutputFormat.from_str(args.out))
    logger.debug(
        "Checking %s",
        root,
        extra=structured_extra(
            LogComponent.CLI,
            path=root,
            details={"config": str(loaded.path) if loaded.path else None, "exclude": config.exclude},
        ),
    )
    result = LinkChecker(root, config, reporter).run()
    if result.ok:
        return EXIT_OK
    logger.error(
        "found some broken links",
        extra=structured_extra(LogComponent.CLI, exit_code=EXIT_DEFECTS, counts=reporter.counts()),
    )
    return EXIT_DEFECTS


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the doclinks CLI.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    parser = argparse.ArgumentParser(
        prog="doclinks",
        description="Check relative links, anchors and redirects across a tree of generated HTML documents.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    register_argument(
        parser,
        "root",
        nargs="?",
        type=pathlib.Path,
        help="Root directory of the document corpus (relative to the current directory).",
    )
    register_argument(
        parser,
        "--config",
        type=pathlib.Path,
        default=None,
        help="Explicit configuration file (default: doclinks.toml, .doclinks.toml or pyproject.toml).",
    )
    register_argument(
        parser,
        "--exclude",
        action="append",
        default=None,
        metavar="SUFFIX",
        help="Skip documents whose corpus-relative path ends with SUFFIX (repeatable).",
    )
    register_argument(
        parser,
        "--out",
        choices=[format_.value for format_ in OutputFormat],
        default=OutputFormat.TEXT.value,
        help="Render defects as diagnostic lines or JSON objects on stdout.",
    )
    register_argument(
        parser,
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Select logging output format (default: $DOCLINKS_LOG_FORMAT or text).",
    )
    register_argument(
        parser,
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Set verbosity of logged events (default: $DOCLINKS_LOG_LEVEL or info).",
    )
    register_argument(
        parser,
        "--version",
        action="store_true",
        help="Print the doclinks version and exit.",
    )
    return parser


def _initialize_logging(log_format: str | None, log_level: str | None) -> None:
    selected = LogFormat.from_str(log_format) if log_format is not None else None
    with suppress(ValueError):
        _ = configure_logging(selected, log_level=log_level)


__all__ = ["EXIT_DEFECTS", "EXIT_FATAL", "EXIT_OK", "main"]
