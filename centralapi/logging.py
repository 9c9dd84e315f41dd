"""structlog setup shared by the API process and the migration/CLI entrypoints."""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog

from centralapi.config import settings


class _TeeWriter:
    """Mirror log lines to stdout and an append-only file.

    If the file cannot be opened or written, file output is dropped and
    stdout logging carries on.
    """

    def __init__(self, file_path: str) -> None:
        self._file: IO[str] | None = None
        try:
            self._file = open(file_path, "a")  # noqa: SIM115
        except OSError as exc:
            print(f"WARNING: cannot open log file {file_path!r}: {exc}", file=sys.stderr)

    def _disable(self, op: str) -> None:
        self._file = None
        print(f"WARNING: log file {op} failed, file logging disabled", file=sys.stderr)

    def write(self, data: str) -> None:
        sys.stdout.write(data)
        if self._file is None:
            return
        try:
            self._file.write(data)
            self._file.flush()
        except (OSError, ValueError):
            self._disable("write")

    def flush(self) -> None:
        sys.stdout.flush()
        if self._file is None:
            return
        try:
            self._file.flush()
        except (OSError, ValueError):
            self._disable("flush")


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging() -> None:
    """Console output in development, JSON lines everywhere else.

    Standard-library loggers (uvicorn, sqlalchemy, botocore) keep their own
    handlers but honour the same level.
    """
    level = _resolve_level(settings.log_level)
    logging.basicConfig(level=level, format="%(message)s", stream=sys.stdout)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    logger_factory: structlog.types.WrappedLogger
    if settings.log_file:
        logger_factory = structlog.PrintLoggerFactory(file=_TeeWriter(settings.log_file))  # type: ignore[arg-type]
    else:
        logger_factory = structlog.PrintLoggerFactory()

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )
