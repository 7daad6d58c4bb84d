"""
Service logging.

Every line carries a UTC timestamp and, while an HTTP request is being
served, the id of that request:

    2024-05-01T09:30:12.004Z INFO     [3f2a...] tutorials_api.controller: Created tutorial ...
"""

from __future__ import annotations

import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .config import TutorialsSettings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(request_tag)s%(name)s: %(message)s"

# Id of the HTTP request currently being served, None outside a request
request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestIdFilter(logging.Filter):
    """
    Stamp each record with the current request id.

    Adds ``request_id`` (``"-"`` outside a request) and ``request_tag``
    (``"[<id>] "`` or empty) so format strings can use either.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        rid = request_id.get()
        record.request_id = rid or "-"
        record.request_tag = f"[{rid}] " if rid else ""
        return True


class UTCFormatter(logging.Formatter):
    """ISO-8601 timestamps in UTC with millisecond precision."""

    converter = time.gmtime
    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"


def get_logger(name: str) -> logging.Logger:
    """
    >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def _build_handler(
    handler: logging.Handler, formatter: logging.Formatter
) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(RequestIdFilter())
    return handler


def _open_log_file(
    log_file: Union[str, Path], max_bytes: int, backup_count: int
) -> Optional[logging.Handler]:
    path = Path(log_file).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError as e:
        # Read-only container filesystems still get stdout logging
        sys.stderr.write(f"Cannot write log file {path}: {e}\n")
        return None


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    *,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
    capture_roots: bool = True,
    namespace: str = "tutorials",
) -> logging.Logger:
    """
    Send log records to stdout, and to a rotating file when ``log_file`` is set.

    Handlers installed by an earlier call are closed and replaced, so the
    service can be reconfigured without leaking file descriptors.

    Args:
        level: Level name (case-insensitive) or number.
        log_file: Optional path; parent directories are created.
        capture_roots: Configure the root logger, which also picks up
            uvicorn and SQLAlchemy. When False only ``namespace`` is
            configured and it stops propagating.
        namespace: Logger configured when ``capture_roots`` is False.

    Returns:
        The configured logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    target = logging.getLogger() if capture_roots else logging.getLogger(namespace)

    for old in list(target.handlers):
        target.removeHandler(old)
        old.close()

    formatter = UTCFormatter(LOG_FORMAT)
    target.addHandler(_build_handler(logging.StreamHandler(sys.stdout), formatter))

    if log_file:
        file_handler = _open_log_file(log_file, max_bytes, backup_count)
        if file_handler is not None:
            target.addHandler(_build_handler(file_handler, formatter))

    target.setLevel(level)
    target.propagate = capture_roots
    return target


def configure_logging(settings: TutorialsSettings) -> logging.Logger:
    """
    Apply ``LOG_LEVEL`` and ``LOG_FILE`` from settings to the root logger.

    SQLAlchemy statement logging is left to ``DB_ECHO``; otherwise the
    engine logger is held at WARNING so a DEBUG service level does not
    dump every query.
    """
    root = setup_logging(level=settings.LOG_LEVEL, log_file=settings.LOG_FILE)
    if not settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return root


def new_request_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def request_id_scope(value: str) -> Iterator[None]:
    """
    Bind ``value`` as the current request id for the duration of the block.

    >>> with request_id_scope("req-123"):
    ...     logger.info("handled")
    """
    token = request_id.set(value)
    try:
        yield
    finally:
        request_id.reset(token)
