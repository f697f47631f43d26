"""Logging setup shared by the knownet CLI and web server.

Records go to a size-rotated file under the data directory and to the
console (Rich when available in the config). Graph, derivation and
contradiction code only emits DEBUG traces; ``trace_loggers`` lets one of
those subsystems be followed without lowering the root level.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field, fields, replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any


_NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "LiteLLM", "litellm")

_CONSOLE_FORMAT = "%(message)s"


def resolve_level(name: str | int) -> int:
    """Map a level name (any case) or number to a logging level; unknown names give INFO."""
    if isinstance(name, int):
        return name
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


@dataclass
class LogConfig:
    """The ``[logging]`` section of settings.toml."""

    level: str = "INFO"
    file_enabled: bool = True
    file_path: str = "~/.knownet/logs/knownet.log"
    file_max_bytes: int = 10 * 1024 * 1024
    file_backup_count: int = 5
    format: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    use_rich_console: bool = True
    quiet_third_party: bool = True
    trace_loggers: list[str] = field(default_factory=list)
    access_log_ignore: list[str] = field(default_factory=lambda: ["/api/query/stats"])

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LogConfig:
        """Build from a TOML table. Keys that are not fields are ignored."""
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        for key in ("trace_loggers", "access_log_ignore"):
            if key in values:
                values[key] = list(values[key])
        return cls(**values)

    def with_level(self, level: str) -> LogConfig:
        return replace(self, level=level)


class _AccessLogFilter(logging.Filter):
    """Drop uvicorn access records whose request path is in ``ignored_paths``.

    uvicorn passes ``(client, method, path, http_version, status)`` as the
    record args; the query string is not part of the match.
    """

    def __init__(self, ignored_paths: list[str]) -> None:
        super().__init__()
        self._ignored = frozenset(ignored_paths)

    def _request_path(self, record: logging.LogRecord) -> str | None:
        args = record.args
        if isinstance(args, tuple) and len(args) >= 3 and isinstance(args[2], str):
            return args[2]
        # Preformatted message: 'client - "GET /path HTTP/1.1" 200'
        message = record.getMessage()
        start = message.find('"')
        if start == -1:
            return None
        parts = message[start + 1:].split(" ")
        return parts[1] if len(parts) > 1 else None

    def filter(self, record: logging.LogRecord) -> bool:
        path = self._request_path(record)
        if path is None:
            return True
        return path.split("?", 1)[0] not in self._ignored


def _file_handler(config: LogConfig, formatter: logging.Formatter) -> logging.Handler:
    log_path = Path(config.file_path).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=config.file_max_bytes,
        backupCount=config.file_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def _console_handler(config: LogConfig, formatter: logging.Formatter) -> logging.Handler:
    if config.use_rich_console:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
        return handler
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    return handler


def _replace_access_filter(ignored_paths: list[str]) -> None:
    access_logger = logging.getLogger("uvicorn.access")
    for existing in list(access_logger.filters):
        if isinstance(existing, _AccessLogFilter):
            access_logger.removeFilter(existing)
    if ignored_paths:
        access_logger.addFilter(_AccessLogFilter(ignored_paths))


def setup_logging(config: LogConfig) -> None:
    """Install knownet's handlers on the root logger.

    Handlers from an earlier call are closed and replaced, so the CLI and
    the server can each call this once without duplicating output.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(resolve_level(config.level))

    formatter = logging.Formatter(config.format)
    if config.file_enabled:
        root_logger.addHandler(_file_handler(config, formatter))
    root_logger.addHandler(_console_handler(config, formatter))

    if config.quiet_third_party:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    for name in config.trace_loggers:
        logging.getLogger(name).setLevel(logging.DEBUG)

    _replace_access_filter(config.access_log_ignore)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
