"""Tests for knownet.core.logging_config."""
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

from knownet.core.logging_config import (
    LogConfig,
    _AccessLogFilter,
    get_logger,
    resolve_level,
    setup_logging,
)


def _record(message: str, args=None) -> logging.LogRecord:
    return logging.LogRecord("uvicorn.access", logging.INFO, __file__, 1, message, args, None)


class TestLogConfig:
    """Tests for LogConfig defaults."""

    def test_defaults(self):
        cfg = LogConfig()
        assert cfg.level == "INFO"
        assert cfg.file_enabled is True
        assert cfg.file_path.endswith("knownet.log")
        assert cfg.file_backup_count == 5
        assert cfg.use_rich_console is True
        assert cfg.access_log_ignore == ["/api/query/stats"]
        assert cfg.trace_loggers == []

    def test_from_dict_ignores_unknown_keys(self):
        cfg = LogConfig.from_dict(
            {"level": "DEBUG", "colour": "blue", "trace_loggers": ("knownet.graph",)}
        )
        assert cfg.level == "DEBUG"
        assert cfg.trace_loggers == ["knownet.graph"]
        assert not hasattr(cfg, "colour")

    def test_with_level_returns_copy(self):
        cfg = LogConfig()
        quiet = cfg.with_level("WARNING")
        assert quiet.level == "WARNING"
        assert cfg.level == "INFO"


class TestResolveLevel:
    def test_names_and_numbers(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Warning ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_is_info(self):
        assert resolve_level("chatty") == logging.INFO


class TestSetupLogging:
    """Tests for setup_logging."""

    def _cleanup_root(self):
        root = logging.getLogger()
        for handler in root.handlers[:]:
            handler.close()
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        access = logging.getLogger("uvicorn.access")
        for existing in list(access.filters):
            access.removeFilter(existing)

    def test_file_handler_created(self, tmp_path):
        log_file = tmp_path / "logs" / "test.log"
        cfg = LogConfig(
            level="DEBUG",
            file_enabled=True,
            file_path=str(log_file),
            use_rich_console=False,
        )
        try:
            setup_logging(cfg)
            root = logging.getLogger()
            handler_types = [type(h) for h in root.handlers]
            assert RotatingFileHandler in handler_types
            assert root.level == logging.DEBUG
            assert log_file.parent.is_dir()
        finally:
            self._cleanup_root()

    def test_file_handler_disabled(self):
        cfg = LogConfig(file_enabled=False, use_rich_console=False)
        try:
            setup_logging(cfg)
            for h in logging.getLogger().handlers:
                assert not isinstance(h, RotatingFileHandler)
        finally:
            self._cleanup_root()

    def test_rich_console_handler(self):
        cfg = LogConfig(file_enabled=False, use_rich_console=True)
        try:
            setup_logging(cfg)
            root = logging.getLogger()
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0], RichHandler)
        finally:
            self._cleanup_root()

    def test_plain_console_handler(self):
        cfg = LogConfig(file_enabled=False, use_rich_console=False)
        try:
            setup_logging(cfg)
            root = logging.getLogger()
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0], logging.StreamHandler)
        finally:
            self._cleanup_root()

    def test_clears_existing_handlers(self):
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())

        cfg = LogConfig(file_enabled=False, use_rich_console=False)
        try:
            setup_logging(cfg)
            assert len(root.handlers) == 1
        finally:
            self._cleanup_root()

    def test_unknown_level_falls_back_to_info(self):
        cfg = LogConfig(level="chatty", file_enabled=False, use_rich_console=False)
        try:
            setup_logging(cfg)
            assert logging.getLogger().level == logging.INFO
        finally:
            self._cleanup_root()

    def test_quiets_third_party(self):
        cfg = LogConfig(file_enabled=False, use_rich_console=False)
        try:
            setup_logging(cfg)
            assert logging.getLogger("httpx").level == logging.WARNING
            assert logging.getLogger("litellm").level == logging.WARNING
        finally:
            self._cleanup_root()

    def test_trace_loggers_forced_to_debug(self):
        cfg = LogConfig(
            level="WARNING",
            file_enabled=False,
            use_rich_console=False,
            trace_loggers=["knownet.contradictions"],
        )
        try:
            setup_logging(cfg)
            assert logging.getLogger().level == logging.WARNING
            assert logging.getLogger("knownet.contradictions").isEnabledFor(logging.DEBUG)
        finally:
            self._cleanup_root()
            logging.getLogger("knownet.contradictions").setLevel(logging.NOTSET)

    def test_access_filter_installed_once(self):
        cfg = LogConfig(file_enabled=False, use_rich_console=False)
        try:
            setup_logging(cfg)
            setup_logging(cfg)
            access = logging.getLogger("uvicorn.access")
            filters = [f for f in access.filters if isinstance(f, _AccessLogFilter)]
            assert len(filters) == 1
        finally:
            self._cleanup_root()


class TestAccessLogFilter:
    def test_drops_ignored_paths(self):
        f = _AccessLogFilter(["/api/query/stats"])
        assert f.filter(_record('127.0.0.1 - "GET /api/query/stats HTTP/1.1" 200')) is False
        assert f.filter(_record('127.0.0.1 - "GET /api/query/stats?x=1 HTTP/1.1" 200')) is False

    def test_uses_uvicorn_record_args(self):
        f = _AccessLogFilter(["/api/query/stats"])
        fmt = '%s - "%s %s HTTP/%s" %d'
        ignored = _record(fmt, ("127.0.0.1:5000", "GET", "/api/query/stats?x=1", "1.1", 200))
        kept = _record(fmt, ("127.0.0.1:5000", "GET", "/api/query/stats/extra", "1.1", 200))
        assert f.filter(ignored) is False
        assert f.filter(kept) is True

    def test_keeps_other_paths(self):
        f = _AccessLogFilter(["/api/query/stats"])
        assert f.filter(_record('127.0.0.1 - "GET /api/statements HTTP/1.1" 200')) is True


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "test.module"
