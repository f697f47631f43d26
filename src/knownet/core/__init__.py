"""Process-wide plumbing shared by the CLI and the API."""

from knownet.core.logging_config import LogConfig, get_logger, setup_logging

__all__ = ["LogConfig", "get_logger", "setup_logging"]
