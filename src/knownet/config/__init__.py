"""Configuration management."""
from knownet.config.settings import Config
from knownet.config.constants import *

__all__ = [
    "Config",
]
