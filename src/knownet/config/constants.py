"""
Constants and default values for knownet.

Centralizes magic numbers and strings to improve maintainability.
"""

from pathlib import Path

# ============================================================================
# Application Metadata
# ============================================================================

APP_VERSION = "0.1.0"
CONFIG_DIR_NAME = ".knownet"

# ============================================================================
# Path Defaults
# ============================================================================

DEFAULT_DATA_DIR = Path.home() / CONFIG_DIR_NAME
DEFAULT_CONFIG_SUBDIR = "config"
DEFAULT_DATA_SUBDIR = "data"

SETTINGS_FILE = "settings.toml"
ENV_FILE = ".env"

DATA_FILE_NAME = "knowledge.json"
DEFAULT_MAX_BACKUPS = 10

# ============================================================================
# Derivation & Analysis Defaults
# ============================================================================

# A derived claim is discounted relative to its weakest support.
DEFAULT_CONFIDENCE_DISCOUNT = 0.95

DEFAULT_OPPOSITE_THRESHOLD = 0.8
DEFAULT_NEGATION_THRESHOLD = 0.8
DEFAULT_SEMANTIC_THRESHOLD = 0.7

DEFAULT_LISTING_LIMIT = 10
DEFAULT_SUBGRAPH_DEPTH = 2

# ============================================================================
# LLM Defaults
# ============================================================================

DEFAULT_LLM_PROVIDER = "lmstudio"
DEFAULT_LLM_MODEL = "llama-3.2-3b-instruct"
DEFAULT_LLM_API_BASE = "http://127.0.0.1:1234/v1"
DEFAULT_LLM_TEMPERATURE = 0.0
DEFAULT_LLM_TIMEOUT_SECONDS = 60

# ============================================================================
# Web Server Defaults
# ============================================================================

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_DATA_DIR = "KNOWNET_DATA_DIR"
ENV_DATA_FILE = "KNOWNET_DATA_FILE"
ENV_MAX_BACKUPS = "KNOWNET_MAX_BACKUPS"
ENV_CONFIDENCE_DISCOUNT = "KNOWNET_CONFIDENCE_DISCOUNT"
ENV_OPPOSITE_THRESHOLD = "KNOWNET_OPPOSITE_THRESHOLD"
ENV_NEGATION_THRESHOLD = "KNOWNET_NEGATION_THRESHOLD"
ENV_SEMANTIC_THRESHOLD = "KNOWNET_SEMANTIC_THRESHOLD"
ENV_LLM_PROVIDER = "KNOWNET_LLM_PROVIDER"
ENV_LLM_MODEL = "KNOWNET_LLM_MODEL"
ENV_LLM_API_BASE = "KNOWNET_LLM_API_BASE"
ENV_LLM_API_KEY = "KNOWNET_LLM_API_KEY"
ENV_LLM_TEMPERATURE = "KNOWNET_LLM_TEMPERATURE"
ENV_LLM_MAX_TOKENS = "KNOWNET_LLM_MAX_TOKENS"
ENV_LLM_TIMEOUT = "KNOWNET_LLM_TIMEOUT"
ENV_HOST = "KNOWNET_HOST"
ENV_PORT = "KNOWNET_PORT"
ENV_LOG_LEVEL = "KNOWNET_LOG_LEVEL"

# ============================================================================
# Error Messages
# ============================================================================

ERROR_NO_CONFIG = """
Configuration file not found: {path}

Create {settings_file} under {config_dir} or unset the explicit path.
"""
