"""
Constants and configuration values for storagebrowser.

This module contains the defaults, file names, timeouts and other constants
used throughout the application.
"""

APP_NAME = "storagebrowser"

# Path handling
DEFAULT_PATH_SEPARATOR = "/"

# Remote node kinds, as reported by the storage service
FILE_NODE_TYPE = 0
DIRECTORY_NODE_TYPE = 1

# Progress output
PROGRESS_LINE_FORMAT = "<progress>{percent}</progress>"
PROGRESS_QUEUE_SIZE = 64

# Local directory creation mode for download destinations
DOWNLOAD_DIR_PERMISSIONS = 0o777

# Network settings (in seconds)
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_CONNECT_RETRIES = 5
DEFAULT_BACKOFF_FACTOR = 0.3
DEFAULT_CHUNK_SIZE = 8192
RETRY_STATUS_FORCELIST = (408, 429, 500, 502, 503, 504)

# Logging
LOGGER_NAME = APP_NAME
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_NAME = f"{APP_NAME}.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Configuration
CONFIG_FILE_NAME = f"{APP_NAME}.yaml"
REQUIRED_CONFIG_KEYS = ("USER", "PASSWORD", "ROOT_DIRECTORY_NAME")

# Environment variables
LOG_LEVEL_ENV_VAR = "STORAGEBROWSER_LOG_LEVEL"
PASSWORD_ENV_VAR = "STORAGEBROWSER_PASSWORD"
