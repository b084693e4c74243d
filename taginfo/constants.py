"""
Centralized constants for taginfo.

This module defines immutable configuration values used across taginfo,
including platform endpoints, network settings, environment variable names
and logging formats. All values are intended to be treated as read-only.
"""

from typing import Final

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "taginfo/{version}"

#: Symbolic tag name that triggers "latest" resolution (case-insensitive).
LATEST_ALIAS: Final[str] = "latest"

# ---------------------------------------------------------------------------
# Platform endpoints
# ---------------------------------------------------------------------------

#: Public GitHub REST API.
GITHUB_API_URL: Final[str] = "https://api.github.com"

#: Path appended to a GitHub Enterprise base URL.
GITHUB_ENTERPRISE_API_PATH: Final[str] = "/api/v3"

#: Path appended to a Gitea base URL.
GITEA_API_PATH: Final[str] = "/api/v1"

#: Bitbucket Cloud REST API.
BITBUCKET_API_URL: Final[str] = "https://api.bitbucket.org/2.0"

#: Accept header for the GitHub REST API.
GITHUB_ACCEPT: Final[str] = "application/vnd.github.v3+json"

#: Page size requested from paginated platform endpoints.
PAGE_SIZE: Final[int] = 100

#: Maximum number of tags GitHub listings return by default.
DEFAULT_MAX_TAGS: Final[int] = 100

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Upper bound for concurrent requests issued by one client.
DEFAULT_MAX_CONCURRENCY: Final[int] = 10

# ---------------------------------------------------------------------------
# Local git
# ---------------------------------------------------------------------------

#: Timeout in seconds for a single ``git`` invocation.
GIT_COMMAND_TIMEOUT: Final[int] = 30

# ---------------------------------------------------------------------------
# Environment variables
# ---------------------------------------------------------------------------

ENV_COLOR: Final[str] = "TAGINFO_COLOR"
ENV_CONFIG: Final[str] = "TAGINFO_CONFIG"
ENV_TOKEN: Final[str] = "TAGINFO_TOKEN"
ENV_GITHUB_TOKEN: Final[str] = "GITHUB_TOKEN"
ENV_GITHUB_REPOSITORY: Final[str] = "GITHUB_REPOSITORY"
ENV_GITHUB_OUTPUT: Final[str] = "GITHUB_OUTPUT"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
