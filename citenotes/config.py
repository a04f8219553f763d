"""
Centralized Configuration
=========================
Centralized configuration values and constants for the citenotes engine.

This module provides:
- Citation engine switches (groups, render cache, end-of-document behaviour)
- Timeout configuration for file-backed caches
- Tracing configuration
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CiteConfig:
    """Citation engine configuration."""

    # Accept the group attribute on markers and regions
    ALLOW_GROUPS: bool = _env_flag("CITENOTES_ALLOW_GROUPS", "true")

    # Memoize rendered reference lists in the render cache
    CACHE_REFERENCES: bool = _env_flag("CITENOTES_CACHE_REFERENCES", "false")
    CACHE_TTL_SECONDS: int = int(os.getenv("CITENOTES_CACHE_TTL", "86400"))
    CACHE_KEY_PREFIX: str = os.getenv("CITENOTES_CACHE_PREFIX", "citenotes")

    # Render the default group at end of document instead of reporting it
    AUTO_RENDER_DEFAULT_GROUP: bool = _env_flag("CITENOTES_AUTO_RENDER_DEFAULT_GROUP", "false")


@dataclass(frozen=True)
class TimeoutConfig:
    """Centralized timeout configuration in seconds."""

    # File operations
    FILE_LOCK: int = int(os.getenv("CITENOTES_FILE_LOCK_TIMEOUT", "30"))


@dataclass(frozen=True)
class TracingConfig:
    """Tracing configuration."""

    SERVICE_NAME: str = "citenotes"
    OTLP_ENDPOINT: str = os.getenv("OTLP_ENDPOINT", "http://localhost:4318/v1/traces")
    ENABLED: bool = os.getenv("ENABLE_TRACING", "false").lower() == "true"


# Global singleton instances
CITE = CiteConfig()
TIMEOUTS = TimeoutConfig()
TRACING = TracingConfig()


def get_timeout(operation: str) -> int:
    """Get timeout for a specific operation type.

    Args:
        operation: One of 'file_lock'

    Returns:
        Timeout in seconds
    """
    mapping = {
        "file_lock": TIMEOUTS.FILE_LOCK,
    }
    return mapping.get(operation, TIMEOUTS.FILE_LOCK)
