"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service can be started with nothing but a ``PORT``.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Congest")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Timezone used by the timer subsystem.  One-shot rules are computed
    # as absolute UTC instants, so this only affects how next run times
    # are rendered.
    scheduler_timezone: str = os.getenv("SCHEDULER_TIMEZONE", "UTC")

    # Size of the worker pool that runs timer callbacks.  Callbacks only
    # hand the outbound call to its own thread, so a small pool is enough.
    scheduler_max_workers: int = int(os.getenv("SCHEDULER_MAX_WORKERS", "10"))

    # Timeout in seconds for outbound calls.  Unset means no timeout.
    invoke_timeout: Optional[float] = _optional_float("INVOKE_TIMEOUT")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
