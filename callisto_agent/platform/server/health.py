"""
Health state and service metadata for the platform endpoints.
"""

import datetime
import os
import platform
import socket
import threading
import time
from typing import Any

from callisto_agent.platform.constants import SERVICE_NAME, SERVICE_VERSION

__all__ = ["HealthCheck", "MetadataManager", "metadata"]


class HealthCheck:
    """Thread-safe health check state manager.

    Uses a threading.Event to manage health check state, allowing
    the service to be gracefully drained during shutdown.
    """

    _health_check_enabled = threading.Event()

    @staticmethod
    def enable() -> None:
        """Enable health checks (mark service as healthy)."""
        HealthCheck._health_check_enabled.set()

    @staticmethod
    def disable() -> None:
        """Disable health checks (mark service as unhealthy for graceful shutdown)."""
        HealthCheck._health_check_enabled.clear()

    @staticmethod
    def status() -> bool:
        """Check if health checks are currently enabled.

        Returns:
            True if the service is marked as healthy, False otherwise
        """
        return HealthCheck._health_check_enabled.is_set()


class MetadataManager:
    """
    Static metadata about the running container, served on /info.

    One is created on import as ``metadata``; extra static entries can be added
    to its ``metadata`` dictionary.
    """

    # keys to read from the environment
    ENV_INFO_KEYS = [
        "BUILD_DATE",
        "BUILD_URL",
        "GIT_COMMIT",
        "GIT_COMMIT_DATE",
        "IMAGE_NAME",
        "SERVICE_ID",
    ]

    def __init__(self, service_name: str = SERVICE_NAME, version: str = SERVICE_VERSION):
        self._started_at = datetime.datetime.now(tz=datetime.UTC).isoformat()
        self._started_ts = time.monotonic()

        metadata: dict[str, Any] = {key.lower(): os.environ.get(key) for key in self.ENV_INFO_KEYS}
        metadata["service_name"] = service_name
        metadata["build_version"] = os.environ.get("BUILD_VERSION") or version
        metadata["hostname"] = socket.gethostname()
        metadata["os_version"] = platform.platform()
        metadata["python_version"] = platform.python_version()
        self.metadata = metadata

    def info(self) -> dict[str, Any]:
        """
        Return metadata about the container and some basic stats
        """
        return {
            **self.metadata,
            "started": self._started_at,
            "uptime_seconds": round(time.monotonic() - self._started_ts, 3),
        }


metadata = MetadataManager()
