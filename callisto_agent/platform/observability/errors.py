"""Bugsnag error reporting integration.

ERROR-level log entries (including ``logger.exception`` calls on failed model
or render calls) are forwarded to Bugsnag outside local development.
"""

import logging

import bugsnag
from bugsnag.handlers import BugsnagHandler

from callisto_agent.platform.constants import SERVICE_VERSION

logger = logging.getLogger(__name__)


async def initialize_bugsnag(api_key: str, release_stage: str) -> BugsnagHandler | None:
    """Initialize Bugsnag error reporting.

    Args:
        api_key: Bugsnag project API key
        release_stage: Environment identifier ("production", "development" or "local")

    Returns:
        The handler attached to the root logger, or None when reporting is disabled
    """
    if release_stage == "local":
        return None
    if not api_key:
        logger.warning(f"Bugsnag API key is empty, errors will not be reported ({release_stage})")
        return None

    bugsnag.configure(
        api_key=api_key,
        release_stage=release_stage,
        app_version=SERVICE_VERSION,
        project_root="callisto_agent",
        auto_notify=True,
    )
    handler = BugsnagHandler()
    handler.setLevel(logging.ERROR)
    logging.getLogger().addHandler(handler)
    return handler
