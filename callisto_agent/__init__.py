"""callisto-agent - A generative UI agent with LangGraph orchestration and server-rendered forms."""

from .platform.server.app import create_app
from .platform.settings import Settings


def app():
    """Create the FastAPI application instance."""
    settings = Settings()
    return create_app(settings)
