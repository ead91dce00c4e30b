"""Entry point when the package is executed as a module."""

import sys

import click
import uvicorn

from .platform.settings import Settings


@click.command()
@click.option("--reload", is_flag=True, help="Restart the server when source files change.")
@click.option("--host", default=None, help="Bind address (default: APP_HTTP__HOST).")
@click.option("--port", type=int, default=None, help="Bind port (default: APP_HTTP__PORT).")
def main(reload=False, host=None, port=None):
    settings = Settings()

    uvicorn.run(
        "callisto_agent:app",
        loop="uvloop",
        factory=True,
        host=host or settings.app_http.host,
        port=port or settings.app_http.port,
        log_level=settings.app_http.log_level.lower(),
        reload=reload,
    )


if __name__ == "__main__":
    sys.exit(main())
