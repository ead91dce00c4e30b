"""Service-wide constants."""

SERVICE_NAME = "callisto-agent"
SQUAD_NAME = "callisto"
SERVICE_VERSION = "0.1.0"
USER_AGENT = f"{SERVICE_NAME}/{SERVICE_VERSION}"
