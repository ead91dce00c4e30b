"""Exception hierarchy for the client-side chat library."""


class ChatClientError(Exception):
    """Base exception for all chat client errors."""


class ToolNotFoundError(ChatClientError):
    """Raised when a tool is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Tool "{name}" not found.')


class ToolValidationError(ChatClientError):
    """Raised when tool parameters do not match the tool's schema."""

    def __init__(self, name: str, errors: list[str]):
        self.name = name
        self.errors = errors
        super().__init__(f"Invalid parameters for tool {name}: {'; '.join(errors)}")


class AgentRequestError(ChatClientError):
    """Raised when the agent service cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        status_info = f" (status: {status_code})" if status_code else ""
        super().__init__(f"Agent request failed{status_info}: {message}")
