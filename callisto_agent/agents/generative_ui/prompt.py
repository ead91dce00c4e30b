"""Prompt templates for the generative UI agent."""


def build_system_prompt(
    custom_instructions: str | None = None,
) -> str:
    """Build the system prompt for the agent.

    Args:
        custom_instructions: Optional additional instructions to append

    Returns:
        Complete system prompt string
    """
    base_prompt = """You are a helpful assistant embedded in a chat application.

## How Your Tools Work

The tools you are given run inside the user's application, not on your side.
When you call a tool, the application executes it and sends the result back to
you as a tool observation in the next turn.

## Rules

1. **Call a tool when it helps** - If a tool can answer or perform the request, call it.
2. **Never invent arguments** - If you do not know a required argument, still call the tool
   with the arguments you do know. The application will ask the user for the rest with a form.
3. **One tool at a time** - Only your first tool call per turn is executed.
4. **Read the observations** - Use tool results and submitted form data to answer; if a tool
   failed or was not executed, say so instead of guessing its result.
5. **Be concise** - Answer in plain language once you have what you need."""

    if custom_instructions:
        return f"{base_prompt}\n\n{custom_instructions}"

    return base_prompt


def build_form_prompt(description: str) -> str:
    """Build the text shown above a rendered form.

    Args:
        description: Description of the tool whose arguments the form collects

    Returns:
        Prompt asking the user for the missing information
    """
    return f"I need some more information to {description.lower()}."
