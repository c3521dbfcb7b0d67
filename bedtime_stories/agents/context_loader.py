"""
Context Loader Utility for Bedtime Stories Agents

This module loads the system prompts for the AI agents from context files
and isolates user input from the instructions sent to the model.
"""

from pathlib import Path
from functools import lru_cache


# Base directory for agents
AGENTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=10)
def load_context(agent_name: str) -> str:
    """
    Load context file for a specific agent.

    Args:
        agent_name: Name of the agent (writer)

    Returns:
        Content of the context file as string

    Raises:
        ValueError: If the agent is unknown
        FileNotFoundError: If context file doesn't exist
    """
    context_paths = {
        "writer": AGENTS_DIR / "narrative" / "context_writer.txt",
    }

    if agent_name not in context_paths:
        raise ValueError(f"Unknown agent: {agent_name}. Available: {list(context_paths.keys())}")

    context_path = context_paths[agent_name]

    if not context_path.exists():
        raise FileNotFoundError(f"Context file not found: {context_path}")

    return context_path.read_text(encoding="utf-8")


def wrap_user_input(user_input: str) -> str:
    """
    Wrap user input in XML tags for input isolation.
    This helps the AI distinguish between instructions and user data.

    Args:
        user_input: Raw user input string

    Returns:
        Wrapped input with XML tags
    """
    # Escape any existing XML-like tags in user input to prevent injection
    sanitized = user_input.replace("<", "&lt;").replace(">", "&gt;")
    return f"<user_input>\n{sanitized}\n</user_input>"
