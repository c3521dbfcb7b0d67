from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional

import groq
from groq import Groq

from bedtime_stories.core.config import settings
from bedtime_stories.core.exceptions import UpstreamAuthError, UpstreamError, UpstreamRateLimitError
from bedtime_stories.core.logger import log_agent_action
from bedtime_stories.agents.context_loader import load_context, wrap_user_input


@dataclass
class StoryResult:
    text: str
    model: str
    tokens: int = 0


@lru_cache(maxsize=1)
def get_client() -> Groq:
    """Process-wide Groq client, built on first use."""
    if not settings.GROQ_API_KEY:
        raise UpstreamAuthError("GROQ_API_KEY is not configured")
    # No automatic retries: a failed call is reported as-is
    return Groq(api_key=settings.GROQ_API_KEY, max_retries=0)


def build_system_prompt(age: int) -> str:
    return load_context("writer").format(age=age)


def generate_story(prompt: str, age: int = 5, client: Optional[Any] = None) -> StoryResult:
    """
    Generates a bedtime story for the given prompt.
    Uses hardened context with input isolation.

    Args:
        prompt: The user's story request
        age: Target age of the listener
        client: Groq-compatible client, defaults to the shared one

    Returns:
        StoryResult with the story text and output token usage

    Raises:
        UpstreamAuthError: the provider rejected the credentials
        UpstreamRateLimitError: the provider is throttling us
        UpstreamError: any other provider failure
    """
    client = client or get_client()

    params = {
        "model": settings.STORY_MODEL,
        "messages": [
            {"role": "system", "content": build_system_prompt(age)},
            {"role": "user", "content": wrap_user_input(prompt)},
        ],
        "max_tokens": settings.STORY_MAX_TOKENS,
    }
    if settings.STORY_TEMPERATURE is not None:
        params["temperature"] = settings.STORY_TEMPERATURE

    try:
        completion = client.chat.completions.create(**params)
    except (groq.AuthenticationError, groq.PermissionDeniedError) as e:
        log_agent_action("writer", "generate_story", f"auth failed: {e}", success=False)
        raise UpstreamAuthError(str(e)) from e
    except groq.RateLimitError as e:
        log_agent_action("writer", "generate_story", f"rate limited: {e}", success=False)
        raise UpstreamRateLimitError(str(e)) from e
    except groq.GroqError as e:
        log_agent_action("writer", "generate_story", f"upstream error: {e}", success=False)
        raise UpstreamError(str(e)) from e

    content = completion.choices[0].message.content if completion.choices else None
    if not content or not content.strip():
        raise UpstreamError("LLM response did not contain any text content.")

    usage = getattr(completion, "usage", None)
    tokens = getattr(usage, "completion_tokens", None) or 0

    log_agent_action("writer", "generate_story", f"model={settings.STORY_MODEL} tokens={tokens}")
    return StoryResult(text=content, model=settings.STORY_MODEL, tokens=tokens)
