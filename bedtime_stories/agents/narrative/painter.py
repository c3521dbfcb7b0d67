import asyncio
from typing import Optional

import requests

from bedtime_stories.core.config import settings
from bedtime_stories.core.logger import log_agent_action, log_error
from bedtime_stories.schemas import IllustrationSet, StoryParts

# Only the start of each segment is sent to the image model
SEGMENT_PROMPT_CHARS = 200

SEGMENT_STYLES = {
    "beginning": "warm and inviting opening scene, soft morning light",
    "middle": "playful and adventurous scene, bright lively colors",
    "end": "calm and cozy ending scene, gentle moonlight, sleepy mood",
}


def age_style(age: int) -> str:
    """Art direction for the listener's age band."""
    if age <= 5:
        return "simple rounded shapes, bold primary colors, very cute and soft characters"
    if age <= 8:
        return "whimsical watercolor, friendly detailed characters, storybook charm"
    return "rich detailed illustration, expressive characters, cinematic composition"


def build_image_prompt(segment: str, style: str, age: int = 5) -> str:
    return (
        f"Children's storybook illustration, {style}, {age_style(age)}, "
        f"colorful and friendly: {segment[:SEGMENT_PROMPT_CHARS]}"
    )


def generate_image(prompt: str) -> Optional[str]:
    """
    Generates one illustration and returns its URL.
    Returns None when no key is configured or the provider fails.
    """
    if not settings.STABLE_DIFFUSION_API_KEY:
        log_agent_action("painter", "generate_image", "no Stable Diffusion API key, skipping", success=False)
        return None

    payload = {
        "prompt": prompt,
        "model_id": settings.IMAGE_MODEL,
        "key": settings.STABLE_DIFFUSION_API_KEY,
        "width": settings.IMAGE_SIZE,
        "height": settings.IMAGE_SIZE,
        "samples": 1
    }

    try:
        resp = requests.post(settings.IMAGE_API_URL, json=payload, timeout=settings.IMAGE_TIMEOUT_SECONDS)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        log_error("Painter Error", e)
        return None

    if not isinstance(data, dict):
        log_agent_action("painter", "generate_image", "unexpected response format", success=False)
        return None

    image_url = None
    if data.get("status") != "error" and data.get("output"):
        image_url = data["output"][0]

    if not image_url:
        log_agent_action("painter", "generate_image", f"no image in response: {data.get('message', data.get('status'))}", success=False)
        return None

    log_agent_action("painter", "generate_image", image_url)
    return image_url


async def _illustrate(slot: str, segment: str, age: int) -> Optional[str]:
    prompt = build_image_prompt(segment, SEGMENT_STYLES[slot], age)
    return await asyncio.to_thread(generate_image, prompt)


async def generate_illustrations(parts: StoryParts, age: int = 5) -> IllustrationSet:
    """
    Requests the three segment illustrations concurrently.
    A failed slot is None, the others are kept.
    """
    slots = ("beginning", "middle", "end")
    results = await asyncio.gather(
        *(_illustrate(slot, getattr(parts, slot), age) for slot in slots),
        return_exceptions=True,
    )

    urls = {}
    for slot, result in zip(slots, results):
        if isinstance(result, BaseException):
            log_error(f"Illustration failed for {slot}", result)
            urls[slot] = None
        else:
            urls[slot] = result

    return IllustrationSet(**urls)
