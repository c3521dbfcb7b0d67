import asyncio
import json
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from bedtime_stories.core.config import settings
from bedtime_stories.core.exceptions import PayloadTooLargeError, StoryError, StoryValidationError, UpstreamError
from bedtime_stories.core.logger import get_logger, log_error
from bedtime_stories.agents.narrative import painter, writer
from bedtime_stories.agents.narrative.partitioner import split_story_into_parts
from bedtime_stories.schemas import ErrorResponse, StoryMetadata, StoryRequest, StoryResponse

logger = get_logger("routes")
router = APIRouter()

# Monotonic reference for /health uptime
STARTED_AT = time.monotonic()


def error_response(error: StoryError) -> JSONResponse:
    """Build the error envelope, upstream details only in development."""
    body = ErrorResponse(error=error.user_message)
    if error.detail and settings.show_error_details:
        body.details = error.detail
    return JSONResponse(status_code=error.status_code, content=body.model_dump(exclude_none=True))


def validate_story_request(story_request: StoryRequest) -> str:
    prompt = story_request.prompt
    if not prompt or not prompt.strip():
        raise StoryValidationError("PROMPT_REQUIRED")

    limit = settings.MAX_PROMPT_LENGTH
    if limit and len(prompt) > limit:
        raise StoryValidationError("PROMPT_TOO_LONG", f"prompt has {len(prompt)} characters", limit=limit)
    return prompt


async def read_body(request: Request) -> bytes:
    """Request body, refused with 413 past MAX_BODY_BYTES (0 means no limit)."""
    limit = settings.MAX_BODY_BYTES
    declared = request.headers.get("content-length", "")
    if limit and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(f"content-length {declared}", limit=limit)

    body = await request.body()
    if limit and len(body) > limit:
        raise PayloadTooLargeError(f"body has {len(body)} bytes", limit=limit)
    return body


async def parse_story_request(request: Request) -> StoryRequest:
    body = await read_body(request)
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StoryValidationError("INVALID_REQUEST", str(e))

    if not isinstance(payload, dict):
        raise StoryValidationError("INVALID_REQUEST", "request body must be a JSON object")

    try:
        return StoryRequest.model_validate(payload)
    except ValidationError as e:
        fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
        raise StoryValidationError("INVALID_AGE" if "age" in fields else "INVALID_REQUEST", str(e))


@router.get("/")
async def root():
    return {
        "name": settings.PROJECT_NAME,
        "message": "Bedtime Stories API is running! 📚",
        "version": settings.VERSION,
        "endpoints": {
            "health": "/health",
            "generateStory": "/api/generate-story (POST)"
        }
    }


@router.get("/health")
async def health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": time.monotonic() - STARTED_AT
    }


@router.post("/api/generate-story")
async def generate_story_api(request: Request):
    """
    Generate a bedtime story, optionally illustrated in three parts.
    """
    try:
        story_request = await parse_story_request(request)
        prompt = validate_story_request(story_request)
    except StoryValidationError as e:
        logger.warning(f"Rejected story request: {e.user_message}")
        return error_response(e)

    age = story_request.age
    logger.info(f"📖 Generating story (age={age}, images={story_request.generate_images})")

    try:
        result = await asyncio.to_thread(writer.generate_story, prompt, age)
    except StoryError as e:
        log_error("Story generation failed", e, {"status": e.status_code})
        return error_response(e)
    except Exception as e:
        log_error("Unexpected story generation failure", e)
        return error_response(UpstreamError(str(e)))

    logger.info("✅ Story generated")

    images = None
    parts = None
    if story_request.generate_images and settings.STABLE_DIFFUSION_API_KEY:
        logger.info("🎨 Generating images...")
        story_parts = split_story_into_parts(result.text)
        try:
            images = await painter.generate_illustrations(story_parts, age)
            parts = story_parts
            logger.info("✅ Images generated")
        except Exception as e:
            log_error("Image generation failed, continuing without images", e)

    response = StoryResponse(
        story=result.text,
        images=images,
        parts=parts,
        metadata=StoryMetadata(model=result.model, tokens=result.tokens or 0, age=age),
    )
    return response.model_dump()
