import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bedtime_stories.core.config import settings
from bedtime_stories.core.exceptions import get_user_friendly_error
from bedtime_stories.core.logger import get_logger, log_api_request
from bedtime_stories.agents.narrative import writer
from bedtime_stories.web import routes

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 ================================")
    logger.info(f"📚 {settings.PROJECT_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")
    logger.info(f"🌐 Listening on {settings.HOST}:{settings.PORT}")
    logger.info("🚀 ================================")

    if settings.GROQ_API_KEY:
        writer.get_client()
        logger.info("✅ Groq API key configured")
    else:
        logger.warning("⚠️  WARNING: GROQ_API_KEY not configured!")

    if not settings.STABLE_DIFFUSION_API_KEY:
        logger.warning("⚠️  STABLE_DIFFUSION_API_KEY not configured, illustrations disabled")
    yield
    logger.info("👋 Shutting down...")

app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    log_api_request(request.method, request.url.path, response.status_code, (time.perf_counter() - start) * 1000)
    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        message = get_user_friendly_error("NOT_FOUND")
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )

#Include Routers
app.include_router(routes.router)


def run():
    import uvicorn
    uvicorn.run("bedtime_stories.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
