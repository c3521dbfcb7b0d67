import os
from typing import List, Optional
from dotenv import load_dotenv

# Load variables from .env file
load_dotenv()


def _optional_float(name: str, default: str) -> Optional[float]:
    raw = os.getenv(name, default).strip()
    return float(raw) if raw else None


class Settings:
    PROJECT_NAME: str = "Bedtime Stories API"
    VERSION: str = "1.0.0"

    # Upstream error details are only returned when this is "development"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3001"))
    CORS_ORIGINS: List[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # Story generation (Groq)
    GROQ_API_KEY: Optional[str] = os.getenv("GROQ_API_KEY")
    STORY_MODEL: str = os.getenv("STORY_MODEL", "llama-3.3-70b-versatile")
    STORY_MAX_TOKENS: int = int(os.getenv("STORY_MAX_TOKENS", "2000"))
    STORY_TEMPERATURE: Optional[float] = _optional_float("STORY_TEMPERATURE", "0.7")
    # 0 disables the length check
    MAX_PROMPT_LENGTH: int = int(os.getenv("MAX_PROMPT_LENGTH", "5000"))
    MAX_BODY_BYTES: int = int(os.getenv("MAX_BODY_BYTES", str(10 * 1024 * 1024)))

    # Illustrations (Stable Diffusion); no key means no images
    STABLE_DIFFUSION_API_KEY: Optional[str] = os.getenv("STABLE_DIFFUSION_API_KEY")
    IMAGE_API_URL: str = os.getenv("IMAGE_API_URL", "https://modelslab.com/api/v7/images/text-to-image")
    IMAGE_MODEL: str = os.getenv("IMAGE_MODEL", "flux")
    IMAGE_SIZE: int = int(os.getenv("IMAGE_SIZE", "1024"))
    IMAGE_TIMEOUT_SECONDS: float = float(os.getenv("IMAGE_TIMEOUT_SECONDS", "60"))

    # Logging; file handlers can be switched off (tests, read-only containers)
    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "true").strip().lower() not in ("0", "false", "no")
    LOG_DIR: str = os.getenv("LOG_DIR", "./logs")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def show_error_details(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "development"

settings = Settings()
