from pydantic import BaseModel, Field, ConfigDict
from typing import Optional


class StoryRequest(BaseModel):
    # Optional here so that a missing prompt is reported as 400, not 422
    prompt: Optional[str] = None
    generate_images: bool = Field(True, alias="generateImages")
    age: int = Field(5, ge=1, le=18, description="Target age of the listener")

    model_config = ConfigDict(populate_by_name=True)


class StoryParts(BaseModel):
    beginning: str
    middle: str
    end: str


class IllustrationSet(BaseModel):
    beginning: Optional[str] = None
    middle: Optional[str] = None
    end: Optional[str] = None


class StoryMetadata(BaseModel):
    model: str
    tokens: int = 0
    age: int

    model_config = ConfigDict(protected_namespaces=())


class StoryResponse(BaseModel):
    success: bool = True
    story: str
    images: Optional[IllustrationSet] = None
    parts: Optional[StoryParts] = None
    metadata: StoryMetadata


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[str] = None
