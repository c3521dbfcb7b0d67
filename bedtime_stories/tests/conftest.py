import importlib
import os
import threading

# Console logging only; must run before the app is imported
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
from fastapi.testclient import TestClient

from bedtime_stories.main import app
from bedtime_stories.core.config import settings
from bedtime_stories.agents.narrative import painter, writer
from bedtime_stories.agents.narrative.writer import StoryResult


SAMPLE_STORY = (
    "Once upon a time there was a sleepy puppy named Biscuit. "
    "Biscuit loved to chase butterflies in the garden! "
    "One evening he found a glowing firefly. "
    "Would the firefly be his friend? "
    "They danced together under the stars. "
    "Then Biscuit curled up in his basket and fell asleep."
)


@pytest.fixture(name="client")
def client_fixture():
    return TestClient(app)


@pytest.fixture(name="story_calls")
def fake_writer_fixture(monkeypatch):
    """Replace the language model with a canned story; records each call."""
    calls = []

    def fake_generate_story(prompt, age=5, client=None):
        calls.append({"prompt": prompt, "age": age})
        return StoryResult(text=SAMPLE_STORY, model="test-model", tokens=42)

    monkeypatch.setattr(writer, "generate_story", fake_generate_story)
    return calls


@pytest.fixture(name="image_calls")
def fake_painter_fixture(monkeypatch):
    """Replace the image provider with numbered fake URLs; records each prompt."""
    calls = []
    lock = threading.Lock()

    def fake_generate_image(prompt):
        # called from worker threads
        with lock:
            calls.append(prompt)
            number = len(calls)
        return f"https://images.test/{number}.png"

    monkeypatch.setattr(painter, "generate_image", fake_generate_image)
    return calls


@pytest.fixture(name="image_key")
def image_key_fixture(monkeypatch):
    monkeypatch.setattr(settings, "STABLE_DIFFUSION_API_KEY", "test-sd-key")
    return "test-sd-key"


@pytest.fixture(name="no_image_key")
def no_image_key_fixture(monkeypatch):
    monkeypatch.setattr(settings, "STABLE_DIFFUSION_API_KEY", None)


@pytest.fixture(name="sample_story")
def sample_story_fixture():
    return SAMPLE_STORY


@pytest.fixture(name="default_settings")
def default_settings_fixture(monkeypatch):
    """Settings as built from an environment without ENVIRONMENT or a .env file."""
    import dotenv
    from bedtime_stories.core import config

    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.setattr(dotenv, "load_dotenv", lambda *args, **kwargs: False)
    # the reload rebinds these; put the shared instances back afterwards
    monkeypatch.setattr(config, "Settings", config.Settings)
    monkeypatch.setattr(config, "settings", config.settings)
    return importlib.reload(config).settings
