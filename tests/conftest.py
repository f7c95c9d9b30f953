import pytest
from fastapi.testclient import TestClient

from model_app.config import Settings
from model_app.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(training_delay_seconds=0, model_version="test")


@pytest.fixture
def client(settings):
    # Entering the client runs the lifespan, i.e. the (zero-length) training step.
    with TestClient(create_app(settings)) as c:
        yield c
