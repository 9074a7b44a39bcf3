from __future__ import annotations

import pytest

from src.vision.vision.container import STORAGE_MEMORY, build_container
from src.vision.vision.main import create_app


@pytest.fixture
def container():
    return build_container(storage_backend=STORAGE_MEMORY)


@pytest.fixture
def app():
    return create_app("config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
