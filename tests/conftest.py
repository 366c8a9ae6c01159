"""Shared fixtures: isolated settings, a running app and small PNG payloads."""

from __future__ import annotations

from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from pixperfect.core.config import get_settings
from pixperfect.core.container import get_container

RED = (255, 0, 0)
WHITE = (255, 255, 255)


def make_png(width: int = 4, height: int = 2) -> bytes:
    """White image with a single red pixel in the top-left corner."""
    image = Image.new("RGB", (width, height), WHITE)
    image.putpixel((0, 0), RED)
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def open_png(data: bytes) -> Image.Image:
    image = Image.open(BytesIO(data))
    image.load()
    return image.convert("RGB")


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def app_env(tmp_path, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DATABASE__URL", f"sqlite+aiosqlite:///{tmp_path / 'pixperfect.db'}")
    monkeypatch.setenv("SECURITY__SECRET_KEY", "test-secret-key")
    monkeypatch.setenv("SECURITY__BCRYPT_ROUNDS", "4")
    monkeypatch.setenv("STORAGE__BACKEND", "local")
    monkeypatch.setenv("STORAGE__LOCAL__DIRECTORY", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    get_container.cache_clear()
    yield tmp_path
    get_settings.cache_clear()
    get_container.cache_clear()


@pytest.fixture
def client(app_env):
    from pixperfect.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def upload_dir(app_env):
    return app_env / "uploads"


def register(client: TestClient, username: str, password: str = "secret123") -> dict[str, str]:
    """Sign up and log in, returning the Authorization header."""
    resp = client.post("/signup", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
