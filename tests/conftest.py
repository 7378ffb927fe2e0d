from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from miniature_tracker.core.config import Settings
from miniature_tracker.core.db import create_db_engine, init_schema
from miniature_tracker.main import create_app

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{(tmp_path / 'db' / 'test.db').as_posix()}",
        local_storage_path=str(tmp_path / "uploads"),
        public_base_url="http://testserver",
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def engine(settings):
    eng = create_db_engine(settings)
    init_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def project(client):
    r = client.post("/projects", json={"name": "Ultramarines", "game_system": "warhammer_40k", "army": "Space Marines"})
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def miniature(client, project):
    r = client.post(
        f"/projects/{project['id']}/miniatures",
        json={"name": "Captain", "miniature_type": "character"},
    )
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def recipe(client):
    r = client.post(
        "/recipes",
        json={"name": "Blue armour", "miniature_type": "troop", "steps": ["prime", "basecoat", "wash"]},
    )
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def upload(client):
    def _upload(miniature_id, data=PNG_BYTES, filename="captain.png", content_type="image/png"):
        return client.post(
            f"/miniatures/{miniature_id}/photos",
            files={"photo": (filename, data, content_type)},
        )

    return _upload
