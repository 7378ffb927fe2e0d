from __future__ import annotations

import json
import re

import pytest

from miniature_tracker.core.storage.base import StorageBackendError
from miniature_tracker.modules.photos import repository as photos_repo
from miniature_tracker.modules.photos.service import MAX_FILE_SIZE, discard_stored, photo_storage_key


def test_upload_records_metadata_and_stores_bytes(client, miniature, upload):
    r = upload(miniature["id"], data=b"abc123", filename="front.png")
    assert r.status_code == 200
    ph = r.json()
    assert ph["miniature_id"] == miniature["id"]
    assert ph["filename"] == "front.png"
    assert ph["file_size"] == 6
    assert ph["mime_type"] == "image/png"
    assert re.fullmatch(rf"miniatures/{miniature['id']}/[0-9a-f-]{{36}}_front\.png", ph["file_path"])

    assert client.app.state.storage.retrieve(ph["file_path"]) == b"abc123"
    assert client.get(f"/miniatures/{miniature['id']}/photos").json() == [ph]


def test_same_filename_twice_gets_distinct_keys(client, miniature, upload):
    a = upload(miniature["id"], filename="same.png").json()
    b = upload(miniature["id"], filename="same.png").json()
    assert a["file_path"] != b["file_path"]
    assert len(client.get(f"/miniatures/{miniature['id']}/photos").json()) == 2


def test_size_boundary(client, miniature, upload):
    ok = upload(miniature["id"], data=b"\x00" * MAX_FILE_SIZE)
    assert ok.status_code == 200
    assert ok.json()["file_size"] == 10_485_760

    too_big = upload(miniature["id"], data=b"\x00" * (MAX_FILE_SIZE + 1))
    assert too_big.status_code == 400
    assert too_big.json()["error"]["error_type"] == "file_too_large"
    assert len(client.get(f"/miniatures/{miniature['id']}/photos").json()) == 1


@pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "image/webp"])
def test_allowed_content_types(miniature, upload, content_type):
    assert upload(miniature["id"], content_type=content_type).status_code == 200


@pytest.mark.parametrize("content_type", ["image/jpg", "image/gif", "IMAGE/PNG", "application/pdf"])
def test_rejected_content_types_touch_nothing(client, miniature, upload, content_type):
    r = upload(miniature["id"], content_type=content_type)
    assert r.status_code == 400
    assert r.json()["error"]["error_type"] == "invalid_file_type"
    assert client.get(f"/miniatures/{miniature['id']}/photos").json() == []

    root = client.app.state.storage.root
    assert not any(p.is_file() for p in root.rglob("*"))


def test_missing_file_field(client, miniature):
    r = client.post(f"/miniatures/{miniature['id']}/photos", files={"picture": ("a.png", b"x", "image/png")})
    assert r.status_code == 400
    assert r.json()["error"]["error_type"] == "missing_file"


def test_extra_file_parts_are_ignored(client, miniature):
    r = client.post(
        f"/miniatures/{miniature['id']}/photos",
        files=[("photo", ("a.png", b"front", "image/png")), ("thumb", ("b.png", b"thumb", "image/png"))],
    )
    assert r.status_code == 200
    assert r.json()["filename"] == "a.png"
    assert r.json()["file_size"] == 5


def test_part_without_filename(client, miniature):
    r = client.post(f"/miniatures/{miniature['id']}/photos", data={"photo": "just text"}, files={"other": ("a.png", b"x", "image/png")})
    assert r.status_code == 400
    assert r.json()["error"]["error_type"] == "missing_filename"


def test_upload_to_missing_miniature_is_404(upload):
    r = upload(123456)
    assert r.status_code == 404
    assert r.json()["error"]["error_type"] == "not_found"


def test_storage_failure_is_500(client, miniature, upload, monkeypatch):
    storage = client.app.state.storage

    def boom(data, key):
        raise StorageBackendError("disk full")

    monkeypatch.setattr(storage, "store", boom)
    r = upload(miniature["id"])
    assert r.status_code == 500
    assert r.json()["error"]["error_type"] == "storage_error"
    assert client.get(f"/miniatures/{miniature['id']}/photos").json() == []


def test_delete_photo_removes_row_and_bytes(client, miniature, upload):
    ph = upload(miniature["id"]).json()
    assert client.delete(f"/photos/{ph['id']}").status_code == 204
    assert not client.app.state.storage.exists(ph["file_path"])
    assert client.get(f"/miniatures/{miniature['id']}/photos").json() == []
    assert client.delete(f"/photos/{ph['id']}").status_code == 404


def test_delete_photo_tolerates_missing_bytes(client, miniature, upload, capsys):
    ph = upload(miniature["id"]).json()
    client.app.state.storage.delete(ph["file_path"])
    capsys.readouterr()

    assert client.delete(f"/photos/{ph['id']}").status_code == 204
    events = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line.startswith("{")]
    assert any(e["event"] == "photo.storage_delete_failed" for e in events)


def test_photo_url_and_content(client, miniature, upload):
    ph = upload(miniature["id"], data=b"pixels", content_type="image/webp", filename="side.webp").json()

    r = client.get(f"/photos/{ph['id']}/url")
    assert r.status_code == 200
    assert r.json() == {"photo_id": ph["id"], "url": f"http://testserver/uploads/{ph['file_path']}"}

    r = client.get(f"/photos/{ph['id']}/content")
    assert r.status_code == 200
    assert r.content == b"pixels"
    assert r.headers["content-type"] == "image/webp"

    r = client.get(f"/uploads/{ph['file_path']}")
    assert r.status_code == 200
    assert r.content == b"pixels"


def test_content_with_missing_bytes_is_404(client, miniature, upload):
    ph = upload(miniature["id"]).json()
    client.app.state.storage.delete(ph["file_path"])
    assert client.get(f"/photos/{ph['id']}/content").status_code == 404
    assert client.get("/photos/999/url").status_code == 404


def test_storage_key_policy():
    k = photo_storage_key(7, "my photo.jpeg")
    assert re.fullmatch(r"miniatures/7/[0-9a-f-]{36}_my photo\.jpeg", k)
    assert photo_storage_key(7, "noext").endswith("_noext.jpg")
    assert photo_storage_key(7, "../../etc/passwd.png").endswith("_passwd.png")


def test_discard_stored_counts_and_skips_failures(client, miniature, upload):
    ph = upload(miniature["id"]).json()
    storage = client.app.state.storage
    assert discard_stored(storage, [ph["file_path"], "miniatures/0/gone.png"]) == 1


def test_repository_delete_by_miniature(client, miniature, upload):
    upload(miniature["id"])
    upload(miniature["id"])
    eng = client.app.state.engine

    removed = photos_repo.delete_by_miniature(eng, miniature["id"])
    assert len(removed) == 2
    assert photos_repo.find_by_miniature(eng, miniature["id"]) == []
    assert photos_repo.delete_by_miniature(eng, miniature["id"]) == []
