from __future__ import annotations

from miniature_tracker.modules.miniatures import repository as miniatures_repo
from miniature_tracker.modules.miniatures.schemas import MiniatureCreateIn
from miniature_tracker.modules.projects import repository as projects_repo
from miniature_tracker.modules.projects.schemas import ProjectCreateIn


def test_create_defaults_to_unpainted(client, project):
    r = client.post(
        f"/projects/{project['id']}/miniatures",
        json={"name": "Intercessor", "miniature_type": "troop", "notes": "sergeant"},
    )
    assert r.status_code == 200
    m = r.json()
    assert m["progress_status"] == "unpainted"
    assert m["project_id"] == project["id"]
    assert m["notes"] == "sergeant"
    assert m["created_at"] == m["updated_at"]


def test_create_under_missing_project_is_404(client):
    r = client.post("/projects/999/miniatures", json={"name": "Lost", "miniature_type": "troop"})
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Project with id 999 not found"


def test_create_validates_name_before_parent_lookup(client):
    r = client.post("/projects/999/miniatures", json={"name": "  ", "miniature_type": "troop"})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Miniature name is required"


def test_list_in_creation_order(client, project):
    for name in ("Zeta", "Alpha", "Mu"):
        client.post(f"/projects/{project['id']}/miniatures", json={"name": name, "miniature_type": "troop"})

    r = client.get(f"/projects/{project['id']}/miniatures")
    assert r.status_code == 200
    assert [m["name"] for m in r.json()["miniatures"]] == ["Zeta", "Alpha", "Mu"]
    assert client.get("/projects/31337/miniatures").status_code == 404


def test_progress_update_keeps_other_fields(client, miniature):
    r = client.put(f"/miniatures/{miniature['id']}", json={"progress_status": "primed"})
    assert r.status_code == 200
    u = r.json()
    assert u["progress_status"] == "primed"
    assert u["name"] == miniature["name"]
    assert u["miniature_type"] == miniature["miniature_type"]
    assert u["updated_at"] > miniature["updated_at"]


def test_progress_can_move_backwards(client, miniature):
    client.put(f"/miniatures/{miniature['id']}", json={"progress_status": "completed"})
    r = client.put(f"/miniatures/{miniature['id']}", json={"progress_status": "primed"})
    assert r.json()["progress_status"] == "primed"


def test_update_rejects_unknown_status_and_blank_name(client, miniature):
    r = client.put(f"/miniatures/{miniature['id']}", json={"progress_status": "varnished"})
    assert r.status_code == 400

    r = client.put(f"/miniatures/{miniature['id']}", json={"name": ""})
    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Miniature name cannot be empty"


def test_update_missing_is_404(client):
    assert client.put("/miniatures/777", json={"notes": "x"}).status_code == 404


def test_delete_keeps_linked_recipe(client, miniature, recipe, upload):
    assert upload(miniature["id"]).status_code == 200
    client.post(f"/miniatures/{miniature['id']}/recipes/{recipe['id']}")

    assert client.delete(f"/miniatures/{miniature['id']}").status_code == 204
    assert client.get(f"/miniatures/{miniature['id']}").status_code == 404
    assert client.get(f"/recipes/{recipe['id']}").status_code == 200
    assert client.get(f"/recipes/{recipe['id']}/usage-count").json()["miniature_count"] == 0
    assert client.delete(f"/miniatures/{miniature['id']}").status_code == 404


def test_repository_update_merge_semantics(engine):
    p = projects_repo.create(engine, ProjectCreateIn(name="P", game_system="horus_heresy", army="Sons of Horus"))
    m = miniatures_repo.create(engine, p.id, MiniatureCreateIn(name="Justaerin", miniature_type="troop", notes="n"))

    u = miniatures_repo.update(engine, m.id, {"notes": None, "progress_status": None, "bogus": 1})
    assert u is not None
    assert u.notes == "n"
    assert u.progress_status == "unpainted"
    assert u.updated_at > m.updated_at

    assert miniatures_repo.update(engine, 10_000, {"name": "x"}) is None
    assert miniatures_repo.delete(engine, m.id) is True
    assert miniatures_repo.delete(engine, m.id) is False


def test_null_notes_in_update_keeps_notes(client, project):
    m = client.post(
        f"/projects/{project['id']}/miniatures",
        json={"name": "Apothecary", "miniature_type": "character", "notes": "keep"},
    ).json()

    r = client.put(f"/miniatures/{m['id']}", json={"notes": None})
    assert r.status_code == 200
    assert r.json()["notes"] == "keep"


def test_delete_removes_photo_rows_and_bytes(client, miniature, upload):
    keys = [upload(miniature["id"]).json()["file_path"] for _ in range(2)]

    assert client.delete(f"/miniatures/{miniature['id']}").status_code == 204
    storage = client.app.state.storage
    assert not any(storage.exists(k) for k in keys)
