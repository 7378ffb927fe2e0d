from __future__ import annotations


def test_link_is_idempotent(client, miniature, recipe):
    url = f"/miniatures/{miniature['id']}/recipes/{recipe['id']}"
    r = client.post(url)
    assert r.status_code == 201
    assert r.content == b""
    assert client.post(url).status_code == 201

    linked = client.get(f"/miniatures/{miniature['id']}/recipes").json()["recipes"]
    assert [r["id"] for r in linked] == [recipe["id"]]
    assert client.get(f"/recipes/{recipe['id']}/usage-count").json() == {"recipe_id": recipe["id"], "miniature_count": 1}


def test_link_requires_both_sides(client, miniature, recipe):
    r = client.post(f"/miniatures/9999/recipes/{recipe['id']}")
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Miniature with id 9999 not found"

    r = client.post(f"/miniatures/{miniature['id']}/recipes/9999")
    assert r.status_code == 404
    assert r.json()["error"]["message"] == "Recipe with id 9999 not found"


def test_linked_recipes_sorted_by_name(client, miniature):
    for name in ("Wash", "Base", "Layer"):
        rec = client.post("/recipes", json={"name": name, "miniature_type": "troop", "steps": ["go"]}).json()
        client.post(f"/miniatures/{miniature['id']}/recipes/{rec['id']}")

    names = [r["name"] for r in client.get(f"/miniatures/{miniature['id']}/recipes").json()["recipes"]]
    assert names == ["Base", "Layer", "Wash"]


def test_usage_count_across_miniatures(client, project, recipe):
    for i in range(3):
        m = client.post(f"/projects/{project['id']}/miniatures", json={"name": f"Tactical {i}", "miniature_type": "troop"})
        client.post(f"/miniatures/{m.json()['id']}/recipes/{recipe['id']}")
    assert client.get(f"/recipes/{recipe['id']}/usage-count").json()["miniature_count"] == 3
    assert client.get("/recipes/5555/usage-count").status_code == 404


def test_unlink(client, miniature, recipe):
    url = f"/miniatures/{miniature['id']}/recipes/{recipe['id']}"
    client.post(url)
    assert client.delete(url).status_code == 204
    assert client.get(f"/miniatures/{miniature['id']}/recipes").json() == {"recipes": []}

    r = client.delete(url)
    assert r.status_code == 404
    assert r.json()["error"]["message"] == f"Recipe {recipe['id']} is not linked to miniature {miniature['id']}"


def test_deleting_recipe_drops_links_only(client, miniature, recipe):
    client.post(f"/miniatures/{miniature['id']}/recipes/{recipe['id']}")
    assert client.delete(f"/recipes/{recipe['id']}").status_code == 204
    assert client.get(f"/miniatures/{miniature['id']}").status_code == 200
    assert client.get(f"/miniatures/{miniature['id']}/recipes").json() == {"recipes": []}


def test_recipes_of_missing_miniature_is_404(client):
    assert client.get("/miniatures/4040/recipes").status_code == 404
