# tests/test_sections.py


def test_create_section_assigns_id(client, admin_headers):
    resp = client.post("/sections", json={"title": "Phones"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["title"] == "Phones"
    assert body["id"]
    assert body["createdAt"] and body["updatedAt"]


def test_create_section_without_title_is_400(client, admin_headers):
    for payload in ({}, {"title": ""}, {"title": "   "}):
        resp = client.post("/sections", json=payload, headers=admin_headers)
        assert resp.status_code == 400, resp.text
        assert resp.json() == {"error": "Title required"}

    resp = client.post("/sections", headers=admin_headers)
    assert resp.status_code == 400
    assert client.get("/sections").json() == []


def test_sections_listed_newest_first(client, create_section):
    first = create_section("Books")
    second = create_section("Furniture")
    third = create_section("Clothes")
    ids = [s["id"] for s in client.get("/sections").json()]
    assert ids == [third["id"], second["id"], first["id"]]


def test_section_mutations_require_admin(client, create_section):
    section = create_section()
    bad = {"x-admin-password": "nope"}
    assert client.post("/sections", json={"title": "X"}).status_code == 403
    resp = client.post("/sections", json={"title": "X"}, headers=bad)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Forbidden"}
    assert client.put(f"/sections/{section['id']}", json={"title": "X"}, headers=bad).status_code == 403
    assert client.delete(f"/sections/{section['id']}", headers=bad).status_code == 403
    # nothing changed
    assert [s["title"] for s in client.get("/sections").json()] == ["Electronics"]


def test_update_section_title(client, admin_headers, create_section):
    section = create_section("Phnoes")
    resp = client.put(f"/sections/{section['id']}", json={"title": "Phones"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["id"] == section["id"]
    assert body["title"] == "Phones"
    assert body["createdAt"] == section["createdAt"]
    assert client.get("/sections").json()[0]["title"] == "Phones"


def test_update_missing_section_is_404(client, admin_headers):
    resp = client.put("/sections/does-not-exist", json={"title": "Phones"}, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not found"}


def test_update_section_with_empty_title_is_400(client, admin_headers, create_section):
    section = create_section()
    resp = client.put(f"/sections/{section['id']}", json={"title": ""}, headers=admin_headers)
    assert resp.status_code == 400


def test_delete_section_is_idempotent(client, admin_headers, create_section):
    section = create_section()
    for _ in range(2):
        resp = client.delete(f"/sections/{section['id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Section deleted"}
    assert client.get("/sections").json() == []
