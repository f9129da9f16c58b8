# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

def _add(client, name, description="desc"):
    r = client.post("/groups", json={"name": name, "description": description})
    assert r.status_code == 201
    return r.json()


def test_create_group_assigns_id_and_location(client):
    r = client.post("/groups", json={"name": "Eng", "description": "builders"})
    assert r.status_code == 201
    body = r.json()
    assert body == {"id": 1, "name": "Eng", "description": "builders"}
    assert r.headers["location"] == "/groups/1"


def test_create_group_without_body_is_400(client):
    r = client.post("/groups")
    assert r.status_code == 400
    data = r.json()
    assert data["ok"] is False
    assert data["code"] == "body_required"
    assert data["error"] == "Group is required"


def test_create_group_with_invalid_body_is_400(client):
    r = client.post("/groups", json={"description": "no name"})
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"


def test_get_group_round_trip(client):
    g = _add(client, "Eng")
    r = client.get(f"/groups/{g['id']}")
    assert r.status_code == 200
    assert r.json() == g


def test_get_missing_group_is_404(client):
    r = client.get("/groups/999")
    assert r.status_code == 404
    data = r.json()
    assert data["ok"] is False and data["code"] == "not_found"


def test_update_group_replaces_it(client):
    g = _add(client, "Eng")
    r = client.put(f"/groups/{g['id']}",
                   json={"id": g["id"], "name": "Engineering", "description": "new"})
    assert r.status_code == 200
    assert client.get(f"/groups/{g['id']}").json() == \
        {"id": g["id"], "name": "Engineering", "description": "new"}


def test_update_group_without_body_id_adopts_path_id(client):
    g = _add(client, "Eng")
    r = client.put(f"/groups/{g['id']}", json={"name": "Renamed"})
    assert r.status_code == 200
    assert r.json() == {"id": g["id"], "name": "Renamed", "description": None}
    assert len(client.get("/groups").json()) == 1


def test_update_group_id_mismatch_is_400(client):
    g = _add(client, "Eng")
    r = client.put(f"/groups/{g['id']}", json={"id": g["id"] + 1, "name": "x"})
    assert r.status_code == 400
    assert r.json()["code"] == "id_mismatch"


def test_update_missing_group_is_404(client):
    r = client.put("/groups/77", json={"id": 77, "name": "x"})
    assert r.status_code == 404


def test_delete_group(client):
    g = _add(client, "Eng")
    r = client.delete(f"/groups/{g['id']}")
    assert r.status_code == 204
    assert client.get(f"/groups/{g['id']}").status_code == 404
    assert client.delete(f"/groups/{g['id']}").status_code == 404


def test_non_integer_id_is_400(client):
    r = client.get("/groups/abc")
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_request"


def test_store_is_called_through_service(client, app):
    _add(client, "Eng")
    client.get("/groups")
    calls = app.state.store.calls
    assert ("save", None) in calls
    assert ("find_all",) in calls


def test_create_group_with_id_is_400(client):
    g = _add(client, "Eng")
    r = client.post("/groups", json={"id": g["id"], "name": "clobber"})
    assert r.status_code == 400
    assert r.json()["code"] == "id_not_allowed"
    assert client.get(f"/groups/{g['id']}").json()["name"] == "Eng"


def test_deleted_group_id_is_never_reused(client):
    g = _add(client, "Eng")
    client.post(f"/groups/{g['id']}/members", json={"name": "old"})
    assert client.delete(f"/groups/{g['id']}").status_code == 204

    r = client.post("/groups", json={"id": g["id"], "name": "new"})
    assert r.status_code == 400
    assert client.get(f"/groups/{g['id']}/members").status_code == 404

    fresh = _add(client, "new")
    assert fresh["id"] != g["id"]
    assert client.get(f"/groups/{fresh['id']}/members").json() == []
