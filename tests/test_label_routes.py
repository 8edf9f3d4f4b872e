from annotator.core.security import create_access_token


def _create(client, headers, name, color=None):
    response = client.post("/labels/", json={"name": name, "color": color}, headers=headers)
    assert response.status_code == 200
    return response.json()


def _link(client, headers, parent, child, **body):
    return client.post(f"/labels/{parent['id']}/add-child/{child['id']}", json=body or None, headers=headers)


def test_requires_token(client):
    assert client.get("/labels/").status_code == 401


def test_rejects_bad_token(client):
    response = client.get("/labels/", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"].startswith("Token is invalid")


def test_rejects_token_for_unknown_user(client, user):
    token = create_access_token({"sub": "nobody"})
    response = client.get("/labels/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_label_crud(client, headers, user):
    label = _create(client, headers, "Person", "#ff0000")
    assert label["user_id"] == user.id

    assert [item["id"] for item in client.get("/labels/", headers=headers).json()] == [label["id"]]
    assert client.get(f"/labels/{label['id']}", headers=headers).json()["name"] == "Person"

    updated = client.put(f"/labels/{label['id']}", json={"color": "#00ff00"}, headers=headers).json()
    assert updated["name"] == "Person"
    assert updated["color"] == "#00ff00"

    response = client.delete(f"/labels/{label['id']}", headers=headers)
    assert response.json() == {"message": "Label deleted", "reparented": []}
    assert client.get(f"/labels/{label['id']}", headers=headers).status_code == 404


def test_update_rejects_null_name(client, headers):
    label = _create(client, headers, "Person")

    response = client.put(f"/labels/{label['id']}", json={"name": None}, headers=headers)
    assert response.status_code == 422

    # Still usable afterwards, name unchanged
    renamed = client.put(f"/labels/{label['id']}", json={"color": "blue"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "Person"


def test_labels_are_private(client, headers, other_headers):
    label = _create(client, headers, "Mine")

    assert client.get("/labels/", headers=other_headers).json() == []
    assert client.get(f"/labels/{label['id']}", headers=other_headers).status_code == 404
    assert client.put(f"/labels/{label['id']}", json={"name": "x"}, headers=other_headers).status_code == 404
    assert client.delete(f"/labels/{label['id']}", headers=other_headers).status_code == 404
    assert client.get(f"/labels/{label['id']}/tree", headers=other_headers).status_code == 404


def test_hierarchy_routes(client, headers):
    animal = _create(client, headers, "Animal")
    dog = _create(client, headers, "Dog")
    cat = _create(client, headers, "Cat")
    puppy = _create(client, headers, "Puppy")

    response = _link(client, headers, animal, dog)
    assert response.status_code == 200
    assert response.json()["parent_id"] == animal["id"]
    assert response.json()["child_id"] == dog["id"]
    assert _link(client, headers, animal, cat, relation_type="child_to_parent").status_code == 200
    assert _link(client, headers, dog, puppy).status_code == 200

    forest = client.get("/labels/hierarchy/all", headers=headers).json()
    assert [tree["name"] for tree in forest] == ["Animal"]
    assert [child["name"] for child in forest[0]["children"]] == ["Dog", "Cat"]

    tree = client.get(f"/labels/{dog['id']}/tree", headers=headers).json()
    assert tree["children"][0]["name"] == "Puppy"

    parent = client.get(f"/labels/{puppy['id']}/parent", headers=headers).json()
    assert parent["id"] == dog["id"]
    assert client.get(f"/labels/{animal['id']}/parent", headers=headers).json() == {"parent_id": None}

    children = client.get(f"/labels/{animal['id']}/children", headers=headers).json()
    assert [child["name"] for child in children] == ["Dog", "Cat"]

    path = client.get(f"/labels/{puppy['id']}/path", headers=headers).json()
    assert [item["name"] for item in path] == ["Animal", "Dog", "Puppy"]


def test_add_child_validation_errors(client, headers, other_headers):
    a = _create(client, headers, "A")
    b = _create(client, headers, "B")
    c = _create(client, headers, "C")
    theirs = _create(client, other_headers, "Theirs")

    assert _link(client, headers, a, b).status_code == 200

    response = _link(client, headers, c, b)
    assert response.status_code == 400
    assert f"Label {b['id']} already has parent {a['id']}" in response.json()["detail"]

    response = _link(client, headers, b, a)
    assert response.status_code == 400
    assert "circular reference" in response.json()["detail"]

    assert _link(client, headers, a, a).status_code == 400
    assert _link(client, headers, a, theirs).status_code == 404
    response = _link(client, headers, a, c, relation_type="sideways")
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid relation_type")


def test_can_add_child_preflight(client, headers):
    a = _create(client, headers, "A")
    b = _create(client, headers, "B")

    assert client.get(f"/labels/{a['id']}/can-add-child/{b['id']}", headers=headers).json() == {
        "valid": True,
        "error": None,
    }
    check = client.get(f"/labels/{a['id']}/can-add-child/{a['id']}", headers=headers).json()
    assert check == {"valid": False, "error": "A label cannot be its own parent"}


def test_remove_child(client, headers):
    a = _create(client, headers, "A")
    b = _create(client, headers, "B")
    _link(client, headers, a, b)

    response = client.delete(f"/labels/{a['id']}/remove-child/{b['id']}", headers=headers)
    assert response.json() == {"success": True, "message": "Relationship removed"}

    response = client.delete(f"/labels/{a['id']}/remove-child/{b['id']}", headers=headers)
    assert response.status_code == 404
    assert "No relationship found" in response.json()["detail"]


def test_delete_reparents_children(client, headers):
    a = _create(client, headers, "A")
    b = _create(client, headers, "B")
    c = _create(client, headers, "C")
    _link(client, headers, a, b)
    _link(client, headers, b, c)

    response = client.delete(f"/labels/{b['id']}", headers=headers)
    assert response.json() == {"message": "Label deleted", "reparented": [c["id"]]}

    path = client.get(f"/labels/{c['id']}/path", headers=headers).json()
    assert [item["name"] for item in path] == ["A", "C"]


def test_ping(client):
    assert client.get("/ping").json() == {"message": "pong"}
