import sys
import os
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("database_url", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session, create_engine
from sqlalchemy.pool import StaticPool

from app.main import app
from app.database import get_session


engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def override_get_session():
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def setup_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


@pytest.fixture
def client():
    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def new_project(client, name="Robot"):
    return client.post("/projects/", json={"name": name, "start_date": "2024-01-01T00:00:00"}).json()["id"]


def new_folder(client, pid, name, parent_id=None):
    payload = {"name": name, "path": f"/{name}", "parent_id": parent_id}
    response = client.post(f"/folders/project/{pid}", json=payload)
    assert response.status_code == 201
    return response.json()


def new_file(client, pid, name="robot", folder_id=None, **extra):
    payload = {
        "name": name,
        "type": "model",
        "file_extension": "blend",
        "path": f"/{name}.blend",
        "size": 2048,
        "folder_id": folder_id,
    }
    payload.update(extra)
    response = client.post(f"/files/project/{pid}", json=payload)
    assert response.status_code == 201
    return response.json()


def test_root_and_child_folders(client):
    pid = new_project(client)
    assets = new_folder(client, pid, "assets")
    new_folder(client, pid, "textures", assets["id"])
    new_folder(client, pid, "docs")

    roots = client.get(f"/folders/project/{pid}").json()
    assert [f["name"] for f in roots] == ["assets", "docs"]
    children = client.get(f"/folders/project/{pid}", params={"parent_id": assets["id"]}).json()
    assert [f["name"] for f in children] == ["textures"]


def test_parent_folder_from_other_project(client):
    pid = new_project(client)
    other = new_project(client, "Other")
    foreign = new_folder(client, other, "theirs")
    response = client.post(f"/folders/project/{pid}", json={"name": "x", "path": "/x", "parent_id": foreign["id"]})
    assert response.status_code == 400
    assert response.json()["detail"] == "Parent folder belongs to another project"


def test_folder_cycles_are_rejected(client):
    pid = new_project(client)
    a = new_folder(client, pid, "a")
    b = new_folder(client, pid, "b", a["id"])
    c = new_folder(client, pid, "c", b["id"])

    for target in (a, c):
        response = client.patch(f"/folders/{a['id']}", json={"parent_id": target["id"]})
        assert response.status_code == 400
        assert response.json()["detail"] == "A folder cannot be moved inside itself or one of its subfolders"

    # mover c a la raíz sí se permite
    assert client.patch(f"/folders/{c['id']}", json={"parent_id": None}).json()["parent_id"] is None


def test_file_defaults_and_listing(client):
    pid = new_project(client)
    folder = new_folder(client, pid, "models")
    created = new_file(client, pid, "robot", folder["id"], file_metadata={"polys": 12000})
    new_file(client, pid, "notes", type="document", file_extension="md", path="/notes.md")

    assert created["current_version_id"] is None
    assert created["file_metadata"] == {"polys": 12000}
    assert [f["name"] for f in client.get(f"/files/project/{pid}").json()] == ["notes", "robot"]
    in_folder = client.get(f"/files/project/{pid}", params={"folder_id": folder["id"]}).json()
    assert [f["name"] for f in in_folder] == ["robot"]


def test_file_type_and_size_are_validated(client):
    pid = new_project(client)
    bad_type = client.post(
        f"/files/project/{pid}",
        json={"name": "x", "type": "video", "file_extension": "mp4", "path": "/x", "size": 1},
    )
    assert bad_type.status_code == 400
    bad_size = client.post(
        f"/files/project/{pid}",
        json={"name": "x", "type": "model", "file_extension": "obj", "path": "/x", "size": -5},
    )
    assert bad_size.status_code == 400
    assert bad_size.json()["errors"][0]["field"] == "size"


def test_file_in_folder_of_other_project(client):
    pid = new_project(client)
    other = new_project(client, "Other")
    foreign = new_folder(client, other, "theirs")
    response = client.post(
        f"/files/project/{pid}",
        json={"name": "x", "type": "model", "file_extension": "obj", "path": "/x", "size": 1,
              "folder_id": foreign["id"]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Folder belongs to another project"


def test_file_activity_log(client):
    pid = new_project(client)
    f = new_file(client, pid)
    client.patch(f"/files/{f['id']}", json={"name": "robot_v2"})

    activities = client.get(f"/file_activities/file/{f['id']}").json()
    assert [a["action"] for a in activities] == ["renamed", "created"]
    assert activities[0]["details"] == {"from": "robot", "to": "robot_v2"}

    manual = client.post(f"/file_activities/file/{f['id']}", json={"action": "updated"})
    assert manual.status_code == 201
    assert client.post(f"/file_activities/file/{f['id']}", json={"action": "x", "user_id": 999}).status_code == 404


def test_delete_folder_cascades(client):
    pid = new_project(client)
    top = new_folder(client, pid, "top")
    sub = new_folder(client, pid, "sub", top["id"])
    deep = new_folder(client, pid, "deep", sub["id"])
    nested_file = new_file(client, pid, "nested", deep["id"])
    outside = new_file(client, pid, "outside")

    assert client.delete(f"/folders/{top['id']}").status_code == 204

    for folder in (top, sub, deep):
        assert client.get(f"/folders/{folder['id']}").status_code == 404
    assert client.get(f"/files/{nested_file['id']}").status_code == 404
    assert client.get(f"/file_activities/file/{nested_file['id']}").status_code == 404
    assert client.get(f"/files/{outside['id']}").status_code == 200


def test_delete_file(client):
    pid = new_project(client)
    f = new_file(client, pid)
    assert client.delete(f"/files/{f['id']}").status_code == 204
    assert client.get(f"/files/{f['id']}").status_code == 404
    assert client.delete(f"/files/{f['id']}").json()["detail"] == "File not found"


def test_null_for_required_folder_field(client):
    pid = new_project(client)
    folder = new_folder(client, pid, "assets")
    for field in ("name", "path"):
        response = client.patch(f"/folders/{folder['id']}", json={field: None})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field


def test_null_for_required_file_field(client):
    pid = new_project(client)
    f = new_file(client, pid)
    for field in ("name", "type", "file_extension", "path", "size"):
        response = client.patch(f"/files/{f['id']}", json={field: None})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field
    assert client.patch(f"/files/{f['id']}", json={"content": None}).status_code == 200


def test_null_activity_action(client):
    pid = new_project(client)
    f = new_file(client, pid)
    activity = client.get(f"/file_activities/file/{f['id']}").json()[0]
    response = client.patch(f"/file_activities/{activity['id']}", json={"action": None})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "action"
