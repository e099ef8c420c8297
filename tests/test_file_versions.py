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


@pytest.fixture
def file_id(client):
    pid = client.post("/projects/", json={"name": "Robot", "start_date": "2024-01-01T00:00:00"}).json()["id"]
    f = client.post(
        f"/files/project/{pid}",
        json={"name": "robot", "type": "model", "file_extension": "blend", "path": "/robot.blend", "size": 100},
    ).json()
    return f["id"]


def test_versions_are_numbered_in_sequence(client, file_id):
    first = client.post(f"/file_versions/file/{file_id}", json={"change_description": "base mesh"})
    second = client.post(f"/file_versions/file/{file_id}", json={"change_description": "add arms"})
    assert first.status_code == 201
    assert first.json()["version_number"] == 1
    assert second.json()["version_number"] == 2

    versions = client.get(f"/file_versions/file/{file_id}").json()
    assert [v["version_number"] for v in versions] == [2, 1]


def test_new_version_updates_file_and_logs_activity(client, file_id):
    user = client.post(
        "/users/", json={"username": "u", "password": "p", "full_name": "U", "email": "u@example.com"}
    ).json()
    version = client.post(
        f"/file_versions/file/{file_id}",
        json={
            "created_by_id": user["id"],
            "path": "/robot_v1.blend",
            "content": "mesh data",
            "change_description": "retopology",
        },
    ).json()
    assert version["size"] == len("mesh data")
    assert version["path"] == "/robot_v1.blend"

    f = client.get(f"/files/{file_id}").json()
    assert f["current_version_id"] == version["id"]
    assert f["path"] == "/robot_v1.blend"
    assert f["size"] == version["size"]
    assert f["content"] == "mesh data"

    latest = client.get(f"/file_activities/file/{file_id}").json()[0]
    assert latest["action"] == "version"
    assert latest["user_id"] == user["id"]
    assert latest["details"]["version_number"] == 1


def test_explicit_version_number_clash_leaves_nothing_behind(client, file_id):
    client.post(f"/file_versions/file/{file_id}", json={"version_number": 3})
    before = client.get(f"/files/{file_id}").json()
    activities_before = client.get(f"/file_activities/file/{file_id}").json()

    response = client.post(f"/file_versions/file/{file_id}", json={"version_number": 3, "path": "/other.blend"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Version 3 already exists"

    assert client.get(f"/files/{file_id}").json() == before
    assert len(client.get(f"/file_versions/file/{file_id}").json()) == 1
    assert client.get(f"/file_activities/file/{file_id}").json() == activities_before


def test_unknown_author_rolls_back(client, file_id):
    response = client.post(f"/file_versions/file/{file_id}", json={"created_by_id": 999})
    assert response.status_code == 404
    assert client.get(f"/file_versions/file/{file_id}").json() == []
    assert client.get(f"/files/{file_id}").json()["current_version_id"] is None


def test_version_for_missing_file(client):
    response = client.post("/file_versions/file/999", json={})
    assert response.status_code == 404
    assert response.json()["detail"] == "File not found"


def test_update_and_delete_version(client, file_id):
    version = client.post(f"/file_versions/file/{file_id}", json={}).json()
    updated = client.patch(f"/file_versions/{version['id']}", json={"change_description": "fixed normals"})
    assert updated.json()["change_description"] == "fixed normals"

    assert client.delete(f"/file_versions/{version['id']}").status_code == 204
    assert client.get(f"/files/{file_id}").json()["current_version_id"] is None
    assert client.get(f"/file_versions/{version['id']}").status_code == 404


def test_version_number_zero_or_negative_is_rejected(client, file_id):
    for number in (0, -1):
        response = client.post(f"/file_versions/file/{file_id}", json={"version_number": number})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "version_number"
    assert client.get(f"/file_versions/file/{file_id}").json() == []


def test_explicit_version_number_is_kept(client, file_id):
    version = client.post(f"/file_versions/file/{file_id}", json={"version_number": 5}).json()
    assert version["version_number"] == 5
    assert client.post(f"/file_versions/file/{file_id}", json={}).json()["version_number"] == 6


def test_clearing_version_description(client, file_id):
    version = client.post(f"/file_versions/file/{file_id}", json={"change_description": "x"}).json()
    response = client.patch(f"/file_versions/{version['id']}", json={"change_description": None})
    assert response.status_code == 200
    assert response.json()["change_description"] is None
