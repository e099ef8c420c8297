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
def project_and_user(client):
    project = client.post("/projects/", json={"name": "Robot", "start_date": "2024-01-01T00:00:00"}).json()
    user = client.post(
        "/users/",
        json={"username": "ana", "password": "pw", "full_name": "Ana Ruiz", "email": "ana@example.com"},
    ).json()
    return project["id"], user["id"]


def test_add_and_list_members(client, project_and_user):
    pid, uid = project_and_user
    response = client.post(f"/project_members/project/{pid}", json={"user_id": uid, "role": "animator"})
    assert response.status_code == 201
    member = response.json()
    assert member["role"] == "animator"
    assert member["user"]["full_name"] == "Ana Ruiz"

    members = client.get(f"/project_members/project/{pid}").json()
    assert len(members) == 1
    assert members[0]["user"]["username"] == "ana"


def test_member_role_defaults(client, project_and_user):
    pid, uid = project_and_user
    member = client.post(f"/project_members/project/{pid}", json={"user_id": uid}).json()
    assert member["role"] == "member"


def test_same_user_twice(client, project_and_user):
    pid, uid = project_and_user
    client.post(f"/project_members/project/{pid}", json={"user_id": uid})
    response = client.post(f"/project_members/project/{pid}", json={"user_id": uid})
    assert response.status_code == 400
    assert response.json()["detail"] == "User is already a member of this project"


def test_unknown_user_or_project(client, project_and_user):
    pid, uid = project_and_user
    response = client.post(f"/project_members/project/{pid}", json={"user_id": 999})
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"
    assert client.post("/project_members/project/999", json={"user_id": uid}).status_code == 404


def test_update_member_role(client, project_and_user):
    pid, uid = project_and_user
    member = client.post(f"/project_members/project/{pid}", json={"user_id": uid}).json()
    response = client.patch(f"/project_members/{member['id']}", json={"role": "lead"})
    assert response.status_code == 200
    assert response.json()["role"] == "lead"
    assert client.get(f"/project_members/{member['id']}").json()["role"] == "lead"


def test_remove_member_by_user(client, project_and_user):
    pid, uid = project_and_user
    client.post(f"/project_members/project/{pid}", json={"user_id": uid})
    assert client.delete(f"/project_members/project/{pid}/user/{uid}").status_code == 204
    assert client.get(f"/project_members/project/{pid}").json() == []
    response = client.delete(f"/project_members/project/{pid}/user/{uid}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Member not found"


def test_remove_member_by_id(client, project_and_user):
    pid, uid = project_and_user
    member = client.post(f"/project_members/project/{pid}", json={"user_id": uid}).json()
    assert client.delete(f"/project_members/{member['id']}").status_code == 204
    assert client.get(f"/project_members/{member['id']}").status_code == 404
    # el usuario sigue existiendo
    assert client.get(f"/users/{uid}").status_code == 200


def test_member_role_can_be_cleared(client, project_and_user):
    pid, uid = project_and_user
    member = client.post(f"/project_members/project/{pid}", json={"user_id": uid}).json()
    response = client.patch(f"/project_members/{member['id']}", json={"role": None})
    assert response.status_code == 200
    assert response.json()["role"] is None
