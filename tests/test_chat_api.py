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
from app.api.endpoints.chat import get_registry
from app.services.conversation import SessionRegistry
from app.services.responses import GREETING


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
    registry = SessionRegistry()
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_registry] = lambda: registry
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def start(client, **payload):
    response = client.post("/chat/sessions", json=payload or None)
    assert response.status_code == 201
    return response.json()


def say(client, session_id, text):
    response = client.post(f"/chat/sessions/{session_id}/messages", json={"text": text})
    assert response.status_code == 200
    return response.json()


def test_new_session(client):
    chat = start(client)
    assert chat["messages"] == [{"text": GREETING, "sender": "assistant"}]
    assert chat["ui_state"]["projectSetup"] is False
    assert len(chat["ui_state"]) == 7


def test_conversation_unlocks_panels(client):
    sid = start(client)["id"]
    say(client, sid, "I want to build a robot")
    chat = say(client, sid, "team members please")

    assert [m["sender"] for m in chat["messages"]] == ["assistant", "user", "assistant", "user", "assistant"]
    assert chat["messages"][-1]["text"].startswith("I've added your team members")
    assert chat["ui_state"]["projectSetup"] is True
    assert chat["ui_state"]["teamSetup"] is True

    ui_state = client.get(f"/chat/sessions/{sid}/ui_state").json()
    assert ui_state["teamSetup"] is True
    assert ui_state["toolsComparison"] is False


def test_blank_message_changes_nothing(client):
    sid = start(client)["id"]
    chat = say(client, sid, "   ")
    assert len(chat["messages"]) == 1
    assert len(client.get(f"/chat/sessions/{sid}/messages").json()) == 1


def test_default_panels(client):
    chat = start(client, default_panels=["toolsComparison"])
    assert chat["ui_state"]["toolsComparison"] is True


def test_unknown_session(client):
    assert client.get("/chat/sessions/nope").status_code == 404
    response = client.post("/chat/sessions/nope/messages", json={"text": "hi"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Session not found"


def test_delete_session(client):
    sid = start(client)["id"]
    assert client.delete(f"/chat/sessions/{sid}").status_code == 204
    assert client.get(f"/chat/sessions/{sid}").status_code == 404
    assert client.delete(f"/chat/sessions/{sid}").status_code == 404


def test_dashboard_empty_until_unlocked(client):
    sid = start(client)["id"]
    view = client.get(f"/chat/sessions/{sid}/dashboard").json()
    assert view["empty"] is True
    assert view["placeholder"] == "Project details will appear here as you chat"


def test_dashboard_reads_the_database(client):
    pid = client.post("/projects/", json={"name": "Sci-Fi Robot", "start_date": "2024-01-01T00:00:00"}).json()["id"]
    client.post(f"/milestones/project/{pid}", json={"name": "Texturing"})
    client.post(f"/tasks/project/{pid}", json={"title": "UVs", "status": "done"})
    client.post(f"/tasks/project/{pid}", json={"title": "Bake", "status": "todo"})

    sid = start(client)["id"]
    say(client, sid, "Let's add milestones for texture and animation")
    say(client, sid, "show me a progress chart")

    view = client.get(f"/chat/sessions/{sid}/dashboard", params={"project_id": pid}).json()
    assert [p["tag"] for p in view["panels"]] == ["projectSetup", "progressGraphs"]
    project_panel, graphs = view["panels"]
    assert project_panel["content"]["projects"][0]["name"] == "Sci-Fi Robot"
    assert project_panel["content"]["milestones"][0]["name"] == "Texturing"
    assert graphs["content"]["percent_done"] == 50.0

    tab = client.get(f"/chat/sessions/{sid}/dashboard", params={"active_tab": "graphs", "project_id": pid}).json()
    assert [p["tag"] for p in tab["panels"]] == ["progressGraphs"]


def test_dashboard_unknown_tab(client):
    sid = start(client)["id"]
    response = client.get(f"/chat/sessions/{sid}/dashboard", params={"active_tab": "settings"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown tab: settings"


def test_blank_message_keeps_ui_state(client):
    sid = start(client)["id"]
    unlocked = say(client, sid, "compare software")
    for text in ("   ", ""):
        chat = say(client, sid, text)
        assert chat["ui_state"] == unlocked["ui_state"]
        assert chat["messages"] == unlocked["messages"]
    assert client.get(f"/chat/sessions/{sid}/ui_state").json()["toolsComparison"] is True
