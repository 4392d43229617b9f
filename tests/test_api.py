"""HTTP surface tests using FastAPI's TestClient with an in-memory orchestrator."""
import pytest
from fastapi.testclient import TestClient

from helpers import MockAgent, failed, make_config, plan_json
from src.agent.registry import AgentRegistry
from src.orchestrator.main import app, build_orchestrator, get_orchestrator
from src.orchestrator.orchestrator import Orchestrator


def make_orchestrator(coder: MockAgent) -> Orchestrator:
    registry = AgentRegistry()
    plan = plan_json(("1", "coder", "write it"))
    registry.register("mockD", "d1", MockAgent("d1", lambda p: plan if "RESPONSE FORMAT" in p else "summary text"))
    registry.register("mockA", "m1", coder)
    config = make_config({"director": [("mockD", ["d1"], 1)], "coder": [("mockA", ["m1"], 1)]})
    return Orchestrator(config, registry)


@pytest.fixture
def orch():
    return make_orchestrator(MockAgent("m1", "print('hi')"))


@pytest.fixture
def client(orch):
    app.dependency_overrides[get_orchestrator] = lambda: orch
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_post_task(client, orch):
    r = client.post("/tasks", json={"type": "code", "description": "Create hello world"})
    assert r.status_code == 200
    data = r.json()
    assert len(data["results"]) == 2
    assert data["results"][0]["result"] == "print('hi')"
    assert data["results"][0]["metadata"]["tokensUsed"] == 10
    assert data["summary"] == "summary text"
    assert data["total_cost"] == pytest.approx(0.002)

    history = client.get("/history").json()
    assert len(history) == 1
    assert history[0]["task"]["description"] == "Create hello world"
    assert history[0]["task"]["id"]  # generated


def test_post_task_rejects_unknown_type(client):
    r = client.post("/tasks", json={"type": "poetry", "description": "x"})
    assert r.status_code == 422


def test_failed_step_maps_to_502(client):
    app.dependency_overrides[get_orchestrator] = lambda: make_orchestrator(MockAgent("m1", failed("m1")))
    r = client.post("/tasks", json={"id": "t-9", "description": "x"})
    assert r.status_code == 502
    assert "role coder" in r.json()["detail"]


def test_post_plan(client):
    body = {
        "task": {"id": "t-2", "description": "Run my plan"},
        "plan": {"steps": [{"stepId": 1, "agent": "coder", "action": "a", "input": "do"}]},
    }
    r = client.post("/plans", json=body)
    assert r.status_code == 200
    assert [res["result"] for res in r.json()["results"]] == ["print('hi')", "summary text"]


def test_ask(client):
    r = client.post("/ask", json={"question": "What is a monad?"})
    assert r.status_code == 200
    assert r.json()["success"] is True


def test_agents_roles_and_progress(client):
    assert client.get("/agents").json() == ["mockA/m1", "mockD/d1"]
    roles = client.get("/roles").json()["roles"]
    assert set(roles) == {"director", "coder"}
    assert client.get("/progress").json() is None
    assert client.get("/progress/unknown").status_code == 404


def test_build_orchestrator_without_config_uses_empty_config(tmp_path, monkeypatch):
    monkeypatch.setenv("MODEL_PRIORITIES_PATH", "missing.json")
    orch = build_orchestrator(project_root=tmp_path)
    assert orch.config.roles == {}
    assert orch.get_available_agents() == []
