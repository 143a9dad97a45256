"""Integration tests for the FastAPI endpoints."""

import pytest
from fastapi.testclient import TestClient

from stubs import StubHandler, StubRouter
from tutorverse.agents.tutor_agent import TutorAgent
from tutorverse.api.deps import get_tutor_agent
from tutorverse.main import app
from tutorverse.models.schemas import MathSolution, PhysicsAnswer, Subject

client = TestClient(app)


@pytest.fixture
def stub_agent():
    agent = TutorAgent(
        router=StubRouter(Subject.PHYSICS),
        handlers={
            Subject.MATH: StubHandler(MathSolution(solution="30")),
            Subject.PHYSICS: StubHandler(PhysicsAnswer(answer="About 3e8 m/s", constants_used=["speedOfLight"])),
        },
    )
    app.dependency_overrides[get_tutor_agent] = lambda: agent
    yield agent
    app.dependency_overrides.clear()


def test_ask_returns_physics_envelope(stub_agent):
    response = client.post("/api/v1/tutor/ask", data={"question": "What is the speed of light?"})
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "physics"
    assert data["answer"] == "About 3e8 m/s"
    assert data["constants_used"] == ["speedOfLight"]
    assert data["original_query"] == "What is the speed of light?"
    assert isinstance(data["timestamp"], int)
    assert "solution" not in data


def test_ask_with_blank_question_returns_error_envelope(stub_agent):
    response = client.post("/api/v1/tutor/ask", data={"question": "   "})
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "error"
    assert data["category"] == "input_empty"
    assert data["original_query"] == ""
    assert stub_agent.router.calls == []


def test_ask_without_question_field_returns_error_envelope(stub_agent):
    response = client.post("/api/v1/tutor/ask", data={})
    assert response.status_code == 200
    assert response.json()["category"] == "input_empty"


def test_welcome_envelope(stub_agent):
    response = client.get("/api/v1/tutor/welcome")
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "general"
    assert data["message"].startswith("Welcome to TutorVerse")


def test_list_constants():
    response = client.get("/api/v1/constants")
    assert response.status_code == 200
    keys = [entry["key"] for entry in response.json()]
    assert "speedOfLight" in keys


def test_get_constant_and_not_found():
    assert client.get("/api/v1/constants/electronMass").json()["unit"] == "kg"
    response = client.get("/api/v1/constants/doesNotExist")
    assert response.status_code == 404


def test_calculator_endpoint():
    ok = client.post("/api/v1/calculator/evaluate", json={"expression": "(2+3)*4"}).json()
    assert ok == {"expression": "(2+3)*4", "result": 20.0, "ok": True}

    bad = client.post("/api/v1/calculator/evaluate", json={"expression": "1/0"}).json()
    assert bad["ok"] is False
    assert bad["result"] is None


def test_health_endpoints(stub_agent):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/health/live").json()["status"] == "alive"
    detailed = client.get("/health/detailed").json()
    assert detailed["dependencies"]["constants"]["status"] == "healthy"
    assert "llm_api" in detailed["dependencies"]
