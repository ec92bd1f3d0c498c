import asyncio
import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

import embedgen.agents.ProjectAgent as project_agent_module
from embedgen.agents.ProjectAgent import ProjectAgent
from embedgen.executor import Executor, buildState, buildWorkflows
from embedgen.server import app, event_queues, execute, getCallback
from embedgen.utils.types import RequestType

from conftest import FakeModel, fenced


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _events(body: str) -> List[Dict[str, Any]]:
    return [
        json.loads(line[len("data: "):])
        for line in body.splitlines()
        if line.startswith("data: ")
    ]


def test_microcontrollers_lists_board_table(client) -> None:
    response = client.get("/microcontrollers")

    assert response.status_code == 200
    boards = {board["id"]: board for board in response.json()["microcontrollers"]}
    assert boards["esp32"]["battery_powered"] is True
    assert boards["arduino-uno"]["ram"] == "2KB"
    assert {lang["id"] for lang in response.json()["languages"]} == {"c", "cpp", "python", "javascript", "rust"}


def test_validate_uses_given_usage(client) -> None:
    response = client.post(
        "/validate",
        json={
            "code": "void loop() {}",
            "microcontroller": "arduino-uno",
            "language": "cpp",
            "ramUsage": "2.1KB / 2KB",
            "flashUsage": "1KB / 32KB",
        },
    )

    body = response.json()
    assert response.status_code == 200
    assert body["memoryValid"] is False
    assert body["resourceEstimates"] == {"ram": "2.1KB / 2KB", "flash": "1KB / 32KB"}


def test_validate_estimates_missing_usage(client) -> None:
    response = client.post(
        "/validate",
        json={"code": "x" * 60, "microcontroller": "esp32", "language": "python"},
    )

    body = response.json()
    assert body["resourceEstimates"] == {"ram": "2KB / 520KB", "flash": "6KB / 4MB"}
    assert body["powerEfficient"] is False
    assert body["compilationValid"] is True


def test_validate_accepts_board_display_name(client) -> None:
    response = client.post("/validate", json={"code": "x" * 60, "microcontroller": "ESP32", "language": "python"})

    body = response.json()
    assert body["resourceEstimates"] == {"ram": "2KB / 520KB", "flash": "6KB / 4MB"}
    assert "Unknown microcontroller. Cannot validate hardware constraints." not in body["warnings"]


def test_validate_unknown_board(client) -> None:
    response = client.post("/validate", json={"code": "x", "microcontroller": "z80"})

    body = response.json()
    assert body["warnings"] == ["Unknown microcontroller. Cannot validate hardware constraints."]
    assert not any([body["memoryValid"], body["powerEfficient"], body["compilationValid"]])


def test_generate_streams_progress_then_result(client, monkeypatch) -> None:
    monkeypatch.setattr(project_agent_module, "USE_MOCK_LLM", True)

    response = client.post(
        "/projects/run-1",
        json={"userInput": "Blink an LED", "microcontroller": "esp32", "language": "cpp"},
    )

    events = _events(response.text)
    types = [event["type"] for event in events]
    assert response.status_code == 200
    assert types[0] == "run_started"
    assert types[-2:] == ["result", "complete"]
    assert "run_succeeded" in types

    result = events[-2]["payload"]
    assert result["status"] == "success"
    assert "LED_PIN" in result["project"]["code"]
    assert result["project"]["steps"][0] == "Analyzing your request for a hardware project..."
    assert result["validation"]["microcontroller"] == "esp32"


def test_reprompt_merges_into_client_project(client, monkeypatch) -> None:
    monkeypatch.setattr(project_agent_module, "USE_MOCK_LLM", True)
    project = {
        "code": "old",
        "circuit": {"components": [{"id": "old", "type": "led", "x": 0, "y": 0, "label": "Old"}], "connections": []},
        "metadata": {"functionality": "Old", "microcontroller": "Arduino Uno", "sensors": [], "actuators": []},
        "steps": ["Earlier step"],
    }

    response = client.post(
        "/projects/run-2/reprompt",
        json={"userInput": "Slow it down", "originalPrompt": "Blink an LED", "project": project},
    )

    result = _events(response.text)[-2]["payload"]
    merged = result["project"]
    assert merged["steps"][:2] == ["Earlier step", 'Processing your request: "Slow it down"']
    assert merged["steps"][-1] == "Completed processing your request"
    assert [c["id"] for c in merged["circuit"]["components"]] == ["mcu", "r1", "led1"]


def test_generate_without_credential_reports_error_step(client, monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.setattr(project_agent_module, "LLM_PROVIDER", "gemini")

    response = client.post("/projects/run-3", json={"userInput": "Blink an LED"})

    events = _events(response.text)
    result = events[-2]["payload"]
    assert "workflow_failed" in [event["type"] for event in events]
    assert result["status"] == "error"
    assert result["project"]["steps"][-1] == "Error generating project: GOOGLE_API_KEY is not configured"


@pytest.mark.asyncio
async def test_run_after_disconnect_does_not_register_a_queue(blink_payload) -> None:
    # the stream for this run is already gone, so its queue is no longer registered
    queue: asyncio.Queue = asyncio.Queue()
    agent = ProjectAgent(model=FakeModel([fenced(blink_payload)]))
    executor = Executor(buildState("Blink an LED"), buildWorkflows(RequestType.PROJECT_GENERATION, agent=agent))

    await execute("run-gone", queue, executor, getCallback(queue))

    assert "run-gone" not in event_queues
    drained = [queue.get_nowait() for _ in range(queue.qsize())]
    assert [event["type"] for event in drained[-2:]] == ["result", "complete"]
    assert drained[-2]["payload"]["status"] == "success"
