import json
from typing import Any, Dict, List

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

import embedgen.agents.ProjectAgent as project_agent_module
from embedgen.models.BaseModel import BaseModel


class FakeModel(BaseModel):
    """BaseModel stand-in that replays canned replies instead of calling a provider."""

    api_key_env = "EMBEDGEN_FAKE_API_KEY"

    def __init__(self, responses: List[str]):
        self.model_name = "fake"
        self.temperature = 0.0
        self.api_key = "fake"
        self.llm = FakeListChatModel(responses=responses)

    def getModel(self):
        return self.llm


def fenced(payload: Dict[str, Any]) -> str:
    return f"```json\n{json.dumps(payload)}\n```"


@pytest.fixture(autouse=True)
def real_llm_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    # tests choose mock mode explicitly
    monkeypatch.setattr(project_agent_module, "USE_MOCK_LLM", False)


@pytest.fixture
def blink_payload() -> Dict[str, Any]:
    return {
        "metadata": {
            "functionality": "Blink an LED",
            "microcontroller": "Arduino Uno",
            "sensors": [],
            "actuators": ["LED"],
        },
        "steps": ["Step 1: Read the request", "Step 2: Wrote the sketch"],
        "code": "void setup() {\n  pinMode(13, OUTPUT);\n}\n\nvoid loop() {\n  digitalWrite(13, HIGH);\n}\n",
        "circuit": {
            "components": [
                {"id": "mcu", "type": "arduino-uno", "x": 100, "y": 100, "label": "Arduino Uno"},
                {"id": "led1", "type": "led", "x": 300, "y": 100, "label": "LED"},
            ],
            "connections": [
                {"from": "mcu", "to": "led1", "fromPin": "D13", "toPin": "anode"},
            ],
        },
    }
