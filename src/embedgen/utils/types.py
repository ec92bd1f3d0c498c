# types.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypedDict

from embedgen.config import DEFAULT_MICROCONTROLLER_NAME, EMPTY_CIRCUIT

sse_headers = {
        "Content-Type": "text/event-stream; charset=utf-8",
        "X-Accel-Buffering": "no",
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
    }

EventCallback = Callable[[str, Dict[str, Any]], Awaitable[None]]


class Status(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"


class RequestType(Enum):
    PROJECT_GENERATION = "project_generation"
    REPROMPT = "reprompt"


class CircuitComponent(TypedDict):
    id: str
    type: str
    x: float
    y: float
    label: str


# "from" is a keyword, so this one uses the functional syntax
CircuitConnection = TypedDict(
    "CircuitConnection", {"from": str, "to": str, "fromPin": str, "toPin": str}
)


class CircuitData(TypedDict):
    components: List[CircuitComponent]
    connections: List[CircuitConnection]


class ProjectMetadata(TypedDict):
    functionality: str
    microcontroller: str
    sensors: List[str]
    actuators: List[str]


class AIResponse(TypedDict, total=False):
    """
    Normalized model reply. Every field except steps is optional and only present
    when it could be extracted; error is set when the model or the normalizer failed.
    """

    code: str
    circuit: CircuitData
    metadata: ProjectMetadata
    steps: List[str]
    error: str


@dataclass
class AICallContext:
    original_prompt: str = ""
    current_code: str = ""
    current_circuit: Optional[CircuitData] = None
    metadata: Optional[ProjectMetadata] = None


@dataclass
class AICallParams:
    prompt: str
    type: RequestType
    context: Optional[AICallContext] = None


def defaultMetadata() -> ProjectMetadata:
    return {
        "functionality": "",
        "microcontroller": DEFAULT_MICROCONTROLLER_NAME,
        "sensors": [],
        "actuators": [],
    }


@dataclass
class ProjectState:
    """
    Caller-owned project accumulated across the initial generation and every reprompt.
    """

    code: str = ""
    circuit: CircuitData = field(default_factory=lambda: copy.deepcopy(EMPTY_CIRCUIT))
    metadata: ProjectMetadata = field(default_factory=defaultMetadata)
    steps: List[str] = field(default_factory=list)

    def toDict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "circuit": copy.deepcopy(self.circuit),
            "metadata": copy.deepcopy(self.metadata),
            "steps": list(self.steps),
        }

    @classmethod
    def fromDict(cls, data: Optional[Dict[str, Any]]) -> "ProjectState":
        data = data or {}
        metadata = defaultMetadata()
        metadata.update(data.get("metadata") or {})
        return cls(
            code=data.get("code") or "",
            circuit=copy.deepcopy(data.get("circuit") or EMPTY_CIRCUIT),
            metadata=metadata,
            steps=list(data.get("steps") or []),
        )


@dataclass
class ValidationResult:
    memory_valid: bool
    power_efficient: bool
    compilation_valid: bool
    warnings: List[str] = field(default_factory=list)



class WorkflowContext:
    def __init__(
        self,
        start_time_ns: Optional[int] = None,
        end_time_ns: Optional[int] = None,
        duration_ns: Optional[int] = None,
    ):
        self.start_time_ns = start_time_ns
        self.end_time_ns = end_time_ns
        self.duration_ns = duration_ns


class WorkflowState:
    def __init__(
        self,
        current_workflow: Optional[str],
        current_stage: Optional[str],
        context: Dict[str, Any],
        memory: Optional[Dict[str, Any]],
        status: Status,
        err_message: Optional[str] = None,
        workflows_context: Optional[Dict[str, WorkflowContext]] = None,
    ):
        self.current_workflow = current_workflow
        self.current_stage = current_stage or ""
        self.context = context
        self.memory = memory or {}
        self.status = status
        self.err_message = err_message or ""
        self.workflows_context = workflows_context or {}
