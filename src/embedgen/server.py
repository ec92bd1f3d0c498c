import asyncio
import logging
from typing import Any, Dict, List, Optional, Set

from fastapi import FastAPI
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from embedgen.config import DEFAULT_LANGUAGE, FRAMEWORKS, LANGUAGES, LOG_LEVEL, MICROCONTROLLERS
from embedgen.executor import Executor, buildState, buildWorkflows
from embedgen.utils.helpers import formatSSEMessage
from embedgen.utils.types import EventCallback, ProjectState, RequestType, sse_headers
from embedgen.utils.validator import estimateResources, validateCode

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="embedgen API")

# each run of the API gets its own queue with key run_id
event_queues: Dict[str, asyncio.Queue] = {}
# the event loop only keeps weak references to tasks
background_tasks: Set[asyncio.Task] = set()


class GenerateRequest(BaseModel):
    userInput: str
    microcontroller: Optional[str] = None
    language: Optional[str] = None


class RepromptRequest(BaseModel):
    userInput: str
    originalPrompt: str = ""
    project: Dict[str, Any] = Field(default_factory=dict)
    microcontroller: Optional[str] = None
    language: Optional[str] = None


class ValidateRequest(BaseModel):
    code: str
    microcontroller: str
    language: str = DEFAULT_LANGUAGE
    ramUsage: Optional[str] = None
    flashUsage: Optional[str] = None


class ValidateResponse(BaseModel):
    resourceEstimates: Dict[str, str]
    memoryValid: bool
    powerEfficient: bool
    compilationValid: bool
    warnings: List[str]


# workflows call the event callback to say "hey, we have a new update!" and the callback
# adds the message to the queue; event_stream then reads from this queue and sends each
# server-side event to the user
def getCallback(queue: asyncio.Queue) -> EventCallback:
    async def on_event(event_type: str, payload: Dict[str, Any]):
        await queue.put({"type": event_type, **payload})

    return on_event


async def execute(run_id: str, queue: asyncio.Queue, executor: Executor, updateCallback: EventCallback):
    try:
        await executor.run(updateCallback)
        await queue.put({"type": "result", "payload": executor.result()})
    except Exception as e:
        logger.exception("Run %s failed", run_id)
        await queue.put({"type": "error", "message": str(e)})
    finally:
        await queue.put({"type": "complete"})


async def event_stream(run_id: str, queue: asyncio.Queue):
    try:
        while True:
            event = await queue.get()
            yield formatSSEMessage(event)
            if event.get("type") == "complete":
                break
    finally:
        event_queues.pop(run_id, None)


def startRun(run_id: str, executor: Executor) -> StreamingResponse:
    queue = event_queues.setdefault(run_id, asyncio.Queue())
    updateCallback = getCallback(queue)
    task = asyncio.create_task(execute(run_id, queue, executor, updateCallback))
    background_tasks.add(task)
    task.add_done_callback(background_tasks.discard)
    return StreamingResponse(event_stream(run_id, queue), headers=sse_headers)


@app.post("/projects/{run_id}")
async def generate(run_id: str, request: GenerateRequest):
    """
    Generate a new project, streaming server-sent events:
      - run/workflow/substage progress events
      - result (project and validation)
      - complete (always at end)
    """
    state = buildState(
        request.userInput,
        microcontroller=request.microcontroller,
        language=request.language,
    )
    executor = Executor(state, buildWorkflows(RequestType.PROJECT_GENERATION))
    return startRun(run_id, executor)


@app.post("/projects/{run_id}/reprompt")
async def reprompt(run_id: str, request: RepromptRequest):
    # the client owns the project and sends it back with every reprompt
    state = buildState(
        request.userInput,
        project=ProjectState.fromDict(request.project),
        original_prompt=request.originalPrompt,
        microcontroller=request.microcontroller,
        language=request.language,
    )
    executor = Executor(state, buildWorkflows(RequestType.REPROMPT))
    return startRun(run_id, executor)


@app.post("/validate", response_model=ValidateResponse)
async def validate(request: ValidateRequest):
    estimates = estimateResources(request.code, request.microcontroller)
    ram_usage = request.ramUsage or estimates["ram"]
    flash_usage = request.flashUsage or estimates["flash"]
    result = validateCode(
        request.code, request.microcontroller, ram_usage, flash_usage, request.language
    )
    return ValidateResponse(
        resourceEstimates={"ram": ram_usage, "flash": flash_usage},
        memoryValid=result.memory_valid,
        powerEfficient=result.power_efficient,
        compilationValid=result.compilation_valid,
        warnings=result.warnings,
    )


@app.get("/microcontrollers")
async def microcontrollers():
    return {
        "microcontrollers": [{"id": board_id, **board} for board_id, board in MICROCONTROLLERS.items()],
        "languages": [{"id": key, "name": name} for key, name in LANGUAGES.items()],
        "frameworks": [{"id": key, "name": name} for key, name in FRAMEWORKS.items()],
    }
