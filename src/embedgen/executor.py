import asyncio
import logging
from typing import Any, Dict, Optional

from embedgen.agents.ProjectAgent import ProjectAgent
from embedgen.config import LOG_LEVEL
from embedgen.orchestrator.orchestrator import WorkflowOrchestrator
from embedgen.utils.types import (
    EventCallback,
    ProjectState,
    RequestType,
    Status,
    WorkflowState,
)
from embedgen.workflows.BaseWorkflow import BaseWorkflow
from embedgen.workflows.CodeValidationWorkflow import CodeValidationWorkflow
from embedgen.workflows.ProjectGenerationWorkflow import ProjectGenerationWorkflow
from embedgen.workflows.RepromptWorkflow import RepromptWorkflow

logger = logging.getLogger(__name__)


def buildWorkflows(
    request_type: RequestType, agent: Optional[ProjectAgent] = None
) -> Dict[str, BaseWorkflow]:
    agent = agent or ProjectAgent()
    if request_type == RequestType.REPROMPT:
        workflows = {"reprompt": RepromptWorkflow(agent)}
    else:
        workflows = {"project_generation": ProjectGenerationWorkflow(agent)}
    workflows["code_validation"] = CodeValidationWorkflow()
    return workflows


def buildState(
    user_input: str,
    project: Optional[ProjectState] = None,
    original_prompt: str = "",
    microcontroller: Optional[str] = None,
    language: Optional[str] = None,
) -> WorkflowState:
    context: Dict[str, Any] = {"user_input": user_input, "original_prompt": original_prompt}
    if project is not None:
        context["project"] = project
    return WorkflowState(
        current_workflow=None,
        current_stage=None,
        context=context,
        memory={"microcontroller": microcontroller, "language": language},
        status=Status.PENDING,
    )


class Executor:
    def __init__(self, state: WorkflowState, workflows: Dict[str, BaseWorkflow]):
        self.state = state
        self.workflows = workflows

    async def run(self, updateCallback: EventCallback) -> WorkflowState:
        orchestrator = WorkflowOrchestrator(self.workflows)
        self.state = await orchestrator.runWorkflows(updateCallback, self.state)
        return self.state

    def result(self) -> Dict[str, Any]:
        project = self.state.context.get("project")
        validation = self.state.context.get("code_validation_result")
        return {
            "status": self.state.status.value,
            "error": self.state.err_message or None,
            "project": project.toDict() if isinstance(project, ProjectState) else None,
            "validation": validation,
        }

    def display(self):
        project = self.state.context.get("project")
        print(f"Final Status: {self.state.status}")
        print(
            f"Final Error Message: {'None' if self.state.err_message == '' else self.state.err_message}"
        )
        for workflow_name, workflow_context in self.state.workflows_context.items():
            if workflow_context.duration_ns is not None:
                print(f"Duration of {workflow_name}:", workflow_context.duration_ns / 1_000_000, "ms")
        if isinstance(project, ProjectState):
            print("Steps:")
            for step in project.steps:
                print(f"  - {step}")
            print("Metadata:", project.metadata)
            print("Circuit components:", [c.get("id") for c in project.circuit.get("components", [])])
            print("Code:\n" + project.code)
        validation = self.state.context.get("code_validation_result")
        if validation:
            print("Validation:", validation["validation"])


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    async def updateCallback(event_type, contents):
        logger.debug("%s %s", event_type, contents)

    async def run_and_display():
        generation = Executor(
            buildState("Blink an LED", microcontroller="arduino-uno", language="cpp"),
            buildWorkflows(RequestType.PROJECT_GENERATION),
        )
        generated = await generation.run(updateCallback)
        generation.display()
        if generated.status != Status.SUCCESS:
            return

        reprompt = Executor(
            buildState(
                "Make the LED blink twice as fast",
                project=generated.context["project"],
                original_prompt="Blink an LED",
                microcontroller="arduino-uno",
                language="cpp",
            ),
            buildWorkflows(RequestType.REPROMPT),
        )
        await reprompt.run(updateCallback)
        reprompt.display()

    asyncio.run(run_and_display())
