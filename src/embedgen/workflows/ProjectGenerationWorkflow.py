import logging
from typing import Optional

from embedgen.agents.ProjectAgent import ProjectAgent
from embedgen.utils.merge import appendStep, mergeAIResponse
from embedgen.utils.normalizer import normalizeAIResponse
from embedgen.utils.prompts import renderPrompt
from embedgen.utils.types import (
    AICallParams,
    EventCallback,
    ProjectState,
    RequestType,
    Status,
    WorkflowState,
)
from embedgen.workflows.BaseWorkflow import BaseWorkflow

logger = logging.getLogger(__name__)


class ProjectGenerationWorkflow(BaseWorkflow):
    """
    Creates a new project (code, circuit, metadata and steps) from the user's request.
    """

    def __init__(self, agent: Optional[ProjectAgent] = None):
        self.agent = agent or ProjectAgent()

    async def run(self, state: WorkflowState, updateCallback: EventCallback) -> WorkflowState:
        user_input = state.context.get("user_input")
        if not user_input:
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {state.current_workflow}: missing 'user_input' field in state.context"
            return state

        workflow_name = state.current_workflow or "project_generation"
        state.current_stage = "generate"
        state.status = Status.RUNNING

        project = ProjectState(steps=["Analyzing your request for a hardware project..."])
        state.context["project"] = project

        await self.emitSubstage(updateCallback, "substage_started", workflow_name, "generate", 1)

        prompt = renderPrompt(AICallParams(prompt=user_input, type=RequestType.PROJECT_GENERATION))
        try:
            ai_response = await self.agent.run(prompt)
        except Exception as e:
            # the request itself failed, record it in the step log for the user
            logger.exception("Error generating project")
            state.context["project"] = appendStep(project, f"Error generating project: {e}")
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {workflow_name} while executing agent: {e}"
            return state

        normalized = normalizeAIResponse(ai_response)
        project = mergeAIResponse(project, normalized)
        state.context["project"] = project
        state.context[f"{workflow_name}_result"] = {
            "response": normalized,
            "project": project.toDict(),
        }

        # the call worked but the model (or its JSON) did not, steps already say why
        if normalized.get("error"):
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {workflow_name}: {normalized['error']}"
            return state

        state.status = Status.SUCCESS
        await self.emitSubstage(
            updateCallback,
            "substage_completed",
            workflow_name,
            "generate",
            1,
            meta={"components": len(project.circuit.get("components", []))},
        )
        return state
