import logging
from typing import Optional

from embedgen.agents.ProjectAgent import ProjectAgent
from embedgen.utils.merge import appendStep, mergeAIResponse
from embedgen.utils.normalizer import normalizeAIResponse
from embedgen.utils.prompts import renderPrompt
from embedgen.utils.types import (
    AICallContext,
    AICallParams,
    EventCallback,
    ProjectState,
    RequestType,
    Status,
    WorkflowState,
)
from embedgen.workflows.BaseWorkflow import BaseWorkflow

logger = logging.getLogger(__name__)


class RepromptWorkflow(BaseWorkflow):
    """
    Applies a follow-up instruction to an existing project. The current code, circuit
    and metadata are sent along so the model can answer with an update, which is then
    merged into the project.
    """

    def __init__(self, agent: Optional[ProjectAgent] = None):
        self.agent = agent or ProjectAgent()

    async def run(self, state: WorkflowState, updateCallback: EventCallback) -> WorkflowState:
        user_input = state.context.get("user_input")
        if not user_input:
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {state.current_workflow}: missing 'user_input' field in state.context"
            return state

        project = state.context.get("project")
        if not isinstance(project, ProjectState):
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {state.current_workflow}: missing 'project' field in state.context"
            return state

        workflow_name = state.current_workflow or "reprompt"
        state.current_stage = "reprompt"
        state.status = Status.RUNNING

        project = appendStep(project, f'Processing your request: "{user_input}"')
        state.context["project"] = project

        await self.emitSubstage(updateCallback, "substage_started", workflow_name, "reprompt", 1)

        params = AICallParams(
            prompt=user_input,
            type=RequestType.REPROMPT,
            context=AICallContext(
                original_prompt=state.context.get("original_prompt") or "",
                current_code=project.code,
                current_circuit=project.circuit,
                metadata=project.metadata,
            ),
        )
        try:
            ai_response = await self.agent.run(renderPrompt(params))
        except Exception as e:
            logger.exception("Error processing reprompt")
            state.context["project"] = appendStep(project, f"Error processing your request: {e}")
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {workflow_name} while executing agent: {e}"
            return state

        normalized = normalizeAIResponse(ai_response)
        project = mergeAIResponse(project, normalized)
        project = appendStep(project, "Completed processing your request")
        state.context["project"] = project
        state.context[f"{workflow_name}_result"] = {
            "response": normalized,
            "project": project.toDict(),
        }

        if normalized.get("error"):
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {workflow_name}: {normalized['error']}"
            return state

        state.status = Status.SUCCESS
        await self.emitSubstage(updateCallback, "substage_completed", workflow_name, "reprompt", 1)
        return state
