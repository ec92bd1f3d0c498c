import logging
from dataclasses import asdict

from embedgen.config import DEFAULT_LANGUAGE
from embedgen.utils.types import EventCallback, ProjectState, Status, WorkflowState
from embedgen.utils.validator import estimateResources, resolveMicrocontrollerId, validateCode
from embedgen.workflows.BaseWorkflow import BaseWorkflow

logger = logging.getLogger(__name__)


class CodeValidationWorkflow(BaseWorkflow):
    """
    Runs the heuristic validator over the project's generated code. Warnings are
    advisory, so this only fails when there is no code to look at.
    """

    async def run(self, state: WorkflowState, updateCallback: EventCallback) -> WorkflowState:
        project = state.context.get("project")
        if not isinstance(project, ProjectState) or not project.code:
            state.status = Status.ERROR
            state.err_message = f"Error during workflow {state.current_workflow}: no generated code in state.context"
            return state

        workflow_name = state.current_workflow or "code_validation"
        state.current_stage = "validate"
        state.status = Status.RUNNING
        await self.emitSubstage(updateCallback, "substage_started", workflow_name, "validate", 1)

        # an explicit board choice wins over whatever the model put in the metadata
        microcontroller = resolveMicrocontrollerId(
            state.memory.get("microcontroller") or project.metadata.get("microcontroller", "")
        )
        language = state.memory.get("language") or DEFAULT_LANGUAGE

        estimates = estimateResources(project.code, microcontroller)
        validation = validateCode(
            project.code,
            microcontroller,
            estimates["ram"],
            estimates["flash"],
            language,
        )
        for warning in validation.warnings:
            logger.warning("Validation warning for %s: %s", microcontroller, warning)

        state.context[f"{workflow_name}_result"] = {
            "microcontroller": microcontroller,
            "language": language,
            "resourceEstimates": estimates,
            "validation": asdict(validation),
        }
        state.status = Status.SUCCESS

        await self.emitSubstage(
            updateCallback,
            "substage_completed",
            workflow_name,
            "validate",
            1,
            meta={"warnings": len(validation.warnings)},
        )
        return state
