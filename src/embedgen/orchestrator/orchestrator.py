import logging
import time
from typing import Dict, Optional

from embedgen.utils.helpers import utcTimestamp
from embedgen.utils.types import EventCallback, Status, WorkflowContext, WorkflowState
from embedgen.workflows.BaseWorkflow import BaseWorkflow

logger = logging.getLogger(__name__)


class WorkflowOrchestrator:
    """
    Runs a sequence of workflows against one WorkflowState, stopping at the first failure.
    Each workflow gets exactly one attempt; retrying is up to the user.
    """

    def __init__(self, workflows: Dict[str, BaseWorkflow]):
        """
        workflows: dictionary mapping workflow_name to the workflow to run, in order
        """
        self.workflows = workflows

    def _totalDurationNs(self, workflow_state: WorkflowState) -> int:
        return sum(
            workflow_state.workflows_context[workflow_name].duration_ns or 0
            for workflow_name in workflow_state.workflows_context.keys()
        )

    async def runWorkflows(
        self, updateCallback: EventCallback, workflow_state: WorkflowState
    ) -> WorkflowState:
        await updateCallback(
            "run_started",
            {
                "type": "run_started",
                "total_workflows": len(self.workflows),
                "ts": utcTimestamp(),
            },
        )

        for workflow_name, workflow_module in self.workflows.items():
            workflow_state.current_workflow = workflow_name
            workflow_state.status = Status.PENDING

            start_time_ns = time.perf_counter_ns()
            workflow_context = WorkflowContext(start_time_ns=start_time_ns)
            workflow_state.workflows_context[workflow_name] = workflow_context

            await updateCallback(
                "workflow_started",
                {
                    "type": "workflow_started",
                    "workflow": workflow_name,
                    "ts": utcTimestamp(),
                },
            )

            workflow_state.status = Status.RUNNING
            exception_in_workflow: Optional[Exception] = None
            try:
                workflow_state = await workflow_module.run(workflow_state, updateCallback)
            except Exception as e:
                logger.exception("Unhandled exception in workflow '%s'", workflow_name)
                exception_in_workflow = e

            if exception_in_workflow is not None:
                workflow_state.status = Status.ERROR
                workflow_state.err_message = (
                    f"Unhandled exception in '{workflow_name}': {exception_in_workflow}"
                )

            end_time_ns = time.perf_counter_ns()
            workflow_context.end_time_ns = end_time_ns
            workflow_context.duration_ns = int(end_time_ns - start_time_ns)

            if workflow_state.status != Status.SUCCESS:
                if not workflow_state.err_message:
                    workflow_state.err_message = f"Workflow '{workflow_name}' failed."
                logger.error("Workflow '%s' failed: %s", workflow_name, workflow_state.err_message)
                await updateCallback(
                    "workflow_failed",
                    {
                        "type": "workflow_failed",
                        "workflow": workflow_name,
                        "error": workflow_state.err_message,
                        "context": {"duration_ns": workflow_context.duration_ns},
                        "ts": utcTimestamp(),
                    },
                )
                return workflow_state

            result = workflow_state.context.get(f"{workflow_name}_result") or {}
            logger.info(
                "Workflow '%s' succeeded in %.1f ms",
                workflow_name,
                workflow_context.duration_ns / 1_000_000,
            )
            await updateCallback(
                "workflow_succeeded",
                {
                    "type": "workflow_succeeded",
                    "workflow": workflow_name,
                    "result": result,
                    "context": {"duration_ns": workflow_context.duration_ns},
                    "ts": utcTimestamp(),
                },
            )

        workflow_state.status = Status.SUCCESS
        workflow_state.err_message = ""

        await updateCallback(
            "run_succeeded",
            {
                "type": "run_succeeded",
                "summary": {"duration_ns": self._totalDurationNs(workflow_state)},
                "ts": utcTimestamp(),
            },
        )

        return workflow_state
